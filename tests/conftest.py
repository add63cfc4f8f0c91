"""Shared fixtures and builders for BOX_RUSH tests."""

import random
from typing import Iterable, Tuple

import pytest

from box_rush.behaviors import BehaviorContext
from box_rush.components import EnemyType, PickupTag, Position, Renderable, Velocity
from box_rush.config import DEFAULT_CONFIG, GameConfig
from box_rush.ecs import World
from box_rush.enemies import create_enemy
from box_rush.engine import NEON_YELLOW
from box_rush.player import create_player
from box_rush.simulation import Simulation


class CenterRandom:
    """Stand-in RNG that always samples the middle of the range."""

    def uniform(self, a, b):
        return (a + b) / 2

    def choice(self, seq):
        return seq[0]


class FillRecorder:
    """Render sink that records fill_box calls."""

    def __init__(self):
        self.calls = []

    def fill_box(self, x, y, size, color):
        self.calls.append((x, y, size, color))


def make_session(
    width: float = 400,
    height: float = 400,
    player: Tuple[float, float] = (175, 175),
    enemies: Iterable[Tuple[EnemyType, float, float]] = (),
    pickup: Tuple[float, float] = (350, 0),
    config: GameConfig = DEFAULT_CONFIG,
    now: float = 0.0,
    seed: int = 7,
) -> Simulation:
    """
    Simulation with a hand-placed layout: a stationary player, the
    given enemies (in creation order) and the pickup.
    """
    sim = Simulation(width, height, config, rng=random.Random(seed), now=now)
    world = World()
    player_id = create_player(world, player[0], player[1],
                              config.player_speed, config.max_health)
    world.get_component(player_id, Velocity).x = 0.0
    for enemy_type, x, y in enemies:
        create_enemy(world, enemy_type, x, y, now)
    pickup_id = world.create_entity(
        Position(*pickup), Renderable(color=NEON_YELLOW, layer=1), PickupTag()
    )
    sim.world = world
    sim.player_id = player_id
    sim.pickup_id = pickup_id
    return sim


def make_context(world: World, player_pos: Position, now: float,
                 width: float = 400, height: float = 400,
                 box_size: float = 50) -> BehaviorContext:
    return BehaviorContext(world=world, player_pos=player_pos, now=now,
                           width=width, height=height, box_size=box_size)


@pytest.fixture
def config():
    return DEFAULT_CONFIG


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def world():
    return World()
