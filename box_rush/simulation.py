"""
Simulation
===========
The single owner of a play session's state.

A Simulation holds the entity World, the canvas bounds and the score.
step() advances everything by one frame and reports what happened;
nothing else mutates the world while a session is running.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import math
import random

from loguru import logger

from .ecs import World
from .components import Position, Health, Renderable, PickupTag, EnemyTag
from .config import GameConfig, DEFAULT_CONFIG
from .behaviors import BehaviorContext
from .enemies import BASIC, create_enemy
from .engine import NEON_YELLOW
from .player import create_player
from .spawner import place_away_from, random_enemy_type, is_spawn_milestone, spawn_enemy
from .systems import (
    player_movement_system, ai_system, contact_damage_system, pickup_collision
)


PICKUP_LAYER = 1


@dataclass
class TickReport:
    """What one call to Simulation.step() changed."""
    now: float
    frozen: bool = False
    health_delta: int = 0
    score_delta: int = 0
    spawned: List[int] = field(default_factory=list)
    game_over: bool = False


class Simulation:
    """
    One play session on a fixed-size canvas.

    Building a Simulation (or calling reset) places the player in the
    center, one basic enemy and the pickup away from it. Placement can
    raise PlacementError on a canvas too small to satisfy the spawn
    distance; that failure is left to the session owner.
    """

    def __init__(self, width: float, height: float,
                 config: GameConfig = DEFAULT_CONFIG,
                 rng: Optional[random.Random] = None,
                 now: float = 0.0):
        self.config = config.validate()
        self.rng = rng or random.Random()
        self.world = World()
        self.width = width
        self.height = height
        self.score = 0
        self.player_id: int = -1
        self.pickup_id: int = -1
        self._stepping = False
        self.reset(width, height, now)

    # -------------------------------------------------------------------------
    # Session lifecycle
    # -------------------------------------------------------------------------

    def reset(self, width: float, height: float, now: float = 0.0) -> None:
        """Start over on a canvas of the given size."""
        cfg = self.config
        world = World()

        px = math.floor(width / 2)
        py = math.floor(height / 2)
        player_id = create_player(world, px, py, cfg.player_speed, cfg.max_health)

        enemy_pos = self._place(width, height, px, py)
        create_enemy(world, BASIC, enemy_pos.x, enemy_pos.y, now)

        pickup_pos = self._place(width, height, px, py)
        pickup_id = world.create_entity(
            Position(pickup_pos.x, pickup_pos.y),
            Renderable(color=NEON_YELLOW, layer=PICKUP_LAYER),
            PickupTag(),
        )

        # Only swap in the new state once every placement succeeded
        self.world = world
        self.width = width
        self.height = height
        self.score = 0
        self.player_id = player_id
        self.pickup_id = pickup_id
        logger.info(f'Session reset on {width}x{height} canvas')

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def player_pos(self) -> Position:
        return self.world.get_component(self.player_id, Position)

    @property
    def pickup_pos(self) -> Position:
        return self.world.get_component(self.pickup_id, Position)

    @property
    def health(self) -> Health:
        return self.world.get_component(self.player_id, Health)

    @property
    def game_over(self) -> bool:
        return self.health.current <= 0

    @property
    def enemy_count(self) -> int:
        return self.world.count(EnemyTag)

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def step(self, now: float) -> TickReport:
        """
        Advance the session by one frame at wall-clock time now.

        Order: player movement, enemy AI, contact damage, pickup. A dead
        player freezes the session: the step reports frozen and leaves
        every entity where it is.
        """
        if self._stepping:
            raise RuntimeError('Simulation.step() is not reentrant')
        self._stepping = True
        try:
            return self._step(now)
        finally:
            self._stepping = False

    def _step(self, now: float) -> TickReport:
        report = TickReport(now=now)
        if self.game_over:
            report.frozen = True
            return report

        cfg = self.config
        world = self.world

        player_movement_system(world, self.width, self.height, cfg.box_size)

        ctx = BehaviorContext(
            world=world,
            player_pos=self.player_pos,
            now=now,
            width=self.width,
            height=self.height,
            box_size=cfg.box_size,
        )
        ai_system(world, ctx, cfg.stun_duration)

        damage = contact_damage_system(world, now, cfg.box_size, cfg.immunity_duration)
        report.health_delta = -damage
        if damage and self.game_over:
            report.game_over = True
            logger.info(f'Game over with {self.score} points')

        if pickup_collision(world, cfg.box_size):
            self._collect_pickup(now, report)

        return report

    def _collect_pickup(self, now: float, report: TickReport) -> None:
        cfg = self.config
        player = self.player_pos
        new_pos = self._place(self.width, self.height, player.x, player.y)
        pickup = self.pickup_pos
        pickup.x = new_pos.x
        pickup.y = new_pos.y

        self.score += 1
        report.score_delta = 1
        logger.debug(f'Pickup collected, score {self.score}')

        if is_spawn_milestone(self.score, cfg.spawn_milestone):
            entity_id = spawn_enemy(
                self.world, random_enemy_type(self.rng),
                self.width, self.height, cfg.box_size, player, now,
                rng=self.rng, max_attempts=cfg.placement_max_attempts,
            )
            report.spawned.append(entity_id)
            logger.info(f'Score {self.score}: enemy count now {self.enemy_count}')

    def _place(self, width: float, height: float, exclude_x: float,
               exclude_y: float) -> Position:
        return place_away_from(
            width, height, self.config.box_size, exclude_x, exclude_y,
            rng=self.rng, max_attempts=self.config.placement_max_attempts,
        )
