"""
Enemy Behaviors
================
One class per movement behavior, registered by BehaviorKind.

Every behavior implements advance(), which moves a single enemy by
one tick. The tick loop looks the behavior up in BEHAVIORS, so a new
kind only needs a new class decorated with @register_behavior.
Collision-stun is handled by the caller: advance() is never invoked
for a stunned enemy.
"""

from dataclasses import dataclass
from typing import Dict, Type

from loguru import logger

from .ecs import World
from .components import (
    Position, Renderable, EnemyTag, BehaviorKind, RushPhase, RushState
)
from .enemies import phase_color
from .errors import DegenerateVectorError
from .geometry import overlaps, unit_vector, out_of_bounds, clamp_inside


@dataclass
class BehaviorContext:
    """Read-only view of the tick that behaviors need."""
    world: World
    player_pos: Position
    now: float
    width: float
    height: float
    box_size: float


class EnemyBehavior:
    """Base class for enemy movement behaviors."""

    kind: BehaviorKind = None

    def advance(self, ctx: BehaviorContext, entity_id: int) -> None:
        raise NotImplementedError


BEHAVIORS: Dict[BehaviorKind, EnemyBehavior] = {}


def register_behavior(cls: Type[EnemyBehavior]) -> Type[EnemyBehavior]:
    """Class decorator: add a behavior to the registry under its kind."""
    if cls.kind is None:
        raise TypeError(f'{cls.__name__} does not declare a behavior kind')
    BEHAVIORS[cls.kind] = cls()
    return cls


def get_behavior(kind: BehaviorKind) -> EnemyBehavior:
    try:
        return BEHAVIORS[kind]
    except KeyError:
        raise KeyError(f'no behavior registered for {kind}') from None


# =============================================================================
# FOLLOW PLAYER (basic)
# =============================================================================

@register_behavior
class FollowPlayer(EnemyBehavior):
    """
    Step toward the player's current position at constant speed.

    A step that would overlap another follower is dropped. A step that
    would leave the canvas pins the enemy one pixel inside the wall.
    """

    kind = BehaviorKind.FOLLOW_PLAYER

    def advance(self, ctx: BehaviorContext, entity_id: int) -> None:
        world = ctx.world
        pos = world.get_component(entity_id, Position)
        tag = world.get_component(entity_id, EnemyTag)

        try:
            dir_x, dir_y = unit_vector(pos, ctx.player_pos)
        except DegenerateVectorError:
            return

        new_x = pos.x + dir_x * tag.enemy_type.speed
        new_y = pos.y + dir_y * tag.enemy_type.speed

        if out_of_bounds(new_x, new_y, ctx.width, ctx.height, ctx.box_size):
            new_x, new_y = clamp_inside(new_x, new_y, ctx.width, ctx.height,
                                        ctx.box_size, pos)

        if self._blocked(ctx, entity_id, Position(new_x, new_y)):
            return

        pos.x = new_x
        pos.y = new_y

    @staticmethod
    def _blocked(ctx: BehaviorContext, entity_id: int, target: Position) -> bool:
        """Would target overlap any other follower?"""
        for other_id, other_pos, other_tag in ctx.world.query(Position, EnemyTag):
            if other_id == entity_id:
                continue
            if other_tag.enemy_type.behavior != BehaviorKind.FOLLOW_PLAYER:
                continue
            if overlaps(target, other_pos, ctx.box_size):
                return True
        return False


# =============================================================================
# RUSH STRAIGHT (rusher)
# =============================================================================

@register_behavior
class RushStraight(EnemyBehavior):
    """
    Targeting → rushing → stunned → targeting.

    Targeting re-aims at the player every tick. Rushing flies along the
    last aim until a wall is hit. Stunned waits out rush_delay. Other
    enemies never block a rusher.
    """

    kind = BehaviorKind.RUSH_STRAIGHT

    def advance(self, ctx: BehaviorContext, entity_id: int) -> None:
        world = ctx.world
        pos = world.get_component(entity_id, Position)
        enemy_type = world.get_component(entity_id, EnemyTag).enemy_type
        state = world.get_component(entity_id, RushState)
        if state is None:
            state = RushState(phase=RushPhase.TARGETING, phase_start=ctx.now)
            world.add_component(entity_id, state)

        elapsed = ctx.now - state.phase_start

        if state.phase == RushPhase.TARGETING:
            try:
                state.target_x, state.target_y = unit_vector(pos, ctx.player_pos)
            except DegenerateVectorError:
                pass

            # Never rush without an aim
            aimed = state.target_x != 0 or state.target_y != 0
            if aimed and elapsed >= enemy_type.targeting_duration:
                self._enter(world, entity_id, state, RushPhase.RUSHING, ctx.now)

        elif state.phase == RushPhase.RUSHING:
            new_x = pos.x + state.target_x * enemy_type.speed
            new_y = pos.y + state.target_y * enemy_type.speed

            if out_of_bounds(new_x, new_y, ctx.width, ctx.height, ctx.box_size):
                pos.x, pos.y = clamp_inside(new_x, new_y, ctx.width, ctx.height,
                                            ctx.box_size, pos)
                self._enter(world, entity_id, state, RushPhase.STUNNED, ctx.now)
            else:
                pos.x = new_x
                pos.y = new_y

        elif state.phase == RushPhase.STUNNED:
            if elapsed >= enemy_type.rush_delay:
                self._enter(world, entity_id, state, RushPhase.TARGETING, ctx.now)

    @staticmethod
    def _enter(world: World, entity_id: int, state: RushState,
               phase: RushPhase, now: float) -> None:
        state.phase = phase
        state.phase_start = now
        rend = world.get_component(entity_id, Renderable)
        enemy_type = world.get_component(entity_id, EnemyTag).enemy_type
        if rend:
            rend.color = phase_color(enemy_type, phase)
        logger.debug(f'Rusher #{entity_id} -> {phase.name}')
