"""
Enemy Archetypes
=================
Enemy templates and entity creation.

Templates are frozen; every enemy entity gets its own Renderable so
phase feedback can recolor one rusher without touching the others.
"""

from typing import Dict

from .ecs import World
from .components import (
    Position, Renderable, CollisionStun, EnemyTag,
    EnemyType, BehaviorKind, RushState, RushPhase
)
from .engine import NEON_GREEN, NEON_RED, NEON_ORANGE, DIM_GREEN, DIM_RED, GRAY_MED


ENEMY_LAYER = 5


# =============================================================================
# BASIC (green)
# =============================================================================
# Slow, relentless. Walks straight at the player and jostles with other
# basics.

BASIC = EnemyType(
    name='basic',
    color=NEON_GREEN,
    speed=0.5,
    behavior=BehaviorKind.FOLLOW_PLAYER,
)


# =============================================================================
# RUSHER (red)
# =============================================================================
# Aims for two seconds, then charges in a straight line until it hits a
# wall, then recovers before aiming again. Ignores other enemies.

RUSHER = EnemyType(
    name='rusher',
    color=NEON_RED,
    speed=6.0,
    behavior=BehaviorKind.RUSH_STRAIGHT,
    targeting_duration=2.0,
    rush_delay=1.5,
)


ENEMY_TYPES: Dict[str, EnemyType] = {
    BASIC.name: BASIC,
    RUSHER.name: RUSHER,
}


# =============================================================================
# DISPLAY COLORS
# =============================================================================

# Color shown while collision-stunned after hitting the player
STUN_COLORS: Dict[int, int] = {
    NEON_GREEN: DIM_GREEN,
    NEON_RED: DIM_RED,
}

PHASE_COLORS: Dict[RushPhase, int] = {
    RushPhase.RUSHING: NEON_ORANGE,
    RushPhase.STUNNED: GRAY_MED,
}


def phase_color(enemy_type: EnemyType, phase: RushPhase) -> int:
    """Display color for a rusher in the given phase."""
    return PHASE_COLORS.get(phase, enemy_type.color)


def stun_color(enemy_type: EnemyType) -> int:
    return STUN_COLORS.get(enemy_type.color, GRAY_MED)


# =============================================================================
# CREATION
# =============================================================================

def create_enemy(world: World, enemy_type: EnemyType, x: float, y: float,
                 now: float) -> int:
    """
    Create an enemy entity from a template.

    Rush-kind enemies start in TARGETING with the phase clock at now.
    """
    entity_id = world.create_entity(
        Position(x, y),
        Renderable(color=enemy_type.color, layer=ENEMY_LAYER),
        CollisionStun(),
        EnemyTag(enemy_type),
    )

    if enemy_type.behavior == BehaviorKind.RUSH_STRAIGHT:
        world.add_component(entity_id, RushState(
            phase=RushPhase.TARGETING,
            phase_start=now,
        ))

    return entity_id
