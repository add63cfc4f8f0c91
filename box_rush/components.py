"""
Component Definitions
======================
All components are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from typing import Optional
from enum import Enum, auto


# =============================================================================
# PHYSICS COMPONENTS
# =============================================================================

@dataclass
class Position:
    """Top-left corner of an entity's box, in canvas pixels."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Velocity:
    """Per-tick displacement. For the player this is the input direction."""
    x: float = 0.0
    y: float = 0.0


# =============================================================================
# RENDERING COMPONENTS
# =============================================================================

@dataclass
class Renderable:
    """Per-entity display state. Enemies own their copy of the color."""
    color: int = 7  # ANSI 256 color
    layer: int = 0  # Higher layers render on top
    visible: bool = True


# =============================================================================
# COMBAT COMPONENTS
# =============================================================================

@dataclass
class Health:
    """Entity health pool."""
    current: int = 4
    maximum: int = 4


@dataclass
class Invulnerable:
    """Player immunity window after taking a hit."""
    last_hit_time: Optional[float] = None


@dataclass
class CollisionStun:
    """
    Stun applied to an enemy after it damages the player.

    While stunned the enemy does not move and cannot deal damage.
    can_attack is restored together with the stun flag.
    """
    is_stunned: bool = False
    last_collision_time: float = 0.0
    can_attack: bool = True


# =============================================================================
# ENEMY TEMPLATES
# =============================================================================

class BehaviorKind(Enum):
    """Movement behaviors an enemy template can use."""
    FOLLOW_PLAYER = auto()
    RUSH_STRAIGHT = auto()


class RushPhase(Enum):
    """Rush-straight cycle: targeting → rushing → stunned → targeting."""
    TARGETING = auto()
    RUSHING = auto()
    STUNNED = auto()


@dataclass(frozen=True)
class EnemyType:
    """
    Immutable enemy template. Shared between instances, so nothing
    here may change at runtime; per-instance color lives in Renderable.
    """
    name: str
    color: int
    speed: float
    behavior: BehaviorKind
    targeting_duration: float = 0.0  # rush kind only (seconds)
    rush_delay: float = 0.0  # rush kind only, post-rush cooldown (seconds)


@dataclass
class RushState:
    """Phase state for rush-kind enemies."""
    phase: RushPhase = RushPhase.TARGETING
    phase_start: float = 0.0
    target_x: float = 0.0  # Unit direction locked in for the rush
    target_y: float = 0.0


# =============================================================================
# TAG COMPONENTS (used for queries)
# =============================================================================

@dataclass
class PlayerTag:
    """Marks the player entity."""
    pass


@dataclass
class PickupTag:
    """Marks the point pickup."""
    pass


@dataclass
class EnemyTag:
    """Marks an enemy entity and carries its template."""
    enemy_type: EnemyType
