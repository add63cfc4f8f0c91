"""
Spawn Placement and Progression
================================
Rejection-sampled spawn points away from the player, and the
score milestones that add enemies.
"""

import random
from typing import Iterable, List, Optional

from loguru import logger

from .ecs import World
from .components import Position, EnemyType, EnemyTag, BehaviorKind
from .enemies import ENEMY_TYPES, create_enemy
from .errors import PlacementError
from .geometry import distance, overlaps
from .config import PLACEMENT_MAX_ATTEMPTS


# =============================================================================
# PLACEMENT
# =============================================================================

def place_away_from(
    bounds_width: float,
    bounds_height: float,
    box_size: float,
    exclude_x: float,
    exclude_y: float,
    rng: Optional[random.Random] = None,
    max_attempts: int = PLACEMENT_MAX_ATTEMPTS,
    avoid: Iterable[Position] = (),
) -> Position:
    """
    Pick a random box position at least min(w, h) / 2 from the
    excluded point.

    Samples uniformly over [0, w - box] x [0, h - box] and raises
    PlacementError once max_attempts samples have all been too close.
    Candidates overlapping any box in avoid are rejected as well.
    """
    rng = rng or random
    min_distance = min(bounds_width, bounds_height) / 2
    exclude = Position(exclude_x, exclude_y)
    max_x = max(0.0, bounds_width - box_size)
    max_y = max(0.0, bounds_height - box_size)
    avoid = list(avoid)

    for _ in range(max_attempts):
        candidate = Position(rng.uniform(0, max_x), rng.uniform(0, max_y))
        if distance(candidate, exclude) < min_distance:
            continue
        if any(overlaps(candidate, other, box_size) for other in avoid):
            continue
        return candidate

    raise PlacementError(bounds_width, bounds_height, exclude_x, exclude_y,
                         max_attempts)


# =============================================================================
# ENEMY SELECTION
# =============================================================================

def random_enemy_type(rng: Optional[random.Random] = None,
                      pool: Optional[List[EnemyType]] = None) -> EnemyType:
    """Uniform pick over the registered enemy templates."""
    rng = rng or random
    pool = pool or list(ENEMY_TYPES.values())
    return rng.choice(pool)


def is_spawn_milestone(score: int, milestone: int) -> bool:
    """A positive multiple of the milestone adds one enemy."""
    return score > 0 and score % milestone == 0


def spawn_enemy(
    world: World,
    enemy_type: EnemyType,
    bounds_width: float,
    bounds_height: float,
    box_size: float,
    player_pos: Position,
    now: float,
    rng: Optional[random.Random] = None,
    max_attempts: int = PLACEMENT_MAX_ATTEMPTS,
) -> int:
    """
    Place a new enemy of the given type away from the player.

    A new follower never overlaps an existing follower.
    """
    avoid = []
    if enemy_type.behavior == BehaviorKind.FOLLOW_PLAYER:
        avoid = follower_positions(world)
    pos = place_away_from(
        bounds_width, bounds_height, box_size,
        player_pos.x, player_pos.y,
        rng=rng, max_attempts=max_attempts, avoid=avoid,
    )
    entity_id = create_enemy(world, enemy_type, pos.x, pos.y, now)
    logger.debug(f'Spawned {enemy_type.name} #{entity_id} at ({pos.x:.1f}, {pos.y:.1f})')
    return entity_id


def follower_positions(world: World) -> List[Position]:
    return [
        pos for _, pos, tag in world.query(Position, EnemyTag)
        if tag.enemy_type.behavior == BehaviorKind.FOLLOW_PLAYER
    ]
