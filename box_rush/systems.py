"""
Simulation Systems
===================
Functions that operate on entities with matching components.
Each system queries the World for the entities it needs and
updates them in place. Simulation.step() calls them in order.
"""

from loguru import logger

from .ecs import World
from .components import (
    Position, Velocity, Renderable, Health, Invulnerable,
    CollisionStun, EnemyTag, PlayerTag, PickupTag
)
from .behaviors import BehaviorContext, get_behavior
from .enemies import stun_color
from .geometry import overlaps
from .player import get_player_entity, get_player_position


# =============================================================================
# PLAYER MOVEMENT
# =============================================================================

def player_movement_system(world: World, width: float, height: float,
                           box_size: float) -> None:
    """
    Move the player by its direction vector.

    Each axis is checked on its own: an axis step that would leave the
    canvas is dropped for this tick while the other axis still moves.
    """
    for entity_id, pos, vel, _ in world.query(Position, Velocity, PlayerTag):
        next_x = pos.x + vel.x
        next_y = pos.y + vel.y

        if vel.x == 0 or (next_x >= 0 and next_x + box_size <= width):
            pos.x = next_x
        if vel.y == 0 or (next_y >= 0 and next_y + box_size <= height):
            pos.y = next_y


# =============================================================================
# ENEMY AI
# =============================================================================

def recover_from_stun(stun: CollisionStun, now: float, stun_duration: float) -> bool:
    """
    Clear an elapsed collision-stun. Returns True only on the call
    that actually clears it, so repeated calls with the same now are
    harmless.
    """
    if not stun.is_stunned:
        return False
    if now - stun.last_collision_time < stun_duration:
        return False
    stun.is_stunned = False
    stun.can_attack = True
    return True


def ai_system(world: World, ctx: BehaviorContext, stun_duration: float) -> None:
    """
    Advance every enemy by one tick.

    Stunned enemies only check their stun timer; everyone else runs
    the behavior registered for their template's kind.
    """
    for entity_id, stun, tag in world.query(CollisionStun, EnemyTag):
        if stun.is_stunned:
            if recover_from_stun(stun, ctx.now, stun_duration):
                logger.debug(f'Enemy #{entity_id} recovered from stun')
            continue

        get_behavior(tag.enemy_type.behavior).advance(ctx, entity_id)


# =============================================================================
# COLLISIONS
# =============================================================================

def contact_damage_system(world: World, now: float, box_size: float,
                          immunity_duration: float) -> int:
    """
    Apply edge-triggered contact damage to the player.

    An enemy that touches the player while able to attack deals one
    point of damage and is then stunned, which keeps it from hitting
    again until it recovers. Hits inside the player's immunity window
    are ignored entirely. Returns the damage dealt this tick.
    """
    player_id = get_player_entity(world)
    if player_id is None:
        return 0

    player_pos = get_player_position(world)
    health = world.get_component(player_id, Health)
    immunity = world.get_component(player_id, Invulnerable)
    damage = 0

    for entity_id, pos, stun, _ in world.query(Position, CollisionStun, EnemyTag):
        if stun.is_stunned or not stun.can_attack:
            continue
        if not overlaps(player_pos, pos, box_size):
            continue
        if immunity and immunity.last_hit_time is not None and \
                now - immunity.last_hit_time < immunity_duration:
            continue

        if health.current > 0:
            health.current -= 1
            damage += 1
        stun.is_stunned = True
        stun.can_attack = False
        stun.last_collision_time = now
        if immunity:
            immunity.last_hit_time = now
        logger.debug(f'Enemy #{entity_id} hit player, health {health.current}/{health.maximum}')

    return damage


def pickup_collision(world: World, box_size: float) -> bool:
    """Is the player touching the pickup?"""
    player_pos = get_player_position(world)
    pickup_id = world.single(PickupTag)
    if player_pos is None or pickup_id is None:
        return False
    return overlaps(
        player_pos,
        world.get_component(pickup_id, Position),
        box_size,
    )


# =============================================================================
# RENDERING
# =============================================================================

def render_system(world: World, renderer, box_size: float) -> None:
    """
    Draw every entity as a filled square.

    Order is pickup, player, then enemies, so enemies always end up on
    top. renderer only needs a fill_box(x, y, size, color) method.
    """
    render_list = []
    for entity_id, pos, rend in world.query(Position, Renderable):
        if not rend.visible:
            continue
        color = rend.color
        stun = world.get_component(entity_id, CollisionStun)
        if stun and stun.is_stunned:
            color = stun_color(world.get_component(entity_id, EnemyTag).enemy_type)
        render_list.append((rend.layer, entity_id, pos, color))

    render_list.sort(key=lambda item: (item[0], item[1]))

    for _, _, pos, color in render_list:
        renderer.fill_box(pos.x, pos.y, box_size, color)
