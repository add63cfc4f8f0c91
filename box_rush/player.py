"""
Player Module
==============
Player entity creation and input handling.
"""

from typing import Optional, Tuple

from .ecs import World
from .components import (
    Position, Velocity, Renderable, Health, Invulnerable, PlayerTag
)
from .engine import WHITE


PLAYER_LAYER = 3

# Key name or lowercase character -> unit direction
DIRECTION_KEYS = {
    'w': (0, -1),
    'KEY_UP': (0, -1),
    's': (0, 1),
    'KEY_DOWN': (0, 1),
    'a': (-1, 0),
    'KEY_LEFT': (-1, 0),
    'd': (1, 0),
    'KEY_RIGHT': (1, 0),
}


def create_player(world: World, x: float, y: float, speed: float,
                  max_health: int) -> int:
    """Create the player entity, initially heading right."""
    return world.create_entity(
        Position(x, y),
        Velocity(speed, 0.0),
        Renderable(color=WHITE, layer=PLAYER_LAYER),
        Health(max_health, max_health),
        Invulnerable(),
        PlayerTag(),
    )


class InputHandler:
    """
    Turns blessed keystrokes into a movement direction.

    There is no key-up in a terminal, so the last direction pressed
    stays in effect until another direction key arrives.
    """

    def __init__(self):
        self._direction: Optional[Tuple[int, int]] = None
        self._quit_triggered = False
        self._restart_triggered = False

    def process_key(self, key) -> None:
        """Process a single key press from blessed's inkey()."""
        if key is None or not key:
            return

        key_str = key.lower() if not key.is_sequence else ''

        if key_str == 'q' or key.name == 'KEY_ESCAPE':
            self._quit_triggered = True
        elif key_str == 'r':
            self._restart_triggered = True
        elif key.is_sequence and key.name in DIRECTION_KEYS:
            self._direction = DIRECTION_KEYS[key.name]
        elif key_str and key_str in DIRECTION_KEYS:
            self._direction = DIRECTION_KEYS[key_str]

    def consume_direction(self) -> Optional[Tuple[int, int]]:
        """Most recent direction since the last call, or None."""
        direction = self._direction
        self._direction = None
        return direction

    def consume_quit(self) -> bool:
        triggered = self._quit_triggered
        self._quit_triggered = False
        return triggered

    def consume_restart(self) -> bool:
        triggered = self._restart_triggered
        self._restart_triggered = False
        return triggered


def player_input_system(world: World, input_handler: InputHandler,
                        speed: float) -> None:
    """
    Apply the latest direction key to the player's velocity.

    Input is ignored once the player is dead.
    """
    direction = input_handler.consume_direction()
    if direction is None:
        return

    for entity_id, vel, health, _ in world.query(Velocity, Health, PlayerTag):
        if health.current <= 0:
            continue
        vel.x = direction[0] * speed
        vel.y = direction[1] * speed


def get_player_entity(world: World) -> Optional[int]:
    """Get the player entity ID."""
    return world.single(PlayerTag)


def get_player_position(world: World) -> Optional[Position]:
    """Get the player's position component."""
    player_id = get_player_entity(world)
    if player_id is not None:
        return world.get_component(player_id, Position)
    return None
