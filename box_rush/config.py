"""
Game Configuration
===================
Tuning constants for the simulation and the terminal front end.

Every component receives a GameConfig instead of reading the
module constants directly, so tests can swap values with
dataclasses.replace().
"""

from dataclasses import dataclass


# =============================================================================
# CONSTANTS
# =============================================================================

TARGET_FPS = 60
FRAME_TIME = 1.0 / TARGET_FPS

# Entities are squares of this side length, anchored at their top-left corner
BOX_SIZE = 50.0

# Player
PLAYER_SPEED = 2.0
MAX_HEALTH = 4

# Timers (seconds)
STUN_DURATION = 2.0
# Player immunity after a hit. Zero lets every touching enemy land its hit;
# 0.5 reproduces the web build, where a second enemy had to wait.
IMMUNITY_DURATION = 0.0

# Progression
SPAWN_MILESTONE = 10
PLACEMENT_MAX_ATTEMPTS = 10_000

# Canvas cap (pixels), matches the portrait phone layout of the web build
MAX_CANVAS_WIDTH = 430
MAX_CANVAS_HEIGHT = 932

# Terminal cell size in canvas pixels
CELL_WIDTH = 10
CELL_HEIGHT = 20

# Rows reserved for the HUD at the top of the terminal
HUD_ROWS = 2


@dataclass(frozen=True)
class GameConfig:
    """Immutable bundle of simulation tuning values."""
    box_size: float = BOX_SIZE
    player_speed: float = PLAYER_SPEED
    max_health: int = MAX_HEALTH
    stun_duration: float = STUN_DURATION
    immunity_duration: float = IMMUNITY_DURATION
    spawn_milestone: int = SPAWN_MILESTONE
    placement_max_attempts: int = PLACEMENT_MAX_ATTEMPTS
    frame_time: float = FRAME_TIME

    def validate(self) -> 'GameConfig':
        """Raise ValueError on values the simulation cannot run with."""
        if self.box_size <= 0:
            raise ValueError(f'box_size must be positive, got {self.box_size}')
        if self.player_speed <= 0:
            raise ValueError(f'player_speed must be positive, got {self.player_speed}')
        if self.max_health <= 0:
            raise ValueError(f'max_health must be positive, got {self.max_health}')
        if self.stun_duration < 0 or self.immunity_duration < 0:
            raise ValueError('stun and immunity durations cannot be negative')
        if self.spawn_milestone <= 0:
            raise ValueError(f'spawn_milestone must be positive, got {self.spawn_milestone}')
        if self.placement_max_attempts <= 0:
            raise ValueError('placement_max_attempts must be positive')
        if self.frame_time <= 0:
            raise ValueError(f'frame_time must be positive, got {self.frame_time}')
        return self


DEFAULT_CONFIG = GameConfig()
