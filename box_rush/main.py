#!/usr/bin/env python3
"""
BOX_RUSH - Terminal Survival Arcade
====================================
Dodge the enemy squares, grab the yellow points. Every ten points
another enemy joins in.

Controls:
    WASD / Arrows - Change direction
    R             - Restart (after game over)
    Q/ESC         - Quit
"""

import sys

try:
    from blessed import Terminal
except ImportError:
    print("ERROR: 'blessed' library required. Install with: pip install blessed")
    sys.exit(1)

from loguru import logger

from .config import (
    DEFAULT_CONFIG, GameConfig, MAX_CANVAS_WIDTH, MAX_CANVAS_HEIGHT
)
from .driver import FrameDriver
from .engine import (
    GameRenderer, canvas_size_for,
    NEON_RED, NEON_YELLOW, DIM_RED, GRAY_DARK, GRAY_MED, WHITE
)
from .errors import PlacementError
from .log import setup_logging
from .player import InputHandler, player_input_system
from .simulation import Simulation, TickReport
from .systems import render_system


# =============================================================================
# CONSTANTS
# =============================================================================

MIN_WIDTH = 20
MIN_HEIGHT = 12

HEALTH_PIP = '\u25a0'  # filled square


# =============================================================================
# UI RENDERING
# =============================================================================

def render_hud(renderer: GameRenderer, simulation: Simulation):
    """Points on the left, one pip per max health point on the right."""
    renderer.put_string(0, 0, f'POINTS: {simulation.score}', WHITE)

    health = simulation.health
    pips_x = max(0, renderer.canvas_cols - health.maximum * 2 + 1)
    for i in range(health.maximum):
        color = NEON_RED if i < health.current else DIM_RED
        renderer.put_string(pips_x + i * 2, 0, HEALTH_PIP, color)

    renderer.put_string(0, 1, '-' * max(1, renderer.canvas_cols), GRAY_DARK)


def render_game_over(renderer: GameRenderer, score: int):
    renderer.put_centered('GAME OVER', NEON_RED)
    renderer.put_centered(f'{score} POINTS', NEON_YELLOW, row_offset=1)
    renderer.put_centered('[R] RESTART  [Q] QUIT', GRAY_MED, row_offset=2)


# =============================================================================
# TERMINAL FRONT END
# =============================================================================

class TerminalGame:
    """Wires the terminal (size, keys, output) to a FrameDriver."""

    def __init__(self, term: Terminal, config: GameConfig = DEFAULT_CONFIG):
        self.term = term
        self.config = config
        self.input_handler = InputHandler()
        self.renderer = GameRenderer(term)
        self._term_size = None
        self.driver = FrameDriver(
            bounds_provider=self.canvas_bounds,
            render=self.render,
            config=config,
            poll_input=self.handle_input,
        )

    def canvas_bounds(self):
        """Canvas size for the current terminal; resizes the renderer on change."""
        size = (self.term.width, self.term.height)
        bounds = canvas_size_for(size[0], size[1], MAX_CANVAS_WIDTH, MAX_CANVAS_HEIGHT)
        if size != self._term_size:
            self._term_size = size
            self.renderer.resize(size[0], size[1], bounds[0], bounds[1])
            print(self.term.home + self.term.clear, end='', flush=True)
        return bounds

    def handle_input(self, simulation: Simulation):
        """Drain all pending input from the terminal."""
        key = self.term.inkey(timeout=0)
        while key:
            self.input_handler.process_key(key)
            key = self.term.inkey(timeout=0)

        if self.input_handler.consume_quit():
            self.driver.stop()
            return

        if self.input_handler.consume_restart() and simulation.game_over:
            logger.info('Restart requested')
            self.driver.restart()
            return

        player_input_system(simulation.world, self.input_handler,
                            self.config.player_speed)

    def render(self, simulation: Simulation, report: TickReport):
        self.renderer.begin_frame()
        render_system(simulation.world, self.renderer, self.config.box_size)
        render_hud(self.renderer, simulation)
        if simulation.game_over:
            render_game_over(self.renderer, simulation.score)

        output = self.renderer.end_frame()
        if output:
            print(output, end='', flush=True)

    def run(self):
        self.driver.run()


# =============================================================================
# MAIN LOOP
# =============================================================================

def main():
    """Entry point. Sets up logging and the terminal, then runs the game."""
    setup_logging()
    term = Terminal()

    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )
        sys.exit(1)

    failure = None
    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        game = TerminalGame(term)
        try:
            game.run()
        except PlacementError as exc:
            failure = exc
        except KeyboardInterrupt:
            game.driver.stop()

        # Restore terminal
        print(term.normal, end='', flush=True)

    if failure is not None:
        # Already logged by the driver; the log file sink is not visible here
        print(f'ERROR: {failure}', file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
