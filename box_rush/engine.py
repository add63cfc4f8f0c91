"""
Rendering Engine
=================
Double-buffered terminal renderer. The simulation works in canvas
pixels; the renderer maps every pixel box onto a block of terminal
cells and only rewrites cells that changed since the last frame.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

try:
    from blessed import Terminal
except ImportError:
    raise ImportError("'blessed' library required. Install with: pip install blessed")

from .config import CELL_WIDTH, CELL_HEIGHT, HUD_ROWS


# ANSI 256 color constants
NEON_GREEN = 46
NEON_RED = 196
NEON_ORANGE = 208
NEON_YELLOW = 226

DIM_GREEN = 28
DIM_RED = 88

GRAY_MED = 245
GRAY_DARK = 238

WHITE = 255

BLOCK = '\u2588'  # full block


@dataclass
class Cell:
    """A single cell in the render buffer."""
    char: str = ' '
    fg_color: int = 7
    bg_color: int = -1  # -1 = transparent/default

    def matches(self, other: 'Cell') -> bool:
        return (
            self.char == other.char and
            self.fg_color == other.fg_color and
            self.bg_color == other.bg_color
        )

    def reset(self):
        self.char = ' '
        self.fg_color = 7
        self.bg_color = -1


class DoubleBuffer:
    """
    Front/back cell grids. Frames are drawn into the back grid and
    present() emits escape sequences for the cells that differ from
    the front grid, then swaps the two.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.front: List[List[Cell]] = []
        self.back: List[List[Cell]] = []
        self._init_buffers()

    def _init_buffers(self):
        self.front = [[Cell() for _ in range(self.width)] for _ in range(self.height)]
        self.back = [[Cell() for _ in range(self.width)] for _ in range(self.height)]

    def resize(self, width: int, height: int):
        self.width = width
        self.height = height
        self._init_buffers()

    def clear_back(self):
        """Clear the back buffer by resetting cells in-place."""
        for row in self.back:
            for cell in row:
                cell.reset()

    def put(self, x: int, y: int, char: str, fg_color: int = 7, bg_color: int = -1):
        """Put a character in the back buffer; out-of-range writes are dropped."""
        if 0 <= x < self.width and 0 <= y < self.height:
            cell = self.back[y][x]
            cell.char = char
            cell.fg_color = fg_color
            cell.bg_color = bg_color

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7, bg_color: int = -1):
        for i, char in enumerate(text):
            self.put(x + i, y, char, fg_color, bg_color)

    def present(self, term: Terminal) -> str:
        """Swap buffers and return the output for changed cells only."""
        output_parts = []
        normal = term.normal

        for y in range(self.height):
            for x in range(self.width):
                back_cell = self.back[y][x]
                if back_cell.matches(self.front[y][x]):
                    continue
                output_parts.append(term.move_xy(x, y))
                # Reset colors to prevent bleed
                output_parts.append(normal)
                if back_cell.bg_color >= 0:
                    output_parts.append(term.on_color(back_cell.bg_color))
                output_parts.append(term.color(back_cell.fg_color))
                output_parts.append(back_cell.char or ' ')

        self.front, self.back = self.back, self.front
        return ''.join(output_parts)


def canvas_size_for(term_width: int, term_height: int, max_width: int,
                    max_height: int) -> Tuple[int, int]:
    """Canvas pixel size that fits the terminal below the HUD rows."""
    width = min(term_width * CELL_WIDTH, max_width)
    height = min((term_height - HUD_ROWS) * CELL_HEIGHT, max_height)
    return max(0, width), max(0, height)


@dataclass
class GameRenderer:
    """
    Draws pixel-space boxes and HUD text into a DoubleBuffer.

    The canvas is placed directly under the HUD rows, left aligned,
    with a gray frame around it.
    """
    term: Terminal
    canvas_width: int = 0
    canvas_height: int = 0
    buffer: DoubleBuffer = field(init=False)

    def __post_init__(self):
        self.buffer = DoubleBuffer(self.term.width, self.term.height)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    @property
    def canvas_cols(self) -> int:
        return self.canvas_width // CELL_WIDTH

    @property
    def canvas_rows(self) -> int:
        return self.canvas_height // CELL_HEIGHT

    def resize(self, term_width: int, term_height: int,
               canvas_width: int, canvas_height: int):
        self.buffer.resize(term_width, term_height)
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height

    def begin_frame(self):
        self.buffer.clear_back()
        self._draw_canvas_frame()

    def end_frame(self) -> str:
        return self.buffer.present(self.term)

    def fill_box(self, px: float, py: float, size: float, color: int):
        """Fill the cells covered by a pixel-space square."""
        col0 = int(px // CELL_WIDTH)
        row0 = int(py // CELL_HEIGHT)
        col1 = max(col0 + 1, int((px + size) // CELL_WIDTH))
        row1 = max(row0 + 1, int((py + size) // CELL_HEIGHT))
        for row in range(max(0, row0), min(row1, self.canvas_rows)):
            for col in range(max(0, col0), min(col1, self.canvas_cols)):
                self.buffer.put(col, row + HUD_ROWS, BLOCK, color)

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7):
        self.buffer.put_string(x, y, text, fg_color)

    def put_centered(self, text: str, fg_color: int = 7, row_offset: int = 0):
        """Put a string centered over the canvas."""
        x = max(0, self.canvas_cols // 2 - len(text) // 2)
        y = HUD_ROWS + self.canvas_rows // 2 + row_offset
        self.buffer.put_string(x, y, text, fg_color)

    def _draw_canvas_frame(self):
        right = self.canvas_cols
        bottom = HUD_ROWS + self.canvas_rows
        if right >= self.width and bottom >= self.height:
            return
        for y in range(HUD_ROWS, min(bottom, self.height)):
            self.buffer.put(right, y, '|', GRAY_DARK)
        for x in range(0, min(right + 1, self.width)):
            self.buffer.put(x, bottom, '-', GRAY_DARK)
