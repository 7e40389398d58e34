"""ASCII preview of a template's layout.

Maps the logical 0-100 geometry onto a small fixed character canvas. The
mapping scales to the extents actually used by the panes, enforces a
minimum drawable box, and lets later panes overwrite earlier cells, so the
preview is best-effort rather than an exact picture of the geometry.
"""

from dataclasses import dataclass, field

from rich.style import Style
from rich.text import Text

from ..config import PREVIEW_COLS, PREVIEW_MIN_BOX_COLS, PREVIEW_MIN_BOX_ROWS, PREVIEW_ROWS
from .models import Pane

# (horizontal, vertical, top-left, top-right, bottom-left, bottom-right)
_LIGHT_GLYPHS = ("─", "│", "┌", "┐", "└", "┘")
_HEAVY_GLYPHS = ("═", "║", "╔", "╗", "╚", "╝")
SELECTED_MARKER = "●"
EMPTY_COMMAND = "(empty)"

PANE_STYLE = Style(color="#7287fd")
SELECTED_PANE_STYLE = Style(color="#e64553", bold=True)


def _clip(value: int, lo: int, hi: int) -> int:
    return max(lo, min(value, hi))


@dataclass
class PreviewBox:
    """Canvas rectangle of one pane, rows [r0, r1) and columns [c0, c1)."""

    pane_id: int
    r0: int
    r1: int
    c0: int
    c1: int

    @property
    def interior_width(self) -> int:
        return max(0, (self.c1 - 1) - (self.c0 + 1))


@dataclass
class Preview:
    """Rendered canvas plus the boxes it was drawn from."""

    rows: int
    cols: int
    grid: list[list[str]]
    owners: list[list[int]]
    boxes: list[PreviewBox] = field(default_factory=list)
    selected_id: int | None = None

    def to_text(self) -> str:
        return "\n".join("".join(row) for row in self.grid)

    def to_rich(self) -> Text:
        """Canvas as rich Text, the selected pane's cells highlighted."""
        text = Text()
        for r, row in enumerate(self.grid):
            for c, char in enumerate(row):
                owner = self.owners[r][c]
                if owner == 0 or char == " ":
                    text.append(char)
                elif owner == self.selected_id:
                    text.append(char, style=SELECTED_PANE_STYLE)
                else:
                    text.append(char, style=PANE_STYLE)
            if r < self.rows - 1:
                text.append("\n")
        return text


def layout_extents(panes: list[Pane]) -> tuple[int, int]:
    """Tightest (max_row, max_col) used by the panes, each at least 1."""
    max_row, max_col = 1, 1
    for pane in panes:
        max_row = max(max_row, pane.row + pane.height)
        max_col = max(max_col, pane.col + pane.width)
    return max_row, max_col


def map_box(
    pane: Pane,
    max_row: int,
    max_col: int,
    rows: int = PREVIEW_ROWS,
    cols: int = PREVIEW_COLS,
) -> PreviewBox:
    """Scale a pane's geometry onto the canvas.

    Degenerate mappings are expanded to a minimum drawable box, which may
    overlap a neighbouring box.
    """
    r0 = pane.row * rows // max_row
    r1 = (pane.row + pane.height) * rows // max_row
    c0 = pane.col * cols // max_col
    c1 = (pane.col + pane.width) * cols // max_col

    if r1 <= r0 + 1:
        r1 = _clip(r0 + PREVIEW_MIN_BOX_ROWS, 0, rows)
    if c1 <= c0 + 2:
        c1 = _clip(c0 + PREVIEW_MIN_BOX_COLS, 0, cols)

    r0 = max(r0, 0)
    c0 = max(c0, 0)
    r1 = min(r1, rows)
    c1 = min(c1, cols)
    return PreviewBox(pane_id=pane.id, r0=r0, r1=r1, c0=c0, c1=c1)


class GridRenderer:
    """Draws pane boxes onto a fixed-size character canvas."""

    def __init__(self, rows: int = PREVIEW_ROWS, cols: int = PREVIEW_COLS):
        self.rows = rows
        self.cols = cols

    def render(self, panes: list[Pane], selected_id: int | None = None) -> Preview:
        grid = [[" "] * self.cols for _ in range(self.rows)]
        owners = [[0] * self.cols for _ in range(self.rows)]
        preview = Preview(
            rows=self.rows, cols=self.cols, grid=grid, owners=owners, selected_id=selected_id
        )

        max_row, max_col = layout_extents(panes)
        for pane in panes:
            box = map_box(pane, max_row, max_col, self.rows, self.cols)
            preview.boxes.append(box)
            self._draw_box(preview, box, pane, selected=pane.id == selected_id)
        return preview

    def _put(self, preview: Preview, r: int, c: int, char: str, pane_id: int) -> None:
        if 0 <= r < self.rows and 0 <= c < self.cols:
            preview.grid[r][c] = char
            preview.owners[r][c] = pane_id

    def _draw_box(self, preview: Preview, box: PreviewBox, pane: Pane, selected: bool) -> None:
        h, v, tl, tr, bl, br = _HEAVY_GLYPHS if selected else _LIGHT_GLYPHS
        r0, r1, c0, c1 = box.r0, box.r1, box.c0, box.c1

        for c in range(c0 + 1, c1 - 1):
            self._put(preview, r0, c, h, pane.id)
            self._put(preview, r1 - 1, c, h, pane.id)
        for r in range(r0 + 1, r1 - 1):
            self._put(preview, r, c0, v, pane.id)
            self._put(preview, r, c1 - 1, v, pane.id)

        self._put(preview, r0, c0, tl, pane.id)
        self._put(preview, r0, c1 - 1, tr, pane.id)
        self._put(preview, r1 - 1, c0, bl, pane.id)
        self._put(preview, r1 - 1, c1 - 1, br, pane.id)

        label = pane.command.strip() or EMPTY_COMMAND
        label = label[: box.interior_width]
        for i, char in enumerate(label):
            self._put(preview, r0 + 1, c0 + 1 + i, char, pane.id)

        if selected:
            self._put(preview, r0 + 1, c1 - 3, SELECTED_MARKER, pane.id)


def render_preview(
    panes: list[Pane],
    selected_id: int | None = None,
    rows: int = PREVIEW_ROWS,
    cols: int = PREVIEW_COLS,
) -> Preview:
    """Render a preview of ``panes`` with ``selected_id`` highlighted."""
    return GridRenderer(rows=rows, cols=cols).render(panes, selected_id=selected_id)
