"""Geometry rederivation.

Geometry is not persisted, so a template loaded from disk gets its editor
geometry back by replaying the split history: the root covers the grid and
every later pane is carved out of its parent in sequence order, exactly as
split_pane did when the pane was created.
"""

from ..config import DEFAULT_SPLIT_PERCENT, LAYOUT_GRID_H, LAYOUT_GRID_W
from .models import Position, Template
from .normalizer import normalize_panes
from .splitter import carve


def resolve_parent_index(template: Template, index: int) -> int:
    """Index of the parent of the pane at ``index``.

    Only panes earlier in the sequence qualify; a stale or malformed
    parent reference resolves to the root (index 0).
    """
    parent_id = template.panes[index].parent
    for i in range(index):
        if template.panes[i].id == parent_id:
            return i
    return 0


def rederive_geometry(template: Template) -> Template:
    """Recompute row/col/width/height for every pane in place.

    Positions that are not split directions (e.g. a stray ``main`` on a
    non-root pane) are replayed as ``right``, the same fallback the
    materializer uses for the split axis.

    Returns:
        The same template, for chaining.
    """
    if not template.panes:
        return template

    root = template.panes[0]
    root.row, root.col = 0, 0
    root.width, root.height = LAYOUT_GRID_W, LAYOUT_GRID_H

    for i in range(1, len(template.panes)):
        pane = template.panes[i]
        parent = template.panes[resolve_parent_index(template, i)]
        try:
            direction = Position(pane.position)
        except ValueError:
            direction = Position.RIGHT
        if direction == Position.MAIN:
            direction = Position.RIGHT
        percent = pane.split_percent if pane.split_percent > 0 else DEFAULT_SPLIT_PERCENT
        carve(parent, pane, direction, percent)

    normalize_panes(template.panes)
    return template
