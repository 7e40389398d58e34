"""Interactive pane subdivision.

split_pane carves a new pane out of the selected pane's region; the two
parts always add up to the original extent on the split axis.
"""

from ..config import DEFAULT_SPLIT_PERCENT
from ..errors import ValidationError
from ..telemetry import get_logger
from .models import SPLIT_DIRECTIONS, Pane, Position, Template
from .normalizer import normalize_panes

logger = get_logger(__name__)


def split_sizes(dim: int, percent: int) -> tuple[int, int]:
    """Divide ``dim`` into (new part, remainder), both >= 1 when dim >= 2.

    Args:
        dim: Extent of the selected pane on the split axis
        percent: Share given to the new part

    Returns:
        (split_size, remainder)
    """
    split_size = max(1, dim * percent // 100)
    remainder = dim - split_size
    if remainder < 1:
        remainder = 1
        if split_size > 1:
            split_size -= 1
    return split_size, remainder


def carve(sel: Pane, new_pane: Pane, direction: Position, percent: int) -> None:
    """Give ``new_pane`` its share of ``sel``'s region and shrink ``sel``.

    Both panes are mutated in place; ``new_pane``'s previous geometry is
    ignored.
    """
    if direction.is_horizontal:
        size, rem = split_sizes(sel.width, percent)
        new_pane.row = sel.row
        new_pane.height = sel.height
        new_pane.width = size
        if direction == Position.LEFT:
            new_pane.col = sel.col
            sel.col = sel.col + size
        else:
            new_pane.col = sel.col + rem
        sel.width = rem
    else:
        size, rem = split_sizes(sel.height, percent)
        new_pane.col = sel.col
        new_pane.width = sel.width
        new_pane.height = size
        if direction == Position.UP:
            new_pane.row = sel.row
            sel.row = sel.row + size
        else:
            new_pane.row = sel.row + rem
        sel.height = rem


def parse_direction(direction: Position | str) -> Position:
    """Validate a split direction.

    Raises:
        ValidationError: If direction is not left/right/up/down.
    """
    try:
        parsed = Position(direction)
    except ValueError:
        raise ValidationError(f"invalid split direction: {direction!r}") from None
    if parsed not in SPLIT_DIRECTIONS:
        raise ValidationError(f"invalid split direction: {parsed.value!r}")
    return parsed


def split_pane(template: Template, index: int, direction: Position | str) -> int:
    """Split the pane at ``index`` and append the new pane.

    Args:
        template: Template being edited (mutated in place)
        index: Index of the selected pane; out-of-range falls back to 0
        direction: One of left/right/up/down

    Returns:
        Index of the new pane (the new editor cursor), or -1 if the
        template has no panes.

    Raises:
        ValidationError: If direction is not a split direction.
    """
    if not template.panes:
        return -1

    direction = parse_direction(direction)

    if index < 0 or index >= len(template.panes):
        index = 0
    sel = template.panes[index]

    percent = sel.split_percent if sel.split_percent > 0 else DEFAULT_SPLIT_PERCENT
    new_pane = Pane(
        id=template.next_pane_id(),
        command="",
        position=direction.value,
        parent=sel.id,
        split_percent=percent,
    )
    carve(sel, new_pane, direction, percent)

    template.panes.append(new_pane)
    normalize_panes(template.panes)

    logger.debug(
        f"[Splitter] pane {sel.id} split {direction.value} -> pane {new_pane.id} "
        f"({new_pane.width}x{new_pane.height} at {new_pane.row},{new_pane.col})"
    )
    return len(template.panes) - 1


def delete_pane(template: Template, index: int) -> int:
    """Remove the pane at ``index``.

    Returns:
        The cursor to use afterwards.

    Raises:
        OutOfRangeError: If index is outside the pane list.
        ValidationError: If the pane is the root or the last one left.
    """
    pane = template.pane_at(index)
    if len(template.panes) <= 1:
        raise ValidationError("Cannot delete the last pane")
    if index == 0 or pane.is_root:
        raise ValidationError("Cannot delete the main pane")

    del template.panes[index]
    normalize_panes(template.panes)
    logger.debug(f"[Splitter] pane {pane.id} deleted")
    return min(index, len(template.panes) - 1)
