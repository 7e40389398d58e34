"""Template data model.

A Template is an ordered list of Panes forming a split-tree. Order is both
creation order and the dependency order used when materializing: a pane's
parent always appears earlier in the list.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum

from ..config import DEFAULT_SPLIT_PERCENT, LAYOUT_GRID_H, LAYOUT_GRID_W
from ..errors import OutOfRangeError


class Position(str, Enum):
    """Where a pane sits relative to the pane it was split from."""

    MAIN = "main"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"

    @property
    def is_horizontal(self) -> bool:
        """Side-by-side split (left/right)."""
        return self in {Position.LEFT, Position.RIGHT}

    @property
    def is_before(self) -> bool:
        """New region goes before/above the parent."""
        return self in {Position.LEFT, Position.UP}


SPLIT_DIRECTIONS = (Position.LEFT, Position.RIGHT, Position.UP, Position.DOWN)


@dataclass
class Pane:
    """One pane of a template.

    Attributes:
        id: Logical id, unique within the template, never reused
        command: Shell text typed into the pane after creation
        position: Placement relative to the parent (main for the root)
        parent: Id of the pane this one was split from, 0 for the root
        split_percent: Share of the parent's region given to this pane
        row, col, width, height: Editor geometry on the 0-100 grid
    """

    id: int
    command: str = ""
    position: str = Position.MAIN.value
    parent: int = 0
    split_percent: int = DEFAULT_SPLIT_PERCENT
    row: int = 0
    col: int = 0
    width: int = 0
    height: int = 0

    @property
    def is_root(self) -> bool:
        return self.position == Position.MAIN.value

    def to_dict(self) -> dict:
        """Persisted form (geometry is editor-only state)."""
        return {
            "id": self.id,
            "command": self.command,
            "position": self.position,
            "parent": self.parent,
            "split_percent": self.split_percent,
        }


@dataclass
class Template:
    """A named, persisted blueprint of a pane split-tree."""

    name: str
    description: str = ""
    panes: list[Pane] = field(default_factory=list)

    @classmethod
    def new_root(cls, name: str = "", description: str = "") -> "Template":
        """Create a template holding a single root pane covering the grid."""
        root = Pane(
            id=1,
            position=Position.MAIN.value,
            parent=0,
            split_percent=DEFAULT_SPLIT_PERCENT,
            row=0,
            col=0,
            width=LAYOUT_GRID_W,
            height=LAYOUT_GRID_H,
        )
        return cls(name=name, description=description, panes=[root])

    @property
    def root(self) -> Pane | None:
        return self.panes[0] if self.panes else None

    def copy(self) -> "Template":
        return copy.deepcopy(self)

    def pane_at(self, index: int) -> Pane:
        """Return the pane at ``index``.

        Raises:
            OutOfRangeError: If index is outside the pane list.
        """
        if index < 0 or index >= len(self.panes):
            raise OutOfRangeError(f"pane index {index} out of range (0..{len(self.panes) - 1})")
        return self.panes[index]

    def find_index(self, pane_id: int) -> int:
        """Index of the pane with ``pane_id``, or -1."""
        for i, pane in enumerate(self.panes):
            if pane.id == pane_id:
                return i
        return -1

    def next_pane_id(self) -> int:
        return max((p.id for p in self.panes), default=0) + 1

    def to_dict(self) -> dict:
        data: dict = {"name": self.name}
        if self.description:
            data["description"] = self.description
        data["panes"] = [p.to_dict() for p in self.panes]
        return data
