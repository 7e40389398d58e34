"""termlayout - tmux pane layout templates

Edit named split-tree templates and replay them into live tmux sessions.
"""

from .config import VERSION as __version__
from .layout import Pane, Position, Template
from .materializer import MaterializedSession, TemplateMaterializer

__all__ = [
    "__version__",
    "Pane",
    "Position",
    "Template",
    "TemplateMaterializer",
    "MaterializedSession",
]
