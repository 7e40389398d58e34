"""Session and template name helpers."""

from ..config import NUMERIC_NAME_MAX
from ..errors import ValidationError
from ..layout.models import Template
from ..mux.base import SessionInfo


def generate_numeric_name(sessions: tuple[SessionInfo, ...] | list[SessionInfo]) -> str:
    """Lowest non-negative integer not already used as a session name."""
    used = set()
    for session in sessions:
        try:
            used.add(int(session.name))
        except ValueError:
            continue
    for i in range(NUMERIC_NAME_MAX + 1):
        if i not in used:
            return str(i)
    return "0"


def name_exists(name: str, sessions, templates) -> bool:
    """Template and session names share one namespace."""
    return any(s.name == name for s in sessions) or any(t.name == name for t in templates)


def find_template(name: str, templates) -> Template | None:
    for template in templates:
        if template.name == name:
            return template
    return None


def template_session_name(template_name: str, timestamp: float) -> str:
    """Session name used when launching a template from the template list."""
    return f"{template_name}-{int(timestamp)}"


def validate_template_name(name: str, sessions, templates) -> str:
    """Strip and check a new template name.

    Raises:
        ValidationError: If the name is empty or already taken.
    """
    name = name.strip()
    if not name:
        raise ValidationError("Template name cannot be empty")
    if name_exists(name, sessions, templates):
        raise ValidationError("Name already exists")
    return name
