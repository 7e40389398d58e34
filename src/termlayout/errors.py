"""Error taxonomy.

- ValidationError: bad user input, raised before any external side effect.
- ExternalCommandError: an external (tmux / terminal) call failed.
- OutOfRangeError: a selection index outside the current bounds.
"""


class TermLayoutError(Exception):
    """Base class for termlayout errors."""


class ValidationError(TermLayoutError):
    """Input rejected before any external call was made."""


class ExternalCommandError(TermLayoutError):
    """An external command returned failure.

    Attributes:
        command: The argv that failed.
        message: The underlying error output, verbatim.
    """

    def __init__(self, command: list[str], message: str):
        self.command = command
        self.message = message
        super().__init__(message)


class OutOfRangeError(TermLayoutError, IndexError):
    """Selection index outside the current bounds."""
