"""Domain errors raised by the note tree and project services.

The HTTP layer translates these into status codes; services never raise
``HTTPException`` themselves.
"""


class NoteTreeError(Exception):
    """Base class for failures of a note tree or project operation."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(NoteTreeError):
    status_code = 404


class InvalidParent(NoteTreeError):
    """Parent is missing or belongs to another project."""

    status_code = 400


class CycleDetected(NoteTreeError):
    """Reparenting would make a note its own ancestor."""

    status_code = 409


class ProjectLocked(NoteTreeError):
    status_code = 423


class MalformedTime(ValueError):
    """A time marker that is not ``HH:MM``. Only used inside the pacing parser."""
