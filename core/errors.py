# core/errors.py


class LibraryError(Exception):
    """Base class for errors raised by repositories and services"""
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(LibraryError, LookupError):
    """A referenced book, member, category or record does not exist"""
    kind = "not_found"


class Conflict(LibraryError):
    """The operation clashes with current state (no copies left, double return, category in use)"""
    kind = "conflict"


class InvalidArgument(LibraryError, ValueError):
    """Input rejected before touching stored state"""
    kind = "invalid_argument"


class PermissionDenied(LibraryError):
    """Caller is not allowed to mutate circulation state"""
    kind = "permission_denied"


class TransientError(LibraryError):
    """The database could not be reached or was busy. Safe to retry the whole operation."""
    kind = "transient"
