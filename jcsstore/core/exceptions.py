"""
jcsstore Exception Hierarchy

All exceptions inherit from JcsStoreError for easy catching.
The set is closed: callers branch on the concrete type.
"""


class JcsStoreError(Exception):
    """Base exception for all jcsstore errors"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class PathConflict(JcsStoreError):
    """Raised when the store root exists but is not a directory"""
    pass


class FilesystemError(JcsStoreError):
    """Raised when an OS-level read, write, create or stat fails"""
    pass


class EncodingError(JcsStoreError):
    """Raised when a value cannot be encoded as RFC 8785 canonical JSON"""
    pass


class ParseError(JcsStoreError):
    """Raised when hash-valid stored bytes are not JSON"""
    pass


class NotFoundError(JcsStoreError):
    """Raised when no entry exists at the requested address"""
    pass


class IntegrityError(JcsStoreError):
    """Raised when stored bytes do not hash to the address they are stored under"""
    pass
