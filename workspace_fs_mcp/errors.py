"""Error taxonomy shared by the storage providers, the file-system adapter and the interpreter."""


class WorkspaceError(Exception):
    """Base class for every workspace failure."""

    category = "ProviderError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message: str = message


class PermissionDenied(WorkspaceError):
    """The storage provider refused the read-write grant or an operation on an entry."""

    category = "PermissionDenied"


class UserCancelled(WorkspaceError):
    """No directory was chosen when the root was requested."""

    category = "UserCancelled"


class NotFound(WorkspaceError):
    """A path or one of its segments could not be resolved."""

    category = "NotFound"


class AlreadyInconsistent(WorkspaceError):
    """A multi-step mutation failed half-way and storage no longer matches the cache."""

    category = "AlreadyInconsistent"


class UnsupportedOperation(WorkspaceError):
    """The operation is declared but not supported for this kind of entry."""

    category = "UnsupportedOperation"


class MissingParameter(WorkspaceError):
    """A required value could not be extracted from a chat message."""

    category = "MissingParameter"


class ProviderError(WorkspaceError):
    """Any other storage I/O failure."""

    category = "ProviderError"
