from enum import Enum

from pydantic import BaseModel


class ChangeKind(str, Enum):
    """Kinds of mutation reported to change listeners."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    RENAME = "rename"


class ChangeEvent(BaseModel):
    kind: ChangeKind
    path: str

    def describe(self) -> str:
        """Human readable acknowledgement, e.g. 'Created /src/app.py'."""
        return f"{self.kind.value.capitalize()}d {self.path}"


class InterpretResult(BaseModel):
    """Outcome of interpreting one chat message."""

    response: str = ""
    operation_performed: bool = False
