from .results import ChangeEvent, ChangeKind, InterpretResult
from .session import WorkspaceSession
from .tree import FileTreeNode

__all__ = ["ChangeEvent", "ChangeKind", "FileTreeNode", "InterpretResult", "WorkspaceSession"]
