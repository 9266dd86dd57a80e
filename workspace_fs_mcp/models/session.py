from pydantic import BaseModel, ConfigDict, Field

from workspace_fs_mcp.storage.base import DirectoryHandle, FileHandle


class WorkspaceSession(BaseModel):
    """Stores the opened root, the handle cache and the editor context of a single session."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    root: DirectoryHandle | None = None
    file_handles: dict[str, FileHandle] = Field(default_factory=dict)
    directory_handles: dict[str, DirectoryHandle] = Field(default_factory=dict)
    current_directory: str = "/"
    current_file: str = ""

    def clear_handles(self) -> None:
        """Forget the root and every cached handle."""
        self.root = None
        self.file_handles.clear()
        self.directory_handles.clear()
