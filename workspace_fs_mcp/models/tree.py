from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from workspace_fs_mcp.storage.base import Handle


class FileTreeNode(BaseModel):
    """One entry of a scanned workspace tree."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    kind: Literal["file", "directory"]
    handle: Handle = Field(exclude=True)
    # Only directories carry children; files leave it unset.
    children: list["FileTreeNode"] | None = None
