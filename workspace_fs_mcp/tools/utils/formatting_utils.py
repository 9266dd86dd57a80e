import json

from workspace_fs_mcp.models.tree import FileTreeNode
from workspace_fs_mcp.utils.path_utils import ROOT_PATH, join_path


def flatten_tree(node: FileTreeNode, path: str = ROOT_PATH, depth: int = 0) -> list[dict]:
    """Flatten the children of a scanned node into depth-annotated rows, depth first."""
    rows = []
    for child in node.children or []:
        child_path = join_path(path, child.name)
        rows.append({
            "name": child.name,
            "type": child.kind,
            "depth": depth,
            "path": child_path,
        })
        if child.kind == "directory":
            rows.extend(flatten_tree(child, child_path, depth + 1))
    return rows


def format_tree(node: FileTreeNode) -> str:
    """
    Format a scanned workspace tree as structured JSON for LLM consumption.

    Returns a JSON string with one row per entry, which LLMs can parse more
    reliably than an indented plain-text tree.
    """
    rows = flatten_tree(node)
    if not rows:
        return json.dumps({
            "status": "empty",
            "root": node.name,
            "message": "Directory is empty",
            "tree": []
        }, indent=2)

    return json.dumps({
        "status": "success",
        "root": node.name,
        "count": len(rows),
        "tree": rows
    }, indent=2)


def format_changes(output_msg: str, changes: list[str]) -> str:
    """Append change acknowledgements to a tool output message."""
    if not changes:
        return output_msg
    return output_msg + "\n\nChanges:\n" + "\n".join(f"- {change}" for change in changes)
