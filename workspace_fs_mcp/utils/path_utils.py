import re

ROOT_PATH = "/"

_DOUBLE_SEPARATOR = re.compile(r"/{2,}")


def normalize_path(path: str) -> str:
    """
    Bring a workspace path to its canonical cache-key form.

    A leading slash is ensured, runs of slashes are collapsed and a trailing
    slash is dropped. Both "" and "/" normalize to the root.

    Args:
        path: A slash-delimited workspace path, absolute or root-relative.

    Returns:
        The canonical path string.
    """
    path = _DOUBLE_SEPARATOR.sub("/", "/" + path.strip())
    if len(path) > 1:
        path = path.rstrip("/")
    return path


def join_path(parent: str, name: str) -> str:
    """Join a directory path and an entry name the same way everywhere."""
    joined = f"/{name}" if parent == ROOT_PATH else f"{parent}/{name}"
    return _DOUBLE_SEPARATOR.sub("/", joined)


def split_path(path: str) -> tuple[str, str] | None:
    """
    Split a path into its parent directory and final segment.

    Returns:
        `(parent, name)` with `parent` in canonical form, or None for the root,
        which has no parent.
    """
    path = normalize_path(path)
    if path == ROOT_PATH:
        return None
    parent, _, name = path.rpartition("/")
    return (parent or ROOT_PATH), name


def parent_path(path: str) -> str | None:
    """Return the parent of `path`, or None for the root."""
    parts = split_path(path)
    return parts[0] if parts else None


def is_same_or_descendant(path: str, ancestor: str) -> bool:
    """Check whether `path` equals `ancestor` or lies below it."""
    if ancestor == ROOT_PATH:
        return True
    return path == ancestor or path.startswith(ancestor + "/")
