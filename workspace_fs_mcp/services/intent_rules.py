"""Keyword predicates and parameter extractors for chat-driven file operations.

Everything here is a pure function of the message text. Matching is plain
substring and regular-expression work, not language understanding: a message
that mentions two operations is routed by the rules below, nothing more.
"""

import re
from enum import Enum


class Intent(str, Enum):
    CREATE_FILE = "create_file"
    UPDATE_FILE = "update_file"
    DELETE_FILE = "delete_file"
    CREATE_DIRECTORY = "create_directory"
    NONE = "none"


CREATE_FILE_KEYWORDS = ("create file", "new file", "make a file")
UPDATE_VERBS = ("update", "modify", "change")
UPDATE_TARGETS = ("file", "code")
DELETE_FILE_KEYWORDS = ("delete file", "remove file")
CREATE_DIRECTORY_KEYWORDS = ("create directory", "create folder", "new directory", "new folder")

FILENAME_PATTERN = re.compile(
    r"""(?:create|new|make)(?:\s+a)?\s+file(?:\s+called|\s+named)?\s+["']?([a-zA-Z0-9_.-]+)["']?""",
    re.IGNORECASE,
)
CONTENT_PATTERN = re.compile(r"with(?:\s+the)?\s+content(?:\s+of)?:?\s+([\s\S]*)", re.IGNORECASE)
DELETE_TARGET_PATTERN = re.compile(
    r"""(?:delete|remove)(?:\s+the)?\s+file(?:\s+called|\s+named)?\s+["']?([a-zA-Z0-9_.\-/]+)["']?""",
    re.IGNORECASE,
)
DIRECTORY_NAME_PATTERN = re.compile(
    r"""(?:create|new)(?:\s+a)?\s+(?:directory|folder)(?:\s+called|\s+named)?\s+["']?([a-zA-Z0-9_.-]+)["']?""",
    re.IGNORECASE,
)
CODE_FENCE_PATTERN = re.compile(r"^```\w*\n|```$", re.MULTILINE)


def _first_position(text: str, keywords: tuple[str, ...]) -> int | None:
    positions = [text.find(keyword) for keyword in keywords if keyword in text]
    return min(positions) if positions else None


def create_file_position(text: str) -> int | None:
    return _first_position(text, CREATE_FILE_KEYWORDS)


def update_file_position(text: str) -> int | None:
    # Needs a verb and a target; the verb marks where the request starts.
    if _first_position(text, UPDATE_TARGETS) is None:
        return None
    return _first_position(text, UPDATE_VERBS)


def delete_file_position(text: str) -> int | None:
    return _first_position(text, DELETE_FILE_KEYWORDS)


def create_directory_position(text: str) -> int | None:
    return _first_position(text, CREATE_DIRECTORY_KEYWORDS)


# Fixed priority order, also used to break ties between equal positions.
INTENT_PREDICATES = (
    (Intent.CREATE_FILE, create_file_position),
    (Intent.UPDATE_FILE, update_file_position),
    (Intent.DELETE_FILE, delete_file_position),
    (Intent.CREATE_DIRECTORY, create_directory_position),
)


def classify_intent(text: str) -> Intent:
    """
    Classify a chat message into a file-operation intent.

    The text is lower-cased and every predicate is tested. When several match,
    the one whose keyword appears first in the message wins; equal positions
    fall back to the order of `INTENT_PREDICATES`.

    Returns:
        The matched intent, or `Intent.NONE` when nothing matches.
    """
    text = text.lower()
    best: tuple[int, int, Intent] | None = None
    for priority, (intent, predicate) in enumerate(INTENT_PREDICATES):
        position = predicate(text)
        if position is None:
            continue
        candidate = (position, priority, intent)
        if best is None or candidate < best:
            best = candidate
    return best[2] if best else Intent.NONE


def strip_code_fences(content: str) -> str:
    """Remove ``` fence markers that open a line or close the text."""
    return CODE_FENCE_PATTERN.sub("", content)


def extract_filename(text: str) -> str | None:
    match = FILENAME_PATTERN.search(text)
    return match.group(1) if match else None


def extract_content(text: str) -> str | None:
    """
    Extract the content following "with [the] content [of][:]".

    Returns:
        The trimmed content without code fences, or None if the phrase is absent.
    """
    match = CONTENT_PATTERN.search(text)
    if not match:
        return None
    return strip_code_fences(match.group(1).strip())


def extract_delete_target(text: str) -> str | None:
    match = DELETE_TARGET_PATTERN.search(text)
    return match.group(1) if match else None


def extract_directory_name(text: str) -> str | None:
    match = DIRECTORY_NAME_PATTERN.search(text)
    return match.group(1) if match else None
