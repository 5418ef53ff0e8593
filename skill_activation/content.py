"""Reading SKILL.md content under a character budget."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_MAX_CHARS = 8000
TRUNCATION_MARKER = "[... truncated, read the full SKILL.md for the rest ...]"

HEADING_BOUNDARY = "\n#"
PARAGRAPH_BOUNDARY = "\n\n"
# A heading cut is only used when it keeps most of the budget
HEADING_MIN_FRACTION = 0.7


def truncation_point(text: str, max_chars: int) -> int:
    """Index at which to cut text that exceeds max_chars."""
    heading = text.rfind(HEADING_BOUNDARY, 0, max_chars)
    if heading > max_chars * HEADING_MIN_FRACTION:
        return heading
    paragraph = text.rfind(PARAGRAPH_BOUNDARY, 0, max_chars)
    if paragraph > 0:
        return paragraph
    return max_chars


def truncate_content(text: str, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """
    Fit text into max_chars, cutting at a heading or paragraph if possible.

    Returns the text unchanged when it fits; otherwise the kept prefix
    followed by a blank line and TRUNCATION_MARKER.
    """
    if len(text) <= max_chars:
        return text
    cut = truncation_point(text, max_chars)
    return text[:cut].rstrip() + "\n\n" + TRUNCATION_MARKER


def load_content(path: Path, max_chars: int = DEFAULT_MAX_CHARS,
                 log: Optional[logging.Logger] = None) -> str:
    """Read a SKILL.md, truncated to max_chars. Unreadable files give ''."""
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        if log is not None:
            log.debug("cannot read %s: %s", path, e)
        return ""
    content = truncate_content(text, max_chars)
    if log is not None and len(content) != len(text):
        log.debug("truncated %s from %d chars", path, len(text))
    return content


def read_frontmatter(path: Path) -> Dict[str, Any]:
    """YAML frontmatter of a SKILL.md, or {} if there is none."""
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return {}

    if not content.startswith("---\n"):
        return {}
    end_idx = content.find("\n---", 4)
    if end_idx == -1:
        return {}

    try:
        metadata = yaml.safe_load(content[4:end_idx])
    except yaml.YAMLError:
        return {}
    return metadata if isinstance(metadata, dict) else {}
