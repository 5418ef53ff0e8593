"""Shared fixtures for skill-activation tests."""

import json
from pathlib import Path

import pytest

from skill_activation.debug_log import null_logger


@pytest.fixture
def log():
    """Logger that discards output."""
    return null_logger()


@pytest.fixture
def write_rules():
    """Write a skill-rules.json with the given skills mapping."""

    def _write(path: Path, skills: dict, version: str = "1.0") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({"version": version, "skills": skills}))
        return path

    return _write


@pytest.fixture
def make_skill():
    """Create <root>/<name>/SKILL.md with the given content."""

    def _make(root: Path, name: str, content: str = "",
              file_name: str = "SKILL.md") -> Path:
        skill_dir = root / name
        skill_dir.mkdir(parents=True, exist_ok=True)
        skill_file = skill_dir / file_name
        skill_file.write_text(content or f"# {name}\n\nGuidance for {name}.\n")
        return skill_file

    return _make


@pytest.fixture
def rule():
    """Build one rule entry as it appears in skill-rules.json."""

    def _rule(priority="high", keywords=None, patterns=None, **extra):
        data = {"type": "domain", "priority": priority}
        triggers = {}
        if keywords is not None:
            triggers["keywords"] = keywords
        if patterns is not None:
            triggers["intentPatterns"] = patterns
        if triggers:
            data["promptTriggers"] = triggers
        data.update(extra)
        return data

    return _rule
