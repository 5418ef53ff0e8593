"""Loading and validating skill-rules.json."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

RULES_FILE_NAME = "skill-rules.json"

# Lower value = higher precedence
PRIORITY_ORDER = {"critical": 0, "high": 1, "medium": 2, "low": 3}
INJECTABLE_PRIORITIES = ("critical", "high")
RULE_TYPES = ("guardrail", "domain")


class RulesParseError(ValueError):
    """A rules file exists but cannot be used."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


@dataclass
class SkillRule:
    """One entry of the `skills` mapping."""

    name: str
    priority: str
    kind: str = "domain"
    enforcement: str = "suggest"
    description: str = ""
    keywords: List[str] = field(default_factory=list)
    intent_patterns: List[str] = field(default_factory=list)
    has_triggers: bool = True

    @property
    def rank(self) -> int:
        return PRIORITY_ORDER[self.priority]


@dataclass
class RuleDocument:
    """Parsed rules file: version plus rules in document order."""

    version: str
    skills: Dict[str, SkillRule]
    path: Optional[Path] = None
    skipped: List[str] = field(default_factory=list)


def rule_candidates(project_dir: Optional[str], home: Optional[Path] = None,
                    explicit: Optional[Path] = None) -> List[Path]:
    """
    Ordered rules file locations, most specific first.

    Args:
        project_dir: Project root (CLAUDE_PROJECT_DIR or hook cwd); project
            locations are skipped when empty
        home: Home directory (default: Path.home())
        explicit: Configured rules file, tried before everything else

    Returns:
        Candidate paths in search order
    """
    home = home if home is not None else Path.home()
    candidates = []
    if explicit is not None:
        candidates.append(explicit)
    if project_dir:
        project = Path(project_dir)
        candidates.append(project / ".claude" / RULES_FILE_NAME)
        candidates.append(project / ".claude" / "skills" / RULES_FILE_NAME)
    candidates.append(home / ".claude" / "skills" / RULES_FILE_NAME)
    candidates.append(home / ".claude" / RULES_FILE_NAME)
    return candidates


def find_rules_file(candidates: List[Path]) -> Optional[Path]:
    """Return the first candidate that is an existing file."""
    for path in candidates:
        try:
            if path.is_file():
                return path
        except OSError:
            continue
    return None


def _string_list(value: Any, what: str, name: str,
                 log: logging.Logger) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        log.debug("rule %s: %s is not a list, ignoring", name, what)
        return []
    items = []
    for item in value:
        if isinstance(item, str) and item:
            items.append(item)
        else:
            log.debug("rule %s: dropping %s entry %r", name, what, item)
    return items


def parse_rule(name: str, data: Any, log: logging.Logger) -> Optional[SkillRule]:
    """Build a SkillRule, or None if the rule is unusable."""
    if not isinstance(data, dict):
        log.debug("skipping rule %s: not an object", name)
        return None

    priority = data.get("priority")
    if not isinstance(priority, str) or priority not in PRIORITY_ORDER:
        log.debug("skipping rule %s: invalid priority %r", name, priority)
        return None

    kind = data.get("type", "domain")
    if kind not in RULE_TYPES:
        log.debug("rule %s: unknown type %r", name, kind)

    triggers = data.get("promptTriggers")
    if triggers is not None and not isinstance(triggers, dict):
        log.debug("rule %s: promptTriggers is not an object", name)
        triggers = {}

    return SkillRule(
        name=name,
        priority=priority,
        kind=str(kind),
        enforcement=str(data.get("enforcement", "suggest")),
        description=str(data.get("description", "")),
        keywords=_string_list((triggers or {}).get("keywords"), "keywords",
                              name, log),
        intent_patterns=_string_list((triggers or {}).get("intentPatterns"),
                                     "intentPatterns", name, log),
        has_triggers=triggers is not None,
    )


def parse_rules(data: Any, path: Optional[Path],
                log: logging.Logger) -> RuleDocument:
    """
    Turn decoded JSON into a RuleDocument.

    Raises:
        RulesParseError: If the top level is not an object with a
            `skills` object
    """
    if not isinstance(data, dict):
        raise RulesParseError(path, "top level is not an object")
    if "skills" not in data:
        raise RulesParseError(path, "missing 'skills'")
    skills = data["skills"]
    if not isinstance(skills, dict):
        raise RulesParseError(path, "'skills' is not an object")

    document = RuleDocument(version=str(data.get("version", "")), skills={},
                            path=path)
    for name, rule_data in skills.items():
        rule = parse_rule(name, rule_data, log)
        if rule is None:
            document.skipped.append(name)
        else:
            document.skills[name] = rule
    return document


def load_rules(candidates: List[Path],
               log: logging.Logger) -> Optional[RuleDocument]:
    """
    Load the first rules file found among the candidates.

    Returns:
        The parsed document, or None when no candidate exists

    Raises:
        RulesParseError: If the first existing file is unreadable or
            malformed. Later candidates are not tried.
    """
    path = find_rules_file(candidates)
    if path is None:
        log.debug("no rules file in %s", [str(c) for c in candidates])
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise RulesParseError(path, f"invalid JSON: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise RulesParseError(path, f"cannot read: {e}") from e

    document = parse_rules(data, path, log)
    log.debug("loaded %d rules from %s (%d skipped)", len(document.skills),
              path, len(document.skipped))
    return document
