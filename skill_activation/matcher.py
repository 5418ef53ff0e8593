"""Matching a prompt against skill rule triggers."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Pattern, Tuple

from skill_activation.rules import RuleDocument, SkillRule

KEYWORD = "keyword"
INTENT = "intent"


@dataclass
class MatchRecord:
    """A rule that matched the prompt."""

    name: str
    match_kind: str  # KEYWORD or INTENT
    rule: SkillRule
    trigger: str  # the keyword or pattern that hit
    source_path: Optional[Path] = None
    content: Optional[str] = None

    @property
    def priority(self) -> str:
        return self.rule.priority


def compile_patterns(patterns: List[str], log: logging.Logger,
                     rule_name: str = "") -> List[Tuple[str, Optional[Pattern]]]:
    """
    Compile intent patterns case-insensitively.

    Returns:
        (source, compiled) pairs; compiled is None for a pattern that
        failed to compile
    """
    compiled = []
    for source in patterns:
        try:
            compiled.append((source, re.compile(source, re.IGNORECASE)))
        except re.error as e:
            log.debug("rule %s: bad intent pattern %r: %s", rule_name, source, e)
            compiled.append((source, None))
    return compiled


def match_rule(prompt: str, rule: SkillRule,
               log: logging.Logger) -> Optional[MatchRecord]:
    """Check one rule; keywords are tried before intent patterns."""
    if not rule.has_triggers:
        return None

    for keyword in rule.keywords:
        if keyword.lower() in prompt:
            return MatchRecord(rule.name, KEYWORD, rule, keyword)

    for source, pattern in compile_patterns(rule.intent_patterns, log,
                                            rule.name):
        if pattern is not None and pattern.search(prompt):
            return MatchRecord(rule.name, INTENT, rule, source)
    return None


def match_prompt(prompt: str, document: RuleDocument,
                 log: logging.Logger) -> List[MatchRecord]:
    """
    Match a prompt against every rule in the document.

    Args:
        prompt: User prompt; lower-cased here
        document: Loaded rules (invalid rules already removed)
        log: Debug logger

    Returns:
        One record per matching rule, in document order
    """
    prompt = prompt.strip().lower()
    if not prompt:
        return []

    matches = []
    for rule in document.skills.values():
        record = match_rule(prompt, rule, log)
        if record is not None:
            log.debug("matched %s (%s: %r)", record.name, record.match_kind,
                      record.trigger)
            matches.append(record)
    return matches
