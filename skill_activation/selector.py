"""Ranking matches and deciding which skills get their content injected."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from skill_activation.content import DEFAULT_MAX_CHARS, load_content
from skill_activation.matcher import MatchRecord
from skill_activation.rules import INJECTABLE_PRIORITIES

DEFAULT_MAX_INJECTED = 3


@dataclass
class Selection:
    """What the renderer shows."""

    injected: List[MatchRecord] = field(default_factory=list)
    additional: List[MatchRecord] = field(default_factory=list)
    optional: List[MatchRecord] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.injected or self.additional or self.optional)


def by_priority(matches: List[MatchRecord]) -> List[MatchRecord]:
    """Stable sort, critical first; ties keep match order."""
    return sorted(matches, key=lambda m: m.rule.rank)


def select(matches: List[MatchRecord], sources: Optional[Dict[str, Path]],
           log: logging.Logger, max_injected: int = DEFAULT_MAX_INJECTED,
           max_chars: int = DEFAULT_MAX_CHARS) -> Selection:
    """
    Partition matches into injected / additional / optional.

    Args:
        matches: Matcher output, in rule order
        sources: Skill name -> SKILL.md. None means no content roots are
            configured: nothing is injected and every match is listed by
            name only.
        log: Debug logger
        max_injected: How many critical/high skills get content
        max_chars: Character budget per injected skill

    Returns:
        The selection; `is_empty` when there is nothing to render
    """
    selection = Selection()
    max_injected = max(0, max_injected)

    if sources is None:
        ranked = by_priority(matches)
        selection.additional = [m for m in ranked
                                if m.priority in INJECTABLE_PRIORITIES]
        selection.optional = [m for m in ranked
                              if m.priority not in INJECTABLE_PRIORITIES]
        return selection

    resolved = []
    for match in matches:
        match.source_path = sources.get(match.name)
        if match.source_path is None:
            log.debug("no SKILL.md found for %s", match.name)
            selection.unresolved.append(match.name)
        else:
            resolved.append(match)

    ranked = by_priority(resolved)
    important = [m for m in ranked if m.priority in INJECTABLE_PRIORITIES]
    selection.optional = [m for m in ranked
                          if m.priority not in INJECTABLE_PRIORITIES]

    for match in important[:max_injected]:
        match.content = load_content(match.source_path, max_chars, log)
        selection.injected.append(match)
    selection.additional = important[max_injected:]
    return selection
