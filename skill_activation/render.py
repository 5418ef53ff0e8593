"""Formatting a Selection as the text digest printed by the hook."""

from skill_activation.selector import Selection

RULE_WIDTH = 56
MAX_TITLE_CHARS = 48


def _title(name: str) -> str:
    title = name.upper()
    if len(title) > MAX_TITLE_CHARS:
        title = title[:MAX_TITLE_CHARS - 3] + "..."
    return title


def render(selection: Selection) -> str:
    """
    Build the digest, or '' if there is nothing to show.

    Sections, each omitted when empty: injected skills with their content,
    critical/high skills over the injection cap (with their path), and
    medium/low skills by name.
    """
    if selection.is_empty:
        return ""

    line = "=" * RULE_WIDTH
    lines = [line, "SKILL ACTIVATION CHECK", line, ""]

    for match in selection.injected:
        lines.append(f">>> SKILL: {_title(match.name)} "
                     f"[{match.priority.upper()}]")
        lines.append(f"Source: {match.source_path}")
        lines.append("")
        lines.append(match.content or "(content unavailable)")
        lines.append("-" * RULE_WIDTH)
        lines.append("")

    if selection.additional:
        lines.append("ADDITIONAL HIGH-PRIORITY SKILLS (not injected):")
        for match in selection.additional:
            if match.source_path is not None:
                lines.append(f"  - {match.name}: {match.source_path}")
            else:
                lines.append(f"  - {match.name} ({match.priority})")
        lines.append("")

    if selection.optional:
        lines.append("OPTIONAL REFERENCE SKILLS:")
        for match in selection.optional:
            lines.append(f"  - {match.name} ({match.priority})")
        lines.append("")

    lines.append("ACTION: Apply the injected skills; use the Skill tool "
                 "for any listed skill that fits")
    lines.append(line)
    return "\n".join(lines) + "\n"
