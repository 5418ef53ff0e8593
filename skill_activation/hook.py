#!/usr/bin/env python3
"""
UserPromptSubmit hook: suggest and inject skills relevant to the prompt.

Input (stdin): JSON from Claude Code with prompt, cwd, session_id
Output (stdout): plain-text digest added to the assistant's context

The hook never blocks a prompt. Every path exits 0 except a rules file
that exists but cannot be parsed, which exits 1 (a non-blocking error).
"""

import json
import logging
import os
import select
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from skill_activation import config
from skill_activation.debug_log import get_debug_logger, null_logger
from skill_activation.discovery import (
    default_content_roots,
    discover_skill_sources,
    existing_roots,
)
from skill_activation.matcher import match_prompt
from skill_activation.render import render
from skill_activation.rules import RulesParseError, load_rules, rule_candidates
from skill_activation.selector import select as select_skills


@dataclass
class HookSettings:
    """Everything the pipeline needs besides the prompt."""

    rules_candidates: List[Path]
    content_roots: List[Path] = field(default_factory=list)
    active_marker: str = "cache"
    max_injected: int = 3
    max_chars: int = 8000

    @classmethod
    def from_environment(cls, payload: Dict[str, Any],
                         home: Optional[Path] = None,
                         project_dir: Optional[str] = None) -> "HookSettings":
        """Settings for a hook run, from config, env and the payload cwd."""
        project_dir = (project_dir or os.environ.get("CLAUDE_PROJECT_DIR")
                       or payload.get("cwd") or "")
        if not isinstance(project_dir, str):
            project_dir = ""
        return cls(
            rules_candidates=rule_candidates(project_dir, home,
                                             config.rules_file()),
            content_roots=default_content_roots(project_dir, home,
                                                config.content_roots()),
            active_marker=config.active_path_marker(),
            max_injected=config.max_injected_skills(),
            max_chars=config.max_content_chars(),
        )


def read_hook_input(stream: Optional[TextIO] = None, timeout: float = 2.0) -> Dict[str, Any]:
    """
    Read the hook's JSON payload without hanging.

    Waits up to `timeout` seconds for data, then drains what is buffered.
    A timeout, empty input or anything that is not a JSON object gives {}.
    """
    stream = stream if stream is not None else sys.stdin
    try:
        fd = stream.fileno()
    except (AttributeError, OSError, ValueError):
        fd = None

    if fd is None:
        raw = stream.read()
    else:
        chunks: List[bytes] = []
        remaining = timeout
        try:
            while remaining > 0:
                ready, _, _ = select.select([fd], [], [], remaining)
                if not ready:
                    break
                chunk = os.read(fd, 65536)
                if not chunk:
                    break
                chunks.append(chunk)
                # Claude Code may not send EOF; drain what is buffered and stop
                remaining = 0.1
        except OSError:
            # select() does not support this stream (e.g. Windows pipes)
            if not chunks:
                return _parse_payload(stream.read())
        raw = b"".join(chunks).decode("utf-8", errors="replace")

    return _parse_payload(raw)


def _parse_payload(raw: str) -> Dict[str, Any]:
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def run(payload: Dict[str, Any], settings: HookSettings,
        log: logging.Logger) -> str:
    """
    Produce the digest for one prompt.

    Returns:
        The digest text, or '' when nothing applies

    Raises:
        RulesParseError: If the rules file exists but is malformed
    """
    prompt = payload.get("prompt")
    if not isinstance(prompt, str) or not prompt.strip():
        return ""

    document = load_rules(settings.rules_candidates, log)
    if document is None:
        return ""

    matches = match_prompt(prompt, document, log)
    if not matches:
        return ""

    roots = existing_roots(settings.content_roots)
    if roots:
        sources = discover_skill_sources(roots, log, settings.active_marker)
    else:
        log.debug("no content roots on disk, listing skills by name only")
        sources = None

    selection = select_skills(matches, sources, log,
                              max_injected=settings.max_injected,
                              max_chars=settings.max_chars)
    return render(selection)


def write_output(output: str, stream: Optional[TextIO] = None):
    """Write the digest as UTF-8, whatever the stream's own encoding."""
    stream = stream if stream is not None else sys.stdout
    buffer = getattr(stream, "buffer", None)
    if buffer is not None:
        stream.flush()
        buffer.write(output.encode("utf-8"))
        buffer.flush()
    else:
        stream.write(output)
        stream.flush()


def main():
    """Main hook execution"""
    log = null_logger()
    try:
        log = get_debug_logger()
        payload = read_hook_input(sys.stdin, config.stdin_timeout())
        log.debug("hook invoked (session %s)", payload.get("session_id", "unknown"))
        output = run(payload, HookSettings.from_environment(payload), log)
    except RulesParseError as e:
        log.debug("malformed rules file: %s", e)
        print(f"skill-activation: malformed rules file {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        # Fail gracefully - never block prompts due to hook errors
        log.exception("unexpected error")
        print(f"skill-activation: {e}", file=sys.stderr)
        sys.exit(0)

    try:
        if output:
            write_output(output)
    except (OSError, UnicodeError, ValueError) as e:
        log.debug("cannot write digest: %s", e)
        # Keep the interpreter's final flush from failing on a closed pipe
        try:
            os.dup2(os.open(os.devnull, os.O_WRONLY), sys.stdout.fileno())
        except (OSError, ValueError):
            pass
    sys.exit(0)


if __name__ == "__main__":
    main()
