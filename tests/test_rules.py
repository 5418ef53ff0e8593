"""Tests for loading skill-rules.json."""

import json
from pathlib import Path

import pytest

from skill_activation.debug_log import file_logger
from skill_activation.rules import (
    RulesParseError,
    find_rules_file,
    load_rules,
    parse_rules,
    rule_candidates,
)


class TestRuleCandidates:
    """Tests for the rules file search order."""

    def test_search_order(self, tmp_path):
        """Project locations come before user-global ones."""
        home = tmp_path / "home"
        candidates = rule_candidates(str(tmp_path / "proj"), home)
        assert candidates == [
            tmp_path / "proj" / ".claude" / "skill-rules.json",
            tmp_path / "proj" / ".claude" / "skills" / "skill-rules.json",
            home / ".claude" / "skills" / "skill-rules.json",
            home / ".claude" / "skill-rules.json",
        ]

    def test_no_project_dir(self, tmp_path):
        """Without a project dir only the home locations are searched."""
        candidates = rule_candidates("", tmp_path)
        assert candidates == [
            tmp_path / ".claude" / "skills" / "skill-rules.json",
            tmp_path / ".claude" / "skill-rules.json",
        ]

    def test_explicit_file_first(self, tmp_path):
        """A configured rules file is tried before everything else."""
        explicit = tmp_path / "custom.json"
        candidates = rule_candidates(str(tmp_path), tmp_path, explicit)
        assert candidates[0] == explicit
        assert len(candidates) == 5


class TestLoadRules:
    """Tests for load_rules."""

    def test_no_file_returns_none(self, tmp_path, log):
        """Missing rules files are not an error."""
        assert load_rules(rule_candidates(str(tmp_path), tmp_path), log) is None

    def test_project_file_wins(self, tmp_path, log, write_rules, rule):
        """The project rules file shadows the user-global one."""
        home = tmp_path / "home"
        project = tmp_path / "proj"
        write_rules(home / ".claude" / "skill-rules.json",
                    {"global-skill": rule(keywords=["x"])})
        write_rules(project / ".claude" / "skills" / "skill-rules.json",
                    {"project-skill": rule(keywords=["x"])})

        document = load_rules(rule_candidates(str(project), home), log)
        assert list(document.skills) == ["project-skill"]
        assert document.path == project / ".claude" / "skills" / "skill-rules.json"

    def test_malformed_file_no_fallback(self, tmp_path, log, write_rules, rule):
        """An unparsable file is fatal even if a later candidate is valid."""
        home = tmp_path / "home"
        project = tmp_path / "proj"
        bad = project / ".claude" / "skill-rules.json"
        bad.parent.mkdir(parents=True)
        bad.write_text("{not json")
        write_rules(home / ".claude" / "skill-rules.json",
                    {"global-skill": rule(keywords=["x"])})

        with pytest.raises(RulesParseError) as exc_info:
            load_rules(rule_candidates(str(project), home), log)
        assert exc_info.value.path == bad

    def test_top_level_must_be_object(self, tmp_path, log):
        """A JSON array is not a rules document."""
        path = tmp_path / "skill-rules.json"
        path.write_text("[]")
        with pytest.raises(RulesParseError):
            load_rules([path], log)

    def test_skills_must_be_object(self, tmp_path, log):
        """`skills` has to be a mapping."""
        path = tmp_path / "skill-rules.json"
        path.write_text(json.dumps({"version": "1", "skills": ["a"]}))
        with pytest.raises(RulesParseError):
            load_rules([path], log)

    def test_skills_key_required(self, tmp_path, log):
        """A document without `skills` is malformed."""
        path = tmp_path / "skill-rules.json"
        path.write_text(json.dumps({"version": "1"}))
        with pytest.raises(RulesParseError) as exc_info:
            load_rules([path], log)
        assert exc_info.value.reason == "missing 'skills'"

    def test_directory_is_not_a_rules_file(self, tmp_path):
        """A directory with the rules file name is skipped."""
        (tmp_path / "skill-rules.json").mkdir()
        assert find_rules_file([tmp_path / "skill-rules.json"]) is None


class TestParseRules:
    """Tests for rule validation."""

    def test_fields(self, log, rule):
        """Rule fields are read from the JSON entry."""
        document = parse_rules(
            {"version": "2", "skills": {
                "sec": rule("critical", ["auth"], ["log.?in"], type="guardrail",
                            enforcement="block", description="Security"),
            }},
            None, log,
        )
        sec = document.skills["sec"]
        assert document.version == "2"
        assert sec.kind == "guardrail"
        assert sec.enforcement == "block"
        assert sec.priority == "critical"
        assert sec.keywords == ["auth"]
        assert sec.intent_patterns == ["log.?in"]
        assert sec.description == "Security"
        assert sec.has_triggers

    def test_invalid_priority_skipped(self, log, rule):
        """Rules with an unknown priority are dropped, others kept."""
        document = parse_rules(
            {"skills": {"urgent": rule("urgent", ["deploy"]),
                        "ok": rule("low", ["deploy"])}},
            None, log,
        )
        assert list(document.skills) == ["ok"]
        assert document.skipped == ["urgent"]

    @pytest.mark.parametrize("priority", [["high"], {"level": "high"}, 1])
    def test_non_string_priority_skipped(self, log, rule, priority):
        """A priority that is not a string is invalid, not an error."""
        weird = rule(keywords=["deploy"])
        weird["priority"] = priority
        document = parse_rules(
            {"skills": {"weird": weird, "ok": rule("high", ["deploy"])}},
            None, log,
        )
        assert list(document.skills) == ["ok"]
        assert document.skipped == ["weird"]

    def test_missing_priority_skipped(self, log):
        """A rule without a priority is invalid."""
        document = parse_rules(
            {"skills": {"p": {"promptTriggers": {"keywords": ["a"]}}}}, None, log
        )
        assert document.skills == {}
        assert document.skipped == ["p"]

    def test_invalid_priority_logged(self, tmp_path, rule):
        """The skip is written to the debug log."""
        logger = file_logger(tmp_path)
        parse_rules({"skills": {"urgent": rule("urgent", ["deploy"])}}, None, logger)
        for handler in logger.handlers:
            handler.flush()
        text = (tmp_path / "skill-activation.log").read_text()
        assert "urgent" in text
        assert "invalid priority" in text

    def test_no_triggers(self, log):
        """A rule without promptTriggers is kept but marked as never matching."""
        document = parse_rules({"skills": {"p": {"priority": "high"}}}, None, log)
        assert document.skills["p"].has_triggers is False

    def test_bad_trigger_entries_dropped(self, log, rule):
        """Non-string and empty keywords are ignored."""
        document = parse_rules(
            {"skills": {"p": rule(keywords=["ok", "", 3, None])}}, None, log
        )
        assert document.skills["p"].keywords == ["ok"]

    def test_document_order_kept(self, log, rule):
        """Rules keep the order of the JSON document."""
        names = ["zeta", "alpha", "mid"]
        document = parse_rules(
            {"skills": {n: rule(keywords=[n]) for n in names}}, Path("x"), log
        )
        assert list(document.skills) == names
