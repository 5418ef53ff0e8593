"""Skill activation hook for Claude Code prompts."""

__version__ = "0.1.0"
