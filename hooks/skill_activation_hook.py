#!/usr/bin/env python3
"""
Skill Auto-Activation Hook for Claude Code

Register as a UserPromptSubmit hook in ~/.claude/settings.json:

    {"type": "command", "command": "python3 /path/to/skill_activation_hook.py"}

Works from a checkout without installing the package.
"""
import os
import sys

# Make the package importable from a source checkout
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from skill_activation.hook import main


if __name__ == "__main__":
    main()
