#!/usr/bin/env python3
"""
skill-activation - CLI for the skill activation hook.

Subcommands:
    skill-activation hook      - Run as a UserPromptSubmit hook (reads stdin)
    skill-activation match     - Show the digest a prompt would produce
    skill-activation rules     - List the rules that would be used
    skill-activation skills    - List discovered SKILL.md files
"""

import os
from pathlib import Path

import click
from rich import box
from rich.console import Console
from rich.table import Table

from skill_activation import __version__, config
from skill_activation.content import read_frontmatter
from skill_activation.debug_log import get_debug_logger
from skill_activation.discovery import discover_skill_sources, existing_roots
from skill_activation.hook import HookSettings, main as hook_main, run
from skill_activation.rules import RulesParseError, load_rules


def _settings(project_dir, rules_path) -> HookSettings:
    settings = HookSettings.from_environment({"cwd": os.getcwd()},
                                             project_dir=project_dir)
    if rules_path:
        settings.rules_candidates = [Path(rules_path)]
    return settings


def _load_document(settings: HookSettings):
    try:
        return load_rules(settings.rules_candidates, get_debug_logger())
    except RulesParseError as e:
        raise click.ClickException(f"malformed rules file {e}")


project_dir_option = click.option(
    "--project-dir", "-d", type=click.Path(file_okay=False),
    help="Project directory (default: current directory)")
rules_option = click.option(
    "--rules", "-r", "rules_path", type=click.Path(dir_okay=False),
    help="Use this rules file instead of searching for one")


@click.group()
@click.version_option(__version__)
def main():
    """
    Suggest and inject Claude Code skills based on the prompt.

    Install `skill-activation hook` as a UserPromptSubmit hook; the other
    subcommands help with writing skill-rules.json.
    """


@main.command()
def hook():
    """Run the hook: JSON on stdin, digest on stdout."""
    hook_main()


@main.command()
@click.argument("prompt")
@project_dir_option
@rules_option
def match(prompt, project_dir, rules_path):
    """Print the digest PROMPT would produce."""
    settings = _settings(project_dir, rules_path)
    try:
        output = run({"prompt": prompt}, settings, get_debug_logger())
    except RulesParseError as e:
        raise click.ClickException(f"malformed rules file {e}")
    if output:
        click.echo(output, nl=False)
    else:
        click.echo("No skills matched.", err=True)


@main.command()
@project_dir_option
@rules_option
def rules(project_dir, rules_path):
    """List the rules from the first rules file found."""
    settings = _settings(project_dir, rules_path)
    document = _load_document(settings)
    console = Console()
    if document is None:
        console.print("[yellow]No rules file found. Searched:[/yellow]")
        for candidate in settings.rules_candidates:
            console.print(f"  {candidate}")
        return

    table = Table(title=f"Skill rules ({document.path})", box=box.ROUNDED)
    table.add_column("Skill", style="cyan")
    table.add_column("Type")
    table.add_column("Enforcement")
    table.add_column("Priority", style="magenta")
    table.add_column("Keywords", justify="right")
    table.add_column("Patterns", justify="right")
    for rule in document.skills.values():
        table.add_row(
            rule.name,
            rule.kind,
            rule.enforcement,
            rule.priority,
            str(len(rule.keywords)),
            str(len(rule.intent_patterns)),
        )
    console.print(table)

    if document.skipped:
        console.print(
            f"[red]Skipped (invalid priority):[/red] {', '.join(document.skipped)}"
        )


@main.command()
@project_dir_option
def skills(project_dir):
    """List SKILL.md files found under the content roots."""
    settings = _settings(project_dir, None)
    roots = existing_roots(settings.content_roots)
    sources = discover_skill_sources(roots, get_debug_logger(),
                                     config.active_path_marker())
    console = Console()
    if not sources:
        console.print("[yellow]No SKILL.md files found.[/yellow]")
        return

    table = Table(title="Discovered skills", box=box.ROUNDED)
    table.add_column("Skill", style="cyan", no_wrap=True)
    table.add_column("Description", no_wrap=True)
    table.add_column("Path", style="dim", overflow="fold")
    for name in sorted(sources):
        metadata = read_frontmatter(sources[name])
        table.add_row(name, str(metadata.get("description", "")),
                      str(sources[name]))
    console.print(table)


if __name__ == "__main__":
    main()
