"""Skill descriptor commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from harness_locate.cli.common import fail, render_issues, resolve_harness
from harness_locate.harness import Harness
from harness_locate.validation import has_errors

skills_app = typer.Typer(name="skills", help="Check skill descriptors")

SKILL_FILE = "SKILL.md"


@skills_app.command("validate")
def skills_validate(
    directory: Annotated[
        Path, typer.Argument(help="Skill directory containing SKILL.md", metavar="DIR")
    ],
    harness_name: Annotated[
        str | None, typer.Option("--harness", help="Harness to validate against")
    ] = None,
) -> None:
    """Validate DIR/SKILL.md for a harness.

    Exits with code 1 when any error-severity issue is found.
    """
    harness = Harness(resolve_harness(harness_name))
    skill_file = directory / SKILL_FILE
    if not skill_file.is_file():
        fail(f"{SKILL_FILE} not found in {directory}")

    content = skill_file.read_text(encoding="utf-8")
    issues = harness.validate_skill(content, directory.resolve().name)
    render_issues(f"{directory.name} ({harness.display_name})", issues)
    if has_errors(issues):
        raise typer.Exit(code=1)
