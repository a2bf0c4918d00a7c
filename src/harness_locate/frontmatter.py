"""Parsing for markdown descriptors (SKILL.md, agent files) with YAML frontmatter."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

import yaml

from harness_locate.errors import FrontmatterError, MissingFieldError

# Opening fence, optional YAML block, closing fence followed by a newline or EOF.
_FRONTMATTER_RE = re.compile(
    r"\A---(?P<nl>\r?\n)(?:(?P<yaml>.*?)(?P=nl))??---(?:(?P=nl)|\Z)", re.DOTALL
)

_SKILL_FIELDS = {"name", "description", "triggers"}


@dataclass(frozen=True)
class Frontmatter:
    """A descriptor split into its YAML header and markdown body.

    ``yaml`` is None when the content has no frontmatter fence, and an empty
    dict when the fence is present but empty.
    """

    yaml: dict[str, Any] | None
    body: str


@dataclass
class Skill:
    """A skill descriptor read from SKILL.md."""

    name: str
    description: str | None = None
    triggers: list[str] = field(default_factory=list)
    body: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_markdown(self) -> str:
        """Render the skill back to SKILL.md form."""
        header: dict[str, Any] = {"name": self.name}
        if self.description is not None:
            header["description"] = self.description
        if self.triggers:
            header["triggers"] = list(self.triggers)
        header.update(self.metadata)
        rendered = yaml.safe_dump(header, sort_keys=False, allow_unicode=True).rstrip()
        return f"---\n{rendered}\n---\n{self.body}"


def parse_frontmatter(content: str) -> Frontmatter:
    """
    Split ``content`` into frontmatter and body.

    Both LF and CRLF line endings are accepted. Content that does not start
    with a ``---`` fence, or whose fence is never closed, is returned whole as
    the body.

    Raises:
        FrontmatterError: If the fenced block is not a YAML mapping.
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return Frontmatter(yaml=None, body=content)

    try:
        data = yaml.safe_load(match.group("yaml") or "")
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid YAML frontmatter: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError("YAML frontmatter must be a mapping")

    return Frontmatter(yaml=data, body=content[match.end() :])


def parse_skill(content: str) -> Skill:
    """
    Parse SKILL.md content into a Skill.

    Raises:
        MissingFieldError: If there is no frontmatter or it has no ``name``.
        FrontmatterError: If the frontmatter is not valid YAML.
    """
    frontmatter = parse_frontmatter(content)
    if frontmatter.yaml is None or "name" not in frontmatter.yaml:
        raise MissingFieldError("name")

    data = frontmatter.yaml
    description = data.get("description")
    triggers = data.get("triggers") or []
    if isinstance(triggers, str):
        triggers = [triggers]

    return Skill(
        name=str(data["name"]),
        description=str(description) if description is not None else None,
        triggers=[str(trigger) for trigger in triggers],
        body=frontmatter.body,
        metadata={k: v for k, v in data.items() if k not in _SKILL_FIELDS},
    )
