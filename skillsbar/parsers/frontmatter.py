"""Frontmatter parsing for SKILL.md and agent markdown files.

Handles the YAML subset these files use in practice:
- ``key: value`` scalars, with one layer of matching quotes stripped
- block scalars (``|``, ``>`` and their chomping variants), space-joined
- one level of nested objects (``metadata:`` followed by indented children)
- block sequences (``- item``) under an empty-valued key
- inline arrays (``[a, b]``) and comma-separated lists via ``parse_string_array``

Parsing never raises. Missing or unclosed frontmatter falls back to the
provided name and a description taken from the first body paragraph.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from skillsbar.models.skill import SkillMetadata

FRONTMATTER_DELIMITER = "---"
BLOCK_SCALAR_INDICATORS = frozenset({"|", ">", "|-", ">-", "|+", ">+"})
DESCRIPTION_MAX_LENGTH = 200
ELLIPSIS = "..."

_TRUE_VALUES = frozenset({"true", "yes", "1"})
_FALSE_VALUES = frozenset({"false", "no", "0"})


@dataclass
class Frontmatter:
    """Raw key/value pairs from a frontmatter block."""

    values: Dict[str, str] = field(default_factory=dict)
    nested: Dict[str, Dict[str, str]] = field(default_factory=dict)
    sequences: Dict[str, List[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class SkillParseResult:
    name: str
    description: str
    metadata: SkillMetadata


@dataclass(frozen=True)
class AgentParseResult:
    name: str
    description: str
    model: Optional[str] = None
    tools: List[str] = field(default_factory=list)


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


class _FrontmatterParser:
    """Line-oriented state machine over the lines between the delimiters."""

    def __init__(self) -> None:
        self.result = Frontmatter()
        # Open block scalar
        self._block_key: Optional[str] = None
        self._block_lines: List[str] = []
        self._block_indent: Optional[int] = None
        # Open nested object (or sequence)
        self._object_key: Optional[str] = None
        self._object_indent: Optional[int] = None

    def parse(self, lines: List[str]) -> Frontmatter:
        for line in lines:
            self._feed(line)
        self._close_object()
        return self.result

    def _store(self, key: str, value: str) -> None:
        if self._object_key is not None:
            self.result.nested.setdefault(self._object_key, {})[key] = value
        else:
            self.result.values[key] = value

    def _close_block(self) -> None:
        if self._block_key is not None:
            value = " ".join(self._block_lines).strip()
            if value:
                self._store(self._block_key, value)
        self._block_key = None
        self._block_lines = []
        self._block_indent = None

    def _close_object(self) -> None:
        self._close_block()
        self._object_key = None
        self._object_indent = None

    def _feed(self, line: str) -> None:
        stripped = line.strip()
        indent = _indent_of(line)

        # A shallower non-empty line ends the nested object
        if self._object_key is not None and stripped:
            if self._object_indent is None:
                if indent == 0:
                    self._close_object()
            elif indent < self._object_indent:
                self._close_object()

        if self._block_key is not None:
            if not stripped:
                return
            if self._block_indent is None and indent > 0:
                self._block_indent = indent
            if self._block_indent is not None and indent >= self._block_indent:
                self._block_lines.append(line[self._block_indent :].strip())
                return
            # Less indented: the block ends and this line is a new key
            self._close_block()

        if not stripped or stripped.startswith("#"):
            return

        if stripped == "-" or stripped.startswith("- "):
            if self._object_key is not None and indent > 0:
                if self._object_indent is None:
                    self._object_indent = indent
                item = _unquote(stripped[1:].strip())
                if item:
                    self.result.sequences.setdefault(self._object_key, []).append(item)
            return

        colon = stripped.find(":")
        if colon <= 0:
            return

        key = stripped[:colon].strip()
        value = stripped[colon + 1 :].strip()

        if self._object_key is not None and self._object_indent is None and indent > 0:
            self._object_indent = indent

        if value in BLOCK_SCALAR_INDICATORS:
            self._block_key = key
            return

        if not value:
            # Only one level of nesting; deeper objects are ignored
            if self._object_key is None:
                self._object_key = key
                self._object_indent = None
            return

        self._store(key, _unquote(value))


def parse_frontmatter(lines: List[str]) -> Frontmatter:
    """Parse the lines between the ``---`` delimiters."""
    return _FrontmatterParser().parse(lines)


def split_frontmatter(content: str) -> tuple[Optional[List[str]], str]:
    """Split content into (frontmatter_lines, body).

    Returns (None, content) when the first line is not ``---`` or the block
    is never closed.
    """
    lines = content.splitlines()
    if not lines or lines[0].lstrip("﻿").strip() != FRONTMATTER_DELIMITER:
        return None, content

    for index in range(1, len(lines)):
        if lines[index].strip() == FRONTMATTER_DELIMITER:
            return lines[1:index], "\n".join(lines[index + 1 :])

    return None, content


def extract_description(content: str) -> str:
    """First paragraph of markdown text, skipping leading headers.

    Truncated to ``DESCRIPTION_MAX_LENGTH`` characters including the ellipsis.
    """
    description = ""

    for line in content.splitlines():
        trimmed = line.strip()

        if not description and not trimmed:
            continue

        if trimmed.startswith("#"):
            if not description:
                continue
            break

        if description and not trimmed:
            break

        description = f"{description} {trimmed}" if description else trimmed

    if len(description) > DESCRIPTION_MAX_LENGTH:
        cut = description[: DESCRIPTION_MAX_LENGTH - len(ELLIPSIS)].rstrip()
        description = cut + ELLIPSIS

    return description


def parse_bool(value: Optional[str]) -> Optional[bool]:
    """Coerce yes/no style strings; anything unrecognised is None."""
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def parse_string_array(value: Optional[str]) -> Optional[List[str]]:
    """Parse ``[a, "b"]`` or ``a, b`` into a list of strings."""
    if not value:
        return None

    text = value.strip()
    if text.startswith("[") and text.endswith("]"):
        items = [_unquote(part.strip()).strip() for part in text[1:-1].split(",")]
    else:
        items = [part.strip() for part in text.split(",")]

    return [item for item in items if item]


def _first_value(frontmatter: Frontmatter, *keys: str) -> Optional[str]:
    for key in keys:
        if key in frontmatter.values:
            return frontmatter.values[key]
    return None


def _string_list(frontmatter: Frontmatter, *keys: str) -> Optional[List[str]]:
    inline = parse_string_array(_first_value(frontmatter, *keys))
    if inline is not None:
        return inline
    for key in keys:
        if key in frontmatter.sequences:
            return list(frontmatter.sequences[key])
    return None


def parse_skill_md(content: str, fallback_name: str) -> SkillParseResult:
    """Parse SKILL.md content."""
    lines, body = split_frontmatter(content)
    if lines is None:
        return SkillParseResult(
            name=fallback_name,
            description=extract_description(content),
            metadata=SkillMetadata(),
        )

    frontmatter = parse_frontmatter(lines)
    values = frontmatter.values

    custom_metadata = dict(frontmatter.nested.get("metadata", {}))
    # Older skills put author/version at the top level
    for key in ("author", "version"):
        if key not in custom_metadata and key in values:
            custom_metadata[key] = values[key]

    disable_model_invocation = parse_bool(
        _first_value(frontmatter, "disable-model-invocation", "disable_model_invocation")
    )
    user_invocable = parse_bool(
        _first_value(frontmatter, "user-invocable", "user_invocable")
    )

    metadata = SkillMetadata(
        license=values.get("license"),
        compatibility=values.get("compatibility"),
        custom_metadata=custom_metadata or None,
        allowed_tools=_string_list(frontmatter, "allowed-tools", "allowed_tools"),
        argument_hint=_first_value(frontmatter, "argument-hint", "argument_hint"),
        disable_model_invocation=(
            disable_model_invocation if disable_model_invocation is not None else False
        ),
        user_invocable=user_invocable if user_invocable is not None else True,
    )

    return SkillParseResult(
        name=values.get("name") or fallback_name,
        description=values.get("description") or extract_description(body),
        metadata=metadata,
    )


def parse_agent_md(content: str, fallback_name: str) -> AgentParseResult:
    """Parse an agent profile markdown file."""
    lines, body = split_frontmatter(content)
    if lines is None:
        return AgentParseResult(
            name=fallback_name, description=extract_description(content)
        )

    frontmatter = parse_frontmatter(lines)
    values = frontmatter.values

    return AgentParseResult(
        name=values.get("name") or fallback_name,
        description=values.get("description") or extract_description(body),
        model=values.get("model"),
        tools=_string_list(frontmatter, "tools") or [],
    )


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def parse_skill_file(skill_file: Path) -> SkillParseResult:
    """Parse a SKILL.md file; the fallback name is its directory name.

    Raises:
        OSError: if the file cannot be read
    """
    return parse_skill_md(_read_text(skill_file), fallback_name=skill_file.parent.name)


def parse_agent_file(agent_file: Path) -> AgentParseResult:
    """Parse an agent .md file; the fallback name is the file stem.

    Raises:
        OSError: if the file cannot be read
    """
    return parse_agent_md(_read_text(agent_file), fallback_name=agent_file.stem)
