"""Configuration model, input format detection and parsing."""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping

import yaml

_HEADER_RE = re.compile(r"^(#{1,6})\s+(.+)$", re.ASCII)
_UNORDERED_LIST_RE = re.compile(r"^[\s]*[-*+]\s+(.+)$", re.ASCII)
_ORDERED_LIST_RE = re.compile(r"^[\s]*(\d+)\.\s+(.+)$", re.ASCII)
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")

DEFAULT_MARKDOWN_TITLE = "Untitled Document"


class ConfigError(Exception):
    """Raised when a configuration cannot be read, parsed or validated."""


class FileFormat(IntEnum):
    """Supported input formats."""

    TOML = 0
    YAML = 1
    MARKDOWN = 2


class PriorityType(IntEnum):
    """Kinds of merge priority, weakest first."""

    NONE = 0
    RELATIVE = 1
    EXPLICIT = 2

    @classmethod
    def parse(cls, text: str) -> PriorityType:
        """Read a priority type name, case-insensitively; empty means none."""
        match text.lower():
            case "explicit":
                return cls.EXPLICIT
            case "relative":
                return cls.RELATIVE
            case "none" | "":
                return cls.NONE
        raise ConfigError(f"unknown priority type: {text}")

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Priority:
    """Merge priority: explicit beats relative beats none."""

    type: PriorityType = PriorityType.NONE
    value: int = 0

    @classmethod
    def explicit(cls, value: int) -> Priority:
        return cls(PriorityType.EXPLICIT, value)

    @classmethod
    def relative(cls, value: int) -> Priority:
        return cls(PriorityType.RELATIVE, value)

    def takes_precedence_over(self, other: Priority) -> bool:
        """True if this priority strictly beats ``other``."""
        if self.type is PriorityType.EXPLICIT and other.type is not PriorityType.EXPLICIT:
            return True
        if other.type is PriorityType.EXPLICIT and self.type is not PriorityType.EXPLICIT:
            return False
        if self.type is other.type:
            return self.value > other.value
        return self.type is PriorityType.RELATIVE and other.type is PriorityType.NONE

    def takes_precedence_over_or_equal(self, other: Priority) -> bool:
        """True if this priority beats or ties ``other``; ties let later files win."""
        if self.type is PriorityType.EXPLICIT and other.type is not PriorityType.EXPLICIT:
            return True
        if other.type is PriorityType.EXPLICIT and self.type is not PriorityType.EXPLICIT:
            return False
        if self.type is other.type:
            return self.value >= other.value
        return self.type is PriorityType.RELATIVE and other.type is PriorityType.NONE

    def __str__(self) -> str:
        match self.type:
            case PriorityType.EXPLICIT:
                return f"explicit({self.value})"
            case PriorityType.RELATIVE:
                return f"relative({self.value})"
        return "none"


@dataclass
class Metadata:
    """Information about a configuration."""

    title: str = ""
    description: str = ""
    version: str = ""
    language: str = ""
    extends: str = ""
    priority: Priority = field(default_factory=Priority)


@dataclass
class Section:
    """A piece of content in the final document."""

    order: int = 0
    parent: str = ""
    merge_id: str = ""
    content: str = ""
    merge_points: list[str] = field(default_factory=list)
    priority: Priority = field(default_factory=Priority)


@dataclass
class MergePoint:
    """A place where content can be inserted."""

    placeholder: str = ""
    default: str = ""
    priority: Priority = field(default_factory=Priority)


@dataclass
class MergeTarget:
    """Content that fills a merge point."""

    strategy: str = ""
    content: str = ""
    priority: Priority = field(default_factory=Priority)


@dataclass
class Config:
    """A whole configuration file, whatever its input format."""

    metadata: Metadata = field(default_factory=Metadata)
    sections: dict[str, Section] = field(default_factory=dict)
    merge_points: dict[str, MergePoint] = field(default_factory=dict)
    merge_targets: dict[str, MergeTarget] = field(default_factory=dict)
    source_file: str = ""
    source_format: FileFormat = FileFormat.TOML


def detect_format(filename: str) -> FileFormat:
    """Determine the file format from the file name's extension."""
    lower = str(filename).lower()
    if lower.endswith(".toml"):
        return FileFormat.TOML
    if lower.endswith((".yaml", ".yml")):
        return FileFormat.YAML
    if lower.endswith((".md", ".markdown")):
        return FileFormat.MARKDOWN
    raise ConfigError(f"unsupported file format for {filename}")


def parse_config(data: bytes | str, format: FileFormat) -> Config:
    """Parse configuration data in the given format."""
    try:
        kind = FileFormat(format)
    except ValueError:
        raise ConfigError(f"unsupported format: {format}") from None

    if isinstance(data, (bytes, bytearray)):
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ConfigError(f"invalid UTF-8 data: {exc}") from exc
    else:
        text = data

    match kind:
        case FileFormat.TOML:
            try:
                config = _config_from_mapping(tomllib.loads(text), lenient=False)
            except (tomllib.TOMLDecodeError, ConfigError) as exc:
                raise ConfigError(f"TOML parse error: {exc}") from exc
        case FileFormat.YAML:
            try:
                config = _config_from_mapping(yaml.safe_load(text), lenient=True)
            except (yaml.YAMLError, ConfigError) as exc:
                raise ConfigError(f"YAML parse error: {exc}") from exc
        case FileFormat.MARKDOWN:
            try:
                config = _parse_markdown(text)
            except ConfigError as exc:
                raise ConfigError(f"Markdown parse error: {exc}") from exc

    config.source_format = kind
    return config


def _parse_markdown(content: str) -> Config:
    """Read optional YAML frontmatter; the body becomes one ``content`` section."""
    config = Config()
    if content.startswith("---"):
        parts = content.split("---", 2)
        if len(parts) < 3:
            return config
        try:
            frontmatter = yaml.safe_load(parts[1].strip())
        except yaml.YAMLError as exc:
            raise ConfigError(f"failed to parse frontmatter: {exc}") from exc
        if frontmatter is None:
            frontmatter = {}
        if not isinstance(frontmatter, Mapping):
            raise ConfigError(
                "failed to parse frontmatter: expected a mapping, "
                f"got {type(frontmatter).__name__}"
            )

        meta = config.metadata
        for key in ("title", "description", "version", "language"):
            value = frontmatter.get(key)
            if isinstance(value, str):
                setattr(meta, key, value)

        priority = frontmatter.get("priority")
        if isinstance(priority, Mapping):
            kind = priority.get("type")
            value = priority.get("value")
            if isinstance(kind, str) and isinstance(value, int) and not isinstance(value, bool):
                ptype = {
                    "explicit": PriorityType.EXPLICIT,
                    "relative": PriorityType.RELATIVE,
                }.get(kind.lower(), PriorityType.NONE)
                meta.priority = Priority(ptype, value)

        body = parts[2].strip()
        if body:
            config.sections["content"] = Section(order=1, content=body)
    else:
        config.sections["content"] = Section(order=1, content=content.strip())
        config.metadata.title = DEFAULT_MARKDOWN_TITLE
    return config


def parse_markdown_sections(content: str) -> dict[str, Section]:
    """Split markdown into sections at headers and list items."""
    sections: dict[str, Section] = {}
    current_section = ""
    current_content = ""
    order = 1

    def flush() -> None:
        nonlocal order
        if current_section and current_content:
            sections[current_section] = Section(order=order, content=current_content.strip())
            order += 1

    for raw_line in content.split("\n"):
        line = raw_line.strip()

        if header := _HEADER_RE.fullmatch(line):
            flush()
            level, title = len(header.group(1)), header.group(2)
            current_section = f"header_{level}_{sanitize_name(title)}"
            current_content = line
            continue

        if _UNORDERED_LIST_RE.fullmatch(line):
            flush()
            sections[f"list_{order}"] = Section(order=order, content=line)
            order += 1
            current_section = current_content = ""
            continue

        if ordered := _ORDERED_LIST_RE.fullmatch(line):
            flush()
            sections[f"ordered_list_{ordered.group(1)}"] = Section(order=order, content=line)
            order += 1
            current_section = current_content = ""
            continue

        if current_content:
            current_content += "\n" + line
        elif line:
            if not current_section:
                current_section = "content"
            current_content = line

    if current_section and current_content:
        sections[current_section] = Section(order=order, content=current_content.strip())
    return sections


def sanitize_name(title: str) -> str:
    """Turn a title into a lower-case, underscore-separated section name."""
    return _NON_ALNUM_RE.sub("_", title.lower()).strip("_")


def _table(value: Any, where: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"{where}: expected a table, got {type(value).__name__}")
    return value


def _text(value: Any, where: str, lenient: bool) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if lenient and isinstance(value, bool):
        return "true" if value else "false"
    if lenient and not isinstance(value, (Mapping, list)):
        return str(value)
    raise ConfigError(f"{where}: expected a string, got {type(value).__name__}")


def _integer(value: Any, where: str) -> int:
    if value is None:
        return 0
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise ConfigError(f"{where}: expected an integer, got {type(value).__name__}")


def _text_list(value: Any, where: str, lenient: bool) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"{where}: expected a list, got {type(value).__name__}")
    return [_text(item, f"{where}[{index}]", lenient) for index, item in enumerate(value)]


def _priority(value: Any, where: str, lenient: bool) -> Priority:
    table = _table(value, where)
    kind = PriorityType.parse(_text(table.get("type"), f"{where}.type", lenient))
    return Priority(kind, _integer(table.get("value"), f"{where}.value"))


def _metadata(value: Any, lenient: bool) -> Metadata:
    table = _table(value, "metadata")
    return Metadata(
        **{
            name: _text(table.get(name), f"metadata.{name}", lenient)
            for name in ("title", "description", "version", "language", "extends")
        },
        priority=_priority(table.get("priority"), "metadata.priority", lenient),
    )


def _section(value: Any, where: str, lenient: bool) -> Section:
    table = _table(value, where)
    return Section(
        order=_integer(table.get("order"), f"{where}.order"),
        parent=_text(table.get("parent"), f"{where}.parent", lenient),
        merge_id=_text(table.get("merge_id"), f"{where}.merge_id", lenient),
        content=_text(table.get("content"), f"{where}.content", lenient),
        merge_points=_text_list(table.get("merge_points"), f"{where}.merge_points", lenient),
        priority=_priority(table.get("priority"), f"{where}.priority", lenient),
    )


def _merge_point(value: Any, where: str, lenient: bool) -> MergePoint:
    table = _table(value, where)
    return MergePoint(
        placeholder=_text(table.get("placeholder"), f"{where}.placeholder", lenient),
        default=_text(table.get("default"), f"{where}.default", lenient),
        priority=_priority(table.get("priority"), f"{where}.priority", lenient),
    )


def _merge_target(value: Any, where: str, lenient: bool) -> MergeTarget:
    table = _table(value, where)
    return MergeTarget(
        strategy=_text(table.get("strategy"), f"{where}.strategy", lenient),
        content=_text(table.get("content"), f"{where}.content", lenient),
        priority=_priority(table.get("priority"), f"{where}.priority", lenient),
    )


def _config_from_mapping(data: Any, *, lenient: bool) -> Config:
    table = _table(data, "document")
    return Config(
        metadata=_metadata(table.get("metadata"), lenient),
        sections={
            str(name): _section(value, f"sections.{name}", lenient)
            for name, value in _table(table.get("sections"), "sections").items()
        },
        merge_points={
            str(name): _merge_point(value, f"merge_points.{name}", lenient)
            for name, value in _table(table.get("merge_points"), "merge_points").items()
        },
        merge_targets={
            str(name): _merge_target(value, f"merge_targets.{name}", lenient)
            for name, value in _table(table.get("merge_targets"), "merge_targets").items()
        },
    )