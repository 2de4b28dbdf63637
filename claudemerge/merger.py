"""Priority-based merging of several configurations into one."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Protocol, TypeVar

from claudemerge.types import Config, Priority

TEST_COMMANDS_OPEN = "<language-specific-test-commands-here>"
TEST_COMMANDS_CLOSE = "</language-specific-test-commands-here>"
DOC_STANDARDS_OPEN = "<language-specific-documentation-standards>"
DOC_STANDARDS_CLOSE = "</language-specific-documentation-standards>"

_METADATA_TEXT_FIELDS = ("description", "version", "language", "extends")


class MergeError(Exception):
    """Raised when configurations cannot be merged."""


class _Prioritised(Protocol):
    priority: Priority


_Item = TypeVar("_Item", bound=_Prioritised)


class PriorityMerger:
    """Merges configurations: explicit priority, then relative, then file order."""

    def __init__(self, debug: bool = False) -> None:
        self.debug = bool(debug)

    def _log(self, message: str) -> None:
        if self.debug:
            print(message)

    def merge_all(self, configs: Iterable[Config]) -> Config:
        """Merge ``configs`` in order; later files win ties."""
        configs = list(configs)
        if not configs:
            raise MergeError("no configurations to merge")

        result = Config()
        base = self._find_base_template(configs)
        if base is not None:
            self._merge_with_template(result, base, configs)
        else:
            for cfg in configs:
                self._merge_metadata(result, cfg)
                self._merge_entries("section", result.sections, cfg.sections, cfg.source_file)
                self._merge_entries(
                    "merge point", result.merge_points, cfg.merge_points, cfg.source_file
                )
                self._merge_entries(
                    "merge target", result.merge_targets, cfg.merge_targets, cfg.source_file
                )
        return result

    @staticmethod
    def _merge_metadata(result: Config, incoming: Config) -> None:
        meta, new = result.metadata, incoming.metadata
        if not meta.title or new.priority.takes_precedence_over_or_equal(meta.priority):
            if new.title:
                meta.title = new.title
                meta.priority = new.priority
        for name in _METADATA_TEXT_FIELDS:
            current, candidate = getattr(meta, name), getattr(new, name)
            if not current or new.priority.takes_precedence_over_or_equal(meta.priority):
                if candidate:
                    setattr(meta, name, candidate)

    def _merge_entries(
        self,
        kind: str,
        target: dict[str, _Item],
        incoming: dict[str, _Item],
        source: str,
    ) -> None:
        for name, item in incoming.items():
            existing = target.get(name)
            if existing is None or item.priority.takes_precedence_over_or_equal(
                existing.priority
            ):
                self._log(f"Merging {kind} {name} from {source}")
                target[name] = item
            else:
                self._log(f"Skipping {kind} {name} (lower priority)")

    @staticmethod
    def _find_base_template(configs: list[Config]) -> Config | None:
        for cfg in configs:
            if any(contains_placeholders(s.content) for s in cfg.sections.values()):
                return cfg
        return None

    def _merge_with_template(
        self, result: Config, base: Config, configs: list[Config]
    ) -> None:
        result.metadata = replace(base.metadata)
        result.sections.update(base.sections)
        result.merge_points.update(base.merge_points)
        result.merge_targets.update(base.merge_targets)

        self._apply_placeholder_replacements(result, configs)

        meta = result.metadata
        for cfg in configs:
            if cfg is base:
                continue
            incoming = cfg.metadata
            if not incoming.priority.takes_precedence_over_or_equal(meta.priority):
                continue
            if incoming.title and incoming.title != meta.title:
                # The base title only yields to a strictly higher priority.
                if incoming.priority.takes_precedence_over(meta.priority):
                    meta.title = incoming.title

    def _apply_placeholder_replacements(
        self, result: Config, configs: list[Config]
    ) -> None:
        replacements: dict[str, str] = {}
        for cfg in configs:
            self._log(
                f"Processing config: {cfg.source_file}, Language: {cfg.metadata.language}"
            )
            for section in cfg.sections.values():
                content = section.content
                if _contains_test_commands(content):
                    commands = extract_test_commands(content)
                    self._log(f"Found test commands: {commands}")
                    replacements["test-commands"] = commands
                if _contains_documentation_standards(content):
                    standards = extract_documentation_standards(content)
                    self._log(f"Found documentation standards: {len(standards)} chars")
                    replacements["documentation-standards"] = standards

        for name, section in result.sections.items():
            content = replace_placeholder_block(
                section.content,
                TEST_COMMANDS_OPEN,
                TEST_COMMANDS_CLOSE,
                replacements.get("test-commands", ""),
            )
            content = replace_placeholder_block(
                content,
                DOC_STANDARDS_OPEN,
                DOC_STANDARDS_CLOSE,
                replacements.get("documentation-standards", ""),
            )
            result.sections[name] = replace(section, content=content)


def contains_placeholders(content: str) -> bool:
    """True if ``content`` holds both an opening and a closing placeholder tag."""
    return "<language-specific-" in content and "</language-specific-" in content


def replace_placeholder_block(
    content: str, open_tag: str, close_tag: str, replacement: str
) -> str:
    """Replace everything from ``open_tag`` to ``close_tag`` inclusive."""
    start = content.find(open_tag)
    if start == -1:
        return content
    end = content.find(close_tag)
    if end == -1:
        return content
    return content[:start] + replacement + content[end + len(close_tag):]


def _contains_test_commands(content: str) -> bool:
    return "Testing commands" in content or "test ./..." in content


def extract_test_commands(content: str) -> str:
    """Collect the non-blank lines that follow a "Testing commands" heading."""
    in_section = False
    found: list[str] = []
    for line in content.split("\n"):
        if "Testing commands" in line:
            in_section = True
            continue
        if not in_section:
            continue
        if line.startswith("#") and "Testing" not in line:
            break
        if line == "" and len(found) > 4:
            break
        if line:
            found.append(line)
    return "\n".join(found)


def _contains_documentation_standards(content: str) -> bool:
    return "Documentation Standards" in content


def extract_documentation_standards(content: str) -> str:
    """Collect the text after a "Documentation Standards" heading up to its second fence."""
    in_section = False
    found: list[str] = []
    fences = 0
    for line in content.split("\n"):
        if "Documentation Standards" in line:
            in_section = True
            found.append("")
            continue
        if not in_section:
            continue
        is_fence = line.startswith("```")
        if is_fence:
            fences += 1
        if fences >= 2 and is_fence:
            found.append(line)
            break
        if line.startswith("##") and "Documentation" not in line:
            break
        found.append(line)
    return "\n".join(found).strip()