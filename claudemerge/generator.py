"""Rendering a merged configuration as a markdown document."""

from __future__ import annotations

from dataclasses import replace

from claudemerge.strategies import apply_strategy
from claudemerge.types import Config, Section


def generate_markdown(cfg: Config) -> str:
    """Render ``cfg`` as markdown, sections in order, merge targets applied."""
    parts = ["<!-- Generated by claude-merge -->\n"]
    if cfg.metadata.title:
        parts.append(f"<!-- Title: {cfg.metadata.title} -->\n")
    if cfg.metadata.version:
        parts.append(f"<!-- Version: {cfg.metadata.version} -->\n")
    parts.append("\n")

    processed = apply_merge_targets(cfg)
    parts.extend(f"{section.content}\n\n" for section in sort_sections(processed.sections))
    return "".join(parts).strip()


def sort_sections(sections: dict[str, Section]) -> list[Section]:
    """Return the sections sorted by their ``order`` field."""
    return sorted(sections.values(), key=lambda section: section.order)


def apply_merge_targets(cfg: Config) -> Config:
    """Return a copy of ``cfg`` whose section placeholders are filled by merge targets."""
    sections: dict[str, Section] = {}
    for name, section in cfg.sections.items():
        content = section.content
        for target_name, target in cfg.merge_targets.items():
            point = cfg.merge_points.get(target_name)
            if point is None or point.placeholder not in content:
                continue
            merged = apply_strategy(target.strategy, point.default, target.content)
            content = content.replace(point.placeholder, merged)
        sections[name] = replace(section, content=content)

    return Config(
        metadata=cfg.metadata,
        sections=sections,
        merge_points=cfg.merge_points,
        merge_targets=cfg.merge_targets,
    )