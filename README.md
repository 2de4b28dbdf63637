# claudemerge

Merge several guideline files (TOML, YAML or Markdown) into one
Markdown document, typically a `CLAUDE.md` for a project.

## Installation

```
pip install .
```

## Command line

```
claude-merge -files common.md,python.md
```

Options (each also accepted with two dashes, e.g. `--files`):

| Option            | Meaning                                              |
|-------------------|------------------------------------------------------|
| `-files LIST`     | Comma-separated input files (required)               |
| `-output NAME`    | Output file, default `CLAUDE.merged.md`              |
| `-order LIST`     | Comma-separated merge order; unlisted files follow   |
| `-validate`       | Only load and check the inputs, write nothing        |
| `-debug`          | Print what is loaded and merged                      |
| `-help`, `-h`     | Show usage                                           |

The command exits with status 0 on success and 1 when the arguments are
unusable, a file cannot be loaded or validated, or the output cannot be
written; the reason is printed to standard error.

Formats are chosen by extension: `.toml`, `.yaml`/`.yml`,
`.md`/`.markdown`. A Markdown file may start with YAML front matter
(`title`, `description`, `version`, `language`, `priority`); its body
becomes a single section named `content`. A Markdown file without front
matter gets the title `Untitled Document`.

With `-validate`, each file must have a title and at least one section,
and no section may carry a negative priority value.

## How merging works

1. An explicit priority overrides everything else.
2. A relative priority keeps its value from being overridden by lower priorities.
3. With no priorities, later files win.

If any section contains a block such as
`<language-specific-test-commands-here>…</language-specific-test-commands-here>`
or `<language-specific-documentation-standards>…</language-specific-documentation-standards>`,
the first file holding one is used as a template: its sections are kept
and each block is replaced by the "Testing commands" and
"Documentation Standards" text found in the files, or removed when none
is found. Sections of the other files are not merged in that case.

Merge points (a placeholder with a default) and merge targets (content
with a `replace`, `append` or `prepend` strategy) fill named slots in
section text when the document is generated. An unknown strategy
replaces.

The generated document starts with HTML comments naming the generator,
title and version, followed by the sections sorted by their `order`.

## Library use

```python
from claudemerge.loader import load_config, validate_config
from claudemerge.merger import PriorityMerger
from claudemerge.generator import generate_markdown

configs = [load_config("common.md"), load_config("python.md")]
merged = PriorityMerger(debug=False).merge_all(configs)
print(generate_markdown(merged))
```

Other entry points:

- `claudemerge.types`: the `Config`, `Metadata`, `Section`, `MergePoint`,
  `MergeTarget` and `Priority` data classes, `detect_format`,
  `parse_config`, `parse_markdown_sections` and `sanitize_name`.
- `claudemerge.strategies`: `MergeStrategy`, `is_valid_strategy` and
  `apply_strategy`.
- `claudemerge.merger`: `replace_placeholder_block`,
  `extract_test_commands`, `extract_documentation_standards` and
  `contains_placeholders`.
- `claudemerge.generator`: `sort_sections` and `apply_merge_targets`.

Loading and validation errors raise `ConfigError`; merging an empty list
raises `MergeError`.

## Running the tests

```
pip install .[test]
pytest
```