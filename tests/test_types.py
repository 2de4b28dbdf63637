import pytest

from claudemerge.types import (
    Config,
    ConfigError,
    FileFormat,
    Priority,
    PriorityType,
    Section,
    detect_format,
    parse_config,
    parse_markdown_sections,
    sanitize_name,
)


def test_parse_toml():
    content = """
[metadata]
title = "Test Config"
priority = { type = "explicit", value = 10 }

[sections.header]
order = 1
priority = { type = "explicit", value = 5 }
content = "# Header"
"""
    config = parse_config(content.encode(), FileFormat.TOML)
    assert config.metadata.title == "Test Config"
    assert config.metadata.priority.type is PriorityType.EXPLICIT
    assert config.metadata.priority.value == 10
    assert config.sections["header"].content == "# Header"
    assert config.sections["header"].priority == Priority.explicit(5)
    assert config.source_format is FileFormat.TOML


def test_parse_yaml():
    content = """
metadata:
  title: "Test Config"
  priority:
    type: "explicit"
    value: 10
sections:
  header:
    order: 1
    priority:
      type: "explicit"
      value: 5
    content: "# Header"
"""
    config = parse_config(content, FileFormat.YAML)
    assert config.metadata.title == "Test Config"
    assert config.metadata.priority.type is PriorityType.EXPLICIT
    assert config.metadata.priority.value == 10
    assert config.sections["header"].order == 1


def test_parse_markdown_single_section():
    content = """---
title: "Test Config"
priority:
  type: "explicit"
  value: 10
---

# Header Content

This is markdown content that should be treated as a section.

## Subsection

More content here.

### Another Level

Even more content.

- List item 1
- List item 2

1. Ordered item 1
2. Ordered item 2
"""
    config = parse_config(content.encode(), FileFormat.MARKDOWN)
    assert config.metadata.title == "Test Config"
    assert config.metadata.priority == Priority.explicit(10)
    assert config.source_format is FileFormat.MARKDOWN
    assert list(config.sections) == ["content"]
    body = config.sections["content"].content
    for fragment in (
        "# Header Content",
        "## Subsection",
        "### Another Level",
        "- List item 1",
        "1. Ordered item 1",
    ):
        assert fragment in body
    assert config.sections["content"].order == 1


def test_markdown_without_frontmatter_gets_default_title():
    config = parse_config("  # Hello\n\nworld\n", FileFormat.MARKDOWN)
    assert config.metadata.title == "Untitled Document"
    assert config.sections["content"] == Section(order=1, content="# Hello\n\nworld")


def test_markdown_frontmatter_with_empty_body_has_no_sections():
    config = parse_config("---\ntitle: Only\n---\n\n", FileFormat.MARKDOWN)
    assert config.metadata.title == "Only"
    assert config.sections == {}


def test_markdown_frontmatter_must_be_mapping():
    with pytest.raises(ConfigError, match="Markdown parse error: failed to parse frontmatter"):
        parse_config("---\n- a\n- b\n---\nbody", FileFormat.MARKDOWN)


def test_markdown_frontmatter_ignores_non_string_title():
    config = parse_config("---\ntitle: 12\n---\nbody", FileFormat.MARKDOWN)
    assert config.metadata.title == ""
    assert config.sections["content"].content == "body"


def test_parse_toml_merge_points_and_targets():
    content = """
[merge_points.example]
placeholder = "<!-- MERGE:example -->"
default = "Default"

[merge_targets.example]
strategy = "append"
content = "Extra"
priority = { type = "relative", value = 3 }

[sections.body]
content = "text"
merge_points = ["example"]
"""
    config = parse_config(content, FileFormat.TOML)
    assert config.merge_points["example"].placeholder == "<!-- MERGE:example -->"
    assert config.merge_targets["example"].strategy == "append"
    assert config.merge_targets["example"].priority == Priority.relative(3)
    assert config.sections["body"].merge_points == ["example"]


def test_parse_empty_yaml_gives_empty_config():
    assert parse_config(b"", FileFormat.YAML) == Config(source_format=FileFormat.YAML)


def test_yaml_numeric_version_becomes_text():
    config = parse_config("metadata:\n  version: 1.0\n", FileFormat.YAML)
    assert config.metadata.version == "1.0"


def test_toml_type_mismatch_is_error():
    with pytest.raises(ConfigError, match="TOML parse error"):
        parse_config('[metadata]\ntitle = 5\n', FileFormat.TOML)


def test_unknown_priority_type_is_error():
    content = '[metadata]\npriority = { type = "bogus", value = 1 }\n'
    with pytest.raises(ConfigError, match="unknown priority type: bogus"):
        parse_config(content, FileFormat.TOML)


def test_yaml_top_level_sequence_is_error():
    with pytest.raises(ConfigError, match="YAML parse error"):
        parse_config("- a\n- b\n", FileFormat.YAML)


def test_unsupported_format_value():
    with pytest.raises(ConfigError, match="unsupported format"):
        parse_config("x", 99)


@pytest.mark.parametrize(
    "p1, p2, expected",
    [
        (Priority.explicit(5), Priority.relative(10), True),
        (Priority.explicit(10), Priority.explicit(5), True),
        (Priority.relative(10), Priority.relative(5), True),
        (Priority.explicit(1), Priority(), True),
        (Priority.relative(1), Priority(), True),
        (Priority.explicit(5), Priority.explicit(5), False),
        (Priority.relative(100), Priority.explicit(1), False),
        (Priority(), Priority(), False),
    ],
)
def test_takes_precedence_over(p1, p2, expected):
    assert p1.takes_precedence_over(p2) is expected


@pytest.mark.parametrize(
    "p1, p2, expected",
    [
        (Priority.explicit(5), Priority.explicit(5), True),
        (Priority(), Priority(), True),
        (Priority.relative(1), Priority(), True),
        (Priority(), Priority.relative(1), False),
        (Priority.relative(5), Priority.relative(10), False),
        (Priority.relative(100), Priority.explicit(1), False),
        (Priority.explicit(1), Priority.relative(100), True),
    ],
)
def test_takes_precedence_over_or_equal(p1, p2, expected):
    assert p1.takes_precedence_over_or_equal(p2) is expected


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("test.toml", FileFormat.TOML),
        ("test.yaml", FileFormat.YAML),
        ("test.yml", FileFormat.YAML),
        ("test.md", FileFormat.MARKDOWN),
        ("test.markdown", FileFormat.MARKDOWN),
        ("TEST.TOML", FileFormat.TOML),
    ],
)
def test_detect_format(filename, expected):
    assert detect_format(filename) is expected


def test_detect_format_unsupported():
    with pytest.raises(ConfigError, match="unsupported file format for test.txt"):
        detect_format("test.txt")


@pytest.mark.parametrize(
    "priority, expected",
    [
        (Priority.explicit(10), "explicit(10)"),
        (Priority.relative(5), "relative(5)"),
        (Priority(), "none"),
    ],
)
def test_priority_str(priority, expected):
    assert str(priority) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("explicit", PriorityType.EXPLICIT),
        ("RELATIVE", PriorityType.RELATIVE),
        ("none", PriorityType.NONE),
        ("", PriorityType.NONE),
    ],
)
def test_priority_type_parse(text, expected):
    assert PriorityType.parse(text) is expected


def test_priority_type_parse_unknown():
    with pytest.raises(ConfigError, match="unknown priority type: weird"):
        PriorityType.parse("weird")


def test_priority_type_text_round_trip():
    for kind in PriorityType:
        assert PriorityType.parse(str(kind)) is kind


def test_parse_markdown_sections_headers_and_lists():
    sections = parse_markdown_sections("# Title\n\nSome text\n- item\n1. first")
    assert sections == {
        "header_1_title": Section(order=1, content="# Title\n\nSome text"),
        "list_2": Section(order=2, content="- item"),
        "ordered_list_1": Section(order=3, content="1. first"),
    }


def test_parse_markdown_sections_plain_text():
    assert parse_markdown_sections("Just text\nmore") == {
        "content": Section(order=1, content="Just text\nmore"),
    }


def test_parse_markdown_sections_consecutive_headers():
    sections = parse_markdown_sections("## Getting Started!\nintro\n### Next Step\nbody")
    assert sections["header_2_getting_started"] == Section(order=1, content="## Getting Started!\nintro")
    assert sections["header_3_next_step"] == Section(order=2, content="### Next Step\nbody")


@pytest.mark.parametrize(
    "title, expected",
    [
        ("Hello World", "hello_world"),
        ("  --Quick Reference!!  ", "quick_reference"),
        ("Step 1. Setup", "step_1_setup"),
        ("***", ""),
    ],
)
def test_sanitize_name(title, expected):
    assert sanitize_name(title) == expected