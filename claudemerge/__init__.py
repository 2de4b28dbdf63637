"""Merge TOML, YAML and Markdown guideline files into one prioritised Markdown document."""

__version__ = "0.1.0"

__all__ = ["__version__"]