"""Embed generated CI documentation into Markdown files and migrate foreign markers."""

__version__ = "0.1.0"
