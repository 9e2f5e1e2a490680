"""Parsing utilities for tag databases."""

from parse.tags import PatternLineResolver, load_tags, parse_tags

__all__ = [
    "PatternLineResolver",
    "load_tags",
    "parse_tags",
]
