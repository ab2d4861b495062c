"""
Setlog: local-first organizer for setting notes and progress logs.

A small personal tool that provides:
- Setting items with category, status, priority and tags
- Dated progress logs recorded against each item
- Filtered, priority-ordered views over a local key-value store
"""

__version__ = "0.1.0"
