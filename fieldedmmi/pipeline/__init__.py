"""Pluggable collaborators of the Fielded MMI renderer.

The renderer consumes two external services through these interfaces:

- **TreecodeResolverInterface**: preferred name → hierarchy tree codes
- **RankerInterface**: term-frequency aggregates → ranked summaries
"""

from .interfaces import RankerInterface, TreecodeResolverInterface

__all__ = [
    "RankerInterface",
    "TreecodeResolverInterface",
]
