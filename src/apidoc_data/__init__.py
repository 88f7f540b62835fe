"""Navigation, content pages and search index for API documentation sites.

The public entry point is :func:`create_data`, which turns the flat record
list emitted by a documentation extractor into an :class:`ApiData` result.
"""

from __future__ import annotations

from apidoc_data.config import BuildOptions, DuplicatePolicy
from apidoc_data.content import JsonPageWriter, MemoryPageWriter, PageWriter
from apidoc_data.factory import create_data
from apidoc_data.models import (
    ApiData,
    ContentPage,
    EntityRecord,
    MemberRecord,
    NavNode,
    SearchRecord,
)

__all__ = [
    "ApiData",
    "BuildOptions",
    "ContentPage",
    "DuplicatePolicy",
    "EntityRecord",
    "JsonPageWriter",
    "MemberRecord",
    "MemoryPageWriter",
    "NavNode",
    "PageWriter",
    "SearchRecord",
    "create_data",
]
