"""Metadata collection for one directory listing.

This package contains:
- raw/enriched entry datatypes and the flat ``Listing`` container
- the filesystem enumeration collaborator and ownership/permission helpers
- the git status collaborator and porcelain decoding
- the collector that ties them together over a worker pool
"""

from __future__ import annotations

from .collect import MetadataCollector, default_worker_count
from .fs import DirectoryLister, group_name, owner_name, symbolic_permissions
from .git import GitStatusSource, attribute_codes, decode_status_code, most_significant
from .types import EnrichedEntry, Listing, RawEntry, SymlinkState

__all__ = [
    "MetadataCollector",
    "default_worker_count",
    "DirectoryLister",
    "group_name",
    "owner_name",
    "symbolic_permissions",
    "GitStatusSource",
    "attribute_codes",
    "decode_status_code",
    "most_significant",
    "EnrichedEntry",
    "Listing",
    "RawEntry",
    "SymlinkState",
]
