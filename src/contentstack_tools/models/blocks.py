"""
Block Variant Dispatch
=======================
A ``blocks`` field holds a list of single-key tagged objects::

    [{"hero": {...}}, {"quote": {...}, "_metadata": {"uid": "cs1"}}]

The tag is the first key that does not start with an underscore. Every item
resolves to exactly one of two shapes:

- ``MatchedBlock``  the tag names a declared ``BlockDefinition``
- ``UnknownBlock``  no tag, or a tag with no definition

The validator rejects unknown blocks; the renderer skips them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from .content_type import BlockDefinition


@dataclass(frozen=True)
class MatchedBlock:
    key: str
    definition: BlockDefinition
    payload: Any

    @property
    def fields(self) -> Mapping[str, Any]:
        """Payload as a mapping; non-mapping payloads read as empty."""
        return self.payload if isinstance(self.payload, Mapping) else {}


@dataclass(frozen=True)
class UnknownBlock:
    key: str | None
    payload: Any = None


BlockMatch = Union[MatchedBlock, UnknownBlock]


def variant_key(item: Any) -> str | None:
    """Return the variant tag of a blocks item, or None if it has none."""
    if not isinstance(item, Mapping):
        return None
    for key in item:
        if isinstance(key, str) and not key.startswith("_"):
            return key
    return None


def match_block(item: Any, definitions: list[BlockDefinition]) -> BlockMatch:
    """Resolve a blocks item against the declared variants."""
    key = variant_key(item)
    if key is None:
        return UnknownBlock(key=None, payload=item)
    for definition in definitions:
        if definition.uid == key:
            return MatchedBlock(key=key, definition=definition, payload=item[key])
    return UnknownBlock(key=key, payload=item[key])
