# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Typed tag store

This module provides the read-only store of decoded EXIF values that the
exposure resolver queries. Values are kept as decoded by the reader and
converted on lookup to the type the caller asks for.

Copyright 2025 DNAi inc.
"""

from enum import Enum
from fractions import Fraction
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Union

from dnexposure.exif_tags import EXIF_TAG_NAMES


class TagType(Enum):
    """Value types a tag can be looked up as"""
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"


class TagStore:
    """
    Read-only mapping from EXIF tag id to decoded value.

    Values may be ints, floats, strings, ASCII bytes, Fractions or
    (numerator, denominator) rational pairs. The store also records the
    file offset of the TIFF header that EXIF offsets are relative to.

    Example:
        >>> store = TagStore({0x829D: (28, 10)}, base_location=12)
        >>> store.lookup(0x829D, TagType.FLOAT)
        2.8
    """

    def __init__(self, tags: Optional[Mapping[int, Any]] = None, base_location: int = 0):
        """
        Initialize the store.

        Args:
            tags: Mapping of 16-bit tag ids to decoded values
            base_location: File offset of the TIFF header (default: 0)

        Raises:
            ValueError: If a tag id does not fit in 16 bits or the base
                location is negative
        """
        tags = dict(tags or {})
        for tag_id in tags:
            if not 0 <= tag_id <= 0xFFFF:
                raise ValueError(f"Tag id out of range: {tag_id}")
        if base_location < 0:
            raise ValueError(f"Base location must be non-negative: {base_location}")
        self._tags = MappingProxyType(tags)
        self._base_location = int(base_location)

    @property
    def base_location(self) -> int:
        """File offset of the TIFF header."""
        return self._base_location

    @property
    def tags(self) -> Mapping[int, Any]:
        """Read-only view of the raw values."""
        return self._tags

    def lookup(self, tag_id: int, tag_type: TagType) -> Optional[Union[int, float, str]]:
        """
        Look up a tag as the requested type.

        Args:
            tag_id: EXIF tag id
            tag_type: Type to return the value as

        Returns:
            The converted value, or None if the tag is absent or its value
            is not compatible with tag_type
        """
        if tag_id not in self._tags:
            return None
        value = self._tags[tag_id]

        if tag_type is TagType.INTEGER:
            if isinstance(value, int) and not isinstance(value, bool):
                return value
            return None

        if tag_type is TagType.FLOAT:
            return _as_float(value)

        if tag_type is TagType.TEXT:
            if isinstance(value, bytes):
                try:
                    value = value.decode('ascii')
                except UnicodeDecodeError:
                    return None
            if isinstance(value, str):
                return value.rstrip('\x00').strip()
            return None

        raise ValueError(f"Unknown tag type: {tag_type!r}")

    def __contains__(self, tag_id: object) -> bool:
        return tag_id in self._tags

    def __len__(self) -> int:
        return len(self._tags)

    def __iter__(self) -> Iterator[int]:
        return iter(self._tags)

    def __repr__(self) -> str:
        return f"TagStore({len(self._tags)} tags, base_location={self._base_location})"


def _as_float(value: Any) -> Optional[float]:
    """Convert a numeric or rational tag value to float."""
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float, Fraction)):
            return float(value)
        # Rational stored as (numerator, denominator)
        if isinstance(value, tuple) and len(value) == 2:
            num, den = value
            if isinstance(num, int) and isinstance(den, int) and den != 0:
                return num / den
    except OverflowError:
        return None
    return None


def tags_from_dict(values: Dict[str, Any]) -> Dict[int, Any]:
    """
    Convert a name-keyed dictionary to a tag-id-keyed one.

    Args:
        values: Mapping of EXIF tag names (e.g. 'FNumber') to values

    Returns:
        Mapping of tag ids to values

    Raises:
        KeyError: If a name is not a known exposure tag
    """
    ids_by_name = {name: tag_id for tag_id, name in EXIF_TAG_NAMES.items()}
    return {ids_by_name[name]: value for name, value in values.items()}
