# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF reader

This module builds a TagStore from the EXIF block of an image file. Tag
decoding is done by exifread; this module keeps the IFDs the exposure
resolver cares about, converts exifread values to plain Python values and
locates the TIFF header that EXIF offsets are relative to.

Copyright 2025 DNAi inc.
"""

import logging
import struct
from pathlib import Path
from typing import Any, Dict, Optional, Union

import exifread

from dnexposure.exceptions import MetadataReadError
from dnexposure.exif_tags import EXIF_ThumbnailLength, EXIF_ThumbnailOffset
from dnexposure.tag_store import TagStore

logger = logging.getLogger(__name__)


# exifread field types
_ASCII = 2
_RATIONAL_TYPES = (5, 10)
_FLOAT_TYPES = (11, 12)
_INTEGER_TYPES = (1, 3, 4, 6, 8, 9)

# IFDs whose tags are kept as-is
_KEPT_IFDS = ('Image', 'EXIF')
# Tags kept from IFD1; the rest of IFD1 would shadow IFD0 tag ids
_THUMBNAIL_TAGS = (EXIF_ThumbnailOffset, EXIF_ThumbnailLength)


class ReaderConfig:
    """
    Configuration for reading a tag store from a file.

    Attributes:
        strict: Passed to exifread; raise on malformed tags instead of
            skipping them
        stop_tag: Passed to exifread; stop processing after this tag name
        header_scan_bytes: Number of leading bytes searched for the TIFF
            header when computing the base location
    """

    def __init__(
        self,
        strict: bool = False,
        stop_tag: Optional[str] = None,
        header_scan_bytes: int = 65536
    ):
        if header_scan_bytes < 8:
            raise ValueError(f"header_scan_bytes must be at least 8, got {header_scan_bytes}")
        self.strict = strict
        self.stop_tag = stop_tag
        self.header_scan_bytes = header_scan_bytes

    def exifread_options(self) -> Dict[str, Any]:
        """Keyword arguments for exifread.process_file."""
        options = {
            'details': False,
            'strict': self.strict,
        }
        if self.stop_tag:
            options['stop_tag'] = self.stop_tag
        return options


def read_tag_store(
    file_path: Union[str, Path],
    config: Optional[ReaderConfig] = None
) -> TagStore:
    """
    Read the EXIF block of an image file into a TagStore.

    Args:
        file_path: Path to the image file
        config: Optional reader configuration

    Returns:
        TagStore holding IFD0 and EXIF IFD tags plus the thumbnail offset

    Raises:
        MetadataReadError: If the file cannot be read or has no EXIF data
    """
    config = config or ReaderConfig()
    path = Path(file_path)

    try:
        with path.open('rb') as f:
            header = f.read(config.header_scan_bytes)
            f.seek(0)
            raw_tags = exifread.process_file(f, **config.exifread_options())
    except OSError as e:
        raise MetadataReadError(f'Could not read "{path}": {e}') from e
    except Exception as e:
        # exifread raises assorted errors on malformed files in strict mode
        raise MetadataReadError(f'Could not parse EXIF data out of "{path}": {e}') from e

    tags = convert_exifread_tags(raw_tags)
    if not tags:
        raise MetadataReadError(f'Could not parse EXIF data out of "{path}".')

    base_location = find_tiff_base(header)
    if base_location is None:
        logger.warning("Could not locate the TIFF header in %s; thumbnail offsets are relative to 0", path)
        base_location = 0

    logger.debug("Read %d EXIF tags from %s (base location %d)", len(tags), path, base_location)
    return TagStore(tags, base_location=base_location)


def convert_exifread_tags(raw_tags: Dict[str, Any]) -> Dict[int, Any]:
    """
    Convert the dictionary returned by exifread.process_file.

    Args:
        raw_tags: Mapping of 'IFD TagName' keys to exifread IfdTag objects

    Returns:
        Mapping of tag ids to ints, floats or strings
    """
    tags = {}
    for key, ifd_tag in raw_tags.items():
        # Skip non-tag entries such as JPEGThumbnail
        if not hasattr(ifd_tag, 'field_type') or not hasattr(ifd_tag, 'values'):
            continue
        ifd_name = key.split(' ', 1)[0]
        tag_id = ifd_tag.tag
        if ifd_name == 'Thumbnail':
            if tag_id not in _THUMBNAIL_TAGS:
                continue
        elif ifd_name not in _KEPT_IFDS:
            continue

        value = _convert_value(ifd_tag.field_type, ifd_tag.values)
        if value is not None:
            tags[tag_id] = value
    return tags


def _convert_value(field_type: int, values: Any) -> Optional[Union[int, float, str]]:
    if field_type == _ASCII:
        if isinstance(values, bytes):
            values = values.decode('ascii', errors='replace')
        return str(values).rstrip('\x00').strip()

    if not values:
        return None
    first = values[0]
    try:
        if field_type in _RATIONAL_TYPES or field_type in _FLOAT_TYPES:
            return float(first)
        if field_type in _INTEGER_TYPES:
            return int(first)
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    # UNDEFINED and unknown types carry no exposure information
    return None


def find_tiff_base(data: bytes) -> Optional[int]:
    """
    Find the offset of the TIFF header in the leading bytes of a file.

    Args:
        data: Leading bytes of the file

    Returns:
        0 for TIFF-based files, the offset just past the 'Exif\\0\\0'
        identifier for JPEG files, or None if no header was found
    """
    if data[:4] in (b'II*\x00', b'MM\x00*'):
        return 0

    if data[:2] != b'\xff\xd8':
        return None

    # Walk JPEG segments looking for the EXIF APP1 segment
    offset = 2
    while offset + 4 <= len(data):
        if data[offset] != 0xFF:
            break
        marker = data[offset + 1]
        if marker == 0xFF:
            # Fill byte
            offset += 1
            continue
        if marker in (0xD9, 0xDA):  # EOI, SOS
            break
        length = struct.unpack('>H', data[offset + 2:offset + 4])[0]
        if marker == 0xE1 and data[offset + 4:offset + 10] == b'Exif\x00\x00':
            return offset + 10
        offset += 2 + length
    return None
