# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
DNExposure - Exposure parameters from EXIF metadata

Computes aperture, shutter speed, ISO, focal length, APEX exposure values
and scene luminance from the EXIF tags of an image, reconstructing missing
values from related tags where the EXIF standard allows it.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

import logging

from dnexposure.exceptions import (
    DNExposureError,
    TagNotFoundError,
    InsufficientDataError,
    InvalidValueError,
    MetadataReadError,
)
from dnexposure.exif_tags import EXIF_TAG_NAMES, ResolutionUnit
from dnexposure.tag_store import TagStore, TagType, tags_from_dict
from dnexposure.exif_reader import ReaderConfig, read_tag_store
from dnexposure.resolution import Resolution
from dnexposure.resolver import ExposureResolver, Quantity

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DNExposureError",
    "TagNotFoundError",
    "InsufficientDataError",
    "InvalidValueError",
    "MetadataReadError",
    "EXIF_TAG_NAMES",
    "ResolutionUnit",
    "TagStore",
    "TagType",
    "tags_from_dict",
    "ReaderConfig",
    "read_tag_store",
    "Resolution",
    "ExposureResolver",
    "Quantity",
]
