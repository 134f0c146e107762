# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF tag definitions for exposure resolution

This module contains the subset of EXIF 2.2 tag ids the exposure resolver
reads, plus the focal plane resolution unit codes.

Copyright 2025 DNAi inc.
"""

from enum import IntEnum


# ============================================================
# IFD0 (Image) Tags
# ============================================================
EXIF_Make = 0x010F
EXIF_Model = 0x0110

# ============================================================
# IFD1 (Thumbnail) Tags
# ============================================================
EXIF_ThumbnailOffset = 0x0201  # JPEGInterchangeFormat
EXIF_ThumbnailLength = 0x0202  # JPEGInterchangeFormatLength

# ============================================================
# EXIF IFD Tags
# ============================================================
EXIF_ExposureTime = 0x829A
EXIF_FNumber = 0x829D
EXIF_ISOSpeedRatings = 0x8827
EXIF_ShutterSpeedValue = 0x9201
EXIF_ApertureValue = 0x9202
EXIF_BrightnessValue = 0x9203
EXIF_FocalLength = 0x920A
EXIF_PixelXDimension = 0xA002
EXIF_PixelYDimension = 0xA003
EXIF_FocalPlaneXResolution = 0xA20E
EXIF_FocalPlaneYResolution = 0xA20F
EXIF_FocalPlaneResolutionUnit = 0xA210
EXIF_ExposureIndex = 0xA215
EXIF_FocalLengthIn35mmFilm = 0xA405


EXIF_TAG_NAMES = {
    EXIF_Make: "Make",
    EXIF_Model: "Model",
    EXIF_ThumbnailOffset: "ThumbnailOffset",
    EXIF_ThumbnailLength: "ThumbnailLength",
    EXIF_ExposureTime: "ExposureTime",
    EXIF_FNumber: "FNumber",
    EXIF_ISOSpeedRatings: "ISOSpeedRatings",
    EXIF_ShutterSpeedValue: "ShutterSpeedValue",
    EXIF_ApertureValue: "ApertureValue",
    EXIF_BrightnessValue: "BrightnessValue",
    EXIF_FocalLength: "FocalLength",
    EXIF_PixelXDimension: "PixelXDimension",
    EXIF_PixelYDimension: "PixelYDimension",
    EXIF_FocalPlaneXResolution: "FocalPlaneXResolution",
    EXIF_FocalPlaneYResolution: "FocalPlaneYResolution",
    EXIF_FocalPlaneResolutionUnit: "FocalPlaneResolutionUnit",
    EXIF_ExposureIndex: "ExposureIndex",
    EXIF_FocalLengthIn35mmFilm: "FocalLengthIn35mmFilm",
}


def tag_name(tag_id: int) -> str:
    """Return the EXIF name of a tag id, or its hex form when unknown."""
    return EXIF_TAG_NAMES.get(tag_id, f"0x{tag_id:04X}")


class ResolutionUnit(IntEnum):
    """FocalPlaneResolutionUnit codes understood by the resolver"""
    INCH = 2
    CENTIMETER = 3

    @property
    def millimeters(self) -> float:
        """Length of one unit in millimeters."""
        if self is ResolutionUnit.INCH:
            return 25.4
        return 10.0
