# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exposure resolver

This module provides the ExposureResolver class, which computes exposure
parameters (aperture, shutter speed, ISO, focal length, exposure value and
scene luminance) from the EXIF tags of one image. Each quantity is read from
its primary tag when present and otherwise reconstructed from related tags.

The resolver holds no state besides its tag store: every query re-reads the
store and recomputes, so repeated queries always agree with the store.

Copyright 2025 DNAi inc.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from dnexposure import formulas
from dnexposure.exceptions import InsufficientDataError, TagNotFoundError
from dnexposure.exif_reader import ReaderConfig, read_tag_store
from dnexposure.exif_tags import (
    EXIF_ApertureValue,
    EXIF_BrightnessValue,
    EXIF_ExposureIndex,
    EXIF_ExposureTime,
    EXIF_FNumber,
    EXIF_FocalLength,
    EXIF_FocalLengthIn35mmFilm,
    EXIF_FocalPlaneResolutionUnit,
    EXIF_FocalPlaneXResolution,
    EXIF_FocalPlaneYResolution,
    EXIF_ISOSpeedRatings,
    EXIF_Make,
    EXIF_Model,
    EXIF_PixelXDimension,
    EXIF_PixelYDimension,
    EXIF_ShutterSpeedValue,
    EXIF_ThumbnailOffset,
    ResolutionUnit,
    tag_name,
)
from dnexposure.resolution import Resolution
from dnexposure.tag_store import TagStore, TagType

logger = logging.getLogger(__name__)


class Quantity(Enum):
    """Photometric quantities the resolver can compute"""
    F_NUMBER = "f_number"
    EXPOSURE_TIME = "exposure_time"
    ISO = "iso"
    FOCAL_LENGTH_35MM_EQUIV = "focal_length_35mm_equiv"
    APERTURE_VALUE = "aperture_value"
    TIME_VALUE = "time_value"
    EXPOSURE_VALUE = "exposure_value"
    FILM_SPEED_VALUE = "film_speed_value"
    LUMINANCE_VALUE = "luminance_value"
    AVERAGE_LUMINANCE = "average_luminance"


class ExposureResolver:
    """
    Computes exposure parameters from the EXIF tags of one image.

    Every get_* method either returns the resolved value or raises a
    DNExposureError subclass; resolve() returns the same outcome as a
    Resolution without raising.

    Example:
        >>> resolver = ExposureResolver.from_file('image.jpg')
        >>> resolver.get_f_number()
        2.8
        >>> resolver.resolve(Quantity.AVERAGE_LUMINANCE).ok
        True
    """

    def __init__(self, store: TagStore):
        """
        Initialize the resolver.

        Args:
            store: Tag store of the image to query
        """
        self._store = store

    @classmethod
    def from_file(
        cls,
        file_path: Union[str, Path],
        config: Optional[ReaderConfig] = None
    ) -> "ExposureResolver":
        """
        Create a resolver over the EXIF block of an image file.

        Args:
            file_path: Path to the image file
            config: Optional reader configuration

        Raises:
            MetadataReadError: If no EXIF data could be parsed out of the file
        """
        return cls(read_tag_store(file_path, config))

    @property
    def store(self) -> TagStore:
        return self._store

    # ------------------------------------------------------------------
    # Tag lookup
    # ------------------------------------------------------------------

    def _lookup(self, tag_id: int, tag_type: TagType) -> Resolution:
        value = self._store.lookup(tag_id, tag_type)
        if value is None:
            return Resolution.failure(TagNotFoundError(tag_id))
        return Resolution.success(value)

    def _with_fallback(
        self,
        primary_tag: int,
        fallback_tag: int,
        convert: Callable[[float], float]
    ) -> Resolution:
        """Read primary_tag, else fallback_tag passed through convert."""
        def fallback() -> Resolution:
            logger.debug("%s not found, falling back to %s",
                         tag_name(primary_tag), tag_name(fallback_tag))
            return self._lookup(fallback_tag, TagType.FLOAT).map(convert)

        return self._lookup(primary_tag, TagType.FLOAT).or_else(fallback)

    def query_by_tag(self, tag_id: int, tag_type: TagType) -> Any:
        """
        Read a single tag as the given type.

        Raises:
            TagNotFoundError: If the tag is absent or of an incompatible type
        """
        return self._lookup(tag_id, tag_type).unwrap()

    # ------------------------------------------------------------------
    # Camera info
    # ------------------------------------------------------------------

    def get_make(self) -> str:
        return self.query_by_tag(EXIF_Make, TagType.TEXT)

    def get_model(self) -> str:
        return self.query_by_tag(EXIF_Model, TagType.TEXT)

    # ------------------------------------------------------------------
    # Camera settings
    # ------------------------------------------------------------------

    def _resolve_f_number(self) -> Resolution:
        return self._with_fallback(
            EXIF_FNumber, EXIF_ApertureValue, formulas.f_number_from_aperture_value
        )

    def _resolve_exposure_time(self) -> Resolution:
        return self._with_fallback(
            EXIF_ExposureTime, EXIF_ShutterSpeedValue, formulas.exposure_time_from_time_value
        )

    def _resolve_iso(self) -> Resolution:
        # Past ExposureIndex the ISO is only in the MakerNote, which is not read
        return self._with_fallback(EXIF_ISOSpeedRatings, EXIF_ExposureIndex, float)

    def _resolve_aperture_value(self) -> Resolution:
        return self._with_fallback(
            EXIF_ApertureValue, EXIF_FNumber, formulas.aperture_value_from_f_number
        )

    def _resolve_time_value(self) -> Resolution:
        return self._with_fallback(
            EXIF_ShutterSpeedValue, EXIF_ExposureTime, formulas.time_value_from_exposure_time
        )

    def _resolve_focal_length_35mm_equiv(self) -> Resolution:
        # A stored 0 means unknown
        direct = self._store.lookup(EXIF_FocalLengthIn35mmFilm, TagType.FLOAT)
        if direct is not None and direct > 0:
            return Resolution.success(direct)

        logger.debug("Computing 35mm equivalent focal length from sensor geometry")
        # Absent unit defaults to inch; a present but unknown code is an error
        unit_code = self._store.lookup(EXIF_FocalPlaneResolutionUnit, TagType.INTEGER)
        if unit_code is None:
            unit = Resolution.success(ResolutionUnit.INCH)
        else:
            unit = Resolution.success(unit_code).map(formulas.resolution_unit)

        return Resolution.combine(
            formulas.focal_length_35mm_equiv,
            self._lookup(EXIF_FocalLength, TagType.FLOAT),
            self._lookup(EXIF_PixelXDimension, TagType.FLOAT),
            self._lookup(EXIF_PixelYDimension, TagType.FLOAT),
            self._lookup(EXIF_FocalPlaneXResolution, TagType.FLOAT),
            self._lookup(EXIF_FocalPlaneYResolution, TagType.FLOAT),
            unit,
        )

    # ------------------------------------------------------------------
    # APEX values
    # ------------------------------------------------------------------

    def _resolve_exposure_value(self) -> Resolution:
        return Resolution.combine(
            lambda tv, av: tv + av,
            self._resolve_time_value(),
            self._resolve_aperture_value(),
        )

    def _resolve_film_speed_value(self) -> Resolution:
        return self._resolve_iso().map(formulas.film_speed_value)

    def _resolve_luminance_value(self) -> Resolution:
        def from_apex_values() -> Resolution:
            logger.debug("BrightnessValue not found, computing Av + Tv - Sv")
            return Resolution.combine(
                formulas.luminance_value,
                self._resolve_aperture_value(),
                self._resolve_time_value(),
                self._resolve_film_speed_value(),
            ).map_error(lambda e: InsufficientDataError(
                "Insufficient EXIF information to compute brightness value"
            ))

        return self._lookup(EXIF_BrightnessValue, TagType.FLOAT).or_else(from_apex_values)

    def _resolve_average_luminance(self) -> Resolution:
        inputs = (
            self._resolve_f_number(),
            self._resolve_exposure_time(),
            self._resolve_iso(),
        )
        if not all(r.ok for r in inputs):
            return Resolution.failure(InsufficientDataError(
                "Insufficient EXIF information to compute average scene luminance"
            ))
        return Resolution.combine(formulas.average_luminance, *inputs)

    # ------------------------------------------------------------------
    # Public queries
    # ------------------------------------------------------------------

    def resolve(self, quantity: Quantity) -> Resolution:
        """
        Resolve a quantity without raising.

        Args:
            quantity: Quantity to compute

        Returns:
            Resolution holding the value or the error that prevented it
        """
        resolvers = {
            Quantity.F_NUMBER: self._resolve_f_number,
            Quantity.EXPOSURE_TIME: self._resolve_exposure_time,
            Quantity.ISO: self._resolve_iso,
            Quantity.FOCAL_LENGTH_35MM_EQUIV: self._resolve_focal_length_35mm_equiv,
            Quantity.APERTURE_VALUE: self._resolve_aperture_value,
            Quantity.TIME_VALUE: self._resolve_time_value,
            Quantity.EXPOSURE_VALUE: self._resolve_exposure_value,
            Quantity.FILM_SPEED_VALUE: self._resolve_film_speed_value,
            Quantity.LUMINANCE_VALUE: self._resolve_luminance_value,
            Quantity.AVERAGE_LUMINANCE: self._resolve_average_luminance,
        }
        return resolvers[quantity]()

    def get(self, quantity: Quantity) -> float:
        """
        Compute a quantity.

        Raises:
            TagNotFoundError: If a required tag and its fallback are absent
            InsufficientDataError: If a composite quantity lacks inputs
            InvalidValueError: If a tag value violates a formula precondition
        """
        return self.resolve(quantity).unwrap()

    def get_f_number(self) -> float:
        return self.get(Quantity.F_NUMBER)

    def get_exposure_time(self) -> float:
        """Exposure time in seconds."""
        return self.get(Quantity.EXPOSURE_TIME)

    def get_iso(self) -> float:
        return self.get(Quantity.ISO)

    def get_focal_length_35mm_equiv(self) -> float:
        """Focal length in mm, as if the image sensor were 36mm x 24mm."""
        return self.get(Quantity.FOCAL_LENGTH_35MM_EQUIV)

    def get_aperture_value(self) -> float:
        """APEX aperture value (Av)."""
        return self.get(Quantity.APERTURE_VALUE)

    def get_time_value(self) -> float:
        """APEX time value (Tv)."""
        return self.get(Quantity.TIME_VALUE)

    def get_exposure_value(self) -> float:
        """Exposure value, Tv + Av."""
        return self.get(Quantity.EXPOSURE_VALUE)

    def get_film_speed_value(self) -> float:
        """APEX speed value (Sv), log2(ISO / 3.125)."""
        return self.get(Quantity.FILM_SPEED_VALUE)

    def get_luminance_value(self) -> float:
        """APEX brightness value (Bv)."""
        return self.get(Quantity.LUMINANCE_VALUE)

    def get_average_luminance(self) -> float:
        """Average scene luminance in cd/m^2."""
        return self.get(Quantity.AVERAGE_LUMINANCE)

    def get_thumbnail_location(self) -> int:
        """
        File offset of the embedded thumbnail.

        Raises:
            TagNotFoundError: If the thumbnail offset tag is absent
        """
        offset = self.query_by_tag(EXIF_ThumbnailOffset, TagType.INTEGER)
        return offset + self._store.base_location

    def summary(self) -> Dict[str, float]:
        """
        Compute every quantity that can be resolved.

        Returns:
            Dictionary mapping quantity names to values; quantities that
            fail to resolve are left out
        """
        result = {}
        for quantity in Quantity:
            resolution = self.resolve(quantity)
            if resolution.ok:
                result[quantity.value] = resolution.value
            else:
                logger.debug("Skipping %s: %s", quantity.value, resolution.error)
        return result
