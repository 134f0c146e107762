# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Photographic exposure formulas

APEX (Additive System of Photographic Exposure) conversions and the optical
formulas used by the exposure resolver. APEX values are log base 2; focal
lengths are in millimeters; exposure times are in seconds.

Copyright 2025 DNAi inc.
"""

import math

from dnexposure.exceptions import InvalidValueError
from dnexposure.exif_tags import ResolutionUnit


# Relationship between ASA arithmetic film speed and the APEX speed value,
# as defined by EXIF 2.2
FILM_SPEED_N = 1 / 3.125

# Reflected light meter calibration constant
LIGHT_METER_K = 12.5

# Diagonal of a 36x24 mm frame
FULL_FRAME_DIAGONAL_MM = math.sqrt(36.0 * 36.0 + 24.0 * 24.0)


def _log2(value: float, name: str) -> float:
    if value <= 0:
        raise InvalidValueError(f"{name} must be positive to take its logarithm, got {value}")
    return math.log(value) / math.log(2.0)


def _pow2(exponent: float, name: str) -> float:
    try:
        return math.pow(2.0, exponent)
    except OverflowError:
        raise InvalidValueError(f"{name} is out of range: 2^{exponent} overflows") from None


def f_number_from_aperture_value(av: float) -> float:
    """F-number from APEX aperture value: 2^(Av/2)."""
    return _pow2(av * 0.5, "ApertureValue")


def aperture_value_from_f_number(f_number: float) -> float:
    """APEX aperture value from f-number: 2*log2(N)."""
    return 2.0 * _log2(f_number, "FNumber")


def exposure_time_from_time_value(tv: float) -> float:
    """Exposure time in seconds from APEX time value: 2^(-Tv)."""
    return _pow2(-tv, "ShutterSpeedValue")


def time_value_from_exposure_time(exposure_time: float) -> float:
    """APEX time value from exposure time: log2(1/T)."""
    if exposure_time <= 0:
        raise InvalidValueError(f"ExposureTime must be positive, got {exposure_time}")
    return _log2(1.0 / exposure_time, "1/ExposureTime")


def film_speed_value(iso: float) -> float:
    """APEX speed value from ISO: log2(ISO * N)."""
    return _log2(iso * FILM_SPEED_N, "ISO speed")


def luminance_value(av: float, tv: float, sv: float) -> float:
    """APEX brightness value: Av + Tv - Sv."""
    return av + tv - sv


def average_luminance(f_number: float, exposure_time: float, iso: float) -> float:
    """
    Average scene luminance in cd/m^2.

    B = N^2 * K / (T * S)

    Raises:
        InvalidValueError: If exposure_time * iso is zero
    """
    denominator = exposure_time * iso
    if denominator == 0:
        raise InvalidValueError("Exposure time and ISO must be non-zero to compute average scene luminance")
    return (f_number * f_number * LIGHT_METER_K) / denominator


def resolution_unit(code: int) -> ResolutionUnit:
    """
    Map a FocalPlaneResolutionUnit code to a ResolutionUnit.

    Raises:
        InvalidValueError: If the code is not inch (2) or centimeter (3)
    """
    try:
        return ResolutionUnit(code)
    except ValueError:
        raise InvalidValueError("Illegal value for FocalPlaneResolutionUnit") from None


def focal_length_35mm_equiv(
    focal_length: float,
    pixel_x_dimension: float,
    pixel_y_dimension: float,
    focal_plane_x_resolution: float,
    focal_plane_y_resolution: float,
    unit: ResolutionUnit = ResolutionUnit.INCH,
) -> float:
    """
    Scale a focal length to what it would be on a 36x24 mm sensor.

    The physical sensor size is backed out of the pixel dimensions and the
    focal plane resolution (pixels per unit).

    Args:
        focal_length: Actual focal length in mm
        pixel_x_dimension: Image width in pixels
        pixel_y_dimension: Image height in pixels
        focal_plane_x_resolution: Horizontal pixels per unit on the sensor
        focal_plane_y_resolution: Vertical pixels per unit on the sensor
        unit: Unit of the focal plane resolution

    Returns:
        35mm equivalent focal length in mm

    Raises:
        InvalidValueError: If a resolution is not positive or the sensor
            diagonal comes out as zero
    """
    if focal_plane_x_resolution <= 0:
        raise InvalidValueError("Illegal value for FocalPlaneXResolution")
    if focal_plane_y_resolution <= 0:
        raise InvalidValueError("Illegal value for FocalPlaneYResolution")

    x_pixel_size_mm = unit.millimeters / focal_plane_x_resolution
    y_pixel_size_mm = unit.millimeters / focal_plane_y_resolution
    sensor_width_mm = x_pixel_size_mm * pixel_x_dimension
    sensor_height_mm = y_pixel_size_mm * pixel_y_dimension
    sensor_diagonal_mm = math.hypot(sensor_width_mm, sensor_height_mm)
    if sensor_diagonal_mm == 0:
        raise InvalidValueError("Illegal value while computing 35mm equiv focal length")

    return focal_length * FULL_FRAME_DIAGONAL_MM / sensor_diagonal_mm
