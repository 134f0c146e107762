"""
Pytest fixtures for the DNExposure tests.

Provides tag store factories and a builder for minimal JPEG files carrying
an EXIF block, so the reader can be exercised without sample images.
"""

import struct
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import pytest

from dnexposure import ExposureResolver, TagStore, tags_from_dict


# =============================================================================
# Tag store fixtures
# =============================================================================

@pytest.fixture
def make_store() -> Callable[..., TagStore]:
    """Factory building a TagStore from EXIF tag names."""
    def _make(base_location: int = 0, **values) -> TagStore:
        return TagStore(tags_from_dict(values), base_location=base_location)
    return _make


@pytest.fixture
def make_resolver(make_store) -> Callable[..., ExposureResolver]:
    """Factory building an ExposureResolver from EXIF tag names."""
    def _make(base_location: int = 0, **values) -> ExposureResolver:
        return ExposureResolver(make_store(base_location=base_location, **values))
    return _make


# =============================================================================
# JPEG builder
# =============================================================================

Entry = Tuple[int, int, int, bytes]


def ascii_entry(tag: int, text: str) -> Entry:
    payload = text.encode('ascii') + b'\x00'
    return (tag, 2, len(payload), payload)


def short_entry(tag: int, value: int) -> Entry:
    return (tag, 3, 1, struct.pack('>H', value))


def long_entry(tag: int, value: int) -> Entry:
    return (tag, 4, 1, struct.pack('>I', value))


def rational_entry(tag: int, numerator: int, denominator: int) -> Entry:
    return (tag, 5, 1, struct.pack('>II', numerator, denominator))


def _padded(payload: bytes) -> int:
    return len(payload) + (len(payload) % 2)


def _ifd_size(entries: List[Entry]) -> int:
    size = 2 + 12 * len(entries) + 4
    return size + sum(_padded(p) for _, _, _, p in entries if len(p) > 4)


def _build_ifd(entries: List[Entry], offset: int, next_ifd: int = 0) -> bytes:
    """Serialize a big-endian IFD located at offset (relative to the TIFF header)."""
    entries = sorted(entries)
    data_offset = offset + 2 + 12 * len(entries) + 4
    body = struct.pack('>H', len(entries))
    extra = b''
    for tag, field_type, count, payload in entries:
        body += struct.pack('>HHI', tag, field_type, count)
        if len(payload) <= 4:
            body += payload.ljust(4, b'\x00')
        else:
            body += struct.pack('>I', data_offset + len(extra))
            extra += payload
            if len(payload) % 2:
                extra += b'\x00'
    body += struct.pack('>I', next_ifd)
    return body + extra


def build_tiff(ifd0: List[Entry], exif_ifd: List[Entry], ifd1: List[Entry]) -> bytes:
    """Build a TIFF structure with IFD0 -> EXIF IFD and IFD0 -> IFD1 links."""
    ifd0_offset = 8
    # ExifOffset pointer entry is added to IFD0
    ifd0_size = _ifd_size(ifd0 + [long_entry(0x8769, 0)])
    exif_offset = ifd0_offset + ifd0_size
    ifd1_offset = exif_offset + _ifd_size(exif_ifd)

    ifd0 = ifd0 + [long_entry(0x8769, exif_offset)]
    return (
        b'MM\x00\x2a' + struct.pack('>I', ifd0_offset)
        + _build_ifd(ifd0, ifd0_offset, next_ifd=ifd1_offset if ifd1 else 0)
        + _build_ifd(exif_ifd, exif_offset)
        + (_build_ifd(ifd1, ifd1_offset) if ifd1 else b'')
    )


def build_jpeg(tiff: bytes) -> bytes:
    """Wrap a TIFF structure in an APP1 segment of a minimal JPEG."""
    app1 = b'\xff\xe1' + struct.pack('>H', 2 + 6 + len(tiff)) + b'Exif\x00\x00' + tiff
    return b'\xff\xd8' + app1 + b'\xff\xd9'


@pytest.fixture
def sample_tags() -> Dict[str, List[Entry]]:
    """IFD entries of a typical camera JPEG."""
    return {
        'ifd0': [
            ascii_entry(0x010F, 'Canon'),
            ascii_entry(0x0110, 'Canon EOS 5D'),
        ],
        'exif': [
            rational_entry(0x829A, 1, 100),    # ExposureTime
            rational_entry(0x829D, 28, 10),    # FNumber
            short_entry(0x8827, 100),          # ISOSpeedRatings
            rational_entry(0x920A, 50, 1),     # FocalLength
            short_entry(0xA002, 4000),         # PixelXDimension
            short_entry(0xA003, 3000),         # PixelYDimension
            rational_entry(0xA20E, 4000, 1),   # FocalPlaneXResolution
            rational_entry(0xA20F, 3000, 1),   # FocalPlaneYResolution
            short_entry(0xA210, 2),            # FocalPlaneResolutionUnit
        ],
        'ifd1': [
            long_entry(0x0201, 1000),          # JPEGInterchangeFormat
            long_entry(0x0202, 100),           # JPEGInterchangeFormatLength
        ],
    }


@pytest.fixture
def sample_jpeg(tmp_path: Path, sample_tags) -> Path:
    """A minimal JPEG file with an EXIF block."""
    tiff = build_tiff(sample_tags['ifd0'], sample_tags['exif'], sample_tags['ifd1'])
    path = tmp_path / "sample.jpg"
    path.write_bytes(build_jpeg(tiff))
    return path


@pytest.fixture
def sample_tiff(tmp_path: Path, sample_tags) -> Path:
    """A bare TIFF structure with the same tags."""
    tiff = build_tiff(sample_tags['ifd0'], sample_tags['exif'], sample_tags['ifd1'])
    path = tmp_path / "sample.tif"
    path.write_bytes(tiff)
    return path
