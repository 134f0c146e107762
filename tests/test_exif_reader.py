"""
test_exif_reader.py - reading tag stores from files

Uses minimal JPEG/TIFF files generated in conftest.py.
"""

from pathlib import Path
from types import SimpleNamespace

import pytest

from dnexposure import (
    ExposureResolver,
    MetadataReadError,
    ReaderConfig,
    TagType,
    read_tag_store,
)
from dnexposure.exif_reader import convert_exifread_tags, find_tiff_base
from dnexposure.exif_tags import (
    EXIF_FNumber,
    EXIF_ISOSpeedRatings,
    EXIF_Make,
    EXIF_ThumbnailOffset,
)


# =============================================================================
# Reading files
# =============================================================================

class TestReadTagStore:

    def test_reads_jpeg(self, sample_jpeg: Path):
        store = read_tag_store(sample_jpeg)
        assert store.lookup(EXIF_Make, TagType.TEXT) == "Canon"
        assert store.lookup(EXIF_FNumber, TagType.FLOAT) == pytest.approx(2.8)
        assert store.lookup(EXIF_ISOSpeedRatings, TagType.INTEGER) == 100
        assert store.lookup(EXIF_ThumbnailOffset, TagType.INTEGER) == 1000

    def test_jpeg_base_location_is_tiff_header_offset(self, sample_jpeg: Path):
        # SOI (2) + APP1 marker (2) + length (2) + 'Exif\0\0' (6)
        assert read_tag_store(sample_jpeg).base_location == 12

    def test_reads_tiff(self, sample_tiff: Path):
        store = read_tag_store(sample_tiff)
        assert store.base_location == 0
        assert store.lookup(EXIF_FNumber, TagType.FLOAT) == pytest.approx(2.8)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(MetadataReadError):
            read_tag_store(tmp_path / "missing.jpg")

    def test_file_without_exif(self, tmp_path: Path):
        path = tmp_path / "plain.jpg"
        path.write_bytes(b'\xff\xd8\xff\xd9')
        with pytest.raises(MetadataReadError, match="Could not parse EXIF data"):
            read_tag_store(path)

    def test_not_an_image(self, tmp_path: Path):
        path = tmp_path / "notes.txt"
        path.write_text("no metadata here")
        with pytest.raises(MetadataReadError):
            read_tag_store(path)

    def test_reader_config_validation(self):
        with pytest.raises(ValueError):
            ReaderConfig(header_scan_bytes=4)

    def test_reader_config_options(self):
        assert ReaderConfig().exifread_options() == {'details': False, 'strict': False}
        options = ReaderConfig(strict=True, stop_tag='FNumber').exifread_options()
        assert options['strict'] is True
        assert options['stop_tag'] == 'FNumber'


class TestResolverFromFile:

    def test_resolves_quantities(self, sample_jpeg: Path):
        resolver = ExposureResolver.from_file(sample_jpeg)
        assert resolver.get_make() == "Canon"
        assert resolver.get_model() == "Canon EOS 5D"
        assert resolver.get_f_number() == pytest.approx(2.8)
        assert resolver.get_exposure_time() == pytest.approx(0.01)
        assert resolver.get_iso() == pytest.approx(100.0)
        assert resolver.get_average_luminance() == pytest.approx(2.8 * 2.8 * 12.5 / (0.01 * 100))
        assert resolver.get_focal_length_35mm_equiv() == pytest.approx(60.2246399, rel=1e-8)
        assert resolver.get_thumbnail_location() == 1012

    def test_construction_error(self, tmp_path: Path):
        with pytest.raises(MetadataReadError):
            ExposureResolver.from_file(tmp_path / "missing.jpg")


# =============================================================================
# exifread conversion
# =============================================================================

def _ifd_tag(tag: int, field_type: int, values):
    return SimpleNamespace(tag=tag, field_type=field_type, values=values)


class TestConvertExifreadTags:

    def test_keeps_image_and_exif_ifds(self):
        tags = convert_exifread_tags({
            'Image Make': _ifd_tag(0x010F, 2, 'Canon'),
            'EXIF FNumber': _ifd_tag(0x829D, 5, [2.8]),
            'EXIF ISOSpeedRatings': _ifd_tag(0x8827, 3, [100]),
        })
        assert tags == {0x010F: 'Canon', 0x829D: 2.8, 0x8827: 100}

    def test_drops_other_ifds(self):
        tags = convert_exifread_tags({
            'GPS GPSLatitudeRef': _ifd_tag(0x0001, 2, 'N'),
            'Interoperability InteroperabilityIndex': _ifd_tag(0x0001, 2, 'R98'),
            'MakerNote ISO': _ifd_tag(0x8827, 3, [800]),
            'JPEGThumbnail': b'\xff\xd8',
        })
        assert tags == {}

    def test_keeps_only_thumbnail_location_from_ifd1(self):
        tags = convert_exifread_tags({
            'Image ImageWidth': _ifd_tag(0x0100, 4, [4000]),
            'Thumbnail ImageWidth': _ifd_tag(0x0100, 4, [160]),
            'Thumbnail JPEGInterchangeFormat': _ifd_tag(0x0201, 4, [1000]),
        })
        assert tags == {0x0100: 4000, 0x0201: 1000}

    def test_skips_undefined_and_empty_values(self):
        tags = convert_exifread_tags({
            'EXIF ExifVersion': _ifd_tag(0x9000, 7, [48, 50, 51, 48]),
            'EXIF FNumber': _ifd_tag(0x829D, 5, []),
        })
        assert tags == {}


class TestFindTiffBase:

    def test_tiff_headers(self):
        assert find_tiff_base(b'II*\x00\x08\x00\x00\x00') == 0
        assert find_tiff_base(b'MM\x00*\x00\x00\x00\x08') == 0

    def test_exif_after_jfif_segment(self):
        jfif = b'\xff\xe0\x00\x10JFIF\x00' + b'\x00' * 9
        data = b'\xff\xd8' + jfif + b'\xff\xe1\x00\x10Exif\x00\x00MM\x00*'
        assert find_tiff_base(data) == 2 + len(jfif) + 10

    def test_jpeg_without_exif(self):
        assert find_tiff_base(b'\xff\xd8\xff\xda\x00\x08') is None

    def test_unknown_format(self):
        assert find_tiff_base(b'\x89PNG\r\n\x1a\n') is None
