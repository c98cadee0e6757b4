"""Tests for the extraction API, options and file readers."""

import random

import pytest

import shootlog
from shootlog import (
    ExifExtractor,
    FileAccessError,
    FileReader,
    MetadataNotFoundError,
    MetadataReadError,
    NotAnImageError,
    OSFileReader,
    Summary,
    extract_summary,
    parse_exif,
)

from conftest import wrap_jpeg


class DictReader(FileReader):
    """Serves file contents from memory."""

    def __init__(self, files):
        self.files = files
        self.requested = []

    def read_file(self, name):
        self.requested.append(name)
        try:
            return self.files[name]
        except KeyError:
            raise FileAccessError(f"read file: no such file {name}")


class TestOptions:
    """Per-extractor options."""

    def test_defaults(self):
        extractor = ExifExtractor()
        assert extractor.get_option('MaxIFDEntries') == 1024
        assert extractor.get_option('DateFormat') == '%Y-%m-%dT%H:%M:%SZ'
        assert extractor.get_option('DetectEncoding') is True

    def test_available_options_describe_defaults(self):
        for name, info in ExifExtractor.available_options().items():
            assert set(info) == {'description', 'type', 'default'}
            assert ExifExtractor().get_option(name) == info['default']

    def test_constructor_options(self):
        extractor = ExifExtractor({'MaxIFDEntries': '16', 'DetectEncoding': 'no'})
        assert extractor.get_option('MaxIFDEntries') == 16
        assert extractor.get_option('DetectEncoding') is False

    @pytest.mark.parametrize("value,expected", [
        ('true', True), ('1', True), ('on', True), ('false', False), (0, False), (True, True),
    ])
    def test_bool_coercion(self, value, expected):
        extractor = ExifExtractor()
        extractor.set_option('DetectEncoding', value)
        assert extractor.get_option('DetectEncoding') is expected

    def test_unknown_option(self):
        with pytest.raises(ValueError, match="Unknown option"):
            ExifExtractor({'FastMode': True})

    def test_bad_int(self):
        with pytest.raises(ValueError, match="requires int"):
            ExifExtractor().set_option('MaxIFDEntries', 'many')

    def test_non_positive_cap(self):
        with pytest.raises(ValueError, match="must be positive"):
            ExifExtractor().set_option('MaxIFDEntries', 0)

    def test_bad_str(self):
        with pytest.raises(ValueError, match="requires str"):
            ExifExtractor().set_option('DateFormat', 12)

    def test_get_option_default(self):
        assert ExifExtractor().get_option('Missing', 'fallback') == 'fallback'

    def test_instances_are_independent(self):
        first = ExifExtractor({'DateFormat': '%Y'})
        assert ExifExtractor().get_option('DateFormat') != first.get_option('DateFormat')


class TestExtract:
    """Bytes in, summary out."""

    def test_parse_exif(self, camera_jpeg):
        summary = parse_exif(camera_jpeg)
        assert isinstance(summary, Summary)
        assert summary.make == "Canon"
        assert summary.exposure_time == "1/250"

    def test_idempotent(self, camera_jpeg):
        """Decoding the same bytes twice gives identical records."""
        extractor = ExifExtractor()
        assert extractor.extract(camera_jpeg) == extractor.extract(camera_jpeg)
        assert parse_exif(camera_jpeg) == parse_exif(camera_jpeg)

    def test_date_format_option(self, camera_jpeg):
        summary = ExifExtractor({'DateFormat': '%Y-%m-%d'}).extract(camera_jpeg)
        assert summary.date_time == "2024-04-30"

    def test_max_entries_option(self, camera_jpeg):
        """A cap of 2 keeps Make and Model and loses the Exif IFD pointer."""
        summary = ExifExtractor({'MaxIFDEntries': 2}).extract(camera_jpeg)
        assert summary.to_dict() == {"make": "Canon", "model": "Canon EOS R5"}

    def test_detect_encoding_option(self, tiff_le, monkeypatch):
        monkeypatch.setattr(shootlog.value_formatter.chardet, 'detect',
                            lambda data: {'encoding': 'cp1251', 'confidence': 0.99})
        data = wrap_jpeg(tiff_le.build([tiff_le.ascii(0x010F, b'\xc7\xc5\xcd\xc8\xd2\x00')]))
        assert ExifExtractor().extract(data).make == "ЗЕНИТ"
        assert ExifExtractor({'DetectEncoding': False}).extract(data).make == "ÇÅÍÈÒ"

    def test_read_tags(self, camera_jpeg):
        tags = ExifExtractor().read_tags(camera_jpeg)
        assert tags[0x829A].value == "1/250"
        assert 0x8769 in tags

    def test_not_an_image(self):
        with pytest.raises(NotAnImageError):
            parse_exif(b'not an image at all')

    def test_errors_share_a_base(self):
        with pytest.raises(MetadataReadError):
            parse_exif(b'\xff\xd8\xff\xd9')

    def test_error_message(self):
        with pytest.raises(MetadataNotFoundError) as excinfo:
            parse_exif(b'\xff\xd8\xff\xd9')
        assert excinfo.value.message == "EXIF data not found"
        assert str(excinfo.value) == "EXIF data not found"


class TestRobustness:
    """Damaged input never escapes as anything but a decode error."""

    def test_truncations(self, camera_jpeg):
        for length in range(len(camera_jpeg)):
            try:
                parse_exif(camera_jpeg[:length])
            except MetadataReadError:
                pass

    def test_byte_flips(self, camera_jpeg):
        rng = random.Random(1234)
        for _ in range(500):
            data = bytearray(camera_jpeg)
            for _ in range(rng.randint(1, 8)):
                data[rng.randrange(len(data))] = rng.randrange(256)
            try:
                result = parse_exif(bytes(data))
            except MetadataReadError:
                continue
            assert isinstance(result, Summary)


class TestFileReaders:
    """Byte sources."""

    def test_os_reader(self, tmp_path, camera_jpeg):
        path = tmp_path / "IMG_0001.JPG"
        path.write_bytes(camera_jpeg)
        assert OSFileReader().read_file(path) == camera_jpeg
        assert ExifExtractor().extract_file(str(path)).model == "Canon EOS R5"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileAccessError, match="read file") as excinfo:
            OSFileReader().read_file(tmp_path / "missing.jpg")
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_directory_is_not_a_file(self, tmp_path):
        with pytest.raises(FileAccessError):
            ExifExtractor().extract_file(tmp_path)

    def test_custom_reader(self, camera_jpeg):
        reader = DictReader({"a.jpg": camera_jpeg})
        summary = extract_summary(reader, "a.jpg")
        assert summary.lens_model == "RF50mm F1.8 STM"
        assert reader.requested == ["a.jpg"]

    def test_custom_reader_failure(self):
        with pytest.raises(FileAccessError):
            extract_summary(DictReader({}), "b.jpg")

    def test_base_reader_is_abstract(self):
        with pytest.raises(NotImplementedError):
            FileReader().read_file("x.jpg")
