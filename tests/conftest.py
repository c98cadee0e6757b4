"""Shared fixtures: synthetic JPEG/TIFF builders."""

import struct

import pytest

BYTE, ASCII, SHORT, LONG, RATIONAL, UNDEFINED, SLONG, SRATIONAL = 1, 2, 3, 4, 5, 7, 9, 10


class TiffBuilder:
    """
    Builds a TIFF payload with IFD0 and an optional Exif sub-IFD.

    Entries are (tag, type, count, payload). A bytes payload of up to 4
    bytes is stored inline, a longer one after the directory table. An
    int payload is written into the value slot as-is.
    """

    def __init__(self, byte_order=b'II'):
        self.byte_order = byte_order
        self.endian = '<' if byte_order == b'II' else '>'

    def pack(self, fmt, *values):
        return struct.pack(self.endian + fmt, *values)

    # entry helpers
    def ascii(self, tag, text):
        data = text.encode('utf-8') + b'\x00' if isinstance(text, str) else text
        return (tag, ASCII, len(data), data)

    def short(self, tag, *values):
        return (tag, SHORT, len(values), self.pack(f'{len(values)}H', *values))

    def long(self, tag, *values):
        return (tag, LONG, len(values), self.pack(f'{len(values)}I', *values))

    def slong(self, tag, *values):
        return (tag, SLONG, len(values), self.pack(f'{len(values)}i', *values))

    def rational(self, tag, *pairs):
        data = b''.join(self.pack('II', n, d) for n, d in pairs)
        return (tag, RATIONAL, len(pairs), data)

    def srational(self, tag, *pairs):
        data = b''.join(self.pack('ii', n, d) for n, d in pairs)
        return (tag, SRATIONAL, len(pairs), data)

    def undefined(self, tag, data):
        return (tag, UNDEFINED, len(data), data)

    def byte(self, tag, *values):
        return (tag, BYTE, len(values), bytes(values))

    def directory(self, entries, start):
        """Return the IFD at start followed by its out-of-line data."""
        table_size = 2 + 12 * len(entries) + 4
        data_offset = start + table_size
        table = self.pack('H', len(entries))
        data = b''
        for tag, tag_type, count, payload in entries:
            if isinstance(payload, int):
                slot = self.pack('I', payload)
            elif len(payload) <= 4:
                slot = payload.ljust(4, b'\x00')
            else:
                slot = self.pack('I', data_offset + len(data))
                data += payload
            table += self.pack('HHI', tag, tag_type, count) + slot
        table += self.pack('I', 0)
        return table + data

    def build(self, ifd0_entries, exif_entries=None):
        header = self.byte_order + self.pack('HI', 42, 8)
        if exif_entries is None:
            return header + self.directory(ifd0_entries, 8)

        placeholder = list(ifd0_entries) + [(0x8769, LONG, 1, 0)]
        exif_offset = 8 + len(self.directory(placeholder, 8))
        ifd0 = self.directory(list(ifd0_entries) + [(0x8769, LONG, 1, exif_offset)], 8)
        return header + ifd0 + self.directory(exif_entries, exif_offset)


def segment(marker, payload):
    return bytes([0xFF, marker]) + struct.pack('>H', len(payload) + 2) + payload


def wrap_jpeg(tiff, before=(), after=()):
    """Embed a TIFF payload in a minimal JPEG: SOI, APP0, APP1/Exif, SOS, EOI."""
    data = b'\xff\xd8'
    data += segment(0xE0, b'JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00')
    for seg in before:
        data += seg
    data += segment(0xE1, b'Exif\x00\x00' + tiff)
    for seg in after:
        data += seg
    data += segment(0xDA, b'\x01\x01\x00\x00\x3f\x00')
    data += b'\x12\x34\x56\xff\x00\x78'
    data += b'\xff\xd9'
    return data


@pytest.fixture
def tiff_le():
    return TiffBuilder(b'II')


@pytest.fixture
def tiff_be():
    return TiffBuilder(b'MM')


@pytest.fixture
def make_jpeg():
    return wrap_jpeg


@pytest.fixture
def make_segment():
    return segment


@pytest.fixture
def camera_jpeg(tiff_le):
    """A JPEG with a typical IFD0 and Exif IFD."""
    t = tiff_le
    ifd0 = [
        t.ascii(0x010F, "Canon"),
        t.ascii(0x0110, "Canon EOS R5"),
        t.short(0x0112, 1),
        t.ascii(0x0131, "Firmware 1.8.1"),
        t.ascii(0x0132, "2024:05:01 10:00:00"),
    ]
    exif = [
        t.rational(0x829A, (1, 250)),
        t.rational(0x829D, (28, 10)),
        t.short(0x8822, 3),
        t.short(0x8827, 400),
        t.ascii(0x9003, "2024:04:30 18:45:12"),
        t.short(0x9207, 5),
        t.short(0x9209, 16),
        t.rational(0x920A, (50, 1)),
        t.short(0xA403, 0),
        t.short(0xA406, 0),
        t.ascii(0xA434, "RF50mm F1.8 STM"),
    ]
    return wrap_jpeg(t.build(ifd0, exif))
