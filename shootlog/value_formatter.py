# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Value formatter for converting raw IFD entry values to strings.

Formatting rules per field type:

- ASCII: text up to the first NUL
- SHORT, LONG, SLONG: decimal, several values joined with ","
- RATIONAL, SRATIONAL: "numerator/denominator", several values joined
  with ","; a zero denominator drops a single-valued tag and renders as
  "0" inside a multi-valued one
- BYTE, UNDEFINED: lowercase hex of the first byte

Entries of any other type, with a zero count or with a value outside the
payload are dropped (format_tag_value returns None).

Copyright 2025 DNAi inc.
"""

import logging
import struct
from dataclasses import dataclass
from typing import Optional

import chardet

from shootlog.tiff_structure import (
    TAG_SIZES,
    DirectoryEntry,
    ExifTagType,
    TIFFStructure,
)

logger = logging.getLogger(__name__)

# struct codes for the integer types
_INTEGER_CODES = {
    ExifTagType.SHORT: 'H',
    ExifTagType.LONG: 'I',
    ExifTagType.SLONG: 'i',
}


@dataclass(frozen=True)
class TagValue:
    """A formatted tag value and the field type it was decoded from."""
    value: str
    tag_type: int


def read_entry_data(structure: TIFFStructure, entry: DirectoryEntry) -> Optional[bytes]:
    """
    Return the raw value bytes of an entry.

    Values of up to 4 bytes live in the entry's value slot; larger
    values live at value_offset in the payload.

    Returns:
        The value bytes, or None if the type is unknown, the count is zero
        or the value does not fit in the payload
    """
    try:
        tag_type = ExifTagType(entry.tag_type)
    except ValueError:
        return None
    if entry.count == 0:
        return None

    total_size = TAG_SIZES[tag_type] * entry.count
    if total_size <= 4:
        return entry.value_slot[:total_size]
    return structure.read_bytes(entry.value_offset, total_size)


def decode_text(data: bytes, detect_encoding: bool = True) -> str:
    """
    Decode an ASCII field.

    EXIF ASCII fields are frequently written in UTF-8 or a legacy
    code page. UTF-8 is tried first, then the encoding chardet reports,
    then Latin-1, which accepts any byte sequence.
    """
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError:
        pass

    if detect_encoding:
        detected = chardet.detect(data)
        encoding = detected.get('encoding')
        if encoding and (detected.get('confidence') or 0.0) > 0.5:
            try:
                return data.decode(encoding)
            except (UnicodeDecodeError, LookupError):
                pass

    return data.decode('latin-1')


def format_ascii(data: bytes, detect_encoding: bool = True) -> str:
    null_pos = data.find(b'\x00')
    if null_pos >= 0:
        data = data[:null_pos]
    return decode_text(data, detect_encoding)


def format_integers(data: bytes, endian: str, tag_type: ExifTagType, count: int) -> str:
    code = _INTEGER_CODES[tag_type]
    values = struct.unpack(f'{endian}{count}{code}', data)
    return ",".join(str(v) for v in values)


def format_rationals(data: bytes, endian: str, count: int, signed: bool = False) -> Optional[str]:
    """
    Format count numerator/denominator pairs.

    Returns None for a single pair with a zero denominator.
    """
    code = 'ii' if signed else 'II'
    parts = []
    for i in range(count):
        numerator, denominator = struct.unpack(f'{endian}{code}', data[i * 8:(i + 1) * 8])
        if denominator == 0:
            if count == 1:
                return None
            parts.append("0")
            continue
        parts.append(f"{numerator}/{denominator}")
    return ",".join(parts)


def format_tag_value(
    structure: TIFFStructure,
    entry: DirectoryEntry,
    detect_encoding: bool = True
) -> Optional[TagValue]:
    """
    Decode and format one directory entry.

    Args:
        structure: Parsed TIFF payload the entry belongs to
        entry: The directory entry
        detect_encoding: Whether to guess the encoding of non-UTF-8 text

    Returns:
        TagValue, or None if the entry cannot be formatted
    """
    data = read_entry_data(structure, entry)
    if data is None:
        logger.debug("dropping tag 0x%04X: type %d, count %d not readable",
                     entry.tag_id, entry.tag_type, entry.count)
        return None

    tag_type = ExifTagType(entry.tag_type)
    endian = structure.endian

    if tag_type == ExifTagType.ASCII:
        value = format_ascii(data, detect_encoding)
    elif tag_type in _INTEGER_CODES:
        value = format_integers(data, endian, tag_type, entry.count)
    elif tag_type in (ExifTagType.RATIONAL, ExifTagType.SRATIONAL):
        value = format_rationals(data, endian, entry.count, signed=tag_type == ExifTagType.SRATIONAL)
    else:
        # BYTE and UNDEFINED: only the first byte is meaningful here
        value = format(data[0], 'x')

    if value is None:
        logger.debug("dropping tag 0x%04X: zero denominator", entry.tag_id)
        return None
    return TagValue(value=value, tag_type=entry.tag_type)
