# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TIFF structure utilities

This module parses the TIFF header and Image File Directories embedded
in an EXIF payload. All offsets are relative to the start of the payload.

Copyright 2025 DNAi inc.
"""

import logging
import struct
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Optional

from shootlog.exceptions import MalformedMetadataError

logger = logging.getLogger(__name__)

TIFF_MAGIC = 0x002A
TIFF_HEADER_SIZE = 8
IFD_ENTRY_SIZE = 12
DEFAULT_MAX_IFD_ENTRIES = 1024


class ByteOrder(Enum):
    """TIFF byte order; the value is the matching struct prefix."""
    LITTLE = '<'  # II (Intel)
    BIG = '>'  # MM (Motorola)

    @classmethod
    def from_signature(cls, signature: bytes) -> 'ByteOrder':
        if signature == b'II':
            return cls.LITTLE
        if signature == b'MM':
            return cls.BIG
        raise MalformedMetadataError("invalid TIFF header: unknown byte order")


class ExifTagType(IntEnum):
    """EXIF tag data types"""
    BYTE = 1
    ASCII = 2
    SHORT = 3
    LONG = 4
    RATIONAL = 5
    UNDEFINED = 7
    SLONG = 9
    SRATIONAL = 10


# EXIF tag sizes in bytes
TAG_SIZES = {
    ExifTagType.BYTE: 1,
    ExifTagType.ASCII: 1,
    ExifTagType.SHORT: 2,
    ExifTagType.LONG: 4,
    ExifTagType.RATIONAL: 8,
    ExifTagType.UNDEFINED: 1,
    ExifTagType.SLONG: 4,
    ExifTagType.SRATIONAL: 8,
}


@dataclass(frozen=True)
class DirectoryEntry:
    """A 12-byte IFD entry as stored on disk."""
    tag_id: int
    tag_type: int
    count: int
    value_slot: bytes
    value_offset: int
    offset: int


class TIFFStructure:
    """
    TIFF payload parser.

    Reads the header and directory tables of one TIFF payload. Every
    read is checked against the payload length first.
    """

    def __init__(self, file_data: bytes, max_ifd_entries: int = DEFAULT_MAX_IFD_ENTRIES):
        """
        Initialize TIFF structure parser.

        Args:
            file_data: TIFF payload (starting at the II/MM signature)
            max_ifd_entries: Upper bound on entries read from one directory
        """
        self.file_data = file_data
        self.max_ifd_entries = max_ifd_entries
        self.byte_order: Optional[ByteOrder] = None
        self.ifd0_offset: int = 0

    @property
    def endian(self) -> str:
        if self.byte_order is None:
            raise MalformedMetadataError("TIFF header has not been parsed")
        return self.byte_order.value

    def parse_header(self) -> int:
        """
        Parse the 8-byte TIFF header.

        Returns:
            Offset of the first IFD

        Raises:
            MalformedMetadataError: If the header is short, the byte order
                is unknown or the magic number is wrong
        """
        if len(self.file_data) < TIFF_HEADER_SIZE:
            raise MalformedMetadataError("TIFF header too short")

        self.byte_order = ByteOrder.from_signature(self.file_data[:2])

        magic = self.unpack('H', 2)[0]
        if magic != TIFF_MAGIC:
            raise MalformedMetadataError("invalid TIFF header: bad magic number")

        self.ifd0_offset = self.unpack('I', 4)[0]
        logger.debug("TIFF header: %s byte order, IFD0 at %d",
                     self.byte_order.name.lower(), self.ifd0_offset)
        return self.ifd0_offset

    def unpack(self, fmt: str, offset: int) -> tuple:
        """
        Unpack a structure at offset in the payload's byte order.

        Raises:
            MalformedMetadataError: If the read would leave the payload
        """
        size = struct.calcsize(self.endian + fmt)
        if offset < 0 or offset + size > len(self.file_data):
            raise MalformedMetadataError(
                f"read of {size} bytes at offset {offset} exceeds TIFF payload of {len(self.file_data)} bytes"
            )
        return struct.unpack(self.endian + fmt, self.file_data[offset:offset + size])

    def read_bytes(self, offset: int, size: int) -> Optional[bytes]:
        """Return size bytes at offset, or None if they are not all inside the payload."""
        if offset < 0 or size < 0 or offset + size > len(self.file_data):
            return None
        return self.file_data[offset:offset + size]

    def parse_ifd(self, offset: int) -> List[DirectoryEntry]:
        """
        Read the entry table of the IFD at offset.

        An offset of zero means "no directory" and yields no entries.

        Args:
            offset: Offset of the IFD relative to the payload start

        Returns:
            Entries in on-disk order

        Raises:
            MalformedMetadataError: If the entry count or the entry table
                lies outside the payload
        """
        if offset == 0:
            return []

        if offset + 2 > len(self.file_data):
            raise MalformedMetadataError(f"IFD offset out of range: {offset}")
        num_entries = self.unpack('H', offset)[0]

        entries_start = offset + 2
        if entries_start + num_entries * IFD_ENTRY_SIZE > len(self.file_data):
            raise MalformedMetadataError(
                f"IFD entries out of range: {num_entries} entries at offset {offset}"
            )

        if num_entries > self.max_ifd_entries:
            logger.warning("IFD at offset %d declares %d entries, reading the first %d",
                           offset, num_entries, self.max_ifd_entries)
            num_entries = self.max_ifd_entries

        logger.debug("IFD at offset %d: %d entries", offset, num_entries)

        entries = []
        for i in range(num_entries):
            entry_offset = entries_start + i * IFD_ENTRY_SIZE
            tag_id, tag_type, count, value_slot = self.unpack('HHI4s', entry_offset)
            value_offset = struct.unpack(f'{self.endian}I', value_slot)[0]
            entries.append(DirectoryEntry(
                tag_id=tag_id,
                tag_type=tag_type,
                count=count,
                value_slot=value_slot,
                value_offset=value_offset,
                offset=entry_offset,
            ))

        return entries
