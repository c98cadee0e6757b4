# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
JPEG segment locator

Walks the marker segments of a JPEG file up to the start of scan and
finds the APP1 segment that carries EXIF data.

Copyright 2025 DNAi inc.
"""

import logging
import struct
from dataclasses import dataclass
from typing import Iterator, Tuple

from shootlog.exceptions import (
    MalformedContainerError,
    MetadataNotFoundError,
    NotAnImageError,
)

logger = logging.getLogger(__name__)

# JPEG marker codes (the byte following 0xFF)
TEM = 0x01
SOI = 0xD8  # Start of Image
EOI = 0xD9  # End of Image
SOS = 0xDA  # Start of Scan
APP1 = 0xE1  # APP1 (EXIF, XMP)

# Markers that carry no length field
STANDALONE_MARKERS = frozenset([TEM, SOI] + list(range(0xD0, 0xD8)))

EXIF_HEADER = b'Exif\x00\x00'


@dataclass(frozen=True)
class JPEGSegment:
    """One marker segment; offset points at its 0xFF byte."""
    marker: int
    offset: int
    length: int = 0

    @property
    def payload_start(self) -> int:
        return self.offset + 4 if self.length else self.offset + 2

    @property
    def payload_end(self) -> int:
        return self.offset + 2 + self.length


def iter_segments(file_data: bytes) -> Iterator[JPEGSegment]:
    """
    Iterate over the marker segments that precede the image data.

    Iteration stops at SOS or EOI, or when the data runs out.

    Args:
        file_data: Complete JPEG file data

    Yields:
        JPEGSegment for every marker before the scan

    Raises:
        NotAnImageError: If the data does not start with SOI
        MalformedContainerError: If a segment length is inconsistent
            with the data, or a marker is missing between segments
    """
    if len(file_data) < 2 or file_data[0] != 0xFF or file_data[1] != SOI:
        raise NotAnImageError("not a JPEG image")

    offset = 2
    while offset + 2 <= len(file_data):
        if file_data[offset] != 0xFF:
            raise MalformedContainerError(f"invalid JPEG marker at offset {offset}")

        # Any number of 0xFF fill bytes may precede a marker code
        while offset + 1 < len(file_data) and file_data[offset + 1] == 0xFF:
            offset += 1
        if offset + 2 > len(file_data):
            break

        marker = file_data[offset + 1]
        if marker in (SOS, EOI):
            logger.debug("stopping at marker 0xFF%02X at offset %d", marker, offset)
            return
        if marker in STANDALONE_MARKERS:
            yield JPEGSegment(marker, offset)
            offset += 2
            continue
        if marker == 0x00:
            raise MalformedContainerError(f"invalid JPEG marker at offset {offset}")

        if offset + 4 > len(file_data):
            raise MalformedContainerError(f"invalid segment at offset {offset}: truncated length field")
        length = struct.unpack('>H', file_data[offset + 2:offset + 4])[0]
        if length < 2 or offset + 2 + length > len(file_data):
            raise MalformedContainerError(
                f"invalid segment at offset {offset}: length {length} "
                f"does not fit in {len(file_data)} bytes"
            )

        logger.debug("segment 0xFF%02X at offset %d, length %d", marker, offset, length)
        yield JPEGSegment(marker, offset, length)
        offset += 2 + length


def find_exif_segment(file_data: bytes) -> Tuple[int, int]:
    """
    Locate the TIFF payload of the EXIF APP1 segment.

    Args:
        file_data: Complete JPEG file data

    Returns:
        (start, end) of the TIFF payload, i.e. the bytes following the
        Exif header up to the end of the APP1 segment

    Raises:
        NotAnImageError: If the data is not a JPEG
        MalformedContainerError: If the segment structure is corrupt
        MetadataNotFoundError: If no APP1 segment carries the Exif header
    """
    for segment in iter_segments(file_data):
        if segment.marker != APP1:
            continue
        start = segment.payload_start
        if segment.payload_end - start >= len(EXIF_HEADER) and \
                file_data[start:start + len(EXIF_HEADER)] == EXIF_HEADER:
            return start + len(EXIF_HEADER), segment.payload_end
        # XMP and other APP1 payloads
        logger.debug("skipping APP1 segment without Exif header at offset %d", segment.offset)

    raise MetadataNotFoundError("EXIF data not found")
