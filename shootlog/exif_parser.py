# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF metadata parser

This module reads EXIF metadata from JPEG files: it locates the APP1
segment, parses the TIFF header, IFD0 and the Exif sub-IFD, and returns
every decodable tag as a formatted string keyed by tag id.

Copyright 2025 DNAi inc.
"""

import logging
from typing import Dict, Optional

from shootlog.exif_tags import ExifTag, tag_name
from shootlog.jpeg_segments import find_exif_segment
from shootlog.tiff_structure import (
    DEFAULT_MAX_IFD_ENTRIES,
    ExifTagType,
    TIFFStructure,
)
from shootlog.value_formatter import TagValue, format_tag_value

logger = logging.getLogger(__name__)


class ExifParser:
    """
    Parser for EXIF metadata from JPEG files.

    The parser holds no state between calls to read(); each call decodes
    the data it was constructed with from scratch.
    """

    def __init__(
        self,
        file_data: bytes,
        max_ifd_entries: int = DEFAULT_MAX_IFD_ENTRIES,
        detect_encoding: bool = True
    ):
        """
        Initialize the EXIF parser.

        Args:
            file_data: Complete JPEG file data
            max_ifd_entries: Upper bound on entries read from one directory
            detect_encoding: Whether to guess the encoding of non-UTF-8 text
        """
        self.file_data = file_data
        self.max_ifd_entries = max_ifd_entries
        self.detect_encoding = detect_encoding

    def read(self) -> Dict[int, TagValue]:
        """
        Read EXIF tags from the JPEG data.

        Returns:
            Mapping of tag id to formatted value, IFD0 and Exif IFD merged

        Raises:
            NotAnImageError, MalformedContainerError, MetadataNotFoundError,
            MalformedMetadataError
        """
        start, end = find_exif_segment(self.file_data)
        logger.debug("EXIF payload at bytes %d-%d", start, end)
        return self.parse_tiff(self.file_data[start:end])

    def parse_tiff(self, tiff_data: bytes) -> Dict[int, TagValue]:
        """
        Parse a TIFF payload (starting at the II/MM signature).

        Tags from the Exif sub-IFD replace same-numbered tags from IFD0.
        """
        structure = TIFFStructure(tiff_data, self.max_ifd_entries)
        ifd0_offset = structure.parse_header()

        tags = self._parse_ifd(structure, ifd0_offset)

        exif_offset = self._exif_ifd_offset(tags)
        if exif_offset:
            logger.debug("Exif IFD at offset %d", exif_offset)
            tags.update(self._parse_ifd(structure, exif_offset))

        return tags

    def _parse_ifd(self, structure: TIFFStructure, offset: int) -> Dict[int, TagValue]:
        tags: Dict[int, TagValue] = {}
        for entry in structure.parse_ifd(offset):
            value = format_tag_value(structure, entry, self.detect_encoding)
            if value is None:
                continue
            if entry.tag_id in tags:
                logger.debug("duplicate tag %s, keeping the later entry", tag_name(entry.tag_id))
            tags[entry.tag_id] = value
        return tags

    @staticmethod
    def _exif_ifd_offset(tags: Dict[int, TagValue]) -> Optional[int]:
        # Only a single SHORT or LONG is a usable pointer
        pointer = tags.get(ExifTag.EXIF_IFD_POINTER)
        if pointer is None:
            return None
        if pointer.tag_type not in (ExifTagType.SHORT, ExifTagType.LONG) or not pointer.value.isdigit():
            logger.debug("ignoring Exif IFD pointer of type %d: %r", pointer.tag_type, pointer.value)
            return None
        return int(pointer.value)
