# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
shootlog - camera metadata from JPEG files

Reads the EXIF block of a JPEG image by walking its binary structure
(JPEG segments, TIFF header, IFD0 and the Exif sub-IFD) and reports
make, model, lens, timestamp and exposure settings.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from shootlog.core import (
    ExifExtractor,
    FileReader,
    OSFileReader,
    extract_summary,
    parse_exif,
)
from shootlog.exceptions import (
    FileAccessError,
    MalformedContainerError,
    MalformedMetadataError,
    MetadataNotFoundError,
    MetadataReadError,
    NotAnImageError,
    ShootlogError,
)
from shootlog.summary import Summary
from shootlog.value_formatter import TagValue

__all__ = [
    "ExifExtractor",
    "FileReader",
    "OSFileReader",
    "extract_summary",
    "parse_exif",
    "Summary",
    "TagValue",
    "ShootlogError",
    "FileAccessError",
    "MetadataReadError",
    "NotAnImageError",
    "MalformedContainerError",
    "MetadataNotFoundError",
    "MalformedMetadataError",
]
