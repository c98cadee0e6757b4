# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Core extraction API

ExifExtractor turns the bytes of a JPEG file into a Summary. It performs
no I/O of its own; file access goes through a FileReader, so the decoder
can be driven with arbitrary byte strings.

Copyright 2025 DNAi inc.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from shootlog.date_formatter import RFC3339_UTC_FORMAT
from shootlog.exceptions import FileAccessError
from shootlog.exif_parser import ExifParser
from shootlog.summary import Summary
from shootlog.tiff_structure import DEFAULT_MAX_IFD_ENTRIES
from shootlog.value_formatter import TagValue

logger = logging.getLogger(__name__)


class FileReader:
    """
    Supplies the raw bytes of a named resource.

    Subclasses implement read_file and raise FileAccessError when the
    resource cannot be read.
    """

    def read_file(self, name: Union[str, Path]) -> bytes:
        raise NotImplementedError


class OSFileReader(FileReader):
    """FileReader backed by the local filesystem."""

    def read_file(self, name: Union[str, Path]) -> bytes:
        try:
            with open(name, 'rb') as f:
                return f.read()
        except OSError as e:
            raise FileAccessError(f"read file: {e}") from e


class ExifExtractor:
    """
    Extracts camera metadata summaries from JPEG data.

    Options are per instance; an extractor may be shared between threads
    as long as its options are not changed concurrently.
    """

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        """
        Initialize the extractor.

        Args:
            options: Option values to override, see available_options()

        Raises:
            ValueError: If an option name is not recognized
        """
        self.options: Dict[str, Any] = {}
        self._initialize_default_options()
        for option_name, value in (options or {}).items():
            self.set_option(option_name, value)

    @staticmethod
    def available_options() -> Dict[str, Dict[str, Any]]:
        """
        Return a dictionary of available options.

        Returns:
            Dictionary mapping option names to their metadata:
            {
                'OptionName': {
                    'description': 'Description of the option',
                    'type': 'bool|str|int',
                    'default': default_value,
                },
                ...
            }
        """
        return {
            'MaxIFDEntries': {
                'description': 'Maximum number of entries read from one IFD',
                'type': 'int',
                'default': DEFAULT_MAX_IFD_ENTRIES,
            },
            'DateFormat': {
                'description': 'strftime pattern used for the date_time field',
                'type': 'str',
                'default': RFC3339_UTC_FORMAT,
            },
            'DetectEncoding': {
                'description': 'Guess the encoding of text fields that are not valid UTF-8',
                'type': 'bool',
                'default': True,
            },
        }

    def _initialize_default_options(self) -> None:
        for option_name, option_info in self.available_options().items():
            self.options[option_name] = option_info['default']

    def set_option(self, option_name: str, value: Any) -> None:
        """
        Set an option value.

        Args:
            option_name: Name of the option (e.g., 'MaxIFDEntries')
            value: Value to set for the option

        Raises:
            ValueError: If the option name is not recognized or the value
                cannot be converted to the option's type

        Examples:
            >>> extractor = ExifExtractor()
            >>> extractor.set_option('DetectEncoding', 'false')
            >>> extractor.get_option('DetectEncoding')
            False
        """
        available = self.available_options()
        if option_name not in available:
            raise ValueError(f"Unknown option: {option_name}. Use available_options() to see valid options.")

        expected_type = available[option_name]['type']
        if expected_type == 'bool' and not isinstance(value, bool):
            if isinstance(value, str):
                value = value.lower() in ('true', '1', 'yes', 'on')
            else:
                value = bool(value)
        elif expected_type == 'int' and not isinstance(value, int):
            try:
                value = int(value)
            except (ValueError, TypeError):
                raise ValueError(f"Option {option_name} requires int value, got {type(value).__name__}")
        elif expected_type == 'str' and not isinstance(value, str):
            raise ValueError(f"Option {option_name} requires str value, got {type(value).__name__}")

        if option_name == 'MaxIFDEntries' and value < 1:
            raise ValueError(f"Option {option_name} must be positive, got {value}")

        self.options[option_name] = value

    def get_option(self, option_name: str, default: Any = None) -> Any:
        return self.options.get(option_name, default)

    def read_tags(self, file_data: bytes) -> Dict[int, TagValue]:
        """
        Decode every EXIF tag of a JPEG file.

        Args:
            file_data: Complete JPEG file data

        Returns:
            Mapping of tag id to formatted value (IFD0 and Exif IFD merged)

        Raises:
            MetadataReadError: If the container or TIFF structure is invalid
        """
        parser = ExifParser(
            file_data,
            max_ifd_entries=self.get_option('MaxIFDEntries'),
            detect_encoding=self.get_option('DetectEncoding'),
        )
        return parser.read()

    def extract(self, file_data: bytes) -> Summary:
        """
        Extract the camera metadata summary of a JPEG file.

        Raises:
            MetadataReadError: If the container or TIFF structure is invalid
        """
        tags = self.read_tags(file_data)
        return Summary.from_tags(tags, date_format=self.get_option('DateFormat'))

    def extract_file(self, path: Union[str, Path], reader: Optional[FileReader] = None) -> Summary:
        """
        Read path through reader and extract its summary.

        Args:
            path: Name of the image passed to the reader
            reader: Byte source, the local filesystem by default

        Raises:
            FileAccessError: If the reader fails
            MetadataReadError: If the data cannot be decoded
        """
        reader = reader or OSFileReader()
        logger.debug("reading %s", path)
        return self.extract(reader.read_file(path))


def parse_exif(file_data: bytes) -> Summary:
    """Extract a summary from JPEG bytes with default options."""
    return ExifExtractor().extract(file_data)


def extract_summary(reader: FileReader, path: Union[str, Path]) -> Summary:
    """Read path through reader and extract a summary with default options."""
    return ExifExtractor().extract_file(path, reader)
