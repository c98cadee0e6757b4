# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Date formatting utilities

Converts EXIF timestamps ("YYYY:MM:DD HH:MM:SS") into a standard
representation. EXIF timestamps carry no zone and are rendered as UTC.

Copyright 2025 DNAi inc.
"""

from datetime import datetime
from typing import Optional, Union
import re

EXIF_DATE_FORMAT = '%Y:%m:%d %H:%M:%S'
RFC3339_UTC_FORMAT = '%Y-%m-%dT%H:%M:%SZ'

# strptime alone would also accept unpadded fields such as "2024:1:2 3:4:5"
EXIF_DATE_PATTERN = re.compile(r'^\d{4}:\d{2}:\d{2} \d{2}:\d{2}:\d{2}$')


class DateFormatter:
    """
    Reformats EXIF date/time strings.

    Text that is not a well-formed EXIF timestamp (including the
    "0000:00:00 00:00:00" placeholder some cameras write) is returned
    unchanged.
    """

    @staticmethod
    def parse_exif_date(date_str: str) -> Optional[datetime]:
        """
        Parse EXIF date string to datetime object.

        Returns:
            Naive datetime, or None if date_str is not YYYY:MM:DD HH:MM:SS
        """
        if not EXIF_DATE_PATTERN.match(date_str):
            return None
        try:
            return datetime.strptime(date_str, EXIF_DATE_FORMAT)
        except ValueError:
            return None

    @staticmethod
    def format_date(
        date_value: Union[str, datetime],
        format_string: str = RFC3339_UTC_FORMAT
    ) -> str:
        """
        Format a date value.

        Args:
            date_value: Date as string (EXIF format) or datetime object
            format_string: strftime pattern, RFC 3339 UTC by default

        Returns:
            Formatted date string, or date_value unchanged if it cannot be parsed
        """
        if isinstance(date_value, str):
            dt = DateFormatter.parse_exif_date(date_value)
            if dt is None:
                return date_value
        else:
            dt = date_value

        try:
            return dt.strftime(format_string)
        except ValueError:
            # Fallback if format is invalid
            return dt.isoformat()
