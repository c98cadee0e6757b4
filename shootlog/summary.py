# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Camera metadata summary

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass, fields
from typing import Dict, Optional, Sequence, Tuple

from shootlog.date_formatter import RFC3339_UTC_FORMAT, DateFormatter
from shootlog.exif_tags import ExifTag
from shootlog.value_formatter import TagValue

# Summary field -> tags to take it from, in order of preference
SUMMARY_TAGS: Tuple[Tuple[str, Sequence[ExifTag]], ...] = (
    ('make', (ExifTag.MAKE,)),
    ('model', (ExifTag.MODEL,)),
    ('lens_model', (ExifTag.LENS_MODEL,)),
    ('date_time', (ExifTag.DATE_TIME_ORIGINAL, ExifTag.DATE_TIME)),
    ('f_number', (ExifTag.F_NUMBER,)),
    ('exposure_time', (ExifTag.EXPOSURE_TIME,)),
    ('iso_speed', (ExifTag.ISO_SPEED,)),
    ('focal_length', (ExifTag.FOCAL_LENGTH,)),
    ('exposure_program', (ExifTag.EXPOSURE_PROGRAM,)),
    ('metering_mode', (ExifTag.METERING_MODE,)),
    ('white_balance', (ExifTag.WHITE_BALANCE,)),
    ('software', (ExifTag.SOFTWARE,)),
    ('orientation', (ExifTag.ORIENTATION,)),
    ('flash', (ExifTag.FLASH,)),
    ('scene_capture_type', (ExifTag.SCENE_CAPTURE_TYPE,)),
)


@dataclass
class Summary:
    """Camera settings of one image; fields without a tag are None."""
    make: Optional[str] = None
    model: Optional[str] = None
    lens_model: Optional[str] = None
    date_time: Optional[str] = None
    f_number: Optional[str] = None
    exposure_time: Optional[str] = None
    iso_speed: Optional[str] = None
    focal_length: Optional[str] = None
    exposure_program: Optional[str] = None
    metering_mode: Optional[str] = None
    white_balance: Optional[str] = None
    software: Optional[str] = None
    orientation: Optional[str] = None
    flash: Optional[str] = None
    scene_capture_type: Optional[str] = None

    @classmethod
    def from_tags(
        cls,
        tags: Dict[int, TagValue],
        date_format: str = RFC3339_UTC_FORMAT
    ) -> 'Summary':
        """
        Build a summary from decoded tags.

        Empty strings count as missing, so an empty DateTimeOriginal
        falls back to DateTime.

        Args:
            tags: Mapping of tag id to formatted value
            date_format: strftime pattern applied to date_time

        Returns:
            Summary with every recognized field filled in
        """
        values = {}
        for field_name, candidates in SUMMARY_TAGS:
            for tag in candidates:
                tag_value = tags.get(tag)
                if tag_value is not None and tag_value.value:
                    values[field_name] = tag_value.value
                    break

        if 'date_time' in values:
            values['date_time'] = DateFormatter.format_date(values['date_time'], date_format)

        return cls(**values)

    def to_dict(self) -> Dict[str, str]:
        """Return the present fields in declaration order."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }
