# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for shootlog

Structural problems with the input (container, TIFF header, directory
tables) are raised as one of the MetadataReadError subclasses below so
callers can tell them apart. Problems with a single tag value never raise;
that tag is simply left out of the result.

Copyright 2025 DNAi inc.
"""


class ShootlogError(Exception):
    """
    Base exception for all shootlog errors.

    All shootlog exceptions inherit from this class, allowing
    catch-all error handling for any extraction failure.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.

        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class FileAccessError(ShootlogError):
    """
    Raised when the byte source cannot supply the image data.

    The underlying OSError is chained as __cause__.
    """
    pass


class MetadataReadError(ShootlogError):
    """
    Raised when metadata cannot be decoded from the image bytes.

    Never raised directly; one of the subclasses below says which
    stage of the decode failed.
    """
    pass


class NotAnImageError(MetadataReadError):
    """Raised when the data does not start with the JPEG SOI marker."""
    pass


class MalformedContainerError(MetadataReadError):
    """
    Raised when the JPEG segment structure is corrupt.

    This exception is raised when:
    - A segment length is smaller than the length field itself
    - A segment extends past the end of the data
    - Something other than a marker appears between segments
    """
    pass


class MetadataNotFoundError(MetadataReadError):
    """Raised when a valid JPEG carries no APP1/Exif segment."""
    pass


class MalformedMetadataError(MetadataReadError):
    """
    Raised when the embedded TIFF structure is invalid.

    This exception is raised when:
    - The byte order signature is neither II nor MM
    - The TIFF magic number is not 42
    - The TIFF header is truncated
    - A directory offset or entry table lies outside the payload
    """
    pass
