# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for DNExposure

This module defines the errors raised while resolving exposure quantities
from a tag store.

Copyright 2025 DNAi inc.
"""

from typing import Optional

from dnexposure.exif_tags import tag_name


class DNExposureError(Exception):
    """
    Base exception for all DNExposure errors.

    All DNExposure exceptions inherit from this class, allowing
    catch-all error handling for any exposure resolution failure.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.

        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class TagNotFoundError(DNExposureError):
    """
    Raised when a tag cannot be read from the tag store.

    This exception is raised when:
    - The tag is absent from the store
    - The tag is present but holds a value of an incompatible type
    - Both the primary and the alternate tag of a fallback chain are absent
      (the alternate tag is the one reported)
    """
    def __init__(self, tag_id: int, message: Optional[str] = None):
        self.tag_id = tag_id
        if message is None:
            message = f"Could not read EXIF tag: {tag_id} ({tag_name(tag_id)})."
        super().__init__(message)


class InsufficientDataError(DNExposureError):
    """
    Raised when a composite quantity cannot be computed.

    A composite formula needs several independent sub-quantities; this is
    raised once at least one of them could not be resolved through any
    fallback.
    """
    pass


class InvalidValueError(DNExposureError):
    """
    Raised when a tag value violates a precondition of a formula.

    This exception is raised when:
    - A focal plane resolution is zero or negative
    - The focal plane resolution unit code is not recognized
    - The computed sensor diagonal is zero
    - A logarithm or division would be taken of a non-positive value
    """
    pass


class MetadataReadError(DNExposureError):
    """
    Raised when a tag store cannot be built from a file.

    This exception is raised when:
    - The file does not exist or cannot be opened
    - The file carries no EXIF block the reader understands
    """
    pass
