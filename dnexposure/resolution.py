# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Resolution result type

A Resolution carries either a resolved value or the DNExposureError that
prevented resolving it. Fallback chains are composed from Resolutions with
or_else/map/combine instead of catching and re-raising.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from dnexposure.exceptions import DNExposureError


@dataclass(frozen=True)
class Resolution:
    """
    Outcome of resolving one value.

    Exactly one of value/error is meaningful: error is None on success.
    """
    value: Any = None
    error: Optional[DNExposureError] = None

    @classmethod
    def success(cls, value: Any) -> "Resolution":
        return cls(value=value)

    @classmethod
    def failure(cls, error: DNExposureError) -> "Resolution":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def map(self, func: Callable[[Any], Any]) -> "Resolution":
        """
        Apply func to the value of a successful resolution.

        func may raise DNExposureError to signal that the value violates
        a precondition; the error becomes the result.
        """
        if not self.ok:
            return self
        try:
            return Resolution.success(func(self.value))
        except DNExposureError as e:
            return Resolution.failure(e)

    def or_else(self, fallback: Callable[[], "Resolution"]) -> "Resolution":
        """Return self on success, otherwise the result of fallback()."""
        if self.ok:
            return self
        return fallback()

    def map_error(self, func: Callable[[DNExposureError], DNExposureError]) -> "Resolution":
        """Replace the error of a failed resolution."""
        if self.ok:
            return self
        return Resolution.failure(func(self.error))

    def unwrap(self) -> Any:
        """
        Return the value.

        Raises:
            DNExposureError: The carried error, if resolution failed
        """
        if self.error is not None:
            raise self.error
        return self.value

    @staticmethod
    def combine(func: Callable[..., Any], *resolutions: "Resolution") -> "Resolution":
        """
        Apply func to the values of several resolutions.

        The first failed resolution is returned unchanged; func is only
        called when every input succeeded.
        """
        for resolution in resolutions:
            if not resolution.ok:
                return resolution
        return Resolution.success(None).map(
            lambda _: func(*(r.value for r in resolutions))
        )
