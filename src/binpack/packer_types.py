#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Shared data types for the bin packing algorithms.

Holds the rectangle primitive, the placement records returned by the
guillotine packers, the payload-carrying ``Content`` used by the canvas
packers, packer options, and the error/result types.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class PackerErrorCode(Enum):
    """Error codes reported by packers."""

    BIN_TOO_SMALL = "bin_too_small"
    INVALID_SIZE = "invalid_size"
    INVALID_OPTIONS = "invalid_options"
    REMAINDER_NOT_EMPTY = "remainder_not_empty"


class PackerError(Exception):
    """Base exception for packing failures and API misuse.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable description.
        details: Optional extra context (sizes, indices).
    """

    def __init__(
        self,
        code: PackerErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}


class BinTooSmallError(PackerError):
    """Raised when an area cannot fit the configured bin size."""

    def __init__(
        self,
        message: str = "Bin size is too small to fit all areas.",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(PackerErrorCode.BIN_TOO_SMALL, message, details)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle defined by its min and max corners.

    Attributes:
        x1: Left edge.
        y1: Top edge.
        x2: Right edge (exclusive).
        y2: Bottom edge (exclusive).
    """

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_size(cls, width: int, height: int, x: int = 0, y: int = 0) -> Rect:
        """Build a rectangle from a size and an optional top-left corner."""
        return cls(x, y, x + width, y + height)

    @property
    def width(self) -> int:
        return self.x2 - self.x1

    @property
    def height(self) -> int:
        return self.y2 - self.y1

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def moved_to(self, x: int, y: int) -> Rect:
        """Return a rectangle of the same size with its top-left at (x, y)."""
        return Rect(x, y, x + self.width, y + self.height)

    def fits_inside(self, other: Rect) -> bool:
        """Return True if this rectangle's size fits within ``other``'s size."""
        return self.width <= other.width and self.height <= other.height

    def intersects(self, other: Rect) -> bool:
        """Return True if the interiors overlap; shared edges do not count."""
        return (
            self.x1 < other.x2
            and other.x1 < self.x2
            and self.y1 < other.y2
            and other.y1 < self.y2
        )

    def contains(self, other: Rect) -> bool:
        """Return True if ``other`` lies entirely within this rectangle."""
        return (
            self.x1 <= other.x1
            and self.y1 <= other.y1
            and self.x2 >= other.x2
            and self.y2 >= other.y2
        )


@dataclass(frozen=True)
class PackedArea:
    """A rectangle placed by a guillotine packer.

    Attributes:
        rect: Final position and size inside the bin.
        order: Index of the area in the caller's input batch.
        bin: Index of the bin the area was placed in.
    """

    rect: Rect
    order: int = 0
    bin: int = 0

    @property
    def x(self) -> int:
        return self.rect.x1

    @property
    def y(self) -> int:
        return self.rect.y1

    @property
    def width(self) -> int:
        return self.rect.width

    @property
    def height(self) -> int:
        return self.rect.height

    @property
    def area(self) -> int:
        return self.rect.area


@dataclass(frozen=True, order=True)
class Size:
    """Width and height of a content item; orders by width, then height."""

    width: int
    height: int

    def rotated(self) -> Size:
        return Size(self.height, self.width)


@dataclass(frozen=True, order=True)
class Coord:
    """Placement coordinate; ``z`` holds the canvas index after collection."""

    x: int = 0
    y: int = 0
    z: int = 0

    def distance_squared(self) -> int:
        """Squared distance from the canvas origin, ignoring ``z``."""
        return self.x * self.x + self.y * self.y


@dataclass
class Content(Generic[T]):
    """A payload-carrying item placed by the canvas packers.

    Attributes:
        payload: Caller data, carried through untouched.
        size: Item dimensions.
        origin: Top-left placement coordinate.
        rotated: Whether width and height were swapped by ``rotate``.
    """

    payload: T
    size: Size
    origin: Coord = field(default_factory=Coord)
    rotated: bool = False

    @property
    def width(self) -> int:
        return self.size.width

    @property
    def height(self) -> int:
        return self.size.height

    @property
    def area(self) -> int:
        return self.size.width * self.size.height

    @property
    def extent(self) -> Coord:
        """Bottom-right corner, always derived from the current origin and size."""
        return Coord(
            self.origin.x + self.size.width,
            self.origin.y + self.size.height,
            self.origin.z,
        )

    def rotate(self) -> None:
        """Swap width and height and toggle the rotated flag."""
        self.rotated = not self.rotated
        self.size = self.size.rotated()

    def moved_to(self, origin: Coord) -> Content[T]:
        """Return a copy of this item placed at ``origin``."""
        return replace(self, origin=origin)

    def intersects(self, other: Content[Any]) -> bool:
        """Return True if the two items overlap; touching edges do not."""
        if self.origin.x >= other.origin.x + other.size.width:
            return False
        if other.origin.x >= self.origin.x + self.size.width:
            return False
        if self.origin.y >= other.origin.y + other.size.height:
            return False
        if other.origin.y >= self.origin.y + self.size.height:
            return False
        return True


@dataclass
class PackerOptions:
    """Configuration shared by all packers.

    Attributes:
        allow_rotation: Let the canvas packer retry an item rotated by 90
            degrees when it does not fit upright.
        vectorize_threshold: Number of placed items above which the canvas
            fit test switches to NumPy.
    """

    allow_rotation: bool = False
    vectorize_threshold: int = 20

    def validate(self) -> None:
        """Check option values.

        Raises:
            PackerError: If an option is out of range.
        """
        if self.vectorize_threshold < 0:
            raise PackerError(
                PackerErrorCode.INVALID_OPTIONS,
                f"vectorize_threshold must be >= 0, got {self.vectorize_threshold}",
                details={"vectorize_threshold": self.vectorize_threshold},
            )


@dataclass
class PackerErrorInfo:
    """An error recorded on a PackerResult."""

    code: PackerErrorCode
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PackerResult:
    """Outcome of a guillotine ``insert`` call.

    A failed result never carries partial placements.

    Attributes:
        success: True if every area was placed.
        areas: Placed areas in the caller's input order.
        bin_count: Number of bins in use after the call.
        errors: Errors recorded during the call.
    """

    success: bool = False
    areas: List[PackedArea] = field(default_factory=list)
    bin_count: int = 0
    errors: List[PackerErrorInfo] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.success

    def add_error(
        self,
        code: PackerErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Record an error and mark the result as failed."""
        self.errors.append(PackerErrorInfo(code, message, details or {}))
        self.success = False
        self.areas = []

    def raise_for_error(self) -> None:
        """Re-raise the first recorded error as an exception.

        Raises:
            BinTooSmallError: For capacity failures.
            PackerError: For any other recorded error.
        """
        if self.success or not self.errors:
            return
        error = self.errors[0]
        if error.code == PackerErrorCode.BIN_TOO_SMALL:
            raise BinTooSmallError(error.message, error.details)
        raise PackerError(error.code, error.message, error.details)


__all__ = [
    "BinTooSmallError",
    "Content",
    "Coord",
    "PackedArea",
    "PackerError",
    "PackerErrorCode",
    "PackerErrorInfo",
    "PackerOptions",
    "PackerResult",
    "Rect",
    "Size",
]
