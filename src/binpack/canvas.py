#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Candidate-point packing of payload-carrying content into one canvas.

The canvas keeps a list of candidate points where the top-left corner of
the next item may go. Points are tried closest to the origin first. Placing
an item consumes its point and adds two new ones: at the item's top-right
corner and at its bottom-left corner.

One placement tests every candidate point against every placed item, so a
batch costs O(items x candidate points x placed items) in the worst case.
Above ``PackerOptions.vectorize_threshold`` placed items the overlap test
runs through NumPy.
"""

from __future__ import annotations

import logging
from typing import Generic, Iterator, List, Optional, Sequence

import numpy as np

from binpack.packer_types import (
    Content,
    Coord,
    PackerError,
    PackerErrorCode,
    PackerOptions,
    T,
)

logger = logging.getLogger(__name__)


def validate_contents(contents: Sequence[Content[T]]) -> None:
    """Validate that no item has a negative size.

    Raises:
        PackerError: If an item has a negative width or height.
    """
    for index, content in enumerate(contents):
        if content.width < 0 or content.height < 0:
            raise PackerError(
                PackerErrorCode.INVALID_SIZE,
                f"Item {index} has negative size {content.width}x{content.height}",
                details={"index": index, "size": (content.width, content.height)},
            )


class CandidatePointList:
    """Anchor points for future placements, sorted lazily by distance.

    Attributes:
        dirty: Whether points were added since the last sort.
    """

    def __init__(self) -> None:
        self._points: List[Coord] = [Coord(0, 0)]
        self.dirty: bool = False

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Coord]:
        return iter(self._points)

    def ensure_sorted(self) -> None:
        """Sort by squared distance from the origin if points changed."""
        if not self.dirty:
            return
        self._points.sort(key=Coord.distance_squared)
        self.dirty = False

    def consume(self, index: int, right: Coord, below: Coord) -> None:
        """Replace the point at ``index`` with the two points a placement exposes.

        ``right`` goes to the front of the list and ``below`` to the back;
        the stable sort keeps that order among equally distant points.
        """
        del self._points[index]
        self._points.insert(0, right)
        self._points.append(below)
        self.dirty = True

    def reset(self) -> None:
        self._points = [Coord(0, 0)]
        self.dirty = False


class Canvas(Generic[T]):
    """A fixed-size container filled by candidate-point packing.

    Attributes:
        options: Packer configuration options.
        candidates: Anchor points for the next placement.
    """

    def __init__(
        self,
        width: int,
        height: int,
        options: Optional[PackerOptions] = None,
    ) -> None:
        """Create an empty canvas.

        Args:
            width: Canvas width.
            height: Canvas height.
            options: Packer options. Defaults to PackerOptions().

        Raises:
            PackerError: If either dimension is negative.
        """
        if width < 0 or height < 0:
            raise PackerError(
                PackerErrorCode.INVALID_SIZE,
                f"Canvas size must be non-negative, got {width}x{height}",
                details={"width": width, "height": height},
            )
        self.options = options or PackerOptions()
        self.options.validate()
        self._width = width
        self._height = height
        self._contents: List[Content[T]] = []
        self._bounds: Optional[np.ndarray] = None
        self.candidates = CandidatePointList()

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def contents(self) -> List[Content[T]]:
        """Placed items, in placement order."""
        return list(self._contents)

    def __len__(self) -> int:
        return len(self._contents)

    def __iter__(self) -> Iterator[Content[T]]:
        return iter(self._contents)

    @property
    def is_empty(self) -> bool:
        return not self._contents

    def __lt__(self, other: Canvas) -> bool:
        return (self._width, self._height) < (other._width, other._height)

    def place(self, content: Content[T]) -> bool:
        """Place one item at the closest candidate point that fits it.

        The item passed in is not modified; the canvas stores a copy at its
        final position.

        Args:
            content: Item to place.

        Returns:
            True if the item was placed.

        Raises:
            PackerError: If the item has a negative size.
        """
        validate_contents([content])
        return self._place_valid(content)

    def place_all(
        self,
        contents: Sequence[Content[T]],
        remainder: Optional[List[Content[T]]] = None,
    ) -> bool:
        """Place items in the given order, collecting those that do not fit.

        Callers usually sort the batch largest first beforehand, see
        ContentAccumulator.sort.

        Args:
            contents: Items to place.
            remainder: Optional list that receives the items that did not
                fit. Must be empty.

        Returns:
            True if every item was placed.

        Raises:
            PackerError: If ``remainder`` is not empty or an item has a
                negative size. Nothing is placed in that case.
        """
        validate_contents(contents)
        if remainder is None:
            remainder = []
        elif remainder:
            raise PackerError(
                PackerErrorCode.REMAINDER_NOT_EMPTY,
                "Remainder must be empty before placing",
                details={"remainder_size": len(remainder)},
            )

        for content in contents:
            if not self._place_valid(content):
                remainder.append(content)

        return not remainder

    def _place_valid(self, content: Content[T]) -> bool:
        if self._try_place(content):
            return True

        if self.options.allow_rotation and content.width != content.height:
            rotated = content.moved_to(content.origin)
            rotated.rotate()
            return self._try_place(rotated)

        return False

    def can_hold(self, content: Content[T]) -> bool:
        """Return True if the item fits this canvas when it is empty."""
        if content.width <= self._width and content.height <= self._height:
            return True
        return (
            self.options.allow_rotation
            and content.height <= self._width
            and content.width <= self._height
        )

    def occupancy(self) -> float:
        """Return the ratio of placed area to canvas area."""
        total_area = self._width * self._height
        if total_area <= 0:
            return 0.0
        return sum(c.area for c in self._contents) / total_area

    def clear(self) -> None:
        """Remove all placed items and reset the candidate points."""
        self._contents = []
        self._bounds = None
        self.candidates.reset()

    def _try_place(self, content: Content[T]) -> bool:
        self.candidates.ensure_sorted()

        for index, point in enumerate(self.candidates):
            item = content.moved_to(point)
            if self._fits(item):
                self._use(item)
                self.candidates.consume(
                    index,
                    Coord(point.x + item.width, point.y),
                    Coord(point.x, point.y + item.height),
                )
                return True

        return False

    def _fits(self, item: Content[T]) -> bool:
        extent = item.extent
        if extent.x > self._width or extent.y > self._height:
            return False

        if len(self._contents) > self.options.vectorize_threshold:
            return not self._intersects_any_numpy(item)

        for content in self._contents:
            if item.intersects(content):
                return False
        return True

    def _intersects_any_numpy(self, item: Content[T]) -> bool:
        """Test the item against all placed items using NumPy vectorized checks."""
        if self._bounds is None:
            self._bounds = np.array(
                [
                    (c.origin.x, c.origin.y, c.extent.x, c.extent.y)
                    for c in self._contents
                ],
                dtype=np.int64,
            )

        rects = self._bounds
        extent = item.extent
        overlaps = (
            (rects[:, 0] < extent.x)
            & (item.origin.x < rects[:, 2])
            & (rects[:, 1] < extent.y)
            & (item.origin.y < rects[:, 3])
        )
        return bool(np.any(overlaps))

    def _use(self, item: Content[T]) -> None:
        self._contents.append(item)
        self._bounds = None


__all__ = ["CandidatePointList", "Canvas", "validate_contents"]
