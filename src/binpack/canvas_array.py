#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""A growing sequence of equally sized canvases.

Items are offered to the existing canvases first, each canvas receiving what
the previous one could not place. Whatever is left goes onto new canvases.
Canvases never grow, so an item larger than the canvas size is reported
back in the remainder instead of being placed.
"""

from __future__ import annotations

import logging
from typing import Generic, Iterator, List, Optional, Sequence, Union

from binpack.accumulator import ContentAccumulator
from binpack.canvas import Canvas, validate_contents
from binpack.packer_types import (
    Content,
    Coord,
    PackerError,
    PackerErrorCode,
    PackerOptions,
    T,
)

logger = logging.getLogger(__name__)

ContentBatch = Union[Sequence[Content[T]], ContentAccumulator[T]]


def _as_list(contents: ContentBatch) -> List[Content[T]]:
    if isinstance(contents, ContentAccumulator):
        return list(contents.contents)
    return list(contents)


def _remainder_list(
    remainder: Optional[Union[List[Content[T]], ContentAccumulator[T]]],
) -> List[Content[T]]:
    if remainder is None:
        return []
    target = remainder.contents if isinstance(remainder, ContentAccumulator) else remainder
    if target:
        raise PackerError(
            PackerErrorCode.REMAINDER_NOT_EMPTY,
            "Remainder must be empty before placing",
            details={"remainder_size": len(target)},
        )
    return target


class CanvasArray(Generic[T]):
    """Ordered canvases sharing one fixed size.

    Attributes:
        options: Packer options handed to every canvas.
    """

    def __init__(
        self,
        width: int,
        height: int,
        options: Optional[PackerOptions] = None,
    ) -> None:
        """Create an array holding one empty canvas.

        Args:
            width: Width of every canvas.
            height: Height of every canvas.
            options: Packer options. Defaults to PackerOptions().
        """
        self.options = options or PackerOptions()
        self._width = width
        self._height = height
        self._canvases: List[Canvas[T]] = [Canvas(width, height, self.options)]

    @classmethod
    def from_canvases(cls, canvases: Sequence[Canvas[T]]) -> CanvasArray[T]:
        """Build an array around existing canvases.

        Args:
            canvases: Canvases to adopt, all of the same size.

        Raises:
            PackerError: If the list is empty or the sizes differ.
        """
        if not canvases:
            raise PackerError(
                PackerErrorCode.INVALID_SIZE,
                "A canvas array needs at least one canvas",
            )
        first = canvases[0]
        for canvas in canvases[1:]:
            if (canvas.width, canvas.height) != (first.width, first.height):
                raise PackerError(
                    PackerErrorCode.INVALID_SIZE,
                    f"Canvas size {canvas.width}x{canvas.height} differs from "
                    f"{first.width}x{first.height}",
                    details={
                        "expected": (first.width, first.height),
                        "actual": (canvas.width, canvas.height),
                    },
                )
        array = cls(first.width, first.height, first.options)
        array._canvases = list(canvases)
        return array

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def __len__(self) -> int:
        return len(self._canvases)

    def __iter__(self) -> Iterator[Canvas[T]]:
        return iter(self._canvases)

    def __getitem__(self, index: int) -> Canvas[T]:
        return self._canvases[index]

    @property
    def is_empty(self) -> bool:
        return not self._canvases

    def place(
        self,
        contents: ContentBatch,
        remainder: Optional[Union[List[Content[T]], ContentAccumulator[T]]] = None,
    ) -> bool:
        """Place items, adding canvases until everything that can fit is placed.

        Args:
            contents: Items to place, usually sorted largest first.
            remainder: Optional empty list or accumulator that receives the
                items too large for an empty canvas.

        Returns:
            True if every item was placed.

        Raises:
            PackerError: If ``remainder`` is not empty or an item has a
                negative size. Nothing is placed in that case.
        """
        items = _as_list(contents)
        validate_contents(items)
        target = _remainder_list(remainder)
        items = self._place_existing(items)

        while items:
            oversized = [c for c in items if not self._fits_empty_canvas(c)]
            if oversized:
                for content in oversized:
                    logger.warning(
                        "Item %dx%d does not fit a %dx%d canvas",
                        content.width,
                        content.height,
                        self._width,
                        self._height,
                    )
                target.extend(oversized)
                items = [c for c in items if self._fits_empty_canvas(c)]
                if not items:
                    break

            canvas = Canvas(self._width, self._height, self.options)
            self._canvases.append(canvas)
            logger.debug(
                "Opening canvas %d for %d remaining items",
                len(self._canvases) - 1,
                len(items),
            )
            rest: List[Content[T]] = []
            canvas.place_all(items, rest)
            items = rest

        return not target

    def place_existing(
        self,
        contents: ContentBatch,
        remainder: Optional[Union[List[Content[T]], ContentAccumulator[T]]] = None,
    ) -> bool:
        """Place items on the existing canvases only.

        Args:
            contents: Items to place.
            remainder: Optional empty list or accumulator that receives the
                items no existing canvas could take.

        Returns:
            True if every item was placed.

        Raises:
            PackerError: If ``remainder`` is not empty or an item has a
                negative size. Nothing is placed in that case.
        """
        items = _as_list(contents)
        validate_contents(items)
        target = _remainder_list(remainder)
        target.extend(self._place_existing(items))
        return not target

    def collect(
        self,
        into: Optional[Union[List[Content[T]], ContentAccumulator[T]]] = None,
    ) -> List[Content[T]]:
        """Flatten all placed items, stamping each with its canvas index.

        The returned items are copies whose ``origin.z`` is the index of the
        canvas holding them; the canvases are not modified.

        Collection cannot fail. An empty array gives an empty list, so a
        falsy return value only means nothing has been placed yet.

        Args:
            into: Optional list or accumulator to append to.

        Returns:
            The list the items were appended to: ``into`` itself, or the
            accumulator's content list, or a new list.
        """
        if into is None:
            target: List[Content[T]] = []
        elif isinstance(into, ContentAccumulator):
            target = into.contents
        else:
            target = into

        for z, canvas in enumerate(self._canvases):
            for content in canvas:
                origin = content.origin
                target.append(content.moved_to(Coord(origin.x, origin.y, z)))

        return target

    def clear(self) -> None:
        """Drop all canvases and start again with one empty canvas."""
        self._canvases = [Canvas(self._width, self._height, self.options)]

    def _fits_empty_canvas(self, content: Content[T]) -> bool:
        return self._canvases[0].can_hold(content)

    def _place_existing(self, items: List[Content[T]]) -> List[Content[T]]:
        for canvas in self._canvases:
            if not items:
                break
            rest: List[Content[T]] = []
            canvas.place_all(items, rest)
            items = rest
        return items


__all__ = ["CanvasArray"]
