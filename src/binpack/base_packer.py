#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Base class for the guillotine bin packers.

Provides bin sizing, single-area insertion, and the shared placement step
that carves areas out of a ``GuillotineFreeList``. Subclasses implement
``insert`` for a whole batch.

Placement is first-fit over the free list sorted by area, so one placement
costs O(free regions) and a batch is O(areas x free regions) in the worst
case.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence, Tuple

from binpack.free_list import GuillotineFreeList
from binpack.packer_types import (
    BinTooSmallError,
    PackedArea,
    PackerError,
    PackerErrorCode,
    PackerOptions,
    PackerResult,
    Rect,
)

logger = logging.getLogger(__name__)


class BinPackerBase(ABC):
    """Abstract base for guillotine bin packers.

    Attributes:
        options: Packer configuration options.
        free_list: Free regions of the bin currently being filled.
    """

    ALGORITHM_NAME: str = ""

    def __init__(
        self,
        width: int = 0,
        height: int = 0,
        options: Optional[PackerOptions] = None,
    ) -> None:
        """Initialize the packer.

        Args:
            width: Bin width.
            height: Bin height.
            options: Packer options. Defaults to PackerOptions() if not
                provided.
        """
        self.options = options or PackerOptions()
        self.options.validate()
        self.free_list = GuillotineFreeList()
        self._width = 0
        self._height = 0
        self.set_size(width, height)

    def set_size(self, width: int, height: int) -> BinPackerBase:
        """Set the bin dimensions.

        Must be called before the first insert; resizing a partially filled
        bin is not supported.

        Args:
            width: Bin width.
            height: Bin height.

        Returns:
            The packer, so calls can be chained.

        Raises:
            PackerError: If either dimension is negative.
        """
        if width < 0 or height < 0:
            raise PackerError(
                PackerErrorCode.INVALID_SIZE,
                f"Bin size must be non-negative, got {width}x{height}",
                details={"width": width, "height": height},
            )
        self._width = width
        self._height = height
        return self

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def size(self) -> Tuple[int, int]:
        """Return the bin dimensions as (width, height)."""
        return self._width, self._height

    @abstractmethod
    def insert(self, areas: Sequence[Rect]) -> PackerResult:
        """Pack a batch of areas.

        Args:
            areas: Rectangles to pack; only their sizes are used.

        Returns:
            Result with the placed areas in input order, or a failed result
            with no placements.
        """
        pass

    def insert_area(self, area: Rect) -> PackerResult:
        """Pack a single area.

        Args:
            area: Rectangle to pack.

        Returns:
            Result holding one PackedArea, or a failed result.
        """
        result = PackerResult()
        try:
            self._validate_areas([area])
        except PackerError as e:
            result.add_error(e.code, e.message, e.details)
            return result

        state = self._snapshot()
        try:
            packed = self._place(area, 0)
        except BinTooSmallError as e:
            self._restore(state)
            logger.warning("%s: %s", self.ALGORITHM_NAME, e.message)
            result.add_error(e.code, e.message, e.details)
            return result

        result.success = True
        result.areas = [packed]
        result.bin_count = self.bin_count
        return result

    def clear(self) -> None:
        """Reset the packer so the next insert starts on an empty bin."""
        self.free_list.clear()

    @property
    def bin_count(self) -> int:
        """Number of bins in use."""
        return 1 if self.free_list.seeded else 0

    def occupancy(self) -> float:
        """Return the ratio of used area to total area in the current bin."""
        total_area = self._width * self._height
        if total_area <= 0 or not self.free_list.seeded:
            return 0.0
        return (total_area - self.free_list.total_area) / total_area

    def _place(self, area: Rect, order: int) -> PackedArea:
        """Place one area in the current bin.

        Subclasses override this to change what happens when the current bin
        is full.

        Raises:
            BinTooSmallError: If the area does not fit.
        """
        rect = self._pack(area)
        if rect is None:
            raise BinTooSmallError(
                details={"order": order, "size": (area.width, area.height)}
            )
        return PackedArea(rect, order, 0)

    def _pack(self, area: Rect) -> Optional[Rect]:
        """Place an area in the first free region that fits it.

        Args:
            area: Rectangle to place; only its size is used.

        Returns:
            The placed rectangle, or None if no free region fits.
        """
        if not self.free_list.seeded:
            logger.debug("Seeding %dx%d bin", self._width, self._height)
            self.free_list.seed(self._width, self._height)

        if area.is_empty:
            # Zero-width or zero-height areas take no space.
            if area.width > self._width or area.height > self._height:
                return None
            return Rect.from_size(area.width, area.height)

        index = self.free_list.find(area.width, area.height)
        if index is None:
            return None
        return self.free_list.split(index, area.width, area.height)

    def _validate_areas(self, areas: Sequence[Rect]) -> None:
        """Validate that no area has a negative size.

        Args:
            areas: Areas to validate.

        Raises:
            PackerError: If an area has a negative width or height.
        """
        for order, area in enumerate(areas):
            if area.width < 0 or area.height < 0:
                raise PackerError(
                    PackerErrorCode.INVALID_SIZE,
                    f"Area {order} has negative size {area.width}x{area.height}",
                    details={"order": order, "size": (area.width, area.height)},
                )

    def _snapshot(self) -> Any:
        return self.free_list.snapshot()

    def _restore(self, state: Any) -> None:
        self.free_list.restore(state)

    def _pack_batch(self, areas: Sequence[Rect]) -> PackerResult:
        """Shared batch flow: sort largest first, place, restore input order.

        A failure rolls the packer back to its state before the call.
        """
        result = PackerResult()

        if not areas:
            result.success = True
            result.bin_count = self.bin_count
            return result

        try:
            self._validate_areas(areas)
        except PackerError as e:
            result.add_error(e.code, e.message, e.details)
            return result

        # Stable sort, so equal areas keep their input order.
        pending = sorted(
            enumerate(areas), key=lambda item: item[1].area, reverse=True
        )

        state = self._snapshot()
        packed: List[PackedArea] = []
        try:
            for order, area in pending:
                packed.append(self._place(area, order))
        except BinTooSmallError as e:
            self._restore(state)
            logger.warning(
                "%s: cannot fit %d areas into %dx%d bins: %s",
                self.ALGORITHM_NAME,
                len(areas),
                self._width,
                self._height,
                e.message,
            )
            result.add_error(e.code, e.message, e.details)
            return result

        packed.sort(key=lambda p: p.order)

        result.success = True
        result.areas = packed
        result.bin_count = self.bin_count
        return result


__all__ = ["BinPackerBase"]
