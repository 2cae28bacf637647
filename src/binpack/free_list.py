#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Free-region bookkeeping for guillotine packing.

Regions live in a plain list addressed by index. A scan only returns the
index of the first fitting region; the split that follows replaces or
removes that slot, so the list is never mutated while being iterated.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from binpack.packer_types import Rect


class GuillotineFreeList:
    """Available space inside a single bin.

    Regions are kept sorted from small to large area, so a first-fit scan
    tries the smallest adequate region first.

    Attributes:
        seeded: Whether the list has been initialised with the full bin
            since the last ``clear``. An empty seeded list means the bin is
            full.
    """

    def __init__(self) -> None:
        self._regions: List[Rect] = []
        self.seeded: bool = False

    def __len__(self) -> int:
        return len(self._regions)

    def __iter__(self) -> Iterator[Rect]:
        return iter(self._regions)

    def __getitem__(self, index: int) -> Rect:
        return self._regions[index]

    @property
    def total_area(self) -> int:
        return sum(r.area for r in self._regions)

    def seed(self, width: int, height: int) -> None:
        """Reset the list to a single region covering a ``width`` x ``height`` bin."""
        self._regions = [Rect(0, 0, width, height)] if width > 0 and height > 0 else []
        self.seeded = True

    def clear(self) -> None:
        """Drop all regions; the next placement reseeds with the full bin."""
        self._regions = []
        self.seeded = False

    def snapshot(self) -> Tuple[List[Rect], bool]:
        """Capture the current state so a failed batch can be rolled back."""
        return list(self._regions), self.seeded

    def restore(self, state: Tuple[List[Rect], bool]) -> None:
        regions, seeded = state
        self._regions = list(regions)
        self.seeded = seeded

    def find(self, width: int, height: int) -> Optional[int]:
        """Return the index of the first region that fits the given size.

        Args:
            width: Width of the area to place.
            height: Height of the area to place.

        Returns:
            Index into the list, or None if no region is large enough.
        """
        for index, region in enumerate(self._regions):
            if width <= region.width and height <= region.height:
                return index
        return None

    def split(self, index: int, width: int, height: int) -> Rect:
        """Carve a ``width`` x ``height`` area from the top-left of a region.

        The leftover space is divided with one guillotine cut, choosing the
        orientation that keeps the larger single leftover region. The part
        that stays in the region's slot is the strip below the placed area;
        the other part is appended as a new region. Degenerate parts are
        discarded and the list is re-sorted by area.

        Args:
            index: Index of the region returned by ``find``.
            width: Width of the area to place.
            height: Height of the area to place.

        Returns:
            The placed rectangle.
        """
        region = self._regions[index]
        placed = Rect.from_size(width, height, region.x1, region.y1)

        w = region.width
        h = region.height
        left = width
        right = w - width
        top = height
        bottom = h - height

        area_left = left * bottom
        area_right = right * h
        area_top = right * top
        area_bottom = w * bottom

        if max(area_left, area_right) > max(area_top, area_bottom):
            # Full-height strip on the right, narrow strip below.
            new = Rect(region.x1 + width, region.y1, region.x1 + w, region.y1 + h)
            kept = Rect(region.x1, region.y1 + height, region.x1 + left, region.y2)
        else:
            # Short strip on the right, full-width strip below.
            new = Rect(region.x1 + width, region.y1, region.x1 + w, region.y1 + height)
            kept = Rect(region.x1, region.y1 + height, region.x2, region.y2)

        if kept.is_empty:
            del self._regions[index]
        else:
            self._regions[index] = kept

        if not new.is_empty:
            self._regions.append(new)

        self._regions.sort(key=lambda r: r.area)

        return placed


__all__ = ["GuillotineFreeList"]
