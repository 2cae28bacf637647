#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Guillotine bin packing into one bin or a growing sequence of bins.

Areas are sorted from large to small and each one is placed at the top-left
corner of the first free region that fits it. The leftover space of that
region is cut once, horizontally or vertically, whichever keeps the larger
single free region.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from binpack.base_packer import BinPackerBase
from binpack.packer_types import (
    BinTooSmallError,
    PackedArea,
    PackerOptions,
    PackerResult,
    Rect,
)

logger = logging.getLogger(__name__)


class BinPacker(BinPackerBase):
    """Packs areas into a single fixed-size bin.

    Inserts are online: successive calls keep filling the same bin until
    ``clear`` is called. A batch that does not fit fails as a whole and
    leaves the bin untouched.
    """

    ALGORITHM_NAME = "guillotine"

    def insert(self, areas: Sequence[Rect]) -> PackerResult:
        """Pack a batch of areas into the bin.

        Args:
            areas: Rectangles to pack; only their sizes are used.

        Returns:
            Result with one PackedArea per input, in input order. If any
            area does not fit, the result is failed with BIN_TOO_SMALL and
            carries no placements.
        """
        return self._pack_batch(areas)


class MultiBinPacker(BinPackerBase):
    """Packs areas into as many fixed-size bins as needed.

    When the current bin cannot take an area, the bin is closed and a new
    empty one is opened. Closed bins are never revisited.

    Attributes:
        current_bin: Index of the bin currently being filled.
    """

    ALGORITHM_NAME = "multi-guillotine"

    def __init__(
        self,
        width: int = 0,
        height: int = 0,
        options: Optional[PackerOptions] = None,
    ) -> None:
        super().__init__(width, height, options)
        self.current_bin: int = 0

    def insert(self, areas: Sequence[Rect]) -> PackerResult:
        """Pack a batch of areas, opening new bins on demand.

        Args:
            areas: Rectangles to pack; only their sizes are used.

        Returns:
            Result with one PackedArea per input, in input order, each
            tagged with its bin index. Fails with BIN_TOO_SMALL only if an
            area does not fit an empty bin.
        """
        return self._pack_batch(areas)

    def clear(self) -> None:
        """Reset to an empty first bin."""
        super().clear()
        self.current_bin = 0

    @property
    def bin_count(self) -> int:
        if not self.free_list.seeded and self.current_bin == 0:
            return 0
        return self.current_bin + 1

    def _place(self, area: Rect, order: int) -> PackedArea:
        rect = self._pack(area)
        if rect is None:
            self.free_list.clear()
            self.current_bin += 1
            logger.debug(
                "Opening bin %d for %dx%d area",
                self.current_bin,
                area.width,
                area.height,
            )
            rect = self._pack(area)
            if rect is None:
                raise BinTooSmallError(
                    f"Area {area.width}x{area.height} does not fit an empty "
                    f"{self.width}x{self.height} bin.",
                    details={"order": order, "size": (area.width, area.height)},
                )
        return PackedArea(rect, order, self.current_bin)

    def _snapshot(self) -> Any:
        return super()._snapshot(), self.current_bin

    def _restore(self, state: Any) -> None:
        free_state, current_bin = state
        super()._restore(free_state)
        self.current_bin = current_bin


__all__ = ["BinPacker", "MultiBinPacker"]
