#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Deterministic 2D rectangle bin packing for texture atlases and layouts.

Two independent strategies are provided:

- Guillotine packing of plain rectangles into one bin (``BinPacker``) or a
  growing sequence of bins (``MultiBinPacker``).
- Candidate-point packing of payload-carrying ``Content`` into one
  ``Canvas`` or a growing ``CanvasArray``.
"""

from binpack.accumulator import ContentAccumulator
from binpack.base_packer import BinPackerBase
from binpack.canvas import CandidatePointList, Canvas
from binpack.canvas_array import CanvasArray
from binpack.free_list import GuillotineFreeList
from binpack.guillotine_packer import BinPacker, MultiBinPacker
from binpack.packer_types import (
    BinTooSmallError,
    Content,
    Coord,
    PackedArea,
    PackerError,
    PackerErrorCode,
    PackerErrorInfo,
    PackerOptions,
    PackerResult,
    Rect,
    Size,
)

__version__ = "1.0.0"

__all__ = [
    "BinPacker",
    "BinPackerBase",
    "BinTooSmallError",
    "CandidatePointList",
    "Canvas",
    "CanvasArray",
    "Content",
    "ContentAccumulator",
    "Coord",
    "GuillotineFreeList",
    "MultiBinPacker",
    "PackedArea",
    "PackerError",
    "PackerErrorCode",
    "PackerErrorInfo",
    "PackerOptions",
    "PackerResult",
    "Rect",
    "Size",
]
