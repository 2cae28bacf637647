#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Tests for candidate-point packing with Canvas, CanvasArray and
ContentAccumulator.

Verifies placement order, the no-overlap and containment invariants, and
that every item ends up on exactly one canvas or in the remainder.
"""

import random
import sys
from collections import defaultdict
from pathlib import Path

import pytest

# Add src to path for imports
SRC_DIR = Path(__file__).parent.parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from binpack import (
    Canvas,
    CanvasArray,
    Content,
    ContentAccumulator,
    Coord,
    PackerError,
    PackerErrorCode,
    PackerOptions,
    Size,
)


def make_content(name, width, height):
    return Content(name, Size(width, height))


def random_contents(count, max_side, seed=42):
    rng = random.Random(seed)
    return [
        make_content(f"item{i}", rng.randint(1, max_side), rng.randint(1, max_side))
        for i in range(count)
    ]


def assert_valid_layout(contents, width, height):
    """Every item lies inside its canvas and no two items on a canvas overlap."""
    by_canvas = defaultdict(list)
    for content in contents:
        by_canvas[content.origin.z].append(content)

    for items in by_canvas.values():
        for i, a in enumerate(items):
            assert a.origin.x >= 0 and a.origin.y >= 0
            assert a.extent.x <= width and a.extent.y <= height
            for b in items[i + 1:]:
                assert not a.intersects(b), f"{a.payload} overlaps {b.payload}"


class TestCanvas:
    """Tests for single-canvas placement."""

    def test_second_item_goes_right_of_first(self):
        canvas = Canvas(50, 50)
        assert canvas.place(make_content("a", 20, 20))
        assert canvas.place(make_content("b", 30, 30))

        origins = [c.origin for c in canvas.contents]
        assert origins == [Coord(0, 0), Coord(20, 0)]

    def test_placement_generates_candidate_points(self):
        canvas = Canvas(50, 50)
        canvas.place(make_content("a", 20, 20))

        assert list(canvas.candidates) == [Coord(20, 0), Coord(0, 20)]
        assert canvas.candidates.dirty

    def test_candidates_sorted_closest_first(self):
        canvas = Canvas(100, 100)
        canvas.place(make_content("a", 40, 10))
        canvas.candidates.ensure_sorted()

        assert list(canvas.candidates) == [Coord(0, 10), Coord(40, 0)]
        assert not canvas.candidates.dirty

    def test_closest_point_wins(self):
        canvas = Canvas(100, 100)
        canvas.place(make_content("wide", 40, 10))
        canvas.place(make_content("next", 10, 10))

        assert canvas.contents[1].origin == Coord(0, 10)

    def test_item_larger_than_canvas_is_rejected(self):
        canvas = Canvas(50, 50)
        assert not canvas.place(make_content("big", 60, 10))
        assert canvas.is_empty

    def test_input_item_is_not_modified(self):
        canvas = Canvas(50, 50)
        canvas.place(make_content("a", 20, 20))
        item = make_content("b", 30, 30)
        canvas.place(item)

        assert item.origin == Coord(0, 0)
        assert canvas.contents[1].origin == Coord(20, 0)
        assert canvas.contents[1].payload == "b"

    def test_place_all_collects_remainder(self):
        canvas = Canvas(10, 10)
        a = make_content("a", 10, 10)
        b = make_content("b", 5, 5)
        remainder = []

        assert not canvas.place_all([a, b], remainder)
        assert remainder == [b]
        assert len(canvas) == 1

    def test_place_all_without_remainder(self):
        canvas = Canvas(10, 10)
        assert canvas.place_all([make_content("a", 5, 5), make_content("b", 5, 5)])

    def test_place_all_rejects_non_empty_remainder(self):
        canvas = Canvas(10, 10)
        with pytest.raises(PackerError) as exc_info:
            canvas.place_all([make_content("a", 1, 1)], [make_content("x", 1, 1)])
        assert exc_info.value.code == PackerErrorCode.REMAINDER_NOT_EMPTY

    def test_rotation_disabled_by_default(self):
        canvas = Canvas(10, 20)
        assert not canvas.place(make_content("a", 20, 10))

    def test_rotation_retry_when_enabled(self):
        canvas = Canvas(10, 20, PackerOptions(allow_rotation=True))
        item = make_content("a", 20, 10)

        assert canvas.place(item)
        placed = canvas.contents[0]
        assert placed.rotated
        assert placed.size == Size(10, 20)
        assert not item.rotated

    def test_numpy_fit_test_matches_pairwise(self):
        items = random_contents(120, 12, seed=5)
        pairwise = Canvas(64, 64, PackerOptions(vectorize_threshold=10_000))
        vectorized = Canvas(64, 64, PackerOptions(vectorize_threshold=0))

        pairwise_rest = []
        vectorized_rest = []
        pairwise.place_all(items, pairwise_rest)
        vectorized.place_all(items, vectorized_rest)

        assert [c.origin for c in pairwise] == [c.origin for c in vectorized]
        assert [c.payload for c in pairwise_rest] == [
            c.payload for c in vectorized_rest
        ]
        assert_valid_layout(vectorized.contents, 64, 64)

    def test_occupancy_and_clear(self):
        canvas = Canvas(10, 10)
        canvas.place(make_content("a", 5, 10))
        assert canvas.occupancy() == pytest.approx(0.5)

        canvas.clear()
        assert canvas.is_empty
        assert list(canvas.candidates) == [Coord(0, 0)]
        assert canvas.occupancy() == 0.0

    def test_canvas_ordering(self):
        assert Canvas(10, 20) < Canvas(20, 10)
        assert Canvas(10, 10) < Canvas(10, 20)

    def test_negative_size_rejected(self):
        with pytest.raises(PackerError) as exc_info:
            Canvas(10, -1)
        assert exc_info.value.code == PackerErrorCode.INVALID_SIZE

    def test_negative_item_rejected(self):
        canvas = Canvas(10, 10)
        with pytest.raises(PackerError) as exc_info:
            canvas.place(make_content("neg", -5, 10))
        assert exc_info.value.code == PackerErrorCode.INVALID_SIZE
        assert canvas.is_empty
        assert list(canvas.candidates) == [Coord(0, 0)]

    def test_place_all_rejects_negative_item_before_placing(self):
        canvas = Canvas(10, 10)
        with pytest.raises(PackerError) as exc_info:
            canvas.place_all([make_content("a", 5, 5), make_content("neg", 5, -1)])
        assert exc_info.value.details["index"] == 1
        assert canvas.is_empty

    def test_invalid_options_rejected(self):
        with pytest.raises(PackerError) as exc_info:
            Canvas(10, 10, PackerOptions(vectorize_threshold=-1))
        assert exc_info.value.code == PackerErrorCode.INVALID_OPTIONS


class TestCanvasArray:
    """Tests for multi-canvas placement and collection."""

    def test_starts_with_one_canvas(self):
        array = CanvasArray(32, 32)
        assert len(array) == 1
        assert array[0].is_empty
        assert (array.width, array.height) == (32, 32)

    def test_full_items_each_get_a_canvas(self):
        array = CanvasArray(10, 10)
        assert array.place([make_content(n, 10, 10) for n in "abc"])

        collected = array.collect()
        assert len(array) == 3
        assert [(c.payload, c.origin) for c in collected] == [
            ("a", Coord(0, 0, 0)),
            ("b", Coord(0, 0, 1)),
            ("c", Coord(0, 0, 2)),
        ]

    def test_existing_canvases_filled_first(self):
        array = CanvasArray(10, 10)
        array.place([make_content("a", 5, 10)])
        assert array.place([make_content("b", 5, 10), make_content("c", 10, 10)])

        collected = {c.payload: c.origin for c in array.collect()}
        assert collected["b"] == Coord(5, 0, 0)
        assert collected["c"] == Coord(0, 0, 1)

    def test_oversized_item_returned_in_remainder(self):
        array = CanvasArray(10, 10)
        big = make_content("big", 20, 20)
        small = make_content("small", 5, 5)
        remainder = []

        assert not array.place([big, small], remainder)
        assert remainder == [big]
        assert [c.payload for c in array.collect()] == ["small"]
        assert len(array) == 1

    def test_only_oversized_items(self):
        array = CanvasArray(10, 10)
        assert not array.place([make_content("big", 11, 1)])
        assert len(array) == 1
        assert array.collect() == []

    def test_negative_item_rejected_before_placing(self):
        array = CanvasArray(10, 10)
        remainder = []
        with pytest.raises(PackerError) as exc_info:
            array.place(
                [make_content("a", 10, 10), make_content("neg", -1, -1)], remainder
            )
        assert exc_info.value.code == PackerErrorCode.INVALID_SIZE
        assert len(array) == 1
        assert array.collect() == []
        assert remainder == []

    def test_place_existing_rejects_negative_item(self):
        array = CanvasArray(10, 10)
        with pytest.raises(PackerError):
            array.place_existing([make_content("neg", 3, -3)])
        assert array[0].is_empty

    def test_rejects_non_empty_remainder(self):
        array = CanvasArray(10, 10)
        with pytest.raises(PackerError) as exc_info:
            array.place([make_content("a", 1, 1)], [make_content("x", 1, 1)])
        assert exc_info.value.code == PackerErrorCode.REMAINDER_NOT_EMPTY

    def test_every_item_collected_once(self):
        accumulator = ContentAccumulator()
        accumulator += random_contents(150, 24, seed=9)
        accumulator.sort()

        array = CanvasArray(64, 64)
        assert array.place(accumulator)

        collected = array.collect()
        assert sorted(c.payload for c in collected) == sorted(
            c.payload for c in accumulator
        )
        assert len(array) > 1
        assert_valid_layout(collected, 64, 64)

    def test_collected_sizes_match_inputs(self):
        items = random_contents(40, 16, seed=2)
        array = CanvasArray(48, 48)
        array.place(items)

        sizes = {c.payload: c.size for c in items}
        for content in array.collect():
            assert content.size == sizes[content.payload]

    def test_collect_is_repeatable(self):
        array = CanvasArray(32, 32)
        array.place(random_contents(30, 16, seed=4))
        assert array.collect() == array.collect()

    def test_collect_does_not_stamp_canvases(self):
        array = CanvasArray(10, 10)
        array.place([make_content(n, 10, 10) for n in "ab"])
        array.collect()
        assert array[1].contents[0].origin == Coord(0, 0, 0)

    def test_collect_on_empty_array_succeeds(self):
        array = CanvasArray(10, 10)
        assert array.collect() == []

        into = []
        assert array.collect(into) is into

    def test_collect_into_accumulator(self):
        array = CanvasArray(10, 10)
        array.place([make_content("a", 4, 4)])
        accumulator = ContentAccumulator()

        array.collect(accumulator)
        assert len(accumulator) == 1

    def test_place_with_accumulator_remainder(self):
        array = CanvasArray(10, 10)
        remainder = ContentAccumulator()
        assert not array.place([make_content("big", 12, 2)], remainder)
        assert [c.payload for c in remainder] == ["big"]

    def test_place_existing_never_adds_canvases(self):
        array = CanvasArray(10, 10)
        remainder = []
        placed = array.place_existing(
            [make_content("a", 10, 10), make_content("b", 10, 10)], remainder
        )

        assert not placed
        assert len(array) == 1
        assert [c.payload for c in remainder] == ["b"]

    def test_place_existing_chains_remainder(self):
        first = Canvas(10, 10)
        second = Canvas(10, 10)
        array = CanvasArray.from_canvases([first, second])

        assert array.place_existing([make_content(n, 10, 10) for n in "ab"])
        assert [c.origin.z for c in array.collect()] == [0, 1]

    def test_from_canvases_requires_matching_sizes(self):
        with pytest.raises(PackerError) as exc_info:
            CanvasArray.from_canvases([Canvas(10, 10), Canvas(10, 20)])
        assert exc_info.value.code == PackerErrorCode.INVALID_SIZE

    def test_from_canvases_requires_canvas(self):
        with pytest.raises(PackerError):
            CanvasArray.from_canvases([])

    def test_rotation_option_reaches_new_canvases(self):
        array = CanvasArray(10, 20, PackerOptions(allow_rotation=True))
        assert array.place([make_content("a", 10, 20), make_content("b", 20, 10)])

        collected = array.collect()
        assert len(array) == 2
        assert collected[1].rotated

    def test_clear(self):
        array = CanvasArray(10, 10)
        array.place([make_content(n, 10, 10) for n in "abc"])
        array.clear()
        assert len(array) == 1
        assert array.collect() == []


class TestContentAccumulator:
    """Tests for staging and sorting content."""

    def test_sort_width_then_height_descending(self):
        accumulator = ContentAccumulator()
        accumulator += [
            make_content("a", 10, 5),
            make_content("b", 20, 5),
            make_content("c", 10, 20),
        ]
        accumulator.sort()

        assert [(c.width, c.height) for c in accumulator] == [
            (20, 5),
            (10, 20),
            (10, 5),
        ]

    def test_sort_is_stable_for_equal_sizes(self):
        accumulator = ContentAccumulator(
            [make_content(n, 4, 4) for n in "xyz"] + [make_content("w", 8, 1)]
        )
        accumulator.sort()
        assert [c.payload for c in accumulator] == ["w", "x", "y", "z"]

    def test_iadd_single_item(self):
        accumulator = ContentAccumulator()
        accumulator += make_content("a", 1, 1)
        assert len(accumulator) == 1

    def test_add_returns_new_accumulator(self):
        accumulator = ContentAccumulator([make_content("a", 1, 1)])
        combined = accumulator + [make_content("b", 2, 2)]

        assert len(accumulator) == 1
        assert [c.payload for c in combined] == ["a", "b"]

    def test_clear(self):
        accumulator = ContentAccumulator([make_content("a", 1, 1)])
        accumulator.clear()
        assert len(accumulator) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
