#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Staging buffer for content waiting to be placed."""

from __future__ import annotations

from typing import Generic, Iterator, List, Sequence, Union

from binpack.packer_types import Content, T


class ContentAccumulator(Generic[T]):
    """Collects content items and orders them for placement.

    Sorting puts the widest items first, then the tallest, so large items
    claim space before small ones fill the gaps.
    """

    def __init__(self, contents: Sequence[Content[T]] = ()) -> None:
        self._contents: List[Content[T]] = list(contents)

    @property
    def contents(self) -> List[Content[T]]:
        """The underlying list; changes to it are visible to the accumulator."""
        return self._contents

    def __len__(self) -> int:
        return len(self._contents)

    def __iter__(self) -> Iterator[Content[T]]:
        return iter(self._contents)

    def __iadd__(
        self, other: Union[Content[T], Sequence[Content[T]]]
    ) -> ContentAccumulator[T]:
        if isinstance(other, Content):
            self._contents.append(other)
        else:
            self._contents.extend(other)
        return self

    def __add__(
        self, other: Union[Content[T], Sequence[Content[T]]]
    ) -> ContentAccumulator[T]:
        result = ContentAccumulator(self._contents)
        result += other
        return result

    def sort(self) -> None:
        """Sort by width descending, then height descending."""
        self._contents.sort(key=lambda c: (c.width, c.height), reverse=True)

    def clear(self) -> None:
        self._contents.clear()


__all__ = ["ContentAccumulator"]
