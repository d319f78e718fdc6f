from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

DEFAULT_CHUNK_SIZE = 100


@dataclass(frozen=True)
class Chunk:
    """A contiguous run of row indices ``[start, start + size)`` sent as one statement."""
    start: int
    size: int

    @property
    def stop(self) -> int:
        return self.start + self.size

    @property
    def rows(self) -> range:
        return range(self.start, self.stop)


def check_chunk_size(max_chunk_size: int) -> None:
    if not isinstance(max_chunk_size, int) or isinstance(max_chunk_size, bool) or max_chunk_size <= 0:
        raise ValueError('max_chunk_size must be a positive integer')


def next_chunk(start: int, row_count: int, max_chunk_size: int = DEFAULT_CHUNK_SIZE) -> Chunk | None:
    """Return the chunk beginning at ``start``, or None once every row is consumed.

    The chunk's size is the number of rows actually available from ``start``, capped at
    ``max_chunk_size``; callers must size statements from it rather than from the cap.
    """
    check_chunk_size(max_chunk_size)
    if start < 0:
        raise ValueError('start must be a non-negative integer')
    if row_count < 0:
        raise ValueError('row_count must be a non-negative integer')
    available = row_count - start
    if available <= 0:
        return None
    return Chunk(start=start, size=min(available, max_chunk_size))


def plan_chunks(row_count: int, max_chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[Chunk]:
    """Yield chunks covering ``[0, row_count)`` in ascending order.

    Every chunk holds ``max_chunk_size`` rows except possibly the last. A zero row count
    yields nothing.
    """
    check_chunk_size(max_chunk_size)
    if row_count < 0:
        raise ValueError('row_count must be a non-negative integer')
    start = 0
    while True:
        chunk = next_chunk(start, row_count, max_chunk_size)
        if chunk is None:
            break
        yield chunk
        start = chunk.stop
