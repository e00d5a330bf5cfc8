"""Index containers for sampling shuffled batches from a dataset."""

from __future__ import annotations

from cgrad.rng import sample_uniform_int


class IndexesBatch:
    """Row indexes of one batch, holding at most ``capacity`` entries."""

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError(f"capacity must not be negative, got {capacity}")
        self.capacity = capacity
        self.indexes: list[int] = []

    def __len__(self) -> int:
        return len(self.indexes)

    def __repr__(self) -> str:
        return f"IndexesBatch(capacity={self.capacity}, indexes={self.indexes})"


class IndexesPermutation:
    """A permutation of ``range(size)`` consumed batch by batch.

    ``current`` is the position of the next index to sample.
    """

    def __init__(self, size: int):
        if size < 0:
            raise ValueError(f"size must not be negative, got {size}")
        self.size = size
        self.indexes: list[int] = list(range(size))
        self.current = 0

    def shuffle(self) -> None:
        """Reset the indexes to ``0..size-1`` and shuffle them (Fisher-Yates).

        The current position is left unchanged.
        """
        indexes = list(range(self.size))
        for i in range(self.size):
            j = sample_uniform_int(i, self.size - 1)
            indexes[i], indexes[j] = indexes[j], indexes[i]
        self.indexes = indexes

    def sample_index_batch(self, batch: IndexesBatch, batch_size: int) -> None:
        """Copy ``batch_size`` indexes from the current position into ``batch``.

        Raises ``ValueError`` if the batch cannot hold them or fewer remain.
        """
        if batch is None:
            raise TypeError("indexes batch must not be None")
        if batch_size < 0:
            raise ValueError(f"invalid batch size {batch_size}")
        if batch_size > batch.capacity or self.current + batch_size > self.size:
            raise ValueError(
                f"invalid batch size {batch_size}: capacity {batch.capacity}, "
                f"{self.remaining()} indexes remaining"
            )
        batch.indexes = self.indexes[self.current:self.current + batch_size]

    def update(self, batch_size: int) -> None:
        """Advance the current position by ``batch_size``, stopping at the end."""
        self.current = min(self.current + batch_size, self.size)

    def is_terminated(self) -> bool:
        """Whether every index has been consumed."""
        return self.current == self.size

    def remaining(self) -> int:
        """Number of indexes not consumed yet."""
        return self.size - self.current