"""Runtime environment holding the random seed and intermediate tensors."""

from __future__ import annotations

from typing import Iterator

from cgrad.errors import CapacityError
from cgrad.rng import init_random_seed
from cgrad.tensor import Tensor


class TensorList:
    """A bounded, ordered collection of tensors."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        self._items: list[Tensor] = []

    def add(self, tensor: Tensor) -> None:
        """Append ``tensor``; raises ``CapacityError`` when full."""
        if not isinstance(tensor, Tensor):
            raise TypeError(f"expected a Tensor, got {type(tensor).__name__}")
        if len(self._items) >= self.capacity:
            raise CapacityError(f"tensor list is full ({self.capacity} items)")
        self._items.append(tensor)

    def clear(self) -> None:
        """Remove every tensor."""
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Tensor]:
        return iter(self._items)


class Environment:
    """Seeds the random source and tracks intermediate tensors of a pass."""

    def __init__(self, seed: int = 0, intermediates_capacity: int = 128):
        self.seed = seed
        init_random_seed(seed)
        self.intermediates = TensorList(intermediates_capacity)

    def free_intermediates(self) -> None:
        """Release every tracked intermediate tensor and empty the list."""
        for tensor in self.intermediates:
            tensor.grad = None
            tensor.node = None
        self.intermediates.clear()

    def __enter__(self) -> Environment:
        return self

    def __exit__(self, *args) -> None:
        self.free_intermediates()