"""The trainable tensors of a model."""

from __future__ import annotations

from typing import Iterator

from cgrad.errors import AutogradError, CapacityError
from cgrad.tensor import MODEL_MAX_PARAMS, Tensor


class ModelParams:
    """An ordered collection of up to ``MODEL_MAX_PARAMS`` parameter tensors."""

    def __init__(self) -> None:
        self._params: list[Tensor] = []

    def add(self, tensor: Tensor) -> None:
        """Register ``tensor``; raises ``CapacityError`` when the limit is reached."""
        if not isinstance(tensor, Tensor):
            raise TypeError(f"expected a Tensor, got {type(tensor).__name__}")
        if len(self._params) >= MODEL_MAX_PARAMS:
            raise CapacityError(
                f"a model may have at most {MODEL_MAX_PARAMS} parameters"
            )
        self._params.append(tensor)

    def zero_grad(self) -> None:
        """Reset the gradient of every parameter to zero."""
        for param in self._params:
            if param.grad is None:
                raise AutogradError(f"parameter {param!r} has no gradient")
            param.grad.data[...] = 0

    def __len__(self) -> int:
        return len(self._params)

    def __iter__(self) -> Iterator[Tensor]:
        return iter(self._params)

    def __getitem__(self, index: int) -> Tensor:
        return self._params[index]