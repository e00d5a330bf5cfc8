"""Dense tensors with an optional gradient and graph node."""

from __future__ import annotations

import math
from typing import Any, Iterable, Sequence

import numpy as np

from cgrad.dtypes import DType
from cgrad.errors import CapacityError, ShapeError

TENSOR_MAX_SHAPE_SIZE = 8
MODEL_MAX_PARAMS = 128
AUTOGRAD_MAX_NODES = 128
AUTOGRAD_MAX_PARENTS = 8
AUTOGRAD_MAX_CHILDREN = 8
AUTOGRAD_MAX_TARGETS = 128
AUTOGRAD_MAX_CONTEXT_SIZE = 8
DATASET_CSV_MAX_LINE_LENGTH = 8192
MEMORY_POOL_N_CHUNKS = 256
MEMORY_DATA_CHUNK_SIZE = 1024 * 1024 * 8


def compute_stride(shape: Sequence[int]) -> tuple[int, ...]:
    """Row-major strides, in elements, of a tensor with ``shape``."""
    shape = _validate_shape(shape)
    strides = [1]
    for dim in reversed(shape[1:]):
        strides.append(strides[-1] * dim)
    return tuple(reversed(strides))


def _validate_shape(shape: Iterable[int]) -> tuple[int, ...]:
    shape = tuple(int(dim) for dim in shape)
    if not shape:
        raise ShapeError("a tensor needs at least one dimension")
    if len(shape) > TENSOR_MAX_SHAPE_SIZE:
        raise ShapeError(
            f"at most {TENSOR_MAX_SHAPE_SIZE} dimensions are supported, got {len(shape)}"
        )
    if any(dim < 0 for dim in shape):
        raise ShapeError(f"negative dimension in shape {shape}")
    return shape


def _check_capacity(shape: tuple[int, ...], dtype: DType) -> None:
    nbytes = math.prod(shape) * dtype.numpy.itemsize
    if nbytes > MEMORY_DATA_CHUNK_SIZE:
        raise CapacityError(
            f"tensor of {nbytes} bytes exceeds the {MEMORY_DATA_CHUNK_SIZE}-byte limit"
        )


class Tensor:
    """A contiguous row-major tensor with an optional gradient tensor."""

    def __init__(self, data: np.ndarray, dtype: DType, grad: Tensor | None = None):
        self.dtype = DType(dtype)
        self.data = np.ascontiguousarray(data, dtype=self.dtype.numpy)
        _validate_shape(self.data.shape)
        self.grad = grad
        self.node: Any = None

    @classmethod
    def zeros(cls, shape, dtype=DType.FLOAT64, requires_grad=True) -> Tensor:
        """A zero-filled tensor; floating tensors get a zero gradient if asked."""
        dtype = DType(dtype)
        shape = _validate_shape(shape)
        _check_capacity(shape, dtype)
        grad = None
        if requires_grad and dtype.is_floating:
            grad = cls(np.zeros(shape, dtype=dtype.numpy), dtype)
        return cls(np.zeros(shape, dtype=dtype.numpy), dtype, grad)

    @classmethod
    def from_array(cls, data, shape, dtype=DType.FLOAT64) -> Tensor:
        """A tensor holding ``data`` laid out in ``shape``."""
        dtype = DType(dtype)
        shape = _validate_shape(shape)
        values = np.asarray(data, dtype=dtype.numpy)
        if values.size != math.prod(shape):
            raise ShapeError(
                f"{values.size} values cannot fill a tensor of shape {shape}"
            )
        tensor = cls.zeros(shape, dtype)
        tensor.data[...] = values.reshape(shape)
        return tensor

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(self.data.shape)

    @property
    def stride(self) -> tuple[int, ...]:
        return compute_stride(self.shape)

    @property
    def shape_size(self) -> int:
        return self.data.ndim

    @property
    def data_size(self) -> int:
        return int(self.data.size)

    def clone(self) -> Tensor:
        """A new tensor with a copy of this one's data and a fresh gradient."""
        copy = Tensor.zeros(self.shape, self.dtype)
        copy.data[...] = self.data
        return copy

    def _check_2d_index(self, row: int, col: int) -> None:
        if self.shape_size != 2:
            raise ShapeError(f"expected a 2-d tensor, got shape {self.shape}")
        rows, cols = self.shape
        if not (0 <= row < rows and 0 <= col < cols):
            raise IndexError(f"index ({row}, {col}) out of bounds for shape {self.shape}")

    def get(self, row: int, col: int):
        """Element at ``(row, col)`` of a 2-d tensor."""
        self._check_2d_index(row, col)
        return self.data[row, col].item()

    def set(self, row: int, col: int, value) -> None:
        """Store ``value`` at ``(row, col)`` of a 2-d tensor."""
        self._check_2d_index(row, col)
        self.data[row, col] = value

    def add_(self, other: Tensor) -> Tensor:
        """Add ``other`` element-wise into this tensor and return it."""
        if not self.same_shape(other):
            raise ShapeError(f"cannot add shape {other.shape} into {self.shape}")
        self.data += other.data.astype(self.dtype.numpy, copy=False)
        return self

    def same_shape(self, other: Tensor) -> bool:
        """Whether both tensors have identical shapes."""
        return self.shape == other.shape

    def shape_string(self) -> str:
        """The shape written as ``[d0, d1, ...]``."""
        return "[" + ", ".join(str(dim) for dim in self.shape) + "]"

    def __repr__(self) -> str:
        return f"Tensor(shape={self.shape_string()}, dtype={self.dtype.value})"