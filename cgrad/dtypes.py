"""Element data types supported by tensors."""

from __future__ import annotations

import enum

import numpy as np

from cgrad.errors import DTypeError


class DType(enum.Enum):
    """Element type of a tensor."""

    FLOAT64 = "float64"
    FLOAT32 = "float32"
    INT32 = "int32"

    @property
    def numpy(self) -> np.dtype:
        """The matching numpy dtype."""
        return np.dtype(self.value)

    @property
    def is_floating(self) -> bool:
        """Whether the type holds real values and so can carry a gradient."""
        return self in (DType.FLOAT64, DType.FLOAT32)


def dtype_sizeof(dtype) -> int:
    """Size in bytes of one element of ``dtype``."""
    try:
        dtype = DType(dtype)
    except ValueError:
        raise DTypeError(f"unknown dtype: {dtype!r}") from None
    return dtype.numpy.itemsize