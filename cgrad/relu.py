"""Rectified linear unit with gradient tracking."""

from __future__ import annotations

import numpy as np

from cgrad.autograd_context import BackpropagationContext
from cgrad.errors import AutogradError, DTypeError
from cgrad.graph import add_link
from cgrad.tensor import Tensor

_RELU_ONLY_OPERAND = 0


def _relu_backpropagate(
    ctx: BackpropagationContext, grad_wrt_out: Tensor, grad_wrt_operand: Tensor
) -> None:
    # Element (i, j) of relu(X) depends only on element (i, j) of X, so the
    # gradient is the Hadamard product of the mask X > 0 and grad_wrt_out.
    if not grad_wrt_operand.dtype.is_floating:
        raise DTypeError(
            f"relu backpropagation does not support {grad_wrt_operand.dtype.value}"
        )
    x = ctx.operands[_RELU_ONLY_OPERAND]
    if x is None:
        raise AutogradError("relu backpropagation context has no operand")
    mask = (x.data > 0).astype(grad_wrt_operand.dtype.numpy)
    grad_wrt_operand.data[...] = mask * grad_wrt_out.data


def relu_forward(x: Tensor, track_grad: bool, env) -> Tensor:
    """Element-wise ``max(x, 0)``; links the result into the graph if asked."""
    if x is None:
        raise TypeError("input tensor must not be None")
    if not x.dtype.is_floating:
        raise DTypeError(f"relu does not support dtype {x.dtype.value}")

    out = Tensor.zeros(x.shape, x.dtype)
    out.data[...] = np.where(x.data > 0, x.data, 0)

    if track_grad:
        add_link(x, _RELU_ONLY_OPERAND, out, _relu_backpropagate)
    return out