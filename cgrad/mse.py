"""Mean squared error loss with gradient tracking."""

from __future__ import annotations

import numpy as np

from cgrad.autograd_context import BackpropagationContext
from cgrad.errors import AutogradError, DTypeError, ShapeError
from cgrad.graph import add_link
from cgrad.tensor import Tensor

_MSE_PREDICTED = 0
_MSE_TARGET = 1


def _leading(tensor: Tensor, count: int) -> np.ndarray:
    """A flat view of the first ``count`` elements of ``tensor``."""
    return tensor.data.reshape(-1)[:count]


def _backpropagate_predicted(
    ctx: BackpropagationContext, grad_wrt_out: Tensor, grad_wrt_operand: Tensor
) -> None:
    if not grad_wrt_operand.dtype.is_floating:
        return
    predicted = ctx.operands[_MSE_PREDICTED]
    target = ctx.operands[_MSE_TARGET]
    if predicted is None or target is None:
        raise AutogradError("mse backpropagation context is missing an operand")

    np_dtype = grad_wrt_operand.dtype.numpy
    batch_size = target.shape[0]
    diff = _leading(predicted, batch_size).astype(np_dtype, copy=False) - _leading(
        target, batch_size
    ).astype(np_dtype, copy=False)
    _leading(grad_wrt_operand, batch_size)[...] = diff / np_dtype.type(batch_size)


def _backpropagate_target(
    ctx: BackpropagationContext, grad_wrt_out: Tensor, grad_wrt_operand: Tensor
) -> None:
    if not grad_wrt_operand.dtype.is_floating:
        return
    _backpropagate_predicted(ctx, grad_wrt_out, grad_wrt_operand)
    # Same gradient as for the prediction, with the opposite sign.
    _leading(grad_wrt_operand, grad_wrt_operand.shape[0])[...] *= -1


def mse_loss(y_pred: Tensor, y_target: Tensor, track_grad: bool, env) -> Tensor:
    """Half the squared error averaged over the batch, as a 1x1 tensor.

    The batch is the first dimension of ``y_pred``; both tensors must have
    the same shape.
    """
    if y_pred is None or y_target is None:
        raise TypeError("prediction and target tensors must not be None")
    if y_pred.data_size != y_target.data_size:
        raise ShapeError(
            f"data size mismatch: {y_pred.data_size} vs {y_target.data_size}"
        )
    if not y_pred.same_shape(y_target):
        raise ShapeError(
            f"shape mismatch: {y_pred.shape_string()} vs {y_target.shape_string()}"
        )
    if not y_pred.dtype.is_floating:
        raise DTypeError(f"mse loss does not support dtype {y_pred.dtype.value}")

    np_dtype = y_pred.dtype.numpy
    batch_size = y_pred.shape[0]
    pred = _leading(y_pred, batch_size)
    target = _leading(y_target, batch_size).astype(np_dtype, copy=False)
    diff = pred - target

    z = Tensor.zeros((1, 1), y_pred.dtype)
    total = np.sum(np_dtype.type(0.5) * diff * diff, dtype=np_dtype)
    z.data[0, 0] = total / np_dtype.type(batch_size)

    if track_grad:
        add_link(y_pred, _MSE_PREDICTED, z, _backpropagate_predicted)
        add_link(y_target, _MSE_TARGET, z, _backpropagate_target)
    return z