"""Softmax cross-entropy loss over integer class labels."""

from __future__ import annotations

import numpy as np

from cgrad.autograd_context import BackpropagationContext
from cgrad.errors import AutogradError, DTypeError, ShapeError
from cgrad.graph import add_link
from cgrad.tensor import Tensor

_CROSS_ENTROPY_PREDICTED = 0
_CROSS_ENTROPY_TARGET = 1


def _labels(targets: Tensor, num_classes: int) -> np.ndarray:
    """Class labels of a column of targets, truncated towards zero."""
    labels = targets.data[:, 0].astype(np.int64)
    bad = (labels < 0) | (labels >= num_classes)
    if bad.any():
        label = int(labels[bad][0])
        raise IndexError(f"class label {label} out of range for {num_classes} classes")
    return labels


def _backpropagate_predicted(
    ctx: BackpropagationContext, grad_wrt_out: Tensor, grad_wrt_operand: Tensor
) -> None:
    if not grad_wrt_operand.dtype.is_floating:
        raise DTypeError(
            f"cross-entropy backpropagation does not support "
            f"{grad_wrt_operand.dtype.value}"
        )
    logits = ctx.operands[_CROSS_ENTROPY_PREDICTED]
    targets = ctx.operands[_CROSS_ENTROPY_TARGET]
    if logits is None or targets is None:
        raise AutogradError("cross-entropy backpropagation context is missing an operand")

    np_dtype = grad_wrt_operand.dtype.numpy
    batch_size, num_classes = logits.shape
    values = logits.data.astype(np_dtype, copy=False)
    exps = np.exp(values)
    predicted = exps / exps.sum(axis=1, keepdims=True, dtype=np_dtype)

    one_hot = np.zeros((batch_size, num_classes), dtype=np_dtype)
    one_hot[np.arange(batch_size), _labels(targets, num_classes)] = 1

    # dL/dlogit_j = (softmax_j - target_j) / batch_size
    grad_wrt_operand.data[...] = (predicted - one_hot) / np_dtype.type(batch_size)


def cross_entropy_loss(logits: Tensor, targets: Tensor, track_grad: bool, env) -> Tensor:
    """Mean over the batch of ``-logit_c + log(sum_k exp(logit_k))``, as a 1x1 tensor.

    ``logits`` has shape (batch, classes); ``targets`` is a (batch, 1) column
    of class labels. Targets are not differentiated.
    """
    if logits is None or targets is None:
        raise TypeError("logits and target tensors must not be None")
    if logits.shape_size != 2 or targets.shape_size != 2:
        raise ShapeError(
            f"expected 2-d tensors, got {logits.shape_string()} "
            f"and {targets.shape_string()}"
        )
    if logits.shape[0] != targets.shape[0] or targets.shape[1] != 1:
        raise ShapeError(
            f"targets {targets.shape_string()} do not fit logits {logits.shape_string()}"
        )
    if not logits.dtype.is_floating:
        raise DTypeError(f"cross-entropy does not support dtype {logits.dtype.value}")

    np_dtype = logits.dtype.numpy
    batch_size, num_classes = logits.shape
    labels = _labels(targets, num_classes)
    values = logits.data
    normalization = np.exp(values).sum(axis=1, dtype=np_dtype)
    per_sample = -values[np.arange(batch_size), labels] + np.log(normalization)

    z = Tensor.zeros((1, 1), logits.dtype)
    z.data[0, 0] = per_sample.sum(dtype=np_dtype) / np_dtype.type(batch_size)

    if track_grad:
        add_link(logits, _CROSS_ENTROPY_PREDICTED, z, _backpropagate_predicted)
        # Targets are not a graph node, but backpropagation needs them.
        z.node.set_context_tensor(targets, _CROSS_ENTROPY_TARGET)
    return z