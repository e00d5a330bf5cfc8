"""Per-node storage of the tensors a backpropagation function needs."""

from __future__ import annotations

from typing import Callable, Optional

from cgrad.errors import AutogradError, DTypeError
from cgrad.tensor import AUTOGRAD_MAX_CONTEXT_SIZE, Tensor

BackpropagationFunction = Callable[["BackpropagationContext", Tensor, Tensor], None]
"""Computes the gradient w.r.t. one operand into its last argument."""


def _check_ctx_id(ctx_id: int) -> int:
    if not 0 <= ctx_id < AUTOGRAD_MAX_CONTEXT_SIZE:
        raise AutogradError(
            f"invalid context id {ctx_id}; must be in [0, {AUTOGRAD_MAX_CONTEXT_SIZE})"
        )
    return ctx_id


class BackpropagationContext:
    """Operands, index values and owned tensors kept for the backward pass.

    Operands belong to the caller of the operation; owned tensors were
    created by the forward function and are released by ``cleanup_owned``.
    """

    def __init__(self) -> None:
        self.operands: list[Optional[Tensor]] = [None] * AUTOGRAD_MAX_CONTEXT_SIZE
        self.operand_indices: list[int] = [0] * AUTOGRAD_MAX_CONTEXT_SIZE
        self.owned: list[Optional[Tensor]] = [None] * AUTOGRAD_MAX_CONTEXT_SIZE
        self.n_owned = 0

    def set_operand(self, tensor: Tensor, ctx_id: int) -> None:
        """Store ``tensor`` as operand ``ctx_id``, replacing any previous one."""
        _check_ctx_id(ctx_id)
        if tensor is None:
            raise TypeError("operand tensor must not be None")
        self.operands[ctx_id] = tensor

    def set_operand_index(self, value: int, ctx_id: int) -> None:
        """Store an integer parameter of the operation at ``ctx_id``."""
        _check_ctx_id(ctx_id)
        self.operand_indices[ctx_id] = int(value)

    def set_owned(self, tensor: Tensor, ctx_id: int) -> None:
        """Take ownership of ``tensor`` at ``ctx_id``; the slot must be free."""
        _check_ctx_id(ctx_id)
        if self.owned[ctx_id] is not None:
            raise AutogradError(f"context id {ctx_id} is already taken")
        self.owned[ctx_id] = tensor
        self.n_owned += 1

    def cleanup_owned(self) -> None:
        """Release every owned tensor."""
        for tensor in self.owned:
            if tensor is not None:
                tensor.grad = None
                tensor.node = None
        self.owned = [None] * AUTOGRAD_MAX_CONTEXT_SIZE
        self.n_owned = 0


def check_backprop_input(grad_wrt_out: Tensor, grad_wrt_operand: Tensor) -> None:
    """Validate the gradient tensors handed to a backpropagation function."""
    if grad_wrt_out is None or grad_wrt_operand is None:
        raise AutogradError("backpropagation gradient tensor is None")
    if grad_wrt_out.dtype != grad_wrt_operand.dtype:
        raise DTypeError(
            f"gradient dtype mismatch: {grad_wrt_out.dtype.value} "
            f"vs {grad_wrt_operand.dtype.value}"
        )