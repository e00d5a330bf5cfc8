"""Stochastic gradient descent with optional (Nesterov) momentum."""

from __future__ import annotations

from cgrad.errors import AutogradError, CGradError
from cgrad.model_params import ModelParams
from cgrad.tensor import Tensor


class SGD:
    """Updates the parameters of a model from their gradients.

    With momentum ``m`` the velocity is ``b_t = m * b_{t-1} + g_t``; the
    parameter moves by ``-lr * b_t``, or, with Nesterov momentum, by
    ``-lr * (g_t + m * b_t)``. A momentum of zero leaves the parameters
    unchanged and only resets the velocities.
    """

    def __init__(
        self,
        params: ModelParams,
        lr: float,
        momentum: float = 0.0,
        nesterov: bool = False,
        env=None,
    ):
        if params is None:
            raise TypeError("model parameters must not be None")
        if env is None:
            raise TypeError("environment must not be None")
        self.params = params
        self.lr = float(lr)
        self.momentum = float(momentum)
        self.nesterov = bool(nesterov)
        self.env = env
        self.prev_b_t: list[Tensor] = [
            Tensor.zeros(param.shape, param.dtype, requires_grad=False)
            for param in params
        ]

    def step(self) -> None:
        """Apply one update to every parameter."""
        if len(self.prev_b_t) != len(self.params):
            raise CGradError(
                "parameters were added after the optimizer was created"
            )

        new_b_t: list[Tensor] = []
        for param, prev in zip(self.params, self.prev_b_t):
            b_t = Tensor.zeros(prev.shape, param.dtype, requires_grad=False)
            if self.momentum != 0:
                if param.grad is None:
                    raise AutogradError(f"parameter {param!r} has no gradient")
                np_dtype = param.dtype.numpy
                momentum = np_dtype.type(self.momentum)
                lr = np_dtype.type(self.lr)
                grad = param.grad.data.astype(np_dtype, copy=False)
                b_t.data[...] = momentum * prev.data + grad
                if self.nesterov:
                    g_t = grad + momentum * b_t.data
                    param.data -= lr * g_t
                else:
                    param.data -= lr * b_t.data
            new_b_t.append(b_t)
        self.prev_b_t = new_b_t

    def zero_grad(self) -> None:
        """Reset the gradient of every parameter to zero."""
        self.params.zero_grad()