"""Reverse-mode gradient propagation through the computational graph."""

from __future__ import annotations

from collections import deque
from typing import Deque

from cgrad.autograd_context import check_backprop_input
from cgrad.errors import AutogradError, CapacityError, DTypeError
from cgrad.graph import GraphNode
from cgrad.tensor import AUTOGRAD_MAX_NODES, AUTOGRAD_MAX_TARGETS, Tensor


class BackpropagationQueue:
    """FIFO of graph nodes whose gradients are ready to be propagated.

    At most ``capacity`` nodes can ever be pushed; popped slots are not reused.
    """

    def __init__(self, capacity: int = AUTOGRAD_MAX_NODES):
        self.capacity = capacity
        self._items: Deque[GraphNode] = deque()
        self._pushed = 0

    def push(self, node: GraphNode) -> None:
        """Append ``node``; raises ``CapacityError`` once the capacity is used up."""
        if self._pushed >= self.capacity:
            raise CapacityError(
                f"backpropagation queue is full ({self.capacity} nodes)"
            )
        self._items.append(node)
        self._pushed += 1

    def peek(self) -> GraphNode:
        """The node at the front, without removing it."""
        if not self._items:
            raise AutogradError("backpropagation queue is empty")
        return self._items[0]

    def pop(self) -> GraphNode:
        """Remove and return the node at the front."""
        if not self._items:
            raise AutogradError("backpropagation queue is empty")
        return self._items.popleft()

    def is_empty(self) -> bool:
        """Whether no node is waiting."""
        return not self._items

    def __len__(self) -> int:
        return len(self._items)


def _seed_gradient(t: Tensor) -> None:
    if t.grad is None:
        raise AutogradError("tensor has no gradient to seed backpropagation")
    if not t.grad.dtype.is_floating:
        raise DTypeError(
            f"cannot backpropagate through dtype {t.grad.dtype.value}"
        )
    t.grad.set(0, 0, 1.0)


def _build_gradients(loss_node: GraphNode) -> list[GraphNode]:
    targets: list[GraphNode] = []
    queue = BackpropagationQueue()
    queue.push(loss_node)
    loss_dtype = loss_node.t.dtype

    while not queue.is_empty():
        node = queue.pop()
        if len(targets) >= AUTOGRAD_MAX_TARGETS:
            raise CapacityError(
                f"backpropagation reaches more than {AUTOGRAD_MAX_TARGETS} nodes"
            )
        targets.append(node)

        for child, operand in zip(node.children, node.children_operands):
            gradient = Tensor.zeros(child.t.shape, loss_dtype, requires_grad=False)
            check_backprop_input(node.t.grad, gradient)

            function = node.functions[operand]
            if function is None:
                raise AutogradError(
                    f"no backpropagation function for operand {operand}"
                )
            function(node.ctx, node.t.grad, gradient)

            if child.t.grad is None:
                raise AutogradError("operand tensor has no gradient")
            child.t.grad.add_(gradient)
            child.pushed_gradients_count += 1

            if child.pushed_gradients_count == child.n_parents:
                queue.push(child)

    return targets


def backward(t: Tensor, env) -> None:
    """Accumulate into every reachable tensor's gradient the gradient of ``t``.

    The graph nodes visited are released afterwards.
    """
    if t is None:
        raise TypeError("tensor must not be None")
    if env is None:
        raise TypeError("environment must not be None")

    _seed_gradient(t)

    if t.node is None:
        raise AutogradError("tensor is not part of a computational graph")

    for node in _build_gradients(t.node):
        node.t.node = None
        node.release()