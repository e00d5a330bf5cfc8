"""Nodes of the computational graph and the links between them."""

from __future__ import annotations

from typing import Optional

from cgrad.autograd_context import (
    BackpropagationContext,
    BackpropagationFunction,
)
from cgrad.errors import AutogradError, CapacityError
from cgrad.tensor import (
    AUTOGRAD_MAX_CHILDREN,
    AUTOGRAD_MAX_CONTEXT_SIZE,
    AUTOGRAD_MAX_PARENTS,
    Tensor,
)


class GraphNode:
    """A tensor's place in the graph.

    Parents are the results computed from this tensor; children are the
    operands this tensor was computed from, each with its operand id.
    """

    def __init__(self, tensor: Tensor):
        self.t = tensor
        tensor.node = self
        self.parents: list[GraphNode] = []
        self.children: list[GraphNode] = []
        self.children_operands: list[int] = []
        self.functions: list[Optional[BackpropagationFunction]] = [
            None
        ] * AUTOGRAD_MAX_CHILDREN
        self.ctx = BackpropagationContext()
        self.is_involved_in_backprop = False
        self.is_grad_computed = False
        self.pushed_gradients_count = 0

    @property
    def n_parents(self) -> int:
        return len(self.parents)

    @property
    def n_children(self) -> int:
        return len(self.children)

    def add_child(self, child: GraphNode, operand: int) -> None:
        """Record ``child`` as the operand with id ``operand``."""
        if len(self.children) >= AUTOGRAD_MAX_CHILDREN:
            raise CapacityError(
                f"a node may have at most {AUTOGRAD_MAX_CHILDREN} children"
            )
        self.children.append(child)
        self.children_operands.append(operand)

    def add_parent(self, parent: GraphNode) -> None:
        """Record ``parent`` as a result computed from this node."""
        if len(self.parents) >= AUTOGRAD_MAX_PARENTS:
            raise CapacityError(
                f"a node may have at most {AUTOGRAD_MAX_PARENTS} parents"
            )
        self.parents.append(parent)

    def set_context_tensor(self, tensor: Tensor, ctx_id: int) -> None:
        """Store ``tensor`` as operand ``ctx_id`` of this node's context."""
        self.ctx.set_operand(tensor, ctx_id)

    def release(self) -> None:
        """Detach the node from its tensor and release owned context tensors."""
        if self.t.node is self:
            self.t.node = None
        self.ctx.cleanup_owned()

    def describe(self) -> str:
        """A multi-line summary of the node and its children."""
        lines = [
            f"Node: 0x{id(self):x}",
            f"├── Parents: {self.n_parents}",
            f"├── Children: {self.n_children}",
        ]
        lines.extend(
            f"│   ├── Child {i}: 0x{id(child):x}"
            for i, child in enumerate(self.children)
        )
        functions = [f for f in self.functions if f is not None]
        names = ", ".join(getattr(f, "__name__", repr(f)) for f in functions)
        lines.append(f"└── Backprop Function: {names or 'none'}")
        return "\n".join(lines) + "\n"


def add_link(
    operand: Tensor,
    operand_id: int,
    result: Tensor,
    backprop_function: BackpropagationFunction,
) -> None:
    """Link ``operand`` into ``result`` in the graph as operand ``operand_id``."""
    if operand is None or result is None:
        raise TypeError("operand and result tensors must not be None")
    if operand.grad is None or result.grad is None:
        raise AutogradError("tensors linked in the graph need a gradient")
    if backprop_function is None:
        raise AutogradError("backpropagation function must not be None")
    if not 0 <= operand_id < AUTOGRAD_MAX_CONTEXT_SIZE:
        raise AutogradError(
            f"invalid operand id {operand_id}; must be in [0, {AUTOGRAD_MAX_CONTEXT_SIZE})"
        )

    op_node = operand.node if operand.node is not None else GraphNode(operand)
    res_node = result.node if result.node is not None else GraphNode(result)

    try:
        op_node.add_parent(res_node)
        res_node.add_child(op_node, operand_id)
    except CapacityError:
        op_node.release()
        res_node.release()
        raise

    res_node.functions[operand_id] = backprop_function
    res_node.ctx.set_operand(operand, operand_id)