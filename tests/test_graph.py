import pytest

from cgrad.errors import AutogradError, CapacityError
from cgrad.graph import GraphNode, add_link
from cgrad.tensor import AUTOGRAD_MAX_CHILDREN, AUTOGRAD_MAX_PARENTS, Tensor


def _backprop(ctx, grad_wrt_out, grad_wrt_operand):
    grad_wrt_operand.data[...] = grad_wrt_out.data


def _other_backprop(ctx, grad_wrt_out, grad_wrt_operand):
    grad_wrt_operand.data[...] = -grad_wrt_out.data


def _tensor():
    return Tensor.zeros((1, 1))


def test_node_attaches_to_tensor():
    t = _tensor()
    node = GraphNode(t)
    assert t.node is node
    assert node.t is t
    assert node.n_parents == 0
    assert node.n_children == 0
    assert node.pushed_gradients_count == 0


def test_add_link_creates_nodes_and_edges():
    x, z = _tensor(), _tensor()
    add_link(x, 0, z, _backprop)
    assert x.node.parents == [z.node]
    assert z.node.children == [x.node]
    assert z.node.children_operands == [0]
    assert z.node.functions[0] is _backprop
    assert z.node.ctx.operands[0] is x


def test_add_link_reuses_existing_nodes():
    x, y, z = _tensor(), _tensor(), _tensor()
    add_link(x, 0, z, _backprop)
    result_node = z.node
    add_link(y, 1, z, _other_backprop)
    assert z.node is result_node
    assert z.node.n_children == 2
    assert z.node.children_operands == [0, 1]
    assert z.node.functions[1] is _other_backprop
    assert z.node.ctx.operands[1] is y


def test_add_link_requires_gradients():
    x = Tensor.zeros((1, 1), requires_grad=False)
    z = _tensor()
    with pytest.raises(AutogradError):
        add_link(x, 0, z, _backprop)
    assert x.node is None and z.node is None


def test_add_link_requires_function():
    with pytest.raises(AutogradError):
        add_link(_tensor(), 0, _tensor(), None)


def test_add_link_rejects_none_tensor():
    with pytest.raises(TypeError):
        add_link(None, 0, _tensor(), _backprop)


def test_add_link_rejects_invalid_operand_id():
    with pytest.raises(AutogradError):
        add_link(_tensor(), 99, _tensor(), _backprop)


def test_too_many_children_releases_nodes():
    z = _tensor()
    for _ in range(AUTOGRAD_MAX_CHILDREN):
        add_link(_tensor(), 0, z, _backprop)
    assert z.node.n_children == AUTOGRAD_MAX_CHILDREN
    extra = _tensor()
    with pytest.raises(CapacityError):
        add_link(extra, 0, z, _backprop)
    assert z.node is None
    assert extra.node is None


def test_too_many_parents():
    x = _tensor()
    for _ in range(AUTOGRAD_MAX_PARENTS):
        add_link(x, 0, _tensor(), _backprop)
    assert x.node.n_parents == AUTOGRAD_MAX_PARENTS
    with pytest.raises(CapacityError):
        add_link(x, 0, _tensor(), _backprop)


def test_add_child_and_parent_limits():
    node = GraphNode(_tensor())
    for _ in range(AUTOGRAD_MAX_CHILDREN):
        node.add_child(GraphNode(_tensor()), 0)
    with pytest.raises(CapacityError):
        node.add_child(GraphNode(_tensor()), 0)
    for _ in range(AUTOGRAD_MAX_PARENTS):
        node.add_parent(GraphNode(_tensor()))
    with pytest.raises(CapacityError):
        node.add_parent(GraphNode(_tensor()))


def test_set_context_tensor():
    z, target = _tensor(), _tensor()
    node = GraphNode(z)
    node.set_context_tensor(target, 1)
    assert node.ctx.operands[1] is target
    with pytest.raises(AutogradError):
        node.set_context_tensor(target, 8)


def test_release_detaches_tensor_and_owned():
    t = _tensor()
    node = GraphNode(t)
    node.ctx.set_owned(_tensor(), 0)
    node.release()
    assert t.node is None
    assert node.ctx.n_owned == 0


def test_release_keeps_other_node_on_tensor():
    t = _tensor()
    old = GraphNode(t)
    new = GraphNode(t)
    old.release()
    assert t.node is new


def test_describe_lists_children():
    x, y, z = _tensor(), _tensor(), _tensor()
    add_link(x, 0, z, _backprop)
    add_link(y, 1, z, _other_backprop)
    text = z.node.describe()
    assert "├── Parents: 0" in text
    assert "├── Children: 2" in text
    assert f"Child 1: 0x{id(y.node):x}" in text
    assert "_other_backprop" in text
    assert text.startswith(f"Node: 0x{id(z.node):x}")