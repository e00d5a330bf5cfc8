import numpy as np
import pytest

from cgrad.backprop import backward
from cgrad.dtypes import DType
from cgrad.env import Environment
from cgrad.errors import AutogradError, DTypeError
from cgrad.relu import relu_forward
from cgrad.tensor import Tensor


@pytest.fixture
def env():
    return Environment(seed=2)


def test_forward_values(env):
    x = Tensor.from_array([-1.5, 2.0, 0.0, 3.0], (2, 2))
    out = relu_forward(x, False, env)
    np.testing.assert_array_equal(out.data, np.array([[0.0, 2.0], [0.0, 3.0]]))
    assert out.shape == x.shape


def test_forward_is_nonnegative_and_keeps_positives(env):
    values = np.linspace(-5, 5, 11)
    x = Tensor.from_array(values, (11, 1), DType.FLOAT32)
    out = relu_forward(x, False, env)
    assert out.dtype is DType.FLOAT32
    assert (out.data >= 0).all()
    positive = x.data > 0
    np.testing.assert_array_equal(out.data[positive], x.data[positive])


def test_forward_without_tracking_leaves_graph_empty(env):
    x = Tensor.from_array([1.0], (1, 1))
    out = relu_forward(x, False, env)
    assert x.node is None
    assert out.node is None


def test_forward_with_tracking_links(env):
    x = Tensor.from_array([1.0, -1.0], (1, 2))
    out = relu_forward(x, True, env)
    assert out.node.n_children == 1
    assert x.node.n_parents == 1
    assert out.node.ctx.operands[0] is x


def test_backward_through_relu(env):
    x = Tensor.from_array([2.0, -1.0, 3.0, 4.0], (2, 2))
    out = relu_forward(x, True, env)
    backward(out, env)
    np.testing.assert_array_equal(x.grad.data, np.array([[1.0, 0.0], [0.0, 0.0]]))


def test_backprop_function_masks_gradient(env):
    x = Tensor.from_array([2.0, -1.0, 0.0, 4.0], (2, 2))
    out = relu_forward(x, True, env)
    grad_out = Tensor.from_array([5.0, 6.0, 7.0, 8.0], (2, 2))
    grad_x = Tensor.zeros((2, 2), requires_grad=False)
    out.node.functions[0](out.node.ctx, grad_out, grad_x)
    np.testing.assert_array_equal(grad_x.data, (x.data > 0) * grad_out.data)


def test_backprop_function_without_operand_raises(env):
    x = Tensor.from_array([1.0], (1, 1))
    out = relu_forward(x, True, env)
    function = out.node.functions[0]
    out.node.ctx.operands[0] = None
    with pytest.raises(AutogradError):
        function(out.node.ctx, Tensor.zeros((1, 1)), Tensor.zeros((1, 1)))


def test_forward_rejects_integer_dtype(env):
    x = Tensor.zeros((2, 2), DType.INT32)
    with pytest.raises(DTypeError):
        relu_forward(x, False, env)


def test_forward_rejects_none(env):
    with pytest.raises(TypeError):
        relu_forward(None, False, env)