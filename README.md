# cgrad

A compact reverse-mode automatic differentiation library built on numpy. It
has float32 and float64 tensors that can carry a gradient, a computational
graph that operations link themselves into, a ReLU activation, mean squared
error and softmax cross-entropy losses, a CSV dataset loader with shuffled
mini-batches, and a stochastic gradient descent optimizer with optional
(Nesterov) momentum.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Modules

- `cgrad.tensor` – `Tensor`, a contiguous row-major array with a `DType`, an
  optional `grad` tensor and an optional graph `node`. Create one with
  `Tensor.zeros(shape, dtype, requires_grad)` or
  `Tensor.from_array(data, shape, dtype)`; floating tensors get a zero gradient.
  It also offers `clone()`, `get(row, col)` and `set(row, col, value)` for 2-d
  tensors, the in-place `add_(other)`, `same_shape(other)` and
  `shape_string()`. `compute_stride(shape)` gives row-major strides.
- `cgrad.dtypes` – `DType` (`FLOAT64`, `FLOAT32`, `INT32`) and
  `dtype_sizeof(dtype)`.
- `cgrad.env` – `Environment(seed, intermediates_capacity)` seeds the random
  source and holds a bounded `TensorList` of intermediate tensors;
  `free_intermediates()` releases and empties it. Used as a context manager it
  frees the intermediates on exit.
- `cgrad.rng` – the shared random source: `init_random()`,
  `init_random_seed(seed)`, `sample_uniform(lower, upper)` and
  `sample_uniform_int(lower, upper)` (inclusive).
- `cgrad.graph` – `GraphNode` and `add_link(operand, operand_id, result,
  backprop_function)`, which records that `result` was computed from
  `operand`. `GraphNode.describe()` returns a text summary of a node.
- `cgrad.autograd_context` – `BackpropagationContext`, the operands and owned
  tensors a node keeps for the backward pass, and `check_backprop_input`.
- `cgrad.backprop` – `backward(t, env)` sets the gradient of a 1×1 tensor to
  one and propagates gradients, accumulating them into every tensor reachable
  through the graph; the visited nodes are released afterwards.
  `BackpropagationQueue` is the FIFO it uses.
- `cgrad.relu` – `relu_forward(x, track_grad, env)`.
- `cgrad.mse` – `mse_loss(y_pred, y_target, track_grad, env)`: half the
  squared error averaged over the first dimension, as a 1×1 tensor. Both
  inputs must have the same shape; gradients flow to both.
- `cgrad.cross_entropy` – `cross_entropy_loss(logits, targets, track_grad,
  env)`: `logits` has shape `(batch, classes)`, `targets` is a `(batch, 1)`
  column of class labels; returns the mean of
  `-logit_c + log(sum_k exp(logit_k))` as a 1×1 tensor. Targets are not
  differentiated.
- `cgrad.csv_dataset` – `CsvDataset.load(path)` reads a CSV file whose first
  line is a header and whose first column is the label. Fields that are not
  numbers read as 0.0, empty fields are skipped, every row must have as many
  fields as the header, and the last row must end with a newline.
  `standard_scale()` scales each feature column to zero mean and unit
  variance. `sample_batch(batch, dtype, env)` returns `(inputs, targets)`
  tensors of shapes `(n, cols - 1)` and `(n, 1)`.
- `cgrad.indexes` – `IndexesPermutation(size)` with `shuffle()`,
  `sample_index_batch(batch, batch_size)`, `update(batch_size)`,
  `is_terminated()` and `remaining()`; `IndexesBatch(capacity)` receives the
  sampled indexes. Sampling does not advance the permutation; call `update`.
- `cgrad.model_params` – `ModelParams`, an ordered list of parameter tensors
  with `add(tensor)` and `zero_grad()`.
- `cgrad.sgd` – `SGD(params, lr, momentum, nesterov, env)` with `step()` and
  `zero_grad()`. The velocity is `b_t = momentum * b_{t-1} + g_t`; a parameter
  moves by `-lr * b_t`, or by `-lr * (g_t + momentum * b_t)` with Nesterov.
  With a momentum of zero, `step()` leaves the parameters unchanged.
- `cgrad.errors` – `CGradError` and its subclasses `ShapeError`,
  `DTypeError`, `CapacityError`, `AutogradError` and `DatasetError`.

## Example: one training step

```python
from cgrad.env import Environment
from cgrad.dtypes import DType
from cgrad.csv_dataset import CsvDataset
from cgrad.indexes import IndexesBatch, IndexesPermutation
from cgrad.tensor import Tensor
from cgrad.relu import relu_forward
from cgrad.mse import mse_loss
from cgrad.backprop import backward
from cgrad.model_params import ModelParams
from cgrad.sgd import SGD

with Environment(seed=42) as env:
    dataset = CsvDataset.load("train.csv")
    dataset.standard_scale()

    permutation = IndexesPermutation(dataset.rows)
    permutation.shuffle()
    batch = IndexesBatch(capacity=32)
    batch_size = min(32, permutation.remaining())
    permutation.sample_index_batch(batch, batch_size)
    permutation.update(batch_size)

    inputs, targets = dataset.sample_batch(batch, DType.FLOAT64, env)

    prediction = Tensor.zeros(targets.shape, DType.FLOAT64, True)
    params = ModelParams()
    params.add(prediction)
    optimizer = SGD(params, lr=0.01, momentum=0.9, nesterov=False, env=env)

    activated = relu_forward(prediction, True, env)
    loss = mse_loss(activated, targets, True, env)
    backward(loss, env)

    optimizer.step()
    optimizer.zero_grad()
```

## Limits

Tensors have between one and eight dimensions (`ShapeError` otherwise) and at
most 8 MiB of data; a model holds at most 128 parameters; a graph node has at
most 8 parents and 8 children; and a backward pass visits at most 128 nodes.
The size limits raise `CapacityError`.

## What it does not do

The only differentiable operations are `relu_forward`, `mse_loss` and
`cross_entropy_loss`. There are no fully connected or convolution layers, no
matrix multiplication, reshape or transpose operations with gradients, and no
command-line program: models are built and trained from Python code.