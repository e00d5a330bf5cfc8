"""Reverse-mode automatic differentiation: tensors, ReLU, MSE and cross-entropy losses, CSV datasets and SGD."""

__version__ = "1.0.0"

__all__ = [
    "autograd_context",
    "backprop",
    "cross_entropy",
    "csv_dataset",
    "dtypes",
    "env",
    "errors",
    "graph",
    "indexes",
    "model_params",
    "mse",
    "relu",
    "rng",
    "sgd",
    "tensor",
]