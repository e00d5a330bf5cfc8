[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cgrad"
version = "1.0.0"
description = "A small reverse-mode automatic differentiation library with tensors, losses, CSV datasets and SGD"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["autograd", "automatic differentiation", "tensor", "backpropagation", "sgd", "machine learning"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["cgrad"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
