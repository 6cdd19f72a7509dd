[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "infernograd"
version = "0.1.0"
description = "A small reverse-mode autograd engine with reference gradient kernels and runtime utilities"
requires-python = ">=3.10"
dependencies = []
keywords = ["autograd", "backpropagation", "gradient", "neural-network", "deep-learning"]
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
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["infernograd*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
