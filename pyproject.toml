[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tinymlp"
version = "0.1.0"
description = "A small dense-matrix type, a two-layer fully connected network and a simple matrix exchange over TCP"
requires-python = ">=3.10"
dependencies = []
keywords = ["matrix", "neural-network", "mlp", "softmax", "relu", "mnist"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tinymlp-demo = "tinymlp.demo:main"
tinymlp-server = "tinymlp.network:server_main"
tinymlp-client = "tinymlp.network:client_main"

[tool.hatch.build.targets.wheel]
packages = ["tinymlp"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
