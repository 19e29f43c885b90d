"""A two-layer fully connected network and loaders for its weight files."""

from __future__ import annotations

import json
import os
import struct
from abc import ABC, abstractmethod
from pathlib import Path

from tinymlp.matrix import Matrix, relu, softmax

__all__ = ["BaseModel", "Model", "read_binfile", "create_model"]

_FLOAT = struct.Struct("<f")
_LAYERS = ("fc1.weight", "fc1.bias", "fc2.weight", "fc2.bias")


class BaseModel(ABC):
    """Anything that maps an input matrix to an output matrix."""

    @abstractmethod
    def forward(self, input: Matrix) -> Matrix:
        """Run the model on ``input`` and return its output."""


class Model(BaseModel):
    """``softmax(relu(x @ w1 + b1) @ w2 + b2)``."""

    def __init__(self, w1: Matrix, b1: Matrix, w2: Matrix, b2: Matrix) -> None:
        self.weight1 = w1
        self.bias1 = b1
        self.weight2 = w2
        self.bias2 = b2

    @classmethod
    def from_folder(cls, folder: str | os.PathLike[str]) -> Model:
        """Load ``meta.json`` and the four weight files from ``folder``."""
        base = Path(folder)
        meta_path = base / "meta.json"
        try:
            with meta_path.open(encoding="utf-8") as handle:
                meta = json.load(handle)
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"failed to open {meta_path}") from exc

        matrices = []
        for name in _LAYERS:
            try:
                rows, cols = (int(value) for value in meta[name][:2])
            except (KeyError, TypeError, ValueError) as exc:
                raise ValueError(f"meta.json has no valid shape for {name!r}") from exc
            matrices.append(read_binfile(base / name, rows, cols))
        return cls(*matrices)

    def forward(self, input: Matrix) -> Matrix:
        hidden = relu(input @ self.weight1 + self.bias1)
        return softmax(hidden @ self.weight2 + self.bias2)


def read_binfile(path: str | os.PathLike[str], rows: int, cols: int) -> Matrix:
    """Read ``rows * cols`` little-endian 32-bit floats from ``path`` in row-major order."""
    if rows < 0 or cols < 0:
        raise ValueError(f"matrix dimensions must be non-negative, got {rows}x{cols}")
    needed = rows * cols * _FLOAT.size
    with open(path, "rb") as handle:
        data = handle.read(needed)
    if len(data) < needed:
        raise ValueError(
            f"{os.fspath(path)} holds {len(data)} bytes, "
            f"but a {rows}x{cols} matrix needs {needed}"
        )
    return Matrix(rows, cols, (value for (value,) in _FLOAT.iter_unpack(data)))


def create_model(folder: str | os.PathLike[str]) -> BaseModel:
    """Load a model from ``folder``."""
    return Model.from_folder(folder)