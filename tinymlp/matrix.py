"""Dense row-major matrices of floats with the operations a small MLP needs."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor

__all__ = ["Matrix", "relu", "softmax", "block_multiply_threads"]


def _format_value(value: float) -> str:
    """Format a number the way a default C++ stream does (six significant digits)."""
    return f"{value:g}"


class Matrix:
    """A ``rows`` x ``cols`` matrix stored as a flat row-major list."""

    __slots__ = ("rows", "cols", "elements")
    __hash__ = None  # type: ignore[assignment]

    def __init__(
        self,
        rows: int = 0,
        cols: int = 0,
        elements: Iterable[float] | None = None,
    ) -> None:
        if rows < 0 or cols < 0:
            raise ValueError(f"matrix dimensions must be non-negative, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        if elements is None:
            self.elements: list[float] = [0.0] * (rows * cols)
        else:
            self.elements = [float(value) for value in elements]
            if len(self.elements) != rows * cols:
                raise ValueError(
                    f"expected {rows * cols} elements for a {rows}x{cols} matrix, "
                    f"got {len(self.elements)}"
                )

    @classmethod
    def from_rows(cls, data: Sequence[Sequence[float]]) -> Matrix:
        """Build a matrix from a sequence of equally long rows."""
        rows = [list(row) for row in data]
        if not rows:
            return cls()
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError("all rows must have the same length")
        return cls(len(rows), width, (value for row in rows for value in row))

    @classmethod
    def from_image(cls, image: Sequence[Sequence[int]]) -> Matrix:
        """Flatten a single-channel 8-bit image into a 1 x N matrix scaled to [0, 1]."""
        pixels: list[float] = []
        for row in image:
            for pixel in row:
                if isinstance(pixel, (Sequence, bytes)) and not isinstance(pixel, str):
                    raise ValueError("only single-channel (grayscale) images are supported")
                pixels.append(float(pixel) / 255.0)
        return cls(1, len(pixels), pixels)

    def _offset(self, key: object) -> int:
        if not (isinstance(key, tuple) and len(key) == 2):
            raise TypeError("matrix index must be a (row, column) pair")
        r, c = key
        if not (isinstance(r, int) and isinstance(c, int)):
            raise TypeError("matrix indices must be integers")
        if not (0 <= r < self.rows and 0 <= c < self.cols):
            raise IndexError("matrix index out of range")
        return r * self.cols + c

    def __getitem__(self, key: tuple[int, int]) -> float:
        return self.elements[self._offset(key)]

    def __setitem__(self, key: tuple[int, int], value: float) -> None:
        self.elements[self._offset(key)] = float(value)

    def _row_slices(self) -> Iterator[list[float]]:
        for start in range(0, self.rows * self.cols, self.cols or 1):
            yield self.elements[start : start + self.cols]

    def _columns(self) -> list[list[float]]:
        return [self.elements[j :: self.cols] for j in range(self.cols)]

    def __add__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        if (self.rows, self.cols) != (other.rows, other.cols):
            raise ValueError(
                f"cannot add a {self.rows}x{self.cols} matrix "
                f"and a {other.rows}x{other.cols} matrix"
            )
        return Matrix(
            self.rows,
            self.cols,
            (a + b for a, b in zip(self.elements, other.elements)),
        )

    def __matmul__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        _check_product(self, other)
        columns = other._columns()
        return Matrix(
            self.rows,
            other.cols,
            (
                sum(a * b for a, b in zip(row, column))
                for row in self._row_slices()
                for column in columns
            ),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return (
            self.rows == other.rows
            and self.cols == other.cols
            and self.elements == other.elements
        )

    def __repr__(self) -> str:
        return f"Matrix({self.rows}, {self.cols}, {self.elements!r})"

    def __str__(self) -> str:
        if self.cols == 0:
            return "\n" * self.rows
        return "".join(
            "".join(f"{_format_value(value)}\t" for value in row) + "\n"
            for row in self._row_slices()
        )

    def show(self) -> None:
        """Write the matrix to standard output, one tab-separated line per row."""
        print(self, end="")


def _check_product(m1: Matrix, m2: Matrix) -> None:
    if m1.cols != m2.rows:
        raise ValueError(
            f"cannot multiply a {m1.rows}x{m1.cols} matrix "
            f"by a {m2.rows}x{m2.cols} matrix"
        )


def relu(matrix: Matrix) -> Matrix:
    """Return a copy with every negative element replaced by zero."""
    return Matrix(matrix.rows, matrix.cols, (max(value, 0.0) for value in matrix.elements))


def softmax(matrix: Matrix) -> Matrix:
    """Softmax of a row or column vector; other shapes are rejected."""
    is_column = matrix.cols == 1 and matrix.rows != 1
    is_row = matrix.rows == 1 and matrix.cols != 1
    if not (is_column or is_row):
        raise ValueError("softmax needs a row or column vector")
    peak = max(matrix.elements)
    exps = [math.exp(value - peak) for value in matrix.elements]
    total = sum(exps)
    return Matrix(matrix.rows, matrix.cols, (value / total for value in exps))


def block_multiply_threads(m1: Matrix, m2: Matrix, core_use: int) -> Matrix:
    """Multiply two matrices, splitting the rows of ``m1`` over ``core_use`` threads."""
    if core_use <= 0:
        raise ValueError("core_use must be a positive number of threads")
    _check_product(m1, m2)
    columns = m2._columns()
    rows = list(m1._row_slices())
    block = m1.rows // core_use

    def compute(start: int, end: int) -> list[float]:
        return [
            sum(a * b for a, b in zip(row, column))
            for row in rows[start:end]
            for column in columns
        ]

    bounds = [
        (i * block, m1.rows if i == core_use - 1 else (i + 1) * block)
        for i in range(core_use)
    ]
    with ThreadPoolExecutor(max_workers=core_use) as pool:
        parts = list(pool.map(lambda span: compute(*span), bounds))
    return Matrix(m1.rows, m2.cols, (value for part in parts for value in part))