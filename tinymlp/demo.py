"""Command-line demonstrations: matrix operations, a threading benchmark, a saved model."""

from __future__ import annotations

import argparse
import os
import sys
import time
from collections.abc import Sequence
from dataclasses import dataclass

from tinymlp.matrix import Matrix, block_multiply_threads, relu, softmax
from tinymlp.model import Model

__all__ = [
    "BenchmarkResult",
    "sample_matrices",
    "run_demo",
    "benchmark",
    "run_folder",
    "main",
]

_LAYER_NAMES = ("fc1.weight", "fc1.bias", "fc2.weight", "fc2.bias")


def sample_matrices() -> dict[str, Matrix]:
    """Return the small matrices the demonstration works on."""
    return {
        "A": Matrix.from_rows([[-1.0, 2.0, -3.0], [4.0, -5.0, 6.0]]),
        "B": Matrix.from_rows([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]),
        "C": Matrix.from_rows([[7.0, 8.0], [9.0, 10.0], [11.0, 12.0]]),
        "F": Matrix.from_rows([[1.0, 2.0, 3.0]]),
        "G": Matrix.from_rows([[7.0], [9.0], [11.0]]),
    }


def run_demo() -> dict[str, Matrix]:
    """Print and return the results of the basic operations and of a zero-weight model."""
    samples = sample_matrices()
    a, b, c = samples["A"], samples["B"], samples["C"]

    results = {
        "A": a,
        "relu": relu(a),
        "sum": a + b,
        "product": b @ c,
        "softmax_row": softmax(samples["F"]),
        "softmax_column": softmax(samples["G"]),
    }

    model = Model(Matrix(784, 500), Matrix(1, 500), Matrix(500, 10), Matrix(1, 10))
    results["model"] = model.forward(Matrix(1, 784))

    labels = {
        "A": "A:",
        "relu": "ReLU(A):",
        "sum": "A + B:",
        "product": "B @ C:",
        "softmax_row": "softmax(F):",
        "softmax_column": "softmax(G):",
        "model": "The result of the standard model is:",
    }
    for key, label in labels.items():
        print(label)
        results[key].show()
    return results


@dataclass(frozen=True)
class BenchmarkResult:
    """Timings and outputs of the single- and multi-threaded forward passes."""

    single_seconds: float
    threaded_seconds: float
    single: Matrix
    threaded: Matrix


def benchmark(
    rows: int = 1000,
    inner: int = 7840,
    cols: int = 1000,
    threads: int = 32,
) -> BenchmarkResult:
    """Time ``relu(x @ w1 + b1) @ w2 + b2`` computed plainly and with worker threads."""
    if threads <= 0:
        raise ValueError("threads must be a positive number")
    w1 = Matrix(inner, cols)
    b1 = Matrix(rows, cols)
    w2 = Matrix(cols, cols)
    b2 = Matrix(rows, cols)
    data = Matrix(rows, inner)

    start = time.perf_counter()
    single = relu(data @ w1 + b1) @ w2 + b2
    single_seconds = time.perf_counter() - start
    print(f"single-threaded: {single_seconds:g} s")

    start = time.perf_counter()
    hidden = relu(block_multiply_threads(data, w1, threads) + b1)
    threaded = block_multiply_threads(hidden, w2, threads) + b2
    threaded_seconds = time.perf_counter() - start
    print(f"multi-threaded ({threads} threads): {threaded_seconds:g} s")

    return BenchmarkResult(single_seconds, threaded_seconds, single, threaded)


def run_folder(folder: str | os.PathLike[str]) -> Matrix:
    """Load a model from ``folder``, report its layer shapes and run it on a zero input."""
    model = Model.from_folder(folder)
    layers = (model.weight1, model.bias1, model.weight2, model.bias2)
    for name, matrix in zip(_LAYER_NAMES, layers):
        print(f"{name} (columns rows): {matrix.cols} {matrix.rows}")
    result = model.forward(Matrix(1, model.weight1.rows))
    print("The result of the standard model is:")
    result.show()
    return result


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Small MLP demonstrations.")
    commands = parser.add_subparsers(dest="command")
    commands.add_parser("demo", help="run the matrix and model demonstration")

    bench = commands.add_parser("benchmark", help="compare plain and threaded products")
    bench.add_argument("--rows", type=int, default=1000)
    bench.add_argument("--inner", type=int, default=7840)
    bench.add_argument("--cols", type=int, default=1000)
    bench.add_argument("--threads", type=int, default=32)

    folder = commands.add_parser("folder", help="run a model stored in a folder")
    folder.add_argument("path")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point; returns the process exit status."""
    args = _build_parser().parse_args(argv)
    try:
        if args.command == "benchmark":
            benchmark(args.rows, args.inner, args.cols, args.threads)
        elif args.command == "folder":
            run_folder(args.path)
        else:
            run_demo()
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0