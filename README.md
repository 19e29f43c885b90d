# tinymlp

A small, dependency-free toolkit for dense float matrices and a two-layer
fully connected classifier (`softmax(relu(x @ W1 + b1) @ W2 + b2)`), plus a
minimal TCP protocol for sending matrices between a client and a server.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Matrices

`tinymlp.matrix.Matrix` stores its values in row-major order and is indexed
with `(row, column)` pairs. An index outside the matrix raises `IndexError`.
`Matrix(rows, cols)` is filled with zeros; `Matrix(rows, cols, elements)`
takes the values in row-major order and raises `ValueError` if their number
does not fit the shape.

```python
from tinymlp.matrix import Matrix, relu, softmax, block_multiply_threads

a = Matrix.from_rows([[-1, 2, -3], [4, -5, 6]])
b = Matrix.from_rows([[1, 2, 3], [4, 5, 6]])
c = Matrix.from_rows([[7, 8], [9, 10], [11, 12]])

print(a + b)          # element-wise sum
print(b @ c)          # matrix product
print(relu(a))        # negatives replaced by zero
print(softmax(Matrix.from_rows([[1, 2, 3]])))

# The same product, with rows shared out between worker threads.
print(block_multiply_threads(b, c, 2))
```

Adding matrices of different shapes, or multiplying matrices whose inner
dimensions differ, raises `ValueError`. `softmax` works on a single row or a
single column; any other shape raises `ValueError`. Printing a matrix (or
calling its `show` method) writes one tab-separated line per row.

`Matrix.from_image` takes a single-channel 8-bit image given as rows of pixel
values and flattens it into one row of values scaled to the range 0 to 1;
pixels with several channels raise `ValueError`.

## The model

`tinymlp.model.Model` holds two weight matrices and two biases and maps an
input row to class probabilities with `forward`. It is a `BaseModel`, whose
one abstract method is `forward`. A model can be built from matrices
directly, or loaded from a folder with `Model.from_folder` or `create_model`.
Such a folder holds:

- `meta.json`, giving the `[rows, cols]` shape of `fc1.weight`, `fc1.bias`,
  `fc2.weight` and `fc2.bias`;
- one raw binary file of little-endian 32-bit floats per entry, named after
  its key and stored row by row.

```python
from tinymlp.model import create_model
from tinymlp.matrix import Matrix

model = create_model("mnist-fc")
probabilities = model.forward(Matrix(1, 784))
print(probabilities)
```

`read_binfile(path, rows, cols)` reads one such weight file on its own and
raises `ValueError` if the file is too short for the shape asked for.

## Sending matrices over TCP

`tinymlp.network` sends a matrix as its row count and column count (unsigned
64-bit, little-endian) followed by its values as 32-bit floats. The server
receives a matrix, doubles every value and sends the result back, serving one
client at a time.

Start a server (port 12345 by default):

```
tinymlp-server
```

It takes `--host`, `--port` and `--max-clients` (stop after that many
clients). Then, from another terminal, send the sample matrix and print the
reply:

```
tinymlp-client
```

which takes `--host` and `--port`. The same exchange is available from
Python through `serve`, `request`, `send_matrix`, `recv_matrix`,
`encode_matrix`, `handle_client` and `double_matrix`.

## Demo

```
tinymlp-demo
```

prints the sample matrices, their sum and product, `relu` and `softmax`
results, and the output of a model built from zero weights. Two further
subcommands are available:

```
tinymlp-demo benchmark --rows 100 --inner 784 --cols 100 --threads 4
tinymlp-demo folder path/to/model
```

`benchmark` times a single-threaded forward computation against one using
`block_multiply_threads` (the defaults are large and slow); `folder` loads a
model from a folder, prints its layer shapes and runs it on a zero input.

## What it does not do

- The TCP server only doubles the matrices it receives; it does not run a
  model on them.
- There is no training: models are built from given matrices or loaded from
  weight files.
- Images are not read from files; `Matrix.from_image` takes pixel values
  already in memory.