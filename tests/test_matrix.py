import math

import pytest

from tinymlp.matrix import Matrix, block_multiply_threads, relu, softmax


@pytest.fixture
def a():
    return Matrix.from_rows([[-1.0, 2.0, -3.0], [4.0, -5.0, 6.0]])


@pytest.fixture
def b():
    return Matrix.from_rows([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])


@pytest.fixture
def c():
    return Matrix.from_rows([[7.0, 8.0], [9.0, 10.0], [11.0, 12.0]])


def identity(n):
    m = Matrix(n, n)
    for i in range(n):
        m[i, i] = 1.0
    return m


def test_new_matrix_is_zero_filled():
    m = Matrix(2, 3)
    assert m.elements == [0.0] * 6
    assert (m.rows, m.cols) == (2, 3)


def test_element_count_must_match_shape():
    with pytest.raises(ValueError):
        Matrix(2, 2, [1.0, 2.0, 3.0])


def test_negative_dimensions_rejected():
    with pytest.raises(ValueError):
        Matrix(-1, 2)


def test_from_rows_is_row_major(b):
    assert b.elements == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    assert b[1, 0] == 4.0


def test_from_rows_empty():
    m = Matrix.from_rows([])
    assert (m.rows, m.cols, m.elements) == (0, 0, [])


def test_from_rows_ragged_rejected():
    with pytest.raises(ValueError):
        Matrix.from_rows([[1.0, 2.0], [3.0]])


def test_from_image_flattens_and_normalises():
    m = Matrix.from_image([[0, 255], [255, 0]])
    assert (m.rows, m.cols) == (1, 4)
    assert m.elements == [0.0, 1.0, 1.0, 0.0]


def test_from_image_rejects_multichannel():
    with pytest.raises(ValueError):
        Matrix.from_image([[(1, 2, 3), (4, 5, 6)]])


def test_setitem_then_getitem():
    m = Matrix(2, 2)
    m[1, 0] = 3.5
    assert m[1, 0] == 3.5
    assert m.elements[2] == 3.5


@pytest.mark.parametrize("key", [(2, 0), (0, 3), (-1, 0)])
def test_index_out_of_range(a, key):
    with pytest.raises(IndexError):
        a[key]
    with pytest.raises(IndexError):
        a[key] = 1.0
    assert a.elements == [-1.0, 2.0, -3.0, 4.0, -5.0, 6.0]
    assert a[1, 2] == 6.0


def test_addition_is_commutative_and_has_zero(a, b):
    assert a + b == b + a
    assert a + Matrix(2, 3) == a
    assert (a + b)[0, 1] == a[0, 1] + b[0, 1]


def test_addition_shape_mismatch(a, c):
    with pytest.raises(ValueError):
        a + c
    assert (a.rows, a.cols) == (2, 3)
    assert a + a == Matrix.from_rows([[-2.0, 4.0, -6.0], [8.0, -10.0, 12.0]])


def test_matmul_worked_example(b, c):
    assert b @ c == Matrix.from_rows([[58.0, 64.0], [139.0, 154.0]])


def test_matmul_identity(a):
    assert a @ identity(3) == a
    assert identity(2) @ a == a


def test_matmul_shape_mismatch(a, b, c):
    with pytest.raises(ValueError):
        a @ b
    assert a.elements == [-1.0, 2.0, -3.0, 4.0, -5.0, 6.0]
    assert a @ c == Matrix.from_rows([[-22.0, -24.0], [49.0, 54.0]])


def test_equality_considers_shape():
    assert Matrix(1, 2, [1.0, 2.0]) != Matrix(2, 1, [1.0, 2.0])


def test_str_uses_tabs_and_newlines():
    m = Matrix.from_rows([[1.0, 2.5], [-3.0, 0.0]])
    assert str(m) == "1\t2.5\t\n-3\t0\t\n"


def test_show_writes_str(capsys, b):
    b.show()
    assert capsys.readouterr().out == str(b)


def test_relu_clears_negatives(a):
    result = relu(a)
    assert result == Matrix.from_rows([[0.0, 2.0, 0.0], [4.0, 0.0, 6.0]])
    assert a[0, 0] == -1.0


def test_relu_is_idempotent(a):
    assert relu(relu(a)) == relu(a)
    assert all(v >= 0 for v in relu(a).elements)


@pytest.mark.parametrize(
    "vector",
    [
        Matrix.from_rows([[1.0, 2.0, 3.0]]),
        Matrix.from_rows([[7.0], [9.0], [11.0]]),
    ],
)
def test_softmax_is_a_distribution(vector):
    result = softmax(vector)
    assert (result.rows, result.cols) == (vector.rows, vector.cols)
    assert math.isclose(sum(result.elements), 1.0)
    assert result.elements == sorted(result.elements)
    assert all(v > 0 for v in result.elements)


def test_softmax_uniform_input():
    result = softmax(Matrix(1, 4, [2.0] * 4))
    assert result.elements == pytest.approx([0.25] * 4)


def test_softmax_shift_invariant():
    base = Matrix(1, 3, [1.0, 2.0, 3.0])
    shifted = Matrix(1, 3, [101.0, 102.0, 103.0])
    assert softmax(base).elements == pytest.approx(softmax(shifted).elements)


@pytest.mark.parametrize("shape", [(2, 3), (1, 1), (0, 0)])
def test_softmax_rejects_non_vectors(shape):
    with pytest.raises(ValueError):
        softmax(Matrix(*shape))


@pytest.mark.parametrize("threads", [1, 2, 3, 7])
def test_threaded_multiply_matches_serial(threads):
    m1 = Matrix(5, 4, [float(i % 7 - 3) for i in range(20)])
    m2 = Matrix(4, 3, [float(i % 5 - 2) for i in range(12)])
    assert block_multiply_threads(m1, m2, threads) == m1 @ m2


def test_threaded_multiply_worked_example(b, c):
    assert block_multiply_threads(b, c, 2) == Matrix.from_rows(
        [[58.0, 64.0], [139.0, 154.0]]
    )


def test_threaded_multiply_rejects_bad_thread_count(b, c):
    with pytest.raises(ValueError):
        block_multiply_threads(b, c, 0)


def test_threaded_multiply_shape_mismatch(a, b):
    with pytest.raises(ValueError):
        block_multiply_threads(a, b, 2)