"""Exchange matrices over TCP: a doubling server and a client that queries it."""

from __future__ import annotations

import argparse
import socket
import struct
import sys
from collections.abc import Sequence

from tinymlp.matrix import Matrix

__all__ = [
    "DEFAULT_PORT",
    "encode_matrix",
    "send_matrix",
    "recv_matrix",
    "double_matrix",
    "handle_client",
    "serve",
    "request",
    "server_main",
    "client_main",
]

DEFAULT_PORT = 12345

# Two unsigned 64-bit dimensions, then the elements as 32-bit floats.
_HEADER = struct.Struct("<QQ")


def _payload_format(count: int) -> str:
    return f"<{count}f"


def encode_matrix(matrix: Matrix) -> bytes:
    """Return the wire form of ``matrix``: rows, columns, then float32 elements."""
    return _HEADER.pack(matrix.rows, matrix.cols) + struct.pack(
        _payload_format(len(matrix.elements)), *matrix.elements
    )


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    buffer = bytearray()
    while len(buffer) < size:
        chunk = sock.recv(size - len(buffer))
        if not chunk:
            raise ConnectionError(
                f"connection closed after {len(buffer)} of {size} expected bytes"
            )
        buffer += chunk
    return bytes(buffer)


def send_matrix(sock: socket.socket, matrix: Matrix) -> None:
    """Send ``matrix`` over a connected socket."""
    sock.sendall(encode_matrix(matrix))


def recv_matrix(sock: socket.socket) -> Matrix:
    """Read one matrix from a connected socket."""
    rows, cols = _HEADER.unpack(_recv_exact(sock, _HEADER.size))
    count = rows * cols
    fmt = _payload_format(count)
    payload = _recv_exact(sock, struct.calcsize(fmt))
    return Matrix(rows, cols, struct.unpack(fmt, payload))


def double_matrix(matrix: Matrix) -> Matrix:
    """Return a copy of ``matrix`` with every element multiplied by two."""
    return Matrix(matrix.rows, matrix.cols, (value * 2 for value in matrix.elements))


def handle_client(sock: socket.socket) -> Matrix:
    """Serve one request on ``sock``: receive a matrix, send it back doubled."""
    received = recv_matrix(sock)
    print("received matrix:")
    received.show()
    result = double_matrix(received)
    send_matrix(sock, result)
    print("result sent")
    return result


def serve(
    host: str = "0.0.0.0",
    port: int = DEFAULT_PORT,
    max_clients: int | None = None,
) -> int:
    """Accept clients one at a time; stop after ``max_clients`` if it is given.

    Returns the number of clients that were served.
    """
    served = 0
    with socket.create_server((host, port), backlog=1) as server:
        print("server started, waiting for clients...")
        while max_clients is None or served < max_clients:
            conn, _ = server.accept()
            with conn:
                print("client connected")
                try:
                    handle_client(conn)
                except ConnectionError as exc:
                    print(f"client failed: {exc}", file=sys.stderr)
            served += 1
    return served


def request(host: str, port: int, matrix: Matrix) -> Matrix:
    """Send ``matrix`` to a server and return the matrix it answers with."""
    with socket.create_connection((host, port)) as sock:
        send_matrix(sock, matrix)
        return recv_matrix(sock)


def server_main(argv: Sequence[str] | None = None) -> int:
    """Run the doubling server from the command line."""
    parser = argparse.ArgumentParser(description="Serve matrix doubling over TCP.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--max-clients", type=int, default=None)
    args = parser.parse_args(argv)
    try:
        serve(args.host, args.port, args.max_clients)
    except OSError as exc:
        print(f"server failed: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


def client_main(argv: Sequence[str] | None = None) -> int:
    """Send the sample matrix to a server and print the answer."""
    parser = argparse.ArgumentParser(description="Send a matrix to a doubling server.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)

    sample = Matrix.from_rows([[-1.0, 2.0, -3.0], [4.0, -5.0, 6.0]])
    try:
        result = request(args.host, args.port, sample)
    except OSError as exc:
        print(f"failed to reach server: {exc}", file=sys.stderr)
        return 1
    result.show()
    return 0