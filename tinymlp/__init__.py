"""Dense matrices, a two-layer fully connected network and a TCP matrix exchange."""

__version__ = "0.1.0"
__all__ = ["matrix", "model", "network", "demo"]