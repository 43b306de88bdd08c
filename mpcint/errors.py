from __future__ import annotations


class MPCIntError(Exception):
    pass


class InvalidProof(MPCIntError):
    """An input proof or ciphertext failed validation at ingest."""


class DivisionByZero(MPCIntError, ZeroDivisionError):
    """Raised by the exact word-level division path only (widths <= 64)."""


class ArithmeticOverflow(MPCIntError, ArithmeticError):
    """Raised by hard-fail checked operations when the overflow flag opens to 1."""


class BackendError(MPCIntError, RuntimeError):
    pass
