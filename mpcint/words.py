from __future__ import annotations

# Word-level types and the backend contract.
#
# A SecretWord is an opaque handle to one 64-bit value held by a secure
# computation backend. Everything above this module composes wide integers out
# of backend calls on such words; nothing above it may look inside a word.

import abc
from dataclasses import dataclass, field
from typing import Any, Union

WORD_BITS = 64
WORD_MASK = 0xFFFFFFFFFFFFFFFF

# Ring widths a backend op can be asked to interpret its words in. 1 is used for secret booleans.
WORD_BITS_ALLOWED = (1, 8, 16, 32, 64)


def mask_bits(bits: int) -> int:
    return (1 << int(bits)) - 1


def check_word_bits(bits: int) -> int:
    b = int(bits)
    if b not in WORD_BITS_ALLOWED:
        raise ValueError(f"word bits must be one of {WORD_BITS_ALLOWED}, got {bits}")
    return b


@dataclass(frozen=True)
class SecretWord:
    """Opaque handle to a 64-bit secret word.

    `backend_id` names the backend instance that produced the word; `payload` is
    backend-private and is excluded from repr and equality.
    """

    backend_id: bytes
    payload: Any = field(repr=False, compare=False)


# A limb operand: secret, or a public plaintext word.
Word = Union[SecretWord, int]


def _require_len(b: bytes, n: int, name: str) -> None:
    if not isinstance(b, (bytes, bytearray)) or len(b) != n:
        raise ValueError(f"{name} must be {n} bytes")


@dataclass(frozen=True)
class Ciphertext:
    """Durable form of one word sealed under the network key: nonce8 || body (LE u64)."""

    nonce8: bytes
    body: int

    def __post_init__(self) -> None:
        _require_len(self.nonce8, 8, "nonce8")
        if not 0 <= int(self.body) <= WORD_MASK:
            raise ValueError("body must be a u64")

    def to_bytes(self) -> bytes:
        return bytes(self.nonce8) + int(self.body).to_bytes(8, "little", signed=False)

    @classmethod
    def from_bytes(cls, buf: bytes) -> "Ciphertext":
        _require_len(buf, 16, "ciphertext")
        return cls(nonce8=bytes(buf[0:8]), body=int.from_bytes(buf[8:16], "little", signed=False))


@dataclass(frozen=True)
class UserCiphertext:
    """One word re-encrypted to a single recipient's AES key."""

    nonce8: bytes
    body: int

    def __post_init__(self) -> None:
        _require_len(self.nonce8, 8, "nonce8")
        if not 0 <= int(self.body) <= WORD_MASK:
            raise ValueError("body must be a u64")

    def to_bytes(self) -> bytes:
        return bytes(self.nonce8) + int(self.body).to_bytes(8, "little", signed=False)

    @classmethod
    def from_bytes(cls, buf: bytes) -> "UserCiphertext":
        _require_len(buf, 16, "user ciphertext")
        return cls(nonce8=bytes(buf[0:8]), body=int.from_bytes(buf[8:16], "little", signed=False))


@dataclass(frozen=True)
class InputProof:
    """A ciphertext supplied from outside together with the sender's signature over it.

    The signature covers keccak256(ciphertext || bits || sender20 || contract20 || selector4).
    """

    ciphertext: Ciphertext
    bits: int
    sender20: bytes
    contract20: bytes
    selector4: bytes
    sig65: bytes

    def __post_init__(self) -> None:
        check_word_bits(self.bits)
        _require_len(self.sender20, 20, "sender20")
        _require_len(self.contract20, 20, "contract20")
        _require_len(self.selector4, 4, "selector4")
        _require_len(self.sig65, 65, "sig65")


class WordBackend(abc.ABC):
    """Contract of the secure 64-bit word backend.

    Every op takes `bits`, the ring Z/2^bits the words are interpreted in; inputs are
    reduced to `bits` before use and the result is only meaningful in its low `bits`.
    Either operand of a binary op may be a public int. Comparisons and `mux` conditions
    are secret booleans (low bit of a word). `mux(cond, a, b)` yields `a` when cond holds.
    """

    @abc.abstractmethod
    def add(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def sub(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def mul(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def div(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def rem(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def and_(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def or_(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def xor(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def shl(self, a: Word, n: int, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def shr(self, a: Word, n: int, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def eq(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def ne(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def lt(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def le(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def gt(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def ge(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def mux(self, cond: Word, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def decrypt(self, a: SecretWord, *, bits: int = WORD_BITS) -> int: ...

    @abc.abstractmethod
    def set_public(self, value: int, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def random(self, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def validate_ciphertext(self, proof: InputProof, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def offboard(self, a: SecretWord, *, bits: int = WORD_BITS) -> Ciphertext: ...

    @abc.abstractmethod
    def onboard(self, ct: Ciphertext, *, bits: int = WORD_BITS) -> SecretWord: ...

    @abc.abstractmethod
    def offboard_to_user(self, a: SecretWord, user_key16: bytes, *, bits: int = WORD_BITS) -> UserCiphertext: ...
