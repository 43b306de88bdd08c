from __future__ import annotations

# Fixed-width integers as little-endian vectors of 64-bit limbs.
#
# Widths up to 64 use a single limb interpreted in a `width`-bit ring; its upper bits
# are ignored, never cleared. Wider values use ceil(width/64) limbs of 64 bits each.

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .words import WORD_BITS, SecretWord, Word, WordBackend, mask_bits

WIDTHS = (8, 16, 32, 64, 128, 256)

# Internal layouts also cover the double-width intermediates of checked multiplication.
_LAYOUT_WIDTHS = WIDTHS + (512,)


def limb_bits(width: int) -> int:
    return min(int(width), WORD_BITS)


def limb_count(width: int) -> int:
    w = int(width)
    if w not in _LAYOUT_WIDTHS:
        raise ValueError(f"unsupported width {width}")
    return max(1, w // WORD_BITS)


@dataclass(frozen=True)
class IntType:
    width: int
    signed: bool

    def __post_init__(self) -> None:
        if int(self.width) not in WIDTHS:
            raise ValueError(f"width must be one of {WIDTHS}")

    @property
    def modulus(self) -> int:
        return 1 << int(self.width)

    @property
    def min_value(self) -> int:
        return -(1 << (int(self.width) - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (int(self.width) - 1)) - 1 if self.signed else (1 << int(self.width)) - 1

    def contains(self, value: int) -> bool:
        return self.min_value <= int(value) <= self.max_value

    def wrap(self, value: int) -> int:
        """Reduce an exact integer result to this type (two's complement when signed)."""
        v = int(value) % self.modulus
        if self.signed and v > self.max_value:
            v -= self.modulus
        return v

    @property
    def name(self) -> str:
        return f"{'int' if self.signed else 'uint'}{self.width}"


UINT8 = IntType(8, False)
UINT16 = IntType(16, False)
UINT32 = IntType(32, False)
UINT64 = IntType(64, False)
UINT128 = IntType(128, False)
UINT256 = IntType(256, False)
INT8 = IntType(8, True)
INT16 = IntType(16, True)
INT32 = IntType(32, True)
INT64 = IntType(64, True)
INT128 = IntType(128, True)
INT256 = IntType(256, True)


@dataclass(frozen=True)
class WideValue:
    """A secret fixed-width integer: `limbs[0]` is least significant."""

    width: int
    signed: bool
    limbs: Tuple[SecretWord, ...]

    def __post_init__(self) -> None:
        if int(self.width) not in WIDTHS:
            raise ValueError(f"width must be one of {WIDTHS}")
        if not isinstance(self.limbs, tuple):
            raise TypeError("limbs must be a tuple")
        if len(self.limbs) != limb_count(self.width):
            raise ValueError(f"width {self.width} needs {limb_count(self.width)} limbs, got {len(self.limbs)}")
        for x in self.limbs:
            if not isinstance(x, SecretWord):
                raise TypeError("limbs must be SecretWord handles")

    @property
    def type(self) -> IntType:
        return IntType(int(self.width), bool(self.signed))

    @property
    def limb_bits(self) -> int:
        return limb_bits(self.width)


def public_limbs_v1(value: int, *, width: int) -> Tuple[int, ...]:
    """Split an integer (already reduced or negative) into two's-complement limbs."""
    w = int(width)
    lb = limb_bits(w)
    v = int(value) % (1 << w)
    return tuple((v >> (lb * i)) & mask_bits(lb) for i in range(limb_count(w)))


def join_limbs_v1(limbs: Sequence[int], *, width: int, signed: bool) -> int:
    """Reassemble little-endian limb plaintexts into a width-bit integer."""
    w = int(width)
    lb = limb_bits(w)
    if len(limbs) != limb_count(w):
        raise ValueError("limb count mismatch")
    v = 0
    for i, x in enumerate(limbs):
        v |= (int(x) & mask_bits(lb)) << (lb * i)
    if signed and v >= (1 << (w - 1)):
        v -= 1 << w
    return v


def make_wide_v1(backend: WordBackend, limbs: Sequence[Word], *, width: int, signed: bool) -> WideValue:
    """Freeze a composer limb list into a WideValue, injecting any public limbs."""
    lb = limb_bits(width)
    out: List[SecretWord] = []
    for x in limbs:
        if isinstance(x, SecretWord):
            out.append(x)
        else:
            out.append(backend.set_public(int(x) & mask_bits(lb), bits=lb))
    return WideValue(width=int(width), signed=bool(signed), limbs=tuple(out))


# Calling modes: which operand, if any, is a public plaintext at the call site.
MODE_SECRET = 0
MODE_PUBLIC_LHS = 1
MODE_PUBLIC_RHS = 2


@dataclass(frozen=True)
class Operands:
    type: IntType
    lhs: Tuple[Word, ...]
    rhs: Tuple[Word, ...]

    @property
    def bits(self) -> int:
        return limb_bits(self.type.width)


def _public_side(value: object, t: IntType, name: str) -> Tuple[int, ...]:
    if isinstance(value, (WideValue, bool)) or not isinstance(value, int):
        raise TypeError(f"{name} must be a public int in this mode")
    if not t.contains(int(value)):
        raise ValueError(f"public {name} {value} out of range for {t.name}")
    return public_limbs_v1(int(value), width=t.width)


def resolve_operands_v1(a: object, b: object, *, mode: int = MODE_SECRET) -> Operands:
    """Turn (a, b) into limb tuples according to an explicit calling mode."""
    m = int(mode)
    if m == MODE_SECRET:
        if not isinstance(a, WideValue) or not isinstance(b, WideValue):
            raise TypeError("both operands must be WideValue in MODE_SECRET")
        if a.type != b.type:
            raise ValueError(f"operand type mismatch: {a.type.name} vs {b.type.name}")
        return Operands(type=a.type, lhs=a.limbs, rhs=b.limbs)
    if m == MODE_PUBLIC_LHS:
        if not isinstance(b, WideValue):
            raise TypeError("rhs must be WideValue in MODE_PUBLIC_LHS")
        return Operands(type=b.type, lhs=_public_side(a, b.type, "lhs"), rhs=b.limbs)
    if m == MODE_PUBLIC_RHS:
        if not isinstance(a, WideValue):
            raise TypeError("lhs must be WideValue in MODE_PUBLIC_RHS")
        return Operands(type=a.type, lhs=a.limbs, rhs=_public_side(b, a.type, "rhs"))
    raise ValueError(f"unknown calling mode {mode}")


def sign_bit_v1(backend: WordBackend, top: Word, *, bits: int) -> Word:
    """Top bit of the most significant limb (0/1)."""
    if isinstance(top, int):
        return (int(top) >> (int(bits) - 1)) & 1
    return backend.shr(top, int(bits) - 1, bits=int(bits))


def bool_and_v1(backend: WordBackend, x: Word, y: Word) -> Word:
    if isinstance(x, int):
        return y if int(x) & 1 else 0
    if isinstance(y, int):
        return x if int(y) & 1 else 0
    return backend.and_(x, y, bits=1)


def bool_or_v1(backend: WordBackend, x: Word, y: Word) -> Word:
    if isinstance(x, int):
        return 1 if int(x) & 1 else y
    if isinstance(y, int):
        return 1 if int(y) & 1 else x
    return backend.or_(x, y, bits=1)


def bool_not_v1(backend: WordBackend, x: Word) -> Word:
    if isinstance(x, int):
        return 1 - (int(x) & 1)
    return backend.xor(x, 1, bits=1)


def as_secret_bool_v1(backend: WordBackend, x: Word) -> SecretWord:
    if isinstance(x, SecretWord):
        return x
    return backend.set_public(int(x) & 1, bits=1)


def fits_in_limbs_v1(backend: WordBackend, limbs: Sequence[Word], *, n_limbs: int, bits: int, signed: bool) -> Word:
    """Boolean (secret, or public when every limb is public): `limbs` is representable in its
    lowest `n_limbs` limbs. Unsigned values need zero upper limbs; signed values need upper
    limbs equal to the sign extension of limb `n_limbs - 1`.
    """
    n = int(n_limbs)
    if not 1 <= n <= len(limbs):
        raise ValueError("n_limbs out of range")
    fill: Word = 0
    if signed:
        s = sign_bit_v1(backend, limbs[n - 1], bits=bits)
        if isinstance(s, int):
            fill = mask_bits(bits) if s else 0
        else:
            fill = backend.mux(s, mask_bits(bits), 0, bits=bits)
    acc: Word = 1
    for limb in limbs[n:]:
        if isinstance(limb, int) and isinstance(fill, int):
            e: Word = int(int(limb) == int(fill))
        else:
            e = backend.eq(limb, fill, bits=bits)
        acc = bool_and_v1(backend, acc, e)
    return acc


def op_fits_in_limbs_v1(backend: WordBackend, x: WideValue, *, n_limbs: int) -> SecretWord:
    """Secret boolean: x is representable in its lowest `n_limbs` limbs."""
    fits = fits_in_limbs_v1(backend, x.limbs, n_limbs=n_limbs, bits=x.limb_bits, signed=x.signed)
    return as_secret_bool_v1(backend, fits)


def reveal_bool_v1(backend: WordBackend, x: Word) -> bool:
    """Open a boolean. Public booleans are returned without a backend call."""
    if isinstance(x, int):
        return bool(int(x) & 1)
    return bool(backend.decrypt(x, bits=1))


def bool_xor_v1(backend: WordBackend, x: Word, y: Word) -> Word:
    if isinstance(x, int) and isinstance(y, int):
        return (int(x) ^ int(y)) & 1
    return backend.xor(x, y, bits=1)


def bool_mux_v1(backend: WordBackend, cond: Word, x: Word, y: Word) -> Word:
    if isinstance(cond, int):
        return x if int(cond) & 1 else y
    return backend.mux(cond, x, y, bits=1)
