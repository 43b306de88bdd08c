from __future__ import annotations

from typing import List

from .limbs import MODE_SECRET, WideValue, make_wide_v1, resolve_operands_v1, sign_bit_v1
from .words import Word, WordBackend, mask_bits


def _shl_word(backend: WordBackend, x: Word, n: int, bits: int) -> Word:
    if isinstance(x, int):
        return (int(x) << int(n)) & mask_bits(bits)
    return backend.shl(x, int(n), bits=bits)


def _shr_word(backend: WordBackend, x: Word, n: int, bits: int) -> Word:
    if isinstance(x, int):
        return (int(x) & mask_bits(bits)) >> int(n)
    return backend.shr(x, int(n), bits=bits)


def _or_word(backend: WordBackend, x: Word, y: Word, bits: int) -> Word:
    if isinstance(x, int) and isinstance(y, int):
        return (int(x) | int(y)) & mask_bits(bits)
    if isinstance(y, int) and int(y) & mask_bits(bits) == 0:
        return x
    if isinstance(x, int) and int(x) & mask_bits(bits) == 0:
        return y
    return backend.or_(x, y, bits=bits)


def _limbwise(backend: WordBackend, a: object, b: object, mode: int, name: str) -> WideValue:
    ops = resolve_operands_v1(a, b, mode=mode)
    bits = ops.bits
    m = mask_bits(bits)
    out: List[Word] = []
    for x, y in zip(ops.lhs, ops.rhs):
        if isinstance(x, int) and isinstance(y, int):
            v = {"and": int(x) & int(y), "or": int(x) | int(y), "xor": int(x) ^ int(y)}[name]
            out.append(v & m)
        elif name == "and":
            out.append(backend.and_(x, y, bits=bits))
        elif name == "or":
            out.append(backend.or_(x, y, bits=bits))
        else:
            out.append(backend.xor(x, y, bits=bits))
    return make_wide_v1(backend, out, width=ops.type.width, signed=ops.type.signed)


def op_and_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> WideValue:
    return _limbwise(backend, a, b, mode, "and")


def op_or_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> WideValue:
    return _limbwise(backend, a, b, mode, "or")


def op_xor_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> WideValue:
    return _limbwise(backend, a, b, mode, "xor")


def op_not_v1(backend: WordBackend, x: WideValue) -> WideValue:
    lb = x.limb_bits
    limbs = [backend.xor(v, mask_bits(lb), bits=lb) for v in x.limbs]
    return make_wide_v1(backend, limbs, width=x.width, signed=x.signed)


def _check_shift(n: int) -> int:
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError("shift amount must be a public int")
    if int(n) < 0:
        raise ValueError("shift amount must be >= 0")
    return int(n)


def op_shl_v1(backend: WordBackend, x: WideValue, n: int) -> WideValue:
    """Left shift by a public amount, zero-filling. Shifting by the width or more gives 0."""
    n = _check_shift(n)
    lb = x.limb_bits
    k = len(x.limbs)
    if n >= int(x.width):
        return make_wide_v1(backend, [0] * k, width=x.width, signed=x.signed)
    q, r = divmod(n, lb)
    src: List[Word] = [0] * q + list(x.limbs)
    out: List[Word] = []
    for i in range(k):
        if r == 0:
            out.append(src[i])
            continue
        hi_part = _shl_word(backend, src[i], r, lb)
        carry_in = _shr_word(backend, src[i - 1], lb - r, lb) if i >= 1 else 0
        out.append(_or_word(backend, hi_part, carry_in, lb))
    return make_wide_v1(backend, out, width=x.width, signed=x.signed)


def op_shr_v1(backend: WordBackend, x: WideValue, n: int) -> WideValue:
    """Right shift by a public amount: logical for unsigned types, arithmetic for signed ones.

    Shifting by the width or more gives 0, or all sign bits for a signed value.
    """
    n = _check_shift(n)
    lb = x.limb_bits
    k = len(x.limbs)
    fill: Word = 0
    if x.signed:
        s = sign_bit_v1(backend, x.limbs[-1], bits=lb)
        fill = backend.mux(s, mask_bits(lb), 0, bits=lb)
    if n >= int(x.width):
        return make_wide_v1(backend, [fill] * k, width=x.width, signed=x.signed)
    q, r = divmod(n, lb)
    src: List[Word] = list(x.limbs)[q:] + [fill] * (q + 1)
    out: List[Word] = []
    for i in range(k):
        if r == 0:
            out.append(src[i])
            continue
        lo_part = _shr_word(backend, src[i], r, lb)
        from_above = _shl_word(backend, src[i + 1], lb - r, lb)
        out.append(_or_word(backend, lo_part, from_above, lb))
    return make_wide_v1(backend, out, width=x.width, signed=x.signed)
