from __future__ import annotations

# Arithmetic composer: wide add/sub/mul/div/rem out of 64-bit backend calls.
#
# Limb routines take and return little-endian lists of Words (SecretWord or public int) of a
# fixed limb width `bits`. Public-only limb work is folded locally; everything touching a
# secret limb goes through the backend, in carry/borrow dependency order.

from typing import List, Optional, Sequence, Tuple

from .limbs import (
    MODE_SECRET,
    WideValue,
    bool_or_v1,
    bool_xor_v1,
    fits_in_limbs_v1,
    join_limbs_v1,
    limb_bits,
    limb_count,
    make_wide_v1,
    public_limbs_v1,
    resolve_operands_v1,
    reveal_bool_v1,
    sign_bit_v1,
)
from .logger import INFO, log
from .words import SecretWord, Word, WordBackend, mask_bits

_M32 = 0xFFFFFFFF


def _is_zero_pub(x: Optional[Word]) -> bool:
    return x is None or (isinstance(x, int) and int(x) == 0)


def add_limbs_v1(
    backend: WordBackend,
    xs: Sequence[Word],
    ys: Sequence[Word],
    *,
    bits: int,
    carry_in: Optional[Word] = None,
) -> Tuple[List[Word], Word]:
    """Ripple-carry addition. Returns (sum limbs, carry out)."""
    if len(xs) != len(ys):
        raise ValueError("limb count mismatch")
    m = mask_bits(bits)
    out: List[Word] = []
    carry: Optional[Word] = carry_in
    for x, y in zip(xs, ys):
        if isinstance(x, int) and isinstance(y, int) and not isinstance(carry, SecretWord):
            t = int(x) + int(y) + (int(carry) if carry is not None else 0)
            out.append(t & m)
            carry = t >> int(bits)
            continue
        s = backend.add(x, y, bits=bits)
        c: Word = backend.lt(s, x, bits=bits)
        if not _is_zero_pub(carry):
            s2 = backend.add(s, carry, bits=bits)
            c = bool_or_v1(backend, c, backend.lt(s2, s, bits=bits))
            s = s2
        out.append(s)
        carry = c
    return out, (carry if carry is not None else 0)


def sub_limbs_v1(
    backend: WordBackend,
    xs: Sequence[Word],
    ys: Sequence[Word],
    *,
    bits: int,
    borrow_in: Optional[Word] = None,
) -> Tuple[List[Word], Word]:
    """Ripple-borrow subtraction. Returns (difference limbs, borrow out)."""
    if len(xs) != len(ys):
        raise ValueError("limb count mismatch")
    m = mask_bits(bits)
    out: List[Word] = []
    borrow: Optional[Word] = borrow_in
    for x, y in zip(xs, ys):
        if isinstance(x, int) and isinstance(y, int) and not isinstance(borrow, SecretWord):
            t = int(x) - int(y) - (int(borrow) if borrow is not None else 0)
            out.append(t & m)
            borrow = 1 if t < 0 else 0
            continue
        d = backend.sub(x, y, bits=bits)
        b: Word = backend.lt(x, y, bits=bits)
        if not _is_zero_pub(borrow):
            d2 = backend.sub(d, borrow, bits=bits)
            b = bool_or_v1(backend, b, backend.lt(d, borrow, bits=bits))
            d = d2
        out.append(d)
        borrow = b
    return out, (borrow if borrow is not None else 0)


def not_limbs_v1(backend: WordBackend, xs: Sequence[Word], *, bits: int) -> List[Word]:
    m = mask_bits(bits)
    return [(int(x) ^ m) & m if isinstance(x, int) else backend.xor(x, m, bits=bits) for x in xs]


def negate_limbs_v1(backend: WordBackend, xs: Sequence[Word], *, bits: int) -> List[Word]:
    """Two's complement negation: bitwise not, plus one."""
    one = [1] + [0] * (len(xs) - 1)
    out, _ = add_limbs_v1(backend, not_limbs_v1(backend, xs, bits=bits), one, bits=bits)
    return out


def select_limbs_v1(backend: WordBackend, cond: Word, xs: Sequence[Word], ys: Sequence[Word], *, bits: int) -> List[Word]:
    """xs where cond holds, else ys."""
    if isinstance(cond, int):
        return list(xs) if int(cond) & 1 else list(ys)
    return [backend.mux(cond, x, y, bits=bits) for x, y in zip(xs, ys)]


def cond_negate_limbs_v1(backend: WordBackend, cond: Word, xs: Sequence[Word], *, bits: int) -> List[Word]:
    if isinstance(cond, int) and not int(cond) & 1:
        return list(xs)
    neg = negate_limbs_v1(backend, xs, bits=bits)
    return select_limbs_v1(backend, cond, neg, xs, bits=bits)


def _split32(backend: WordBackend, x: Word) -> Tuple[Word, Word]:
    if isinstance(x, int):
        return int(x) & _M32, (int(x) >> 32) & _M32
    return backend.and_(x, _M32), backend.shr(x, 32)


def mul_word_wide_v1(backend: WordBackend, x: Word, y: Word, *, bits: int) -> Tuple[Word, Word]:
    """Full product of two `bits`-wide words as (low word, high word)."""
    m = mask_bits(bits)
    if isinstance(x, int) and isinstance(y, int):
        p = (int(x) & m) * (int(y) & m)
        return p & m, p >> int(bits)
    if bits <= 32:
        # Narrow limbs: one double-width product. Upper garbage must be cleared first.
        w2 = 2 * int(bits)
        xm = int(x) & m if isinstance(x, int) else backend.and_(x, m, bits=w2)
        ym = int(y) & m if isinstance(y, int) else backend.and_(y, m, bits=w2)
        p = backend.mul(xm, ym, bits=w2)
        return p, backend.shr(p, int(bits), bits=w2)

    x0, x1 = _split32(backend, x)
    y0, y1 = _split32(backend, y)
    p00 = backend.mul(x0, y0)
    p01 = backend.mul(x0, y1)
    p10 = backend.mul(x1, y0)
    p11 = backend.mul(x1, y1)

    mid = backend.add(p01, p10)
    mid_c = backend.lt(mid, p01)  # weight 2^96
    lo = backend.add(p00, backend.shl(mid, 32))
    lo_c = backend.lt(lo, p00)
    hi = backend.add(p11, backend.shr(mid, 32))
    hi = backend.add(hi, backend.shl(mid_c, 32))
    hi = backend.add(hi, lo_c)
    return lo, hi


def mul_limbs_v1(backend: WordBackend, xs: Sequence[Word], ys: Sequence[Word], *, bits: int, n_out: int) -> List[Word]:
    """Schoolbook multiply-accumulate, truncated to `n_out` limbs."""
    n_out = int(n_out)
    m = mask_bits(bits)
    acc: List[Word] = [0] * n_out
    for i, x in enumerate(xs):
        for j, y in enumerate(ys):
            k = i + j
            if k >= n_out:
                break
            if k + 1 >= n_out:
                if isinstance(x, int) and isinstance(y, int):
                    partial: List[Word] = [(int(x) * int(y)) & m]
                else:
                    partial = [backend.mul(x, y, bits=bits)]
            else:
                lo, hi = mul_word_wide_v1(backend, x, y, bits=bits)
                partial = [lo, hi] + [0] * (n_out - k - 2)
            if all(_is_zero_pub(v) for v in acc[k:]):
                acc[k:] = partial
            else:
                acc[k:], _ = add_limbs_v1(backend, acc[k:], partial, bits=bits)
    return acc


def abs_limbs_v1(backend: WordBackend, xs: Sequence[Word], *, bits: int) -> Tuple[List[Word], Word]:
    """Magnitude of a two's-complement limb vector and its sign bit. |MIN| is 2^(w-1) unsigned."""
    s = sign_bit_v1(backend, xs[-1], bits=bits)
    return cond_negate_limbs_v1(backend, s, xs, bits=bits), s


# ---- division ------------------------------------------------------------------------------------


def _zero_safe_divmod_word(backend: WordBackend, x: Word, y: Word, *, bits: int) -> Tuple[Word, Word]:
    """Word division where a zero divisor yields (0, 0) instead of failing."""
    if isinstance(y, int):
        if int(y) & mask_bits(bits) == 0:
            return 0, 0
        return backend.div(x, y, bits=bits), backend.rem(x, y, bits=bits)
    z = backend.eq(y, 0, bits=bits)
    d = backend.mux(z, 1, y, bits=bits)
    q = backend.div(x, d, bits=bits)
    r = backend.rem(x, d, bits=bits)
    return backend.mux(z, 0, q, bits=bits), backend.mux(z, 0, r, bits=bits)


def _open_limbs(backend: WordBackend, xs: Sequence[Word], *, bits: int) -> List[int]:
    return [int(x) & mask_bits(bits) if isinstance(x, int) else backend.decrypt(x, bits=bits) for x in xs]


def divmod_reveal_limbs_v1(
    backend: WordBackend, xs: Sequence[Word], ys: Sequence[Word], *, width: int
) -> Tuple[List[Word], List[Word]]:
    """REDUCED PRIVACY: open both unsigned operands, divide in the clear, re-inject.

    A zero divisor yields zero quotient and remainder.
    """
    bits = limb_bits(width)
    a = join_limbs_v1(_open_limbs(backend, xs, bits=bits), width=width, signed=False)
    b = join_limbs_v1(_open_limbs(backend, ys, bits=bits), width=width, signed=False)
    log(INFO, "reduced-privacy division: %d-bit operands revealed", int(width))
    q, r = divmod(a, b) if b != 0 else (0, 0)
    qs = [backend.set_public(v, bits=bits) for v in public_limbs_v1(q, width=width)]
    rs = [backend.set_public(v, bits=bits) for v in public_limbs_v1(r, width=width)]
    return list(qs), list(rs)


def _divmod_u128(backend: WordBackend, xs: Sequence[Word], ys: Sequence[Word]) -> Tuple[List[Word], List[Word]]:
    # Magnitude class of each operand is revealed to pick the algorithm.
    a_small = reveal_bool_v1(backend, fits_in_limbs_v1(backend, xs, n_limbs=1, bits=64, signed=False))
    b_small = reveal_bool_v1(backend, fits_in_limbs_v1(backend, ys, n_limbs=1, bits=64, signed=False))
    if a_small and b_small:
        q, r = _zero_safe_divmod_word(backend, xs[0], ys[0], bits=64)
        return [q, 0], [r, 0]
    return divmod_reveal_limbs_v1(backend, xs, ys, width=128)


def divmod_unsigned_limbs_v1(
    backend: WordBackend, xs: Sequence[Word], ys: Sequence[Word], *, width: int
) -> Tuple[List[Word], List[Word]]:
    """Width-dependent unsigned division.

    <= 64 bits: exact backend primitive, zero divisor raises DivisionByZero.
    128 bits: primitive when both operands fit one limb, reduced-privacy reveal otherwise.
    256 bits: low 128-bit halves through the 128-bit routine, upper half of the result zero.
    """
    w = int(width)
    if w <= 64:
        return [backend.div(xs[0], ys[0], bits=w)], [backend.rem(xs[0], ys[0], bits=w)]
    if w == 128:
        return _divmod_u128(backend, xs, ys)
    if w == 256:
        q, r = _divmod_u128(backend, xs[:2], ys[:2])
        return q + [0, 0], r + [0, 0]
    raise ValueError(f"unsupported division width {width}")


def divmod_limbs_v1(
    backend: WordBackend, xs: Sequence[Word], ys: Sequence[Word], *, width: int, signed: bool
) -> Tuple[List[Word], List[Word]]:
    """Quotient truncated toward zero; remainder carries the dividend's sign."""
    if not signed:
        return divmod_unsigned_limbs_v1(backend, xs, ys, width=width)
    bits = limb_bits(width)
    ma, sa = abs_limbs_v1(backend, xs, bits=bits)
    mb, sb = abs_limbs_v1(backend, ys, bits=bits)
    q, r = divmod_unsigned_limbs_v1(backend, ma, mb, width=width)
    q = cond_negate_limbs_v1(backend, bool_xor_v1(backend, sa, sb), q, bits=bits)
    r = cond_negate_limbs_v1(backend, sa, r, bits=bits)
    return q, r


# ---- public operations ---------------------------------------------------------------------------


def op_add_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> WideValue:
    ops = resolve_operands_v1(a, b, mode=mode)
    out, _ = add_limbs_v1(backend, ops.lhs, ops.rhs, bits=ops.bits)
    return make_wide_v1(backend, out, width=ops.type.width, signed=ops.type.signed)


def op_sub_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> WideValue:
    """Unsigned: borrow chain. Signed: a + (-b)."""
    ops = resolve_operands_v1(a, b, mode=mode)
    if ops.type.signed:
        neg_b = negate_limbs_v1(backend, ops.rhs, bits=ops.bits)
        out, _ = add_limbs_v1(backend, ops.lhs, neg_b, bits=ops.bits)
    else:
        out, _ = sub_limbs_v1(backend, ops.lhs, ops.rhs, bits=ops.bits)
    return make_wide_v1(backend, out, width=ops.type.width, signed=ops.type.signed)


def op_neg_v1(backend: WordBackend, x: WideValue) -> WideValue:
    out = negate_limbs_v1(backend, x.limbs, bits=x.limb_bits)
    return make_wide_v1(backend, out, width=x.width, signed=x.signed)


def op_mul_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> WideValue:
    """Product modulo 2^width. `mode` picks which side is public; the result never depends on it."""
    ops = resolve_operands_v1(a, b, mode=mode)
    out = mul_limbs_v1(backend, ops.lhs, ops.rhs, bits=ops.bits, n_out=limb_count(ops.type.width))
    return make_wide_v1(backend, out, width=ops.type.width, signed=ops.type.signed)


def op_div_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> WideValue:
    ops = resolve_operands_v1(a, b, mode=mode)
    q, _ = divmod_limbs_v1(backend, ops.lhs, ops.rhs, width=ops.type.width, signed=ops.type.signed)
    return make_wide_v1(backend, q, width=ops.type.width, signed=ops.type.signed)


def op_rem_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> WideValue:
    ops = resolve_operands_v1(a, b, mode=mode)
    _, r = divmod_limbs_v1(backend, ops.lhs, ops.rhs, width=ops.type.width, signed=ops.type.signed)
    return make_wide_v1(backend, r, width=ops.type.width, signed=ops.type.signed)


def _divmod_reveal(backend: WordBackend, a: object, b: object, mode: int) -> Tuple[WideValue, WideValue]:
    ops = resolve_operands_v1(a, b, mode=mode)
    t = ops.type
    bits = ops.bits
    x = join_limbs_v1(_open_limbs(backend, ops.lhs, bits=bits), width=t.width, signed=t.signed)
    y = join_limbs_v1(_open_limbs(backend, ops.rhs, bits=bits), width=t.width, signed=t.signed)
    log(INFO, "reduced-privacy division: %s operands revealed", t.name)
    if y == 0:
        q, r = 0, 0
    else:
        q = abs(x) // abs(y)
        if (x < 0) != (y < 0):
            q = -q
        r = x - q * y
    qs = [backend.set_public(v, bits=bits) for v in public_limbs_v1(t.wrap(q), width=t.width)]
    rs = [backend.set_public(v, bits=bits) for v in public_limbs_v1(t.wrap(r), width=t.width)]
    return (
        WideValue(width=t.width, signed=t.signed, limbs=tuple(qs)),
        WideValue(width=t.width, signed=t.signed, limbs=tuple(rs)),
    )


def op_div_reveal_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> WideValue:
    """REDUCED PRIVACY division at any width: both operands are decrypted, the quotient is
    computed in the clear (truncated toward zero, zero for a zero divisor) and re-injected.
    """
    q, _ = _divmod_reveal(backend, a, b, mode)
    return q


def op_rem_reveal_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> WideValue:
    """REDUCED PRIVACY remainder, companion of `op_div_reveal_v1`."""
    _, r = _divmod_reveal(backend, a, b, mode)
    return r
