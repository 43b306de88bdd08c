from __future__ import annotations

# Overflow-checked arithmetic.
#
# Every checked op computes the same wrapped result as its unchecked counterpart plus a
# secret overflow flag. The `_with_overflow_bit` variants hand both back; the plain
# variants open the flag and raise ArithmeticOverflow when it is set.

from typing import List, Tuple

from .arith import abs_limbs_v1, add_limbs_v1, cond_negate_limbs_v1, mul_limbs_v1, negate_limbs_v1, sub_limbs_v1
from .compare import ne_limbs_v1, ult_limbs_v1
from .errors import ArithmeticOverflow
from .limbs import (
    MODE_SECRET,
    Operands,
    WideValue,
    as_secret_bool_v1,
    bool_and_v1,
    bool_mux_v1,
    bool_not_v1,
    bool_or_v1,
    bool_xor_v1,
    make_wide_v1,
    public_limbs_v1,
    resolve_operands_v1,
    reveal_bool_v1,
    sign_bit_v1,
)
from .words import SecretWord, Word, WordBackend


def _sign_overflow(backend: WordBackend, sa: Word, sb: Word, out: List[Word], bits: int, *, same_sign: bool) -> Word:
    sr = sign_bit_v1(backend, out[-1], bits=bits)
    signs_differ = bool_xor_v1(backend, sa, sb)
    pre = bool_not_v1(backend, signs_differ) if same_sign else signs_differ
    return bool_and_v1(backend, pre, bool_xor_v1(backend, sr, sa))


def _add(backend: WordBackend, ops: Operands) -> Tuple[List[Word], Word]:
    bits = ops.bits
    out, carry = add_limbs_v1(backend, ops.lhs, ops.rhs, bits=bits)
    if not ops.type.signed:
        return out, carry
    sa = sign_bit_v1(backend, ops.lhs[-1], bits=bits)
    sb = sign_bit_v1(backend, ops.rhs[-1], bits=bits)
    return out, _sign_overflow(backend, sa, sb, out, bits, same_sign=True)


def _sub(backend: WordBackend, ops: Operands) -> Tuple[List[Word], Word]:
    bits = ops.bits
    if not ops.type.signed:
        return sub_limbs_v1(backend, ops.lhs, ops.rhs, bits=bits)
    out, _ = add_limbs_v1(backend, ops.lhs, negate_limbs_v1(backend, ops.rhs, bits=bits), bits=bits)
    sa = sign_bit_v1(backend, ops.lhs[-1], bits=bits)
    sb = sign_bit_v1(backend, ops.rhs[-1], bits=bits)
    return out, _sign_overflow(backend, sa, sb, out, bits, same_sign=False)


def _mul(backend: WordBackend, ops: Operands) -> Tuple[List[Word], Word]:
    t = ops.type
    bits = ops.bits
    n = len(ops.lhs)
    zeros = [0] * n
    if not t.signed:
        prod = mul_limbs_v1(backend, ops.lhs, ops.rhs, bits=bits, n_out=2 * n)
        return prod[:n], ne_limbs_v1(backend, prod[n:], zeros, bits=bits)

    ma, sa = abs_limbs_v1(backend, ops.lhs, bits=bits)
    mb, sb = abs_limbs_v1(backend, ops.rhs, bits=bits)
    prod = mul_limbs_v1(backend, ma, mb, bits=bits, n_out=2 * n)
    lo = prod[:n]
    neg = bool_xor_v1(backend, sa, sb)
    # A negative result may reach magnitude 2^(w-1), a positive one only 2^(w-1) - 1.
    half = 1 << (int(t.width) - 1)
    over_pos = ult_limbs_v1(backend, list(public_limbs_v1(half - 1, width=t.width)), lo, bits=bits)
    over_neg = ult_limbs_v1(backend, list(public_limbs_v1(half, width=t.width)), lo, bits=bits)
    flag = bool_or_v1(
        backend,
        ne_limbs_v1(backend, prod[n:], zeros, bits=bits),
        bool_mux_v1(backend, neg, over_neg, over_pos),
    )
    return cond_negate_limbs_v1(backend, neg, lo, bits=bits), flag


def _with_flag(backend: WordBackend, ops: Operands, out: List[Word], flag: Word) -> Tuple[WideValue, SecretWord]:
    t = ops.type
    return make_wide_v1(backend, out, width=t.width, signed=t.signed), as_secret_bool_v1(backend, flag)


def _hard_fail(backend: WordBackend, ops: Operands, out: List[Word], flag: Word, op: str) -> WideValue:
    if reveal_bool_v1(backend, flag):
        raise ArithmeticOverflow(f"{ops.type.name} {op} overflow")
    return make_wide_v1(backend, out, width=ops.type.width, signed=ops.type.signed)


def op_checked_add_with_overflow_bit_v1(
    backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET
) -> Tuple[WideValue, SecretWord]:
    ops = resolve_operands_v1(a, b, mode=mode)
    out, flag = _add(backend, ops)
    return _with_flag(backend, ops, out, flag)


def op_checked_sub_with_overflow_bit_v1(
    backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET
) -> Tuple[WideValue, SecretWord]:
    ops = resolve_operands_v1(a, b, mode=mode)
    out, flag = _sub(backend, ops)
    return _with_flag(backend, ops, out, flag)


def op_checked_mul_with_overflow_bit_v1(
    backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET
) -> Tuple[WideValue, SecretWord]:
    ops = resolve_operands_v1(a, b, mode=mode)
    out, flag = _mul(backend, ops)
    return _with_flag(backend, ops, out, flag)


def op_checked_add_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> WideValue:
    """Addition that opens its overflow flag and raises ArithmeticOverflow if set."""
    ops = resolve_operands_v1(a, b, mode=mode)
    out, flag = _add(backend, ops)
    return _hard_fail(backend, ops, out, flag, "add")


def op_checked_sub_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> WideValue:
    ops = resolve_operands_v1(a, b, mode=mode)
    out, flag = _sub(backend, ops)
    return _hard_fail(backend, ops, out, flag, "sub")


def op_checked_mul_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> WideValue:
    ops = resolve_operands_v1(a, b, mode=mode)
    out, flag = _mul(backend, ops)
    return _hard_fail(backend, ops, out, flag, "mul")
