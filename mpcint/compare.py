from __future__ import annotations

from typing import Sequence

from .limbs import (
    MODE_SECRET,
    WideValue,
    as_secret_bool_v1,
    bool_and_v1,
    bool_mux_v1,
    bool_not_v1,
    bool_or_v1,
    bool_xor_v1,
    make_wide_v1,
    resolve_operands_v1,
    sign_bit_v1,
)
from .mux import op_select_v1
from .words import SecretWord, Word, WordBackend

# Comparison predicates accepted by `op_cmp_v1`.
PRED_LT = 0
PRED_LE = 1
PRED_GT = 2
PRED_GE = 3
PRED_EQ = 4
PRED_NE = 5

_PRED_NAMES = {PRED_LT: "lt", PRED_LE: "le", PRED_GT: "gt", PRED_GE: "ge", PRED_EQ: "eq", PRED_NE: "ne"}


def _word_eq(backend: WordBackend, x: Word, y: Word, bits: int) -> Word:
    if isinstance(x, int) and isinstance(y, int):
        return int(int(x) == int(y))
    return backend.eq(x, y, bits=bits)


def _word_ne(backend: WordBackend, x: Word, y: Word, bits: int) -> Word:
    if isinstance(x, int) and isinstance(y, int):
        return int(int(x) != int(y))
    return backend.ne(x, y, bits=bits)


def _word_lt(backend: WordBackend, x: Word, y: Word, bits: int) -> Word:
    if isinstance(x, int) and isinstance(y, int):
        return int(int(x) < int(y))
    return backend.lt(x, y, bits=bits)


def eq_limbs_v1(backend: WordBackend, xs: Sequence[Word], ys: Sequence[Word], *, bits: int) -> Word:
    acc: Word = 1
    for x, y in zip(xs, ys):
        acc = bool_and_v1(backend, acc, _word_eq(backend, x, y, bits))
    return acc


def ne_limbs_v1(backend: WordBackend, xs: Sequence[Word], ys: Sequence[Word], *, bits: int) -> Word:
    acc: Word = 0
    for x, y in zip(xs, ys):
        acc = bool_or_v1(backend, acc, _word_ne(backend, x, y, bits))
    return acc


def ult_limbs_v1(backend: WordBackend, xs: Sequence[Word], ys: Sequence[Word], *, bits: int) -> Word:
    """Unsigned x < y. Walks upward so that each more significant limb overrides on inequality."""
    if len(xs) != len(ys) or not xs:
        raise ValueError("limb count mismatch")
    acc = _word_lt(backend, xs[0], ys[0], bits)
    for x, y in zip(xs[1:], ys[1:]):
        tie = bool_and_v1(backend, _word_eq(backend, x, y, bits), acc)
        acc = bool_or_v1(backend, _word_lt(backend, x, y, bits), tie)
    return acc


def lt_limbs_v1(backend: WordBackend, xs: Sequence[Word], ys: Sequence[Word], *, bits: int, signed: bool) -> Word:
    ult = ult_limbs_v1(backend, xs, ys, bits=bits)
    if not signed:
        return ult
    sa = sign_bit_v1(backend, xs[-1], bits=bits)
    sb = sign_bit_v1(backend, ys[-1], bits=bits)
    # Different signs: the negative operand is the smaller one.
    return bool_mux_v1(backend, bool_xor_v1(backend, sa, sb), sa, ult)


def compare_limbs_v1(
    backend: WordBackend, xs: Sequence[Word], ys: Sequence[Word], *, pred: int, bits: int, signed: bool
) -> Word:
    p = int(pred)
    if p == PRED_EQ:
        return eq_limbs_v1(backend, xs, ys, bits=bits)
    if p == PRED_NE:
        return ne_limbs_v1(backend, xs, ys, bits=bits)
    if p == PRED_LT:
        return lt_limbs_v1(backend, xs, ys, bits=bits, signed=signed)
    if p == PRED_GT:
        return lt_limbs_v1(backend, ys, xs, bits=bits, signed=signed)
    if p == PRED_LE:
        return bool_not_v1(backend, lt_limbs_v1(backend, ys, xs, bits=bits, signed=signed))
    if p == PRED_GE:
        return bool_not_v1(backend, lt_limbs_v1(backend, xs, ys, bits=bits, signed=signed))
    raise ValueError(f"unknown comparison predicate {pred}")


def op_cmp_v1(backend: WordBackend, a: object, b: object, *, pred: int, mode: int = MODE_SECRET) -> SecretWord:
    """Secret boolean `a <pred> b` under the operands' common type.

    Signed types compare sign bits first; equal signs fall through to the unsigned limb
    comparison, which is the same on two's-complement patterns.
    """
    if int(pred) not in _PRED_NAMES:
        raise ValueError(f"unknown comparison predicate {pred}")
    ops = resolve_operands_v1(a, b, mode=mode)
    r = compare_limbs_v1(backend, ops.lhs, ops.rhs, pred=pred, bits=ops.bits, signed=ops.type.signed)
    return as_secret_bool_v1(backend, r)


def op_eq_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> SecretWord:
    return op_cmp_v1(backend, a, b, pred=PRED_EQ, mode=mode)


def op_ne_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> SecretWord:
    return op_cmp_v1(backend, a, b, pred=PRED_NE, mode=mode)


def op_lt_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> SecretWord:
    return op_cmp_v1(backend, a, b, pred=PRED_LT, mode=mode)


def op_le_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> SecretWord:
    return op_cmp_v1(backend, a, b, pred=PRED_LE, mode=mode)


def op_gt_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> SecretWord:
    return op_cmp_v1(backend, a, b, pred=PRED_GT, mode=mode)


def op_ge_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> SecretWord:
    return op_cmp_v1(backend, a, b, pred=PRED_GE, mode=mode)


def _pick(backend: WordBackend, a: object, b: object, pred: int, mode: int) -> WideValue:
    ops = resolve_operands_v1(a, b, mode=mode)
    t = ops.type
    cond = as_secret_bool_v1(
        backend, compare_limbs_v1(backend, ops.lhs, ops.rhs, pred=pred, bits=ops.bits, signed=t.signed)
    )
    x = make_wide_v1(backend, ops.lhs, width=t.width, signed=t.signed)
    y = make_wide_v1(backend, ops.rhs, width=t.width, signed=t.signed)
    return op_select_v1(backend, cond, x, y)


def op_min_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> WideValue:
    return _pick(backend, a, b, PRED_LE, mode)


def op_max_v1(backend: WordBackend, a: object, b: object, *, mode: int = MODE_SECRET) -> WideValue:
    return _pick(backend, a, b, PRED_GE, mode)
