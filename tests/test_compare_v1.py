from __future__ import annotations

import operator

import pytest

from mpcint.boundary import op_decrypt_v1, op_set_public_v1
from mpcint.compare import (
    PRED_EQ,
    PRED_GE,
    PRED_GT,
    PRED_LE,
    PRED_LT,
    PRED_NE,
    op_cmp_v1,
    op_eq_v1,
    op_gt_v1,
    op_lt_v1,
    op_max_v1,
    op_min_v1,
    op_ne_v1,
)
from mpcint.limbs import MODE_PUBLIC_LHS, MODE_PUBLIC_RHS, IntType, WideValue
from mpcint.local_backend import LocalRSSBackend

PREDS = [
    (PRED_LT, operator.lt),
    (PRED_LE, operator.le),
    (PRED_GT, operator.gt),
    (PRED_GE, operator.ge),
    (PRED_EQ, operator.eq),
    (PRED_NE, operator.ne),
]


def _backend() -> LocalRSSBackend:
    return LocalRSSBackend(network_key16=b"\x55" * 16, seed=31)


def _enc(be: LocalRSSBackend, value: int, t: IntType) -> WideValue:
    return op_set_public_v1(be, value, width=t.width, signed=t.signed)


def _open(be: LocalRSSBackend, b) -> bool:
    return bool(be.decrypt(b, bits=1))


def _quadrant_values(t: IntType) -> list:
    half = 1 << (t.width - 1)
    small = [0, 1, 5, half - 1]
    if t.width > 64:
        # Magnitudes beyond one limb exercise the upper-limb comparison.
        small += [2**64 + 3, 2**64 - 1]
    if not t.signed:
        return small + [half, t.max_value]
    return small + [-1, -5, -(2**64) - 3 if t.width > 64 else -2, t.min_value, t.min_value + 1]


@pytest.mark.parametrize(
    "t", [IntType(8, True), IntType(8, False), IntType(64, True), IntType(128, True), IntType(256, True), IntType(256, False)], ids=lambda t: t.name
)
def test_comparisons_match_exact(t: IntType) -> None:
    be = _backend()
    vals = [v for v in _quadrant_values(t) if t.contains(v)]
    enc = {v: _enc(be, v, t) for v in vals}
    for a in vals:
        for b in vals:
            for pred, fn in PREDS:
                assert _open(be, op_cmp_v1(be, enc[a], enc[b], pred=pred)) == fn(a, b), (a, b, pred)


def test_large_256_gt_small() -> None:
    be = _backend()
    k = 123_456_789
    for signed in (False, True):
        t = IntType(256, signed)
        assert _open(be, op_gt_v1(be, _enc(be, 2**200 + k, t), _enc(be, k, t)))
        assert not _open(be, op_lt_v1(be, _enc(be, 2**200 + k, t), _enc(be, k, t)))


def test_eq_reflexive_symmetric_and_trichotomy() -> None:
    be = _backend()
    t = IntType(128, True)
    vals = [t.min_value, -(2**64), -1, 0, 2**64, t.max_value]
    for a in vals:
        x = _enc(be, a, t)
        assert _open(be, op_eq_v1(be, x, x))
        for b in vals:
            y = _enc(be, b, t)
            assert _open(be, op_eq_v1(be, x, y)) == _open(be, op_eq_v1(be, y, x))
            assert _open(be, op_ne_v1(be, x, y)) != _open(be, op_eq_v1(be, x, y))
            outcomes = [_open(be, op_lt_v1(be, x, y)), _open(be, op_eq_v1(be, x, y)), _open(be, op_gt_v1(be, x, y))]
            assert outcomes.count(True) == 1


def test_compare_with_public_operand() -> None:
    be = _backend()
    t = IntType(256, True)
    x = _enc(be, -(2**130), t)
    assert _open(be, op_lt_v1(be, x, 0, mode=MODE_PUBLIC_RHS))
    assert _open(be, op_gt_v1(be, 0, x, mode=MODE_PUBLIC_LHS))
    assert _open(be, op_cmp_v1(be, x, -(2**130), pred=PRED_EQ, mode=MODE_PUBLIC_RHS))


def test_unknown_predicate() -> None:
    be = _backend()
    t = IntType(8, False)
    with pytest.raises(ValueError):
        op_cmp_v1(be, _enc(be, 1, t), _enc(be, 2, t), pred=42)


def test_min_max() -> None:
    be = _backend()
    for t in (IntType(8, True), IntType(128, True), IntType(256, False)):
        pairs = [(t.min_value, t.max_value), (t.max_value, t.min_value), (0, 0), (1, t.max_value - 1)]
        for a, b in pairs:
            x, y = _enc(be, a, t), _enc(be, b, t)
            assert op_decrypt_v1(be, op_min_v1(be, x, y)) == min(a, b)
            assert op_decrypt_v1(be, op_max_v1(be, x, y)) == max(a, b)
        assert op_decrypt_v1(be, op_max_v1(be, _enc(be, t.min_value, t), 0, mode=MODE_PUBLIC_RHS)) == 0
