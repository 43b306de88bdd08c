from __future__ import annotations

import pytest

from mpcint.boundary import op_decrypt_v1, op_set_public_v1
from mpcint.limbs import IntType
from mpcint.local_backend import LocalRSSBackend
from mpcint.mux import op_select_v1


def _backend() -> LocalRSSBackend:
    return LocalRSSBackend(network_key16=b"\x66" * 16, seed=8)


@pytest.mark.parametrize("width", [8, 64, 128, 256])
def test_select_picks_branch(width: int) -> None:
    be = _backend()
    t = IntType(width, True)
    a = op_set_public_v1(be, t.min_value, width=width, signed=True)
    b = op_set_public_v1(be, t.max_value, width=width, signed=True)
    yes = be.set_public(1, bits=1)
    no = be.set_public(0, bits=1)
    assert op_decrypt_v1(be, op_select_v1(be, yes, a, b)) == t.min_value
    assert op_decrypt_v1(be, op_select_v1(be, no, a, b)) == t.max_value


def test_select_cost_is_independent_of_condition() -> None:
    be = _backend()
    a = op_set_public_v1(be, 1, width=256, signed=False)
    b = op_set_public_v1(be, 2, width=256, signed=False)
    counts = []
    for bit in (0, 1):
        c = be.set_public(bit, bits=1)
        be.reset_calls()
        op_select_v1(be, c, a, b)
        counts.append(dict(be.calls))
    assert counts[0] == counts[1] == {"mux": 4}


def test_select_rejects_public_condition_and_mixed_types() -> None:
    be = _backend()
    a = op_set_public_v1(be, 1, width=64, signed=False)
    b = op_set_public_v1(be, 1, width=64, signed=True)
    with pytest.raises(TypeError):
        op_select_v1(be, 1, a, a)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        op_select_v1(be, be.set_public(1, bits=1), a, b)
