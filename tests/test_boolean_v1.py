from __future__ import annotations

import itertools

import pytest

from mpcint.boolean import (
    op_bool_and_v1,
    op_bool_decrypt_v1,
    op_bool_eq_v1,
    op_bool_mux_v1,
    op_bool_ne_v1,
    op_bool_not_v1,
    op_bool_or_v1,
    op_bool_set_public_v1,
    op_bool_validate_v1,
    op_bool_xor_v1,
)
from mpcint.client import UserAccount
from mpcint.errors import InvalidProof
from mpcint.local_backend import LocalRSSBackend

NET_KEY = b"\x5C" * 16


def _backend() -> LocalRSSBackend:
    return LocalRSSBackend(network_key16=NET_KEY, seed=4)


def test_bool_truth_tables() -> None:
    be = _backend()
    for a, b in itertools.product((False, True), repeat=2):
        x, y = op_bool_set_public_v1(be, a), op_bool_set_public_v1(be, b)
        assert op_bool_decrypt_v1(be, op_bool_and_v1(be, x, y)) == (a and b)
        assert op_bool_decrypt_v1(be, op_bool_or_v1(be, x, y)) == (a or b)
        assert op_bool_decrypt_v1(be, op_bool_xor_v1(be, x, y)) == (a != b)
        assert op_bool_decrypt_v1(be, op_bool_eq_v1(be, x, y)) == (a == b)
        assert op_bool_decrypt_v1(be, op_bool_ne_v1(be, x, y)) == (a != b)
        assert op_bool_decrypt_v1(be, op_bool_not_v1(be, x)) == (not a)
        for c in (False, True):
            cond = op_bool_set_public_v1(be, c)
            assert op_bool_decrypt_v1(be, op_bool_mux_v1(be, cond, x, y)) == (a if c else b)


def test_bool_input_roundtrip() -> None:
    be = _backend()
    user = UserAccount(privkey32=b"\x02" * 32, aes_key16=b"\x03" * 16)
    for v in (False, True):
        proof = user.encrypt_bool_input_v1(network_key16=NET_KEY, value=v, contract20=b"\x01" * 20, selector4=b"\x00" * 4)
        assert op_bool_decrypt_v1(be, op_bool_validate_v1(be, proof)) is v


def test_bool_rejects_wider_proof_and_bad_args() -> None:
    be = _backend()
    user = UserAccount(privkey32=b"\x02" * 32, aes_key16=b"\x03" * 16)
    (proof,) = user.encrypt_input_v1(
        network_key16=NET_KEY, value=1, width=8, signed=False, contract20=b"\x01" * 20, selector4=b"\x00" * 4
    )
    with pytest.raises(InvalidProof):
        op_bool_validate_v1(be, proof)
    with pytest.raises(TypeError):
        op_bool_set_public_v1(be, 1)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        op_bool_and_v1(be, op_bool_set_public_v1(be, True), 1)  # type: ignore[arg-type]
