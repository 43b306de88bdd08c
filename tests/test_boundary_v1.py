from __future__ import annotations

import dataclasses

import pytest

from mpcint.boundary import (
    WideCiphertext,
    WideUserCiphertext,
    op_decrypt_v1,
    op_offboard_combined_v1,
    op_offboard_to_user_v1,
    op_offboard_v1,
    op_onboard_v1,
    op_random_bounded_v1,
    op_random_v1,
    op_set_public_v1,
    op_validate_ciphertext_v1,
)
from mpcint.client import UserAccount
from mpcint.errors import InvalidProof
from mpcint.limbs import IntType
from mpcint.local_backend import LocalRSSBackend

NET_KEY = b"\x99" * 16
CONTRACT = b"\xC0" * 20
SELECTOR = b"\x12\x34\x56\x78"
ALL_TYPES = [IntType(w, s) for w in (8, 16, 32, 64, 128, 256) for s in (False, True)]


def _backend(contract20: bytes = CONTRACT) -> LocalRSSBackend:
    return LocalRSSBackend(network_key16=NET_KEY, seed=21, contract20=contract20)


def _alice() -> UserAccount:
    return UserAccount(privkey32=b"\x01" * 32, aes_key16=b"\xAA" * 16)


def _extremes(t: IntType) -> list:
    return [t.min_value, t.max_value, 0, 1, t.max_value - 1] + ([-1, t.min_value + 1] if t.signed else [])


@pytest.mark.parametrize("t", ALL_TYPES, ids=lambda t: t.name)
def test_set_public_decrypt_extremes(t: IntType) -> None:
    be = _backend()
    for v in _extremes(t):
        assert op_decrypt_v1(be, op_set_public_v1(be, v, width=t.width, signed=t.signed)) == v


def test_set_public_out_of_range() -> None:
    be = _backend()
    with pytest.raises(ValueError):
        op_set_public_v1(be, 256, width=8, signed=False)
    with pytest.raises(ValueError):
        op_set_public_v1(be, -1, width=128, signed=False)
    with pytest.raises(ValueError):
        op_set_public_v1(be, 2**255, width=256, signed=True)
    with pytest.raises(TypeError):
        op_set_public_v1(be, True, width=8, signed=False)


@pytest.mark.parametrize("t", [IntType(16, True), IntType(128, True), IntType(256, False)], ids=lambda t: t.name)
def test_offboard_onboard_roundtrip(t: IntType) -> None:
    be = _backend()
    for v in (t.min_value, t.max_value):
        ct = op_offboard_v1(be, op_set_public_v1(be, v, width=t.width, signed=t.signed))
        assert len(ct.limbs) == max(1, t.width // 64)
        restored = WideCiphertext.from_bytes(ct.to_bytes())
        assert restored == ct
        assert op_decrypt_v1(be, op_onboard_v1(be, restored)) == v


def test_wide_ciphertext_bytes_validation() -> None:
    be = _backend()
    ct = op_offboard_v1(be, op_set_public_v1(be, 5, width=128, signed=False))
    buf = ct.to_bytes()
    with pytest.raises(ValueError):
        WideCiphertext.from_bytes(buf[:-1])
    with pytest.raises(ValueError):
        WideCiphertext.from_bytes(b"\x18\x00\x00" + buf[3:])


@pytest.mark.parametrize("t", [IntType(8, True), IntType(64, False), IntType(128, True), IntType(256, True)], ids=lambda t: t.name)
def test_offboard_to_user_recipient_decrypts(t: IntType) -> None:
    be = _backend()
    alice = _alice()
    for v in (t.min_value, t.max_value, -7 if t.signed else 7):
        x = op_set_public_v1(be, v, width=t.width, signed=t.signed)
        uct = op_offboard_to_user_v1(be, x, alice.aes_key16)
        assert alice.decrypt_user_v1(uct) == v
        assert alice.decrypt_user_v1(WideUserCiphertext.from_bytes(uct.to_bytes())) == v
        assert op_decrypt_v1(be, x) == v


def test_offboard_combined() -> None:
    be = _backend()
    alice = _alice()
    x = op_set_public_v1(be, -(2**100), width=256, signed=True)
    ct, uct = op_offboard_combined_v1(be, x, alice.aes_key16)
    assert op_decrypt_v1(be, op_onboard_v1(be, ct)) == -(2**100)
    assert alice.decrypt_user_v1(uct) == -(2**100)


@pytest.mark.parametrize("t", [IntType(8, True), IntType(32, False), IntType(128, False), IntType(256, True)], ids=lambda t: t.name)
def test_validate_user_input(t: IntType) -> None:
    be = _backend()
    alice = _alice()
    for v in (t.min_value, t.max_value):
        proofs = alice.encrypt_input_v1(
            network_key16=NET_KEY, value=v, width=t.width, signed=t.signed, contract20=CONTRACT, selector4=SELECTOR
        )
        assert len(proofs) == max(1, t.width // 64)
        x = op_validate_ciphertext_v1(be, proofs, width=t.width, signed=t.signed)
        assert op_decrypt_v1(be, x) == v


def test_invalid_proof_rejected_without_partial_value() -> None:
    be = _backend()
    alice = _alice()
    proofs = alice.encrypt_input_v1(
        network_key16=NET_KEY, value=2**200, width=256, signed=False, contract20=CONTRACT, selector4=SELECTOR
    )
    forged = list(proofs)
    forged[3] = dataclasses.replace(forged[3], selector4=b"\x00" * 4)
    with pytest.raises(InvalidProof):
        op_validate_ciphertext_v1(be, forged, width=256, signed=False)

    tampered = list(proofs)
    sig = tampered[0].sig65
    tampered[0] = dataclasses.replace(tampered[0], sig65=bytes([sig[0] ^ 0x01]) + sig[1:])
    with pytest.raises(InvalidProof):
        op_validate_ciphertext_v1(be, tampered, width=256, signed=False)

    with pytest.raises(InvalidProof):
        op_validate_ciphertext_v1(_backend(contract20=b"\x01" * 20), proofs, width=256, signed=False)
    with pytest.raises(ValueError):
        op_validate_ciphertext_v1(be, proofs[:2], width=256, signed=False)


def test_proof_for_wider_limb_rejected() -> None:
    be = _backend()
    alice = _alice()
    proofs = alice.encrypt_input_v1(
        network_key16=NET_KEY, value=1000, width=16, signed=False, contract20=CONTRACT, selector4=SELECTOR
    )
    with pytest.raises(InvalidProof):
        op_validate_ciphertext_v1(be, proofs, width=8, signed=False)


def test_random_ranges() -> None:
    be = _backend()
    for t in (IntType(8, False), IntType(8, True), IntType(256, False)):
        for _ in range(3):
            assert t.contains(op_decrypt_v1(be, op_random_v1(be, width=t.width, signed=t.signed)))
    seen = {op_decrypt_v1(be, op_random_v1(be, width=64, signed=False)) for _ in range(4)}
    assert len(seen) > 1


def test_random_bounded_zero_upper_limbs() -> None:
    be = _backend()
    for n_bits in (1, 7, 64, 70, 129):
        for _ in range(3):
            x = op_random_bounded_v1(be, n_bits, width=256, signed=False)
            assert 0 <= op_decrypt_v1(be, x) < 2**n_bits
            covered = (n_bits + 63) // 64
            for limb in x.limbs[covered:]:
                assert be.decrypt(limb) == 0
    assert 0 <= op_decrypt_v1(be, op_random_bounded_v1(be, 3, width=8, signed=True)) < 8
    with pytest.raises(ValueError):
        op_random_bounded_v1(be, 0, width=64, signed=False)
    with pytest.raises(ValueError):
        op_random_bounded_v1(be, 65, width=64, signed=False)
