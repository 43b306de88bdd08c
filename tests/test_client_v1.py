from __future__ import annotations

import pytest

from mpcint.client import UserAccount
from mpcint.sealing import address20_from_privkey, unseal_word_v1, verify_input_v1


def test_account_address_and_key_checks() -> None:
    acct = UserAccount(privkey32=b"\x01" * 32, aes_key16=b"\x02" * 16)
    assert acct.address20 == address20_from_privkey(b"\x01" * 32)
    with pytest.raises(ValueError):
        UserAccount(privkey32=b"\x01" * 31, aes_key16=b"\x02" * 16)
    with pytest.raises(ValueError):
        UserAccount(privkey32=b"\x01" * 32, aes_key16=b"\x02" * 8)


def test_encrypt_input_limbs() -> None:
    acct = UserAccount(privkey32=b"\x01" * 32, aes_key16=b"\x02" * 16)
    key = b"\x0F" * 16
    proofs = acct.encrypt_input_v1(
        network_key16=key, value=-2, width=128, signed=True, contract20=b"\x0C" * 20, selector4=b"\x0D" * 4
    )
    assert [p.bits for p in proofs] == [64, 64]
    assert [unseal_word_v1(key16=key, ct=p.ciphertext) for p in proofs] == [2**64 - 2, 2**64 - 1]
    assert all(verify_input_v1(p) and p.sender20 == acct.address20 for p in proofs)
    assert proofs[0].ciphertext.nonce8 != proofs[1].ciphertext.nonce8


def test_encrypt_input_range() -> None:
    acct = UserAccount(privkey32=b"\x01" * 32, aes_key16=b"\x02" * 16)
    with pytest.raises(ValueError):
        acct.encrypt_input_v1(
            network_key16=b"\x0F" * 16, value=128, width=8, signed=True, contract20=b"\x0C" * 20, selector4=b"\x0D" * 4
        )
