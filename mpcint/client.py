from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Tuple

from .boundary import WideUserCiphertext
from .limbs import IntType, join_limbs_v1, limb_bits, public_limbs_v1
from .sealing import address20_from_privkey, seal_word_v1, sign_input_v1, unseal_user_word_v1
from .words import InputProof, UserCiphertext, _require_len


@dataclass(frozen=True)
class UserAccount:
    """User-side key material: a secp256k1 signing key and the AES key values are re-encrypted to.

    Builds signed input proofs for the backend and opens ciphertexts the backend re-encrypted
    to this user.
    """

    privkey32: bytes
    aes_key16: bytes

    def __post_init__(self) -> None:
        _require_len(self.privkey32, 32, "privkey32")
        _require_len(self.aes_key16, 16, "aes_key16")

    @property
    def address20(self) -> bytes:
        return address20_from_privkey(self.privkey32)

    def _proof(
        self, *, network_key16: bytes, word: int, bits: int, contract20: bytes, selector4: bytes
    ) -> InputProof:
        ct = seal_word_v1(key16=network_key16, value=word, nonce8=os.urandom(8))
        return sign_input_v1(ct=ct, bits=bits, privkey32=self.privkey32, contract20=contract20, selector4=selector4)

    def encrypt_input_v1(
        self,
        *,
        network_key16: bytes,
        value: int,
        width: int,
        signed: bool,
        contract20: bytes,
        selector4: bytes,
    ) -> Tuple[InputProof, ...]:
        """One signed proof per limb, least significant first."""
        t = IntType(int(width), bool(signed))
        if not t.contains(value):
            raise ValueError(f"{value} out of range for {t.name}")
        lb = limb_bits(t.width)
        return tuple(
            self._proof(
                network_key16=network_key16, word=w, bits=lb, contract20=contract20, selector4=selector4
            )
            for w in public_limbs_v1(value, width=t.width)
        )

    def encrypt_bool_input_v1(
        self, *, network_key16: bytes, value: bool, contract20: bytes, selector4: bytes
    ) -> InputProof:
        return self._proof(
            network_key16=network_key16, word=int(bool(value)), bits=1, contract20=contract20, selector4=selector4
        )

    def decrypt_word_v1(self, uct: UserCiphertext) -> int:
        return unseal_user_word_v1(user_key16=self.aes_key16, uct=uct)

    def decrypt_user_v1(self, uct: WideUserCiphertext) -> int:
        lb = limb_bits(uct.width)
        words = [self.decrypt_word_v1(c) & ((1 << lb) - 1) for c in uct.limbs]
        return join_limbs_v1(words, width=uct.width, signed=uct.signed)
