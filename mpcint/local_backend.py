from __future__ import annotations

# pyright: reportMissingImports=false

import hashlib
import os
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

import torch

from .errors import BackendError, DivisionByZero, InvalidProof
from .logger import DEBUG, WARNING, log
from .rss import (
    RSSWordTriple,
    add_triples_v1,
    mul_public_triple_v1,
    open_word_v1,
    share_public_word_v1,
    share_word_v1,
    sub_triples_v1,
)
from .sealing import seal_user_word_v1, seal_word_v1, unseal_word_v1, verify_input_v1
from .words import (
    WORD_BITS,
    WORD_MASK,
    Ciphertext,
    InputProof,
    SecretWord,
    UserCiphertext,
    Word,
    WordBackend,
    check_word_bits,
    mask_bits,
)


# Reference-backend defaults. A fixed seed makes share randomness and ciphertext nonces reproducible.
_SEED_ENV = os.environ.get("MPCINT_BACKEND_SEED")
DEFAULT_BACKEND_SEED: Optional[int] = int(_SEED_ENV) if _SEED_ENV else None
TRACE_CALLS = os.environ.get("MPCINT_TRACE_CALLS", "0") == "1"


@dataclass
class LocalRSSBackend(WordBackend):
    """In-process reference WordBackend.

    Each SecretWord carries a 3-party replicated sharing of its value over Z/2^64. Additions,
    subtractions and products with a public scalar are computed share-locally; every other
    primitive opens its inputs, computes on the plaintext and re-shares the result with fresh
    randomness, standing in for the interactive protocol a real deployment runs.
    """

    network_key16: bytes = field(default_factory=lambda: os.urandom(16))
    seed: Optional[int] = DEFAULT_BACKEND_SEED
    contract20: Optional[bytes] = None
    trace: bool = TRACE_CALLS

    def __post_init__(self) -> None:
        if not isinstance(self.network_key16, (bytes, bytearray)) or len(self.network_key16) != 16:
            raise ValueError("network_key16 must be 16 bytes")
        if self.contract20 is not None and len(self.contract20) != 20:
            raise ValueError("contract20 must be 20 bytes")
        self.network_key16 = bytes(self.network_key16)
        self.backend_id = hashlib.sha256(b"mpcint.local_rss.v1" + self.network_key16).digest()[:16]
        self._gen = torch.Generator(device="cpu")
        if self.seed is None:
            self._gen.seed()
        else:
            self._gen.manual_seed(int(self.seed))
        self.calls: Counter = Counter()

    # ---- bookkeeping -------------------------------------------------------------------------

    def total_calls(self) -> int:
        return int(sum(self.calls.values()))

    def reset_calls(self) -> None:
        self.calls.clear()

    def _record(self, op: str, bits: int) -> int:
        b = check_word_bits(bits)
        self.calls[op] += 1
        if self.trace:
            log(DEBUG, "backend call %s bits=%d", op, b)
        return b

    # ---- share plumbing ----------------------------------------------------------------------

    def _shares(self, x: Word) -> RSSWordTriple:
        if isinstance(x, SecretWord):
            if x.backend_id != self.backend_id:
                raise BackendError("secret word belongs to a different backend")
            return x.payload
        if not isinstance(x, int):
            raise TypeError(f"word operand must be SecretWord or int, got {type(x).__name__}")
        return share_public_word_v1(int(x) & WORD_MASK)

    def _wrap(self, shares: RSSWordTriple) -> SecretWord:
        return SecretWord(backend_id=self.backend_id, payload=shares)

    def _open(self, x: Word, bits: int) -> int:
        try:
            v = open_word_v1(self._shares(x))
        except ValueError as e:
            raise BackendError(f"corrupt shares: {e}") from e
        return v & mask_bits(bits)

    def _fresh(self, value: int) -> SecretWord:
        return self._wrap(share_word_v1(int(value) & WORD_MASK, generator=self._gen))

    def _rand_u64(self) -> int:
        lo = int(torch.randint(0, 2**32, (1,), dtype=torch.int64, generator=self._gen).item())
        hi = int(torch.randint(0, 2**32, (1,), dtype=torch.int64, generator=self._gen).item())
        return (hi << 32) | lo

    def _nonce8(self) -> bytes:
        return self._rand_u64().to_bytes(8, "little", signed=False)

    # ---- arithmetic --------------------------------------------------------------------------

    def add(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord:
        self._record("add", bits)
        return self._wrap(add_triples_v1(self._shares(a), self._shares(b)))

    def sub(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord:
        self._record("sub", bits)
        return self._wrap(sub_triples_v1(self._shares(a), self._shares(b)))

    def mul(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("mul", bits)
        if isinstance(b, int) and not isinstance(a, int):
            return self._wrap(mul_public_triple_v1(self._shares(a), int(b) & mask_bits(bits)))
        if isinstance(a, int) and not isinstance(b, int):
            return self._wrap(mul_public_triple_v1(self._shares(b), int(a) & mask_bits(bits)))
        return self._fresh((self._open(a, bits) * self._open(b, bits)) & mask_bits(bits))

    def div(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("div", bits)
        x, y = self._open(a, bits), self._open(b, bits)
        if y == 0:
            raise DivisionByZero("division by zero")
        return self._fresh(x // y)

    def rem(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("rem", bits)
        x, y = self._open(a, bits), self._open(b, bits)
        if y == 0:
            raise DivisionByZero("remainder by zero")
        return self._fresh(x % y)

    # ---- bitwise -----------------------------------------------------------------------------

    def and_(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("and", bits)
        return self._fresh(self._open(a, bits) & self._open(b, bits))

    def or_(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("or", bits)
        return self._fresh(self._open(a, bits) | self._open(b, bits))

    def xor(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("xor", bits)
        return self._fresh(self._open(a, bits) ^ self._open(b, bits))

    def shl(self, a: Word, n: int, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("shl", bits)
        if not 0 <= int(n) < bits:
            raise ValueError(f"shift amount must be in [0, {bits})")
        return self._fresh((self._open(a, bits) << int(n)) & mask_bits(bits))

    def shr(self, a: Word, n: int, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("shr", bits)
        if not 0 <= int(n) < bits:
            raise ValueError(f"shift amount must be in [0, {bits})")
        return self._fresh(self._open(a, bits) >> int(n))

    # ---- comparison and selection ------------------------------------------------------------

    def eq(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("eq", bits)
        return self._fresh(int(self._open(a, bits) == self._open(b, bits)))

    def ne(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("ne", bits)
        return self._fresh(int(self._open(a, bits) != self._open(b, bits)))

    def lt(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("lt", bits)
        return self._fresh(int(self._open(a, bits) < self._open(b, bits)))

    def le(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("le", bits)
        return self._fresh(int(self._open(a, bits) <= self._open(b, bits)))

    def gt(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("gt", bits)
        return self._fresh(int(self._open(a, bits) > self._open(b, bits)))

    def ge(self, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("ge", bits)
        return self._fresh(int(self._open(a, bits) >= self._open(b, bits)))

    def mux(self, cond: Word, a: Word, b: Word, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("mux", bits)
        c = self._open(cond, 1)
        x, y = self._open(a, bits), self._open(b, bits)
        return self._fresh(x if c else y)

    # ---- boundary ----------------------------------------------------------------------------

    def decrypt(self, a: SecretWord, *, bits: int = WORD_BITS) -> int:
        bits = self._record("decrypt", bits)
        return self._open(a, bits)

    def set_public(self, value: int, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("set_public", bits)
        if not 0 <= int(value) <= mask_bits(bits):
            raise ValueError(f"public word out of range for {bits} bits")
        return self._fresh(int(value))

    def random(self, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("random", bits)
        return self._fresh(self._rand_u64() & mask_bits(bits))

    def validate_ciphertext(self, proof: InputProof, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("validate_ciphertext", bits)
        if not isinstance(proof, InputProof):
            raise InvalidProof("not an input proof")
        if int(proof.bits) != bits:
            log(WARNING, "rejected input proof: bits=%d expected=%d", int(proof.bits), bits)
            raise InvalidProof("proof word width mismatch")
        if self.contract20 is not None and bytes(proof.contract20) != self.contract20:
            log(WARNING, "rejected input proof: bound to another contract")
            raise InvalidProof("proof bound to another contract")
        if not verify_input_v1(proof):
            log(WARNING, "rejected input proof: signature does not match sender %s", proof.sender20.hex())
            raise InvalidProof("bad input signature")
        v = unseal_word_v1(key16=self.network_key16, ct=proof.ciphertext)
        if v > mask_bits(bits):
            raise InvalidProof("ciphertext value exceeds word width")
        return self._fresh(v)

    def offboard(self, a: SecretWord, *, bits: int = WORD_BITS) -> Ciphertext:
        bits = self._record("offboard", bits)
        return seal_word_v1(key16=self.network_key16, value=self._open(a, bits), nonce8=self._nonce8())

    def onboard(self, ct: Ciphertext, *, bits: int = WORD_BITS) -> SecretWord:
        bits = self._record("onboard", bits)
        return self._fresh(unseal_word_v1(key16=self.network_key16, ct=ct) & mask_bits(bits))

    def offboard_to_user(self, a: SecretWord, user_key16: bytes, *, bits: int = WORD_BITS) -> UserCiphertext:
        bits = self._record("offboard_to_user", bits)
        return seal_user_word_v1(user_key16=user_key16, value=self._open(a, bits), nonce8=self._nonce8())
