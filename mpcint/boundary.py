from __future__ import annotations

# Conversions between wide secret values and the world outside the backend:
# signed input proofs, public plaintexts, randomness, durable ciphertexts, and
# per-recipient re-encryption.

import struct
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

from .limbs import IntType, WideValue, join_limbs_v1, limb_bits, limb_count, public_limbs_v1
from .words import Ciphertext, InputProof, UserCiphertext, WordBackend, mask_bits

# width u16 LE || signed u8 || limb ciphertexts (16 bytes each)
_WIDE_HDR = struct.Struct("<HB")


def _check_type(width: int, signed: bool) -> IntType:
    return IntType(int(width), bool(signed))


def _pack(width: int, signed: bool, limbs: Sequence[Union[Ciphertext, UserCiphertext]]) -> bytes:
    return _WIDE_HDR.pack(int(width), 1 if signed else 0) + b"".join(c.to_bytes() for c in limbs)


def _unpack(buf: bytes, what: str) -> Tuple[int, bool, list]:
    if not isinstance(buf, (bytes, bytearray)) or len(buf) < _WIDE_HDR.size:
        raise ValueError(f"{what}: truncated header")
    width, signed = _WIDE_HDR.unpack_from(bytes(buf), 0)
    if signed not in (0, 1):
        raise ValueError(f"{what}: bad signed flag")
    t = _check_type(width, bool(signed))
    k = limb_count(t.width)
    body = bytes(buf[_WIDE_HDR.size :])
    if len(body) != 16 * k:
        raise ValueError(f"{what}: expected {k} limb ciphertexts")
    return t.width, t.signed, [body[16 * i : 16 * (i + 1)] for i in range(k)]


@dataclass(frozen=True)
class WideCiphertext:
    """Durable, network-key ciphertext of a wide value: one word ciphertext per limb."""

    width: int
    signed: bool
    limbs: Tuple[Ciphertext, ...]

    def __post_init__(self) -> None:
        _check_type(self.width, self.signed)
        if len(self.limbs) != limb_count(self.width):
            raise ValueError("limb ciphertext count mismatch")
        for c in self.limbs:
            if not isinstance(c, Ciphertext):
                raise TypeError("limbs must be Ciphertext")

    def to_bytes(self) -> bytes:
        return _pack(self.width, self.signed, self.limbs)

    @classmethod
    def from_bytes(cls, buf: bytes) -> "WideCiphertext":
        width, signed, parts = _unpack(buf, "wide ciphertext")
        return cls(width=width, signed=signed, limbs=tuple(Ciphertext.from_bytes(p) for p in parts))


@dataclass(frozen=True)
class WideUserCiphertext:
    """A wide value re-encrypted to one recipient's AES key."""

    width: int
    signed: bool
    limbs: Tuple[UserCiphertext, ...]

    def __post_init__(self) -> None:
        _check_type(self.width, self.signed)
        if len(self.limbs) != limb_count(self.width):
            raise ValueError("limb ciphertext count mismatch")
        for c in self.limbs:
            if not isinstance(c, UserCiphertext):
                raise TypeError("limbs must be UserCiphertext")

    def to_bytes(self) -> bytes:
        return _pack(self.width, self.signed, self.limbs)

    @classmethod
    def from_bytes(cls, buf: bytes) -> "WideUserCiphertext":
        width, signed, parts = _unpack(buf, "wide user ciphertext")
        return cls(width=width, signed=signed, limbs=tuple(UserCiphertext.from_bytes(p) for p in parts))


def op_validate_ciphertext_v1(
    backend: WordBackend, proofs: Sequence[InputProof], *, width: int, signed: bool
) -> WideValue:
    """Ingest an externally supplied value, one proof per limb.

    A failing limb raises InvalidProof from the backend and nothing is returned.
    """
    t = _check_type(width, signed)
    k = limb_count(t.width)
    if len(proofs) != k:
        raise ValueError(f"{t.name} needs {k} input proofs, got {len(proofs)}")
    lb = limb_bits(t.width)
    limbs = tuple(backend.validate_ciphertext(p, bits=lb) for p in proofs)
    return WideValue(width=t.width, signed=t.signed, limbs=limbs)


def op_set_public_v1(backend: WordBackend, value: int, *, width: int, signed: bool) -> WideValue:
    t = _check_type(width, signed)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError("value must be an int")
    if not t.contains(value):
        raise ValueError(f"{value} out of range for {t.name}")
    lb = limb_bits(t.width)
    limbs = tuple(backend.set_public(v, bits=lb) for v in public_limbs_v1(value, width=t.width))
    return WideValue(width=t.width, signed=t.signed, limbs=limbs)


def op_decrypt_v1(backend: WordBackend, x: WideValue) -> int:
    lb = x.limb_bits
    return join_limbs_v1([backend.decrypt(v, bits=lb) for v in x.limbs], width=x.width, signed=x.signed)


def op_random_v1(backend: WordBackend, *, width: int, signed: bool) -> WideValue:
    t = _check_type(width, signed)
    lb = limb_bits(t.width)
    limbs = tuple(backend.random(bits=lb) for _ in range(limb_count(t.width)))
    return WideValue(width=t.width, signed=t.signed, limbs=limbs)


def op_random_bounded_v1(backend: WordBackend, n_bits: int, *, width: int, signed: bool) -> WideValue:
    """Uniform over [0, 2^n_bits) as a bit pattern; limbs above n_bits are zero."""
    t = _check_type(width, signed)
    n = int(n_bits)
    if not 1 <= n <= t.width:
        raise ValueError(f"n_bits must be in [1, {t.width}]")
    lb = limb_bits(t.width)
    limbs = []
    for i in range(limb_count(t.width)):
        covered = max(0, min(lb, n - i * lb))
        if covered == 0:
            limbs.append(backend.set_public(0, bits=lb))
        elif covered == lb:
            limbs.append(backend.random(bits=lb))
        else:
            limbs.append(backend.and_(backend.random(bits=lb), mask_bits(covered), bits=lb))
    return WideValue(width=t.width, signed=t.signed, limbs=tuple(limbs))


def op_offboard_v1(backend: WordBackend, x: WideValue) -> WideCiphertext:
    lb = x.limb_bits
    return WideCiphertext(width=x.width, signed=x.signed, limbs=tuple(backend.offboard(v, bits=lb) for v in x.limbs))


def op_onboard_v1(backend: WordBackend, ct: WideCiphertext) -> WideValue:
    lb = limb_bits(ct.width)
    return WideValue(width=ct.width, signed=ct.signed, limbs=tuple(backend.onboard(c, bits=lb) for c in ct.limbs))


def op_offboard_to_user_v1(backend: WordBackend, x: WideValue, user_key16: bytes) -> WideUserCiphertext:
    """Re-encrypt `x` to a single recipient. The value stays secret to everyone else."""
    lb = x.limb_bits
    limbs = tuple(backend.offboard_to_user(v, user_key16, bits=lb) for v in x.limbs)
    return WideUserCiphertext(width=x.width, signed=x.signed, limbs=limbs)


def op_offboard_combined_v1(
    backend: WordBackend, x: WideValue, user_key16: bytes
) -> Tuple[WideCiphertext, WideUserCiphertext]:
    return op_offboard_v1(backend, x), op_offboard_to_user_v1(backend, x, user_key16)
