from __future__ import annotations

from .words import InputProof, SecretWord, WordBackend

# Secret booleans live in the low bit of a word; every op below runs in the 1-bit ring.
BOOL_BITS = 1


def _require_bool(x: object, name: str) -> SecretWord:
    if not isinstance(x, SecretWord):
        raise TypeError(f"{name} must be a secret boolean word")
    return x


def op_bool_set_public_v1(backend: WordBackend, value: bool) -> SecretWord:
    if not isinstance(value, bool):
        raise TypeError("value must be a bool")
    return backend.set_public(int(value), bits=BOOL_BITS)


def op_bool_decrypt_v1(backend: WordBackend, x: SecretWord) -> bool:
    return bool(backend.decrypt(_require_bool(x, "x"), bits=BOOL_BITS))


def op_bool_validate_v1(backend: WordBackend, proof: InputProof) -> SecretWord:
    return backend.validate_ciphertext(proof, bits=BOOL_BITS)


def op_bool_and_v1(backend: WordBackend, a: SecretWord, b: SecretWord) -> SecretWord:
    return backend.and_(_require_bool(a, "a"), _require_bool(b, "b"), bits=BOOL_BITS)


def op_bool_or_v1(backend: WordBackend, a: SecretWord, b: SecretWord) -> SecretWord:
    return backend.or_(_require_bool(a, "a"), _require_bool(b, "b"), bits=BOOL_BITS)


def op_bool_xor_v1(backend: WordBackend, a: SecretWord, b: SecretWord) -> SecretWord:
    return backend.xor(_require_bool(a, "a"), _require_bool(b, "b"), bits=BOOL_BITS)


def op_bool_not_v1(backend: WordBackend, a: SecretWord) -> SecretWord:
    return backend.xor(_require_bool(a, "a"), 1, bits=BOOL_BITS)


def op_bool_eq_v1(backend: WordBackend, a: SecretWord, b: SecretWord) -> SecretWord:
    return backend.eq(_require_bool(a, "a"), _require_bool(b, "b"), bits=BOOL_BITS)


def op_bool_ne_v1(backend: WordBackend, a: SecretWord, b: SecretWord) -> SecretWord:
    return backend.ne(_require_bool(a, "a"), _require_bool(b, "b"), bits=BOOL_BITS)


def op_bool_mux_v1(backend: WordBackend, cond: SecretWord, a: SecretWord, b: SecretWord) -> SecretWord:
    """`a` when `cond` holds, else `b`."""
    return backend.mux(_require_bool(cond, "cond"), _require_bool(a, "a"), _require_bool(b, "b"), bits=BOOL_BITS)
