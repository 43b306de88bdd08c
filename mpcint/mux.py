from __future__ import annotations

from .limbs import WideValue
from .words import SecretWord, WordBackend


def op_select_v1(backend: WordBackend, cond: SecretWord, a: WideValue, b: WideValue) -> WideValue:
    """Branchless select: `a` where the secret boolean `cond` holds, else `b`.

    One backend mux per limb whatever `cond` is.
    """
    if not isinstance(cond, SecretWord):
        raise TypeError("cond must be a secret boolean word")
    if a.type != b.type:
        raise ValueError(f"select type mismatch: {a.type.name} vs {b.type.name}")
    lb = a.limb_bits
    limbs = tuple(backend.mux(cond, x, y, bits=lb) for x, y in zip(a.limbs, b.limbs))
    return WideValue(width=a.width, signed=a.signed, limbs=limbs)
