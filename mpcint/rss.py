from __future__ import annotations

# pyright: reportMissingImports=false

from dataclasses import dataclass
from typing import Tuple

import torch

U64_MASK = 0xFFFFFFFFFFFFFFFF


def u64_to_i64(x: int) -> int:
    """Map a u64 value onto the int64 bit pattern torch stores."""
    v = int(x) & U64_MASK
    return v - (1 << 64) if v >= (1 << 63) else v


def i64_to_u64(x: int) -> int:
    return int(x) & U64_MASK


@dataclass(frozen=True)
class RSSWordShare:
    """One party's view of a replicated secret share (RSS) of a single u64 word over Z/2^64.

    Party Pi holds the pair (x_i, x_{i+1}) as `lo` and `hi`, each a 1-element int64 tensor
    holding the raw 64-bit ring element bit pattern.
    """

    lo: torch.Tensor
    hi: torch.Tensor

    def __post_init__(self) -> None:
        if not isinstance(self.lo, torch.Tensor) or not isinstance(self.hi, torch.Tensor):
            raise TypeError("lo/hi must be torch tensors")
        if self.lo.dtype != torch.int64 or self.hi.dtype != torch.int64:
            raise TypeError("RSSWordShare requires int64 tensors (u64 bit-patterns)")
        if self.lo.shape != (1,) or self.hi.shape != (1,):
            raise ValueError("RSSWordShare holds exactly one word")

    def add(self, other: "RSSWordShare") -> "RSSWordShare":
        return RSSWordShare(lo=self.lo + other.lo, hi=self.hi + other.hi)

    def sub(self, other: "RSSWordShare") -> "RSSWordShare":
        return RSSWordShare(lo=self.lo - other.lo, hi=self.hi - other.hi)

    def mul_public(self, c: int) -> "RSSWordShare":
        k = torch.tensor([u64_to_i64(c)], dtype=torch.int64)
        return RSSWordShare(lo=self.lo * k, hi=self.hi * k)


RSSWordTriple = Tuple[RSSWordShare, RSSWordShare, RSSWordShare]


def _rand_i64_bits(gen: torch.Generator) -> torch.Tensor:
    lo = torch.randint(0, 2**32, (1,), dtype=torch.int64, generator=gen)
    hi = torch.randint(0, 2**32, (1,), dtype=torch.int64, generator=gen)
    return (hi << 32) | lo


def share_word_v1(value: int, *, generator: torch.Generator) -> RSSWordTriple:
    """Create 3-party replicated shares of a public u64 `value`."""

    x = torch.tensor([u64_to_i64(value)], dtype=torch.int64)
    a = _rand_i64_bits(generator)
    b = _rand_i64_bits(generator)
    c = x - a - b

    p0 = RSSWordShare(lo=a, hi=b)
    p1 = RSSWordShare(lo=b, hi=c)
    p2 = RSSWordShare(lo=c, hi=a)
    return p0, p1, p2


def share_public_word_v1(value: int) -> RSSWordTriple:
    """Deterministic sharing of a public constant: x0 = value, x1 = x2 = 0."""

    x = torch.tensor([u64_to_i64(value)], dtype=torch.int64)
    z = torch.zeros((1,), dtype=torch.int64)
    return RSSWordShare(lo=x, hi=z), RSSWordShare(lo=z, hi=z), RSSWordShare(lo=z, hi=x)


def add_triples_v1(x: RSSWordTriple, y: RSSWordTriple) -> RSSWordTriple:
    return x[0].add(y[0]), x[1].add(y[1]), x[2].add(y[2])


def sub_triples_v1(x: RSSWordTriple, y: RSSWordTriple) -> RSSWordTriple:
    return x[0].sub(y[0]), x[1].sub(y[1]), x[2].sub(y[2])


def mul_public_triple_v1(x: RSSWordTriple, c: int) -> RSSWordTriple:
    return x[0].mul_public(c), x[1].mul_public(c), x[2].mul_public(c)


def open_word_v1(shares: RSSWordTriple) -> int:
    """Reconstruct x = x0 + x1 + x2 (mod 2^64), checking that replicated components agree."""

    p0, p1, p2 = shares
    if not (torch.equal(p0.hi, p1.lo) and torch.equal(p1.hi, p2.lo) and torch.equal(p2.hi, p0.lo)):
        raise ValueError("RSS replication mismatch")
    s = p0.lo + p1.lo + p2.lo
    return i64_to_u64(int(s.item()))
