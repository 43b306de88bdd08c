from __future__ import annotations

# pyright: reportMissingImports=false

import pytest
import torch

from mpcint.errors import BackendError, DivisionByZero
from mpcint.local_backend import LocalRSSBackend
from mpcint.rss import open_word_v1, share_public_word_v1, share_word_v1
from mpcint.words import SecretWord


def _backend(seed: int = 1) -> LocalRSSBackend:
    return LocalRSSBackend(network_key16=b"\x22" * 16, seed=seed)


def test_rss_share_open_roundtrip() -> None:
    g = torch.Generator(device="cpu")
    g.manual_seed(3)
    for v in (0, 1, 2**63, 2**64 - 1, 0x0123456789ABCDEF):
        assert open_word_v1(share_word_v1(v, generator=g)) == v
        assert open_word_v1(share_public_word_v1(v)) == v


def test_rss_detects_replication_mismatch() -> None:
    g = torch.Generator(device="cpu")
    g.manual_seed(3)
    p0, p1, p2 = share_word_v1(5, generator=g)
    bad = type(p1)(lo=p1.lo + 1, hi=p1.hi)
    with pytest.raises(ValueError):
        open_word_v1((p0, bad, p2))


def test_word_ops_respect_bits() -> None:
    be = _backend()
    a = be.set_public(200, bits=8)
    assert be.decrypt(be.add(a, 100, bits=8), bits=8) == 44
    assert be.decrypt(be.sub(30, be.set_public(100, bits=8), bits=8), bits=8) == 186
    assert be.decrypt(be.mul(a, 3, bits=8), bits=8) == 600 % 256
    x = be.set_public(2**64 - 1)
    assert be.decrypt(be.add(x, 1)) == 0
    assert be.decrypt(be.mul(x, x)) == 1
    assert be.decrypt(be.lt(x, 0)) == 0
    assert be.decrypt(be.shr(x, 60)) == 15
    assert be.decrypt(be.mux(be.set_public(1, bits=1), 7, 9)) == 7
    assert be.decrypt(be.mux(be.set_public(0, bits=1), 7, 9)) == 9


def test_word_division_by_zero_raises() -> None:
    be = _backend()
    with pytest.raises(DivisionByZero):
        be.div(be.set_public(5), 0)
    with pytest.raises(ZeroDivisionError):
        be.rem(be.set_public(5), be.set_public(0))


def test_shift_amount_range() -> None:
    be = _backend()
    with pytest.raises(ValueError):
        be.shl(be.set_public(1, bits=8), 8, bits=8)
    with pytest.raises(ValueError):
        be.shr(be.set_public(1), -1)


def test_bad_bits_and_public_range() -> None:
    be = _backend()
    with pytest.raises(ValueError):
        be.add(1, 2, bits=12)
    with pytest.raises(ValueError):
        be.set_public(256, bits=8)


def test_words_from_other_backend_rejected() -> None:
    a = _backend()
    b = LocalRSSBackend(network_key16=b"\x33" * 16, seed=1)
    x = a.set_public(1)
    with pytest.raises(BackendError):
        b.add(x, 1)
    with pytest.raises(TypeError):
        a.add(x, "1")  # type: ignore[arg-type]


def test_shares_are_rerandomized() -> None:
    be = _backend()
    x = be.set_public(42)
    y = be.set_public(42)
    assert isinstance(x, SecretWord)
    assert not torch.equal(x.payload[0].lo, y.payload[0].lo)
    assert be.decrypt(x) == be.decrypt(y) == 42


def test_seeded_backends_are_reproducible() -> None:
    a = _backend(seed=99)
    b = _backend(seed=99)
    assert a.decrypt(a.random()) == b.decrypt(b.random())
    assert a.offboard(a.set_public(5)) == b.offboard(b.set_public(5))


def test_call_counter() -> None:
    be = _backend()
    x = be.set_public(3)
    be.add(x, x)
    be.add(x, 1)
    assert be.calls["add"] == 2
    assert be.total_calls() == 3
    be.reset_calls()
    assert be.total_calls() == 0


def test_offboard_onboard_word() -> None:
    be = _backend()
    ct = be.offboard(be.set_public(0xDEADBEEF))
    assert be.decrypt(be.onboard(ct)) == 0xDEADBEEF
    ct2 = be.offboard(be.set_public(0xDEADBEEF))
    assert ct2.nonce8 != ct.nonce8
