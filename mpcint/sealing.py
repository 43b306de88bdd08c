from __future__ import annotations

# Ciphertext sealing and input-proof signatures.
#
# A word is sealed under a 16-byte AES key as nonce8 || (value XOR LE64(AES_k(nonce8 || 0^8)[0..7])).
# Input proofs are Ethereum-compatible secp256k1 signatures over a keccak256 digest that
# binds the ciphertext to its sender, the receiving contract and the function selector.

from Crypto.Cipher import AES
from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError
from eth_utils.crypto import keccak

from .words import WORD_MASK, Ciphertext, InputProof, UserCiphertext, _require_len


def keccak256(data: bytes) -> bytes:
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError("data must be bytes")
    return bytes(keccak(bytes(data)))


def aes128_enc_block_v1(*, key16: bytes, block16: bytes) -> bytes:
    _require_len(key16, 16, "key16")
    _require_len(block16, 16, "block16")
    cipher = AES.new(bytes(key16), AES.MODE_ECB)
    return cipher.encrypt(bytes(block16))


def _pad_u64(key16: bytes, nonce8: bytes) -> int:
    b = aes128_enc_block_v1(key16=key16, block16=bytes(nonce8) + b"\x00" * 8)
    return int.from_bytes(b[0:8], "little", signed=False)


def seal_word_v1(*, key16: bytes, value: int, nonce8: bytes) -> Ciphertext:
    _require_len(nonce8, 8, "nonce8")
    return Ciphertext(nonce8=bytes(nonce8), body=(int(value) & WORD_MASK) ^ _pad_u64(key16, nonce8))


def unseal_word_v1(*, key16: bytes, ct: Ciphertext) -> int:
    return int(ct.body) ^ _pad_u64(key16, ct.nonce8)


def seal_user_word_v1(*, user_key16: bytes, value: int, nonce8: bytes) -> UserCiphertext:
    _require_len(nonce8, 8, "nonce8")
    return UserCiphertext(nonce8=bytes(nonce8), body=(int(value) & WORD_MASK) ^ _pad_u64(user_key16, nonce8))


def unseal_user_word_v1(*, user_key16: bytes, uct: UserCiphertext) -> int:
    return int(uct.body) ^ _pad_u64(user_key16, uct.nonce8)


def input_digest32_v1(*, ct: Ciphertext, bits: int, sender20: bytes, contract20: bytes, selector4: bytes) -> bytes:
    _require_len(sender20, 20, "sender20")
    _require_len(contract20, 20, "contract20")
    _require_len(selector4, 4, "selector4")
    return keccak256(ct.to_bytes() + bytes([int(bits) & 0xFF]) + bytes(sender20) + bytes(contract20) + bytes(selector4))


def address20_from_privkey(privkey32: bytes) -> bytes:
    _require_len(privkey32, 32, "privkey32")
    return keys.PrivateKey(bytes(privkey32)).public_key.to_canonical_address()


def sign_digest_v1(privkey32: bytes, digest32: bytes) -> bytes:
    """Returns a 65-byte signature r(32)||s(32)||v(1) with v in {0,1}."""
    _require_len(privkey32, 32, "privkey32")
    _require_len(digest32, 32, "digest32")
    return keys.PrivateKey(bytes(privkey32)).sign_msg_hash(bytes(digest32)).to_bytes()


def recover_signer20_v1(digest32: bytes, sig65: bytes) -> bytes:
    """Recover the signer's address; raises ValueError on a malformed signature."""
    _require_len(digest32, 32, "digest32")
    _require_len(sig65, 65, "sig65")
    try:
        pk = keys.Signature(bytes(sig65)).recover_public_key_from_msg_hash(bytes(digest32))
    except (BadSignature, ValidationError) as e:
        raise ValueError(f"bad signature: {e}") from e
    return pk.to_canonical_address()


def sign_input_v1(
    *,
    ct: Ciphertext,
    bits: int,
    privkey32: bytes,
    contract20: bytes,
    selector4: bytes,
) -> InputProof:
    sender20 = address20_from_privkey(privkey32)
    digest = input_digest32_v1(ct=ct, bits=bits, sender20=sender20, contract20=contract20, selector4=selector4)
    return InputProof(
        ciphertext=ct,
        bits=int(bits),
        sender20=sender20,
        contract20=bytes(contract20),
        selector4=bytes(selector4),
        sig65=sign_digest_v1(privkey32, digest),
    )


def verify_input_v1(proof: InputProof) -> bool:
    digest = input_digest32_v1(
        ct=proof.ciphertext,
        bits=proof.bits,
        sender20=proof.sender20,
        contract20=proof.contract20,
        selector4=proof.selector4,
    )
    try:
        return recover_signer20_v1(digest, proof.sig65) == bytes(proof.sender20)
    except Exception:
        return False
