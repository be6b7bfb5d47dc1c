# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import logging
from dataclasses import dataclass

from cryptography.hazmat.primitives import hashes, hmac
from eth_typing import HexStr

from starkex.constants import EC_ORDER, MAX_ECDSA_VAL, N_ELEMENT_BITS_HASH
from starkex.curve import (
    G,
    Point,
    add,
    compress,
    get_public_key,
    multiply,
    to_uncompressed,
    uncompress,
)
from starkex.errors import MalformedHex, SignatureRangeError
from starkex.field import ScalarFQ, assert_in_range, pad_hex, strip_hex, to_int

logger = logging.getLogger(__name__)

# ethereum style recovery id offset
RECOVERY_OFFSET = 27


@dataclass(frozen=True)
class KeyPair:
    """
    A stark key pair. The private key is None for verification-only pairs.
    """

    public_key: Point
    private_key: int | None = None

    @classmethod
    def from_private(cls, private_key: int | str) -> "KeyPair":
        """
        Key pair for a private scalar in [1, n). Keys are never reduced mod n.

        Raises:
            RangeError: If the key is 0 or not below the curve order.
        """
        d = assert_in_range(to_int(private_key), 1, EC_ORDER, "private_key")
        return cls(public_key=get_public_key(d), private_key=d)

    @classmethod
    def from_public(cls, public_key: str) -> "KeyPair":
        return cls(public_key=uncompress(public_key))

    @property
    def private_hex(self) -> HexStr:
        if self.private_key is None:
            raise ValueError("key pair holds no private key")
        return pad_hex(self.private_key)

    def public_hex(self, compressed: bool = False) -> str:
        if compressed:
            return compress(self.public_key)
        return to_uncompressed(self.public_key)

    @property
    def stark_key(self) -> HexStr:
        """The x coordinate of the public key, the identity used on chain."""
        return pad_hex(int(self.public_key[0]))

    @property
    def stark_public_key(self) -> str:
        return self.public_hex(compressed=True)


@dataclass(frozen=True)
class Signature:
    r: int
    s: int
    recovery_param: int | None = None

    @property
    def w(self) -> int:
        return int(ScalarFQ(1) / ScalarFQ(self.s))

    def to_hex(self) -> HexStr:
        return serialize_signature(self)


class HmacDrbg:
    """
    HMAC-DRBG over SHA-256 (NIST SP 800-90A), used for deterministic nonces.
    """

    def __init__(self, entropy: bytes, nonce: bytes, personalization: bytes = b""):
        self.k = b"\x00" * 32
        self.v = b"\x01" * 32
        self._update(entropy + nonce + personalization)

    @staticmethod
    def _hmac(key: bytes, data: bytes) -> bytes:
        h = hmac.HMAC(key, hashes.SHA256())
        h.update(data)
        return h.finalize()

    def _update(self, seed: bytes | None = None) -> None:
        self.k = self._hmac(self.k, self.v + b"\x00" + (seed or b""))
        self.v = self._hmac(self.k, self.v)
        if not seed:
            return
        self.k = self._hmac(self.k, self.v + b"\x01" + seed)
        self.v = self._hmac(self.k, self.v)

    def generate(self, n_bytes: int) -> bytes:
        out = b""
        while len(out) < n_bytes:
            self.v = self._hmac(self.k, self.v)
            out += self.v
        self._update()
        return out[:n_bytes]


def truncate_to_n(value: int, truncate_only: bool = False) -> int:
    """
    Drop the low bits of value so that its byte length fits the curve order
    bit length, then reduce below the order unless truncate_only is set.
    """
    delta = ((value.bit_length() + 7) // 8) * 8 - N_ELEMENT_BITS_HASH
    if delta > 0:
        value >>= delta
    if not truncate_only and value >= EC_ORDER:
        value -= EC_ORDER
    return value


def fix_message(msg_hash: int) -> int:
    """
    Align a message hash with the byte based truncation applied before
    signing. A hash of exactly 63 hex digits gets one zero digit appended so
    that the truncation shifts it back to its original value.

    Args:
        msg_hash (int): The message hash, below 2**251.

    Returns:
        int: The value handed to the truncation step.
    """
    digits = len(format(msg_hash, "x"))
    if digits <= 62:
        return msg_hash
    if digits != 63:
        raise SignatureRangeError("msgHash", msg_hash, 0, MAX_ECDSA_VAL)
    return msg_hash << 4


def assert_signable(msg_hash: int, r: int, s: int) -> None:
    """Range checks shared by signing and verification."""
    assert_in_range(msg_hash, 0, MAX_ECDSA_VAL, "msgHash", SignatureRangeError)
    assert_in_range(r, 1, MAX_ECDSA_VAL, "r", SignatureRangeError)
    assert_in_range(s, 1, EC_ORDER, "s", SignatureRangeError)
    w = int(ScalarFQ(1) / ScalarFQ(s))
    assert_in_range(w, 1, MAX_ECDSA_VAL, "w", SignatureRangeError)


def sign(key: KeyPair | int | str, msg_hash: int | str) -> Signature:
    """
    Deterministic ECDSA signature of a message hash over the stark curve.

    The nonce comes from HMAC-DRBG seeded with the private key and the
    truncated message, so the same key and hash always give the same
    signature.

    Args:
        key (KeyPair | int | str): Signing key pair or raw private key.
        msg_hash (int | str): Message hash below 2**251.

    Returns:
        Signature: r, s and the recovery parameter.

    Raises:
        SignatureRangeError: When the hash or the produced r, s, w are out of range.
        RangeError: When a raw private key is outside [1, n).
        ValueError: When the key pair holds no private key.
    """
    key_pair = key if isinstance(key, KeyPair) else KeyPair.from_private(key)
    if key_pair.private_key is None:
        raise ValueError("signing requires a private key")
    d = key_pair.private_key
    msg_hash = to_int(msg_hash)
    assert_in_range(msg_hash, 0, MAX_ECDSA_VAL, "msgHash", SignatureRangeError)

    msg = truncate_to_n(fix_message(msg_hash))
    drbg = HmacDrbg(d.to_bytes(32, "big"), msg.to_bytes(32, "big"))
    attempt = 0
    while True:
        attempt += 1
        k = truncate_to_n(int.from_bytes(drbg.generate(32), "big"), truncate_only=True)
        if k <= 1 or k >= EC_ORDER - 1:
            continue
        kp = multiply(G, k)
        if kp is None:
            continue
        kp_x = int(kp[0])
        r = kp_x % EC_ORDER
        if r == 0:
            continue
        s = int((ScalarFQ(r) * d + msg) / ScalarFQ(k))
        if s == 0:
            continue
        recovery = (int(kp[1]) & 1) | (2 if kp_x != r else 0)
        break
    if attempt > 1:
        logger.debug("nonce generation took %d attempts", attempt)

    assert_signable(msg_hash, r, s)
    return Signature(r=r, s=s, recovery_param=recovery)


def verify(public_key: KeyPair | Point | str, msg_hash: int | str, signature: Signature | str) -> bool:
    """
    Verify a signature against a public key.

    Args:
        public_key (KeyPair | Point | str): Key pair, curve point or encoded public key.
        msg_hash (int | str): The signed message hash.
        signature (Signature | str): Signature object or its serialized hex.

    Returns:
        bool: True when the signature is valid.

    Raises:
        SignatureRangeError: When the hash, r, s or w are out of range.
    """
    if isinstance(public_key, KeyPair):
        q = public_key.public_key
    elif isinstance(public_key, str):
        q = uncompress(public_key)
    else:
        q = public_key
    if isinstance(signature, str):
        signature = deserialize_signature(signature)
    msg_hash = to_int(msg_hash)
    assert_signable(msg_hash, signature.r, signature.s)

    msg = truncate_to_n(fix_message(msg_hash))
    s_inv = ScalarFQ(1) / ScalarFQ(signature.s)
    u1 = int(s_inv * msg)
    u2 = int(s_inv * signature.r)
    p = add(multiply(G, u1), multiply(q, u2))
    if p is None:
        return False
    return int(p[0]) % EC_ORDER == signature.r


def verify_stark_public_key(public_key: str, msg_hash: int | str, signature: Signature | str) -> bool:
    """Verify against a compressed (02/03) or uncompressed (04) public key."""
    return verify(uncompress(public_key), msg_hash, signature)


def serialize_signature(signature: Signature) -> HexStr:
    """
    Encode as 0x || r (32 bytes) || s (32 bytes) || v (1 byte), with
    v = recovery_param + 27. v is omitted when the recovery parameter is
    unknown.
    """
    out = format(signature.r, "064x") + format(signature.s, "064x")
    if signature.recovery_param is not None:
        out += format(signature.recovery_param + RECOVERY_OFFSET, "02x")
    return HexStr("0x" + out)


def deserialize_signature(signature: str) -> Signature:
    """
    Inverse of serialize_signature.

    Args:
        signature (str): 128 or 130 hex digits, optionally 0x-prefixed.

    Returns:
        Signature: The decoded signature.

    Raises:
        MalformedHex: When the length or the digits are wrong.
    """
    digits = strip_hex(signature)
    if len(digits) not in (128, 130):
        raise MalformedHex(signature, "signature must be 64 or 65 bytes")
    recovery = None
    if len(digits) == 130:
        v = int(digits[128:], 16)
        recovery = v - RECOVERY_OFFSET if v >= RECOVERY_OFFSET else v
    return Signature(r=int(digits[:64], 16), s=int(digits[64:128], 16), recovery_param=recovery)
