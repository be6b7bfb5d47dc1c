# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import hashlib
import logging

from eth_account.hdaccount import key_from_seed, seed_from_mnemonic
from eth_utils import ValidationError

from starkex.constants import (
    DEFAULT_APPLICATION,
    DEFAULT_LAYER,
    EC_ORDER,
    STARK_DERIVATION_PURPOSE,
)
from starkex.field import even_hex, parse_hex
from starkex.signature import KeyPair, deserialize_signature

logger = logging.getLogger(__name__)

PATH_COMPONENT_MASK = 2**31 - 1


def hash_path_component(name: str) -> int:
    """Low 31 bits of sha256(name)."""
    digest = hashlib.sha256(name.encode("utf-8")).digest()
    return int.from_bytes(digest, "big") & PATH_COMPONENT_MASK


def get_account_path(
    layer: str = DEFAULT_LAYER,
    application: str = DEFAULT_APPLICATION,
    eth_address: str = "0x0000000000000000000000000000000000000000",
    index: int | str = 0,
) -> str:
    """
    Build the stark key derivation path for an account.

    The path is m/2645'/layer'/application'/addr_low'/addr_high'/index where
    layer and application are the low 31 bits of their sha256 digests and
    the address is split into its two lowest 31 bit groups.

    Args:
        layer (str): Layer name, e.g. "starkex".
        application (str): Application name, e.g. "starkexdvf".
        eth_address (str): 0x-prefixed ethereum address.
        index (int | str): Account index, the only non hardened segment.

    Returns:
        str: The derivation path.
    """
    address = parse_hex(eth_address)
    path = "m/{}'/{}'/{}'/{}'/{}'/{}".format(
        STARK_DERIVATION_PURPOSE,
        hash_path_component(layer),
        hash_path_component(application),
        address & PATH_COMPONENT_MASK,
        (address >> 31) & PATH_COMPONENT_MASK,
        int(index),
    )
    logger.debug("account path for %s/%s index %s: %s", layer, application, index, path)
    return path


def grind_key(key_seed: bytes, key_value_limit: int = EC_ORDER) -> int:
    """
    Map a seed uniformly onto [0, key_value_limit).

    sha256(seed || counter) is drawn with counter = 0, 1, ... until the digest
    lands below the largest multiple of the limit that fits in 256 bits. The
    counter is appended as its minimal even length big endian encoding.

    Args:
        key_seed (bytes): Seed material, usually a 32 byte private key.
        key_value_limit (int): Exclusive upper bound of the result.

    Returns:
        int: The ground key.
    """
    max_allowed = 2**256 - (2**256 % key_value_limit)
    i = 0
    while True:
        digest = hashlib.sha256(key_seed + bytes.fromhex(even_hex(i))).digest()
        key = int.from_bytes(digest, "big")
        if key < max_allowed:
            if i:
                logger.debug("grinding needed %d attempts", i + 1)
            return key % key_value_limit
        i += 1


def private_key_from_path(mnemonic: str, path: str, passphrase: str = "") -> int:
    """
    Ground stark private key for a BIP-39 mnemonic and BIP-32 path.

    Args:
        mnemonic (str): The wallet mnemonic, checked against its BIP-39 checksum.
        path (str): A derivation path, see get_account_path.
        passphrase (str): Optional BIP-39 passphrase.

    Returns:
        int: The private key, below the curve order.

    Raises:
        ValueError: If the mnemonic or the path is invalid.
    """
    try:
        key_seed = key_from_seed(seed_from_mnemonic(mnemonic, passphrase), path)
    except ValidationError as e:
        raise ValueError(str(e)) from e
    return grind_key(key_seed)


def key_pair_from_path(mnemonic: str, path: str, passphrase: str = "") -> KeyPair:
    """
    Derive the stark key pair at a path from a BIP-39 mnemonic.

    Args:
        mnemonic (str): The wallet mnemonic.
        path (str): A derivation path, see get_account_path.
        passphrase (str): Optional BIP-39 passphrase.

    Returns:
        KeyPair: The stark key pair.
    """
    return KeyPair.from_private(private_key_from_path(mnemonic, path, passphrase))


def private_key_from_signature(signature: str) -> int:
    """Stark private key ground from the r component of an ethereum signature."""
    r = deserialize_signature(signature).r
    return grind_key(bytes.fromhex(even_hex(r)))
