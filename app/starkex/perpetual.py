# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
from eth_typing import HexStr
from eth_utils import keccak

from starkex.asset import MASK_250
from starkex.constants import (
    MAX_ECDSA_VAL,
    PERP_AMOUNT_BITS,
    PERP_ASSET_ID_BITS,
    PERP_CONDITIONAL_TRANSFER_TAG,
    PERP_EXPIRATION_BITS,
    PERP_LIMIT_ORDER_TAG,
    PERP_NONCE_BITS,
    PERP_POSITION_BITS,
    PERP_TAG_BITS,
    PERP_TRANSFER_TAG,
    PERP_WITHDRAWAL_TAG,
)
from starkex.errors import MalformedHex, UnsupportedOperation
from starkex.field import assert_bits, assert_in_range, pack_fields, strip_hex, to_int
from starkex.messages import checked_hash
from starkex.pedersen import hash_message


def _asset_id(value: int | str, field: str) -> int:
    return assert_bits(to_int(value), PERP_ASSET_ID_BITS, field)


def _stark_element(value: int | str, field: str) -> int:
    return assert_in_range(to_int(value), 0, MAX_ECDSA_VAL, field)


def get_perpetual_limit_order_msg_hash(
    asset_id_synthetic: int | str,
    asset_id_collateral: int | str,
    is_buying_synthetic: bool,
    asset_id_fee: int | str,
    amount_synthetic: int,
    amount_collateral: int,
    amount_fee: int,
    nonce: int,
    position_id: int,
    expiration_timestamp: int,
) -> HexStr:
    """
    Hash of a perpetual limit order.

    The side that is sold comes first: when buying the synthetic asset the
    collateral is sold, otherwise the synthetic asset is. The hash is
    H(H(H(sell, buy), fee), packed0), packed1) with

        packed0 = amount_sell | amount_buy | amount_fee | nonce
        packed1 = 3 | position | position | position | expiration | 17 zero bits

    Args:
        asset_id_synthetic (int | str): Synthetic asset id, below 2**250.
        asset_id_collateral (int | str): Collateral asset id, below 2**250.
        is_buying_synthetic (bool): Direction of the order.
        asset_id_fee (int | str): Fee asset id, below 2**250.
        amount_synthetic (int): Below 2**64.
        amount_collateral (int): Below 2**64.
        amount_fee (int): Below 2**64.
        nonce (int): Below 2**32.
        position_id (int): Below 2**64.
        expiration_timestamp (int): Hours since the epoch, below 2**32.

    Returns:
        HexStr: The message hash.
    """
    synthetic = _asset_id(asset_id_synthetic, "asset_id_synthetic")
    collateral = _asset_id(asset_id_collateral, "asset_id_collateral")
    fee = _asset_id(asset_id_fee, "asset_id_fee")
    if is_buying_synthetic:
        sell, buy = collateral, synthetic
        amount_sell, amount_buy = amount_collateral, amount_synthetic
    else:
        sell, buy = synthetic, collateral
        amount_sell, amount_buy = amount_synthetic, amount_collateral

    packed0 = pack_fields(
        [
            ("amount_sell", amount_sell, PERP_AMOUNT_BITS),
            ("amount_buy", amount_buy, PERP_AMOUNT_BITS),
            ("amount_fee", amount_fee, PERP_AMOUNT_BITS),
            ("nonce", nonce, PERP_NONCE_BITS),
        ]
    )
    packed1 = pack_fields(
        [
            ("instruction", PERP_LIMIT_ORDER_TAG, PERP_TAG_BITS),
            ("position_id", position_id, PERP_POSITION_BITS),
            ("position_id", position_id, PERP_POSITION_BITS),
            ("position_id", position_id, PERP_POSITION_BITS),
            ("expiration_timestamp", expiration_timestamp, PERP_EXPIRATION_BITS),
            ("padding", 0, 17),
        ]
    )
    return checked_hash(hash_message([[[[sell, buy], fee], packed0], packed1]))


def get_perpetual_transfer_msg_hash(
    asset_id: int | str,
    asset_id_fee: int | str,
    receiver_public_key: int | str,
    sender_position_id: int,
    receiver_position_id: int,
    src_fee_position_id: int,
    nonce: int,
    amount: int,
    max_amount_fee: int,
    expiration_timestamp: int,
    condition: int | str | None = None,
) -> HexStr:
    """
    Hash of a perpetual transfer, conditional when a condition is given.

    H(H(H(asset, fee), receiver_key) [, condition]) is combined with

        packed0 = sender | receiver | fee_position | nonce
        packed1 = tag | amount | max_fee | expiration | 81 zero bits

    Returns:
        HexStr: The message hash.
    """
    asset = _asset_id(asset_id, "asset_id")
    fee = _asset_id(asset_id_fee, "asset_id_fee")
    receiver_key = _stark_element(receiver_public_key, "receiver_public_key")
    tag = PERP_TRANSFER_TAG if condition is None else PERP_CONDITIONAL_TRANSFER_TAG

    packed0 = pack_fields(
        [
            ("sender_position_id", sender_position_id, PERP_POSITION_BITS),
            ("receiver_position_id", receiver_position_id, PERP_POSITION_BITS),
            ("src_fee_position_id", src_fee_position_id, PERP_POSITION_BITS),
            ("nonce", nonce, PERP_NONCE_BITS),
        ]
    )
    packed1 = pack_fields(
        [
            ("instruction", tag, PERP_TAG_BITS),
            ("amount", amount, PERP_AMOUNT_BITS),
            ("max_amount_fee", max_amount_fee, PERP_AMOUNT_BITS),
            ("expiration_timestamp", expiration_timestamp, PERP_EXPIRATION_BITS),
            ("padding", 0, 81),
        ]
    )
    head = [[asset, fee], receiver_key]
    if condition is not None:
        head = [head, _stark_element(condition, "condition")]
    return checked_hash(hash_message([[head, packed0], packed1]))


def get_perpetual_conditional_transfer_msg_hash(
    asset_id: int | str,
    asset_id_fee: int | str,
    receiver_public_key: int | str,
    condition: int | str,
    sender_position_id: int,
    receiver_position_id: int,
    src_fee_position_id: int,
    nonce: int,
    amount: int,
    max_amount_fee: int,
    expiration_timestamp: int,
) -> HexStr:
    return get_perpetual_transfer_msg_hash(
        asset_id,
        asset_id_fee,
        receiver_public_key,
        sender_position_id,
        receiver_position_id,
        src_fee_position_id,
        nonce,
        amount,
        max_amount_fee,
        expiration_timestamp,
        condition=condition,
    )


def get_perpetual_withdrawal_msg_hash(
    asset_id_collateral: int | str,
    position_id: int,
    nonce: int,
    expiration_timestamp: int,
    amount: int,
) -> HexStr:
    """
    Hash of a perpetual withdrawal, H(collateral, packed) with

        packed = 6 | position | nonce | amount | expiration | 49 zero bits
    """
    collateral = _asset_id(asset_id_collateral, "asset_id_collateral")
    packed = pack_fields(
        [
            ("instruction", PERP_WITHDRAWAL_TAG, PERP_TAG_BITS),
            ("position_id", position_id, PERP_POSITION_BITS),
            ("nonce", nonce, PERP_NONCE_BITS),
            ("amount", amount, PERP_AMOUNT_BITS),
            ("expiration_timestamp", expiration_timestamp, PERP_EXPIRATION_BITS),
            ("padding", 0, 49),
        ]
    )
    return checked_hash(hash_message([collateral, packed]))


def get_perpetual_full_withdrawal_msg_hash(*args, **kwargs) -> HexStr:
    raise UnsupportedOperation("perpetual full withdrawal message hashing")


def build_condition(fact_registry_address: str, fact: str | bytes) -> int:
    """
    Condition of a conditional transfer:
    keccak256(address (20 bytes) || fact (32 bytes)) masked to 250 bits.

    Args:
        fact_registry_address (str): 0x-prefixed address of the fact registry.
        fact (str | bytes): The 32 byte fact, as bytes or hex.

    Returns:
        int: The condition.
    """
    address = bytes.fromhex(strip_hex(fact_registry_address))
    if len(address) != 20:
        raise MalformedHex(fact_registry_address, "address must be 20 bytes")
    fact_bytes = fact if isinstance(fact, bytes) else bytes.fromhex(strip_hex(fact).rjust(64, "0"))
    if len(fact_bytes) != 32:
        raise MalformedHex(fact, "fact must be 32 bytes")
    return int.from_bytes(keccak(address + fact_bytes), "big") & MASK_250
