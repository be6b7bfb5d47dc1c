# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
from dataclasses import dataclass
from enum import IntEnum

from eth_typing import HexStr

from starkex.asset import Asset, get_asset_type_int
from starkex.constants import (
    CONDITIONAL_TRANSFER_TAG,
    LIMIT_ORDER_TAG,
    MAX_ECDSA_VAL,
    SPOT_AMOUNT_BITS,
    SPOT_EXPIRATION_BITS,
    SPOT_NONCE_BITS,
    SPOT_TAG_BITS,
    SPOT_VAULT_BITS,
    TRANSFER_TAG,
)
from starkex.curve import is_compressed_public_key
from starkex.errors import SignatureRangeError, UnsupportedOperation
from starkex.field import assert_in_range, pack_fields, to_field_element, to_hex, to_int, unpack_fields
from starkex.pedersen import hash_message


class SpotInstruction(IntEnum):
    LIMIT_ORDER = LIMIT_ORDER_TAG
    TRANSFER = TRANSFER_TAG
    CONDITIONAL_TRANSFER = CONDITIONAL_TRANSFER_TAG


SPOT_LAYOUT = [
    ("instruction", SPOT_TAG_BITS),
    ("vault0", SPOT_VAULT_BITS),
    ("vault1", SPOT_VAULT_BITS),
    ("amount0", SPOT_AMOUNT_BITS),
    ("amount1", SPOT_AMOUNT_BITS),
    ("nonce", SPOT_NONCE_BITS),
    ("expiration_timestamp", SPOT_EXPIRATION_BITS),
]


@dataclass(frozen=True)
class SpotMessage:
    instruction: SpotInstruction
    vault0: int
    vault1: int
    amount0: int
    amount1: int
    nonce: int
    expiration_timestamp: int


def format_message(
    instruction: SpotInstruction | int,
    vault0: int,
    vault1: int,
    amount0: int,
    amount1: int,
    nonce: int,
    expiration_timestamp: int,
    names: tuple[str, ...] | None = None,
) -> int:
    """
    Pack the numeric part of a spot message into one word:
    instruction | vault0 | vault1 | amount0 | amount1 | nonce | expiration.

    Args:
        instruction (SpotInstruction | int): 0 order, 1 transfer, 2 conditional transfer.
        vault0 (int): Sell or sender vault, below 2**31.
        vault1 (int): Buy or receiver vault, below 2**31.
        amount0 (int): Sell or transfer amount, below 2**63.
        amount1 (int): Buy amount (0 for transfers), below 2**63.
        nonce (int): Below 2**31.
        expiration_timestamp (int): Hours since the epoch, below 2**22.
        names (tuple[str, ...] | None): Field names reported in range errors.

    Returns:
        int: The packed word.
    """
    values = (SpotInstruction(instruction), vault0, vault1, amount0, amount1, nonce, expiration_timestamp)
    names = names or tuple(name for name, _ in SPOT_LAYOUT)
    return pack_fields(
        [(name, int(value), bits) for name, value, (_, bits) in zip(names, values, SPOT_LAYOUT)]
    )


def serialize_message(
    instruction: SpotInstruction | int,
    vault0: int,
    vault1: int,
    amount0: int,
    amount1: int,
    nonce: int,
    expiration_timestamp: int,
) -> HexStr:
    return to_hex(format_message(instruction, vault0, vault1, amount0, amount1, nonce, expiration_timestamp))


def deserialize_message(serialized: int | str) -> SpotMessage:
    """Split a packed spot word back into its fields."""
    fields = unpack_fields(to_int(serialized), SPOT_LAYOUT)
    fields["instruction"] = SpotInstruction(fields["instruction"])
    return SpotMessage(**fields)


def parse_token_input(token: Asset | int | str, field: str = "token") -> int:
    """
    Field element standing for a token in a spot message.

    An asset description becomes its asset type, a compressed public key
    (02/03 followed by 64 hex digits) becomes its x coordinate, and
    anything else is read as a hex field element.
    """
    if isinstance(token, Asset):
        return get_asset_type_int(token)
    if isinstance(token, str) and is_compressed_public_key(token):
        return to_field_element("0x" + token[-64:], field)
    return to_field_element(token, field)


def checked_hash(value: int) -> HexStr:
    """Message hashes must stay signable."""
    assert_in_range(value, 0, MAX_ECDSA_VAL, "msgHash", SignatureRangeError)
    return to_hex(value)


def get_limit_order_msg_hash(
    vault_sell: int,
    vault_buy: int,
    amount_sell: int,
    amount_buy: int,
    token_sell: Asset | int | str,
    token_buy: Asset | int | str,
    nonce: int,
    expiration_timestamp: int,
) -> HexStr:
    """
    Hash of a spot limit order: H(H(token_sell, token_buy), packed).

    Returns:
        HexStr: The message hash.
    """
    packed = format_message(
        SpotInstruction.LIMIT_ORDER,
        vault_sell,
        vault_buy,
        amount_sell,
        amount_buy,
        nonce,
        expiration_timestamp,
        names=("instruction", "vault_sell", "vault_buy", "amount_sell", "amount_buy", "nonce", "expiration_timestamp"),
    )
    sell = parse_token_input(token_sell, "token_sell")
    buy = parse_token_input(token_buy, "token_buy")
    return checked_hash(hash_message([[sell, buy], packed]))


def get_transfer_msg_hash(
    amount: int,
    nonce: int,
    sender_vault_id: int,
    token: Asset | int | str,
    receiver_vault_id: int,
    receiver_public_key: int | str,
    expiration_timestamp: int,
    condition: int | str | None = None,
) -> HexStr:
    """
    Hash of a spot transfer, optionally conditional.

    Plain transfers hash H(H(token, receiver_key), packed); a condition is
    hashed in before the packed word and switches the instruction tag.

    Returns:
        HexStr: The message hash.
    """
    instruction = SpotInstruction.TRANSFER if condition is None else SpotInstruction.CONDITIONAL_TRANSFER
    packed = format_message(
        instruction,
        sender_vault_id,
        receiver_vault_id,
        amount,
        0,
        nonce,
        expiration_timestamp,
        names=("instruction", "sender_vault_id", "receiver_vault_id", "amount", "amount1", "nonce", "expiration_timestamp"),
    )
    head = [parse_token_input(token), parse_token_input(receiver_public_key, "receiver_public_key")]
    if condition is not None:
        head = [head, to_field_element(condition, "condition")]
    return checked_hash(hash_message([head, packed]))


def get_conditional_transfer_msg_hash(
    amount: int,
    nonce: int,
    sender_vault_id: int,
    token: Asset | int | str,
    receiver_vault_id: int,
    receiver_public_key: int | str,
    expiration_timestamp: int,
    condition: int | str,
) -> HexStr:
    """
    Hash of a spot conditional transfer. The condition is required.

    Raises:
        ValueError: If condition is None.
    """
    if condition is None:
        raise ValueError("conditional transfer requires a condition")
    return get_transfer_msg_hash(
        amount,
        nonce,
        sender_vault_id,
        token,
        receiver_vault_id,
        receiver_public_key,
        expiration_timestamp,
        condition=condition,
    )


def get_full_withdrawal_msg_hash(*args, **kwargs) -> HexStr:
    raise UnsupportedOperation("full withdrawal message hashing")
