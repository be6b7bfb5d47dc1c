# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
"""
Contract calls handed to an ABI encoder as (name, values) pairs. Values are
range checked here; nothing is encoded.
"""
from typing import NamedTuple

from starkex.constants import ASSET_TYPE_BITS, PRIME, SPOT_VAULT_BITS
from starkex.errors import MalformedHex
from starkex.field import assert_bits, assert_in_range, strip_hex, to_int


class ContractCall(NamedTuple):
    name: str
    values: list


def _stark_key(value: int | str) -> int:
    return assert_in_range(to_int(value), 1, PRIME, "stark_key")


def _vault(value: int) -> int:
    return assert_bits(value, SPOT_VAULT_BITS, "vault_id")


def _asset(value: int | str, field: str = "asset_type") -> int:
    return assert_bits(to_int(value), ASSET_TYPE_BITS, field)


def _uint(value: int, field: str) -> int:
    return assert_bits(value, 256, field)


def _address(value: str, field: str) -> str:
    if len(strip_hex(value)) != 40:
        raise MalformedHex(value, f"{field} must be a 20 byte address")
    return value


def register_user(eth_key: str, stark_key: int | str, operator_signature: str) -> ContractCall:
    strip_hex(operator_signature)
    return ContractCall(
        "registerUser", [_address(eth_key, "eth_key"), _stark_key(stark_key), operator_signature]
    )


def deposit(
    stark_key: int | str, asset_type: int | str, vault_id: int, quantized_amount: int | None = None
) -> ContractCall:
    """Deposit call; ETH deposits carry no amount since the value is attached."""
    values = [_stark_key(stark_key), _asset(asset_type), _vault(vault_id)]
    if quantized_amount is not None:
        values.append(_uint(quantized_amount, "quantized_amount"))
    return ContractCall("deposit", values)


def deposit_cancel(stark_key: int | str, asset_id: int | str, vault_id: int) -> ContractCall:
    return ContractCall("depositCancel", [_stark_key(stark_key), _uint(to_int(asset_id), "asset_id"), _vault(vault_id)])


def deposit_reclaim(stark_key: int | str, asset_type: int | str, vault_id: int) -> ContractCall:
    return ContractCall("depositReclaim", [_stark_key(stark_key), _asset(asset_type), _vault(vault_id)])


def withdraw(stark_key: int | str, asset_type: int | str) -> ContractCall:
    return ContractCall("withdraw", [_stark_key(stark_key), _asset(asset_type)])


def withdraw_to(stark_key: int | str, asset_type: int | str, recipient: str) -> ContractCall:
    return ContractCall(
        "withdrawTo", [_stark_key(stark_key), _asset(asset_type), _address(recipient, "recipient")]
    )


def full_withdrawal_request(stark_key: int | str, vault_id: int) -> ContractCall:
    return ContractCall("fullWithdrawalRequest", [_stark_key(stark_key), _vault(vault_id)])


def freeze_request(stark_key: int | str, vault_id: int) -> ContractCall:
    return ContractCall("freezeRequest", [_stark_key(stark_key), _vault(vault_id)])


def escape(stark_key: int | str, vault_id: int, asset_id: int | str, quantized_amount: int) -> ContractCall:
    return ContractCall(
        "escape",
        [
            _stark_key(stark_key),
            _vault(vault_id),
            _uint(to_int(asset_id), "asset_id"),
            _uint(quantized_amount, "quantized_amount"),
        ],
    )


def deposit_nft(stark_key: int | str, asset_type: int | str, vault_id: int, token_id: int) -> ContractCall:
    return ContractCall(
        "depositNft", [_stark_key(stark_key), _asset(asset_type), _vault(vault_id), _uint(token_id, "token_id")]
    )


def withdraw_nft(stark_key: int | str, asset_type: int | str, token_id: int) -> ContractCall:
    return ContractCall("withdrawNft", [_stark_key(stark_key), _asset(asset_type), _uint(token_id, "token_id")])
