# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
from dataclasses import dataclass
from enum import Enum

from eth_typing import HexStr
from eth_utils import keccak

from starkex.constants import (
    ASSET_TYPE_BITS,
    ERC20_SELECTOR_SIGNATURE,
    ERC721_SELECTOR_SIGNATURE,
    ETH_SELECTOR_SIGNATURE,
    MINTABLE_ASSET_ID_BITS,
    MINTABLE_ASSET_ID_FLAG,
    MINTABLE_ASSET_ID_PREFIX,
    MINTABLE_ERC20_SELECTOR_SIGNATURE,
    MINTABLE_ERC721_SELECTOR_SIGNATURE,
    NFT_ASSET_ID_PREFIX,
)
from starkex.errors import MalformedHex, UnknownAssetKind, UnsupportedOperation
from starkex.field import assert_bits, assert_in_range, pad_hex, strip_hex, to_bytes32, to_hex

MASK_250 = 2**ASSET_TYPE_BITS - 1
MASK_240 = 2**MINTABLE_ASSET_ID_BITS - 1


class AssetKind(Enum):
    ETH = "ETH"
    ERC20 = "ERC20"
    ERC721 = "ERC721"
    MINTABLE_ERC20 = "MINTABLE_ERC20"
    MINTABLE_ERC721 = "MINTABLE_ERC721"
    SYNTHETIC = "SYNTHETIC"

    @classmethod
    def parse(cls, kind: "str | AssetKind") -> "AssetKind":
        """Map an external tag such as "erc20" or "SYNTH" onto a kind."""
        if isinstance(kind, cls):
            return kind
        if not isinstance(kind, str):
            raise UnknownAssetKind(kind)
        tag = kind.strip().upper()
        if tag == "SYNTH":
            tag = "SYNTHETIC"
        try:
            return cls(tag)
        except ValueError:
            raise UnknownAssetKind(kind) from None

    @property
    def selector_signature(self) -> str:
        if self is AssetKind.SYNTHETIC:
            raise UnsupportedOperation("selector of a synthetic asset")
        return {
            AssetKind.ETH: ETH_SELECTOR_SIGNATURE,
            AssetKind.ERC20: ERC20_SELECTOR_SIGNATURE,
            AssetKind.ERC721: ERC721_SELECTOR_SIGNATURE,
            AssetKind.MINTABLE_ERC20: MINTABLE_ERC20_SELECTOR_SIGNATURE,
            AssetKind.MINTABLE_ERC721: MINTABLE_ERC721_SELECTOR_SIGNATURE,
        }[self]

    @property
    def is_nft(self) -> bool:
        return self in (AssetKind.ERC721, AssetKind.MINTABLE_ERC721)

    @property
    def is_mintable(self) -> bool:
        return self in (AssetKind.MINTABLE_ERC20, AssetKind.MINTABLE_ERC721)


@dataclass(frozen=True)
class Asset:
    """
    Description of a tradable asset.

    ETH needs only a quantum, ERC20 a token address and quantum, ERC721 a
    token address and token id, the mintable kinds additionally a blob,
    and synthetic assets a symbol and resolution.
    """

    kind: AssetKind
    quantum: int = 1
    token_address: str | None = None
    token_id: int | None = None
    blob: str | None = None
    symbol: str | None = None
    resolution: int | None = None

    def __post_init__(self):
        object.__setattr__(self, "kind", AssetKind.parse(self.kind))
        assert_in_range(self.quantum, 1, 2**256, "quantum")
        if self.token_id is not None:
            assert_bits(self.token_id, 256, "token_id")
        if self.kind not in (AssetKind.ETH, AssetKind.SYNTHETIC) and self.token_address is None:
            raise ValueError(f"{self.kind.value} asset requires a token address")
        if self.kind is AssetKind.ERC721 and self.token_id is None:
            raise ValueError("ERC721 asset requires a token id")
        if self.kind is AssetKind.SYNTHETIC and (self.symbol is None or self.resolution is None):
            raise ValueError("synthetic asset requires a symbol and resolution")

    @classmethod
    def from_dict(cls, data: dict) -> "Asset":
        """
        Build an asset from its wire form {"type": ..., "data": {...}}, where
        data may carry quantum, tokenAddress, tokenId, blob, symbol and
        resolution. Numbers may be given as decimal strings.
        """
        kind = AssetKind.parse(data.get("type"))
        fields = data.get("data") or {}

        def number(key: str) -> int | None:
            value = fields.get(key)
            return None if value is None else int(value)

        return cls(
            kind=kind,
            quantum=1 if fields.get("quantum") is None else number("quantum"),
            token_address=fields.get("tokenAddress"),
            token_id=number("tokenId"),
            blob=fields.get("blob"),
            symbol=fields.get("symbol"),
            resolution=number("resolution"),
        )


def get_asset_selector(kind: AssetKind | str) -> HexStr:
    """First four bytes of keccak256 of the asset kind's solidity signature."""
    return HexStr("0x" + keccak(text=AssetKind.parse(kind).selector_signature)[:4].hex())


def _address_bytes(address: str) -> bytes:
    digits = strip_hex(address)
    if len(digits) > 40:
        raise MalformedHex(address, "address longer than 20 bytes")
    return bytes.fromhex(digits.rjust(40, "0"))


def get_asset_info(asset: Asset) -> HexStr:
    """
    The asset info blob: selector, followed by the token address padded to
    32 bytes for token kinds.

    Args:
        asset (Asset): The asset.

    Returns:
        HexStr: 0x-prefixed asset info.
    """
    selector = bytes.fromhex(strip_hex(get_asset_selector(asset.kind)))
    if asset.kind is AssetKind.ETH:
        return HexStr("0x" + selector.hex())
    return HexStr("0x" + (selector + _address_bytes(asset.token_address).rjust(32, b"\x00")).hex())


def get_address_from_asset_info(asset_info: str) -> HexStr:
    """
    Token address carried in a token asset info.

    Args:
        asset_info (str): Selector followed by the 32 byte padded address.

    Returns:
        HexStr: The lowercase 0x-prefixed 20 byte address.

    Raises:
        MalformedHex: If the info has the wrong length or the padding is not zero.
    """
    digits = strip_hex(asset_info)
    if len(digits) != 8 + 64 or digits[8:32].strip("0"):
        raise MalformedHex(asset_info, "asset info does not carry a token address")
    return HexStr("0x" + digits[-40:])


def calculate_asset_type(asset_info: str, quantum: int = 1) -> int:
    """
    keccak256(asset_info || uint256(quantum)) masked to 250 bits.

    Args:
        asset_info (str): Hex asset info, see get_asset_info.
        quantum (int): Quantization unit, in [1, 2**256).

    Returns:
        int: The asset type.

    Raises:
        RangeError: If the quantum is out of range.
    """
    assert_in_range(quantum, 1, 2**256, "quantum")
    data = bytes.fromhex(strip_hex(asset_info)) + to_bytes32(quantum)
    return int.from_bytes(keccak(data), "big") & MASK_250


def _asset_type(asset: Asset) -> int:
    if asset.kind is AssetKind.SYNTHETIC:
        raise UnsupportedOperation("asset type of a synthetic asset")
    # nft and mintable erc721 assets always have quantum 1
    quantum = 1 if asset.kind.is_nft else asset.quantum
    return calculate_asset_type(get_asset_info(asset), quantum)


def get_asset_type(asset: Asset) -> HexStr:
    return pad_hex(_asset_type(asset))


def get_asset_type_int(asset: Asset) -> int:
    return _asset_type(asset)


def get_mintable_asset_id(asset_type: int, blob: str) -> int:
    """keccak256("MINTABLE:" || asset_type || keccak256(blob)), low 240 bits with the mintable flag set."""
    data = MINTABLE_ASSET_ID_PREFIX + to_bytes32(asset_type) + keccak(bytes.fromhex(strip_hex(blob)))
    return (int.from_bytes(keccak(data), "big") & MASK_240) | MINTABLE_ASSET_ID_FLAG


def get_nft_asset_id(asset_type: int, token_id: int) -> int:
    """
    keccak256("NFT:" || asset_type || token_id) masked to 250 bits.

    Raises:
        RangeError: If the token id does not fit in 256 bits.
    """
    assert_bits(token_id, 256, "token_id")
    data = NFT_ASSET_ID_PREFIX + to_bytes32(asset_type) + to_bytes32(token_id)
    return int.from_bytes(keccak(data), "big") & MASK_250


def get_synthetic_asset_id(symbol: str, resolution: int) -> HexStr:
    """UTF-8 bytes of "<symbol>-<resolution>" read as a big endian integer."""
    return to_hex(int.from_bytes(f"{symbol}-{resolution}".encode("utf-8"), "big"))


def get_asset_id(asset: Asset) -> HexStr:
    """
    The on chain id of an asset.

    Fungible kinds use their asset type, ERC721 hashes the type with the
    token id, mintable kinds hash the type with the blob, and synthetic
    assets encode their symbol and resolution directly.

    Args:
        asset (Asset): The asset.

    Returns:
        HexStr: The asset id.
    """
    if asset.kind is AssetKind.SYNTHETIC:
        return get_synthetic_asset_id(asset.symbol, asset.resolution)
    asset_type = _asset_type(asset)
    if asset.kind is AssetKind.ERC721:
        return pad_hex(get_nft_asset_id(asset_type, asset.token_id))
    if asset.kind.is_mintable:
        if asset.blob is None:
            raise ValueError("mintable asset requires a blob")
        return pad_hex(get_mintable_asset_id(asset_type, asset.blob))
    return pad_hex(asset_type)


def get_eth_asset_type(quantum: int = 1) -> HexStr:
    return get_asset_type(Asset(AssetKind.ETH, quantum=quantum))


def get_erc20_asset_type(token_address: str, quantum: int = 1) -> HexStr:
    return get_asset_type(Asset(AssetKind.ERC20, quantum=quantum, token_address=token_address))


def get_erc721_asset_type(token_address: str) -> HexStr:
    return get_asset_type(Asset(AssetKind.ERC721, token_address=token_address, token_id=0))


def get_mintable_erc20_asset_type(token_address: str, quantum: int = 1) -> HexStr:
    return get_asset_type(Asset(AssetKind.MINTABLE_ERC20, quantum=quantum, token_address=token_address))


def get_mintable_erc721_asset_type(token_address: str) -> HexStr:
    return get_asset_type(Asset(AssetKind.MINTABLE_ERC721, token_address=token_address))


def get_eth_asset_id(quantum: int = 1) -> HexStr:
    return get_asset_id(Asset(AssetKind.ETH, quantum=quantum))


def get_erc20_asset_id(token_address: str, quantum: int = 1) -> HexStr:
    return get_asset_id(Asset(AssetKind.ERC20, quantum=quantum, token_address=token_address))


def get_erc721_asset_id(token_address: str, token_id: int) -> HexStr:
    return get_asset_id(Asset(AssetKind.ERC721, token_address=token_address, token_id=token_id))


def get_mintable_erc721_asset_id(token_address: str, blob: str) -> HexStr:
    return get_asset_id(Asset(AssetKind.MINTABLE_ERC721, token_address=token_address, blob=blob))


def quantize_amount(amount: int, quantum: int) -> int:
    """Number of whole quanta in amount, rounding down."""
    assert_in_range(quantum, 1, 2**256, "quantum")
    return amount // quantum
