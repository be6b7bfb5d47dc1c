# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import logging
from dataclasses import dataclass
from typing import Any, Protocol

from eth_typing import HexStr

from starkex.asset import Asset
from starkex.constants import DEFAULT_ACCOUNT_MAPPING_KEY
from starkex.errors import UnsupportedOperation
from starkex.keys import get_account_path, key_pair_from_path, private_key_from_signature
from starkex.messages import get_limit_order_msg_hash, get_transfer_msg_hash
from starkex.perpetual import (
    get_perpetual_limit_order_msg_hash,
    get_perpetual_transfer_msg_hash,
    get_perpetual_withdrawal_msg_hash,
)
from starkex.signature import KeyPair, serialize_signature, sign

logger = logging.getLogger(__name__)


class KeyStore(Protocol):
    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Process local KeyStore."""

    def __init__(self):
        self._data: dict[str, Any] = {}

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


@dataclass(frozen=True)
class VaultRef:
    stark_public_key: str
    vault_id: int


@dataclass(frozen=True)
class OrderSide:
    token: Asset | str
    vault_id: int
    quantized_amount: int


class StarkWallet:
    """
    Holds a mnemonic or a raw private key and signs stark messages.

    Key pairs derived from the mnemonic are remembered in the store as a
    path to private key mapping, so a path is only ground once. A wallet
    built from a private key uses that key for every path.
    """

    def __init__(
        self,
        mnemonic: str | None = None,
        private_key: int | str | None = None,
        store: KeyStore | None = None,
        account_mapping_key: str = DEFAULT_ACCOUNT_MAPPING_KEY,
    ):
        if (mnemonic is None) == (private_key is None):
            raise ValueError("provide exactly one of mnemonic or private_key")
        self.mnemonic = mnemonic
        self._private_key = private_key
        self.store = store if store is not None else MemoryStore()
        self.account_mapping_key = account_mapping_key
        self._active: KeyPair | None = None

    @classmethod
    def from_private_key(
        cls,
        private_key: int | str,
        store: KeyStore | None = None,
        account_mapping_key: str = DEFAULT_ACCOUNT_MAPPING_KEY,
    ) -> "StarkWallet":
        return cls(private_key=private_key, store=store, account_mapping_key=account_mapping_key)

    @classmethod
    def from_signature(
        cls,
        signature: str,
        store: KeyStore | None = None,
        account_mapping_key: str = DEFAULT_ACCOUNT_MAPPING_KEY,
    ) -> "StarkWallet":
        """Wallet whose key is ground from an ethereum signature's r value."""
        return cls.from_private_key(private_key_from_signature(signature), store, account_mapping_key)

    def _account_mapping(self) -> dict[str, str]:
        return dict(self.store.get(self.account_mapping_key) or {})

    def _remember(self, path: str, key_pair: KeyPair) -> KeyPair:
        mapping = self._account_mapping()
        mapping[path] = key_pair.private_hex
        self.store.set(self.account_mapping_key, mapping)
        self._active = key_pair
        return key_pair

    def key_pair(self, path: str | None = None) -> KeyPair:
        """
        Key pair for a derivation path; without a path, the active one.

        Args:
            path (str | None): Derivation path, see get_account_path.

        Returns:
            KeyPair: The key pair, which also becomes the active one.
        """
        if self._private_key is not None:
            key_pair = KeyPair.from_private(self._private_key)
            return self._remember(path, key_pair) if path else key_pair
        if path is None:
            return self.get_active_key_pair()
        match = self._account_mapping().get(path)
        if match is not None:
            logger.debug("key pair for %s found in store", path)
            self._active = KeyPair.from_private(match)
            return self._active
        logger.debug("deriving key pair for %s", path)
        return self._remember(path, key_pair_from_path(self.mnemonic, path))

    def get_active_key_pair(self) -> KeyPair:
        if self._active is not None:
            return self._active
        if self._private_key is not None:
            self._active = KeyPair.from_private(self._private_key)
            return self._active
        mapping = self._account_mapping()
        if not mapping:
            raise LookupError("no active stark key pair, derive one from a path first")
        self._active = KeyPair.from_private(next(iter(mapping.values())))
        return self._active

    def account(self, layer: str, application: str, eth_address: str, index: int | str = 0) -> HexStr:
        """Stark key of the account at (layer, application, eth_address, index)."""
        return self.get_stark_key(get_account_path(layer, application, eth_address, index))

    def get_stark_key(self, path: str | None = None) -> HexStr:
        return self.key_pair(path).stark_key

    def get_stark_public_key(self, path: str | None = None) -> str:
        return self.key_pair(path).stark_public_key

    def sign_message(self, msg_hash: int | str, path: str | None = None) -> HexStr:
        return serialize_signature(sign(self.key_pair(path), msg_hash))

    def transfer(
        self,
        sender: VaultRef,
        receiver: VaultRef,
        token: Asset | str,
        quantized_amount: int,
        nonce: int,
        expiration_timestamp: int,
        condition: int | str | None = None,
    ) -> HexStr:
        """
        Sign a spot transfer from the active key's vault.

        Returns:
            HexStr: The serialized stark signature.
        """
        msg_hash = get_transfer_msg_hash(
            quantized_amount,
            nonce,
            sender.vault_id,
            token,
            receiver.vault_id,
            receiver.stark_public_key,
            expiration_timestamp,
            condition,
        )
        return self.sign_message(msg_hash)

    def create_order(self, sell: OrderSide, buy: OrderSide, nonce: int, expiration_timestamp: int) -> HexStr:
        msg_hash = get_limit_order_msg_hash(
            sell.vault_id,
            buy.vault_id,
            sell.quantized_amount,
            buy.quantized_amount,
            sell.token,
            buy.token,
            nonce,
            expiration_timestamp,
        )
        return self.sign_message(msg_hash)

    def perpetual_limit_order(self, **order) -> HexStr:
        return self.sign_message(get_perpetual_limit_order_msg_hash(**order))

    def perpetual_transfer(self, **transfer) -> HexStr:
        return self.sign_message(get_perpetual_transfer_msg_hash(**transfer))

    def perpetual_withdrawal(self, **withdrawal) -> HexStr:
        return self.sign_message(get_perpetual_withdrawal_msg_hash(**withdrawal))

    def full_withdrawal_request(self, vault_id: int) -> HexStr:
        raise UnsupportedOperation("signing a full withdrawal request")
