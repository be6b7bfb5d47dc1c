# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import logging

from starkex.asset import Asset
from starkex.constants import DEFAULT_APPLICATION, DEFAULT_LAYER
from starkex.files import load_request, save_json
from starkex.keys import get_account_path, key_pair_from_path
from starkex.messages import (
    get_conditional_transfer_msg_hash,
    get_limit_order_msg_hash,
    get_transfer_msg_hash,
)
from starkex.perpetual import (
    get_perpetual_conditional_transfer_msg_hash,
    get_perpetual_limit_order_msg_hash,
    get_perpetual_transfer_msg_hash,
    get_perpetual_withdrawal_msg_hash,
)
from starkex.signature import serialize_signature, sign, verify

logger = logging.getLogger(__name__)

MESSAGE_KINDS = {
    "limit_order": get_limit_order_msg_hash,
    "transfer": get_transfer_msg_hash,
    "conditional_transfer": get_conditional_transfer_msg_hash,
    "perpetual_limit_order": get_perpetual_limit_order_msg_hash,
    "perpetual_transfer": get_perpetual_transfer_msg_hash,
    "perpetual_conditional_transfer": get_perpetual_conditional_transfer_msg_hash,
    "perpetual_withdrawal": get_perpetual_withdrawal_msg_hash,
}

# spot message parameters that may carry an asset description
TOKEN_PARAMS = ("token", "token_sell", "token_buy")


def derive_account(request_path: str, output_path: str) -> dict:
    """
    Derive a stark account from a mnemonic and write its public identity.

    The request holds mnemonic and optionally layer, application,
    eth_address and index. The artifact holds path, stark_key and
    stark_public_key; the private key is never written.

    Args:
        request_path: JSON request file.
        output_path: JSON artifact file.

    Returns:
        dict: The artifact.
    """
    request = load_request(request_path, ("mnemonic",))
    path = get_account_path(
        request.get("layer", DEFAULT_LAYER),
        request.get("application", DEFAULT_APPLICATION),
        request.get("eth_address", "0x0000000000000000000000000000000000000000"),
        request.get("index", 0),
    )
    key_pair = key_pair_from_path(request["mnemonic"], path)
    artifact = {
        "path": path,
        "stark_key": key_pair.stark_key,
        "stark_public_key": key_pair.stark_public_key,
    }
    save_json(output_path, artifact)
    return artifact


def hash_message(request_path: str, output_path: str) -> dict:
    """
    Hash a message described by {"kind": ..., "params": {...}}.

    kind is one of MESSAGE_KINDS and params are the keyword arguments of the
    matching hash function. Spot tokens may be given as asset descriptions
    ({"type": ..., "data": {...}}).
    """
    request = load_request(request_path, ("kind", "params"))
    kind = request["kind"]
    if kind not in MESSAGE_KINDS:
        raise ValueError(f"unknown message kind {kind!r}")
    params = dict(request["params"])
    for name in TOKEN_PARAMS:
        if isinstance(params.get(name), dict):
            params[name] = Asset.from_dict(params[name])
    try:
        msg_hash = MESSAGE_KINDS[kind](**params)
    except TypeError as e:
        raise ValueError(f"invalid params for {kind}: {e}") from e
    logger.info("hashed %s message", kind)
    artifact = {"kind": kind, "msg_hash": msg_hash}
    save_json(output_path, artifact)
    return artifact


def sign_hash(request_path: str, output_path: str) -> dict:
    """Sign {"private_key": ..., "msg_hash": ...} and write the signature."""
    request = load_request(request_path, ("private_key", "msg_hash"))
    signature = sign(request["private_key"], request["msg_hash"])
    artifact = {
        "msg_hash": request["msg_hash"],
        "r": hex(signature.r),
        "s": hex(signature.s),
        "recovery_param": signature.recovery_param,
        "signature": serialize_signature(signature),
    }
    save_json(output_path, artifact)
    return artifact


def verify_signature(request_path: str, output_path: str) -> dict:
    """Check {"public_key": ..., "msg_hash": ..., "signature": ...}."""
    request = load_request(request_path, ("public_key", "msg_hash", "signature"))
    valid = verify(request["public_key"], request["msg_hash"], request["signature"])
    artifact = {"msg_hash": request["msg_hash"], "valid": valid}
    save_json(output_path, artifact)
    return artifact
