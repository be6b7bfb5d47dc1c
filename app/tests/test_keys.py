# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import pytest
from conftest import MNEMONIC, PRIVATE_KEY, PUBLIC_X, PUBLIC_Y, ZERO_ADDRESS
from starkex.constants import EC_ORDER
from starkex.keys import (
    get_account_path,
    grind_key,
    hash_path_component,
    key_pair_from_path,
    private_key_from_path,
    private_key_from_signature,
)

DEPLOY_MNEMONIC = (
    "range mountain blast problem vibrant void vivid doctor cluster enough "
    "melody salt layer language laptop boat major space monkey unit glimpse "
    "pause change vibrant"
)
DEPLOY_ADDRESS = "0xa4864d977b944315389d1765ffa7e66F74ee8cd7"


def test_account_path():
    path = get_account_path("starkex", "starkexdvf", ZERO_ADDRESS, "0")
    assert path == "m/2645'/579218131'/1393043894'/0'/0'/0"


def test_account_path_with_address():
    path = get_account_path("starkex", "starkdeployement", DEPLOY_ADDRESS, 7)
    assert path == "m/2645'/579218131'/891216374'/1961790679'/2135936222'/7"


def test_path_component_is_31_bits():
    assert hash_path_component("starkex") == 579218131
    assert hash_path_component("starkexdvf") < 2**31


def test_invalid_path_is_rejected():
    with pytest.raises(ValueError):
        private_key_from_path(MNEMONIC, "2645'/1")
    with pytest.raises(ValueError):
        private_key_from_path(MNEMONIC, "m/abc")


def test_invalid_mnemonic_is_rejected():
    path = get_account_path("starkex", "starkexdvf", ZERO_ADDRESS, 0)
    # last word swapped, so the checksum no longer matches
    words = MNEMONIC.split()[:-1] + ["abandon"]
    with pytest.raises(ValueError):
        private_key_from_path(" ".join(words), path)
    with pytest.raises(ValueError):
        private_key_from_path("not a mnemonic", path)


def test_passphrase_changes_key():
    path = get_account_path("starkex", "starkexdvf", ZERO_ADDRESS, 0)
    assert private_key_from_path(MNEMONIC, path, "passphrase") != PRIVATE_KEY


def test_grind_key_vector():
    seed = bytes.fromhex("86F3E7293141F20A8BAFF320E8EE4ACCB9D4A4BF2B4D295E8CEE784DB46E0519")
    assert grind_key(seed) == PRIVATE_KEY


def test_grind_key_stays_below_limit():
    assert 0 <= grind_key(b"\x00" * 32) < EC_ORDER
    assert grind_key(b"\x01", 1000) < 1000


def test_key_pair_from_path():
    path = get_account_path("starkex", "starkexdvf", ZERO_ADDRESS, 0)
    key_pair = key_pair_from_path(MNEMONIC, path)
    assert key_pair.private_key == PRIVATE_KEY
    assert int(key_pair.public_key[0]) == PUBLIC_X
    assert int(key_pair.public_key[1]) == PUBLIC_Y


@pytest.mark.parametrize(
    "index, expected",
    [
        (0, 0x06CF0A8BF113352EB863157A45C5E5567ABB34F8D32CDDAFD2C22AA803F4892C),
        (7, 0x0341751BDC42841DA35AB74D13A1372C1F0250617E8A2EF96034D9F46E6847AF),
        (598, 0x041A4D591A868353D28B7947EB132AA4D00C4A022743689FFD20A3628D6CA28C),
    ],
)
def test_private_keys_by_index(index, expected):
    path = get_account_path("starkex", "starkdeployement", DEPLOY_ADDRESS, index)
    assert private_key_from_path(DEPLOY_MNEMONIC, path) == expected


def test_private_key_from_signature():
    signature = (
        "0xfb7ae61d6b2c34de46d17830eff6bc73888f560fa4f8ab0e0de50a6f0f8a131f"
        "43b69300b96b8e2bcd42efd172a6d531ba2b39a765596fe7e1b39cc37114c1ad1b"
    )
    assert private_key_from_signature(signature) == 0x11C41410C6AA7C5EDB706103E328BD088D3F2BECDD741137E4D29B22C1C45E2


if __name__ == "__main__":
    pytest.main()
