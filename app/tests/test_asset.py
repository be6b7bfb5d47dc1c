import pytest
from starkex.asset import (
    Asset,
    AssetKind,
    calculate_asset_type,
    get_address_from_asset_info,
    get_asset_id,
    get_asset_info,
    get_asset_selector,
    get_asset_type,
    get_erc20_asset_id,
    get_erc20_asset_type,
    get_erc721_asset_id,
    get_erc721_asset_type,
    get_eth_asset_id,
    get_eth_asset_type,
    get_mintable_erc20_asset_type,
    get_mintable_erc721_asset_id,
    get_mintable_erc721_asset_type,
    get_nft_asset_id,
    get_synthetic_asset_id,
    quantize_amount,
)
from starkex.errors import MalformedHex, RangeError, UnknownAssetKind, UnsupportedOperation

USDC = "0x0d9c8723b343a8368bebe0b5e89273ff8d712e3c"
ROPSTEN_ERC721 = "0x6B5E013ba22F08ED46d33Fa6d483Fd60e001262e"


@pytest.mark.parametrize(
    "kind, selector",
    [
        ("ETH", "0x8322fff2"),
        ("ERC20", "0xf47261b0"),
        ("ERC721", "0x02571792"),
        ("MINTABLE_ERC20", "0x68646e2d"),
        ("MINTABLE_ERC721", "0xb8b86672"),
    ],
)
def test_selectors(kind, selector):
    assert get_asset_selector(kind) == selector


def test_asset_kind_parse():
    assert AssetKind.parse("erc20") is AssetKind.ERC20
    assert AssetKind.parse("SYNTH") is AssetKind.SYNTHETIC
    with pytest.raises(UnknownAssetKind):
        AssetKind.parse("ERC1155")
    with pytest.raises(UnknownAssetKind):
        Asset.from_dict({"type": "BOND", "data": {}})


def test_synthetic_has_no_selector():
    with pytest.raises(UnsupportedOperation):
        get_asset_selector("SYNTH")


def test_eth_asset_type():
    assert get_eth_asset_type(1) == "0x01142460171646987f20c714eda4b92812b22b811f56f27130937c267e29bd9e"
    assert get_eth_asset_type(10) == "0x03c06b40679089fc2f488b867577bceadd20ab3205a25c02a546cc3d18cd6f21"


def test_fungible_asset_id_is_asset_type():
    assert get_eth_asset_id(10) == get_eth_asset_type(10)
    assert get_erc20_asset_id(USDC, 1000) == get_erc20_asset_type(USDC, 1000)


def test_erc20_asset_type():
    asset = Asset.from_dict(
        {"type": "ERC20", "data": {"quantum": "10000", "tokenAddress": "0xdAC17F958D2ee523a2206206994597C13D831ec7"}}
    )
    assert get_asset_type(asset) == "0x0352386d5b7c781d47ecd404765307d74edc4d43b0490b8e03c71ac7a7429653"
    assert get_asset_id(asset) == get_asset_type(asset)


def test_erc20_asset_info_and_type():
    asset = Asset(AssetKind.ERC20, quantum=1000, token_address=USDC)
    info = get_asset_info(asset)
    assert info == "0xf47261b00000000000000000000000000d9c8723b343a8368bebe0b5e89273ff8d712e3c"
    assert get_address_from_asset_info(info) == USDC
    assert calculate_asset_type(info, 1000) == 0x4B744EDA38322858D42BA43046BADD5BD91E94844C0B7C47A4975D8B5B77B5
    assert get_erc20_asset_type(USDC, 1000) == "0x004b744eda38322858d42ba43046badd5bd91e94844c0b7c47a4975d8b5b77b5"


def test_address_from_eth_asset_info_fails():
    with pytest.raises(MalformedHex):
        get_address_from_asset_info("0x8322fff2")


def test_erc721_asset_type_and_id():
    assert get_erc721_asset_type(ROPSTEN_ERC721) == (
        "0x01f6d8eecef9a4b7f7bf5c92dfdfcc9892f114ae611b4783ba67dc1b2adce36a"
    )
    assert get_erc721_asset_id("0xB18ed4768F87b0fFAb83408014f1caF066b91380", 4100) == (
        "0x02b0ff0c09505bc40f9d1659becf16855a7b2298b010f8a54f4b05325885b40c"
    )


def test_mintable_asset_types():
    assert get_mintable_erc20_asset_type(USDC, 1000) == (
        "0x00471cdc2c5357c3a06385c69e3fb7f8b8412368d7641f81890bc62e4f14ea64"
    )
    assert get_mintable_erc721_asset_type(ROPSTEN_ERC721) == (
        "0x012388a6c5c9703afc0d1bc876dd3d29f373950ad4f02a0ac0ab10ab7d9c48e5"
    )


def test_mintable_asset_id():
    asset_id = get_mintable_erc721_asset_id(ROPSTEN_ERC721, "0x00")
    assert asset_id == "0x0400082c617b3f734bbf7bd4b2affd6edba18065bfa203ca1cebf74d5c4e6c75"
    assert int(asset_id, 16) >> 250 == 1


def test_synthetic_asset_id():
    assert get_synthetic_asset_id("BTC", 10) == "0x4254432d3130"
    asset = Asset.from_dict({"type": "SYNTH", "data": {"symbol": "BTC", "resolution": "10"}})
    assert get_asset_id(asset) == "0x4254432d3130"
    with pytest.raises(UnsupportedOperation):
        get_asset_type(asset)


def test_asset_validation():
    with pytest.raises(ValueError):
        Asset(AssetKind.ERC20, quantum=1)
    with pytest.raises(ValueError):
        Asset(AssetKind.ERC721, token_address=USDC)
    with pytest.raises(ValueError):
        Asset(AssetKind.ETH, quantum=0)


def test_quantize_amount():
    assert quantize_amount(420000, 1000) == 420
    assert quantize_amount(999, 1000) == 0
    with pytest.raises(RangeError):
        quantize_amount(1, 0)


@pytest.mark.parametrize("quantum", [0, -1, 2**256])
def test_quantum_bounds(quantum):
    with pytest.raises(RangeError) as err:
        Asset(AssetKind.ETH, quantum=quantum)
    assert err.value.field == "quantum"


def test_largest_quantum_is_accepted():
    assert get_asset_type(Asset(AssetKind.ETH, quantum=2**256 - 1)).startswith("0x")


def test_token_id_bounds():
    with pytest.raises(RangeError) as err:
        Asset(AssetKind.ERC721, token_address=ROPSTEN_ERC721, token_id=2**256)
    assert err.value.field == "token_id"
    with pytest.raises(RangeError):
        get_nft_asset_id(1, -1)


def test_quantum_zero_from_dict_is_rejected():
    with pytest.raises(RangeError):
        Asset.from_dict({"type": "ETH", "data": {"quantum": "0"}})
    assert Asset.from_dict({"type": "ETH", "data": {}}).quantum == 1


if __name__ == "__main__":
    pytest.main()
