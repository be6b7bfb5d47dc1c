import pytest
from starkex.constants import PRIME, SHIFT_POINT
from starkex.errors import RangeError
from starkex.pedersen import hash_message, pedersen, pedersen_as_point
from starkex.curve import is_on_curve


@pytest.mark.parametrize(
    "a, b, expected",
    [
        (
            0x3D937C035C878245CAF64531A5756109C53068DA139362728FEB561405371CB,
            0x208A0A10250E382E1E4BBE2880906C2791BF6275695E02FBBC6AEFF9CD8B31A,
            0x30E480BED5FE53FA909CC0F8C4D99B8F9F2C016BE4C41E13A4848797979C662,
        ),
        (
            0x58F580910A6CA59B28927C08FE6C43E2E303CA384BADC365795FC645D479D45,
            0x78734F65A067BE9BDB39DE18434D71E79F7B6466A4B66BBD979AB9E7515FE0B,
            0x68CC0B76CDDD1DD4ED2301ADA9B7C872B23875D5FF837B3A87993E0D9996B87,
        ),
    ],
)
def test_pedersen_vectors(a, b, expected):
    assert pedersen(a, b) == expected


def test_pedersen_accepts_hex_strings():
    assert pedersen("0x0", "0x0") == pedersen(0, 0)


def test_pedersen_of_zeros_is_shift_point():
    assert pedersen(0, 0) == SHIFT_POINT[0]


def test_pedersen_point_on_curve():
    assert is_on_curve(pedersen_as_point(1, 2))


def test_pedersen_rejects_non_field_elements():
    with pytest.raises(RangeError) as err:
        pedersen(PRIME, 0)
    assert err.value.field == "input[0]"
    with pytest.raises(RangeError):
        pedersen(0, -1)


def test_pedersen_max_element():
    assert 0 <= pedersen(PRIME - 1, PRIME - 1) < PRIME


def test_pedersen_rejects_three_inputs():
    with pytest.raises(ValueError):
        pedersen(1, 2, 3)


def test_hash_message_nesting():
    assert hash_message([[1, 2], 3]) == pedersen(pedersen(1, 2), 3)
    assert hash_message([1, [2, 3]]) == pedersen(1, pedersen(2, 3))
    assert hash_message(7) == 7


if __name__ == "__main__":
    pytest.main()
