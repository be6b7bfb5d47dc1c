# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import pytest
from conftest import PRIVATE_KEY, PUBLIC_X, PUBLIC_Y
from starkex.constants import EC_ORDER, P0, P1, P2, P3
from starkex.curve import (
    G,
    SHIFT,
    add,
    compress,
    constant_points,
    double,
    get_public_key,
    get_x_coordinate,
    get_y_coordinate,
    is_compressed_public_key,
    is_on_curve,
    multiply,
    neg,
    point,
    to_uncompressed,
    uncompress,
)
from starkex.errors import MalformedHex


def test_base_points_on_curve():
    for pt in (G, SHIFT, point(*P0), point(*P1), point(*P2), point(*P3)):
        assert is_on_curve(pt)


def test_constant_points_layout():
    table = constant_points()
    assert len(table) == 506
    assert table[0] == SHIFT
    assert table[1] == G
    assert table[2] == point(*P0)
    assert table[3] == double(point(*P0))
    assert table[2 + 248] == point(*P1)
    assert table[2 + 252] == point(*P2)
    assert table[2 + 252 + 248] == point(*P3)
    assert is_on_curve(table[-1])


def test_constant_points_cached():
    assert constant_points() is constant_points()


def test_add_inverse_is_infinity():
    assert add(G, neg(G)) is None
    assert add(None, G) == G
    assert add(G, None) == G


def test_add_equals_double():
    assert add(G, G) == double(G)
    assert multiply(G, 3) == add(double(G), G)


def test_order_of_generator():
    assert multiply(G, EC_ORDER) is None
    assert multiply(G, EC_ORDER + 1) == G


def test_public_key_vector():
    pub = get_public_key(PRIVATE_KEY)
    assert int(pub[0]) == PUBLIC_X
    assert int(pub[1]) == PUBLIC_Y


def test_compress_and_uncompress():
    pub = get_public_key(PRIVATE_KEY)
    compressed = compress(pub)
    assert compressed == "02" + format(PUBLIC_X, "064x")
    assert uncompress(compressed) == pub
    assert uncompress("0x" + to_uncompressed(pub)) == pub
    assert is_compressed_public_key(compressed)
    assert not is_compressed_public_key(to_uncompressed(pub))


def test_uncompress_odd_prefix_negates():
    pub = get_public_key(PRIVATE_KEY)
    assert uncompress("03" + format(PUBLIC_X, "064x")) == neg(pub)


def test_x_coordinate():
    assert get_x_coordinate(get_public_key(PRIVATE_KEY)) == PUBLIC_X
    with pytest.raises(ValueError):
        get_x_coordinate(None)


def test_y_coordinate_parity():
    assert get_y_coordinate(PUBLIC_X, odd=False) == PUBLIC_Y
    assert get_y_coordinate(PUBLIC_X, odd=True) % 2 == 1


def test_uncompress_rejects_garbage():
    with pytest.raises(MalformedHex):
        uncompress("05" + "00" * 32)
    with pytest.raises(MalformedHex):
        uncompress("02" + "00" * 31)


if __name__ == "__main__":
    pytest.main()
