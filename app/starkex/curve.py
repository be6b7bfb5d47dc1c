# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
from functools import lru_cache

from sympy.ntheory.residue_ntheory import sqrt_mod

from starkex.constants import (
    ALPHA,
    BETA,
    EC_GEN,
    EC_ORDER,
    HIGH_PART_BITS,
    LOW_PART_BITS,
    P0,
    P1,
    P2,
    P3,
    PRIME,
    SHIFT_POINT,
)
from starkex.errors import MalformedHex
from starkex.field import StarkFQ, strip_hex

# affine (x, y) over the stark field, None is the point at infinity
Point = tuple[StarkFQ, StarkFQ] | None


def point(x: int, y: int) -> Point:
    return (StarkFQ(x), StarkFQ(y))


G = point(*EC_GEN)
SHIFT = point(*SHIFT_POINT)


def is_on_curve(pt: Point) -> bool:
    if pt is None:
        return True
    x, y = pt
    return y**2 == x**3 + ALPHA * x + BETA


def neg(pt: Point) -> Point:
    if pt is None:
        return None
    x, y = pt
    return (x, -y)


def double(pt: Point) -> Point:
    if pt is None or pt[1] == 0:
        return None
    x, y = pt
    m = (3 * x**2 + ALPHA) / (2 * y)
    newx = m**2 - 2 * x
    newy = -m * newx + m * x - y
    return (newx, newy)


def add(p1: Point, p2: Point) -> Point:
    if p1 is None or p2 is None:
        return p1 if p2 is None else p2
    x1, y1 = p1
    x2, y2 = p2
    if x2 == x1 and y2 == y1:
        return double(p1)
    elif x2 == x1:
        return None
    m = (y2 - y1) / (x2 - x1)
    newx = m**2 - x1 - x2
    newy = -m * newx + m * x1 - y1
    return (newx, newy)


def multiply(pt: Point, n: int) -> Point:
    """
    Scalar multiplication by double and add, least significant bit first.

    Args:
        pt (Point): The point to scale.
        n (int): A non negative scalar.

    Returns:
        Point: n * pt, or None for the point at infinity.
    """
    result = None
    addend = pt
    while n > 0:
        if n & 1:
            result = add(result, addend)
        addend = double(addend)
        n >>= 1
    return result


def get_public_key(private_key: int) -> Point:
    return multiply(G, private_key % EC_ORDER)


@lru_cache(maxsize=1)
def constant_points() -> tuple[Point, ...]:
    """
    The pedersen table: shift point, generator, then for each of the two
    hash inputs the doublings of its low base point followed by the
    doublings of its high base point.

    Returns:
        tuple[Point, ...]: 2 + 2 * 252 points.
    """
    table = [SHIFT, G]
    for low, high in ((P0, P1), (P2, P3)):
        for base, count in ((low, LOW_PART_BITS), (high, HIGH_PART_BITS)):
            pt = point(*base)
            for _ in range(count):
                table.append(pt)
                pt = double(pt)
    return tuple(table)


def get_y_coordinate(x: int, odd: bool | None = None) -> int:
    """
    Recover a y coordinate for the given x.

    Args:
        x (int): The x coordinate.
        odd (bool | None): Required parity of y. None picks the smaller root.

    Returns:
        int: A y such that (x, y) lies on the curve.

    Raises:
        MalformedHex: When no point on the curve has this x coordinate.
    """
    y_squared = (x**3 + ALPHA * x + BETA) % PRIME
    roots = sqrt_mod(y_squared, PRIME, all_roots=True)
    if not roots:
        raise MalformedHex(hex(x), "not the x coordinate of a curve point")
    y = int(min(roots))
    if odd is not None and y % 2 != int(odd):
        y = PRIME - y
    return y


def get_x_coordinate(pt: Point) -> int:
    if pt is None:
        raise ValueError("the point at infinity has no x coordinate")
    return int(pt[0])


def compress(pt: Point) -> str:
    """
    Encode a point as 02/03 followed by its 32 byte x coordinate.

    Args:
        pt (Point): A point on the curve.

    Returns:
        str: 66 hex digits without a 0x prefix.
    """
    x, y = pt
    prefix = "03" if int(y) % 2 else "02"
    return prefix + format(int(x), "064x")


def uncompress(element: str) -> Point:
    """
    Decode a compressed (02/03 + x) or uncompressed (04 + x + y) public key.

    Args:
        element (str): The encoded point, with or without a 0x prefix.

    Returns:
        Point: The decoded point.
    """
    digits = strip_hex(element).lower()
    prefix, body = digits[:2], digits[2:]
    if prefix in ("02", "03") and len(body) == 64:
        x = int(body, 16)
        pt = point(x, get_y_coordinate(x, odd=prefix == "03"))
    elif prefix == "04" and len(body) == 128:
        pt = point(int(body[:64], 16), int(body[64:], 16))
    else:
        raise MalformedHex(element, "not an encoded public key")
    if not is_on_curve(pt):
        raise MalformedHex(element, "point is not on the curve")
    return pt


def to_uncompressed(pt: Point) -> str:
    x, y = pt
    return "04" + format(int(x), "064x") + format(int(y), "064x")


def is_compressed_public_key(element: str) -> bool:
    digits = element[2:] if element[:2].lower() == "0x" else element
    return len(digits) == 66 and digits[:2] in ("02", "03")
