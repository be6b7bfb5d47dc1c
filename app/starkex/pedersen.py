# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
from starkex.constants import N_ELEMENT_BITS_HASH, PRIME
from starkex.curve import SHIFT, Point, add, constant_points
from starkex.errors import UnhashableInput
from starkex.field import assert_in_range, to_int


def pedersen_as_point(*elements: int) -> Point:
    """
    Pedersen hash of field elements, keeping the full curve point.

    Starting from the shift point, bit j of element i adds table entry
    2 + i * 252 + j to the accumulator.

    Args:
        *elements (int): Field elements, each below PRIME.

    Returns:
        Point: The accumulated point.

    Raises:
        RangeError: When an element is not a field element.
        UnhashableInput: When the accumulator meets a table point with the
            same x coordinate.
    """
    if len(elements) > 2:
        raise ValueError("pedersen hashes at most two elements")
    table = constant_points()
    acc = SHIFT
    for i, element in enumerate(elements):
        x = assert_in_range(element, 0, PRIME, f"input[{i}]")
        start = 2 + i * N_ELEMENT_BITS_HASH
        for pt in table[start : start + N_ELEMENT_BITS_HASH]:
            if acc[0] == pt[0]:
                raise UnhashableInput(f"accumulator collides with the table at input {i}")
            if x & 1:
                acc = add(acc, pt)
            x >>= 1
    return acc


def pedersen(*elements: int | str) -> int:
    """
    Hash field elements (ints or 0x hex strings) to a single field element.

    Returns:
        int: The x coordinate of the pedersen point.
    """
    return int(pedersen_as_point(*(to_int(e) for e in elements))[0])


def hash_message(message: list | tuple | int | str) -> int:
    """
    Hash a nested pair structure, e.g. [[a, b], c] -> H(H(a, b), c).

    Args:
        message: An element, or a pair whose sides are themselves messages.

    Returns:
        int: The resulting field element.
    """
    if isinstance(message, (list, tuple)):
        left, right = message
        return pedersen(hash_message(left), hash_message(right))
    return to_int(message)
