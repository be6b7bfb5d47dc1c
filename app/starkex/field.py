# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import string

from eth_typing import HexStr
from eth_utils import is_0x_prefixed, remove_0x_prefix
from py_ecc.fields.field_elements import FQ

from starkex.constants import EC_ORDER, PACKED_WORD_BITS, PRIME
from starkex.errors import MalformedHex, RangeError

HEX_DIGITS = frozenset(string.hexdigits)


class StarkFQ(FQ):
    """Element of the stark field, integers modulo PRIME."""

    field_modulus = PRIME


class ScalarFQ(FQ):
    """Element of the scalar field, integers modulo the curve order."""

    field_modulus = EC_ORDER


def assert_in_range(
    value: int,
    lower: int,
    upper: int,
    field: str,
    error: type[RangeError] = RangeError,
) -> int:
    """
    Check that lower <= value < upper.

    Args:
        value (int): The value to check.
        lower (int): Inclusive lower bound.
        upper (int): Exclusive upper bound.
        field (str): Name reported on failure.
        error (type[RangeError]): The exception class to raise.

    Returns:
        int: The value, unchanged.
    """
    if not lower <= value < upper:
        raise error(field, value, lower, upper)
    return value


def assert_bits(value: int, bits: int, field: str) -> int:
    return assert_in_range(value, 0, 2**bits, field)


def is_hex_digits(digits: str) -> bool:
    return len(digits) > 0 and all(c in HEX_DIGITS for c in digits)


def strip_hex(value: str) -> str:
    """Hex digits of value, with an optional 0x prefix removed."""
    if not isinstance(value, str):
        raise MalformedHex(value, "expected a string")
    digits = remove_0x_prefix(HexStr(value)) if is_0x_prefixed(value) else value
    if not is_hex_digits(digits):
        raise MalformedHex(value, "contains non hex characters")
    return digits


def parse_hex(value: str) -> int:
    """
    Parse a 0x-prefixed hexadecimal string into an integer.

    Args:
        value (str): Hex string such as "0x1f".

    Returns:
        int: The parsed value.

    Raises:
        MalformedHex: When the prefix is missing or a digit is not hex.
    """
    if not isinstance(value, str) or not is_0x_prefixed(value):
        raise MalformedHex(value)
    return int(strip_hex(value), 16)


def to_int(value: int | str) -> int:
    """Accept an int or a 0x-prefixed hex string."""
    if isinstance(value, bool):
        raise MalformedHex(value, "expected an integer or hex string")
    if isinstance(value, int):
        return value
    return parse_hex(value)


def to_field_element(value: int | str, field: str) -> int:
    return assert_in_range(to_int(value), 0, PRIME, field)


def even_hex(value: int) -> str:
    """Minimal big-endian hex digits of value, left padded to an even length."""
    digits = format(value, "x")
    return digits if len(digits) % 2 == 0 else "0" + digits


def to_hex(value: int) -> HexStr:
    return HexStr("0x" + even_hex(value))


def pad_hex(value: int, n_bytes: int = 32) -> HexStr:
    return HexStr("0x" + format(value, f"0{2 * n_bytes}x"))


def to_bytes32(value: int) -> bytes:
    return value.to_bytes(32, "big")


def pack_fields(fields: list[tuple[str, int, int]], width: int = PACKED_WORD_BITS) -> int:
    """
    Concatenate bounded fields into a single integer word.

    Each entry is (name, value, bits). Fields are laid out most significant
    first: the first field ends up in the highest bits of the word. Every
    value must fit its slot and the total must fit the container width.

    Args:
        fields (list[tuple[str, int, int]]): The slots in order.
        width (int): Bit width of the container.

    Returns:
        int: The packed word.

    Raises:
        RangeError: When a value does not fit its slot or the slots overflow
            the container.
    """
    total_bits = sum(bits for _, _, bits in fields)
    if total_bits > width:
        raise RangeError("packed_word", total_bits, 0, width + 1)
    word = 0
    for name, value, bits in fields:
        assert_bits(value, bits, name)
        word = (word << bits) + value
    return word


def unpack_fields(word: int, layout: list[tuple[str, int]]) -> dict[str, int]:
    """
    Inverse of pack_fields. The first slot takes whatever bits remain above
    the others.

    Args:
        word (int): The packed word.
        layout (list[tuple[str, int]]): (name, bits) pairs, most significant first.

    Returns:
        dict[str, int]: The value of each slot.
    """
    values = {}
    for name, bits in reversed(layout[1:]):
        values[name] = word & (2**bits - 1)
        word >>= bits
    values[layout[0][0]] = word
    return {name: values[name] for name, _ in layout}
