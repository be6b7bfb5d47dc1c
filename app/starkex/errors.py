# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only


class StarkExError(Exception):
    """Base class for every error raised by the starkex package."""


class MalformedHex(StarkExError, ValueError):
    def __init__(self, value: object, reason: str = "expected 0x-prefixed hex"):
        self.value = value
        self.reason = reason
        super().__init__(f"Malformed hex {value!r}: {reason}")


class RangeError(StarkExError, ValueError):
    """
    A value fell outside the half open interval [lower, upper).

    Attributes:
        field: Name of the offending field, e.g. "vault_id_sell" or "nonce".
        value: The rejected value.
        lower: Inclusive lower bound.
        upper: Exclusive upper bound.
    """

    def __init__(self, field: str, value: int, lower: int, upper: int):
        self.field = field
        self.value = value
        self.lower = lower
        self.upper = upper
        super().__init__(self.describe())

    def describe(self) -> str:
        return f"{self.field} out of range: {self.lower} <= {self.value} < {self.upper} does not hold"


class SignatureRangeError(RangeError):
    """Raised for msgHash, r, s and w values the curve cannot sign or verify."""

    def describe(self) -> str:
        return f"Message not signable, invalid {self.field} length."


class UnhashableInput(StarkExError):
    pass


class UnknownAssetKind(StarkExError, ValueError):
    def __init__(self, kind: object):
        self.kind = kind
        super().__init__(f"Unknown asset kind: {kind!r}")


class UnsupportedOperation(StarkExError, NotImplementedError):
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"{operation} is not supported")
