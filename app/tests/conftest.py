# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import pytest

# derivation vector shared across modules
MNEMONIC = (
    "puzzle number lab sense puzzle escape glove faith strike poem acoustic "
    "picture grit struggle know tuna soul indoor thumb dune fit job timber motor"
)
PRIVATE_KEY = 0x5C8C8683596C732541A59E03007B2D30DBBBB873556FE65B5FB63C16688F941
PUBLIC_X = 0x042582CFCB098A503562ACD1325922799C9CEBDF9249C26A41BD04007997F2EB
PUBLIC_Y = 0x03B73CDB07F399130EA38EE860C3B708C92165DF37B1690D7E0AF1678ECDAFF8
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


@pytest.fixture
def mnemonic():
    return MNEMONIC


@pytest.fixture
def private_key():
    return PRIVATE_KEY
