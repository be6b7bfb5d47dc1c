# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# stark field and curve: y^2 = x^3 + ALPHA * x + BETA (mod PRIME)
PRIME = 2**251 + 17 * 2**192 + 1
ALPHA = 1
BETA = 0x6F21413EFBE40DE150E596D72F7A8C5609AD26C15C915C1F4CDFCB99CEE9E89
EC_ORDER = 0x800000000000010FFFFFFFFFFFFFFFFB781126DCAE7B2321E66A241ADC64D2F

# signed values must stay below this
MAX_ECDSA_VAL = 2**251

# pedersen base points, the first six pi derived points on the curve
SHIFT_POINT = (
    0x49EE3EBA8C1600700EE1B87EB599F16716B0B1022947733551FDE4050CA6804,
    0x3CA0CFE4B3BC6DDF346D49D06EA0ED34E621062C0E056C1D0405D266E10268A,
)
EC_GEN = (
    0x1EF15C18599971B7BECED415A40F0C7DEACFD9B0D1819E03D723D8BC943CFCA,
    0x5668060AA49730B7BE4801DF46EC62DE53ECD11ABE43A32873000C36E8DC1F,
)
P0 = (
    0x234287DCBAFFE7F969C748655FCA9E58FA8120B6D56EB0C1080D17957EBE47B,
    0x3B056F100F96FB21E889527D41F4E39940135DD7A6C94CC6ED0268EE89E5615,
)
P1 = (
    0x4FA56F376C83DB33F9DAB2656558F3399099EC1DE5E3018B7A6932DBA8AA378,
    0x3FA0984C931C9E38113E0C0E47E4401562761F92A7A23B45168F4E80FF5B54D,
)
P2 = (
    0x4BA4CC166BE8DEC764910F75B45F74B40C690C74709E90F3AA372F0BD2D6997,
    0x40301CF5C1751F4B971E46C4EDE85FCAC5C59A5CE5AE7C48151F27B24B219C,
)
P3 = (
    0x54302DCB0E6CC1C6E44CCA8F61A63BB2CA65048D53FB325D36FF12C49A58202,
    0x1B77B3E37D13504B348046268D8AE25CE98AD783C25561A879DCC77E99C2426,
)

# each hash input is split into a 248 bit low part and a 4 bit high part
N_ELEMENT_BITS_HASH = 252
LOW_PART_BITS = 248
HIGH_PART_BITS = N_ELEMENT_BITS_HASH - LOW_PART_BITS

# spot (settlement) message field widths
SPOT_VAULT_BITS = 31
SPOT_AMOUNT_BITS = 63
SPOT_NONCE_BITS = 31
SPOT_EXPIRATION_BITS = 22
SPOT_TAG_BITS = 4

# perpetual message field widths
PERP_TAG_BITS = 10
PERP_ASSET_ID_BITS = 250
PERP_AMOUNT_BITS = 64
PERP_NONCE_BITS = 32
PERP_POSITION_BITS = 64
PERP_EXPIRATION_BITS = 32

# packed words never exceed the signable width
PACKED_WORD_BITS = 251

# instruction tags
LIMIT_ORDER_TAG = 0
TRANSFER_TAG = 1
CONDITIONAL_TRANSFER_TAG = 2
PERP_LIMIT_ORDER_TAG = 3
PERP_TRANSFER_TAG = 4
PERP_CONDITIONAL_TRANSFER_TAG = 5
PERP_WITHDRAWAL_TAG = 6

# asset selectors are keccak(signature)[:4]
ETH_SELECTOR_SIGNATURE = "ETH()"
ERC20_SELECTOR_SIGNATURE = "ERC20Token(address)"
ERC721_SELECTOR_SIGNATURE = "ERC721Token(address,uint256)"
MINTABLE_ERC20_SELECTOR_SIGNATURE = "MintableERC20Token(address)"
MINTABLE_ERC721_SELECTOR_SIGNATURE = "MintableERC721Token(address,uint256)"

NFT_ASSET_ID_PREFIX = b"NFT:"
MINTABLE_ASSET_ID_PREFIX = b"MINTABLE:"

ASSET_TYPE_BITS = 250
MINTABLE_ASSET_ID_BITS = 240
MINTABLE_ASSET_ID_FLAG = 2**250

# key derivation
STARK_DERIVATION_PURPOSE = 2645
DEFAULT_LAYER = "starkex"
DEFAULT_APPLICATION = "starkexdvf"
DEFAULT_ACCOUNT_MAPPING_KEY = "STARKWARE_ACCOUNT_MAPPING"
