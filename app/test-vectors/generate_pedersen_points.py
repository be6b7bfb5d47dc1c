#!/usr/bin/env python3

# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

"""
Regenerate the six pedersen base points from the digits of pi and write
pedersen-points.json next to this script.

Window k of 76 decimal digits (k = 1..6, counting the leading 3 as digit 0)
is reduced modulo the field prime and incremented until it is the x
coordinate of a curve point; the smaller square root is taken as y.

Run from the app/ directory:
    PYTHONPATH=. python test-vectors/generate_pedersen_points.py
"""

import json
import sys
from pathlib import Path

import mpmath
from sympy.ntheory.residue_ntheory import sqrt_mod

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
from starkex.constants import ALPHA, BETA, EC_GEN, P0, P1, P2, P3, PRIME, SHIFT_POINT

WINDOW = 76
NAMES = ["shift_point", "generator", "p0", "p1", "p2", "p3"]
SHIPPED = [SHIFT_POINT, EC_GEN, P0, P1, P2, P3]


def pi_digits(count: int) -> str:
    mpmath.mp.dps = count + 10
    return "3" + str(mpmath.mp.pi)[2:]


def point_from_window(window: str) -> tuple[int, int]:
    x = int(window) % PRIME
    while True:
        roots = sqrt_mod((x**3 + ALPHA * x + BETA) % PRIME, PRIME, all_roots=True)
        if roots:
            return x, int(min(roots))
        x += 1


def main() -> None:
    digits = pi_digits(WINDOW * (len(NAMES) + 1))
    points = []
    for k, name in enumerate(NAMES, start=1):
        x, y = point_from_window(digits[WINDOW * k : WINDOW * (k + 1)])
        points.append({"name": name, "x": hex(x), "y": hex(y)})
        if (x, y) != SHIPPED[k - 1]:
            raise SystemExit(f"{name} does not match starkex.constants")

    out = Path(__file__).resolve().parent / "pedersen-points.json"
    out.write_text(json.dumps({"points": points}, indent=2) + "\n")
    print(f"Wrote {len(points)} points to {out}")


if __name__ == "__main__":
    main()
