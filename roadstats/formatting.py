"""
roadstats.formatting — Deterministic number rendering and digests.

canonical_float() is the only way a road length becomes text. Output is
byte-identical for identical inputs, so two builds from an unchanged
database produce the same report and the same digest.
"""

from __future__ import annotations

import hashlib
import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

from roadstats.constants import ROUND_PRECISION

_QUANTUM = Decimal(1).scaleb(-ROUND_PRECISION)


def canonical_float(value: float) -> str:
    """Render value fixed-point with exactly ROUND_PRECISION decimals.

    Rounds half away from zero on the shortest decimal repr of the float,
    so 2.675 becomes "2.68" even though its binary value is slightly below.
    No scientific notation. No locale sensitivity.

    Examples (ROUND_PRECISION=2):
        canonical_float(1234.5) → "1234.50"
        canonical_float(0)      → "0.00"
        canonical_float(-0.125) → "-0.13"
        canonical_float(1e20)   → "100000000000000000000.00"
    """
    value = float(value)
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"cannot render non-finite value {value!r}")
    with localcontext() as ctx:
        # Wide enough for the integer part of any finite double.
        ctx.prec = 320 + ROUND_PRECISION
        quantized = Decimal(repr(value)).quantize(_QUANTUM, rounding=ROUND_HALF_UP)
    if quantized.is_zero():
        quantized = abs(quantized)
    return f"{quantized:f}"


def sha256_text(text: str) -> str:
    """SHA-256 hex digest of text encoded as UTF-8."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
