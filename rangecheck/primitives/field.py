"""Goldilocks prime field GF(p).

Uses galois library for all field arithmetic. FF is the field type used by
every column, expression and table in the gadget.

The range semantics of the gadget are stated over canonical representatives:
the unique integer in [0, p) for a field element.
"""

import galois

# --- Field Construction ---

GOLDILOCKS_PRIME = 0xFFFFFFFF00000001

FF = galois.GF(GOLDILOCKS_PRIME)
"""Base field GF(p) - Goldilocks prime field."""


def ff(value: int) -> FF:
    """Map any Python integer into the field (negatives wrap around p)."""
    return FF(value % GOLDILOCKS_PRIME)


def canonical(elem) -> int:
    """Canonical non-negative integer representative of a field element."""
    return int(elem)


def format_value(elem) -> str:
    """Hex rendering of a field element.

    Elements in the upper half of the field are shown negated, so that
    -1 renders as -0x1 rather than as a 64-bit constant.
    """
    v = canonical(elem)
    if v > GOLDILOCKS_PRIME // 2:
        return "-" + hex(GOLDILOCKS_PRIME - v)
    return hex(v)
