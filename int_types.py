"""
Integer type layer.

An IntType describes one fixed-width two's-complement integer: how many
bits it has and whether it is signed.  Everything else in the package is
parameterized by it - the overflow predicates read its bounds, and every
CheckedInt class is bound to exactly one IntType.

Python ints never overflow, so an IntType is purely a description of a
range.  All comparisons against that range happen on Python ints, which
is what makes mixed-width operands safe to compare.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class IntType:
    """
    A fixed-width integer type with range [lo, hi].

    Signed types use the two's-complement range, unsigned types start
    at zero.
    """

    name: str
    bits: int
    signed: bool = True

    def __post_init__(self):
        if self.bits < 1:
            raise ValueError(f"bits ({self.bits}) must be >= 1")

    @property
    def lo(self) -> int:
        """Smallest representable value."""
        if self.signed:
            return -(1 << (self.bits - 1))
        return 0

    @property
    def hi(self) -> int:
        """Largest representable value."""
        if self.signed:
            return (1 << (self.bits - 1)) - 1
        return (1 << self.bits) - 1

    @property
    def width(self) -> int:
        """Total number of representable values."""
        return 1 << self.bits

    def contains(self, value: int) -> bool:
        return self.lo <= value <= self.hi

    def all_values(self) -> range:
        return range(self.lo, self.hi + 1)

    def wrap(self, value: int) -> int:
        """Reduce a raw value into range the way a two's-complement
        narrowing conversion does (keep the low ``bits`` bits)."""
        return self.lo + (value - self.lo) % self.width

    def __str__(self) -> str:
        return self.name


def truncdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero (not floor division).

    Python's ``//`` rounds toward negative infinity; fixed-width integer
    arithmetic in C, Java and Rust truncates toward zero instead.
    """
    q, r = divmod(a, b)
    # divmod rounds toward -inf; adjust when the result is negative
    # and there is a remainder.
    if r != 0 and (a < 0) != (b < 0):
        q += 1
    return q


# ---------------------------------------------------------------------------
# Common type presets
# ---------------------------------------------------------------------------

INT8 = IntType("int8", 8)
INT16 = IntType("int16", 16)
INT32 = IntType("int32", 32)
INT64 = IntType("int64", 64)
UINT8 = IntType("uint8", 8, signed=False)
UINT16 = IntType("uint16", 16, signed=False)
UINT32 = IntType("uint32", 32, signed=False)
UINT64 = IntType("uint64", 64, signed=False)

# Small types useful for exhaustive verification
INT4 = IntType("int4", 4)
UINT4 = IntType("uint4", 4, signed=False)

_PRESETS = {
    (t.bits, t.signed): t
    for t in (INT4, INT8, INT16, INT32, INT64, UINT4, UINT8, UINT16, UINT32, UINT64)
}


def int_type(bits: int, signed: bool = True) -> IntType:
    """Return the preset for ``bits``/``signed``, or build a new type."""
    try:
        return _PRESETS[(bits, signed)]
    except KeyError:
        prefix = "int" if signed else "uint"
        return IntType(f"{prefix}{bits}", bits, signed)
