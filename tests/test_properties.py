"""
Property-based tests using Hypothesis.

These check the CheckedInt contract over whole ranges: an operation
either produces the exact mathematical result or raises and leaves the
stored value untouched.  Checked arithmetic is never clamped.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from hypothesis import given, settings
from hypothesis.strategies import integers, sampled_from

from checked_int import CheckedInt, OverflowDetected
from int_types import IntType, INT8, INT16, INT32, INT64, UINT8, UINT32, UINT64


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def ints_of(t: IntType):
    """Hypothesis strategy that generates values of an IntType."""
    return integers(min_value=t.lo, max_value=t.hi)


def exact_or_unchanged(t: IntType, start: int, method: str, rhs: int, exact: int):
    """Run one compound operation and check the all-or-nothing contract."""
    x = CheckedInt.for_type(t)(start)
    if t.contains(exact):
        getattr(x, method)(rhs)
        assert x.get() == exact
    else:
        with pytest.raises(OverflowDetected):
            getattr(x, method)(rhs)
        assert x.get() == start


ALL_TYPES = [INT8, INT16, INT32, INT64, UINT8, UINT32, UINT64]


# ---------------------------------------------------------------------------
# Addition
# ---------------------------------------------------------------------------

class TestAdditionProperties:
    @given(a=ints_of(INT8), b=ints_of(INT8))
    def test_int8(self, a, b):
        exact_or_unchanged(INT8, a, "add", b, a + b)

    @given(a=ints_of(UINT8), b=integers(min_value=-300, max_value=300))
    def test_uint8_native_rhs(self, a, b):
        exact_or_unchanged(UINT8, a, "add", b, a + b)

    @given(t=sampled_from(ALL_TYPES), data=integers(min_value=0, max_value=2**64))
    @settings(max_examples=500)
    def test_near_upper_bound(self, t, data):
        a = t.hi - data % min(1000, t.width)
        exact_or_unchanged(t, a, "add", 500, a + 500)

    @given(a=ints_of(INT8))
    def test_identity(self, a):
        assert CheckedInt.for_type(INT8)(a).add(0).get() == a


# ---------------------------------------------------------------------------
# Subtraction
# ---------------------------------------------------------------------------

class TestSubtractionProperties:
    @given(a=ints_of(INT8), b=ints_of(INT8))
    def test_int8(self, a, b):
        exact_or_unchanged(INT8, a, "subtract", b, a - b)

    @given(a=ints_of(INT64), b=ints_of(UINT64))
    @settings(max_examples=1000)
    def test_int64_minus_uint64(self, a, b):
        exact_or_unchanged(INT64, a, "subtract", b, a - b)

    @given(a=ints_of(INT8))
    def test_self_inverse(self, a):
        assert CheckedInt.for_type(INT8)(a).subtract(a).get() == 0


# ---------------------------------------------------------------------------
# Multiplication
# ---------------------------------------------------------------------------

class TestMultiplicationProperties:
    @given(a=ints_of(INT8), b=ints_of(INT8))
    def test_int8(self, a, b):
        exact_or_unchanged(INT8, a, "multiply", b, a * b)

    @given(a=ints_of(INT32), b=ints_of(INT32))
    @settings(max_examples=1000)
    def test_int32(self, a, b):
        exact_or_unchanged(INT32, a, "multiply", b, a * b)

    @given(t=sampled_from(ALL_TYPES), a=integers(min_value=-(2**64), max_value=2**64))
    def test_zero_never_overflows(self, t, a):
        a = t.wrap(a)
        assert CheckedInt.for_type(t)(a).multiply(0).get() == 0
        assert CheckedInt.for_type(t)(0).multiply(a).get() == 0

    @given(t=sampled_from(ALL_TYPES))
    def test_minimum_times_zero(self, t):
        assert CheckedInt.for_type(t)(t.lo).multiply(0).get() == 0


# ---------------------------------------------------------------------------
# Assignment and boundaries
# ---------------------------------------------------------------------------

class TestAssignmentProperties:
    @given(t=sampled_from(ALL_TYPES), v=integers(min_value=-(2**65), max_value=2**65))
    @settings(max_examples=500)
    def test_assign_exact_or_unchanged(self, t, v):
        x = CheckedInt.for_type(t)()
        if t.contains(v):
            assert x.assign(v).get() == v
        else:
            with pytest.raises(OverflowDetected):
                x.assign(v)
            assert x.get() == 0

    @given(t=sampled_from(ALL_TYPES))
    def test_bounds(self, t):
        klass = CheckedInt.for_type(t)
        assert klass(t.hi).get() == t.hi
        assert klass(t.lo).get() == t.lo
        with pytest.raises(OverflowDetected):
            klass(t.hi + 1)
        with pytest.raises(OverflowDetected):
            klass(t.lo - 1)

    @given(t=sampled_from(ALL_TYPES))
    def test_increment_at_max_decrement_at_min(self, t):
        klass = CheckedInt.for_type(t)
        top = klass(t.hi)
        with pytest.raises(OverflowDetected):
            top.increment()
        assert top.get() == t.hi
        bottom = klass(t.lo)
        with pytest.raises(OverflowDetected):
            bottom.decrement()
        assert bottom.get() == t.lo

    @given(a=ints_of(INT16))
    def test_round_trip(self, a):
        klass = CheckedInt.for_type(INT16)
        assert klass().assign(klass(a).get()).get() == a


# ---------------------------------------------------------------------------
# Bit operations never fail and stay in range
# ---------------------------------------------------------------------------

class TestBitProperties:
    @given(t=sampled_from(ALL_TYPES), a=integers(min_value=-(2**64), max_value=2**64),
           b=integers(min_value=-(2**70), max_value=2**70))
    def test_closure(self, t, a, b):
        a = t.wrap(a)
        klass = CheckedInt.for_type(t)
        for method in ("bit_and", "bit_or", "bit_xor"):
            assert t.contains(getattr(klass(a), method)(b).get())
        assert t.contains(klass(a).complement().get())

    @given(a=ints_of(INT8), n=integers(min_value=0, max_value=20))
    def test_shifts_match_low_bits(self, a, n):
        klass = CheckedInt.for_type(INT8)
        assert klass(a).lshift(n).get() & 0xFF == (a << n) & 0xFF
        assert klass(a).rshift(n).get() == a >> n

    @given(a=ints_of(INT8))
    def test_double_complement(self, a):
        x = CheckedInt.for_type(INT8)(a)
        assert (~~x).get() == a
