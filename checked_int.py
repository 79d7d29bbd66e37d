"""
Checked integer value type.

A CheckedInt holds one integer that always fits in its class's IntType.
Arithmetic that could leave that range is checked first with the
overflow predicates; when a predicate reports an overflow the operation
raises OverflowDetected and the stored value is left exactly as it was.
Nothing is ever clamped or wrapped to make a checked result fit.

The explicit methods (``assign``, ``add``, ``subtract``, ``multiply``,
``increment`` ...) are the primary surface.  Python's augmented
assignment operators are aliases for them, and ``+``, ``-`` and ``*``
return plain ints computed through the same checks.

Instances are plain mutable values with no locking.  Callers sharing
one between threads must guard mutating calls themselves.
"""

from __future__ import annotations

import operator
from typing import Callable

from int_types import (
    IntType,
    INT8,
    INT16,
    INT32,
    INT64,
    UINT8,
    UINT16,
    UINT32,
    UINT64,
    truncdiv,
)
from overflow_checks import Operation, promote, would_overflow


class OverflowDetected(OverflowError):
    """Raised when an operation would take a CheckedInt out of range."""

    def __init__(self, operation: Operation, lhs: int | None, rhs: int,
                 int_type: IntType):
        self.operation = operation
        self.lhs = lhs
        self.rhs = rhs
        self.int_type = int_type
        bounds = f"{int_type} [{int_type.lo}, {int_type.hi}]"
        if operation is Operation.ASSIGN:
            message = f"{rhs} does not fit in {bounds}"
        else:
            message = f"{operation.value}({lhs}, {rhs}) overflows {bounds}"
        super().__init__(message)


_TYPE_CACHE: dict[IntType, type] = {}


class CheckedInt:
    """
    An integer of a fixed IntType that refuses to overflow.

    The IntType is a class attribute; use ``CheckedInt.for_type`` or one of
    the presets (``CheckedInt8``, ``CheckedUInt16`` ...) for other widths.
    The bare class is 32-bit signed.

    Comparisons accept integers only: ``CheckedInt8(1) == 1.0`` is False
    and ordering against a float raises TypeError.
    """

    int_type: IntType = INT32

    def __init__(self, value=0):
        self._value = 0
        self.assign(value)

    @classmethod
    def for_type(cls, int_type: IntType) -> type[CheckedInt]:
        """Return the CheckedInt class bound to ``int_type``."""
        try:
            return _TYPE_CACHE[int_type]
        except KeyError:
            pass
        prefix = "Int" if int_type.signed else "UInt"
        name = f"Checked{prefix}{int_type.bits}"
        klass = type(name, (CheckedInt,), {"int_type": int_type})
        _TYPE_CACHE[int_type] = klass
        return klass

    # -- checked operations -----------------------------------------------

    def _checked(self, op: Operation, rhs,
                 compute: Callable[[int, int], int]) -> CheckedInt:
        value, rhs_type = promote(rhs)
        if would_overflow(op, self._value, value, self.int_type, rhs_type):
            raise OverflowDetected(op, self._value, value, self.int_type)
        self._value = compute(self._value, value)
        return self

    def assign(self, rhs) -> CheckedInt:
        """Replace the stored value with ``rhs`` if it fits."""
        value, _ = promote(rhs)
        if would_overflow(Operation.ASSIGN, self._value, value, self.int_type):
            raise OverflowDetected(Operation.ASSIGN, None, value, self.int_type)
        self._value = value
        return self

    def add(self, rhs) -> CheckedInt:
        return self._checked(Operation.ADD, rhs, operator.add)

    def subtract(self, rhs) -> CheckedInt:
        return self._checked(Operation.SUB, rhs, operator.sub)

    def multiply(self, rhs) -> CheckedInt:
        return self._checked(Operation.MUL, rhs, operator.mul)

    def divide(self, rhs) -> CheckedInt:
        """Divide in place, truncating toward zero.

        The division predicate never reports overflow, so ``lo // -1`` on a
        signed type is not detected: its quotient narrows back to ``lo``.
        Any other quotient that does not fit (an unsigned value divided by
        a negative number) raises OverflowDetected.  Division by zero
        raises ZeroDivisionError.
        """
        return self._checked(Operation.DIV, rhs, self._quotient)

    def _quotient(self, lhs: int, rhs: int) -> int:
        q = truncdiv(lhs, rhs)
        if self.int_type.contains(q):
            return q
        if lhs == self.int_type.lo and rhs == -1:
            return self.int_type.wrap(q)
        raise OverflowDetected(Operation.DIV, lhs, rhs, self.int_type)

    def increment(self) -> CheckedInt:
        return self.add(1)

    def decrement(self) -> CheckedInt:
        return self.subtract(1)

    def post_increment(self) -> CheckedInt:
        """Increment in place and return a copy of the previous value."""
        previous = self.copy()
        self.add(1)
        return previous

    def post_decrement(self) -> CheckedInt:
        """Decrement in place and return a copy of the previous value."""
        previous = self.copy()
        self.subtract(1)
        return previous

    # -- bit operations (never overflow) ------------------------------------

    def _bitwise(self, rhs, compute: Callable[[int, int], int]) -> CheckedInt:
        value, _ = promote(rhs)
        self._value = self.int_type.wrap(compute(self._value, value))
        return self

    def bit_and(self, rhs) -> CheckedInt:
        return self._bitwise(rhs, operator.and_)

    def bit_or(self, rhs) -> CheckedInt:
        return self._bitwise(rhs, operator.or_)

    def bit_xor(self, rhs) -> CheckedInt:
        return self._bitwise(rhs, operator.xor)

    def lshift(self, count) -> CheckedInt:
        return self._bitwise(count, self._shift_left)

    def _shift_left(self, value: int, count: int) -> int:
        # Every bit is shifted out once count reaches the width
        if count >= self.int_type.bits:
            return 0
        return value << count

    def rshift(self, count) -> CheckedInt:
        return self._bitwise(count, operator.rshift)

    def complement(self) -> CheckedInt:
        """Return a new instance holding the bitwise complement."""
        return type(self)(self.int_type.wrap(~self._value))

    # -- conversion ---------------------------------------------------------

    def get(self) -> int:
        return self._value

    to_native = get

    def copy(self) -> CheckedInt:
        return type(self)(self._value)

    __copy__ = copy

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value})"

    # -- operator aliases -----------------------------------------------------

    __iadd__ = add
    __isub__ = subtract
    __imul__ = multiply
    __ifloordiv__ = divide
    __iand__ = bit_and
    __ior__ = bit_or
    __ixor__ = bit_xor
    __ilshift__ = lshift
    __irshift__ = rshift
    __invert__ = complement

    def __add__(self, other) -> int:
        return self.copy().add(other).get()

    def __sub__(self, other) -> int:
        return self.copy().subtract(other).get()

    def __mul__(self, other) -> int:
        return self.copy().multiply(other).get()

    def __radd__(self, other) -> int:
        return self.copy().add(other).get()

    def __rsub__(self, other) -> int:
        # The native left operand must itself fit in this type
        return type(self)(other).subtract(self).get()

    def __rmul__(self, other) -> int:
        return self.copy().multiply(other).get()

    # -- comparison -----------------------------------------------------------

    def _compare(self, other, compare: Callable[[int, int], bool]):
        try:
            value, _ = promote(other)
        except TypeError:
            return NotImplemented
        return compare(self._value, value)

    def __eq__(self, other):
        return self._compare(other, operator.eq)

    def __lt__(self, other):
        return self._compare(other, operator.lt)

    def __le__(self, other):
        return self._compare(other, operator.le)

    def __gt__(self, other):
        return self._compare(other, operator.gt)

    def __ge__(self, other):
        return self._compare(other, operator.ge)

    # Mutable, so not hashable
    __hash__ = None


_TYPE_CACHE[INT32] = CheckedInt


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

CheckedInt8 = CheckedInt.for_type(INT8)
CheckedInt16 = CheckedInt.for_type(INT16)
CheckedInt32 = CheckedInt
CheckedInt64 = CheckedInt.for_type(INT64)
CheckedUInt8 = CheckedInt.for_type(UINT8)
CheckedUInt16 = CheckedInt.for_type(UINT16)
CheckedUInt32 = CheckedInt.for_type(UINT32)
CheckedUInt64 = CheckedInt.for_type(UINT64)
