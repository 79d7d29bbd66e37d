"""
Overflow predicates.

Each predicate answers one question: would performing this operation on
``lhs`` and ``rhs`` and storing the result in ``lhs_type`` overflow?
None of them performs the operation it is checking - they only compare
the operands against the bounds of the destination type.

Operands may come from types of different widths and signedness.  Both
are promoted to Python ints (see ``promote``) before any comparison, so
the checks themselves can never wrap.

``rhs_type`` is the type the right-hand operand came from, or ``None``
for a plain Python int, which has no fixed width.
"""

from __future__ import annotations

import operator
from enum import Enum
from typing import Callable, Protocol, runtime_checkable

from int_types import IntType, truncdiv


class Operation(Enum):
    """Operations an overflow predicate exists for."""

    ASSIGN = "assign"
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"


@runtime_checkable
class TypedInteger(Protocol):
    """Anything that carries an integer value together with its IntType."""

    int_type: IntType

    def get(self) -> int: ...


def promote(operand) -> tuple[int, IntType | None]:
    """Widen an operand to a Python int, keeping track of its source type.

    Raises TypeError for anything that is not an integer.
    """
    if isinstance(operand, TypedInteger):
        return operand.get(), operand.int_type
    return operator.index(operand), None


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def assign(rhs: int, lhs_type: IntType) -> bool:
    """True if ``rhs`` cannot be represented in ``lhs_type``."""
    return rhs > lhs_type.hi or rhs < lhs_type.lo


def sub(lhs: int, rhs: int, lhs_type: IntType,
        rhs_type: IntType | None = None) -> bool:
    """True if ``lhs - rhs`` falls outside ``lhs_type``."""
    return (
        rhs < 0 and lhs > lhs_type.hi + rhs
        or rhs > 0 and lhs < lhs_type.lo + rhs
    )


def add(lhs: int, rhs: int, lhs_type: IntType,
        rhs_type: IntType | None = None) -> bool:
    """True if ``lhs + rhs`` falls outside ``lhs_type``.

    A negative ``rhs`` is checked as ``lhs - (-rhs)``.  When ``rhs`` is the
    minimum of its own type that negation would overflow in that type, so
    the sum is reported as an overflow without looking any further.  This
    rejects some sums that would fit (``127 + -128`` in int8).
    """
    if rhs < 0:
        if rhs_type is not None and rhs == rhs_type.lo:
            return True
        return sub(lhs, -rhs, lhs_type, rhs_type)
    if lhs >= 0:
        return lhs_type.hi - lhs < rhs
    return lhs_type.hi - rhs < lhs


def mul(lhs: int, rhs: int, lhs_type: IntType,
        rhs_type: IntType | None = None) -> bool:
    """True if ``lhs * rhs`` falls outside ``lhs_type``.

    Decided by sign case with one truncating division against the
    destination bound, never by computing the product.
    """
    if lhs == 0 or rhs == 0:
        return False

    if lhs < 0:
        if rhs < 0:
            # Negating the minimum overflows
            if lhs == lhs_type.lo or rhs == lhs_type.lo:
                return True
            return mul(-lhs, -rhs, lhs_type, rhs_type)
        return truncdiv(lhs_type.lo, lhs) < rhs
    if rhs < 0:
        return truncdiv(lhs_type.lo, rhs) < lhs
    return truncdiv(lhs_type.hi, lhs) < rhs


def div(lhs: int, rhs: int, lhs_type: IntType,
        rhs_type: IntType | None = None) -> bool:
    """Always False.

    Division overflow is not detected: ``lhs_type.lo // -1`` does not fit
    in a signed type and is still reported as safe.
    """
    return False


_BINARY: dict[Operation, Callable[..., bool]] = {
    Operation.ADD: add,
    Operation.SUB: sub,
    Operation.MUL: mul,
    Operation.DIV: div,
}


def would_overflow(op: Operation, lhs: int, rhs: int, lhs_type: IntType,
                   rhs_type: IntType | None = None) -> bool:
    """Dispatch to the predicate for ``op``.

    For ``Operation.ASSIGN`` the left operand is ignored.
    """
    if op is Operation.ASSIGN:
        return assign(rhs, lhs_type)
    return _BINARY[op](lhs, rhs, lhs_type, rhs_type)
