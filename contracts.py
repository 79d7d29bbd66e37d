"""
Contracts for the overflow predicates.

A Contract says WHAT a predicate must answer for a given IntType, not
HOW it gets there.  Each property is a callable that receives the
predicate under test followed by free integer values, and returns True
when the predicate behaves.  Because the predicate is passed in, the
same contract can be run against the real predicates or against a
deliberately broken one.

Ground truth is plain Python arithmetic: a Python int never overflows,
so ``not t.contains(a + b)`` is the exact answer the predicates
approximate without ever computing ``a + b``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

import overflow_checks
from int_types import IntType
from overflow_checks import Operation


# ---------------------------------------------------------------------------
# Core contract primitives
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Property:
    """A single verifiable property of a predicate."""

    name: str
    description: str
    predicate: Callable[..., bool]
    int_type: IntType
    # How many values past each bound the free values range over
    margin: int = 0

    def check(self, *args: Any) -> bool:
        """Evaluate the property with the given arguments."""
        return self.predicate(*args)


@dataclass
class Contract:
    """An ordered collection of properties for one predicate."""

    name: str
    properties: list[Property] = field(default_factory=list)

    def add(self, prop: Property) -> None:
        self.properties.append(prop)

    def __iter__(self):
        return iter(self.properties)

    def __len__(self):
        return len(self.properties)


# ---------------------------------------------------------------------------
# Contract builders
# ---------------------------------------------------------------------------

def assign_contract(t: IntType) -> Contract:
    """Narrowing assignment into ``t``."""
    contract = Contract(name="assign")

    contract.add(Property(
        name="exact",
        description="Reports overflow iff the value is outside the range",
        predicate=lambda check, v: check(v, t) == (not t.contains(v)),
        int_type=t,
        margin=2,
    ))

    contract.add(Property(
        name="bounds_accepted",
        description="Exactly lo and exactly hi fit",
        predicate=lambda check: not check(t.lo, t) and not check(t.hi, t),
        int_type=t,
    ))

    return contract


def add_contract(t: IntType) -> Contract:
    """Addition of two values of type ``t``."""
    contract = Contract(name="add")

    contract.add(Property(
        name="exact",
        description="Reports overflow iff a + b is outside the range  [rhs != lo]",
        predicate=lambda check, a, b: (
            # rhs == lo is always rejected, see rejects_negated_minimum
            b == t.lo or check(a, b, t, t) == (not t.contains(a + b))
        ),
        int_type=t,
    ))

    contract.add(Property(
        name="rejects_negated_minimum",
        description="a + lo is reported as overflow for signed types",
        predicate=lambda check, a: not t.signed or check(a, t.lo, t, t),
        int_type=t,
    ))

    contract.add(Property(
        name="native_rhs_exact",
        description="With a plain int rhs the answer is exact for every rhs",
        predicate=lambda check, a, b: check(a, b, t) == (not t.contains(a + b)),
        int_type=t,
    ))

    return contract


def sub_contract(t: IntType) -> Contract:
    """Subtraction of two values of type ``t``."""
    contract = Contract(name="sub")

    contract.add(Property(
        name="exact",
        description="Reports overflow iff a - b is outside the range",
        predicate=lambda check, a, b: check(a, b, t, t) == (not t.contains(a - b)),
        int_type=t,
    ))

    contract.add(Property(
        name="zero_never_overflows",
        description="a - 0 always fits",
        predicate=lambda check, a: not check(a, 0, t, t),
        int_type=t,
    ))

    return contract


def mul_contract(t: IntType) -> Contract:
    """Multiplication of two values of type ``t``."""
    contract = Contract(name="mul")

    contract.add(Property(
        name="exact",
        description="Reports overflow iff a * b is outside the range",
        predicate=lambda check, a, b: check(a, b, t, t) == (not t.contains(a * b)),
        int_type=t,
    ))

    contract.add(Property(
        name="zero_never_overflows",
        description="a * 0 and 0 * a always fit",
        predicate=lambda check, a: not check(a, 0, t, t) and not check(0, a, t, t),
        int_type=t,
    ))

    contract.add(Property(
        name="commutative",
        description="mul(a, b) == mul(b, a)",
        predicate=lambda check, a, b: check(a, b, t, t) == check(b, a, t, t),
        int_type=t,
    ))

    return contract


def div_contract(t: IntType) -> Contract:
    """Division.  Overflow is not detected, so this only pins that down."""
    contract = Contract(name="div")

    contract.add(Property(
        name="never_reports",
        description="Division never reports overflow (lo / -1 included)",
        predicate=lambda check, a, b: not check(a, b, t, t),
        int_type=t,
    ))

    return contract


CONTRACTS: dict[Operation, tuple[Callable[[IntType], Contract], Callable[..., bool]]] = {
    Operation.ASSIGN: (assign_contract, overflow_checks.assign),
    Operation.ADD: (add_contract, overflow_checks.add),
    Operation.SUB: (sub_contract, overflow_checks.sub),
    Operation.MUL: (mul_contract, overflow_checks.mul),
    Operation.DIV: (div_contract, overflow_checks.div),
}
