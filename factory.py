"""
The verified CheckedInt factory.

The factory does not just hand out a CheckedInt class for an IntType -
it first runs every predicate contract for that type and refuses to
return the class if any property fails.

Flow:
  1. Caller requests a CheckedInt class for an IntType.
  2. Factory builds the contracts for that type.
  3. Factory runs each contract against its overflow predicate.
  4. If verification passes  -> return the class.
     If verification fails   -> raise, never hand out an unproven type.

Small types (INT4, INT8, UINT8 ...) are verified exhaustively over every
operand combination.  Wider types are verified on their edge values
plus a seeded random sample.
"""

from __future__ import annotations

import inspect
import itertools
import random
from dataclasses import dataclass, field
from typing import Callable

from checked_int import CheckedInt
from contracts import CONTRACTS, Contract, Property
from int_types import IntType


@dataclass
class VerificationResult:
    """Outcome of verifying one property."""

    property_name: str
    passed: bool
    counterexample: tuple | None = None
    tests_run: int = 0

    def __repr__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        text = f"[{status}] {self.property_name} ({self.tests_run} operand sets)"
        if self.counterexample is not None:
            text += f"  failing operands={self.counterexample}"
        return text


@dataclass
class VerificationReport:
    """Aggregate result of verifying one predicate contract for one IntType."""

    contract_name: str
    int_type: IntType | None = None
    results: list[VerificationResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    def summary(self) -> str:
        header = self.contract_name
        if self.int_type is not None:
            header += f" [{self.int_type}: {self.int_type.lo}..{self.int_type.hi}]"
        lines = [f"--- {header} ---"]
        for r in self.results:
            lines.append(f"  {r}")
        status = "PREDICATE HOLDS" if self.passed else "PREDICATE BROKEN"
        lines.append(f"  => {status}")
        return "\n".join(lines)


class VerificationError(Exception):
    """Raised when a predicate fails its contract."""

    def __init__(self, report: VerificationReport):
        self.report = report
        super().__init__(
            f"{report.contract_name} predicate failed verification:\n{report.summary()}"
        )


# ---------------------------------------------------------------------------
# The factory
# ---------------------------------------------------------------------------

class CheckedIntFactory:
    """Produces CheckedInt classes whose predicates are verified."""

    EXHAUSTIVE_THRESHOLD = 256  # max width for brute-force check
    SAMPLE_COUNT = 10_000
    SEED = 0

    @classmethod
    def create(cls, int_type: IntType) -> type[CheckedInt]:
        """Verify every contract for ``int_type`` and return its class."""
        for report in cls.verify(int_type):
            if not report.passed:
                raise VerificationError(report)
        return CheckedInt.for_type(int_type)

    @classmethod
    def verify(cls, int_type: IntType) -> list[VerificationReport]:
        """Run every contract for ``int_type`` and return the reports."""
        reports = []
        for build, check in CONTRACTS.values():
            reports.append(cls._verify_contract(build(int_type), check, int_type))
        return reports

    # -- internal ---------------------------------------------------------

    @classmethod
    def _verify_contract(
        cls, contract: Contract, check: Callable[..., bool], int_type: IntType
    ) -> VerificationReport:
        report = VerificationReport(contract_name=contract.name, int_type=int_type)
        for prop in contract:
            report.results.append(cls._verify_property(prop, check, int_type))
        return report

    @classmethod
    def _verify_property(
        cls, prop: Property, check: Callable[..., bool], int_type: IntType
    ) -> VerificationResult:
        arity = _predicate_arity(prop)

        if int_type.width <= cls.EXHAUSTIVE_THRESHOLD:
            domain = range(int_type.lo - prop.margin, int_type.hi + prop.margin + 1)
            combos = itertools.product(domain, repeat=arity)
        else:
            combos = _generate_samples(
                int_type, arity, prop.margin, cls.SAMPLE_COUNT, cls.SEED
            )

        tests_run = 0
        for combo in combos:
            tests_run += 1
            if not prop.check(check, *combo):
                return VerificationResult(
                    property_name=prop.name,
                    passed=False,
                    counterexample=combo,
                    tests_run=tests_run,
                )

        return VerificationResult(
            property_name=prop.name,
            passed=True,
            tests_run=tests_run,
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _predicate_arity(prop: Property) -> int:
    """
    Infer how many *value* arguments a property predicate expects
    (excluding the predicate under test, which is always the first arg).
    """
    sig = inspect.signature(prop.predicate)
    return len(sig.parameters) - 1


def _generate_samples(
    int_type: IntType, arity: int, margin: int, count: int, seed: int
) -> list[tuple[int, ...]]:
    """Generate edge-case + seeded random samples for property checking."""
    lo, hi = int_type.lo, int_type.hi
    rng = random.Random(seed)

    edge_values = [lo, lo + 1, -1, 0, 1, hi - 1, hi]
    edge_values = [v for v in edge_values if int_type.contains(v)]
    for step in range(1, margin + 1):
        edge_values += [lo - step, hi + step]

    samples: list[tuple[int, ...]] = list(itertools.product(edge_values, repeat=arity))

    if arity == 0:
        return samples

    # Random fill
    while len(samples) < count:
        samples.append(tuple(
            rng.randint(lo - margin, hi + margin) for _ in range(arity)
        ))

    return samples
