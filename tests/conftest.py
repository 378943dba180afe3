"""
Shared pytest fixtures and utilities for testing numctx contexts and elements.

This module provides:
- Fixtures for the contexts used across the test modules
- Sample values for randomized soundness checks
- Helpers for serialization round-trips and context equality laws
"""

import random
from fractions import Fraction
from typing import Any, Callable

import pytest

from numctx.math import (
    QQ,
    ZZ,
    ComplexField,
    Context,
    Element,
    FiniteField,
    IntModCtx,
    NumberField,
    RealField,
    deserialize,
    loads,
    dumps,
    serialize,
)


@pytest.fixture
def zz():
    """The integer ring."""
    return ZZ


@pytest.fixture
def qq():
    """The rational field."""
    return QQ


@pytest.fixture
def z12():
    """Integers mod 12 (not a field)."""
    return IntModCtx(12)


@pytest.fixture
def z7():
    """Integers mod 7 (a field)."""
    return IntModCtx(7)


@pytest.fixture
def gf9():
    """GF(3^2) with its default modulus."""
    return FiniteField(3, 2)


@pytest.fixture
def qsqrt2():
    """Q(sqrt(2)) defined by x^2 - 2."""
    return NumberField([-2, 0, 1])


@pytest.fixture
def rr53():
    """Real balls at double precision."""
    return RealField(53)


@pytest.fixture
def rr100():
    """Real balls at 100 bits."""
    return RealField(100)


@pytest.fixture
def cc53():
    """Complex balls at double precision."""
    return ComplexField(53)


@pytest.fixture
def rational_samples():
    """Factory for reproducible lists of rationals with small height."""
    def _samples(count: int = 50, seed: int = 1234, bound: int = 1000) -> list[Fraction]:
        rng = random.Random(seed)
        return [
            Fraction(rng.randint(-bound, bound), rng.randint(1, bound))
            for _ in range(count)
        ]
    return _samples


@pytest.fixture
def assert_round_trip():
    """Helper to assert that an element survives serialize/deserialize and the JSON form."""
    def _assert_round_trip(value: Element, context: Context | None = None) -> Element:
        """
        Assert that an element is rebuilt equal to itself.

        Args:
            value: The element to serialize
            context: Optional context to attach on the way back

        Returns:
            The element decoded from the JSON bytes
        """
        rebuilt = deserialize(serialize(value), context)
        assert type(rebuilt) is type(value)
        assert rebuilt.context == value.context
        assert rebuilt == value

        decoded = loads(dumps(value), context)
        assert decoded == value
        return decoded

    return _assert_round_trip


@pytest.fixture
def assert_context_laws():
    """Helper to assert the structural equality laws on three equal contexts."""
    def _assert_laws(make: Callable[[], Context], other: Any) -> None:
        """
        Assert reflexive, symmetric and transitive equality plus hash agreement.

        Args:
            make: Builds a fresh, structurally equal context on every call
            other: A context that must compare unequal
        """
        a, b, c = make(), make(), make()
        assert a == a
        assert a == b and b == a
        assert a == b and b == c and a == c
        assert hash(a) == hash(b)
        assert a != other
        assert other != a

    return _assert_laws


pytestmark = [
    pytest.mark.filterwarnings("ignore::DeprecationWarning"),
]
