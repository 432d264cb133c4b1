"""
State predicate algebra.

A state is an immutable tree of membership tests over integer energies:
Discrete and Interval leaves combined by Not, And and Or.

Every node answers the same question two ways:
    contains(energy) -> bool        one energy
    mask(values) -> np.ndarray      element-wise over an integer array

Evaluation, repr and introspection walk the tree with an explicit stack,
so a left-nested union of thousands of points never hits the interpreter
recursion limit. Nodes are frozen after construction and compare by
identity; children may be shared between trees.
"""

import operator
from dataclasses import dataclass
from typing import Iterator, List, Tuple, Union

import numpy as np

from ..errors import InvalidPredicate


Energy = int
Evaluation = Union[bool, np.bool_, np.ndarray]


class StatePredicate:
    """Base class of all states."""

    @property
    def children(self) -> Tuple['StatePredicate', ...]:
        return ()

    def contains(self, energy: Energy) -> bool:
        """True if the energy lies inside this state."""
        return bool(_evaluate(self, energy))

    def mask(self, values: np.ndarray) -> np.ndarray:
        """
        Vectorized contains().

        Args:
            values: Integer array of energies (any shape)

        Returns:
            Boolean array of the same shape
        """
        values = np.asarray(values)
        return np.asarray(_evaluate(self, values), dtype=bool)

    def _test(self, values) -> Evaluation:
        raise NotImplementedError

    def _combine(self, *results: Evaluation) -> Evaluation:
        raise NotImplementedError

    def __invert__(self) -> 'Not':
        return Not(self)

    def __and__(self, other: 'StatePredicate') -> 'And':
        return And(self, other)

    def __or__(self, other: 'StatePredicate') -> 'Or':
        return Or(self, other)

    def __repr__(self) -> str:
        return _render(self)


# =============================================================================
# Leaves
# =============================================================================

@dataclass(frozen=True, eq=False, repr=False)
class Discrete(StatePredicate):
    """A single energy value."""
    value: Energy

    def __post_init__(self) -> None:
        object.__setattr__(self, 'value', _as_energy(self.value, 'Discrete value'))

    def _test(self, values) -> Evaluation:
        return values == self.value


@dataclass(frozen=True, eq=False, repr=False)
class Interval(StatePredicate):
    """
    Closed range lo <= s <= hi.

    An inverted range (lo > hi) is accepted and never matches.
    """
    lo: Energy
    hi: Energy

    def __post_init__(self) -> None:
        object.__setattr__(self, 'lo', _as_energy(self.lo, 'Interval lo'))
        object.__setattr__(self, 'hi', _as_energy(self.hi, 'Interval hi'))

    @property
    def is_empty(self) -> bool:
        return self.lo > self.hi

    def _test(self, values) -> Evaluation:
        return np.logical_and(self.lo <= values, values <= self.hi)


# =============================================================================
# Composites
# =============================================================================

@dataclass(frozen=True, eq=False, repr=False)
class Not(StatePredicate):
    """Complement of base."""
    base: StatePredicate

    def __post_init__(self) -> None:
        _require_predicate(self.base, 'Not', 'base')

    @property
    def children(self) -> Tuple[StatePredicate, ...]:
        return (self.base,)

    def _combine(self, result: Evaluation) -> Evaluation:
        return np.logical_not(result)


@dataclass(frozen=True, eq=False, repr=False)
class And(StatePredicate):
    """Intersection of two states."""
    first: StatePredicate
    second: StatePredicate

    def __post_init__(self) -> None:
        _require_predicate(self.first, 'And', 'first')
        _require_predicate(self.second, 'And', 'second')

    @property
    def children(self) -> Tuple[StatePredicate, ...]:
        return (self.first, self.second)

    def _combine(self, first: Evaluation, second: Evaluation) -> Evaluation:
        return np.logical_and(first, second)


@dataclass(frozen=True, eq=False, repr=False)
class Or(StatePredicate):
    """Union of two states."""
    first: StatePredicate
    second: StatePredicate

    def __post_init__(self) -> None:
        _require_predicate(self.first, 'Or', 'first')
        _require_predicate(self.second, 'Or', 'second')

    @property
    def children(self) -> Tuple[StatePredicate, ...]:
        return (self.first, self.second)

    def _combine(self, first: Evaluation, second: Evaluation) -> Evaluation:
        return np.logical_or(first, second)


# =============================================================================
# Factories
# =============================================================================

def discrete(value: Energy) -> Discrete:
    return Discrete(value)


def interval(lo: Energy, hi: Energy) -> Interval:
    return Interval(lo, hi)


def negate(predicate: StatePredicate) -> Not:
    return Not(predicate)


def and_of(first: StatePredicate, second: StatePredicate) -> And:
    return And(first, second)


def or_of(first: StatePredicate, second: StatePredicate) -> Or:
    return Or(first, second)


# =============================================================================
# Tree walking
# =============================================================================

def iter_nodes(root: StatePredicate) -> Iterator[StatePredicate]:
    """Yield every node of the tree in pre-order (shared children repeat)."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def leaf_count(root: StatePredicate) -> int:
    """Number of Discrete/Interval leaves, counting shared leaves once per use."""
    return sum(1 for node in iter_nodes(root) if not node.children)


def depth(root: StatePredicate) -> int:
    """Longest root-to-leaf path, counted in nodes (a leaf has depth 1)."""
    deepest = 0
    stack = [(root, 1)]
    while stack:
        node, level = stack.pop()
        deepest = max(deepest, level)
        stack.extend((child, level + 1) for child in node.children)
    return deepest


def _evaluate(root: StatePredicate, values) -> Evaluation:
    """Post-order evaluation with an explicit stack."""
    results: List[Evaluation] = []
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        children = node.children
        if not children:
            results.append(node._test(values))
        elif not expanded:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(children))
        else:
            args = results[-len(children):]
            del results[-len(children):]
            results.append(node._combine(*args))
    return results[0]


def _render(root: StatePredicate) -> str:
    parts: List[str] = []
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        children = node.children
        if isinstance(node, Discrete):
            parts.append(f"Discrete({node.value})")
        elif isinstance(node, Interval):
            parts.append(f"Interval({node.lo}, {node.hi})")
        elif not children:
            parts.append(f"{type(node).__name__}()")
        elif not expanded:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(children))
        else:
            args = parts[-len(children):]
            del parts[-len(children):]
            parts.append(f"{type(node).__name__}({', '.join(args)})")
    return parts[0]


def _as_energy(value, name: str) -> int:
    if isinstance(value, (bool, np.bool_)):
        raise InvalidPredicate(f"{name} must be an integer, got bool")
    try:
        return operator.index(value)
    except TypeError:
        raise InvalidPredicate(
            f"{name} must be an integer, got {type(value).__name__}"
        ) from None


def _require_predicate(child, owner: str, role: str) -> None:
    if not isinstance(child, StatePredicate):
        raise InvalidPredicate(
            f"{owner} needs a StatePredicate as {role}, got {type(child).__name__}"
        )
    if type(child) is StatePredicate:
        raise InvalidPredicate(
            f"{owner} needs a concrete state as {role}, got a bare StatePredicate"
        )
