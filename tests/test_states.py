"""
Tests for the state predicate algebra.

These tests verify that:
1. Leaves match exactly the energies they describe
2. Not / And / Or obey boolean algebra for every energy
3. Malformed states are rejected at construction
4. Deep folds evaluate without recursion limits
"""

import pytest
import numpy as np

from state_mc.errors import InvalidPredicate, InvalidArgument
from state_mc.types import ExperimentConfig
from state_mc.states import (
    StatePredicate,
    Discrete,
    Interval,
    Not,
    And,
    Or,
    discrete,
    interval,
    negate,
    and_of,
    or_of,
    union_of,
    intersection_of,
    scattered_union,
    build_state,
    iter_nodes,
    leaf_count,
    depth,
)


ENERGIES = list(range(-12, 13))


def _sample_states():
    a = Interval(-5, 3)
    b = Discrete(7)
    c = Interval(0, 10)
    return a, b, c


# =============================================================================
# LEAF TESTS
# =============================================================================

class TestLeaves:
    """Discrete and Interval membership."""

    @pytest.mark.parametrize("s0", [-3, 0, 4])
    def test_discrete_matches_only_its_value(self, s0):
        state = Discrete(s0)
        for s in ENERGIES:
            assert state.contains(s) == (s == s0)

    def test_interval_is_closed(self):
        state = Interval(-2, 4)
        for s in ENERGIES:
            assert state.contains(s) == (-2 <= s <= 4)

    def test_single_point_interval(self):
        state = Interval(3, 3)
        assert state.contains(3)
        assert not state.contains(2)
        assert not state.contains(4)

    def test_inverted_interval_never_matches(self):
        """lo > hi is accepted and contains nothing."""
        state = Interval(5, -5)
        assert state.is_empty
        assert not any(state.contains(s) for s in ENERGIES)

    def test_large_energies(self):
        """Energies are unbounded Python ints."""
        big = 2 ** 80
        assert Discrete(big).contains(big)
        assert Interval(-big, big).contains(2 ** 79)
        assert not Interval(-big, big).contains(big + 1)

    def test_numpy_integers_are_normalized(self):
        state = Discrete(np.int64(3))
        assert state.value == 3
        assert type(state.value) is int

    @pytest.mark.parametrize("bad", [3.0, "3", None, True])
    def test_non_integer_leaf_rejected(self, bad):
        with pytest.raises(InvalidPredicate, match="must be an integer"):
            Discrete(bad)

    def test_non_integer_interval_bound_rejected(self):
        with pytest.raises(InvalidPredicate, match="Interval hi"):
            Interval(0, 2.5)

    def test_leaves_are_frozen(self):
        state = Discrete(1)
        with pytest.raises(AttributeError):
            state.value = 2


# =============================================================================
# COMPOSITE TESTS
# =============================================================================

class TestComposites:
    """Boolean algebra over every energy in a window."""

    def test_not_negates(self):
        a, _, _ = _sample_states()
        for s in ENERGIES:
            assert Not(a).contains(s) == (not a.contains(s))

    def test_double_negation_is_identity(self):
        a, _, _ = _sample_states()
        for s in ENERGIES:
            assert Not(Not(a)).contains(s) == a.contains(s)

    def test_and_or_truth_tables(self):
        a, b, c = _sample_states()
        for s in ENERGIES:
            assert And(a, c).contains(s) == (a.contains(s) and c.contains(s))
            assert Or(a, b).contains(s) == (a.contains(s) or b.contains(s))

    def test_commutative(self):
        a, b, c = _sample_states()
        for s in ENERGIES:
            assert And(a, c).contains(s) == And(c, a).contains(s)
            assert Or(a, b).contains(s) == Or(b, a).contains(s)

    def test_associative(self):
        a, b, c = _sample_states()
        for s in ENERGIES:
            assert Or(Or(a, b), c).contains(s) == Or(a, Or(b, c)).contains(s)
            assert And(And(a, b), c).contains(s) == And(a, And(b, c)).contains(s)

    def test_de_morgan(self):
        a, b, c = _sample_states()
        for s in ENERGIES:
            assert Not(And(a, c)).contains(s) == Or(Not(a), Not(c)).contains(s)
            assert Not(Or(a, b)).contains(s) == And(Not(a), Not(b)).contains(s)

    def test_operators_build_the_same_nodes(self):
        a, b, c = _sample_states()
        assert isinstance(~a, Not)
        assert isinstance(a & c, And)
        assert isinstance(a | b, Or)
        for s in ENERGIES:
            assert ((a | b) & ~c).contains(s) == And(Or(a, b), Not(c)).contains(s)

    def test_factories(self):
        state = or_of(and_of(interval(0, 9), negate(discrete(4))), discrete(20))
        assert state.contains(3)
        assert not state.contains(4)
        assert state.contains(20)
        assert not state.contains(10)

    def test_shared_children_are_not_mutated(self):
        """Composing reuses a child without changing it."""
        a = Interval(0, 5)
        union = Or(a, Discrete(9))
        inter = And(a, Not(Discrete(2)))
        assert a.contains(2)
        assert union.contains(2)
        assert not inter.contains(2)
        assert union.first is a and inter.first is a

    def test_identity_equality(self):
        assert Discrete(1) != Discrete(1)
        a = Discrete(1)
        assert a == a
        assert len({a, a, Discrete(1)}) == 2


class TestInvalidComposition:
    """Missing or non-predicate children fail at construction."""

    def test_not_of_none(self):
        with pytest.raises(InvalidPredicate, match="Not needs a StatePredicate"):
            Not(None)

    def test_negate_of_none(self):
        with pytest.raises(InvalidPredicate):
            negate(None)

    @pytest.mark.parametrize("cls", [And, Or])
    def test_binary_with_missing_child(self, cls):
        with pytest.raises(InvalidPredicate, match="second"):
            cls(Discrete(1), None)
        with pytest.raises(InvalidPredicate, match="first"):
            cls(5, Discrete(1))

    def test_operator_with_non_predicate(self):
        with pytest.raises(InvalidPredicate):
            Discrete(1) | 5

    def test_bare_base_class_rejected(self):
        with pytest.raises(InvalidPredicate, match="bare StatePredicate"):
            Not(StatePredicate())
        with pytest.raises(InvalidPredicate, match="second"):
            Or(Discrete(1), StatePredicate())
        with pytest.raises(InvalidPredicate):
            Discrete(1) & StatePredicate()

    def test_invalid_predicate_is_type_error(self):
        with pytest.raises(TypeError):
            Not("state")


# =============================================================================
# VECTORIZED EVALUATION
# =============================================================================

class TestMask:
    """mask() agrees with contains() element by element."""

    def test_mask_matches_contains(self):
        a, b, c = _sample_states()
        state = Or(And(a, Not(Discrete(0))), Or(b, Interval(9, 11)))
        values = np.arange(-12, 13, dtype=np.int64)
        expected = np.array([state.contains(int(v)) for v in values])
        result = state.mask(values)
        assert result.dtype == bool
        assert np.array_equal(result, expected)

    def test_mask_keeps_shape(self):
        values = np.arange(12, dtype=np.int64).reshape(3, 4)
        assert Interval(2, 5).mask(values).shape == (3, 4)

    def test_mask_of_inverted_interval(self):
        values = np.arange(-10, 10, dtype=np.int64)
        assert not Interval(3, -3).mask(values).any()
        assert Not(Interval(3, -3)).mask(values).all()


# =============================================================================
# FOLDS AND BUILDERS
# =============================================================================

class TestFolds:
    """Iterative union / intersection building."""

    def test_union_of_is_left_nested(self):
        a, b, c = Discrete(1), Discrete(2), Discrete(3)
        union = union_of([a, b, c])
        assert isinstance(union, Or)
        assert union.second is c
        assert union.first.first is a
        assert union.first.second is b

    def test_union_of_single_predicate(self):
        a = Discrete(1)
        assert union_of([a]) is a

    def test_empty_fold_rejected(self):
        with pytest.raises(InvalidPredicate, match="no states"):
            union_of([])
        with pytest.raises(InvalidPredicate):
            intersection_of(iter(()))

    def test_fold_rejects_non_predicate(self):
        with pytest.raises(InvalidPredicate):
            union_of([None, Discrete(1)])
        with pytest.raises(InvalidPredicate):
            union_of([Discrete(1), None])

    def test_intersection_of(self):
        state = intersection_of([Interval(0, 10), Interval(5, 20), Not(Discrete(7))])
        assert [s for s in range(-1, 22) if state.contains(s)] == [5, 6, 8, 9, 10]

    def test_rebinding_accumulator(self):
        """acc = Or(acc, leaf) in a loop, as the scattered state is grown."""
        acc = Or(Discrete(0), Discrete(2))
        for point in range(4, 20, 2):
            acc = Or(acc, Discrete(point))
        assert [s for s in range(-1, 21) if acc.contains(s)] == list(range(0, 20, 2))

    def test_deep_union_has_no_recursion_limit(self):
        n = 5000
        state = union_of(Discrete(i) for i in range(n))
        assert depth(state) == n
        assert leaf_count(state) == n
        assert state.contains(0)
        assert state.contains(n - 1)
        assert not state.contains(n)
        assert state.mask(np.array([-1, 0, 2500, n])).tolist() == [False, True, True, False]
        assert repr(state).startswith("Or(Or(")

    def test_repr(self):
        state = Or(Not(Discrete(-5)), And(Interval(0, 3), Discrete(2)))
        assert repr(state) == "Or(Not(Discrete(-5)), And(Interval(0, 3), Discrete(2)))"

    def test_iter_nodes_preorder(self):
        a, b = Discrete(1), Interval(2, 3)
        state = And(Not(a), b)
        assert [type(n).__name__ for n in iter_nodes(state)] == [
            "And", "Not", "Discrete", "Interval"
        ]


class TestScatteredUnion:
    """The randomly spaced union of points."""

    def test_points_and_gaps(self):
        state = scattered_union(-1000, 500, max_step=4, seed=11)
        points = [n.value for n in iter_nodes(state) if isinstance(n, Discrete)]
        assert len(points) == 500
        assert points[0] == -1000
        gaps = np.diff(points)
        assert gaps.min() >= 1
        assert gaps.max() <= 4

    def test_same_seed_same_state(self):
        first = scattered_union(0, 50, 4, seed=3)
        second = scattered_union(0, 50, 4, seed=3)
        assert repr(first) == repr(second)

    def test_unit_steps_are_consecutive(self):
        state = scattered_union(10, 5, max_step=1, seed=0)
        assert [s for s in range(0, 20) if state.contains(s)] == [10, 11, 12, 13, 14]

    def test_single_point(self):
        state = scattered_union(7, 1, seed=0)
        assert isinstance(state, Discrete)
        assert state.value == 7

    @pytest.mark.parametrize("count,max_step", [(0, 4), (5, 0)])
    def test_invalid_parameters(self, count, max_step):
        with pytest.raises(InvalidArgument):
            scattered_union(0, count, max_step)


class TestBuildState:
    """States named by experiment configs."""

    def test_ordered(self):
        state = build_state(ExperimentConfig(name="o", state_kind="ordered", bound=1000))
        assert isinstance(state, Interval)
        assert (state.lo, state.hi) == (0, 500)

    def test_scattered(self):
        config = ExperimentConfig(name="s", state_kind="scattered", bound=100)
        state = build_state(config, seed=1)
        assert isinstance(state, StatePredicate)
        assert leaf_count(state) == 50
        assert state.contains(-100)
