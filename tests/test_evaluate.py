import numpy
import pytest

import dicedist.roll as roll
from dicedist.evaluate import (
    Mode,
    evaluate,
    evaluate_exact,
    evaluate_monte_carlo,
)
from dicedist.roll_parser import parse
from dicedist.summary import Weighting


class _FixedSource:
    """Random source that always returns the same uniform value."""

    def __init__(self, value: float) -> None:
        self.value = value

    def random(self, size):
        return numpy.full(size, self.value)


@pytest.mark.parametrize(
    "text, length",
    [("2d6", 36), ("1d20", 20), ("2d6+1d4*3", 144), ("(2d6+1d4)*2", 144), ("5", 1)],
)
def test_exact_length_is_product_of_leaves(text, length):
    assert len(evaluate_exact(parse(text))) == length


def test_exact_two_dice_sum():
    outcomes = evaluate_exact(parse("1d6+1d6"))
    assert len(outcomes) == 36
    assert numpy.count_nonzero(outcomes == 7) == 6
    assert numpy.count_nonzero(outcomes == 2) == 1
    assert numpy.count_nonzero(outcomes == 12) == 1


def test_exact_folds_one_die_at_a_time():
    assert evaluate_exact(roll.Roll(2, 3)).tolist() == [2, 3, 4, 3, 4, 5, 4, 5, 6]


def test_exact_cross_product_is_left_major():
    assert evaluate_exact(parse("1d2-1d3")).tolist() == [0, -1, -2, 1, 0, -1]


def test_constant_evaluates_to_itself():
    tree = parse("5")
    assert evaluate_exact(tree).tolist() == [5]
    assert evaluate_monte_carlo(tree, 200, seed=0).tolist() == [5] * 200


def test_exact_refuses_to_exceed_cap():
    with pytest.raises(roll.TooManyOutcomesError) as info:
        evaluate_exact(parse("10d10"), max_outcomes=1000)
    assert isinstance(info.value, OverflowError)
    assert isinstance(info.value, roll.DiceRollError)
    assert "Monte Carlo" in str(info.value)


def test_exact_cap_handles_huge_counts():
    with pytest.raises(roll.TooManyOutcomesError) as info:
        evaluate_exact(parse("6000d6"))
    assert "Monte Carlo" in str(info.value)
    with pytest.raises(roll.TooManyOutcomesError):
        evaluate_exact(parse("30000000d6"), max_outcomes=1000)


def test_exact_cap_is_inclusive():
    assert len(evaluate_exact(parse("2d6"), max_outcomes=36)) == 36


def test_exact_cap_can_be_disabled():
    assert len(evaluate_exact(parse("3d6"), max_outcomes=None)) == 216


def test_exact_division_by_zero_is_not_an_error():
    outcomes = evaluate_exact(parse("1d2/(1d2-1d2)"))
    assert len(outcomes) == 8
    assert numpy.count_nonzero(numpy.isinf(outcomes)) == 4
    assert sorted(outcomes[numpy.isfinite(outcomes)].tolist()) == [-2, -1, 1, 2]

    outcomes = evaluate_exact(parse("(1d2-1d2)/(1d2-1d2)"))
    assert numpy.isnan(outcomes).any()


def test_monte_carlo_length_and_bounds():
    tree = parse("(2d6+1d4)*2-1d3")
    exact = evaluate_exact(tree)
    samples = evaluate_monte_carlo(tree, 1000, seed=1)
    assert len(samples) == 1000
    assert samples.min() >= exact.min()
    assert samples.max() <= exact.max()


def test_monte_carlo_seed_is_reproducible():
    tree = parse("3d6+1d20")
    first = evaluate_monte_carlo(tree, 500, seed=42)
    second = evaluate_monte_carlo(tree, 500, seed=42)
    assert numpy.array_equal(first, second)


def test_monte_carlo_scales_and_floors_uniform_values():
    tree = parse("2d6")
    assert evaluate_monte_carlo(tree, 10, rng=_FixedSource(0.0)).tolist() == [2] * 10
    assert evaluate_monte_carlo(tree, 10, rng=_FixedSource(0.5)).tolist() == [8] * 10
    assert evaluate_monte_carlo(tree, 10, rng=_FixedSource(0.9999)).tolist() == [
        12
    ] * 10


def test_monte_carlo_accepts_numpy_generator():
    samples = evaluate_monte_carlo(parse("1d6"), 300, rng=numpy.random.default_rng(7))
    assert set(samples.tolist()) <= {1, 2, 3, 4, 5, 6}


def test_monte_carlo_mean_converges():
    samples = evaluate_monte_carlo(parse("2d6"), 20000, seed=0)
    assert samples.mean() == pytest.approx(7.0, abs=0.1)


def test_monte_carlo_division_by_zero_is_not_an_error():
    samples = evaluate_monte_carlo(parse("1/(1d2-1d2)"), 1000, seed=3)
    assert numpy.isinf(samples).any()


def test_monte_carlo_requires_positive_count():
    with pytest.raises(roll.DiceRollError):
        evaluate_monte_carlo(parse("1d6"), 0)


@pytest.mark.parametrize("count", [10.5, True, "100"])
def test_monte_carlo_requires_integer_count(count):
    with pytest.raises(roll.DiceRollError):
        evaluate_monte_carlo(parse("1d6"), count)


def test_monte_carlo_rejects_rng_and_seed_together():
    with pytest.raises(ValueError):
        evaluate_monte_carlo(parse("1d6"), 10, rng=numpy.random.default_rng(), seed=1)


def test_evaluate_dispatches_on_mode():
    tree = parse("1d6+1d6")
    outcomes, weighting = evaluate(tree, "exact")
    assert len(outcomes) == 36
    assert weighting is Weighting.EQUAL_WEIGHT

    outcomes, weighting = evaluate(tree, Mode.MONTE_CARLO, simulation_count=250, seed=5)
    assert len(outcomes) == 250
    assert weighting is Weighting.UNIFORM_SAMPLE


def test_evaluate_rejects_unknown_mode():
    with pytest.raises(ValueError):
        evaluate(parse("1d6"), "guess")
