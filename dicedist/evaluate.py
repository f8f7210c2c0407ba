"""Exact and Monte Carlo evaluation of a parsed dice expression."""

import enum
import logging
import numbers
import typing

import numpy

import dicedist.roll as roll
from dicedist.summary import Weighting

logger = logging.getLogger(__name__)

DEFAULT_MAX_EXACT_OUTCOMES = 5_000_000


class Mode(enum.Enum):
    EXACT = "exact"
    MONTE_CARLO = "monte-carlo"

    @property
    def weighting(self) -> Weighting:
        if self is Mode.EXACT:
            return Weighting.EQUAL_WEIGHT
        return Weighting.UNIFORM_SAMPLE


def evaluate_exact(
    tree: roll.Expression,
    max_outcomes: typing.Optional[int] = DEFAULT_MAX_EXACT_OUTCOMES,
) -> numpy.ndarray:
    """Enumerate every equally likely outcome of tree.

    The result has one entry per combination of die faces, so its length is
    the product of sides ** count over all rolls. Raises
    TooManyOutcomesError instead of enumerating more than max_outcomes
    entries; None disables the check.
    """
    n = tree.outcome_count(max_outcomes)
    if max_outcomes is not None and n > max_outcomes:
        logger.info(
            "refusing to enumerate more than %s outcomes of %s", max_outcomes, tree
        )
        raise roll.TooManyOutcomesError(
            "'%s' has more than %s outcomes, the limit for exact evaluation."
            " Try Monte Carlo mode instead." % (tree, max_outcomes)
        )
    logger.debug("enumerating %s outcomes of %s", n, tree)
    return tree.outcomes()


def evaluate_monte_carlo(
    tree: roll.Expression,
    simulation_count: int,
    rng=None,
    seed: typing.Optional[int] = None,
) -> numpy.ndarray:
    """Roll tree simulation_count times.

    rng is the random source; anything with a numpy-style random(size)
    method returning uniform floats in [0, 1) will do. Without one, a new
    numpy Generator seeded with seed is used.
    """
    if (
        isinstance(simulation_count, bool)
        or not isinstance(simulation_count, numbers.Integral)
        or simulation_count < 1
    ):
        raise roll.DiceRollError(
            "simulation count must be a positive integer, got %s" % simulation_count
        )
    if rng is None:
        rng = numpy.random.default_rng(seed)
    elif seed is not None:
        raise ValueError("pass either rng or seed, not both")
    logger.debug("sampling %s rolls of %s", simulation_count, tree)
    return tree.sample(rng, int(simulation_count))


def evaluate(
    tree: roll.Expression,
    mode: typing.Union[Mode, str],
    simulation_count: int = 10000,
    max_outcomes: typing.Optional[int] = DEFAULT_MAX_EXACT_OUTCOMES,
    rng=None,
    seed: typing.Optional[int] = None,
) -> typing.Tuple[numpy.ndarray, Weighting]:
    mode = Mode(mode)
    if mode is Mode.EXACT:
        outcomes = evaluate_exact(tree, max_outcomes)
    else:
        outcomes = evaluate_monte_carlo(tree, simulation_count, rng=rng, seed=seed)
    return outcomes, mode.weighting
