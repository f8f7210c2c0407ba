"""Reduce an outcome sequence to display statistics and a frequency table."""

import dataclasses
import enum
import math
import typing

import numpy
import pandas


class Weighting(enum.Enum):
    """How the entries of an outcome sequence are weighted.

    Monte Carlo output is a set of samples, counted as raw frequencies.
    Exact output lists every outcome once with equal weight, so counts are
    divided by the sequence length to give probabilities.
    """

    UNIFORM_SAMPLE = "uniform-sample"
    EQUAL_WEIGHT = "equal-weight"

    @property
    def label(self) -> str:
        if self is Weighting.EQUAL_WEIGHT:
            return "Probability"
        return "Frequency"


@dataclasses.dataclass(frozen=True)
class Summary:
    weighting: Weighting
    min: float
    max: float
    mean: float
    frequency_table: typing.Dict[int, float]
    total: int
    non_finite: int

    @property
    def label(self) -> str:
        return self.weighting.label

    def to_frame(self) -> pandas.DataFrame:
        return pandas.DataFrame(
            {
                "value": list(self.frequency_table.keys()),
                self.label: list(self.frequency_table.values()),
            }
        )


DEFAULT_MAX_BINS = 100_000


def summarize(
    outcomes: typing.Sequence[float],
    weighting: typing.Union[Weighting, str],
    max_bins: int = DEFAULT_MAX_BINS,
) -> Summary:
    """Summarize an outcome sequence.

    Non-finite outcomes (from division by zero) are left out of min, max,
    mean and the table, but still count toward the total that exact
    probabilities are divided by. Non-integer outcomes are binned by floor.
    The table lists every integer from min to max, unless that would take
    more than max_bins entries; then only the values that occur are listed.
    An empty sequence gives zeros and an empty table.
    """
    weighting = Weighting(weighting)
    values = numpy.asarray(outcomes, dtype=float).ravel()
    finite = values[numpy.isfinite(values)]
    non_finite = int(values.size - finite.size)

    if finite.size == 0:
        return Summary(weighting, 0.0, 0.0, 0.0, {}, int(values.size), non_finite)

    low = math.floor(finite.min())
    high = math.floor(finite.max())
    if high - low + 1 > max_bins:
        keys, counts = numpy.unique(numpy.floor(finite), return_counts=True)
        bins = [int(key) for key in keys]
    else:
        counts = numpy.bincount(
            (numpy.floor(finite) - low).astype(numpy.int64), minlength=high - low + 1
        )
        bins = list(range(low, high + 1))
    table: typing.Dict[int, float] = {}
    for key, count in zip(bins, counts):
        if weighting is Weighting.EQUAL_WEIGHT:
            table[key] = float(count / values.size)
        else:
            table[key] = int(count)

    return Summary(
        weighting,
        float(finite.min()),
        float(finite.max()),
        float(finite.mean()),
        table,
        int(values.size),
        non_finite,
    )
