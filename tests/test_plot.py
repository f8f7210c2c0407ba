import pytest

from dicedist.evaluate import evaluate_exact
from dicedist.plot import plot_summary, write_plot
from dicedist.roll_parser import parse
from dicedist.summary import summarize


def test_plot_exact_distribution():
    result = summarize(evaluate_exact(parse("2d6")), "equal-weight")
    fig = plot_summary(result, title="2d6")
    assert fig.layout.title.text == "2d6"
    assert fig.layout.xaxis.title.text == "Result"
    assert fig.layout.yaxis.title.text == "Probability"
    assert fig.layout.yaxis.tickformat == "%"
    assert list(fig.data[0].x) == list(range(2, 13))
    assert list(fig.data[0].y) == pytest.approx(
        [1 / 36, 2 / 36, 3 / 36, 4 / 36, 5 / 36, 6 / 36, 5 / 36, 4 / 36, 3 / 36, 2 / 36, 1 / 36]
    )
    assert len(fig.layout.shapes) == 1
    assert fig.layout.shapes[0].x0 == pytest.approx(7.0)


def test_plot_samples_uses_frequency_axis():
    fig = plot_summary(summarize([1, 1, 2], "uniform-sample"))
    assert fig.layout.yaxis.title.text == "Frequency"
    assert fig.layout.yaxis.tickformat is None
    assert list(fig.data[0].y) == [2, 1]


def test_write_html(tmp_path):
    path = tmp_path / "plot.html"
    write_plot(plot_summary(summarize([3, 4], "uniform-sample")), str(path))
    assert "plotly" in path.read_text()
