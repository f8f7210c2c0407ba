import typing

import plotly.express as px
import plotly.graph_objects as go

from dicedist.summary import Summary, Weighting


def plot_summary(result: Summary, title: typing.Optional[str] = None) -> go.Figure:
    """Bar chart of a summary's frequency table, with the mean marked."""
    data = result.to_frame()
    fig = px.bar(data, x="value", y=result.label, title=title)
    fig.update_xaxes(title_text="Result")
    fig.update_yaxes(title_text=result.label, rangemode="tozero")
    if result.weighting is Weighting.EQUAL_WEIGHT:
        fig.update_yaxes(tickformat="%")
    if result.frequency_table:
        fig.add_vline(
            x=result.mean,
            line_dash="dash",
            annotation_text="mean %.2f" % result.mean,
        )
    return fig


def write_plot(fig: go.Figure, path: str) -> None:
    """Write fig as interactive HTML for .html paths, else as a static image."""
    if path.lower().endswith(".html"):
        fig.write_html(path)
    else:
        fig.write_image(path)
