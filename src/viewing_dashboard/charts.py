from __future__ import annotations

import pandas as pd
import plotly.express as px
from plotly.graph_objects import Figure

from viewing_dashboard.models import DayPoint, TitlePoint


def metric_label(metric: str) -> str:
    return "Minutes" if metric == "duration" else "Views"


def days_frame(points: list[DayPoint]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"day": p.day, "metric": p.metric} for p in points],
        columns=["day", "metric"],
    )


def titles_frame(points: list[TitlePoint]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"title": p.title, "metric": p.metric} for p in points],
        columns=["title", "metric"],
    )


def build_day_figure(points: list[DayPoint], metric: str) -> Figure:
    label = metric_label(metric)
    fig = px.line(
        days_frame(points),
        x="day",
        y="metric",
        markers=True,
        labels={"day": "Day", "metric": label},
    )
    # Day keys are strings; keep them in the order given
    fig.update_xaxes(type="category")
    return fig


def build_title_figure(points: list[TitlePoint], metric: str) -> Figure:
    label = metric_label(metric)
    fig = px.bar(
        titles_frame(points),
        x="title",
        y="metric",
        text="metric",
        labels={"title": "Title", "metric": label},
    )
    fig.update_traces(textposition="outside")
    fig.update_xaxes(tickangle=-30)
    return fig
