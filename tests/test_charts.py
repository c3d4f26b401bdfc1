from viewing_dashboard.charts import (
    build_day_figure,
    build_title_figure,
    days_frame,
    metric_label,
    titles_frame,
)
from viewing_dashboard.models import DayPoint, TitlePoint


def test_frames_keep_columns_when_empty() -> None:
    assert list(days_frame([]).columns) == ["day", "metric"]
    assert list(titles_frame([]).columns) == ["title", "metric"]


def test_day_figure_plots_points_in_order() -> None:
    points = [DayPoint(day="2024-01-01", metric=30), DayPoint(day="2024-01-02", metric=45)]

    fig = build_day_figure(points, "duration")

    assert list(fig.data[0].x) == ["2024-01-01", "2024-01-02"]
    assert list(fig.data[0].y) == [30, 45]
    assert fig.layout.yaxis.title.text == "Minutes"


def test_title_figure_is_a_bar_chart() -> None:
    points = [TitlePoint(title="Dark", metric=3), TitlePoint(title="Inception", metric=1)]

    fig = build_title_figure(points, "count")

    assert fig.data[0].type == "bar"
    assert list(fig.data[0].x) == ["Dark", "Inception"]
    assert fig.layout.xaxis.tickangle == -30
    assert metric_label("count") == "Views"
