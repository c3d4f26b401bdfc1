import logging

import streamlit as st

from viewing_dashboard.charts import build_day_figure, build_title_figure, metric_label, titles_frame
from viewing_dashboard.config import load_settings
from viewing_dashboard.logging_setup import configure_logging
from viewing_dashboard.session import DashboardSession

settings = load_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("viewing_dashboard")

st.set_page_config(page_title="Viewing Dashboard", page_icon="📺", layout="wide")


def get_session() -> DashboardSession:
    # One session per browser tab; a rerun must not reset it
    if "session" not in st.session_state:
        st.session_state["session"] = DashboardSession(
            options=settings.aggregation_options(),
            metric=settings.metric,
            page_size=settings.page_size,
            logger=logger,
        )
        st.session_state["loaded_file_id"] = None
        st.session_state["title_page"] = 1
    return st.session_state["session"]


session = get_session()

st.title("📺 Netflix Viewing Dashboard")
st.write("Upload your `ViewingActivity.csv`. It is processed locally and never leaves this machine.")

# ---------- File input ----------
uploaded = st.file_uploader("Drag & drop CSV here, or click to choose", type=["csv"])

if uploaded is not None and uploaded.file_id != st.session_state["loaded_file_id"]:
    session.load(uploaded)
    st.session_state["loaded_file_id"] = uploaded.file_id
    st.session_state["title_page"] = 1

if session.error:
    st.error(session.error)

if session.rows is not None:
    info_col, clear_col = st.columns([4, 1])
    with info_col:
        st.caption(f"Parsed {len(session.rows):,} rows.")
    with clear_col:
        if st.button("Clear data"):
            session.clear()
            st.rerun()

# ---------- Charts ----------
report = session.report
if report is not None:
    label = metric_label(report.metric)
    left, right = st.columns(2)

    with left:
        st.subheader(f"{label} per day")
        st.plotly_chart(build_day_figure(report.by_day, report.metric), use_container_width=True)

    with right:
        st.subheader(f"Top {settings.top_n} titles (by {label.lower()})")
        st.plotly_chart(build_title_figure(session.top_titles(), report.metric), use_container_width=True)

    st.subheader("All titles")
    page = session.title_page(st.session_state["title_page"])
    prev_col, page_col, next_col = st.columns([1, 2, 1])
    with prev_col:
        if st.button("◀ Previous", disabled=page.page <= 1):
            st.session_state["title_page"] = page.page - 1
            st.rerun()
    with page_col:
        st.caption(f"Page {page.page} of {page.page_count} ({page.total} titles)")
    with next_col:
        if st.button("Next ▶", disabled=page.page >= page.page_count):
            st.session_state["title_page"] = page.page + 1
            st.rerun()

    st.plotly_chart(build_title_figure(page.items, report.metric), use_container_width=True)
    st.dataframe(titles_frame(page.items), use_container_width=True, hide_index=True)

# ---------- Footer ----------
st.caption(
    "Tip: Get your CSV from Netflix → Account → Profiles → Your Profile → Viewing activity → Download all."
)
