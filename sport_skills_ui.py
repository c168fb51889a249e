"""UI helper module: sidebar controls shared by the Streamlit pages, plus the cached analysis loader."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from sport_skills_config import load_config
from sport_skills_core import SkillAnalysis, SportSkillsError, analyze, load_dataset


# Session state keys that preserve the sidebar choices across reruns.
SPORT_FILTER_KEY = "sport_filter"
SPORT_PICKER_KEY = "sport_picker"


@st.cache_data(show_spinner=False)
def _load_analysis(path: str) -> tuple[pd.DataFrame, SkillAnalysis]:
    df = load_dataset(path)
    return df, analyze(df)


def load_analysis_or_stop() -> tuple[pd.DataFrame, SkillAnalysis]:
    """
    Load and analyze the configured workbook, or show the failure and stop the page.

    Example return:
        (df, analysis) where df.head()["Sport"] -> ["Boxing", "Ice Hockey", ...]
    """

    config = load_config()
    if not config.data_path.exists():
        st.error(f"Dataset not found at {config.data_path}.")
        st.stop()
    try:
        return _load_analysis(str(config.data_path))
    except SportSkillsError as exc:
        st.error(f"Cannot analyze {config.data_path}: {exc}")
        st.stop()


def sport_filter(wide: pd.DataFrame) -> tuple[pd.DataFrame, list[str]]:
    """
    Filter the wide table to the sports chosen in the sidebar.

    Example return:
        (filtered_wide, selection) where selection = ["Boxing", "Ice Hockey"]
    """

    # Keep the source order of the sports rather than sorting them.
    available_sports = [str(sport) for sport in wide.index]
    st.sidebar.header("Sport Filter")
    if not available_sports:
        st.sidebar.info("No sports available.")
        return wide, available_sports

    default_selection = st.session_state.get(SPORT_FILTER_KEY, available_sports)
    selection = st.sidebar.multiselect(
        "Select sports",
        options=available_sports,
        default=default_selection,
        key=SPORT_FILTER_KEY,
    )

    # An empty multiselect means "no filter".
    if not selection:
        st.sidebar.info("No sports selected; showing all sports.")
        selection = available_sports

    return wide.loc[selection], selection


def sport_picker(sports: list[str], label: str = "Sport") -> str:
    """Single sport selector; defaults to the first sport in source order."""

    return st.sidebar.selectbox(label, options=sports, index=0, key=SPORT_PICKER_KEY)
