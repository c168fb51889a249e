from __future__ import annotations

import streamlit as st

from sport_skills_config import configure_logging, load_config
from sport_skills_ui import load_analysis_or_stop


st.set_page_config(
    page_title="Toughest Sport by Skill",
    page_icon="🏅",
    layout="wide",
)

configure_logging(load_config())

st.title("Toughest Sport by Skill")
st.markdown(
    """
    Every sport is rated from 1 to 10 on ten athletic skills. The pages in the sidebar walk through the ratings,
    the easiest and toughest sport for each skill, how balanced each sport is across skills, and a principal
    component analysis of the skill matrix.
    """
)

df, analysis = load_analysis_or_stop()

sports_col, skills_col, pc_col = st.columns(3)
sports_col.metric("Sports", len(analysis.wide))
skills_col.metric("Skills", analysis.wide.shape[1])
pc_col.metric("Variance explained by PC1 + PC2", f"{analysis.pca.cumulative_variance_ratio.iloc[1]:.0%}")

st.markdown("### Ratings")
st.dataframe(df, width="stretch", hide_index=True)
