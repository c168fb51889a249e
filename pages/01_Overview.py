from __future__ import annotations

import streamlit as st

from sport_skills_charts import DEFAULT_THEME, PLOTLY_CONFIG, plot_correlation_heatmap
from sport_skills_core import check_total_consistency
from sport_skills_ui import load_analysis_or_stop, sport_filter


st.title("Overview")

df, analysis = load_analysis_or_stop()
filtered_wide, _ = sport_filter(analysis.wide)

st.markdown("### Summary Statistics")
st.dataframe(analysis.wide.describe().T, width="stretch")

st.markdown("### Correlation Heatmap")
st.plotly_chart(
    plot_correlation_heatmap(analysis.wide, DEFAULT_THEME),
    config=PLOTLY_CONFIG,
    width="stretch",
)

st.markdown("### Total Consistency")
difference = check_total_consistency(df)
if difference.empty:
    st.info("The workbook has no Total column.")
elif (difference.abs() > 1e-6).any():
    st.warning("Total differs from the sum of the skill ratings for some sports.")
    st.dataframe(difference[difference.abs() > 1e-6].to_frame(), width="stretch")
else:
    st.success("Total equals the sum of the ten skill ratings for every sport.")

st.markdown("### Filtered Preview")
st.dataframe(filtered_wide, width="stretch")
