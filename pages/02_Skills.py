from __future__ import annotations

import streamlit as st

from sport_skills_charts import (
    DEFAULT_THEME,
    PLOTLY_CONFIG,
    plot_skill_extremes,
    plot_skill_facets,
    plot_skill_medians_radial,
)
from sport_skills_core import to_long_form
from sport_skills_ui import load_analysis_or_stop, sport_filter


st.title("Skills")

_, analysis = load_analysis_or_stop()
filtered_wide, _ = sport_filter(analysis.wide)

st.markdown("### Median Rating by Skill")
st.plotly_chart(
    plot_skill_medians_radial(analysis.medians, DEFAULT_THEME),
    config=PLOTLY_CONFIG,
    width="stretch",
)

st.markdown("### Sports by Skill")
st.caption("Each circle is a sport, sized by its rating; the highest rated sport sits in the centre of each panel.")
st.plotly_chart(
    plot_skill_facets(to_long_form(filtered_wide), DEFAULT_THEME),
    config=PLOTLY_CONFIG,
    width="stretch",
)

st.markdown("### Easiest and Toughest Sport per Skill")
st.caption("Ties go to the sport listed first in the workbook.")
st.plotly_chart(
    plot_skill_extremes(analysis.extremes, DEFAULT_THEME),
    config=PLOTLY_CONFIG,
    width="stretch",
)
st.dataframe(analysis.extremes, width="stretch")
