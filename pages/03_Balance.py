from __future__ import annotations

import streamlit as st

from sport_skills_charts import DEFAULT_THEME, PLOTLY_CONFIG, plot_balance_ranking, plot_sport_radial
from sport_skills_ui import load_analysis_or_stop, sport_filter, sport_picker


st.title("Balance")

_, analysis = load_analysis_or_stop()
filtered_wide, selection = sport_filter(analysis.wide)
sport = sport_picker(selection)

st.subheader("Well-Rounded vs Specialized Sports")
st.markdown(
    """
    The variance of a sport's ten ratings measures how evenly it demands every skill. Low variance marks a
    well-rounded sport; high variance marks a sport that leans on a few skills.
    """
)

balance = analysis.balance.loc[analysis.balance.index.isin(selection)]
st.plotly_chart(
    plot_balance_ranking(balance, DEFAULT_THEME),
    config=PLOTLY_CONFIG,
    width="stretch",
)

st.markdown(f"### {sport} vs Median")
st.plotly_chart(
    plot_sport_radial(analysis.wide, sport, analysis.medians, DEFAULT_THEME),
    config=PLOTLY_CONFIG,
    width="stretch",
)

st.markdown("### Balance Table")
st.dataframe(balance, width="stretch")
