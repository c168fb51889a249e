"""
PCA page: scree plot, biplot, loadings and skill contributions for the standardized skill matrix.
"""

from __future__ import annotations

import pandas as pd
import streamlit as st

from sport_skills_charts import (
    DEFAULT_THEME,
    PLOTLY_CONFIG,
    plot_biplot,
    plot_scree,
    plot_variable_contributions,
)
from sport_skills_ui import load_analysis_or_stop


st.title("PCA")

_, analysis = load_analysis_or_stop()
pca = analysis.pca

st.subheader("Principal Component Analysis")
st.markdown(
    """
    PCA is applied on Z-score normalized skill ratings (Total and Rank excluded). The scree plot shows the
    eigenvalue of each component, while the biplot shows how sports and skills align along PC1 and PC2.
    """
)

st.plotly_chart(plot_scree(pca, DEFAULT_THEME), config=PLOTLY_CONFIG, width="stretch")

explained = pd.DataFrame(
    {
        "Eigenvalue": pca.eigenvalues,
        "Explained Variance": pca.explained_variance_ratio,
        "Cumulative": pca.cumulative_variance_ratio,
    }
)
st.markdown("### Explained Variance Table")
st.dataframe(explained, width="stretch")

st.markdown("### Biplot (PC1 vs PC2)")
st.plotly_chart(plot_biplot(pca, DEFAULT_THEME), config=PLOTLY_CONFIG, width="stretch")

# Display the loadings table so the influence of each skill per component is visible.
st.markdown("### Component Loadings")
st.dataframe(pca.loadings, width="stretch")

st.markdown("### Skill Contributions Bar Chart")
st.plotly_chart(
    plot_variable_contributions(pca, DEFAULT_THEME),
    config=PLOTLY_CONFIG,
    width="stretch",
)
