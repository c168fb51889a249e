from __future__ import annotations

import numpy as np
import plotly.graph_objects as go
import pytest

from sport_skills_charts import (
    DEFAULT_THEME,
    ChartTheme,
    apply_theme,
    plot_balance_ranking,
    plot_biplot,
    plot_correlation_heatmap,
    plot_scree,
    plot_skill_extremes,
    plot_skill_facets,
    plot_skill_medians_radial,
    plot_sport_radial,
    plot_variable_contributions,
    skill_facet_positions,
)
from sport_skills_core import DEFAULT_SKILLS


def test_theme_palette_cycles():
    theme = ChartTheme(palette=("#111111", "#222222"))
    assert theme.color_for(0) == "#111111"
    assert theme.color_for(3) == "#222222"


def test_apply_theme_sets_background_and_title():
    theme = ChartTheme(background="#fafafa")
    fig = apply_theme(go.Figure(), theme, title="Ratings")
    assert fig.layout.paper_bgcolor == "#fafafa"
    assert fig.layout.title.text == "Ratings"


def test_medians_radial_has_one_bar_per_skill(analysis):
    fig = plot_skill_medians_radial(analysis.medians)
    assert isinstance(fig.data[0], go.Barpolar)
    assert list(fig.data[0].theta) == DEFAULT_SKILLS
    np.testing.assert_allclose(fig.data[0].r, analysis.medians.to_numpy())


def test_sport_radial_overlays_closed_median_polygon(analysis):
    fig = plot_sport_radial(analysis.wide, "Gymnastics", analysis.medians)
    bars, median = fig.data
    assert bars.name == "Gymnastics"
    assert max(bars.r) == 10.0
    assert len(median.r) == len(DEFAULT_SKILLS) + 1
    assert median.r[0] == median.r[-1]


def test_sport_radial_unknown_sport(analysis):
    with pytest.raises(KeyError):
        plot_sport_radial(analysis.wide, "Chess")


def test_facet_positions_put_top_rating_in_centre(analysis):
    positions = skill_facet_positions(analysis.long)
    assert len(positions) == analysis.wide.size
    for skill, group in positions.groupby("Skill", observed=True):
        centre = group.iloc[0]
        assert (centre["x"], centre["y"]) == (0.0, 0.0)
        assert centre["Value"] == analysis.wide[skill].max()


def test_facet_positions_break_ties_in_source_order(analysis):
    positions = skill_facet_positions(analysis.long)
    nerve = positions[positions["Skill"] == "Nerve"]
    assert nerve["Sport"].astype(str).tolist()[:2] == ["Boxing", "Skiing: Alpine"]


def test_skill_facets_one_panel_per_skill(analysis):
    fig = plot_skill_facets(analysis.long, columns=5)
    titles = [annotation.text for annotation in fig.layout.annotations]
    assert sorted(titles) == sorted(DEFAULT_SKILLS)


def test_balance_ranking_lists_every_sport(analysis):
    fig = plot_balance_ranking(analysis.balance)
    plotted = [sport for trace in fig.data for sport in trace.y]
    assert sorted(plotted) == sorted(analysis.wide.index)


def test_skill_extremes_marks_both_ends(analysis):
    fig = plot_skill_extremes(analysis.extremes)
    names = [trace.name for trace in fig.data if trace.name]
    assert names == ["Easiest", "Toughest"]
    toughest = fig.data[-1]
    assert list(toughest.text) == analysis.extremes["Toughest"].tolist()


def test_correlation_heatmap_is_square(analysis):
    fig = plot_correlation_heatmap(analysis.wide)
    assert np.asarray(fig.data[0].z).shape == (len(DEFAULT_SKILLS), len(DEFAULT_SKILLS))


def test_scree_plots_eigenvalues_and_cumulative_ratio(analysis):
    fig = plot_scree(analysis.pca)
    bars, cumulative = fig.data
    np.testing.assert_allclose(bars.y, analysis.pca.eigenvalues.to_numpy())
    assert cumulative.y[-1] == pytest.approx(1.0)
    assert fig.layout.shapes[0].y0 == 1.0


def test_variable_contributions_sum_to_one_per_component(analysis):
    fig = plot_variable_contributions(analysis.pca, components=2)
    assert [trace.name for trace in fig.data] == ["PC1", "PC2"]
    for trace in fig.data:
        assert sum(trace.y) == pytest.approx(1.0)


def test_biplot_has_sports_and_skill_arrows(analysis):
    fig = plot_biplot(analysis.pca, DEFAULT_THEME)
    sports = fig.data[0]
    assert list(sports.text) == list(analysis.wide.index)
    assert len(fig.data) == 1 + len(DEFAULT_SKILLS)
    assert [annotation.text for annotation in fig.layout.annotations] == DEFAULT_SKILLS
    assert fig.layout.xaxis.title.text.startswith("PC1")
