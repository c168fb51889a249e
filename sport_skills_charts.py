"""
Plotly rendering layer. Every chart takes the analyzer outputs plus an explicit ChartTheme, so no styling
state is shared between figures.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from sport_skills_core import (
    SKILL_COLUMN,
    SPORT_COLUMN,
    VALUE_COLUMN,
    PCAResult,
    biplot_coordinates,
)


# Passed to st.plotly_chart by every page.
PLOTLY_CONFIG: dict[str, object] = {
    "displaylogo": False,
    "responsive": True,
}


@dataclass(frozen=True)
class ChartTheme:
    """Presentation settings passed into every chart function."""

    font_family: str = "Source Sans 3, Inter, sans-serif"
    text_color: str = "#1a1a1a"
    muted_color: str = "#6c757d"
    background: str = "white"
    grid_color: str = "rgba(128, 128, 128, 0.15)"
    primary: str = "#277da1"
    accent: str = "#f3722c"
    easiest_color: str = "#43aa8b"
    toughest_color: str = "#f94144"
    palette: tuple[str, ...] = (
        "#277da1",
        "#f3722c",
        "#43aa8b",
        "#f9c74f",
        "#577590",
        "#f94144",
        "#90be6d",
        "#f8961e",
        "#4d908e",
        "#9c27b0",
    )
    continuous_scale: str = "Viridis"
    diverging_scale: str = "RdBu"
    balance_colors: dict[str, str] = field(
        default_factory=lambda: {
            "Well-Rounded": "#2b9348",
            "Balanced": "#f9c74f",
            "Specialized": "#f94144",
        }
    )
    margin: dict[str, int] = field(default_factory=lambda: dict(l=0, r=0, t=40, b=0))

    def color_for(self, index: int) -> str:
        return self.palette[index % len(self.palette)]


DEFAULT_THEME = ChartTheme()


def apply_theme(fig: go.Figure, theme: ChartTheme, title: str | None = None) -> go.Figure:
    """
    Apply the theme's fonts, background and margins to a figure.

    Args:
        fig: Plotly figure object
        theme: presentation settings
        title: optional chart title

    Returns:
        The same figure, styled.
    """

    fig.update_layout(
        font=dict(family=theme.font_family, color=theme.text_color, size=12),
        paper_bgcolor=theme.background,
        plot_bgcolor=theme.background,
        margin=theme.margin,
    )
    if title:
        fig.update_layout(title=dict(text=title, x=0.0, xanchor="left"))
    return fig


def _radial_axis(theme: ChartTheme, max_value: float) -> dict[str, object]:
    return dict(
        radialaxis=dict(range=[0, max_value], gridcolor=theme.grid_color, tickfont=dict(color=theme.muted_color)),
        angularaxis=dict(direction="clockwise", rotation=90, gridcolor=theme.grid_color),
        bgcolor=theme.background,
    )


def plot_skill_medians_radial(medians: pd.Series, theme: ChartTheme = DEFAULT_THEME) -> go.Figure:
    """
    Radial bar chart of the median rating per skill.

    Example:
        medians = Endurance=5.25, Strength=5.38, ...
    """

    skills = [str(skill) for skill in medians.index]
    fig = go.Figure(
        go.Barpolar(
            r=medians.to_numpy(),
            theta=skills,
            marker=dict(color=[theme.color_for(i) for i in range(len(skills))], line=dict(color="white", width=1)),
            hovertemplate="%{theta}: %{r:.2f}<extra></extra>",
            name="Median",
        )
    )
    fig.update_layout(polar=_radial_axis(theme, float(np.ceil(medians.max()))), showlegend=False)
    return apply_theme(fig, theme, title="Median rating by skill")


def plot_sport_radial(
    wide: pd.DataFrame,
    sport: str,
    medians: pd.Series | None = None,
    theme: ChartTheme = DEFAULT_THEME,
) -> go.Figure:
    """
    Radial bar chart of one sport's ratings, with the per-skill median drawn as a closed polygon.

    Raises KeyError when the sport is not in the table.
    """

    if sport not in wide.index:
        raise KeyError(sport)
    ratings = wide.loc[sport]
    skills = [str(skill) for skill in wide.columns]
    fig = go.Figure(
        go.Barpolar(
            r=ratings.to_numpy(),
            theta=skills,
            marker=dict(color=theme.primary, opacity=0.85, line=dict(color="white", width=1)),
            hovertemplate="%{theta}: %{r:.2f}<extra></extra>",
            name=sport,
        )
    )
    if medians is not None:
        closed = list(medians.reindex(wide.columns).to_numpy())
        fig.add_trace(
            go.Scatterpolar(
                r=closed + closed[:1],
                theta=skills + skills[:1],
                mode="lines",
                line=dict(color=theme.accent, width=2, dash="dot"),
                name="Median",
            )
        )
    fig.update_layout(polar=_radial_axis(theme, float(np.ceil(wide.to_numpy().max()))))
    return apply_theme(fig, theme, title=sport)


def _spiral_layout(count: int, spacing: float = 1.0) -> tuple[np.ndarray, np.ndarray]:
    # Sunflower (golden angle) spiral: the first point sits in the centre, later points wind outwards.
    golden_angle = np.pi * (3 - np.sqrt(5))
    indices = np.arange(count)
    radius = spacing * np.sqrt(indices)
    theta = indices * golden_angle
    return radius * np.cos(theta), radius * np.sin(theta)


def skill_facet_positions(long_df: pd.DataFrame) -> pd.DataFrame:
    """
    Place every sport inside its skill facet, highest rating in the centre.

    Example return row:
        Sport="Boxing", Skill="Power", Value=8.63, x=0.0, y=0.0
    """

    frames: list[pd.DataFrame] = []
    for _, group in long_df.groupby(SKILL_COLUMN, observed=True, sort=True):
        # Stable sort keeps the source sport order among equal ratings.
        ordered = group.sort_values(VALUE_COLUMN, ascending=False, kind="stable").copy()
        ordered["x"], ordered["y"] = _spiral_layout(len(ordered))
        frames.append(ordered)
    return pd.concat(frames, ignore_index=True)


def plot_skill_facets(long_df: pd.DataFrame, theme: ChartTheme = DEFAULT_THEME, columns: int = 5) -> go.Figure:
    """Circle-packing style facets: one panel per skill, one circle per sport sized by its rating."""

    positions = skill_facet_positions(long_df)
    positions[SKILL_COLUMN] = positions[SKILL_COLUMN].astype(str)
    positions[SPORT_COLUMN] = positions[SPORT_COLUMN].astype(str)
    # Facets follow the skill order of the source header.
    skill_order = list(dict.fromkeys(positions[SKILL_COLUMN]))
    fig = px.scatter(
        positions,
        x="x",
        y="y",
        size=VALUE_COLUMN,
        color=VALUE_COLUMN,
        facet_col=SKILL_COLUMN,
        facet_col_wrap=columns,
        category_orders={SKILL_COLUMN: skill_order},
        hover_name=SPORT_COLUMN,
        hover_data={"x": False, "y": False, VALUE_COLUMN: ":.2f"},
        color_continuous_scale=theme.continuous_scale,
        size_max=18,
    )
    fig.for_each_annotation(lambda annotation: annotation.update(text=annotation.text.split("=")[-1]))
    fig.update_xaxes(visible=False, matches="x")
    fig.update_yaxes(visible=False, matches="y")
    return apply_theme(fig, theme, title="Sports by skill rating")


def plot_balance_ranking(balance: pd.DataFrame, theme: ChartTheme = DEFAULT_THEME) -> go.Figure:
    """Horizontal bars of per-sport variance, most well-rounded sport on top."""

    data = balance.reset_index()
    data[SPORT_COLUMN] = data[SPORT_COLUMN].astype(str)
    fig = px.bar(
        data,
        x="Variance",
        y=SPORT_COLUMN,
        color="Balance",
        orientation="h",
        color_discrete_map=theme.balance_colors,
        category_orders={SPORT_COLUMN: data[SPORT_COLUMN].tolist()},
        labels={"Variance": "Variance of skill ratings"},
    )
    fig.update_layout(height=max(400, 18 * len(data)), yaxis_title=None)
    return apply_theme(fig, theme, title="Balance: variance across skills")


def plot_skill_extremes(extremes: pd.DataFrame, theme: ChartTheme = DEFAULT_THEME) -> go.Figure:
    """Dumbbell chart linking the easiest and toughest sport of each skill."""

    skills = [str(skill) for skill in extremes.index]
    fig = go.Figure()
    for skill, row in zip(skills, extremes.itertuples(index=False)):
        fig.add_trace(
            go.Scatter(
                x=[row[1], row[3]],
                y=[skill, skill],
                mode="lines",
                line=dict(color=theme.grid_color, width=4),
                showlegend=False,
                hoverinfo="skip",
            )
        )
    for label, name_column, value_column, color, position in (
        ("Easiest", "Easiest", "Easiest.Value", theme.easiest_color, "middle left"),
        ("Toughest", "Toughest", "Toughest.Value", theme.toughest_color, "middle right"),
    ):
        fig.add_trace(
            go.Scatter(
                x=extremes[value_column],
                y=skills,
                mode="markers+text",
                text=extremes[name_column],
                textposition=position,
                marker=dict(size=12, color=color),
                name=label,
                hovertemplate="%{text}: %{x:.2f}<extra>" + label + "</extra>",
            )
        )
    fig.update_layout(
        xaxis_title="Rating",
        yaxis=dict(categoryorder="array", categoryarray=skills[::-1]),
        height=max(400, 45 * len(skills)),
    )
    return apply_theme(fig, theme, title="Easiest and toughest sport per skill")


def plot_correlation_heatmap(wide: pd.DataFrame, theme: ChartTheme = DEFAULT_THEME) -> go.Figure:
    corr = wide.corr()
    fig = px.imshow(
        corr,
        text_auto=".2f",
        aspect="auto",
        color_continuous_scale=theme.diverging_scale,
        zmin=-1,
        zmax=1,
        origin="lower",
        labels=dict(color="Correlation"),
    )
    return apply_theme(fig, theme)


def plot_scree(result: PCAResult, theme: ChartTheme = DEFAULT_THEME) -> go.Figure:
    """
    Render a scree plot: eigenvalue bars, cumulative explained variance line and the eigenvalue = 1 cutoff.

    Example:
        eigenvalues = [4.1, 2.0, ...], cumulative = [0.41, 0.61, ...]
    """

    components = result.components
    fig = make_subplots(specs=[[{"secondary_y": True}]])
    fig.add_trace(
        go.Bar(x=components, y=result.eigenvalues.to_numpy(), marker_color=theme.primary, name="Eigenvalue"),
        secondary_y=False,
    )
    fig.add_trace(
        go.Scatter(
            x=components,
            y=result.cumulative_variance_ratio.to_numpy(),
            mode="lines+markers",
            line=dict(color=theme.accent),
            name="Cumulative explained variance",
        ),
        secondary_y=True,
    )
    # Kaiser criterion: components with eigenvalue above 1 explain more than a single standardized skill.
    fig.add_shape(
        type="line",
        xref="paper",
        x0=0,
        x1=1,
        yref="y",
        y0=1.0,
        y1=1.0,
        line=dict(color=theme.muted_color, dash="dash"),
    )
    fig.update_xaxes(title_text="Principal Component")
    fig.update_yaxes(title_text="Eigenvalue", secondary_y=False)
    fig.update_yaxes(title_text="Cumulative ratio", range=[0, 1.05], tickformat=".0%", secondary_y=True)
    return apply_theme(fig, theme, title="Scree plot")


def plot_variable_contributions(
    result: PCAResult,
    theme: ChartTheme = DEFAULT_THEME,
    components: int = 2,
) -> go.Figure:
    """
    Display how strongly each skill contributes to the leading principal components using a grouped bar chart.

    Example:
        components=2 -> tidy DataFrame with Skill, Component, Contribution
    """

    component_count = min(components, len(result.components))
    pc_labels = result.components[:component_count]
    # Squared loadings of a unit-length component already sum to 1.
    contributions = result.loadings[pc_labels] ** 2
    tidy = contributions.reset_index().melt(
        id_vars=SKILL_COLUMN,
        var_name="Component",
        value_name="Contribution",
    )
    tidy[SKILL_COLUMN] = tidy[SKILL_COLUMN].astype(str)
    fig = px.bar(
        tidy,
        x=SKILL_COLUMN,
        y="Contribution",
        color="Component",
        barmode="group",
        color_discrete_sequence=list(theme.palette),
        labels={"Contribution": "Relative Influence"},
    )
    fig.update_yaxes(tickformat=".0%")
    return apply_theme(fig, theme)


def plot_biplot(result: PCAResult, theme: ChartTheme = DEFAULT_THEME) -> go.Figure:
    """
    Build a biplot that positions sports on the PC1/PC2 plane and overlays skill loadings.

    Example inputs:
        result.scores.loc["Boxing", "PC1"] = 2.7, result.loadings.loc["Speed", "PC1"] = 0.38
    """

    if len(result.components) < 2:
        raise ValueError("A biplot needs at least two principal components.")
    scores = result.scores[["PC1", "PC2"]]
    fig = go.Figure()
    # One labelled marker per sport at its PC1/PC2 score.
    fig.add_trace(
        go.Scatter(
            x=scores["PC1"],
            y=scores["PC2"],
            mode="markers+text",
            text=[str(sport) for sport in scores.index],
            textposition="top center",
            textfont=dict(size=10, color=theme.muted_color),
            marker=dict(size=9, color=theme.primary, opacity=0.8),
            name="Sports",
        )
    )

    arrows = biplot_coordinates(result)
    # Stretch the longest arrow to just past the outermost sport.
    reach = float(np.max(np.abs(arrows.to_numpy()))) or 1.0
    scale = 1.1 * float(np.max(np.abs(scores.to_numpy()))) / reach
    for skill, (x, y) in arrows.iterrows():
        fig.add_trace(
            go.Scatter(
                x=[0, x * scale],
                y=[0, y * scale],
                mode="lines",
                line=dict(color=theme.accent, width=2),
                showlegend=False,
                hoverinfo="none",
            )
        )
        fig.add_annotation(
            x=x * scale,
            y=y * scale,
            ax=0,
            ay=0,
            axref="x",
            ayref="y",
            xanchor="center",
            yanchor="middle",
            text=str(skill),
            arrowhead=2,
            arrowsize=1,
            arrowwidth=1,
            arrowcolor=theme.accent,
        )

    ratio = result.explained_variance_ratio
    fig.update_layout(
        xaxis_title=f"PC1 ({ratio['PC1']:.0%})",
        yaxis_title=f"PC2 ({ratio['PC2']:.0%})",
        showlegend=False,
        xaxis=dict(zeroline=True, zerolinewidth=1, zerolinecolor="#999999"),
        yaxis=dict(zeroline=True, zerolinewidth=1, zerolinecolor="#999999"),
    )
    return apply_theme(fig, theme, title="Biplot (PC1 vs PC2)")
