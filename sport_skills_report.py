"""
Batch report: load the workbook, run the analysis and write every chart and summary table to a folder.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
import plotly.graph_objects as go

from sport_skills_charts import (
    DEFAULT_THEME,
    ChartTheme,
    plot_balance_ranking,
    plot_biplot,
    plot_correlation_heatmap,
    plot_scree,
    plot_skill_extremes,
    plot_skill_facets,
    plot_skill_medians_radial,
    plot_variable_contributions,
)
from sport_skills_config import ReportConfig, configure_logging, load_config
from sport_skills_core import SkillAnalysis, analyze, load_dataset


logger = logging.getLogger(__name__)


def build_figures(analysis: SkillAnalysis, theme: ChartTheme = DEFAULT_THEME) -> dict[str, go.Figure]:
    """Figures of the report keyed by output file stem, in presentation order."""

    return {
        "skill_medians_radial": plot_skill_medians_radial(analysis.medians, theme),
        "skill_facets": plot_skill_facets(analysis.long, theme),
        "skill_extremes": plot_skill_extremes(analysis.extremes, theme),
        "balance_ranking": plot_balance_ranking(analysis.balance, theme),
        "correlation_heatmap": plot_correlation_heatmap(analysis.wide, theme),
        "pca_scree": plot_scree(analysis.pca, theme),
        "pca_biplot": plot_biplot(analysis.pca, theme),
        "pca_contributions": plot_variable_contributions(analysis.pca, theme),
    }


def build_tables(analysis: SkillAnalysis) -> dict[str, pd.DataFrame]:
    pca = analysis.pca
    eigenvalues = pd.DataFrame(
        {
            "Eigenvalue": pca.eigenvalues,
            "Explained.Variance": pca.explained_variance_ratio,
            "Cumulative.Variance": pca.cumulative_variance_ratio,
        }
    )
    eigenvalues.index.name = "Component"
    return {
        "medians": analysis.medians.to_frame(),
        "balance": analysis.balance,
        "extremes": analysis.extremes,
        "eigenvalues": eigenvalues,
        "loadings": pca.loadings,
    }


def export_report(
    analysis: SkillAnalysis,
    output_dir: str | Path,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Path]:
    """
    Write each figure as standalone HTML and each summary table as CSV.

    Example return:
        [Path("outputs/skill_medians_radial.html"), ..., Path("outputs/loadings.csv")]
    """

    # Build everything in memory first so a rendering failure leaves no partial report behind.
    figures = build_figures(analysis, theme)
    tables = build_tables(analysis)

    target = Path(output_dir)
    target.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for name, fig in figures.items():
        path = target / f"{name}.html"
        fig.write_html(path, include_plotlyjs="cdn", full_html=True)
        written.append(path)
    for name, table in tables.items():
        path = target / f"{name}.csv"
        table.to_csv(path)
        written.append(path)
    logger.info("Wrote %d report files to %s", len(written), target)
    return written


def run(config: ReportConfig, theme: ChartTheme = DEFAULT_THEME) -> list[Path]:
    """Load, analyze and render in that order."""

    df = load_dataset(config.data_path)
    analysis = analyze(df)
    return export_report(analysis, config.output_dir, theme)


def main() -> None:
    config = load_config()
    configure_logging(config)
    try:
        run(config)
    except (FileNotFoundError, ValueError):
        logger.exception("Sport skills report failed for %s", config.data_path)
        raise


if __name__ == "__main__":
    main()
