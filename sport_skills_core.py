"""
Core module: loads the sport/skill ratings workbook, reshapes it between wide and long form, and computes the
summary statistics and the scaled PCA consumed by the charts and the Streamlit pages.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Sequence

import numpy as np
import pandas as pd
from sklearn.decomposition import PCA
from sklearn.preprocessing import StandardScaler


logger = logging.getLogger(__name__)

# Identifier column, used as both the category label and the join key.
SPORT_COLUMN = "Sport"
# Precomputed aggregates present in the source but never fed into the statistics.
TOTAL_COLUMN = "Total"
RANK_COLUMN = "Rank"
AGGREGATE_COLUMNS: tuple[str, ...] = (TOTAL_COLUMN, RANK_COLUMN)

# Skill columns of the reference workbook after header normalization, in header order.
DEFAULT_SKILLS: list[str] = [
    "Endurance",
    "Strength",
    "Power",
    "Speed",
    "Agility",
    "Flexibility",
    "Nerve",
    "Durability",
    "Hand-Eye.Coordination",
    "Analytical.Aptitude",
]

# Column names of the long-form table.
SKILL_COLUMN = "Skill"
VALUE_COLUMN = "Value"

BALANCE_LABELS: list[str] = ["Well-Rounded", "Balanced", "Specialized"]

_WHITESPACE = re.compile(r"\s+")


class SportSkillsError(ValueError):
    """Base class for every failure raised while analysing the ratings table."""


class DatasetValidationError(SportSkillsError):
    """The input table violates the loader contract (columns, identifiers or values)."""


class DegenerateDataError(SportSkillsError):
    """The skill matrix cannot be standardized or decomposed."""


@dataclass(frozen=True)
class PCAResult:
    """
    Scaled PCA over the skill matrix.

    Example:
        eigenvalues -> PC1=4.1, PC2=2.0, ... (sums to the number of skills)
        loadings.loc["Speed", "PC1"] -> 0.38
        scores.loc["Boxing", "PC1"] -> 2.7
    """

    eigenvalues: pd.Series
    loadings: pd.DataFrame
    scores: pd.DataFrame
    model: PCA
    scaler: StandardScaler

    @property
    def components(self) -> list[str]:
        return list(self.eigenvalues.index)

    @property
    def explained_variance_ratio(self) -> pd.Series:
        return self.eigenvalues / self.eigenvalues.sum()

    @property
    def cumulative_variance_ratio(self) -> pd.Series:
        return self.explained_variance_ratio.cumsum()


@dataclass(frozen=True)
class SkillAnalysis:
    """Every derived table handed from the analyzer to the rendering layer."""

    wide: pd.DataFrame
    long: pd.DataFrame
    medians: pd.Series
    variance: pd.Series
    balance: pd.DataFrame
    extremes: pd.DataFrame
    pca: PCAResult


def normalize_column_name(name: object) -> str:
    """
    Replace whitespace runs with "." so header names can be used as identifiers.

    Example:
        " Hand-Eye Coordination " -> "Hand-Eye.Coordination"
    """

    return _WHITESPACE.sub(".", str(name).strip())


@lru_cache(maxsize=4)
def _read_table_cached(path: str) -> pd.DataFrame:
    dataset_path = Path(path)
    suffix = dataset_path.suffix.lower()
    if suffix in {".xlsx", ".xls"}:
        return pd.read_excel(dataset_path)
    if suffix == ".csv":
        return pd.read_csv(dataset_path)
    raise DatasetValidationError(f"Unsupported dataset format {suffix!r} for {dataset_path}.")


def read_table(path: str | Path) -> pd.DataFrame:
    """Read the raw workbook (or CSV export) once and hand out copies."""

    dataset_path = Path(path)
    # Missing input is reported as-is; pages turn it into st.error.
    if not dataset_path.exists():
        raise FileNotFoundError(dataset_path)
    # The cached frame is shared, so every caller gets its own copy.
    return _read_table_cached(str(dataset_path)).copy()


def _numeric_violations(df: pd.DataFrame, columns: Iterable[str], limit: int = 5) -> list[str]:
    violations: list[str] = []
    for column in columns:
        # Text that cannot be parsed becomes NaN; "inf" and -inf parse but are not bounded ratings.
        coerced = pd.to_numeric(df[column], errors="coerce").astype("float64")
        bad = df.loc[~np.isfinite(coerced.to_numpy()), [SPORT_COLUMN, column]]
        for sport, value in bad.itertuples(index=False, name=None):
            violations.append(f"{sport}/{column}={value!r}")
            if len(violations) >= limit:
                return violations
    return violations


def validate_table(df: pd.DataFrame, skills: Sequence[str] | None = None) -> pd.DataFrame:
    """
    Normalize headers and enforce the loader contract on a raw ratings table.

    Returns a new DataFrame holding the Sport column, the skill columns (in header order, or in the order
    of ``skills`` when given) and whichever of Total/Rank are present, with every rating cast to float.
    """

    table = df.copy()
    table.columns = [normalize_column_name(column) for column in table.columns]

    duplicated_headers = table.columns[table.columns.duplicated()].tolist()
    if duplicated_headers:
        raise DatasetValidationError(f"Duplicate column names after normalization: {duplicated_headers}.")
    if SPORT_COLUMN not in table.columns:
        raise DatasetValidationError(f"Missing required column {SPORT_COLUMN!r}; found {list(table.columns)}.")

    sports = table[SPORT_COLUMN]
    missing_rows = sports.isna() | (sports.astype(str).str.strip() == "")
    if missing_rows.any():
        rows = [int(i) + 2 for i in np.flatnonzero(missing_rows.to_numpy())]
        raise DatasetValidationError(f"Missing {SPORT_COLUMN} value in spreadsheet row(s) {rows}.")
    table[SPORT_COLUMN] = sports.astype(str).str.strip()
    duplicates = table.loc[table[SPORT_COLUMN].duplicated(), SPORT_COLUMN].unique().tolist()
    if duplicates:
        raise DatasetValidationError(f"Duplicate {SPORT_COLUMN} identifiers: {duplicates}.")

    present_aggregates = [column for column in AGGREGATE_COLUMNS if column in table.columns]
    if skills is None:
        skill_list = [
            column for column in table.columns if column != SPORT_COLUMN and column not in AGGREGATE_COLUMNS
        ]
    else:
        skill_list = [normalize_column_name(skill) for skill in skills]
        absent = [skill for skill in skill_list if skill not in table.columns]
        if absent:
            raise DatasetValidationError(f"Missing skill column(s) {absent}; found {list(table.columns)}.")
    if len(skill_list) < 2:
        raise DatasetValidationError(f"At least two skill columns are required; found {skill_list}.")

    numeric_columns = skill_list + present_aggregates
    violations = _numeric_violations(table, numeric_columns)
    if violations:
        raise DatasetValidationError(f"Non-numeric, missing or non-finite ratings: {', '.join(violations)}.")
    table[numeric_columns] = table[numeric_columns].apply(pd.to_numeric).astype("float64")

    return table[[SPORT_COLUMN, *numeric_columns]].reset_index(drop=True)


def load_dataset(path: str | Path, skills: Sequence[str] | None = None) -> pd.DataFrame:
    """
    Read and validate the ratings workbook.

    Example argument:
        path="data/toughest_sport_by_skill.xlsx"
    Example return row:
        {"Sport": "Boxing", "Endurance": 8.63, "Strength": 8.13, ..., "Total": 72.75, "Rank": 1.0}
    """

    table = validate_table(read_table(path), skills=skills)
    logger.info(
        "Loaded %d sports rated on %d skills from %s",
        len(table),
        len(skill_columns(table)),
        path,
    )
    return table


def skill_columns(df: pd.DataFrame) -> list[str]:
    """Skill columns of a validated table, or of a wide-form table."""

    return [column for column in df.columns if column != SPORT_COLUMN and column not in AGGREGATE_COLUMNS]


def to_wide_form(df: pd.DataFrame) -> pd.DataFrame:
    """One row per sport indexed by Sport, one float column per skill; Total/Rank dropped."""

    wide = df.set_index(SPORT_COLUMN)[skill_columns(df)]
    return wide.astype("float64")


def to_long_form(df: pd.DataFrame) -> pd.DataFrame:
    """
    Flatten the table into one (Sport, Skill, Value) row per pair.

    Both Sport and Skill are ordered categoricals so charts and groupbys keep the source order rather than
    sorting alphabetically.

    Example return rows:
        Sport="Boxing", Skill="Endurance", Value=8.63
        Sport="Boxing", Skill="Strength", Value=8.13
    """

    wide = df if SPORT_COLUMN not in df.columns else to_wide_form(df)
    sports = list(wide.index)
    skills = list(wide.columns)
    # Name the index so hand-built matrices melt the same way as to_wide_form output.
    long_df = wide.rename_axis(SPORT_COLUMN).reset_index().melt(
        id_vars=SPORT_COLUMN,
        value_vars=skills,
        var_name=SKILL_COLUMN,
        value_name=VALUE_COLUMN,
    )
    long_df[SPORT_COLUMN] = pd.Categorical(long_df[SPORT_COLUMN], categories=sports, ordered=True)
    long_df[SKILL_COLUMN] = pd.Categorical(long_df[SKILL_COLUMN], categories=skills, ordered=True)
    # melt stacks skill by skill; reorder so each sport's skills are contiguous.
    long_df = long_df.sort_values([SPORT_COLUMN, SKILL_COLUMN], kind="stable")
    return long_df.reset_index(drop=True)


def long_to_wide(long_df: pd.DataFrame) -> pd.DataFrame:
    """Rebuild the wide skill matrix from long form, restoring the categorical order."""

    duplicated = long_df.duplicated([SPORT_COLUMN, SKILL_COLUMN])
    if duplicated.any():
        pairs = long_df.loc[duplicated, [SPORT_COLUMN, SKILL_COLUMN]].astype(str).agg("/".join, axis=1).tolist()
        raise DatasetValidationError(f"Duplicate (sport, skill) pairs in long form: {pairs}.")
    wide = long_df.pivot(index=SPORT_COLUMN, columns=SKILL_COLUMN, values=VALUE_COLUMN)
    for column, axis in ((SPORT_COLUMN, 0), (SKILL_COLUMN, 1)):
        values = long_df[column]
        order = list(values.cat.categories) if isinstance(values.dtype, pd.CategoricalDtype) else list(values.unique())
        wide = wide.reindex(order, axis=axis)
    wide.index = pd.Index([str(sport) for sport in wide.index], name=SPORT_COLUMN)
    wide.columns = pd.Index([str(skill) for skill in wide.columns])
    return wide.astype("float64")


def check_total_consistency(df: pd.DataFrame, tolerance: float = 1e-6) -> pd.Series:
    """
    Compare the precomputed Total against the sum of the skill ratings.

    Returns the per-sport difference (Total - sum of skills); an empty Series when no Total column exists.
    """

    if TOTAL_COLUMN not in df.columns:
        return pd.Series(dtype="float64", name="Total.Difference")
    wide = to_wide_form(df)
    totals = df.set_index(SPORT_COLUMN)[TOTAL_COLUMN]
    difference = (totals - wide.sum(axis=1)).rename("Total.Difference")
    inconsistent = difference[difference.abs() > tolerance]
    if not inconsistent.empty:
        logger.warning(
            "Total differs from the sum of skill ratings for %d sport(s): %s",
            len(inconsistent),
            ", ".join(inconsistent.index[:5]),
        )
    return difference


def per_skill_median(wide: pd.DataFrame) -> pd.Series:
    """
    Median rating of every skill across all sports.

    Example return:
        Endurance=5.25, Strength=5.38, ...
    """

    return wide.median(axis=0).rename("Median")


def per_sport_variance(wide: pd.DataFrame) -> pd.Series:
    """Sample variance of each sport's ratings across the skill set; low means well-rounded."""

    variance = wide.var(axis=1, ddof=1)
    # Floating point error can produce tiny negatives for constant rows.
    return variance.clip(lower=0.0).rename("Variance")


def rank_sports_by_balance(wide: pd.DataFrame) -> pd.DataFrame:
    """
    Rank sports from most well-rounded (lowest variance) to most specialized.

    Example return row:
        Sport="Boxing", Variance=0.92, Balance="Well-Rounded", Balance.Rank=1
    """

    variance = per_sport_variance(wide)
    ranked = variance.to_frame()
    # rank(method="first") keeps first-seen order among equal variances.
    ranks = variance.rank(method="first")
    bins = min(len(BALANCE_LABELS), len(ranked))
    ranked["Balance"] = pd.qcut(ranks, q=bins, labels=BALANCE_LABELS[:bins]).astype(str)
    ranked["Balance.Rank"] = ranks.astype(int)
    return ranked.sort_values("Balance.Rank")


def per_skill_extremes(wide: pd.DataFrame) -> pd.DataFrame:
    """
    Easiest (minimum) and toughest (maximum) sport for every skill.

    Ties go to the sport that appears first in the source table, so the result is reproducible.

    Example return row:
        Skill="Nerve", Easiest="Fishing", Easiest.Value=1.0, Toughest="Auto Racing", Toughest.Value=9.5
    """

    # idxmin/idxmax return the first occurrence of the extreme value in index order.
    easiest = wide.idxmin(axis=0)
    toughest = wide.idxmax(axis=0)
    extremes = pd.DataFrame(
        {
            "Easiest": easiest,
            "Easiest.Value": wide.min(axis=0),
            "Toughest": toughest,
            "Toughest.Value": wide.max(axis=0),
        }
    )
    extremes.index.name = SKILL_COLUMN
    return extremes


def _check_decomposable(wide: pd.DataFrame) -> None:
    n_sports, n_skills = wide.shape
    if n_sports < n_skills:
        raise DegenerateDataError(
            f"PCA needs at least as many sports as skills; got {n_sports} sports and {n_skills} skills."
        )
    spread = wide.std(axis=0, ddof=0)
    constant = spread[np.isclose(spread.to_numpy(), 0.0)].index.tolist()
    if constant:
        raise DegenerateDataError(f"Cannot scale zero-variance skill column(s) to unit variance: {constant}.")


def principal_component_analysis(wide: pd.DataFrame) -> PCAResult:
    """
    Standardize the skill matrix and perform PCA.

    Eigenvalues are those of the skill correlation matrix, so they sum to the number of skills. Each component
    is oriented so its largest-magnitude loading is positive.

    Example return:
        eigenvalues.sum() == 10; loadings.shape == (10, 10); scores.shape == (n_sports, 10)
    """

    _check_decomposable(wide)
    n_sports = len(wide)

    # Population z-scores: every skill column ends up with mean 0 and variance 1.
    scaler = StandardScaler()
    scaled = scaler.fit_transform(wide.to_numpy())
    # Keep every component; n_sports >= n_skills, so there is one per skill.
    pca = PCA()
    scores = pca.fit_transform(scaled)

    # Fix the sign of each component so repeated runs agree.
    dominant = np.argmax(np.abs(pca.components_), axis=1)
    signs = np.sign(pca.components_[np.arange(len(dominant)), dominant])
    signs[signs == 0] = 1.0
    components = pca.components_ * signs[:, np.newaxis]
    scores = scores * signs[np.newaxis, :]

    pc_columns = [f"PC{i + 1}" for i in range(components.shape[0])]
    # explained_variance_ uses n - 1; rescale to the population variance of the standardized data.
    eigenvalues = pca.explained_variance_ * (n_sports - 1) / n_sports
    eigenvalues = pd.Series(np.clip(eigenvalues, 0.0, None), index=pc_columns, name="Eigenvalue")
    loadings = pd.DataFrame(components.T, index=wide.columns, columns=pc_columns)
    loadings.index.name = SKILL_COLUMN
    scores_df = pd.DataFrame(scores, index=wide.index, columns=pc_columns)

    result = PCAResult(
        eigenvalues=eigenvalues,
        loadings=loadings,
        scores=scores_df,
        model=pca,
        scaler=scaler,
    )
    logger.info(
        "PCA over %d sports x %d skills: PC1+PC2 explain %.1f%% of variance",
        n_sports,
        wide.shape[1],
        100 * float(result.cumulative_variance_ratio.iloc[min(1, len(pc_columns) - 1)]),
    )
    return result


def biplot_coordinates(result: PCAResult, components: tuple[str, str] = ("PC1", "PC2")) -> pd.DataFrame:
    """Loadings of two components scaled by the component standard deviation (biplot arrow end points)."""

    columns = list(components)
    return result.loadings[columns] * np.sqrt(result.eigenvalues[columns])


def analyze(df: pd.DataFrame) -> SkillAnalysis:
    """Run every reshaping and statistical step over a validated table, in order."""

    check_total_consistency(df)
    wide = to_wide_form(df)
    pca = principal_component_analysis(wide)
    return SkillAnalysis(
        wide=wide,
        long=to_long_form(df),
        medians=per_skill_median(wide),
        variance=per_sport_variance(wide),
        balance=rank_sports_by_balance(wide),
        extremes=per_skill_extremes(wide),
        pca=pca,
    )
