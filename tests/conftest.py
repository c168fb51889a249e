from __future__ import annotations

import pandas as pd
import pytest

from sport_skills_core import analyze, load_dataset, to_wide_form


RAW_SKILLS = [
    "Endurance",
    "Strength",
    "Power",
    "Speed",
    "Agility",
    "Flexibility",
    "Nerve",
    "Durability",
    "Hand-Eye Coordination",
    "Analytical Aptitude",
]

RATINGS = {
    "Boxing": [8.63, 8.13, 8.63, 6.38, 6.25, 4.38, 8.88, 8.50, 7.00, 5.63],
    "Ice Hockey": [7.25, 7.13, 7.88, 7.75, 7.63, 4.88, 6.00, 8.25, 7.50, 7.63],
    "Football": [5.38, 8.63, 8.13, 7.13, 6.38, 4.38, 7.25, 8.50, 5.50, 7.50],
    "Basketball": [7.38, 6.25, 6.50, 7.25, 8.13, 5.50, 4.25, 6.50, 7.50, 7.25],
    "Wrestling": [6.63, 8.38, 7.13, 5.13, 6.38, 7.50, 5.00, 8.50, 4.88, 6.25],
    "Martial Arts": [6.25, 6.75, 7.75, 6.75, 7.13, 7.75, 6.75, 6.25, 5.75, 5.75],
    "Tennis": [7.38, 5.25, 5.63, 6.63, 7.50, 4.75, 4.25, 4.63, 8.63, 7.50],
    "Gymnastics": [5.63, 7.00, 6.50, 5.38, 8.88, 10.00, 8.50, 5.13, 4.75, 4.00],
    "Baseball/Softball": [4.63, 6.00, 7.00, 6.25, 6.50, 4.00, 5.25, 4.50, 9.00, 7.75],
    "Soccer": [8.50, 5.00, 5.00, 7.00, 7.13, 4.63, 3.75, 5.75, 4.63, 6.75],
    "Skiing: Alpine": [6.13, 6.63, 6.63, 8.50, 6.25, 5.63, 8.88, 7.00, 4.38, 6.13],
    "Water Polo": [8.38, 6.38, 5.88, 5.38, 5.38, 4.88, 4.25, 6.50, 5.25, 6.63],
}


@pytest.fixture
def raw_table() -> pd.DataFrame:
    """Ratings as they appear in the workbook: spaced headers, Total and Rank columns."""

    df = pd.DataFrame.from_dict(RATINGS, orient="index", columns=RAW_SKILLS)
    df.index.name = "Sport"
    df = df.reset_index()
    df["Total"] = df[RAW_SKILLS].sum(axis=1)
    df["Rank"] = df["Total"].rank(ascending=False, method="min")
    return df


@pytest.fixture
def ratings_csv(tmp_path, raw_table):
    path = tmp_path / "ratings.csv"
    raw_table.to_csv(path, index=False)
    return path


@pytest.fixture
def ratings_xlsx(tmp_path, raw_table):
    path = tmp_path / "ratings.xlsx"
    raw_table.to_excel(path, index=False)
    return path


@pytest.fixture
def table(ratings_csv):
    return load_dataset(ratings_csv)


@pytest.fixture
def wide(table):
    return to_wide_form(table)


@pytest.fixture
def analysis(table):
    return analyze(table)
