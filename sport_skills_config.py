"""
Configuration for the sport skills report.
Settings come from environment variables, optionally loaded from a .env file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


DEFAULT_DATA_PATH = Path("data/toughest_sport_by_skill.xlsx")
DEFAULT_OUTPUT_DIR = Path("outputs")

DATA_PATH_ENV = "SPORT_SKILLS_DATA"
OUTPUT_DIR_ENV = "SPORT_SKILLS_OUTPUT"
LOG_LEVEL_ENV = "SPORT_SKILLS_LOG_LEVEL"


@dataclass(frozen=True)
class ReportConfig:
    """Where the workbook lives, where the static report goes, and how verbose the log is."""

    data_path: Path = DEFAULT_DATA_PATH
    output_dir: Path = DEFAULT_OUTPUT_DIR
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def load_config(env_file: str | Path | None = None) -> ReportConfig:
    """
    Build the configuration from the environment.

    Example environment:
        SPORT_SKILLS_DATA=data/toughest_sport_by_skill.xlsx
        SPORT_SKILLS_OUTPUT=outputs/report
        SPORT_SKILLS_LOG_LEVEL=DEBUG
    """

    # Values already in the environment win over the .env file.
    load_dotenv(dotenv_path=env_file, override=False)
    return ReportConfig(
        data_path=Path(os.getenv(DATA_PATH_ENV, str(DEFAULT_DATA_PATH))),
        output_dir=Path(os.getenv(OUTPUT_DIR_ENV, str(DEFAULT_OUTPUT_DIR))),
        log_level=os.getenv(LOG_LEVEL_ENV, "INFO").upper(),
    )


def configure_logging(config: ReportConfig) -> None:
    level = getattr(logging, config.log_level, None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level {config.log_level!r}.")
    logging.basicConfig(level=level, format=config.log_format)
