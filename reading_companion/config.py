"""Configuration loader for the Reading Companion engine."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "Reading Companion"
    version: str = "1.0.0"


class SegmentationConfig(BaseModel):
    """Chapter segmentation thresholds.

    The defaults are the values the segmentation tiers are defined with;
    changing them changes which tier wins on a given text.
    """

    chunk_words: int = Field(default=5000, gt=0)
    min_section_chars: int = 100
    min_sections: int = 6
    blank_run_newlines: int = Field(default=3, ge=2)


class StorageConfig(BaseModel):
    """Storage paths configuration."""

    sqlite_path: str = "./db/app.db"
    texts_dir: str = "./data/texts"


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    segmentation: SegmentationConfig = Field(default_factory=SegmentationConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    # Storage locations can be redirected per environment
    db_path = os.getenv("READING_COMPANION_DB_PATH")
    if db_path:
        config.storage.sqlite_path = db_path
    texts_dir = os.getenv("READING_COMPANION_TEXTS_DIR")
    if texts_dir:
        config.storage.texts_dir = texts_dir

    return config
