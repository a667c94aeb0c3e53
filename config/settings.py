"""Application settings and configuration."""

from pathlib import Path
from dataclasses import dataclass, field
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent


@dataclass
class DataConfig:
    """Record source configuration."""

    records_path: Path = field(
        default_factory=lambda: Path(
            os.getenv("SYNDUCT_RECORDS_PATH", str(PROJECT_ROOT / "data" / "sample_records.json"))
        )
    )


@dataclass
class AnalysisConfig:
    """Defaults for the aggregation functions and signal thresholds."""

    signal_window_days: int = field(
        default_factory=lambda: int(os.getenv("SIGNAL_WINDOW_DAYS", "30"))
    )
    min_percent_change: float = field(
        default_factory=lambda: float(os.getenv("SIGNAL_MIN_PERCENT_CHANGE", "20"))
    )
    min_drug_activity: int = field(
        default_factory=lambda: int(os.getenv("SIGNAL_MIN_DRUG_ACTIVITY", "3"))
    )
    min_area_activity: int = field(
        default_factory=lambda: int(os.getenv("SIGNAL_MIN_AREA_ACTIVITY", "5"))
    )
    max_signals: int = field(
        default_factory=lambda: int(os.getenv("SIGNAL_MAX_RESULTS", "6"))
    )
    sparkline_buckets: int = 7
    geo_limit: int = 12
    top_n: int = 10
    history_limit: int = 10


@dataclass
class AppConfig:
    """Application configuration settings."""

    name: str = field(default_factory=lambda: os.getenv("APP_NAME", "Synduct Insights"))
    version: str = field(default_factory=lambda: os.getenv("APP_VERSION", "1.0.0"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))


@dataclass
class Config:
    """Main configuration container."""

    data: DataConfig = field(default_factory=DataConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    app: AppConfig = field(default_factory=AppConfig)


# Global config instance
config = Config()
