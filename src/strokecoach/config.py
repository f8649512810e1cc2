"""Configuration settings for the stroke coach."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Define base directory
BASE_DIR = Path(__file__).parent.parent.parent

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Define data directories from environment variables
DATA_DIR = Path(os.getenv("DATA_DIR", "./data"))

# Grading settings
MAX_MISTAKES = 3  # no-match strokes before the expected stroke is revealed
MAX_PENALTIES = 4  # penalty for a forced reveal, also the grade scale
REPETITION_INTERVALS = [1, 3, 7, 14, 30]  # days between reviews


def ensure_directories() -> None:
    """Ensure all required directories exist."""
    directories = [
        DATA_DIR,
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


def get_repetition_intervals() -> list[int]:
    """Get repetition intervals from environment variable."""
    raw = os.getenv("REPETITION_INTERVALS", "")
    if not raw:
        return list(REPETITION_INTERVALS)
    return [int(days) for days in raw.split(",") if days.strip()]


@dataclass
class PathSettings:
    """Path configuration settings."""
    base_dir: Path = BASE_DIR
    data_dir: Path = DATA_DIR


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///strokecoach.db")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class GradingSettings:
    """Penalty weights used while grading a character."""
    max_mistakes: int = int(os.getenv("GRADING_MAX_MISTAKES", str(MAX_MISTAKES)))
    max_penalties: int = int(os.getenv("GRADING_MAX_PENALTIES", str(MAX_PENALTIES)))
    duplicate_penalty: int = int(os.getenv("GRADING_DUPLICATE_PENALTY", "1"))
    out_of_order_weight: int = int(os.getenv("GRADING_OUT_OF_ORDER_WEIGHT", "2"))
    warning_penalty: int = int(os.getenv("GRADING_WARNING_PENALTY", "0"))


@dataclass
class RecognitionSettings:
    """Stroke recognition settings."""
    resample_points: int = int(os.getenv("RECOGNITION_RESAMPLE_POINTS", "32"))
    frame_size: float = float(os.getenv("RECOGNITION_FRAME_SIZE", "1024"))  # side of the drawing square
    match_threshold: float = float(os.getenv("RECOGNITION_MATCH_THRESHOLD", "0.15"))
    offset_penalty: float = float(os.getenv("RECOGNITION_OFFSET_PENALTY", "0.02"))
    angle_weight: float = float(os.getenv("RECOGNITION_ANGLE_WEIGHT", "0.1"))
    corner_angle: float = float(os.getenv("RECOGNITION_CORNER_ANGLE", "30"))


@dataclass
class LookupSettings:
    """Character lookup settings."""
    retry_delay: float = float(os.getenv("LOOKUP_RETRY_DELAY", "1.0"))  # seconds


@dataclass
class LearningSettings:
    """Review scheduling settings."""
    repetition_intervals: list[int] = field(default_factory=get_repetition_intervals)


@dataclass
class MonitoringSettings:
    """Metrics server settings."""
    port: Optional[int] = int(os.environ["METRICS_PORT"]) if os.getenv("METRICS_PORT") else None


def get_path_settings() -> PathSettings:
    """Get path settings."""
    return PathSettings()


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_grading_settings() -> GradingSettings:
    """Get grading settings."""
    return GradingSettings()


def get_recognition_settings() -> RecognitionSettings:
    """Get recognition settings."""
    return RecognitionSettings()


def get_lookup_settings() -> LookupSettings:
    """Get lookup settings."""
    return LookupSettings()


def get_learning_settings() -> LearningSettings:
    """Get learning settings."""
    return LearningSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    paths: PathSettings = field(default_factory=get_path_settings)
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    grading: GradingSettings = field(default_factory=get_grading_settings)
    recognition: RecognitionSettings = field(default_factory=get_recognition_settings)
    lookup: LookupSettings = field(default_factory=get_lookup_settings)
    learning: LearningSettings = field(default_factory=get_learning_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.grading.max_mistakes < 1:
            raise ValueError("GRADING_MAX_MISTAKES must be positive")

        if self.grading.max_penalties < 1:
            raise ValueError("GRADING_MAX_PENALTIES must be positive")

        if self.grading.duplicate_penalty < 0 or \
           self.grading.out_of_order_weight < 0 or \
           self.grading.warning_penalty < 0:
            raise ValueError("Penalty weights cannot be negative")

        if self.recognition.resample_points < 2:
            raise ValueError("RECOGNITION_RESAMPLE_POINTS must be at least 2")

        if self.recognition.frame_size <= 0:
            raise ValueError("RECOGNITION_FRAME_SIZE must be positive")

        if self.lookup.retry_delay < 0:
            raise ValueError("LOOKUP_RETRY_DELAY cannot be negative")

        if not self.learning.repetition_intervals:
            raise ValueError("REPETITION_INTERVALS cannot be empty")


# Create global settings instance
settings = Settings()
settings.validate()
