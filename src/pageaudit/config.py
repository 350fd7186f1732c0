from dotenv import load_dotenv
from dataclasses import dataclass, field
from pathlib import Path
import json
import os

from pageaudit.constants import (
    DEFAULT_USER_AGENT,
    GET_TIMEOUT_SECONDS,
    HEAD_TIMEOUT_SECONDS,
    MAX_REDIRECTS,
    MAX_PROBE_LINKS,
    MAX_SERP_RESULTS,
    TOP_KEYWORDS_COUNT,
)

load_dotenv()  # Loads variables from .env file


class Settings:
    """
    Manages application settings loaded from environment variables.
    """
    USER_AGENT = os.getenv("USER_AGENT", DEFAULT_USER_AGENT)
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE")

    # HTTP server
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "3000"))


settings = Settings()


@dataclass
class AuditThresholds:
    """Configurable thresholds for content scoring."""

    # Length
    thin_content_words: int = 300
    target_content_words: int = 1000

    # Readability
    min_readability_score: float = 50.0

    # Keyword density (percentage)
    min_keyword_density: float = 0.5
    max_keyword_density: float = 2.5
    keyword_stuffing_threshold: float = 3.0

    # Score weights (points)
    length_weight: int = 40
    readability_weight: int = 30
    density_weight: int = 30

    @classmethod
    def from_env(cls) -> "AuditThresholds":
        """Load thresholds from environment variables.

        Environment variables should be prefixed with PAGEAUDIT_THRESHOLD_
        e.g., PAGEAUDIT_THRESHOLD_THIN_CONTENT_WORDS=250

        Returns:
            AuditThresholds with values from environment
        """
        thresholds = cls()
        prefix = "PAGEAUDIT_THRESHOLD_"

        for field_name in thresholds.__dataclass_fields__:
            env_key = f"{prefix}{field_name.upper()}"
            env_value = os.getenv(env_key)

            if env_value is not None:
                field_type = thresholds.__dataclass_fields__[field_name].type
                try:
                    if field_type in (int, "int"):
                        setattr(thresholds, field_name, int(env_value))
                    elif field_type in (float, "float"):
                        setattr(thresholds, field_name, float(env_value))
                except ValueError:
                    pass  # Keep default if conversion fails

        return thresholds

    @classmethod
    def from_file(cls, path: str) -> "AuditThresholds":
        """Load thresholds from a JSON configuration file.

        Args:
            path: Path to JSON configuration file

        Returns:
            AuditThresholds with values from file
        """
        thresholds = cls()
        file_path = Path(path)

        if not file_path.exists():
            return thresholds

        with open(file_path, 'r') as f:
            config = json.load(f)

        threshold_config = config.get('thresholds', config)

        for field_name in thresholds.__dataclass_fields__:
            if field_name in threshold_config:
                setattr(thresholds, field_name, threshold_config[field_name])

        return thresholds

    def to_dict(self) -> dict:
        """Convert thresholds to dictionary.

        Returns:
            Dictionary of all threshold values
        """
        return {
            field_name: getattr(self, field_name)
            for field_name in self.__dataclass_fields__
        }


# Global default thresholds instance
default_thresholds = AuditThresholds()


@dataclass
class Config:
    """Runtime configuration for the audit pipeline."""
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = GET_TIMEOUT_SECONDS
    probe_timeout: float = HEAD_TIMEOUT_SECONDS
    max_redirects: int = MAX_REDIRECTS
    max_probe_links: int = MAX_PROBE_LINKS
    top_keywords: int = TOP_KEYWORDS_COUNT
    max_serp_results: int = MAX_SERP_RESULTS
    log_level: str = "INFO"
    thresholds: AuditThresholds = field(default_factory=AuditThresholds)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables.

        Returns:
            Config: Configuration instance with values from environment
        """
        return cls(
            user_agent=os.getenv("USER_AGENT", DEFAULT_USER_AGENT),
            timeout=float(os.getenv("TIMEOUT", str(GET_TIMEOUT_SECONDS))),
            probe_timeout=float(os.getenv("PROBE_TIMEOUT", str(HEAD_TIMEOUT_SECONDS))),
            max_redirects=int(os.getenv("MAX_REDIRECTS", str(MAX_REDIRECTS))),
            max_probe_links=int(os.getenv("MAX_PROBE_LINKS", str(MAX_PROBE_LINKS))),
            top_keywords=int(os.getenv("TOP_KEYWORDS", str(TOP_KEYWORDS_COUNT))),
            max_serp_results=int(os.getenv("MAX_SERP_RESULTS", str(MAX_SERP_RESULTS))),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            thresholds=load_thresholds(),
        )


def load_thresholds() -> AuditThresholds:
    """Thresholds from the JSON file named by THRESHOLDS_FILE, else from the environment."""
    path = os.getenv("THRESHOLDS_FILE")
    if path:
        return AuditThresholds.from_file(path)
    return AuditThresholds.from_env()
