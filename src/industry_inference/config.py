"""
Configuration settings for the Industry Inference Service.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Industry Inference Service"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # === LLM Provider (OpenAI-compatible chat completions) ===
    LLM_BASE_URL: str = "https://api.deepseek.com"
    LLM_API_KEY: Optional[str] = None  # AI tier is disabled when unset
    LLM_MODEL: str = "deepseek-chat"
    LLM_TIMEOUT: float = 5.0  # seconds, whole AI tier budget
    LLM_REQUEST_TIMEOUT: float = 2.0  # seconds, per HTTP attempt (below LLM_TIMEOUT so retries fit)
    LLM_MAX_RETRIES: int = 2  # connection-level attempts
    LLM_RETRY_BACKOFF: float = 0.25  # seconds, doubled per attempt
    LLM_TEMPERATURE: float = 0.3
    LLM_MAX_TOKENS: int = 500

    # === Input Normalization ===
    ENABLE_AI_NORMALIZATION: bool = False
    NORMALIZATION_TIMEOUT: float = 3.0
    NORMALIZATION_MAX_TOKENS: int = 50
    MAX_DESCRIPTION_LENGTH: int = 200  # chars sent to the LLM

    # === Classification Thresholds ===
    DECISIVE_CONFIDENCE_THRESHOLD: float = 0.8  # pending product calibration
    AMBIGUITY_MARGIN: float = 0.1  # rival segments closer than this are ambiguous
    AI_MIN_CONFIDENCE: float = 0.3  # AI answers below this are discarded
    FALLBACK_CONFIDENCE: float = 0.3
    MAX_CANDIDATES: int = 5
    MIN_CONFIDENCE_WARNING_THRESHOLD: float = 0.5

    # === Cache ===
    CACHE_BACKEND: str = "memory"  # memory | redis
    CACHE_TTL_SECONDS: int = 3600  # 1 hour
    CACHE_MAX_ENTRIES: int = 10000
    CACHE_KEY_PREFIX: str = "industry:classification:"
    REDIS_URL: str = "redis://redis:6379/0"
    REDIS_MAX_CONNECTIONS: int = 50

    # === Reference Data & Templates ===
    TAXONOMY_PATH: str = str(PACKAGE_DIR / "data" / "industry_taxonomy.json")
    SEED_RULES_PATH: str = str(PACKAGE_DIR / "data" / "seed_rules.json")
    ONTOLOGY_PATH: str = str(PACKAGE_DIR / "data" / "ontology.json")
    AMBIGUOUS_TERMS_PATH: str = str(PACKAGE_DIR / "data" / "ambiguous_terms.json")
    JSON_SCHEMA_PATH: str = str(PACKAGE_DIR / "validation" / "schema" / "industry_classification_v1.json")
    PROMPT_TEMPLATES_DIR: str = str(PACKAGE_DIR / "llm" / "prompts")

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


# Global settings instance
settings = Settings()
