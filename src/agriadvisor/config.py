"""Agri Advisor configuration — external service credentials and settings."""

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite+aiosqlite:///./agri_ai.db"

    # Generation (Gemini generateContent)
    gemini_api_key: str = ""
    gemini_api_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-1.5-flash"
    llm_timeout_seconds: float = 120.0

    # Translation (Google Translate v2). Requests may carry their own key,
    # which takes precedence over this one.
    translate_api_url: str = "https://translation.googleapis.com/language/translate/v2"
    google_translate_api_key: str = ""

    @model_validator(mode="after")
    def _strip_api_keys(self) -> "Settings":
        """Strip whitespace and newlines from pasted API keys."""
        for field in ("gemini_api_key", "google_translate_api_key"):
            val = getattr(self, field)
            if val and val != val.strip():
                setattr(self, field, val.strip())
        return self

    # PDF fonts: TTF files with wide glyph coverage for translated reports.
    # Empty means the built-in Helvetica family.
    pdf_font_path: str = ""
    pdf_bold_font_path: str = ""

    # MLflow: local SQLite store unless MLFLOW_TRACKING_URI is set
    mlflow_tracking_uri: str = "sqlite:///mlruns/mlflow.db"
    mlflow_experiment_name: str = "agri-advisor"

    # Logging
    log_json: bool = True
    log_level: str = "INFO"

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 5001
    cors_origins: list[str] = ["*"]

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
