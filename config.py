"""
Configuration management using Pydantic Settings with safe access wrapper
"""
from pydantic_settings import BaseSettings
from typing import Any


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Text Pattern Engine"
    version: str = "1.0.0"
    debug: bool = False
    environment: str = "production"

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8080

    # Processing limits
    max_text_length: int = 1000000
    batch_max_workers: int = 4

    # Analysis defaults used when a form field is left blank
    default_min_word_length: int = 3
    default_max_sentences: int = 3
    frequency_report_limit: int = 20

    # Saved pattern registry
    patterns_file: str = "saved_patterns.json"

    # Logging settings
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_file: str = "text_engine.log"
    log_file_max_bytes: int = 10485760
    log_file_backup_count: int = 10

    # Monitoring
    enable_metrics: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"   # allow unknown env vars without error

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._validated = False
        self.validate_settings()

    def validate_settings(self):
        """Validate critical settings on startup"""
        if self._validated:
            return

        errors = []

        if self.environment not in ["development", "testing", "production"]:
            errors.append(f"Invalid environment: {self.environment}")

        if self.batch_max_workers < 1:
            errors.append("batch_max_workers must be at least 1")

        if self.max_text_length < 1:
            errors.append("max_text_length must be positive")

        if not self.patterns_file:
            errors.append("patterns_file is required")

        if errors:
            raise ValueError(f"Configuration errors: {'; '.join(errors)}")

        self._validated = True


class SafeSettings:
    """Safe wrapper for settings with fallback defaults"""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._defaults = {
            "app_name": "Text Pattern Engine",
            "version": "1.0.0",
            "environment": "production",
            "debug": False,
            "log_level": "INFO",
            "log_dir": "logs",
            "log_file": "text_engine.log",
            "log_file_max_bytes": 10485760,
            "log_file_backup_count": 10,
            "patterns_file": "saved_patterns.json",
            "batch_max_workers": 4,
            "max_text_length": 1000000,
            "default_min_word_length": 3,
            "default_max_sentences": 3,
            "frequency_report_limit": 20,
            "enable_metrics": True,
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Safely get setting value with fallback"""
        try:
            value = getattr(self._settings, key, None)
            if value is None:
                value = self._defaults.get(key, default)
            return value
        except Exception:
            return self._defaults.get(key, default)

    def __getattr__(self, key: str) -> Any:
        """Proxy attribute access with safety"""
        return self.get(key)

    @property
    def raw(self) -> Settings:
        """Get raw settings object"""
        return self._settings


# Initialize settings with safety wrapper
_raw_settings = Settings()
settings = SafeSettings(_raw_settings)
