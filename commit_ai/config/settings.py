"""
Configuration management with Pydantic validation and environment variable support.
"""

import os
from pathlib import Path
from typing import Optional, Literal
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings
import platform


class AISettings(BaseModel):
    """Text-generation service configuration."""

    api_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI-compatible API base URL"
    )
    model: str = Field(
        default="chatgpt-4o-latest",
        description="Model used to draft commit messages"
    )
    timeout: Optional[int] = Field(
        default=None,
        ge=1,
        le=600,
        description="API request timeout in seconds (no timeout when unset)"
    )
    temperature: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=2.0,
        description="Sampling temperature (service default when unset)"
    )


class UISettings(BaseModel):
    """User interface configuration."""

    use_colors: bool = Field(
        default=True,
        description="Use colored output"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Console logging level"
    )


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    ai: AISettings = Field(default_factory=AISettings)
    ui: UISettings = Field(default_factory=UISettings)

    model_config = {
        "env_prefix": "COMMIT_AI_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory."""
        if platform.system() == "Windows":
            base = Path(os.environ.get("APPDATA", "~"))
        else:
            base = Path(os.environ.get("XDG_CONFIG_HOME", "~/.config"))

        return (base / "commit-ai").expanduser()

    @property
    def cache_dir(self) -> Path:
        """Get the cache directory."""
        if platform.system() == "Windows":
            base = Path(os.environ.get("LOCALAPPDATA", "~"))
        else:
            base = Path(os.environ.get("XDG_CACHE_HOME", "~/.cache"))

        return (base / "commit-ai").expanduser()

    @property
    def log_file(self) -> Path:
        """Get the log file path."""
        return self.cache_dir / "commit-ai.log"

    @property
    def credentials_file(self) -> Path:
        """Get the credential file path."""
        override = os.environ.get("COMMIT_AI_CREDENTIALS_FILE")
        if override:
            return Path(override).expanduser()
        return self.config_dir / ".env"
