"""Application settings and configuration management."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Config(BaseSettings):
    """Application configuration with validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server Settings
    host: str = Field(default="0.0.0.0", description="Interface the API listens on")
    port: int = Field(default=10000, ge=1, le=65535, description="Port the API listens on")

    # Browser Settings
    browser_executable_path: str | None = Field(
        default=None,
        description="Chromium/Chrome executable (None = Playwright's bundled Chromium)",
    )
    headless: bool = Field(default=True, description="Run the browser without a window")
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    launch_timeout_seconds: int = Field(default=30, ge=5, le=120)

    # Portal Settings
    portal_url: str = Field(
        default="https://epds.telangana.gov.in/FoodSecurityAct/",
        description="Landing page of the Food Security portal",
    )
    search_link_fragment: str = Field(
        default="frmRationCardDetails.aspx",
        description="Path fragment identifying the ration card search link",
    )
    navigation_timeout_seconds: int = Field(default=45, ge=5, le=300)
    input_timeout_seconds: int = Field(default=15, ge=1, le=120)

    # Results Settle
    settle_delay_seconds: float = Field(
        default=5.0,
        ge=0.0,
        le=60.0,
        description="Fixed wait used when the results marker never appears",
    )
    settle_poll_attempts: int = Field(default=10, ge=0, le=100)
    settle_poll_interval_seconds: float = Field(default=0.5, ge=0.0, le=10.0)

    # Session Pool
    max_concurrent_sessions: int = Field(
        default=2,
        ge=1,
        le=32,
        description="Maximum browser sessions alive at once",
    )
    session_queue_timeout_seconds: float = Field(
        default=60.0,
        ge=0.0,
        le=600.0,
        description="How long a lookup waits for a free session slot",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="logs/fsclookup.log", description="Main log file")

    @field_validator("browser_executable_path")
    @classmethod
    def expand_user_path(cls, v: str | None) -> str | None:
        """Expand user home directory in paths."""
        if not v:
            return None
        return str(Path(v).expanduser())

    @field_validator("portal_url")
    @classmethod
    def validate_portal_url(cls, v: str) -> str:
        """Require an absolute http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"portal_url must be an http(s) URL, got: {v}")
        return v

    @property
    def navigation_timeout_ms(self) -> float:
        return self.navigation_timeout_seconds * 1000

    @property
    def input_timeout_ms(self) -> float:
        return self.input_timeout_seconds * 1000

    @property
    def launch_timeout_ms(self) -> float:
        return self.launch_timeout_seconds * 1000


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config
