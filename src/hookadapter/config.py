"""hookadapter Configuration Module.

Provides centralized configuration for hook processes.
All settings support environment variable overrides with HOOKADAPTER_ prefix.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Default paths
HOOKADAPTER_HOME = Path.home() / ".hookadapter"
HOOKADAPTER_DB = HOOKADAPTER_HOME / "executions.db"


class HookAdapterSettings(BaseSettings):
    """Hook process configuration.

    All settings can be overridden via environment variables with HOOKADAPTER_
    prefix. For example, HOOKADAPTER_REVIEW_DEBOUNCE_MS=5000 sets
    review_debounce_ms to 5000.
    """

    model_config = SettingsConfigDict(
        env_prefix="HOOKADAPTER_",
        env_nested_delimiter="__",
    )

    # Paths
    home: Path = Field(
        default=HOOKADAPTER_HOME,
        description="Base directory for hookadapter data storage",
    )
    db_path: Path = Field(
        default=HOOKADAPTER_DB,
        description="Path to SQLite execution log database",
    )

    # Logging
    log_level: str = Field(
        default="warning",
        description="Logging level (debug, info, warning, error)",
    )
    log_format: str = Field(
        default="console",
        description="Log output format (console or json)",
    )

    # Callback settings
    review_debounce_ms: int = Field(
        default=3000,
        ge=0,
        description="Skip a review if the same file was handled this recently",
    )
    review_command: str | None = Field(
        default=None,
        description="Command run against an edited file; non-zero exit requires a fix",
    )
    review_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Timeout in seconds for the review command",
    )
    scaffold_marker: str = Field(
        default="@scaffold-generated",
        description="Marker comment left in generated files until implemented",
    )
    patterns: dict[str, str] = Field(
        default_factory=dict,
        description="File suffix to design pattern guidance, e.g. {'.ts': '...'}",
    )

    @property
    def hook_error_log(self) -> Path:
        """Path to the hook error log."""
        return self.home / "hook_errors.log"


# Module-level singleton
settings = HookAdapterSettings()
