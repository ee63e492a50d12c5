"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use SOURCEGEN_ prefix (e.g., SOURCEGEN_MARKER=//tool:generate).

Settings can also be loaded from a .env file in the project root.
"""

from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FailurePolicy(str, Enum):
    """
    What the engine does after a directive fails at run time

    CONTINUE reports the failure and moves on to the next directive.
    ABORT reports the failure and then stops the whole run.
    """
    CONTINUE = "continue"
    ABORT = "abort"


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use SOURCEGEN_ prefix.

    Examples:
        SOURCEGEN_MARKER=//mytool:generate
        SOURCEGEN_ENV_PREFIX=MYTOOL
        SOURCEGEN_ON_SPAWN_FAILURE=abort
    """

    model_config = SettingsConfigDict(
        env_prefix="SOURCEGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Parser configuration
    marker: str = Field(
        default="//sourcegen:generate",
        description="Literal prefix that identifies a generate directive line",
    )

    # Execution configuration
    env_prefix: str = Field(
        default="SOURCEGEN",
        description="Prefix of the environment variables derived for each directive",
    )

    on_spawn_failure: FailurePolicy = Field(
        default=FailurePolicy.CONTINUE,
        description="Policy when a directive's program cannot be launched",
    )

    on_nonzero_exit: FailurePolicy = Field(
        default=FailurePolicy.CONTINUE,
        description="Policy when a directive's program exits with a failing status",
    )

    output_encoding_errors: str = Field(
        default="replace",
        description="Error handler used when decoding captured process output as UTF-8",
    )

    # Logging configuration
    verbosity: int = Field(
        default=1,
        description="Default LOG() verbosity (0=silent, 1=normal, 2=verbose, 3=debug)",
    )

    @field_validator("marker", "env_prefix")
    @classmethod
    def blank_reject(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    def envName_make(self, suffix: str) -> str:
        """
        Build the name of a derived environment variable.

        Args:
            suffix: Variable suffix (e.g., "LINE")

        Returns:
            Prefixed variable name (e.g., "SOURCEGEN_LINE")

        Example:
            >>> settings = AppSettings()
            >>> settings.envName_make("MODULE")
            'SOURCEGEN_MODULE'
        """
        return f"{self.env_prefix}_{suffix}"


# Singleton instance - import this in your code
appsettings = AppSettings()
