"""
Settings Module
===============

Pydantic-based configuration with environment variable loading.

Version: 0.1.0
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class RelayerSettings(BaseSettings):
    """Proof relayer endpoint configuration."""

    model_config = SettingsConfigDict(env_prefix="RELAYER_")

    base_url: str = "https://relayer-api.horizenlabs.io"
    api_key: SecretStr = SecretStr("")
    max_attempts: int = Field(default=5, ge=1)
    timeout_seconds: float = 60.0

    @property
    def has_api_key(self) -> bool:
        """Check whether an API key is configured."""
        return bool(self.api_key.get_secret_value())


class PacingSettings(BaseSettings):
    """
    Delay windows in whole seconds, both bounds inclusive.

    The defaults reproduce ``RANDOM % 61 + 60`` for both the retry backoff
    and the pause between iterations.
    """

    model_config = SettingsConfigDict(env_prefix="PACING_")

    retry_delay_min: int = Field(default=60, ge=0)
    retry_delay_max: int = Field(default=120, ge=0)
    iteration_delay_min: int = Field(default=60, ge=0)
    iteration_delay_max: int = Field(default=120, ge=0)

    @model_validator(mode="after")
    def bounds_are_ordered(self) -> "PacingSettings":
        """Ensure every window has min <= max."""
        if self.retry_delay_min > self.retry_delay_max:
            raise ValueError("retry_delay_min must be <= retry_delay_max")
        if self.iteration_delay_min > self.iteration_delay_max:
            raise ValueError("iteration_delay_min must be <= iteration_delay_max")
        return self


class CircuitSettings(BaseSettings):
    """Circuit artifacts and proving toolchain configuration."""

    model_config = SettingsConfigDict(env_prefix="CIRCUIT_")

    name: str = "in_range"
    build_dir: Path = Path("circuits")
    keys_dir: Path = Path("keys")
    work_dir: Path = Path(".")

    # Inclusive range for the randomized input x
    input_min: int = 1
    input_max: int = 20

    # Powers of tau size used by the trusted setup
    ptau_power: int = Field(default=12, ge=1, le=28)

    # e.g. "npx snarkjs"
    snarkjs_bin: str = "snarkjs"
    circom_bin: str = "circom"

    @model_validator(mode="after")
    def input_range_is_ordered(self) -> "CircuitSettings":
        """Ensure input_min <= input_max."""
        if self.input_min > self.input_max:
            raise ValueError("input_min must be <= input_max")
        return self

    @property
    def source_path(self) -> Path:
        """Circom source file."""
        return self.build_dir / f"{self.name}.circom"

    @property
    def r1cs_path(self) -> Path:
        """Compiled constraint system."""
        return self.build_dir / f"{self.name}.r1cs"

    @property
    def wasm_path(self) -> Path:
        """Witness generator compiled to WASM."""
        return self.build_dir / f"{self.name}_js" / f"{self.name}.wasm"

    @property
    def zkey_path(self) -> Path:
        """Groth16 proving key."""
        return self.keys_dir / f"{self.name}.zkey"

    @property
    def verification_key_path(self) -> Path:
        """Exported verification key."""
        return self.keys_dir / "verification_key.json"


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables with sensible defaults.
    Use `get_settings()` for the cached instance.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    log_level: LogLevel = LogLevel.INFO
    json_logs: bool = False

    relayer: RelayerSettings = Field(default_factory=RelayerSettings)
    pacing: PacingSettings = Field(default_factory=PacingSettings)
    circuit: CircuitSettings = Field(default_factory=CircuitSettings)

    # Outputs
    audit_log_path: Path = Path("submit.log")
    payload_path: Path | None = Path("payload.json")

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Ensure log level is uppercase."""
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings singleton.
    """
    return Settings()
