"""Pydantic configuration models for apibase."""

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class ByteSize(int):
    """
    Custom type that parses human-readable byte sizes.

    Accepts:
        - Integers (bytes)
        - Strings like '64kb', '1mb'

    Examples:
        >>> ByteSize._parse('64kb')
        65536
        >>> ByteSize._parse(1024)
        1024
    """

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: Any) -> Any:
        from pydantic_core import core_schema

        return core_schema.no_info_plain_validator_function(cls._parse)

    @classmethod
    def _parse(cls, v: Any) -> int:
        if isinstance(v, int):
            return v
        if isinstance(v, str):
            v = v.lower().strip()
            # Order matters: check longer suffixes first
            units = [("gb", 1024**3), ("mb", 1024**2), ("kb", 1024), ("b", 1)]
            for unit, mult in units:
                if v.endswith(unit):
                    num_str = v[: -len(unit)].strip()
                    try:
                        return int(float(num_str) * mult)
                    except ValueError as err:
                        raise ValueError(f"Invalid number in byte size: {v}") from err
            try:
                return int(v)
            except ValueError:
                pass
        raise ValueError(f"Invalid byte size: {v}. Use format like '64kb', '1mb', or integer bytes.")


class NetworkConfig(BaseModel):
    """Configuration for the aiohttp transport."""

    timeout: float = Field(60.0, gt=0, description="Total request timeout in seconds")
    connect_timeout: Optional[float] = Field(
        None,
        gt=0,
        description="Connection timeout in seconds (None = bounded by total timeout)",
    )
    user_agent: Optional[str] = Field(None, description="Custom User-Agent header")
    proxy: Optional[str] = Field(None, description="HTTP/HTTPS proxy URL")
    chunk_size: ByteSize = Field(
        ByteSize(64 * 1024),
        description="Chunk size for streaming request and response bodies (e.g. '64kb')",
    )

    model_config = {"extra": "forbid"}

    @field_validator("chunk_size")
    @classmethod
    def _chunk_size_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("chunk_size must be positive")
        return v


class APIConfig(BaseModel):
    """
    Root configuration model for apibase.

    Example:
        config = APIConfig(
            base_url="https://api.example.com",
            network=NetworkConfig(timeout=10),
        )

    YAML format:
        base_url: https://api.example.com
        network:
          timeout: 10
          chunk_size: 128kb
        log_level: DEBUG
    """

    base_url: Optional[str] = Field(None, description="Default base URL for requests without one")
    network: NetworkConfig = Field(default_factory=NetworkConfig)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "APIConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str)
        return cls.model_validate(data or {})

    @classmethod
    def from_yaml_file(cls, path: Path) -> "APIConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text())
