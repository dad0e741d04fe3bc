"""Client-side configuration for talking to a ContextForge server.

Stored as JSON (default ``~/.config/contextforge/config.json``). There is no
process-wide instance: callers load a config, pass it to the client, and
save it back explicitly when they change it.
"""

import json
import logging
from pathlib import Path
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "contextforge" / "config.json"


class ClientConfig(BaseModel):
    """Connection and presentation settings for API clients."""

    api_url: str = "http://localhost:8000"
    api_key: Optional[str] = None
    default_format: Literal["table", "json", "yaml"] = "table"
    auto_optimize: bool = False
    batch_size: int = Field(default=50, ge=1)
    timeout: float = Field(default=30.0, gt=0)

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @classmethod
    def load(cls, path: Union[str, Path, None] = None) -> "ClientConfig":
        """Read a config file. A missing file yields the defaults."""
        config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
        if not config_path.exists():
            logger.debug("No client config at %s, using defaults", config_path)
            return cls()
        return cls.model_validate(json.loads(config_path.read_text(encoding="utf-8")))

    def save(self, path: Union[str, Path, None] = None) -> Path:
        config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return config_path

    def problems(self) -> List[str]:
        """Human-readable configuration errors; empty when usable."""
        errors = []
        if not self.api_url:
            errors.append("api_url is not set")
        elif not self.api_url.startswith(("http://", "https://")):
            errors.append(f"api_url must start with http:// or https://, got {self.api_url!r}")
        return errors
