"""
ECSign Configuration.

Provides sensible defaults with override capability.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .algorithms import SUPPORTED_CURVES, SUPPORTED_DIGESTS

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ECSignConfig(BaseModel):
    """
    Configuration for ecsign.

    Key files default to the ~/.ecsign/ directory.
    Environment variables override defaults (ECSIGN_* prefix).
    """

    # Algorithms
    default_curve: str = "secp256k1"
    default_digest: str = "sha256"

    # Key storage
    key_dir: Path = Field(default_factory=lambda: Path.home() / ".ecsign")
    public_key_file: str = "ec_public.pem"
    private_key_file: str = "ec_private.pem"
    private_key_mode: int = 0o600

    # Logging
    log_level: str = "INFO"

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("default_curve")
    @classmethod
    def validate_curve(cls, v: str) -> str:
        if v not in SUPPORTED_CURVES:
            raise ValueError(f"unsupported curve {v!r}, expected one of {sorted(SUPPORTED_CURVES)}")
        return v

    @field_validator("default_digest")
    @classmethod
    def validate_digest(cls, v: str) -> str:
        if v not in SUPPORTED_DIGESTS:
            raise ValueError(f"unsupported digest {v!r}, expected one of {sorted(SUPPORTED_DIGESTS)}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level {v!r}")
        return level

    @field_validator("private_key_mode")
    @classmethod
    def validate_mode(cls, v: int) -> int:
        if not 0 <= v <= 0o777:
            raise ValueError(f"file mode {oct(v)} out of range")
        return v

    def model_post_init(self, __context):
        """Apply environment variable overrides."""
        self._apply_env_overrides()

    def _apply_env_overrides(self):
        """Override config from environment variables."""
        env_map = {
            "ECSIGN_DEFAULT_CURVE": ("default_curve", str),
            "ECSIGN_DEFAULT_DIGEST": ("default_digest", str),
            "ECSIGN_KEY_DIR": ("key_dir", Path),
            "ECSIGN_PRIVATE_KEY_MODE": ("private_key_mode", lambda s: int(s, 8)),
            "ECSIGN_LOG_LEVEL": ("log_level", str),
        }

        for env_var, (attr, type_fn) in env_map.items():
            value = os.environ.get(env_var)
            if value is not None:
                setattr(self, attr, type_fn(value))

    @property
    def public_key_path(self) -> Path:
        """Full path to the default public key file."""
        return Path(self.key_dir).expanduser() / self.public_key_file

    @property
    def private_key_path(self) -> Path:
        """Full path to the default private key file."""
        return Path(self.key_dir).expanduser() / self.private_key_file

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)

    def to_dict(self) -> dict[str, Any]:
        """Export config to dictionary."""
        return {
            "default_curve": self.default_curve,
            "default_digest": self.default_digest,
            "key_dir": str(self.key_dir),
            "public_key_file": self.public_key_file,
            "private_key_file": self.private_key_file,
            "private_key_mode": oct(self.private_key_mode),
            "log_level": self.log_level,
        }

    def save(self, path: Optional[Path] = None):
        """Save config to a JSON file."""
        path = Path(path) if path else Path(self.key_dir) / "config.json"
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> "ECSignConfig":
        """Load config from a YAML or JSON file."""
        path = Path(path)
        with open(path) as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)

        mode = data.get("private_key_mode")
        if isinstance(mode, str):
            data["private_key_mode"] = int(mode, 8)

        return cls(**data)
