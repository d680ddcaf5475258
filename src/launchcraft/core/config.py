"""Configuration management for LaunchCraft."""

import json
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from launchcraft.core.logging import get_logger

logger = get_logger("launchcraft.config")

DEFAULT_MODEL = "gpt-4-turbo-preview"

# Environment variable -> config key
ENV_VARS = {
    "LAUNCHCRAFT_PROVIDER": "provider",
    "LAUNCHCRAFT_MODEL": "model",
    "OPENAI_BASE_URL": "base_url",
    "LAUNCHCRAFT_DATA_DIR": "data_dir",
    "LAUNCHCRAFT_SECRET_KEY": "secret_key",
    "LAUNCHCRAFT_LOG_LEVEL": "log_level",
    "LAUNCHCRAFT_MAX_RETRIES": "max_retries",
}

# Provider -> environment variable holding its API key
API_KEY_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
}


class Config:
    """Configuration with hierarchy: overrides > environment > project config > user config > defaults."""

    def __init__(self):
        """Initialize configuration with default values."""
        self.provider: str = "openai"
        self.model: str = DEFAULT_MODEL
        self.temperature: float = 0.7
        self.max_tokens: int = 2000
        self.timeout: float = 60.0
        self.api_key: Optional[str] = None
        self.base_url: Optional[str] = None
        self.max_retries: int = 0
        self.strict_interests: bool = True
        self.data_dir: Optional[str] = None
        self.secret_key: Optional[str] = None
        self.log_level: str = "INFO"
        self.json_logging: bool = False

    @classmethod
    def load(
        cls,
        overrides: Optional[dict[str, Any]] = None,
        config_file: Optional[Path] = None,
    ) -> "Config":
        """
        Load configuration from every layer.

        Args:
            overrides: Explicit values (e.g. CLI args); None values are ignored
            config_file: Extra YAML/JSON file applied after the project config

        Returns:
            Config instance with loaded values
        """
        config = cls()

        user_config_path = Path.home() / ".launchcraft" / "config.yaml"
        if user_config_path.exists():
            config._load_file(user_config_path)

        project_config_path = Path.cwd() / ".launchcraft.yaml"
        if project_config_path.exists():
            config._load_file(project_config_path)

        if config_file:
            config._load_file(Path(config_file))

        config._load_env()

        if overrides:
            for key, value in overrides.items():
                if value is not None and hasattr(config, key):
                    setattr(config, key, value)

        if not config.api_key:
            env_var = API_KEY_ENV_VARS.get(config.provider)
            if env_var:
                config.api_key = os.getenv(env_var) or None

        return config

    def _load_env(self) -> None:
        for env_var, key in ENV_VARS.items():
            value = os.getenv(env_var)
            if value:
                setattr(self, key, int(value) if key == "max_retries" else value)

    def _load_file(self, config_path: Path) -> None:
        """Apply values from a YAML or JSON file; unreadable files are logged and skipped."""
        try:
            content = config_path.read_text(encoding="utf-8")
            if config_path.suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(content)
            elif config_path.suffix == ".json":
                data = json.loads(content)
            else:
                logger.warning(f"Ignoring config file with unknown format: {config_path}")
                return
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read config file {config_path}: {e}")
            return

        if not isinstance(data, dict):
            return

        for key, value in data.items():
            if hasattr(self, key) and value is not None:
                setattr(self, key, value)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "provider": self.provider,
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "timeout": self.timeout,
            "api_key": self.api_key,
            "base_url": self.base_url,
            "max_retries": self.max_retries,
            "strict_interests": self.strict_interests,
            "data_dir": self.data_dir,
            "secret_key": self.secret_key,
            "log_level": self.log_level,
            "json_logging": self.json_logging,
        }

    def save(self, path: Path, format: str = "yaml") -> None:
        """
        Save configuration to file.

        Args:
            path: Path to save config file
            format: Format to save as ('yaml' or 'json')
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        data = {k: v for k, v in self.to_dict().items() if v is not None}

        if format == "yaml":
            content = yaml.dump(data, default_flow_style=False, sort_keys=False)
        else:
            content = json.dumps(data, indent=2)

        path.write_text(content, encoding="utf-8")

    def get_data_dir(self) -> Path:
        """Get the data directory for stored sessions and users, creating it if needed."""
        if self.data_dir:
            dir_path = Path(self.data_dir)
        else:
            dir_path = Path.home() / ".launchcraft" / "data"
        dir_path.mkdir(parents=True, exist_ok=True)
        return dir_path
