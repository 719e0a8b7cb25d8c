"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from mdnotion.errors import ConfigError


CONFIG_FILE = "config.yaml"
CONFIG_ENV = "MDNOTION_CONFIG"
ENV_PREFIX = "MDNOTION_"


class Settings(BaseModel):
    app_name:       str = "mdnotion"
    notion_token:   str = Field(default="", description="Integration secret used as bearer token")
    parent_page:    str = Field(default="", description="Title of the root page hosting the workspace")
    api_url:        str = Field(default="https://api.notion.com/v1", description="REST API base URL")
    api_version:    str = Field(default="2022-06-28", description="Notion-Version header value")
    workspace_host: str = Field(default="www.notion.so", description="Host used when composing page links")
    parser_config:  str = Field(default="gfm-like", description="MarkdownIt parser preset name")

    def require_remote(self) -> "Settings":
        """Return self, or raise ConfigError if the remote credentials are missing."""
        for name in ("notion_token", "parent_page"):
            if not getattr(self, name):
                raise ConfigError(
                    f"set it in {config_path()} or via {ENV_PREFIX}{name.upper()}", field=name
                )
        return self


def config_path() -> Path:
    """Return the config file location, honouring MDNOTION_CONFIG."""
    return Path(os.getenv(CONFIG_ENV) or CONFIG_FILE)


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDNOTION_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    path = config_path()
    if path.exists():
        try:
            data = yaml.safe_load(path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {path.name}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {path.name}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
