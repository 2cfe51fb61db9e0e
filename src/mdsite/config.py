"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:        str  = "mdsite"
    site_title:      str  = Field(default="Blog",          description="Title shown on the index page")
    base_url:        str  = Field(default="/",             description="URL prefix for links between pages")
    content_dir:     str  = Field(default="_posts",        description="Directory of markdown posts to render")
    output_dir:      str  = Field(default="_site",         description="Directory for rendered HTML + JSON index")
    db_url:          str  = Field(default="sqlite:///mdsite.db", description="Build manifest database URL")
    parser_config:   str  = Field(default="gfm-like", pattern="^(gfm-like|commonmark)$", description="MarkdownIt parser preset name")
    default_layout:  str  = Field(default="post",          description="Layout used when a post does not name one")
    comments_default: bool = Field(default=False,          description="Comments flag for posts that do not set one")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDSITE_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"MDSITE_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid settings: {e}") from e
