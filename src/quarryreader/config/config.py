"""
Configuration management for QuarryReader using Pydantic.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from quarryreader.exceptions import ConfigError

# --- Setup Logging ---
log = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ("quarryreader.yaml", "quarryreader.yml")

# --- Heuristic Vocabulary ---


@dataclass(frozen=True)
class CompiledPatterns:
    """Case-insensitive compiled form of a :class:`PatternSet`."""

    blacklist: re.Pattern[str]
    unlikely_candidates: re.Pattern[str]
    maybe_candidate: re.Pattern[str]
    div_to_p_elements: re.Pattern[str]
    negative: re.Pattern[str]
    positive: re.Pattern[str]
    sentence_end: re.Pattern[str]


class PatternSet(BaseModel):
    """Named regex vocabularies driving the scoring and filtering heuristics."""

    blacklist: str = Field(default="popupbody", description="Class/id probe that is always removed.")
    unlikely_candidates: str = Field(
        default=(
            "combx|comment|community|disqus|extra|foot|header|menu|remark|rss|shoutbox|"
            "sidebar|sponsor|ad-break|agegate|pagination|pager|popup"
        ),
        description="Class/id vocabulary of boilerplate containers.",
    )
    maybe_candidate: str = Field(
        default="and|article|body|column|main|shadow",
        description="Class/id vocabulary overriding an unlikely match.",
    )
    div_to_p_elements: str = Field(
        default="<(a|blockquote|dl|div|img|ol|p|pre|table|ul)",
        description="Inner markup that keeps a container from being relabelled as a paragraph.",
    )
    negative: str = Field(
        default=(
            "combx|comment|com-|contact|foot|footer|footnote|masthead|media|meta|outbrain|"
            "promo|related|scroll|shoutbox|sidebar|sponsor|shopping|tags|tool|widget"
        ),
        description="Class/id vocabulary weighted -25.",
    )
    positive: str = Field(
        default="rticle|body|content|entry|hentry|main|page|pagination|post|text|blog|story",
        description="Class/id vocabulary weighted +25.",
    )
    sentence_end: str = Field(
        default=r"\.( |$)",
        description="Sentence-terminal punctuation test for short paragraphs.",
    )

    @field_validator("*")
    @classmethod
    def validate_regex(cls, v: str) -> str:
        """Ensure every vocabulary is a valid regular expression."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid pattern {v!r}: {e}") from e
        return v

    def compile(self) -> CompiledPatterns:
        return CompiledPatterns(
            **{name: re.compile(value, re.IGNORECASE) for name, value in self.model_dump().items()}
        )


# --- Nested Configuration Models ---


class ReadabilityConfig(BaseModel):
    """Flags and thresholds for one extraction session."""

    remove_unlikely_candidates: bool = Field(default=True, description="Drop boilerplate-looking containers.")
    weight_classes: bool = Field(default=True, description="Score class/id attributes against the vocabulary.")
    clean_conditionally: bool = Field(default=True, description="Run the conditional table/list/div cleaner.")
    retry_length: int = Field(default=250, ge=0, description="Minimum text length accepted without relaxing.")
    min_text_length: int = Field(default=25, ge=0, description="Minimum paragraph text length to be scored.")
    remove_empty_nodes: bool = Field(default=True, description="Remove paragraphs with blank inner markup.")
    whitelist_tags: List[str] = Field(
        default_factory=lambda: ["div", "p"],
        description="Tags kept (attribute-stripped) by the whitelist flattening pass.",
    )
    unlikely_exempt_tags: List[str] = Field(
        default_factory=lambda: ["header", "footer"],
        description="Structural tags never removed on an unlikely class/id match alone.",
    )
    div_to_p_tags: List[str] = Field(
        default_factory=lambda: ["div", "article", "section", "header", "footer"],
        description="Containers relabelled as paragraphs when they hold no block children.",
    )
    parser: str = Field(default="html.parser", description="BeautifulSoup tree builder.")
    patterns: PatternSet = Field(default_factory=PatternSet)

    @field_validator("whitelist_tags", "unlikely_exempt_tags", "div_to_p_tags")
    @classmethod
    def lowercase_tags(cls, v: List[str]) -> List[str]:
        seen: List[str] = []
        for tag in v:
            tag = tag.strip().lower()
            if tag and tag not in seen:
                seen.append(tag)
        return seen


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    log_level: str = Field(default="WARNING", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(default=None, description="Path to log file. If None, logs to console.")
    metrics_enabled: bool = Field(default=True, description="Record Prometheus metrics.")

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "QuarryReader"
    readability: ReadabilityConfig = Field(default_factory=ReadabilityConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="QUARRY_READER_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise ConfigError(f"Configuration file not found or is not a file: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                yaml_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Configuration file {path} is not valid YAML: {e}") from e
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            yaml_data = {}
        try:
            return cls.model_validate(yaml_data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {path}: {e}") from e


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    for name in CONFIG_FILE_NAMES:
        path = current_dir / name
        if path.exists():
            return path
    return None


def load_config(path: Optional[Path] = None, **overrides: Any) -> Config:
    """Load configuration from ``path``, a discovered file, or defaults."""
    config_path = path or find_config_file()
    if config_path:
        log.info("Loading configuration from: %s", config_path)
        config = Config.from_yaml(config_path)
    else:
        config = Config()
    for key, value in overrides.items():
        if value is not None:
            setattr(config.readability, key, value)
    return config
