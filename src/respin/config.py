"""Configuration loading for respin."""

import logging
import os
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any, TypeVar

from dotenv import load_dotenv

from respin.errors import ConfigurationError
from respin.models import FileSource, UrlSource

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = Path("~/.config/respin/config.toml").expanduser()
_ENV_FILES = (".env.local", ".env")

_T = TypeVar("_T")


@dataclass(frozen=True)
class GeneralConfig:
    """General settings."""

    output_dir: str = "transcripts"
    language: str = "en"
    request_timeout: float = 60.0


@dataclass(frozen=True)
class SupadataConfig:
    """URL transcription service settings."""

    api_key: str = ""
    base_url: str = "https://api.supadata.ai/v1"
    text_only: bool = True
    mode: str = "auto"
    poll_interval: float = 2.0
    max_polls: int = 30


@dataclass(frozen=True)
class WhisperConfig:
    """Speech-to-text settings for local files."""

    backend: str = "api"
    api_key: str = ""
    model: str = "base"


@dataclass(frozen=True)
class OpenRouterConfig:
    """Chat completion settings shared by the rewrite and vision stages."""

    api_key: str = ""
    base_url: str = "https://openrouter.ai/api/v1"
    app_title: str = "respin"
    app_url: str = "https://github.com/respin/respin"
    summary_model: str = "openai/gpt-4o-mini"
    summary_max_tokens: int = 300
    suggestion_model: str = "perplexity/sonar-reasoning"
    suggestion_max_tokens: int = 800
    rewrite_model: str = "openai/gpt-4o"
    rewrite_max_tokens: int = 1500
    vision_model: str = "openai/gpt-4o"
    vision_max_tokens: int = 1000


@dataclass(frozen=True)
class ProxyConfig:
    """Optional HTTP proxy for every outgoing request."""

    use_proxy: bool = False
    http_proxy: str = ""

    @property
    def url(self) -> str | None:
        if self.use_proxy and self.http_proxy:
            return self.http_proxy
        return None


@dataclass(frozen=True)
class RespinConfig:
    """Top-level configuration for respin."""

    general: GeneralConfig = field(default_factory=GeneralConfig)
    supadata: SupadataConfig = field(default_factory=SupadataConfig)
    whisper: WhisperConfig = field(default_factory=WhisperConfig)
    openrouter: OpenRouterConfig = field(default_factory=OpenRouterConfig)
    proxy: ProxyConfig = field(default_factory=ProxyConfig)


_SECTIONS = ("general", "supadata", "whisper", "openrouter", "proxy")

_ENV_MAP: dict[str, tuple[str, str]] = {
    "SUPADATA_API_KEY": ("supadata", "api_key"),
    "OPENROUTER_API_KEY": ("openrouter", "api_key"),
    "OPENAI_API_KEY": ("whisper", "api_key"),
    "USE_PROXY": ("proxy", "use_proxy"),
    "HTTP_PROXY": ("proxy", "http_proxy"),
    "RESPIN_OUTPUT_DIR": ("general", "output_dir"),
    "RESPIN_LANGUAGE": ("general", "language"),
    "RESPIN_TIMEOUT": ("general", "request_timeout"),
    "RESPIN_TRANSCRIPT_MODE": ("supadata", "mode"),
    "RESPIN_WHISPER_BACKEND": ("whisper", "backend"),
    "RESPIN_WHISPER_MODEL": ("whisper", "model"),
    "RESPIN_SUMMARY_MODEL": ("openrouter", "summary_model"),
    "RESPIN_SUGGESTION_MODEL": ("openrouter", "suggestion_model"),
    "RESPIN_REWRITE_MODEL": ("openrouter", "rewrite_model"),
    "RESPIN_VISION_MODEL": ("openrouter", "vision_model"),
}


def _coerce(current: object, value: object) -> object:
    if not isinstance(value, str):
        return value
    if isinstance(current, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(current, int):
        return int(value)
    if isinstance(current, float):
        return float(value)
    return value


def _apply_section(target: _T, data: dict[str, Any]) -> _T:
    """Return a copy of a frozen dataclass with ``data`` applied.

    Raises:
        ConfigurationError: If a value cannot be converted to the type of
            the setting it replaces.
    """
    updates: dict[str, object] = {}
    for key, value in data.items():
        if not hasattr(target, key):
            continue
        try:
            updates[key] = _coerce(getattr(target, key), value)
        except ValueError as e:
            msg = f"Invalid value for {key}: {value!r}"
            raise ConfigurationError(msg) from e
    if not updates:
        return target
    return replace(target, **updates)  # type: ignore[type-var]


def _env_overrides() -> dict[str, dict[str, str]]:
    overrides: dict[str, dict[str, str]] = {}
    for env_var, (section, attr) in _ENV_MAP.items():
        value = os.environ.get(env_var)
        if value is not None:
            overrides.setdefault(section, {})[attr] = value
    return overrides


def load_env_files() -> None:
    """Load ``.env.local`` then ``.env`` from the working directory.

    Variables already present in the environment win.
    """
    for name in _ENV_FILES:
        path = Path(name)
        if path.exists():
            logger.debug("Loading environment from %s", path)
            load_dotenv(path, override=False)


def load_config(path: Path | None = None) -> RespinConfig:
    """Load configuration from TOML file with env var overrides.

    Config file path resolution:
    1. Explicit ``path`` argument
    2. ``RESPIN_CONFIG`` environment variable
    3. ``~/.config/respin/config.toml``
    """
    import tomllib

    config_path = path or Path(
        os.environ.get("RESPIN_CONFIG", str(_DEFAULT_CONFIG_PATH))
    )
    config_path = config_path.expanduser()

    data: dict[str, Any] = {}
    if config_path.exists():
        logger.info("Loading config from %s", config_path)
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid config file {config_path}: {e}"
            raise ConfigurationError(msg) from e
    else:
        logger.debug("No config file found at %s, using defaults", config_path)

    defaults = RespinConfig()
    env = _env_overrides()
    sections: dict[str, Any] = {}
    for name in _SECTIONS:
        section = getattr(defaults, name)
        file_values = data.get(name)
        if isinstance(file_values, dict):
            section = _apply_section(section, file_values)
        section = _apply_section(section, env.get(name, {}))
        sections[name] = section
    return RespinConfig(**sections)


def missing_credentials(
    config: RespinConfig,
    source: UrlSource | FileSource,
    *,
    rewrite: bool = False,
    describe: bool = False,
) -> list[str]:
    """List the environment variables a run with these options still needs."""
    missing: list[str] = []
    if isinstance(source, UrlSource):
        if not config.supadata.api_key:
            missing.append("SUPADATA_API_KEY")
    else:
        if config.whisper.backend == "api" and not config.whisper.api_key:
            missing.append("OPENAI_API_KEY")
        if describe and source.video_path and not config.openrouter.api_key:
            missing.append("OPENROUTER_API_KEY")
    if (
        rewrite
        and not config.openrouter.api_key
        and "OPENROUTER_API_KEY" not in missing
    ):
        missing.append("OPENROUTER_API_KEY")
    return missing


def redacted(config: RespinConfig) -> dict[str, dict[str, object]]:
    """Config as nested dicts with credentials replaced by Set/Not set."""
    sections = asdict(config)
    for values in sections.values():
        if "api_key" in values:
            values["api_key"] = "Set" if values["api_key"] else "Not set"
    return sections


def set_config_value(key: str, value: str) -> None:
    """Set a single config value in the TOML file.

    Args:
        key: Dotted key like ``supadata.mode``.
        value: The value to set.
    """
    import tomllib

    parts = key.split(".", 1)
    if len(parts) != 2:
        msg = f"Key must be in 'section.key' format, got: {key}"
        raise ValueError(msg)

    section, attr = parts
    if section not in _SECTIONS:
        msg = f"Unknown config section: {section}"
        raise ValueError(msg)
    if not hasattr(getattr(RespinConfig(), section), attr):
        msg = f"Unknown config key: {key}"
        raise ValueError(msg)

    config_path = Path(
        os.environ.get("RESPIN_CONFIG", str(_DEFAULT_CONFIG_PATH))
    ).expanduser()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, dict[str, object]] = {}
    if config_path.exists():
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)
        for k, v in raw.items():
            if isinstance(v, dict):
                data[k] = dict(v)

    data.setdefault(section, {})[attr] = value

    _write_toml(config_path, data)
    logger.info("Set %s = %s in %s", key, value, config_path)


def _write_toml(path: Path, data: dict[str, dict[str, object]]) -> None:
    """Write a simple nested dict as TOML."""
    lines: list[str] = []
    for section, values in data.items():
        lines.append(f"[{section}]")
        for k, v in values.items():
            if isinstance(v, bool):
                lines.append(f"{k} = {str(v).lower()}")
            elif isinstance(v, int | float):
                lines.append(f"{k} = {v}")
            else:
                lines.append(f'{k} = "{v}"')
        lines.append("")
    path.write_text("\n".join(lines))
