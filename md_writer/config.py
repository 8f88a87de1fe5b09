"""Configuration loading and management."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
import tomllib

from .constants import (
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_PREVIEW_LINES,
    OPENROUTER_API_URL,
    PROVIDERS,
    REPORT_FORMATS,
)
from .models import DEFAULT_TAG_TABLE, TagTable

API_KEY_ENV_VAR = "OPENROUTER_API_KEY"

# Environment variables that override configuration fields.
ENVIRONMENT_OVERRIDES = {
    "AI_PROVIDER": "provider",
    "AI_MODEL": "model",
    "OLLAMA_BASE_URL": "ollama_base_url",
    "LOCAL_MODEL": "local_model",
}


@dataclass
class WriterConfig:
    """Configuration for md-writer.

    Attributes:
        output_dir: Directory where converted Markdown files are written.
        stats_format: Default statistics report format (``"console"`` or
            ``"json"``).
        preview_lines: Number of lines shown by the ``preview`` command.
        max_file_size: Maximum file size in bytes that will be read.
        tags: Extra ``prefix -> Markdown prefix`` aliases added to the
            default tag table.
        provider: AI provider, ``"openrouter"`` or ``"ollama"``.
        model: Model requested from OpenRouter.
        api_url: OpenRouter chat-completion endpoint.
        max_tokens: Completion token limit sent to OpenRouter.
        temperature: Sampling temperature sent to OpenRouter.
        timeout: Seconds to wait for OpenRouter.
        ollama_base_url: Base URL of the local Ollama server.
        local_model: Model requested from Ollama.
        local_timeout: Seconds to wait for Ollama.

    Examples:
        WriterConfig(output_dir="docs", tags={"H4": "####"})
    """

    # Output
    output_dir: str = "."
    stats_format: str = "console"
    preview_lines: int = DEFAULT_PREVIEW_LINES

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE

    # Syntax
    tags: dict[str, str] = field(default_factory=dict)

    # AI provider bridge
    provider: str = "openrouter"
    model: str = "mistralai/mistral-7b-instruct:free"
    api_url: str = OPENROUTER_API_URL
    max_tokens: int = 1000
    temperature: float = 0.7
    timeout: int = 30
    ollama_base_url: str = "http://localhost:11434"
    local_model: str = "llama2:7b"
    local_timeout: int = 60


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`preview_lines` must be a positive integer")
    """


def load_config(search_path: Path) -> WriterConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.md-writer]`` table from `pyproject.toml` and the
    ``[md-writer]`` or ``[tool.md-writer]`` table from `.md-writer.toml`
    when present. Returns default values when no configuration is found. TOML
    files that cannot be read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        WriterConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "md-writer")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".md-writer.toml",
            table_paths=[("md-writer",), ("tool", "md-writer")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return WriterConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> WriterConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> WriterConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return WriterConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return WriterConfig()

    try:
        return WriterConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def apply_environment(config: WriterConfig, environ: Mapping[str, str] | None = None) -> WriterConfig:
    """Apply provider overrides from environment variables.

    Args:
        config: Base configuration.
        environ: Environment mapping; defaults to `os.environ`.

    Returns:
        WriterConfig: Configuration with non-empty environment values applied.

    Examples:
        apply_environment(config, {"AI_PROVIDER": "ollama"})
    """
    environ = os.environ if environ is None else environ
    changes = {
        field_name: environ[variable].strip()
        for variable, field_name in ENVIRONMENT_OVERRIDES.items()
        if environ.get(variable, "").strip()
    }
    if not changes:
        return config
    return replace(config, **changes)


def validate_config(config: WriterConfig) -> None:
    """Validate a `WriterConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If a format or provider is unsupported, a required text
            field is empty, a numeric limit is not positive, or a tag alias is
            invalid.

    Examples:
        validate_config(WriterConfig(stats_format="json"))
    """
    _ensure_integers(
        {
            "preview_lines": config.preview_lines,
            "max_file_size": config.max_file_size,
            "max_tokens": config.max_tokens,
            "timeout": config.timeout,
            "local_timeout": config.local_timeout,
        }
    )
    _ensure_positive(
        {
            "preview_lines": config.preview_lines,
            "max_file_size": config.max_file_size,
            "max_tokens": config.max_tokens,
            "timeout": config.timeout,
            "local_timeout": config.local_timeout,
        }
    )

    if config.stats_format not in REPORT_FORMATS:
        raise ConfigError(f"`stats_format` must be one of: {', '.join(REPORT_FORMATS)}")
    if config.provider not in PROVIDERS:
        raise ConfigError(f"`provider` must be one of: {', '.join(PROVIDERS)}")

    for key in ("output_dir", "model", "api_url", "ollama_base_url", "local_model"):
        value = getattr(config, key)
        if not isinstance(value, str) or not value:
            raise ConfigError(f"`{key}` must not be empty")

    if isinstance(config.temperature, bool) or not isinstance(config.temperature, (int, float)):
        raise ConfigError("`temperature` must be a number")
    if not 0 <= config.temperature <= 2:
        raise ConfigError("`temperature` must be between 0 and 2")

    build_tag_table(config)


def build_tag_table(config: WriterConfig) -> TagTable:
    """Return the default tag table extended with the configured aliases.

    Raises:
        ConfigError: If `tags` is not a mapping or holds an invalid alias.

    Examples:
        build_tag_table(WriterConfig(tags={"H4": "####"}))["H4"]  # "####"
    """
    if not isinstance(config.tags, dict):
        raise ConfigError("`tags` must be a table of prefix = \"markdown prefix\" pairs")
    try:
        return DEFAULT_TAG_TABLE.extend(config.tags)
    except ValueError as error:
        raise ConfigError(f"Invalid `tags` entry: {error}") from error


def apply_overrides(config: WriterConfig, **overrides: object) -> WriterConfig:
    """Apply override values to a `WriterConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        WriterConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `WriterConfig`.

    Examples:
        updated = apply_overrides(config, output_dir="build", stats_format="json")
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> WriterConfig:
    """Load, override, and validate configuration.

    Precedence, lowest first: defaults, config file, environment, overrides.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        WriterConfig: Validated configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), stats_format="json")
    """
    config = load_config(search_path)
    config = apply_environment(config)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
