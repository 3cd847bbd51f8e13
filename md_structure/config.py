"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
import tomllib


@dataclass
class LintConfig:
    """Rule configuration consumed by the validator.

    Attributes:
        default: Whether line-style rules run unless explicitly disabled.
        rules: Mapping of rule id or alias to ``True``/``False`` or a table of
            rule parameters (a table also enables the rule).
        max_line_length: Longest physical line accepted before a
            ``LineTooLong`` finding is reported.
        max_file_size: Maximum file size in bytes the CLI will read.

    Examples:
        LintConfig(rules={"MD010": False, "MD012": {"maximum": 2}})
    """

    default: bool = True
    rules: dict[str, bool | dict] = field(default_factory=dict)

    # Limits
    max_line_length: int = 120
    max_file_size: int = 10 * 1024 * 1024


class ConfigLoadError(ValueError):
    """Exception raised when the rule configuration cannot be used.

    Unlike findings, this error is fatal to the whole check.

    Examples:
        raise ConfigLoadError("`max_line_length` must be a positive integer")
    """


def load_config(search_path: Path) -> LintConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.md-structure]`` table from `pyproject.toml` and the
    ``[md-structure]`` or ``[tool.md-structure]`` table from
    `.md-structure.toml` when present. Returns default values when no
    configuration is found.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        LintConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigLoadError: If a config file cannot be decoded, or its table is
            not a mapping or contains unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "md-structure")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".md-structure.toml",
            table_paths=[("md-structure",), ("tool", "md-structure")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return LintConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> LintConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except OSError:
        return None
    except tomllib.TOMLDecodeError as error:
        raise ConfigLoadError(f"Cannot parse {config_file}: {error}") from error

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
) -> LintConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return LintConfig()

    if not isinstance(raw_config, dict):
        raise ConfigLoadError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return LintConfig()

    try:
        return LintConfig(**raw_config)
    except TypeError as error:
        raise ConfigLoadError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: LintConfig) -> None:
    """Validate a `LintConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigLoadError: If limits are not positive integers, `default` is not
            a boolean, or the rule table names unknown rules, carries values
            that are neither booleans nor parameter tables, or gives a rule a
            parameter it does not take or a value of the wrong type.

    Examples:
        validate_config(LintConfig(rules={"MD047": False}))
    """
    # Imported here because the rule registry itself reads LintConfig.
    from .rules import RULES, resolve_rule_name

    _ensure_integers(
        {
            "max_line_length": config.max_line_length,
            "max_file_size": config.max_file_size,
        }
    )
    _ensure_positive(
        {
            "max_line_length": config.max_line_length,
            "max_file_size": config.max_file_size,
        }
    )

    if not isinstance(config.default, bool):
        raise ConfigLoadError("`default` must be a boolean")
    if not isinstance(config.rules, dict):
        raise ConfigLoadError("`rules` must be a table")

    for name, setting in config.rules.items():
        rule_id = resolve_rule_name(name)
        if rule_id is None:
            raise ConfigLoadError(f"Unknown rule `{name}`")
        if isinstance(setting, dict):
            _ensure_rule_parameters(name, setting, RULES[rule_id].defaults)
        elif not isinstance(setting, bool):
            raise ConfigLoadError(f"Rule `{name}` must be a boolean or a table of parameters")


def apply_overrides(config: LintConfig, **overrides: object) -> LintConfig:
    """Apply override values to a `LintConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored. ``disabled_rules`` is folded into ``rules``.

    Returns:
        LintConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `LintConfig`.

    Examples:
        updated = apply_overrides(config, max_line_length=100, disabled_rules=["MD010"])
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    disabled = changes.pop("disabled_rules", ())
    if disabled:
        rules = dict(config.rules)
        rules.update({name: False for name in disabled})
        changes["rules"] = rules
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> LintConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        LintConfig: Validated configuration ready for checking.

    Raises:
        ConfigLoadError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), max_line_length=100)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def _ensure_rule_parameters(name: str, params: dict, defaults: dict) -> None:
    for key, value in params.items():
        if key not in defaults:
            raise ConfigLoadError(f"Rule `{name}` has no parameter `{key}`")
        if isinstance(defaults[key], int):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigLoadError(
                    f"Parameter `{key}` of rule `{name}` must be a non-negative integer"
                )
        elif not isinstance(value, type(defaults[key])):
            raise ConfigLoadError(
                f"Parameter `{key}` of rule `{name}` must be a {type(defaults[key]).__name__}"
            )


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigLoadError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigLoadError(f"`{key}` must be an integer")
