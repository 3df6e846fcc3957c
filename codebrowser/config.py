"""Configuration loading and validation.

Usage:
    config = load("codebrowser.yaml")             # raises ConfigError on bad config
    config = apply_overrides(config, output_dir="build/review")
    validate(config)                              # raises ConfigError on bad paths
    generate_template("codebrowser.yaml")         # writes example file to disk

Precedence: command-line flags > environment variables > config file.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path

import yaml

DEFAULT_WORKERS = 4

# Environment variable -> Config attribute
_ENV_OVERRIDES = {
    "CODEBROWSER_LOG_DIR": "log_dir",
    "CODEBROWSER_OUTPUT_DIR": "output_dir",
    "CODEBROWSER_SOURCE_DIR": "source_dir",
}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ConfigError(Exception):
    """Raised when the configuration is missing or invalid."""


# ---------------------------------------------------------------------------
# Config dataclass
# ---------------------------------------------------------------------------

@dataclass
class Config:
    log_dir: str = ""
    output_dir: str = ""
    source_dir: str | None = None
    log_file: str | None = None
    adapters: list[str] | None = None
    workers: int = DEFAULT_WORKERS


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load(config_path: str | None = None) -> Config:
    """Load configuration from an optional YAML file plus the environment.

    Without *config_path* only environment variables are read.

    Raises:
        ConfigError: if the file is missing, malformed or has bad value types.
    """
    raw: dict = {}
    if config_path is not None:
        raw = _read_yaml(config_path)

    adapters = raw.get("adapters")
    if adapters is not None and (
        not isinstance(adapters, list) or not all(isinstance(a, str) for a in adapters)
    ):
        raise ConfigError(f"'{config_path}': 'adapters' must be a list of adapter names.")

    try:
        workers = int(raw.get("workers", DEFAULT_WORKERS))
    except (TypeError, ValueError):
        raise ConfigError(f"'{config_path}': 'workers' must be an integer.") from None

    config = Config(
        log_dir=_as_path(raw.get("log_dir")) or "",
        output_dir=_as_path(raw.get("output_dir")) or "",
        source_dir=_as_path(raw.get("source_dir")),
        log_file=_as_path(raw.get("log_file")),
        adapters=adapters,
        workers=workers,
    )

    for env_var, attr in _ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            setattr(config, attr, value.strip())

    return config


def apply_overrides(config: Config, **overrides) -> Config:
    """Return a copy of *config* with every non-None override applied."""
    return replace(config, **{k: v for k, v in overrides.items() if v is not None})


def _read_yaml(config_path: str) -> dict:
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(
            f"Config file not found: '{config_path}'\n"
            "Run `codebrowser init` to generate a template."
        )

    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse '{config_path}': {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'{config_path}' must be a YAML mapping at the top level.")
    return raw


def _as_path(value) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate(config: Config) -> None:
    """Raise ConfigError if a required directory is missing or invalid."""
    errors: list[str] = []

    if not config.log_dir:
        errors.append("  - 'log_dir' is missing (use --log or CODEBROWSER_LOG_DIR)")
    elif not Path(config.log_dir).is_dir():
        errors.append(f"  - log directory '{config.log_dir}' does not exist")

    if not config.output_dir:
        errors.append("  - 'output_dir' is missing (use --output or CODEBROWSER_OUTPUT_DIR)")
    elif Path(config.output_dir).exists() and not Path(config.output_dir).is_dir():
        errors.append(f"  - output path '{config.output_dir}' is not a directory")

    if config.source_dir is not None and not Path(config.source_dir).is_dir():
        errors.append(f"  - source directory '{config.source_dir}' does not exist")

    if config.workers < 1:
        errors.append("  - 'workers' must be at least 1")

    if errors:
        raise ConfigError("Invalid configuration:\n" + "\n".join(errors))


# ---------------------------------------------------------------------------
# Template generator (used by `init` command)
# ---------------------------------------------------------------------------

TEMPLATE = """\
log_dir: "build/logs"          # directory holding the XML reports
output_dir: "build/code-browser"
# source_dir: "src"            # render every file of the tree, not only files with issues
# log_file: "build/codebrowser.log"

adapters:                      # processed in this order
  - checkstyle
  - pmd
  - cpd
  - padawan
  - coverage

workers: 4
"""


def generate_template(output_path: str = "codebrowser.yaml") -> None:
    """Write a template codebrowser.yaml to *output_path*.

    Raises:
        ConfigError: if the file already exists.
    """
    path = Path(output_path)
    if path.exists():
        raise ConfigError(
            f"'{output_path}' already exists. Remove it first or choose a different path."
        )
    path.write_text(TEMPLATE, encoding="utf-8")
