"""catalog2traefik.yaml loading, validation and saving."""

import os

import yaml
from jinja2 import TemplateSyntaxError

from catalog2traefik.core.constants import DEFAULT_PREFIX, DEFAULT_RULE
from catalog2traefik.core.routers import compile_rule_template
from catalog2traefik.pacts.errors import ConfigError


def load_config(path: str) -> dict:
    """Load catalog2traefik.yaml or return the default config."""
    if os.path.exists(path):
        with open(path, encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    else:
        cfg = {}
    if not isinstance(cfg, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")
    cfg.setdefault("catalog2TraefikVersion", "v1")
    cfg.setdefault("prefix", DEFAULT_PREFIX)
    cfg.setdefault("exposedByDefault", True)
    cfg.setdefault("constraints", "")
    cfg.setdefault("defaultRule", DEFAULT_RULE)
    validate_config(cfg)
    return cfg


def validate_config(config: dict) -> None:
    """Raise ConfigError for values the build pass cannot use."""
    for key in ("prefix", "constraints", "defaultRule"):
        if not isinstance(config.get(key), str):
            raise ConfigError(f"'{key}' must be a string")
    if not config["prefix"]:
        raise ConfigError("'prefix' must not be empty")
    if not isinstance(config.get("exposedByDefault"), bool):
        raise ConfigError("'exposedByDefault' must be true or false")
    try:
        compile_rule_template(config["defaultRule"])
    except TemplateSyntaxError as exc:
        raise ConfigError(f"'defaultRule' is not a valid template: {exc}") from exc


CONFIG_KEYS = ("catalog2TraefikVersion", "prefix", "exposedByDefault",
               "constraints", "defaultRule")


def save_config(path: str, config: dict) -> None:
    """Write catalog2traefik.yaml: known keys in a fixed order, then the rest."""
    ordered = {k: config[k] for k in CONFIG_KEYS if k in config}
    ordered.update((k, v) for k, v in config.items() if k not in ordered)
    with open(path, "w", encoding="utf-8") as f:
        f.write("# catalog2traefik settings, edit and re-run to apply\n")
        yaml.safe_dump(ordered, f, default_flow_style=False, sort_keys=False)
