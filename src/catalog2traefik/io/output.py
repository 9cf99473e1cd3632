"""Render a merged Configuration as a Traefik dynamic configuration file."""

import dataclasses
import os
import sys

import yaml

from catalog2traefik.pacts.types import Configuration


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _to_plain(obj):
    """Dataclasses → camelCase dicts, dropping unset scalars.

    An empty dataclass is kept (``tls: {}`` enables TLS); booleans are
    always kept; None, "" and [] are dropped (0 is a real value).
    """
    if dataclasses.is_dataclass(obj):
        out = {}
        for f in dataclasses.fields(obj):
            value = getattr(obj, f.name)
            if isinstance(value, bool):
                out[_camel(f.name)] = value
                continue
            if value is None or value == "" or value == []:
                continue
            out[_camel(f.name)] = _to_plain(value)
        return out
    if isinstance(obj, dict):
        return {k: _to_plain(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_to_plain(v) for v in obj]
    return obj


def configuration_to_dict(conf: Configuration) -> dict:
    """Build the dynamic configuration dict (empty sections omitted)."""
    result = {}
    for plane in ("http", "tcp"):
        section = getattr(conf, plane)
        tables = {}
        for f in dataclasses.fields(section):
            entries = getattr(section, f.name)
            if entries:
                tables[f.name] = {name: _to_plain(v) for name, v in sorted(entries.items())}
        if tables:
            result[plane] = tables
    return result


def write_configuration(conf: Configuration, output_dir: str,
                        filename: str = "dynamic.yml") -> str:
    """Write the dynamic configuration file and return its path."""
    path = os.path.join(output_dir, filename)
    with open(path, "w", encoding="utf-8") as f:
        f.write("# Generated by catalog2traefik — do not edit manually\n")
        yaml.dump(configuration_to_dict(conf), f, default_flow_style=False, sort_keys=False)
    print(f"Wrote {path}", file=sys.stderr)
    return path
