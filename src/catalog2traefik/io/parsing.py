"""Load a catalog snapshot and turn Consul health entries into RegistryItems."""

import sys

import yaml

from catalog2traefik.core.constants import (
    HEALTH_PASSING, LABEL_ROOT, STATUS_SEVERITY,
)
from catalog2traefik.core.labels import extract_extra_conf
from catalog2traefik.pacts.errors import LabelDecodeError
from catalog2traefik.pacts.types import ExtraConf, RegistryItem


def parse_catalog(path: str) -> list[dict]:
    """Load health-service entries from a YAML or JSON file.

    Accepts either a flat list of entries or a mapping of service name →
    list of entries (one ``/v1/health/service/<name>`` response per key).
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not data:
        return []
    if isinstance(data, dict):
        entries = []
        for service_name in sorted(data):
            entries.extend(data[service_name] or [])
        return entries
    if isinstance(data, list):
        return data
    raise ValueError(f"{path}: expected a list or mapping of catalog entries")


def aggregated_status(checks: list[dict]) -> str:
    """Worst status of all checks; an instance without checks is passing."""
    worst = HEALTH_PASSING
    for check in checks or []:
        status = (check.get("Status") or "").lower()
        if status not in STATUS_SEVERITY:
            # Unknown status: never routable
            return status or "unknown"
        if STATUS_SEVERITY[status] > STATUS_SEVERITY[worst]:
            worst = status
    return worst


def _neutral_key(key: str, prefix: str) -> str | None:
    """Rewrite <prefix>.x to traefik.x so the decoder sees one root.

    With a custom prefix, a key already under traefik. is not ours: None.
    """
    lowered = key.lower()
    if lowered.startswith(f"{prefix}.".lower()):
        return f"{LABEL_ROOT}.{key[len(prefix) + 1:]}"
    if lowered.startswith(f"{LABEL_ROOT}.") and prefix.lower() != LABEL_ROOT:
        return None
    return key


def tags_to_labels(tags: list[str], meta: dict | None, prefix: str) -> dict[str, str]:
    """Build the label map from service meta and <prefix>.key=value tags (tags win)."""
    labels = {}
    for k, v in (meta or {}).items():
        key = _neutral_key(str(k), prefix)
        if key is not None:
            labels[key] = str(v)
    for tag in tags or []:
        if not isinstance(tag, str):
            raise ValueError(f"tag {tag!r} is not a string")
        key, sep, value = tag.partition("=")
        if sep and key.lower().startswith(f"{prefix}.".lower()):
            labels[_neutral_key(key.strip(), prefix)] = value
    return labels


def _port(value) -> str:
    """Catalog port as a string; 0 or missing means "use the load balancer's port"."""
    if value in (None, "", 0):
        return ""
    port = str(value).strip()
    if isinstance(value, bool) or not port.isdigit():
        raise ValueError(f"invalid Port {value!r}")
    return "" if int(port) == 0 else port


def item_from_entry(entry: dict, config: dict) -> RegistryItem:
    """Convert one Consul health entry (Node/Service/Checks) to a RegistryItem.

    Raises ValueError when the entry is malformed.
    """
    if not isinstance(entry, dict):
        raise ValueError("entry is not a mapping")
    node = entry.get("Node") or {}
    service = entry.get("Service") or {}
    if not isinstance(node, dict) or not isinstance(service, dict):
        raise ValueError("Node and Service must be mappings")
    checks = entry.get("Checks") or []
    if not isinstance(checks, list) or not all(isinstance(c, dict) for c in checks):
        raise ValueError("Checks must be a list of mappings")
    meta = service.get("Meta")
    if meta is not None and not isinstance(meta, dict):
        raise ValueError("Service.Meta must be a mapping")
    tags = service.get("Tags") or []
    if not isinstance(tags, list):
        raise ValueError("Service.Tags must be a list")

    prefix = config.get("prefix", LABEL_ROOT)
    labels = tags_to_labels(tags, meta, prefix)
    name = str(service.get("Service", ""))

    try:
        extra_conf = extract_extra_conf(labels, LABEL_ROOT,
                                        config.get("exposedByDefault", True))
    except LabelDecodeError as exc:
        print(f"⚠ {name}: {exc}, treating as disabled", file=sys.stderr)
        extra_conf = ExtraConf(enable=False)

    return RegistryItem(
        node=str(node.get("Node", "")),
        name=name,
        id=str(service.get("ID") or name),
        address=str(service.get("Address") or node.get("Address") or ""),
        port=_port(service.get("Port")),
        status=aggregated_status(checks),
        tags=tuple(tags),
        labels=labels,
        extra_conf=extra_conf,
    )


def items_from_entries(entries: list, config: dict, warnings: list[str]) -> list[RegistryItem]:
    """Convert every entry; a malformed one is skipped with a warning."""
    items = []
    for index, entry in enumerate(entries):
        try:
            items.append(item_from_entry(entry, config))
        except ValueError as exc:
            warnings.append(f"Skipping catalog entry #{index} ({_describe(entry)}): {exc}")
    return items


def _describe(entry) -> str:
    service = entry.get("Service") if isinstance(entry, dict) else None
    if isinstance(service, dict):
        return f"{service.get('Service', '?')}/{service.get('ID', '?')}"
    return "?"
