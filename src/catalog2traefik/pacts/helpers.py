"""Public helper functions shared by the core and the io layer."""

import re

_NON_ALNUM_RE = re.compile(r'[^a-zA-Z0-9]+')

_TRUE_VALUES = {"1", "t", "true", "y", "yes", "on"}
_FALSE_VALUES = {"0", "f", "false", "n", "no", "off"}


def join_host_port(host: str, port: str) -> str:
    """Combine host and port into host:port, bracketing IPv6 literals."""
    if ":" in host and not host.startswith("["):
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def parse_bool(value: str) -> bool:
    """Parse a label boolean. Raises ValueError on anything unrecognised."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean value {value!r}")


def normalize(name: str) -> str:
    """Make a service name usable as a host label: my_svc.v2 → my-svc-v2."""
    return _NON_ALNUM_RE.sub("-", name).strip("-")
