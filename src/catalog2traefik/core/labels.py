"""Decode item labels (traefik.http.* / traefik.tcp.*) into a configuration fragment.

Field segments are case-insensitive; router, service and middleware names
keep the case they were written with. Objects created while decoding carry
their defaults (a service gets a load balancer with passHostHeader=true,
a server slot gets scheme=http).
"""

from catalog2traefik.core.constants import LABEL_ROOT
from catalog2traefik.pacts.errors import LabelDecodeError
from catalog2traefik.pacts.helpers import parse_bool
from catalog2traefik.pacts.types import (
    Configuration, ExtraConf, HTTPConfiguration, Router, RouterTLS, Service,
    TCPConfiguration, TCPRouter, TCPRouterTLS, TCPServer, TCPService,
    default_load_balancer, default_server, default_tcp_load_balancer,
)


def _split_list(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def _port(value: str) -> str:
    value = value.strip()
    if not value.isdigit():
        raise ValueError(f"invalid port {value!r}")
    return value


def extract_extra_conf(labels: dict, prefix: str = LABEL_ROOT,
                       exposed_by_default: bool = True) -> ExtraConf:
    """Read <prefix>.enable; fall back to exposed_by_default."""
    wanted = f"{prefix}.enable".lower()
    for key, value in labels.items():
        if key.lower() == wanted:
            try:
                return ExtraConf(enable=parse_bool(value))
            except ValueError as exc:
                raise LabelDecodeError(f"{key}: {exc}") from exc
    return ExtraConf(enable=exposed_by_default)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

def _router_tls(router: Router) -> RouterTLS:
    if router.tls is None:
        router.tls = RouterTLS()
    return router.tls


def _set_router_field(router: Router, field_path: tuple, value: str) -> None:
    if field_path == ("rule",):
        router.rule = value
    elif field_path == ("service",):
        router.service = value
    elif field_path == ("entrypoints",):
        router.entry_points = _split_list(value)
    elif field_path == ("middlewares",):
        router.middlewares = _split_list(value)
    elif field_path == ("priority",):
        router.priority = int(value)
    elif field_path == ("tls",):
        if parse_bool(value):
            _router_tls(router)
    elif field_path == ("tls", "certresolver"):
        _router_tls(router).cert_resolver = value
    elif field_path == ("tls", "options"):
        _router_tls(router).options = value
    else:
        raise KeyError(".".join(field_path))


def _set_service_field(service: Service, field_path: tuple, value: str) -> None:
    if not field_path or field_path[0] != "loadbalancer":
        raise KeyError(".".join(field_path))
    if service.load_balancer is None:
        service.load_balancer = default_load_balancer()
    lb = service.load_balancer
    sub = field_path[1:]
    if sub in (("server", "port"), ("server", "scheme")):
        if not lb.servers:
            lb.servers.append(default_server())
        if sub[1] == "port":
            lb.servers[0].port = _port(value)
        else:
            lb.servers[0].scheme = value
    elif sub == ("passhostheader",):
        lb.pass_host_header = parse_bool(value)
    elif sub == ("sticky", "cookie"):
        if parse_bool(value):
            lb.sticky = lb.sticky or {"cookie": {}}
    elif len(sub) == 3 and sub[:2] == ("sticky", "cookie"):
        lb.sticky = lb.sticky or {"cookie": {}}
        lb.sticky["cookie"][sub[2]] = value
    elif len(sub) == 2 and sub[0] == "healthcheck":
        lb.health_check = lb.health_check or {}
        lb.health_check[sub[1]] = value
    else:
        raise KeyError(".".join(field_path))


def _set_middleware_field(middleware: dict, field_path: list[str], value: str) -> None:
    if len(field_path) < 2:
        raise KeyError(".".join(field_path))
    node = middleware
    for part in field_path[:-1]:
        node = node.setdefault(part, {})
        if not isinstance(node, dict):
            raise KeyError(".".join(field_path))
    node[field_path[-1]] = value


def _decode_http(http: HTTPConfiguration, parts: list[str], value: str) -> None:
    section, name, rest = parts[0].lower(), parts[1], parts[2:]
    if section == "routers":
        _set_router_field(http.routers.setdefault(name, Router()),
                          tuple(p.lower() for p in rest), value)
    elif section == "services":
        _set_service_field(http.services.setdefault(name, Service()),
                           tuple(p.lower() for p in rest), value)
    elif section == "middlewares":
        # Middleware options keep their case (stripPrefix.prefixes)
        _set_middleware_field(http.middlewares.setdefault(name, {}), rest, value)
    else:
        raise KeyError(section)


# ---------------------------------------------------------------------------
# TCP
# ---------------------------------------------------------------------------

def _tcp_router_tls(router: TCPRouter) -> TCPRouterTLS:
    if router.tls is None:
        router.tls = TCPRouterTLS()
    return router.tls


def _set_tcp_router_field(router: TCPRouter, field_path: tuple, value: str) -> None:
    if field_path == ("rule",):
        router.rule = value
    elif field_path == ("service",):
        router.service = value
    elif field_path == ("entrypoints",):
        router.entry_points = _split_list(value)
    elif field_path == ("tls",):
        if parse_bool(value):
            _tcp_router_tls(router)
    elif field_path == ("tls", "passthrough"):
        _tcp_router_tls(router).passthrough = parse_bool(value)
    elif field_path == ("tls", "certresolver"):
        _tcp_router_tls(router).cert_resolver = value
    elif field_path == ("tls", "options"):
        _tcp_router_tls(router).options = value
    else:
        raise KeyError(".".join(field_path))


def _set_tcp_service_field(service: TCPService, field_path: tuple, value: str) -> None:
    if not field_path or field_path[0] != "loadbalancer":
        raise KeyError(".".join(field_path))
    if service.load_balancer is None:
        service.load_balancer = default_tcp_load_balancer()
    lb = service.load_balancer
    sub = field_path[1:]
    if sub == ("server", "port"):
        if not lb.servers:
            lb.servers.append(TCPServer())
        lb.servers[0].port = _port(value)
    elif sub == ("terminationdelay",):
        lb.termination_delay = int(value)
    else:
        raise KeyError(".".join(field_path))


def _decode_tcp(tcp: TCPConfiguration, parts: list[str], value: str) -> None:
    section, name, rest = parts[0].lower(), parts[1], tuple(p.lower() for p in parts[2:])
    if section == "routers":
        _set_tcp_router_field(tcp.routers.setdefault(name, TCPRouter()), rest, value)
    elif section == "services":
        _set_tcp_service_field(tcp.services.setdefault(name, TCPService()), rest, value)
    else:
        raise KeyError(section)


def decode_configuration(labels: dict, prefix: str = LABEL_ROOT) -> Configuration:
    """Turn an item's label map into a fresh Configuration fragment.

    Labels outside <prefix>.http / <prefix>.tcp are ignored. Raises
    LabelDecodeError on an unknown path or a malformed value.
    """
    conf = Configuration()
    root = f"{prefix}.".lower()
    # Sorted so that decoding is deterministic for a given label map
    for key in sorted(labels):
        if not key.lower().startswith(root):
            continue
        parts = key[len(root):].split(".")
        plane = parts[0].lower()
        if plane not in ("http", "tcp"):
            continue
        if len(parts) < 4:
            raise LabelDecodeError(f"incomplete label {key!r}")
        try:
            if plane == "http":
                _decode_http(conf.http, parts[1:], labels[key])
            else:
                _decode_tcp(conf.tcp, parts[1:], labels[key])
        except KeyError as exc:
            raise LabelDecodeError(f"unknown label {key!r} ({exc.args[0]})") from exc
        except ValueError as exc:
            raise LabelDecodeError(f"{key}: {exc}") from exc
    return conf
