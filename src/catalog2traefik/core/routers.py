"""Router synthesis — wire routers to services and fill in default rules."""

from jinja2 import Environment, StrictUndefined, TemplateError

from catalog2traefik.pacts.helpers import normalize
from catalog2traefik.pacts.types import HTTPConfiguration, Router, TCPConfiguration

_jinja_env = Environment(undefined=StrictUndefined, autoescape=False)
_jinja_env.globals["normalize"] = normalize


def compile_rule_template(source: str):
    """Compile a default-rule template (Jinja2, with normalize() available)."""
    return _jinja_env.from_string(source)


def build_tcp_router_configuration(tcp: TCPConfiguration, warnings: list[str]) -> None:
    """Drop rule-less routers and bind service-less ones to the only service."""
    for name in list(tcp.routers):
        router = tcp.routers[name]
        if not router.rule:
            del tcp.routers[name]
            warnings.append(f"TCP router '{name}': empty rule — dropped")
            continue
        if not router.service:
            if len(tcp.services) > 1:
                del tcp.routers[name]
                warnings.append(
                    f"TCP router '{name}': could not define the service name "
                    f"(too many services) — dropped")
                continue
            for service_name in tcp.services:
                router.service = service_name


def build_router_configuration(http: HTTPConfiguration, default_router_name: str,
                               rule_template, model: dict,
                               warnings: list[str]) -> None:
    """Ensure every HTTP router has a rule and a service.

    With no routers and at most one service, a router named
    *default_router_name* is created. Empty rules are rendered from
    *rule_template* with *model* (Name, Labels). Calling this again on a
    completed configuration changes nothing.
    """
    if not http.routers:
        if len(http.services) > 1:
            warnings.append(
                f"could not create a router for '{default_router_name}': too many services")
        else:
            http.routers[default_router_name] = Router()

    for name in list(http.routers):
        router = http.routers[name]
        if not router.rule:
            try:
                router.rule = rule_template.render(**model).strip()
            except TemplateError as exc:
                del http.routers[name]
                warnings.append(f"router '{name}': error while rendering default rule: {exc}")
                continue
            if not router.rule:
                del http.routers[name]
                warnings.append(f"router '{name}': undefined rule — dropped")
                continue

        if not router.service:
            if len(http.services) > 1:
                warnings.append(
                    f"router '{name}': could not define the service name (too many services)")
                continue
            for service_name in http.services:
                router.service = service_name
