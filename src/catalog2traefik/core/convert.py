"""Main build pass: registry items → per-item fragments → merged configuration."""

from jinja2 import TemplateSyntaxError

from catalog2traefik.core.constants import DEFAULT_RULE, ROUTABLE_STATUSES
from catalog2traefik.core.constraints import match_tags
from catalog2traefik.core.endpoints import add_server, add_server_tcp
from catalog2traefik.core.labels import decode_configuration
from catalog2traefik.core.merge import merge_configurations
from catalog2traefik.core.routers import (
    build_router_configuration, build_tcp_router_configuration, compile_rule_template,
)
from catalog2traefik.pacts.errors import Catalog2TraefikError, ConstraintError
from catalog2traefik.pacts.types import (
    BuildContext, BuildReport, Configuration, HTTPConfiguration, RegistryItem,
    Service, TCPConfiguration, TCPService, default_load_balancer,
    default_tcp_load_balancer,
)


# ---------------------------------------------------------------------------
# Eligibility
# ---------------------------------------------------------------------------

def _exclusion_reason(item: RegistryItem, ctx: BuildContext) -> str | None:
    """Return why *item* must not produce configuration, or None to keep it."""
    if not item.extra_conf.enable:
        return "disabled"

    expression = ctx.config.get("constraints", "")
    try:
        matches = match_tags(item.tags, expression)
    except ConstraintError as exc:
        ctx.warnings.append(f"{item.key}: error matching constraints expression: {exc}")
        return f"invalid constraints expression {expression!r}"
    if not matches:
        return f"pruned by constraints expression {expression!r}"

    if item.status not in ROUTABLE_STATUSES:
        return f"unhealthy or starting (status {item.status!r})"
    return None


def keep_item(item: RegistryItem, ctx: BuildContext) -> bool:
    """True when the item should produce configuration at all."""
    return _exclusion_reason(item, ctx) is None


# ---------------------------------------------------------------------------
# Fragment completion
# ---------------------------------------------------------------------------

def build_tcp_service_configuration(item: RegistryItem, tcp: TCPConfiguration) -> None:
    """Give the TCP plane at least one service and bind every service to the item."""
    if not tcp.services:
        tcp.services[item.name] = TCPService(load_balancer=default_tcp_load_balancer())
    for service in tcp.services.values():
        add_server_tcp(item, service.load_balancer)


def build_service_configuration(item: RegistryItem, http: HTTPConfiguration) -> None:
    """Give the HTTP plane at least one service and bind every service to the item."""
    if not http.services:
        http.services[item.name] = Service(load_balancer=default_load_balancer())
    for service in http.services.values():
        add_server(item, service.load_balancer)


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------

def _rule_template(ctx: BuildContext):
    source = ctx.config.get("defaultRule") or DEFAULT_RULE
    try:
        return compile_rule_template(source)
    except TemplateSyntaxError as exc:
        ctx.warnings.append(f"invalid defaultRule ({exc}), using {DEFAULT_RULE!r}")
        return compile_rule_template(DEFAULT_RULE)


def _build_one(item: RegistryItem, ctx: BuildContext, rule_template) -> Configuration:
    """Decode and complete one item's fragment. Raises on entry-fatal errors."""
    conf = decode_configuration(item.labels)

    if conf.tcp.routers or conf.tcp.services:
        build_tcp_service_configuration(item, conf.tcp)
        build_tcp_router_configuration(conf.tcp, ctx.warnings)
        if conf.http.is_empty():
            return conf

    build_service_configuration(item, conf.http)
    model = {"Name": item.name, "Labels": item.labels}
    build_router_configuration(conf.http, item.name, rule_template, model, ctx.warnings)
    return conf


def build_fragments(items, ctx: BuildContext) -> BuildReport:
    """Build one fragment per eligible item, keyed by node-name-id.

    Never raises for a bad item: exclusions and failures are recorded in
    report.skipped (and failures also in ctx.warnings), and the pass moves on.
    """
    report = BuildReport()
    rule_template = _rule_template(ctx)

    for item in items:
        key = item.key
        reason = _exclusion_reason(item, ctx)
        if reason is not None:
            report.skipped[key] = reason
            continue
        try:
            report.configurations[key] = _build_one(item, ctx, rule_template)
        except Catalog2TraefikError as exc:
            report.skipped[key] = str(exc)
            ctx.warnings.append(f"{key}: {exc} — skipped")

    return report


def build_configuration(items, ctx: BuildContext) -> Configuration:
    """Build and merge the configuration for one registry snapshot."""
    report = build_fragments(items, ctx)
    return merge_configurations(report.configurations, ctx.warnings)
