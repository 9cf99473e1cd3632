"""Fold per-item fragments into one configuration.

Keys are visited in sorted order, so the result does not depend on the
order items arrived in. Same-named routers and middlewares must be equal;
same-named services are merged by concatenating their servers (each
server listed once) when the rest of the load balancer is equal. Anything
else is a conflict: the name is removed from the result and reported once.
"""

import copy
import dataclasses

from catalog2traefik.pacts.types import Configuration


def _mergeable(lb_a, lb_b) -> bool:
    """Load balancers are mergeable when they only differ in their servers."""
    if lb_a is None or lb_b is None:
        return lb_a is lb_b
    return dataclasses.replace(lb_a, servers=[]) == dataclasses.replace(lb_b, servers=[])


def _add_service(services: dict, name: str, service) -> bool:
    if name not in services:
        services[name] = copy.deepcopy(service)
        return True
    existing = services[name]
    if not _mergeable(existing.load_balancer, service.load_balancer):
        return False
    if existing.load_balancer is not None:
        servers = existing.load_balancer.servers
        for server in service.load_balancer.servers:
            if server not in servers:
                servers.append(copy.deepcopy(server))
    return True


def _add_equal(target: dict, name: str, value) -> bool:
    if name not in target:
        target[name] = copy.deepcopy(value)
        return True
    return target[name] == value


def merge_configurations(configurations: dict[str, Configuration],
                         warnings: list[str]) -> Configuration:
    """Merge a key → fragment mapping. Fragments are not modified."""
    merged = Configuration()
    # (section label, getter, adder) for each named-object table
    tables = (
        ("HTTP service", lambda c: c.http.services, _add_service),
        ("HTTP router", lambda c: c.http.routers, _add_equal),
        ("HTTP middleware", lambda c: c.http.middlewares, _add_equal),
        ("TCP service", lambda c: c.tcp.services, _add_service),
        ("TCP router", lambda c: c.tcp.routers, _add_equal),
    )

    for label, table, add in tables:
        sources: dict[str, list[str]] = {}
        conflicts: set[str] = set()
        target = table(merged)
        for key in sorted(configurations):
            for name, value in table(configurations[key]).items():
                sources.setdefault(name, []).append(key)
                if not add(target, name, value):
                    conflicts.add(name)
        for name in sorted(conflicts):
            del target[name]
            warnings.append(
                f"{label} '{name}' defined multiple times with different "
                f"configurations in {sources[name]} — removed")

    return merged
