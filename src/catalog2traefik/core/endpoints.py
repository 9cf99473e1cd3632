"""Bind a load balancer's first server slot to an item's address and port."""

from catalog2traefik.pacts.errors import (
    MissingAddressError, MissingLoadBalancerError, MissingPortError,
)
from catalog2traefik.pacts.helpers import join_host_port
from catalog2traefik.pacts.types import (
    RegistryItem, ServersLoadBalancer, TCPServer, TCPServersLoadBalancer,
    default_server,
)


def _pick_port(item: RegistryItem, slot) -> str:
    """Item port wins over the slot's own port; the slot port is folded away."""
    port = item.port or slot.port
    if not port:
        raise MissingPortError()
    slot.port = ""
    return port


def add_server(item: RegistryItem, load_balancer: ServersLoadBalancer | None) -> None:
    """Resolve slot 0 of an HTTP load balancer to scheme://address:port.

    Only the first slot is ever touched; extra slots are left as decoded.
    Single-shot: the slot's scheme is cleared once folded into the URL.
    """
    if load_balancer is None:
        raise MissingLoadBalancerError()
    if not load_balancer.servers:
        load_balancer.servers.append(default_server())

    server = load_balancer.servers[0]
    port = _pick_port(item, server)
    if not item.address:
        raise MissingAddressError()

    server.url = f"{server.scheme or 'http'}://{join_host_port(item.address, port)}"
    server.scheme = ""


def add_server_tcp(item: RegistryItem,
                   load_balancer: TCPServersLoadBalancer | None) -> None:
    """Resolve slot 0 of a TCP load balancer to address:port."""
    if load_balancer is None:
        raise MissingLoadBalancerError()
    if not load_balancer.servers:
        load_balancer.servers.append(TCPServer())

    server = load_balancer.servers[0]
    port = _pick_port(item, server)
    if not item.address:
        raise MissingAddressError()

    server.address = join_host_port(item.address, port)
