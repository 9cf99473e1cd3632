"""Public data types — registry items and the Traefik dynamic configuration model."""

from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Registry side
# ---------------------------------------------------------------------------

@dataclass
class ExtraConf:
    """Directives pre-parsed from an item's labels (not part of the fragment)."""
    enable: bool = True


@dataclass(frozen=True)
class RegistryItem:
    """One health-annotated service instance from the catalog."""
    node: str
    name: str
    id: str
    address: str = ""
    port: str = ""
    status: str = ""
    tags: tuple = ()
    labels: dict = field(default_factory=dict)
    extra_conf: ExtraConf = field(default_factory=ExtraConf)

    @property
    def key(self) -> str:
        """Disambiguation key: same service on several nodes/instances never collides."""
        return f"{self.node}-{self.name}-{self.id}"


# ---------------------------------------------------------------------------
# HTTP plane
# ---------------------------------------------------------------------------

@dataclass
class Server:
    url: str = ""
    scheme: str = ""
    port: str = ""


@dataclass
class ServersLoadBalancer:
    servers: list = field(default_factory=list)
    pass_host_header: bool | None = None
    sticky: dict | None = None
    health_check: dict | None = None


@dataclass
class Service:
    load_balancer: ServersLoadBalancer | None = None


@dataclass
class RouterTLS:
    cert_resolver: str = ""
    options: str = ""


@dataclass
class Router:
    rule: str = ""
    service: str = ""
    entry_points: list = field(default_factory=list)
    middlewares: list = field(default_factory=list)
    priority: int | None = None
    tls: RouterTLS | None = None


@dataclass
class HTTPConfiguration:
    routers: dict = field(default_factory=dict)
    services: dict = field(default_factory=dict)
    # middleware name -> {type: {option: value}}
    middlewares: dict = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not (self.routers or self.middlewares or self.services)


# ---------------------------------------------------------------------------
# TCP plane
# ---------------------------------------------------------------------------

@dataclass
class TCPServer:
    address: str = ""
    port: str = ""


@dataclass
class TCPServersLoadBalancer:
    servers: list = field(default_factory=list)
    termination_delay: int | None = None


@dataclass
class TCPService:
    load_balancer: TCPServersLoadBalancer | None = None


@dataclass
class TCPRouterTLS:
    passthrough: bool = False
    cert_resolver: str = ""
    options: str = ""


@dataclass
class TCPRouter:
    rule: str = ""
    service: str = ""
    entry_points: list = field(default_factory=list)
    tls: TCPRouterTLS | None = None


@dataclass
class TCPConfiguration:
    routers: dict = field(default_factory=dict)
    services: dict = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not (self.routers or self.services)


@dataclass
class Configuration:
    """A fragment (one item) or the merged result (all items)."""
    http: HTTPConfiguration = field(default_factory=HTTPConfiguration)
    tcp: TCPConfiguration = field(default_factory=TCPConfiguration)


# ---------------------------------------------------------------------------
# Defaults (a new object on every call)
# ---------------------------------------------------------------------------

def default_server() -> Server:
    return Server(scheme="http")


def default_load_balancer() -> ServersLoadBalancer:
    return ServersLoadBalancer(pass_host_header=True)


def default_tcp_load_balancer() -> TCPServersLoadBalancer:
    return TCPServersLoadBalancer(termination_delay=100)


# ---------------------------------------------------------------------------
# Build pass
# ---------------------------------------------------------------------------

@dataclass
class BuildContext:
    """Shared state passed through one build pass."""
    config: dict
    warnings: list = field(default_factory=list)


@dataclass
class BuildReport:
    """Output of build_fragments: one fragment per kept item, one reason per skipped item."""
    configurations: dict = field(default_factory=dict)
    skipped: dict = field(default_factory=dict)
