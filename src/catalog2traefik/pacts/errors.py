"""Exceptions raised by the build pass. All are per-item except ConfigError."""


class Catalog2TraefikError(Exception):
    """Base class for every error raised by catalog2traefik."""


class ConfigError(Catalog2TraefikError):
    """Invalid value in catalog2traefik.yaml."""


class LabelDecodeError(Catalog2TraefikError):
    """An item's labels could not be decoded into a configuration fragment."""


class ConstraintError(Catalog2TraefikError):
    """Malformed constraint expression."""


class EndpointError(Catalog2TraefikError):
    """A load balancer could not be bound to the item's address/port."""


class MissingLoadBalancerError(EndpointError):
    def __init__(self):
        super().__init__("load-balancer is not defined")


class MissingPortError(EndpointError):
    def __init__(self):
        super().__init__("port is missing")


class MissingAddressError(EndpointError):
    def __init__(self):
        super().__init__("address is missing")
