"""Public contracts — data types, errors and helpers shared by core and io."""

from catalog2traefik.pacts.types import (
    BuildContext, BuildReport, Configuration, ExtraConf, RegistryItem,
)
from catalog2traefik.pacts.errors import (
    Catalog2TraefikError, ConfigError, ConstraintError, EndpointError,
    LabelDecodeError, MissingAddressError, MissingLoadBalancerError, MissingPortError,
)
from catalog2traefik.pacts.helpers import join_host_port, normalize, parse_bool

__all__ = [
    "BuildContext",
    "BuildReport",
    "Configuration",
    "ExtraConf",
    "RegistryItem",
    "Catalog2TraefikError",
    "ConfigError",
    "ConstraintError",
    "EndpointError",
    "LabelDecodeError",
    "MissingAddressError",
    "MissingLoadBalancerError",
    "MissingPortError",
    "join_host_port",
    "normalize",
    "parse_bool",
]
