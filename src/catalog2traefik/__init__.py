"""catalog2traefik — convert a Consul catalog snapshot to Traefik dynamic configuration.

Re-exports the public API. build_configuration() is the single entry point
of the build pass; build_fragments() exposes the per-item report.
"""

from catalog2traefik.pacts.types import BuildContext, BuildReport, Configuration, RegistryItem
from catalog2traefik.core.convert import build_configuration, build_fragments, keep_item
from catalog2traefik.io.config import load_config

__all__ = [
    "BuildContext",
    "BuildReport",
    "Configuration",
    "RegistryItem",
    "build_configuration",
    "build_fragments",
    "keep_item",
    "load_config",
]
