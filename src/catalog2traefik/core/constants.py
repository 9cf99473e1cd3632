"""Constants used throughout the build pass."""

# Consul health check statuses
HEALTH_PASSING = "passing"
HEALTH_WARNING = "warning"
HEALTH_CRITICAL = "critical"
HEALTH_MAINTENANCE = "maintenance"

# Statuses that stay routable (warning is tolerated on purpose)
ROUTABLE_STATUSES = (HEALTH_PASSING, HEALTH_WARNING)

# Aggregation order: the worst check wins
STATUS_SEVERITY = {
    HEALTH_PASSING: 0,
    HEALTH_WARNING: 1,
    HEALTH_CRITICAL: 2,
    HEALTH_MAINTENANCE: 3,
}

# Root of the decoded label tree (custom prefixes are rewritten to this)
LABEL_ROOT = "traefik"

DEFAULT_PREFIX = "traefik"
DEFAULT_RULE = "Host(`{{ normalize(Name) }}`)"
DEFAULT_CONFIG_FILE = "catalog2traefik.yaml"
DEFAULT_OUTPUT_FILE = "dynamic.yml"
