import pytest

from catalog2traefik.core.constants import DEFAULT_RULE
from catalog2traefik.pacts.types import BuildContext, ExtraConf, RegistryItem


@pytest.fixture
def make_item():
    """Factory for a healthy, enabled item; override any field by keyword."""
    def _make(**overrides):
        fields = {
            "node": "n1",
            "name": "svc",
            "id": "i1",
            "address": "10.0.0.5",
            "port": "8080",
            "status": "passing",
            "tags": (),
            "labels": {},
            "extra_conf": ExtraConf(enable=True),
        }
        fields.update(overrides)
        return RegistryItem(**fields)
    return _make


@pytest.fixture
def ctx():
    return BuildContext(config={
        "prefix": "traefik",
        "exposedByDefault": True,
        "constraints": "",
        "defaultRule": DEFAULT_RULE,
    })
