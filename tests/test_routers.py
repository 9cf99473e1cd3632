import copy

from catalog2traefik.core.constants import DEFAULT_RULE
from catalog2traefik.core.routers import (
    build_router_configuration, build_tcp_router_configuration, compile_rule_template,
)
from catalog2traefik.pacts.types import (
    HTTPConfiguration, Router, Service, TCPConfiguration, TCPRouter, TCPService,
    default_load_balancer, default_tcp_load_balancer,
)

MODEL = {"Name": "my_svc", "Labels": {"team": "core"}}


def _http(*service_names, routers=None):
    return HTTPConfiguration(
        routers=routers or {},
        services={n: Service(load_balancer=default_load_balancer()) for n in service_names},
    )


def test_default_router_created_for_single_service():
    http = _http("my_svc")
    warnings = []
    build_router_configuration(http, "my_svc", compile_rule_template(DEFAULT_RULE), MODEL, warnings)
    assert http.routers == {"my_svc": Router(rule="Host(`my-svc`)", service="my_svc")}
    assert warnings == []


def test_no_default_router_with_several_services():
    http = _http("a", "b")
    warnings = []
    build_router_configuration(http, "svc", compile_rule_template(DEFAULT_RULE), MODEL, warnings)
    assert http.routers == {}
    assert len(warnings) == 1


def test_router_without_service_is_left_unbound_when_ambiguous():
    http = _http("a", "b", routers={"r": Router(rule="Path(`/`)")})
    warnings = []
    build_router_configuration(http, "svc", compile_rule_template(DEFAULT_RULE), MODEL, warnings)
    assert http.routers["r"].service == ""
    assert "too many services" in warnings[0]


def test_template_can_use_labels():
    http = _http("svc")
    template = compile_rule_template("Host(`{{ Labels.team }}.{{ Name }}.local`)")
    build_router_configuration(http, "svc", template, MODEL, [])
    assert http.routers["svc"].rule == "Host(`core.my_svc.local`)"


def test_template_error_drops_router():
    http = _http("svc")
    warnings = []
    template = compile_rule_template("Host(`{{ Labels.missing.deeper }}`)")
    build_router_configuration(http, "svc", template, MODEL, warnings)
    assert http.routers == {}
    assert "default rule" in warnings[0]


def test_empty_rendered_rule_drops_router():
    http = _http("svc")
    warnings = []
    build_router_configuration(http, "svc", compile_rule_template("  "), MODEL, warnings)
    assert http.routers == {}
    assert "undefined rule" in warnings[0]


def test_router_configuration_is_idempotent():
    http = _http("svc")
    template = compile_rule_template(DEFAULT_RULE)
    build_router_configuration(http, "svc", template, MODEL, [])
    snapshot = copy.deepcopy(http)
    build_router_configuration(http, "svc", template, MODEL, [])
    assert http == snapshot


def test_tcp_router_bound_to_single_service():
    tcp = TCPConfiguration(
        routers={"db": TCPRouter(rule="HostSNI(`*`)")},
        services={"pg": TCPService(load_balancer=default_tcp_load_balancer())},
    )
    build_tcp_router_configuration(tcp, [])
    assert tcp.routers["db"].service == "pg"


def test_tcp_router_without_rule_dropped():
    tcp = TCPConfiguration(routers={"db": TCPRouter()})
    warnings = []
    build_tcp_router_configuration(tcp, warnings)
    assert tcp.routers == {}
    assert "empty rule" in warnings[0]


def test_tcp_router_dropped_when_service_ambiguous():
    tcp = TCPConfiguration(
        routers={"db": TCPRouter(rule="HostSNI(`*`)")},
        services={
            "a": TCPService(load_balancer=default_tcp_load_balancer()),
            "b": TCPService(load_balancer=default_tcp_load_balancer()),
        },
    )
    warnings = []
    build_tcp_router_configuration(tcp, warnings)
    assert tcp.routers == {}
    assert len(warnings) == 1
