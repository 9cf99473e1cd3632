from catalog2traefik.core.merge import merge_configurations
from catalog2traefik.pacts.types import (
    Configuration, Router, Server, Service, ServersLoadBalancer, TCPRouter,
    TCPServer, TCPService, TCPServersLoadBalancer,
)


def _fragment(service, url, rule="Host(`svc`)", pass_host_header=True):
    conf = Configuration()
    conf.http.services[service] = Service(load_balancer=ServersLoadBalancer(
        servers=[Server(url=url)], pass_host_header=pass_host_header))
    conf.http.routers[service] = Router(rule=rule, service=service)
    return conf


def test_same_service_on_two_instances_merges_servers():
    warnings = []
    merged = merge_configurations({
        "n1-svc-i1": _fragment("svc", "http://10.0.0.1:80"),
        "n2-svc-i2": _fragment("svc", "http://10.0.0.2:80"),
    }, warnings)
    urls = [s.url for s in merged.http.services["svc"].load_balancer.servers]
    assert urls == ["http://10.0.0.1:80", "http://10.0.0.2:80"]
    assert merged.http.routers["svc"].rule == "Host(`svc`)"
    assert warnings == []


def test_conflicting_routers_are_removed():
    warnings = []
    merged = merge_configurations({
        "a": _fragment("svc", "http://10.0.0.1:80", rule="Host(`a`)"),
        "b": _fragment("svc", "http://10.0.0.2:80", rule="Host(`b`)"),
    }, warnings)
    assert "svc" not in merged.http.routers
    assert "svc" in merged.http.services
    assert len(warnings) == 1
    assert "['a', 'b']" in warnings[0]


def test_unmergeable_load_balancers_are_removed():
    warnings = []
    merged = merge_configurations({
        "a": _fragment("svc", "http://10.0.0.1:80", pass_host_header=True),
        "b": _fragment("svc", "http://10.0.0.2:80", pass_host_header=False),
    }, warnings)
    assert "svc" not in merged.http.services
    assert any("HTTP service 'svc'" in w for w in warnings)


def test_merge_does_not_depend_on_input_order():
    fragments = {
        "n2-svc-i2": _fragment("svc", "http://10.0.0.2:80"),
        "n1-svc-i1": _fragment("svc", "http://10.0.0.1:80"),
    }
    reversed_fragments = dict(reversed(list(fragments.items())))
    assert merge_configurations(fragments, []) == merge_configurations(reversed_fragments, [])


def test_merge_leaves_fragments_untouched():
    a = _fragment("svc", "http://10.0.0.1:80")
    b = _fragment("svc", "http://10.0.0.2:80")
    merge_configurations({"a": a, "b": b}, [])
    assert len(a.http.services["svc"].load_balancer.servers) == 1


def test_tcp_tables_merge():
    def tcp_fragment(address):
        conf = Configuration()
        conf.tcp.services["db"] = TCPService(load_balancer=TCPServersLoadBalancer(
            servers=[TCPServer(address=address)], termination_delay=100))
        conf.tcp.routers["db"] = TCPRouter(rule="HostSNI(`*`)", service="db")
        return conf

    merged = merge_configurations({"a": tcp_fragment("10.0.0.1:5432"),
                                   "b": tcp_fragment("10.0.0.2:5432")}, [])
    assert [s.address for s in merged.tcp.services["db"].load_balancer.servers] == [
        "10.0.0.1:5432", "10.0.0.2:5432"]
    assert merged.http.is_empty()


def test_identical_servers_are_listed_once():
    merged = merge_configurations({
        "n1-svc-i1": _fragment("svc", "http://10.0.0.1:80"),
        "n1-svc-i2": _fragment("svc", "http://10.0.0.1:80"),
        "n2-svc-i3": _fragment("svc", "http://10.0.0.2:80"),
    }, [])
    urls = [s.url for s in merged.http.services["svc"].load_balancer.servers]
    assert urls == ["http://10.0.0.1:80", "http://10.0.0.2:80"]


def test_identical_tcp_servers_are_listed_once():
    def tcp_fragment(address):
        conf = Configuration()
        conf.tcp.services["db"] = TCPService(load_balancer=TCPServersLoadBalancer(
            servers=[TCPServer(address=address)], termination_delay=100))
        return conf

    merged = merge_configurations({"a": tcp_fragment("10.0.0.1:5432"),
                                   "b": tcp_fragment("10.0.0.1:5432")}, [])
    assert merged.tcp.services["db"].load_balancer.servers == [
        TCPServer(address="10.0.0.1:5432")]
