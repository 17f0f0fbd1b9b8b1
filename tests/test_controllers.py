import json

import pytest

from ptpconf.controllers import (
    DEFAULT_API_VERSION,
    DEFAULT_STORAGE_TYPE,
    DEFAULT_TRANSPORT_HOST,
    NAMESPACE,
    daemon_render_data,
    enabled_plugins,
    event_service_node_name,
    event_transport_host,
    node_profiles_data,
    set_daemon_node_selector,
)
from ptpconf.recommend import RecommendError
from ptpconf.types import Node, PtpConfigList, PtpOperatorConfig


def _config_list(profiles, recommends):
    return PtpConfigList.from_dict(
        {"items": [{"metadata": {"name": "cfg"}, "spec": {"profile": profiles, "recommend": recommends}}]}
    )


def _operator(spec):
    return PtpOperatorConfig.from_dict({"metadata": {"name": "default"}, "spec": spec})


def test_node_profiles_data_assigns_matching_profiles():
    configs = _config_list(
        [
            {"name": "slave", "interface": "ens1", "ptpSettings": {"logReduce": "true"}},
            {"name": "master", "interface": "ens2"},
        ],
        [
            {"profile": "slave", "priority": 4, "match": [{"nodeName": "node1"}]},
            {"profile": "master", "priority": 4, "match": [{"nodeLabel": "gm"}]},
        ],
    )
    nodes = [Node(name="node1"), Node(name="node2", labels={"gm": ""}), Node(name="node3")]
    data = node_profiles_data(configs, nodes)
    assert set(data) == {"node1", "node2", "node3"}
    first = json.loads(data["node1"])
    assert [p["name"] for p in first] == ["slave"]
    assert first[0]["ptpSettings"] == {"logReduce": "true"}
    assert [p["interface"] for p in json.loads(data["node2"])] == ["ens2"]
    assert data["node3"] == "[]"


def test_node_profiles_data_is_compact_json():
    configs = _config_list(
        [{"name": "p"}], [{"profile": "p", "priority": 0, "match": [{"nodeName": "n"}]}]
    )
    assert node_profiles_data(configs, [Node(name="n")])["n"] == '[{"name":"p"}]'


def test_node_profiles_data_missing_profile_raises():
    configs = _config_list(
        [], [{"profile": "absent", "priority": 0, "match": [{"nodeName": "n"}]}]
    )
    with pytest.raises(RecommendError, match="failed to get recommended node PtpConfig"):
        node_profiles_data(configs, [Node(name="n")])


def test_node_profiles_data_without_nodes_is_empty():
    assert node_profiles_data(_config_list([], []), []) == {}


def test_event_transport_host_empty_uses_default():
    assert event_transport_host("") == DEFAULT_TRANSPORT_HOST


def test_event_transport_host_keeps_valid_url():
    host = "http://events.example.com:9043"
    assert event_transport_host(host) == host


def test_enabled_plugins_defaults_to_e810():
    assert enabled_plugins(_operator({"daemonNodeSelector": {}})) == "e810"


def test_enabled_plugins_empty_map_gives_empty_string():
    assert enabled_plugins(_operator({"plugins": {}})) == ""


def test_enabled_plugins_lists_configured_names():
    config = _operator({"plugins": {"e810": {}, "e825": None}})
    assert set(enabled_plugins(config).split(",")) == {"e810", "e825"}


def test_daemon_render_data_without_event_config():
    env = {"LINUXPTP_DAEMON_IMAGE": "img", "NODE_NAME": "node1", "RELEASEVERSION": "rel"}
    data = daemon_render_data(_operator({}), env)
    assert data["Image"] == "img"
    assert data["NodeName"] == "node1"
    assert data["ReleaseVersion"] == "rel"
    assert data["Namespace"] == NAMESPACE
    assert data["EnableEventPublisher"] is False
    assert "EventTransportHost" not in data
    assert data["StorageType"] == DEFAULT_STORAGE_TYPE
    assert data["EventApiVersion"] == DEFAULT_API_VERSION
    assert data["EnabledPlugins"] == "e810"


def test_daemon_render_data_with_enabled_events():
    config = _operator(
        {"ptpEventConfig": {"enableEventPublisher": True, "storageType": "local", "apiVersion": "1.0"}}
    )
    data = daemon_render_data(config, {})
    assert data["EnableEventPublisher"] is True
    assert data["EventTransportHost"] == DEFAULT_TRANSPORT_HOST
    assert data["StorageType"] == "local"
    assert data["EventApiVersion"] == "1.0"


def test_daemon_render_data_with_disabled_events_keeps_raw_host():
    config = _operator({"ptpEventConfig": {"transportHost": "", "storageType": "local"}})
    data = daemon_render_data(config, {})
    assert data["EnableEventPublisher"] is False
    assert data["EventTransportHost"] == ""
    assert data["StorageType"] == DEFAULT_STORAGE_TYPE


def test_set_daemon_node_selector_on_daemonset():
    config = _operator({"daemonNodeSelector": {"ptp": "true"}})
    obj = {"kind": "DaemonSet", "spec": {"template": {"spec": {"containers": []}}}}
    result = set_daemon_node_selector(config, obj)
    assert result["spec"]["template"]["spec"]["nodeSelector"] == {"ptp": "true"}
    assert result["spec"]["template"]["spec"]["containers"] == []
    assert "nodeSelector" not in obj["spec"]["template"]["spec"]


def test_set_daemon_node_selector_ignores_other_kinds_and_empty_selector():
    service = {"kind": "Service", "spec": {}}
    assert set_daemon_node_selector(_operator({"daemonNodeSelector": {"a": "b"}}), service) == service
    ds = {"kind": "DaemonSet", "spec": {}}
    assert set_daemon_node_selector(_operator({"daemonNodeSelector": {}}), ds) == ds


def test_set_daemon_node_selector_bad_spec_raises():
    config = _operator({"daemonNodeSelector": {"a": "b"}})
    with pytest.raises(ValueError, match="failed to convert"):
        set_daemon_node_selector(config, {"kind": "DaemonSet", "spec": "oops"})


@pytest.mark.parametrize(
    "name, expected",
    [("master0.example.com", "master0"), ("worker", "worker"), ("", "")],
)
def test_event_service_node_name(name, expected):
    assert event_service_node_name(name) == expected