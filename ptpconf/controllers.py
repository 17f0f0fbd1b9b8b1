"""Reconciliation logic: per-node profile data and linuxptp daemon settings."""

from __future__ import annotations

import copy
import json
import logging
import os
import re
from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Any
from urllib.parse import urlsplit

from ptpconf.recommend import RecommendError, recommended_profiles
from ptpconf.types import Node, PtpConfigList, PtpOperatorConfig, PtpProfile

log = logging.getLogger(__name__)

RESYNC_PERIOD = timedelta(minutes=2)
DEFAULT_TRANSPORT_HOST = "http://ptp-event-publisher-service-NODE_NAME.openshift-ptp.svc.cluster.local:9043"
DEFAULT_STORAGE_TYPE = "emptyDir"
DEFAULT_API_VERSION = "2.0"
DEFAULT_PLUGINS = ("e810",)
NAMESPACE = "openshift-ptp"

_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*:")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _profile_json(profile: PtpProfile) -> dict[str, Any]:
    """The profile's JSON form, with map values in sorted key order."""
    data = profile.to_dict()
    for key in ("ptpSettings", "plugins"):
        if key in data:
            data[key] = dict(sorted(data[key].items()))
    return data


def node_profiles_data(config_list: PtpConfigList, nodes: Iterable[Node]) -> dict[str, str]:
    """Map each node name to the JSON list of profiles recommended for it."""
    result: dict[str, str] = {}
    for node in nodes:
        try:
            profiles = recommended_profiles(config_list, node)
        except RecommendError as exc:
            raise RecommendError(
                f"failed to get recommended node PtpConfig: get recommended ptp profiles failed: {exc}"
            ) from exc
        result[node.name] = json.dumps(
            [_profile_json(profile) for profile in profiles], separators=(",", ":")
        )
    return result


def _is_parsable_url(raw: str) -> bool:
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in raw):
        return False
    if raw.startswith(":"):
        return False
    before_fragment, _, fragment = raw.partition("#")
    before_query = before_fragment.partition("?")[0]
    if _BAD_ESCAPE.search(before_query) or _BAD_ESCAPE.search(fragment):
        return False
    if not _SCHEME.match(before_query):
        first_segment = before_query.partition("/")[0]
        if ":" in first_segment:
            return False
    try:
        parts = urlsplit(raw)
        _ = parts.port
    except ValueError:
        return False
    return True


def event_transport_host(transport_host: str) -> str:
    """The transport host to use, falling back to the default when it is unusable."""
    if not transport_host or not _is_parsable_url(transport_host):
        log.warning(
            "ptp operator config Spec, ptpEventConfig.transportHost=%s is not valid, proceed as %s",
            transport_host,
            DEFAULT_TRANSPORT_HOST,
        )
        return DEFAULT_TRANSPORT_HOST
    return transport_host


def enabled_plugins(config: PtpOperatorConfig) -> str:
    """Comma separated names of the enabled plugins; e810 when none are configured."""
    plugins = config.spec.enabled_plugins
    names = list(DEFAULT_PLUGINS) if plugins is None else list(plugins)
    return ",".join(names)


def daemon_render_data(
    config: PtpOperatorConfig, environ: Mapping[str, str] | None = None
) -> dict[str, Any]:
    """Values that fill the linuxptp daemon manifest template."""
    env = os.environ if environ is None else environ
    data: dict[str, Any] = {
        "Image": env.get("LINUXPTP_DAEMON_IMAGE", ""),
        "Namespace": NAMESPACE,
        "ReleaseVersion": env.get("RELEASEVERSION", ""),
        "KubeRbacProxy": env.get("KUBE_RBAC_PROXY_IMAGE", ""),
        "SideCar": env.get("SIDECAR_EVENT_IMAGE", ""),
        "NodeName": env.get("NODE_NAME", ""),
        "StorageType": DEFAULT_STORAGE_TYPE,
        "EventApiVersion": DEFAULT_API_VERSION,
    }
    event = config.spec.event_config
    if event is None:
        data["EnableEventPublisher"] = False
    else:
        data["EnableEventPublisher"] = event.enable_event_publisher
        data["EventTransportHost"] = event.transport_host
        if event.enable_event_publisher:
            data["EventTransportHost"] = event_transport_host(event.transport_host)
            if event.storage_type:
                data["StorageType"] = event.storage_type
            if event.api_version:
                data["EventApiVersion"] = event.api_version

    plugins = enabled_plugins(config)
    data["EnabledPlugins"] = plugins
    if plugins:
        log.info("ptp operator enabled plugins: %s", plugins)
    return data


def _child(parent: dict[str, Any], key: str) -> dict[str, Any]:
    value = parent.setdefault(key, {})
    if value is None:
        value = parent[key] = {}
    if not isinstance(value, dict):
        raise ValueError(
            f"failed to convert linuxptp obj to appsv1.DaemonSet: {key} must be a mapping"
        )
    return value


def set_daemon_node_selector(config: PtpOperatorConfig, obj: Mapping[str, Any]) -> dict[str, Any]:
    """A copy of ``obj`` whose DaemonSet pod template carries the configured node selector."""
    result = copy.deepcopy(dict(obj))
    selector = config.spec.daemon_node_selector
    if result.get("kind") == "DaemonSet" and selector:
        pod_spec = _child(_child(_child(result, "spec"), "template"), "spec")
        pod_spec["nodeSelector"] = dict(selector)
    return result


def event_service_node_name(node_name: str) -> str:
    """The short node name used to name the per-node event service."""
    return node_name.split(".")[0]