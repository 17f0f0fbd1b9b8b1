"""Resource types of the ptp.openshift.io/v1 API group and their JSON forms."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

GROUP = "ptp.openshift.io"
VERSION = "v1"
API_VERSION = f"{GROUP}/{VERSION}"

DEFAULT_HOLD_OVER_TIMEOUT = 5
DEFAULT_MAX_OFFSET_THRESHOLD = 100
DEFAULT_MIN_OFFSET_THRESHOLD = -100


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise TypeError(f"{what} must be a mapping, got {type(data).__name__}")
    return data


def _items(data: Any, what: str) -> list[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise TypeError(f"{what} must be a list, got {type(data).__name__}")
    return data


def _drop_empty(values: dict[str, Any]) -> dict[str, Any]:
    """Leave out keys whose value is empty, like omitempty does."""
    return {key: value for key, value in values.items() if value not in (None, "", 0, False, [], {})}


@dataclass
class ObjectMeta:
    """Name, namespace and labels of a resource."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> ObjectMeta:
        data = _mapping(data, "metadata")
        return cls(
            name=data.get("name", "") or "",
            namespace=data.get("namespace", "") or "",
            labels=dict(_mapping(data.get("labels"), "metadata.labels")),
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_empty({"name": self.name, "namespace": self.namespace, "labels": dict(self.labels)})


@dataclass
class Node:
    """A cluster node as far as profile matching needs it."""

    name: str
    labels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Node:
        meta = ObjectMeta.from_dict(_mapping(data, "node").get("metadata"))
        return cls(name=meta.name, labels=meta.labels)


@dataclass
class MatchRule:
    node_label: str | None = None
    node_name: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> MatchRule:
        data = _mapping(data, "match rule")
        return cls(node_label=data.get("nodeLabel"), node_name=data.get("nodeName"))

    def to_dict(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in (("nodeLabel", self.node_label), ("nodeName", self.node_name))
            if value is not None
        }


@dataclass
class PtpRecommend:
    profile: str | None = None
    priority: int | None = None
    match: list[MatchRule] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> PtpRecommend:
        data = _mapping(data, "recommend")
        return cls(
            profile=data.get("profile"),
            priority=data.get("priority"),
            match=[MatchRule.from_dict(rule) for rule in _items(data.get("match"), "match")],
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"profile": self.profile, "priority": self.priority}
        if self.match:
            result["match"] = [rule.to_dict() for rule in self.match]
        return result


@dataclass
class PtpClockThreshold:
    """Holdover timeout in seconds and offset bounds in nanoseconds."""

    hold_over_timeout: int = DEFAULT_HOLD_OVER_TIMEOUT
    max_offset_threshold: int = DEFAULT_MAX_OFFSET_THRESHOLD
    min_offset_threshold: int = DEFAULT_MIN_OFFSET_THRESHOLD

    @classmethod
    def from_dict(cls, data: Any) -> PtpClockThreshold:
        data = _mapping(data, "ptpClockThreshold")
        return cls(
            hold_over_timeout=data.get("holdOverTimeout", DEFAULT_HOLD_OVER_TIMEOUT),
            max_offset_threshold=data.get("maxOffsetThreshold", DEFAULT_MAX_OFFSET_THRESHOLD),
            min_offset_threshold=data.get("minOffsetThreshold", DEFAULT_MIN_OFFSET_THRESHOLD),
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_empty(
            {
                "holdOverTimeout": self.hold_over_timeout,
                "maxOffsetThreshold": self.max_offset_threshold,
                "minOffsetThreshold": self.min_offset_threshold,
            }
        )


_PROFILE_STRINGS = (
    ("interface", "interface"),
    ("ptp4l_opts", "ptp4lOpts"),
    ("phc2sys_opts", "phc2sysOpts"),
    ("ts2phc_opts", "ts2phcOpts"),
    ("synce4l_opts", "synce4lOpts"),
    ("ptp4l_conf", "ptp4lConf"),
    ("phc2sys_conf", "phc2sysConf"),
    ("ts2phc_conf", "ts2phcConf"),
    ("synce4l_conf", "synce4lConf"),
    ("ptp_scheduling_policy", "ptpSchedulingPolicy"),
    ("ptp_scheduling_priority", "ptpSchedulingPriority"),
)


@dataclass
class PtpProfile:
    """One named set of linuxptp options and configuration files."""

    name: str | None = None
    interface: str | None = None
    ptp4l_opts: str | None = None
    phc2sys_opts: str | None = None
    ts2phc_opts: str | None = None
    synce4l_opts: str | None = None
    ptp4l_conf: str | None = None
    phc2sys_conf: str | None = None
    ts2phc_conf: str | None = None
    synce4l_conf: str | None = None
    ptp_scheduling_policy: str | None = None
    ptp_scheduling_priority: int | None = None
    ptp_clock_threshold: PtpClockThreshold | None = None
    ptp_settings: dict[str, str] = field(default_factory=dict)
    plugins: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> PtpProfile:
        data = _mapping(data, "profile")
        threshold = data.get("ptpClockThreshold")
        return cls(
            name=data.get("name"),
            **{attr: data.get(key) for attr, key in _PROFILE_STRINGS},
            ptp_clock_threshold=None if threshold is None else PtpClockThreshold.from_dict(threshold),
            ptp_settings=dict(_mapping(data.get("ptpSettings"), "ptpSettings")),
            plugins=dict(_mapping(data.get("plugins"), "plugins")),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        for attr, key in _PROFILE_STRINGS:
            value = getattr(self, attr)
            if value is not None:
                result[key] = value
        if self.ptp_clock_threshold is not None:
            result["ptpClockThreshold"] = self.ptp_clock_threshold.to_dict()
        if self.ptp_settings:
            result["ptpSettings"] = dict(self.ptp_settings)
        if self.plugins:
            result["plugins"] = dict(self.plugins)
        return result


@dataclass
class NodeMatchList:
    node_name: str | None = None
    profile: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> NodeMatchList:
        data = _mapping(data, "matchList entry")
        return cls(node_name=data.get("nodeName"), profile=data.get("profile"))

    def to_dict(self) -> dict[str, Any]:
        return {"nodeName": self.node_name, "profile": self.profile}


@dataclass
class PtpConfigSpec:
    profile: list[PtpProfile] = field(default_factory=list)
    recommend: list[PtpRecommend] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> PtpConfigSpec:
        data = _mapping(data, "spec")
        return cls(
            profile=[PtpProfile.from_dict(p) for p in _items(data.get("profile"), "profile")],
            recommend=[PtpRecommend.from_dict(r) for r in _items(data.get("recommend"), "recommend")],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "profile": [p.to_dict() for p in self.profile],
            "recommend": [r.to_dict() for r in self.recommend],
        }


@dataclass
class PtpConfigStatus:
    match_list: list[NodeMatchList] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> PtpConfigStatus:
        data = _mapping(data, "status")
        return cls(match_list=[NodeMatchList.from_dict(m) for m in _items(data.get("matchList"), "matchList")])

    def to_dict(self) -> dict[str, Any]:
        if not self.match_list:
            return {}
        return {"matchList": [m.to_dict() for m in self.match_list]}


@dataclass
class PtpConfig:
    """A PtpConfig resource: profiles and the rules that place them on nodes."""

    KIND = "PtpConfig"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: PtpConfigSpec = field(default_factory=PtpConfigSpec)
    status: PtpConfigStatus = field(default_factory=PtpConfigStatus)

    @property
    def name(self) -> str:
        return self.metadata.name

    @classmethod
    def from_dict(cls, data: Any) -> PtpConfig:
        data = _mapping(data, "PtpConfig")
        return cls(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=PtpConfigSpec.from_dict(data.get("spec")),
            status=PtpConfigStatus.from_dict(data.get("status")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": API_VERSION,
            "kind": self.KIND,
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
            "status": self.status.to_dict(),
        }


@dataclass
class PtpConfigList:
    items: list[PtpConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> PtpConfigList:
        data = _mapping(data, "PtpConfigList")
        return cls(items=[PtpConfig.from_dict(item) for item in _items(data.get("items"), "items")])


@dataclass
class PtpDevice:
    name: str = ""
    profile: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> PtpDevice:
        data = _mapping(data, "device")
        return cls(name=data.get("name", "") or "", profile=data.get("profile", "") or "")

    def to_dict(self) -> dict[str, Any]:
        return _drop_empty({"name": self.name, "profile": self.profile})


@dataclass
class HwConfig:
    device_id: str = ""
    vendor_id: str = ""
    failed: bool = False
    status: str = ""
    config: Any = None

    @classmethod
    def from_dict(cls, data: Any) -> HwConfig:
        data = _mapping(data, "hwconfig")
        return cls(
            device_id=data.get("deviceID", "") or "",
            vendor_id=data.get("vendorID", "") or "",
            failed=bool(data.get("failed", False)),
            status=data.get("status", "") or "",
            config=data.get("config"),
        )

    def to_dict(self) -> dict[str, Any]:
        result = _drop_empty(
            {"deviceID": self.device_id, "vendorID": self.vendor_id, "failed": self.failed, "status": self.status}
        )
        if self.config is not None:
            result["config"] = self.config
        return result


@dataclass
class NodePtpDeviceStatus:
    devices: list[PtpDevice] = field(default_factory=list)
    hwconfig: list[HwConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> NodePtpDeviceStatus:
        data = _mapping(data, "status")
        return cls(
            devices=[PtpDevice.from_dict(d) for d in _items(data.get("devices"), "devices")],
            hwconfig=[HwConfig.from_dict(h) for h in _items(data.get("hwconfig"), "hwconfig")],
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.devices:
            result["devices"] = [d.to_dict() for d in self.devices]
        if self.hwconfig:
            result["hwconfig"] = [h.to_dict() for h in self.hwconfig]
        return result


@dataclass
class NodePtpDevice:
    """The PTP devices discovered on one node."""

    KIND = "NodePtpDevice"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    status: NodePtpDeviceStatus = field(default_factory=NodePtpDeviceStatus)

    @property
    def name(self) -> str:
        return self.metadata.name

    @classmethod
    def from_dict(cls, data: Any) -> NodePtpDevice:
        data = _mapping(data, "NodePtpDevice")
        return cls(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            status=NodePtpDeviceStatus.from_dict(data.get("status")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": API_VERSION,
            "kind": self.KIND,
            "metadata": self.metadata.to_dict(),
            "spec": {},
            "status": self.status.to_dict(),
        }


@dataclass
class PtpEventConfig:
    enable_event_publisher: bool = False
    transport_host: str = ""
    storage_type: str = ""
    api_version: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> PtpEventConfig:
        data = _mapping(data, "ptpEventConfig")
        return cls(
            enable_event_publisher=bool(data.get("enableEventPublisher", False)),
            transport_host=data.get("transportHost", "") or "",
            storage_type=data.get("storageType", "") or "",
            api_version=data.get("apiVersion", "") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        return _drop_empty(
            {
                "enableEventPublisher": self.enable_event_publisher,
                "transportHost": self.transport_host,
                "storageType": self.storage_type,
                "apiVersion": self.api_version,
            }
        )


@dataclass
class PtpOperatorConfigSpec:
    daemon_node_selector: dict[str, str] = field(default_factory=dict)
    event_config: PtpEventConfig | None = None
    enabled_plugins: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> PtpOperatorConfigSpec:
        data = _mapping(data, "spec")
        event = data.get("ptpEventConfig")
        plugins = data.get("plugins")
        return cls(
            daemon_node_selector=dict(_mapping(data.get("daemonNodeSelector"), "daemonNodeSelector")),
            event_config=None if event is None else PtpEventConfig.from_dict(event),
            enabled_plugins=None if plugins is None else dict(_mapping(plugins, "plugins")),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"daemonNodeSelector": dict(self.daemon_node_selector)}
        if self.event_config is not None:
            result["ptpEventConfig"] = self.event_config.to_dict()
        if self.enabled_plugins is not None:
            result["plugins"] = dict(self.enabled_plugins)
        return result


@dataclass
class PtpOperatorConfig:
    """The singleton operator configuration resource."""

    KIND = "PtpOperatorConfig"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: PtpOperatorConfigSpec = field(default_factory=PtpOperatorConfigSpec)

    @property
    def name(self) -> str:
        return self.metadata.name

    @classmethod
    def from_dict(cls, data: Any) -> PtpOperatorConfig:
        data = _mapping(data, "PtpOperatorConfig")
        return cls(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=PtpOperatorConfigSpec.from_dict(data.get("spec")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": API_VERSION,
            "kind": self.KIND,
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
            "status": {},
        }