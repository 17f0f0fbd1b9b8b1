# ptpconf

`ptpconf` models the configuration of a cluster that runs the linuxptp
daemons (`ptp4l`, `phc2sys`, `ts2phc`, `synce4l`). It reads and writes the
configuration resources as plain dictionaries. It validates them and picks
the PTP profiles that apply to each node. It also prepares the values used
to deploy the linuxptp daemon.

It has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the test suite, install the `test` extra and run `pytest`:

```
pip install .[test]
pytest
```

## Modules

### `ptpconf.types`

These dataclasses stand for the resources of the `ptp.openshift.io/v1` group:

- `PtpConfig`, `PtpConfigSpec`, `PtpConfigStatus`, `PtpConfigList`
- `PtpProfile`, `PtpClockThreshold`, `PtpRecommend`, `MatchRule`, `NodeMatchList`
- `NodePtpDevice`, `NodePtpDeviceStatus`, `PtpDevice`, `HwConfig`
- `PtpOperatorConfig`, `PtpOperatorConfigSpec`, `PtpEventConfig`
- `ObjectMeta` and `Node`, which hold a node's name and labels

`from_dict` builds an object from a resource document that uses camel-case
keys. `to_dict` writes it back, and leaves out empty optional fields. `Node`
offers only `from_dict`. `PtpConfigList` offers only `from_dict`. A
`PtpClockThreshold` that is read without values gets 5 s holdover and
±100 ns offset bounds.

### `ptpconf.ptp4l`

- `Ptp4lConf.parse(text)` splits a `ptp4l.conf` text into sections, keyed by
  their bracketed header such as `"[global]"`. If there is no `[global]`
  section, an empty one is added. `ConfigError` is raised in two cases: a
  header has no closing `]`, or an option comes before any section.
- `Ptp4lConf.interfaces(mode)` gives the names of the sections whose
  `masterOnly` option equals the `PtpRole` (`SLAVE` = 0, `MASTER` = 1).
- `validate_ptp_config(config)` raises `ConfigError` in any of these cases:
  - a profile that sets `interface` has a section other than `[global]` and
    that interface
  - `SCHED_FIFO` is used without a scheduling priority
  - a `ptpSettings` entry is not valid

  The `ptpSettings` keys that are accepted are `stdoutFilter` (it must be a
  valid regular expression), `logReduce` (`true` or `false`) and
  `haProfiles` (profile names separated by commas).
- `get_interfaces(config, mode)` lists the interfaces of the first profile
  that take the given role. A `global` section maps to the profile's
  `interface`. In the `SLAVE` role, if no section matches, the profile's
  `interface` is used.

### `ptpconf.operator_validation`

- `validate_operator_config(config)` raises `ConfigError` in two cases: the
  name is not `default`, or the event publisher is enabled with an
  `apiVersion` that is not a valid version.
- `is_valid_version(version)` accepts semantic versions. A leading `v` and
  missing minor or patch parts are allowed, for example `"1.0"` or `"2"`.

### `ptpconf.recommend`

- `node_matches(node, rules)` is true when a rule names the node or one of
  its label keys.
- `recommended_profile_names(config_list, node)` gathers the recommend
  entries of all configs, sorts them by priority (the lowest number wins)
  and keeps the matching profile names of the best priority.
- `recommended_profiles(config_list, node)` returns those profiles, sorted
  by name. It raises `RecommendError` when a recommended profile is not
  defined.

### `ptpconf.controllers`

- `node_profiles_data(config_list, nodes)` maps each node name to the
  compact JSON list of its recommended profiles.
- `daemon_render_data(config, environ=None)` gives the values for the daemon
  manifest template. Image names and the release version come from the
  environment (`LINUXPTP_DAEMON_IMAGE`, `RELEASEVERSION`,
  `KUBE_RBAC_PROXY_IMAGE`, `SIDECAR_EVENT_IMAGE`, `NODE_NAME`). The event
  settings come from the operator config.
- `enabled_plugins(config)` returns the configured plugin names joined by
  commas. When no plugins are configured, it returns `e810`.
- `event_transport_host(transport_host)` returns the given host. When that
  host is empty or cannot be parsed as a URL, it returns
  `DEFAULT_TRANSPORT_HOST` instead.
- `set_daemon_node_selector(config, obj)` returns a copy of a rendered
  object. If the object is a `DaemonSet` and the config has a node selector,
  the copy's pod template carries that selector.
- `event_service_node_name(node_name)` returns the part of a node name
  before the first dot.

## Example

```python
from ptpconf.types import PtpConfig, PtpConfigList, Node
from ptpconf.ptp4l import validate_ptp_config, get_interfaces, PtpRole
from ptpconf.recommend import recommended_profiles

config = PtpConfig.from_dict({
    "metadata": {"name": "slave", "namespace": "openshift-ptp"},
    "spec": {
        "profile": [{
            "name": "slave",
            "interface": "ens1f0",
            "ptp4lOpts": "-2 -s",
            "ptp4lConf": "[global]\nslaveOnly 1\n[ens1f0]\nmasterOnly 0",
        }],
        "recommend": [{
            "profile": "slave",
            "priority": 4,
            "match": [{"nodeLabel": "node-role.kubernetes.io/worker"}],
        }],
    },
})

validate_ptp_config(config)                   # raises ConfigError when invalid
print(get_interfaces(config, PtpRole.SLAVE))  # ['ens1f0']

node = Node.from_dict({
    "metadata": {"name": "worker-0", "labels": {"node-role.kubernetes.io/worker": ""}},
})
for profile in recommended_profiles(PtpConfigList(items=[config]), node):
    print(profile.name)                       # slave
```

## What it does not do

`ptpconf` works on data that it is given, and nothing else. It does not:

- connect to a cluster
- watch or reconcile resources
- serve admission webhooks
- render or apply manifest templates
- create config maps or devices

It has no command-line entry point. Callers fetch the resources, pass them
in as dictionaries and act on the results themselves.