import pytest

from ptpconf.ptp4l import (
    ConfigError,
    Ptp4lConf,
    PtpRole,
    get_interfaces,
    validate_ptp_config,
)
from ptpconf.types import ObjectMeta, PtpConfig, PtpConfigSpec, PtpProfile


def make_config(*profiles, name="cfg"):
    return PtpConfig(metadata=ObjectMeta(name=name), spec=PtpConfigSpec(profile=list(profiles)))


def test_parse_sections_and_options():
    conf = Ptp4lConf.parse("[global]\ndomainNumber 24\n[ens1f0]\nmasterOnly 0")
    assert conf.sections == {"[global]": {"domainNumber": "24"}, "[ens1f0]": {"masterOnly": "0"}}


def test_parse_adds_missing_global_section():
    conf = Ptp4lConf.parse("[eth0]\nmasterOnly 1")
    assert conf.sections["[global]"] == {}
    assert conf.sections["[eth0]"] == {"masterOnly": "1"}


def test_parse_trims_values_and_skips_lines_without_space():
    conf = Ptp4lConf.parse("[global]\nlogging_level    6  \nnospace\n")
    assert conf.sections["[global]"] == {"logging_level": "6"}


def test_parse_missing_closing_bracket():
    with pytest.raises(ConfigError, match="Section missing closing"):
        Ptp4lConf.parse("[global\nx 1")


def test_parse_option_outside_section():
    with pytest.raises(ConfigError, match="Config option not in section"):
        Ptp4lConf.parse("domainNumber 24\n[global]")


def test_parse_empty_text_is_an_error():
    with pytest.raises(ConfigError):
        Ptp4lConf.parse(None)


def test_interfaces_by_role():
    conf = Ptp4lConf.parse("[global]\n[eth0]\nmasterOnly 1\n[eth1]\nmasterOnly 0\n[eth2]\nx y")
    assert conf.interfaces(PtpRole.MASTER) == ["eth0"]
    assert conf.interfaces(PtpRole.SLAVE) == ["eth1"]


def test_validate_interface_section_mismatch():
    profile = PtpProfile(name="p", interface="eth0", ptp4l_conf="[global]\n[eth0]\nmasterOnly 0")
    config = make_config(profile)
    validate_ptp_config(config)
    profile.ptp4l_conf = "[global]\n[eth1]\nmasterOnly 0"
    with pytest.raises(ConfigError, match=r"interface section \[eth1\] not allowed"):
        validate_ptp_config(config)


def test_validate_sched_fifo_needs_priority():
    config = make_config(PtpProfile(name="p", ptp_scheduling_policy="SCHED_FIFO"))
    with pytest.raises(ConfigError, match="PtpSchedulingPriority must be set"):
        validate_ptp_config(config)


def test_validate_stdout_filter_regex():
    config = make_config(PtpProfile(name="p", ptp_settings={"stdoutFilter": "("}))
    with pytest.raises(ConfigError, match=r"stdoutFilter='\(' is invalid"):
        validate_ptp_config(config)


def test_validate_log_reduce():
    profile = PtpProfile(name="p", ptp_settings={"logReduce": "TRUE"})
    config = make_config(profile)
    validate_ptp_config(config)
    profile.ptp_settings["logReduce"] = "Maybe"
    with pytest.raises(ConfigError, match="logReduce='maybe' is invalid"):
        validate_ptp_config(config)


def test_validate_ha_profiles():
    profile = PtpProfile(name="p", ptp_settings={"haProfiles": "prof-a, prof_b,prof3"})
    config = make_config(profile)
    validate_ptp_config(config)
    profile.ptp_settings["haProfiles"] = "prof-a;prof-b"
    with pytest.raises(ConfigError, match="must be comma seperated profile names"):
        validate_ptp_config(config)


def test_validate_unknown_setting():
    config = make_config(PtpProfile(name="p", ptp_settings={"colour": "blue"}))
    with pytest.raises(ConfigError, match="'colour' is not a configurable setting"):
        validate_ptp_config(config)


def test_get_interfaces_global_uses_profile_interface():
    config = make_config(PtpProfile(name="p", interface="ens5", ptp4l_conf="[global]\nmasterOnly 0"))
    assert get_interfaces(config, PtpRole.SLAVE) == ["ens5"]


def test_get_interfaces_named_sections():
    text = "[global]\n[ens1]\nmasterOnly 1\n[ens2]\nmasterOnly 1\n[ens3]\nmasterOnly 0"
    config = make_config(PtpProfile(name="p", ptp4l_conf=text))
    assert get_interfaces(config, PtpRole.MASTER) == ["ens1", "ens2"]
    assert get_interfaces(config, PtpRole.SLAVE) == ["ens3"]


def test_get_interfaces_slave_falls_back_to_interface():
    config = make_config(PtpProfile(name="p", interface="ens7", ptp4l_conf="[global]\nx 1"))
    assert get_interfaces(config, PtpRole.SLAVE) == ["ens7"]
    assert get_interfaces(config, PtpRole.MASTER) == []


def test_get_interfaces_without_profiles():
    assert get_interfaces(make_config(), PtpRole.SLAVE) == []


def test_get_interfaces_keeps_sections_before_parse_error():
    config = make_config(PtpProfile(name="p", ptp4l_conf="[ens1]\nmasterOnly 1\n[broken"))
    assert get_interfaces(config, PtpRole.MASTER) == ["ens1"]