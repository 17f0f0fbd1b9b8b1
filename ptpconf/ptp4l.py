"""Parsing of ptp4l configuration text and validation of PtpConfig resources."""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field

from ptpconf.types import PtpConfig

log = logging.getLogger(__name__)

GLOBAL_SECTION = "[global]"

_PROFILE_LIST = re.compile(r"[\w\-_]+(,\s*[\w\-_]+)*", re.ASCII)


class PtpRole(enum.IntEnum):
    """Port role as written in the masterOnly option."""

    SLAVE = 0
    MASTER = 1


class ConfigError(ValueError):
    """A configuration that cannot be accepted."""


def _fill_sections(sections: dict[str, dict[str, str]], text: str | None) -> None:
    """Add the sections of ``text`` to ``sections``; raise on the first bad line."""
    current = ""
    for line in (text or "").split("\n"):
        if line.startswith("["):
            head, sep, _ = line.partition("]")
            if not sep:
                raise ConfigError("Section missing closing ']'")
            current = f"{head}]"
            sections[current] = {}
        elif current:
            key, sep, value = line.partition(" ")
            if sep and key:
                sections[current][key] = value.strip()
        else:
            raise ConfigError("Config option not in section")


def _strip_brackets(name: str) -> str:
    return name.replace("[", "").replace("]", "").strip()


@dataclass
class Ptp4lConf:
    """Sections of a ptp4l configuration, keyed by their bracketed header."""

    sections: dict[str, dict[str, str]] = field(default_factory=dict)

    @classmethod
    def parse(cls, text: str | None) -> Ptp4lConf:
        """Parse ptp4l configuration text; a missing [global] section is added empty."""
        conf = cls()
        _fill_sections(conf.sections, text)
        conf.sections.setdefault(GLOBAL_SECTION, {})
        return conf

    def interfaces(self, mode: PtpRole) -> list[str]:
        """Names of the sections whose masterOnly option equals ``mode``."""
        wanted = str(int(mode))
        return [
            _strip_brackets(name)
            for name, options in self.sections.items()
            if options.get("masterOnly", "").strip() == wanted
        ]


def _parse_partial(text: str | None) -> tuple[Ptp4lConf, ConfigError | None]:
    """Parse as far as possible, returning what was read and the error, if any."""
    conf = Ptp4lConf()
    try:
        _fill_sections(conf.sections, text)
    except ConfigError as exc:
        return conf, exc
    conf.sections.setdefault(GLOBAL_SECTION, {})
    return conf, None


def _check_setting(key: str, value: str) -> None:
    if key == "stdoutFilter":
        try:
            re.compile(value)
        except re.error as exc:
            raise ConfigError(f"stdoutFilter='{value}' is invalid; {exc}") from exc
    elif key == "logReduce":
        value = value.lower()
        if value not in ("true", "false"):
            raise ConfigError(f"logReduce='{value}' is invalid; must be in 'true' or 'false'")
    elif key == "haProfiles":
        if not _PROFILE_LIST.fullmatch(value):
            raise ConfigError(f"haProfiles='{value}' is invalid; must be comma seperated profile names")
    else:
        raise ConfigError(f"profile.PtpSettings '{key}' is not a configurable setting")


def validate_ptp_config(config: PtpConfig) -> None:
    """Raise ConfigError if any profile of ``config`` is not acceptable."""
    for profile in config.spec.profile:
        conf, _ = _parse_partial(profile.ptp4l_conf)

        if profile.interface:
            allowed = f"[{profile.interface}]"
            for section in conf.sections:
                if section not in (GLOBAL_SECTION, allowed):
                    raise ConfigError(
                        f"interface section {section} not allowed when specifying interface section"
                    )

        if profile.ptp_scheduling_policy == "SCHED_FIFO" and profile.ptp_scheduling_priority is None:
            raise ConfigError("PtpSchedulingPriority must be set for SCHED_FIFO PtpSchedulingPolicy")

        for key, value in profile.ptp_settings.items():
            _check_setting(key, value)


def get_interfaces(config: PtpConfig, mode: PtpRole) -> list[str]:
    """Interfaces of the first profile of ``config`` that take the role ``mode``."""
    profiles = config.spec.profile
    if len(profiles) > 1:
        log.warning("More than one profile detected for ptpconfig %s", config.metadata.name)
    if not profiles:
        log.warning("No profile detected for ptpconfig %s", config.metadata.name)
        return []
    profile = profiles[0]

    conf, error = _parse_partial(profile.ptp4l_conf)
    if error is not None:
        log.warning("ptp4l conf parsing failed, err=%s", error)

    found = conf.interfaces(mode)
    result: list[str] = []
    for name in found:
        if name == "global":
            if profile.interface is not None:
                result.append(profile.interface)
        else:
            result.append(name)
    if not found and mode == PtpRole.SLAVE and profile.interface is not None:
        result.append(profile.interface)
    return result