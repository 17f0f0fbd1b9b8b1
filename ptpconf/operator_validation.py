"""Validation of PtpOperatorConfig resources."""

from __future__ import annotations

import re

from ptpconf.ptp4l import ConfigError
from ptpconf.types import PtpOperatorConfig

DEFAULT_NAME = "default"

_NUMBER = r"(0|[1-9]\d*)"
_PRE_PART = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_VERSION = re.compile(
    rf"v?{_NUMBER}(?:\.{_NUMBER})?(?:\.{_NUMBER})?"
    rf"(?:-({_PRE_PART}(?:\.{_PRE_PART})*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?",
    re.ASCII,
)
_UINT64_LIMIT = 2**64


def is_valid_version(version: str) -> bool:
    """Whether ``version`` is a semantic version, allowing a v prefix and missing parts."""
    match = _VERSION.fullmatch(version)
    if match is None:
        return False
    return all(part is None or int(part) < _UINT64_LIMIT for part in match.groups()[:3])


def validate_operator_config(config: PtpOperatorConfig) -> None:
    """Raise ConfigError if ``config`` is not an acceptable operator configuration."""
    if config.metadata.name != DEFAULT_NAME:
        raise ConfigError(
            "PtpOperatorConfig name must be 'default'. "
            "Only one 'default' PtpOperatorConfig configuration is allowed"
        )
    event = config.spec.event_config
    if event is not None and event.enable_event_publisher:
        if event.api_version and not is_valid_version(event.api_version):
            raise ConfigError(
                f"ptpEventConfig.apiVersion={event.api_version} is not a valid version. "
                'Example of valid versions: "1.0", "2.0"'
            )