"""Choosing the PTP profiles that apply to a node."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ptpconf.types import MatchRule, Node, PtpConfigList, PtpProfile, PtpRecommend

log = logging.getLogger(__name__)


class RecommendError(Exception):
    """The recommended profiles cannot be resolved."""


def node_matches(node: Node, rules: Iterable[MatchRule]) -> bool:
    """Whether any rule names the node or one of its label keys."""
    for rule in rules:
        if rule.node_name is not None and rule.node_name == node.name:
            return True
        if rule.node_label is not None and rule.node_label in node.labels:
            return True
    return False


def _by_priority(recommend: PtpRecommend) -> tuple[bool, int]:
    return (recommend.priority is None, recommend.priority or 0)


def recommended_profile_names(config_list: PtpConfigList, node: Node) -> set[str]:
    """Names of the matching profiles that share the best (lowest) priority."""
    recommends = sorted(
        (r for config in config_list.items for r in config.spec.recommend),
        key=_by_priority,
    )
    names: set[str] = set()
    best: int | None = None
    for recommend in recommends:
        if recommend.profile is None or not recommend.match:
            continue
        if not node_matches(node, recommend.match):
            continue
        if recommend.priority is None:
            raise RecommendError(f"recommend for profile {recommend.profile} has no priority")
        if best is None:
            best = recommend.priority
        if recommend.priority == best:
            names.add(recommend.profile)
    return names


def recommended_profiles(config_list: PtpConfigList, node: Node) -> list[PtpProfile]:
    """The profiles recommended for ``node``, sorted by name."""
    names = recommended_profile_names(config_list, node)
    log.debug("recommended ptp profiles names are %s for node: %s", sorted(names), node.name)
    profiles = [
        profile
        for config in config_list.items
        for profile in config.spec.profile
        if profile.name is not None and profile.name in names
    ]
    if len(profiles) != len(names):
        raise RecommendError("failed to find all the profiles")
    profiles.sort(key=lambda profile: profile.name)
    log.info("ptp profiles to be updated for node: %s", node.name)
    for profile in profiles:
        log.info(
            "profile %s: interface=%s ptp4lOpts=%s phc2sysOpts=%s schedulingPolicy=%s schedulingPriority=%s",
            profile.name,
            profile.interface,
            profile.ptp4l_opts,
            profile.phc2sys_opts,
            profile.ptp_scheduling_policy,
            profile.ptp_scheduling_priority,
        )
    return profiles