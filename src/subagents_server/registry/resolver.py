"""Merge the three tiers into one logical registry.

Precedence is local > global > bundled. Resolution is a pure function of
the three tier listings: nothing is cached between calls, and the input
records are never modified.
"""

import logging
from dataclasses import replace
from functools import cmp_to_key

from subagents_server.registry.types import Agent, ListFilters, Tier
from subagents_server.registry.validator import compare_versions

logger = logging.getLogger(__name__)


def _index_tier(agents: list[Agent]) -> dict[str, Agent]:
    """Index one tier by name; the first record for a name wins."""
    index: dict[str, Agent] = {}
    for agent in agents:
        if agent.name in index:
            logger.warning(
                f"Duplicate agent '{agent.name}' in {agent.tier.value} tier "
                f"at {agent.path}, keeping {index[agent.name].path}"
            )
            continue
        index[agent.name] = agent
    return index


def _newest_update(chosen: Agent, lower: list[Agent]) -> str | None:
    """Greatest version among lower tiers strictly newer than chosen."""
    best: str | None = None
    for candidate in lower:
        if compare_versions(candidate.version, chosen.version) <= 0:
            continue
        if best is None or compare_versions(candidate.version, best) > 0:
            best = candidate.version
    return best


def resolve(
    bundled: list[Agent],
    global_: list[Agent],
    local: list[Agent],
) -> list[Agent]:
    """Resolve tier listings into one record per agent name.

    Bundled records are inserted first, then overlaid by global and then
    local records with the same name. The chosen record gets
    ``available_update`` when any lower-precedence tier holds a strictly
    newer version.

    Args:
        bundled: Valid records from the bundled tier
        global_: Valid records from the global tier
        local: Valid records from the local tier

    Returns:
        Merged records, ordered by first appearance across the tiers
    """
    tiers = [
        (Tier.BUNDLED, _index_tier(bundled)),
        (Tier.GLOBAL, _index_tier(global_)),
        (Tier.LOCAL, _index_tier(local)),
    ]

    merged: dict[str, list[tuple[Tier, Agent]]] = {}
    for tier, index in tiers:
        for name, agent in index.items():
            merged.setdefault(name, []).append((tier, agent))

    resolved: list[Agent] = []
    for copies in merged.values():
        tier, chosen = copies[-1]
        lower = [agent for _, agent in copies[:-1]]
        installed = tier.installable
        resolved.append(
            replace(
                chosen,
                tier=tier,
                installed=installed,
                installed_version=chosen.version if installed else None,
                available_update=_newest_update(chosen, lower),
            )
        )
    return resolved


def lower_tier_candidates(
    name: str,
    tier: Tier,
    bundled: list[Agent],
    global_: list[Agent],
    local: list[Agent],
) -> list[Agent]:
    """Copies of an agent held by tiers with lower precedence than ``tier``.

    Returned highest version first.
    """
    candidates = []
    listings = ((Tier.BUNDLED, bundled), (Tier.GLOBAL, global_), (Tier.LOCAL, local))
    for listing_tier, agents in listings:
        if listing_tier.precedence >= tier.precedence:
            continue
        for agent in agents:
            if agent.name == name:
                candidates.append(replace(agent, tier=listing_tier))
                break

    return sorted(
        candidates,
        key=cmp_to_key(lambda a, b: compare_versions(a.version, b.version)),
        reverse=True,
    )


def filter_agents(agents: list[Agent], filters: ListFilters) -> list[Agent]:
    """Apply list filters to merged records without reordering them."""
    filtered = agents

    if filters.category is not None:
        filtered = [a for a in filtered if a.category == filters.category]

    if filters.installed is not None:
        filtered = [a for a in filtered if a.installed == filters.installed]

    if filters.available is not None:
        filtered = [a for a in filtered if (not a.installed) == filters.available]

    return filtered
