"""Token search over the merged registry."""

from subagents_server.registry.types import Agent, SearchOptions


def _searchable_text(agent: Agent) -> str:
    return " ".join(
        [agent.name, agent.description, *agent.tags, *agent.keywords]
    ).lower()


def search(agents: list[Agent], query: str, options: SearchOptions) -> list[Agent]:
    """Filter merged records by query tokens, category and tags.

    Every whitespace-separated token of ``query`` must occur
    (case-insensitively) in the agent's name, description, tags or keywords.
    Results keep registry order and are capped at ``options.limit``.

    Args:
        agents: Merged registry records
        query: Free-text query; an empty query matches everything
        options: Category, tag and limit constraints

    Returns:
        Matching agents
    """
    tokens = query.lower().split()
    matches: list[Agent] = []

    for agent in agents:
        if len(matches) >= options.limit:
            break

        if options.category is not None and agent.category != options.category:
            continue

        if options.tags and options.tags.isdisjoint(agent.tags):
            continue

        text = _searchable_text(agent)
        if all(token in text for token in tokens):
            matches.append(agent)

    return matches
