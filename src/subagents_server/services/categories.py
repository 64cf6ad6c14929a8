"""Static category catalog used for browsing.

The catalog is maintained separately from the agent files. An agent's own
``category`` field is what resolution uses; the catalog is only an index
and the two can disagree. ``CategoryCatalog.drift`` reports disagreements
without resolving them.
"""

from dataclasses import dataclass, field

from subagents_server.registry.types import Agent


@dataclass(frozen=True)
class Category:
    """A browsing category and the agent names it is expected to hold."""

    name: str
    description: str
    agents: tuple[str, ...] = ()


@dataclass
class CategoryDrift:
    """Disagreements between the catalog and resolved agents.

    Attributes:
        mismatched: agent name -> (catalog category, declared category)
        uncatalogued: resolved agents that no catalog entry lists
    """

    mismatched: dict[str, tuple[str, str]] = field(default_factory=dict)
    uncatalogued: list[str] = field(default_factory=list)


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(
        "generic",
        "General-purpose software development roles",
        (
            "senior-software-engineer",
            "technical-project-manager",
            "qa-automation-tester",
            "security-specialist",
            "ui-ux-designer",
        ),
    ),
    Category(
        "frontend",
        "Frontend development specialists for modern web frameworks",
        (
            "nextjs-developer",
            "react-component-builder",
            "vue-specialist",
            "angular-architect",
            "svelte-developer",
        ),
    ),
    Category(
        "backend",
        "Backend development experts for server-side frameworks",
        (
            "django-developer",
            "fastapi-builder",
            "express-specialist",
            "spring-architect",
            "rails-developer",
            "nodejs-developer",
            "php-developer",
            "javascript-developer",
            "java-developer",
            "python-developer",
        ),
    ),
    Category(
        "cloud-devops",
        "Cloud infrastructure and DevOps automation specialists",
        ("aws-architect", "docker-specialist", "kubernetes-operator", "terraform-engineer"),
    ),
    Category(
        "database",
        "Database design and optimization specialists",
        ("postgres-dba", "mongodb-specialist", "redis-expert", "mysql-optimizer"),
    ),
    Category(
        "ai-ml",
        "AI and machine learning development experts",
        (
            "pytorch-researcher",
            "tensorflow-engineer",
            "huggingface-specialist",
            "langchain-developer",
        ),
    ),
    Category(
        "automation",
        "Workflow automation and integration experts",
        ("n8n-workflow-builder", "zapier-integrator", "make-automation-expert"),
    ),
    Category(
        "test",
        "Testing and quality assurance specialists",
        (
            "test-automation-engineer",
            "performance-test-engineer",
            "security-test-specialist",
        ),
    ),
    Category(
        "mobile",
        "Mobile application development experts",
        ("ios-developer", "android-developer", "react-native-developer", "flutter-developer"),
    ),
)


class CategoryCatalog:
    """Lookup over the static category index."""

    def __init__(self, categories: tuple[Category, ...] = DEFAULT_CATEGORIES):
        self._categories = {c.name: c for c in categories}

    def list_categories(self) -> list[Category]:
        return list(self._categories.values())

    def get(self, name: str) -> Category | None:
        return self._categories.get(name)

    def exists(self, name: str) -> bool:
        return name in self._categories

    def agents_in(self, name: str) -> list[str]:
        category = self.get(name)
        return list(category.agents) if category else []

    def category_of(self, agent_name: str) -> str | None:
        """Catalog category listing an agent name, if any."""
        for category in self._categories.values():
            if agent_name in category.agents:
                return category.name
        return None

    def all_agent_names(self) -> list[str]:
        return [name for c in self._categories.values() for name in c.agents]

    def drift(self, agents: list[Agent]) -> CategoryDrift:
        """Compare the catalog against resolved agents.

        Args:
            agents: Merged registry records

        Returns:
            Agents whose declared category differs from the catalog, and
            agents the catalog does not list at all
        """
        report = CategoryDrift()
        for agent in agents:
            listed = self.category_of(agent.name)
            if listed is None:
                report.uncatalogued.append(agent.name)
            elif listed != agent.category:
                report.mismatched[agent.name] = (listed, agent.category)
        return report
