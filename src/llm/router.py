"""
Model Roles & Routing

Each research phase asks for a ROLE, never a vendor. The router maps
roles to concrete provider/model handles:

- STRATEGIST: plans searches, writes USPs and SEO recommendations
- ANALYST: turns raw research into a structured profile
- RESEARCHER: online search model that gathers raw facts
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from src.utils.config import Settings, get_settings


class ModelRole(str, Enum):
    STRATEGIST = "strategist"
    ANALYST = "analyst"
    RESEARCHER = "researcher"


class ModelProvider(str, Enum):
    ANTHROPIC = "anthropic"
    PERPLEXITY = "perplexity"


@dataclass(frozen=True)
class ModelHandle:
    """A concrete model bound to a role."""
    role: ModelRole
    provider: ModelProvider
    model: str
    default_temperature: float = 0.5


# Per-role sampling temperatures
DEFAULT_TEMPERATURES = {
    ModelRole.STRATEGIST: 0.7,
    ModelRole.ANALYST: 0.4,
    ModelRole.RESEARCHER: 0.5,
}


class ModelRouter:
    """
    Role -> model handle mapping.

    Usage:
        router = ModelRouter.from_settings()
        handle = router.resolve(ModelRole.ANALYST)
    """

    def __init__(self, handles: Dict[ModelRole, ModelHandle]):
        missing = [role.value for role in ModelRole if role not in handles]
        if missing:
            raise ValueError(f"No model configured for roles: {', '.join(missing)}")
        self._handles = dict(handles)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ModelRouter":
        settings = settings or get_settings()
        return cls({
            ModelRole.STRATEGIST: ModelHandle(
                role=ModelRole.STRATEGIST,
                provider=ModelProvider.ANTHROPIC,
                model=settings.STRATEGIST_MODEL,
                default_temperature=DEFAULT_TEMPERATURES[ModelRole.STRATEGIST],
            ),
            ModelRole.ANALYST: ModelHandle(
                role=ModelRole.ANALYST,
                provider=ModelProvider.ANTHROPIC,
                model=settings.ANALYST_MODEL,
                default_temperature=DEFAULT_TEMPERATURES[ModelRole.ANALYST],
            ),
            ModelRole.RESEARCHER: ModelHandle(
                role=ModelRole.RESEARCHER,
                provider=ModelProvider.PERPLEXITY,
                model=settings.RESEARCHER_MODEL,
                default_temperature=DEFAULT_TEMPERATURES[ModelRole.RESEARCHER],
            ),
        })

    def resolve(self, role: ModelRole) -> ModelHandle:
        return self._handles[ModelRole(role)]

    def describe(self) -> Dict[str, str]:
        """role -> "provider/model", for logging."""
        return {
            role.value: f"{handle.provider.value}/{handle.model}"
            for role, handle in self._handles.items()
        }
