"""Model profiles a caller can request for an analysis."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class ModelProfile:
    id: str
    name: str
    description: str
    hf_model: str

    def public_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name, "description": self.description}


DEFAULT_PROFILE = "spanish"

PROFILES: Dict[str, ModelProfile] = {
    "spanish": ModelProfile(
        id="spanish",
        name="Análisis en Español",
        description="Optimizado para español",
        hf_model="pysentimiento/robertuito-sentiment-analysis",
    ),
    "multilingual": ModelProfile(
        id="multilingual",
        name="Multilingüe",
        description="Soporta múltiples idiomas",
        hf_model="lxyuan/distilbert-base-multilingual-cased-sentiments-student",
    ),
    "english": ModelProfile(
        id="english",
        name="Inglés",
        description="Optimizado para inglés",
        hf_model="cardiffnlp/twitter-roberta-base-sentiment-latest",
    ),
}


def resolve_profile(profile_id: str | None) -> ModelProfile:
    """Return the requested profile, or the Spanish one when unknown."""
    key = (profile_id or "").strip().lower() if isinstance(profile_id, str) else ""
    return PROFILES.get(key, PROFILES[DEFAULT_PROFILE])


def list_profiles() -> List[Dict[str, str]]:
    return [profile.public_dict() for profile in PROFILES.values()]


__all__ = ["DEFAULT_PROFILE", "ModelProfile", "PROFILES", "list_profiles", "resolve_profile"]
