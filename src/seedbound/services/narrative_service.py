"""Optional flavour-text collaborator with a procedural fallback."""
from __future__ import annotations

from typing import Callable, Dict, Literal, Mapping, Tuple

from structlog import get_logger

from seedbound.core.rng import RNG

logger = get_logger(__name__)

NarrativeKind = Literal["scene", "dialogue", "combat", "item", "quest", "thought"]
TextGenerator = Callable[[str], str]

FALLBACK_TEMPLATES: Dict[NarrativeKind, Tuple[str, ...]] = {
    "scene": (
        "The shadows stretch long across {location}.",
        "A damp, rotten smell drifts through {location}.",
        "An uneasy silence hangs over {location}.",
        "The wind howls through {location}.",
    ),
    "dialogue": (
        '{npc} eyes you warily. "What do you want?"',
        '{npc} lowers their voice. "Not here. Too many ears."',
        '{npc} shrugs. "I have heard stranger tales."',
    ),
    "combat": (
        "{enemy} circles you, looking for an opening.",
        "The clash of steel rings out as you face {enemy}.",
        "Neither side gives an inch.",
    ),
    "item": (
        "You find {item} half buried in the dirt.",
        "Something glints nearby: {item}.",
        "Among the debris you spot {item}.",
    ),
    "quest": (
        "Your task in {quest} moves one step closer to its end.",
        "New leads surface for {quest}.",
        "The path ahead for {quest} grows clearer.",
    ),
    "thought": (
        "Every wound reminds me that I am mortal.",
        "I still have strength to keep going.",
        "This adventure is only beginning.",
    ),
}

_CONTEXT_DEFAULTS: Dict[str, str] = {
    "location": "this place",
    "npc": "The stranger",
    "enemy": "Your foe",
    "item": "something useful",
    "quest": "your quest",
}


class NarrativeService:
    """Queries an optional text generator for cosmetic strings.

    The generator can be missing, disabled or broken; every call still returns text.
    Fallback selection uses a private RNG seeded from the prompt so cosmetic text never
    advances the session RNG.
    """

    def __init__(self, generator: TextGenerator | None = None, enabled: bool = True) -> None:
        self._generator = generator
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled and self._generator is not None

    def generate(
        self,
        kind: NarrativeKind,
        prompt: str,
        context: Mapping[str, str] | None = None,
    ) -> str:
        if self.enabled:
            assert self._generator is not None
            try:
                text = self._generator(prompt)
            except Exception as exc:
                logger.warning("Narrative generator failed", kind=kind, error=str(exc), exc_info=True)
            else:
                if isinstance(text, str) and text.strip():
                    return text.strip()
                logger.warning("Narrative generator returned no text", kind=kind)
        return self.fallback(kind, prompt, context)

    @staticmethod
    def fallback(kind: NarrativeKind, prompt: str, context: Mapping[str, str] | None = None) -> str:
        templates = FALLBACK_TEMPLATES.get(kind, FALLBACK_TEMPLATES["scene"])
        template = RNG(f"{kind}:{prompt}").pick(templates)
        values = dict(_CONTEXT_DEFAULTS)
        if context:
            values.update({key: str(value) for key, value in context.items()})
        return template.format_map(values)
