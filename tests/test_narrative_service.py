from __future__ import annotations

from seedbound.services.narrative_service import FALLBACK_TEMPLATES, NarrativeService


def _failing_generator(prompt: str) -> str:
    raise RuntimeError(f"backend down for {prompt!r}")


def test_generator_text_is_used_when_available() -> None:
    service = NarrativeService(lambda prompt: f"  A tale of {prompt}.  ")

    assert service.generate("scene", "the mill") == "A tale of the mill."


def test_generator_failure_returns_fallback() -> None:
    service = NarrativeService(_failing_generator)

    text = service.generate("dialogue", "greet", {"npc": "Mara"})

    assert text.startswith("Mara")


def test_empty_reply_returns_fallback() -> None:
    service = NarrativeService(lambda prompt: "   ")

    assert service.generate("thought", "rest") in FALLBACK_TEMPLATES["thought"]


def test_disabled_service_never_calls_generator() -> None:
    calls: list[str] = []

    def generator(prompt: str) -> str:
        calls.append(prompt)
        return "generated"

    service = NarrativeService(generator, enabled=False)

    assert service.generate("quest", "update", {"quest": "The Old Mill"}) != "generated"
    assert calls == []
    assert service.enabled is False


def test_fallback_is_stable_per_prompt() -> None:
    first = NarrativeService.fallback("scene", "dark road", {"location": "the road"})
    second = NarrativeService.fallback("scene", "dark road", {"location": "the road"})

    assert first == second
    assert "{" not in first
