"""Serialization helpers for session snapshots."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence

from structlog import get_logger

from seedbound.data.errors import DataValidationError
from seedbound.domain.defs import CampaignQuestDef
from seedbound.services.errors import FactoryError, SaveLoadError
from seedbound.services.factories import create_player_from_payload, player_to_payload
from seedbound.services.game_session import GameSession
from seedbound.services.narrative_service import NarrativeService

logger = get_logger(__name__)

SavePayload = Dict[str, Any]


class SaveService:
    """Converts a session to/from a validated, versioned plain payload.

    File, storage and compression concerns stay with the caller.
    """

    SAVE_VERSION = 1

    def serialize(self, session: GameSession) -> SavePayload:
        """Return a JSON-serializable snapshot of the session."""
        state = session.state
        return {
            "save_version": self.SAVE_VERSION,
            "seed": state.seed,
            "rng": {"state": state.rng.get_state()},
            "player": player_to_payload(state.player),
            "quests": session.quests.serialize(),
            "world": {
                "unlocked_locations": list(state.unlocked_locations),
                "relationships": dict(state.relationships),
            },
        }

    def deserialize(
        self,
        payload: Mapping[str, Any],
        *,
        campaign_quests: Sequence[CampaignQuestDef] = (),
        narrative: NarrativeService | None = None,
    ) -> GameSession:
        """Rebuild a session; campaign definitions are registered before quests are restored."""
        try:
            return self._deserialize(payload, campaign_quests, narrative)
        except SaveLoadError as exc:
            logger.warning("Save payload rejected", error=str(exc))
            raise

    def _deserialize(
        self,
        payload: Mapping[str, Any],
        campaign_quests: Sequence[CampaignQuestDef],
        narrative: NarrativeService | None,
    ) -> GameSession:
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")
        if payload.get("save_version") != self.SAVE_VERSION:
            raise SaveLoadError("Save format is not supported by this version.")

        seed = payload.get("seed")
        if isinstance(seed, bool) or not isinstance(seed, (str, int)):
            raise SaveLoadError("seed must be a string or an integer.")
        rng_payload = self._require_dict(payload.get("rng"), "rng")
        rng_state = self._require_int(rng_payload.get("state"), "rng.state")

        try:
            player = create_player_from_payload(self._require_dict(payload.get("player"), "player"))
        except FactoryError as exc:
            raise SaveLoadError(f"Invalid player: {exc}") from exc

        session = GameSession(player, seed=seed, narrative=narrative)
        try:
            session.rng.set_state(rng_state)
        except ValueError as exc:
            raise SaveLoadError(f"Invalid RNG state: {exc}") from exc

        for definition in campaign_quests:
            session.quests.register_campaign_quest(definition)
        try:
            session.quests.deserialize(self._require_dict(payload.get("quests"), "quests"))
        except DataValidationError as exc:
            raise SaveLoadError(f"Invalid quest state: {exc}") from exc

        world = payload.get("world")
        if world is not None:
            world_map = self._require_dict(world, "world")
            session.state.unlocked_locations = self._coerce_str_list(
                world_map.get("unlocked_locations", []), "world.unlocked_locations"
            )
            session.state.relationships = self._coerce_int_dict(
                world_map.get("relationships", {}), "world.relationships"
            )
        return session

    @staticmethod
    def _require_dict(value: Any, context: str) -> Mapping[str, Any]:
        if not isinstance(value, Mapping):
            raise SaveLoadError(f"{context} must be an object.")
        return value

    @staticmethod
    def _require_int(value: Any, context: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise SaveLoadError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _coerce_str_list(value: Any, context: str) -> List[str]:
        if not isinstance(value, list) or not all(isinstance(entry, str) for entry in value):
            raise SaveLoadError(f"{context} must be a list of strings.")
        return list(value)

    def _coerce_int_dict(self, value: Any, context: str) -> Dict[str, int]:
        mapping = self._require_dict(value, context)
        result: Dict[str, int] = {}
        for key, entry in mapping.items():
            if not isinstance(key, str):
                raise SaveLoadError(f"{context} keys must be strings.")
            result[key] = self._require_int(entry, f"{context}.{key}")
        return result
