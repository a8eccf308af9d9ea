"""Domain definition exports."""

from .campaign_def import (
    BranchDef,
    CampaignQuestDef,
    Consequence,
    FailureConditionDef,
    RelationshipConsequence,
    RewardConsequence,
    UnlockLocationConsequence,
    UnlockQuestConsequence,
)

__all__ = [
    "BranchDef",
    "CampaignQuestDef",
    "Consequence",
    "FailureConditionDef",
    "RelationshipConsequence",
    "RewardConsequence",
    "UnlockLocationConsequence",
    "UnlockQuestConsequence",
]
