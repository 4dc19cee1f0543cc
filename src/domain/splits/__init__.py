"""Split planning and the smart split service facade."""

from .planner import (
    execute_apply,
    filter_by_genres,
    group_by_genre,
    plan_apply,
    plan_create_from_genres,
    plan_preview,
    prune_instructions,
    suggest_mix_name,
    suggest_split_name,
)
from .service import SmartSplitService

__all__ = [
    "execute_apply",
    "filter_by_genres",
    "group_by_genre",
    "plan_apply",
    "plan_create_from_genres",
    "plan_preview",
    "prune_instructions",
    "suggest_mix_name",
    "suggest_split_name",
    "SmartSplitService",
]
