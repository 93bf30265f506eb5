"""Library and achievement comparison."""

from playmates.compare.engine import (
    compare_achievements,
    find_common_achievable_games,
    percent_of,
)

__all__ = ["compare_achievements", "find_common_achievable_games", "percent_of"]
