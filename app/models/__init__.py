from .journal_entry import JournalEntry
from .evaluation import JournalEvaluation
from .game_stats import GameStatsRecord, UnlockedAchievement
from .counter import UserCounter

__all__ = [
    "JournalEntry",
    "JournalEvaluation",
    "GameStatsRecord",
    "UnlockedAchievement",
    "UserCounter",
]
