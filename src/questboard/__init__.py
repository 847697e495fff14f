"""QuestBoard: points, ranks and daily discipline for tasks, habits, books, rewards and journaling."""

__version__ = "0.1.0"
