"""
Hospital detail expansion (accordion).
At most one hospital panel is open across the rendered list.
"""

from typing import Optional


class DetailExpansionController:
    """Single-expansion toggle keyed by hospital rank."""

    def __init__(self, expanded_rank: Optional[int] = None):
        self.expanded_rank = expanded_rank

    def toggle(self, rank: int) -> Optional[int]:
        """
        Collapse `rank` if it is open, otherwise open it (closing any other).

        Returns:
            The expanded rank after the toggle
        """
        self.expanded_rank = None if self.expanded_rank == rank else rank
        return self.expanded_rank

    def is_expanded(self, rank: int) -> bool:
        return self.expanded_rank == rank

    def reset(self) -> None:
        # Rank identity is scoped to one result set
        self.expanded_rank = None
