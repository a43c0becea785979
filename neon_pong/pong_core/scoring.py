"""
Scoring System
==============

Score, combo and high score bookkeeping for scoring-wall bounces.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from neon_pong.pong_core.config_loader import GameConfig, get_config
from neon_pong.pong_core.persistence import HighScoreStore
from neon_pong.pong_core.world import GameState


@dataclass
class ScoreEvent:
    """Record of a scoring-wall bounce."""
    score: int
    combo: int
    is_milestone: bool        # combo is a multiple of the milestone interval
    is_new_high_score: bool   # score beat the previous high score

    @property
    def milestone_text(self) -> str:
        return f"{self.combo}X COMBO!"

    def __repr__(self) -> str:
        return f"ScoreEvent(score={self.score}, combo={self.combo})"


class ScoreTracker:
    """
    Applies scoring rules to a GameState.

    - Each scoring bounce adds 1 to score and combo.
    - max_combo and high_score are running maxima.
    - Every combo_milestone-th combo is a milestone.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        high_scores: Optional[HighScoreStore] = None
    ):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
            high_scores: Persistent high score slot. In-memory only if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._milestone = config.floating_text.combo_milestone
        if high_scores is None:
            high_scores = HighScoreStore(None, config.persistence.high_score_key)
        self._high_scores = high_scores

    @property
    def high_scores(self) -> HighScoreStore:
        return self._high_scores

    def load_high_score(self, state: GameState) -> int:
        """Merge the persisted high score into the state."""
        state.high_score = max(state.high_score, self._high_scores.load())
        return state.high_score

    def register_wall_bounce(self, state: GameState) -> ScoreEvent:
        """Apply one scoring-wall bounce and return the resulting event."""
        previous_high = state.high_score

        state.score += 1
        state.combo += 1
        state.max_combo = max(state.max_combo, state.combo)
        state.high_score = max(state.high_score, state.score)

        return ScoreEvent(
            score=state.score,
            combo=state.combo,
            is_milestone=state.combo % self._milestone == 0,
            is_new_high_score=state.score > previous_high
        )

    def persist(self, event: ScoreEvent) -> bool:
        """Write the score of a new-high-score event to the store."""
        if not event.is_new_high_score:
            return False
        return self._high_scores.save_if_higher(event.score)

    @staticmethod
    def is_new_high_score(state: GameState) -> bool:
        """True when the current score is the high score and non-zero."""
        return state.score > 0 and state.score == state.high_score
