# app/engine/scorer.py

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Sequence
import logging

from app.schemas.quiz import MAX_SCORE, QuizConfig, ReferenceProfile

logger = logging.getLogger(__name__)


class NoProfilesAvailableError(LookupError):
    """Raised when there is no reference profile to match against."""

    def __init__(self, message: str = "No delegates available for matching."):
        super().__init__(message)


@dataclass(frozen=True)
class MatchResult:
    profile: ReferenceProfile
    similarity: int


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, 3.5 -> 4)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class AlignmentScorer:
    """
    DETERMINISTIC ALIGNMENT SCORING ENGINE.

    Two steps, both pure:
    1. Aggregate per-question answers (1-5) into one rounded mean per category
    2. Match the aggregated vector to the closest reference profile

    Similarity(u, r) = sum over categories of (5 - |u[i] - r[i]|).
    Higher is better; the maximum is 5 * category count.
    """

    def __init__(self, config: QuizConfig):
        self.config = config
        self.categories: List[str] = config.categories
        self.profiles: List[ReferenceProfile] = list(config.profiles)

        # question index -> category index
        category_index = {c: i for i, c in enumerate(self.categories)}
        self._question_categories = [
            category_index[q.category] for q in config.questions
        ]

    @property
    def question_count(self) -> int:
        return len(self._question_categories)

    @property
    def max_similarity(self) -> int:
        return MAX_SCORE * len(self.categories)

    def aggregate_scores(self, answers: Sequence[int]) -> List[int]:
        """
        Reduce an answer vector to one rounded mean per category.

        Args:
            answers: One score per question, in question-bank order

        Returns:
            List of integers, one per category, in category order
        """
        if len(answers) != self.question_count:
            raise ValueError(
                f"Expected {self.question_count} answers, got {len(answers)}"
            )

        totals = [0] * len(self.categories)
        counts = [0] * len(self.categories)

        for category_idx, score in zip(self._question_categories, answers):
            totals[category_idx] += score
            counts[category_idx] += 1

        return [
            round_half_up(total / count)
            for total, count in zip(totals, counts)
        ]

    @staticmethod
    def similarity(user_scores: Sequence[int], reference_scores: Sequence[int]) -> int:
        if len(user_scores) != len(reference_scores):
            raise ValueError(
                f"Score vectors differ in length: "
                f"{len(user_scores)} vs {len(reference_scores)}"
            )

        return sum(
            MAX_SCORE - abs(user - ref)
            for user, ref in zip(user_scores, reference_scores)
        )

    def find_best_match(
        self,
        aggregated: Sequence[int],
        profiles: Optional[Sequence[ReferenceProfile]] = None,
    ) -> MatchResult:
        """
        Select the profile with the highest similarity.

        Profiles are scanned left to right and only a strictly greater
        similarity replaces the current best, so ties go to the earliest
        profile.

        Args:
            aggregated: Per-category user scores
            profiles: Candidates to match; defaults to the configured profiles

        Returns:
            MatchResult with the winning profile and its similarity

        Raises:
            NoProfilesAvailableError: if there are no profiles
        """
        if profiles is None:
            profiles = self.profiles

        if not profiles:
            logger.warning("Match requested with an empty profile set")
            raise NoProfilesAvailableError()

        best: Optional[MatchResult] = None
        for profile in profiles:
            score = self.similarity(aggregated, profile.scores)
            if best is None or score > best.similarity:
                best = MatchResult(profile=profile, similarity=score)

        logger.debug(
            "Best match %s (similarity %d/%d)",
            best.profile.name, best.similarity, self.max_similarity,
        )
        return best


def create_alignment_scorer(config: QuizConfig) -> AlignmentScorer:
    """Factory function to create the scoring engine for a quiz."""
    return AlignmentScorer(config)
