"""
Tests for the alignment scoring engine: aggregation and matching.
"""
import itertools

import pytest

from app.engine.scorer import (
    AlignmentScorer,
    NoProfilesAvailableError,
    create_alignment_scorer,
    round_half_up,
)
from app.schemas.quiz import ReferenceProfile


@pytest.fixture
def scorer(small_config):
    return create_alignment_scorer(small_config)


def test_example_aggregation_and_match(scorer):
    aggregated = scorer.aggregate_scores([5, 5, 1, 1])
    assert aggregated == [5, 1]

    match = scorer.find_best_match(aggregated)
    assert match.profile.name == "A"
    assert match.similarity == 10
    assert match.similarity == scorer.max_similarity


def test_aggregation_uses_question_categories(scorer):
    assert scorer.aggregate_scores([1, 3, 4, 4]) == [2, 4]


@pytest.mark.parametrize("value,expected", [
    (2.5, 3),
    (3.5, 4),
    (1.5, 2),
    (2.4, 2),
    (4.25, 4),
    (4.75, 5),
])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_halves_round_up_in_aggregation(scorer):
    # means of 2.5 and 4.5
    assert scorer.aggregate_scores([2, 3, 4, 5]) == [3, 5]


def test_aggregated_scores_stay_in_range(scorer):
    for answers in itertools.product(range(1, 6), repeat=4):
        aggregated = scorer.aggregate_scores(list(answers))
        assert len(aggregated) == len(scorer.categories)
        assert all(1 <= score <= 5 for score in aggregated)


def test_aggregation_is_pure(scorer):
    answers = [4, 2, 3, 5]
    first = scorer.aggregate_scores(answers)
    assert scorer.aggregate_scores(answers) == first
    assert answers == [4, 2, 3, 5]


def test_unanswered_questions_pull_mean_down(scorer):
    assert scorer.aggregate_scores([5, 0, 0, 0]) == [3, 0]


def test_aggregation_rejects_wrong_length(scorer):
    with pytest.raises(ValueError):
        scorer.aggregate_scores([5, 5, 1])


def test_bundled_config_aggregation(bundled_config):
    scorer = AlignmentScorer(bundled_config)
    aggregated = scorer.aggregate_scores([3] * scorer.question_count)
    assert aggregated == [3] * 6


def test_similarity_of_identical_vectors_is_maximum(scorer):
    for vector in itertools.product(range(1, 6), repeat=2):
        assert scorer.similarity(vector, vector) == scorer.max_similarity


def test_similarity_sums_per_category_agreement():
    assert AlignmentScorer.similarity([5, 1, 3], [1, 1, 4]) == (5 - 4) + 5 + (5 - 1)


def test_similarity_rejects_mismatched_lengths():
    with pytest.raises(ValueError):
        AlignmentScorer.similarity([1, 2], [1, 2, 3])


def test_ties_go_to_first_profile(scorer):
    profiles = [
        ReferenceProfile(name="First", scores=[4, 2]),
        ReferenceProfile(name="Second", scores=[2, 4]),
    ]
    # [3, 3] is equally far from both
    match = scorer.find_best_match([3, 3], profiles)
    assert match.profile.name == "First"

    match = scorer.find_best_match([3, 3], list(reversed(profiles)))
    assert match.profile.name == "Second"


def test_later_strictly_better_profile_wins(scorer):
    profiles = [
        ReferenceProfile(name="Far", scores=[1, 1]),
        ReferenceProfile(name="Near", scores=[4, 4]),
    ]
    match = scorer.find_best_match([5, 5], profiles)
    assert match.profile.name == "Near"
    assert match.similarity == 8


def test_empty_profiles_raise(scorer):
    with pytest.raises(NoProfilesAvailableError):
        scorer.find_best_match([3, 3], [])


def test_single_profile_always_matches_even_when_far(scorer):
    profiles = [ReferenceProfile(name="Only", scores=[1, 1])]
    match = scorer.find_best_match([5, 5], profiles)
    assert match.profile.name == "Only"
    assert match.similarity == 2
