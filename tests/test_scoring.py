"""Tests for scoring module."""

import pytest

from brandpulse.core.models import Engagement, Sentiment
from brandpulse.core.scoring import (
    average_sentiment,
    brand_composite_score,
    competitive_gaps,
    credibility_score,
    market_share,
    overall_visibility,
    percentage_shares,
    rank_brands,
    round_half_up,
    share_of_voice,
    visibility_score,
)
from conftest import make_result


class TestVisibilityScore:

    def test_positive_single_mention(self):
        # 1 mention (10) + no context words + positive bonus (20)
        assert visibility_score("Tesla is excellent and innovative.", "Tesla") == 30

    def test_mentions_and_context_are_capped(self):
        text = ("Tesla " * 10) + "market industry sector business company brand product service " * 3
        score = visibility_score(text, "Tesla")
        assert score == 50 + 16 + 10

    def test_negative_sentiment_adds_nothing(self):
        assert visibility_score("Tesla is terrible.", "Tesla") == 10

    @pytest.mark.parametrize("text,brand", [("", "Tesla"), ("Tesla", ""), ("", "")])
    def test_empty_input_within_bounds(self, text, brand):
        assert 0 <= visibility_score(text, brand) <= 100


class TestCredibilityScore:

    def test_known_source_with_engagement(self):
        assert credibility_score("", "hackernews", Engagement(upvotes=60)) == pytest.approx(0.84)

    def test_unknown_source(self):
        assert credibility_score("short", "somewhere") == pytest.approx(0.65)

    def test_clamped_to_one(self):
        score = credibility_score("x" * 250, "news", Engagement(upvotes=500))
        assert score == 1.0

    def test_custom_weights(self):
        assert credibility_score("", "reddit", weights={"reddit": 0.0}) == pytest.approx(0.5)

    def test_empty_input_within_bounds(self):
        assert 0 < credibility_score("", "") <= 1


class TestAggregates:

    def test_empty_results(self):
        assert overall_visibility([]) == 0
        assert average_sentiment([]) == Sentiment.NEUTRAL

    def test_overall_visibility_rounds_half_up(self):
        results = [make_result(score=50), make_result(score=51)]
        assert overall_visibility(results) == 51

    def test_average_sentiment_majority(self):
        votes = [Sentiment.POSITIVE, Sentiment.POSITIVE, Sentiment.NEGATIVE]
        assert average_sentiment(votes) == Sentiment.POSITIVE

    def test_average_sentiment_tie_is_neutral(self):
        assert average_sentiment([Sentiment.POSITIVE, Sentiment.NEGATIVE]) == Sentiment.NEUTRAL

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2


class TestCompetitiveScores:

    def test_composite_score(self):
        # visibility 40 + positive 20 + min(3*5, 30) + success 10
        result = make_result(score=40, sentiment=Sentiment.POSITIVE, mentions=3)
        assert brand_composite_score([result]) == 85

    def test_degraded_results_score_zero_plus_neutral(self):
        result = make_result(score=0, mentions=0, succeeded=False)
        assert brand_composite_score([result]) == 10
        assert brand_composite_score([]) == 0

    def test_shares_sum_to_100(self):
        scores = {"Tesla": 1, "Ford": 1, "GM": 1}
        shares = percentage_shares(scores)
        assert sum(shares.values()) == 100
        assert shares["Tesla"] == 34

    @pytest.mark.parametrize("scores", [
        {"A": 70, "B": 20, "C": 10},
        {"A": 33, "B": 33, "C": 33, "D": 1},
        {"A": 7, "B": 13},
        {"A": 1, "B": 0, "C": 0},
    ])
    def test_share_of_voice_sums_to_100(self, scores):
        sov = share_of_voice(scores, "A")
        assert sov.primary_brand + sum(c.share for c in sov.competitors) == 100

    def test_zero_total_gives_zero_shares(self):
        scores = {"Tesla": 0, "Ford": 0, "GM": 0}
        sov = share_of_voice(scores, "Tesla")
        assert market_share(scores, "Tesla") == 0
        assert sov.primary_brand == 0
        assert [c.share for c in sov.competitors] == [0, 0]
        assert all(c.change == "unknown" for c in sov.competitors)

    def test_competitors_ranked_from_two(self):
        sov = share_of_voice({"A": 10, "B": 20, "C": 30}, "A")
        assert [(c.name, c.rank) for c in sov.competitors] == [("C", 2), ("B", 3)]

    def test_rank_brands_stable(self):
        assert rank_brands({"A": 5, "B": 9, "C": 5}) == ["B", "A", "C"]


class TestCompetitiveGaps:

    def test_all_gaps_flagged(self):
        primary = [make_result(score=20, mentions=1)]
        competitors = {"Ford": [make_result(score=80, mentions=10)]}
        categories = [g.category for g in competitive_gaps(primary, competitors)]
        assert categories == ["Visibility", "Sentiment", "Mentions", "Innovation", "Differentiation"]

    def test_strong_primary_only_gets_opportunities(self):
        primary = [make_result(score=90, sentiment=Sentiment.POSITIVE, mentions=10)]
        competitors = {"Ford": [make_result(score=50, mentions=2)]}
        categories = [g.category for g in competitive_gaps(primary, competitors)]
        assert categories == ["Innovation", "Differentiation"]
