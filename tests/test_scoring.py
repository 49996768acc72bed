"""Unit tests for component scorers, modifiers and composite calculators."""
from decimal import Decimal

import pytest

from trustscore.models import Baseline, BehavioralVector, RiskModelConfig, SignalSet
from trustscore.scoring.behavioral import (
    alignment_from_distance,
    behavioral_alignment,
    behavioral_distance,
    behavioral_risk_score,
)
from trustscore.scoring.components import (
    component_scores,
    dispute_score,
    gap_score,
    reference_score,
    rehire_score,
    tenure_score,
)
from trustscore.scoring.confidence import calculate_confidence, data_completeness_bonus
from trustscore.scoring.fraud import fraud_penalty, fraud_resistance_score
from trustscore.scoring.hiring_confidence import calculate_hiring_confidence
from trustscore.scoring.profile_strength import calculate_profile_strength
from trustscore.scoring.risk_calculator import (
    RISK_MODEL_VERSION,
    WEIGHTED_RISK_MODEL_VERSION,
    calculate_overall_risk,
    calculate_weighted_risk,
)
from trustscore.scoring.team_fit_calculator import calculate_team_fit, structural_alignment
from trustscore.scoring.utils import clamp, safe_number, to_decimal, to_score, weighted_sum

EMPTY = SignalSet(tenure_months=0, reference_total=0, dispute_total=0, gap_months=0, rehire_eligible=False)


class TestUtils:
    """Tests for Decimal helpers."""

    def test_to_decimal_precision(self):
        assert to_decimal(0.12345) == Decimal("0.1235")

    def test_to_score_rounds_half_up(self):
        assert to_score(Decimal("62.5")) == 63
        assert to_score(Decimal("62.49")) == 62

    def test_to_score_clamps(self):
        assert to_score(-4) == 0
        assert to_score(250) == 100

    def test_clamp_bounds(self):
        assert clamp(Decimal("-1")) == Decimal(0)
        assert clamp(Decimal("101")) == Decimal(100)

    def test_safe_number(self):
        assert safe_number("3.5", 0) == 3.5
        assert safe_number("x", 50) == 50
        assert safe_number(True, 7) == 7

    def test_weighted_sum_length_mismatch(self):
        with pytest.raises(ValueError):
            weighted_sum([Decimal(1)], [])


class TestComponentScores:
    """Tests for the five risk components."""

    def test_empty_entity_components(self):
        assert component_scores(EMPTY) == {
            "tenure": 0, "reference": 100, "dispute": 100, "gap": 100, "rehire": 0,
        }

    def test_tenure_caps_at_24_months(self):
        assert tenure_score(SignalSet(tenure_months=12)) == 50
        assert tenure_score(SignalSet(tenure_months=24)) == 100
        assert tenure_score(SignalSet(tenure_months=600)) == 100

    def test_reference_ratio(self):
        assert reference_score(SignalSet(reference_total=4, reference_responded=3)) == 75

    def test_no_requested_references_not_penalized(self):
        assert reference_score(SignalSet(reference_total=0)) == 100

    def test_four_open_disputes_zero(self):
        assert dispute_score(SignalSet(dispute_total=4, dispute_resolved=0)) == 0

    def test_resolved_disputes_still_count_volume(self):
        assert dispute_score(SignalSet(dispute_total=2, dispute_resolved=2)) == 90
        assert dispute_score(SignalSet(dispute_total=2, dispute_resolved=1)) == 65

    def test_gap_penalty(self):
        assert gap_score(SignalSet(tenure_months=20, gap_months=5)) == 75

    def test_gap_penalty_capped_at_80(self):
        assert gap_score(SignalSet(tenure_months=1, gap_months=50)) == 20

    def test_gap_without_tenure(self):
        assert gap_score(SignalSet(tenure_months=0, gap_months=10)) == 100

    def test_rehire_is_binary(self):
        assert rehire_score(SignalSet(rehire_eligible=True)) == 100
        assert rehire_score(SignalSet(rehire_eligible=False)) == 0


class TestFraudPenalty:
    """Tests for the fraud modifier."""

    def test_absent_is_zero(self):
        assert fraud_penalty() == Decimal(0)
        assert fraud_penalty(None, None) == fraud_penalty(0.0)

    def test_continuous_form_capped(self):
        assert fraud_penalty(fraud_score=0.5) == Decimal("7.5")
        assert fraud_penalty(fraud_score=1.0) == Decimal(15)
        assert fraud_penalty(fraud_score=2.0) == Decimal(15)

    def test_discrete_form_capped(self):
        assert fraud_penalty(fraud_count=2) == Decimal(10)
        assert fraud_penalty(fraud_count=9) == Decimal(15)

    def test_score_wins_over_count(self):
        assert fraud_penalty(fraud_score=0.0, fraud_count=3) == Decimal(0)

    def test_resistance_score(self):
        assert fraud_resistance_score() == Decimal(100)
        assert fraud_resistance_score(fraud_score=1.0) == Decimal(0)


class TestBehavioral:
    """Tests for behavioral distance and risk."""

    def test_identical_profiles_fully_aligned(self):
        baseline = Baseline(industry_key="retail")
        assert behavioral_distance(BehavioralVector(), baseline) == Decimal(0)
        assert behavioral_alignment(BehavioralVector(), baseline) == 100

    def test_deviation_is_symmetric(self):
        baseline = Baseline(industry_key="retail")
        above = BehavioralVector(**{name: 60 for name in BehavioralVector().dimensions()})
        below = BehavioralVector(**{name: 40 for name in BehavioralVector().dimensions()})
        assert behavioral_alignment(above, baseline) == 90
        assert behavioral_alignment(below, baseline) == 90

    def test_maximal_distance(self):
        baseline = Baseline(industry_key="retail", **{n: 0 for n in BehavioralVector().dimensions()})
        vector = BehavioralVector(**{n: 100 for n in BehavioralVector().dimensions()})
        assert behavioral_alignment(vector, baseline) == 0

    def test_alignment_from_large_distance(self):
        assert alignment_from_distance(250) == 0

    def test_risk_neutral_at_baseline(self):
        assert behavioral_risk_score(BehavioralVector(), Baseline(industry_key="retail")) == 50

    def test_risk_is_directional(self):
        baseline = Baseline(industry_key="retail")
        assert behavioral_risk_score(BehavioralVector(conflict_risk=90), baseline) == 70
        assert behavioral_risk_score(BehavioralVector(conflict_risk=10), baseline) == 50

    def test_risk_clamped(self):
        vector = BehavioralVector(conflict_risk=100, reliability=0, tone_stability=0)
        assert behavioral_risk_score(vector, Baseline(industry_key="retail")) == 100


class TestConfidence:
    """Tests for the data-completeness heuristic."""

    def test_no_data(self):
        estimate = calculate_confidence(SignalSet())
        assert estimate.confidence == 0
        assert estimate.sufficient_data is False

    def test_verified_jobs_and_references(self):
        estimate = calculate_confidence(SignalSet(verified_job_count=3, reference_responded=5))
        assert estimate.confidence == 36
        assert estimate.sufficient_data is True

    def test_capped_at_100(self):
        assert calculate_confidence(SignalSet(verified_job_count=50)).confidence == 100

    def test_completeness_bonus(self):
        assert data_completeness_bonus(SignalSet()) == Decimal(0)
        assert data_completeness_bonus(SignalSet(verified_job_count=1)) == Decimal("5")

    def test_explicit_bonus_overrides_default(self):
        assert calculate_confidence(SignalSet(verified_job_count=1), bonus=0).confidence == \
            calculate_confidence(SignalSet(verified_job_count=1)).confidence - 5


class TestOverallRisk:
    """Tests for both risk composites."""

    def test_empty_entity_scores_60(self):
        result = calculate_overall_risk(EMPTY)
        assert result.overall == 60
        assert result.model_version == RISK_MODEL_VERSION
        assert result.sufficient_data is False

    def test_fraud_subtracted_after_weighting(self):
        result = calculate_overall_risk(EMPTY.model_copy(update={"fraud_score": 1.0}))
        assert result.overall == 45
        assert result.fraud_penalty == 15.0

    def test_breakdown_carries_components_and_penalty(self):
        breakdown = calculate_overall_risk(EMPTY).breakdown()
        assert breakdown["reference"] == 100.0
        assert breakdown["fraud_penalty"] == 0.0

    def test_weighted_risk_default_config(self):
        result = calculate_weighted_risk(EMPTY, RiskModelConfig())
        assert result.components["fraud"] == 100
        assert result.overall == 67
        assert result.model_version == WEIGHTED_RISK_MODEL_VERSION

    def test_weighted_risk_fraud_as_resistance(self):
        signals = EMPTY.model_copy(update={"fraud_score": 1.0})
        assert calculate_weighted_risk(signals, RiskModelConfig()).overall == 50

    def test_weighted_risk_normalizes_weights(self):
        signals = SignalSet(tenure_months=24, rehire_eligible=True)
        doubled = RiskModelConfig(**{k: 2.0 for k in RiskModelConfig().weights()})
        assert calculate_weighted_risk(signals, doubled).overall == \
            calculate_weighted_risk(signals, RiskModelConfig()).overall

    def test_weighted_risk_records_weights(self):
        result = calculate_weighted_risk(EMPTY, RiskModelConfig(tenure=3))
        assert result.breakdown()["weight_tenure"] == 3.0


class TestTeamFit:
    """Tests for team-fit alignment."""

    team = Baseline(industry_key="retail", avg_tenure_months=24, avg_verified_count=1, avg_reference_count=0)

    def test_structural_at_team_average(self):
        score, ratios = structural_alignment(SignalSet(tenure_months=24, verified_job_count=1), self.team)
        assert score == 50
        assert ratios["reference"] == Decimal("0.5")

    def test_ratios_capped(self):
        team = self.team.model_copy(update={"avg_reference_count": 2})
        signals = SignalSet(tenure_months=100, verified_job_count=5, reference_responded=10)
        score, ratios = structural_alignment(signals, team)
        assert ratios["tenure"] == Decimal("1.5")
        assert score == 85

    def test_structural_only_without_vector(self):
        result = calculate_team_fit(SignalSet(tenure_months=24, verified_job_count=1), self.team)
        assert result.behavioral_score is None
        assert result.alignment_score == result.structural_score == 50

    def test_blend_with_vector(self):
        result = calculate_team_fit(
            SignalSet(tenure_months=24, verified_job_count=1), self.team, BehavioralVector(),
        )
        assert result.behavioral_score == 100
        assert result.alignment_score == 63


class TestHiringConfidence:
    """Tests for the hiring-confidence composite."""

    def test_missing_inputs_neutral(self):
        assert calculate_hiring_confidence(None, None, None).composite_score == 50

    def test_weighted_blend(self):
        assert calculate_hiring_confidence(80, 20, 60).composite_score == 75

    def test_out_of_range_inputs_clamped(self):
        result = calculate_hiring_confidence(100, 150, 100)
        assert result.risk_score == 100.0
        assert result.composite_score == 75


class TestProfileStrength:
    """Tests for the profile-strength composite."""

    def test_empty_profile(self):
        assert calculate_profile_strength(SignalSet()).score == 20

    def test_unknown_version_rejected(self):
        with pytest.raises(ValueError):
            calculate_profile_strength(SignalSet(), version="v9")

    def test_rehire_adds_points(self):
        assert calculate_profile_strength(SignalSet(rehire_eligible=True)).score == 30


class TestVeryLargeInputs:
    """Magnitudes far outside the scoring range degrade to clamped scores."""

    def test_to_decimal_large_magnitude(self):
        assert to_decimal(1e30) == Decimal("1E+30")
        assert to_decimal(1e300) == Decimal("1E+300")
        assert to_score(1e300) == 100

    def test_huge_fraud_score_capped(self):
        assert fraud_penalty(fraud_score=1e30) == Decimal("15")
        assert calculate_overall_risk(SignalSet(fraud_score=1e30)).overall == 45

    def test_huge_fraud_count_capped(self):
        assert fraud_penalty(fraud_count=10 ** 30) == Decimal("15")

    def test_huge_tenure(self):
        signals = SignalSet(tenure_months=1e30)
        assert tenure_score(signals) == 100
        assert calculate_overall_risk(signals).overall == 85

    def test_huge_gap(self):
        assert gap_score(SignalSet(tenure_months=1.0, gap_months=1e300)) == 20

    def test_huge_hiring_inputs(self):
        result = calculate_hiring_confidence(1e30, 0, 0)
        assert result.alignment_score == 100.0
        assert result.composite_score == 75

    def test_huge_weight(self):
        config = RiskModelConfig(tenure=1e30)
        assert calculate_weighted_risk(SignalSet(tenure_months=1e30), config).overall == 100

    def test_huge_profile_strength_inputs(self):
        score = calculate_profile_strength(SignalSet(tenure_months=1e300, fraud_score=1e300)).score
        assert 0 <= score <= 100
