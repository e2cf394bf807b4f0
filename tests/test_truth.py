"""
Tests for cultivo.truth (TruthValue).
"""
import pytest
from cultivo.truth import TruthValue


class TestConstruction:
    """Conversions between (frequency, confidence) and evidence."""

    @pytest.mark.parametrize('f,c', [(0.0, 0.0), (0.5, 0.1), (0.9, 0.8), (1.0, 0.5), (0.3, 0.99)])
    def test_new_round_trips_through_evidence(self, f, c):
        tv = TruthValue.new(f, c)
        assert tv.confidence() == pytest.approx(c)
        if c > 0:
            assert tv.frequency() == pytest.approx(f)

    def test_proto_is_undecided_and_weak(self):
        tv = TruthValue.proto()
        assert tv.frequency() == pytest.approx(0.5)
        assert tv.confidence() == pytest.approx(0.1)

    def test_expectation(self):
        assert TruthValue.new(0.9, 0.8).expectation() == pytest.approx(0.82)
        assert TruthValue.new(0.0, 0.5).expectation() == pytest.approx(0.25)

    def test_no_evidence_reads_as_half(self):
        tv = TruthValue()
        assert tv.frequency() == 0.5
        assert tv.confidence() == 0.0
        assert tv.expectation() == 0.5

    def test_clamps_out_of_range_input(self):
        tv = TruthValue.new(1.7, 1.0)
        assert tv.frequency() == pytest.approx(1.0)
        assert tv.confidence() == pytest.approx(0.9999)
        assert tv.confidence() < 1.0
        assert TruthValue.new(-0.4, -1.0).confidence() == 0.0

    def test_observed(self):
        yes, no = (TruthValue.observed(True), TruthValue.observed(False))
        assert yes.frequency() == pytest.approx(1.0)
        assert no.frequency() == pytest.approx(0.0)
        assert yes.confidence() == pytest.approx(0.9)

    def test_str(self):
        assert str(TruthValue.proto()) == '⟨0.50, 0.10⟩'


class TestRevision:

    def test_commutative(self):
        a, b = (TruthValue.new(0.9, 0.4), TruthValue.new(0.2, 0.7))
        assert a.revise(b).frequency() == pytest.approx(b.revise(a).frequency())
        assert a.revise(b).confidence() == pytest.approx(b.revise(a).confidence())

    def test_confidence_never_drops(self):
        a, b = (TruthValue.new(0.9, 0.4), TruthValue.new(0.2, 0.7))
        revised = a.revise(b)
        assert revised.confidence() >= max(a.confidence(), b.confidence())

    def test_sums_evidence_without_mutating(self):
        a = TruthValue(1.0, 2.0)
        revised = a.revise(TruthValue(0.5, 0.5))
        assert (revised.positive_evidence, revised.negative_evidence) == (1.5, 2.5)
        assert (a.positive_evidence, a.negative_evidence) == (1.0, 2.0)

    def test_confirmation_moves_proto_up(self):
        revised = TruthValue.proto().revise(TruthValue.observed(True))
        assert revised.frequency() > 0.99
        assert revised.confidence() == pytest.approx(0.9011, abs=0.001)


class TestInferenceRules:
    """Deduction, induction and abduction."""

    def test_deduction(self):
        tv = TruthValue.new(0.9, 0.8).deduce(TruthValue.new(0.8, 0.7))
        assert tv.frequency() == pytest.approx(0.72)
        assert tv.confidence() == pytest.approx(0.4032)

    def test_deduction_weakens_both_components(self):
        a, b = (TruthValue.new(0.9, 0.8), TruthValue.new(0.7, 0.9))
        tv = a.deduce(b)
        assert tv.frequency() < min(a.frequency(), b.frequency())
        assert tv.confidence() < min(a.confidence(), b.confidence())

    def test_induction(self):
        a, b = (TruthValue.new(0.9, 0.9), TruthValue.new(0.6, 0.9))
        tv = a.induce(b)
        w = 0.9 * 0.9 * 0.9
        assert tv.frequency() == pytest.approx(0.6)
        assert tv.confidence() == pytest.approx(w / (w + 1.0))

    def test_abduction(self):
        a, b = (TruthValue.new(0.9, 0.9), TruthValue.new(0.6, 0.9))
        tv = a.abduce(b)
        w = 0.6 * 0.9 * 0.9
        assert tv.frequency() == pytest.approx(0.9)
        assert tv.confidence() == pytest.approx(w / (w + 1.0))

    def test_weak_premises_give_weak_conclusion(self):
        proto = TruthValue.proto()
        assert proto.induce(proto).confidence() < 0.05
