"""
Tests for cultivo.concept (energy lifecycle).
"""
import pytest
from cultivo.concept import Concept, ConceptState, state_for_energy


@pytest.fixture
def concept():
    return Concept(label='Chuva')


class TestLifecycle:

    def test_defaults(self, concept):
        assert concept.energy == 0.8
        assert concept.state == ConceptState.ACTIVE
        assert concept.mention_count == 1
        assert concept.last_mentioned == concept.created_at
        assert concept.truth.confidence() == pytest.approx(0.1)

    def test_reinforce_saturates(self, concept):
        concept.reinforce()
        concept.reinforce()
        assert concept.energy == 1.0
        assert concept.mention_count == 3

    def test_ten_decays_land_in_dormant(self, concept):
        for _ in range(10):
            concept.decay(0.95)
        assert concept.energy == pytest.approx(0.4775, abs=1e-4)
        assert concept.state == ConceptState.DORMANT

    def test_decay_reaches_fading(self, concept):
        cycles = 0
        while concept.state != ConceptState.FADING:
            concept.decay(0.95)
            cycles += 1
        assert concept.energy <= 0.2
        assert cycles == 28

    @pytest.mark.parametrize('energy,state', [(0.1, ConceptState.FADING), (0.35, ConceptState.DORMANT), (0.9, ConceptState.ACTIVE)])
    def test_state_follows_initial_energy(self, energy, state):
        assert Concept(label='Baixa', energy=energy).state == state

    def test_conflicting_state_is_recomputed(self):
        assert Concept(label='Baixa', energy=0.1, state=ConceptState.ACTIVE).state == ConceptState.FADING

    def test_archived_survives_construction(self):
        assert Concept(label='Arquivo', energy=0.9, state=ConceptState.ARCHIVED).state == ConceptState.ARCHIVED

    def test_reinforce_revives_fading(self):
        concept = Concept(label='Velho', energy=0.1)
        concept.reinforce()
        assert concept.state == ConceptState.DORMANT


class TestArchived:
    """Archived is absorbing."""

    def test_energy_changes_do_not_leave_archived(self, concept):
        concept.archive()
        concept.reinforce()
        assert concept.state == ConceptState.ARCHIVED
        for _ in range(40):
            concept.decay(0.9)
        assert concept.state == ConceptState.ARCHIVED
        assert concept.energy < 0.2


@pytest.mark.parametrize('energy,state', [(0.51, ConceptState.ACTIVE), (0.5, ConceptState.DORMANT), (0.21, ConceptState.DORMANT), (0.2, ConceptState.FADING), (0.0, ConceptState.FADING)])
def test_state_thresholds(energy, state):
    assert state_for_energy(energy) == state
