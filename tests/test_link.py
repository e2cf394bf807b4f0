"""
Tests for cultivo.link (kinds, roles and accessors).
"""
import uuid
import pytest
from cultivo.link import CustomKind, Link, LinkKind, Participant, Role, kind_from_str, kind_to_str


class TestKinds:

    def test_custom_kind_equality_uses_payload(self):
        assert CustomKind('causa') == CustomKind('causa')
        assert CustomKind('causa') != CustomKind('previne')
        assert hash(CustomKind('causa')) == hash(CustomKind('causa'))
        assert CustomKind('causa') != LinkKind.IMPLICATION

    @pytest.mark.parametrize('kind', [LinkKind.IMPLICATION, LinkKind.PART_OF, CustomKind('mora em')])
    def test_kind_string_form(self, kind):
        assert kind_from_str(kind_to_str(kind)) == kind

    def test_custom_string_prefix(self):
        assert kind_to_str(CustomKind('mora em')) == 'Custom:mora em'

    def test_labels(self):
        assert LinkKind.IMPLICATION.label == '⇒'
        assert CustomKind('mora em').label == 'mora em'
        assert Role.SUBJECT.label == 'Sujeito'


class TestAccessors:

    def test_binary_link(self):
        a, b = (uuid.uuid4(), uuid.uuid4())
        link = Link.binary(LinkKind.IMPLICATION, a, b)
        assert link.subject() == a
        assert link.object() == b
        assert link.cause() is None
        assert link.energy == 0.8
        assert link.truth.confidence() == pytest.approx(0.1)

    def test_first_match_wins_on_duplicate_roles(self):
        a, b, c = (uuid.uuid4(), uuid.uuid4(), uuid.uuid4())
        link = Link(LinkKind.CATALYZES, [Participant(a, Role.CAUSE), Participant(b, Role.CAUSE), Participant(c, Role.EFFECT)])
        assert link.cause() == a
        assert link.effect() == c
        assert link.concept_ids() == [a, b, c]

    def test_decay_clamps_at_zero(self):
        link = Link.binary(LinkKind.SIMILARITY, uuid.uuid4(), uuid.uuid4())
        link.decay(0.5)
        assert link.energy == pytest.approx(0.4)
        link.decay(-1.0)
        assert link.energy == 0.0
