import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union
from cultivo.truth import TruthValue
from cultivo.const import INITIAL_ENERGY


class LinkKind(str, Enum):
    INHERITANCE = "Inheritance"
    SIMILARITY = "Similarity"
    IMPLICATION = "Implication"
    EQUIVALENCE = "Equivalence"
    PART_OF = "PartOf"
    HAS_PROPERTY = "HasProperty"
    INSTANCE_OF = "InstanceOf"
    CATALYZES = "Catalyzes"
    INHIBITS = "Inhibits"

    @property
    def label(self) -> str:
        return KIND_LABELS[self]


KIND_LABELS = {
    LinkKind.INHERITANCE: 'é um',
    LinkKind.SIMILARITY: '≈',
    LinkKind.IMPLICATION: '⇒',
    LinkKind.EQUIVALENCE: '⇔',
    LinkKind.PART_OF: 'parte de',
    LinkKind.HAS_PROPERTY: 'tem',
    LinkKind.INSTANCE_OF: 'instância de',
    LinkKind.CATALYZES: 'catalisa',
    LinkKind.INHIBITS: 'inibe',
}


@dataclass(frozen=True)
class CustomKind:
    """Open-vocabulary relation; two custom kinds are equal when their names are."""
    name: str

    @property
    def label(self) -> str:
        return self.name


Kind = Union[LinkKind, CustomKind]

CUSTOM_PREFIX = 'Custom:'


def kind_to_str(kind: Kind) -> str:
    if isinstance(kind, CustomKind):
        return f'{CUSTOM_PREFIX}{kind.name}'
    return kind.value


def kind_from_str(value: str) -> Kind:
    if value.startswith(CUSTOM_PREFIX):
        return CustomKind(value[len(CUSTOM_PREFIX):])
    return LinkKind(value)


class Role(str, Enum):
    SUBJECT = "Subject"
    OBJECT = "Object"
    CAUSE = "Cause"
    EFFECT = "Effect"
    CONTEXT = "Context"
    QUALIFIER = "Qualifier"
    SOURCE = "Source"
    TARGET = "Target"
    INSTRUMENT = "Instrument"

    @property
    def label(self) -> str:
        return ROLE_LABELS[self]


ROLE_LABELS = {
    Role.SUBJECT: 'Sujeito',
    Role.OBJECT: 'Objeto',
    Role.CAUSE: 'Causa',
    Role.EFFECT: 'Efeito',
    Role.CONTEXT: 'Contexto',
    Role.QUALIFIER: 'Qualificador',
    Role.SOURCE: 'Origem',
    Role.TARGET: 'Destino',
    Role.INSTRUMENT: 'Instrumento',
}


@dataclass(frozen=True)
class Participant:
    concept_id: uuid.UUID
    role: Role


@dataclass
class Link:
    """
    A typed n-ary relation. Participants point at concepts by id only, so a
    link can outlive (or predate) the concepts it names without dangling.
    """
    kind: Kind
    participants: List[Participant]
    truth: TruthValue = field(default_factory=TruthValue.proto)
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    energy: float = INITIAL_ENERGY

    @classmethod
    def binary(cls, kind: Kind, subject_id: uuid.UUID, object_id: uuid.UUID, truth: Optional[TruthValue] = None) -> 'Link':
        participants = [Participant(subject_id, Role.SUBJECT), Participant(object_id, Role.OBJECT)]
        return cls(kind, participants, truth if truth is not None else TruthValue.proto())

    def _first(self, role: Role) -> Optional[uuid.UUID]:
        for p in self.participants:
            if p.role == role:
                return p.concept_id
        return None

    def subject(self) -> Optional[uuid.UUID]:
        return self._first(Role.SUBJECT)

    def object(self) -> Optional[uuid.UUID]:
        return self._first(Role.OBJECT)

    def cause(self) -> Optional[uuid.UUID]:
        return self._first(Role.CAUSE)

    def effect(self) -> Optional[uuid.UUID]:
        return self._first(Role.EFFECT)

    def concept_ids(self) -> List[uuid.UUID]:
        return [p.concept_id for p in self.participants]

    def decay(self, factor: float) -> None:
        self.energy = max(self.energy * factor, 0.0)
