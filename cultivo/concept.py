import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from cultivo.truth import TruthValue
from cultivo.const import INITIAL_ENERGY, REINFORCE_BOOST, ACTIVE_THRESHOLD, DORMANT_THRESHOLD


class ConceptState(str, Enum):
    ACTIVE = "Active"
    DORMANT = "Dormant"
    FADING = "Fading"
    ARCHIVED = "Archived"

    @property
    def css_class(self) -> str:
        return self.value.lower()


def state_for_energy(energy: float) -> ConceptState:
    if energy > ACTIVE_THRESHOLD:
        return ConceptState.ACTIVE
    if energy > DORMANT_THRESHOLD:
        return ConceptState.DORMANT
    return ConceptState.FADING


@dataclass
class Concept:
    """
    A believed entity. Energy tracks how recently it was talked about and
    drives the lifecycle state; the truth value tracks what is believed.
    """
    label: str
    truth: TruthValue = field(default_factory=TruthValue.proto)
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    energy: float = INITIAL_ENERGY
    state: ConceptState = ConceptState.ACTIVE
    embedding: Optional[List[float]] = None
    mention_count: int = 1
    created_at: float = field(default_factory=time.time)
    last_mentioned: float = 0.0

    def __post_init__(self):
        if not self.last_mentioned:
            self.last_mentioned = self.created_at
        self.update_state()

    def reinforce(self) -> None:
        self.energy = min(self.energy + REINFORCE_BOOST, 1.0)
        self.mention_count += 1
        self.last_mentioned = time.time()
        self.update_state()

    def decay(self, factor: float) -> None:
        self.energy = max(self.energy * factor, 0.0)
        self.update_state()

    def archive(self) -> None:
        self.state = ConceptState.ARCHIVED

    def update_state(self) -> None:
        # Archived is terminal; energy keeps moving underneath it.
        if self.state == ConceptState.ARCHIVED:
            return
        self.state = state_for_energy(self.energy)
