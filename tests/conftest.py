"""
Shared fixtures: a deterministic in-memory NLU so no model is downloaded.
"""
import pytest
from cultivo.const import Intent
from cultivo.intent import classify_by_heuristics
from cultivo.locking import SharedStore
from cultivo.nlu import NluError
from cultivo.orchestrator import Orchestrator

DIMENSIONS = 32


class StubNlu:
    """
    Entities come from a text -> list map, vectors from a label -> vector map.
    Unknown labels get their own one-hot vector, so distinct labels are orthogonal.
    """

    def __init__(self, entities=None, vectors=None, reply=None, fail_on=None):
        self.entities = entities or {}
        self.vectors = vectors or {}
        self.reply = reply
        self.fail_on = fail_on
        self.calls = []
        self._slots = {}

    def _fail(self, name):
        self.calls.append(name)
        if self.fail_on == name:
            raise NluError(f'{name} unavailable')

    def _vector(self, text):
        if text in self.vectors:
            return list(self.vectors[text])
        slot = self._slots.setdefault(text, len(self._slots) % DIMENSIONS)
        vec = [0.0] * DIMENSIONS
        vec[slot] = 1.0
        return vec

    def classify_intent(self, text):
        self._fail('classify_intent')
        intent = classify_by_heuristics(text)
        return intent if intent is not None else Intent.NARRATING

    def extract(self, text):
        self._fail('extract')
        return list(self.entities.get(text, []))

    def embed_batch(self, texts):
        self._fail('embed_batch')
        return [self._vector(t) for t in texts]

    def generate_reply(self, system_prompt, user_text):
        self._fail('generate_reply')
        if self.reply is None:
            raise NluError('No LLM client configured.')
        return self.reply


@pytest.fixture
def shared():
    """An empty shared store."""
    return SharedStore()


@pytest.fixture
def stub_nlu():
    return StubNlu(entities={'Chuva causa Enchente e Dano': ['Chuva', 'Enchente', 'Dano']})


@pytest.fixture
def orchestrator(stub_nlu, shared):
    """Orchestrator wired to the stub NLU and the shared store."""
    return Orchestrator(stub_nlu, shared)
