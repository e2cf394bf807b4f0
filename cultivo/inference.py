"""
Deduction/induction sweep over causal links.

The engine only reads the store and proposes new links; committing them (and
how many) is the caller's decision. Cost is quadratic in the number of
energetic causal links.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional
from cultivo.knowledge import KnowledgeStore
from cultivo.link import Link, LinkKind
from cultivo.const import INFERENCE_ENERGY_THRESHOLD, MIN_INFERRED_CONFIDENCE
logger = logging.getLogger('cultivo')


@dataclass
class InferenceResult:
    link: Link
    explanation: str
    rule: str


class InferenceEngine:

    def __init__(self, energy_threshold: float = INFERENCE_ENERGY_THRESHOLD, min_confidence: float = MIN_INFERRED_CONFIDENCE):
        self.energy_threshold = energy_threshold
        self.min_confidence = min_confidence

    @staticmethod
    def _label(store: KnowledgeStore, concept_id: Optional[uuid.UUID]) -> str:
        concept = store.get_concept(concept_id) if concept_id is not None else None
        return concept.label if concept else '?'

    def infer(self, store: KnowledgeStore) -> List[InferenceResult]:
        results: List[InferenceResult] = []
        causal = store.causal_links(self.energy_threshold)
        for i, first in enumerate(causal):
            for j, second in enumerate(causal):
                if i == j:
                    continue
                deduced = self._deduce(store, first, second)
                if deduced:
                    results.append(deduced)
                induced = self._induce(store, first, second)
                if induced:
                    results.append(induced)
        if results:
            logger.info(f'[bold cyan][INFERENCE][/bold cyan] {len(results)} candidate links from {len(causal)} causal links.')
        return results

    def _deduce(self, store: KnowledgeStore, sm: Link, mp: Link) -> Optional[InferenceResult]:
        """S->M, M->P |- S->P, same kind as the first premise."""
        s, m, p = (sm.subject(), sm.object(), mp.object())
        if s is None or m is None or p is None or m != mp.subject() or s == p:
            return None
        if store.link_exists(sm.kind, s, p):
            return None
        truth = sm.truth.deduce(mp.truth)
        if truth.confidence() <= self.min_confidence:
            return None
        link = Link.binary(sm.kind, s, p, truth)
        s_label, m_label, p_label = (self._label(store, s), self._label(store, m), self._label(store, p))
        explanation = f'Dedução: Se {s_label} → {m_label} e {m_label} → {p_label}, então {s_label} pode → {p_label} {truth}'
        return InferenceResult(link, explanation, 'deduction')

    def _induce(self, store: KnowledgeStore, mp: Link, ms: Link) -> Optional[InferenceResult]:
        """M->P, M->S |- S~P."""
        m, p, s = (mp.subject(), mp.object(), ms.object())
        if m is None or p is None or s is None or m != ms.subject() or s == p:
            return None
        if store.link_exists(LinkKind.SIMILARITY, s, p) or store.link_exists(LinkKind.SIMILARITY, p, s):
            return None
        truth = mp.truth.induce(ms.truth)
        if truth.confidence() <= self.min_confidence:
            return None
        link = Link.binary(LinkKind.SIMILARITY, s, p, truth)
        s_label, m_label, p_label = (self._label(store, s), self._label(store, m), self._label(store, p))
        explanation = f'Indução: {s_label} e {p_label} compartilham {m_label}, então {s_label} ≈ {p_label} {truth}'
        return InferenceResult(link, explanation, 'induction')
