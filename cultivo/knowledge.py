"""
cultivo/knowledge.py - In-memory knowledge store

Holds concepts and links keyed by id, plus a reverse index from concept id
to the ids of the links that mention it. The reverse index is derived state:
it is never persisted and must be rebuilt after any load that bypasses
add_link.

Iteration order is insertion order everywhere, which is also the tie-break
for find_by_label and find_similar: the earliest stored concept wins.
"""
import logging
import uuid
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple
import numpy as np
import networkx as nx
from cultivo.concept import Concept, ConceptState
from cultivo.link import Link, LinkKind, Kind, Participant, Role, kind_from_str, kind_to_str
from cultivo.truth import TruthValue
from cultivo.models import ConceptRecord, LinkRecord, ParticipantRecord, KnowledgeRecord, ConceptNode, LinkEdge, GraphSnapshot
from cultivo.const import DECAY_FACTOR, QUESTION_MIN_ENERGY, QUESTION_MAX_CONFIDENCE
logger = logging.getLogger('cultivo')

CAUSAL_KINDS = frozenset({LinkKind.IMPLICATION, LinkKind.INHERITANCE, LinkKind.CATALYZES})


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of two vectors; 0.0 for empty, mismatched or zero-norm input."""
    if len(a) != len(b) or len(a) == 0:
        return 0.0
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    denom = np.linalg.norm(va) * np.linalg.norm(vb)
    if denom == 0.0:
        return 0.0
    return float(np.dot(va, vb) / denom)


def concept_node(concept: Concept) -> ConceptNode:
    """Read-only view of a concept for reporting."""
    return ConceptNode(id=str(concept.id), label=concept.label, frequency=concept.truth.frequency(), confidence=concept.truth.confidence(), energy=concept.energy, state=concept.state.css_class, mention_count=concept.mention_count)


class KnowledgeStore:
    """Container for concepts and links with the query surface used by the engine."""

    def __init__(self):
        self.concepts: Dict[uuid.UUID, Concept] = {}
        self.links: Dict[uuid.UUID, Link] = {}
        self._concept_links: Dict[uuid.UUID, List[uuid.UUID]] = defaultdict(list)

    def _index_link(self, link: Link) -> None:
        for concept_id in link.concept_ids():
            entry = self._concept_links[concept_id]
            if link.id not in entry:
                entry.append(link.id)

    def _unindex_link(self, link: Link) -> None:
        for concept_id in link.concept_ids():
            entry = self._concept_links.get(concept_id)
            if entry and link.id in entry:
                entry.remove(link.id)

    def rebuild_index(self) -> None:
        self._concept_links = defaultdict(list)
        for link in self.links.values():
            self._index_link(link)

    def clear(self) -> None:
        self.concepts.clear()
        self.links.clear()
        self._concept_links.clear()

    def add_concept(self, concept: Concept) -> uuid.UUID:
        logger.debug(f'[bold blue][KNOWLEDGE][/bold blue] Concept stored: {concept.label} ({concept.id})')
        self.concepts[concept.id] = concept
        return concept.id

    def add_link(self, link: Link) -> uuid.UUID:
        previous = self.links.get(link.id)
        if previous is not None:
            self._unindex_link(previous)
        self.links[link.id] = link
        self._index_link(link)
        logger.debug(f'[bold blue][KNOWLEDGE][/bold blue] Link stored: {link.kind.label} ({link.id})')
        return link.id

    def get_concept(self, concept_id: uuid.UUID) -> Optional[Concept]:
        return self.concepts.get(concept_id)

    def get_link(self, link_id: uuid.UUID) -> Optional[Link]:
        return self.links.get(link_id)

    def find_by_label(self, text: str) -> Optional[Concept]:
        wanted = text.lower()
        for concept in self.concepts.values():
            if concept.label.lower() == wanted:
                return concept
        return None

    def find_similar(self, embedding: Sequence[float], threshold: float) -> Optional[Tuple[uuid.UUID, float]]:
        best: Optional[Tuple[uuid.UUID, float]] = None
        for concept in self.concepts.values():
            if concept.embedding is None:
                continue
            sim = cosine_similarity(embedding, concept.embedding)
            if sim >= threshold and (best is None or sim > best[1]):
                best = (concept.id, sim)
        if best:
            logger.debug(f'[bold blue][KNOWLEDGE][/bold blue] Similar concept: {self.concepts[best[0]].label} (sim={best[1]:.2f})')
        return best

    def similar_concepts(self, embedding: Sequence[float], threshold: float) -> List[Tuple[Concept, float]]:
        """All concepts strictly above threshold, most similar first."""
        matches = []
        for concept in self.concepts.values():
            if concept.embedding is None:
                continue
            sim = cosine_similarity(embedding, concept.embedding)
            if sim > threshold:
                matches.append((concept, sim))
        matches.sort(key=lambda m: m[1], reverse=True)
        return matches

    def question_candidates(self) -> List[Concept]:
        candidates = [c for c in self.concepts.values() if c.state == ConceptState.ACTIVE and c.energy > QUESTION_MIN_ENERGY and c.truth.confidence() < QUESTION_MAX_CONFIDENCE]
        candidates.sort(key=lambda c: c.energy, reverse=True)
        return candidates

    def active_concepts(self) -> List[Concept]:
        active = [c for c in self.concepts.values() if c.state == ConceptState.ACTIVE]
        active.sort(key=lambda c: c.energy, reverse=True)
        return active

    def fading_concepts(self) -> List[Concept]:
        return [c for c in self.concepts.values() if c.state == ConceptState.FADING]

    def links_for_concept(self, concept_id: uuid.UUID) -> List[Link]:
        return [self.links[lid] for lid in self._concept_links.get(concept_id, []) if lid in self.links]

    def active_binary_links(self, energy_threshold: float) -> List[Link]:
        return [l for l in self.links.values() if l.energy > energy_threshold and l.subject() is not None and l.object() is not None]

    def causal_links(self, energy_threshold: float) -> List[Link]:
        return [l for l in self.links.values() if l.energy > energy_threshold and l.kind in CAUSAL_KINDS]

    def link_exists(self, kind: Kind, subject_id: uuid.UUID, object_id: uuid.UUID) -> bool:
        for link in self.links.values():
            if link.kind == kind and link.subject() == subject_id and link.object() == object_id:
                return True
        return False

    def decay_cycle(self, factor: float = DECAY_FACTOR) -> List[uuid.UUID]:
        """Decays everything once; returns concepts that entered Fading on this call."""
        newly_fading = []
        for concept in self.concepts.values():
            was_fading = concept.state == ConceptState.FADING
            concept.decay(factor)
            if not was_fading and concept.state == ConceptState.FADING:
                newly_fading.append(concept.id)
        for link in self.links.values():
            link.decay(factor)
        logger.info(f'[bold magenta][PRUNING][/bold magenta] Decay x{factor} | {len(newly_fading)} concepts entering Fading.')
        return newly_fading

    def describe_link(self, link: Link) -> str:
        parts = []
        for p in link.participants:
            concept = self.concepts.get(p.concept_id)
            if concept:
                parts.append(f'{concept.label} →{p.role.label}')
        return f"[{', '.join(parts)}] {link.kind.label} {link.truth}"

    def concept_count(self) -> int:
        return len(self.concepts)

    def link_count(self) -> int:
        return len(self.links)

    def snapshot(self) -> GraphSnapshot:
        nodes = [concept_node(c) for c in self.concepts.values()]
        edges = []
        for link in self.links.values():
            source, target = (link.subject(), link.object())
            if source is None or target is None:
                continue
            edges.append(LinkEdge(id=str(link.id), source=str(source), target=str(target), kind=kind_to_str(link.kind), frequency=link.truth.frequency(), confidence=link.truth.confidence(), energy=link.energy))
        return GraphSnapshot(concepts=nodes, links=edges)

    def to_graph(self) -> nx.MultiDiGraph:
        """Exports binary links as a networkx multigraph keyed by link id."""
        graph = nx.MultiDiGraph()
        snap = self.snapshot()
        for node in snap.concepts:
            graph.add_node(node.id, **node.model_dump(exclude={'id'}))
        for edge in snap.links:
            graph.add_edge(edge.source, edge.target, key=edge.id, **edge.model_dump(exclude={'id', 'source', 'target'}))
        return graph

    def to_record(self) -> KnowledgeRecord:
        concepts = [ConceptRecord(id=str(c.id), label=c.label, positive_evidence=c.truth.positive_evidence, negative_evidence=c.truth.negative_evidence, energy=c.energy, state=c.state.value, embedding=c.embedding, mention_count=c.mention_count, created_at=c.created_at, last_mentioned=c.last_mentioned) for c in self.concepts.values()]
        links = [LinkRecord(id=str(l.id), kind=kind_to_str(l.kind), participants=[ParticipantRecord(concept_id=str(p.concept_id), role=p.role.value) for p in l.participants], positive_evidence=l.truth.positive_evidence, negative_evidence=l.truth.negative_evidence, energy=l.energy) for l in self.links.values()]
        return KnowledgeRecord(concepts=concepts, links=links)

    @classmethod
    def from_record(cls, record: KnowledgeRecord) -> 'KnowledgeStore':
        store = cls()
        for r in record.concepts:
            concept = Concept(label=r.label, truth=TruthValue(r.positive_evidence, r.negative_evidence), id=uuid.UUID(r.id), energy=r.energy, state=ConceptState(r.state), embedding=r.embedding, mention_count=r.mention_count, created_at=r.created_at, last_mentioned=r.last_mentioned)
            store.concepts[concept.id] = concept
        for r in record.links:
            participants = [Participant(uuid.UUID(p.concept_id), Role(p.role)) for p in r.participants]
            link = Link(kind=kind_from_str(r.kind), participants=participants, truth=TruthValue(r.positive_evidence, r.negative_evidence), id=uuid.UUID(r.id), energy=r.energy)
            store.links[link.id] = link
        store.rebuild_index()
        return store
