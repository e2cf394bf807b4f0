import logging
import threading
import uuid
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, List, Optional, Sequence, Set, Tuple
from cultivo.concept import Concept
from cultivo.const import Intent, REINFORCE_SIMILARITY, SIMILARITY_LINK_FLOOR, SIMILARITY_LINK_CONFIDENCE, QUERY_SIMILARITY, QUERY_TOP_K, QUERY_LINKS_PER_CONCEPT, MAX_INFERENCES_PER_TURN, QUESTION_INTERVAL, DECAY_INTERVAL, DECAY_FACTOR
from cultivo.inference import InferenceEngine, InferenceResult
from cultivo.knowledge import KnowledgeStore, cosine_similarity
from cultivo.link import Link, LinkKind
from cultivo.locking import SharedStore
from cultivo.models import ChatMessage, MessageRole
from cultivo.nlu import NluError
from cultivo.prompts import get_narration_instruction, get_query_instruction
from cultivo.questions import QuestionGenerator
from cultivo.truth import TruthValue
logger = logging.getLogger('cultivo')

UNAVAILABLE_MESSAGE = 'Sistema indisponível, tente novamente.'


@dataclass
class SeedResult:
    """What the seeding pass did to the store for one narrative message."""
    new_concepts: List[str] = field(default_factory=list)
    reinforced_concepts: List[str] = field(default_factory=list)
    reinforced_labels: List[str] = field(default_factory=list)
    new_links: List[str] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)
    touched: List[uuid.UUID] = field(default_factory=list)


def _system(content: str) -> ChatMessage:
    return ChatMessage(role=MessageRole.SYSTEM, content=content)


class Orchestrator:
    """
    Turn-based controller of the cultivation cycle:
    Intent -> Seeding / Confirmation / Query -> Inference -> Reflection -> Pruning.

    All language work goes through the `nlu` collaborator (extract,
    embed_batch, classify_intent, generate_reply). Every call that can fail
    is made before the store or the counters are touched.
    """

    def __init__(self, nlu: Any, shared: SharedStore, engine: Optional[InferenceEngine] = None, questions: Optional[QuestionGenerator] = None):
        logger.info('[bold blue][ORCHESTRATOR][/bold blue] Initializing turn cycle...')
        self.nlu = nlu
        self.shared = shared
        self.engine = engine if engine else InferenceEngine()
        self.questions = questions if questions else QuestionGenerator()
        self.last_discussed: List[uuid.UUID] = []
        self.pending_questions: Deque[str] = deque()
        self.last_fading: List[uuid.UUID] = []
        self.turns_since_question = 0
        self.turns_since_decay = 0
        self.total_turns = 0
        self.lock = threading.Lock()

    def process_message(self, text: str) -> List[ChatMessage]:
        """Runs one full turn and returns the role-tagged events it produced."""
        with self.lock:
            try:
                intent = self.nlu.classify_intent(text)
                entities: List[str] = []
                embeddings: List[List[float]] = []
                query_embedding: List[float] = []
                if intent == Intent.NARRATING:
                    entities = self.nlu.extract(text)
                    embeddings = self.nlu.embed_batch(entities) if entities else []
                    if len(embeddings) != len(entities):
                        raise NluError(f'Expected {len(entities)} embeddings, got {len(embeddings)}.')
                elif intent == Intent.QUERYING:
                    query_embedding = self.nlu.embed_batch([text])[0]
            except Exception as e:
                logger.exception(f'[bold red][ORCHESTRATOR][/bold red] Language service failed, turn dropped: {e}')
                return [_system(UNAVAILABLE_MESSAGE)]

            self.total_turns += 1
            self.turns_since_question += 1
            self.turns_since_decay += 1
            logger.info(f'[bold green][ORCHESTRATOR][/bold green] Turn {self.total_turns} | intent: {intent.value}')

            responses: List[ChatMessage] = []
            if intent == Intent.CONFIRMING:
                responses.extend(self._handle_confirmation(True))
            elif intent == Intent.DENYING:
                responses.extend(self._handle_confirmation(False))
            elif intent == Intent.QUERYING:
                responses.extend(self._handle_query(text, query_embedding))
            else:
                responses.extend(self._handle_narration(text, entities, embeddings))
                responses.extend(self._run_inference())

            if self.turns_since_question >= QUESTION_INTERVAL:
                question = self._next_question()
                if question:
                    responses.append(ChatMessage(role=MessageRole.QUESTION, content=question))
                    self.turns_since_question = 0

            if self.turns_since_decay >= DECAY_INTERVAL:
                responses.extend(self._run_decay())
                self.turns_since_decay = 0
            return responses

    def seed(self, entities: Sequence[str], embeddings: Sequence[Sequence[float]]) -> SeedResult:
        """
        Turns extracted entities into created or reinforced concepts, links the
        first one to the rest with Implication, and auto-links new concepts to
        moderately similar existing ones.
        """
        result = SeedResult()
        new_concepts: List[Tuple[uuid.UUID, Sequence[float]]] = []

        for entity, embedding in zip(entities, embeddings):
            with self.shared.write() as store:
                concept_id = self._resolve_entity(store, entity, embedding, result)
                if concept_id is None:
                    concept = Concept(label=entity, truth=TruthValue.proto(), embedding=list(embedding))
                    concept_id = store.add_concept(concept)
                    logger.info(f'[bold green][SEEDING][/bold green] New concept: {entity}')
                    result.messages.append(f'Cristalizando... Novo Concept: {entity} {concept.truth}')
                    result.new_concepts.append(entity)
                    new_concepts.append((concept_id, embedding))
            if concept_id not in result.touched:
                result.touched.append(concept_id)

        if len(result.touched) >= 2:
            with self.shared.write() as store:
                subject_id = result.touched[0]
                for other_id in result.touched[1:]:
                    if store.link_exists(LinkKind.IMPLICATION, subject_id, other_id):
                        continue
                    link = Link.binary(LinkKind.IMPLICATION, subject_id, other_id, TruthValue.proto())
                    store.add_link(link)
                    desc = store.describe_link(link)
                    logger.info(f'[bold green][SEEDING][/bold green] New link: {desc}')
                    result.new_links.append(desc)

        if new_concepts:
            result.new_links.extend(self._link_similar(new_concepts))
        return result

    def _resolve_entity(self, store: KnowledgeStore, entity: str, embedding: Sequence[float], result: SeedResult) -> Optional[uuid.UUID]:
        found = store.find_similar(embedding, REINFORCE_SIMILARITY)
        if found:
            concept_id, similarity = found
            concept = store.concepts[concept_id]
            concept.reinforce()
            logger.info(f'[bold green][SEEDING][/bold green] Reinforced by embedding: {concept.label} (sim={similarity:.2f})')
            result.reinforced_concepts.append(f'{concept.label} (sim={similarity:.2f}) → energia {concept.energy:.2f}')
            result.reinforced_labels.append(concept.label)
            return concept_id
        concept = store.find_by_label(entity)
        if concept:
            concept.reinforce()
            logger.info(f'[bold green][SEEDING][/bold green] Reinforced by label: {concept.label}')
            result.reinforced_concepts.append(f'{concept.label} → reforçado')
            result.reinforced_labels.append(concept.label)
            return concept.id
        return None

    def _link_similar(self, new_concepts: List[Tuple[uuid.UUID, Sequence[float]]]) -> List[str]:
        # Collected under the read lock, applied under the write lock. A writer
        # slipping in between can only make a candidate stale, which is rechecked.
        candidates = []
        seen_pairs: Set[frozenset] = set()
        with self.shared.read() as store:
            for new_id, new_embedding in new_concepts:
                for existing in store.concepts.values():
                    if existing.id == new_id or existing.embedding is None:
                        continue
                    pair = frozenset((new_id, existing.id))
                    if pair in seen_pairs:
                        continue
                    sim = cosine_similarity(new_embedding, existing.embedding)
                    if SIMILARITY_LINK_FLOOR < sim < REINFORCE_SIMILARITY and not self._similarity_exists(store, new_id, existing.id):
                        seen_pairs.add(pair)
                        candidates.append((new_id, existing.id, sim))
        if not candidates:
            return []
        descriptions = []
        with self.shared.write() as store:
            for new_id, existing_id, sim in candidates:
                new_concept = store.get_concept(new_id)
                existing = store.get_concept(existing_id)
                if new_concept is None or existing is None or self._similarity_exists(store, new_id, existing_id):
                    continue
                store.add_link(Link.binary(LinkKind.SIMILARITY, new_id, existing_id, TruthValue.new(sim, SIMILARITY_LINK_CONFIDENCE)))
                desc = f'{new_concept.label} ≈ {existing.label} (sim={sim:.2f})'
                logger.info(f'[bold green][SEEDING][/bold green] Similarity link: {desc}')
                descriptions.append(desc)
        return descriptions

    @staticmethod
    def _similarity_exists(store: KnowledgeStore, a: uuid.UUID, b: uuid.UUID) -> bool:
        return store.link_exists(LinkKind.SIMILARITY, a, b) or store.link_exists(LinkKind.SIMILARITY, b, a)

    def _handle_narration(self, text: str, entities: Sequence[str], embeddings: Sequence[Sequence[float]]) -> List[ChatMessage]:
        result = self.seed(entities, embeddings)
        messages = [_system(m) for m in result.messages]
        messages.extend(_system(f'Reforçando: {r}') for r in result.reinforced_concepts)
        messages.extend(_system(f'Novo Link: {l}') for l in result.new_links)
        self.last_discussed = list(result.touched)

        labels = result.new_concepts + result.reinforced_labels
        if labels:
            try:
                reply = self.nlu.generate_reply(get_narration_instruction(labels), text)
                messages.append(ChatMessage(role=MessageRole.ASSISTANT, content=reply))
            except Exception as e:
                logger.warning(f'[bold yellow][ORCHESTRATOR][/bold yellow] No reply for narration: {e}')

        with self.shared.read() as store:
            messages.append(_system(f'KB: {store.concept_count()} Concepts, {store.link_count()} Links'))
        return messages

    def _handle_confirmation(self, positive: bool) -> List[ChatMessage]:
        observation = TruthValue.observed(positive)
        word = 'Confirmação' if positive else 'Negação'
        messages = []
        with self.shared.write() as store:
            revised_links = set()
            for concept_id in self.last_discussed:
                concept = store.get_concept(concept_id)
                if concept is None:
                    continue
                old_truth = concept.truth
                concept.truth = old_truth.revise(observation)
                messages.append(_system(f'{word}: {concept.label} {old_truth} → {concept.truth}'))
                for link in store.links_for_concept(concept_id):
                    if link.id not in revised_links:
                        link.truth = link.truth.revise(observation)
                        revised_links.add(link.id)
        if not messages:
            messages.append(_system(f'{word}. Nenhum conceito recente para atualizar.'))
        else:
            logger.info(f'[bold green][ORCHESTRATOR][/bold green] {word} applied to {len(messages)} concepts, {len(revised_links)} links.')
        return messages

    def _handle_query(self, text: str, embedding: Sequence[float]) -> List[ChatMessage]:
        descriptions = []
        with self.shared.read() as store:
            for concept, sim in store.similar_concepts(embedding, QUERY_SIMILARITY)[:QUERY_TOP_K]:
                links = store.links_for_concept(concept.id)[:QUERY_LINKS_PER_CONCEPT]
                link_text = ''
                if links:
                    link_text = ' | Links: ' + '; '.join(store.describe_link(l) for l in links)
                descriptions.append(f'- {concept.label} {concept.truth} (sim={sim:.2f}, energia={concept.energy:.2f}){link_text}')
        if not descriptions:
            return [_system('Não encontrei conceitos relacionados na base de conhecimento.')]
        try:
            reply = self.nlu.generate_reply(get_query_instruction(text, descriptions), text)
            return [ChatMessage(role=MessageRole.ASSISTANT, content=reply)]
        except Exception as e:
            logger.warning(f'[bold yellow][ORCHESTRATOR][/bold yellow] No reply for query, listing concepts: {e}')
            return [_system(d) for d in descriptions]

    def _run_inference(self) -> List[ChatMessage]:
        with self.shared.read() as store:
            proposals = self.engine.infer(store)
        if not proposals:
            return []
        messages = []
        with self.shared.write() as store:
            for result in proposals:
                if len(messages) >= MAX_INFERENCES_PER_TURN:
                    break
                # Two proposals from one sweep can describe the same new link.
                if self._already_known(store, result.link):
                    continue
                store.add_link(result.link)
                messages.append(ChatMessage(role=MessageRole.INFERENCE, content=f'Inferência: {result.explanation}'))
                self._queue_question_for(store, result)
        return messages

    def _already_known(self, store: KnowledgeStore, link: Link) -> bool:
        s, o = (link.subject(), link.object())
        if link.kind == LinkKind.SIMILARITY:
            return self._similarity_exists(store, s, o)
        return store.link_exists(link.kind, s, o)

    def _queue_question_for(self, store: KnowledgeStore, result: InferenceResult) -> None:
        source = store.get_concept(result.link.subject())
        target = store.get_concept(result.link.object())
        if source is None or target is None:
            return
        if result.rule == 'deduction':
            self.pending_questions.append(self.questions.for_causal_link(source, target))
        else:
            self.pending_questions.append(self.questions.for_relation(source, target))

    def enqueue_question(self, question: str) -> None:
        self.pending_questions.append(question)

    def _next_question(self) -> Optional[str]:
        if self.pending_questions:
            return self.pending_questions.popleft()
        with self.shared.read() as store:
            candidates = store.question_candidates()
            if candidates:
                return self.questions.for_concept(candidates[0])
        return None

    def _run_decay(self) -> List[ChatMessage]:
        messages = []
        with self.shared.write() as store:
            newly_fading = store.decay_cycle(DECAY_FACTOR)
            for concept_id in newly_fading:
                concept = store.get_concept(concept_id)
                if concept:
                    messages.append(ChatMessage(role=MessageRole.ALERT, content=f"'{concept.label}' está esmaecendo (energia: {concept.energy:.2f}). Deseja reforçar?"))
        self.last_fading = newly_fading
        if newly_fading:
            messages.append(ChatMessage(role=MessageRole.ALERT, content=f'Poda: {len(newly_fading)} conceitos entrando em Fading.'))
        return messages

    def reset(self) -> None:
        """Forgets all turn state; used when the store is cleared from outside."""
        with self.lock:
            self.last_discussed.clear()
            self.pending_questions.clear()
            self.last_fading = []
            self.turns_since_question = 0
            self.turns_since_decay = 0
            self.total_turns = 0

    def reinforce_by_id(self, concept_id: uuid.UUID) -> Optional[str]:
        """Manual reinforcement from the user, outside the turn cycle."""
        with self.shared.write() as store:
            concept = store.get_concept(concept_id)
            if concept is None:
                return None
            concept.reinforce()
            logger.info(f'[bold green][ORCHESTRATOR][/bold green] Manual reinforcement: {concept.label}')
            return f'Reforçado: {concept.label} → energia {concept.energy:.2f}'
