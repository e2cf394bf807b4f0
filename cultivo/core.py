import logging
import uuid
from pathlib import Path
from typing import Any, List, Optional, Tuple
from cultivo.const import DEFAULT_DATA_PATH, USE_LLM_EXTRACTION
from cultivo.knowledge import concept_node
from cultivo.locking import SharedStore
from cultivo.models import ChatMessage, ConceptNode, GraphSnapshot, MessageRole
from cultivo.nlu import NluPipeline
from cultivo.orchestrator import Orchestrator
from cultivo.storage import GraphSmith
logger = logging.getLogger('cultivo')

RESET_MESSAGE = 'Base de conhecimento resetada. Todos os conceitos e links foram removidos.'


class Cultivo:
    """
    Facade for the Cultivo knowledge cultivation engine.
    Wires storage, the shared store, the language pipeline and the orchestrator,
    and persists the knowledge base after every change.
    """

    def __init__(self, persistence_path: str = DEFAULT_DATA_PATH, llm_client: Any = None, nlu: Any = None, smith: Optional[GraphSmith] = None, orchestrator: Optional[Orchestrator] = None, use_llm_extraction: bool = USE_LLM_EXTRACTION):
        """Allows injection of existing components to avoid loading models twice."""
        self.path = Path(persistence_path)
        self.smith = smith if smith else GraphSmith(self.path)
        self.shared = SharedStore(self.smith.load_store())
        if nlu:
            self.nlu = nlu
        else:
            from cultivo.memory import Embedder
            self.nlu = NluPipeline(Embedder(), llm_client, use_llm_extraction=use_llm_extraction)
        self.orchestrator = orchestrator if orchestrator else Orchestrator(self.nlu, self.shared)

    def process_message(self, text: str) -> List[ChatMessage]:
        messages = self.orchestrator.process_message(text)
        self.save()
        return messages

    def snapshot(self) -> GraphSnapshot:
        with self.shared.read() as store:
            return store.snapshot()

    def sidebar(self) -> Tuple[List[ConceptNode], List[ConceptNode]]:
        """Active concepts (highest energy first) and the ones fading away."""
        with self.shared.read() as store:
            return ([concept_node(c) for c in store.active_concepts()], [concept_node(c) for c in store.fading_concepts()])

    def reinforce(self, concept_id: str) -> ChatMessage:
        try:
            parsed = uuid.UUID(concept_id)
        except ValueError:
            return ChatMessage(role=MessageRole.SYSTEM, content='ID inválido')
        result = self.orchestrator.reinforce_by_id(parsed)
        if result is None:
            return ChatMessage(role=MessageRole.SYSTEM, content='Conceito não encontrado.')
        self.save()
        return ChatMessage(role=MessageRole.SYSTEM, content=result)

    def reset(self) -> ChatMessage:
        with self.shared.write() as store:
            store.clear()
        self.save()
        self.orchestrator.reset()
        logger.info('[bold yellow][CULTIVO][/bold yellow] Knowledge base reset by user.')
        return ChatMessage(role=MessageRole.SYSTEM, content=RESET_MESSAGE)

    def save(self) -> None:
        """Explicit save trigger. Failures are logged, the session keeps running."""
        with self.shared.read() as store:
            try:
                self.smith.save_store(store)
            except OSError as e:
                logger.error(f'Failed to persist knowledge base: {e}')

    def export_graph(self) -> Path:
        with self.shared.read() as store:
            return self.smith.export_graph(store)
