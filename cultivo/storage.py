import logging
import networkx as nx
from pathlib import Path
from pydantic import ValidationError
from cultivo.const import DEFAULT_KB_FILENAME, DEFAULT_GRAPH_EXPORT_FILENAME
from cultivo.knowledge import KnowledgeStore
from cultivo.models import KnowledgeRecord
logger = logging.getLogger('cultivo')


class GraphSmith:
    """
    Repository class responsible for the persistence and retrieval of the
    knowledge store.
    """

    def __init__(self, persistence_path: Path):
        self.path = Path(persistence_path)
        self.kb_file = self.path / DEFAULT_KB_FILENAME
        self.graph_file = self.path / DEFAULT_GRAPH_EXPORT_FILENAME
        try:
            if not self.path.exists():
                self.path.mkdir(parents=True, exist_ok=True)
        except (OSError, PermissionError) as e:
            logger.error(f'Critical error: Could not create storage directory {self.path}: {e}')
            raise

    def load_store(self) -> KnowledgeStore:
        """Loads the store from disk; the reverse index is rebuilt on the way in."""
        if not self.kb_file.exists():
            logger.info('[bold blue][GRAPH_SMITH][/bold blue] No existing knowledge base found. Starting fresh.')
            return KnowledgeStore()
        try:
            record = KnowledgeRecord.model_validate_json(self.kb_file.read_text(encoding='utf-8'))
            store = KnowledgeStore.from_record(record)
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f'Failed to load knowledge base: {e}')
            return KnowledgeStore()
        logger.info(f'[bold blue][GRAPH_SMITH][/bold blue] Knowledge base loaded | [bold cyan]{store.concept_count()}[/bold cyan] concepts, [bold cyan]{store.link_count()}[/bold cyan] links.')
        return store

    def save_store(self, store: KnowledgeStore) -> None:
        """Writes kb.json to a temp file, then atomically renames it."""
        temp_path = self.kb_file.with_suffix('.tmp')
        try:
            temp_path.write_text(store.to_record().model_dump_json(indent=2), encoding='utf-8')
            temp_path.replace(self.kb_file)
            logger.debug(f'[bold blue][GRAPH_SMITH][/bold blue] Saved {store.concept_count()} concepts to {self.kb_file}')
        except OSError as e:
            logger.error(f'Failed to save knowledge base: {e}')
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass
            raise

    def export_graph(self, store: KnowledgeStore) -> Path:
        """GEXF export of the binary links for external visualisation."""
        temp_path = self.graph_file.with_suffix('.tmp')
        try:
            nx.write_gexf(store.to_graph(), str(temp_path))
            temp_path.replace(self.graph_file)
        except Exception as e:
            logger.error(f'Failed to export graph: {e}')
            if temp_path.exists():
                temp_path.unlink()
            raise e
        logger.info(f'[bold blue][GRAPH_SMITH][/bold blue] Graph exported to {self.graph_file}')
        return self.graph_file
