import logging
from typing import List
from sentence_transformers import SentenceTransformer
from cultivo.const import EMBEDDING_MODEL
logger = logging.getLogger('cultivo')


class Embedder:
    """
    Service class responsible for turning entity strings and queries into
    fixed-length vectors.
    """

    def __init__(self, model_name: str = EMBEDDING_MODEL):
        logger.info(f'[bold blue][EMBEDDER][/bold blue] Loading embedding model {model_name}...')
        self.model_name = model_name
        self.encoder = SentenceTransformer(model_name)

    def embed_batch(self, texts: List[str]) -> List[List[float]]:
        """One vector per input, same order. Plain lists so they serialize as JSON."""
        if not texts:
            return []
        vectors = self.encoder.encode(texts, normalize_embeddings=True)
        return [v.tolist() for v in vectors]
