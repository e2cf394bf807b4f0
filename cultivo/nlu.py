"""
Concrete natural-language collaborators for the orchestrator.

The orchestrator only relies on four capabilities: extract, embed_batch,
classify_intent and generate_reply. NluPipeline provides them with a
sentence-transformers embedder, Portuguese heuristics and (optionally) a
Gemini client. Provider failures are re-raised as NluError.
"""
import logging
from typing import Any, List, Optional
from google.genai import types
from cultivo.const import Intent, GEMINI_MODEL
from cultivo.extractor import EntityExtractor
from cultivo.intent import IntentClassifier
from cultivo.models import EntityExtraction
from cultivo.prompts import EXTRACTION_INSTRUCTION
logger = logging.getLogger('cultivo')


class NluError(Exception):
    """Raised when a language collaborator (embedder or LLM) cannot answer."""


class NluPipeline:

    def __init__(self, embedder: Any, llm_client: Any = None, model_id: Optional[str] = None, use_llm_extraction: bool = False):
        self.embedder = embedder
        self.llm_client = llm_client
        self.model_id = model_id or GEMINI_MODEL
        self.use_llm_extraction = use_llm_extraction
        self.extractor = EntityExtractor()
        self.intent_classifier = IntentClassifier(self.embed_batch)

    def extract(self, text: str) -> List[str]:
        """Routing for entity extraction (LLM structured output or heuristic fallback)."""
        if self.use_llm_extraction and self.llm_client:
            entities = self._extract_with_llm(text)
            if entities is not None:
                return entities
        return self.extractor.extract(text)

    def _extract_with_llm(self, text: str) -> Optional[List[str]]:
        try:
            response = self.llm_client.models.generate_content(model=self.model_id, contents=text, config=types.GenerateContentConfig(response_mime_type='application/json', response_schema=EntityExtraction, system_instruction=EXTRACTION_INSTRUCTION))
            if response.parsed and hasattr(response.parsed, 'entities'):
                seen = set()
                entities = []
                for entity in response.parsed.entities:
                    entity = entity.strip()
                    if entity and entity.lower() not in seen:
                        seen.add(entity.lower())
                        entities.append(entity)
                return entities
        except Exception as e:
            logger.warning(f'[bold yellow][NLU][/bold yellow] LLM extraction failed, using heuristics: {e}')
        return None

    def embed_batch(self, texts: List[str]) -> List[List[float]]:
        try:
            return self.embedder.embed_batch(texts)
        except Exception as e:
            raise NluError(f'Embedding failed: {e}') from e

    def classify_intent(self, text: str) -> Intent:
        return self.intent_classifier.classify(text)

    def generate_reply(self, system_prompt: str, user_text: str) -> str:
        if not self.llm_client:
            raise NluError('No LLM client configured.')
        try:
            response = self.llm_client.models.generate_content(model=self.model_id, contents=user_text, config=types.GenerateContentConfig(system_instruction=system_prompt))
        except Exception as e:
            raise NluError(f'Reply generation failed: {e}') from e
        text = (response.text or '').strip()
        if not text:
            raise NluError('Empty reply from LLM.')
        return text
