import logging
from typing import Callable, List, Optional, Sequence, Tuple
from cultivo.const import Intent, INTENT_TEMPLATE_THRESHOLD
from cultivo.knowledge import cosine_similarity
logger = logging.getLogger('cultivo')

INTENT_TEMPLATES = {
    Intent.CONFIRMING: [
        "sim, correto, exatamente",
        "concordo, faz sentido",
        "é isso mesmo, verdade",
        "sim faz total sentido",
        "correto exato preciso",
    ],
    Intent.DENYING: [
        "não, errado, incorreto",
        "discordo, não é assim",
        "na verdade é diferente",
        "não concordo está errado",
        "isso não está certo",
    ],
    Intent.QUERYING: [
        "o que é, como funciona",
        "por que, qual a razão",
        "me explique, o que significa",
        "como assim, pode explicar",
        "qual o motivo, por quê",
    ],
}

CONFIRM_PREFIXES = ('sim', 'faz sentido', 'concordo')
CONFIRM_EXACT = ('correto', 'exato')
DENY_PREFIXES = ('não', 'errado', 'discordo', 'incorreto')
QUERY_PREFIXES = ('o que', 'como', 'por que', 'qual')


def classify_by_heuristics(text: str) -> Optional[Intent]:
    """Cheap prefix rules; None when the text needs the embedding fallback."""
    lower = text.strip().lower()
    if lower.startswith(CONFIRM_PREFIXES) or lower in CONFIRM_EXACT:
        return Intent.CONFIRMING
    if lower.startswith(DENY_PREFIXES):
        return Intent.DENYING
    if lower.startswith(QUERY_PREFIXES) or '?' in lower:
        return Intent.QUERYING
    return None


class IntentClassifier:
    """
    Two-stage classifier: prefix heuristics, then nearest template phrase by
    embedding. Anything that matches no template well enough is narration.
    """

    def __init__(self, embed_batch: Callable[[List[str]], List[List[float]]], threshold: float = INTENT_TEMPLATE_THRESHOLD):
        self._embed_batch = embed_batch
        self.threshold = threshold
        texts, intents = ([], [])
        for intent, phrases in INTENT_TEMPLATES.items():
            for phrase in phrases:
                texts.append(phrase)
                intents.append(intent)
        # One batch for every template.
        self.templates: List[Tuple[Intent, Sequence[float]]] = list(zip(intents, embed_batch(texts)))
        logger.info(f'[bold blue][INTENT][/bold blue] {len(self.templates)} intent templates embedded.')

    def classify(self, text: str) -> Intent:
        intent = classify_by_heuristics(text)
        if intent is not None:
            return intent
        embedding = self._embed_batch([text])[0]
        best_intent, best_score = (Intent.NARRATING, 0.0)
        for template_intent, template_vec in self.templates:
            score = cosine_similarity(embedding, template_vec)
            if score > best_score:
                best_intent, best_score = (template_intent, score)
        if best_score > self.threshold:
            logger.debug(f'[bold blue][INTENT][/bold blue] {best_intent.value} by template (score={best_score:.2f})')
            return best_intent
        return Intent.NARRATING
