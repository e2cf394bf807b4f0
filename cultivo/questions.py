from typing import List
from cultivo.concept import Concept


def _pick(templates: List[str], *concepts: Concept) -> str:
    # Same concept(s), same phrasing: selection keyed on the first id byte.
    idx = sum(c.id.bytes[0] for c in concepts) % len(templates)
    return templates[idx]


class QuestionGenerator:
    """Reflective questions for uncertain concepts and freshly inferred relations."""

    def for_concept(self, concept: Concept) -> str:
        label = concept.label
        if concept.mention_count >= 3:
            templates = [
                f"Você mencionou '{label}' {concept.mention_count} vezes. Isso ainda é relevante para você?",
                f"'{label}' aparece frequentemente. Pode elaborar mais sobre o papel dele?",
                f"Parece que '{label}' é importante. O que aconteceria sem ele?",
            ]
        else:
            templates = [
                f"Você mencionou '{label}'. Pode contar mais sobre isso?",
                f"O que exatamente você quer dizer com '{label}'?",
                f"Qual a importância de '{label}' nesse contexto?",
            ]
        return _pick(templates, concept)

    def for_relation(self, source: Concept, target: Concept) -> str:
        templates = [
            f"'{source.label}' e '{target.label}' parecem relacionados. Há uma conexão direta?",
            f"Como '{source.label}' influencia '{target.label}'?",
            f"Existem exceções para a relação entre '{source.label}' e '{target.label}'?",
        ]
        return _pick(templates, source, target)

    def for_causal_link(self, cause: Concept, effect: Concept) -> str:
        templates = [
            f"Existem exceções para '{cause.label}' causar '{effect.label}'?",
            f"'{cause.label} → {effect.label}' é sempre verdade ou há condições específicas?",
            f"O que mais pode causar '{effect.label}' além de '{cause.label}'?",
        ]
        return _pick(templates, cause, effect)
