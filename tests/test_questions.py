"""
Tests for cultivo.questions (deterministic question templates).
"""
import uuid
from cultivo.concept import Concept
from cultivo.questions import QuestionGenerator


def _concept(label, first_byte, mentions=1):
    return Concept(label=label, id=uuid.UUID(bytes=bytes([first_byte]) + bytes(15)), mention_count=mentions)


class TestQuestionGenerator:

    def test_same_concept_same_question(self):
        generator = QuestionGenerator()
        concept = Concept(label='Chuva')
        assert generator.for_concept(concept) == generator.for_concept(concept)

    def test_template_keyed_on_first_id_byte(self):
        generator = QuestionGenerator()
        assert generator.for_concept(_concept('Chuva', 0)) == "Você mencionou 'Chuva'. Pode contar mais sobre isso?"
        assert generator.for_concept(_concept('Chuva', 1)) == "O que exatamente você quer dizer com 'Chuva'?"
        assert generator.for_concept(_concept('Chuva', 5)) == "Qual a importância de 'Chuva' nesse contexto?"

    def test_frequent_concepts_use_other_templates(self):
        question = QuestionGenerator().for_concept(_concept('Chuva', 0, mentions=4))
        assert question == "Você mencionou 'Chuva' 4 vezes. Isso ainda é relevante para você?"

    def test_pairs_sum_id_bytes(self):
        generator = QuestionGenerator()
        a, b = (_concept('Chuva', 1), _concept('Dano', 1))
        assert generator.for_relation(a, b) == "Existem exceções para a relação entre 'Chuva' e 'Dano'?"
        assert generator.for_causal_link(a, b) == "O que mais pode causar 'Dano' além de 'Chuva'?"
