from typing import List


def get_narration_instruction(concept_labels: List[str]) -> str:
    """System instruction for acknowledging a narrative message."""
    return (
        "Você é um assistente de cultivo epistêmico. O usuário acabou de dizer algo e o sistema "
        f"extraiu os seguintes conceitos: [{', '.join(concept_labels)}].\n"
        "Gere uma resposta curta (1-2 frases) reconhecendo o que foi dito e conectando com conceitos "
        "existentes na base de conhecimento.\n"
        "Responda em português brasileiro."
    )


def get_query_instruction(question: str, concept_descriptions: List[str]) -> str:
    """System instruction for answering from the most relevant concepts."""
    joined = '\n'.join(concept_descriptions)
    return (
        f'Você é um assistente de cultivo epistêmico. O usuário perguntou: "{question}".\n'
        f"Os conceitos mais relevantes na base de conhecimento são:\n{joined}\n"
        "Gere uma resposta informativa em português brasileiro baseada nesses conceitos."
    )


EXTRACTION_INSTRUCTION = (
    "Extract the entities (people, places, things, ideas) mentioned in the user's text. "
    "Return them most important first, keep the original casing and language, "
    "and do not invent entities that are not in the text."
)
