import re
import unicodedata
from typing import List

STOPWORDS = frozenset({
    "o", "a", "os", "as", "um", "uma", "uns", "umas", "de", "do", "da", "dos", "das", "em", "no",
    "na", "nos", "nas", "por", "pelo", "pela", "pelos", "pelas", "para", "com", "sem", "sob",
    "sobre", "entre", "que", "se", "não", "sim", "mas", "ou", "e", "é", "são", "foi", "era",
    "ser", "ter", "há", "está", "eu", "ele", "ela", "nós", "eles", "elas", "me", "te", "lhe",
    "isso", "isto", "esse", "esta", "essa", "aquele", "aquela", "meu", "minha", "seu",
    "sua", "nosso", "nossa", "muito", "mais", "menos", "bem", "mal", "já", "ainda", "também",
    "então", "quando", "como", "onde", "porque", "porquê", "depois", "antes", "agora", "sempre",
    "nunca", "todo", "toda", "cada", "outro", "outra", "mesmo", "mesma", "próprio", "própria",
    "ao", "à", "aos", "às", "num", "numa", "dum", "duma", "qual", "quais", "quem",
    "até", "pode", "vai", "vou", "tem", "tinha", "acho", "aqui", "ali", "lá", "cá",
    "faz", "coisa", "vez", "vezes", "dia", "dias", "ligou", "disse", "falou",
    "causa", "principal", "atrasou", "atrasado", "atraso",
    "estava", "estavam", "estou", "estão", "foram", "seria",
})

VERB_SUFFIXES = ("ando", "endo", "indo", "ado", "ido")

_UPPER = "A-ZÁÀÂÃÉÈÊÍÏÓÔÕÖÚÇ"
_LOWER = "a-záàâãéèêíïóôõöúçüñ"
QUOTED_RE = re.compile(r'["“”]([^"“”]+)["“”]|\'([^\']+)\'')
CAPITALIZED_RE = re.compile(rf"\b[{_UPPER}][{_LOWER}]{{2,}}(?:\s+(?:(?:de|do|da|dos|das)\s+)?[{_UPPER}][{_LOWER}]+)*\b")


def is_stopword(word: str) -> bool:
    return word in STOPWORDS


def looks_like_verb(word: str) -> bool:
    return word.endswith(VERB_SUFFIXES)


def _trim(word: str) -> str:
    start, end = (0, len(word))
    while start < end and not word[start].isalnum():
        start += 1
    while end > start and not word[end - 1].isalnum():
        end -= 1
    return word[start:end]


def _meaningful(word: str) -> bool:
    lower = word.lower()
    return not is_stopword(lower) and len(lower) > 2 and not looks_like_verb(lower)


class EntityExtractor:
    """
    Heuristic entity extraction for Portuguese text.

    Candidates come out in priority order: quoted text, capitalized names
    (including "Universidade de São Paulo" style compounds), 2-3 word phrases
    made only of meaningful words, then any remaining word of 4+ characters.
    Duplicates are dropped case-insensitively, keeping the first occurrence.
    """

    def extract(self, text: str) -> List[str]:
        text = unicodedata.normalize('NFC', text)
        entities: List[str] = []
        seen = set()

        def add(candidate: str) -> None:
            entities.append(candidate)
            seen.add(candidate.lower())

        for match in QUOTED_RE.finditer(text):
            entity = match.group(1) or match.group(2)
            if entity and len(entity) > 1 and entity.lower() not in seen:
                add(entity)

        for match in CAPITALIZED_RE.finditer(text):
            entity = match.group(0)
            lower = entity.lower()
            if lower not in seen and not is_stopword(lower) and len(entity) > 2:
                add(entity)

        words = text.split()
        for size in (2, 3):
            for start in range(len(words) - size + 1):
                cleaned = [_trim(w) for w in words[start:start + size]]
                if all(_meaningful(w) for w in cleaned):
                    phrase = ' '.join(cleaned)
                    if phrase.lower() not in seen:
                        add(phrase)

        for word in words:
            clean = _trim(word)
            lower = clean.lower()
            if len(clean) >= 4 and not is_stopword(lower) and not looks_like_verb(lower) and lower not in seen:
                add(clean)
        return entities
