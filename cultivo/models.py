from pydantic import BaseModel, Field
from enum import Enum
from typing import List, Optional


class MessageRole(str, Enum):
    USER = "user"
    SYSTEM = "system"
    INFERENCE = "inference"
    QUESTION = "question"
    ALERT = "alert"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    role: MessageRole = Field(description="Styling tag for the event (system, inference, question, alert, ...).")
    content: str = Field(description="Human-readable text, ready for display.")


class ParticipantRecord(BaseModel):
    concept_id: str
    role: str


class ConceptRecord(BaseModel):
    id: str
    label: str
    positive_evidence: float
    negative_evidence: float
    energy: float
    state: str
    embedding: Optional[List[float]] = None
    mention_count: int = 1
    created_at: float
    last_mentioned: float


class LinkRecord(BaseModel):
    id: str
    kind: str = Field(description="Kind name, or 'Custom:<text>' for open-vocabulary relations.")
    participants: List[ParticipantRecord]
    positive_evidence: float
    negative_evidence: float
    energy: float


class KnowledgeRecord(BaseModel):
    """On-disk form of the knowledge store. The reverse index is never stored."""
    concepts: List[ConceptRecord] = Field(default_factory=list)
    links: List[LinkRecord] = Field(default_factory=list)


class ConceptNode(BaseModel):
    id: str
    label: str
    frequency: float
    confidence: float
    energy: float
    state: str
    mention_count: int


class LinkEdge(BaseModel):
    id: str
    source: str
    target: str
    kind: str
    frequency: float
    confidence: float
    energy: float


class GraphSnapshot(BaseModel):
    concepts: List[ConceptNode] = Field(default_factory=list)
    links: List[LinkEdge] = Field(default_factory=list)


class EntityExtraction(BaseModel):
    entities: List[str] = Field(description="Candidate entities mentioned in the text, most important first. Keep the original casing.")
