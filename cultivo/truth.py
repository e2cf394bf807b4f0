"""
NARS truth values.

A belief is stored as evidence (positive, negative) rather than as the
(frequency, confidence) pair it is read as. Revision then becomes a plain sum
of evidence, and every inference rule goes back through the (f, c)
constructor so confidence stays strictly below 1.
"""
from dataclasses import dataclass
from cultivo.const import EVIDENTIAL_HORIZON, MAX_CONFIDENCE


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


@dataclass(frozen=True)
class TruthValue:
    positive_evidence: float = 0.0
    negative_evidence: float = 0.0

    @classmethod
    def new(cls, frequency: float, confidence: float) -> 'TruthValue':
        """Builds a truth value from (frequency, confidence), clamping both."""
        frequency = _clamp(frequency, 0.0, 1.0)
        confidence = _clamp(confidence, 0.0, MAX_CONFIDENCE)
        w_total = EVIDENTIAL_HORIZON * confidence / (1.0 - confidence)
        return cls(w_total * frequency, w_total * (1.0 - frequency))

    @classmethod
    def proto(cls) -> 'TruthValue':
        """Prior for a freshly created concept: undecided, barely supported."""
        return cls.new(0.5, 0.1)

    @classmethod
    def observed(cls, positive: bool) -> 'TruthValue':
        """A single strong observation from the user (confirmation or denial)."""
        return cls.new(1.0 if positive else 0.0, 0.9)

    @property
    def total_evidence(self) -> float:
        return self.positive_evidence + self.negative_evidence

    def frequency(self) -> float:
        total = self.total_evidence
        if total == 0.0:
            return 0.5
        return self.positive_evidence / total

    def confidence(self) -> float:
        total = self.total_evidence
        return total / (total + EVIDENTIAL_HORIZON)

    def expectation(self) -> float:
        return self.confidence() * (self.frequency() - 0.5) + 0.5

    def revise(self, other: 'TruthValue') -> 'TruthValue':
        """Merges two independent bodies of evidence about the same statement."""
        return TruthValue(self.positive_evidence + other.positive_evidence, self.negative_evidence + other.negative_evidence)

    def deduce(self, other: 'TruthValue') -> 'TruthValue':
        """S->M (self), M->P (other) |- S->P."""
        f = self.frequency() * other.frequency()
        c = f * self.confidence() * other.confidence()
        return TruthValue.new(f, c)

    def induce(self, other: 'TruthValue') -> 'TruthValue':
        """M->P (self), M->S (other) |- S~P."""
        w = self.frequency() * self.confidence() * other.confidence()
        return TruthValue.new(other.frequency(), w / (w + EVIDENTIAL_HORIZON))

    def abduce(self, other: 'TruthValue') -> 'TruthValue':
        """P->M (self), S->M (other) |- S->P."""
        w = other.frequency() * self.confidence() * other.confidence()
        return TruthValue.new(self.frequency(), w / (w + EVIDENTIAL_HORIZON))

    def __str__(self) -> str:
        return f'⟨{self.frequency():.2f}, {self.confidence():.2f}⟩'
