"""Edit-distance similarity and weighted pattern scoring."""
import re
from dataclasses import dataclass, field
from typing import List, Pattern, Sequence

MAX_LENGTH_GAP = 3

PRESENCE = "presence"
COUNT_THRESHOLD = "count_threshold"


def levenshtein(a: str, b: str) -> int:
    """Classic dynamic-programming edit distance (insert/delete/substitute)."""
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            ))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """
    Normalized edit-distance similarity in [0.0, 1.0].

    Strings whose lengths differ by more than three characters are treated as
    unrelated and score 0.0 without computing the distance.
    """
    if a == b:
        return 1.0
    if abs(len(a) - len(b)) > MAX_LENGTH_GAP:
        return 0.0

    longest = max(len(a), len(b))
    return 1.0 - levenshtein(a, b) / longest


@dataclass(frozen=True)
class PatternRule:
    """One row of a pattern table."""
    pattern: Pattern
    description: str
    weight: int
    mode: str = PRESENCE
    threshold: int = 0

    @classmethod
    def compile(cls, regex: str, description: str, weight: int,
                mode: str = PRESENCE, threshold: int = 0, flags: int = re.IGNORECASE) -> "PatternRule":
        return cls(re.compile(regex, flags), description, weight, mode, threshold)

    def matches(self, text: str) -> bool:
        if self.mode == COUNT_THRESHOLD:
            return len(self.pattern.findall(text)) > self.threshold
        return self.pattern.search(text) is not None


@dataclass
class PatternScore:
    """Summed weight of matching rules plus their descriptions, in table order."""
    score: int = 0
    matches: List[str] = field(default_factory=list)


def score_patterns(text: str, rules: Sequence[PatternRule]) -> PatternScore:
    """Evaluate every rule against ``text``; the total is clamped to [0, 100]."""
    result = PatternScore()
    for rule in rules:
        if rule.matches(text):
            result.score += rule.weight
            result.matches.append(rule.description)

    result.score = max(0, min(result.score, 100))
    return result
