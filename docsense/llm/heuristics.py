"""Deterministic keyword-based classification used when the LLM is unavailable."""

import re
from dataclasses import dataclass, field

from docsense.ingest.normalizer import count_meaningful_words
from docsense.models.documents import Category, Classification, Department

IMAGE_DISCLAIMER = " (Analysis based on text content only, images and graphics were not processed.)"

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_IMAGE_REFERENCE = re.compile(r"image|figure|chart")


@dataclass(frozen=True)
class KeywordRule:
    """Maps any of a set of keywords to a (category, department) pair.

    Keywords match as whole words with an optional plural "s", not as bare
    substrings: "hr" does not fire on "three", and derived forms such as
    "contractual" or "lawyer" do not count as "contract" or "law".
    """

    keywords: tuple[str, ...]
    category: Category
    department: Department
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        alternatives = "|".join(re.escape(k) for k in self.keywords)
        object.__setattr__(self, "pattern", re.compile(rf"\b(?:{alternatives})s?\b"))

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


# Order matters: the first matching rule wins.
KEYWORD_RULES: tuple[KeywordRule, ...] = (
    KeywordRule(("legal", "contract", "compliance", "law"), Category.legal, Department.legal),
    KeywordRule(
        ("marketing", "campaign", "brand", "advertisement"),
        Category.marketing,
        Department.marketing,
    ),
    KeywordRule(("hr", "human resources", "employee", "personnel"), Category.hr, Department.hr),
    KeywordRule(
        ("finance", "budget", "financial", "accounting"), Category.finance, Department.finance
    ),
    KeywordRule(("sales", "revenue", "customer", "client"), Category.business, Department.sales),
    KeywordRule(
        ("engineering", "technical", "development", "software"),
        Category.technical,
        Department.engineering,
    ),
    KeywordRule(
        ("research", "study", "analysis", "investigation"),
        Category.research,
        Department.research,
    ),
)

DEFAULT_LABELS = (Category.technical, Department.operations)


def infer_labels(text: str, title: str) -> tuple[Category, Department]:
    """Pick (category, department) from the first matching keyword rule."""
    haystack = f"{text} {title}".lower()
    for rule in KEYWORD_RULES:
        if rule.matches(haystack):
            return rule.category, rule.department
    return DEFAULT_LABELS


def summarize(text: str, title: str, category: Category, department: Department) -> str:
    """Build an extractive summary from the first two substantial sentences."""
    sentences = [s.strip() for s in _SENTENCE_SPLIT.split(text) if len(s.strip()) > 20]

    if sentences:
        summary = ". ".join(sentences[:2]) + "."
    else:
        words = count_meaningful_words(text)
        summary = (
            f'Document "{title}" contains {words} words of text content. '
            f"The document discusses {category.value.lower()} topics relevant to the "
            f"{department.value} department."
        )

    if _IMAGE_REFERENCE.search(text.lower()):
        summary += IMAGE_DISCLAIMER

    return summary


class HeuristicClassifier:
    """Fully local classifier; same input always yields the same output."""

    async def classify(self, text: str, title: str, source_type: str | None = None) -> Classification:
        """Classify and summarize without any network call."""
        return self.classify_sync(text, title)

    def classify_sync(self, text: str, title: str) -> Classification:
        category, department = infer_labels(text, title)
        return Classification(
            summary=summarize(text, title, category, department),
            category=category.value,
            department=department.value,
            source="heuristic",
        )
