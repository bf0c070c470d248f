"""Tests for the deterministic keyword classifier."""

import pytest

from docsense.llm.heuristics import (
    DEFAULT_LABELS,
    IMAGE_DISCLAIMER,
    HeuristicClassifier,
    infer_labels,
    summarize,
)
from docsense.models.documents import Category, Department

CATEGORY_VALUES = {c.value for c in Category}
DEPARTMENT_VALUES = {d.value for d in Department}


class TestInferLabels:
    """Test keyword rule ordering and matching."""

    @pytest.mark.parametrize(
        ("text", "category", "department"),
        [
            ("This contract sets out the obligations", Category.legal, Department.legal),
            ("Our new brand campaign launches today", Category.marketing, Department.marketing),
            ("Employee onboarding checklist", Category.hr, Department.hr),
            ("Q3 financial budget report", Category.finance, Department.finance),
            ("Customer revenue grew", Category.business, Department.sales),
            ("Software development guidelines", Category.technical, Department.engineering),
            ("A longitudinal study of sleep", Category.research, Department.research),
            ("Nothing in particular here", Category.technical, Department.operations),
        ],
    )
    def test_rules(self, text: str, category: Category, department: Department) -> None:
        assert infer_labels(text, "Untitled") == (category, department)

    def test_first_rule_wins(self) -> None:
        """Legal outranks finance when both match."""
        assert infer_labels("budget compliance review", "") == (Category.legal, Department.legal)

    def test_title_is_considered(self) -> None:
        assert infer_labels("plain words only", "Marketing plan") == (
            Category.marketing,
            Department.marketing,
        )

    def test_whole_word_matching(self) -> None:
        """'hr' must not match inside 'three', 'law' not inside 'flaw'."""
        assert infer_labels("three flaws were found", "") == (
            Category.technical,
            Department.operations,
        )

    def test_plural_keywords_match(self) -> None:
        assert infer_labels("signed contracts", "") == (Category.legal, Department.legal)

    def test_derived_forms_do_not_match(self) -> None:
        assert infer_labels("a contractual lawyer", "") == DEFAULT_LABELS


class TestSummarize:
    """Test extractive and templated summaries."""

    def test_takes_first_two_substantial_sentences(self) -> None:
        text = (
            "Short one. The quarterly budget grew by a healthy margin. "
            "Accounting closed the books on time this quarter! Extra sentence here for padding."
        )

        summary = summarize(text, "Q3", Category.finance, Department.finance)

        assert summary == (
            "The quarterly budget grew by a healthy margin. "
            "Accounting closed the books on time this quarter."
        )

    def test_template_when_no_long_sentences(self) -> None:
        summary = summarize("tiny words only", "Notes", Category.technical, Department.operations)

        assert summary == (
            'Document "Notes" contains 3 words of text content. The document discusses '
            "technical topics relevant to the Operations department."
        )

    def test_image_disclaimer(self) -> None:
        text = "The figure below shows the budget growth over the last year."
        summary = summarize(text, "Q3", Category.finance, Department.finance)
        assert summary.endswith(IMAGE_DISCLAIMER)


class TestHeuristicClassifier:
    """Test the classifier wrapper."""

    @pytest.mark.asyncio
    async def test_deterministic_and_in_vocabulary(self) -> None:
        classifier = HeuristicClassifier()
        text = "Q3 financial budget report discussing revenue and accounting."

        first = await classifier.classify(text, "q3-report", "pdf")
        second = await classifier.classify(text, "q3-report", "pdf")

        assert first == second
        assert first.source == "heuristic"
        assert first.category in CATEGORY_VALUES
        assert first.department in DEPARTMENT_VALUES
        assert (first.category, first.department) == ("Finance", "Finance")
