"""Tests for search data types and the category catalogue."""

import pytest
from pydantic import ValidationError

from clarity.search.categories import AVAILABLE_CATEGORIES, category_name, is_available_category
from clarity.search.models import (
    ClauseKind,
    PaperSummary,
    Query,
    QueryClause,
    SearchCriteria,
    SortField,
    SortOrder,
)


class TestSearchCriteria:
    """Test SearchCriteria model."""

    def test_defaults(self):
        criteria = SearchCriteria()

        assert criteria.term == ""
        assert criteria.category is None
        assert criteria.sort_field == SortField.RELEVANCE
        assert criteria.sort_order == SortOrder.DESCENDING
        assert criteria.max_results == 20

    @pytest.mark.parametrize("requested, expected", [(0, 1), (-1, 1), (500, 100), (20, 20)])
    def test_max_results_clamped_not_rejected(self, requested, expected):
        assert SearchCriteria(max_results=requested).max_results == expected

    @pytest.mark.parametrize("requested", [None, "many", object()])
    def test_non_numeric_max_results_is_a_validation_error(self, requested):
        with pytest.raises(ValidationError, match="max_results must be a whole number"):
            SearchCriteria(max_results=requested)

    def test_is_immutable(self):
        criteria = SearchCriteria(term="x")

        with pytest.raises(ValidationError):
            criteria.term = "y"

    def test_equal_by_value(self):
        assert SearchCriteria(term="x", category="cs.AI") == SearchCriteria(term="x", category="cs.AI")

    def test_sort_values_match_arxiv_api(self):
        assert SortField("submittedDate") == SortField.SUBMITTED_DATE
        assert SortField("lastUpdatedDate") == SortField.LAST_UPDATED_DATE
        assert SortOrder("ascending") == SortOrder.ASCENDING


class TestQuery:
    """Test Query model."""

    def test_rejects_out_of_range_max_results(self):
        with pytest.raises(ValidationError):
            Query(sort_field=SortField.RELEVANCE, sort_order=SortOrder.DESCENDING, max_results=0)

    def test_clause_value_cannot_be_empty(self):
        with pytest.raises(ValidationError):
            QueryClause(kind=ClauseKind.TEXT, value="")

    def test_clause_accessors(self):
        query = Query(
            clauses=(
                QueryClause(kind=ClauseKind.CATEGORY, value="cs.AI"),
                QueryClause(kind=ClauseKind.TEXT, value="agents"),
            ),
            sort_field=SortField.RELEVANCE,
            sort_order=SortOrder.DESCENDING,
            max_results=5,
        )

        assert query.category_clause.value == "cs.AI"
        assert query.text_clause.value == "agents"
        assert not query.is_unfiltered


class TestPaperSummary:
    """Test PaperSummary model."""

    def test_minimal_paper(self):
        paper = PaperSummary(id="2301.00001v1", title="A Paper")

        assert paper.authors == ()
        assert paper.categories == frozenset()
        assert paper.primary_category is None

    def test_sequences_are_coerced(self):
        paper = PaperSummary(
            id="2301.00001v1",
            title="A Paper",
            authors=["Ada", "Grace"],
            categories=["cs.AI", "cs.LG", "cs.AI"],
        )

        assert paper.authors == ("Ada", "Grace")
        assert paper.categories == frozenset({"cs.AI", "cs.LG"})


class TestCategories:
    """Test the category catalogue."""

    def test_catalogue_size(self):
        assert len(AVAILABLE_CATEGORIES) == 9

    def test_codes_and_names_are_valid(self):
        for code, name in AVAILABLE_CATEGORIES:
            assert "." in code
            assert len(code) >= 4
            assert not code.startswith(".")
            assert not code.endswith(".")
            assert len(name) > 2

    @pytest.mark.parametrize("code", ["cs.AI", "cs.LG", "cs.CV", "cs.CL", "math.CO"])
    def test_common_categories_available(self, code):
        assert is_available_category(code)

    def test_category_name_lookup(self):
        assert category_name("cs.AI") == "Artificial Intelligence"
        assert category_name("astro-ph.GA") is None
