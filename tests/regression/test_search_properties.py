"""
Regression Test Suite for search and ranking properties
Guards the behaviours the storefront relies on: similarity bounds, deterministic
extraction, intent precedence, preference convergence and index rebuild stability
"""
import itertools

import pytest

from shopsearch.engines.recommendation import SearchEngine, SearchIndex, cosine_similarity, rank_by_similarity
from shopsearch.services.nlp_processor import entity_extractor, intent_classifier
from shopsearch.services.user_profile import UserProfile


class TestCosineSimilarityProperties:
    """
    Cosine similarity over TF-IDF vectors is symmetric, bounded in [0, 1]
    and 1 for a vector against itself
    """

    @pytest.mark.regression
    def test_symmetric_and_bounded(self, sample_index):
        vectors = list(sample_index.vectors().values())

        for vec1, vec2 in itertools.product(vectors, repeat=2):
            similarity = cosine_similarity(vec1, vec2)
            assert similarity == cosine_similarity(vec2, vec1)
            assert 0.0 <= similarity <= 1.0

    @pytest.mark.regression
    def test_self_similarity(self, sample_index):
        for vector in sample_index.vectors().values():
            if vector:
                assert cosine_similarity(vector, vector) == pytest.approx(1.0)

    @pytest.mark.regression
    def test_tfidf_weights_non_negative(self, sample_index):
        assert all(weight >= 0 for weight in sample_index.idf.values())
        for vector in sample_index.vectors().values():
            assert all(weight > 0 for weight in vector.values())

    @pytest.mark.regression
    def test_empty_query_yields_no_results(self, sample_index):
        assert rank_by_similarity(sample_index.vectorize_query(""), sample_index.vectors()) == []


class TestExtractionProperties:
    """
    Entity extraction is deterministic and handles the canonical budget query
    """

    @pytest.mark.regression
    @pytest.mark.parametrize(
        "text",
        [
            "blue jacket under 20000",
            "cheap navy denim jacket, size M, between 5000 and 9000",
            "What should I wear to a beach wedding in summer?",
            "",
        ],
    )
    def test_idempotent(self, text):
        assert entity_extractor.extract(text) == entity_extractor.extract(text)

    @pytest.mark.regression
    def test_blue_jacket_under_20000(self):
        entities = entity_extractor.extract("blue jacket under 20000")

        assert set(entities.colors) == {"blue"}
        assert set(entities.categories) == {"Jackets"}
        assert entities.price_range.max == 20000
        assert entities.price_range.min is None


class TestExactMatchRanking:
    """
    In a three product catalog where only one product contains the query terms,
    that product ranks first and the others are filtered out
    """

    @pytest.mark.regression
    def test_only_matching_product_is_ranked(self, product_factory):
        catalog = [
            product_factory(id="a", name="Velvet Clutch Bag", category=""),
            product_factory(id="b", name="Linen Summer Shirt", category=""),
            product_factory(id="c", name="Wool Winter Coat", category=""),
        ]
        index = SearchIndex.build(catalog)

        ranked = rank_by_similarity(index.vectorize_query("velvet clutch"), index.vectors())

        assert [product_id for product_id, _ in ranked] == ["a"]
        assert ranked[0][1] > 0


class TestIntentPrecedence:
    """
    When recommend and question both fire, recommend is the primary intent
    """

    @pytest.mark.regression
    def test_recommend_over_question(self):
        result = intent_classifier.classify("what do you recommend for a party")

        assert {"recommend", "question"} <= {intent.label for intent in result.matches}
        assert result.primary.label == "recommend"


class TestPreferenceConvergence:
    """
    Repeated views of one category converge to weight 1.0 for it and 0 for the rest
    """

    @pytest.mark.regression
    def test_identical_views_converge(self, sample_products):
        products = {product.id: product for product in sample_products}
        profile = UserProfile()

        profile.record_view(products["p4"])
        profile.record_view(products["p2"])
        for _ in range(25):
            profile.record_view(products["p1"])

        assert profile.category_preferences["Jackets"] == 1.0
        assert profile.category_preferences["Shirts"] == 0.0
        assert profile.category_preferences["Dresses"] == 0.0


class TestIndexRebuildStability:
    """
    Appending a product with unrelated terms and rebuilding must not disturb
    results for a held-out query that mentions none of the new terms
    """

    QUERY = "leather jacket"

    @pytest.fixture
    def new_product(self):
        return {
            "id": "p6",
            "name": "Straw Beach Hat",
            "description": "Wide brim straw hat.",
            "category": "Accessories",
            "price": 8000,
        }

    @pytest.mark.regression
    def test_previous_scores_unchanged(self, sample_catalog_data, new_product):
        engine = SearchEngine()
        engine.rebuild_index(sample_catalog_data)
        old_index = engine.index
        before = rank_by_similarity(old_index.vectorize_query(self.QUERY), old_index.vectors())

        engine.rebuild_index(sample_catalog_data + [new_product])

        after_on_old_index = rank_by_similarity(old_index.vectorize_query(self.QUERY), old_index.vectors())
        assert after_on_old_index == before
        assert engine.index is not old_index

    @pytest.mark.regression
    def test_matching_products_unchanged_after_rebuild(self, sample_catalog_data, new_product):
        engine = SearchEngine()
        engine.rebuild_index(sample_catalog_data)
        before = [item.product.id for item in engine.semantic_search(self.QUERY)]
        old_idf = dict(engine.index.idf)

        engine.rebuild_index(sample_catalog_data + [new_product])
        after = [item.product.id for item in engine.semantic_search(self.QUERY)]

        assert after == before
        for term in ["leather", "jacket"]:
            assert engine.index.idf[term] >= old_idf[term]
