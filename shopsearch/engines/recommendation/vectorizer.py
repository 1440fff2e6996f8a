"""
TF-IDF indexing over a catalog snapshot.

Vocabulary & IDF:
    vocabulary = union of the terms of every product document
    idf(t)     = max(0, ln(N / (df(t) + 1)))

Vectors are sparse: a product or query vector only holds its own terms with a
positive weight (term_frequency * idf). Queries are vectorized against the IDF
table of the index they are searched in, never a per-query table.

A SearchIndex is immutable once built. Rebuilding for a new catalog snapshot
builds a new SearchIndex and the owner swaps its reference, so readers never
see a half-built vocabulary.
"""
import logging
import math
import time
from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from shopsearch.schemas.catalog import ProductRecord
from shopsearch.services.tokenizer import product_document_text, tokenize

logger = logging.getLogger(__name__)

TermVector = Dict[str, float]


class IndexUnavailableError(RuntimeError):
    """No catalog snapshot is available to build or search an index"""


class VocabularyBuilder:
    """Derives vocabulary and IDF weights from tokenized documents"""

    @staticmethod
    def build_vocabulary(documents: Sequence[Sequence[str]]) -> FrozenSet[str]:
        vocabulary = set()
        for tokens in documents:
            vocabulary.update(tokens)
        return frozenset(vocabulary)

    @staticmethod
    def calculate_idf(documents: Sequence[Sequence[str]], vocabulary: Iterable[str]) -> Dict[str, float]:
        """
        Inverse document frequency with add-one smoothing.

        Terms found in (almost) every document would get ln(N / (df + 1)) <= 0;
        those are clamped to 0 so every weight stays non-negative.
        """
        total_documents = len(documents)
        document_frequency: Counter = Counter()
        for tokens in documents:
            document_frequency.update(set(tokens))

        return {
            term: max(0.0, math.log(total_documents / (document_frequency[term] + 1)))
            for term in vocabulary
        }


class TfidfVectorizer:
    """Turns token sequences into sparse TF-IDF vectors"""

    def __init__(self, idf: Mapping[str, float]):
        self.idf = idf

    def vectorize(self, tokens: Sequence[str]) -> TermVector:
        term_frequency = Counter(tokens)
        vector: TermVector = {}
        for term, count in term_frequency.items():
            weight = count * self.idf.get(term, 0.0)
            if weight > 0:
                vector[term] = weight
        return vector

    def vectorize_text(self, text: str) -> TermVector:
        return self.vectorize(tokenize(text))


@dataclass(frozen=True)
class IndexedProduct:
    """A catalog product with its precomputed tokens and vector"""

    product: ProductRecord
    tokens: FrozenSet[str]
    vector: Mapping[str, float]


@dataclass(frozen=True)
class SearchIndex:
    """Immutable vocabulary, IDF table and per-product vectors for one catalog snapshot"""

    products: Mapping[str, IndexedProduct]
    idf: Mapping[str, float]
    built_at: float = 0.0
    order: Tuple[str, ...] = ()

    @classmethod
    def build(cls, catalog: Optional[Sequence[ProductRecord]]) -> "SearchIndex":
        """
        Build an index from a validated catalog snapshot.

        Raises:
            IndexUnavailableError: if no catalog snapshot was supplied
        """
        if catalog is None:
            raise IndexUnavailableError("Catalog snapshot is missing; cannot build search index")

        documents: List[List[str]] = [tokenize(product_document_text(p)) for p in catalog]
        vocabulary = VocabularyBuilder.build_vocabulary(documents)
        idf = VocabularyBuilder.calculate_idf(documents, vocabulary)
        vectorizer = TfidfVectorizer(idf)

        products: Dict[str, IndexedProduct] = {}
        order: List[str] = []
        for product, tokens in zip(catalog, documents):
            products[product.id] = IndexedProduct(
                product=product,
                tokens=frozenset(tokens),
                vector=MappingProxyType(vectorizer.vectorize(tokens)),
            )
            order.append(product.id)

        index = cls(
            products=MappingProxyType(products),
            idf=MappingProxyType(idf),
            built_at=time.time(),
            order=tuple(order),
        )
        logger.info(
            f"Search index built: products={len(products)}, vocabulary={len(vocabulary)}"
        )
        return index

    def __len__(self) -> int:
        return len(self.products)

    @property
    def vocabulary(self) -> FrozenSet[str]:
        return frozenset(self.idf)

    @property
    def vectorizer(self) -> TfidfVectorizer:
        return TfidfVectorizer(self.idf)

    def vectorize_query(self, text: str) -> TermVector:
        return self.vectorizer.vectorize_text(text)

    def get(self, product_id: str) -> Optional[IndexedProduct]:
        return self.products.get(product_id)

    def catalog(self) -> List[ProductRecord]:
        """Products in catalog order"""
        return [self.products[product_id].product for product_id in self.order]

    def vectors(self) -> Dict[str, Mapping[str, float]]:
        return {product_id: entry.vector for product_id, entry in self.products.items()}
