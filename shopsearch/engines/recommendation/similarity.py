"""
Cosine similarity over sparse term vectors
"""
import math
from typing import Hashable, List, Mapping, Tuple


def cosine_similarity(vec1: Mapping[str, float], vec2: Mapping[str, float]) -> float:
    """
    Cosine similarity between two sparse vectors.

    Missing keys count as 0. If either vector has zero magnitude the
    similarity is 0. Keys are visited in sorted order so the result is
    exactly symmetric.

    Returns:
        Similarity score between 0 and 1 for non-negative vectors
    """
    if not vec1 or not vec2:
        return 0.0

    dot_product = 0.0
    magnitude1 = 0.0
    magnitude2 = 0.0

    for key in sorted(vec1.keys() | vec2.keys()):
        v1 = vec1.get(key, 0.0)
        v2 = vec2.get(key, 0.0)
        dot_product += v1 * v2
        magnitude1 += v1 * v1
        magnitude2 += v2 * v2

    if magnitude1 == 0 or magnitude2 == 0:
        return 0.0

    similarity = dot_product / (math.sqrt(magnitude1) * math.sqrt(magnitude2))
    # Rounding can push self-similarity a hair past 1
    return min(similarity, 1.0)


def rank_by_similarity(
    query_vector: Mapping[str, float],
    corpus: Mapping[Hashable, Mapping[str, float]],
) -> List[Tuple[Hashable, float]]:
    """
    Rank corpus entries against a query vector.

    Only entries with similarity > 0 are kept. Results are sorted by
    descending similarity, then ascending key for a reproducible order.
    """
    if not query_vector:
        return []

    scored = []
    for key, vector in corpus.items():
        similarity = cosine_similarity(query_vector, vector)
        if similarity > 0:
            scored.append((key, similarity))

    scored.sort(key=lambda item: (-item[1], str(item[0])))
    return scored
