"""
Query planning over the catalog indexes.

A search string is answered in two passes:

1. Candidate selection by posting-set intersection. Queries of three or more
   characters intersect trigram postings; shorter queries fall back to the
   word index. Either way the candidate set over-approximates the answer.
2. Verification: a candidate survives only if its searchable_text contains
   the normalized query as a literal substring.

A category filter is then sourced straight from the category index (no text
search) or intersected with the verified text matches.
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional

from catalog.indexes import IndexSet, PostingIndex
from catalog.models import Product
from catalog.utils.text import normalize, trigrams, words

logger = logging.getLogger(__name__)

STRATEGY_NONE = "none"
STRATEGY_TRIGRAM = "trigram"
STRATEGY_WORD = "word"
STRATEGY_UNSEARCHABLE = "unsearchable"


@dataclass(frozen=True)
class SearchPlan:
    """
    Outcome of planning a text search.

    candidate_ids is None when the search imposes no restriction (empty query);
    otherwise it is the intersected posting set, possibly empty.
    """
    strategy: str
    normalized_query: str
    candidate_ids: Optional[FrozenSet[str]]

    @property
    def is_text_search(self) -> bool:
        return self.candidate_ids is not None


def intersect_postings(index: PostingIndex, keys: Iterable[str]) -> FrozenSet[str]:
    """
    Intersect the posting sets of every key.

    An unseen key contributes an empty set, which empties the running
    intersection for good; the loop stops there.
    """
    result: Optional[FrozenSet[str]] = None
    for key in keys:
        postings = index.lookup(key)
        result = postings if result is None else result & postings
        if not result:
            break
    return result if result is not None else frozenset()


def plan_search(index_set: IndexSet, search: Optional[str]) -> SearchPlan:
    """
    Choose a search strategy and compute the candidate id set.

    Args:
        index_set: Current index generation
        search: Raw search string (may be None or blank)

    Returns:
        SearchPlan describing the strategy and candidate ids
    """
    normalized_query = normalize(search) if search else ""
    if not normalized_query:
        return SearchPlan(STRATEGY_NONE, "", None)

    query_trigrams = trigrams(normalized_query)
    if query_trigrams:
        candidates = intersect_postings(index_set.trigram, query_trigrams)
        strategy = STRATEGY_TRIGRAM
    else:
        query_words = words(normalized_query)
        if query_words:
            candidates = intersect_postings(index_set.word, query_words)
            strategy = STRATEGY_WORD
        else:
            # e.g. a single character: nothing in either index can match it
            candidates = frozenset()
            strategy = STRATEGY_UNSEARCHABLE

    logger.debug(
        "Planned search %r: strategy=%s candidates=%d",
        normalized_query, strategy, len(candidates),
    )
    return SearchPlan(strategy, normalized_query, candidates)


def verify_candidates(products: Iterable[Product], normalized_query: str) -> List[Product]:
    """Keep only products whose searchable_text contains the query literally."""
    return [p for p in products if normalized_query in p.searchable_text]


def select_products(
    index_set: IndexSet,
    search: Optional[str] = None,
    category: Optional[str] = None,
) -> List[Product]:
    """
    Resolve a search string and/or category filter into matching products.

    Products are returned in catalog order, which is the pre-sort order the
    stable sort in the pipeline preserves for equal keys.

    Args:
        index_set: Current index generation
        search: Raw search string (optional)
        category: Exact category name (optional)

    Returns:
        List of matching Product objects

    Raises:
        IndexIntegrityError: If a posting references an id with no product
    """
    plan = plan_search(index_set, search)

    if plan.is_text_search:
        if not plan.candidate_ids:
            # An explicit empty candidate set ends the query; category is not consulted
            return []
        matches = verify_candidates(index_set.resolve(plan.candidate_ids), plan.normalized_query)
        if category:
            category_ids = index_set.category.lookup(category)
            matches = [p for p in matches if p.id in category_ids]
        return matches

    if category:
        return index_set.resolve(index_set.category.lookup(category))

    return list(index_set.products)
