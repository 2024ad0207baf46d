"""
Inverted indexes over the product set.

build_indexes() derives, from the full current product list:
- primary: product id -> Product
- word: normalized word -> posting set of product ids
- trigram: 3-character window -> posting set of product ids
- category: exact category string -> posting set of product ids

The result is an immutable IndexSet. The catalog publishes a new IndexSet by
swapping a single reference, so readers always see one complete index set.
Rebuilds are full (not incremental) and cost O(total text length).
"""

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Sequence, Set, Tuple

from catalog.exceptions import IndexIntegrityError
from catalog.models import Product
from catalog.utils.text import normalize, trigrams, words

logger = logging.getLogger(__name__)

_EMPTY: FrozenSet[str] = frozenset()


class PostingIndex:
    """
    Mapping from an index key to the set of product ids carrying that key.

    Word, trigram and category indexes are all instances of this class, so
    the query planner needs a single lookup/intersection routine.
    """

    def __init__(self, name: str):
        self.name = name
        self._postings: Dict[str, Set[str]] = {}
        self._frozen: Dict[str, FrozenSet[str]] = {}
        self._is_frozen = False

    def add(self, key: str, product_id: str) -> None:
        """Add product_id under key (set semantics, duplicate adds are no-ops)."""
        if self._is_frozen:
            raise RuntimeError(f"{self.name} index is frozen")
        self._postings.setdefault(key, set()).add(product_id)

    def freeze(self) -> "PostingIndex":
        """Make the index read-only; called once the build is complete."""
        self._frozen = {key: frozenset(ids) for key, ids in self._postings.items()}
        self._postings = {}
        self._is_frozen = True
        return self

    def lookup(self, key: str) -> FrozenSet[str]:
        """Posting set for key; empty when the key was never indexed."""
        if self._is_frozen:
            return self._frozen.get(key, _EMPTY)
        return frozenset(self._postings.get(key, _EMPTY))

    def keys(self) -> List[str]:
        source = self._frozen if self._is_frozen else self._postings
        return list(source.keys())

    def as_dict(self) -> Dict[str, FrozenSet[str]]:
        """Snapshot of all postings (used for consistency checks and tests)."""
        if self._is_frozen:
            return dict(self._frozen)
        return {key: frozenset(ids) for key, ids in self._postings.items()}

    def __contains__(self, key: str) -> bool:
        return key in (self._frozen if self._is_frozen else self._postings)

    def __len__(self) -> int:
        return len(self._frozen if self._is_frozen else self._postings)


@dataclass(frozen=True)
class IndexSet:
    """One consistent generation of the catalog indexes."""
    generation: int
    products: Tuple[Product, ...]
    primary: Dict[str, Product]
    positions: Dict[str, int]
    word: PostingIndex
    trigram: PostingIndex
    category: PostingIndex

    def resolve(self, product_ids: Iterable[str]) -> List[Product]:
        """
        Materialize ids into products, in catalog order.

        Raises:
            IndexIntegrityError: If an id has no primary index entry
        """
        ids = list(product_ids)
        missing = [pid for pid in ids if pid not in self.primary]
        if missing:
            logger.error(
                "Index integrity violation in generation %d: ids %r missing from primary index",
                self.generation, missing[:10],
            )
            raise IndexIntegrityError(
                f"{len(missing)} id(s) present in a secondary index but not in the primary index"
            )
        ids.sort(key=self.positions.__getitem__)
        return [self.primary[pid] for pid in ids]


def build_indexes(products: Sequence[Product], generation: int = 0) -> IndexSet:
    """
    Rebuild every index from the full product list.

    For each product: compute and store searchable_text, register it in the
    primary index, and add its id to the category, word and trigram buckets.

    Args:
        products: The complete current product collection (not a delta)
        generation: Generation number stamped on the resulting IndexSet

    Returns:
        A frozen IndexSet
    """
    primary: Dict[str, Product] = {}
    positions: Dict[str, int] = {}
    word_index = PostingIndex("word")
    trigram_index = PostingIndex("trigram")
    category_index = PostingIndex("category")

    for position, product in enumerate(products):
        searchable_text = normalize(f"{product.name} {product.description}")
        product.searchable_text = searchable_text

        primary[product.id] = product
        positions[product.id] = position
        category_index.add(product.category, product.id)

        for word in words(searchable_text):
            word_index.add(word, product.id)
        for trigram in trigrams(searchable_text):
            trigram_index.add(trigram, product.id)

    index_set = IndexSet(
        generation=generation,
        products=tuple(products),
        primary=primary,
        positions=positions,
        word=word_index.freeze(),
        trigram=trigram_index.freeze(),
        category=category_index.freeze(),
    )
    logger.info(
        "Rebuilt indexes: generation=%d products=%d words=%d trigrams=%d categories=%d",
        generation, len(primary), len(word_index), len(trigram_index), len(category_index),
    )
    return index_set
