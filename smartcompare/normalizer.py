# smartcompare/normalizer.py
import logging
from typing import Dict, List, Optional, Sequence

from smartcompare.core.schemas import NOT_SPECIFIED, ProductRecord, SpecificationCatalog

logger = logging.getLogger(__name__)


def is_specified(value: Optional[str]) -> bool:
    return bool(value and value.strip()) and value != NOT_SPECIFIED


def fill_defaults(products: Sequence[ProductRecord], catalog: SpecificationCatalog) -> List[ProductRecord]:
    """
    Returns copies of the products with every catalog attribute present.

    Missing or blank values become NOT_SPECIFIED, existing values are kept
    untouched, and keys the catalog does not define are dropped. Running it
    again on its own output changes nothing.
    """
    filled: List[ProductRecord] = []
    for product in products:
        specifications: Dict[str, str] = {}
        for attribute_id in catalog.attribute_ids():
            value = product.specifications.get(attribute_id)
            specifications[attribute_id] = value if is_specified(value) else NOT_SPECIFIED
        dropped = set(product.specifications) - set(specifications)
        if dropped:
            logger.debug(f"Dropping attributes not in catalog for '{product.brand}': {sorted(dropped)}")
        filled.append(product.model_copy(update={"specifications": specifications}))
    return filled
