# smartcompare/presentation.py
import csv
import io
import logging
import re
from typing import Dict, List, Optional, Tuple

from smartcompare.core.schemas import (
    NOT_SPECIFIED, AttributeDefinition, ComparisonSession, Importance, ProductRecord,
    SpecificationCatalog, ValueType
)
from smartcompare.normalizer import is_specified

logger = logging.getLogger(__name__)

TABLE_IMPORTANCE = (Importance.HIGH, Importance.MEDIUM)


def group_by_category(catalog: SpecificationCatalog) -> Dict[str, List[AttributeDefinition]]:
    groups: Dict[str, List[AttributeDefinition]] = {}
    for attribute in catalog.attributes:
        groups.setdefault(attribute.category, []).append(attribute)
    return groups


def comparison_attributes(catalog: SpecificationCatalog) -> List[AttributeDefinition]:
    """Attributes shown in comparison tables and exports (high and medium importance)."""
    return [a for a in catalog.attributes if a.importance in TABLE_IMPORTANCE]


def price_attribute(catalog: SpecificationCatalog) -> Optional[AttributeDefinition]:
    for attribute in catalog.attributes:
        name = attribute.name.lower()
        if "price" in name or "cost" in name:
            return attribute
    return None


def value_band(score: Optional[int]) -> str:
    score = score or 0
    if score >= 80:
        return "best"
    if score >= 60:
        return "good"
    return "poor"


def key_features(product: ProductRecord, catalog: SpecificationCatalog, limit: int = 8) -> List[Tuple[str, str]]:
    features = []
    for attribute in catalog.high_importance():
        value = product.specifications.get(attribute.id)
        if is_specified(value):
            features.append((attribute.name, value))
    return features[:limit]


def _as_number(value: str) -> Optional[float]:
    try:
        return float(re.sub(r"[^\d.]", "", value))
    except ValueError:
        return None


def best_value(session: ComparisonSession, attribute_id: str) -> Optional[str]:
    """
    The value to highlight for one attribute across all products.

    Currency prefers the lowest amount, number and rating the highest, boolean
    prefers "Yes". Text, and numeric columns containing anything that does not
    parse, fall back to the lexicographically first value.
    """
    attribute = session.catalog.get_attribute(attribute_id)
    values = [p.specifications.get(attribute_id) for p in session.products]
    values = [v for v in values if is_specified(v)]
    if attribute is None or not values:
        return None

    if attribute.value_type == ValueType.BOOLEAN:
        return "Yes" if "Yes" in values else None

    if attribute.value_type in (ValueType.NUMBER, ValueType.CURRENCY, ValueType.RATING):
        numbers = [_as_number(v) for v in values]
        if all(n is not None for n in numbers):
            pick = min if attribute.value_type == ValueType.CURRENCY else max
            return values[numbers.index(pick(numbers))]
        logger.debug(f"Non-numeric values for '{attribute_id}', using lexicographic order")

    return sorted(values)[0]


def is_best_value(session: ComparisonSession, product: ProductRecord, attribute_id: str) -> bool:
    value = product.specifications.get(attribute_id)
    return is_specified(value) and value == best_value(session, attribute_id)


def export_csv(session: ComparisonSession) -> str:
    columns = comparison_attributes(session.catalog)
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["Brand", *[a.name for a in columns], "Score"])
    for product in session.products:
        writer.writerow([
            product.brand,
            *[product.specifications.get(a.id) or NOT_SPECIFIED for a in columns],
            product.score or 0,
        ])
    logger.info(f"Exported {len(session.products)} products with {len(columns)} attribute columns")
    return buffer.getvalue()
