# smartcompare/extractor.py
"""
Heuristic document-to-record extraction.

This is pattern matching, not language understanding: every attribute is
tried against an ordered list of regular-expression strategies and the first
one that yields a usable value wins. Misses are expected and simply leave the
attribute absent for the normalizer to fill.
"""
import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from smartcompare.catalog import FamilyRegistry, ProductFamily, default_registry
from smartcompare.core.config import settings
from smartcompare.core.schemas import (
    UNKNOWN_BRAND, AttributeDefinition, ExtractionResult, SpecificationCatalog, ValueType
)

logger = logging.getLogger(__name__)

# Separators allowed between a label and its value, e.g. "Capacity: 1000".
LABEL_SEPARATOR = r"[\s:=\-]*"
UNIT_HINT = re.compile(r"\s*\([^)]*\)\s*$")
BRAND_LABEL = re.compile(r"\b(?:brand|make|manufacturer)\b[^a-z\n]*([a-z][a-z ]{1,19})")
FILENAME_BRANDS = ("tke", "otis", "schindler", "kone", "mitsubishi", "samsung", "apple", "lg", "sony")


@dataclass(frozen=True)
class ExtractionStrategy:
    """One way of locating an attribute value; group 1 of the pattern is the value."""
    label: str
    pattern: "re.Pattern[str]"

    @classmethod
    def after_label(cls, label: str, words: List[str], word_joiner: str = r"\s+") -> "ExtractionStrategy":
        escaped = word_joiner.join(re.escape(word) for word in words if word)
        return cls(label, re.compile(rf"\b{escaped}{LABEL_SEPARATOR}(\S+)", re.IGNORECASE))

    @classmethod
    def from_pattern(cls, label: str, pattern: str) -> "ExtractionStrategy":
        return cls(label, re.compile(pattern, re.IGNORECASE))

    def find(self, text: str) -> Optional[str]:
        match = self.pattern.search(text)
        if match and match.group(1):
            return match.group(1).strip()
        return None


def strategies_for(attribute: AttributeDefinition, family: Optional[ProductFamily] = None) -> List[ExtractionStrategy]:
    """Ranked strategies: display name, then id, then family numeric patterns."""
    strategies: List[ExtractionStrategy] = []
    display_name = UNIT_HINT.sub("", attribute.name).strip()
    if display_name:
        strategies.append(ExtractionStrategy.after_label("name", display_name.split()))
    strategies.append(ExtractionStrategy.after_label("id", attribute.id.split("_"), word_joiner=r"[_\s]+"))
    if family is not None:
        for pattern in family.numeric_patterns.get(attribute.id, ()):
            strategies.append(ExtractionStrategy.from_pattern(f"{family.tag}:{attribute.id}", pattern))

    unique: List[ExtractionStrategy] = []
    seen = set()
    for strategy in strategies:
        if strategy.pattern.pattern not in seen:
            seen.add(strategy.pattern.pattern)
            unique.append(strategy)
    return unique


def normalize_value(value: str, value_type: ValueType) -> str:
    """Best-effort coercion of a matched token. Lossy and never raises."""
    if value_type in (ValueType.NUMBER, ValueType.CURRENCY):
        return re.sub(r"[^\d.]", "", value)
    if value_type == ValueType.BOOLEAN:
        lowered = value.strip().lower()
        return "Yes" if "yes" in lowered or "true" in lowered or lowered == "1" else "No"
    return value.strip().rstrip(",;")


def extract_value(text: str, attribute: AttributeDefinition, strategies: List[ExtractionStrategy]) -> Optional[str]:
    for strategy in strategies:
        raw = strategy.find(text)
        if raw is None:
            continue
        value = normalize_value(raw, attribute.value_type)
        if value:
            logger.debug(f"'{attribute.id}' matched by {strategy.label} strategy: '{raw}' -> '{value}'")
            return value
        logger.debug(f"'{attribute.id}' {strategy.label} match '{raw}' normalized to nothing, trying next strategy")
    return None


def brand_from_context(text: str) -> str:
    match = BRAND_LABEL.search(text.lower())
    if match:
        return match.group(1).strip().upper()
    return UNKNOWN_BRAND


def detect_brand(text: str, registry: Optional[FamilyRegistry] = None) -> str:
    lowered = text.lower()
    for family in (registry or default_registry).brand_scan_order():
        for keyword in family.brand_keywords:
            if keyword in lowered:
                return keyword.upper()
    return brand_from_context(lowered)


def brand_from_filename(filename: str) -> str:
    lowered = filename.lower()
    for brand in FILENAME_BRANDS:
        if brand in lowered:
            return brand.upper()
    return UNKNOWN_BRAND


def extract(
    document_text: str,
    catalog: SpecificationCatalog,
    product_type: str,
    registry: Optional[FamilyRegistry] = None,
    excerpt_chars: Optional[int] = None,
) -> ExtractionResult:
    registry = registry or default_registry
    family = registry.family_for(product_type)
    if excerpt_chars is None:
        excerpt_chars = settings.RAW_TEXT_EXCERPT_CHARS

    specifications: Dict[str, str] = {}
    for attribute in catalog.attributes:
        try:
            value = extract_value(document_text, attribute, strategies_for(attribute, family))
        except Exception as e:
            logger.warning(f"Extraction of '{attribute.id}' failed, leaving it unspecified: {e}", exc_info=True)
            continue
        if value is not None:
            specifications[attribute.id] = value

    brand = detect_brand(document_text, registry)
    logger.info(f"Extracted {len(specifications)}/{len(catalog.attributes)} attributes, brand '{brand}'")
    return ExtractionResult(
        brand=brand,
        specifications=specifications,
        raw_text=document_text[:excerpt_chars],
    )
