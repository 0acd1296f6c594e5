# smartcompare/catalog.py
"""
Specification catalogs and the resolver that picks one for a product query.

Each product family is registered with the keywords that select it, the
attribute table it contributes, and the brand knowledge used later by the
extractor and the scoring engine. Families are matched in registration order
by plain substring search on the lower-cased product type; the first match
wins. Queries that match nothing get the generic eight-attribute catalog.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from smartcompare.core.errors import MalformedCatalogError
from smartcompare.core.schemas import AttributeDefinition, SpecificationCatalog

logger = logging.getLogger(__name__)

# (id, name, category, importance, value_type)
Row = Tuple[str, str, str, str, str]

ELEVATOR_ROWS: Tuple[Row, ...] = (
    # Technical
    ("capacity", "Load Capacity (KG)", "Technical", "high", "number"),
    ("speed", "Speed (MPS)", "Technical", "high", "number"),
    ("stops", "Number of Stops", "Technical", "high", "number"),
    ("travel_distance", "Travel Distance (m)", "Technical", "medium", "number"),
    ("machine_type", "Machine Type", "Technical", "high", "text"),
    ("control_system", "Control System", "Technical", "high", "text"),
    # Dimensions
    ("car_size", "Car Size (WxD)", "Dimensions", "high", "text"),
    ("door_size", "Door Size (WxH)", "Dimensions", "high", "text"),
    ("shaft_size", "Shaft Size (WxD)", "Dimensions", "high", "text"),
    ("pit_depth", "Pit Depth (mm)", "Dimensions", "medium", "number"),
    ("overhead", "Overhead Height (mm)", "Dimensions", "medium", "number"),
    # Safety
    ("safety_gear", "Safety Gear System", "Safety", "high", "text"),
    ("emergency_brake", "Emergency Brake", "Safety", "high", "boolean"),
    ("fire_operation", "Fire Emergency Operation", "Safety", "high", "boolean"),
    ("rescue_device", "Automatic Rescue Device", "Safety", "medium", "boolean"),
    ("overspeed", "Overspeed Protection", "Safety", "high", "boolean"),
    # Commercial
    ("total_price", "Total Price", "Commercial", "high", "currency"),
    ("warranty", "Warranty Period (months)", "Commercial", "high", "number"),
    ("delivery_time", "Delivery Time", "Commercial", "medium", "text"),
    ("installation_time", "Installation Time", "Commercial", "medium", "text"),
    ("maintenance_cost", "Annual Maintenance Cost", "Commercial", "medium", "currency"),
    # Features
    ("energy_efficiency", "Energy Efficiency Rating", "Features", "medium", "text"),
    ("display_type", "Display Type", "Features", "low", "text"),
    ("accessibility", "Accessibility Features", "Features", "medium", "text"),
    ("emergency_lighting", "Emergency Lighting", "Features", "medium", "boolean"),
    ("ventilation", "Ventilation System", "Features", "low", "boolean"),
)

SMARTPHONE_ROWS: Tuple[Row, ...] = (
    ("display_size", "Display Size (inches)", "Display", "high", "number"),
    ("resolution", "Resolution", "Display", "high", "text"),
    ("processor", "Processor", "Performance", "high", "text"),
    ("ram", "RAM (GB)", "Performance", "high", "number"),
    ("storage", "Storage (GB)", "Storage", "high", "number"),
    ("camera_main", "Main Camera (MP)", "Camera", "high", "number"),
    ("battery", "Battery Capacity (mAh)", "Battery", "high", "number"),
    ("price", "Price", "Commercial", "high", "currency"),
)

LAPTOP_ROWS: Tuple[Row, ...] = (
    ("display_size", "Display Size (inches)", "Display", "high", "number"),
    ("processor", "Processor", "Performance", "high", "text"),
    ("ram", "RAM (GB)", "Performance", "high", "number"),
    ("storage", "Storage (GB)", "Storage", "high", "number"),
    ("graphics", "Graphics", "Performance", "medium", "text"),
    ("battery_life", "Battery Life (hours)", "Battery", "medium", "number"),
    ("weight", "Weight (kg)", "Physical", "medium", "number"),
    ("operating_system", "Operating System", "Software", "low", "text"),
    ("price", "Price", "Commercial", "high", "currency"),
    ("warranty", "Warranty", "Commercial", "medium", "text"),
)

AIR_CONDITIONER_ROWS: Tuple[Row, ...] = (
    ("cooling_capacity", "Cooling Capacity (Tons)", "Technical", "high", "number"),
    ("ac_type", "Type (Split/Window)", "Technical", "high", "text"),
    ("energy_rating", "Energy Star Rating", "Efficiency", "high", "rating"),
    ("inverter", "Inverter Technology", "Technical", "high", "boolean"),
    ("power_consumption", "Power Consumption (W)", "Efficiency", "medium", "number"),
    ("noise_level", "Noise Level (dB)", "Comfort", "medium", "number"),
    ("refrigerant", "Refrigerant", "Technical", "medium", "text"),
    ("coverage_area", "Coverage Area (sq ft)", "Technical", "medium", "number"),
    ("price", "Price", "Commercial", "high", "currency"),
    ("warranty", "Warranty", "Commercial", "high", "text"),
)

GENERIC_ROWS: Tuple[Row, ...] = (
    ("price", "Price", "Commercial", "high", "currency"),
    ("warranty", "Warranty", "Commercial", "high", "text"),
    ("brand", "Brand", "General", "medium", "text"),
    ("model", "Model", "General", "medium", "text"),
    ("weight", "Weight", "Physical", "medium", "number"),
    ("dimensions", "Dimensions", "Physical", "medium", "text"),
    ("power_consumption", "Power Consumption", "Technical", "medium", "text"),
    ("features", "Key Features", "Features", "medium", "text"),
)


def rows_to_definitions(rows: Iterable[Row]) -> List[Dict[str, str]]:
    return [
        {"id": attr_id, "name": name, "category": category, "importance": importance, "value_type": value_type}
        for attr_id, name, category, importance, value_type in rows
    ]


def _table(rows: Tuple[Row, ...]) -> Callable[[str], List[Dict[str, str]]]:
    # The use case is handed to every builder but no table filters on it yet.
    def build(use_case: str) -> List[Dict[str, str]]:
        return rows_to_definitions(rows)
    return build


@dataclass(frozen=True)
class ProductFamily:
    tag: str
    keywords: Tuple[str, ...]
    definitions: Callable[[str], Sequence[Union[Dict[str, str], AttributeDefinition]]] = field(compare=False)
    brand_keywords: Tuple[str, ...] = ()
    reputable_brands: FrozenSet[str] = frozenset()
    # attribute id -> hand-authored patterns whose first group is the value
    numeric_patterns: Mapping[str, Tuple[str, ...]] = field(default_factory=dict, compare=False)

    def matches(self, product_type: str) -> bool:
        query = product_type.lower()
        return any(keyword in query for keyword in self.keywords)


ELEVATOR = ProductFamily(
    tag="elevator",
    keywords=("elevator", "lift"),
    definitions=_table(ELEVATOR_ROWS),
    brand_keywords=("tk elevator", "tke", "otis", "schindler", "kone", "mitsubishi", "hitachi"),
    reputable_brands=frozenset({"TKE", "TK ELEVATOR", "OTIS", "SCHINDLER", "KONE"}),
    numeric_patterns={
        "capacity": (r"capacity\D*?(\d+(?:\.\d+)?)\s*kg",),
        "speed": (r"speed\D*?(\d+(?:\.\d+)?)\s*(?:mps|m/s)",),
        "stops": (r"stops\D*?(\d+)", r"(\d+)\s*stops"),
    },
)

SMARTPHONE = ProductFamily(
    tag="smartphone",
    keywords=("phone", "smartphone"),
    definitions=_table(SMARTPHONE_ROWS),
    brand_keywords=("samsung", "apple", "iphone", "xiaomi", "oneplus", "google", "pixel"),
    reputable_brands=frozenset({"APPLE", "SAMSUNG", "GOOGLE"}),
    numeric_patterns={
        "display_size": (r"(\d+(?:\.\d+)?)\s*-?\s*(?:inch|in\b|\")",),
        "ram": (r"(\d+)\s*gb\s*(?:of\s*)?ram",),
        "storage": (r"(\d+)\s*gb\s*(?:of\s*)?(?:storage|rom|internal)",),
        "camera_main": (r"(\d+(?:\.\d+)?)\s*mp\b",),
        "battery": (r"(\d{3,5})\s*mah",),
    },
)

LAPTOP = ProductFamily(
    tag="laptop",
    keywords=("laptop", "notebook"),
    definitions=_table(LAPTOP_ROWS),
    brand_keywords=("dell", "hp", "lenovo", "apple", "macbook", "asus", "acer"),
    reputable_brands=frozenset({"APPLE", "DELL", "HP", "LENOVO"}),
    numeric_patterns={
        "display_size": (r"(\d+(?:\.\d+)?)\s*-?\s*(?:inch|in\b|\")",),
        "ram": (r"(\d+)\s*gb\s*(?:of\s*)?(?:ddr\d\s*)?ram",),
        "storage": (r"(\d+)\s*gb\s*(?:nvme\s*|pcie\s*)?(?:ssd|hdd|storage)",),
        "battery_life": (r"(\d+(?:\.\d+)?)\s*(?:hours|hrs)\b",),
        "weight": (r"(\d+(?:\.\d+)?)\s*kg\b",),
    },
)

AIR_CONDITIONER = ProductFamily(
    tag="air_conditioner",
    keywords=("air conditioner", "ac"),
    definitions=_table(AIR_CONDITIONER_ROWS),
    reputable_brands=frozenset({"DAIKIN", "CARRIER", "MITSUBISHI", "LG"}),
    numeric_patterns={
        "cooling_capacity": (r"(\d+(?:\.\d+)?)\s*(?:tons?|tr)\b",),
        "noise_level": (r"(\d+(?:\.\d+)?)\s*db\b",),
        "power_consumption": (r"(\d+(?:\.\d+)?)\s*(?:w|watts)\b",),
    },
)

GENERIC = ProductFamily(
    tag="generic",
    keywords=(),
    definitions=_table(GENERIC_ROWS),
    brand_keywords=("samsung", "lg", "sony", "panasonic", "philips", "bosch", "siemens"),
    reputable_brands=frozenset({"SIEMENS", "BOSCH", "PHILIPS", "SONY"}),
)


class FamilyRegistry:
    """Ordered family table; earlier registrations take priority."""

    def __init__(self, families: Optional[Iterable[ProductFamily]] = None, fallback: ProductFamily = GENERIC):
        self._families: List[ProductFamily] = []
        self.fallback = fallback
        for family in families or ():
            self.register(family)

    @property
    def families(self) -> Tuple[ProductFamily, ...]:
        return tuple(self._families)

    def register(self, family: ProductFamily, before: Optional[str] = None) -> None:
        if any(existing.tag == family.tag for existing in self._families):
            raise ValueError(f"Product family '{family.tag}' is already registered")
        if before is None:
            self._families.append(family)
        else:
            tags = [existing.tag for existing in self._families]
            if before not in tags:
                raise ValueError(f"Cannot register '{family.tag}' before unknown family '{before}'")
            self._families.insert(tags.index(before), family)
        logger.debug(f"Registered product family '{family.tag}' with keywords {family.keywords}")

    def match(self, product_type: str) -> Optional[ProductFamily]:
        for family in self._families:
            if family.matches(product_type):
                return family
        return None

    def family_for(self, product_type: str) -> ProductFamily:
        return self.match(product_type) or self.fallback

    def reputation_family(self, product_type: str) -> ProductFamily:
        """Family whose tag appears in the product type, else the fallback.

        Keyed on tags only: a keyword hit such as "ac" in "coffee machine"
        picks a catalog but not a brand list.
        """
        query = product_type.lower()
        for family in self._families:
            if family.tag.replace("_", " ") in query:
                return family
        return self.fallback

    def brand_scan_order(self) -> List[ProductFamily]:
        return [*self._families, self.fallback]


default_registry = FamilyRegistry([ELEVATOR, SMARTPHONE, LAPTOP, AIR_CONDITIONER])


def build_catalog(
    product_type: str,
    use_case: str,
    definitions: Sequence[Union[Dict[str, str], AttributeDefinition]],
    family: str = GENERIC.tag,
) -> SpecificationCatalog:
    """Validates raw attribute definitions into a read-only catalog.

    Raises MalformedCatalogError for duplicate ids, unknown importance or
    value types, ids containing whitespace, or an empty definition list.
    """
    try:
        return SpecificationCatalog(
            product_type=product_type,
            use_case=use_case,
            family=family,
            attributes=tuple(definitions),
        )
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'catalog'}: {error['msg']}"
            for error in e.errors()
        )
        logger.error(f"Rejected malformed catalog for '{product_type}': {problems}")
        raise MalformedCatalogError(f"Malformed catalog for '{product_type}': {problems}") from e


def resolve_family(product_type: str, registry: Optional[FamilyRegistry] = None) -> Optional[ProductFamily]:
    return (registry or default_registry).match(product_type)


def resolve(product_type: str, use_case: str = "", registry: Optional[FamilyRegistry] = None) -> SpecificationCatalog:
    registry = registry or default_registry
    family = registry.family_for(product_type)
    catalog = build_catalog(product_type, use_case, family.definitions(use_case.lower()), family=family.tag)
    logger.info(f"Resolved '{product_type}' ({use_case or 'no use case'}) to '{family.tag}' catalog with {len(catalog.attributes)} attributes")
    return catalog
