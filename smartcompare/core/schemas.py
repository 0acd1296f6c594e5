# smartcompare/core/schemas.py
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List, Dict, Optional, Tuple

NOT_SPECIFIED = "Not specified"
UNKNOWN_BRAND = "UNKNOWN"


class Importance(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ValueType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    CURRENCY = "currency"
    BOOLEAN = "boolean"
    RATING = "rating"


class AttributeDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique within a catalog, no whitespace (e.g. 'capacity').")
    name: str
    category: str
    importance: Importance
    value_type: ValueType

    @field_validator("id")
    @classmethod
    def _id_has_no_whitespace(cls, value: str) -> str:
        if not value or any(ch.isspace() for ch in value):
            raise ValueError(f"attribute id must be non-empty without whitespace, got {value!r}")
        return value


class SpecificationCatalog(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_type: str
    use_case: str = ""
    family: str = "generic"
    attributes: Tuple[AttributeDefinition, ...]

    @model_validator(mode="after")
    def _check_attributes(self) -> "SpecificationCatalog":
        if not self.attributes:
            raise ValueError("catalog must contain at least one attribute")
        seen = set()
        duplicates = []
        for attribute in self.attributes:
            if attribute.id in seen:
                duplicates.append(attribute.id)
            seen.add(attribute.id)
        if duplicates:
            raise ValueError(f"duplicate attribute ids: {', '.join(sorted(set(duplicates)))}")
        return self

    def attribute_ids(self) -> List[str]:
        return [attribute.id for attribute in self.attributes]

    def get_attribute(self, attribute_id: str) -> Optional[AttributeDefinition]:
        for attribute in self.attributes:
            if attribute.id == attribute_id:
                return attribute
        return None

    def high_importance(self) -> List[AttributeDefinition]:
        return [a for a in self.attributes if a.importance == Importance.HIGH]


class ScoreBreakdown(BaseModel):
    score: int = Field(ge=0, le=100)
    completeness_percent: int = Field(ge=0, le=100)
    important_attributes_covered: int = Field(ge=0)


class ProductRecord(BaseModel):
    brand: str
    specifications: Dict[str, str] = Field(default_factory=dict)
    source_name: str = "Manual Entry"
    raw_text: Optional[str] = None
    score: Optional[int] = None
    score_breakdown: Optional[ScoreBreakdown] = None


class ExtractionResult(BaseModel):
    brand: str
    specifications: Dict[str, str]
    raw_text: str


class ComparisonSession(BaseModel):
    product_type: str
    use_case: str = ""
    catalog: SpecificationCatalog
    products: List[ProductRecord] = Field(default_factory=list)


class Recommendation(BaseModel):
    best_brand: str
    best_score: int
    reasoning: str
    insights: str
    considerations: List[str]
    next_steps: str


class DocumentFailure(BaseModel):
    source_name: str
    path: str
    error: str


class AnalysisReport(BaseModel):
    session: ComparisonSession
    failures: List[DocumentFailure] = Field(default_factory=list)


# --- Comparison server request/response schemas ---
class ResearchRequest(BaseModel):
    product_type: str
    use_case: str = ""

class ResearchResponse(BaseModel):
    catalog: SpecificationCatalog
    categories: Dict[str, List[str]]

class ProcessDocumentsRequest(BaseModel):
    file_paths: List[str]

class DocumentStatus(BaseModel):
    source_name: str
    status: str
    message: str

class ProcessDocumentsResponse(BaseModel):
    documents: List[DocumentStatus]
    products: List[ProductRecord]

class ManualProductRequest(BaseModel):
    brand: str
    specifications: Dict[str, str] = Field(default_factory=dict)
