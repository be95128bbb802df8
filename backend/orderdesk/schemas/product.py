# backend/orderdesk/schemas/product.py
"""Request/response models for the product master.

The nested groups mirror the stored document layout; every attribute is
optional except the part number, since each product type uses a different
subset of them.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from orderdesk.models.product import MAX_PRODUCT_IMAGES

ProductTypeName = Literal["CS", "CCS", "ES", "TS", "DTS", "WF", "PP"]
ProductStatusName = Literal["ACTIVE", "INACTIVE", "ARCHIVED"]
SurfaceTreatment = Literal["Zinc", "Nickle", "Powder Coating", "EP"]
Helix = Literal["RHS", "LHS"]


class AttributeGroup(BaseModel):
    # NaN and infinity are not storable as JSON numbers
    model_config = ConfigDict(allow_inf_nan=False)


class DimensionWithTolerance(AttributeGroup):
    value_mm: float
    tolerance_mm: float = 0.0


class SpringRate(AttributeGroup):
    value_n_per_mm: float
    tolerance_n_per_mm: float = 0.0


class WorksInside(AttributeGroup):
    hole_dia_mm: float


class WorksOver(AttributeGroup):
    shaft_dia_mm: float


class HeatTreat(AttributeGroup):
    degree_c: float | None = None
    time_min: float | None = None


class GeneralInfo(AttributeGroup):
    symag_part_no: str = Field(..., min_length=1)
    part_weight_net: float | None = None
    customer_code: str | None = None
    customer_part_no: str | None = None
    customer_part_name_no: str | None = None
    moq: int | None = None


class MaterialAndDimensions(AttributeGroup):
    material_type: str | None = None
    mtl_spec: str | None = None
    grade_steel: str | None = None
    wire_dia: DimensionWithTolerance | None = None
    outside_dia: DimensionWithTolerance | None = None
    mean_dia: DimensionWithTolerance | None = None
    inside_dia: DimensionWithTolerance | None = None
    free_length: DimensionWithTolerance | None = None
    free_length_inside_hook: DimensionWithTolerance | None = None
    configuration: str | None = None
    total_coils: float | None = None
    helix: Helix | None = None
    active_coils: float | None = None
    end_type: str | None = None
    pitch_mm: float | None = None
    preset: bool | None = None
    works_inside: WorksInside | None = None
    works_over: WorksOver | None = None
    heat_treat: HeatTreat | None = None
    # CCS
    big_outside_dia: DimensionWithTolerance | None = None
    small_outside_dia: DimensionWithTolerance | None = None
    big_inside_dia: DimensionWithTolerance | None = None
    small_inside_dia: DimensionWithTolerance | None = None
    # ES
    hook_type: str | None = None
    orientation: str | None = None
    gap_mm: float | None = None


class LoadsRatesDeflection(AttributeGroup):
    spring_rate: SpringRate | None = None
    length_at_load1_mm: float | None = None
    load1_n: float | None = None
    deflection_at_load1_mm: float | None = None
    length_at_load2_mm: float | None = None
    load2_n: float | None = None
    deflection_at_load2_mm: float | None = None
    solid_height: DimensionWithTolerance | None = None
    operating_temp_c: float | None = None
    cycles: int | None = None
    surface_treatment: SurfaceTreatment | None = None
    remark: str | None = None
    date: str | None = None  # ISO date
    prep_by: str | None = None


class ProductBase(BaseModel):
    product_name: str = Field(..., min_length=3)
    product_type: ProductTypeName
    general: GeneralInfo
    material_and_dimensions: MaterialAndDimensions = Field(default_factory=MaterialAndDimensions)
    loads_rates_deflection: LoadsRatesDeflection = Field(default_factory=LoadsRatesDeflection)
    images: list[str] = Field(default_factory=list)

    @field_validator("images")
    @classmethod
    def limit_images(cls, v: list[str]) -> list[str]:
        if len(v) > MAX_PRODUCT_IMAGES:
            raise ValueError(f"A product can have at most {MAX_PRODUCT_IMAGES} images")
        return v


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    product_name: str | None = Field(default=None, min_length=3)
    product_type: ProductTypeName | None = None
    general: GeneralInfo | None = None
    material_and_dimensions: MaterialAndDimensions | None = None
    loads_rates_deflection: LoadsRatesDeflection | None = None
    status: ProductStatusName | None = None
    images: list[str] | None = None

    @field_validator("images")
    @classmethod
    def limit_images(cls, v: list[str] | None) -> list[str] | None:
        if v is not None and len(v) > MAX_PRODUCT_IMAGES:
            raise ValueError(f"A product can have at most {MAX_PRODUCT_IMAGES} images")
        return v


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_name: str
    product_type: str
    general: dict[str, Any]
    material_and_dimensions: dict[str, Any]
    loads_rates_deflection: dict[str, Any]
    status: str
    images: list[str]
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None


class ProductListResponse(BaseModel):
    items: list[ProductResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class ProductFormRequest(BaseModel):
    """Flat form values as entered in the product editor."""

    product_name: str = Field(..., min_length=3)
    product_type: ProductTypeName
    status: ProductStatusName = "ACTIVE"
    images: list[str] = Field(default_factory=list)
    general: dict[str, Any] = Field(default_factory=dict)
    material_and_dimensions: dict[str, Any] = Field(default_factory=dict)
    loads_rates_deflection: dict[str, Any] = Field(default_factory=dict)


class FormField(BaseModel):
    name: str
    label: str


class ProductFormFieldsResponse(BaseModel):
    product_type: str
    type_name: str
    sections: dict[str, list[FormField]]
