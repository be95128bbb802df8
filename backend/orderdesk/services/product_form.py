"""Flat product editor form <-> nested product document.

The editor works with one flat value per input (``wire_dia_value``,
``wire_dia_tolerance``, ``heat_treat_degree_c`` ...) while the stored
product keeps nested attribute groups. Which inputs are shown depends on
the product type.
"""

import logging
import math
from typing import Any

from orderdesk.services.display import product_type_full_name

logger = logging.getLogger(__name__)

# Dimensions stored as {value_mm, tolerance_mm} in material_and_dimensions
MATERIAL_DIMENSIONS = [
    "wire_dia",
    "outside_dia",
    "mean_dia",
    "inside_dia",
    "free_length",
    "free_length_inside_hook",
    "big_outside_dia",
    "small_outside_dia",
    "big_inside_dia",
    "small_inside_dia",
]
MATERIAL_TEXT_FIELDS = [
    "material_type",
    "mtl_spec",
    "grade_steel",
    "configuration",
    "helix",
    "end_type",
    "hook_type",
    "orientation",
]
MATERIAL_NUMBER_FIELDS = ["total_coils", "active_coils", "pitch_mm", "gap_mm"]

LOAD_NUMBER_FIELDS = [
    "length_at_load1_mm",
    "load1_n",
    "deflection_at_load1_mm",
    "length_at_load2_mm",
    "load2_n",
    "deflection_at_load2_mm",
    "operating_temp_c",
]
LOAD_TEXT_FIELDS = ["surface_treatment", "date", "remark", "prep_by"]

GENERAL_FIELDS = [
    "symag_part_no",
    "part_weight_net",
    "customer_code",
    "customer_part_no",
    "customer_part_name_no",
    "moq",
]

WORKS_FIELDS = [
    "works_inside_hole_dia",
    "works_over_shaft_dia",
    "heat_treat_degree_c",
    "heat_treat_time_min",
]

BASE_SECTIONS: dict[str, list[str]] = {
    "general": GENERAL_FIELDS,
    "common": [
        "material_type", "mtl_spec",
        "wire_dia_value", "wire_dia_tolerance",
        "outside_dia_value", "outside_dia_tolerance",
        "free_length_value", "free_length_tolerance",
    ],
    "configuration": ["total_coils", "helix", "active_coils", "end_type", "pitch_mm", "preset"],
    "loads": [
        "spring_rate_value", "spring_rate_tolerance",
        "length_at_load1_mm", "load1_n", "deflection_at_load1_mm",
        "length_at_load2_mm", "load2_n", "deflection_at_load2_mm",
        "solid_height_value", "solid_height_tolerance",
    ],
    "operating": ["surface_treatment", "operating_temp_c", "cycles", "remark", "prep_by", "date"],
}

_SPRING_CONFIG = ["total_coils", "active_coils", "helix", "end_type", "pitch_mm", "preset"]


def _material(*dimensions: str, grade: bool = True) -> list[str]:
    fields = ["material_type", "mtl_spec"]
    if grade:
        fields.append("grade_steel")
    for name in dimensions:
        fields += [f"{name}_value", f"{name}_tolerance"]
    return fields


TYPE_SECTIONS: dict[str, dict[str, list[str]]] = {
    "CS": {
        "material": _material("wire_dia", "outside_dia", "mean_dia", "free_length"),
        "config": _SPRING_CONFIG,
        "works": WORKS_FIELDS,
    },
    "CCS": {
        "material": _material("wire_dia", "big_outside_dia", "small_outside_dia", "free_length"),
        "config": _SPRING_CONFIG,
        "works": WORKS_FIELDS,
    },
    "ES": {
        "material": _material(
            "wire_dia", "inside_dia", "free_length", "free_length_inside_hook"
        ),
        "config": ["total_coils", "active_coils", "helix", "hook_type", "pitch_mm", "preset"],
        "works": WORKS_FIELDS,
    },
    "TS": {
        "material": _material("wire_dia", "mean_dia", "free_length"),
        "config": _SPRING_CONFIG,
        "works": WORKS_FIELDS,
    },
    "DTS": {
        "material": _material("wire_dia", "mean_dia", "free_length"),
        "config": _SPRING_CONFIG,
        "works": WORKS_FIELDS,
    },
    "WF": {
        "material": _material("wire_dia", "outside_dia", "inside_dia", "free_length", grade=False),
        "config": _SPRING_CONFIG,
        "works": WORKS_FIELDS,
    },
    "PP": {
        "material": _material("wire_dia", "outside_dia", "inside_dia", "free_length", grade=False),
        "config": ["total_coils", "active_coils", "end_type", "preset"],
        "works": ["heat_treat_degree_c", "heat_treat_time_min"],
    },
}

FIELD_LABELS: dict[str, str] = {
    # General
    "symag_part_no": "Part Number",
    "part_weight_net": "Part Weight (Net)",
    "customer_code": "Customer Code",
    "customer_part_no": "Customer Part #",
    "customer_part_name_no": "Customer Part Name #",
    "moq": "MOQ",
    # Material
    "material_type": "Material Type",
    "mtl_spec": "MTL Spec",
    "grade_steel": "Grade",
    "wire_dia_value": "Wire Dia (MM)",
    "wire_dia_tolerance": "Wire Dia Tolerance",
    "outside_dia_value": "Outside Dia (MM)",
    "outside_dia_tolerance": "Outside Dia Tolerance",
    "big_outside_dia_value": "Big Outside Dia (MM)",
    "big_outside_dia_tolerance": "Big Outside Dia Tolerance",
    "small_outside_dia_value": "Small Outside Dia (MM)",
    "small_outside_dia_tolerance": "Small Outside Dia Tolerance",
    "mean_dia_value": "Mean Dia (MM)",
    "mean_dia_tolerance": "Mean Dia Tolerance",
    "inside_dia_value": "Inside Dia (MM)",
    "inside_dia_tolerance": "Inside Dia Tolerance",
    "big_inside_dia_value": "Big Inside Dia (MM)",
    "big_inside_dia_tolerance": "Big Inside Dia Tolerance",
    "small_inside_dia_value": "Small Inside Dia (MM)",
    "small_inside_dia_tolerance": "Small Inside Dia Tolerance",
    "free_length_value": "Free Length (MM)",
    "free_length_tolerance": "Free Length Tolerance",
    "free_length_inside_hook_value": "Free Length Inside Hook (MM)",
    "free_length_inside_hook_tolerance": "Free Length Inside Hook Tolerance",
    # Configuration
    "total_coils": "Total Coils",
    "helix": "Helix",
    "active_coils": "Active Coils",
    "end_type": "End Type",
    "hook_type": "Hook Type",
    "pitch_mm": "Pitch (MM)",
    "preset": "Preset",
    # Loads
    "spring_rate_value": "Spring Rate (N/MM)",
    "spring_rate_tolerance": "Spring Rate Tolerance",
    "length_at_load1_mm": "Length at Load 1 (MM)",
    "load1_n": "Load 1 (N)",
    "deflection_at_load1_mm": "Deflection at Load 1 (MM)",
    "length_at_load2_mm": "Length at Load 2 (MM)",
    "load2_n": "Load 2 (N)",
    "deflection_at_load2_mm": "Deflection at Load 2 (MM)",
    "solid_height_value": "Solid Height (MM)",
    "solid_height_tolerance": "Solid Height Tolerance",
    # Works & heat
    "works_inside_hole_dia": "Works Inside - Hole Dia",
    "works_over_shaft_dia": "Works Over - Shaft Dia",
    "heat_treat_degree_c": "Heat Treat (°C)",
    "heat_treat_time_min": "Heat Treat Time (Min)",
    # Operating
    "surface_treatment": "Surface Treatment",
    "operating_temp_c": "Operating Temp (°C)",
    "cycles": "Cycles",
    "remark": "Remark",
    "prep_by": "Prep By",
    "date": "Date",
}


def form_fields_for_type(product_type: str) -> dict[str, list[str]]:
    """Ordered form sections for a product type.

    Unknown types get the base sections only.
    """
    sections = {name: list(fields) for name, fields in BASE_SECTIONS.items()}
    for name, fields in TYPE_SECTIONS.get(product_type, {}).items():
        sections[name] = list(fields)
    return sections


def field_label(name: str) -> str:
    return FIELD_LABELS.get(name, name)


def describe_form(product_type: str) -> dict[str, Any]:
    """Form sections with labels, as served to the product editor."""
    return {
        "product_type": product_type,
        "type_name": product_type_full_name(product_type),
        "sections": {
            section: [{"name": f, "label": field_label(f)} for f in fields]
            for section, fields in form_fields_for_type(product_type).items()
        },
    }


def clean_document(obj: Any) -> Any:
    """Recursively drop None values and nested objects left empty."""
    if obj is None:
        return None
    if isinstance(obj, list):
        return [c for c in (clean_document(item) for item in obj) if c is not None]
    if isinstance(obj, dict):
        cleaned = {}
        for key, value in obj.items():
            if value is None:
                continue
            if isinstance(value, (dict, list)):
                value = clean_document(value)
                if not value:
                    continue
            cleaned[key] = value
        return cleaned
    return obj


def flatten_product(product: dict[str, Any]) -> dict[str, Any]:
    """Turn a stored product document into flat editor values.

    Args:
        product: Product document (see Product.to_document)

    Returns:
        Dict with product_name/product_type/status/images and one flat
        dict per attribute group
    """
    material = product.get("material_and_dimensions") or {}
    loads = product.get("loads_rates_deflection") or {}

    flat_material: dict[str, Any] = {}
    for name in MATERIAL_TEXT_FIELDS + MATERIAL_NUMBER_FIELDS + ["preset"]:
        flat_material[name] = material.get(name)
    for name in MATERIAL_DIMENSIONS:
        dimension = material.get(name) or {}
        flat_material[f"{name}_value"] = dimension.get("value_mm")
        flat_material[f"{name}_tolerance"] = dimension.get("tolerance_mm")
    flat_material["works_inside_hole_dia"] = (material.get("works_inside") or {}).get("hole_dia_mm")
    flat_material["works_over_shaft_dia"] = (material.get("works_over") or {}).get("shaft_dia_mm")
    heat_treat = material.get("heat_treat") or {}
    flat_material["heat_treat_degree_c"] = heat_treat.get("degree_c")
    flat_material["heat_treat_time_min"] = heat_treat.get("time_min")

    flat_loads: dict[str, Any] = {}
    spring_rate = loads.get("spring_rate") or {}
    flat_loads["spring_rate_value"] = spring_rate.get("value_n_per_mm")
    flat_loads["spring_rate_tolerance"] = spring_rate.get("tolerance_n_per_mm")
    for name in LOAD_NUMBER_FIELDS + LOAD_TEXT_FIELDS + ["cycles"]:
        flat_loads[name] = loads.get(name)
    solid_height = loads.get("solid_height") or {}
    flat_loads["solid_height_value"] = solid_height.get("value_mm")
    flat_loads["solid_height_tolerance"] = solid_height.get("tolerance_mm")

    return {
        "product_name": product.get("product_name"),
        "product_type": product.get("product_type"),
        "status": product.get("status"),
        "images": list(product.get("images") or []),
        "general": dict(product.get("general") or {}),
        "material_and_dimensions": flat_material,
        "loads_rates_deflection": flat_loads,
    }


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _number(form: dict[str, Any], name: str, cast=float) -> Any:
    value = form.get(name)
    if _blank(value):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field_label(name)} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ValueError(f"{field_label(name)} must be a finite number, got {value!r}")
    return cast(number)


def _text(form: dict[str, Any], name: str) -> Any:
    value = form.get(name)
    return None if _blank(value) else value


def _dimension(form: dict[str, Any], name: str, value_key: str = "value_mm",
               tolerance_key: str = "tolerance_mm") -> dict[str, float] | None:
    value = _number(form, f"{name}_value")
    if value is None:
        return None
    tolerance = _number(form, f"{name}_tolerance")
    return {value_key: value, tolerance_key: tolerance if tolerance is not None else 0.0}


def build_product_payload(form: dict[str, Any]) -> dict[str, Any]:
    """Rebuild the nested product document from flat editor values.

    A dimension is kept only when its value is filled in; a missing
    tolerance becomes 0. Heat treat is kept when either half is set.

    Raises:
        ValueError: If a numeric input cannot be parsed.
    """
    material = form.get("material_and_dimensions") or {}
    loads = form.get("loads_rates_deflection") or {}
    general = {k: v for k, v in (form.get("general") or {}).items() if not _blank(v)}

    nested_material: dict[str, Any] = {}
    for name in MATERIAL_TEXT_FIELDS:
        nested_material[name] = _text(material, name)
    for name in MATERIAL_NUMBER_FIELDS:
        nested_material[name] = _number(material, name)
    nested_material["preset"] = _text(material, "preset")
    for name in MATERIAL_DIMENSIONS:
        nested_material[name] = _dimension(material, name)

    hole_dia = _number(material, "works_inside_hole_dia")
    nested_material["works_inside"] = {"hole_dia_mm": hole_dia} if hole_dia is not None else None
    shaft_dia = _number(material, "works_over_shaft_dia")
    nested_material["works_over"] = {"shaft_dia_mm": shaft_dia} if shaft_dia is not None else None
    degree_c = _number(material, "heat_treat_degree_c")
    time_min = _number(material, "heat_treat_time_min")
    if degree_c is not None or time_min is not None:
        nested_material["heat_treat"] = {"degree_c": degree_c, "time_min": time_min}

    nested_loads: dict[str, Any] = {
        "spring_rate": _dimension(
            loads, "spring_rate", "value_n_per_mm", "tolerance_n_per_mm"
        ),
        "solid_height": _dimension(loads, "solid_height"),
        "cycles": _number(loads, "cycles", cast=int),
    }
    for name in LOAD_NUMBER_FIELDS:
        nested_loads[name] = _number(loads, name)
    for name in LOAD_TEXT_FIELDS:
        nested_loads[name] = _text(loads, name)

    return clean_document({
        "product_name": form.get("product_name"),
        "product_type": form.get("product_type"),
        "status": form.get("status"),
        "images": list(form.get("images") or []),
        "general": general,
        "material_and_dimensions": nested_material,
        "loads_rates_deflection": nested_loads,
    })
