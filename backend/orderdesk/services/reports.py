"""Printable HTML reports for a sales-order line item.

Both reports read the product snapshot stored on the item, so they show the
part as it was specified when the order was taken.
"""

from datetime import date
from html import escape
from typing import Any, Optional

from orderdesk.models.sales_order import SalesOrder, SalesOrderItem
from orderdesk.services.display import product_type_full_name

OBSERVATION_COLUMNS = 5

_STYLE = """
    body { font-family: Arial, Helvetica, sans-serif; color:#1f2933; margin:24px; }
    h1 { font-size:20px; margin:0 0 4px 0; }
    h3 { font-size:14px; margin:18px 0 6px 0; border-bottom:1px solid #cbd2d9; padding-bottom:4px; }
    .logo { font-weight:700; letter-spacing:2px; color:#1565c0; }
    .grid { display:grid; grid-template-columns:repeat(3, 1fr); gap:8px 16px; }
    .label { color:#616e7c; font-size:11px; text-transform:uppercase; }
    .value { font-size:14px; }
    table { width:100%; border-collapse:collapse; font-size:12px; }
    th, td { border:1px solid #9aa5b1; padding:4px 6px; text-align:center; }
    td.parameter { text-align:left; }
    .signatures { display:flex; justify-content:space-between; margin-top:36px; }
"""


def _text(value: Any) -> str:
    if value is None or value == "":
        return "-"
    return escape(str(value))


def _field(label: str, value: Any) -> str:
    return f'<div><div class="label">{escape(label)}</div><div class="value">{_text(value)}</div></div>'


def _dimension(dimension: Optional[dict], unit: str = "mm") -> str:
    if not dimension:
        return "-"
    value = dimension.get("value_mm", dimension.get("value_n_per_mm"))
    tolerance = dimension.get("tolerance_mm", dimension.get("tolerance_n_per_mm")) or 0
    return f"{_text(value)} ± {_text(tolerance)} {unit}"


def _snapshot(item: SalesOrderItem) -> dict:
    return item.product_snapshot or {}


def _page(title: str, body: str) -> str:
    return f"""<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>{escape(title)}</title>
  <style>{_STYLE}</style>
</head>
<body>
{body}
</body>
</html>
"""


def render_job_card_report(
    sales_order: SalesOrder, item: SalesOrderItem, report_date: Optional[date] = None
) -> str:
    """Job card detail report for the shop floor."""
    report_date = report_date or date.today()
    product = _snapshot(item)
    general = product.get("general") or {}
    material = product.get("material_and_dimensions") or {}
    loads = product.get("loads_rates_deflection") or {}

    load1 = None
    if loads.get("load1_n") is not None:
        load1 = f"{loads['load1_n']} N @ {loads.get('length_at_load1_mm', '-')} mm"
    load2 = None
    if loads.get("load2_n") is not None:
        load2 = f"{loads['load2_n']} N @ {loads.get('length_at_load2_mm', '-')} mm"

    body = f"""
<div class="logo">SYMAG</div>
<h1>JOB CARD DETAIL REPORT</h1>
<h3>Job Card Information</h3>
<div class="grid">
  {_field("Job Card Number", item.job_card_number)}
  {_field("Sales Order", sales_order.sales_order_id)}
  {_field("Customer", sales_order.customer_name)}
  {_field("Product Name", item.product_name)}
  {_field("Product Type", product_type_full_name(item.product_type))}
  {_field("Quantity", item.quantity)}
  {_field("Target Date", sales_order.completion_target_date)}
  {_field("Report Date", report_date.isoformat())}
</div>
<h3>Part Information</h3>
<div class="grid">
  {_field("Symag Part No", general.get("symag_part_no"))}
  {_field("Part Weight (Net)", general.get("part_weight_net"))}
  {_field("MOQ", general.get("moq"))}
  {_field("Material Type", material.get("material_type"))}
  {_field("Material Spec", material.get("mtl_spec"))}
  {_field("Grade", material.get("grade_steel"))}
</div>
<h3>Dimensions &amp; Specifications</h3>
<div class="grid">
  {_field("Wire Diameter", _dimension(material.get("wire_dia")))}
  {_field("Outside Diameter", _dimension(material.get("outside_dia")))}
  {_field("Mean Diameter", _dimension(material.get("mean_dia")))}
  {_field("Inside Diameter", _dimension(material.get("inside_dia")))}
  {_field("Free Length", _dimension(material.get("free_length")))}
  {_field("Solid Height", _dimension(loads.get("solid_height")))}
</div>
<h3>Coil Configuration</h3>
<div class="grid">
  {_field("Total Coils", material.get("total_coils"))}
  {_field("Active Coils", material.get("active_coils"))}
  {_field("Helix", material.get("helix"))}
  {_field("End Type", material.get("end_type"))}
  {_field("Pitch (mm)", material.get("pitch_mm"))}
  {_field("Preset", material.get("preset"))}
</div>
<h3>Loads &middot; Spring Rate &middot; Deflection</h3>
<div class="grid">
  {_field("Spring Rate", _dimension(loads.get("spring_rate"), "N/mm"))}
  {_field("Load 1", load1)}
  {_field("Load 2", load2)}
  {_field("Operating Temperature", loads.get("operating_temp_c"))}
  {_field("Cycles", loads.get("cycles"))}
  {_field("Surface Treatment", loads.get("surface_treatment"))}
</div>
<h3>Remarks</h3>
<div class="value">{_text(loads.get("remark") or sales_order.remarks)}</div>
<div class="signatures">
  <div><span class="label">Prepared By:</span> {_text(loads.get("prep_by"))}</div>
  <div><span class="label">Verified By:</span> ____________</div>
  <div><span class="label">Date:</span> {report_date.isoformat()}</div>
</div>
"""
    return _page(f"Job Card {item.job_card_number}", body)


def _limits(dimension: Optional[dict], value_key: str = "value_mm",
            tolerance_key: str = "tolerance_mm") -> tuple[Any, Any, Any]:
    value = dimension.get(value_key)
    tolerance = dimension.get(tolerance_key) or 0
    try:
        return value, round(value - tolerance, 4), round(value + tolerance, 4)
    except TypeError:
        return value, None, None


def pdi_parameters(item: SalesOrderItem) -> list[dict[str, Any]]:
    """Inspection rows: parameter, symbol and the specified standard/min/max.

    Dimension rows appear only when the product specifies the dimension;
    the visual and weight checks are always listed.
    """
    product = _snapshot(item)
    general = product.get("general") or {}
    material = product.get("material_and_dimensions") or {}
    loads = product.get("loads_rates_deflection") or {}

    rows = []
    dimensions = [
        ("Wire Diameter (mm)", "d", material.get("wire_dia"), "value_mm", "tolerance_mm"),
        ("Mean Coil Diameter (mm)", "Dm", material.get("mean_dia"), "value_mm", "tolerance_mm"),
        ("Outer Diameter (mm)", "Do", material.get("outside_dia"), "value_mm", "tolerance_mm"),
        ("Inside Diameter (mm)", "Di", material.get("inside_dia"), "value_mm", "tolerance_mm"),
    ]
    for parameter, symbol, dimension, value_key, tolerance_key in dimensions:
        if dimension:
            standard, minimum, maximum = _limits(dimension, value_key, tolerance_key)
            rows.append({"parameter": parameter, "symbol": symbol,
                         "standard": standard, "minimum": minimum, "maximum": maximum})
    if material.get("total_coils") is not None:
        rows.append({"parameter": "Total Coil (nos)", "symbol": "N",
                     "standard": material["total_coils"], "minimum": None, "maximum": None})
    if material.get("free_length"):
        standard, minimum, maximum = _limits(material["free_length"])
        rows.append({"parameter": "Free Length", "symbol": "L0",
                     "standard": standard, "minimum": minimum, "maximum": maximum})
    if loads.get("spring_rate"):
        standard, minimum, maximum = _limits(loads["spring_rate"], "value_n_per_mm", "tolerance_n_per_mm")
        rows.append({"parameter": "Spring Rate (N/mm)", "symbol": "K",
                     "standard": standard, "minimum": minimum, "maximum": maximum})
    for parameter, standard in (
        ("Grinding %", None),
        ("Burr", "Free from burr"),
        ("Surface", loads.get("surface_treatment")),
        ("Part Net Weight", general.get("part_weight_net")),
    ):
        rows.append({"parameter": parameter, "symbol": "",
                     "standard": standard, "minimum": None, "maximum": None})
    return rows


def render_pdi_report(
    sales_order: SalesOrder, item: SalesOrderItem, report_date: Optional[date] = None
) -> str:
    """Pre-dispatch inspection report with empty observation columns."""
    report_date = report_date or date.today()
    product = _snapshot(item)
    general = product.get("general") or {}
    material = product.get("material_and_dimensions") or {}

    observed = "<td></td>" * OBSERVATION_COLUMNS
    rows_html = "".join(
        f'<tr><td>{n}</td><td class="parameter">{escape(row["parameter"])}</td>'
        f'<td>{escape(row["symbol"])}</td><td>{_text(row["standard"])}</td>'
        f'<td>{_text(row["minimum"])}</td><td>{_text(row["maximum"])}</td>{observed}</tr>'
        for n, row in enumerate(pdi_parameters(item), start=1)
    )
    observed_headers = "".join(f"<th>{i}</th>" for i in range(1, OBSERVATION_COLUMNS + 1))

    body = f"""
<div class="logo">SYMAG</div>
<h1>PDI REPORTS / INSPECTION REPORTS</h1>
<h3>{escape(product_type_full_name(item.product_type))}</h3>
<div class="grid">
  {_field("Report No", item.job_card_number)}
  {_field("Date", report_date.isoformat())}
  {_field("Customer", sales_order.customer_name)}
  {_field("Customer Code", general.get("customer_code"))}
  {_field("Customer Part No", general.get("customer_part_no"))}
  {_field("Symag Job No", item.job_card_number)}
  {_field("Symag Item Code", general.get("symag_part_no"))}
  {_field("Material Grade", material.get("material_type"))}
  {_field("Mtc No", material.get("mtl_spec"))}
  {_field("Quantity", item.quantity)}
</div>
<h3>Specification</h3>
<table>
  <thead>
    <tr><th>Sr. No</th><th>Parameter</th><th>Symbol</th>
        <th colspan="3">Specification</th><th colspan="{OBSERVATION_COLUMNS}">Observed</th></tr>
    <tr><th colspan="3"></th><th>Standard</th><th>Minimum</th><th>Maximum</th>{observed_headers}</tr>
  </thead>
  <tbody>{rows_html}</tbody>
</table>
<div class="signatures">
  <div><span class="label">Inspected By:</span> ____________</div>
  <div><span class="label">Approved By:</span> ____________</div>
</div>
"""
    return _page(f"PDI Report {item.job_card_number}", body)
