"""
simulation/excel_exporter.py

Export resolver results to Excel (.xlsx) format.
No Qt dependencies; the file dialog belongs to the view.
"""

from datetime import datetime

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

# Fills for the Status column of the Nets sheet
_STATUS_FILLS = {
    "conflict": "F8CBAD",
    "undefined": "FCE4D6",
    "floating": "EDEDED",
}


def _add_metadata_sheet(wb, result, circuit_name=""):
    """Add a Summary sheet with circuit metadata and the headline outcome."""
    ws = wb.active
    ws.title = "Summary"
    header_font = Font(bold=True)
    ws.append(["Circuit Report Summary"])
    ws["A1"].font = Font(bold=True, size=14)
    ws.append([])
    ws.append(["Date", datetime.now().strftime("%Y-%m-%d %H:%M:%S")])
    if circuit_name:
        ws.append(["Circuit", circuit_name])
    ws.append(["Circuits", len(result.circuits)])
    ws.append(["Nets", len(result.nets)])
    ws.append(["LED", "ON" if result.led_lit else "OFF"])
    ws.append(["Errors", len(result.errors)])
    ws.append(["Warnings", len(result.warnings)])
    if result.primary_message:
        ws.append(["Message", result.primary_message])
    for row in ws.iter_rows(min_row=3, max_col=1):
        row[0].font = header_font
    ws.column_dimensions["A"].width = 18
    ws.column_dimensions["B"].width = 60
    return ws


def _style_header_row(ws, row_num=1):
    """Apply header styling to the first row of a worksheet."""
    header_fill = PatternFill(
        start_color="4472C4", end_color="4472C4", fill_type="solid"
    )
    header_font = Font(bold=True, color="FFFFFF")
    for cell in ws[row_num]:
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")


def _set_widths(ws, widths):
    for i, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(i)].width = width


def export_to_excel(result, filepath, circuit_name=""):
    """Export a resolver result to an Excel workbook.

    Args:
        result: SimulationResult
        filepath: path to write the .xlsx file
        circuit_name: optional circuit filename for metadata
    """
    wb = Workbook()
    _add_metadata_sheet(wb, result, circuit_name)
    _export_nets(wb, result)
    _export_pins(wb, result)
    _export_issues(wb, result)
    wb.save(filepath)


def _export_nets(wb, result):
    """Export one row per net."""
    ws = wb.create_sheet("Nets")
    ws.append(["Net", "Circuit", "Status", "Voltage (V)", "Terminals"])
    _style_header_row(ws)
    for net in result.nets.values():
        ws.append([
            net.net_id,
            net.circuit_id or "",
            net.status.value,
            net.voltage,
            ", ".join(f"{c}:{t}" for c, t in net.terminals),
        ])
        color = _STATUS_FILLS.get(net.status.value)
        if color:
            ws.cell(row=ws.max_row, column=3).fill = PatternFill(
                start_color=color, end_color=color, fill_type="solid"
            )
    _set_widths(ws, (12, 12, 12, 14, 60))


def _export_pins(wb, result):
    """Export microcontroller pin readings."""
    ws = wb.create_sheet("Pins")
    ws.append(["Board", "Pin", "Mode", "Voltage (V)", "Digital", "Analog"])
    _style_header_row(ws)
    if not result.pin_readings:
        ws.append(["No boards"])
        return
    for reading in result.pin_readings:
        ws.append([
            reading.board_id,
            reading.pin_name,
            reading.mode,
            reading.voltage,
            reading.digital,
            reading.analog,
        ])
    _set_widths(ws, (12, 10, 10, 14, 12, 12))


def _export_issues(wb, result):
    """Export errors followed by warnings."""
    ws = wb.create_sheet("Issues")
    ws.append(["Severity", "Type", "Circuit", "Components", "Message"])
    _style_header_row(ws)
    for issue in result.errors + result.warnings:
        ws.append([
            issue.severity,
            issue.kind.value,
            issue.circuit_id or "",
            ", ".join(issue.affected_components),
            issue.message,
        ])
    _set_widths(ws, (10, 20, 12, 24, 80))
