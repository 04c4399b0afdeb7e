"""Tests for Excel (.xlsx) export of resolver results."""

from openpyxl import load_workbook
from simulation.excel_exporter import export_to_excel
from simulation.resolver import resolve


class TestExportToExcel:
    def test_creates_all_sheets(self, tmp_path, led_series_circuit):
        path = tmp_path / "result.xlsx"
        export_to_excel(resolve(*led_series_circuit), str(path))
        wb = load_workbook(str(path))
        assert wb.sheetnames == ["Summary", "Nets", "Pins", "Issues"]

    def test_summary(self, tmp_path, led_series_circuit):
        path = tmp_path / "result.xlsx"
        export_to_excel(resolve(*led_series_circuit), str(path), "blink")
        ws = load_workbook(str(path))["Summary"]
        rows = {row[0]: row[1] for row in ws.iter_rows(min_row=3, values_only=True) if row[0]}
        assert rows["Circuit"] == "blink"
        assert rows["LED"] == "ON"
        assert rows["Errors"] == 0

    def test_nets_header_styled(self, tmp_path, led_series_circuit):
        path = tmp_path / "result.xlsx"
        export_to_excel(resolve(*led_series_circuit), str(path))
        ws = load_workbook(str(path))["Nets"]
        assert ws.cell(row=1, column=1).value == "Net"
        assert ws.cell(row=1, column=4).value == "Voltage (V)"
        assert ws.cell(row=1, column=1).font.bold
        assert ws.max_row == 4

    def test_conflict_net_voltage_blank(self, tmp_path, short_circuit):
        path = tmp_path / "result.xlsx"
        export_to_excel(resolve(*short_circuit), str(path))
        ws = load_workbook(str(path))["Nets"]
        conflict = [r for r in ws.iter_rows(min_row=2, values_only=True) if r[2] == "conflict"]
        assert conflict[0][3] is None

    def test_no_boards_row(self, tmp_path, led_series_circuit):
        path = tmp_path / "result.xlsx"
        export_to_excel(resolve(*led_series_circuit), str(path))
        ws = load_workbook(str(path))["Pins"]
        assert ws.cell(row=2, column=1).value == "No boards"

    def test_pin_rows(self, tmp_path, esp32_potentiometer_circuit):
        path = tmp_path / "result.xlsx"
        export_to_excel(resolve(*esp32_potentiometer_circuit), str(path))
        ws = load_workbook(str(path))["Pins"]
        rows = list(ws.iter_rows(min_row=2, values_only=True))
        assert len(rows) == 5
        d34 = next(r for r in rows if r[1] == "D34")
        assert d34[5] == 512

    def test_issues_sheet(self, tmp_path, led_without_resistor_circuit):
        path = tmp_path / "result.xlsx"
        result = resolve(*led_without_resistor_circuit)
        export_to_excel(result, str(path))
        ws = load_workbook(str(path))["Issues"]
        assert ws.cell(row=2, column=2).value == "MISSING_RESISTOR"
        assert ws.max_row == 1 + len(result.errors) + len(result.warnings)
