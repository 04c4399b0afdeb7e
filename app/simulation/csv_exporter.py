"""
simulation/csv_exporter.py

Export resolver results to CSV format.
No Qt dependencies; the file dialog belongs to the view.
"""

import csv
import io
from datetime import datetime


def _write_header(writer, title, circuit_name):
    writer.writerow(["# Export", title])
    writer.writerow(["# Date", datetime.now().strftime("%Y-%m-%d %H:%M:%S")])
    if circuit_name:
        writer.writerow(["# Circuit", circuit_name])
    writer.writerow([])


def _fmt_voltage(voltage):
    return "" if voltage is None else round(voltage, 6)


def export_net_voltages(result, circuit_name=""):
    """
    Export net voltages to CSV string.

    Args:
        result: SimulationResult
        circuit_name: optional circuit filename

    Returns:
        str: CSV content
    """
    output = io.StringIO()
    writer = csv.writer(output)
    _write_header(writer, "Net Voltages", circuit_name)

    writer.writerow(["Net", "Circuit", "Status", "Voltage (V)", "Terminals"])
    for net in result.nets.values():
        writer.writerow([
            net.net_id,
            net.circuit_id or "",
            net.status.value,
            _fmt_voltage(net.voltage),
            " ".join(f"{c}:{t}" for c, t in net.terminals),
        ])

    return output.getvalue()


def export_pin_readings(result, circuit_name=""):
    """
    Export microcontroller pin readings to CSV string.

    Floating pins keep an empty voltage cell and NO_SIGNAL in the value columns.

    Args:
        result: SimulationResult
        circuit_name: optional circuit filename

    Returns:
        str: CSV content
    """
    output = io.StringIO()
    writer = csv.writer(output)
    _write_header(writer, "Pin Readings", circuit_name)

    writer.writerow(["Board", "Pin", "Mode", "Voltage (V)", "Digital", "Analog"])
    for reading in result.pin_readings:
        writer.writerow([
            reading.board_id,
            reading.pin_name,
            reading.mode,
            _fmt_voltage(reading.voltage),
            reading.digital,
            reading.analog,
        ])

    return output.getvalue()


def export_issues(result, circuit_name=""):
    """Export errors and warnings to CSV string."""
    output = io.StringIO()
    writer = csv.writer(output)
    _write_header(writer, "Issues", circuit_name)

    writer.writerow(["Severity", "Type", "Circuit", "Components", "Message"])
    for issue in result.errors + result.warnings:
        writer.writerow([
            issue.severity,
            issue.kind.value,
            issue.circuit_id or "",
            " ".join(issue.affected_components),
            issue.message,
        ])

    return output.getvalue()


def export_result(result, circuit_name=""):
    """All three tables, separated by blank rows."""
    return "\n".join([
        export_net_voltages(result, circuit_name),
        export_pin_readings(result, circuit_name),
        export_issues(result, circuit_name),
    ])


def write_csv(csv_content, filepath):
    """
    Write CSV content to a file.

    Args:
        csv_content: str CSV data
        filepath: path to write to
    """
    with open(filepath, "w", newline="", encoding="utf-8") as f:
        f.write(csv_content)
