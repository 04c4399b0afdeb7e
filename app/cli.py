"""
Command-line interface for E-GROOTS simulator batch operations.

Resolve circuits, validate them, read microcontroller pins and export
results without the GUI.

Usage::

    python -m cli resolve circuit.json
    python -m cli resolve circuit.json --format csv --output results.csv
    python -m cli validate circuit.json
    python -m cli pins circuit.json
    python -m cli export circuit.json --format xlsx --output results.xlsx
    python -m cli batch circuits/
    python -m cli repl --load circuit.json
    cat circuit.json | python -m cli resolve -
"""

import argparse
import code
import glob
import json
import logging
import sys
from pathlib import Path

from controllers.file_controller import validate_circuit_data
from models.circuit import CircuitModel
from simulation.csv_exporter import export_pin_readings, export_result
from simulation.excel_exporter import export_to_excel
from simulation.resolver import resolve_model
from simulation.settings import SettingsStore, SimulationSettings

__version__ = "0.3.0"

logger = logging.getLogger(__name__)


def try_load_circuit(filepath: str) -> tuple[CircuitModel | None, str]:
    """Load and validate a circuit JSON file without exiting.

    Args:
        filepath: Path to the circuit JSON file, or '-' for stdin.

    Returns:
        (model, "") on success, or (None, error_message) on failure.
    """
    if filepath == "-":
        text = sys.stdin.read()
        source = "stdin"
    else:
        path = Path(filepath)
        if not path.exists():
            return None, f"file not found: {filepath}"
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            return None, f"could not read {filepath}: {e}"
        source = filepath

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        return None, f"invalid JSON in {source}: {e}"

    try:
        validate_circuit_data(data)
    except ValueError as e:
        return None, f"invalid circuit file: {e}"

    return CircuitModel.from_dict(data), ""


def load_circuit(filepath: str) -> CircuitModel:
    """Load and validate a circuit JSON file.

    Args:
        filepath: Path to the circuit JSON file.

    Returns:
        A populated CircuitModel.

    Raises:
        SystemExit: On file read or validation errors.
    """
    model, error = try_load_circuit(filepath)
    if model is None:
        print(f"Error: {error}", file=sys.stderr)
        sys.exit(1)
    return model


def load_settings(args: argparse.Namespace) -> SimulationSettings:
    """Settings from --settings if given, else defaults."""
    path = getattr(args, "settings", None)
    if not path:
        return SimulationSettings()
    if not Path(path).exists():
        print(f"Error: settings file not found: {path}", file=sys.stderr)
        sys.exit(1)
    return SettingsStore(Path(path)).load()


def _circuit_name(filepath: str) -> str:
    return "stdin" if filepath == "-" else Path(filepath).stem


def _write_or_print(text: str, output: str | None, what: str) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        print(f"{what} written to {output}", file=sys.stderr)
    else:
        print(text)


def cmd_resolve(args: argparse.Namespace) -> int:
    """Resolve a circuit and output nets, component states and pins."""
    model = load_circuit(args.circuit)
    result = resolve_model(model, load_settings(args))

    for warning in result.warnings:
        print(f"Warning: {warning.message}", file=sys.stderr)

    if args.format == "csv":
        text = export_result(result, _circuit_name(args.circuit))
    else:
        text = json.dumps(result.to_dict(), indent=2)
    _write_or_print(text, args.output, "Results")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Report structural errors; exit code 1 if there are any."""
    model = load_circuit(args.circuit)
    result = resolve_model(model, load_settings(args))

    if result.is_valid:
        print(f"Circuit is valid: {args.circuit}")
        for warning in result.warnings:
            print(f"  Warning: {warning.message}")
        return 0

    print(f"Circuit has errors: {args.circuit}", file=sys.stderr)
    for err in result.errors:
        print(f"  - [{err.kind.value}] {err.message}", file=sys.stderr)
    return 1


def cmd_pins(args: argparse.Namespace) -> int:
    """Print the serial-monitor view of every board."""
    model = load_circuit(args.circuit)
    result = resolve_model(model, load_settings(args))

    if args.format == "csv":
        print(export_pin_readings(result, _circuit_name(args.circuit)))
        return 0

    if not result.pin_readings:
        print("No microcontroller boards in circuit.")
        return 0

    current_board = None
    for reading in result.pin_readings:
        if reading.board_id != current_board:
            current_board = reading.board_id
            print(f"\n{reading.board_id} ({reading.board_type})")
            print(f"{'PIN':<6} {'MODE':<6} {'VOLTAGE':<9} {'VALUE'}")
            print("-" * 32)
        voltage = "—" if reading.voltage is None else f"{reading.voltage:.2f}V"
        value = reading.value if reading.has_signal else "—"
        print(f"{reading.pin_name:<6} {reading.mode:<6} {voltage:<9} {value}")
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Export the circuit or its resolved results in the specified format."""
    model = load_circuit(args.circuit)
    fmt = args.format

    if fmt == "json":
        _write_or_print(json.dumps(model.to_dict(), indent=2), args.output, "JSON")
        return 0

    result = resolve_model(model, load_settings(args))
    if fmt == "csv":
        _write_or_print(export_result(result, _circuit_name(args.circuit)), args.output, "CSV")
        return 0
    if fmt == "xlsx":
        if not args.output:
            print("Error: --output is required for xlsx export", file=sys.stderr)
            return 1
        try:
            export_to_excel(result, args.output, _circuit_name(args.circuit))
        except OSError as e:
            print(f"Error: could not write {args.output}: {e}", file=sys.stderr)
            return 1
        print(f"Workbook written to {args.output}", file=sys.stderr)
        return 0

    print(f"Error: unsupported export format '{fmt}'", file=sys.stderr)
    print("Supported formats: json, csv, xlsx", file=sys.stderr)
    return 1


def cmd_batch(args: argparse.Namespace) -> int:
    """Resolve multiple circuit files and print a summary table."""
    pattern = args.path
    path = Path(pattern)
    if path.is_dir():
        files = sorted(path.glob("*.json"))
    elif "*" in pattern or "?" in pattern:
        files = sorted(Path(p) for p in glob.glob(pattern))
    else:
        print(f"Error: {pattern} is not a directory or glob pattern", file=sys.stderr)
        return 1

    if not files:
        print(f"No .json circuit files found matching: {pattern}", file=sys.stderr)
        return 1

    output_dir = None
    if args.output_dir:
        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

    settings = load_settings(args)
    results_summary = []
    any_failed = False

    for filepath in files:
        model, error = try_load_circuit(str(filepath))
        if model is None:
            results_summary.append({"file": filepath.name, "status": "LOAD_ERROR", "details": error})
            any_failed = True
            if args.fail_fast:
                break
            continue

        result = resolve_model(model, settings)
        if result.is_valid:
            results_summary.append({
                "file": filepath.name,
                "status": "OK",
                "details": f"LED {'ON' if result.led_lit else 'OFF'}",
            })
        else:
            results_summary.append({"file": filepath.name, "status": "INVALID", "details": result.primary_message})
            any_failed = True

        if output_dir:
            out_path = output_dir / f"{filepath.stem}.json"
            out_path.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")

        if any_failed and args.fail_fast:
            break

    print(f"\n{'File':<40} {'Status':<12} {'Details'}")
    print("-" * 70)
    for entry in results_summary:
        print(f"{entry['file']:<40} {entry['status']:<12} {entry['details']}")

    total = len(results_summary)
    passed = sum(1 for e in results_summary if e["status"] == "OK")
    print(f"\n{passed}/{total} valid, {total - passed} with problems")

    return 1 if any_failed else 0


REPL_BANNER = """\
E-GROOTS Interactive REPL
=========================

Available objects:
  Circuit          - build and resolve circuits
  COMPONENT_TYPES  - list of all supported component types

Quick start:
  c = Circuit()
  c.add_component("5v")
  c.add_component("resistor", resistance=220)
  c.add_component("led")
  c.add_component("gnd")
  c.add_wire("VCC1", "out", "R1", "term-a")
  c.add_wire("R1", "term-b", "LED1", "anode")
  c.add_wire("LED1", "cathode", "GND1", "in")
  print(c.resolve().led_lit)
"""


def build_repl_namespace(load_path: str | None = None) -> dict:
    """Build the namespace dict for the interactive REPL.

    Args:
        load_path: Optional path to a circuit JSON file to pre-load.

    Returns:
        Dict of names to inject into the REPL namespace.
    """
    from models.registry import COMPONENT_TYPES
    from scripting.circuit import Circuit

    namespace = {
        "Circuit": Circuit,
        "COMPONENT_TYPES": COMPONENT_TYPES,
    }

    if load_path:
        model, error = try_load_circuit(load_path)
        if model is None:
            print(f"Warning: could not load {load_path}: {error}", file=sys.stderr)
        else:
            namespace["circuit"] = Circuit(model)
            print(f"Loaded circuit from {load_path} as 'circuit'", file=sys.stderr)

    return namespace


def cmd_repl(args: argparse.Namespace) -> int:
    """Launch an interactive Python REPL with the scripting API."""
    namespace = build_repl_namespace(getattr(args, "load", None))

    try:
        from IPython import start_ipython

        start_ipython(argv=[], user_ns=namespace, display_banner=False)
        return 0
    except ImportError:
        pass

    code.interact(banner=REPL_BANNER, local=namespace)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="egroots-sim",
        description="E-GROOTS circuit simulator: resolve, validate, and export circuits from the command line.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log resolver details to stderr")
    parser.add_argument("--settings", help="JSON file with simulation thresholds")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # resolve
    res_parser = subparsers.add_parser("resolve", help="Resolve a circuit and output the result")
    res_parser.add_argument("circuit", help="Path to circuit JSON file ('-' for stdin)")
    res_parser.add_argument("--format", choices=["json", "csv"], default="json", help="Output format (default: json)")
    res_parser.add_argument("--output", "-o", help="Write results to file instead of stdout")

    # validate
    val_parser = subparsers.add_parser("validate", help="Check circuit for wiring errors")
    val_parser.add_argument("circuit", help="Path to circuit JSON file ('-' for stdin)")

    # pins
    pins_parser = subparsers.add_parser("pins", help="Show microcontroller pin readings")
    pins_parser.add_argument("circuit", help="Path to circuit JSON file ('-' for stdin)")
    pins_parser.add_argument("--format", choices=["table", "csv"], default="table", help="Output format (default: table)")

    # export
    exp_parser = subparsers.add_parser("export", help="Export circuit or results in specified format")
    exp_parser.add_argument("circuit", help="Path to circuit JSON file ('-' for stdin)")
    exp_parser.add_argument(
        "--format", "-f", choices=["json", "csv", "xlsx"], default="json", help="Export format (default: json)"
    )
    exp_parser.add_argument("--output", "-o", help="Write output to file instead of stdout")

    # batch
    batch_parser = subparsers.add_parser("batch", help="Resolve multiple circuit files")
    batch_parser.add_argument("path", help="Directory or glob pattern matching circuit JSON files")
    batch_parser.add_argument("--output-dir", help="Write per-file JSON results to this directory")
    batch_parser.add_argument("--fail-fast", action="store_true", help="Stop on first problem")

    # repl
    repl_parser = subparsers.add_parser("repl", help="Launch interactive Python REPL with scripting API")
    repl_parser.add_argument("--load", help="Pre-load a circuit JSON file as 'circuit' variable")

    return parser


def main(argv=None) -> int:
    """CLI entry point. Returns exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    handlers = {
        "resolve": cmd_resolve,
        "validate": cmd_validate,
        "pins": cmd_pins,
        "export": cmd_export,
        "batch": cmd_batch,
        "repl": cmd_repl,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
