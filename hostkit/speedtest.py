"""Feed speedtest results into LibreNMS RRD files."""

from __future__ import annotations

import argparse
import math
import os
import subprocess
import sys
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

OUTPUT_PATH = "/opt/librenms/scripts/speedtest_output.txt"
RRD_ROOT = "/data/rrd"
APP_DIR_PREFIX = "app-speedtest-"


class SpeedtestError(Exception):
    """Speedtest output or RRD files could not be processed."""


@dataclass(frozen=True)
class SpeedtestMetrics:
    """Local download and upload speeds."""

    down_local: float
    up_local: float


def _first_number(line: str) -> Optional[float]:
    for token in line.split():
        try:
            if "_" not in token:
                return float(token)
        except ValueError:
            continue
    return None


def _lines(data: bytes):
    for raw in data.split(b"\n"):
        try:
            yield raw.removesuffix(b"\r").decode("utf-8")
        except UnicodeDecodeError:
            continue


def parse_speedtest_output(output_path: str) -> SpeedtestMetrics:
    """Read the local download and upload figures from a speedtest report."""
    try:
        with open(output_path, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise SpeedtestError(str(exc)) from exc

    down: Optional[float] = None
    up: Optional[float] = None
    for line in _lines(data):
        if "Local Download" in line:
            down = _first_number(line)
        elif "Local Upload" in line:
            up = _first_number(line)

    if down is None or up is None:
        raise SpeedtestError("Could not parse Speedtest output.")
    return SpeedtestMetrics(down_local=down, up_local=up)


def _format_value(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text:
        text = format(Decimal(text), "f")
    return text


def update_rrd(rrd_dir: str, metrics: SpeedtestMetrics) -> None:
    """Push the metrics into ``down_local.rrd`` and ``up_local.rrd`` via rrdtool."""
    targets = (
        (f"{rrd_dir}/down_local.rrd", metrics.down_local),
        (f"{rrd_dir}/up_local.rrd", metrics.up_local),
    )
    for path, value in targets:
        if not os.path.exists(path):
            print(f"RRD file {path} does not exist.", file=sys.stderr)
            raise SpeedtestError("RRD file does not exist.")
        try:
            subprocess.run(["rrdtool", "update", path, f"N:{_format_value(value)}"], check=False)
        except OSError:
            pass


def get_hostname() -> Optional[str]:
    """Return the output of ``hostname``, or ``None`` if it is unavailable."""
    try:
        result = subprocess.run(["hostname"], capture_output=True)
    except OSError:
        return None
    name = result.stdout.decode("utf-8", errors="replace").strip()
    return name or None


def find_app_speedtest_dir(rrd_base: str) -> Optional[str]:
    """Return the first ``app-speedtest-*`` entry in ``rrd_base``."""
    try:
        with os.scandir(rrd_base) as entries:
            for entry in entries:
                if entry.name.startswith(APP_DIR_PREFIX):
                    return entry.name
    except OSError:
        return None
    return None


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Update this host's speedtest RRD files from the latest report."""
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.parse_args(argv)

    hostname = get_hostname()
    if hostname is None:
        print("Could not determine hostname.", file=sys.stderr)
        return 1

    rrd_base = f"{RRD_ROOT}/{hostname}"
    app_name = find_app_speedtest_dir(rrd_base)
    if app_name is None:
        print("Could not find app-speedtest-* directory.", file=sys.stderr)
        return 1

    try:
        metrics = parse_speedtest_output(OUTPUT_PATH)
        update_rrd(f"{rrd_base}/{app_name}", metrics)
    except SpeedtestError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())