#!/usr/bin/env python3
"""Common helpers for turning write probes into CLI results and artifacts.

This is an optional command-line wrapper; the prober itself lives in
:mod:`permprobe.writable` and never depends on anything here.
"""

from __future__ import annotations

import argparse
import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Literal

from permprobe.writable import WriteProbe

Status = Literal["writable", "denied", "error"]
Kind = Literal["auto", "file", "dir"]


def _probe_id_fallback(capability: str) -> str:
    """Prefer a caller-provided PROBE_ID so artifacts match the job that ran them."""

    probe_id = os.environ.get("PROBE_ID")
    if probe_id:
        return probe_id
    return capability


def _default_output(capability: str) -> Path:
    identifier = _probe_id_fallback(capability)
    return Path("artifacts") / f"{identifier}.json"


def build_parser(capability: str) -> argparse.ArgumentParser:
    """Expose the common CLI contract: a target path, its kind, and --output."""

    parser = argparse.ArgumentParser(
        description=f"Write-access probe for '{capability}'",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("path", help="File or directory that is about to be written")
    parser.add_argument(
        "--kind",
        choices=["auto", "file", "dir"],
        default="auto",
        help="Treat the path as a file or directory instead of detecting it",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=_default_output(capability),
        help="Where to write the machine-readable probe result",
    )
    return parser


@dataclass
class ProbeResult:
    capability: str
    status: Status
    detail: str
    tested_path: str


def result_from_probe(capability: str, probe: WriteProbe) -> ProbeResult:
    if probe.error is None:
        return ProbeResult(capability, "writable", f"'{probe.path}' is writable", probe.path)
    if isinstance(probe.error, PermissionError):
        return ProbeResult(capability, "denied", str(probe.error), probe.path)
    return ProbeResult(capability, "error", str(probe.error), probe.path)


def persist_result(result: ProbeResult, output_path: Path) -> int:
    """Write a JSON artifact and return an appropriate exit code."""

    # Keep artifacts consistent even if the caller passed a nested path via --output.
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(asdict(result), indent=2) + "\n", encoding="utf-8")
    return 0 if result.status == "writable" else 1


def emit_result(result: ProbeResult, output_path: Path) -> None:
    """Persist the probe result and exit with the right status code."""

    exit_code = persist_result(result, output_path)
    raise SystemExit(exit_code)
