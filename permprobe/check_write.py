#!/usr/bin/env python3
"""Command-line check for whether a path, or its nearest existing ancestor, is writable.

A thin optional wrapper around :mod:`permprobe.writable` for shell scripts and CI
jobs. Library callers should use the functions there directly.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from permprobe._runner import ProbeResult, build_parser, emit_result, result_from_probe
from permprobe.writable import WriteProbe, write, write_dir, write_file

CAPABILITY = "filesystem_path_write"

PROBERS: dict[str, Callable[[str], WriteProbe]] = {
    "auto": write,
    "file": write_file,
    "dir": write_dir,
}


def exercise(path: str, kind: str = "auto") -> ProbeResult:
    probe = PROBERS[kind](path)
    return result_from_probe(CAPABILITY, probe)


def main(argv: Sequence[str] | None = None) -> None:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    parser = build_parser(CAPABILITY)
    args = parser.parse_args(argv)
    result = exercise(args.path, args.kind)
    print(f"{result.status}: {result.detail}")
    emit_result(result, args.output)


if __name__ == "__main__":
    main()
