"""Running the GAP computer algebra system, and translating between GAP and Python objects

Copyright 2023 The matgroups Authors.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

from __future__ import annotations

import functools
import re
import subprocess
from collections.abc import Sequence

import sympy.combinatorics as comb

GAP_EXECUTABLE = "gap"
GAP_MAJOR_VERSION = 4


@functools.cache
def get_version() -> str | None:
    """Version of the installed GAP, or None if GAP cannot be run."""
    commands = [GAP_EXECUTABLE, "-q", "-c", r'Print(GAPInfo.Version, "\n"); QUIT;']
    try:
        result = subprocess.run(commands, capture_output=True, text=True)
    except OSError:
        return None
    match = re.search(r"[0-9]+\.[0-9]+\.[0-9]+", result.stdout)
    return match.group() if match else None


def is_installed() -> bool:
    """Is GAP 4 installed?"""
    version = get_version()
    return version is not None and int(version.split(".")[0]) == GAP_MAJOR_VERSION


def sanitize_commands(commands: Sequence[str]) -> tuple[str, ...]:
    """Sanitize GAP commands: don't format Print statements, and quit at the end."""
    stream = "__stream__"
    prefix = [
        f"{stream} := OutputTextUser();",
        f"SetPrintFormattingStatus({stream}, false);",
    ]
    suffix = ["QUIT;"]
    commands = [cmd.replace("Print(", f"PrintTo({stream}, ") for cmd in commands]
    return tuple(prefix + commands + suffix)


def get_output(*commands: str) -> str:
    """Get the output from the given GAP commands.

    Raise a ValueError if GAP reports an error, or exits abnormally.
    """
    commands = sanitize_commands(commands)
    shell_commands = [GAP_EXECUTABLE, "-q", "--quitonbreak", "-c", " ".join(commands)]
    result = subprocess.run(shell_commands, capture_output=True, text=True)
    if result.stderr or result.returncode:
        raise ValueError(
            f"Error encountered when running GAP (exit code {result.returncode}):"
            f"{result.stderr}\n\n"
            f"GAP command:\n{' '.join(commands)}"
        )
    return result.stdout


def to_gap_permutation(permutation: comb.Permutation) -> str:
    """Convert a SymPy permutation into a GAP permutation in cycle notation."""

    def to_gap_cycle(cycle: list[int]) -> str:
        shifted_cycle = [ii + 1 for ii in cycle]  # GAP indexes from 1
        return f"({','.join(map(str, shifted_cycle))})"

    cycles = [to_gap_cycle(cycle) for cycle in permutation.cyclic_form]
    return "".join(cycles) if cycles else "()"


def parse_integer_list(line: str) -> list[int]:
    """Parse a list of integers printed by GAP, such as "[ 1, -2, 3 ]"."""
    if not re.fullmatch(r"\s*\[[-0-9,\s]*\]\s*", line):
        raise ValueError(f"Cannot extract list of integers from string: {line}")
    return [int(entry) for entry in re.findall(r"-?[0-9]+", line)]
