"""
CSV, JSON and text dumps of a state table.

All three read the table without modifying it.

CSV columns (one row per target entry, nested state → action → outcome →
target order):

    idstatefrom,idaction,idoutcome,idstateto,probability,reward

Floats are written with ``repr`` so a reader gets back exactly the stored
values. Terminal states and empty outcomes produce no rows, so a table
rebuilt from the CSV may have fewer trailing terminal states or empty
actions than the one exported.

JSON: ``{"states": [...]}``, one element per state in id order, each the
state's own ``to_json``.
"""

from __future__ import annotations

import csv
import json
from typing import TextIO

from rmdp.engine.state_table import StateTable

CSV_HEADER: list[str] = [
    "idstatefrom",
    "idaction",
    "idoutcome",
    "idstateto",
    "probability",
    "reward",
]


def iter_rows(table: StateTable):
    """Yield (from, action, outcome, to, probability, reward) tuples in CSV order."""
    for si, state in enumerate(table):
        for ai, action in enumerate(state.actions):
            for oi, outcome in enumerate(action.outcomes):
                for to, probability, reward in outcome:
                    yield si, ai, oi, to, probability, reward


def to_csv(table: StateTable, output: TextIO, header: bool = True) -> int:
    """Write the table as CSV to an open text stream.

    Args:
        table:  Table to export.
        output: Writable text stream (open files with ``newline=""``).
        header: Whether to write the column header first.

    Returns:
        Number of data rows written.
    """
    writer = csv.writer(output, lineterminator="\n")
    if header:
        writer.writerow(CSV_HEADER)
    count = 0
    for row in iter_rows(table):
        writer.writerow(row)
        count += 1
    return count


def to_csv_file(table: StateTable, path: str, header: bool = True) -> int:
    """Write the table as CSV to ``path``; returns the number of data rows."""
    with open(path, "w", newline="", encoding="utf-8") as f:
        return to_csv(table, f, header=header)


def to_json(table: StateTable) -> str:
    return json.dumps({"states": [s.to_json(si) for si, s in enumerate(table)]})


def to_string(table: StateTable) -> str:
    """Nested listing: ``"<sid> : <action count>"`` then one line per action."""
    return "".join(f"{si} : {state.to_string()}\n" for si, state in enumerate(table))
