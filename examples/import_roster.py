"""Example: normalize a roster spreadsheet without Flask or a database.

Usage: python examples/import_roster.py alumnos.xlsx
"""

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.class_attendance.class_attendance.core.exceptions import DomainError
from src.class_attendance.class_attendance.roster.normalizer import normalize_table
from src.class_attendance.class_attendance.roster.reader import read_table, validate_upload


def main(argv: list[str]) -> int:
    if len(argv) != 2:
        print(__doc__.strip().splitlines()[-1])
        return 2

    path = Path(argv[1])
    data = path.read_bytes()
    try:
        validate_upload(path.name, len(data))
        result = normalize_table(read_table(data, path.name))
    except DomainError as e:
        print(f"ERROR: {e}")
        return 1

    for r in result.records:
        print(f"{r.original_order:>4}  {r.surnames}, {r.given_names}")
    print(f"-- {len(result.records)} estudiantes, {result.duplicates_skipped} duplicados omitidos")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
