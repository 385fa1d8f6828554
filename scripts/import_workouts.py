#!/usr/bin/env python3
"""
Import a plain-text training diary into the workout log.

The diary is a text file of workouts separated by lines containing only
'---'. Each workout starts with a 'Date: YYYY-MM-DD' line; the rest is
the workout text, which is parsed and stored with its summary.

    Date: 2024-03-04
    400 free easy
    4x(50 fly + 50 back)
    ---
    Date: 2024-03-06
    ...

Usage:
    python scripts/import_workouts.py diary.txt
    python scripts/import_workouts.py diary.txt --dry-run

Requires:
    - .env file (optional) with WORKOUT_STORE_PATH / DEFAULT_INTENSITY_SYSTEM
"""

import re
import sys
from pathlib import Path

# Add project root to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from src.config.settings import get_settings
from src.core.parsing import WorkoutParseError, WorkoutParser
from src.infrastructure.storage import StoreConfig, WorkoutStoreError, create_workout_store

DATE_LINE = re.compile(r"^\s*date\s*:\s*(\S+)\s*$", re.IGNORECASE)
SEPARATOR_LINE = re.compile(r"^---[ \t]*$", re.MULTILINE)


def split_diary(content: str) -> list[dict]:
    """
    Split diary text into workouts.

    Returns a list of dicts with 'date' and 'text'. Chunks without a date
    line or without any workout text are skipped with a warning.
    """
    content = content.replace("\r\n", "\n").replace("\r", "\n")
    workouts = []

    for number, raw_chunk in enumerate(SEPARATOR_LINE.split(content), start=1):
        lines = raw_chunk.strip().split("\n")
        if not lines or not lines[0].strip():
            continue

        match = DATE_LINE.match(lines[0])
        if not match:
            print(f"[WARN] Workout {number}: missing 'Date:' line, skipping")
            continue

        text = "\n".join(lines[1:]).strip()
        if not text:
            print(f"[WARN] Workout {number}: no workout text, skipping")
            continue

        workouts.append({"date": match.group(1), "text": text})

    return workouts


def import_workouts(workouts: list[dict], system: str, dry_run: bool = False) -> bool:
    """Parse each workout and store it. Returns True if nothing failed."""
    settings = get_settings()
    parser = WorkoutParser(
        default_system=settings.default_intensity_system,
        strict=settings.parser_strict_groups,
    )
    store = None
    if not dry_run:
        store = create_workout_store(config=StoreConfig(path=settings.workout_store_path))

    imported = 0
    errors = 0

    for workout in workouts:
        try:
            summary = parser.parse(workout["text"], system)
        except WorkoutParseError as e:
            errors += 1
            print(f"[ERR] {workout['date']}: {e}")
            continue

        print(f"[OK] {workout['date']}: {summary.total_distance}")
        if store is None:
            continue

        try:
            store.add(workout["date"], workout["text"], summary.to_dict())
            imported += 1
        except (ValueError, WorkoutStoreError) as e:
            errors += 1
            print(f"[ERR] {workout['date']}: {e}")

    print(f"\n=== Import Complete ===")
    print(f"Imported: {imported}")
    print(f"Errors: {errors}")

    return errors == 0


def main():
    import argparse

    parser = argparse.ArgumentParser(description='Import a training diary into the workout log')
    parser.add_argument('file', help='Diary text file')
    parser.add_argument('--dry-run', action='store_true', help='Parse only, don\'t store')
    parser.add_argument(
        '--intensity-system',
        choices=['polar', 'international'],
        default=None,
        help='Colour vocabulary (defaults to DEFAULT_INTENSITY_SYSTEM)',
    )
    args = parser.parse_args()

    filepath = Path(args.file)
    if not filepath.exists():
        print(f"ERROR: Cannot find {args.file}")
        sys.exit(1)

    print(f"Reading diary from: {filepath}")
    workouts = split_diary(filepath.read_text(encoding='utf-8'))
    print(f"Found {len(workouts)} workouts")

    if not workouts:
        print("ERROR: No workouts found in diary")
        sys.exit(1)

    system = args.intensity_system or get_settings().default_intensity_system
    success = import_workouts(workouts, system, dry_run=args.dry_run)

    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()
