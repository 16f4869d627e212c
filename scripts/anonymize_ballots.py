"""Anonymize a JSON round export for use as a test fixture.

Replaces every visitor id (ballot owners and film nominators) with a fake
user name generated by faker under a fixed seed, so the same visitor maps
to the same fake name throughout the file. Film ids, titles and scores are
left untouched.

Usage:
    python scripts/anonymize_ballots.py exports/round-2026-10-17.json
    python scripts/anonymize_ballots.py exports/round.json -o output.json
"""

import argparse
import json
from pathlib import Path

from faker import Faker

FIXTURES_DIR = Path(__file__).parent.parent / "tests" / "test_parsers" / "fixtures"
DEFAULT_OUTPUT = FIXTURES_DIR / "round.json"

SEED = 20261017


def discover_visitors(data: dict) -> set[str]:
    """Collect visitor ids from ballots and film nominations."""
    visitors: set[str] = set()
    for ballot in data.get("ballots", []):
        visitor = ballot.get("visitorId")
        if visitor:
            visitors.add(visitor)
    for film in data.get("candidates", data.get("films", [])):
        added_by = film.get("addedBy")
        if added_by:
            visitors.add(added_by)
    return visitors


def generate_fake_visitors(visitors: set[str], seed: int) -> dict[str, str]:
    """Map each visitor id to a unique fake user name."""
    fake = Faker("en_US")
    Faker.seed(seed)

    mapping: dict[str, str] = {}
    used: set[str] = set()
    for visitor in sorted(visitors):
        fake_name = fake.user_name()
        while fake_name in used or fake_name in visitors:
            fake_name = fake.user_name()
        used.add(fake_name)
        mapping[visitor] = fake_name
    return mapping


def apply_replacements(data: dict, mapping: dict[str, str]) -> dict:
    """Return a copy of the export with visitor ids replaced."""
    result = json.loads(json.dumps(data))
    for ballot in result.get("ballots", []):
        if ballot.get("visitorId") in mapping:
            ballot["visitorId"] = mapping[ballot["visitorId"]]
    for film in result.get("candidates", result.get("films", [])):
        if film.get("addedBy") in mapping:
            film["addedBy"] = mapping[film["addedBy"]]
    return result


def main():
    parser = argparse.ArgumentParser(
        description="Anonymize a JSON voting round export")
    parser.add_argument("input", help="Path to the input JSON file")
    parser.add_argument("-o", "--output", default=str(DEFAULT_OUTPUT),
                        help=f"Output path (default: {DEFAULT_OUTPUT})")
    args = parser.parse_args()

    data = json.loads(Path(args.input).read_text(encoding="utf-8"))

    visitors = discover_visitors(data)
    print(f"Found {len(visitors)} unique visitors")

    mapping = generate_fake_visitors(visitors, SEED)

    for original, fake in sorted(mapping.items()):
        print(f"  {original} -> {fake}")

    result = apply_replacements(data, mapping)

    # Verify no original ids remain
    remaining = discover_visitors(result) & visitors
    if remaining:
        print(f"WARNING: {len(remaining)} visitors still found: {sorted(remaining)}")
    else:
        print("All visitors successfully replaced.")

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(result, indent=2) + "\n", encoding="utf-8")
    print(f"Written to {output_path}")


if __name__ == "__main__":
    main()
