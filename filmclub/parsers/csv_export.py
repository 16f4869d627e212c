"""Parser for spreadsheet (CSV) ballot exports."""

import csv
import io
import re

from filmclub.models import Ballot, Candidate, RoundSnapshot, Vote
from filmclub.parsers import register_parser
from filmclub.parsers.base import (
    SnapshotParser,
    parse_score,
    parse_timestamp,
    validate_snapshot,
)


@register_parser
class CsvExportParser(SnapshotParser):
    """Parser for ballots kept in a spreadsheet.

    One row per voter; one column per film. Blank cells are abstentions.

        # round:abc123
        # title:f1=Alien
        # title:f2=Heat
        voter,submitted_at,f1,f2
        v1,2026-10-17T19:30:00,3,1
        v2,2026-10-17T20:02:00,,2

    The comment lines are optional; without a title line the film id is
    used as its title.
    """

    FILENAME_PATTERN = re.compile(r"\.csv(\?.*)?$", re.IGNORECASE)
    DIRECTIVE_PATTERN = re.compile(r"^#\s*(round|title):(.*)$")

    FORMAT_DESCRIPTION = "CSV ballot sheet (voter, submitted_at, one column per film)"

    FIXED_COLUMNS = ("voter", "submitted_at")

    def can_parse(self, source: str) -> bool:
        return bool(self.FILENAME_PATTERN.search(source))

    def can_parse_content(self, content: bytes, filename: str) -> bool:
        """Tell-tale sign: the first non-comment line starts with the voter header."""
        text = content.decode("utf-8-sig", errors="replace")
        for line in text.splitlines():
            if not line.strip() or line.startswith("#"):
                continue
            return line.lower().startswith("voter,submitted_at")
        return False

    def parse(self, source: str, content: bytes) -> RoundSnapshot:
        text = content.decode("utf-8-sig", errors="replace")

        round_id = None
        titles: dict[str, str] = {}
        rows = []
        for line in text.splitlines():
            match = self.DIRECTIVE_PATTERN.match(line.strip())
            if match:
                kind, value = match.groups()
                if kind == "round":
                    round_id = value.strip() or None
                else:
                    film_id, _, title = value.partition("=")
                    titles[film_id.strip()] = title.strip()
                continue
            if line.startswith("#") or not line.strip():
                continue
            rows.append(line)

        if not rows:
            raise ValueError("No header row found")

        reader = csv.reader(io.StringIO("\n".join(rows)))
        header = [h.strip() for h in next(reader)]
        if tuple(h.lower() for h in header[:2]) != self.FIXED_COLUMNS:
            raise ValueError(
                f"Expected header to start with {','.join(self.FIXED_COLUMNS)}"
            )

        film_ids = header[2:]
        candidates = [Candidate(id=fid, title=titles.get(fid, fid)) for fid in film_ids]

        ballots = []
        for line_no, row in enumerate(reader, start=2):
            if not any(cell.strip() for cell in row):
                continue
            if len(row) > len(header):
                raise ValueError(f"Row {line_no} has more cells than the header")
            row = row + [""] * (len(header) - len(row))
            if not row[0].strip():
                raise ValueError(f"Row {line_no} has no voter")

            votes = tuple(
                Vote(candidate_id=fid, score=parse_score(cell))
                for fid, cell in zip(film_ids, row[2:])
                if cell.strip()
            )
            ballots.append(Ballot(
                voter_id=row[0].strip(),
                votes=votes,
                submitted_at=parse_timestamp(row[1].strip()),
            ))

        return validate_snapshot(round_id, candidates, ballots)
