# problem_finder/infrastructure/problem_table.py

import csv
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

from problem_finder.domain.models import CleaningStats, ProblemRecord


COLUMNS = ["Name", "URL", "Tag", "Difficulty", "Text"]

# Accepted spellings per canonical field, first match wins.
FIELD_ALIASES: Dict[str, tuple] = {
    "name": ("Name", "name"),
    "url": ("URL", "url", "Url"),
    "tag": ("Tag", "tag", "tags"),
    "difficulty": ("Difficulty", "difficulty"),
    "text": ("Text", "text", "description"),
}

PROGRESS_EVERY = 100


# ── Ingestion ─────────────────────────────────────────────────────────────────

def normalize_record(row: Mapping[str, Any]) -> ProblemRecord:
    """
    Map any accepted column spelling onto the canonical ProblemRecord.
    This is the only place that knows about alternative spellings.
    """
    values = {}
    for field_name, aliases in FIELD_ALIASES.items():
        value = ""
        for alias in aliases:
            if row.get(alias):
                value = row[alias]
                break
        values[field_name] = value if isinstance(value, str) else str(value)
    return ProblemRecord(**values)


def read_problem_records(file_path: Path) -> List[ProblemRecord]:
    """Read a problem table, preserving row order."""
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Problem table not found: {file_path}")

    with open(file_path, newline="", encoding="utf-8", errors="ignore") as f:
        return [normalize_record(row) for row in csv.DictReader(f)]


def write_problem_records(file_path: Path, records: Iterable[ProblemRecord]) -> None:
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with open(file_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=COLUMNS)
        writer.writeheader()
        for record in records:
            writer.writerow({
                "Name": record.name,
                "URL": record.url,
                "Tag": record.tag,
                "Difficulty": record.difficulty,
                "Text": record.text,
            })


def validate_problem_table(file_path: Path) -> bool:
    """True when the table has at least one row and Name/URL columns (any case)."""
    file_path = Path(file_path)
    try:
        with open(file_path, newline="", encoding="utf-8", errors="ignore") as f:
            reader = csv.DictReader(f)
            first_row = next(reader, None)
            if first_row is None:
                return False
            available = {column.lower() for column in (reader.fieldnames or [])}
    except OSError as error:
        print(f"[ProblemTable] ⚠ Cannot validate {file_path}: {error}")
        return False

    return {"name", "url"} <= available


# ── Cleaning ──────────────────────────────────────────────────────────────────

def clean_text(text: Any) -> str:
    """Flatten newlines, hyphens and $ into single spaces."""
    if not text or not isinstance(text, str):
        return ""
    text = text.strip()
    text = re.sub(r"[\n\-$]", " ", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def clean_url(url: Any) -> str:
    if not url or not isinstance(url, str):
        return ""
    return url.strip()


def clean_problem(record: ProblemRecord) -> ProblemRecord:
    return ProblemRecord(
        name=clean_text(record.name),
        url=clean_url(record.url),
        tag=clean_text(record.tag),
        difficulty=clean_text(record.difficulty),
        text=clean_text(record.text),
    )


def clean_problems(records: List[ProblemRecord]) -> List[ProblemRecord]:
    print(f"[ProblemTable] Cleaning {len(records)} problems...")
    cleaned = []
    for i, record in enumerate(records):
        cleaned.append(clean_problem(record))
        if (i + 1) % PROGRESS_EVERY == 0:
            print(f"[ProblemTable] Cleaned {i + 1}/{len(records)} problems")
    return cleaned


def validate_cleaned_data(records: List[ProblemRecord]) -> CleaningStats:
    stats = CleaningStats(total=len(records))
    for record in records:
        if not record.name.strip():
            stats.empty_names += 1
        if not record.url.strip():
            stats.empty_urls += 1
        if not record.text.strip():
            stats.empty_texts += 1
        if record.name and record.url and record.text:
            stats.valid_problems += 1
    return stats

