"""
Line-set utility shared by duplicate analysis and file merging.

Both flows run the same transform; analysis passes one blob, merging
passes several.
"""

from typing import Iterable, List

from resolver_app.schemas.lines import LineSetSummary


def split_lines(blob: str) -> List[str]:
    """Split on line breaks, trim each line, drop empty ones"""
    stripped = (line.strip() for line in blob.split("\n"))
    return [line for line in stripped if line]


def unique_in_order(lines: Iterable[str]) -> List[str]:
    """Unique lines in first-occurrence order"""
    return list(dict.fromkeys(lines))


def summarize_lines(blobs: Iterable[str], sort: bool = False) -> LineSetSummary:
    """
    Compute the line set of one or more text blobs.

    total_lines counts trimmed, non-empty lines across all blobs before
    deduplication. With sort=True the unique lines are returned
    alphabetically instead of in first-occurrence order.
    """
    all_lines: List[str] = []
    for blob in blobs:
        all_lines.extend(split_lines(blob))

    unique = unique_in_order(all_lines)
    if sort:
        unique = sorted(unique)

    return LineSetSummary(
        total_lines=len(all_lines),
        unique_count=len(unique),
        duplicate_count=len(all_lines) - len(unique),
        lines=unique,
    )
