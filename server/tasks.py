import re
from typing import Iterable, List, Optional


def get_location(pattern: re.Pattern, notes: str) -> str:
    """Text inside the first ``[prefix: ...]`` enclosure of a note, or an empty string"""
    match = pattern.search(notes)
    return match.group(1) if match else ''


def get_locations(notes: Iterable[Optional[str]], prefix: str = "Location") -> List[str]:
    """
    Pull one location out of every task note written as ``[Location: ...]``.
    Missing notes, notes without a location and duplicates are skipped.
    """
    pattern = re.compile(r"\[" + re.escape(prefix) + r": (.*?)\]")
    locations: List[str] = []
    for note in notes:
        if note is None:
            continue
        location = get_location(pattern, note)
        if location and location not in locations:
            locations.append(location)
    return locations
