"""
In-memory catalog operations.

The storefront fetches the available fleet in one go and narrows it down
here, so these helpers work on plain lists and never touch the database.
"""
from typing import List, Optional

SORT_OPTIONS = ("name", "type", "price-low", "price-high")


def search_bikes(bikes: List, term: Optional[str]) -> List:
    """Keep bikes whose name, type or description contains ``term`` (case-insensitive)."""
    if not term:
        return list(bikes)
    needle = term.lower()
    return [
        bike for bike in bikes
        if needle in bike.name.lower()
        or needle in bike.type.lower()
        or needle in (bike.description or "").lower()
    ]


def filter_by_type(bikes: List, bike_type: Optional[str]) -> List:
    if not bike_type or bike_type.lower() == "all":
        return list(bikes)
    wanted = bike_type.lower()
    return [bike for bike in bikes if bike.type.lower() == wanted]


def sort_bikes(bikes: List, sort_by: Optional[str] = "name") -> List:
    """
    Sort bikes for display.

    ``price-low`` / ``price-high`` order by hourly rate, ``type`` orders
    alphabetically by type, and anything else falls back to name.
    """
    if sort_by == "price-low":
        return sorted(bikes, key=lambda bike: bike.hourly_rate)
    if sort_by == "price-high":
        return sorted(bikes, key=lambda bike: bike.hourly_rate, reverse=True)
    if sort_by == "type":
        return sorted(bikes, key=lambda bike: bike.type.casefold())
    return sorted(bikes, key=lambda bike: bike.name.casefold())


def bike_types(bikes: List) -> List[str]:
    # distinct, first-seen order
    seen = []
    for bike in bikes:
        if bike.type not in seen:
            seen.append(bike.type)
    return seen


def browse(bikes: List, search: Optional[str] = None, bike_type: Optional[str] = None,
           sort_by: Optional[str] = "name") -> List:
    filtered = search_bikes(bikes, search)
    filtered = filter_by_type(filtered, bike_type)
    return sort_bikes(filtered, sort_by)
