#!/usr/bin/env python3
"""
Geography hierarchy used by the mandatory geography gate.

A listing names a single geography (country, region or continent). A
buyer targets a list of geographies at any level. The listing matches
when its selection, any enclosing region/continent, or any contained
region/country appears in the buyer's list.
"""

from typing import Dict, List, Optional

# continent -> region -> countries
GEOGRAPHY_HIERARCHY: Dict[str, Dict[str, List[str]]] = {
    "North America": {
        "United States": [],
        "Canada": [],
        "Mexico": [],
    },
    "Central America & Caribbean": {
        "Central America": ["Costa Rica", "Panama", "Guatemala", "Honduras", "El Salvador", "Nicaragua", "Belize"],
        "Caribbean": ["Dominican Republic", "Jamaica", "Puerto Rico", "Bahamas", "Trinidad and Tobago"],
    },
    "South America": {
        "South America": ["Brazil", "Argentina", "Chile", "Colombia", "Peru", "Uruguay", "Ecuador",
                          "Paraguay", "Bolivia", "Venezuela"],
    },
    "Europe": {
        "Western Europe": ["France", "Germany", "Netherlands", "Belgium", "Luxembourg", "Switzerland",
                           "Austria", "Ireland", "United Kingdom", "Monaco"],
        "Northern Europe": ["Sweden", "Norway", "Denmark", "Finland", "Iceland", "Estonia", "Latvia",
                            "Lithuania"],
        "Southern Europe": ["Spain", "Portugal", "Italy", "Greece", "Malta", "Cyprus", "Croatia",
                            "Slovenia"],
        "Eastern Europe": ["Poland", "Czech Republic", "Slovakia", "Hungary", "Romania", "Bulgaria",
                           "Ukraine", "Serbia"],
    },
    "Asia": {
        "East Asia": ["China", "Japan", "South Korea", "Taiwan", "Hong Kong", "Mongolia"],
        "Southeast Asia": ["Singapore", "Malaysia", "Indonesia", "Thailand", "Vietnam", "Philippines"],
        "South Asia": ["India", "Pakistan", "Bangladesh", "Sri Lanka", "Nepal"],
        "Central Asia": ["Kazakhstan", "Uzbekistan"],
    },
    "Middle East": {
        "Middle East": ["United Arab Emirates", "Saudi Arabia", "Israel", "Qatar", "Kuwait", "Bahrain",
                        "Oman", "Jordan", "Turkey"],
    },
    "Africa": {
        "North Africa": ["Egypt", "Morocco", "Tunisia", "Algeria"],
        "Sub-Saharan Africa": ["South Africa", "Nigeria", "Kenya", "Ghana", "Ethiopia", "Rwanda"],
    },
    "Oceania": {
        "Australia & New Zealand": ["Australia", "New Zealand"],
    },
}


def _build_parent_index() -> Dict[str, str]:
    parents: Dict[str, str] = {}
    for continent, regions in GEOGRAPHY_HIERARCHY.items():
        for region, countries in regions.items():
            if region != continent:
                parents.setdefault(region, continent)
            for country in countries:
                if country != region:
                    parents.setdefault(country, region)
    return parents


_PARENTS = _build_parent_index()


def _children(name: str) -> List[str]:
    if name in GEOGRAPHY_HIERARCHY:
        return [region for region in GEOGRAPHY_HIERARCHY[name] if region != name] + [
            country
            for region, countries in GEOGRAPHY_HIERARCHY[name].items()
            if region == name
            for country in countries
        ]
    for regions in GEOGRAPHY_HIERARCHY.values():
        if name in regions:
            return list(regions[name])
    return []


def ancestors(name: str) -> List[str]:
    """Enclosing regions and continents, innermost first."""
    chain = []
    current = _PARENTS.get(name)
    while current is not None and current not in chain:
        chain.append(current)
        current = _PARENTS.get(current)
    return chain


def descendants(name: str) -> List[str]:
    """Every region and country contained in ``name``, breadth first."""
    result: List[str] = []
    queue = _children(name)
    while queue:
        item = queue.pop(0)
        if item in result or item == name:
            continue
        result.append(item)
        queue.extend(_children(item))
    return result


def expand_country_or_region(selection: Optional[str]) -> List[str]:
    """Expand a geography selection into itself, its ancestors and descendants.

    Unknown names expand to themselves only; ``None`` or blank expands
    to an empty list (which can never satisfy the geography gate).
    """
    if not selection or not selection.strip():
        return []
    name = selection.strip()
    expanded = [name]
    for item in ancestors(name) + descendants(name):
        if item not in expanded:
            expanded.append(item)
    return expanded
