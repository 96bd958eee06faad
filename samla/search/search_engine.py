#!/usr/bin/env python3
"""
search_engine.py
----------------
Catalog search: query parsing, SQL compilation and fuzzy refinement.

A search runs in three stages:
    1. Parse: an optional ``@prefix`` selects a structured filter; the
       rest of the query is its term. Without a prefix the whole query is
       free text.
    2. Compile and run: a fixed join over sets, bags, boxes, locations,
       manufacturers and tags, with a LIKE predicate chosen by the filter
       kind. Parameters are always bound. Results are grouped per set,
       ordered by the sort key and capped at SEARCH_LIMIT.
    3. Refine (free text only): candidates are kept when a display field
       or tag contains the term or matches it as an ordered subsequence.
       Element names are not re-checked, so sets found only through an
       element are dropped here. Structured filters skip this stage.

Query Syntax Examples:
    "castle"              # Free text across all fields
    "@box b1"             # Box code or name
    "@produkt tower"      # Element name (also @product)
    "@hersteller acme"    # Manufacturer
    "@tag minifig"        # Tag
    "@ort cellar"         # Location name or room (also @standort)

Usage:
    engine = SearchEngine(session, logger)
    results = engine.search("@tag minifig", sort_key="box")
    for result in results:
        print(result.box_code, result.bag_serial, result.set_name)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple, Union

# --- Third party imports ---
from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session, aliased

# --- Local imports ---
from samla.core.logging_manager import SamlaLogger, safe_logger
from samla.database.decorators import handle_db_errors
from samla.database.models import (
    Bag,
    Box,
    Element,
    ItemSet,
    Location,
    Manufacturer,
    Tag,
    set_tags,
)
from .matching import fuzzy_match

SEARCH_LIMIT = 200
"""Maximum number of sets returned by one search."""

LIKE_ESCAPE = "\\"


class FilterKind(str, Enum):
    """Structured filter selected by a query prefix."""

    NONE = "none"
    BOX = "box"
    PRODUCT = "product"
    MANUFACTURER = "manufacturer"
    TAG = "tag"
    LOCATION = "location"


class SortKey(str, Enum):
    """Result ordering."""

    NAME = "name"
    BOX = "box"
    LOCATION = "location"
    ADDED = "added"

    @classmethod
    def from_value(cls, value: Union["SortKey", str, None]) -> "SortKey":
        """Map a caller value to a SortKey; unknown or missing → NAME."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.NAME


FILTER_PREFIXES = {
    "box": FilterKind.BOX,
    "produkt": FilterKind.PRODUCT,
    "product": FilterKind.PRODUCT,
    "hersteller": FilterKind.MANUFACTURER,
    "tag": FilterKind.TAG,
    "ort": FilterKind.LOCATION,
    "standort": FilterKind.LOCATION,
}
"""Prefix keyword (without '@') → filter kind."""

_PREFIX_RE = re.compile(r"^@(\w+)\s+(.*)$", re.DOTALL)


@dataclass(frozen=True)
class SearchFilter:
    """A parsed query: filter kind plus search term."""

    kind: FilterKind = FilterKind.NONE
    term: str = ""

    @property
    def is_structured(self) -> bool:
        return self.kind is not FilterKind.NONE


@dataclass
class SearchResult:
    """One set in a result list."""

    set_id: int
    set_name: str
    manufacturer_name: str = ""
    box_code: str = ""
    box_name: str = ""
    bag_serial: str = ""
    location_name: str = ""
    tags: List[str] = field(default_factory=list)
    thumbnail_path: str = ""

    def searchable_fields(self) -> List[str]:
        """Fields checked by the fuzzy refinement pass."""
        return [
            self.set_name,
            self.box_code,
            self.box_name,
            self.bag_serial,
            self.location_name,
            self.manufacturer_name,
            *self.tags,
        ]


class SearchQueryParser:
    """Parse raw search strings into SearchFilter objects."""

    @staticmethod
    def parse(query_string: Optional[str]) -> SearchFilter:
        """
        Parse a search string.

        Examples:
            "@Tag  minifig" → SearchFilter(TAG, "minifig")
            "minifig"       → SearchFilter(NONE, "minifig")
            "@box"          → SearchFilter(NONE, "@box")  (no term)
            "@foo bar"      → SearchFilter(NONE, "@foo bar")

        Returns:
            SearchFilter
        """
        query = (query_string or "").strip()

        match = _PREFIX_RE.match(query)
        if match:
            kind = FILTER_PREFIXES.get(match.group(1).lower())
            term = match.group(2).strip()
            if kind is not None and term:
                return SearchFilter(kind, term)

        return SearchFilter(FilterKind.NONE, query)


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _contains(column: Any, term: str) -> Any:
    """Case-insensitive substring predicate with a bound parameter."""
    pattern = f"%{escape_like(term.lower())}%"
    return func.lower(column).like(pattern, escape=LIKE_ESCAPE)


class SearchEngine:
    """Compile and execute catalog searches."""

    def __init__(self, session: Session, logger: Optional[SamlaLogger] = None):
        self.session = session
        self.logger = logger

    # -------------------------------------------------------------------------
    # Stage 2: compilation
    # -------------------------------------------------------------------------

    @staticmethod
    def _tag_list() -> Any:
        """Comma-joined tag names of the outer set (all of them)."""
        tag = aliased(Tag)
        link = set_tags.alias("set_tag_list")
        return (
            select(func.group_concat(tag.name))
            .select_from(link.join(tag, tag.id == link.c.tag_id))
            .where(link.c.set_id == ItemSet.id)
            .correlate(ItemSet)
            .scalar_subquery()
        )

    @staticmethod
    def _predicate(search_filter: SearchFilter) -> Tuple[Optional[Any], bool]:
        """
        WHERE clause for a filter.

        Returns:
            (predicate or None, whether elements must be joined)
        """
        term = search_filter.term
        kind = search_filter.kind

        if kind is FilterKind.NONE:
            if not term:
                return None, False
            return (
                or_(
                    _contains(ItemSet.name, term),
                    _contains(Tag.name, term),
                    _contains(Element.name, term),
                    _contains(Box.code, term),
                    _contains(Box.name, term),
                    _contains(Bag.serial_no, term),
                    _contains(Location.name, term),
                    _contains(Manufacturer.name, term),
                ),
                True,
            )
        if kind is FilterKind.BOX:
            return or_(_contains(Box.code, term), _contains(Box.name, term)), False
        if kind is FilterKind.PRODUCT:
            return _contains(Element.name, term), True
        if kind is FilterKind.MANUFACTURER:
            return _contains(Manufacturer.name, term), False
        if kind is FilterKind.TAG:
            return _contains(Tag.name, term), False
        if kind is FilterKind.LOCATION:
            return or_(_contains(Location.name, term), _contains(Location.room, term)), False

        raise ValueError(f"Unknown filter kind: {kind!r}")

    @staticmethod
    def _order_by(sort_key: SortKey) -> Sequence[Any]:
        if sort_key is SortKey.BOX:
            return (Box.code, Bag.serial_no)
        if sort_key is SortKey.LOCATION:
            return (func.ifnull(Location.name, "zzz"), Box.code, Bag.serial_no)
        if sort_key is SortKey.ADDED:
            return (ItemSet.id.desc(),)
        return (ItemSet.name, ItemSet.id)

    def compile(
        self, search_filter: SearchFilter, sort_key: Union[SortKey, str, None] = None
    ) -> Select:
        """
        Build the parameterized query for a filter.

        Args:
            search_filter: Parsed filter
            sort_key: Result ordering (default: name)

        Returns:
            SQLAlchemy Select yielding one row per set
        """
        predicate, join_elements = self._predicate(search_filter)

        stmt = (
            select(
                ItemSet.id.label("set_id"),
                ItemSet.name.label("set_name"),
                func.ifnull(Manufacturer.name, "").label("manufacturer_name"),
                Box.code.label("box_code"),
                func.ifnull(Box.name, "").label("box_name"),
                Bag.serial_no.label("bag_serial"),
                func.ifnull(Location.name, "").label("location_name"),
                func.ifnull(self._tag_list(), "").label("tags"),
                func.ifnull(ItemSet.photo_path, "").label("thumbnail_path"),
            )
            .select_from(ItemSet)
            .join(Bag, Bag.id == ItemSet.bag_id)
            .join(Box, Box.id == Bag.box_id)
            .outerjoin(Location, Location.id == Box.location_id)
            .outerjoin(Manufacturer, Manufacturer.id == ItemSet.manufacturer_id)
            .outerjoin(set_tags, set_tags.c.set_id == ItemSet.id)
            .outerjoin(Tag, Tag.id == set_tags.c.tag_id)
        )
        if join_elements:
            stmt = stmt.outerjoin(Element, Element.set_id == ItemSet.id)
        if predicate is not None:
            stmt = stmt.where(predicate)

        return (
            stmt.group_by(ItemSet.id)
            .order_by(*self._order_by(SortKey.from_value(sort_key)))
            .limit(SEARCH_LIMIT)
        )

    @handle_db_errors
    def compile_and_run(
        self, search_filter: SearchFilter, sort_key: Union[SortKey, str, None] = None
    ) -> List[SearchResult]:
        """Execute the compiled query and map rows to SearchResult."""
        rows = self.session.execute(self.compile(search_filter, sort_key)).all()
        return [
            SearchResult(
                set_id=row.set_id,
                set_name=row.set_name,
                manufacturer_name=row.manufacturer_name,
                box_code=row.box_code,
                box_name=row.box_name,
                bag_serial=row.bag_serial,
                location_name=row.location_name,
                tags=sorted(t.strip() for t in row.tags.split(",") if t.strip()),
                thumbnail_path=row.thumbnail_path,
            )
            for row in rows
        ]

    # -------------------------------------------------------------------------
    # Stage 3: refinement
    # -------------------------------------------------------------------------

    @staticmethod
    def refine(candidates: Sequence[SearchResult], term: str) -> List[SearchResult]:
        """
        Keep candidates with a field that fuzzy-matches ``term``.

        Order is preserved; nothing is re-ranked.
        """
        if not term:
            return list(candidates)
        return [
            candidate
            for candidate in candidates
            if any(fuzzy_match(term, value) for value in candidate.searchable_fields())
        ]

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def search(
        self, raw_query: Optional[str], sort_key: Union[SortKey, str, None] = None
    ) -> List[SearchResult]:
        """
        Parse, run and (for free text) refine a search.

        Args:
            raw_query: Query string as typed by the user
            sort_key: 'name' (default), 'box', 'location' or 'added'

        Returns:
            At most SEARCH_LIMIT results
        """
        search_filter = SearchQueryParser.parse(raw_query)
        sort = SortKey.from_value(sort_key)

        candidates = self.compile_and_run(search_filter, sort)
        if search_filter.is_structured or not search_filter.term:
            results = candidates
        else:
            results = self.refine(candidates, search_filter.term)

        safe_logger(self.logger).log_debug(
            "search",
            {
                "kind": search_filter.kind.value,
                "term": search_filter.term,
                "sort": sort.value,
                "candidates": len(candidates),
                "results": len(results),
            },
        )
        return results
