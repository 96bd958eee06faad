#!/usr/bin/env python3
"""
matching.py
-----------
Case-insensitive fuzzy matching used to refine free-text search results.

Functions:
    subsequence_match: Every query character occurs in the target, in order
    fuzzy_match: Substring containment or subsequence match

Both are pure and run in O(len(target)).
"""
from typing import Optional


def subsequence_match(query: str, target: Optional[str]) -> bool:
    """
    Check whether ``query`` is an ordered subsequence of ``target``.

    Characters need not be adjacent: "bxc" matches "Box Code" but "cxb"
    does not. An empty query matches everything.
    """
    query = query.lower()
    if not query:
        return True
    if not target:
        return False

    qi = 0
    for char in target.lower():
        if char == query[qi]:
            qi += 1
            if qi == len(query):
                return True
    return False


def fuzzy_match(query: str, target: Optional[str]) -> bool:
    """Substring containment or subsequence match, ignoring case."""
    if not target:
        return not query
    return query.lower() in target.lower() or subsequence_match(query, target)
