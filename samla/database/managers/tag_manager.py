#!/usr/bin/env python3
"""
tag_manager.py
--------------------
Manages Tag entities and their links to item sets.

Tag names are normalized to trimmed lower case. They may not contain
commas, since the search query returns a set's tags as one
comma-separated string.

Usage:
    with db.session_scope():
        db.tags.set_tags(set_id, ["Castle", "minifig"])
        all_tags = db.tags.get_all()
"""
from typing import Iterable, List, Optional

from samla.core.exceptions import DatabaseError, ValidationError
from samla.core.logging_manager import safe_logger
from samla.core.validators import DataValidator
from samla.database.decorators import (
    DatabaseOperation,
    handle_db_errors,
    log_database_operation,
)
from samla.database.models import ItemSet, Tag
from .base_manager import BaseManager


class TagManager(BaseManager):
    """
    Manages Tag table operations and relationships.

    Each tag is a unique lower-case keyword that can be attached to any
    number of sets.
    """

    # -------------------------------------------------------------------------
    # Core CRUD Operations
    # -------------------------------------------------------------------------

    @staticmethod
    def _normalize(name: Optional[str]) -> str:
        normalized = DataValidator.normalize_tag_names([name])
        if not normalized:
            raise ValidationError("Tag cannot be empty")
        return normalized[0]

    @handle_db_errors
    @log_database_operation("get_tag")
    def get(self, tag_name: str) -> Optional[Tag]:
        """
        Retrieve a tag by name.

        Returns:
            Tag object if found, None otherwise
        """
        normalized = DataValidator.normalize_lower(tag_name)
        if not normalized:
            return None
        return self.session.query(Tag).filter_by(name=normalized).first()

    @handle_db_errors
    @log_database_operation("get_all_tags")
    def get_all(self) -> List[Tag]:
        """All tags ordered by name."""
        return self.session.query(Tag).order_by(Tag.name).all()

    @handle_db_errors
    @log_database_operation("create_tag")
    def create(self, tag_name: str) -> Tag:
        """
        Create a new tag.

        Raises:
            ValidationError: If the name is blank or contains a comma
            DatabaseError: If the tag already exists

        Notes:
            - Usually prefer get_or_create() to avoid duplicate errors
        """
        normalized = self._normalize(tag_name)
        if self.get(normalized) is not None:
            raise DatabaseError(f"Tag already exists: {normalized}")

        tag = Tag(name=normalized)
        self.session.add(tag)
        self.session.flush()

        safe_logger(self.logger).log_debug(f"Created tag: {normalized}", {"tag_id": tag.id})
        return tag

    @handle_db_errors
    @log_database_operation("get_or_create_tag")
    def get_or_create(self, tag_name: str) -> Tag:
        """
        Get an existing tag or create it if it doesn't exist.

        Raises:
            ValidationError: If the name is blank or contains a comma
        """
        return self._get_or_create_by_name(Tag, self._normalize(tag_name), case_insensitive=False)

    @handle_db_errors
    @log_database_operation("update_tag")
    def update(self, tag_id: int, tag_name: str) -> Tag:
        """Rename a tag."""
        normalized = self._normalize(tag_name)
        tag = self._require(Tag, tag_id, "Tag")
        other = self.get(normalized)
        if other is not None and other.id != tag.id:
            raise DatabaseError(f"Tag already exists: {normalized}")
        tag.name = normalized
        self.session.flush()
        return tag

    @handle_db_errors
    @log_database_operation("delete_tag")
    def delete(self, tag_id: int) -> None:
        """
        Delete a tag.

        The set_tags associations go with it (ON DELETE CASCADE).
        """
        tag = self._require(Tag, tag_id, "Tag")
        safe_logger(self.logger).log_debug(f"Deleting tag: {tag.name}", {"tag_id": tag.id})
        self.session.delete(tag)
        self.session.flush()

    # -------------------------------------------------------------------------
    # Relationship Management
    # -------------------------------------------------------------------------

    def set_tags(self, set_id: int, tag_names: Iterable[str]) -> List[Tag]:
        """
        Replace the tags of a set.

        Names are normalized and de-duplicated; missing tags are created.

        Args:
            set_id: Item set id
            tag_names: New complete list of tag names

        Returns:
            The set's tags after the update
        """
        names = DataValidator.normalize_tag_names(tag_names)
        item_set = self._require(ItemSet, set_id, "Set")

        with DatabaseOperation(self.logger, "set_tags", details={"set_id": item_set.id}):
            item_set.tags = [
                self._get_or_create_by_name(Tag, name, case_insensitive=False)
                for name in names
            ]
            self.session.flush()
            return list(item_set.tags)
