"""Category service for database operations."""

from datetime import datetime, timezone
from typing import List, Optional
from db.timestamps import datetime_to_timestamp
from models.category import Category, DEFAULT_CATEGORIES


class CategoryService:
    """Service for managing categories.

    The built-in categories live in code and are never written to the
    database; only user-added categories are persisted.
    """

    def __init__(self, db_manager):
        """Initialize the category service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self) -> List[Category]:
        """Get all categories.

        Returns:
            Built-in categories in their fixed order, followed by custom
            categories ordered by name.
        """
        return list(DEFAULT_CATEGORIES) + self.find_custom()

    def find_custom(self) -> List[Category]:
        """Get user-added categories ordered by name."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT id, name, icon, color FROM categories ORDER BY name"
            )
            return [self._row_to_category(row) for row in cursor.fetchall()]

    def find(self, category_id: str) -> Optional[Category]:
        """Get a single category by ID.

        Args:
            category_id: The category ID to find.

        Returns:
            Category object if found, None otherwise.
        """
        for category in DEFAULT_CATEGORIES:
            if category.id == category_id:
                return category

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT id, name, icon, color FROM categories WHERE id = ?",
                (category_id,),
            )
            row = cursor.fetchone()
            return self._row_to_category(row) if row else None

    def find_by_name(self, name: str) -> Optional[Category]:
        """Get a single category by name.

        Args:
            name: The category name to find.

        Returns:
            Category object if found, None otherwise.
        """
        for category in DEFAULT_CATEGORIES:
            if category.name == name:
                return category

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT id, name, icon, color FROM categories WHERE name = ?",
                (name,),
            )
            row = cursor.fetchone()
            return self._row_to_category(row) if row else None

    def create(self, category: Category) -> Category:
        """Insert a custom category.

        Args:
            category: Category with its ID already assigned. The name must be
                      unique across built-in and custom categories.

        Returns:
            The stored Category (name stripped, marked custom).

        Raises:
            ValueError: If the name is empty or already in use, or the ID
                        belongs to an existing category.
        """
        category.name = category.name.strip()
        category.is_custom = True
        if not category.name:
            raise ValueError("Category name cannot be empty")
        if self.find_by_name(category.name) is not None:
            raise ValueError(f"Category '{category.name}' already exists")
        if self.find(category.id) is not None:
            raise ValueError(f"Category ID '{category.id}' already exists")

        with self.db_manager.transaction() as conn:
            conn.execute(
                """
                INSERT INTO categories (id, name, icon, color, is_custom, created_at)
                VALUES (?, ?, ?, ?, 1, ?)
                """,
                (
                    category.id,
                    category.name,
                    category.icon,
                    category.color,
                    datetime_to_timestamp(datetime.now(timezone.utc)),
                ),
            )

        return category

    def update(self, category: Category) -> bool:
        """Update a custom category.

        Renaming does not relabel transactions that use the old name.

        Args:
            category: Category carrying the new values.

        Returns:
            True if updated, False if no such custom category exists.

        Raises:
            ValueError: If another category already uses the new name.
        """
        existing = self.find_by_name(category.name)
        if existing is not None and existing.id != category.id:
            raise ValueError(f"Category '{category.name}' already exists")

        with self.db_manager.transaction() as conn:
            cursor = conn.execute(
                "UPDATE categories SET name = ?, icon = ?, color = ? WHERE id = ?",
                (category.name, category.icon, category.color, category.id),
            )
            return cursor.rowcount > 0

    def delete(self, category_id: str) -> bool:
        """Delete a custom category by ID.

        Transactions labelled with the category keep their label.

        Args:
            category_id: The category ID to delete.

        Returns:
            True if category was deleted, False if not found or built-in.
        """
        with self.db_manager.transaction() as conn:
            cursor = conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            return cursor.rowcount > 0

    def _row_to_category(self, row: tuple) -> Category:
        """Convert a database row to a Category object."""
        return Category(id=row[0], name=row[1], icon=row[2], color=row[3], is_custom=True)
