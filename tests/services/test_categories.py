import pytest

from models.category import DEFAULT_CATEGORIES, OTHER_CATEGORY, Category


class TestCategoryService:
    """Tests for CategoryService."""

    def test_built_in_categories(self, services):
        """Test that the built-in set is always available in order."""
        categories = services.categories.find_all()

        assert [c.name for c in categories] == [c.name for c in DEFAULT_CATEGORIES]
        assert len(categories) == 13
        assert categories[-1].name == OTHER_CATEGORY
        assert not any(c.is_custom for c in categories)

    def test_find_built_in(self, services):
        """Test finding built-in categories by ID and name."""
        assert services.categories.find("1").name == "Market"
        assert services.categories.find_by_name("İade").id == "12"

    def test_find_missing(self, services):
        """Test that unknown categories are not found."""
        assert services.categories.find("999") is None
        assert services.categories.find_by_name("Yok") is None

    def test_create_custom(self, services):
        """Test creating a custom category."""
        created = services.categories.create(Category.new("Evcil Hayvan", "pawprint.fill", "#a16207"))

        assert created.is_custom is True
        found = services.categories.find(created.id)
        assert found.name == "Evcil Hayvan"
        assert found.icon == "pawprint.fill"
        assert found.color == "#a16207"
        assert services.categories.find_all()[-1].name == "Evcil Hayvan"

    def test_create_keeps_given_id(self, services):
        """Test that a caller-supplied ID is stored as is."""
        category = Category(id="spor-1", name="Spor", icon="figure.run", color="#000000")

        created = services.categories.create(category)

        assert created.id == "spor-1"
        assert created.is_custom is True
        found = services.categories.find("spor-1")
        assert found.name == "Spor"
        assert found.is_custom is True

    def test_create_rejects_duplicate_id(self, services):
        """Test that an ID already in use is rejected."""
        services.categories.create(
            Category(id="spor-1", name="Spor", icon="figure.run", color="#000000")
        )

        with pytest.raises(ValueError, match="ID .* already exists"):
            services.categories.create(
                Category(id="spor-1", name="Fitness", icon="x", color="#000000")
            )
        with pytest.raises(ValueError, match="ID .* already exists"):
            services.categories.create(
                Category(id="1", name="Bakkal", icon="x", color="#000000")
            )

        assert services.categories.find_by_name("Fitness") is None

    def test_custom_categories_sorted_by_name(self, services):
        """Test that custom categories follow the built-ins ordered by name."""
        services.categories.create(Category.new("Spor", "figure.run", "#000000"))
        services.categories.create(Category.new("Bağış", "gift.fill", "#111111"))

        custom = [c.name for c in services.categories.find_custom()]

        assert custom == ["Bağış", "Spor"]

    def test_create_rejects_duplicate_names(self, services):
        """Test that names must be unique across built-in and custom categories."""
        services.categories.create(Category.new("Spor", "figure.run", "#000000"))

        with pytest.raises(ValueError, match="already exists"):
            services.categories.create(Category.new("Spor", "x", "#000000"))
        with pytest.raises(ValueError, match="already exists"):
            services.categories.create(Category.new("Market", "x", "#000000"))

    def test_create_rejects_empty_name(self, services):
        """Test that a blank name is rejected."""
        with pytest.raises(ValueError, match="cannot be empty"):
            services.categories.create(Category.new("   ", "x", "#000000"))

    def test_update(self, services):
        """Test renaming a custom category."""
        category = services.categories.create(Category.new("Spor", "figure.run", "#000000"))
        category.name = "Fitness"
        category.color = "#ffffff"

        assert services.categories.update(category) is True

        found = services.categories.find(category.id)
        assert found.name == "Fitness"
        assert found.color == "#ffffff"

    def test_update_rejects_name_collision(self, services):
        """Test that a rename cannot take another category's name."""
        category = services.categories.create(Category.new("Spor", "figure.run", "#000000"))
        category.name = "Restoran"

        with pytest.raises(ValueError, match="already exists"):
            services.categories.update(category)

    def test_delete_custom(self, services):
        """Test deleting a custom category."""
        category = services.categories.create(Category.new("Spor", "figure.run", "#000000"))

        assert services.categories.delete(category.id) is True
        assert services.categories.find(category.id) is None

    def test_delete_built_in_is_refused(self, services):
        """Test that built-in categories cannot be deleted."""
        assert services.categories.delete("1") is False
        assert services.categories.find("1") is not None
