"""Tests for the inventory record repository."""
import pytest

from core.errors import ItemNotFound, ValidationError


class TestCreateAndGet:
    """Tests for create/get/list."""

    def test_create_then_get(self, run_store):
        """Test that a created item reads back with its fields and no photo."""
        async def scenario(store):
            created = await store.repository.create("Drill", "cordless")
            return created, await store.repository.get(created.id)

        created, loaded = run_store(scenario)
        assert created.id == 1
        assert loaded.name == "Drill"
        assert loaded.description == "cordless"
        assert loaded.attachment_ref is None
        assert loaded.photo_url is None

    def test_description_defaults_to_empty(self, run_store):
        """Test that a missing description is stored as an empty string."""
        async def scenario(store):
            created = await store.repository.create("Hammer")
            return await store.repository.get(created.id)

        assert run_store(scenario).description == ""

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_create_requires_name(self, run_store, name):
        """Test that a missing or blank name is a ValidationError and writes nothing."""
        async def scenario(store):
            with pytest.raises(ValidationError):
                await store.repository.create(name, "desc")
            return await store.repository.list()

        assert run_store(scenario) == []

    def test_get_missing(self, run_store):
        """Test that an unknown id raises ItemNotFound."""
        async def scenario(store):
            with pytest.raises(ItemNotFound) as exc:
                await store.repository.get(42)
            return exc.value

        assert run_store(scenario).item_id == 42

    def test_list_is_ordered_by_id(self, run_store):
        """Test that list returns items ascending by id."""
        async def scenario(store):
            for name in ("c", "a", "b"):
                await store.repository.create(name)
            return await store.repository.list()

        items = run_store(scenario)
        assert [i.id for i in items] == [1, 2, 3]
        assert [i.name for i in items] == ["c", "a", "b"]


class TestUpdateFields:
    """Tests for update_fields merge-patch semantics."""

    def test_description_only(self, run_store):
        """Test that updating only the description leaves the name alone."""
        async def scenario(store):
            item = await store.repository.create("Drill", "cordless")
            return await store.repository.update_fields(item.id, name=None, description="x")

        updated = run_store(scenario)
        assert updated.name == "Drill"
        assert updated.description == "x"

    def test_name_only(self, run_store):
        """Test that updating only the name leaves the description alone."""
        async def scenario(store):
            item = await store.repository.create("Drill", "cordless")
            await store.repository.update_fields(item.id, name="Saw")
            return await store.repository.get(item.id)

        updated = run_store(scenario)
        assert updated.name == "Saw"
        assert updated.description == "cordless"

    def test_empty_description_clears(self, run_store):
        """Test that an explicit empty description clears it."""
        async def scenario(store):
            item = await store.repository.create("Drill", "cordless")
            return await store.repository.update_fields(item.id, description="")

        assert run_store(scenario).description == ""

    def test_blank_name_rejected(self, run_store):
        """Test that an explicit blank name is a ValidationError and changes nothing."""
        async def scenario(store):
            item = await store.repository.create("Drill")
            with pytest.raises(ValidationError):
                await store.repository.update_fields(item.id, name="  ")
            return await store.repository.get(item.id)

        assert run_store(scenario).name == "Drill"

    def test_update_missing(self, run_store):
        """Test that updating an unknown id raises ItemNotFound."""
        async def scenario(store):
            with pytest.raises(ItemNotFound):
                await store.repository.update_fields(7, description="x")

        run_store(scenario)


class TestDelete:
    """Tests for delete and set_attachment_ref."""

    def test_delete_returns_last_reference(self, run_store):
        """Test that delete returns the removed row including its photo reference."""
        async def scenario(store):
            item = await store.repository.create("Drill")
            await store.repository.set_attachment_ref(item.id, "abc.jpg")
            deleted = await store.repository.delete(item.id)
            with pytest.raises(ItemNotFound):
                await store.repository.get(item.id)
            return deleted

        deleted = run_store(scenario)
        assert deleted.attachment_ref == "abc.jpg"
        assert deleted.name == "Drill"

    def test_delete_missing(self, run_store):
        """Test that deleting an unknown id raises ItemNotFound."""
        async def scenario(store):
            with pytest.raises(ItemNotFound):
                await store.repository.delete(3)

        run_store(scenario)

    def test_set_attachment_ref_clears(self, run_store):
        """Test that a null reference clears the photo."""
        async def scenario(store):
            item = await store.repository.create("Drill", attachment_ref="abc.jpg")
            await store.repository.set_attachment_ref(item.id, None)
            return await store.repository.get(item.id)

        assert run_store(scenario).attachment_ref is None

    def test_referenced_refs(self, run_store):
        """Test that referenced_refs returns only non-null references."""
        async def scenario(store):
            await store.repository.create("a", attachment_ref="1.jpg")
            await store.repository.create("b")
            await store.repository.create("c", attachment_ref="2.jpg")
            return await store.repository.referenced_refs()

        assert run_store(scenario) == {"1.jpg", "2.jpg"}
