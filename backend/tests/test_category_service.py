"""Tests for category rules."""

import pytest

from app.exceptions import ConstraintViolation, InvalidOperation, NotFound
from app.models.category import Category
from app.models.todo import Todo
from app.schemas.category import CategoryCreate, CategoryUpdate
from app.services import category_service
from conftest import OWNER, OTHER_OWNER


def default_category(db_session, owner_id=OWNER):
    return db_session.query(Category).filter(
        Category.owner_id == owner_id, Category.is_default.is_(True)
    ).one()


class TestCreateCategory:

    def test_create(self, db_session, notifier, publisher):
        category = category_service.create_category(
            db_session, OWNER, CategoryCreate(name="Errands", color="#abc"), notifier
        )
        assert category.icon == "category"
        assert category.is_default is False
        owner_id, event = publisher.events[0]
        assert owner_id == OWNER
        assert (event["entity"], event["action"]) == ("category", "create")

    def test_duplicate_name_for_same_owner(self, db_session, sample_category):
        with pytest.raises(ConstraintViolation):
            category_service.create_category(db_session, OWNER, CategoryCreate(name="Work", color="#fff"))

    def test_same_name_for_other_owner(self, db_session, sample_category):
        other = category_service.create_category(
            db_session, OTHER_OWNER, CategoryCreate(name="Work", color="#fff")
        )
        assert other.owner_id == OTHER_OWNER

    @pytest.mark.parametrize("color", ["red", "#12", "#1234", "#GGGGGG", "FF9800"])
    def test_bad_color(self, color):
        with pytest.raises(ValueError):
            CategoryCreate(name="x", color=color)

    def test_name_length(self):
        with pytest.raises(ValueError):
            CategoryCreate(name="x" * 31, color="#fff")


class TestUpdateCategory:

    def test_update_fields(self, db_session, sample_category):
        category, count = category_service.update_category(
            db_session, OWNER, sample_category.id, CategoryUpdate(color="#000000", name="Job")
        )
        assert (category.name, category.color, count) == ("Job", "#000000", 0)

    def test_rename_into_existing_name(self, db_session, sample_category):
        category_service.create_category(db_session, OWNER, CategoryCreate(name="Home", color="#fff"))
        with pytest.raises(ConstraintViolation):
            category_service.update_category(
                db_session, OWNER, sample_category.id, CategoryUpdate(name="Home")
            )

    def test_default_cannot_be_renamed(self, db_session):
        category_service.create_default_categories(db_session, OWNER)
        general = default_category(db_session)

        with pytest.raises(InvalidOperation):
            category_service.update_category(db_session, OWNER, general.id, CategoryUpdate(name="Misc"))

    def test_default_other_fields_editable(self, db_session):
        category_service.create_default_categories(db_session, OWNER)
        general = default_category(db_session)

        category, _ = category_service.update_category(
            db_session, OWNER, general.id, CategoryUpdate(color="#123456")
        )
        assert category.color == "#123456"
        assert category.name == "General"

    def test_other_owner(self, db_session, sample_category):
        with pytest.raises(NotFound):
            category_service.update_category(
                db_session, OTHER_OWNER, sample_category.id, CategoryUpdate(color="#000")
            )


class TestDeleteCategory:

    def test_delete_empty(self, db_session, sample_category, notifier, publisher):
        category_service.delete_category(db_session, OWNER, sample_category.id, notifier)
        assert db_session.query(Category).count() == 0
        assert publisher.events[0][1]["payload"] == {"id": sample_category.id}

    def test_blocked_while_todos_reference_it(self, db_session, sample_todo, sample_category, publisher, notifier):
        with pytest.raises(InvalidOperation) as exc:
            category_service.delete_category(db_session, OWNER, sample_category.id, notifier)

        assert "1 todo" in exc.value.message
        assert db_session.query(Category).filter(Category.id == sample_category.id).count() == 1
        db_session.refresh(sample_todo)
        assert sample_todo.category_id == sample_category.id
        assert publisher.events == []

    def test_default_cannot_be_deleted(self, db_session):
        category_service.create_default_categories(db_session, OWNER)
        general = default_category(db_session)

        with pytest.raises(InvalidOperation):
            category_service.delete_category(db_session, OWNER, general.id)

    def test_other_owner(self, db_session, sample_category):
        with pytest.raises(NotFound):
            category_service.delete_category(db_session, OTHER_OWNER, sample_category.id)


class TestDefaultCategories:

    def test_starter_set(self, db_session, notifier, publisher):
        created = category_service.create_default_categories(db_session, OWNER, notifier)

        assert [c.name for c in created] == ["General", "Work", "Personal", "Shopping"]
        assert [c.is_default for c in created] == [True, False, False, False]
        assert publisher.actions() == ["create"] * 4

    def test_second_call_rejected(self, db_session):
        category_service.create_default_categories(db_session, OWNER)

        with pytest.raises(InvalidOperation):
            category_service.create_default_categories(db_session, OWNER)

        assert db_session.query(Category).filter(Category.is_default.is_(True)).count() == 1

    def test_independent_per_owner(self, db_session):
        category_service.create_default_categories(db_session, OWNER)
        category_service.create_default_categories(db_session, OTHER_OWNER)
        assert db_session.query(Category).count() == 8


class TestListCategories:

    def test_default_first_with_counts(self, db_session, make_todo):
        custom = category_service.create_category(db_session, OWNER, CategoryCreate(name="Aaa", color="#fff"))
        category_service.create_default_categories(db_session, OWNER)
        make_todo(category_id=custom.id)
        make_todo(category_id=custom.id)

        rows = category_service.list_categories(db_session, OWNER)

        assert rows[0][0].name == "General"
        counts = {c.name: n for c, n in rows}
        assert counts["Aaa"] == 2
        assert counts["Work"] == 0

    def test_get_with_count(self, db_session, sample_todo, sample_category):
        category, count = category_service.get_category(db_session, OWNER, sample_category.id)
        assert category.name == "Work"
        assert count == 1
        assert db_session.query(Todo).count() == 1
