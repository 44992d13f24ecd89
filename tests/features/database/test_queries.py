"""Tests for SQL builders."""

from uuid import uuid4

import pytest

from parkhub.features.database.entities.schema import SCHEMA, OnDelete
from parkhub.features.database.utils.queries import (
    SCHEMA_DDL,
    build_delete_by_id,
    build_delete_where,
    build_insert,
    build_select_by_id,
    build_select_where,
    build_update,
    parse_command_count,
)


class TestSchema:

    def test_parking_car_has_composite_key(self):
        spec = SCHEMA["parking_car"]
        assert not spec.has_id
        assert spec.row_key({"parking_id": 1, "car_id": 2}) == (1, 2)

    def test_delete_rules(self):
        assert SCHEMA["car"].foreign_key_for("identity_id").on_delete is OnDelete.CASCADE
        assert SCHEMA["parking"].foreign_key_for("address_id").on_delete is OnDelete.SET_NULL
        assert SCHEMA["parking"].foreign_key_for("price") is None

    def test_ddl_covers_every_table(self):
        for table in SCHEMA:
            assert f'CREATE TABLE IF NOT EXISTS "{table}"' in SCHEMA_DDL
        assert "CHECK (price >= 0)" in SCHEMA_DDL


class TestBuilders:

    def test_select_by_id(self):
        assert build_select_by_id("address") == 'SELECT id, city, street, house FROM "address" WHERE id = $1'

    def test_select_for_update(self):
        assert build_select_by_id("parking", for_update=True).endswith("WHERE id = $1 FOR UPDATE")

    def test_select_where(self):
        query, args = build_select_where("parking_car", {"parking_id": 1, "car_id": 2})
        assert query == 'SELECT parking_id, car_id FROM "parking_car" WHERE parking_id = $1 AND car_id = $2'
        assert args == [1, 2]

    def test_select_all(self):
        query, args = build_select_where("car", {})
        assert query == 'SELECT id, brand, model, description, identity_id FROM "car"'
        assert args == []

    def test_insert(self):
        row_id = uuid4()
        query, args = build_insert("address", {"id": row_id, "city": "c", "street": "s", "house": "h"})
        assert query.startswith('INSERT INTO "address" (id, city, street, house) VALUES ($1, $2, $3, $4)')
        assert query.endswith("RETURNING id, city, street, house")
        assert args == [row_id, "c", "s", "h"]

    def test_update(self):
        query, args = build_update("parking", "p", {"price": 5})
        assert query == 'UPDATE "parking" SET price = $2 WHERE id = $1 RETURNING id, address_id, price'
        assert args == ["p", 5]

    def test_delete(self):
        assert build_delete_by_id("car") == 'DELETE FROM "car" WHERE id = $1'
        query, args = build_delete_where("parking_car", {"car_id": 3})
        assert query == 'DELETE FROM "parking_car" WHERE car_id = $1'
        assert args == [3]

    @pytest.mark.parametrize("build", [
        lambda: build_select_by_id("garage"),
        lambda: build_select_where("car", {"colour": "red"}),
        lambda: build_update("car", "c", {}),
        lambda: build_delete_where("parking_car", {}),
    ])
    def test_rejects_bad_input(self, build):
        with pytest.raises(ValueError):
            build()

    @pytest.mark.parametrize("status, count", [("DELETE 3", 3), ("UPDATE 0", 0), ("", 0), (None, 0)])
    def test_parse_command_count(self, status, count):
        assert parse_command_count(status) == count
