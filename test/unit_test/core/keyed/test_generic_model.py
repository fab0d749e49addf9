"""Unit tests for GenericModel.

The store is an AsyncMock, so these tests pin down the exact statements and
parameters the model sends, and how it interprets store results and
constraint violations.
"""

from __future__ import annotations

from datetime import datetime
from typing import List
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from qc_tracker.core.database.store import ConstraintKind, ConstraintViolationError, QueryResult
from qc_tracker.core.keyed import (
    EntityConfig,
    ErrorKind,
    GenericModel,
    HealthStatus,
    MissingKeyError,
    QueryOptions,
    RequestContext,
    SortSpec,
)
from qc_tracker.core.keyed.model import MAX_OFFSET

pytestmark = pytest.mark.asyncio

SITE_CONFIG = EntityConfig(
    entity_name="Customer site",
    table_name="customers_site",
    key_columns=("code",),
    columns={"code", "customers", "site", "is_active", "created_by", "updated_by", "created_at", "updated_at"},
    default_sort=SortSpec("code"),
    filterable_columns={"customers", "site", "is_active"},
    sortable_columns={"code", "customers", "site"},
    searchable_columns=("code", "site"),
    default_limit=20,
    max_limit=200,
)

ROW = {"code": "A1", "customers": "C1", "site": "S1", "is_active": True}


def result(rows=None, row_count=None) -> QueryResult:
    rows = rows or []
    return QueryResult(rows=rows, row_count=len(rows) if row_count is None else row_count)


@pytest.fixture
def store():
    store = AsyncMock()
    store.execute = AsyncMock(return_value=result())
    return store


@pytest.fixture
def model(store) -> GenericModel[dict]:
    return GenericModel(store, SITE_CONFIG, dict)


def sent(store, call_index: int = -1):
    """SQL and params of one recorded ``execute`` call."""
    call = store.execute.call_args_list[call_index]
    sql = call.args[0]
    params = list(call.args[1]) if len(call.args) > 1 else []
    return sql, params


class TestGetByKey:
    async def test_found(self, model, store):
        store.execute.return_value = result([ROW])

        entity = await model.get_by_key({"code": "A1"})

        assert entity == ROW
        assert sent(store) == ("SELECT * FROM customers_site WHERE code = $1 LIMIT 1", ["A1"])

    async def test_not_found(self, model, store):
        assert await model.get_by_key({"code": "ZZ"}) is None

    async def test_missing_key_raises(self, model, store):
        with pytest.raises(MissingKeyError):
            await model.get_by_key({})
        store.execute.assert_not_called()


class TestFindAll:
    async def test_defaults(self, model, store):
        store.execute.side_effect = [result([{"total": 1}]), result([ROW])]

        page = await model.find_all()

        assert sent(store, 0) == ("SELECT COUNT(*) AS total FROM customers_site", [])
        assert sent(store, 1) == ("SELECT * FROM customers_site ORDER BY code ASC LIMIT $1 OFFSET $2", [20, 0])
        assert page.data == [ROW]
        assert page.pagination.total == 1
        assert page.pagination.total_pages == 1

    async def test_offset_from_page_and_limit(self, model, store):
        store.execute.side_effect = [result([{"total": 25}]), result([ROW] * 10)]

        page = await model.find_all(QueryOptions(page=2, limit=10))

        assert sent(store, 1)[1] == [10, 10]
        assert page.pagination.page == 2
        assert page.pagination.total_pages == 3
        assert page.pagination.has_next is True
        assert page.pagination.has_prev is True

    @pytest.mark.parametrize(
        "page,limit,expected",
        [
            ("abc", None, [20, 0]),
            (0, 5, [5, 0]),
            (-3, "x", [20, 0]),
            ("3", "500", [200, 400]),
            (1, 0, [20, 0]),
        ],
    )
    async def test_page_and_limit_are_clamped(self, model, store, page, limit, expected):
        store.execute.side_effect = [result([{"total": 0}]), result()]

        await model.find_all(QueryOptions(page=page, limit=limit))

        assert sent(store, 1)[1] == expected

    async def test_offset_beyond_sql_integer_range_skips_row_query(self, model, store):
        store.execute.side_effect = [result([{"total": 3}])]

        page = await model.find_all(QueryOptions(page=2**64, limit=10))

        assert store.execute.await_count == 1
        assert page.data == []
        assert page.pagination.total == 3
        assert page.pagination.has_next is False

    async def test_last_addressable_offset_still_queries(self, model, store):
        store.execute.side_effect = [result([{"total": 0}]), result()]
        page_number = MAX_OFFSET // 10 + 1

        await model.find_all(QueryOptions(page=page_number, limit=10))

        assert sent(store, 1)[1] == [10, (page_number - 1) * 10]
        assert sent(store, 1)[1][1] <= MAX_OFFSET

    async def test_unknown_sort_column_falls_back_to_default(self, model, store):
        store.execute.side_effect = [result([{"total": 0}]), result()]

        await model.find_all(QueryOptions(sort_by="code; DROP TABLE customers_site", sort_order="desc"))

        assert "ORDER BY code DESC LIMIT" in sent(store, 1)[0]
        assert "DROP" not in sent(store, 1)[0]

    async def test_invalid_sort_order_falls_back_to_default_direction(self, model, store):
        store.execute.side_effect = [result([{"total": 0}]), result()]

        await model.find_all(QueryOptions(sort_by="site", sort_order="sideways"))

        assert "ORDER BY site ASC, code LIMIT" in sent(store, 1)[0]

    async def test_only_filterable_columns_are_applied(self, model, store):
        store.execute.side_effect = [result([{"total": 0}]), result()]

        await model.find_all(QueryOptions(filters={"customers": "C1", "name": "x", "site": None}))

        assert sent(store, 0) == ("SELECT COUNT(*) AS total FROM customers_site WHERE customers = $1", ["C1"])
        sql, params = sent(store, 1)
        assert sql == "SELECT * FROM customers_site WHERE customers = $1 ORDER BY code ASC LIMIT $2 OFFSET $3"
        assert params == ["C1", 20, 0]

    async def test_search_escapes_wildcards(self, model, store):
        store.execute.side_effect = [result([{"total": 0}]), result()]

        await model.find_all(QueryOptions(search=" 50%_off ", filters={"site": "S1"}))

        sql, params = sent(store, 0)
        assert sql == (
            "SELECT COUNT(*) AS total FROM customers_site WHERE site = $1 AND "
            "(LOWER(code) LIKE LOWER($2) ESCAPE '\\' OR LOWER(site) LIKE LOWER($2) ESCAPE '\\')"
        )
        assert params == ["S1", "%50\\%\\_off%"]

    async def test_blank_search_is_ignored(self, model, store):
        store.execute.side_effect = [result([{"total": 0}]), result()]

        await model.find_all(QueryOptions(search="   "))

        assert sent(store, 0) == ("SELECT COUNT(*) AS total FROM customers_site", [])

    async def test_results_pass_through_enrich(self, store):
        class Enriched(GenericModel[dict]):
            async def enrich(self, entities: List[dict]) -> List[dict]:
                return [{**entity, "customer_name": "Acme"} for entity in entities]

        store.execute.side_effect = [result([{"total": 1}]), result([ROW])]

        page = await Enriched(store, SITE_CONFIG, dict).find_all()

        assert page.data[0]["customer_name"] == "Acme"


class TestCountAndExists:
    async def test_count_with_filters(self, model, store):
        store.execute.return_value = result([{"total": 4}])

        assert await model.count({"customers": "C1", "unknown": 1}) == 4
        assert sent(store) == ("SELECT COUNT(*) AS total FROM customers_site WHERE customers = $1", ["C1"])

    async def test_exists(self, model, store):
        store.execute.return_value = result([{"found": 1}])

        assert await model.exists({"code": "A1"}) is True
        assert sent(store) == ("SELECT 1 AS found FROM customers_site WHERE code = $1 LIMIT 1", ["A1"])

    async def test_not_exists(self, model, store):
        assert await model.exists({"code": "A1"}) is False


class TestCreate:
    async def test_success_stamps_timestamps_and_audit(self, model, store):
        store.execute.side_effect = [result(), result([ROW])]

        outcome = await model.create(
            {"code": "A1", "customers": "C1", "site": "S1"}, RequestContext(user_id=7)
        )

        assert outcome.success is True
        assert outcome.data == ROW
        sql, params = sent(store, 1)
        assert sql == (
            "INSERT INTO customers_site (code, customers, site, created_at, updated_at, created_by, updated_by) "
            "VALUES ($1, $2, $3, $4, $5, $6, $7) RETURNING *"
        )
        assert params[:3] == ["A1", "C1", "S1"]
        assert isinstance(params[3], datetime) and params[3].tzinfo is not None
        assert params[3] == params[4]
        assert params[5:] == [7, 7]

    async def test_anonymous_create_skips_audit_columns(self, model, store):
        store.execute.side_effect = [result(), result([ROW])]

        await model.create({"code": "A1", "customers": "C1", "site": "S1"})

        assert "created_by" not in sent(store, 1)[0]

    async def test_caller_cannot_set_managed_columns(self, model, store):
        store.execute.side_effect = [result(), result([ROW])]

        await model.create({"code": "A1", "customers": "C1", "site": "S1", "created_by": 99})

        assert 99 not in sent(store, 1)[1]

    async def test_existing_key_is_duplicate(self, model, store):
        store.execute.return_value = result([{"found": 1}])

        outcome = await model.create({"code": "A1", "customers": "C1", "site": "S1"})

        assert outcome.success is False
        assert outcome.error == ErrorKind.DUPLICATE_KEY
        assert store.execute.call_count == 1

    async def test_unknown_column_rejected(self, model, store):
        outcome = await model.create({"code": "A1", "colour": "red"})

        assert outcome.error == ErrorKind.VALIDATION_ERROR
        assert "colour" in outcome.message
        store.execute.assert_not_called()

    async def test_empty_data_rejected(self, model, store):
        outcome = await model.create({})

        assert outcome.error == ErrorKind.VALIDATION_ERROR
        store.execute.assert_not_called()

    @pytest.mark.parametrize(
        "kind,expected",
        [
            (ConstraintKind.unique, ErrorKind.DUPLICATE_KEY),
            (ConstraintKind.foreign_key, ErrorKind.INVALID_REFERENCE),
            (ConstraintKind.other, ErrorKind.VALIDATION_ERROR),
        ],
    )
    async def test_constraint_violations_map_to_error_kinds(self, model, store, kind, expected):
        store.execute.side_effect = [result(), ConstraintViolationError(kind)]

        outcome = await model.create({"code": "A1", "customers": "C9", "site": "S1"})

        assert outcome.success is False
        assert outcome.error == expected

    async def test_infrastructure_errors_propagate(self, model, store):
        store.execute.side_effect = [result(), OperationalError("INSERT", {}, Exception("connection lost"))]

        with pytest.raises(OperationalError):
            await model.create({"code": "A1", "customers": "C1", "site": "S1"})


class TestUpdate:
    async def test_partial_update(self, model, store):
        store.execute.return_value = result([{**ROW, "site": "S2"}])

        outcome = await model.update({"code": "A1"}, {"site": "S2"}, RequestContext(user_id=3))

        assert outcome.success is True
        assert outcome.data["site"] == "S2"
        sql, params = sent(store)
        assert sql == (
            "UPDATE customers_site SET site = $1, updated_at = $2, updated_by = $3 WHERE code = $4 RETURNING *"
        )
        assert params[0] == "S2"
        assert isinstance(params[1], datetime)
        assert params[2:] == [3, "A1"]

    async def test_none_sets_null(self, model, store):
        store.execute.return_value = result([ROW])

        await model.update({"code": "A1"}, {"is_active": None})

        assert sent(store)[1][0] is None

    async def test_missing_row_is_not_found(self, model, store):
        outcome = await model.update({"code": "ZZ"}, {"site": "S2"})

        assert outcome.error == ErrorKind.NOT_FOUND

    async def test_key_columns_are_immutable(self, model, store):
        outcome = await model.update({"code": "A1"}, {"code": "B2"})

        assert outcome.error == ErrorKind.VALIDATION_ERROR
        store.execute.assert_not_called()

    async def test_empty_update_rejected(self, model, store):
        outcome = await model.update({"code": "A1"}, {})

        assert outcome.error == ErrorKind.VALIDATION_ERROR
        assert "No fields" in outcome.message
        store.execute.assert_not_called()

    async def test_broken_reference(self, model, store):
        store.execute.side_effect = ConstraintViolationError(ConstraintKind.foreign_key)

        outcome = await model.update({"code": "A1"}, {"customers": "C9"})

        assert outcome.error == ErrorKind.INVALID_REFERENCE


class TestDelete:
    async def test_deleted(self, model, store):
        store.execute.return_value = result(row_count=1)

        outcome = await model.delete({"code": "A1"})

        assert outcome.success is True
        assert sent(store) == ("DELETE FROM customers_site WHERE code = $1", ["A1"])

    async def test_missing_row_is_not_found(self, model, store):
        store.execute.return_value = result(row_count=0)

        outcome = await model.delete({"code": "A1"})

        assert outcome.error == ErrorKind.NOT_FOUND

    async def test_referenced_row(self, model, store):
        store.execute.side_effect = ConstraintViolationError(ConstraintKind.foreign_key)

        outcome = await model.delete({"code": "A1"})

        assert outcome.error == ErrorKind.REFERENCED


class TestStatisticsAndHealth:
    async def test_statistics(self, model, store):
        store.execute.return_value = result([{"total": 5, "active": 3}])

        stats = await model.statistics()

        assert (stats.total, stats.active, stats.inactive) == (5, 3, 2)
        assert "SUM(CASE WHEN is_active THEN 1 ELSE 0 END)" in sent(store)[0]

    async def test_statistics_without_active_column(self, store):
        config = EntityConfig(
            entity_name="Line",
            table_name="lines",
            key_columns=("code",),
            columns={"code"},
            default_sort=SortSpec("code"),
            sortable_columns={"code"},
            timestamps=False,
            audit_columns=False,
            active_column=None,
        )
        store.execute.return_value = result([{"total": 4}])

        stats = await GenericModel(store, config, dict).statistics()

        assert (stats.total, stats.active, stats.inactive) == (4, 4, 0)

    @pytest.mark.parametrize(
        "row,status",
        [
            ({"total": 5, "active": 3}, HealthStatus.healthy),
            ({"total": 2, "active": 0}, HealthStatus.warning),
            ({"total": 0, "active": None}, HealthStatus.critical),
        ],
    )
    async def test_health_status(self, model, store, row, status):
        store.execute.return_value = result([row])

        report = await model.health()

        assert report.status == status
        assert report.checks["table_reachable"] is True
        assert report.response_time_ms >= 0

    async def test_unreachable_table_is_critical(self, model, store):
        store.execute.side_effect = OperationalError("SELECT", {}, Exception("no such table"))

        report = await model.health()

        assert report.status == HealthStatus.critical
        assert report.checks["table_reachable"] is False
        assert any("not reachable" in issue for issue in report.issues)
