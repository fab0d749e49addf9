"""Unit tests for EntityConfig validation and normalisation."""

import pytest

from qc_tracker.core.keyed import EntityConfig, EntityConfigError, SortSpec

COLUMNS = {"code", "customers", "site", "is_active", "created_by", "updated_by", "created_at", "updated_at"}


def make_config(**overrides) -> EntityConfig:
    values = dict(
        entity_name="Customer site",
        table_name="customers_site",
        key_columns=("code",),
        columns=COLUMNS,
        default_sort=SortSpec("code"),
        filterable_columns={"customers", "site"},
        sortable_columns={"code", "site"},
        searchable_columns=["code", "site"],
    )
    values.update(overrides)
    return EntityConfig(**values)


class TestEntityConfigValid:
    """Configurations that satisfy every rule."""

    def test_single_key_config(self):
        config = make_config()
        assert config.key_columns == ("code",)
        assert config.key_path == "/{code}"

    def test_iterables_are_normalised(self):
        config = make_config(key_columns=["customers", "site"], searchable_columns=["code"])
        assert isinstance(config.key_columns, tuple)
        assert isinstance(config.columns, frozenset)
        assert isinstance(config.filterable_columns, frozenset)
        assert isinstance(config.sortable_columns, frozenset)
        assert config.searchable_columns == ("code",)

    def test_composite_key_path_keeps_declared_order(self):
        config = make_config(key_columns=("site", "customers"))
        assert config.key_path == "/{site}/{customers}"

    def test_config_is_immutable(self):
        config = make_config()
        with pytest.raises(AttributeError):
            config.table_name = "other"  # type: ignore[misc]

    def test_managed_columns_not_required_when_disabled(self):
        config = make_config(
            columns={"code", "site"},
            filterable_columns=set(),
            sortable_columns={"code"},
            searchable_columns=(),
            timestamps=False,
            audit_columns=False,
            active_column=None,
        )
        assert config.columns == frozenset({"code", "site"})


class TestEntityConfigInvalid:
    """Each invariant violation is reported with EntityConfigError."""

    def test_empty_key_columns(self):
        with pytest.raises(EntityConfigError, match="key_columns must not be empty"):
            make_config(key_columns=())

    def test_duplicate_key_columns(self):
        with pytest.raises(EntityConfigError, match="duplicates"):
            make_config(key_columns=("code", "code"))

    def test_key_column_outside_columns(self):
        with pytest.raises(EntityConfigError, match="key_columns not in columns: line"):
            make_config(key_columns=("line",))

    def test_filterable_column_outside_columns(self):
        with pytest.raises(EntityConfigError, match="filterable_columns"):
            make_config(filterable_columns={"unknown"})

    def test_searchable_column_outside_columns(self):
        with pytest.raises(EntityConfigError, match="searchable_columns"):
            make_config(searchable_columns=("unknown",))

    def test_default_sort_must_be_sortable(self):
        with pytest.raises(EntityConfigError, match="not sortable"):
            make_config(default_sort=SortSpec("customers"))

    def test_default_sort_direction_validated(self):
        with pytest.raises(EntityConfigError, match="invalid sort direction"):
            make_config(default_sort=SortSpec("code", "SIDEWAYS"))

    def test_lowercase_default_direction_accepted(self):
        assert make_config(default_sort=SortSpec("code", "desc")).default_sort.direction == "desc"

    @pytest.mark.parametrize("default_limit,max_limit", [(0, 10), (20, 10), (-1, 5)])
    def test_limits_validated(self, default_limit, max_limit):
        with pytest.raises(EntityConfigError, match="default_limit"):
            make_config(default_limit=default_limit, max_limit=max_limit)

    def test_missing_timestamp_columns(self):
        with pytest.raises(EntityConfigError, match="managed columns"):
            make_config(columns=COLUMNS - {"created_at"})

    def test_missing_active_column(self):
        with pytest.raises(EntityConfigError, match="managed columns"):
            make_config(columns=COLUMNS - {"is_active"})
