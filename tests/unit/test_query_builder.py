import pytest

from recordstore import BadRequestError, InvalidArgumentError, SortOrder
from recordstore.infrastructure.database.query_builder import (
    QueryBuilder,
    sanitize_column_name,
    validate_table_name,
)


@pytest.fixture
def builder():
    return QueryBuilder("items")


def test_no_filters_selects_whole_table(builder):
    sql, params = builder.build_select({})
    assert sql == "SELECT * FROM items;"
    assert params == {}


def test_in_operator_binds_one_parameter_per_part(builder):
    sql, params = builder.build_select({"id_in": "1,2,3"})
    assert sql == "SELECT * FROM items WHERE id IN (:p0, :p1, :p2);"
    assert params == {"p0": "1", "p1": "2", "p2": "3"}


def test_in_operator_binds_parts_verbatim(builder):
    sql, params = builder.build_select({"name_in": "a b,'; DROP TABLE items;--,%"})
    assert sql == "SELECT * FROM items WHERE name IN (:p0, :p1, :p2);"
    assert params == {"p0": "a b", "p1": "'; DROP TABLE items;--", "p2": "%"}


def test_in_operator_accepts_a_list(builder):
    sql, params = builder.build_select({"status_in": ["open", "closed"]})
    assert sql == "SELECT * FROM items WHERE status IN (:p0, :p1);"
    assert params == {"p0": "open", "p1": "closed"}


def test_in_operator_accepts_a_set(builder):
    sql, params = builder.build_select({"id_in": {"1", "2"}})
    assert sql == "SELECT * FROM items WHERE id IN (:p0, :p1);"
    assert sorted(params.values()) == ["1", "2"]
    assert set(params) == {"p0", "p1"}


def test_in_operator_accepts_a_frozenset(builder):
    sql, params = builder.build_select({"id_in": frozenset({"1"})})
    assert sql == "SELECT * FROM items WHERE id IN (:p0);"
    assert params == {"p0": "1"}


def test_in_operator_with_empty_set_is_dropped(builder):
    sql, params = builder.build_select({"id_in": set()})
    assert sql == "SELECT * FROM items;"
    assert params == {}


def test_in_operator_with_empty_list_is_dropped(builder):
    sql, params = builder.build_select({"status_in": [], "name": "A"})
    assert sql == "SELECT * FROM items WHERE name = :p0;"
    assert params == {"p0": "A"}


def test_in_operator_rejects_non_string_scalar(builder):
    with pytest.raises(BadRequestError):
        builder.build_select({"id_in": 5})


def test_contains_wraps_value_in_wildcards(builder):
    sql, params = builder.build_select({"name_contains": "ab%c_"})
    assert sql == "SELECT * FROM items WHERE name ILIKE :p0;"
    assert params == {"p0": "%ab%c_%"}


def test_only_trailing_suffix_is_stripped(builder):
    sql, _ = builder.build_select({"main_index_in": "1", "in_stock": True})
    assert sql == "SELECT * FROM items WHERE main_index IN (:p0) AND in_stock = :p1;"


def test_exact_match_and_dotted_path(builder):
    sql, params = builder.build_select({"category.id": "c1", "status": "draft"})
    assert sql == "SELECT * FROM items WHERE category_id = :p0 AND status = :p1;"
    assert params == {"p0": "c1", "p1": "draft"}


def test_parameters_never_collide_on_same_column(builder):
    sql, params = builder.build_select({"name": "A", "name_contains": "B", "name_in": "C,D"})
    assert sql == "SELECT * FROM items WHERE name = :p0 AND name ILIKE :p1 AND name IN (:p2, :p3);"
    assert params == {"p0": "A", "p1": "%B%", "p2": "C", "p3": "D"}


def test_scope_predicate_comes_first(builder):
    sql, params = builder.build_select({"name": "A"}, user_id="u1")
    assert sql == "SELECT * FROM items WHERE user_id = :userId AND name = :p0;"
    assert params == {"userId": "u1", "p0": "A"}


def test_sort_defaults_to_ascending(builder):
    sql, _ = builder.build_select({}, sort_by="created_at")
    assert sql == "SELECT * FROM items ORDER BY created_at ASC;"


def test_sort_descending_and_limit_overfetch(builder):
    sql, _ = builder.build_select({}, sort_by="name", sort_order=SortOrder.DESC, limit=10)
    assert sql == "SELECT * FROM items ORDER BY name DESC LIMIT 11;"


def test_sort_order_accepts_strings(builder):
    sql, _ = builder.build_select({}, sort_by="name", sort_order="DESC")
    assert sql.endswith("ORDER BY name DESC;")


def test_invalid_sort_order_is_rejected(builder):
    with pytest.raises(InvalidArgumentError):
        builder.build_select({}, sort_by="name", sort_order="sideways")


@pytest.mark.parametrize("limit", [0, -1, True, "10", 2.5])
def test_limit_must_be_positive_integer(builder, limit):
    with pytest.raises(BadRequestError):
        builder.build_select({}, limit=limit)


def test_injection_in_filter_key_is_rejected(builder):
    with pytest.raises(InvalidArgumentError):
        builder.build_select({"id; DROP TABLE items;": "1"})


def test_injection_in_sort_column_is_rejected(builder):
    with pytest.raises(InvalidArgumentError):
        builder.build_select({}, sort_by="name; DROP TABLE items")


def test_bare_suffix_key_is_rejected(builder):
    with pytest.raises(InvalidArgumentError):
        builder.build_select({"_in": "1,2"})


def test_counter_restarts_for_each_build(builder):
    builder.build_select({"a": 1, "b": 2})
    _, params = builder.build_select({"c": 3})
    assert params == {"p0": 3}


@pytest.mark.parametrize(
    "name, expected",
    [("name", "name"), ("category.id", "category_id"), ("a.b.c", "a_b_c"), ("Col_9", "Col_9")],
)
def test_sanitizer_accepts_identifiers(name, expected):
    assert sanitize_column_name(name) == expected


@pytest.mark.parametrize("name", ["", "na me", "name;", "name--", "\"name\"", "名", "a,b"])
def test_sanitizer_rejects_everything_else(name):
    with pytest.raises(InvalidArgumentError):
        sanitize_column_name(name)


def test_table_name_keeps_schema_qualification():
    assert validate_table_name("public.items") == "public.items"
    assert QueryBuilder("public.items").build_select().sql == "SELECT * FROM public.items;"


def test_table_name_is_validated():
    with pytest.raises(InvalidArgumentError):
        QueryBuilder("items; DROP TABLE users")
