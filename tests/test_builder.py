"""Tests for fragment generation and statement assembly."""

import pytest

from tablequery.errors import ArityError
from tablequery.query import (
    MYSQL,
    OPERATOR_HANDLERS,
    SNOWFLAKE,
    SQLITE,
    SqlFragment,
    build_condition,
    build_conditions,
    build_create_table,
    build_delete,
    build_delete_in,
    build_insert,
    build_insert_rows,
    build_select,
    build_update,
    dispatch_key,
    sql_and,
)
from tablequery.query.builder import sql_default


class TestJoinPrefix:
    @pytest.mark.parametrize(
        "join, expected",
        [(True, " AND"), ("OR", " OR"), ("or", " OR"), (False, ""), (None, ""), ("AND", ""), (1, "")],
    )
    def test_sql_and(self, join, expected):
        assert sql_and(join) == expected

    def test_prefix_on_first_and_later_conditions(self):
        conditions = {"a": 1, "b": 2}
        assert build_conditions(conditions, join=True).sql == " AND `a` = ? AND `b` = ?"
        assert build_conditions(conditions, join="OR").sql == " OR `a` = ? OR `b` = ?"
        assert build_conditions(conditions, join=False).sql == " `a` = ? `b` = ?"


class TestDispatch:
    def test_dispatch_key(self):
        assert dispatch_key("NOT LIKE") == "not_like"
        assert dispatch_key("IN") == "in"

    def test_comparison_operators_use_default(self):
        for op in ("=", "!=", ">", "<", ">=", "<=", "<=>"):
            assert dispatch_key(op) not in OPERATOR_HANDLERS
            frag = build_condition("age", 3, op, "%d")
            assert frag.sql == f" AND `age` {op} ?"
            assert frag.params == [3]

    def test_registered_keys(self):
        assert set(OPERATOR_HANDLERS) == {
            "in", "not_in", "between", "not_between", "like", "not_like", "custom",
        }


class TestInOperator:
    @pytest.mark.parametrize("values", [[1], [1, 2], [1, 2, 3, 4, 5]])
    def test_placeholder_count_matches_values(self, values):
        frag = build_condition("id", values, "IN", "%d")
        assert frag.sql.count("?") == len(values)
        assert frag.params == values

    def test_not_in(self):
        frag = build_condition("id", (4, 5), "NOT IN", "%d", join=False)
        assert frag.sql == " `id` NOT IN (?, ?)"
        assert frag.params == [4, 5]

    def test_scalar_is_wrapped(self):
        frag = build_condition("id", 9, "IN", "%d")
        assert frag.sql == " AND `id` IN (?)"
        assert frag.params == [9]

    def test_empty_sequence_is_not_guarded(self):
        assert build_condition("id", [], "IN").sql == " AND `id` IN ()"


class TestBetween:
    def test_two_values_in_caller_order(self):
        frag = build_condition("age", [10, 20], "BETWEEN", "%d")
        assert frag.sql == " AND `age` BETWEEN ? AND ?"
        assert frag.params == [10, 20]

    def test_order_is_not_validated(self):
        assert build_condition("age", [20, 10], "BETWEEN", "%d").params == [20, 10]

    def test_extra_values_ignored(self):
        frag = build_condition("age", [1, 2, 3], "NOT BETWEEN", "%d")
        assert frag.sql == " AND `age` NOT BETWEEN ? AND ?"
        assert frag.params == [1, 2]

    @pytest.mark.parametrize("value", [[10], 10, []])
    def test_fewer_than_two_raises(self, value):
        with pytest.raises(ArityError):
            build_condition("age", value, "BETWEEN", "%d")


class TestLikeAndCustom:
    def test_like_keeps_caller_wildcards(self):
        frag = build_condition("title", "%foo%", "LIKE")
        assert frag.sql == " AND `title` LIKE ?"
        assert frag.params == ["%foo%"]

    def test_like_adds_no_wildcards(self):
        assert build_condition("title", "foo", "NOT LIKE").params == ["foo"]

    def test_custom_appends_raw_fragments(self):
        frag = build_condition("ignored", ["views > 10", "status <> 'x'"], "CUSTOM")
        assert frag.sql == " AND views > 10 AND status <> 'x'"
        assert frag.params == []

    def test_custom_single_string(self):
        assert build_condition("x", "a = b", "CUSTOM", join="OR").sql == " OR a = b"


class TestBuildConditions:
    def test_empty_values_are_skipped(self):
        frag = build_conditions({"a": "", "b": None, "c": 0, "d": "x"})
        assert frag.sql == " AND `d` = ?"
        assert frag.params == ["x"]

    def test_skipped_values_keep_positions_aligned(self):
        frag = build_conditions({"a": "", "b": "x"}, operator=["like", "in"])
        assert frag.sql == " AND `b` IN (?)"

    def test_scalar_spec_ignores_skips(self):
        frag = build_conditions({"a": "", "b": "x%"}, operator="like")
        assert frag.sql == " AND `b` LIKE ?"

    def test_per_field_operator_and_format(self):
        frag = build_conditions(
            {"status": "draft", "id": ["3", "4"]},
            operator={"id": "in"},
            fmt={"id": "%d"},
        )
        assert frag.sql == " AND `status` = ? AND `id` IN (?, ?)"
        assert frag.params == ["draft", 3, 4]

    def test_unknown_operator_falls_back_to_equals(self):
        assert build_conditions({"a": 1}, operator="drop").sql == " AND `a` = ?"

    def test_pairs_are_accepted(self):
        frag = build_conditions([("a", 1), ("a", 2)], operator=[">", "<"], fmt="%d")
        assert frag.sql == " AND `a` > ? AND `a` < ?"
        assert frag.params == [1, 2]

    def test_arity_error_emits_nothing(self):
        with pytest.raises(ArityError):
            build_conditions({"a": 1, "b": [1]}, operator={"b": "between"})

    def test_identifier_quote_is_escaped(self):
        frag = sql_default("we`ird", 1, "=", "%s", True, SQLITE)
        assert frag.sql == " AND `we``ird` = ?"

    def test_dialect_placeholder_and_quote(self):
        assert build_conditions({"a": 1}, dialect=MYSQL).sql == " AND `a` = %s"
        assert build_conditions({"a": 1}, dialect=SNOWFLAKE).sql == ' AND "a" = %s'


class TestStatements:
    def test_fragment_unpacks(self):
        sql, params = SqlFragment("x", [1])
        assert (sql, params) == ("x", [1])

    def test_select_with_baseline(self):
        where = build_conditions({"status": "draft"})
        stmt = build_select("posts", "id,title", where=where)
        assert stmt.sql == "SELECT id,title FROM posts WHERE 1=1 AND `status` = ?"
        assert stmt.params == ["draft"]

    def test_select_without_baseline(self):
        where = build_condition("id", 5, "=", "%d", join=False)
        stmt = build_select("posts", "*", where=where, baseline=False, order_by="id", order="DESC")
        assert stmt.sql == "SELECT * FROM posts WHERE `id` = ? ORDER BY id DESC"

    def test_select_join_order_limit(self):
        stmt = build_select(
            "posts",
            "*",
            join_clause="JOIN users ON users.id = posts.author",
            where=SqlFragment(),
            order_by="title",
            limit="LIMIT 10",
        )
        assert stmt.sql == (
            "SELECT * FROM posts JOIN users ON users.id = posts.author WHERE 1=1 ORDER BY title LIMIT 10"
        )

    def test_order_by_star_is_dropped(self):
        assert build_select("posts", order_by="*", order="ASC").sql == "SELECT * FROM posts"

    def test_insert(self):
        stmt = build_insert("posts", {"title": "t", "views": "7"}, {"views": "%d"})
        assert stmt.sql == "INSERT INTO posts (`title`, `views`) VALUES (?, ?)"
        assert stmt.params == ["t", 7]

    def test_insert_rows(self):
        stmt = build_insert_rows("posts", [{"id": 1, "title": "a"}, {"title": "b", "id": 2}])
        assert stmt.sql == "INSERT INTO posts (`id`, `title`) VALUES (?, ?), (?, ?)"
        assert stmt.params == [1, "a", 2, "b"]

    def test_insert_rows_missing_key_binds_null(self):
        stmt = build_insert_rows("posts", [{"id": 1, "title": "a"}, {"id": 2}])
        assert stmt.params == [1, "a", 2, None]

    def test_upsert_mysql(self):
        stmt = build_insert_rows("posts", [{"id": 1, "title": "a"}], update=True, dialect=MYSQL)
        assert stmt.sql.endswith(" ON DUPLICATE KEY UPDATE `id`=VALUES(`id`), `title`=VALUES(`title`)")

    def test_upsert_sqlite(self):
        stmt = build_insert_rows("posts", [{"id": 1, "title": "a"}], update=True, dialect=SQLITE)
        assert stmt.sql.endswith(" ON CONFLICT DO UPDATE SET `id`=excluded.`id`, `title`=excluded.`title`")

    def test_upsert_unsupported(self):
        with pytest.raises(ValueError):
            build_insert_rows("posts", [{"id": 1}], update=True, dialect=SNOWFLAKE)

    def test_update(self):
        stmt = build_update("posts", {"status": "published", "views": "3"}, {"id": 2, "deleted_at": None}, {"views": "%d"})
        assert stmt.sql == (
            "UPDATE posts SET `status` = ?, `views` = ? WHERE `id` = ? AND `deleted_at` IS NULL"
        )
        assert stmt.params == ["published", 3, 2]

    def test_delete(self):
        stmt = build_delete("posts", {"id": "4", "status": "draft"}, {"id": "%d"})
        assert stmt.sql == "DELETE FROM posts WHERE `id` = ? AND `status` = ?"
        assert stmt.params == [4, "draft"]

    def test_delete_in(self):
        stmt = build_delete_in("posts", "id", [4, 5], "%d")
        assert stmt.sql == "DELETE FROM posts WHERE id IN (?, ?)"
        assert stmt.params == [4, 5]

    def test_create_table(self):
        stmt = build_create_table("tags", ["id INTEGER PRIMARY KEY", "name TEXT"], "DEFAULT CHARSET=utf8mb4")
        assert stmt.sql == "CREATE TABLE tags (id INTEGER PRIMARY KEY,name TEXT) DEFAULT CHARSET=utf8mb4"
