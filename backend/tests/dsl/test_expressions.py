"""Unit tests for conditions, sub-queries, context accessors and templates."""

from datetime import date

import pytest

from rls_playground.dsl import (
    PolicyDefinitionError,
    auth,
    call,
    column,
    currentUser,
    from_,
    policies,
    session,
)


class TestColumnConditions:
    @pytest.mark.parametrize(
        "cond, expected",
        [
            (column("age").gt(18), "age > 18"),
            (column("age").gte(18), "age >= 18"),
            (column("age").lt(1.5), "age < 1.5"),
            (column("age").lte(0), "age <= 0"),
            (column("status").neq("archived"), "status <> 'archived'"),
            (column("name").eq("O'Brien"), "name = 'O''Brien'"),
            (column("flag").eq(True), "flag = TRUE"),
            (column("day").eq(date(2024, 1, 31)), "day = '2024-01-31'"),
            (column("owner").eq(currentUser()), "owner = current_user"),
        ],
    )
    def test_comparisons(self, cond, expected: str) -> None:
        assert cond.render() == expected

    def test_eq_none_is_null_check(self) -> None:
        assert column("deleted_at").eq(None).render() == "deleted_at IS NULL"
        assert column("deleted_at").neq(None).render() == "deleted_at IS NOT NULL"

    def test_like_and_ilike(self) -> None:
        assert column("title").ilike("%report%").render() == "title ILIKE '%report%'"
        assert column("c").like("Fin%").render() == "c LIKE 'Fin%'"

    def test_like_needs_string(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="string pattern"):
            column("c").like(5)

    def test_in_list(self) -> None:
        assert column("status").in_(["a", "b"]).render() == "status IN ('a', 'b')"

    def test_in_empty_rejected(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="at least one value"):
            column("status").in_([])

    def test_in_string_rejected(self) -> None:
        with pytest.raises(PolicyDefinitionError):
            column("status").in_("abc")

    def test_unsupported_value(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="Unsupported value"):
            column("c").eq(object())

    def test_reserved_column_quoted(self) -> None:
        assert column("user").isOwner().render() == '"user" = auth.uid()'

    def test_qualified_column(self) -> None:
        assert column("pm.user_id").isOwner().render() == "pm.user_id = auth.uid()"


class TestBooleanComposition:
    def test_or_chain_flattens(self) -> None:
        cond = (
            column("is_public")
            .isPublic()
            .or_(column("user_id").isOwner())
            .or_(column("organization_id").eq(session.get("app.org_id", "uuid")))
        )
        assert cond.render() == (
            "is_public = TRUE OR user_id = auth.uid() OR "
            "organization_id = current_setting('app.org_id', true)::uuid"
        )

    def test_mixed_ops_parenthesized(self) -> None:
        cond = column("a").eq(1).and_(column("b").eq(2).or_(column("c").eq(3)))
        assert cond.render() == "a = 1 AND (b = 2 OR c = 3)"

    def test_not(self) -> None:
        assert column("locked").eq(True).not_().render() == "NOT (locked = TRUE)"

    def test_and_needs_condition(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="expects conditions"):
            column("a").eq(1).and_("b = 2")

    def test_and_needs_at_least_one(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="at least one condition"):
            column("a").eq(1).and_()


class TestSubquery:
    def test_membership(self) -> None:
        sub = from_("project_members").select("project_id").where(column("user_id").eq(auth.uid()))
        cond = column("user_id").isOwner().or_(column("id").in_(sub))
        assert cond.render() == (
            "user_id = auth.uid() OR id IN "
            "(SELECT project_id FROM project_members WHERE user_id = auth.uid())"
        )

    def test_repeated_where_is_and(self) -> None:
        sub = (
            from_("members")
            .select(["team_id", "role"])
            .where(column("user_id").isOwner())
            .where(column("active").eq(True))
        )
        assert sub.render() == (
            "SELECT team_id, role FROM members WHERE user_id = auth.uid() AND active = TRUE"
        )

    def test_join(self) -> None:
        sub = (
            from_("teams")
            .select("teams.id")
            .join("members", column("members.team_id").eq(column("teams.id")), kind="left")
        )
        assert sub.render() == (
            "SELECT teams.id FROM teams LEFT JOIN members ON members.team_id = teams.id"
        )

    def test_select_required(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="select"):
            from_("members").render()

    def test_bad_join_kind(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="join kind"):
            from_("a").join("b", column("x").eq(1), kind="CROSS")

    def test_scalar_subquery_value_parenthesized(self) -> None:
        cond = column("org").eq(from_("m").select("org_id"))
        assert cond.render() == "org = (SELECT org_id FROM m)"

    def test_subquery_value_needs_select(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="select"):
            column("org").eq(from_("m"))

    def test_subquery_as_call_argument(self) -> None:
        fn = call("coalesce", from_("m").select("org_id"), "none")
        assert fn.render() == "coalesce((SELECT org_id FROM m), 'none')"

    def test_generative(self) -> None:
        base = from_("members").select("id")
        base.where(column("x").eq(1))
        assert base.render() == "SELECT id FROM members"


class TestColumnHelpers:
    def test_is_member_of(self) -> None:
        assert column("project_id").isMemberOf("project_members", "project_id").render() == (
            "project_id IN (SELECT project_id FROM project_members WHERE user_id = auth.uid())"
        )

    def test_belongs_to_tenant_custom_key(self) -> None:
        assert column("org").belongsToTenant("app.org").render() == (
            "org = current_setting('app.org', true)::uuid"
        )


class TestContext:
    def test_auth(self) -> None:
        assert auth.uid().render() == "auth.uid()"
        assert auth.role().render() == "auth.role()"
        assert auth.jwt().render() == "auth.jwt()"
        assert auth.jwt("email").render() == "(auth.jwt() ->> 'email')"

    def test_call(self) -> None:
        assert call("is_admin", auth.uid()).render() == "is_admin(auth.uid())"
        assert call("private.can_read", "docs", 3).render() == "private.can_read('docs', 3)"

    def test_call_rejects_bad_name(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="function name"):
            call("drop table x; --")


class TestTemplates:
    def test_user_owned_all(self) -> None:
        [policy] = policies.userOwned("documents")
        assert policy.name == "documents_all_own"
        sql = policy.toSQL()
        assert "FOR ALL" in sql
        assert "USING (user_id = auth.uid())\n  WITH CHECK (user_id = auth.uid());" in sql

    def test_user_owned_several_operations(self) -> None:
        names = [p.name for p in policies.userOwned("notes", ["select", "INSERT"], "owner_id")]
        assert names == ["notes_select_own", "notes_insert_own"]

    def test_user_owned_unknown_operation(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="Unknown operation"):
            policies.userOwned("notes", "TRUNCATE")

    def test_tenant_isolation(self) -> None:
        [policy] = policies.tenantIsolation("invoices")
        sql = policy.toSQL()
        assert sql.startswith('CREATE POLICY "invoices_tenant_isolation" ON invoices')
        assert "AS RESTRICTIVE" in sql

    def test_public_access(self) -> None:
        assert "USING (is_public = TRUE);" in policies.publicAccess("documents").toSQL()
        assert "USING (true);" in policies.publicAccess("docs", None).toSQL()

    def test_role_access(self) -> None:
        grants = policies.roleAccess("admin_data", "admin", ["SELECT", "UPDATE"])
        assert [p.name for p in grants] == ["admin_data_admin_select", "admin_data_admin_update"]
        assert "(auth.jwt() ->> 'role') = 'admin'" in grants[0].toSQL()
