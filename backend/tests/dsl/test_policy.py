"""Unit tests for the policy builder and its rendering."""

import pytest

from rls_playground.dsl import (
    PolicyDefinitionError,
    alwaysTrue,
    column,
    createPolicy,
    hasRole,
    session,
)


def _owner_read():
    return createPolicy("user_documents").on("documents").read().when(column("user_id").isOwner())


class TestToSQL:
    def test_select_policy(self) -> None:
        assert _owner_read().toSQL() == (
            'CREATE POLICY "user_documents" ON documents\n'
            "  AS PERMISSIVE\n"
            "  FOR SELECT\n"
            "  USING (user_id = auth.uid());"
        )

    def test_include_indexes(self) -> None:
        sql = _owner_read().toSQL(includeIndexes=True)
        assert sql.endswith(
            "USING (user_id = auth.uid());\n"
            "CREATE INDEX IF NOT EXISTS idx_documents_user_id ON documents (user_id);"
        )

    def test_insert_uses_with_check(self) -> None:
        sql = (
            createPolicy("ins").on("user_documents").write().allow(column("user_id").isOwner()).toSQL()
        )
        assert "FOR INSERT\n  WITH CHECK (user_id = auth.uid());" in sql
        assert "USING" not in sql

    def test_update_allow_renders_both_clauses(self) -> None:
        sql = createPolicy("upd").on("docs").update().allow(column("user_id").isOwner()).toSQL()
        assert "  USING (user_id = auth.uid())\n  WITH CHECK (user_id = auth.uid());" in sql

    def test_update_with_explicit_check(self) -> None:
        sql = (
            createPolicy("upd")
            .on("docs")
            .update()
            .when(column("user_id").isOwner())
            .withCheck(column("locked").eq(False))
            .toSQL()
        )
        assert "USING (user_id = auth.uid())" in sql
        assert "WITH CHECK (locked = FALSE)" in sql

    def test_restrictive_all(self) -> None:
        sql = (
            createPolicy("tenant_isolation")
            .on("tenant_data")
            .all()
            .requireAll()
            .when(column("tenant_id").belongsToTenant())
            .toSQL()
        )
        assert "AS RESTRICTIVE\n  FOR ALL" in sql
        assert "USING (tenant_id = current_setting('app.current_tenant_id', true)::uuid);" in sql

    def test_roles(self) -> None:
        sql = _owner_read().to("authenticated", "user").toSQL()
        assert '  TO authenticated, "user"\n' in sql

    def test_delete(self) -> None:
        sql = createPolicy("d").on("documents").delete().when(alwaysTrue()).toSQL()
        assert "FOR DELETE\n  USING (true);" in sql

    def test_policy_name_quoted(self) -> None:
        sql = createPolicy('say "hi"').on("t").read().when(alwaysTrue()).toSQL()
        assert sql.startswith('CREATE POLICY "say ""hi""" ON t')

    def test_table_needing_quotes(self) -> None:
        sql = createPolicy("p").on("public.Users").read().when(alwaysTrue()).toSQL()
        assert 'ON public."Users"' in sql

    def test_indexes_skip_duplicates_and_dotted(self) -> None:
        cond = (
            column("user_id")
            .isOwner()
            .or_(column("user_id").isNull(), column("t.org_id").eq(1))
        )
        policy = createPolicy("p").on("docs").read().when(cond)
        assert policy.indexedColumns() == ["user_id"]

    def test_indexes_from_check_condition(self) -> None:
        policy = createPolicy("p").on("docs").update().when(alwaysTrue()).withCheck(
            column("owner_id").isOwner()
        )
        assert policy.indexedColumns() == ["owner_id"]


class TestGenerative:
    def test_each_step_returns_new_builder(self) -> None:
        base = createPolicy("p").on("docs")
        read = base.read().when(alwaysTrue())
        delete = base.delete().when(alwaysTrue())
        assert "FOR SELECT" in read.toSQL()
        assert "FOR DELETE" in delete.toSQL()

    def test_original_unchanged(self) -> None:
        base = createPolicy("p").on("docs").read()
        base.when(alwaysTrue())
        with pytest.raises(PolicyDefinitionError, match="no condition"):
            base.toSQL()

    def test_permissive_undoes_require_all(self) -> None:
        sql = createPolicy("p").on("t").read().requireAll().permissive().when(alwaysTrue()).toSQL()
        assert "AS PERMISSIVE" in sql


class TestErrors:
    def test_missing_table(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="has no table"):
            createPolicy("p").read().when(alwaysTrue()).toSQL()

    def test_missing_table_with_indexes(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="has no table"):
            createPolicy("p").read().when(column("user_id").isOwner()).toSQL(includeIndexes=True)

    def test_missing_operation(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="has no operation"):
            createPolicy("p").on("t").when(alwaysTrue()).toSQL()

    def test_missing_condition(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="no condition"):
            createPolicy("p").on("t").read().toSQL()

    def test_select_with_check_rejected(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="WITH CHECK is not allowed"):
            createPolicy("p").on("t").read().withCheck(alwaysTrue()).toSQL()

    def test_insert_with_when_rejected(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="INSERT"):
            createPolicy("p").on("t").write().when(alwaysTrue()).toSQL()

    def test_condition_must_be_condition(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="expects a condition"):
            createPolicy("p").on("t").read().when("user_id = 1")

    def test_empty_name(self) -> None:
        with pytest.raises(PolicyDefinitionError):
            createPolicy("")

    def test_to_without_roles(self) -> None:
        with pytest.raises(PolicyDefinitionError):
            createPolicy("p").to()


class TestHelpers:
    def test_has_role(self) -> None:
        assert hasRole("admin").render() == "(auth.jwt() ->> 'role') = 'admin'"

    def test_has_role_escapes(self) -> None:
        assert hasRole("o'brien").render() == "(auth.jwt() ->> 'role') = 'o''brien'"

    def test_session_get_text_has_no_cast(self) -> None:
        assert session.get("app.org").render() == "current_setting('app.org', true)"

    def test_session_key_must_be_namespaced(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="namespaced"):
            session.get("org_id")

    def test_session_unknown_type(self) -> None:
        with pytest.raises(PolicyDefinitionError, match="Unknown session type"):
            session.get("app.org", "money")
