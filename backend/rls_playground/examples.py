"""
Example catalog: named seed programs for the playground.

Every example runs against the default binding registry and returns SQL.
"""

from rls_playground.models import Example

EXAMPLES: tuple[Example, ...] = (
    Example(
        name="User Ownership",
        code="""\
policy = (
    createPolicy('user_documents')
    .on('documents')
    .read()
    .when(column('user_id').isOwner())
)

return policy.toSQL()""",
    ),
    Example(
        name="Multi-Tenant",
        code="""\
policy = (
    createPolicy('tenant_isolation')
    .on('tenant_data')
    .all()
    .requireAll()
    .when(column('tenant_id').belongsToTenant())
)

return policy.toSQL()""",
    ),
    Example(
        name="Owner or Member",
        code="""\
policy = (
    createPolicy('project_access')
    .on('projects')
    .read()
    .when(
        column('user_id').isOwner().or_(
            column('id').in_(
                from_('project_members')
                .select('project_id')
                .where(column('user_id').eq(auth.uid()))
            )
        )
    )
)

return policy.toSQL()""",
    ),
    Example(
        name="Complex OR",
        code="""\
policy = (
    createPolicy('project_access')
    .on('projects')
    .read()
    .when(
        column('is_public').isPublic()
        .or_(column('user_id').isOwner())
        .or_(column('organization_id').eq(session.get('app.org_id', 'uuid')))
    )
)

return policy.toSQL()""",
    ),
    Example(
        name="With Indexes",
        code="""\
policy = (
    createPolicy('user_documents')
    .on('documents')
    .read()
    .when(column('user_id').isOwner())
)

return policy.toSQL(includeIndexes=True)""",
    ),
    Example(
        name="INSERT Validation",
        code="""\
policy = (
    createPolicy('user_documents_insert')
    .on('user_documents')
    .write()
    .allow(column('user_id').isOwner())
)

return policy.toSQL()""",
    ),
    Example(
        name="UPDATE with Check",
        code="""\
policy = (
    createPolicy('user_documents_update')
    .on('user_documents')
    .update()
    .allow(column('user_id').isOwner())
)

return policy.toSQL()""",
    ),
    Example(
        name="Template",
        code="""\
[policy] = policies.userOwned('documents', 'SELECT')

return policy.toSQL()""",
    ),
    Example(
        name="DELETE Policy",
        code="""\
policy = (
    createPolicy('user_documents_delete')
    .on('documents')
    .delete()
    .when(column('user_id').isOwner())
)

return policy.toSQL()""",
    ),
    Example(
        name="Pattern Matching",
        code="""\
policy = (
    createPolicy('search_documents')
    .on('documents')
    .read()
    .when(
        column('title').ilike('%report%')
        .or_(column('category').like('Finance%'))
    )
)

return policy.toSQL()""",
    ),
    Example(
        name="Null Checks",
        code="""\
policy = (
    createPolicy('active_documents')
    .on('documents')
    .read()
    .when(
        column('deleted_at').isNull()
        .and_(column('published_at').isNotNull())
    )
)

return policy.toSQL()""",
    ),
    Example(
        name="Public Access Template",
        code="""\
policy = policies.publicAccess('documents')

return policy.toSQL()""",
    ),
    Example(
        name="Role-Based Access",
        code="""\
grants = policies.roleAccess('admin_data', 'admin', ['SELECT', 'UPDATE'])

return '\\n\\n'.join(p.toSQL() for p in grants)""",
    ),
    Example(
        name="Helper Methods",
        code="""\
policy = (
    createPolicy('document_access')
    .on('documents')
    .read()
    .when(
        column('user_id').isOwner()
        .or_(column('is_public').isPublic())
    )
)

return policy.toSQL()""",
    ),
)

DEFAULT_EXAMPLE = EXAMPLES[0]

_BY_NAME = {e.name: e for e in EXAMPLES}


def get_example(name: str) -> Example | None:
    return _BY_NAME.get(name)
