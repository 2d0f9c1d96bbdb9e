"""RLS policy playground: run policy DSL scripts in a sandbox and render the SQL."""
