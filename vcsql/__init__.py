"""
vcsql: Query git repositories with SQL.

vcsql projects commits, references, diffs, blame, configuration and working
tree state of a git repository onto SQLite tables, loading only the tables a
query actually mentions.

Usage:
    from vcsql.core.engine import ProjectionEngine
    from vcsql.git import GitRepo

    repo = GitRepo.open(Path("."))
    with ProjectionEngine() as engine:
        engine.load_for_query("SELECT * FROM commits", repo)
        result = engine.execute("SELECT * FROM commits")
"""

__version__ = "0.1.0"
