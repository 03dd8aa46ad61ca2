"""Pytest configuration.

Async tests run on every anyio backend:
- asyncio (standard library)
- trio (alternative async framework)
"""

import sqlite3

import pytest


@pytest.fixture(
    params=[
        pytest.param("asyncio", id="asyncio"),
        pytest.param("trio", id="trio"),
    ]
)
def anyio_backend(request):
    """Fixture that parameterizes async tests across anyio backends."""
    return request.param


@pytest.fixture
def schema_db(tmp_path):
    """A real database with two tables, an index and a view."""
    db_path = tmp_path / "schema.db"

    conn = sqlite3.connect(db_path)
    conn.executescript("""
        CREATE TABLE users (id INTEGER PRIMARY KEY, username TEXT);
        CREATE TABLE posts (id INTEGER PRIMARY KEY, user_id INT, body TEXT);
        CREATE INDEX posts_user ON posts (user_id);
        CREATE VIEW user_posts AS SELECT username, body FROM users JOIN posts ON users.id = posts.user_id;
        INSERT INTO users (id, username) VALUES (1, 'alice'), (2, 'bob');
    """)
    conn.commit()
    conn.close()

    return db_path

