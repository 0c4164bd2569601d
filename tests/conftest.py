"""
Pytest fixtures and test configuration
"""
import pytest
import os
import tempfile
import shutil

# Set testing environment variables BEFORE importing app modules
os.environ['TESTING'] = 'true'

# Now import app modules
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app
import database
import config
from repositories.user_repository import create_user


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_db_path(temp_dir):
    """Path to test database file."""
    return os.path.join(temp_dir, 'test_tagpool.db')


@pytest.fixture
def files_dir(temp_dir, monkeypatch):
    """Temporary FILES_DIRECTORY."""
    path = os.path.join(temp_dir, 'files')
    os.makedirs(path, exist_ok=True)
    monkeypatch.setattr(config, 'FILES_DIRECTORY', path)
    return path


@pytest.fixture
def db_connection(test_db_path, monkeypatch):
    """
    Create a test database connection.
    Uses monkeypatch to override the DB_FILE path.
    """
    import database.core
    monkeypatch.setattr(database.core, 'DB_FILE', test_db_path)

    # Initialize the test database
    database.initialize_database()

    conn = database.get_db_connection()
    yield conn

    conn.close()


@pytest.fixture
def users(db_connection):
    """alice and bob are regular users, root is an admin."""
    return {
        'alice': create_user('alice', 'alice-password'),
        'bob': create_user('bob', 'bob-password'),
        'root': create_user('root', 'root-password', is_admin=True),
    }


@pytest.fixture
def populated_db(db_connection, users):
    """
    A small board:

    id  owner  public  rating  tags
    1   alice  yes     s       cat outdoor
    2   alice  yes     q       cat indoor
    3   bob    yes     e       dog outdoor
    4   alice  no      s       cat secret
    5   bob    no      s       dog
    6   bob    yes     s       (none)
    """
    alice, bob = users['alice'], users['bob']
    posts = {
        'cat_outdoor': create_test_post(db_connection, alice.id, 'cat outdoor', is_public=True, rating='s'),
        'cat_indoor': create_test_post(db_connection, alice.id, 'cat indoor', is_public=True, rating='q'),
        'dog_outdoor': create_test_post(db_connection, bob.id, 'dog outdoor', is_public=True, rating='e'),
        'alice_private': create_test_post(db_connection, alice.id, 'cat secret', is_public=False, rating='s'),
        'bob_private': create_test_post(db_connection, bob.id, 'dog', is_public=False, rating='s'),
        'untagged': create_test_post(db_connection, bob.id, '', is_public=True, rating='s'),
    }
    return posts


@pytest.fixture
def app(test_db_path, files_dir, monkeypatch):
    """Create Quart app configured for testing."""
    import database.core
    monkeypatch.setattr(database.core, 'DB_FILE', test_db_path)

    app = create_app()
    app.config['TESTING'] = True
    app.config['SECRET_KEY'] = 'test-secret-key'

    yield app


@pytest.fixture
def client(app):
    """Quart test client."""
    return app.test_client()


# Helper functions for tests

def create_test_post(db_connection, uploader_id, tags='', is_public=True, rating='s',
                     parent_id=None, media='media.png', thumbnail='thumb.png'):
    """Helper to insert a post and its tags directly."""
    cursor = db_connection.cursor()
    cursor.execute(
        """
        INSERT INTO posts (uploader_id, media, media_type, thumbnail, is_public, rating, parent_id)
        VALUES (?, ?, 'image', ?, ?, ?, ?)
        """,
        (uploader_id, media, thumbnail, 1 if is_public else 0, rating, parent_id),
    )
    post_id = cursor.lastrowid

    for tag_name in tags.split():
        cursor.execute(
            "INSERT OR IGNORE INTO tags (name, normalized_name) VALUES (?, ?)",
            (tag_name, tag_name.lower()),
        )
        tag_id = cursor.execute(
            "SELECT id FROM tags WHERE normalized_name = ?", (tag_name.lower(),)
        ).fetchone()['id']
        cursor.execute(
            "INSERT OR IGNORE INTO tag_posts (post_id, tag_id) VALUES (?, ?)",
            (post_id, tag_id),
        )

    db_connection.commit()
    return post_id


def create_test_pool(db_connection, uploader_id, name='Test Pool', is_public=True):
    """Helper to create a test pool."""
    cursor = db_connection.cursor()
    cursor.execute(
        "INSERT INTO pools (name, uploader_id, is_public) VALUES (?, ?, ?)",
        (name, uploader_id, 1 if is_public else 0),
    )
    db_connection.commit()
    return cursor.lastrowid


def add_test_pool_post(db_connection, pool_id, post_id, position):
    """Helper to add a pool member at an explicit position."""
    cursor = db_connection.cursor()
    cursor.execute(
        "INSERT INTO pool_posts (pool_id, post_id, position) VALUES (?, ?, ?)",
        (pool_id, post_id, position),
    )
    db_connection.commit()
    return cursor.lastrowid


async def login_as(client, user):
    """Put a user id into the test client's session."""
    async with client.session_transaction() as sess:
        sess['user_id'] = user.id
