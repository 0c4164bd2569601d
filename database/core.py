# database/core.py
import sqlite3
import config
from utils.logging_config import get_logger

logger = get_logger('Database')

DB_FILE = config.DATABASE_PATH

RATING_CODES = ('u', 's', 'q', 'e')


def get_db_connection():
    """Create a database connection with optimized performance settings."""
    # Wait up to 30 seconds for locks instead of failing immediately
    conn = sqlite3.connect(DB_FILE, check_same_thread=False, timeout=30.0)

    # Cascades on tag_posts / pool_posts / post_sources depend on this
    conn.execute("PRAGMA foreign_keys = ON")

    # WAL mode for better concurrency
    conn.execute("PRAGMA journal_mode = WAL")

    # Faster synchronization (safe with WAL mode)
    conn.execute("PRAGMA synchronous = NORMAL")

    # Negative value means KB
    cache_size_kb = -1 * config.DB_CACHE_SIZE_MB * 1024
    conn.execute(f"PRAGMA cache_size = {cache_size_kb}")

    mmap_size_bytes = config.DB_MMAP_SIZE_MB * 1024 * 1024
    conn.execute(f"PRAGMA mmap_size = {mmap_size_bytes}")

    conn.execute("PRAGMA temp_store = MEMORY")
    conn.execute(f"PRAGMA wal_autocheckpoint = {config.DB_WAL_AUTOCHECKPOINT}")

    # Enable row factory for dict-like access
    conn.row_factory = sqlite3.Row
    return conn


def initialize_database():
    """Create the database and tables if they don't exist."""
    rating_check = ", ".join(f"'{code}'" for code in RATING_CODES)

    with get_db_connection() as conn:
        cur = conn.cursor()

        cur.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT NOT NULL UNIQUE,
            password_hash TEXT NOT NULL,
            is_admin BOOLEAN NOT NULL DEFAULT 0
        )
        """)

        # Content items
        cur.execute(f"""
        CREATE TABLE IF NOT EXISTS posts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            uploader_id INTEGER NOT NULL,
            media TEXT NOT NULL,
            media_type TEXT NOT NULL DEFAULT 'image' CHECK(media_type IN ('image', 'video')),
            width INTEGER NOT NULL DEFAULT 0,
            height INTEGER NOT NULL DEFAULT 0,
            thumbnail TEXT NOT NULL,
            thumbnail_width INTEGER NOT NULL DEFAULT 0,
            thumbnail_height INTEGER NOT NULL DEFAULT 0,
            title TEXT,
            description TEXT,
            is_public BOOLEAN NOT NULL DEFAULT 0,
            rating TEXT NOT NULL DEFAULT 'u' CHECK(rating IN ({rating_check})),
            uploaded_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
            parent_id INTEGER,
            FOREIGN KEY (uploader_id) REFERENCES users (id) ON DELETE CASCADE,
            FOREIGN KEY (parent_id) REFERENCES posts (id) ON DELETE SET NULL
        )
        """)

        cur.execute("""
        CREATE TABLE IF NOT EXISTS post_sources (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            url TEXT NOT NULL,
            post_id INTEGER NOT NULL,
            FOREIGN KEY (post_id) REFERENCES posts (id) ON DELETE CASCADE
        )
        """)

        # Tags are unique on their lowercased form; the display name keeps its case
        cur.execute("""
        CREATE TABLE IF NOT EXISTS tags (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            normalized_name TEXT NOT NULL UNIQUE
        )
        """)

        cur.execute("""
        CREATE TABLE IF NOT EXISTS tag_posts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            tag_id INTEGER NOT NULL,
            post_id INTEGER NOT NULL,
            FOREIGN KEY (tag_id) REFERENCES tags (id) ON DELETE CASCADE,
            FOREIGN KEY (post_id) REFERENCES posts (id) ON DELETE CASCADE,
            UNIQUE (post_id, tag_id)
        )
        """)

        cur.execute("""
        CREATE TABLE IF NOT EXISTS pools (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            uploader_id INTEGER NOT NULL,
            is_public BOOLEAN NOT NULL DEFAULT 0,
            FOREIGN KEY (uploader_id) REFERENCES users (id) ON DELETE CASCADE
        )
        """)

        cur.execute("""
        CREATE TABLE IF NOT EXISTS pool_posts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            pool_id INTEGER NOT NULL,
            post_id INTEGER NOT NULL,
            position REAL NOT NULL,
            FOREIGN KEY (pool_id) REFERENCES pools (id) ON DELETE CASCADE,
            FOREIGN KEY (post_id) REFERENCES posts (id) ON DELETE CASCADE,
            UNIQUE (pool_id, post_id)
        )
        """)

        # Admin-editable runtime settings, values stored as JSON
        cur.execute("""
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            data TEXT NOT NULL
        )
        """)

        # ===================================================================
        # Indexes
        # ===================================================================

        cur.execute("CREATE INDEX IF NOT EXISTS idx_posts_uploader_id ON posts(uploader_id)")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_posts_parent_id ON posts(parent_id)")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_posts_rating ON posts(rating)")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_posts_is_public ON posts(is_public)")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_post_sources_post_id ON post_sources(post_id)")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_tags_normalized_name ON tags(normalized_name)")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_tag_posts_tag_id ON tag_posts(tag_id)")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_tag_posts_post_id ON tag_posts(post_id)")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_pool_posts_pool_position ON pool_posts(pool_id, position)")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_pool_posts_post_id ON pool_posts(post_id)")

        conn.commit()
        logger.info("Database initialized successfully.")


if __name__ == "__main__":
    initialize_database()
