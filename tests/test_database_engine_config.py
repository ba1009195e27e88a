from sqlalchemy.pool import StaticPool


def test_get_engine_kwargs_sqlite_has_check_same_thread():
    from eventboard.database import database as db

    kwargs = db.get_engine_kwargs("sqlite:///./eventboard.db")
    assert "connect_args" in kwargs
    assert kwargs["connect_args"]["check_same_thread"] is False
    # SQLite should not require pool sizing knobs.
    assert "pool_size" not in kwargs
    assert "max_overflow" not in kwargs
    assert "poolclass" not in kwargs
    assert kwargs["pool_pre_ping"] is True


def test_get_engine_kwargs_sqlite_memory_uses_static_pool():
    from eventboard.database import database as db

    assert db.get_engine_kwargs("sqlite:///:memory:")["poolclass"] is StaticPool
    assert db.get_engine_kwargs("sqlite://")["poolclass"] is StaticPool


def test_get_engine_kwargs_postgres_has_conservative_pooling():
    from eventboard.config import Settings
    from eventboard.database import database as db

    settings = Settings(db_pool_size=5, db_max_overflow=5, db_pool_timeout_sec=30)
    kwargs = db.get_engine_kwargs("postgresql+psycopg://u:p@localhost:5432/db", settings)
    assert "connect_args" not in kwargs
    assert kwargs["pool_pre_ping"] is True
    assert kwargs["pool_size"] == 5
    assert kwargs["max_overflow"] == 5
    assert kwargs["pool_timeout"] == 30


def test_sqlite_url_detection():
    from eventboard.database import database as db

    assert db._is_sqlite_url("sqlite:///./eventboard.db") is True
    assert db._is_sqlite_url("postgresql+psycopg://u:p@localhost/db") is False


def test_init_db_creates_tables_and_enables_foreign_keys(tmp_path):
    """A file-backed SQLite database gets both tables and enforced foreign keys."""
    from sqlalchemy import inspect, text
    from eventboard.config import Settings
    from eventboard.database import database as db

    url = f"sqlite:///{tmp_path / 'eventboard.db'}"
    settings = Settings(database_url=url)
    engine = db.build_engine(url, settings)
    try:
        db.init_db(engine, settings)
        assert {"users", "events"} <= set(inspect(engine).get_table_names())
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1
    finally:
        engine.dispose()
