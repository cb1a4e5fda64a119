def test_get_engine_kwargs_sqlite_has_check_same_thread(monkeypatch):
    # Import lazily so monkeypatch can affect env usage deterministically.
    from pace.database import database as db

    monkeypatch.delenv("DEBUG", raising=False)
    kwargs = db.get_engine_kwargs("sqlite:///./pace.db")
    assert "connect_args" in kwargs
    assert kwargs["connect_args"]["check_same_thread"] is False
    # SQLite should not require pool sizing knobs.
    assert "pool_size" not in kwargs
    assert "max_overflow" not in kwargs
    assert kwargs["pool_pre_ping"] is True
    assert kwargs["echo"] is False


def test_get_engine_kwargs_postgres_has_conservative_pooling(monkeypatch):
    from pace.database import database as db

    monkeypatch.setenv("DB_POOL_SIZE", "5")
    monkeypatch.setenv("DB_MAX_OVERFLOW", "5")
    monkeypatch.setenv("DB_POOL_TIMEOUT_SEC", "30")

    kwargs = db.get_engine_kwargs("postgresql+psycopg://u:p@localhost:5432/db")
    assert "connect_args" not in kwargs
    assert kwargs["pool_pre_ping"] is True
    assert kwargs["pool_size"] == 5
    assert kwargs["max_overflow"] == 5
    assert kwargs["pool_timeout"] == 30


def test_debug_env_enables_echo(monkeypatch):
    from pace.database import database as db

    monkeypatch.setenv("DEBUG", "true")
    assert db.get_engine_kwargs("sqlite:///./pace.db")["echo"] is True


def test_sqlite_pragmas_listener_is_guarded():
    # Verify the helper used by the connect event guard behaves as expected.
    from pace.database import database as db

    assert db._is_sqlite_url("sqlite:///./pace.db") is True
    assert db._is_sqlite_url("postgresql+psycopg://u:p@localhost/db") is False


def test_build_engine_creates_schema_in_file_database(tmp_path):
    """A file-backed SQLite engine gets both PACE tables from the model metadata."""
    from sqlalchemy import inspect
    from pace.database import database as db
    from pace.database import models  # noqa: F401

    engine = db.build_engine(f"sqlite:///{tmp_path / 'pace.db'}")
    db.Base.metadata.create_all(bind=engine)

    tables = set(inspect(engine).get_table_names())
    assert {"day_plans", "tasks"} <= tables
    engine.dispose()
