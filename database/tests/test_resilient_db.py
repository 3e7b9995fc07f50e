"""
Tests for ResilientDB functionality
"""

import sqlite3
from unittest.mock import Mock, patch

import pytest

from database.resilient_db import ResilientDB


@pytest.fixture(autouse=True)
def _no_sleep():
    """Retry back-off is real time; skip it in tests"""
    with patch("database.resilient_db.time.sleep") as mock_sleep:
        yield mock_sleep


class TestResilientDB:
    """Test ResilientDB class"""

    def test_init_with_path_and_schema_initializer(self, tmp_path):
        """Test initialization with database path and schema initializer"""
        db_path = tmp_path / "test.db"
        schema_initializer = Mock()

        db = ResilientDB(db_path, schema_initializer, timeout_s=2.5)

        assert db.db_path == db_path
        assert db.schema_initializer == schema_initializer
        assert db.timeout_s == 2.5
        assert db.user_feedback is print

    def test_connect_opens_autocommit_connection(self, tmp_path):
        """Transactions are left to the caller: no implicit BEGIN"""
        db_path = tmp_path / "test.db"
        schema_initializer = Mock()

        db = ResilientDB(db_path, schema_initializer)

        with patch("sqlite3.connect") as mock_connect:
            mock_connection = Mock()
            mock_connect.return_value = mock_connection

            result = db.connect()

            assert result == mock_connection
            mock_connect.assert_called_once_with(str(db_path), isolation_level=None, timeout=5.0)
            schema_initializer.assert_called_once_with(mock_connection)
            mock_connection.execute.assert_any_call("PRAGMA foreign_keys = ON")

    def test_real_connection_settings(self, tmp_path):
        """Row access by name, foreign keys on, autocommit mode"""
        db = ResilientDB(tmp_path / "real.db", lambda conn: None)

        conn = db.connect()
        try:
            assert conn.isolation_level is None
            assert conn.row_factory is sqlite3.Row
            assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
            assert not conn.in_transaction
        finally:
            conn.close()

    def test_attempt_connection_closes_on_schema_failure(self, tmp_path):
        """A failed schema initializer must not leak the connection"""
        db = ResilientDB(tmp_path / "test.db", Mock(side_effect=sqlite3.DatabaseError("boom")))

        with patch("sqlite3.connect") as mock_connect:
            mock_connection = Mock()
            mock_connect.return_value = mock_connection

            with pytest.raises(sqlite3.DatabaseError):
                db._attempt_connection()

            mock_connection.close.assert_called_once()

    def test_missing_folder_is_created(self, tmp_path):
        """First-time setup creates the parent folder and retries"""
        db_path = tmp_path / "nested" / "deeper" / "projects.db"
        messages = []

        db = ResilientDB(db_path, lambda conn: None, messages.append)
        conn = db.connect()
        conn.close()

        assert db_path.parent.exists()
        assert any("Creating database folder" in m for m in messages)

    def test_locked_database_waits_and_retries(self, tmp_path, _no_sleep):
        db = ResilientDB(tmp_path / "test.db", Mock(), lambda _m: None)
        mock_connection = Mock()

        with patch.object(db, "_attempt_connection") as mock_attempt:
            mock_attempt.side_effect = [
                sqlite3.OperationalError("database is locked"),
                mock_connection,
            ]

            assert db.connect() is mock_connection

        _no_sleep.assert_called_once_with(2)

    def test_backup_corrupted_db(self, tmp_path):
        """Test corrupted database backup"""
        db_path = tmp_path / "corrupted.db"
        db_path.write_text("corrupted data")

        db = ResilientDB(db_path, Mock(), lambda _m: None)
        db._backup_corrupted_db()

        backup_files = list((tmp_path / "backups").glob("corrupted_corrupted_*.db"))
        assert len(backup_files) == 1
        assert not db_path.exists()

    def test_backup_falls_back_to_delete(self, tmp_path):
        """If the damaged file cannot be moved it is removed"""
        db_path = tmp_path / "corrupted.db"
        db_path.write_text("corrupted")
        messages = []

        db = ResilientDB(db_path, Mock(), messages.append)
        with patch("shutil.move", side_effect=OSError("Move failed")):
            db._backup_corrupted_db()

        assert not db_path.exists()
        assert "Removed damaged database file." in messages

    def test_permission_error_becomes_runtime_error(self, tmp_path):
        db = ResilientDB(tmp_path / "test.db", Mock(), lambda _m: None)

        with patch.object(db, "_attempt_connection", side_effect=PermissionError("denied")):
            with pytest.raises(RuntimeError, match="permission"):
                db.connect()

    def test_connect_with_retry_success(self, tmp_path):
        """Test successful connection with retry"""
        db = ResilientDB(tmp_path / "test.db", Mock())

        with patch.object(db, "_attempt_connection") as mock_attempt:
            mock_connection = Mock()
            mock_attempt.return_value = mock_connection

            result = db.connect_with_retry()

            assert result == mock_connection
            mock_attempt.assert_called_once()

    def test_connect_with_retry_with_failures(self, tmp_path):
        """Test connection retry with multiple failures"""
        feedback = []
        db = ResilientDB(tmp_path / "test.db", Mock(), feedback.append)

        with patch.object(db, "_attempt_connection") as mock_attempt:
            mock_connection = Mock()
            mock_attempt.side_effect = [
                sqlite3.OperationalError("disk I/O error"),
                sqlite3.OperationalError("disk I/O error"),
                mock_connection,
            ]

            result = db.connect_with_retry()

            assert result == mock_connection
            assert mock_attempt.call_count == 3
            assert len(feedback) == 2

    def test_connect_with_retry_max_attempts_exceeded(self, tmp_path):
        """Database errors are re-raised after the last attempt"""
        db = ResilientDB(tmp_path / "test.db", Mock(), lambda _m: None)

        with patch.object(db, "_attempt_connection") as mock_attempt:
            mock_attempt.side_effect = sqlite3.DatabaseError("Persistent failure")

            with pytest.raises(sqlite3.DatabaseError):
                db.connect_with_retry(retries=3)

            assert mock_attempt.call_count == 3

    def test_connect_with_retry_os_errors_become_runtime_error(self, tmp_path):
        db = ResilientDB(tmp_path / "test.db", Mock(), lambda _m: None)

        with patch.object(db, "_attempt_connection", side_effect=OSError("disk gone")):
            with pytest.raises(RuntimeError) as excinfo:
                db.connect_with_retry(retries=2)

        assert isinstance(excinfo.value.__cause__, OSError)


@pytest.mark.integration
class TestResilientDBIntegration:
    """Integration tests for ResilientDB"""

    @staticmethod
    def _schema(conn):
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS recovery_test (
                id INTEGER PRIMARY KEY,
                data TEXT
            )
            """
        )

    def test_real_database_operations(self, tmp_path):
        """Test with real SQLite database operations"""
        db = ResilientDB(tmp_path / "integration.db", self._schema)

        conn = db.connect_with_retry()
        try:
            tables = [row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")]
        finally:
            conn.close()

        assert "recovery_test" in tables

    def test_corruption_recovery_workflow(self, tmp_path):
        """Test complete corruption recovery workflow"""
        db_path = tmp_path / "corruption_test.db"
        db = ResilientDB(db_path, self._schema, lambda _m: None)

        conn1 = db.connect_with_retry()
        conn1.execute("INSERT INTO recovery_test (data) VALUES (?)", ("test data",))
        conn1.close()

        db_path.write_bytes(b"corrupted database content" * 10)

        conn2 = db.connect_with_retry()
        try:
            tables = [row[0] for row in conn2.execute("SELECT name FROM sqlite_master WHERE type='table'")]
        finally:
            conn2.close()

        assert "recovery_test" in tables
        assert list((tmp_path / "backups").glob("corruption_test_corrupted_*.db"))
