"""Storage gateway tests

Statements run against a real SQLite file; store errors must come back
classified rather than raised.
"""

import pytest

from members_api.app.core.db import Outcome, StorageGateway, get_cursor, init_db


class TestGatewayReads:
    """Statements that return rows"""

    @pytest.mark.asyncio
    async def test_rows_are_plain_dicts(self, gateway, seeded_db):
        result = await gateway.execute(
            "SELECT id, name, email, joined_date FROM members WHERE email = ?",
            ("bob@example.com",),
        )

        assert result.succeeded
        assert result.rows == [
            {"id": 2, "name": "Bob Smith", "email": "bob@example.com", "joined_date": "2024-02-20"}
        ]

    @pytest.mark.asyncio
    async def test_empty_result(self, gateway):
        result = await gateway.execute("SELECT * FROM members")

        assert result.outcome is Outcome.OK
        assert result.rows == []


class TestGatewayWrites:
    """Statements that modify rows"""

    @pytest.mark.asyncio
    async def test_insert_reports_id_and_count(self, gateway):
        result = await gateway.execute(
            "INSERT INTO members (name, email, joined_date) VALUES (?, ?, ?)",
            ("Dana", "dana@example.com", "2024-05-01"),
        )

        assert result.succeeded
        assert result.rows_affected == 1
        assert result.inserted_id == 1

    @pytest.mark.asyncio
    async def test_write_is_committed(self, gateway, db_path):
        await gateway.execute(
            "INSERT INTO members (name, email, joined_date) VALUES (?, ?, ?)",
            ("Dana", "dana@example.com", "2024-05-01"),
        )

        with get_cursor(db_path) as cur:
            row = cur.execute("SELECT name FROM members").fetchone()
        assert row["name"] == "Dana"

    @pytest.mark.asyncio
    async def test_update_without_match_affects_nothing(self, gateway):
        result = await gateway.execute("UPDATE members SET name = ? WHERE id = ?", ("X", 42))

        assert result.succeeded
        assert result.rows_affected == 0


class TestGatewayErrors:
    """Store failures are classified, never raised"""

    @pytest.mark.asyncio
    async def test_duplicate_email_is_unique_violation(self, gateway, seeded_db):
        result = await gateway.execute(
            "INSERT INTO members (name, email, joined_date) VALUES (?, ?, ?)",
            ("Other Alice", "alice@example.com", "2024-05-01"),
        )

        assert result.outcome is Outcome.UNIQUE_VIOLATION
        assert not result.succeeded
        assert "UNIQUE" in result.error

    @pytest.mark.asyncio
    async def test_not_null_violation_is_generic_error(self, gateway):
        result = await gateway.execute(
            "INSERT INTO members (name, email, joined_date) VALUES (?, ?, ?)",
            (None, "nobody@example.com", "2024-05-01"),
        )

        assert result.outcome is Outcome.ERROR

    @pytest.mark.asyncio
    async def test_missing_table_is_generic_error(self, tmp_path):
        gateway = StorageGateway(str(tmp_path / "empty.db"))

        result = await gateway.execute("SELECT * FROM members")

        assert result.outcome is Outcome.ERROR
        assert result.rows == []

    @pytest.mark.asyncio
    async def test_unopenable_database_is_generic_error(self, tmp_path):
        gateway = StorageGateway(str(tmp_path / "no-such-dir" / "members.db"))

        result = await gateway.execute("SELECT 1")

        assert result.outcome is Outcome.ERROR


class TestMigrations:
    """Schema provisioning"""

    def test_init_db_is_idempotent(self, db_path):
        init_db(db_path)

        with get_cursor(db_path) as cur:
            versions = [row["version"] for row in cur.execute("SELECT version FROM migrations ORDER BY version")]
        assert versions == [1, 2]

    def test_ids_are_not_reused(self, db_path):
        with get_cursor(db_path) as cur:
            cur.execute("INSERT INTO members (name, email, joined_date) VALUES ('A', 'a@x.io', '2024-01-01')")
            cur.execute("DELETE FROM members")
            cur.execute("INSERT INTO members (name, email, joined_date) VALUES ('B', 'b@x.io', '2024-01-01')")
            row = cur.execute("SELECT id FROM members").fetchone()
        assert row["id"] == 2
