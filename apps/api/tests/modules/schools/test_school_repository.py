"""
Unit tests for the school repository.

Rows are ordered by Postgres; the listing tests apply the statement's own
ORDER BY clause to in-memory rows.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.sql import operators

from school_directory.modules.schools.models import School
from school_directory.modules.schools.repository import SchoolRepository


class TestListStatement:
    def test_orders_newest_first(self):
        sql = str(SchoolRepository.list_statement().compile(dialect=postgresql.dialect()))

        assert "FROM schools" in sql
        assert "ORDER BY schools.created_at DESC" in sql


def apply_order_by(stmt, rows):
    """Sort rows the way the statement's ORDER BY clauses would."""
    for clause in reversed(stmt._order_by_clauses):
        rows = sorted(
            rows,
            key=lambda row: getattr(row, clause.element.key),
            reverse=clause.modifier is operators.desc_op,
        )
    return rows


class TestListOrdering:
    def test_latest_insert_listed_first(self):
        start = datetime(2026, 1, 1, tzinfo=UTC)
        a, b, c, r = (
            School(name=name, created_at=start + timedelta(minutes=i))
            for i, name in enumerate(["A", "B", "C", "R"])
        )

        listed = apply_order_by(SchoolRepository.list_statement(), [a, b, c, r])

        assert [s.name for s in listed] == ["R", "C", "B", "A"]

    @pytest.mark.asyncio
    async def test_list_all_executes_ordered_statement(self, mock_db):
        result = MagicMock()
        result.scalars.return_value.all.return_value = []
        mock_db.execute.return_value = result

        await SchoolRepository.list_all(mock_db)

        executed = mock_db.execute.call_args.args[0]
        assert executed.compare(SchoolRepository.list_statement())


class TestCreate:
    @pytest.mark.asyncio
    async def test_adds_and_commits(self, mock_db):
        school = await SchoolRepository.create(
            mock_db,
            name="Green Valley High",
            address="12 Hill Road",
            city="Pune",
            state="Maharashtra",
            contact="9876543210",
            email="office@greenvalley.edu",
            image="/schoolImages/image-1.png",
        )

        assert isinstance(school, School)
        assert school.image == "/schoolImages/image-1.png"
        mock_db.add.assert_called_once_with(school)
        mock_db.commit.assert_called_once()


class TestListAll:
    @pytest.mark.asyncio
    async def test_returns_rows_in_query_order(self, mock_db):
        rows = [School(name="Newer"), School(name="Older")]
        result = MagicMock()
        result.scalars.return_value.all.return_value = rows
        mock_db.execute.return_value = result

        assert await SchoolRepository.list_all(mock_db) == rows
