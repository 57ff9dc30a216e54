"""Tests for TeamRepository writes: locking, overlap and exclusive-usage checks."""

from datetime import date

import pytest

from filmops_api.db.repository_team import AssignmentOverlapError
from filmops_api.db.repository_team import ExclusiveUsageConflictError
from filmops_api.db.repository_team import TeamRepository
from filmops_api.scheduling.overlap import InvalidDateRangeError

PAIR_LOCK = "SELECT pg_advisory_xact_lock($1::int, $2::int)"
USER_LOCK = "SELECT pg_advisory_xact_lock($1::bigint)"


def _create(repo, start=date(2025, 4, 1), end=date(2025, 4, 5)):
    return repo.create_assignment(
        project_id=10,
        user_id=4,
        project_role_id=1,
        start_date=start,
        end_date=end,
        notes=None,
    )


class TestCreateAssignment:
    """Tests for TeamRepository.create_assignment."""

    @pytest.mark.asyncio
    async def test_inserts_inside_transaction(self, mock_pool, mock_conn, assignment_row):
        mock_conn.fetchval.return_value = False
        mock_conn.fetchrow.return_value = assignment_row

        result = await _create(TeamRepository(mock_pool))

        assert result == assignment_row
        assert len(mock_conn.transactions) == 1
        assert mock_conn.transactions[0].entered
        assert mock_conn.transactions[0].exited_with is None
        mock_conn.execute.assert_awaited_once_with(PAIR_LOCK, 10, 4)

    @pytest.mark.asyncio
    async def test_exclusive_user_takes_user_lock_first(self, mock_pool, mock_conn, assignment_row):
        mock_conn.fetchval.return_value = True
        mock_conn.fetchrow.return_value = assignment_row

        await _create(TeamRepository(mock_pool))

        locks = [call.args[0] for call in mock_conn.execute.await_args_list]
        assert locks == [USER_LOCK, PAIR_LOCK]
        # overlap scan then exclusive scan
        assert mock_conn.fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_overlap_rejected(self, mock_pool, mock_conn):
        mock_conn.fetchval.return_value = False
        mock_conn.fetch.return_value = [
            {"id": 98, "start_date": date(2025, 3, 1), "end_date": date(2025, 3, 31)},
            {"id": 99, "start_date": date(2025, 4, 5), "end_date": date(2025, 4, 10)},
        ]

        with pytest.raises(AssignmentOverlapError) as exc_info:
            await _create(TeamRepository(mock_pool))

        assert exc_info.value.overlapping_ids == [99]
        mock_conn.fetchrow.assert_not_awaited()
        assert mock_conn.transactions[0].exited_with is AssignmentOverlapError

    @pytest.mark.asyncio
    async def test_adjacent_range_accepted(self, mock_pool, mock_conn, assignment_row):
        mock_conn.fetchval.return_value = False
        mock_conn.fetch.return_value = [{"id": 99, "start_date": date(2025, 4, 6), "end_date": date(2025, 4, 10)}]
        mock_conn.fetchrow.return_value = assignment_row

        result = await _create(TeamRepository(mock_pool))

        assert result["id"] == 100

    @pytest.mark.asyncio
    async def test_exclusive_conflict_rejected(self, mock_pool, mock_conn):
        mock_conn.fetchval.return_value = True
        mock_conn.fetch.side_effect = [
            [],
            [
                {
                    "id": 5,
                    "project_id": 12,
                    "project_name": "Night exteriors",
                    "role_name": "Gaffer",
                    "start_date": date(2025, 4, 3),
                    "end_date": date(2025, 4, 9),
                }
            ],
        ]

        with pytest.raises(ExclusiveUsageConflictError) as exc_info:
            await _create(TeamRepository(mock_pool))

        assert "Night exteriors" in str(exc_info.value)
        mock_conn.fetchrow.assert_not_awaited()
        # own project excluded from the conflict scan
        assert mock_conn.fetch.await_args_list[1].args[1:] == (4, date(2025, 4, 1), date(2025, 4, 5), 10)

    @pytest.mark.asyncio
    async def test_reversed_range_never_touches_database(self, mock_pool, mock_conn):
        with pytest.raises(InvalidDateRangeError):
            await _create(TeamRepository(mock_pool), start=date(2025, 4, 5), end=date(2025, 4, 1))

        mock_pool.acquire.assert_not_called()


class TestUpdateAssignment:
    """Tests for TeamRepository.update_assignment."""

    @pytest.mark.asyncio
    async def test_excludes_itself_from_overlap(self, mock_pool, mock_conn, assignment_row):
        mock_conn.fetchval.return_value = False
        mock_conn.fetchrow.side_effect = [{"id": 100, "user_id": 4}, assignment_row]

        result = await TeamRepository(mock_pool).update_assignment(
            project_id=10,
            assignment_id=100,
            project_role_id=1,
            start_date=date(2025, 4, 1),
            end_date=date(2025, 4, 5),
        )

        assert result == assignment_row
        assert mock_conn.fetch.await_args.args[1:] == (10, 4, 100)
        mock_conn.execute.assert_awaited_once_with(PAIR_LOCK, 10, 4)

    @pytest.mark.asyncio
    async def test_missing_assignment(self, mock_pool, mock_conn):
        mock_conn.fetchrow.return_value = None

        result = await TeamRepository(mock_pool).update_assignment(
            project_id=10,
            assignment_id=404,
            project_role_id=1,
            start_date=date(2025, 4, 1),
            end_date=date(2025, 4, 5),
        )

        assert result is None
        mock_conn.execute.assert_not_awaited()


class TestReads:
    @pytest.mark.asyncio
    async def test_list_in_range_passes_project_filter(self, mock_pool, mock_conn):
        await TeamRepository(mock_pool).list_in_range(date(2025, 4, 1), date(2025, 4, 30), (10, 12))

        assert mock_conn.fetch.await_args.args[1:] == (date(2025, 4, 1), date(2025, 4, 30), [10, 12], None, None)

    @pytest.mark.asyncio
    async def test_list_in_range_user_and_role_filters(self, mock_pool, mock_conn):
        await TeamRepository(mock_pool).list_in_range(date(2025, 4, 1), date(2025, 4, 30), user_id=4, role_name="DIT")

        query, *args = mock_conn.fetch.await_args.args
        assert "pr.name = $5" in query
        assert args == [date(2025, 4, 1), date(2025, 4, 30), None, 4, "DIT"]

    @pytest.mark.asyncio
    async def test_list_in_range_unfiltered(self, mock_pool, mock_conn):
        await TeamRepository(mock_pool).list_in_range(date(2025, 4, 1), date(2025, 4, 30))

        assert mock_conn.fetch.await_args.args[3] is None

    @pytest.mark.asyncio
    async def test_assigned_project_ids(self, mock_pool, mock_conn):
        mock_conn.fetch.return_value = [{"project_id": 10}, {"project_id": 12}]

        assert await TeamRepository(mock_pool).get_assigned_project_ids(4) == [10, 12]
