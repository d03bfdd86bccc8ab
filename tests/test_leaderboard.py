"""Level calculation and leaderboard ranking tests."""
import pytest

from helpers import insert_raw
from trivia.services.leaderboard_service import calculate_level, get_leaderboard


class TestLevel:
    @pytest.mark.parametrize(
        "xp,expected",
        [(0, 0), (99, 0), (100, 1), (150, 1), (999, 9), (1000, 10), (1099, 10), (100000, 10)],
    )
    def test_level_boundaries(self, xp, expected):
        assert calculate_level(xp) == expected

    def test_level_matches_formula(self):
        for xp in range(0, 2500, 7):
            assert calculate_level(xp) == min(xp // 100, 10)


class TestLeaderboard:
    async def test_ranks_by_xp_descending(self, store):
        for name, xp in [("a", 50), ("b", 200), ("c", 200), ("d", 10)]:
            await insert_raw(store, name, xp=xp)

        board = await get_leaderboard(store)
        assert [e.rank for e in board] == [1, 2, 3, 4]
        assert [e.xp for e in board] == [200, 200, 50, 10]
        # 同分按创建顺序（id 升序）
        assert [e.username for e in board] == ["b", "c", "a", "d"]
        assert [e.level for e in board] == [2, 2, 0, 0]

    async def test_truncated_to_100(self, store):
        for i in range(105):
            await insert_raw(store, f"user{i:03d}", xp=i)

        board = await get_leaderboard(store)
        assert len(board) == 100
        assert board[0].username == "user104"
        assert board[-1].rank == 100
        assert [e.rank for e in board] == list(range(1, 101))

    async def test_empty(self, store):
        assert await get_leaderboard(store) == []
