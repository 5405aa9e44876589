from conftest import holds

from vibecoin.engine.battles import BattleStats
from vibecoin.leaderboards import (
    build_battle_leaderboard, build_hand_leaderboard, format_rank, get_medal,
    get_rank_change, leaderboard_frame,
)


def test_rank_change():
    assert get_rank_change(3) == ("new", 0)
    assert get_rank_change(2, 5) == ("up", 3)
    assert get_rank_change(5, 2) == ("down", 3)
    assert get_rank_change(4, 4) == ("same", 0)


def test_format_rank():
    assert [format_rank(n) for n in (1, 2, 3, 4, 11, 12, 13, 21, 22, 101, 111)] == \
        ["1st", "2nd", "3rd", "4th", "11th", "12th", "13th", "21st", "22nd", "101st", "111th"]


def test_medals():
    assert get_medal(1) == "🥇"
    assert get_medal(3) == "🥉"
    assert get_medal(4) is None


def test_hand_leaderboard_order_and_moves():
    portfolios = {
        "0xbob": holds("JS JH 3C"),
        "0xalice": holds("AS 9S 7S 4S 2S"),
        "0xdave": [],
        "0xcarol": holds("QS QH 3C"),
    }
    board = build_hand_leaderboard(portfolios,
                                   previous_ranks={"0xalice": 3, "0xbob": 1, "0xcarol": 2},
                                   current_user="0xcarol")
    assert [e.address for e in board] == ["0xalice", "0xcarol", "0xbob", "0xdave"]
    assert [e.rank for e in board] == [1, 2, 3, 4]
    assert (board[0].direction, board[0].change) == ("up", 2)
    assert (board[1].direction, board[1].change) == ("same", 0)
    assert (board[2].direction, board[2].change) == ("down", 2)
    assert board[3].direction == "new"
    assert board[1].is_current_user
    assert board[0].hand_name == "Flush"
    assert board[0].medal == "🥇"
    assert board[3].hand_type == "no-hand"


def test_hand_leaderboard_ties_break_on_address():
    board = build_hand_leaderboard({"0xb": holds("KS KH"), "0xa": holds("KC KD")})
    assert [e.address for e in board] == ["0xa", "0xb"]


def test_empty_leaderboards():
    assert build_hand_leaderboard({}) == []
    assert build_battle_leaderboard({}) == []
    assert leaderboard_frame([]).empty


def test_battle_leaderboard():
    stats = {
        "0xa": BattleStats(elo=1300, wins=4, losses=1, win_rate=80.0),
        "0xb": BattleStats(elo=1450, wins=2),
        "0xc": BattleStats(elo=1300, wins=9),
    }
    board = build_battle_leaderboard(stats)
    assert [e.address for e in board] == ["0xb", "0xc", "0xa"]
    assert board[0].battle_rank == "Gold"
    assert board[2].win_rate == 80.0


def test_leaderboard_frame_indexed_by_rank():
    board = build_hand_leaderboard({"0xa": holds("AS KS QS JS 10S"), "0xb": holds("2S")})
    frame = leaderboard_frame(board)
    assert list(frame.index) == [1, 2]
    assert frame.loc[1, "hand_name"] == "Royal Flush"
    assert frame.loc[2, "strength"] == 10
