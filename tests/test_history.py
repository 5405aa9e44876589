from vibecoin.engine.history import ArenaHistory


def build_history():
    history = ArenaHistory(address="0xalice")
    history.add_battle_start("b-1", "0xbob", "hand-battle")
    history.add_battle_result("b-1", "0xbob", "win", elo_before=1200, elo_change=16,
                              points_earned=25, achievements=["Hot Streak"])
    history.add_battle_result("b-2", "0xbob", "loss", elo_before=1216, elo_change=-16,
                              points_earned=5, wager_won=-10)
    history.add_challenge("c-1", "sent", "0xbob", "card-duel")
    history.add_tournament("t-1", "enrolled", "Weekly")
    history.add_tournament("t-1", "withdrawn", "Weekly")
    return history


def test_summary():
    summary = build_history().to_dict()["summary"]
    assert summary["battles"] == 2
    assert summary["wins"] == 1
    assert summary["losses"] == 1
    assert summary["net_elo"] == 0
    assert summary["points_earned"] == 30
    assert summary["challenges"] == 1
    assert summary["tournaments_entered"] == 1


def test_events_are_sequenced():
    history = build_history()
    assert [e.timestamp for e in history.events] == list(range(6))


def test_optional_fields_only_when_present():
    history = build_history()
    first, second = [e for e in history.events if e.event_type == "battle_result"]
    assert first.data["achievements"] == ["Hot Streak"]
    assert "wager_won" not in first.data
    assert second.data["wager_won"] == -10


def test_trim_keeps_newest_battles():
    history = build_history()
    history.trim_battles(1)
    assert [e.battle_id for e in history.recent_battles()] == ["b-2"]
    # The dropped battle takes its start event with it; other events survive
    assert not any(e.event_type == "battle_start" for e in history.events)
    assert len(history.events) == 4


def test_trim_keeps_unfinished_battle_start():
    history = build_history()
    history.add_battle_start("b-3", "0xcarol", "card-duel")
    history.trim_battles(1)
    starts = [e.battle_id for e in history.events if e.event_type == "battle_start"]
    assert starts == ["b-3"]


def test_max_events_drops_oldest():
    history = ArenaHistory(address="0xalice", max_events=3)
    for i in range(10):
        history.add_matchmaking("joined", 1200 + i)
    assert len(history.events) == 3
    assert [e.data["elo"] for e in history.events] == [1207, 1208, 1209]
    assert history.events[-1].timestamp == 9


def test_load_applies_max_events():
    data = build_history().to_dict()
    loaded = ArenaHistory.from_dict(data, max_events=2)
    assert [e.event_type for e in loaded.events] == ["tournament", "tournament"]
    loaded.add_challenge("c-2", "sent", "0xbob")
    assert len(loaded.events) == 2
    assert loaded.events[-1].timestamp == 6


def test_save_and_load(tmp_path):
    history = build_history()
    path = tmp_path / "logs" / "alice.json"
    history.save(str(path))

    loaded = ArenaHistory.load(str(path))
    assert loaded.metadata["address"] == "0xalice"
    assert loaded.events == history.events
    loaded.add_matchmaking("joined", 1200)
    assert loaded.events[-1].timestamp == 6
