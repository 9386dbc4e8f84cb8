from swisspairing.models import Match, MatchResult
from swisspairing.tournament import (
    build_tournament,
    calculate_sonneborn_berger,
    update_participant_stats,
)


def _play(tournament, round_number, player1, player2, result):
    match = Match(
        round_number=round_number,
        match_number=1,
        player1_id=player1.id,
        player2_id=player2.id,
        result=result,
    )
    tournament.add_matches([match])
    update_participant_stats(tournament, match)
    return match


def test_player1_win_updates_both_records():
    tournament = build_tournament("Stats", ["A", "B"])
    a, b = tournament.participants

    _play(tournament, 1, a, b, MatchResult.PLAYER1_WIN)

    assert (a.wins, a.losses, a.points) == (1, 0, 1)
    assert (b.wins, b.losses, b.points) == (0, 1, 0)
    assert a.opponent_ids == [b.id]
    assert b.opponent_ids == [a.id]


def test_player2_win_updates_both_records():
    tournament = build_tournament("Stats", ["A", "B"])
    a, b = tournament.participants

    _play(tournament, 1, a, b, MatchResult.PLAYER2_WIN)

    assert (a.wins, a.losses, a.points) == (0, 1, 0)
    assert (b.wins, b.losses, b.points) == (1, 0, 1)


def test_both_loss_gives_each_player_a_loss_and_no_points():
    tournament = build_tournament("Stats", ["A", "B"])
    a, b = tournament.participants

    _play(tournament, 1, a, b, MatchResult.BOTH_LOSS)

    assert (a.wins, a.losses, a.points) == (0, 1, 0)
    assert (b.wins, b.losses, b.points) == (0, 1, 0)
    assert a.has_played(b.id)
    assert b.has_played(a.id)


def test_unplayed_match_changes_nothing():
    tournament = build_tournament("Stats", ["A", "B"])
    a, b = tournament.participants

    _play(tournament, 1, a, b, MatchResult.NOT_PLAYED)

    assert a.games_played == 0
    assert b.games_played == 0
    assert a.opponent_ids == []


def test_unknown_participant_is_ignored():
    tournament = build_tournament("Stats", ["A", "B"])
    a, _ = tournament.participants
    match = Match(
        round_number=1,
        match_number=1,
        player1_id=a.id,
        player2_id="participant_missing",
        result=MatchResult.PLAYER1_WIN,
    )

    update_participant_stats(tournament, match)

    assert a.games_played == 0


def test_rematch_adds_second_history_entry():
    tournament = build_tournament("Stats", ["A", "B"])
    a, b = tournament.participants

    _play(tournament, 1, a, b, MatchResult.PLAYER1_WIN)
    _play(tournament, 2, b, a, MatchResult.PLAYER1_WIN)

    assert a.opponent_ids == [b.id, b.id]
    assert b.meetings_with(a.id) == 2


def test_sonneborn_berger_sums_points_of_defeated_opponents():
    tournament = build_tournament("SB", ["A", "B", "C", "D"])
    a, b, c, d = tournament.participants

    _play(tournament, 1, a, b, MatchResult.PLAYER1_WIN)
    _play(tournament, 1, c, d, MatchResult.PLAYER1_WIN)
    _play(tournament, 2, a, c, MatchResult.PLAYER1_WIN)
    _play(tournament, 2, b, d, MatchResult.PLAYER1_WIN)
    calculate_sonneborn_berger(tournament)

    # Points: A 2, B 1, C 1, D 0
    assert a.sonneborn_berger == 2.0
    assert b.sonneborn_berger == 0.0
    assert c.sonneborn_berger == 0.0
    assert d.sonneborn_berger == 0.0


def test_sonneborn_berger_ignores_both_loss():
    tournament = build_tournament("SB", ["A", "B", "C", "D"])
    a, b, c, d = tournament.participants

    _play(tournament, 1, a, b, MatchResult.BOTH_LOSS)
    _play(tournament, 1, c, d, MatchResult.PLAYER1_WIN)
    _play(tournament, 2, a, c, MatchResult.BOTH_LOSS)
    calculate_sonneborn_berger(tournament)

    assert a.sonneborn_berger == 0.0
    assert c.sonneborn_berger == 0.0


def test_sonneborn_berger_matches_each_rematch_to_its_own_result():
    tournament = build_tournament("SB", ["A", "B"])
    a, b = tournament.participants

    _play(tournament, 1, a, b, MatchResult.PLAYER1_WIN)
    _play(tournament, 2, a, b, MatchResult.PLAYER2_WIN)
    calculate_sonneborn_berger(tournament)

    # Each won one of the two meetings against a one-point opponent
    assert a.sonneborn_berger == 1.0
    assert b.sonneborn_berger == 1.0


def test_sonneborn_berger_is_idempotent():
    tournament = build_tournament("SB", ["A", "B", "C", "D"])
    a, b, c, d = tournament.participants
    _play(tournament, 1, a, b, MatchResult.PLAYER1_WIN)
    _play(tournament, 1, c, d, MatchResult.PLAYER2_WIN)
    _play(tournament, 2, a, d, MatchResult.PLAYER1_WIN)

    calculate_sonneborn_berger(tournament)
    first = [p.sonneborn_berger for p in tournament.participants]
    calculate_sonneborn_berger(tournament)

    assert [p.sonneborn_berger for p in tournament.participants] == first
    assert first[0] == 1.0
