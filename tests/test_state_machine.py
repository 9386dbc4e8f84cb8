import logging

import pytest

from swisspairing.exceptions import (
    MatchNotFoundException,
    ParticipantCountException,
    ParticipantNotFoundException,
    TournamentStateException,
    ValidationException,
)
from swisspairing.models import MatchResult
from swisspairing.tournament import (
    TournamentPhase,
    complete_tournament,
    create_tournament,
    get_phase,
    get_round_matches,
    get_standings,
    is_current_round_complete,
    is_tournament_complete,
    record_match_result,
    set_participant_active,
    start_next_round,
)

NAMES = ["Alice", "Bob", "Carol", "Dave", "Erin", "Frank", "Grace", "Heidi"]


def _play_round(tournament, result=MatchResult.PLAYER1_WIN):
    matches = start_next_round(tournament)
    for match in matches:
        record_match_result(tournament, match.id, result)
    return matches


def test_create_tournament_assigns_display_order():
    tournament = create_tournament("Club Night", NAMES)

    assert tournament.name == "Club Night"
    assert tournament.total_rounds == 3
    assert tournament.current_round == 0
    assert [p.name for p in tournament.participants] == NAMES
    assert [p.display_order for p in tournament.participants] == list(range(1, 9))
    assert len({p.id for p in tournament.participants}) == 8
    assert all(p.points == 0 and p.is_active for p in tournament.participants)


def test_create_tournament_strips_names():
    tournament = create_tournament("Spaces", ["  Ann ", "Ben"])

    assert [p.name for p in tournament.participants] == ["Ann", "Ben"]


@pytest.mark.parametrize("names", [[], ["Solo"], ["A", "B", "C"], ["P"] * 6])
def test_create_tournament_rejects_invalid_counts(names):
    with pytest.raises(ParticipantCountException):
        create_tournament("Bad", names)


def test_create_tournament_rejects_non_string_names():
    with pytest.raises(ValidationException):
        create_tournament("Bad", ["A", 2])


def test_operations_without_tournament():
    with pytest.raises(TournamentStateException):
        start_next_round(None)
    with pytest.raises(TournamentStateException):
        record_match_result(None, "match_x", MatchResult.PLAYER1_WIN)
    with pytest.raises(TournamentStateException):
        get_phase(None)

    assert is_current_round_complete(None) is False
    assert is_tournament_complete(None) is False
    assert get_standings(None) == []


def test_start_next_round_pairs_and_stores_matches():
    tournament = create_tournament("Rounds", NAMES)

    matches = start_next_round(tournament)

    assert tournament.current_round == 1
    assert len(matches) == 4
    assert tournament.matches == matches
    assert get_round_matches(tournament, 1) == matches
    assert not is_current_round_complete(tournament)
    assert get_phase(tournament) is TournamentPhase.ROUND_IN_PROGRESS


def test_cannot_start_more_rounds_than_total():
    tournament = create_tournament("Short", ["A", "B"])
    _play_round(tournament)

    with pytest.raises(TournamentStateException):
        start_next_round(tournament)
    assert tournament.current_round == 1


def test_failed_pairing_leaves_round_counter_unchanged():
    tournament = create_tournament("Odd", ["A", "B", "C", "D"])
    set_participant_active(tournament, tournament.participants[0].id, False)

    with pytest.raises(TournamentStateException):
        start_next_round(tournament)
    assert tournament.current_round == 0
    assert tournament.matches == []


def test_record_match_result_updates_stats():
    tournament = create_tournament("Results", ["A", "B", "C", "D"])
    match = start_next_round(tournament)[0]

    updated = record_match_result(
        tournament, match.id, MatchResult.PLAYER2_WIN, note="Adjudicated"
    )

    winner = tournament.get_participant(match.player2_id)
    loser = tournament.get_participant(match.player1_id)
    assert updated is match
    assert match.result is MatchResult.PLAYER2_WIN
    assert match.note == "Adjudicated"
    assert match.completed_at is not None
    assert (winner.wins, winner.points) == (1, 1)
    assert loser.losses == 1
    assert winner.opponent_ids == [loser.id]


def test_record_unknown_match_raises():
    tournament = create_tournament("Results", ["A", "B"])
    start_next_round(tournament)

    with pytest.raises(MatchNotFoundException):
        record_match_result(tournament, "match_unknown", MatchResult.PLAYER1_WIN)


def test_record_not_played_is_rejected():
    tournament = create_tournament("Results", ["A", "B"])
    match = start_next_round(tournament)[0]

    with pytest.raises(TournamentStateException):
        record_match_result(tournament, match.id, MatchResult.NOT_PLAYED)
    assert not match.is_decided


def test_result_cannot_be_recorded_twice():
    tournament = create_tournament("Results", ["A", "B"])
    match = start_next_round(tournament)[0]
    record_match_result(tournament, match.id, MatchResult.PLAYER1_WIN)

    with pytest.raises(TournamentStateException):
        record_match_result(tournament, match.id, MatchResult.PLAYER2_WIN)

    player1 = tournament.get_participant(match.player1_id)
    assert match.result is MatchResult.PLAYER1_WIN
    assert player1.points == 1
    assert player1.opponent_ids == [match.player2_id]


def test_second_round_avoids_first_round_opponents():
    tournament = create_tournament("Swiss", ["A", "B", "C", "D"])
    first = _play_round(tournament)
    second = start_next_round(tournament)

    first_pairs = {frozenset((m.player1_id, m.player2_id)) for m in first}
    second_pairs = {frozenset((m.player1_id, m.player2_id)) for m in second}
    assert first_pairs.isdisjoint(second_pairs)

    # Round 1 winners meet in round 2
    winners = {m.player1_id for m in first}
    assert {second[0].player1_id, second[0].player2_id} == winners


def test_full_tournament_lifecycle():
    tournament = create_tournament("Full", NAMES)
    assert get_phase(tournament) is TournamentPhase.CREATED

    for round_number in range(1, tournament.total_rounds + 1):
        matches = _play_round(tournament)
        assert tournament.current_round == round_number
        assert is_current_round_complete(tournament)

        seen = [pid for m in matches for pid in (m.player1_id, m.player2_id)]
        assert sorted(seen) == sorted(p.id for p in tournament.participants)

        if round_number < tournament.total_rounds:
            assert get_phase(tournament) is TournamentPhase.ROUND_COMPLETE
            assert not is_tournament_complete(tournament)

    assert is_tournament_complete(tournament)
    complete_tournament(tournament)
    assert tournament.is_complete
    assert get_phase(tournament) is TournamentPhase.FINISHED

    for participant in tournament.participants:
        assert participant.points == participant.wins
        assert participant.games_played == tournament.total_rounds
        assert len(participant.opponent_ids) == tournament.total_rounds

    total_points = sum(p.points for p in tournament.participants)
    assert total_points == len(tournament.matches)


def test_both_loss_awards_no_points():
    tournament = create_tournament("Forfeits", ["A", "B", "C", "D"])
    _play_round(tournament, MatchResult.BOTH_LOSS)

    assert all(p.points == 0 and p.losses == 1 for p in tournament.participants)


def test_complete_tournament_requires_finished_rounds():
    tournament = create_tournament("Early", ["A", "B", "C", "D"])
    _play_round(tournament)

    with pytest.raises(TournamentStateException):
        complete_tournament(tournament)
    assert not tournament.is_complete


def test_standings_rank_by_points():
    tournament = create_tournament("Standings", ["A", "B", "C", "D"])
    _play_round(tournament)
    _play_round(tournament)

    standings = get_standings(tournament)

    points = [p.points for p in standings]
    assert points == sorted(points, reverse=True)
    assert standings[0].points == 2
    assert standings[-1].points == 0


def test_deactivated_participant_leaves_standings():
    tournament = create_tournament("Withdrawal", ["A", "B", "C", "D"])
    target = tournament.participants[2]

    set_participant_active(tournament, target.id, False)

    assert target not in get_standings(tournament)
    assert len(get_standings(tournament)) == 3


def test_set_participant_active_unknown_id():
    tournament = create_tournament("Withdrawal", ["A", "B"])

    with pytest.raises(ParticipantNotFoundException):
        set_participant_active(tournament, "participant_unknown", False)


def test_create_tournament_rejects_blank_names():
    with pytest.raises(ValidationException, match="blank"):
        create_tournament("Blank", ["  Alice ", " "])


def test_start_next_round_warns_about_forced_rematch(caplog):
    tournament = create_tournament("Rematch", ["A", "B", "C", "D"])
    a = tournament.participants[0]
    for other in tournament.participants[1:]:
        a.opponent_ids.append(other.id)
        other.opponent_ids.append(a.id)

    with caplog.at_level(logging.WARNING, logger="swisspairing"):
        start_next_round(tournament)

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "forced rematch A vs B" in warnings[0].getMessage()
