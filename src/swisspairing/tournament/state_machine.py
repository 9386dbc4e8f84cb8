"""Tournament round lifecycle.

Create a tournament, start rounds, record results and finish it. Every
operation takes the tournament explicitly; keeping track of which tournament
is "current" belongs to the caller.

States::

    CREATED -> ROUND_IN_PROGRESS -> ROUND_COMPLETE -> ROUND_IN_PROGRESS ...
                                                   -> FINISHED (explicit)
"""

# Swiss Pairing
# Copyright (C) 2025  Swiss Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from enum import Enum
from typing import List, Optional, Sequence

from swisspairing.models import Match, MatchResult, Participant, Tournament
from swisspairing.exceptions import (
    MatchNotFoundException,
    ParticipantNotFoundException,
    TournamentStateException,
)
from swisspairing.pairing.swiss import (
    calculate_rounds,
    generate_pairings,
    rank_participants,
)
from swisspairing.tournament.stats import (
    calculate_sonneborn_berger,
    update_participant_stats,
)
from swisspairing.type_hints import MatchId, ParticipantId
from swisspairing.utils import setup_logger, utc_now
from swisspairing.utils.validation import validate_participant_names_strict

logger = setup_logger(__name__)


class TournamentPhase(Enum):
    """Lifecycle phase of a tournament."""

    CREATED = "created"
    ROUND_IN_PROGRESS = "round_in_progress"
    ROUND_COMPLETE = "round_complete"
    FINISHED = "finished"


def _require(tournament: Optional[Tournament]) -> Tournament:
    if tournament is None:
        raise TournamentStateException("No tournament has been created")
    return tournament


def build_tournament(name: str, participant_names: Sequence[str]) -> Tournament:
    """Build a fresh tournament without logging; shared with the simulator.

    Raises:
        ParticipantCountException: If the name count is not a power of two in [2, 256]
    """
    names = validate_participant_names_strict(participant_names)
    tournament = Tournament(name=name, total_rounds=calculate_rounds(len(names)))
    for order, participant_name in enumerate(names, start=1):
        tournament.add_participant(
            Participant(name=participant_name, display_order=order)
        )
    return tournament


# ========== Lifecycle ==========


def create_tournament(name: str, participant_names: Sequence[str]) -> Tournament:
    """Create a tournament with one participant per name.

    Display order follows input order starting at 1.

    Args:
        name: Tournament name
        participant_names: Ordered names, a power of two between 2 and 256

    Returns:
        New tournament at round 0

    Raises:
        ParticipantCountException: If the number of names is invalid
    """
    tournament = build_tournament(name, participant_names)
    logger.info(
        "Created tournament '%s' with %d participants, %d rounds",
        tournament.name,
        len(tournament.participants),
        tournament.total_rounds,
    )
    return tournament


def start_next_round(tournament: Optional[Tournament]) -> List[Match]:
    """Advance to the next round and pair it.

    Returns:
        The new round's matches, also appended to the tournament

    Raises:
        TournamentStateException: If there is no tournament, every round has
            already been started, or the active field cannot be paired
    """
    tournament = _require(tournament)

    if tournament.current_round >= tournament.total_rounds:
        raise TournamentStateException(
            f"All {tournament.total_rounds} rounds have already been played"
        )

    next_round = tournament.current_round + 1
    matches = generate_pairings(tournament, next_round)

    tournament.current_round = next_round
    tournament.add_matches(matches)

    for match in matches:
        player1 = tournament.get_participant(match.player1_id)
        player2 = tournament.get_participant(match.player2_id)
        if player1.has_played(player2.id):
            logger.warning(
                "Round %d: forced rematch %s vs %s (met %d time(s) before)",
                next_round,
                player1.name,
                player2.name,
                player1.meetings_with(player2.id),
            )

    logger.info(
        "Started round %d of %d: %d matches",
        next_round,
        tournament.total_rounds,
        len(matches),
    )
    return matches


def record_match_result(
    tournament: Optional[Tournament],
    match_id: MatchId,
    result: MatchResult,
    note: Optional[str] = None,
) -> Match:
    """Record the outcome of a match and refresh the standings data.

    Args:
        tournament: Tournament owning the match
        match_id: Identifier of the match
        result: Outcome to record
        note: Optional remark stored on the match

    Returns:
        The updated match

    Raises:
        TournamentStateException: If there is no tournament, ``result`` is
            NOT_PLAYED, or the match already has a result
        MatchNotFoundException: If no match has ``match_id``
    """
    tournament = _require(tournament)

    match = tournament.get_match(match_id)
    if match is None:
        raise MatchNotFoundException(f"Match not found: {match_id}")

    if not isinstance(result, MatchResult) or not result.is_decided:
        raise TournamentStateException(
            f"Cannot record {result!r}: a result must decide the match"
        )

    if match.is_decided:
        raise TournamentStateException(
            f"Result for round {match.round_number} match {match.match_number} "
            f"is already recorded ({match.result.display})"
        )

    match.result = result
    match.completed_at = utc_now()
    if note is not None:
        match.note = note

    update_participant_stats(tournament, match)
    calculate_sonneborn_berger(tournament)

    logger.info(
        "Round %d match %d: %s",
        match.round_number,
        match.match_number,
        result.display,
    )
    return match


# ========== Queries ==========


def is_current_round_complete(tournament: Optional[Tournament]) -> bool:
    """True if every match of the current round has a result."""
    if tournament is None:
        return False
    return all(
        match.is_decided
        for match in tournament.matches
        if match.round_number == tournament.current_round
    )


def is_tournament_complete(tournament: Optional[Tournament]) -> bool:
    """True once the last round has been played to the end."""
    if tournament is None:
        return False
    return (
        tournament.current_round >= tournament.total_rounds
        and is_current_round_complete(tournament)
    )


def get_standings(tournament: Optional[Tournament]) -> List[Participant]:
    """Active participants ranked by points, Sonneborn-Berger, display order."""
    if tournament is None:
        return []
    return rank_participants(tournament.participants)


def get_round_matches(
    tournament: Optional[Tournament], round_number: int
) -> List[Match]:
    """Matches of ``round_number`` in match-number order."""
    return _require(tournament).get_round_matches(round_number)


def get_phase(tournament: Optional[Tournament]) -> TournamentPhase:
    """Current lifecycle phase.

    Raises:
        TournamentStateException: If there is no tournament
    """
    tournament = _require(tournament)
    if tournament.is_complete:
        return TournamentPhase.FINISHED
    if tournament.current_round == 0:
        return TournamentPhase.CREATED
    if is_current_round_complete(tournament):
        return TournamentPhase.ROUND_COMPLETE
    return TournamentPhase.ROUND_IN_PROGRESS


# ========== Mutations ==========


def complete_tournament(tournament: Optional[Tournament]) -> Tournament:
    """Mark the tournament finished.

    Raises:
        TournamentStateException: If rounds remain or the last round is open
    """
    tournament = _require(tournament)
    if not is_tournament_complete(tournament):
        raise TournamentStateException(
            f"Cannot complete tournament: round {tournament.current_round} of "
            f"{tournament.total_rounds} is not finished"
        )
    tournament.is_complete = True
    logger.info("Tournament '%s' completed", tournament.name)
    return tournament


def set_participant_active(
    tournament: Optional[Tournament], participant_id: ParticipantId, is_active: bool
) -> Participant:
    """Activate or deactivate a participant.

    Deactivated participants are left out of pairing and standings but
    keep their record.

    Raises:
        ParticipantNotFoundException: If no participant has ``participant_id``
    """
    tournament = _require(tournament)
    participant = tournament.get_participant(participant_id)
    if participant is None:
        raise ParticipantNotFoundException(f"Participant not found: {participant_id}")

    participant.is_active = is_active
    logger.info("Set %s active status to: %s", participant.name, is_active)
    return participant
