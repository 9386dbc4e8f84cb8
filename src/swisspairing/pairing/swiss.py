"""Swiss Pairing System Implementation.

Greedy, tie-break aware Swiss pairing: the field is ranked fresh on every
call and paired top-down, each player taking the highest-ranked unpaired
opponent they have not met yet. When nobody fresh is left for a player, the
next unpaired participant is taken anyway (a forced rematch). This is
first-fit by rank, not a rematch-minimizing matching.
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

from typing import Iterable, List, Optional

from swisspairing.constants import MAX_PARTICIPANTS
from swisspairing.exceptions import ParticipantCountException, TournamentStateException
from swisspairing.models import Match, Participant, Tournament
from swisspairing.utils import setup_logger
from swisspairing.utils.validation import is_power_of_two

logger = setup_logger(__name__)

__all__ = [
    "calculate_rounds",
    "is_power_of_two",
    "rank_participants",
    "generate_pairings",
]


def calculate_rounds(participant_count: int) -> int:
    """Number of Swiss rounds for a field of ``participant_count``.

    A single participant is accepted here and yields zero rounds; creating
    a tournament additionally requires at least two participants.

    Args:
        participant_count: Power of two, at most 256

    Returns:
        log2(participant_count)

    Raises:
        ParticipantCountException: If the count is not a power of two or out of range
    """
    if isinstance(participant_count, bool) or not isinstance(participant_count, int):
        raise ParticipantCountException(
            f"Participant count must be an integer, got {participant_count!r}"
        )
    if not is_power_of_two(participant_count) or participant_count > MAX_PARTICIPANTS:
        raise ParticipantCountException(
            f"Participant count must be a power of two between 1 and "
            f"{MAX_PARTICIPANTS}, got {participant_count}"
        )
    return participant_count.bit_length() - 1


def _ranking_key(participant: Participant) -> tuple:
    return (
        -participant.points,
        -participant.sonneborn_berger,
        participant.display_order,
    )


def rank_participants(participants: Iterable[Participant]) -> List[Participant]:
    """Sort active participants by points, Sonneborn-Berger, display order."""
    return sorted((p for p in participants if p.is_active), key=_ranking_key)


def _find_fresh_opponent(
    player: Participant, candidates: List[Participant]
) -> Optional[Participant]:
    """First candidate, in rank order, that ``player`` has not met."""
    for candidate in candidates:
        if not player.has_played(candidate.id):
            return candidate
    return None


def generate_pairings(tournament: Tournament, round_number: int) -> List[Match]:
    """Create the matches of ``round_number`` from the current standings.

    The returned matches are not added to the tournament.

    Args:
        tournament: Tournament state; only read
        round_number: Round being paired (1-indexed)

    Returns:
        Matches numbered from 1 in pairing order

    Raises:
        TournamentStateException: If the number of active participants is odd
    """
    ranked = rank_participants(tournament.participants)

    if len(ranked) % 2 != 0:
        raise TournamentStateException(
            f"Cannot pair round {round_number}: {len(ranked)} active participants, "
            "Swiss pairing needs an even number"
        )

    logger.debug(
        "Pairing round %d for %d active participants", round_number, len(ranked)
    )

    matches: List[Match] = []
    unpaired = list(ranked)
    match_number = 1

    while len(unpaired) >= 2:
        player1 = unpaired.pop(0)
        player2 = _find_fresh_opponent(player1, unpaired)

        if player2 is None:
            player2 = unpaired[0]
            logger.debug(
                "Round %d: no fresh opponent left for %s, forced rematch with %s",
                round_number,
                player1.name,
                player2.name,
            )

        unpaired.remove(player2)
        matches.append(
            Match(
                round_number=round_number,
                match_number=match_number,
                player1_id=player1.id,
                player2_id=player2.id,
            )
        )
        match_number += 1

    return matches
