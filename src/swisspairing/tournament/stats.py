"""Participant statistics and Sonneborn-Berger tie-break calculation.

This module applies recorded match outcomes to participant records and
computes the Sonneborn-Berger tie-break used for ranking.
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

from collections import defaultdict
from typing import Dict, FrozenSet, List

from swisspairing.constants import WIN_SCORE
from swisspairing.models import Match, MatchResult, Participant, Tournament
from swisspairing.utils import setup_logger

logger = setup_logger(__name__)


def _decided_meetings(tournament: Tournament, match: Match) -> int:
    """Decided matches between the two players of ``match``, including it."""
    meetings = 0
    seen_self = False
    for other in tournament.get_matches_between(match.player1_id, match.player2_id):
        if other is match:
            seen_self = True
        if other.is_decided:
            meetings += 1
    if not seen_self:
        meetings += 1
    return meetings


def _record_meeting(player: Participant, opponent: Participant, meetings: int) -> None:
    # One history entry per decided meeting; applying a meeting twice is a no-op
    if player.meetings_with(opponent.id) < meetings:
        player.opponent_ids.append(opponent.id)


def update_participant_stats(tournament: Tournament, match: Match) -> None:
    """Apply a decided match to both players' records.

    Does nothing for an unplayed match, an empty player slot, or an id that
    does not resolve to a participant of ``tournament``.

    Args:
        tournament: Tournament owning the participants
        match: Match whose result has just been set
    """
    if not match.is_decided or match.player1_id is None or match.player2_id is None:
        return

    player1 = tournament.get_participant(match.player1_id)
    player2 = tournament.get_participant(match.player2_id)

    if player1 is None or player2 is None:
        logger.debug(
            "Skipping stats for match %s: unknown participant(s) %s / %s",
            match.id,
            match.player1_id,
            match.player2_id,
        )
        return

    meetings = _decided_meetings(tournament, match)
    _record_meeting(player1, player2, meetings)
    _record_meeting(player2, player1, meetings)

    if match.result is MatchResult.PLAYER1_WIN:
        player1.wins += 1
        player1.points += WIN_SCORE
        player2.losses += 1
    elif match.result is MatchResult.PLAYER2_WIN:
        player2.wins += 1
        player2.points += WIN_SCORE
        player1.losses += 1
    elif match.result is MatchResult.BOTH_LOSS:
        player1.losses += 1
        player2.losses += 1

    logger.debug(
        "Recorded round %d: %s vs %s -> %s",
        match.round_number,
        player1.name,
        player2.name,
        match.result.display,
    )


def calculate_sonneborn_berger(tournament: Tournament) -> None:
    """Recompute Sonneborn-Berger for every participant from scratch.

    For each participant, every opponent in their history contributes that
    opponent's current points if the participant won the corresponding
    meeting. The k-th history entry for an opponent is matched to the k-th
    decided match between the two, oldest first. Idempotent.

    Args:
        tournament: Tournament whose participants are updated in place
    """
    meetings: Dict[FrozenSet[str], List[Match]] = defaultdict(list)
    for match in tournament.matches:
        if match.is_decided and match.player1_id and match.player2_id:
            meetings[frozenset((match.player1_id, match.player2_id))].append(match)

    for participant in tournament.participants:
        sb_score = 0.0
        occurrence: Dict[str, int] = defaultdict(int)

        for opponent_id in participant.opponent_ids:
            index = occurrence[opponent_id]
            occurrence[opponent_id] += 1

            opponent = tournament.get_participant(opponent_id)
            if opponent is None:
                continue

            played = meetings.get(frozenset((participant.id, opponent_id)), [])
            if index < len(played) and played[index].winner_id() == participant.id:
                sb_score += opponent.points

        participant.sonneborn_berger = sb_score
