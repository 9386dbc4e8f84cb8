"""Match data class."""

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

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from swisspairing.type_hints import MatchId, ParticipantId
from .match_result import MatchResult
from swisspairing.utils import generate_id


@dataclass
class Match:
    """A single pairing within a round.

    Attributes
    ----------
    round_number : int
        Round the match belongs to (1-indexed).
    match_number : int
        Board number within the round, starting at 1.
    player1_id, player2_id : str or None
        Participant identifiers.
    result : MatchResult
        NOT_PLAYED until a result is recorded.
    note : str or None
        Free-text remark from the tournament director.
    completed_at : datetime or None
        Set when the result leaves NOT_PLAYED.
    """

    round_number: int
    match_number: int
    player1_id: Optional[ParticipantId] = None
    player2_id: Optional[ParticipantId] = None
    result: MatchResult = MatchResult.NOT_PLAYED
    note: Optional[str] = None
    completed_at: Optional[datetime] = None
    id: MatchId = field(default_factory=lambda: generate_id("Match"))

    @property
    def is_decided(self) -> bool:
        return self.result.is_decided

    def is_between(self, first_id: ParticipantId, second_id: ParticipantId) -> bool:
        """True if this match pairs the two participants, in either order."""
        return {self.player1_id, self.player2_id} == {first_id, second_id}

    def winner_id(self) -> Optional[ParticipantId]:
        """Identifier of the winner, or None for unplayed and both-loss."""
        if self.result is MatchResult.PLAYER1_WIN:
            return self.player1_id
        if self.result is MatchResult.PLAYER2_WIN:
            return self.player2_id
        return None
