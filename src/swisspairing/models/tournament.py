"""Tournament state: participants, matches and round counters."""

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
from typing import Dict, Iterable, List, Optional

from swisspairing.constants import DEFAULT_TOURNAMENT_NAME
from swisspairing.type_hints import MatchId, ParticipantId
from swisspairing.utils import generate_id, utc_now

from .match import Match
from .participant import Participant


@dataclass
class Tournament:
    """In-memory state of one Swiss tournament.

    Matches and participants refer to each other by identifier only. The
    tournament owns both collections and keeps an id index next to each
    list for constant time lookup.

    Attributes
    ----------
    name : str
        Tournament name.
    total_rounds : int
        log2 of the participant count at creation.
    current_round : int
        0 before the first round starts, at most ``total_rounds``.
    participants : list of Participant
        In display order.
    matches : list of Match
        Every match of every round, in creation order. Never shrinks.
    is_complete : bool
        Set only by an explicit completion request.
    """

    name: str = DEFAULT_TOURNAMENT_NAME
    total_rounds: int = 0
    current_round: int = 0
    participants: List[Participant] = field(default_factory=list)
    matches: List[Match] = field(default_factory=list)
    is_complete: bool = False
    id: str = field(default_factory=lambda: generate_id("Tournament"))
    created_at: datetime = field(default_factory=utc_now)

    _participant_index: Dict[ParticipantId, Participant] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _match_index: Dict[MatchId, Match] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self._reindex()

    def _reindex(self) -> None:
        self._participant_index = {p.id: p for p in self.participants}
        self._match_index = {m.id: m for m in self.matches}

    # ========== Participants ==========

    def add_participant(self, participant: Participant) -> None:
        self.participants.append(participant)
        self._participant_index[participant.id] = participant

    def get_participant(
        self, participant_id: Optional[ParticipantId]
    ) -> Optional[Participant]:
        """Look up a participant by id, or None if unknown."""
        if participant_id is None:
            return None
        participant = self._participant_index.get(participant_id)
        if participant is None and len(self._participant_index) != len(
            self.participants
        ):
            # Participants list was modified directly
            self._reindex()
            participant = self._participant_index.get(participant_id)
        return participant

    # ========== Matches ==========

    def add_matches(self, matches: Iterable[Match]) -> None:
        for match in matches:
            self.matches.append(match)
            self._match_index[match.id] = match

    def get_match(self, match_id: MatchId) -> Optional[Match]:
        """Look up a match by id, or None if unknown."""
        match = self._match_index.get(match_id)
        if match is None and len(self._match_index) != len(self.matches):
            self._reindex()
            match = self._match_index.get(match_id)
        return match

    def get_round_matches(self, round_number: int) -> List[Match]:
        """Matches of one round, ordered by match number."""
        return sorted(
            (m for m in self.matches if m.round_number == round_number),
            key=lambda m: m.match_number,
        )

    def get_matches_between(
        self, first_id: ParticipantId, second_id: ParticipantId
    ) -> List[Match]:
        """All matches pairing the two participants, oldest first."""
        return [m for m in self.matches if m.is_between(first_id, second_id)]
