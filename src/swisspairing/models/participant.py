"""A participant in a Swiss tournament."""

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
from typing import List

from swisspairing.type_hints import ParticipantId
from swisspairing.utils import generate_id


@dataclass
class Participant:
    """Represents a participant and their running tournament record.

    Attributes
    ----------
    name : str
        Display name.
    display_order : int
        1-based seed assigned at creation in input order. Final tie-break.
    id : str
        Opaque unique identifier.
    is_active : bool
        Inactive participants are skipped by pairing and standings.
    wins : int
        Matches won.
    losses : int
        Matches lost, including both-loss results.
    points : int
        One point per win.
    sonneborn_berger : float
        Sum of current points of every defeated opponent.
    opponent_ids : list of str
        Opponents in the order they were met. A rematch adds a second entry.
    """

    name: str
    display_order: int
    id: ParticipantId = field(default_factory=lambda: generate_id("Participant"))
    is_active: bool = True
    wins: int = 0
    losses: int = 0
    points: int = 0
    sonneborn_berger: float = 0.0
    opponent_ids: List[ParticipantId] = field(default_factory=list)

    @property
    def games_played(self) -> int:
        return self.wins + self.losses

    def has_played(self, opponent_id: ParticipantId) -> bool:
        """Check if this participant has met ``opponent_id`` before."""
        return opponent_id in self.opponent_ids

    def meetings_with(self, opponent_id: ParticipantId) -> int:
        """Number of recorded meetings with ``opponent_id``."""
        return self.opponent_ids.count(opponent_id)
