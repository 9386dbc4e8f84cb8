"""Match result enumeration."""

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

from swisspairing.constants import (
    RESULT_BOTH_LOSS,
    RESULT_NOT_PLAYED,
    RESULT_PLAYER1_WIN,
    RESULT_PLAYER2_WIN,
)


class MatchResult(Enum):
    """Outcome of a single match.

    BOTH_LOSS covers a double forfeit or double disqualification: both
    players take a loss and nobody scores.
    """

    NOT_PLAYED = "not_played"
    PLAYER1_WIN = "player1_win"
    PLAYER2_WIN = "player2_win"
    BOTH_LOSS = "both_loss"

    @property
    def is_decided(self) -> bool:
        return self is not MatchResult.NOT_PLAYED

    @property
    def display(self) -> str:
        """Short score string, e.g. ``1-0``."""
        return _DISPLAY[self]


_DISPLAY = {
    MatchResult.NOT_PLAYED: RESULT_NOT_PLAYED,
    MatchResult.PLAYER1_WIN: RESULT_PLAYER1_WIN,
    MatchResult.PLAYER2_WIN: RESULT_PLAYER2_WIN,
    MatchResult.BOTH_LOSS: RESULT_BOTH_LOSS,
}
