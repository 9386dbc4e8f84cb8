"""Tournament management for Swiss Pairing.

Round lifecycle operations and the statistics they keep up to date.
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

from swisspairing.tournament.state_machine import (
    TournamentPhase,
    build_tournament,
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
from swisspairing.tournament.stats import (
    calculate_sonneborn_berger,
    update_participant_stats,
)

__all__ = [
    "TournamentPhase",
    "build_tournament",
    "calculate_sonneborn_berger",
    "complete_tournament",
    "create_tournament",
    "get_phase",
    "get_round_matches",
    "get_standings",
    "is_current_round_complete",
    "is_tournament_complete",
    "record_match_result",
    "set_participant_active",
    "start_next_round",
    "update_participant_stats",
]
