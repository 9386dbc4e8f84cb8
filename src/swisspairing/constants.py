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

# --- Constants ---
REPORT_FILE_EXTENSION = ".json"

# Game outcome scores
WIN_SCORE = 1

# Participant count limits (counts must also be a power of two)
MIN_PARTICIPANTS = 2
MAX_PARTICIPANTS = 256

# Simulation defaults
DEFAULT_ITERATIONS = 1000
DEFAULT_PLAYER1_WIN_PROBABILITY = 1.0 / 3.0
DEFAULT_PLAYER2_WIN_PROBABILITY = 1.0 / 3.0
DEFAULT_BOTH_LOSS_PROBABILITY = 1.0 / 3.0
PROBABILITY_TOLERANCE = 1e-4

# Progress is reported every N trials (and on the final trial)
PROGRESS_INTERVAL = 10

# Result display strings
RESULT_NOT_PLAYED = "-"
RESULT_PLAYER1_WIN = "1-0"
RESULT_PLAYER2_WIN = "0-1"
RESULT_BOTH_LOSS = "0-0"

# Rematch pair key separator, e.g. "Alice vs Bob"
PAIR_KEY_SEPARATOR = " vs "

DEFAULT_TOURNAMENT_NAME = "Untitled Tournament"
SIMULATION_TOURNAMENT_NAME = "Simulation"
