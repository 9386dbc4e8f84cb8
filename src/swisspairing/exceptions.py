"""Exceptions for use in Swiss Pairing"""

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


# ========== Base Application Exception ==========


class SwissPairingException(Exception):
    """Base exception for all Swiss Pairing errors.

    All custom exceptions in the application should inherit from this class.
    This enables catching all application-specific errors with a single except clause.
    """

    pass


# ========== Validation Exceptions ==========


class ValidationException(SwissPairingException):
    """Base exception for validation errors.

    Raised before anything is mutated.
    """

    pass


class ParticipantCountException(ValidationException):
    """Raised when a participant count is not a power of two in [2, 256]."""

    pass


class ProbabilityValidationException(ValidationException):
    """Raised when simulation outcome probabilities are invalid."""

    pass


# ========== Tournament Exceptions ==========


class TournamentException(SwissPairingException):
    """Base exception for tournament-related errors."""

    pass


class TournamentStateException(TournamentException):
    """Raised when tournament is in an invalid state for the requested operation."""

    pass


class MatchNotFoundException(TournamentException):
    """Raised when a requested match does not exist."""

    pass


class ParticipantNotFoundException(TournamentException):
    """Raised when a requested participant cannot be found."""

    pass


# ========== Simulation Exceptions ==========


class SimulationException(SwissPairingException):
    """Base exception for simulation errors."""

    pass


class SimulationCancelledException(SimulationException):
    """Raised when a simulation run is cancelled between trials.

    No partial result accompanies this exception.
    """

    def __init__(self, completed_trials: int, total_trials: int) -> None:
        super().__init__(
            f"Simulation cancelled after {completed_trials} of {total_trials} trials"
        )
        self.completed_trials = completed_trials
        self.total_trials = total_trials


# ========== Configuration Exceptions ==========


class ConfigurationException(SwissPairingException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when configuration data is invalid."""

    pass
