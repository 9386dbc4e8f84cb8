"""Validation utilities for Swiss Pairing.

This module provides reusable validation functions with consistent error handling.
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

import math
from typing import Any, Optional, Sequence

from swisspairing.constants import (
    MAX_PARTICIPANTS,
    MIN_PARTICIPANTS,
    PROBABILITY_TOLERANCE,
)
from swisspairing.exceptions import (
    ParticipantCountException,
    ProbabilityValidationException,
    ValidationException,
)


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        error_message: Human-readable error message if invalid
        sanitized_value: Cleaned/normalized value if valid
    """

    def __init__(
        self,
        is_valid: bool,
        error_message: Optional[str] = None,
        sanitized_value: Any = None,
    ):
        self.is_valid = is_valid
        self.error_message = error_message
        self.sanitized_value = sanitized_value

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return f"ValidationResult(VALID, {self.sanitized_value!r})"
        return f"ValidationResult(INVALID, {self.error_message!r})"


def is_power_of_two(n: int) -> bool:
    """True iff ``n`` is positive and has exactly one bit set."""
    return n > 0 and (n & (n - 1)) == 0


# ========== Participant Count Validation ==========


def validate_participant_count(count: int) -> ValidationResult:
    """Validate a tournament participant count.

    The count must be a power of two between 2 and 256 inclusive.

    Args:
        count: Number of participants

    Returns:
        ValidationResult whose sanitized value is the count

    Example:
        >>> bool(validate_participant_count(8))
        True
        >>> bool(validate_participant_count(6))
        False
    """
    if isinstance(count, bool) or not isinstance(count, int):
        return ValidationResult(
            is_valid=False,
            error_message=f"Participant count must be an integer, got {count!r}",
        )

    if not is_power_of_two(count):
        return ValidationResult(
            is_valid=False,
            error_message=(
                f"Participant count must be a power of two "
                f"(2, 4, 8, ..., {MAX_PARTICIPANTS}), got {count}"
            ),
        )

    if count < MIN_PARTICIPANTS or count > MAX_PARTICIPANTS:
        return ValidationResult(
            is_valid=False,
            error_message=(
                f"Participant count must be between {MIN_PARTICIPANTS} and "
                f"{MAX_PARTICIPANTS}, got {count}"
            ),
        )

    return ValidationResult(is_valid=True, sanitized_value=count)


def validate_participant_count_strict(count: int) -> None:
    """Validate a participant count and raise if invalid.

    Raises:
        ParticipantCountException: If the count is invalid
    """
    result = validate_participant_count(count)
    if not result.is_valid:
        raise ParticipantCountException(result.error_message)


def validate_participant_names(names: Sequence[str]) -> ValidationResult:
    """Validate the ordered name list supplied by registration.

    Names are stripped and must not be blank; the list length must be a
    valid participant count.
    """
    if isinstance(names, str):
        return ValidationResult(
            is_valid=False,
            error_message="Participant names must be a sequence of strings",
        )

    cleaned = []
    for index, name in enumerate(names, start=1):
        if not isinstance(name, str):
            return ValidationResult(
                is_valid=False,
                error_message=f"Participant {index} has a non-string name: {name!r}",
            )
        if not name.strip():
            return ValidationResult(
                is_valid=False,
                error_message=f"Participant {index} has a blank name",
            )
        cleaned.append(name.strip())

    count_result = validate_participant_count(len(cleaned))
    if not count_result:
        return count_result

    return ValidationResult(is_valid=True, sanitized_value=cleaned)


def validate_participant_names_strict(names: Sequence[str]) -> list:
    """Validate participant names and return the cleaned list.

    Raises:
        ParticipantCountException: If the number of names is invalid
        ValidationException: If a name is not a string or is blank
    """
    result = validate_participant_names(names)
    if not result.is_valid:
        if isinstance(names, str) or any(
            not isinstance(n, str) or not n.strip() for n in names
        ):
            raise ValidationException(result.error_message)
        raise ParticipantCountException(result.error_message)
    return result.sanitized_value


# ========== Simulation Validation ==========


def validate_iterations(iterations: int) -> ValidationResult:
    """Validate a simulation iteration count (positive integer)."""
    if isinstance(iterations, bool) or not isinstance(iterations, int):
        return ValidationResult(
            is_valid=False,
            error_message=f"Iterations must be an integer, got {iterations!r}",
        )
    if iterations < 1:
        return ValidationResult(
            is_valid=False,
            error_message=f"Iterations must be at least 1, got {iterations}",
        )
    return ValidationResult(is_valid=True, sanitized_value=iterations)


def validate_probabilities(
    player1_win: float, player2_win: float, both_loss: float
) -> ValidationResult:
    """Validate the three outcome probabilities of a simulated match.

    Each must be a finite number >= 0 and together they must sum to 1.0
    within ``PROBABILITY_TOLERANCE``.
    """
    values = {
        "player1 win": player1_win,
        "player2 win": player2_win,
        "both loss": both_loss,
    }
    for label, value in values.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return ValidationResult(
                is_valid=False,
                error_message=f"{label.capitalize()} probability must be a number",
            )
        if math.isnan(value) or value < 0:
            return ValidationResult(
                is_valid=False,
                error_message=(
                    f"{label.capitalize()} probability must be >= 0, got {value}"
                ),
            )

    total = player1_win + player2_win + both_loss
    if abs(total - 1.0) >= PROBABILITY_TOLERANCE:
        return ValidationResult(
            is_valid=False,
            error_message=f"Outcome probabilities must sum to 1.0, got {total:.6f}",
        )

    return ValidationResult(
        is_valid=True,
        sanitized_value=(float(player1_win), float(player2_win), float(both_loss)),
    )


def validate_probabilities_strict(
    player1_win: float, player2_win: float, both_loss: float
) -> None:
    """Validate outcome probabilities and raise if invalid.

    Raises:
        ProbabilityValidationException: If the probabilities are invalid
    """
    result = validate_probabilities(player1_win, player2_win, both_loss)
    if not result.is_valid:
        raise ProbabilityValidationException(result.error_message)
