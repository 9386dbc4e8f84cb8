import pytest

from swisspairing.exceptions import (
    ParticipantCountException,
    ProbabilityValidationException,
    ValidationException,
)
from swisspairing.utils.validation import (
    ValidationResult,
    is_power_of_two,
    validate_iterations,
    validate_participant_count,
    validate_participant_count_strict,
    validate_participant_names,
    validate_participant_names_strict,
    validate_probabilities,
    validate_probabilities_strict,
)


def test_validation_result_truthiness():
    assert ValidationResult(True, sanitized_value=4)
    assert not ValidationResult(False, "nope")


@pytest.mark.parametrize("n", [1, 2, 4, 128, 1024])
def test_powers_of_two(n):
    assert is_power_of_two(n)


@pytest.mark.parametrize("n", [0, -4, 3, 5, 6, 7, 255])
def test_not_powers_of_two(n):
    assert not is_power_of_two(n)


@pytest.mark.parametrize("count", [2, 4, 16, 256])
def test_valid_participant_counts(count):
    result = validate_participant_count(count)

    assert result.is_valid
    assert result.sanitized_value == count


@pytest.mark.parametrize("count", [0, 1, 3, 12, 512, False, 4.0])
def test_invalid_participant_counts(count):
    result = validate_participant_count(count)

    assert not result.is_valid
    assert result.error_message
    with pytest.raises(ParticipantCountException):
        validate_participant_count_strict(count)


def test_participant_names_are_stripped():
    result = validate_participant_names([" Ann", "Ben ", "Cy", "Di"])

    assert result.sanitized_value == ["Ann", "Ben", "Cy", "Di"]


def test_participant_names_reject_plain_string():
    assert not validate_participant_names("ABCD")
    with pytest.raises(ValidationException):
        validate_participant_names_strict("ABCD")


def test_participant_names_wrong_count_raises_count_error():
    with pytest.raises(ParticipantCountException):
        validate_participant_names_strict(["A", "B", "C"])


@pytest.mark.parametrize(
    "iterations, valid",
    [(1, True), (1000, True), (0, False), (-5, False), (2.5, False)],
)
def test_iterations(iterations, valid):
    assert bool(validate_iterations(iterations)) is valid


def test_probabilities_within_tolerance():
    result = validate_probabilities(0.33333, 0.33333, 0.33334)

    assert result.is_valid
    assert result.sanitized_value == (0.33333, 0.33333, 0.33334)


def test_probabilities_accept_integers():
    assert validate_probabilities(1, 0, 0)


@pytest.mark.parametrize(
    "values",
    [
        (0.5, 0.5, 0.1),
        (0.4, 0.4, 0.1),
        (1.2, -0.2, 0.0),
        (float("nan"), 0.5, 0.5),
        ("0.5", 0.25, 0.25),
        (True, 0.0, 0.0),
    ],
)
def test_invalid_probabilities(values):
    assert not validate_probabilities(*values)
    with pytest.raises(ProbabilityValidationException):
        validate_probabilities_strict(*values)


def test_blank_participant_name_rejected():
    result = validate_participant_names(["Ann", "   "])

    assert not result
    assert "blank" in result.error_message
    with pytest.raises(ValidationException) as excinfo:
        validate_participant_names_strict(["Ann", ""])
    assert not isinstance(excinfo.value, ParticipantCountException)
