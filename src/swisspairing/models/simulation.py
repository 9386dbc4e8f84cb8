"""Simulation configuration and result data classes."""

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
from typing import Any, Dict, List, Optional, Tuple

from swisspairing.constants import (
    DEFAULT_BOTH_LOSS_PROBABILITY,
    DEFAULT_ITERATIONS,
    DEFAULT_PLAYER1_WIN_PROBABILITY,
    DEFAULT_PLAYER2_WIN_PROBABILITY,
)
from swisspairing.exceptions import InvalidConfigurationException, ValidationException
from swisspairing.type_hints import PairKey, RematchDistribution, RoundTally
from swisspairing.utils.validation import (
    validate_iterations,
    validate_probabilities,
    validate_probabilities_strict,
)


@dataclass
class SimulationConfig:
    """Simulation settings.

    Attributes
    ----------
    iterations : int
        Number of trials (full simulated tournaments) to run.
    player1_win_probability : float
        Chance that player1 wins a simulated match.
    player2_win_probability : float
        Chance that player2 wins a simulated match.
    both_loss_probability : float
        Chance that both players take a loss.
    seed : int or None
        Seed for the run's random generator. None draws fresh entropy.
    """

    iterations: int = DEFAULT_ITERATIONS
    player1_win_probability: float = DEFAULT_PLAYER1_WIN_PROBABILITY
    player2_win_probability: float = DEFAULT_PLAYER2_WIN_PROBABILITY
    both_loss_probability: float = DEFAULT_BOTH_LOSS_PROBABILITY
    seed: Optional[int] = None

    @classmethod
    def from_both_loss_percent(
        cls, both_loss_percent: float, iterations: int = DEFAULT_ITERATIONS, **kwargs
    ) -> "SimulationConfig":
        """Split the non-both-loss share evenly between the two win outcomes."""
        both_loss = both_loss_percent / 100.0
        win = (1.0 - both_loss) / 2.0
        return cls(
            iterations=iterations,
            player1_win_probability=win,
            player2_win_probability=win,
            both_loss_probability=both_loss,
            **kwargs,
        )

    @property
    def thresholds(self) -> Tuple[float, float]:
        """Cumulative thresholds (p1, p1 + p2) for mapping a uniform draw."""
        p1 = self.player1_win_probability
        return p1, p1 + self.player2_win_probability

    def is_valid(self) -> bool:
        return bool(validate_iterations(self.iterations)) and bool(
            validate_probabilities(
                self.player1_win_probability,
                self.player2_win_probability,
                self.both_loss_probability,
            )
        )

    def validate(self) -> None:
        """Raise ValidationException if the configuration is unusable."""
        result = validate_iterations(self.iterations)
        if not result:
            raise ValidationException(result.error_message)
        validate_probabilities_strict(
            self.player1_win_probability,
            self.player2_win_probability,
            self.both_loss_probability,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "iterations": self.iterations,
            "player1_win_probability": self.player1_win_probability,
            "player2_win_probability": self.player2_win_probability,
            "both_loss_probability": self.both_loss_probability,
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationConfig":
        """Deserialize configuration from dictionary, defaulting missing keys."""
        known = set(cls().to_dict())
        unknown = set(data) - known
        if unknown:
            raise InvalidConfigurationException(
                f"Unknown simulation settings: {', '.join(sorted(unknown))}"
            )
        return cls(
            iterations=data.get("iterations", DEFAULT_ITERATIONS),
            player1_win_probability=data.get(
                "player1_win_probability", DEFAULT_PLAYER1_WIN_PROBABILITY
            ),
            player2_win_probability=data.get(
                "player2_win_probability", DEFAULT_PLAYER2_WIN_PROBABILITY
            ),
            both_loss_probability=data.get(
                "both_loss_probability", DEFAULT_BOTH_LOSS_PROBABILITY
            ),
            seed=data.get("seed"),
        )


@dataclass
class SimulationResult:
    """Aggregate rematch statistics over all trials of a run.

    Attributes
    ----------
    total_iterations : int
        Number of trials run.
    rematch_occurrences : int
        Trials with at least one rematch.
    rematch_count_distribution : dict of int to int
        Rematches in a trial -> number of trials. Values sum to
        ``total_iterations``.
    rematch_pairs : dict of str to int
        "NameA vs NameB" -> number of trials in which that pair met again.
    average_rematch_count : float
        Mean rematches per trial.
    max_rematch_count : int
        Most rematches seen in a single trial.
    rematches_by_round : dict of int to int
        Round number -> rematches in that round summed over all trials.
    """

    total_iterations: int = 0
    rematch_occurrences: int = 0
    rematch_count_distribution: RematchDistribution = field(default_factory=dict)
    rematch_pairs: Dict[PairKey, int] = field(default_factory=dict)
    average_rematch_count: float = 0.0
    max_rematch_count: int = 0
    rematches_by_round: RoundTally = field(default_factory=dict)

    @property
    def rematch_probability(self) -> float:
        """Share of trials with at least one rematch."""
        if self.total_iterations <= 0:
            return 0.0
        return self.rematch_occurrences / self.total_iterations

    def most_frequent_pairs(self, limit: int = 10) -> List[Tuple[PairKey, int]]:
        """Rematch pairs by descending frequency, ties by pair key."""
        ranked = sorted(self.rematch_pairs.items(), key=lambda kv: (-kv[1], kv[0]))
        return ranked[:limit]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "total_iterations": self.total_iterations,
            "rematch_occurrences": self.rematch_occurrences,
            "rematch_probability": self.rematch_probability,
            # JSON object keys must be strings
            "rematch_count_distribution": {
                str(k): v for k, v in sorted(self.rematch_count_distribution.items())
            },
            "rematch_pairs": dict(self.most_frequent_pairs(len(self.rematch_pairs))),
            "average_rematch_count": self.average_rematch_count,
            "max_rematch_count": self.max_rematch_count,
            "rematches_by_round": {
                str(k): v for k, v in sorted(self.rematches_by_round.items())
            },
        }
