"""Monte Carlo rematch simulation.

Plays many complete Swiss tournaments with random results and measures how
often the greedy pairing is forced to pair two participants a second time.
Each trial builds its own tournament, so trials share no state; the run
owns its random generator, which makes a seeded run reproducible.
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

import queue
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from swisspairing.constants import (
    PAIR_KEY_SEPARATOR,
    PROGRESS_INTERVAL,
    SIMULATION_TOURNAMENT_NAME,
)
from swisspairing.exceptions import SimulationCancelledException
from swisspairing.models import (
    MatchResult,
    SimulationConfig,
    SimulationResult,
    Tournament,
)
from swisspairing.pairing.swiss import generate_pairings
from swisspairing.tournament.state_machine import build_tournament
from swisspairing.tournament.stats import (
    calculate_sonneborn_berger,
    update_participant_stats,
)
from swisspairing.type_hints import (
    PairKey,
    ProgressCallback,
    RematchDistribution,
    RoundTally,
)
from swisspairing.utils import setup_logger
from swisspairing.utils.validation import validate_participant_names_strict

logger = setup_logger(__name__)


def make_pair_key(first_name: str, second_name: str) -> PairKey:
    """Order-independent key for a pairing, e.g. ``"Alice vs Bob"``."""
    low, high = sorted((first_name, second_name))
    return f"{low}{PAIR_KEY_SEPARATOR}{high}"


@dataclass
class TrialRematches:
    """Rematches found in a single simulated tournament."""

    rematch_count: int = 0
    rematch_pairs: List[PairKey] = field(default_factory=list)
    rematches_by_round: RoundTally = field(default_factory=dict)


def detect_rematches(tournament: Tournament) -> TrialRematches:
    """Scan matches round by round and collect every repeated pairing.

    The first meeting of a pair is only remembered; each later meeting
    counts as a rematch in the round where it happened. Pairs are keyed by
    participant name.
    """
    data = TrialRematches()
    seen: Set[PairKey] = set()

    rounds = sorted({m.round_number for m in tournament.matches})
    for round_number in rounds:
        rematches_in_round = 0

        for match in tournament.get_round_matches(round_number):
            player1 = tournament.get_participant(match.player1_id)
            player2 = tournament.get_participant(match.player2_id)
            if player1 is None or player2 is None:
                continue

            key = make_pair_key(player1.name, player2.name)
            if key not in seen:
                seen.add(key)
                continue

            rematches_in_round += 1
            data.rematch_count += 1
            if key not in data.rematch_pairs:
                data.rematch_pairs.append(key)

        data.rematches_by_round[round_number] = rematches_in_round

    return data


def draw_result(rng: random.Random, config: SimulationConfig) -> MatchResult:
    """Pick a match outcome from one uniform draw in [0, 1)."""
    value = rng.random()
    player1_threshold, player2_threshold = config.thresholds
    if value < player1_threshold:
        return MatchResult.PLAYER1_WIN
    if value < player2_threshold:
        return MatchResult.PLAYER2_WIN
    return MatchResult.BOTH_LOSS


def simulate_single_tournament(
    participant_names: Sequence[str],
    config: SimulationConfig,
    rng: random.Random,
) -> TrialRematches:
    """Play one full tournament with random results.

    Sonneborn-Berger is recomputed once per round, after all of its results.
    """
    tournament = build_tournament(SIMULATION_TOURNAMENT_NAME, participant_names)

    for round_number in range(1, tournament.total_rounds + 1):
        matches = generate_pairings(tournament, round_number)
        tournament.current_round = round_number
        tournament.add_matches(matches)

        for match in matches:
            match.result = draw_result(rng, config)
            update_participant_stats(tournament, match)

        calculate_sonneborn_berger(tournament)

    return detect_rematches(tournament)


class RematchAccumulator:
    """Running totals across trials.

    Accumulators of independent batches can be merged, so a run split over
    several workers reduces to the same totals as a sequential one.
    """

    def __init__(self) -> None:
        self.trials = 0
        self.total_rematches = 0
        self.rematch_occurrences = 0
        self.max_rematch_count = 0
        self.distribution: RematchDistribution = {}
        self.rematch_pairs: Dict[PairKey, int] = {}
        self.rematches_by_round: RoundTally = {}

    def add(self, trial: TrialRematches) -> None:
        count = trial.rematch_count
        self.trials += 1
        self.total_rematches += count
        self.max_rematch_count = max(self.max_rematch_count, count)
        self.distribution[count] = self.distribution.get(count, 0) + 1

        if count > 0:
            self.rematch_occurrences += 1
            for key in trial.rematch_pairs:
                self.rematch_pairs[key] = self.rematch_pairs.get(key, 0) + 1

        for round_number, tally in trial.rematches_by_round.items():
            self.rematches_by_round[round_number] = (
                self.rematches_by_round.get(round_number, 0) + tally
            )

    def merge(self, other: "RematchAccumulator") -> None:
        self.trials += other.trials
        self.total_rematches += other.total_rematches
        self.rematch_occurrences += other.rematch_occurrences
        self.max_rematch_count = max(self.max_rematch_count, other.max_rematch_count)
        for target, source in (
            (self.distribution, other.distribution),
            (self.rematch_pairs, other.rematch_pairs),
            (self.rematches_by_round, other.rematches_by_round),
        ):
            for key, value in source.items():
                target[key] = target.get(key, 0) + value

    def to_result(self) -> SimulationResult:
        average = self.total_rematches / self.trials if self.trials > 0 else 0.0
        return SimulationResult(
            total_iterations=self.trials,
            rematch_occurrences=self.rematch_occurrences,
            rematch_count_distribution=dict(sorted(self.distribution.items())),
            rematch_pairs=dict(self.rematch_pairs),
            average_rematch_count=average,
            max_rematch_count=self.max_rematch_count,
            rematches_by_round=dict(sorted(self.rematches_by_round.items())),
        )


class TournamentSimulator:
    """Runs rematch simulations for one configuration.

    Args:
        config: Iterations and outcome probabilities
        rng: Random generator for this simulator. Defaults to one seeded
            from ``config.seed`` (fresh entropy when the seed is None).
    """

    def __init__(
        self, config: SimulationConfig, rng: Optional[random.Random] = None
    ) -> None:
        self.config = config
        if rng is not None:
            self.random = rng
        elif config.seed is not None:
            self.random = random.Random(config.seed)
        else:
            self.random = random.Random()

        self._completed = 0
        self._lock = threading.Lock()
        self._progress: Optional[ProgressCallback] = None
        self._progress_queue: Optional[queue.Queue] = None

    def run(
        self,
        participant_names: Sequence[str],
        progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
        progress_queue: Optional[queue.Queue] = None,
        workers: int = 1,
    ) -> SimulationResult:
        """Run ``config.iterations`` trials and aggregate their rematches.

        Args:
            participant_names: Ordered names, a power of two between 2 and 256
            progress: Called with the number of completed trials every 10th
                trial and after the last one. Must return quickly.
            cancel_event: Checked before every trial; once set the run stops
            progress_queue: Receives the same counts as ``progress`` via
                ``put_nowait``; updates are dropped when the queue is full
            workers: Number of threads to spread the trials over

        Returns:
            Aggregated statistics for all trials

        Raises:
            ValidationException: If the configuration or name list is invalid
            SimulationCancelledException: If ``cancel_event`` was set before
                all trials finished. No partial result is returned.
        """
        self.config.validate()
        names = validate_participant_names_strict(participant_names)
        iterations = self.config.iterations
        workers = max(1, min(workers, iterations))

        self._completed = 0
        self._progress = progress
        self._progress_queue = progress_queue

        logger.info(
            "Starting simulation: %d trials, %d participants, p1=%.3f p2=%.3f both=%.3f",
            iterations,
            len(names),
            self.config.player1_win_probability,
            self.config.player2_win_probability,
            self.config.both_loss_probability,
        )
        started = time.perf_counter()

        if workers == 1:
            accumulator = self._run_batch(names, iterations, self.random, cancel_event)
        else:
            accumulator = self._run_parallel(names, iterations, workers, cancel_event)

        result = accumulator.to_result()
        logger.info(
            "Simulation finished in %.2fs: rematch probability %.2f%%, "
            "average %.3f, max %d",
            time.perf_counter() - started,
            result.rematch_probability * 100,
            result.average_rematch_count,
            result.max_rematch_count,
        )
        return result

    def _run_parallel(
        self,
        names: List[str],
        iterations: int,
        workers: int,
        cancel_event: Optional[threading.Event],
    ) -> RematchAccumulator:
        base, extra = divmod(iterations, workers)
        sizes = [base + (1 if i < extra else 0) for i in range(workers)]
        # Child generators are derived in batch order so seeded runs repeat
        generators = [random.Random(self.random.getrandbits(64)) for _ in sizes]

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self._run_batch, names, size, rng, cancel_event)
                for size, rng in zip(sizes, generators)
            ]
            batches = [future.result() for future in futures]

        total = RematchAccumulator()
        for batch in batches:
            total.merge(batch)
        return total

    def _run_batch(
        self,
        names: List[str],
        trials: int,
        rng: random.Random,
        cancel_event: Optional[threading.Event],
    ) -> RematchAccumulator:
        accumulator = RematchAccumulator()
        for _ in range(trials):
            if cancel_event is not None and cancel_event.is_set():
                logger.info("Simulation cancelled after %d trials", self._completed)
                raise SimulationCancelledException(
                    self._completed, self.config.iterations
                )

            accumulator.add(simulate_single_tournament(names, self.config, rng))
            self._trial_finished()
        return accumulator

    def _trial_finished(self) -> None:
        with self._lock:
            self._completed += 1
            completed = self._completed

        if completed % PROGRESS_INTERVAL == 0 or completed == self.config.iterations:
            self._report_progress(completed)

    def _report_progress(self, completed: int) -> None:
        if self._progress is not None:
            self._progress(completed)

        if self._progress_queue is not None:
            try:
                self._progress_queue.put_nowait(completed)
            except queue.Full:
                logger.warning("Progress queue full, dropped update %d", completed)


def run_simulation(
    participant_names: Sequence[str],
    config: SimulationConfig,
    progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
    rng: Optional[random.Random] = None,
    progress_queue: Optional[queue.Queue] = None,
    workers: int = 1,
) -> SimulationResult:
    """Convenience wrapper around :class:`TournamentSimulator`.

    See :meth:`TournamentSimulator.run` for the arguments.
    """
    simulator = TournamentSimulator(config, rng=rng)
    return simulator.run(
        participant_names,
        progress=progress,
        cancel_event=cancel_event,
        progress_queue=progress_queue,
        workers=workers,
    )
