"""Command-line interface for the rematch simulator.

Runs Monte Carlo rematch simulations from the shell, either as a one-shot
``simulate`` command or from an interactive prompt with autocomplete.
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

import argparse
import json
import logging
import queue
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import NestedCompleter, WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style

from swisspairing import APP_NAME, APP_VERSION
from swisspairing.constants import REPORT_FILE_EXTENSION
from swisspairing.exceptions import (
    InvalidConfigurationException,
    SimulationCancelledException,
    SwissPairingException,
)
from swisspairing.models import SimulationConfig, SimulationResult
from swisspairing.simulation.engine import TournamentSimulator
from swisspairing.utils import set_log_level, setup_logger

logger = setup_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130

# Seconds between checks of the progress queue while a run is going
POLL_INTERVAL = 0.1


# ANSI color codes for terminal output
class Colors:
    OKBLUE = "\033[94m"
    OKCYAN = "\033[96m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


# Command definitions with their options
COMMANDS = {
    "simulate": {
        "description": "Simulate Swiss tournaments and count rematches",
        "options": {
            "--players": "Number of participants, a power of two (default: 8)",
            "--names": "Comma separated participant names (overrides --players)",
            "--iterations": "Number of simulated tournaments (default: 1000)",
            "--p1": "Player1 win probability",
            "--p2": "Player2 win probability",
            "--both-loss": "Both-loss probability",
            "--seed": "Random seed for reproducibility",
            "--workers": "Worker threads (default: 1)",
            "--output": "Write a JSON report to this path",
            "--config": "Load settings from a JSON file",
            "--top": "Number of rematch pairs to list (default: 10)",
            "--verbose": "Enable verbose logging",
        },
    },
    "help": {"description": "Show help for a command", "options": {}},
    "exit": {"description": "Exit the interactive mode", "options": {}},
}


# ========== Configuration ==========


def load_configuration(config_file: Optional[str]) -> Optional[Dict[str, Any]]:
    """Load simulation settings from a JSON file.

    Args:
        config_file: Path to configuration file

    Returns:
        Configuration dictionary or None if no file was given

    Raises:
        InvalidConfigurationException: If the file is missing or not a JSON object
    """
    if not config_file:
        return None

    config_path = Path(config_file)
    if not config_path.exists():
        raise InvalidConfigurationException(
            f"Configuration file not found: {config_file}"
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidConfigurationException(
            f"Failed to load configuration {config_file}: {e}"
        ) from e

    if not isinstance(data, dict):
        raise InvalidConfigurationException(
            f"Configuration {config_file} must contain a JSON object"
        )

    logger.info("Loaded configuration from: %s", config_file)
    return data


def build_participant_names(
    players: Optional[int], names: Optional[str], file_names: Optional[List[str]]
) -> List[str]:
    """Participant names from --names, the config file, or numbered players."""
    if names:
        return [name.strip() for name in names.split(",") if name.strip()]
    if file_names:
        return [str(name) for name in file_names]
    count = players if players is not None else 8
    return [f"Player{i}" for i in range(1, count + 1)]


def build_config(args: argparse.Namespace) -> tuple:
    """Merge defaults, the JSON config file and explicit flags.

    Returns:
        (SimulationConfig, participant names)
    """
    file_settings = load_configuration(getattr(args, "config", None)) or {}
    file_names = file_settings.pop("participants", None)
    config = SimulationConfig.from_dict(file_settings)

    overrides = {
        "iterations": args.iterations,
        "player1_win_probability": args.p1,
        "player2_win_probability": args.p2,
        "both_loss_probability": args.both_loss,
        "seed": args.seed,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)

    names = build_participant_names(args.players, args.names, file_names)
    return config, names


# ========== Running ==========


def run_with_progress(
    simulator: TournamentSimulator,
    names: List[str],
    workers: int = 1,
    show_progress: bool = True,
) -> SimulationResult:
    """Run a simulation in the background, drawing progress as it arrives.

    Ctrl-C sets the cancellation event; the run then stops at the next
    trial boundary and SimulationCancelledException propagates.
    """
    cancel_event = threading.Event()
    updates: queue.Queue = queue.Queue(maxsize=100)
    total = simulator.config.iterations

    with ThreadPoolExecutor(max_workers=1) as executor:
        future = executor.submit(
            simulator.run,
            names,
            cancel_event=cancel_event,
            progress_queue=updates,
            workers=workers,
        )
        try:
            while not future.done():
                try:
                    completed = updates.get(timeout=POLL_INTERVAL)
                except queue.Empty:
                    continue
                if show_progress:
                    _print_progress(completed, total)
        except KeyboardInterrupt:
            cancel_event.set()
            print(f"\n{Colors.WARNING}Cancelling simulation...{Colors.ENDC}")

        result = future.result()

    if show_progress:
        _print_progress(total, total)
        print()
    return result


def _print_progress(completed: int, total: int) -> None:
    percent = completed / total * 100 if total else 100.0
    bar_width = 40
    filled = int(bar_width * completed / total) if total else bar_width
    bar = "#" * filled + "-" * (bar_width - filled)
    print(f"\r[{bar}] {completed}/{total} ({percent:5.1f}%)", end="", flush=True)


def write_report(
    result: SimulationResult,
    config: SimulationConfig,
    names: List[str],
    output_path: Path,
) -> Path:
    """Write the simulation result and its settings as JSON."""
    if output_path.suffix != REPORT_FILE_EXTENSION:
        output_path = output_path.with_suffix(REPORT_FILE_EXTENSION)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    report = {
        "generator": f"{APP_NAME} {APP_VERSION}",
        "configuration": config.to_dict(),
        "participants": names,
        "result": result.to_dict(),
    }
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)

    logger.info("Report written to %s", output_path)
    return output_path


def print_summary(result: SimulationResult, top: int = 10) -> None:
    """Print simulation summary to console.

    Args:
        result: Aggregated simulation result
        top: Number of most frequent rematch pairs to list
    """
    print("\n" + "=" * 70)
    print("SWISS REMATCH SIMULATION SUMMARY")
    print("=" * 70)

    print(f"\nSimulated Tournaments: {result.total_iterations}")
    print(
        f"  With Rematches: {result.rematch_occurrences} "
        f"({result.rematch_probability*100:.1f}%)"
    )
    print(f"  Average Rematches: {result.average_rematch_count:.3f}")
    print(f"  Maximum Rematches: {result.max_rematch_count}")

    print("\nRematch Count Distribution:")
    for count, trials in sorted(result.rematch_count_distribution.items()):
        share = trials / result.total_iterations * 100 if result.total_iterations else 0
        print(f"  {count:3d} rematches: {trials:7d} ({share:5.1f}%)")

    if result.rematches_by_round:
        print("\nRematches by Round:")
        for round_number, tally in sorted(result.rematches_by_round.items()):
            print(f"  Round {round_number:2d}: {tally}")

    pairs = result.most_frequent_pairs(top)
    if pairs:
        print(f"\nMost Frequent Rematch Pairs (top {len(pairs)}):")
        for pair, trials in pairs:
            print(f"  {pair:40} {trials}")

    print("\n" + "=" * 70 + "\n")


def run_simulate_command(args: argparse.Namespace) -> int:
    """Run the simulate command.

    Returns:
        Exit code
    """
    if getattr(args, "verbose", False):
        set_log_level(logging.DEBUG)

    config, names = build_config(args)
    simulator = TournamentSimulator(config)

    try:
        result = run_with_progress(
            simulator,
            names,
            workers=args.workers,
            show_progress=not args.quiet,
        )
    except SimulationCancelledException as e:
        logger.warning("%s", e)
        return EXIT_INTERRUPTED

    print_summary(result, top=args.top)

    if args.output:
        path = write_report(result, config, names, Path(args.output))
        print(f"Full report saved to: {path}\n")

    return EXIT_OK


# ========== Parsers ==========


def _add_simulate_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--players", type=int, help="Number of participants (default: 8)"
    )
    parser.add_argument("--names", help="Comma separated participant names")
    parser.add_argument(
        "--iterations", type=int, help="Number of simulated tournaments (default: 1000)"
    )
    parser.add_argument("--p1", type=float, help="Player1 win probability")
    parser.add_argument("--p2", type=float, help="Player2 win probability")
    parser.add_argument("--both-loss", type=float, help="Both-loss probability")
    parser.add_argument("--seed", type=int, help="Random seed for reproducibility")
    parser.add_argument(
        "--workers", type=int, default=1, help="Worker threads (default: 1)"
    )
    parser.add_argument("--output", help="Write a JSON report to this path")
    parser.add_argument("--config", help="Load settings from a JSON file")
    parser.add_argument(
        "--top", type=int, default=10, help="Rematch pairs to list (default: 10)"
    )
    parser.add_argument("--quiet", action="store_true", help="Hide the progress bar")
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Enable verbose logging",
    )


def create_simulate_parser() -> argparse.ArgumentParser:
    """Create parser for the simulate command in interactive mode."""
    parser = argparse.ArgumentParser(
        prog="simulate", description="Simulate Swiss tournaments and count rematches"
    )
    _add_simulate_arguments(parser)
    return parser


def create_main_parser() -> argparse.ArgumentParser:
    """Create main argument parser.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="swiss-sim",
        description="Estimate how often Swiss pairing forces rematches",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive mode
  swiss-sim

  # 16 players, 5000 tournaments
  swiss-sim simulate --players 16 --iterations 5000

  # 10% both-loss, remaining split evenly
  swiss-sim simulate --p1 0.45 --p2 0.45 --both-loss 0.1 --seed 42

  # Use configuration file and write a report
  swiss-sim simulate --config simulation.json --output report.json
        """,
    )
    parser.add_argument(
        "--interactive", "-i", action="store_true", help="Start in interactive mode"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument(
        "--version", action="version", version=f"{APP_NAME} {APP_VERSION}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    sim_parser = subparsers.add_parser(
        "simulate", help="Simulate tournaments and count rematches"
    )
    _add_simulate_arguments(sim_parser)
    sim_parser.set_defaults(func=run_simulate_command)

    return parser


# ========== Interactive Mode ==========


def print_banner() -> None:
    """Print the application banner."""
    print(f"\n{Colors.OKBLUE}{Colors.BOLD}{APP_NAME} {APP_VERSION} - rematch simulator{Colors.ENDC}")
    print(f"Type {Colors.BOLD}help{Colors.ENDC} to see all available commands")
    print(f"Type {Colors.BOLD}exit{Colors.ENDC} or {Colors.BOLD}quit{Colors.ENDC} to leave\n")


def print_commands_list() -> None:
    """Print list of all available commands."""
    print(f"\n{Colors.BOLD}Available Commands:{Colors.ENDC}\n")
    for cmd, info in COMMANDS.items():
        print(f"  {Colors.OKGREEN}{cmd:15}{Colors.ENDC} - {info['description']}")
    print()


def print_command_help(command: str) -> None:
    """Show usage and flags of one interactive command."""
    info = COMMANDS.get(command)
    if info is None:
        print(f"{Colors.FAIL}No such command '{command}'{Colors.ENDC}")
        print_commands_list()
        return

    lines = [
        "",
        f"{Colors.OKBLUE}{Colors.BOLD}{command}{Colors.ENDC}: {info['description']}",
    ]
    if info["options"]:
        lines.append("")
        lines.extend(
            f"    {Colors.OKCYAN}{flag:<14}{Colors.ENDC}{text}"
            for flag, text in sorted(info["options"].items())
        )
    else:
        lines.append("    (no options)")
    print("\n".join(lines) + "\n")


def create_completer() -> NestedCompleter:
    """Create autocomplete completer for interactive mode."""
    completions: Dict[str, Any] = {}
    for cmd, info in COMMANDS.items():
        completions[cmd] = (
            WordCompleter(list(info["options"].keys())) if info["options"] else None
        )
    completions["help"] = WordCompleter(list(COMMANDS.keys()))
    completions["quit"] = None
    return NestedCompleter.from_nested_dict(completions)


def handle_interactive_command(user_input: str) -> bool:
    """Execute one line typed in interactive mode.

    Returns:
        False when the user asked to leave, True otherwise
    """
    parts = user_input.split()
    if not parts:
        return True

    command, args_list = parts[0].lstrip("/"), parts[1:]

    if command in ("exit", "quit", "q"):
        return False

    if command in ("help", "?"):
        if args_list:
            print_command_help(args_list[0].lstrip("/"))
        else:
            print_commands_list()
        return True

    if command != "simulate":
        print(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}")
        print(f"Type {Colors.BOLD}help{Colors.ENDC} to see available commands")
        return True

    try:
        args = create_simulate_parser().parse_args(args_list)
        run_simulate_command(args)
    except SystemExit:
        # argparse calls sys.exit on error
        pass
    except SwissPairingException as e:
        print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
    return True


def run_interactive_mode() -> int:
    """Run in interactive mode with autocomplete."""
    print_banner()

    session = PromptSession(
        completer=create_completer(),
        history=InMemoryHistory(),
        style=Style.from_dict({"prompt": "#00aa00 bold"}),
    )

    while True:
        try:
            user_input = session.prompt("swiss-sim> ").strip()
        except KeyboardInterrupt:
            print(f"{Colors.WARNING}Use 'exit' or 'quit' to leave{Colors.ENDC}")
            continue
        except EOFError:
            break

        if not handle_interactive_command(user_input):
            break

    print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
    return EXIT_OK


# ========== Entry Point ==========


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the swiss-sim CLI.

    Returns:
        Exit code
    """
    argv = sys.argv[1:] if argv is None else argv
    parser = create_main_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        set_log_level(logging.DEBUG)

    if not argv or args.interactive:
        return run_interactive_mode()

    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_OK

    try:
        return args.func(args)
    except KeyboardInterrupt:
        logger.info("Simulation interrupted by user")
        return EXIT_INTERRUPTED
    except SwissPairingException as e:
        logger.error("Simulation failed: %s", e)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
