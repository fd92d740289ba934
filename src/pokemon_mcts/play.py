# play.py

import sys
from dataclasses import dataclass

from joblib import Parallel, cpu_count, delayed
from tqdm import tqdm

from pokemon_mcts.agents import BaseAgent
from pokemon_mcts.executor import TimeoutExceeded, WorkerFailure
from pokemon_mcts.loguru_logger import logger
from pokemon_mcts.transition import Transition
from pokemon_mcts.views import StateView

FATAL_REASONS = ("timeout", "failure")


@dataclass(frozen=True, slots=True)
class MatchResult:
    """
    Outcome of a match.

    winner is None for a draw or an unfinished match. forfeit is the side that
    lost by failing to act (timeout, worker failure, or no legal action).
    """

    winner: int | None
    turns: int
    reason: str = "over"
    forfeit: int | None = None

    @property
    def fatal(self) -> bool:
        """True when the match was stopped by a timeout or a worker failure."""
        return self.reason in FATAL_REASONS


def winner_of(state: StateView) -> int | None:
    """The only side whose active fighter is standing, else None."""
    standing = []
    for side in (0, 1):
        team = state.team_view(side)
        if not team.pokemon_at(team.active_index).has_fainted:
            standing.append(side)
    return standing[0] if len(standing) == 1 else None


def play(
    state: StateView,
    agent_0: BaseAgent,
    agent_1: BaseAgent,
    first_side: int = 0,
    max_turns: int = 200,
    verbose: bool = False,
    transition: Transition | None = None,
) -> MatchResult:
    """Main game loop. Sides act in turn, starting with `first_side`."""

    agents = (agent_0, agent_1)
    transition = transition if transition is not None else Transition()

    if verbose:
        logger.info(f"Starting a new battle between {agent_0.name} and {agent_1.name}")

    side = first_side
    turns = 0
    while not state.is_over() and turns < max_turns:
        try:
            action = agents[side].get_action(state, side, verbose=verbose)
        except TimeoutExceeded:
            logger.error(f"Team [{side + 1}] forfeits: decision timed out.")
            return MatchResult(1 - side, turns, reason="timeout", forfeit=side)
        except WorkerFailure:
            logger.error(f"Team [{side + 1}] forfeits: decision worker failed.")
            return MatchResult(1 - side, turns, reason="failure", forfeit=side)

        if action is None:
            logger.warning(f"Team [{side + 1}] has no legal action and loses.")
            return MatchResult(1 - side, turns, reason="no_action", forfeit=side)

        if verbose:
            logger.info(f"{agents[side].name} (side {side}) plays {action}")

        state = transition.apply(state, side, action)
        side = 1 - side
        turns += 1

    if not state.is_over():
        return MatchResult(None, turns, reason="max_turns")
    return MatchResult(winner_of(state), turns)


def exit_on_forfeit(result: MatchResult):
    """Terminate the process with a non-zero status after a fatal forfeit."""
    if result.fatal:
        logger.error(
            f"Team [{result.forfeit + 1}] loses by forfeit ({result.reason})."
        )
        logger.complete()
        sys.exit(1)


def play_multiple(
    state: StateView,
    agent_0: BaseAgent,
    agent_1: BaseAgent,
    n_battles=1,
    n_jobs=-1,
    verbose=False,
) -> tuple[int, int, int]:
    """Play multiple battles in parallel using joblib.
    Sides alternate who moves first from one battle to the next.
    """

    if n_jobs == -1:
        n_jobs = cpu_count()

    def _run(i):
        return play(state, agent_0, agent_1, first_side=i % 2)

    parallel_gen = Parallel(n_jobs=n_jobs, prefer="processes", return_as="generator")(
        delayed(_run)(i) for i in range(n_battles)
    )

    results = []

    with tqdm(total=n_battles, disable=not verbose) as pbar:
        for result in parallel_gen:
            results.append(result)
            pbar.update(1)

    agent_0_wins = sum(1 for r in results if r.winner == 0)
    agent_1_wins = sum(1 for r in results if r.winner == 1)
    draws = sum(1 for r in results if r.winner is None)

    return agent_0_wins, draws, agent_1_wins
