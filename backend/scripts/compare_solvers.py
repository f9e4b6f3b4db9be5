#!/usr/bin/env python3
"""Compare greedy, exhaustive and optimal matching on random rating matrices.

Reports how often greedy falls short of the optimal total and by how much,
and checks that exhaustive search always reaches the optimal total.

Usage:
  python backend/scripts/compare_solvers.py --trials 500 --size 5
"""

import argparse
import json
import random
import sys
from dataclasses import asdict, dataclass, field
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pairing_planner.models.pairing import SolverMethod, total_rating
from pairing_planner.models.roster import MAX_RATING, MIN_RATING, RatingStore
from pairing_planner.services.assignment_service import solve_raw


@dataclass
class SweepResult:
    trials: int = 0
    greedy_suboptimal: int = 0
    greedy_total_gap: int = 0
    greedy_worst_gap: int = 0
    exhaustive_mismatches: int = 0
    gap_histogram: dict[int, int] = field(default_factory=dict)


def random_ratings(players: list[str], opponents: list[str], rng: random.Random) -> RatingStore:
    initial = {
        p: {o: rng.randint(MIN_RATING, MAX_RATING) for o in opponents}
        for p in players
    }
    return RatingStore.for_roster(players, opponents, initial=initial)


def run_sweep(trials: int, size: int, opponents_size: int, seed: int) -> SweepResult:
    rng = random.Random(seed)
    players = [f"P{i + 1}" for i in range(size)]
    opponents = [f"O{i + 1}" for i in range(opponents_size)]
    result = SweepResult()

    for _ in range(trials):
        ratings = random_ratings(players, opponents, rng)
        greedy = total_rating(solve_raw(players, opponents, ratings, SolverMethod.GREEDY))
        exhaustive = total_rating(solve_raw(players, opponents, ratings, SolverMethod.FULL))
        optimal = total_rating(solve_raw(players, opponents, ratings, SolverMethod.OPTIMAL))

        result.trials += 1
        gap = optimal - greedy
        if gap > 0:
            result.greedy_suboptimal += 1
            result.greedy_total_gap += gap
            result.greedy_worst_gap = max(result.greedy_worst_gap, gap)
        result.gap_histogram[gap] = result.gap_histogram.get(gap, 0) + 1
        if exhaustive != optimal:
            result.exhaustive_mismatches += 1

    return result


def main():
    parser = argparse.ArgumentParser(description="Compare assignment solvers on random ratings")
    parser.add_argument("--trials", type=int, default=200, help="Number of random matrices")
    parser.add_argument("--size", type=int, default=5, help="Players per matrix")
    parser.add_argument("--opponents", type=int, default=0, help="Opponents per matrix (default: --size)")
    parser.add_argument("--seed", type=int, default=7, help="Random seed")
    parser.add_argument("--output", type=str, default="", help="Output JSON path")
    args = parser.parse_args()

    opponents_size = args.opponents or args.size
    result = run_sweep(args.trials, args.size, opponents_size, args.seed)

    print(f"Trials: {result.trials} ({args.size} players vs {opponents_size} opponents)")
    share = result.greedy_suboptimal / result.trials * 100 if result.trials else 0.0
    print(f"Greedy below optimal: {result.greedy_suboptimal} ({share:.1f}%)")
    if result.greedy_suboptimal:
        print(f"  Mean gap when worse: {result.greedy_total_gap / result.greedy_suboptimal:.2f}")
        print(f"  Worst gap: {result.greedy_worst_gap}")
    print("Gap histogram:")
    for gap in sorted(result.gap_histogram):
        print(f"  {gap:>3}: {result.gap_histogram[gap]}")
    if result.exhaustive_mismatches:
        print(f"WARNING: exhaustive differed from optimal {result.exhaustive_mismatches} times")
    else:
        print("Exhaustive and optimal totals agree on every trial")

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(asdict(result), f, indent=2)
            f.write("\n")
        print(f"Saved {args.output}")


if __name__ == "__main__":
    main()
