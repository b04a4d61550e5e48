"""Summarise bot behaviour across game run logs."""

import re
import sys
from collections import Counter
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
LOGS_DIR = PROJECT_ROOT / "data" / "logs"

DECISION_RE = re.compile(r"DECISION: (OBSERVE|MOVE)(?: \| heading=(\w))?(?: \| reason=(\w+))?")
REPLAN_RE = re.compile(r"REPLAN: \w -> \w \(backtrack_allowed=(True|False), attempts=(\d+)\)")
UNREACHABLE_RE = re.compile(r"UNREACHABLE: (\w+)")
GAME_OVER_RE = re.compile(r"Game over after (\d+) turns: (\w+)")


def analyze_log(filepath: Path) -> dict | None:
    """Count bot decisions and the game result in a single run log.

    Returns None if the log has no bot decisions.
    """
    counts: Counter[str] = Counter()
    relaxed_searches = 0
    turns = 0
    status = "unfinished"

    with open(filepath, errors="replace") as f:
        for line in f:
            m = DECISION_RE.search(line)
            if m:
                counts[m.group(1)] += 1
                if m.group(3):
                    counts[m.group(3)] += 1
                continue

            m = REPLAN_RE.search(line)
            if m:
                counts["replans"] += 1
                if int(m.group(2)) >= 100:
                    relaxed_searches += 1
                continue

            m = UNREACHABLE_RE.search(line)
            if m:
                counts["unreachable"] += 1
                continue

            m = GAME_OVER_RE.search(line)
            if m:
                turns = int(m.group(1))
                status = m.group(2)

    if counts["OBSERVE"] + counts["MOVE"] == 0:
        return None

    return {
        "file": filepath.name,
        "status": status,
        "turns": turns,
        "observe": counts["OBSERVE"],
        "move": counts["MOVE"],
        "pursuing": counts["pursuing"],
        "replans": counts["replans"],
        "relaxed": relaxed_searches,
        "unreachable": counts["unreachable"],
    }


def main():
    logs_dir = LOGS_DIR
    if len(sys.argv) > 1:
        logs_dir = Path(sys.argv[1])

    if not logs_dir.is_dir():
        print(f"Logs directory not found: {logs_dir}", file=sys.stderr)
        sys.exit(1)

    log_files = sorted(logs_dir.glob("*.log"))
    if not log_files:
        print(f"No log files found in {logs_dir}", file=sys.stderr)
        sys.exit(1)

    rows = []
    skipped = 0
    for lf in log_files:
        result = analyze_log(lf)
        if result is None:
            skipped += 1
            continue
        rows.append(result)

    print(f"Analyzed {len(rows)} runs ({skipped} logs skipped)\n")

    print("| Run | Result | Turns | Looks | Moves | Pursuing | Replans | Relaxed | Unreachable |")
    print("|-----|--------|------:|------:|------:|---------:|--------:|--------:|------------:|")
    for r in rows:
        print(f"| {r['file']} | {r['status']} | {r['turns']} | {r['observe']} | {r['move']} "
              f"| {r['pursuing']} | {r['replans']} | {r['relaxed']} | {r['unreachable']} |")


if __name__ == "__main__":
    main()
