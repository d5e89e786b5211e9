"""Error handling patterns with recovery hints.

Only configuration and plan problems stop a run. Per-item failures
(unwritable directories, volumes without sparse-file support) and an
unreachable directory service are absorbed by the workers and show up as
counts in the Summary.
"""

from pathlib import Path

from shareseed import (
    ConfigurationError,
    Engine,
    EngineConfig,
    PlanLoadError,
    ShareseedError,
    load_plan,
)


# Pattern 1: Reject bad configuration before anything is created
def build_engine(batch_size: int) -> Engine | None:
    """Validate configuration up front."""
    config = EngineConfig(batch_size=batch_size)
    try:
        config.validate()
    except ConfigurationError as e:
        print(f"Invalid setting: {e}")
        print(f"Hint: {e.recovery_hint}")
        return None
    return Engine.from_config(config)


# Pattern 2: Report the exact line of a broken plan
def read_plan(path: Path) -> list:
    """Load a plan, pointing at the broken record on failure."""
    try:
        return load_plan(path)
    except PlanLoadError as e:
        print(f"Plan rejected: {e}")
        print(f"Hint: {e.recovery_hint}")
        return []


# Pattern 3: Judge a run by its summary, not by exceptions
def seed(plan: Path) -> bool:
    """Run a plan and report whether every item was created."""
    engine = build_engine(batch_size=100)
    if engine is None:
        return False
    try:
        summary = engine.run(read_plan(plan))
    except ShareseedError as e:
        print(f"Run aborted: {e}")
        return False

    if summary.total_errors:
        print(f"{summary.total_errors} of {summary.processed} items failed; see the log")
    return summary.total_errors == 0


if __name__ == "__main__":
    seed(Path("./plan.jsonl"))
