"""Basic seeding run.

This example shows the simplest usage pattern: describe the files to
create, build an engine backed by a groups export, and run it with a live
progress bar. Owners come from the cached directory groups; anything the
directory cannot answer falls back to a generic identity.
"""

from pathlib import Path

from shareseed import (
    Engine,
    EngineConfig,
    IdentityPolicy,
    RichProgressReporter,
    StaticDirectoryProvider,
    WorkItem,
)


share = Path("./share")

# A plan is normally produced by a folder generator and loaded with
# load_plan(); here it is built inline.
items = [
    WorkItem(share / "Finance" / f"Invoice {i:04d}.pdf", size_kb=180, tag="Finance")
    for i in range(500)
] + [
    WorkItem(share / "Human_Resources" / f"Review {i:04d}.docx", size_kb=64, tag="Human Resources")
    for i in range(250)
]

# Group membership exported from the directory ahead of time
directory = StaticDirectoryProvider(
    {"Finance": ["alice", "bob"], "HR": ["carol", "dave"]},
    domain="CORP",
)

engine = Engine.from_config(
    EngineConfig(batch_size=50),
    directory,
    identity=IdentityPolicy(
        group_for_tag={"Human Resources": "HR"},
        qualify_with_domain=True,
    ),
)

with RichProgressReporter() as reporter:
    summary = engine.run(items, progress=reporter)

print(f"Created {summary.total_created} files, {summary.total_errors} errors")
print(f"Took {summary.duration}")
