"""CLI for shareseed."""

# Import commands to register them with the app
# These imports have side effects (registering commands with @app.command())
from shareseed.cli.commands import batches as _batches_module  # noqa: F401
from shareseed.cli.commands import groups as _groups_module  # noqa: F401
from shareseed.cli.main import app, main


__all__ = ["app", "main"]
