"""CLI subcommands registered on the shareseed app."""
