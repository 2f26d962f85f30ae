"""Command-line entry points: quoteboard <command> [args...]."""
