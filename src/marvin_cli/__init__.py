"""marvin_cli -- command-line client for the Amazing Marvin task manager.

The same HTTP API is served in two places: by the desktop application on a
loopback port, and by the public cloud host. ``marvin`` talks to whichever
is reachable, preferring the desktop app, and adds tasks and projects from
free text, files, or piped stdin.

Typical usage::

    marvin add "Buy milk +today"
    marvin add project "Q1 Planning"
    cat task.json | marvin add --file -
    marvin --public today --csv

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    config: XDG-aware persisted configuration and option layering.
    classifier: Turns ``add`` arguments and file content into a routing decision.
    resolver: Picks the ordered list of base URLs to try.
    auth: Chooses the credential header for an operation.
    dispatcher: Executes a request against the candidates with fallback.
    api: Glue used by the command layer.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
