"""CLI sub-commands for marvin_cli.

Each module exports plain callback functions registered on the root app
(``add``, ``today``, ``track``, ...) or a :class:`typer.Typer` sub-application
for multi-command groups (``config``):

* :mod:`~marvin_cli.commands.add` -- create tasks and projects.
* :mod:`~marvin_cli.commands.items` -- read and complete items.
* :mod:`~marvin_cli.commands.tracking` -- time tracking.
* :mod:`~marvin_cli.commands.raw` -- call any endpoint directly.
* :mod:`~marvin_cli.commands.config` -- view and modify persisted settings.

Commands are thin: they resolve options, call
:func:`~marvin_cli.api.call_api`, and render the result. Errors are raised,
never turned into exit codes here.
"""
