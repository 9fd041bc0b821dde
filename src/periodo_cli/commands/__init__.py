"""Built-in CLI sub-commands for periodo.

* :mod:`~periodo_cli.commands.patches` -- ``list-patches``,
  ``submit-patch``, ``merge-patch``, ``reject-patch``.
* :mod:`~periodo_cli.commands.resources` -- ``create-bag``,
  ``update-graph``, ``delete-graph``.
* :mod:`~periodo_cli.commands.auth` -- ``refresh-token``,
  ``list-permissions``.

Each module exports plain callback functions that
:mod:`periodo_cli.app` registers directly on the root app.
"""
