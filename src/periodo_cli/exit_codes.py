"""Numeric process exit codes.

Each constant maps to an outcome of a ``periodo`` invocation. Operations
that fail on the remote side still exit with :data:`EXIT_SUCCESS` once the
failure has been reported: the exit status only distinguishes "the command
ran" from "the command line was wrong".

Example::

    $ periodo merge-patch
    Usage: periodo merge-patch [OPTIONS] PATCH_URL
    ...
    $ echo $?
    1   # EXIT_INVALID_USAGE -- missing required argument
"""

EXIT_SUCCESS = 0
"""The command ran and its outcome (OK or failed) was printed."""

EXIT_GENERIC_FAILURE = 1
"""An unexpected error occurred."""

EXIT_INVALID_USAGE = 1
"""The command was invoked with an unknown subcommand or missing arguments."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C."""
