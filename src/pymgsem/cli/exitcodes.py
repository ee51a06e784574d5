"""Process exit codes for the ``pymgsem`` CLI."""

EXIT_SUCCESS = 0
EXIT_ERROR = 1
# ``eval --expect`` got the other truth value
EXIT_MISMATCH = 2
