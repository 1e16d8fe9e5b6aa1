"""Exit codes of the nxkit CLI."""

EXIT_SUCCESS = 0
EXIT_ISSUES_FOUND = 1
EXIT_RESOLUTION_ERROR = 2
EXIT_INVALID_USAGE = 3
