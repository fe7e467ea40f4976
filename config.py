import os

SHELL_NAME = "ush"

# Startup script, sourced before the interactive loop
RC_FILE = os.path.expanduser("~/.ushrc")
END_COMMAND = "end"

# nice
NICE_DEFAULT = 4
NICE_MIN = -19
NICE_MAX = 20

# Permissions for files created by > and >>
FILE_MODE = 0o660

EXIT_NOEXEC = 126
EXIT_NOTFOUND = 127

DEBUG = os.getenv("USH_DEBUG", "") not in ("", "0")
