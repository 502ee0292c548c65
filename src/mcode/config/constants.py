"""
System constants that should never change.

These are technical/display limits, not user preferences.
User-configurable values should go in config.yaml instead.
"""

# Conversion defaults (overridable from config.yaml and the command line)
DEFAULT_EXTENSIONS = "avi,mpg"
DEFAULT_TARGET_EXTENSION = "mp4"
DEFAULT_ENGINE_BINARY = "HandBrakeCLI"
DEFAULT_PRESET = "Fast 1080p30"

# Temporary output marker, placed between base name and target extension
TEMP_OUTPUT_MARKER = ".tmp"

# Engine output handling
ENGINE_OUTPUT_TAIL_LINES = 200  # Raw output lines kept for failure diagnostics
NO_TITLE_MARKER = "No title found"  # HandBrake message for undecodable input

# Progress line layout: 1-based start column of task, percent, fps, avg fps, ETA
PROGRESS_COLUMNS = (1, 11, 22, 32, 42)
PROGRESS_HEADER = "Task      % done     FPS       Avg FPS   ETA"

# Failure table formatting
MAX_FILENAME_LENGTH = 37
FILENAME_TRUNCATE_LENGTH = 34
MAX_ERROR_MSG_LENGTH = 32
ERROR_MSG_TRUNCATE_LENGTH = 29

# Exit codes
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130
