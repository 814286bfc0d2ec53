"""Default paths and application settings."""

APP_NAME = "OctaTools"
APP_VERSION = "1.0.0"

# root -> vendor folder -> Set -> Project
DEFAULT_SCAN_DEPTH = 3

# Home subfolders scanned for local copies of CF cards
HOME_SCAN_FOLDERS = ["Documents", "Music", "Desktop", "Downloads"]
OCTATRACK_FOLDER_NAMES = ["Octatrack", "octatrack", "OCTATRACK"]

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
