"""Known file names, folder names and hardware code tables for Octatrack data."""

# ── Filesystem markers ───────────────────────────────────────────────────

# Sequencer work files (project.work, bank01.work, ...) mark a Project directory
WORK_FILE_EXTENSION = ".work"

PROJECT_FILE_NAMES = ["project.work", "project.strd"]
FIRST_BANK_FILE_NAMES = ["bank01.work", "bank01.strd"]

# Set-level shared sample storage
AUDIO_POOL_NAME = "AUDIO"

# Audio pool content is searched this deep (pool itself + one subfolder level)
AUDIO_POOL_SEARCH_DEPTH = 2

AUDIO_EXTENSIONS = {".wav", ".aif", ".aiff", ".mp3", ".flac", ".ogg", ".m4a"}

# Operating-system trees never scanned, per platform family
SYSTEM_PATH_PREFIXES = {
    "linux": [
        "/proc", "/sys", "/dev", "/run/user", "/run/lock", "/boot", "/snap",
        "/etc", "/usr", "/bin", "/sbin", "/lib", "/lib64", "/var/lib",
    ],
    "darwin": [
        "/System", "/Library", "/private", "/dev", "/usr", "/bin", "/sbin",
        "/cores", "/Volumes/Recovery", "/Volumes/Preboot", "/Volumes/VM",
    ],
    "win32": [
        "C:\\Windows", "C:\\Program Files", "C:\\Program Files (x86)",
        "C:\\ProgramData", "C:\\$Recycle.Bin", "C:\\System Volume Information",
        "C:\\Recovery",
    ],
}

# Mount points that are never treated as removable media
BOOT_MOUNT_PREFIXES = ["/boot", "/efi"]

# ── Bank files ───────────────────────────────────────────────────────────

BANK_COUNT = 16
PART_COUNT = 4
PATTERN_COUNT = 16
AUDIO_TRACK_COUNT = 8
MIDI_TRACK_COUNT = 8
STEP_COUNT = 64

BANK_LETTERS = "ABCDEFGHIJKLMNOP"


def bank_file_names(bank_index: int) -> list[str]:
    """Candidate file names for a 0-based bank index, work file first."""
    number = bank_index + 1
    return [f"bank{number:02d}.work", f"bank{number:02d}.strd"]


# ── Trig masks ───────────────────────────────────────────────────────────

# Byte i of an 8-byte trig mask holds steps STEP_OFFSETS[i] .. +7
# (four 16-step pages stored last page first, half-pages in order)
TRIG_MASK_STEP_OFFSETS = (48, 56, 32, 40, 16, 24, 8, 0)
TRIG_MASK_LENGTH = 8

# Raw value meaning "no parameter lock on this step"
PLOCK_UNSET = 255

# ── Hardware code tables ─────────────────────────────────────────────────

# Playback speed multiplier, used by pattern master scale and per-track scale
SCALE_LABELS = {
    0: "2x",
    1: "3/2x",
    2: "1x",
    3: "3/4x",
    4: "1/2x",
    5: "1/4x",
    6: "1/8x",
}
DEFAULT_SCALE_LABEL = "1x"

PER_TRACK_SCALE_MODE = 1
SCALE_MODE_LABELS = {0: "Normal", PER_TRACK_SCALE_MODE: "Per Track"}
DEFAULT_SCALE_MODE_LABEL = "Normal"

CHAIN_MODE_PROJECT = "Project"
CHAIN_MODE_PATTERN = "Pattern"

TRIG_MODE_LABELS = {0: "ONE", 1: "ONE2", 2: "HOLD"}
DEFAULT_TRIG_MODE_LABEL = "ONE"

TRIG_QUANT_LABELS = (
    "TR.LEN", "1/16", "2/16", "3/16", "4/16", "6/16", "8/16", "12/16",
    "16/16", "24/16", "32/16", "48/16", "64/16", "96/16", "128/16",
    "192/16", "256/16",
)
TRIG_QUANT_DIRECT_CODE = 255
TRIG_QUANT_DIRECT_LABEL = "DIRECT"
DEFAULT_TRIG_QUANT_LABEL = "TR.LEN"

# Index = condition code (upper bit of the byte carries micro-timing)
TRIG_CONDITION_LABELS = (
    None, "Fill", "NotFill", "Pre", "NotPre", "Nei", "NotNei", "1st", "Not1st",
    "1%", "2%", "4%", "6%", "9%", "13%", "19%", "25%", "33%", "41%", "50%",
    "59%", "67%", "75%", "81%", "87%", "91%", "94%", "96%", "98%", "99%",
    "1:2", "2:2",
    "1:3", "2:3", "3:3",
    "1:4", "2:4", "3:4", "4:4",
    "1:5", "2:5", "3:5", "4:5", "5:5",
    "1:6", "2:6", "3:6", "4:6", "5:6", "6:6",
    "1:7", "2:7", "3:7", "4:7", "5:7", "6:7", "7:7",
    "1:8", "2:8", "3:8", "4:8", "5:8", "6:8", "7:8", "8:8",
)

# (first byte % 32, second byte >= 128) -> offset label
MICRO_TIMING_LABELS = {
    (1, True): "+1/128",
    (3, False): "+1/64",
    (6, False): "+1/32",
    (11, True): "+23/384",
    (20, True): "-23/384",
    (26, False): "-1/32",
    (29, False): "-1/64",
    (30, True): "-1/128",
}

# Pattern tempo bytes that mean "follow the project tempo" (120 BPM)
DEFAULT_PATTERN_TEMPO = (11, 64)

# Per-track master length bytes that mean "infinite"
INFINITE_LENGTH_BYTES = (255, 255)
INFINITE_LENGTH_LABEL = "INF"

DEFAULT_PATTERN_LENGTH = 16

# ── Project files ────────────────────────────────────────────────────────

LOOP_MODE_LABELS = {0: "Off", 1: "Normal", 2: "PingPong"}
TIMESTRETCH_MODE_LABELS = {0: "Off", 2: "Normal", 3: "Beat"}

SLOT_TYPE_STATIC = "Static"
SLOT_TYPE_FLEX = "Flex"

SOURCE_AUDIO_POOL = "Audio Pool"
SOURCE_PROJECT = "Project"

# ── Parts ────────────────────────────────────────────────────────────────

MACHINE_TYPES = {0: "Static", 1: "Flex", 2: "Thru", 3: "Neighbor", 4: "Pickup"}
UNKNOWN_MACHINE_TYPE = "Unknown"
