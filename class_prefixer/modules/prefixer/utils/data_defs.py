# data_defs.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import FrozenSet, List, Optional, Pattern, Tuple


# ? -----------------------------------------------------------------------------------
# ? Defaults (explicit; callers pass these in, the engine never falls back silently) ---
DEFAULT_ATTRIBUTE: str = "className"
DEFAULT_PREFIX: str = "app-"
DEFAULT_CUSTOM_PATTERNS: Tuple[str, ...] = ("*ClassName",)
DEFAULT_REGEX_PATTERNS: Tuple[str, ...] = (r"\w+ClassName",)
DEFAULT_EXTENSIONS: Tuple[str, ...] = (".js", ".jsx", ".ts", ".tsx")

TS_FORMAT: str = "%H-%M_%m-%d"
DEFAULT_LOG_DIR: Path = Path.home() / "Desktop" / "class_prefixer logs"
DEFAULT_LOG_MAX_AGE_HOURS: int = 24


# ? -----------------------------------------------------------------------------------
# ? Main data structures -------------------------------------------------------------
@dataclass(frozen=True)
class PrefixerConfig:
    prefix: str = DEFAULT_PREFIX
    skip_classes: FrozenSet[str] = frozenset()
    custom_patterns: Tuple[str, ...] = ()
    use_regex: bool = False
    custom_regex_patterns: Tuple[str, ...] = ()
    # ^ Host-only; the engine ignores it
    auto_format: bool = False


@dataclass
class HostSettings:
    format_command: str
    supported_extensions: Tuple[str, ...]
    log_dir: str
    ts_format: str
    log_max_age_hours: int
    write_run_log: bool


@dataclass(frozen=True)
class AttributeMatcher:
    """Compiled attribute-name alternation shared by both engine passes."""
    alternation: str
    direct_rx: Pattern[str]
    expression_rx: Pattern[str]
    fragments: Tuple[str, ...]
    warnings: Tuple[str, ...] = ()


class ScanState(Enum):
    NORMAL = "normal"
    IN_SINGLE = "single"
    IN_DOUBLE = "double"
    IN_TEMPLATE = "template"


@dataclass(frozen=True)
class QuotedSpan:
    """Half-open [start, end) span of one quoted string, quotes included."""
    start: int
    end: int
    quote: str
    content: str


@dataclass
class RewriteResult:
    text: str
    changed: bool
    adding: bool
    direct_values: int = 0
    expression_blocks: int = 0
    unbalanced_skipped: int = 0
    warnings: List[str] = field(default_factory=list)


# ? -----------------------------------------------------------------------------------
# ? Host run bookkeeping -------------------------------------------------------------
class FileOutcome(str, Enum):
    CHANGED = "changed"
    UNCHANGED = "unchanged"
    UNSUPPORTED = "unsupported"
    ERROR = "error"


@dataclass
class FileReport:
    path: str
    outcome: FileOutcome
    direct_values: int = 0
    expression_blocks: int = 0
    unbalanced_skipped: int = 0
    formatted: Optional[bool] = None
    error: Optional[str] = None
    before: str = ""
    after: str = ""

