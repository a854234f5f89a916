"""Parse, apply and generate unified diffs for model-authored file edits."""

from .applier import ApplyError, ApplyResult, MatchStrategy, apply_hunk, apply_hunks
from .config import EngineConfig, load_config
from .errors import ConfigError, PatchEngineError
from .generator import detect_language, format_unified_diff, generate_diff, generate_hunks
from .hunks import DiffHunk, DiffStats, EditStatus, FileEdit, HunkChangeType, UnifiedDiff
from .lifecycle import EditLifecycleManager
from .parser import extract_file_path, parse_hunks, parse_unified_diff

__all__ = [
    "ApplyError",
    "ApplyResult",
    "ConfigError",
    "DiffHunk",
    "DiffStats",
    "EditLifecycleManager",
    "EditStatus",
    "EngineConfig",
    "FileEdit",
    "HunkChangeType",
    "MatchStrategy",
    "PatchEngineError",
    "UnifiedDiff",
    "apply_hunk",
    "apply_hunks",
    "detect_language",
    "extract_file_path",
    "format_unified_diff",
    "generate_diff",
    "generate_hunks",
    "load_config",
    "parse_hunks",
    "parse_unified_diff",
]
