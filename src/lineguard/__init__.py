from lineguard.checker import CheckResult, ContentChecker, Issue, IssueKind, check_files
from lineguard.config import CheckConfig, Config, ConfigError
from lineguard.discovery import Discoverer, DiscoveryError, DiscoveryOptions, DiscoveryResult

__all__ = [
    "CheckConfig",
    "CheckResult",
    "Config",
    "ConfigError",
    "ContentChecker",
    "Discoverer",
    "DiscoveryError",
    "DiscoveryOptions",
    "DiscoveryResult",
    "Issue",
    "IssueKind",
    "check_files",
]
