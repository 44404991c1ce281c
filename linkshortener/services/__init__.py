from linkshortener.services.resolver import UniquenessResolver
from linkshortener.services.analytics import AnalyticsReader
from linkshortener.services.lifecycle import ShortcodeLifecycleManager


__all__ = [
    'UniquenessResolver',
    'AnalyticsReader',
    'ShortcodeLifecycleManager',
]
