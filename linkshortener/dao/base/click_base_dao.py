"""Abstract base class for click event data access objects (DAOs).

Click events reference a short URL by shortcode only. The DAO does not
verify the short URL exists: redirects are authorized before a click is
recorded.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from linkshortener.models import ClickEventModel


class ClickBaseDAO(ABC):
    """Interface for click event data access objects (DAOs).

    Methods:
        insert(click: ClickEventModel, **kwargs) -> ClickEventModel:
            Append one click event.
            Raises DataStoreError on connection or write failure.

        get(shortcode: str, **kwargs) -> list[ClickEventModel]:
            Click events of one shortcode, most recent first.
            Raises DataStoreError on connection or read failure.

        counts(shortcodes: Iterable[str], **kwargs) -> dict[str, int]:
            Grouped click count for many shortcodes at once.
            Raises DataStoreError on connection or read failure.
    """

    @abstractmethod
    def insert(self, click: ClickEventModel, **kwargs) -> ClickEventModel:
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> list[ClickEventModel]:
        pass

    @abstractmethod
    def counts(self, shortcodes: Iterable[str], **kwargs) -> dict[str, int]:
        pass
