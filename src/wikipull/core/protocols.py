"""Protocol for the external fetch layer."""

from typing import Protocol, runtime_checkable

from ..models.document import RawPage


@runtime_checkable
class PageSource(Protocol):
    """
    Protocol for anything that can deliver a page's rendered HTML.

    HTTP fetching, retries and rate limiting live behind this boundary;
    wikipull only consumes the result.

    Example implementation:
        class DirectorySource:
            def __init__(self, root: Path):
                self.root = root

            async def fetch_page(self, page_name: str) -> RawPage:
                path = self.root / f"{page_name}.html"
                return RawPage(html=path.read_bytes(), info=PageInfo(title=page_name))
    """

    async def fetch_page(self, page_name: str) -> RawPage:
        """
        Fetch one page.

        Args:
            page_name: Normalized page identity

        Returns:
            RawPage with the HTML and fetch-layer metadata

        Raises:
            Any exception; the service reports it as PageFetchError
        """
        ...
