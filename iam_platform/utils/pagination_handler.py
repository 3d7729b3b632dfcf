"""
Cursor pagination for IAM list operations.

Every paginated list response carries a `next` descriptor while more results exist.
Services put the resume token in one of two places:

* directly on the descriptor: {"next": {"start": "<token>"}}
* inside a continuation URL: {"next": {"href": "https://.../v2/groups?offset=<token>"}}

A Pager drives one list operation through its pages, sending the token back under the
operation's cursor parameter until a response arrives without one.
"""

import copy
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional
from urllib.parse import parse_qs, urlsplit

from .exceptions import CursorPresetError, PagerExhaustedError, PageInFlightError
from .responses import DetailedResponse, PageLink

logger = logging.getLogger("iam_platform")

ListOperation = Callable[..., Awaitable[DetailedResponse]]


def get_query_param(url: Optional[str], param: str) -> Optional[str]:
    """
    Return the first value of a query parameter in a URL.

    Args:
        url: Absolute or relative URL
        param: Query parameter name

    Returns:
        The value, or None if the URL is empty, unparseable or lacks the parameter
    """
    if not url or not isinstance(url, str):
        return None

    try:
        query = urlsplit(url).query
    except ValueError:
        return None

    values = parse_qs(query, keep_blank_values=True).get(param)
    if not values:
        return None
    return values[0]


class CursorStrategy:
    """Finds the resume token in a list response."""

    # Request parameter the token is sent back under
    param_name: str = ""

    def extract(self, result: Any) -> Optional[str]:
        raise NotImplementedError


class DirectTokenCursor(CursorStrategy):
    """Token carried as a field of the `next` descriptor."""

    def __init__(self, token_field: str = "start", param_name: Optional[str] = None):
        self.token_field = token_field
        self.param_name = param_name or token_field

    def extract(self, result: Any) -> Optional[str]:
        link = PageLink.from_result(result)
        if link is None:
            return None
        return link.field(self.token_field) or None

    def __repr__(self) -> str:
        return f"DirectTokenCursor({self.token_field!r})"


class UrlEmbeddedCursor(CursorStrategy):
    """Token carried as a query parameter of the `next` descriptor's URL."""

    def __init__(self, query_param: str = "offset", link_field: str = "href", param_name: Optional[str] = None):
        self.query_param = query_param
        self.link_field = link_field
        self.param_name = param_name or query_param

    def extract(self, result: Any) -> Optional[str]:
        link = PageLink.from_result(result)
        if link is None:
            return None
        return get_query_param(link.field(self.link_field), self.query_param) or None

    def __repr__(self) -> str:
        return f"UrlEmbeddedCursor({self.query_param!r})"


class Pager:
    """
    Walks a paginated list operation one page at a time.

    Usage:
        pager = AccessGroupsPager(client, {"account_id": account_id})
        while pager.has_next():
            groups = await pager.get_next()

    or drain everything at once with `await pager.get_all()`. A pager is single use
    and not safe for overlapping get_next() calls.
    """

    def __init__(self,
                 list_operation: ListOperation,
                 items_key: str,
                 cursor: CursorStrategy,
                 params: Optional[Dict[str, Any]] = None):
        """
        Args:
            list_operation: Async callable taking the list parameters as keywords
            items_key: Response field that holds the page's items
            cursor: Where the next-page token lives in a response
            params: Filter and sort parameters for the list operation

        Raises:
            CursorPresetError: If params already sets the cursor parameter
        """
        params = params or {}
        if params.get(cursor.param_name) is not None:
            raise CursorPresetError(f"the params.{cursor.param_name} field should not be set")

        self._list_operation = list_operation
        self._items_key = items_key
        self._cursor_strategy = cursor
        self._params: Dict[str, Any] = copy.deepcopy(params)
        self._cursor: Optional[str] = None
        self._has_next = True
        self._in_flight = False
        self._page_count = 0

    @property
    def cursor_param(self) -> str:
        return self._cursor_strategy.param_name

    def has_next(self) -> bool:
        """True while get_next() may return more results."""
        return self._has_next

    async def get_next(self) -> Optional[List[Any]]:
        """
        Fetch the next page.

        Returns:
            The page's items exactly as found under the items key (None if the field is missing)

        Raises:
            PagerExhaustedError: If the last page has already been returned
            PageInFlightError: If another get_next() on this pager has not finished
        """
        if not self.has_next():
            raise PagerExhaustedError("No more results available")
        if self._in_flight:
            raise PageInFlightError("A page request is already in progress for this pager")

        if self._cursor:
            self._params[self.cursor_param] = self._cursor

        self._in_flight = True
        try:
            response = await self._list_operation(**self._params)
        finally:
            self._in_flight = False

        result = response.get_result()
        next_cursor = self._cursor_strategy.extract(result)

        self._cursor = next_cursor
        if not next_cursor:
            self._has_next = False

        self._page_count += 1
        items = result.get(self._items_key) if isinstance(result, dict) else None

        logger.debug(
            f"Fetched page {self._page_count} ({len(items) if items is not None else 'no'} {self._items_key}), "
            f"more pages: {self._has_next}"
        )
        return items

    async def get_all(self) -> List[Any]:
        """Fetch every remaining page in order and concatenate the items."""
        results: List[Any] = []
        while self.has_next():
            page = await self.get_next()
            if isinstance(page, list):
                results.extend(page)
        return results

    async def __aiter__(self) -> AsyncIterator[Optional[List[Any]]]:
        while self.has_next():
            yield await self.get_next()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(items_key={self._items_key!r}, cursor={self._cursor_strategy!r}, "
            f"has_next={self._has_next})"
        )
