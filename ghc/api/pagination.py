"""Pagination primitives for the GitHub REST and GraphQL APIs.

REST endpoints paginate through the RFC 5988 Link response header, which
Client.rest_paginate() follows automatically. GraphQL connections expose a
pageInfo object instead; call sites thread PageInfo.end_cursor back into
their query variables as "after" until has_next_page is False.
"""

import re
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

# <url>; rel="name" pairs of an RFC 5988 Link header
LINK_REL_RE = re.compile(r'<([^>]+)>;\s*rel="([^"]+)"')


def parse_link_next(link_header: str | None) -> str | None:
    """Extract the URL of the "next" relation from a Link header.

    Args:
        link_header: Raw header value, e.g.
            '<https://api.github.com/repos?page=2>; rel="next", <...>; rel="last"'

    Returns:
        The next page URL, or None if the header is missing or has no "next" relation
    """
    if not link_header:
        return None
    for match in LINK_REL_RE.finditer(link_header):
        if match.group(2) == "next":
            return match.group(1)
    return None


@dataclass(frozen=True)
class RestPage(Generic[T]):
    """One page of a REST list response.

    Attributes:
        data: The decoded response body
        next_url: Absolute URL of the next page, or None on the last page
    """

    data: T
    next_url: str | None = None


class PageInfo(BaseModel):
    """GraphQL cursor pagination descriptor (a connection's pageInfo field)."""

    model_config = ConfigDict(populate_by_name=True)

    has_next_page: bool = Field(alias="hasNextPage")
    end_cursor: str | None = Field(default=None, alias="endCursor")
