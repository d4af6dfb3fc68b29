from __future__ import annotations

from ..transport.http import HttpTransport

from ..models.search import SearchResults


class SearchAPI:
    def __init__(self, http: HttpTransport):
        self._http = http

    def search(self, query: str) -> SearchResults:
        data = self._http.request("GET", "/search", params={"q": query})
        return SearchResults.model_validate(data or {})
