# src/catalog_state/sources/http_source.py

"""Item records fetched from a JSON HTTP endpoint."""

from curl_cffi import requests as curl_requests

from catalog_state.config.settings import Settings
from catalog_state.sources.base_source import CatalogSource, ItemRecord
from catalog_state.sources.json_file_source import extract_records


class HttpCatalogSource(CatalogSource):
    """GETs ``{base_url}/items`` and ``{base_url}/recommendations``.

    Non-200 responses and undecodable bodies raise, which the load
    controller records as a rejected load.
    """

    def __init__(self, base_url: str) -> None:
        super().__init__("http")
        self.base_url = base_url.rstrip("/")
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def _get_records(self, path: str) -> list[ItemRecord]:
        url = f"{self.base_url}/{path}"
        self.logger.info("Fetching %s", url)
        resp = self.session.get(
            url,
            headers=self.settings.DEFAULT_HEADERS,
            timeout=self._request_timeout,
        )
        if resp.status_code != 200:
            msg = f"GET {url} returned HTTP {resp.status_code}"
            raise ConnectionError(msg)
        records = extract_records(resp.json())
        self.logger.debug("Fetched %d records from %s", len(records), url)
        return records

    def fetch_items(self) -> list[ItemRecord]:
        return self._get_records("items")

    def fetch_recommendations(self) -> list[ItemRecord]:
        return self._get_records("recommendations")
