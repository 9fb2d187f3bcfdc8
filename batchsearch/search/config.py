"""
search/config.py — SearchConfig dataclass
Seeded from Config so the API key is read from the environment exactly once.
"""
from dataclasses import dataclass

KEYWORD_TIMEOUT = 30.0   # seconds allowed for one keyword's API call


@dataclass
class SearchConfig:
    api_key: str = ""

    endpoint: str = "https://rapidapi.p.rapidapi.com/api/v1/search/"
    api_host: str = "google-search3.p.rapidapi.com"

    timeout: float = KEYWORD_TIMEOUT

    @classmethod
    def from_config(cls, cfg) -> "SearchConfig":
        return cls(api_key=cfg.RAPIDAPI_KEY)

    @property
    def has_key(self) -> bool:
        return bool(self.api_key)

    @property
    def headers(self) -> dict[str, str]:
        return {
            "X-RapidAPI-Host": self.api_host,
            "X-RapidAPI-Key":  self.api_key,
        }
