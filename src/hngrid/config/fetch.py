import os

from .loader import section

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


class Fetch:
    def __init__(self, config: dict | None = None) -> None:
        fetch_cfg = section(config, "fetch")
        self.TIMEOUT: float = float(fetch_cfg.get("timeout", os.getenv("HNGRID_FETCH_TIMEOUT", "15")))
        self.USER_AGENT: str = str(fetch_cfg.get("user_agent", os.getenv("HNGRID_USER_AGENT", _DEFAULT_USER_AGENT)))
        self.ACCEPT: str = str(
            fetch_cfg.get("accept", os.getenv("HNGRID_ACCEPT", "text/html,application/xhtml+xml,*/*;q=0.9"))
        )
        self.ACCEPT_LANGUAGE: str = str(
            fetch_cfg.get("accept_language", os.getenv("HNGRID_ACCEPT_LANGUAGE", "en-US,en;q=0.9"))
        )

        if self.TIMEOUT <= 0:
            raise ValueError(f"Fetch timeout must be positive, got {self.TIMEOUT}")
