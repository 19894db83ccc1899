import os

from .loader import section


class Reader:
    def __init__(self, config: dict | None = None) -> None:
        reader_cfg = section(config, "reader")
        self.DISCUSSION_HOST: str = str(
            reader_cfg.get("discussion_host", os.getenv("HNGRID_DISCUSSION_HOST", "news.ycombinator.com"))
        )
        self.FAVICON_TEMPLATE: str = str(
            reader_cfg.get(
                "favicon_template",
                os.getenv(
                    "HNGRID_FAVICON_TEMPLATE",
                    "https://t2.gstatic.com/faviconV2?client=SOCIAL&type=FAVICON"
                    "&fallback_opts=TYPE,SIZE,URL&url=https://{domain}&size=64",
                ),
            )
        )
