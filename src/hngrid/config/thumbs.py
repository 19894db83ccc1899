import os

from .loader import section


class Thumbs:
    def __init__(self, config: dict | None = None) -> None:
        thumbs_cfg = section(config, "thumbs")
        self.CONCURRENCY: int = int(thumbs_cfg.get("concurrency", os.getenv("HNGRID_THUMB_CONCURRENCY", "3")))
        self.LOOKAHEAD_PX: int = int(thumbs_cfg.get("lookahead_px", os.getenv("HNGRID_LOOKAHEAD_PX", "400")))
        self.KEY_PREFIX: str = str(thumbs_cfg.get("key_prefix", os.getenv("HNGRID_KEY_PREFIX", "hngrid::")))

        if self.CONCURRENCY < 1:
            raise ValueError(f"Thumbnail concurrency must be >= 1, got {self.CONCURRENCY}")
        if self.LOOKAHEAD_PX < 0:
            raise ValueError(f"Look-ahead margin must be >= 0, got {self.LOOKAHEAD_PX}")
