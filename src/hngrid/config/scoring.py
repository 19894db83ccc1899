import os
from typing import List

from .loader import section

# Empirical weights for the <img> fallback pass. None of these have a derivation
# beyond "works on the front page"; tune them in config.toml, not here.
_HERO_KEYWORDS = "hero,banner,cover,feature,article,post,thumb,social,preview,splash,header"
_DECOR_KEYWORDS = "icon,logo,avatar,sprite,pixel,1x1,spacer,button,badge,flag,emoji"


def _split_words(raw: str | list) -> List[str]:
    if isinstance(raw, list):
        return [str(w).strip() for w in raw if str(w).strip()]
    return [w.strip() for w in raw.split(",") if w.strip()]


class Scoring:
    def __init__(self, config: dict | None = None) -> None:
        cfg = section(config, "scoring")
        self.HERO_KEYWORDS: List[str] = _split_words(cfg.get("hero_keywords", os.getenv("HNGRID_HERO_KEYWORDS", _HERO_KEYWORDS)))
        self.DECOR_KEYWORDS: List[str] = _split_words(
            cfg.get("decor_keywords", os.getenv("HNGRID_DECOR_KEYWORDS", _DECOR_KEYWORDS))
        )
        self.HERO_BONUS: float = float(cfg.get("hero_bonus", os.getenv("HNGRID_HERO_BONUS", "15")))
        self.DECOR_PENALTY: float = float(cfg.get("decor_penalty", os.getenv("HNGRID_DECOR_PENALTY", "25")))
        self.WIDTH_DIVISOR: float = float(cfg.get("width_divisor", os.getenv("HNGRID_WIDTH_DIVISOR", "50")))
        self.WIDTH_CAP: float = float(cfg.get("width_cap", os.getenv("HNGRID_WIDTH_CAP", "12")))
        self.HEIGHT_DIVISOR: float = float(cfg.get("height_divisor", os.getenv("HNGRID_HEIGHT_DIVISOR", "80")))
        self.HEIGHT_CAP: float = float(cfg.get("height_cap", os.getenv("HNGRID_HEIGHT_CAP", "8")))
        self.NARROW_WIDTH: int = int(cfg.get("narrow_width", os.getenv("HNGRID_NARROW_WIDTH", "80")))
        self.NARROW_PENALTY: float = float(cfg.get("narrow_penalty", os.getenv("HNGRID_NARROW_PENALTY", "20")))
        self.MIN_SCORE: float = float(cfg.get("min_score", os.getenv("HNGRID_MIN_SCORE", "5")))

        if self.WIDTH_DIVISOR <= 0 or self.HEIGHT_DIVISOR <= 0:
            raise ValueError("Scoring divisors must be positive")
