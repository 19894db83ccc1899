"""Application configuration"""

import logging
from dotenv import load_dotenv

from .loader import load_raw_config
from .fetch import Fetch
from .thumbs import Thumbs
from .scoring import Scoring
from .reader import Reader

load_dotenv()

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(format=LOG_FORMAT, datefmt=DATE_FORMAT, level=logging.INFO)
logging.getLogger("aiohttp").setLevel(logging.WARNING)

_RAW_CONFIG = load_raw_config()

fetch = Fetch(_RAW_CONFIG)
thumbs = Thumbs(_RAW_CONFIG)
scoring = Scoring(_RAW_CONFIG)
reader = Reader(_RAW_CONFIG)


class Config:
    fetch = fetch
    thumbs = thumbs
    scoring = scoring
    reader = reader


__all__ = ["fetch", "thumbs", "scoring", "reader", "Config"]
