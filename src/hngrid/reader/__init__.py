"""
Article reader package.

``composer`` turns a fetched page into a self-contained document; ``css``
rewrites stylesheet ``url(...)`` references; ``session`` tracks the open
article/discussion pair.
"""

from .composer import ComposedDocument, DocumentComposer
from .css import rewrite_css_urls
from .session import PaneContent, ReaderSession, ReaderView

__all__ = [
    "ComposedDocument",
    "DocumentComposer",
    "rewrite_css_urls",
    "PaneContent",
    "ReaderSession",
    "ReaderView",
]
