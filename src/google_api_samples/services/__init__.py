"""Google API service layers."""

from . import adsense
from . import dfareporting

__all__ = [
    "adsense",
    "dfareporting",
]
