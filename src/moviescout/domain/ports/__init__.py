from .cache import CachePort
from .catalog import MovieCatalogPort
from .search_count import SearchCountPort
from .viewport import VisibilityCallback, VisibilityObserverPort

__all__ = [
    "CachePort",
    "MovieCatalogPort",
    "SearchCountPort",
    "VisibilityCallback",
    "VisibilityObserverPort",
]
