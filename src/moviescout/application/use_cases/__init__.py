from .load_trending import TrendingLoader

__all__ = ["TrendingLoader"]
