from tracker.handlers.albums import router
from tracker.handlers.hub import CatalogHub

__all__ = ["router", "CatalogHub"]
