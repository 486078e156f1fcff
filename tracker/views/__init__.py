from tracker.views.base import AlbumRow, CatalogView, RenderError

__all__ = ["AlbumRow", "CatalogView", "RenderError"]
