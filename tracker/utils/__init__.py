from tracker.utils.http_client import HttpError, build_session, fetch_json, send
from tracker.utils.logging import setup_logging

__all__ = ["HttpError", "build_session", "fetch_json", "send", "setup_logging"]
