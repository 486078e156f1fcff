import os
import sys

import pytest

# Ensure project root is on sys.path so 'tracker' and 'tests' import correctly
_ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from tests.support.fakes import FakeApi, RecordingView
from tracker.config.variants import Variant, build_profile
from tracker.services.models import Album

PLACEHOLDER = "https://via.placeholder.com/50"


@pytest.fixture
def primary():
    return build_profile(Variant.PRIMARY)


@pytest.fixture
def legacy():
    return build_profile(Variant.LEGACY)


@pytest.fixture
def view():
    return RecordingView()


@pytest.fixture
def albums():
    return [
        Album(album_id=1, title="Blue Train", artist="John Coltrane", cover_url="https://img/blue.jpg"),
        Album(album_id=7, title="Kind of Blue", artist="Miles Davis"),
        Album(album_id=9, title="Mingus Ah Um", artist="Charles Mingus"),
    ]


@pytest.fixture
def api(albums):
    return FakeApi(albums)
