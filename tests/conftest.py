import os

import pytest

# Qt tests run headless
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from metaballs.engine import Blob, MetaballScene, SceneParams


@pytest.fixture
def centre_scene():
    """One blob of radius 5 at the centre of a 20x10 plane."""
    params = SceneParams(width=20.0, height=10.0, threshold=1.0)
    return MetaballScene(params=params, blobs=[Blob(x=10.0, y=5.0, radius=5.0)])


@pytest.fixture
def three_blob_scene():
    params = SceneParams(width=40.0, height=20.0)
    blobs = [
        Blob(x=8.0, y=6.0, radius=3.0),
        Blob(x=20.0, y=10.0, radius=4.5),
        Blob(x=31.5, y=14.0, radius=2.0),
    ]
    return MetaballScene(params=params, blobs=blobs)
