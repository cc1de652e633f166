import numpy as np
import pytest

from metaballs.sampler import GridMapping, sample, sample_coverage, sample_field


def test_mapping_coordinates():
    m = GridMapping(rows=10, cols=20, width=40.0, height=10.0)
    xs, ys = m.coordinates()
    assert xs.shape == ys.shape == (10, 20)
    assert xs[0, 3] == 6.0
    assert ys[2, 0] == 2.0
    xs, ys = m.coordinates(0.5, 0.5)
    assert xs[0, 0] == 1.0
    assert ys[0, 0] == 0.5


@pytest.mark.parametrize("rows,cols", [(0, 5), (5, 0), (-1, 3)])
def test_mapping_rejects_empty_grid(rows, cols):
    with pytest.raises(ValueError):
        GridMapping(rows, cols, 10.0, 10.0)


def test_sample_field_matches_scene(centre_scene):
    m = GridMapping.for_scene(centre_scene, rows=10, cols=20)
    field = sample_field(centre_scene, m)
    assert field.shape == (10, 20)
    assert field[5, 10] == pytest.approx(centre_scene.field_at(10.0, 5.0))
    assert field[2, 7] == pytest.approx(centre_scene.field_at(7.0, 2.0))


def test_coverage_range(centre_scene):
    m = GridMapping.for_scene(centre_scene, rows=10, cols=20)
    count = sample_coverage(centre_scene, m)
    assert count.min() >= 0 and count.max() <= 4
    assert count[5, 10] == 4
    assert count[0, 0] == 0


def test_coverage_grows_as_threshold_drops(three_blob_scene):
    m = GridMapping.for_scene(three_blob_scene, rows=20, cols=40)
    previous = None
    for tau in (3.0, 2.0, 1.5, 1.0, 0.6, 0.3):
        count = sample_coverage(three_blob_scene, m, tau)
        if previous is not None:
            assert np.all(count >= previous)
        previous = count


def test_sample_adds_coverage_on_request(centre_scene):
    m = GridMapping.for_scene(centre_scene, rows=10, cols=20)
    plain = sample(centre_scene, m)
    assert plain.coverage is None
    assert plain.threshold == 1.0
    full = sample(centre_scene, m, coverage=True)
    assert full.coverage.shape == (10, 20)
    assert np.array_equal(full.field, plain.field)
    assert np.array_equal(full.inside, full.field >= 1.0)
