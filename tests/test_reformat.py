import math

import numpy as np
import pytest

from fargoplot.detail import ConfigError, DataIntegrityError
from fargoplot.tools import reformat as rf


def test_example_grid_records():
    # 2x3 grid, rmin=0, rmax=2 -> dy = 1, dx = pi
    field = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    radii = rf.radial_coordinates(2, 0.0, 2.0)
    records = rf.reformat(field, radii)

    assert records.shape == (8, 3)
    angles = [0.0, math.pi, 2 * math.pi, 3 * math.pi]
    np.testing.assert_allclose(records[:4, 0], angles)
    np.testing.assert_allclose(records[4:, 0], angles)
    np.testing.assert_array_equal(records[:4, 1], [0, 0, 0, 0])
    np.testing.assert_array_equal(records[4:, 1], [1, 1, 1, 1])
    np.testing.assert_array_equal(records[:4, 2], [1, 2, 3, 1])
    np.testing.assert_array_equal(records[4:, 2], [4, 5, 6, 4])


@pytest.mark.parametrize("nrad, nsec", [(1, 2), (3, 4), (16, 33)])
def test_full_mode_record_count(nrad, nsec):
    field = np.arange(nrad * nsec, dtype=float).reshape(nrad, nsec) + 1
    records = rf.reformat(field, rf.radial_coordinates(nrad, 1.0, 2.0))
    assert len(records) == nrad * (nsec + 1)


def test_wrap_record_repeats_first_sample():
    nrad, nsec = 4, 6
    rng = np.random.default_rng(3)
    field = rng.random((nrad, nsec))
    records = rf.reformat(field, rf.radial_coordinates(nrad, 0.5, 2.5)).reshape(nrad, nsec + 1, 3)
    dx = 2 * math.pi / (nsec - 1)

    for row in records:
        first, last = row[0], row[-1]
        assert last[1] == first[1]
        assert last[2] == first[2]
        assert last[0] == pytest.approx(nsec * dx)


def test_curve_mode_row_means():
    field = np.array([[1.0, 2.0, 3.0, 6.0], [0.5, 0.5, 0.5, 0.5], [-1.0, 1.0, 2.0, 2.0]])
    records = rf.reformat(field, rf.radial_coordinates(3, 0.0, 0.0), curve=True)

    assert records.shape == (3, 3)
    np.testing.assert_allclose(records[:, 0], [0.0, 1.0, 2.0])
    np.testing.assert_allclose(records[:, 1], field.mean(axis=1))


def test_curve_mode_ignores_log():
    field = np.array([[10.0, 1000.0]])
    records = rf.reformat(field, [1.0], curve=True, log_scale=True)
    assert records[0, 1] == pytest.approx(505.0)


def test_radius_table_wins_over_rmin_rmax():
    table = [0.4, 0.9, 1.7]
    field = np.ones((3, 5))
    radii = rf.radial_coordinates(3, 10.0, 20.0, radii=table)
    records = rf.reformat(field, radii).reshape(3, 6, 3)
    for j, r in enumerate(table):
        assert np.all(records[j, :, 1] == r)


def test_radius_table_extra_entries_are_ignored():
    radii = rf.radial_coordinates(2, radii=[1.0, 2.0, 3.0])
    np.testing.assert_array_equal(radii, [1.0, 2.0])


def test_radius_table_too_short():
    with pytest.raises(ConfigError, match="radius table has 2 entries"):
        rf.radial_coordinates(3, radii=[1.0, 2.0])


def test_linear_radii_default_spacing():
    # rmin == rmax -> unit spacing
    np.testing.assert_array_equal(rf.radial_coordinates(4, 2.0, 2.0), [2.0, 3.0, 4.0, 5.0])


def test_linear_radii_spacing():
    np.testing.assert_allclose(rf.radial_coordinates(4, 1.0, 3.0), [1.0, 1.5, 2.0, 2.5])


def test_log_scale_values():
    field = np.array([[1.0, 10.0, 100.0]])
    records = rf.reformat(field, [1.0], log_scale=True)
    np.testing.assert_allclose(records[:, 2], [0.0, 1.0, 2.0, 0.0])


def test_log_scale_of_non_positive_values_is_not_finite():
    records = rf.reformat(np.array([[0.0, -1.0]]), [1.0], log_scale=True)
    assert not np.isfinite(records[:, 2]).any()


def test_extension_broadcasts_over_azimuth():
    profile = np.array([2.0, 3.0])
    records = rf.reformat_extension(profile, [1.0, 1.5], nsec=4).reshape(2, 5, 3)

    assert np.all(records[0, :, 2] == 2.0)
    assert np.all(records[1, :, 2] == 3.0)
    assert np.all(records[1, :, 1] == 1.5)
    np.testing.assert_allclose(records[0, :, 0], np.arange(5) * 2 * math.pi / 3)


def test_extension_curve_mode():
    records = rf.reformat_extension(np.array([2.0, 3.0]), [1.0, 1.5], nsec=4, curve=True)
    np.testing.assert_array_equal(records, [[1.0, 2.0, 2.0], [1.5, 3.0, 3.0]])


def test_read_field_shape(write_field):
    path = write_field(np.arange(6))
    field = rf.read_field(path, 2, 3)
    np.testing.assert_array_equal(field, [[0, 1, 2], [3, 4, 5]])


def test_read_field_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="does not exist"):
        rf.read_field(tmp_path / "gasdens9.dat", 2, 3)


def test_read_field_directory(tmp_path):
    with pytest.raises(ConfigError, match="is a directory"):
        rf.read_field(tmp_path, 2, 3)


@pytest.mark.parametrize("nrad, nsec", [(0, 4), (None, 4), (4, 0), (4, 1)])
def test_read_field_bad_dimensions(write_field, nrad, nsec):
    path = write_field(np.ones(4))
    with pytest.raises(ConfigError):
        rf.read_field(path, nrad, nsec)


def test_read_field_truncated_strict(write_field):
    path = write_field(np.ones(5))
    with pytest.raises(DataIntegrityError, match="expected 48"):
        rf.read_field(path, 2, 3)


def test_read_field_partial_sample_strict(write_field):
    path = write_field(np.ones(6))
    with open(path, "ab") as f:
        f.write(b"\x00\x01\x02")
    with pytest.raises(DataIntegrityError):
        rf.read_field(path, 2, 3)


def test_read_field_truncated_lenient(write_field):
    # a trailing half sample and an incomplete row are dropped
    path = write_field(np.arange(5))
    with open(path, "ab") as f:
        f.write(b"\x00\x01\x02")
    field = rf.read_field(path, 2, 3, strict=False)
    np.testing.assert_array_equal(field, [[0, 1, 2]])


def test_read_field_empty_lenient(write_field):
    path = write_field(np.ones(2))
    with pytest.raises(DataIntegrityError, match="single complete row"):
        rf.read_field(path, 2, 3, strict=False)


def test_read_profile(write_field):
    path = write_field([1.0, 2.0, 3.0], name="gasdens1D0.dat")
    np.testing.assert_array_equal(rf.read_profile(path, 3), [1.0, 2.0, 3.0])


def test_write_records_layout(tmp_path):
    records = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    path = tmp_path / "out.bin"
    assert rf.write_records(records, path) == 2

    raw = path.read_bytes()
    assert len(raw) == 48
    np.testing.assert_array_equal(np.frombuffer(raw, dtype="<f8"), [1, 2, 3, 4, 5, 6])


def test_write_records_to_open_file(tmp_path):
    path = tmp_path / "out.bin"
    with open(path, "wb") as f:
        rf.write_records(np.zeros((3, 3)), f)
    assert path.stat().st_size == 72


def test_convert_writes_full_stream(write_field, tmp_path):
    src = write_field(np.arange(1, 13))
    out = tmp_path / "dens.bin"
    count = rf.convert(src, out, nrad=3, nsec=4, rmin=1.0, rmax=4.0)

    assert count == 15
    records = rf.read_records(out)
    assert records.shape == (15, 3)
    np.testing.assert_array_equal(np.unique(records[:, 1]), [1.0, 2.0, 3.0])


def test_convert_lenient_keeps_declared_spacing(write_field, tmp_path):
    src = write_field(np.ones(7))
    out = tmp_path / "dens.bin"
    count = rf.convert(src, out, nrad=3, nsec=3, rmin=0.0, rmax=3.0, strict=False)

    assert count == 8
    np.testing.assert_array_equal(np.unique(rf.read_records(out)[:, 1]), [0.0, 1.0])


def test_convert_extension(write_field, tmp_path):
    src = write_field([5.0, 6.0], name="gasdens1D0.dat")
    out = tmp_path / "dens1d.bin"
    count = rf.convert_extension(src, out, nrad1d=2, nsec=3, radii=[0.1, 0.2])
    assert count == 8
    assert np.all(rf.read_records(out)[4:, 2] == 6.0)
