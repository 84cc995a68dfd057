"""
Reformat raw polar field dumps into streams of (coord1, coord2, value) records.

A field file is a header-less sequence of native-endian doubles, nrad rows of
nsec azimuthal samples each. Every row is written back out with one extra
closing sample so the azimuthal direction wraps around on the plot.
"""
import os

import numpy as np

from ..common.log import log
from ..detail.config import Grid
from ..detail.errors import ConfigError, DataIntegrityError

SAMPLE = np.dtype(np.float64)
RECORD = np.dtype("<f8")
RECORD_WIDTH = 3


def check_input(path):
    if not os.path.exists(path):
        raise ConfigError(f"input file {path} does not exist")
    if os.path.isdir(path):
        raise ConfigError(f"input file {path} is a directory")


def read_samples(path, count, rows, strict=True):
    """
    Read `count` doubles from `path` as `rows` equal rows.

    In strict mode any size mismatch raises DataIntegrityError. Otherwise a
    trailing partial sample and incomplete trailing rows are dropped.
    """
    with open(path, "rb") as f:
        raw = f.read()

    usable = len(raw) - len(raw) % SAMPLE.itemsize
    data = np.frombuffer(raw[:usable], dtype=SAMPLE)
    if strict and (usable != len(raw) or data.size != count):
        raise DataIntegrityError(
            f"{path} holds {len(raw)} bytes, expected {count * SAMPLE.itemsize} ({count} samples)")

    per_row = count // rows
    complete = min(rows, data.size // per_row)
    if complete == 0:
        raise DataIntegrityError(f"{path} does not hold a single complete row of {per_row} samples")
    if complete < rows:
        log.warn(f"{path} is truncated, keeping {complete} of {rows} rows")
    elif data.size > count:
        log.warn(f"{path} holds {data.size - count} extra samples, ignoring them")
    return data[:complete * per_row].reshape(complete, per_row)


def read_field(path, nrad, nsec, strict=True):
    check_input(path)
    Grid(nrad, nsec).validate()
    return read_samples(path, nrad * nsec, nrad, strict)


def read_profile(path, nrad1d, strict=True):
    check_input(path)
    if not nrad1d or nrad1d < 1:
        raise ConfigError("number of 1D radial cells is not set")
    return read_samples(path, nrad1d, nrad1d, strict)[:, 0]


def radial_coordinates(nrad, rmin=0.0, rmax=0.0, radii=None):
    """Radius of every row, from the table when given, else linear from rmin."""
    if radii is not None:
        radii = np.asarray(radii, dtype=np.float64)
        if len(radii) < nrad:
            raise ConfigError(f"radius table has {len(radii)} entries for {nrad} radial cells")
        return radii[:nrad]

    dy = (rmax - rmin) / nrad if rmin != rmax else 1.0
    return rmin + np.arange(nrad) * dy


def azimuthal_coordinates(nsec):
    # spacing uses nsec - 1, the closing sample sits at nsec * dx
    dx = 2 * np.pi / (nsec - 1)
    return np.arange(nsec + 1) * dx


def transform(values, log_scale):
    if not log_scale:
        return values
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.log10(values)


def row_means(field):
    nsec = field.shape[1]
    return (field / nsec).sum(axis=1)


def reformat(field, radii, curve=False, log_scale=False):
    """
    Turn an (nrad, nsec) field into an (N, 3) record array.

    Full mode yields nrad * (nsec + 1) records (angle, radius, value), the
    last record of each row repeating its first sample. Curve mode yields one
    (radius, mean, mean) record per row, averaged over the nsec raw samples.
    """
    nrad, nsec = field.shape
    radii = radial_coordinates(nrad, radii=radii)

    if curve:
        mean = row_means(field)
        return np.column_stack([radii, mean, mean])

    values = transform(field, log_scale)
    values = np.concatenate([values, values[:, :1]], axis=1)
    R, Theta = np.meshgrid(radii, azimuthal_coordinates(nsec), indexing="ij")
    return np.stack([Theta, R, values], axis=-1).reshape(-1, RECORD_WIDTH)


def reformat_extension(profile, radii, nsec, curve=False, log_scale=False):
    """
    Fan a 1D radial profile out over the nsec + 1 azimuthal positions of the
    2D grid. Curve mode yields one (radius, value, value) record per radius.
    """
    nrad1d = len(profile)
    radii = radial_coordinates(nrad1d, radii=radii)

    if curve:
        return np.column_stack([radii, profile, profile])

    values = np.broadcast_to(transform(profile, log_scale)[:, np.newaxis], (nrad1d, nsec + 1))
    R, Theta = np.meshgrid(radii, azimuthal_coordinates(nsec), indexing="ij")
    return np.stack([Theta, R, values], axis=-1).reshape(-1, RECORD_WIDTH)


def write_records(records, target):
    """Write records as little-endian doubles to a path or an open binary file."""
    data = np.ascontiguousarray(records, dtype=RECORD)
    if hasattr(target, "write"):
        target.write(data.tobytes())
    else:
        data.tofile(target)
    return len(data)


def read_records(path):
    return np.fromfile(path, dtype=RECORD).reshape(-1, RECORD_WIDTH)


def convert(input_path, output_path, nrad, nsec, rmin=0.0, rmax=0.0, radii=None, curve=False, log_scale=False, strict=True):
    """Read a field file, reformat it and write the stream. Returns the record count."""
    field = read_field(input_path, nrad, nsec, strict)
    radii = radial_coordinates(nrad, rmin, rmax, radii)[:field.shape[0]]
    records = reformat(field, radii, curve, log_scale)
    return write_records(records, output_path)


def convert_extension(input_path, output_path, nrad1d, nsec, rmin=0.0, rmax=0.0, radii=None, curve=False, log_scale=False, strict=True):
    profile = read_profile(input_path, nrad1d, strict)
    radii = radial_coordinates(nrad1d, rmin, rmax, radii)[:len(profile)]
    records = reformat_extension(profile, radii, nsec, curve, log_scale)
    return write_records(records, output_path)
