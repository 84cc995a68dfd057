import glob
import os
import re

import numpy as np
import pandas as pd

from ..detail.errors import ConfigError


def read_radii(path, count=None):
    """
    Read a radius table: one radius per line, ordered by radial index.

    A line that does not parse as a number is an error. When `count` is given the
    table must hold at least that many radii and is cut down to `count`
    (FARGO's used_rad.dat stores the nrad + 1 cell interfaces).
    """
    if not os.path.isfile(path):
        raise ConfigError(f"radius table {path} does not exist")
    try:
        df = pd.read_csv(path, sep=r"\s+", header=None, comment="#", usecols=[0], dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        raise ConfigError(f"radius table {path} is empty")
    except pd.errors.ParserError as e:
        raise ConfigError(f"radius table {path} is malformed: {e}")

    values = pd.to_numeric(df[0], errors="coerce")
    bad = values.isna()
    if bad.any():
        # entries map to radial rows by position
        i = int(bad.to_numpy().argmax())
        raise ConfigError(f"radius table {path}: entry {i + 1} ({df[0].iloc[i]!r}) is not a number")
    radii = values.to_numpy(dtype=np.float64)

    if count is not None:
        if len(radii) < count:
            raise ConfigError(f"radius table {path} has {len(radii)} entries, expected at least {count}")
        radii = radii[:count]
    return radii


def output_pattern(field, one_d=False):
    suffix = "1D" if one_d else ""
    return re.compile(rf"^gas{re.escape(field)}{suffix}(\d+)\.dat$")


def find_outputs(directory, field, one_d=False):
    """Return (number, path) pairs of the field's outputs in `directory`, sorted by number."""
    pattern = output_pattern(field, one_d)
    outputs = []
    for file in glob.glob(os.path.join(directory, f"gas{field}*.dat")):
        match = pattern.match(os.path.basename(file))
        if match:
            outputs.append((int(match.group(1)), file))
    return sorted(outputs)


def find_latest_output(directory, field):
    """
    Find the most recent output of `field` in `directory`: the highest output
    number, with modification time breaking ties between equal numbers.
    """
    if not os.path.isdir(directory):
        raise ConfigError(f"output directory {directory} does not exist")
    outputs = find_outputs(directory, field)
    if not outputs:
        raise ConfigError(f"no gas{field}<N>.dat files found in {directory}")
    return max(outputs, key=lambda x: (x[0], os.path.getmtime(x[1])))


def output_number(path, field):
    match = output_pattern(field).match(os.path.basename(path))
    return int(match.group(1)) if match else None
