import os
from typing import NamedTuple, Optional

from .errors import ConfigError


class ParFile(NamedTuple):
    nrad: Optional[int] = None
    nsec: Optional[int] = None
    output_dir: Optional[str] = None
    rmin: Optional[float] = None
    rmax: Optional[float] = None


# lower-cased key -> (field, converter)
KEYS = {
    "nrad": ("nrad", int),
    "nsec": ("nsec", int),
    "outputdir": ("output_dir", str),
    "rmin": ("rmin", float),
    "rmax": ("rmax", float),
}


def parse_par(lines, source="<par>") -> ParFile:
    """
    Parse `key value` lines of a simulation parameter file.

    Keys are matched case-insensitively and unknown keys are skipped.
    `#` starts a comment anywhere on a line.
    """
    values = {}
    for lineno, line in enumerate(lines, start=1):
        line = line.split("#", 1)[0].strip()
        if not line:
            continue
        parts = line.split(None, 1)
        key = parts[0].lower()
        if key not in KEYS:
            continue
        name, convert = KEYS[key]
        if len(parts) < 2:
            raise ConfigError(f"{source}:{lineno}: no value given for {parts[0]}")
        raw = parts[1].split()[0]
        try:
            values[name] = convert(raw)
        except ValueError:
            raise ConfigError(f"{source}:{lineno}: invalid value {raw!r} for {parts[0]}")
    return ParFile(**values)


def read_par(path) -> ParFile:
    if not os.path.isfile(path):
        raise ConfigError(f"parameter file {path} does not exist")
    # OutputDir is kept as written, relative to the directory the run started from
    with open(path, "r") as f:
        return parse_par(f, source=str(path))
