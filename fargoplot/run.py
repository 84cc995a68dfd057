import os
import secrets
import signal
import subprocess
import tempfile
from contextlib import contextmanager
from typing import Optional

from .common.helpers import find_latest_output, output_number
from .common.log import log
from .detail import ConfigError, Field, Grid, PlotConfig, RendererError
from .tools import reformat as rf
from .tools.script import Stream, build


def resolve_input(target: Optional[str], directory: str, field: str) -> tuple[str, Optional[int]]:
    """
    Resolve the field file to plot. `target` is a path, an output number
    looked up in `directory`, or None for the most recent output there.
    """
    if target is None:
        number, path = find_latest_output(directory, field)
        return path, number
    if target.isdigit():
        number = int(target)
        return os.path.join(directory, Field.filename(field, number)), number
    return target, output_number(target, field)


class ScratchSpace:
    """
    Uniquely named scratch files for one invocation.

    Files are removed on exit. `keep` retains them after a successful run
    only; failures and interrupts always clean up.
    """

    def __init__(self, keep: bool = False, directory: str = None, token: str = None):
        self.keep = keep
        self.directory = directory or tempfile.gettempdir()
        self.token = token or secrets.token_hex(6)
        self.files = []

    def path(self, suffix: str) -> str:
        path = os.path.join(self.directory, f"fargoplot_{self.token}{suffix}")
        self.files.append(path)
        return path

    def cleanup(self):
        for path in self.files:
            try:
                os.remove(path)
            except FileNotFoundError:
                pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None and self.keep:
            for path in self.files:
                if os.path.exists(path):
                    log.info(f"kept [path]{path}[/path]")
        else:
            self.cleanup()
        return False


def _raise_interrupt(signum, frame):
    raise KeyboardInterrupt(signal.Signals(signum).name)


@contextmanager
def interrupts_as_keyboard(signums=None):
    """Turn termination signals into KeyboardInterrupt so scratch cleanup runs."""
    if signums is None:
        signums = [signal.SIGTERM]
        if hasattr(signal, "SIGHUP"):
            signums.append(signal.SIGHUP)

    previous = {s: signal.signal(s, _raise_interrupt) for s in signums}
    try:
        yield
    finally:
        for s, handler in previous.items():
            signal.signal(s, handler)


def render(script_path: str, gnuplot: str = "gnuplot") -> int:
    try:
        result = subprocess.run([gnuplot, script_path])
    except FileNotFoundError:
        raise RendererError(f"renderer {gnuplot!r} not found")
    if result.returncode != 0:
        raise RendererError(f"{gnuplot} exited with status {result.returncode}")
    return result.returncode


def plot(config: PlotConfig, grid: Grid, input_path: str, radii=None, input_1d: str = None, radii_1d=None,
         keep: bool = False, gnuplot: str = "gnuplot", strict: bool = True, dry_run: bool = False,
         scratch_dir: str = None) -> str:
    """
    Reformat `input_path` (and the 1D companion when `config.with_1d`),
    write the gnuplot script and run it. Returns the script text.

    With `dry_run` nothing is read, written or rendered.
    """
    grid.validate(with_1d=config.with_1d)
    rf.check_input(input_path)
    if config.with_1d:
        if input_1d is None:
            raise ConfigError("1D companion file is not set")
        rf.check_input(input_1d)

    title = os.path.basename(input_path)
    with interrupts_as_keyboard(), ScratchSpace(keep=keep, directory=scratch_dir) as scratch:
        columns = 1 if config.curve else grid.nsec + 1
        streams = [Stream(scratch.path(".bin"), grid.nrad, columns)]
        if config.with_1d:
            streams.append(Stream(scratch.path("_1d.bin"), grid.nrad1d, columns, scaled=False))

        if not dry_run:
            with log.status(f"reformatting [path]{input_path}[/path]"):
                field = rf.read_field(input_path, grid.nrad, grid.nsec, strict)
                radii = rf.radial_coordinates(grid.nrad, grid.rmin, grid.rmax, radii)[:field.shape[0]]
                rf.write_records(rf.reformat(field, radii, config.curve, config.log), streams[0].path)
                streams[0] = streams[0]._replace(rows=field.shape[0])

            if config.with_1d:
                with log.status(f"reformatting [path]{input_1d}[/path]"):
                    profile = rf.read_profile(input_1d, grid.nrad1d, strict)
                    radii_1d = rf.radial_coordinates(grid.nrad1d, grid.rmin, grid.rmax, radii_1d)[:len(profile)]
                    records = rf.reformat_extension(profile, radii_1d, grid.nsec, config.curve, config.log)
                    rf.write_records(records, streams[1].path)
                    streams[1] = streams[1]._replace(rows=len(profile))

        text = build(config, streams, title=title)
        log.script(text)
        if dry_run:
            return text

        script_path = scratch.path(".gp")
        with open(script_path, "w") as f:
            f.write(text)

        log.info(f"running {gnuplot}")
        render(script_path, gnuplot)
        if config.exporting and config.output:
            log.info(f"wrote [path]{config.output}[/path]")
    return text
