import functools
import os

import click

from . import run as runner
from .common.helpers import read_radii
from .common.log import configure, log
from .detail import ConfigError, DataIntegrityError, Field, Grid, ParFile, PlotConfig, Projection, RendererError, Terminal, read_par
from .tools import reformat as rf


class Group(click.Group):
    """Command group whose usage errors, click's own included, exit with -1."""

    def make_context(self, *args, **kwargs):
        try:
            return super().make_context(*args, **kwargs)
        except click.UsageError as e:
            e.exit_code = -1
            raise

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = -1
            raise


@click.group(cls=Group)
@click.option("-q", "--quiet", is_flag=True, default=False, help="Only report warnings and errors.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Echo the generated gnuplot script.")
def cli(quiet, verbose):
    configure(quiet=quiet, verbose=verbose)


def grid_options(f):
    options = [
        click.option("--par", type=click.Path(), help="Simulation .par file to read Nrad, Nsec, Rmin, Rmax and OutputDir from."),
        click.option("--nrad", type=int, help="Number of radial cells (overrides Nrad)."),
        click.option("--nsec", type=int, help="Number of azimuthal cells (overrides Nsec)."),
        click.option("--rmin", type=float, help="Inner radius (overrides Rmin)."),
        click.option("--rmax", type=float, help="Outer radius (overrides Rmax)."),
        click.option("--radii", type=click.Path(), help="Radius table, one radius per radial cell."),
        click.option("--linear", is_flag=True, default=False, help="Ignore used_rad.dat and space radii linearly."),
        click.option("--log", "log_scale", is_flag=True, default=False, help="Plot log10 of the field."),
        click.option("--curve", is_flag=True, default=False, help="Plot the azimuthally averaged radial profile."),
        click.option("--lenient", is_flag=True, default=False, help="Plot truncated files instead of failing."),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def plot_options(f):
    options = [
        click.argument("target", required=False),
        click.option("-d", "--dir", "directory", type=click.Path(), help="Directory holding the outputs (overrides OutputDir)."),
        click.option("-f", "--field", type=click.Choice(list(Field.LABELS)), default=Field.DENSITY, show_default=True),
        grid_options,
        click.option("--nrad1d", type=int, help="Number of radial cells of the 1D grid."),
        click.option("--1d", "with_1d", is_flag=True, default=False, help="Overlay the 1D companion output."),
        click.option("--file1d", type=click.Path(), help="1D companion file (default gas<field>1D<N>.dat)."),
        click.option("--radii1d", type=click.Path(), help="Radius table of the 1D grid."),
        click.option("--polar", is_flag=True, default=False, help="Project onto the disk plane."),
        click.option("--rotate", is_flag=True, default=False, help="Swap x and y of the polar projection."),
        click.option("--crange", type=(float, float), help="Colour axis range."),
        click.option("--xrange", type=(float, float)),
        click.option("--yrange", type=(float, float)),
        click.option("--palette", type=str, help="gnuplot palette spec, e.g. 'rgbformulae 33,13,10'."),
        click.option("--title", type=str),
        click.option("--xlabel", type=str),
        click.option("--ylabel", type=str),
        click.option("--cblabel", type=str),
        click.option("--png", is_flag=True, default=False, help="Write a PNG image."),
        click.option("--eps", is_flag=True, default=False, help="Write an EPS image."),
        click.option("-o", "--output", type=click.Path(), help="Image file name."),
        click.option("--clean", is_flag=True, default=False, help="Strip tics, borders and margins."),
        click.option("--square", is_flag=True, default=False),
        click.option("--scale", type=float, help="Multiply the 2D values by this factor."),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def fail_on_errors(command):
    """Map fargoplot errors onto click exceptions and exit codes."""
    @functools.wraps(command)
    def wrapper(*args, **kwargs):
        try:
            return command(*args, **kwargs)
        except (ConfigError, DataIntegrityError) as e:
            raise click.UsageError(str(e), ctx=click.get_current_context())
        except RendererError as e:
            log.error(str(e))
            click.get_current_context().exit(e.exit_code)
    return wrapper


def load_grid(par, nrad, nsec, rmin, rmax, nrad1d=None) -> tuple[Grid, ParFile]:
    settings = read_par(par) if par else ParFile()
    grid = Grid(
        nrad=nrad if nrad is not None else settings.nrad,
        nsec=nsec if nsec is not None else settings.nsec,
        rmin=rmin if rmin is not None else (settings.rmin or 0.0),
        rmax=rmax if rmax is not None else (settings.rmax or 0.0),
        nrad1d=nrad1d,
    )
    return grid, settings


def load_radii(path, default, linear, count):
    if path:
        return read_radii(path, count)
    if not linear and default and os.path.isfile(default):
        log.info(f"radii from [path]{default}[/path]")
        return read_radii(default, count)
    return None


def prepare(target, directory, field, par, nrad, nsec, rmin, rmax, radii, linear, log_scale, curve, lenient,
            nrad1d, with_1d, file1d, radii1d, polar, rotate, crange, xrange, yrange, palette, title,
            xlabel, ylabel, cblabel, png, eps, output, clean, square, scale):
    if png and eps:
        raise ConfigError("--png and --eps are mutually exclusive")

    grid, settings = load_grid(par, nrad, nsec, rmin, rmax, nrad1d)
    grid = grid.validate(with_1d=with_1d)
    directory = directory or settings.output_dir or "."
    input_path, number = runner.resolve_input(target, directory, field)
    data_dir = os.path.dirname(input_path) or "."

    terminal = Terminal.PNG if png else Terminal.EPS if eps else Terminal.INTERACTIVE
    if terminal != Terminal.INTERACTIVE and output is None:
        output = os.path.splitext(os.path.basename(input_path))[0] + "." + terminal

    if with_1d and file1d is None:
        if number is None:
            raise ConfigError(f"cannot derive the 1D companion of {input_path}, use --file1d")
        file1d = os.path.join(data_dir, Field.filename_1d(field, number))

    config = PlotConfig(
        field=field,
        log=log_scale,
        projection=Projection.POLAR if polar else Projection.RECTANGULAR,
        rotate=rotate,
        crange=crange,
        xrange=xrange,
        yrange=yrange,
        palette=palette,
        title=title,
        xlabel=xlabel,
        ylabel=ylabel,
        cblabel=cblabel,
        terminal=terminal,
        output=output,
        clean=clean,
        square=square,
        scale=scale,
        curve=curve,
        with_1d=with_1d,
    )
    return dict(
        config=config,
        grid=grid,
        input_path=input_path,
        radii=load_radii(radii, os.path.join(data_dir, "used_rad.dat"), linear, grid.nrad),
        input_1d=file1d,
        radii_1d=load_radii(radii1d, os.path.join(data_dir, "used_rad1D.dat"), linear, grid.nrad1d) if with_1d else None,
        strict=not lenient,
    )


@click.command()
@plot_options
@click.option("--keep", is_flag=True, default=False, help="Keep the scratch files after a successful run.")
@click.option("--gnuplot", type=str, default="gnuplot", show_default=True, help="gnuplot executable.")
@click.option("--dry-run", is_flag=True, default=False, help="Print the script without reading data or running gnuplot.")
@fail_on_errors
def plot(keep, gnuplot, dry_run, **kwargs):
    """Plot TARGET: a field file, an output number, or the latest output when omitted."""
    job = prepare(**kwargs)
    text = runner.plot(**job, keep=keep, gnuplot=gnuplot, dry_run=dry_run)
    if dry_run:
        click.echo(text, nl=False)


@click.command()
@plot_options
@fail_on_errors
def script(**kwargs):
    """Print the gnuplot script `plot` would run for TARGET."""
    job = prepare(**kwargs)
    click.echo(runner.plot(**job, dry_run=True), nl=False)


@click.command()
@click.argument("input_file", type=click.Path())
@click.argument("output_file", type=click.Path())
@grid_options
@click.option("--extension", type=int, metavar="NRAD1D", help="Treat INPUT_FILE as a 1D profile with this many cells.")
@fail_on_errors
def convert(input_file, output_file, par, nrad, nsec, rmin, rmax, radii, linear, log_scale, curve, lenient, extension):
    """Reformat INPUT_FILE into a stream of (coord, coord, value) doubles."""
    grid, _ = load_grid(par, nrad, nsec, rmin, rmax, extension)
    grid = grid.validate(with_1d=extension is not None, with_2d=extension is None)
    data_dir = os.path.dirname(input_file) or "."

    if extension is None:
        table = load_radii(radii, os.path.join(data_dir, "used_rad.dat"), linear, grid.nrad)
        count = rf.convert(input_file, output_file, grid.nrad, grid.nsec, grid.rmin, grid.rmax, table,
                           curve=curve, log_scale=log_scale, strict=not lenient)
    else:
        table = load_radii(radii, os.path.join(data_dir, "used_rad1D.dat"), linear, grid.nrad1d)
        count = rf.convert_extension(input_file, output_file, grid.nrad1d, grid.nsec, grid.rmin, grid.rmax, table,
                                     curve=curve, log_scale=log_scale, strict=not lenient)
    log.info(f"wrote {count} records to [path]{output_file}[/path]")


cli.add_command(plot)
cli.add_command(script)
cli.add_command(convert)

if __name__ == "__main__":
    cli()
