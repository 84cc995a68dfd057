from typing import NamedTuple, Optional

from ..detail.config import PlotConfig, Terminal

TERMINALS = {
    Terminal.PNG: "png",
    Terminal.EPS: "postscript eps enhanced color",
}

PI_TICS = '("0" 0, "pi/2" pi/2, "pi" pi, "3pi/2" 3*pi/2, "2pi" 2*pi)'

CLEAN = [
    "unset xtics",
    "unset ytics",
    "unset border",
    "unset colorbox",
    "unset key",
    "unset title",
    "unset xlabel",
    "unset ylabel",
    "set lmargin 0",
    "set rmargin 0",
    "set tmargin 0",
    "set bmargin 0",
    "set size square",
]


class Stream(NamedTuple):
    """A reformatted scratch file and the shape of its records."""
    path: str
    rows: int
    columns: int = 1
    scaled: bool = True


def quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def num(x) -> str:
    return repr(float(x))


def span(r) -> str:
    return f"[{num(r[0])}:{num(r[1])}]"


def projection(config: PlotConfig) -> tuple[str, str]:
    if not config.polar:
        return "($1)", "($2)"
    if config.rotate:
        return "($2*sin($1))", "($2*cos($1))"
    return "($2*cos($1))", "($2*sin($1))"


def value_expression(config: PlotConfig, stream: Stream) -> str:
    if config.scale is not None and stream.scaled:
        return f"($3*{num(config.scale)})"
    return "($3)"


def labels(config: PlotConfig) -> list[str]:
    if config.curve:
        xlabel, ylabel = "radius", config.value_label()
    elif config.polar:
        xlabel, ylabel = "radius", "radius"
    else:
        xlabel, ylabel = "theta", "radius"

    lines = [
        f"set xlabel {quote(config.xlabel or xlabel)}",
        f"set ylabel {quote(config.ylabel or ylabel)}",
    ]
    if not config.curve:
        lines.append(f"set cblabel {quote(config.cblabel or config.value_label())}")
    return lines


def binary_source(stream: Stream, curve: bool) -> str:
    if curve:
        record = f"record={stream.rows}"
    else:
        record = f"record={stream.columns}x{stream.rows}"
    return f'{quote(stream.path)} binary {record} format="%3double" endian=little'


def plot_command(config: PlotConfig, streams: list[Stream]) -> list[str]:
    if config.curve:
        curves = [
            f"{binary_source(s, True)} using 1:2 with lines title {quote(config.value_label() if i == 0 else '1D')}"
            for i, s in enumerate(streams)
        ]
        return ["plot " + ", \\\n     ".join(curves)]

    x, y = projection(config)
    surfaces = [
        f"{binary_source(s, False)} using {x}:{y}:{value_expression(config, s)} with pm3d notitle"
        for s in streams
    ]
    return ["set view map", "splot " + ", \\\n      ".join(surfaces)]


def build(config: PlotConfig, streams: list[Stream], title: Optional[str] = None) -> str:
    """
    Assemble the gnuplot script drawing `streams` under `config`.

    Surfaces are splotted as pm3d maps; curve mode draws the radial profiles
    as lines and skips every colour-axis directive.
    """
    lines = []

    if config.exporting:
        lines.append(f"set terminal {TERMINALS[config.terminal]}")
        if config.output:
            lines.append(f"set output {quote(config.output)}")

    if config.square:
        lines.append("set size square")
    elif config.polar and not config.curve:
        lines.append("set size ratio -1")

    title = config.title if config.title is not None else title
    if title:
        lines.append(f"set title {quote(title)}")

    lines.extend(labels(config))

    if not config.curve and not config.polar:
        lines.append(f"set xtics {PI_TICS}")

    if config.curve and config.log:
        lines.append("set logscale y")

    if not config.curve:
        if config.crange:
            lines.append(f"set cbrange {span(config.crange)}")
        if config.palette:
            lines.append(f"set palette {config.palette}")

    if config.xrange:
        lines.append(f"set xrange {span(config.xrange)}")
    if config.yrange:
        lines.append(f"set yrange {span(config.yrange)}")

    if config.clean:
        lines.extend(CLEAN)

    lines.extend(plot_command(config, streams))

    if not config.exporting:
        lines.append("pause mouse close")
    else:
        lines.append("unset output")

    return "\n".join(lines) + "\n"
