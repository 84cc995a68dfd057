from typing import NamedTuple, Optional

from .errors import ConfigError


class Projection:
    RECTANGULAR = "rect"
    POLAR = "polar"


class Terminal:
    INTERACTIVE = "x11"
    PNG = "png"
    EPS = "eps"


class Field:
    DENSITY = "dens"
    VRAD = "vrad"
    VTHETA = "vtheta"
    LABEL = "label"
    TEMPERATURE = "temper"
    ENERGY = "energy"

    LABELS = {
        DENSITY: "density",
        VRAD: "radial velocity",
        VTHETA: "azimuthal velocity",
        LABEL: "passive scalar",
        TEMPERATURE: "temperature",
        ENERGY: "energy",
    }

    @staticmethod
    def filename(field: str, number: int) -> str:
        return f"gas{field}{number}.dat"

    @staticmethod
    def filename_1d(field: str, number: int) -> str:
        return f"gas{field}1D{number}.dat"


Range = tuple[float, float]


class Grid(NamedTuple):
    """Resolved grid geometry shared by the reformatter and the script builder."""
    nrad: int
    nsec: int
    rmin: float = 0.0
    rmax: float = 0.0
    nrad1d: Optional[int] = None

    def validate(self, with_1d: bool = False, with_2d: bool = True) -> "Grid":
        if with_2d and (not self.nrad or self.nrad < 1):
            raise ConfigError("number of radial cells (Nrad) is not set")
        if not self.nsec or self.nsec < 2:
            raise ConfigError("number of azimuthal cells (Nsec) must be at least 2")
        if with_1d and (not self.nrad1d or self.nrad1d < 1):
            raise ConfigError("number of 1D radial cells (--nrad1d) is not set")
        return self


class PlotConfig(NamedTuple):
    field: str = Field.DENSITY
    log: bool = False
    projection: str = Projection.RECTANGULAR
    rotate: bool = False
    crange: Optional[Range] = None
    xrange: Optional[Range] = None
    yrange: Optional[Range] = None
    palette: Optional[str] = None
    title: Optional[str] = None
    xlabel: Optional[str] = None
    ylabel: Optional[str] = None
    cblabel: Optional[str] = None
    terminal: str = Terminal.INTERACTIVE
    output: Optional[str] = None
    clean: bool = False
    square: bool = False
    scale: Optional[float] = None
    curve: bool = False
    with_1d: bool = False

    @property
    def polar(self) -> bool:
        return self.projection == Projection.POLAR

    @property
    def exporting(self) -> bool:
        return self.terminal != Terminal.INTERACTIVE

    def value_label(self) -> str:
        label = Field.LABELS.get(self.field, self.field)
        if self.log:
            label += " (log10)"
        return label
