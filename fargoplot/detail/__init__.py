from .config import Field, Grid, PlotConfig, Projection, Terminal
from .errors import ConfigError, DataIntegrityError, FargoplotError, RendererError
from .par import ParFile, parse_par, read_par
