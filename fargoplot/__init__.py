from .detail import ConfigError, DataIntegrityError, Field, Grid, ParFile, PlotConfig, Projection, RendererError, Terminal, read_par
from .run import ScratchSpace, plot, render, resolve_input
from .tools import Stream, build, convert, convert_extension
