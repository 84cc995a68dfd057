class FargoplotError(Exception):
    exit_code = 1


class ConfigError(FargoplotError):
    """Bad input paths, missing grid dimensions or a malformed .par file."""
    exit_code = -1


class DataIntegrityError(FargoplotError):
    """Field file does not hold the number of samples the grid declares."""
    exit_code = -1


class RendererError(FargoplotError):
    """gnuplot could not be started or exited with a non-zero status."""
    exit_code = 1
