from contextlib import contextmanager

from rich.console import Console
from rich.syntax import Syntax
from rich.theme import Theme


THEME = Theme({
    "info": "grey50",
    "warn": "yellow",
    "error": "bold red",
    "path": "cyan",
})


class Logger:
    def __init__(self, quiet: bool = False, verbose: bool = False, console: Console = None):
        self.quiet = quiet
        self.verbose = verbose
        self.console = console or Console(theme=THEME, stderr=True)

    def info(self, message: str):
        if not self.quiet:
            self.console.print(message, style="info")

    def warn(self, message: str):
        self.console.print(f"[warn]warning[/warn] {message}")

    def error(self, message: str):
        self.console.print(f"[error]error[/error] {message}")

    def script(self, text: str):
        if self.verbose:
            self.console.print(Syntax(text, "gnuplot", theme="ansi_dark", line_numbers=True))

    @contextmanager
    def status(self, message: str):
        if self.quiet:
            yield
            return
        with self.console.status(message, spinner="dots"):
            yield
        self.info(message)


# module level logger, configured by the CLI once flags are known
log = Logger()


def configure(quiet: bool = False, verbose: bool = False) -> Logger:
    log.quiet = quiet
    log.verbose = verbose
    return log
