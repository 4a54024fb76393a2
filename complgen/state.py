import typing

from .printer import cons

# Parsed command-line arguments of the current run.
gARG: dict = {}

def load(args: dict) -> None:
    # pylint: disable=global-statement
    global gARG
    gARG = dict(args)
    cons.quiet = bool(gARG.get("quiet", False))

def ARG(arg: str, dflt = None) -> typing.Any:
    if arg in gARG:
        return gARG[arg]
    if dflt is not None:
        return dflt

    raise KeyError(f"{arg} is not an argument.")
