"""Command-line entry point: parse arguments, set up debugging, run a workload.

Recognised arguments:

    -d [flags]       enable debug messages for ``flags`` (all of them if omitted)
    -rs <seed>       seed the pseudo-random number generator, enabling random yields
    -q <n>           number of forked threads, or of customers with -laundry
    -locks           protect shared state with locks and condition variables
    -semaphores      protect shared state with semaphores
    -laundry         run the laundromat instead of the shared-counter test
    -load <seconds>  how long one laundry load takes

Without -laundry, any argument other than -q and the mode switches sets the
thread count to -1 (which the counter test replaces by 4), unless a later
-q gives it again.
"""

from __future__ import annotations

import random
import re
import sys
from dataclasses import dataclass
from typing import Iterator, Sequence

from .kernel import Kernel, KernelError
from .threadtest import DEFAULT_LOAD_SECONDS, Laundromat, SyncMode, thread_test
from .utility import debug, debug_init

__all__ = ["Options", "initialize", "main"]

_MODE_FLAGS = {
    "-locks": SyncMode.LOCKS,
    "-semaphores": SyncMode.SEMAPHORES,
}
_LAUNDRY_FLAG = "-laundry"
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass
class Options:
    """Settings gathered from the command line."""

    debug_flags: str = ""
    random_seed: int | None = None
    thread_count: int = 1
    customers: int = 0
    mode: SyncMode = SyncMode.NONE
    laundry: bool = False
    load_seconds: float = DEFAULT_LOAD_SECONDS

    @property
    def random_yield(self) -> bool:
        """True when a random seed was given."""
        return self.random_seed is not None


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _atof(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


def _required(args: Iterator[str], flag: str) -> str:
    value = next(args, None)
    if value is None:
        raise ValueError(f"{flag} needs an argument")
    return value


def _parse_system(argv: Sequence[str], options: Options) -> None:
    args = iter(argv)
    for arg in args:
        if arg == "-d":
            flags = next(args, None)
            options.debug_flags = "+" if flags is None else flags
        elif arg == "-rs":
            options.random_seed = _atoi(_required(args, arg))


def _parse_workload(argv: Sequence[str], options: Options) -> None:
    options.laundry = _LAUNDRY_FLAG in argv
    args = iter(argv)
    for arg in args:
        if arg in _MODE_FLAGS:
            options.mode = _MODE_FLAGS[arg]
        elif arg == _LAUNDRY_FLAG:
            continue
        elif arg == "-load":
            options.load_seconds = _atof(_required(args, arg))
        elif arg[1:2] == "q":
            count = _atoi(_required(args, arg))
            if options.laundry:
                options.customers = count
            else:
                options.thread_count = count
        elif not options.laundry:
            options.thread_count = -1


def initialize(argv: Sequence[str]) -> Options:
    """Parse ``argv`` (without the program name) and enable the debug flags it names.

    Raises ValueError when an argument that needs a value has none.
    """
    options = Options()
    _parse_system(argv, options)
    _parse_workload(argv, options)
    debug_init(options.debug_flags)
    if options.random_seed is not None:
        random.seed(options.random_seed)
    return options


def main(argv: Sequence[str] | None = None) -> int:
    """Run the selected workload in a fresh kernel; return the exit status."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        options = initialize(list(argv))
    except ValueError as exc:
        sys.stderr.write(f"nachos: {exc}\n")
        sys.stderr.flush()
        return 1

    debug("t", "Entering main")
    kernel = Kernel()
    try:
        if options.laundry:
            laundromat = Laundromat(kernel, options.mode,
                                    load_seconds=options.load_seconds)
            kernel.start(laundromat.open, options.customers)
        else:
            kernel.start(thread_test, kernel, options.thread_count, options.mode)
    except KernelError as exc:
        sys.stdout.flush()
        sys.stderr.write(f"nachos: {exc}\n")
        sys.stderr.flush()
        return 1
    sys.stdout.flush()
    return 0