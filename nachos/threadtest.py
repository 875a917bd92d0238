"""Demonstration workloads for the thread system.

``ping_pong`` shows two threads handing the CPU back and forth.
``SharedCounterTest`` has several threads increment one shared counter,
either unprotected or guarded by a lock or a semaphore.
``Laundromat`` has customers compete for a small pool of washing machines.
"""

from __future__ import annotations

import enum
import sys
import time
from contextlib import contextmanager
from typing import Iterator, TextIO

from .kernel import Kernel, KernelError
from .synch import Condition, Lock, Semaphore
from .utility import debug

__all__ = ["SyncMode", "SharedCounterTest", "Laundromat", "ping_pong", "thread_test"]

LOOPS = 5
NEGATIVE_COUNT_REPLACEMENT = 4
DEFAULT_CUSTOMERS = 5
DEFAULT_MACHINES = 2
DEFAULT_LOAD_SECONDS = 3.0


class SyncMode(enum.Enum):
    """How a workload protects its shared state."""

    NONE = "none"
    LOCKS = "locks"
    SEMAPHORES = "semaphores"


@contextmanager
def _exclusive(primitive: Lock | Semaphore) -> Iterator[None]:
    if isinstance(primitive, Semaphore):
        primitive.p()
        try:
            yield
        finally:
            primitive.v()
    else:
        primitive.acquire()
        try:
            yield
        finally:
            primitive.release()


def ping_pong(kernel: Kernel, out: TextIO | None = None) -> None:
    """Fork one thread and alternate with it, each looping five times.

    Must be called from a running kernel thread.
    """
    stream = out if out is not None else sys.stdout
    debug("t", "Entering ThreadTest1")

    def simple_thread(which: int) -> None:
        for num in range(LOOPS):
            stream.write(f"*** thread {which} looped {num} times\n")
            kernel.current_thread.yield_cpu()

    kernel.new_thread("forked thread").fork(simple_thread, 1)
    simple_thread(0)


class SharedCounterTest:
    """Several threads each increment a shared counter five times."""

    def __init__(self, kernel: Kernel, mode: SyncMode = SyncMode.NONE,
                 out: TextIO | None = None) -> None:
        self.kernel = kernel
        self.mode = mode
        self.out = out if out is not None else sys.stdout
        self.shared = 0
        self.remaining = 0
        self._control: Lock | Semaphore | None
        self._barrier: Lock | Semaphore | None
        if mode is SyncMode.LOCKS:
            self._control = Lock("SharedVariable control", kernel)
            self._barrier = Lock("Barrier control", kernel)
        elif mode is SyncMode.SEMAPHORES:
            self._control = Semaphore("SharedVariable control", 1, kernel)
            self._barrier = Semaphore("Barrier control", 1, kernel)
        else:
            self._control = None
            self._barrier = None

    def simple_thread(self, which: int) -> None:
        """Increment the shared counter five times, yielding in between."""
        current = self.kernel.current_thread
        if current is None:
            raise KernelError("no kernel thread is running")
        if self._control is None or self._barrier is None:
            debug("t", "SimpleThread running with no shared variable control; default\n")
            for _ in range(LOOPS):
                value = self.shared
                self.out.write(f"*** thread {which} sees value {value}\n")
                current.yield_cpu()
                self.shared = value + 1
                current.yield_cpu()
        else:
            debug("t", "SimpleThread running with %s controlling access.\n", self.mode.value)
            for _ in range(LOOPS):
                with _exclusive(self._control):
                    value = self.shared
                    self.out.write(f"*** thread {which} sees value {value}\n")
                    self.shared = value + 1
                current.yield_cpu()
            with _exclusive(self._barrier):
                self.remaining -= 1
            while self.remaining > 0:
                current.yield_cpu()
        self.out.write(f"Thread {which} sees final value {self.shared}\n")

    def run(self, n: int) -> None:
        """Fork ``n`` threads, then take part as thread 0.

        A negative ``n`` is replaced by 4. Must be called from a running
        kernel thread.
        """
        if n < 0:
            self.out.write("Setting argument -q to 4.  You can't specify a negative num")
            n = NEGATIVE_COUNT_REPLACEMENT
        debug("t", "Entering ThreadTest1\n")
        debug("t", "Using %s\n", self.mode.value)
        for which in range(1, n + 1):
            debug("t", "Making and forking thread #%d\n", which)
            self.kernel.new_thread("forked thread").fork(self.simple_thread, which)
        self.simple_thread(0)


def thread_test(kernel: Kernel, n: int, mode: SyncMode = SyncMode.NONE,
                out: TextIO | None = None) -> SharedCounterTest:
    """Run the shared-counter test with ``n`` forked threads and return it."""
    test = SharedCounterTest(kernel, mode, out)
    test.run(n)
    return test


class Laundromat:
    """Customers, each a thread, share a fixed set of washing machines."""

    def __init__(self, kernel: Kernel, mode: SyncMode = SyncMode.NONE,
                 machines: int = DEFAULT_MACHINES,
                 load_seconds: float = DEFAULT_LOAD_SECONDS) -> None:
        if machines < 1:
            raise ValueError("a laundromat needs at least one machine")
        self.kernel = kernel
        self.mode = mode
        self.load_seconds = load_seconds
        self.available = [True] * machines
        self.history: list[tuple[int, int]] = []
        self.peak_busy = 0
        if mode is SyncMode.LOCKS:
            self._machine_freed = Condition("Available machines", kernel)
            self._control = Lock("Controlling condition variable", kernel)
            self._handler_lock = Lock("Machine handler", kernel)
        else:
            self._free_count = Semaphore("Available machines", machines, kernel)
            if mode is SyncMode.SEMAPHORES:
                self._handler_sem = Semaphore("Machines", 1, kernel)

    def _claim(self) -> int | None:
        machine = next((i for i, free in enumerate(self.available) if free), None)
        if machine is not None:
            self.available[machine] = False
        return machine

    def allocate(self, person_id: int) -> int:
        """Wait for a free machine, mark it busy and return its index."""
        debug("l", "Trying to allocate a machine to person %d\n", person_id)
        if self.mode is SyncMode.LOCKS:
            while True:
                with self._handler_lock:
                    machine = self._claim()
                if machine is not None:
                    debug("l", "Machine %d allocated to person %d\n", machine, person_id)
                    return machine
                debug("l", "Person %d could not be allocated a machine.  Sleeping.\n",
                      person_id)
                with self._control:
                    self._machine_freed.wait(self._control)
        self._free_count.p()
        if self.mode is SyncMode.SEMAPHORES:
            with _exclusive(self._handler_sem):
                machine = self._claim()
        else:
            machine = self._claim()
        if machine is None:
            raise KernelError("no machine is free although one was counted as available")
        debug("l", "Allocating %d to person %d\n", machine, person_id)
        return machine

    def release(self, machine: int) -> None:
        """Mark ``machine`` free and let waiting customers know."""
        debug("l", "Releasing machine %d\n", machine)
        if self.mode is SyncMode.LOCKS:
            with self._handler_lock:
                self.available[machine] = True
            with self._control:
                self._machine_freed.broadcast(self._control)
            return
        if self.mode is SyncMode.SEMAPHORES:
            with _exclusive(self._handler_sem):
                self.available[machine] = True
        else:
            self.available[machine] = True
        self._free_count.v()

    def do_laundry(self, person_id: int) -> None:
        """One customer: get a machine, run one load, give the machine back."""
        debug("l", "Person %d is attempting to get a machine\n", person_id)
        machine = self.allocate(person_id)
        self.history.append((person_id, machine))
        self.peak_busy = max(self.peak_busy, self.available.count(False))
        started = time.monotonic()
        debug("l", "Person %d is doing laundry\n", person_id)
        current = self.kernel.current_thread
        while time.monotonic() - started < self.load_seconds:
            current.yield_cpu()
        debug("l", "Person %d is done with laundry and is releasing the machine\n",
              person_id)
        self.release(machine)

    def open(self, num_customers: int) -> None:
        """Free every machine and fork one thread per customer (5 if not positive).

        Must be called from a running kernel thread.
        """
        if num_customers <= 0:
            num_customers = DEFAULT_CUSTOMERS
        debug("l", "Num customers: %d\n", num_customers)
        debug("l", "Num machines: %d\n", len(self.available))
        self.available = [True] * len(self.available)
        for person_id in range(num_customers):
            debug("l", "Forking a new person to do laundry\n")
            self.kernel.new_thread("person").fork(self.do_laundry, person_id)