"""Kernel threads, the ready list and the dispatcher.

Every kernel thread is backed by a host thread, but only the thread that
holds the (simulated) CPU ever runs: a context switch hands a baton to the
next thread and parks the previous one until it is dispatched again.
Scheduling is strictly FIFO, with no priorities and no preemption.
"""

from __future__ import annotations

import enum
import threading
from typing import Any, Callable

from .lists import KeyedList
from .utility import debug

__all__ = ["KernelError", "DeadlockError", "ThreadStatus", "Thread", "Scheduler", "Kernel"]


class KernelError(Exception):
    """A kernel invariant was violated."""


class DeadlockError(KernelError):
    """A thread blocked while no other thread was ready to run."""


class _ThreadExit(BaseException):
    """Unwinds a host thread whose kernel thread is gone or whose kernel halted."""


class ThreadStatus(enum.Enum):
    """Life-cycle state of a kernel thread."""

    JUST_CREATED = "just created"
    RUNNING = "running"
    READY = "ready"
    BLOCKED = "blocked"


class Thread:
    """A thread control block: a name, a status and a host thread to run on."""

    def __init__(self, name: str, kernel: Kernel) -> None:
        self.name = name
        self.kernel = kernel
        self.status = ThreadStatus.JUST_CREATED
        self._baton = threading.Semaphore(0)
        self._host: threading.Thread | None = None

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Thread({self.name!r}, {self.status.name})"

    def fork(self, func: Callable[[Any], object], arg: Any) -> None:
        """Arrange for ``func(arg)`` to run in this thread, then make it ready."""
        if self.status is not ThreadStatus.JUST_CREATED:
            raise KernelError(f"thread {self.name!r} has already been started")
        debug("t", 'Forking thread "%s" with func = %s, arg = %r\n',
              self.name, getattr(func, "__name__", repr(func)), arg)
        self._launch(lambda: func(arg), wait_first=True)
        self.kernel.scheduler.ready_to_run(self)

    def yield_cpu(self) -> None:
        """Give the CPU to the next ready thread, if any, and requeue this one."""
        self._require_current("yield")
        debug("t", 'Yielding thread "%s"\n', self.name)
        scheduler = self.kernel.scheduler
        next_thread = scheduler.find_next_to_run()
        if next_thread is not None:
            scheduler.ready_to_run(self)
            scheduler.run(next_thread)

    def sleep(self) -> None:
        """Block this thread and dispatch the next ready one.

        The thread runs again only after something puts it back on the ready
        list. If no thread is ready the kernel halts: normally when this thread
        is finishing, with :class:`DeadlockError` otherwise.
        """
        self._require_current("sleep")
        debug("t", 'Sleeping thread "%s"\n', self.name)
        self.status = ThreadStatus.BLOCKED
        kernel = self.kernel
        next_thread = kernel.scheduler.find_next_to_run()
        if next_thread is None:
            if self is kernel.thread_to_be_destroyed:
                kernel._halt(None)
            else:
                kernel._halt(DeadlockError(
                    f"thread {self.name!r} blocked with no thread ready to run"))
            raise _ThreadExit
        kernel.scheduler.run(next_thread)

    def finish(self) -> None:
        """End this thread; never returns."""
        self._require_current("finish")
        debug("t", 'Finishing thread "%s"\n', self.name)
        self.kernel.thread_to_be_destroyed = self
        self.sleep()
        raise KernelError(f"finished thread {self.name!r} was resumed")

    def _require_current(self, action: str) -> None:
        if self is not self.kernel.current_thread:
            raise KernelError(f"thread {self.name!r} cannot {action}: it is not running")

    def _launch(self, target: Callable[[], object], wait_first: bool) -> None:
        host = threading.Thread(
            target=self._bootstrap, args=(target, wait_first),
            name=f"kernel-{self.name}", daemon=True)
        self._host = host
        self.kernel._hosts.append(self)
        host.start()

    def _bootstrap(self, target: Callable[[], object], wait_first: bool) -> None:
        try:
            if wait_first:
                self._wait_for_cpu()
            target()
            self.finish()
        except _ThreadExit:
            pass
        except BaseException as exc:  # noqa: BLE001 - reported through Kernel.start
            self.kernel._halt(exc)

    def _wait_for_cpu(self) -> None:
        self._baton.acquire()
        kernel = self.kernel
        if kernel._halted:
            raise _ThreadExit
        debug("t", 'Now in thread "%s"\n', self.name)
        kernel._reap()


class Scheduler:
    """The FIFO list of threads that are ready but not running."""

    def __init__(self, kernel: Kernel) -> None:
        self.kernel = kernel
        self._ready = KeyedList()

    def ready_to_run(self, thread: Thread) -> None:
        """Mark ``thread`` ready and put it at the end of the ready list."""
        debug("t", "Putting thread %s on ready list.\n", thread.name)
        thread.status = ThreadStatus.READY
        self._ready.append(thread)

    def find_next_to_run(self) -> Thread | None:
        """Remove and return the first ready thread, or None if there is none."""
        return self._ready.pop()

    def run(self, next_thread: Thread) -> None:
        """Switch the CPU from the current thread to ``next_thread``.

        Returns when the current thread is dispatched again.
        """
        kernel = self.kernel
        old = kernel.current_thread
        if old is None:
            raise KernelError("no thread is running")
        finishing = old is kernel.thread_to_be_destroyed
        kernel._current = next_thread
        next_thread.status = ThreadStatus.RUNNING
        debug("t", 'Switching from thread "%s" to thread "%s"\n',
              old.name, next_thread.name)
        next_thread._baton.release()
        if finishing:
            raise _ThreadExit
        old._wait_for_cpu()

    def ready_names(self) -> list[str]:
        """Names of the ready threads, front of the list first."""
        return [thread.name for thread in self._ready]

    def print(self) -> None:
        """Print the contents of the ready list."""
        print("Ready list contents:")
        self._ready.for_each(lambda thread: print(f"{thread.name}, ", end=""))


class Kernel:
    """Owns the scheduler and the notion of the running thread."""

    def __init__(self) -> None:
        self.scheduler = Scheduler(self)
        self.thread_to_be_destroyed: Thread | None = None
        self._current: Thread | None = None
        self._hosts: list[Thread] = []
        self._done = threading.Event()
        self._halted = False
        self._started = False
        self._error: BaseException | None = None
        self._result: Any = None

    @property
    def current_thread(self) -> Thread | None:
        """The thread holding the CPU, or None before the kernel starts."""
        return self._current

    def new_thread(self, name: str) -> Thread:
        """Create a thread control block; call :meth:`Thread.fork` to start it."""
        return Thread(name, self)

    def start(self, func: Callable[..., Any], *args: Any) -> Any:
        """Run ``func(*args)`` as the "main" thread and wait until the kernel halts.

        Returns what ``func`` returned. An exception raised in any kernel
        thread halts the kernel and is raised here.
        """
        if self._started:
            raise KernelError("kernel has already been started")
        self._started = True
        main = Thread("main", self)
        main.status = ThreadStatus.RUNNING
        self._current = main

        def body() -> None:
            self._result = func(*args)

        main._launch(body, wait_first=False)
        self._done.wait()
        for thread in list(self._hosts):
            if thread._host is not None:
                thread._host.join()
        if self._error is not None:
            raise self._error
        return self._result

    def _reap(self) -> None:
        doomed = self.thread_to_be_destroyed
        if doomed is not None:
            debug("t", 'Deleting thread "%s"\n', doomed.name)
            self.thread_to_be_destroyed = None

    def _halt(self, error: BaseException | None) -> None:
        if self._halted:
            return
        self._halted = True
        self._error = error
        for thread in self._hosts:
            thread._baton.release()
        self._done.set()