"""Semaphores, locks, condition variables and a synchronized list.

All of these rely on the kernel running one thread at a time: a thread is
never switched out except when it yields or sleeps. Each check-and-update
sequence below is therefore atomic without further protection.

Condition variables follow Mesa semantics. A signalled thread is only put
on the ready list. It must re-acquire the lock itself, and another thread
may change the protected state before it does.
"""

from __future__ import annotations

from typing import Any, Callable

from .kernel import Kernel, KernelError, Thread
from .lists import KeyedList
from .utility import debug

__all__ = ["Semaphore", "Lock", "Condition", "SynchList"]


def _running_thread(kernel: Kernel, action: str) -> Thread:
    thread = kernel.current_thread
    if thread is None:
        raise KernelError(f"cannot {action}: no kernel thread is running")
    return thread


class Semaphore:
    """A non-negative counter with atomic P (wait, decrement) and V (increment)."""

    def __init__(self, name: str, initial_value: int, kernel: Kernel) -> None:
        if initial_value < 0:
            raise ValueError("semaphore value must not be negative")
        self.name = name
        self._value = initial_value
        self._kernel = kernel
        self._waiting = KeyedList()

    def __repr__(self) -> str:
        return f"Semaphore({self.name!r})"

    def p(self) -> None:
        """Wait until the value is positive, then decrement it."""
        while self._value == 0:
            thread = _running_thread(self._kernel, f"wait on semaphore {self.name!r}")
            self._waiting.append(thread)
            thread.sleep()
        self._value -= 1

    def v(self) -> None:
        """Increment the value, waking one waiting thread if there is one."""
        thread = self._waiting.pop()
        if thread is not None:
            self._kernel.scheduler.ready_to_run(thread)
        self._value += 1


class Lock:
    """A mutual-exclusion lock that only its holder may release.

    A release by a thread that does not hold the lock is ignored.
    """

    def __init__(self, name: str, kernel: Kernel) -> None:
        self.name = name
        self._kernel = kernel
        self._busy = False
        self._owner: Thread | None = None
        self._waiting = KeyedList()

    def __repr__(self) -> str:
        return f"Lock({self.name!r})"

    def acquire(self) -> None:
        """Wait until the lock is free, then take it."""
        debug("t", "Current thread %s: Acquiring lock\n", self._kernel.current_thread)
        while self._busy:
            thread = _running_thread(self._kernel, f"wait for lock {self.name!r}")
            self._waiting.append(thread)
            thread.sleep()
        self._busy = True
        self._owner = self._kernel.current_thread

    def release(self) -> None:
        """Free the lock and wake one waiting thread, if the caller holds it."""
        if not self.is_held_by_current_thread():
            return
        debug("t", "Current thread %s: Releasing lock\n", self._kernel.current_thread)
        thread = self._waiting.pop()
        if thread is not None:
            self._kernel.scheduler.ready_to_run(thread)
        self._busy = False
        self._owner = None

    def is_held_by_current_thread(self) -> bool:
        """Return True if the running thread holds this lock."""
        return self._busy and self._owner is self._kernel.current_thread

    def __enter__(self) -> Lock:
        self.acquire()
        return self

    def __exit__(self, *args: object) -> None:
        self.release()


class Condition:
    """A queue of threads waiting for some state protected by a lock.

    Every operation is ignored unless the caller holds the given lock.
    """

    def __init__(self, name: str, kernel: Kernel) -> None:
        self.name = name
        self._kernel = kernel
        self._waiting = KeyedList()

    def __repr__(self) -> str:
        return f"Condition({self.name!r})"

    def wait(self, lock: Lock) -> None:
        """Release ``lock``, sleep until signalled, then re-acquire ``lock``."""
        if not lock.is_held_by_current_thread():
            return
        thread = _running_thread(self._kernel, f"wait on condition {self.name!r}")
        self._waiting.append(thread)
        lock.release()
        thread.sleep()
        lock.acquire()

    def signal(self, lock: Lock) -> None:
        """Wake the longest-waiting thread, if any."""
        if not lock.is_held_by_current_thread():
            return
        thread = self._waiting.pop()
        if thread is not None:
            self._kernel.scheduler.ready_to_run(thread)
        else:
            debug("t", "no more threads are waiting on this condition.")

    def broadcast(self, lock: Lock) -> None:
        """Wake every waiting thread."""
        if not lock.is_held_by_current_thread():
            return
        while (thread := self._waiting.pop()) is not None:
            self._kernel.scheduler.ready_to_run(thread)
        debug("t", "No more threads are waiting on this condition.\n")


class SynchList:
    """A FIFO list whose removals wait until an item is available."""

    def __init__(self, kernel: Kernel) -> None:
        self._items = KeyedList()
        self._lock = Lock("list lock", kernel)
        self._not_empty = Condition("list empty cond", kernel)

    def append(self, item: Any) -> None:
        """Add ``item`` at the end and wake one waiting remover."""
        with self._lock:
            self._items.append(item)
            self._not_empty.signal(self._lock)

    def remove(self) -> Any:
        """Remove and return the first item, waiting while the list is empty."""
        with self._lock:
            while self._items.is_empty():
                self._not_empty.wait(self._lock)
            return self._items.pop()

    def for_each(self, func: Callable[[Any], object]) -> None:
        """Call ``func`` on every item while holding the list's lock."""
        with self._lock:
            self._items.for_each(func)

    def __len__(self) -> int:
        return len(self._items)