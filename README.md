# nachos

A small instructional kernel in plain Python. Threads take turns on a single
simulated CPU, a first-in first-out scheduler decides who runs next, and the
classic synchronisation primitives are built on top: semaphores, locks,
condition variables and a synchronised list.

Only one thread runs at a time, and a thread gives up the CPU only when it
yields, sleeps on a synchronisation object or finishes. Runs are therefore
deterministic, which makes the package handy for studying race conditions,
mutual exclusion and scheduling order.

## Installing

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Command line

Installing the package provides a `nachos` command that starts a kernel and
runs one of the built-in workloads.

```
nachos
```

runs the shared-counter test with one forked thread plus the main thread
(thread 0). With no protection each thread reads the counter, yields, and
then writes it back, so updates are lost; every thread prints what it sees
and the final value.

Options:

- `-q N` — number of forked threads for the counter test (a negative count
  is replaced by 4), or the number of customers with `-laundry` (5 if not
  positive)
- `-locks` — protect shared state with locks (and condition variables in
  the laundromat)
- `-semaphores` — protect shared state with semaphores
- `-laundry` — run the laundromat: customers, each a thread, compete for two
  washing machines
- `-load SECONDS` — how long one laundry load takes (default 3)
- `-d FLAGS` — print debug messages for the given flag characters (`t`
  threads and synchronisation, `l` laundromat, `+` everything); `-d` on its
  own enables all of them
- `-rs SEED` — seed Python's `random` generator

Without `-laundry`, any other unrecognised argument sets the thread count to
-1 (and so to 4), unless a later `-q` sets it again. An option missing its
value, or a kernel error such as a deadlock, makes the command print a
message to standard error and exit with status 1.

Examples:

```
nachos -q 3 -locks
nachos -laundry -semaphores -q 4 -load 0.5
nachos -d t
```

## Library use

The modules:

- `nachos.utility` — debug flags: `debug_init`, `debug_is_enabled`, `debug`
- `nachos.lists` — `KeyedList`, a FIFO list that can also keep items in
  increasing key order (`sorted_insert`, `sorted_pop`)
- `nachos.kernel` — `Kernel`, `Thread`, `Scheduler`, `ThreadStatus`, and
  the errors `KernelError` and `DeadlockError`
- `nachos.synch` — `Semaphore`, `Lock`, `Condition`, `SynchList`
- `nachos.threadtest` — `SharedCounterTest` and `SyncMode`, the
  `Laundromat`, `ping_pong` and `thread_test`
- `nachos.main` — command-line handling: `Options`, `initialize`, `main`

`Kernel.start(func, *args)` runs `func` as the "main" thread, waits until
every thread has finished, and returns what `func` returned. New threads are
made with `Kernel.new_thread(name)` and started with `Thread.fork(func, arg)`;
`Kernel.current_thread` is the running thread.

Two threads sharing a lock:

```python
from nachos.kernel import Kernel
from nachos.synch import Lock

kernel = Kernel()
lock = Lock("counter", kernel)
seen = []

def worker(which):
    for _ in range(3):
        with lock:
            seen.append(which)
        kernel.current_thread.yield_cpu()

def boot():
    kernel.new_thread("worker").fork(worker, 1)
    worker(0)

kernel.start(boot)
print(seen)  # [0, 1, 0, 1, 0, 1]
```

Semaphores use `p` / `v`. `Lock.release`, and `wait`, `signal` and
`broadcast` on a `Condition`, do nothing when the calling thread does not
hold the lock. Condition variables follow Mesa semantics: a woken thread
re-acquires the lock inside `wait` and must re-check its condition.

If a thread blocks while no other thread is ready to run, the kernel halts
and `Kernel.start` raises `DeadlockError` instead of hanging. An exception
raised in any kernel thread likewise halts the kernel and is raised from
`Kernel.start`.

## What it does not do

This is only the thread layer of a kernel. There is no timer and no
preemption: threads switch only when they yield, sleep or finish, and
seeding with `-rs` does not cause random yields. There are no user
programs, no memory management, no file system and no network.