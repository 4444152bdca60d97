"""py-interrupts — a trace-driven simulator of a kernel's interrupt path.

The simulator replays a scripted trace of CPU bursts, system calls,
device completions, and FORK/EXEC requests against a tiny kernel model
(one clock, a fixed partition table, a process table) and records every
micro-operation the kernel performs, with exact timestamps.
"""
