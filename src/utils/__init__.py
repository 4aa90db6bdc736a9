"""
Common utilities shared across the framework.

Includes record ordering, file filters, structural tuples, sequence numbers,
list-to-map conversion, best-effort resource release, clocks and a
nanosecond-preserving timestamp.
"""
