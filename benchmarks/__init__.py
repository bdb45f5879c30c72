"""
Benchmark suite for bourne parsing and serialization performance.

Compares bourne against standard JSON libraries including:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Run explicitly with ``pytest benchmarks``; the default test run skips them.
"""
