"""
Benchmark suite for jtok tokenizing performance.

Drains jtok token streams and compares them against full parses by:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Those libraries build the whole document, so they bound how fast a
pure-Python tokenizer can hope to be rather than compete with it.
"""
