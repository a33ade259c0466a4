"""
Tagged range-check gadget

Proves that a committed field element's canonical value lies in a range,
either with a direct vanishing-polynomial gate (small ranges) or with a
lookup into a shared table of (bit-length tag, value) pairs (large ranges).

This package provides:
- Goldilocks field arithmetic (via galois)
- A constraint system with gates, lookups and a mock prover
- The direct gate, tagged table, tagged lookup and the routing config

Usage:
    from rangecheck.constraints import RangeCheckConfig, RangeCheckParams

    params = RangeCheckParams.from_num_bits(range_bound=8, lookup_num_bits=8)
    config = RangeCheckConfig.configure(cs, value_col, num_bits_col, params)
    ...
    config.load_table(layouter)
    config.assign(layouter, Value.known(8), Value.known(3), 256)
"""
