"""
Communication layer: core types and errors, module contract and registry,
and the transport implementations.
"""
