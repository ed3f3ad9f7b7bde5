"""
chains - JSON-RPC access to EVM chains.
"""
