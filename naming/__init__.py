"""
naming - ENS record and registration operations.

This package contains:
- records.py: Text and address record reads and writes
- registrations.py: Recent .eth registrations
- clients.py: ReadClient / WriteClient protocols and RPC implementations
- abi.py: Contract function and event descriptors
"""

from naming.clients import (
    ReadClient,
    RpcReadClient,
    RpcWriteClient,
    WriteClient,
    get_read_client,
    get_write_client,
)
from naming.records import (
    get_text_record,
    set_address_record,
    set_text_record,
    set_text_record_and_wait,
    submit_address_record,
)
from naming.registrations import get_recent_registrations

__all__ = [
    # Operations
    "get_recent_registrations",
    "get_text_record",
    "set_address_record",
    "set_text_record",
    "set_text_record_and_wait",
    "submit_address_record",
    # Clients
    "ReadClient",
    "RpcReadClient",
    "RpcWriteClient",
    "WriteClient",
    "get_read_client",
    "get_write_client",
]
