"""
Configuration loading utilities for ENS records.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv

from core.constants import DEFAULT_NETWORK
from core.models import Network


CONFIG_DIR = Path(__file__).parent

# Load environment variables
load_dotenv()


def load_yaml(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of file in config directory

    Returns:
        Parsed YAML as dict
    """
    filepath = CONFIG_DIR / filename
    if not filepath.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    with open(filepath, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_networks() -> Dict[str, Any]:
    """Load networks configuration."""
    return load_yaml("networks.yaml")


def get_network_config(network_key: str) -> Dict[str, Any]:
    """
    Get configuration for a specific network.

    Args:
        network_key: Network identifier (e.g., 'mainnet')

    Returns:
        Network configuration dict
    """
    networks = load_networks()
    if network_key not in networks:
        raise KeyError(f"Unknown network: {network_key}")
    return networks[network_key]


def resolve_network(network: Union[str, Network, None] = None) -> Network:
    """
    Turn a network selector into a Network.

    Args:
        network: Well-known key, full Network descriptor, or None for mainnet

    Returns:
        Network descriptor
    """
    if isinstance(network, Network):
        return network
    key = network or DEFAULT_NETWORK
    return Network.from_config(key, get_network_config(key))


def get_private_key() -> Optional[str]:
    """Signing key from ENS_PRIVATE_KEY, or None."""
    return os.getenv("ENS_PRIVATE_KEY") or None


def get_rpc_override(network_key: str = DEFAULT_NETWORK) -> Optional[str]:
    """
    Extra RPC endpoint for one network, tried before the configured ones.

    Reads ENS_RPC_URL_<KEY> (e.g. ENS_RPC_URL_SEPOLIA). The bare ENS_RPC_URL
    only applies to mainnet.
    """
    scoped = os.getenv(f"ENS_RPC_URL_{network_key.upper().replace('-', '_')}")
    if scoped:
        return scoped
    if network_key == DEFAULT_NETWORK:
        return os.getenv("ENS_RPC_URL") or None
    return None
