"""
Utility modules for the checkout relay
"""
from .config_loader import RelayConfig, Settings, load_relay_config, load_settings

__all__ = [
    'RelayConfig',
    'Settings',
    'load_relay_config',
    'load_settings',
]
