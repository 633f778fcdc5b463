"""Relay server backing proxy mode"""

from .relay import create_app, run_relay, RELAY_PATH

__all__ = ['create_app', 'run_relay', 'RELAY_PATH']
