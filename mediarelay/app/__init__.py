"""Application entry points."""

from .bootstrap import Relay, build_chain, build_relay

__all__ = ["Relay", "build_chain", "build_relay"]
