"""
FidruaWatch Core
Shared monitoring state
"""
from .gateway import StateGateway

__all__ = ['StateGateway']
