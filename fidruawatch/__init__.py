"""
FidruaWatch - upload batch monitor
"""
__version__ = "2.1.2"
