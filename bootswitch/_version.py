#!/usr/bin/env python3
"""
Version information for bootswitch
Single source of truth for version number
"""

__version__ = "1.2.0"
