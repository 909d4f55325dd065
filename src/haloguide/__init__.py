#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
haloguide - Guided Experience Engine
Onboarding, contextual hints and tutorials that survive reloads

Version: 1.0.0
Author: Growth Halo Development Team
"""

__version__ = "1.0.0"
__author__ = "Growth Halo Development Team"
__description__ = "Guided experience engine - onboarding wizard, hints and tutorials"

# Export main classes and functions
from .guidance import GuidanceFacade
from .storage import create_store
from .utils.config import Config

__all__ = [
    "GuidanceFacade",
    "create_store",
    "Config",
]
