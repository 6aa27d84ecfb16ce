"""
litdown - literate document engine

Prose interleaved with tagged code elements; executable elements run and
their output is spliced back into the rendered document.
"""

__version__ = "0.1.0"
__author__ = "Rudolph Pienaar"
__email__ = "rudolph.pienaar@gmail.com"

from .lib import Parser, Engine, Context, NodeRegistry, LOG, state_connectToLogger

__all__ = ["Parser", "Engine", "Context", "NodeRegistry", "LOG", "state_connectToLogger", "__version__"]
