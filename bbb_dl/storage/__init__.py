"""
Storage Layer.

This package handles local persistence: the configuration file and the output
folder that receives the downloaded recording.
"""

from .config_manager import ConfigManager
from .output import OutputLayout, prepare_output_layout, rename_output

__all__ = ["ConfigManager", "OutputLayout", "prepare_output_layout", "rename_output"]
