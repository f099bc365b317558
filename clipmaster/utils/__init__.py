"""Utility modules"""

from .config_manager import ConfigManager, get_app_data_dir

__all__ = ['ConfigManager', 'get_app_data_dir']
