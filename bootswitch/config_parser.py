#!/usr/bin/env python3
"""
bootswitch Configuration File Parser

Handles loading and parsing of the JSON configuration file.
"""

import os
import json
import logging
from typing import Dict, Any, Optional

# Set up logging
logger = logging.getLogger(__name__)

CONFIG_FILE = "/etc/bootswitch/bootswitch.json"

class ConfigParser:
    """Parser for the bootswitch config file"""
    
    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize the config parser
        
        Args:
            config_file: Path to config file (defaults to /etc/bootswitch/bootswitch.json)
        """
        self.config_file = config_file or CONFIG_FILE
        self._config = None
    
    def load_config(self) -> Dict[str, Any]:
        """
        Load the configuration file
        
        Returns:
            Dictionary containing the configuration data, empty if the file
            is missing or invalid
        """
        try:
            if not os.path.exists(self.config_file):
                logger.debug(f"Config file {self.config_file} not found, using defaults")
                return {}
            
            with open(self.config_file, 'r') as f:
                config = json.load(f)
            
            if not isinstance(config, dict):
                logger.error(f"Config file {self.config_file} must contain a JSON object")
                return {}
            
            logger.debug(f"Loaded config from {self.config_file}: {config}")
            self._config = config
            return config
            
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in config file {self.config_file}: {e}")
            return {}
        except (OSError, ValueError) as e:
            logger.error(f"Error loading config file {self.config_file}: {e}")
            return {}
    
    def get_config(self) -> Dict[str, Any]:
        """
        Get the loaded configuration, loading it if necessary
        """
        if self._config is None:
            self._config = self.load_config()
        return self._config

# Global config parser instance
_config_parser = None

def get_config_parser(config_file: Optional[str] = None) -> ConfigParser:
    """
    Get the global configuration parser instance
    
    Args:
        config_file: Replace the global parser with one reading this file
        
    Returns:
        ConfigParser instance
    """
    global _config_parser
    if _config_parser is None or (config_file and config_file != _config_parser.config_file):
        _config_parser = ConfigParser(config_file)
    return _config_parser
