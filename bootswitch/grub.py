#!/usr/bin/env python3
"""
GRUB configuration scan

Finds boot-loader entry names by scanning grub.cfg for menuentry lines.
This is a heuristic: entries generated by other means (BLS snippets,
submenus with custom titles) are not followed.
"""

import os
import re
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)

GRUB_CONFIG_PATH = "/boot/grub/grub.cfg"

MENUENTRY_PATTERN = re.compile(r"""^\s*menuentry ['"]([^'"]*)['"]""")


class GrubConfig:
    def __init__(self, file_path: str = GRUB_CONFIG_PATH):
        self.file_path = file_path
        self.lines: List[str] = []
        self._read_file()

    def _read_file(self):
        """Reads the config file into the line buffer"""
        if not os.path.exists(self.file_path):
            logger.error(f"GRUB config not found: {self.file_path}")
            raise FileNotFoundError(f"GRUB config not found: {self.file_path}")

        with open(self.file_path, "r", encoding="utf-8", errors="replace") as file:
            self.lines = file.read().splitlines()

    def menu_entries(self) -> List[str]:
        """Names of all menuentry lines, in file order"""
        entries = []
        for line in self.lines:
            match = MENUENTRY_PATTERN.match(line)
            if match:
                entries.append(match.group(1))
        return entries

    def find_entry(self, keyword: str = "windows") -> Optional[str]:
        """
        Find the boot entry for another operating system
        
        Args:
            keyword: Case-insensitive prefix of the entry name
            
        Returns:
            The last entry whose name starts with keyword, or None
        """
        found = None
        keyword = keyword.lower()
        for entry in self.menu_entries():
            if entry.lower().startswith(keyword):
                found = entry
        if found is None:
            logger.warning(f"No menu entry starting with {keyword!r} in {self.file_path}")
        else:
            logger.debug(f"Found menu entry {found!r}")
        return found
