"""Shared helpers for settings components."""

from pathlib import Path

from decouple import AutoConfig

# Project root: the directory that contains the ``server`` package
BASE_DIR = Path(__file__).parent.parent.parent.parent

# Reads values from environment variables first, then from ``.env``
config = AutoConfig(search_path=BASE_DIR)
