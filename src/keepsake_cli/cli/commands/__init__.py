"""CLI command modules for keepsake."""

from . import config_cmd, deploy, ingredients, market
from .run import run_command

__all__ = ["config_cmd", "deploy", "ingredients", "market", "run_command"]
