"""Shared types for the ratedb package."""

from typing import Any

Row = dict[str, Any]
Params = tuple | list | dict
