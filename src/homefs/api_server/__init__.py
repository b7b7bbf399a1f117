# src/homefs/api_server/__init__.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

from .api import create_api_app

__all__ = ["create_api_app"]
