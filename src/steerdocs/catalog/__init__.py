# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Framework catalog loading and lookup."""

from __future__ import annotations

from .cache import FrameworkCatalog
from .loader import ManifestLoader
from .models import CatalogEntry, FrameworkCategory, Manifest
from .schema import SchemaRepository

__all__ = [
    "CatalogEntry",
    "FrameworkCatalog",
    "FrameworkCategory",
    "Manifest",
    "ManifestLoader",
    "SchemaRepository",
]
