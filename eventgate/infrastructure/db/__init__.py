# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .database import Base, Database

__all__ = ["Base", "Database"]
