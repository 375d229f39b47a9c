# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from vitellary.cli import cli

if __name__ == "__main__":
    cli()
