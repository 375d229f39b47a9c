# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Application settings."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from vitellary import defaults


class Settings(BaseSettings):
    log_level: str = "INFO"
    host: str = defaults.SERVER_HOST
    port: int = defaults.SERVER_PORT
    revision: str = defaults.DEFAULT_REVISION
    revisions_file: Path | None = None
    process_name: str = defaults.PROCESS_NAME
    gdb_path: str = "gdb"
    default_address: int = defaults.DEFAULT_GAME_ADDRESS
    poll_interval_ms: int = defaults.POLL_INTERVAL_MS
    queue_size: int = defaults.UPDATE_QUEUE_SIZE
    subscriber_queue_size: int = defaults.SUBSCRIBER_QUEUE_SIZE

    model_config = SettingsConfigDict(
        env_prefix="VITELLARY_",
        extra="ignore",
    )

    @property
    def poll_interval_s(self) -> float:
        return self.poll_interval_ms / 1000
