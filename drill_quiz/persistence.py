"""閲覧状態 (quizState) の保存と読み込み。"""

from __future__ import annotations

import logging
from typing import Optional

from .history import SessionHistory
from .models import Snapshot
from .storage import STATE_KEY, Storage

logger = logging.getLogger(__name__)


class SnapshotStore:
    def __init__(self, storage: Storage):
        self.storage = storage

    def save(self, history: SessionHistory) -> Snapshot:
        """履歴 id 列とカーソルを 1 回の set でまとめて書く。"""
        snapshot = history.to_snapshot()
        self.storage.set(STATE_KEY, snapshot.to_dict())
        return snapshot

    def load(self) -> Optional[Snapshot]:
        raw = self.storage.get(STATE_KEY)
        if raw is None:
            return None
        snapshot = Snapshot.from_dict(raw)
        if snapshot is None:
            logger.warning("Ignoring malformed %s", STATE_KEY)
        return snapshot
