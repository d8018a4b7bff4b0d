#!/usr/bin/env python3
"""
每個語系檔獨立的檔案鎖

兩層鎖定：
1. 行程內：依解析後路徑取得 threading.Lock
2. 跨行程：以 O_CREAT | O_EXCL 建立 <file>.lock 旁檔（內容為擁有者 PID，
   擁有者已結束時視為過期並移除）

用法：
    with locked(path, timeout=10):
        ensure → 檢查重複 → 合併
"""

import os
import time
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional

import psutil

from .errors import LockTimeoutError

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.05
STALE_GRACE = 1.0

_registry_lock = threading.Lock()
_path_locks: Dict[str, threading.Lock] = {}


def _thread_lock_for(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _registry_lock:
        return _path_locks.setdefault(key, threading.Lock())


def lock_path_for(path: Path) -> Path:
    return path.with_name(path.name + ".lock")


def _read_owner(lock_path: Path) -> Optional[str]:
    """鎖檔內容（擁有者 PID）；鎖檔已消失時返回 None"""
    try:
        return lock_path.read_text(encoding='utf-8', errors='replace').strip()
    except FileNotFoundError:
        return None


def _is_stale(lock_path: Path, owner: str) -> bool:
    """
    擁有者行程已結束，或內容不是 PID

    空白鎖檔可能是其他行程剛建立、尚未寫入 PID，STALE_GRACE 秒內不視為過期。
    """
    if owner.isascii() and owner.isdigit():
        return not psutil.pid_exists(int(owner))
    if owner:
        return True
    try:
        return time.time() - lock_path.stat().st_mtime >= STALE_GRACE
    except FileNotFoundError:
        return False


def _break_stale_lock(lock_path: Path) -> bool:
    """
    移除過期鎖檔

    Returns:
        是否已移除（或已不存在），呼叫端應立即重試
    """
    owner = _read_owner(lock_path)
    if owner is None:
        return True
    if not _is_stale(lock_path, owner):
        return False
    # 移除前再確認一次，避免刪掉剛被其他行程重建的鎖
    if _read_owner(lock_path) != owner:
        return True
    logger.warning(f"Removing stale lock {lock_path} (owner: {owner or 'unknown'})")
    try:
        os.unlink(lock_path)
    except FileNotFoundError:
        pass
    return True


def _acquire_lock_file(lock_path: Path, deadline: float) -> None:
    while True:
        try:
            fd = os.open(str(lock_path), os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except FileExistsError:
            if _break_stale_lock(lock_path):
                continue
            if time.monotonic() >= deadline:
                raise LockTimeoutError(f"Timed out waiting for {lock_path}", str(lock_path))
            time.sleep(POLL_INTERVAL)
            continue
        with os.fdopen(fd, 'w') as f:
            f.write(str(os.getpid()))
        return


@contextmanager
def locked(path, timeout: float = 10.0) -> Iterator[Path]:
    """
    取得檔案鎖，離開區塊時釋放

    Args:
        path: 受保護的檔案路徑（不需已存在，但上層目錄會被建立）
        timeout: 最長等待秒數

    Raises:
        LockTimeoutError: 等待逾時
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    deadline = time.monotonic() + timeout

    thread_lock = _thread_lock_for(path)
    if not thread_lock.acquire(timeout=max(timeout, 0)):
        raise LockTimeoutError(f"Timed out waiting for {path}", str(path))

    lock_path = lock_path_for(path)
    try:
        _acquire_lock_file(lock_path, deadline)
        logger.debug(f"Acquired lock {lock_path}")
        try:
            yield path
        finally:
            try:
                os.unlink(lock_path)
            except FileNotFoundError:
                logger.warning(f"Lock file {lock_path} disappeared before release")
    finally:
        thread_lock.release()
