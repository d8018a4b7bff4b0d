#!/usr/bin/env python3
"""
文字文件與編輯模型

- Position / Range: 0-based 行與字元位置（與編輯器相同的座標系）
- TextDocument: 檔案內容快照
- WorkspaceEdit: 跨檔案的插入 / 替換操作集合
- apply_edit: 原子性套用（全部成功或全部回滾）

套用前會確認檔案內容仍與快照相同；寫入時先寫暫存檔再 os.replace，
若中途失敗則以記憶體中的原始內容還原已替換的檔案。
"""

import os
import shutil
import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

from .errors import EditApplyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class Position:
    """文件位置（0-based）"""
    line: int
    character: int


@dataclass(frozen=True)
class Range:
    """文件範圍 [start, end)"""
    start: Position
    end: Position

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"Range end {self.end} is before start {self.start}")


def read_text(path: Path) -> str:
    """讀取檔案（保留原始換行符號）"""
    with open(path, 'r', encoding='utf-8', newline='') as f:
        return f.read()


class TextDocument:
    """檔案內容快照"""

    def __init__(self, path: Path, text: str):
        self.path = Path(path)
        self.text = text
        self.lines = text.split('\n')

    @classmethod
    def open(cls, path) -> "TextDocument":
        """
        開啟文件

        Raises:
            OSError: 檔案無法讀取
        """
        return cls(Path(path), read_text(Path(path)))

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def offset_at(self, position: Position) -> int:
        """位置 → 字元偏移量；超出範圍時夾到文件內"""
        if position.line < 0:
            return 0
        if position.line >= self.line_count:
            return len(self.text)
        offset = sum(len(line) + 1 for line in self.lines[:position.line])
        return offset + max(0, min(position.character, len(self.lines[position.line])))

    def position_at(self, offset: int) -> Position:
        """字元偏移量 → 位置"""
        offset = max(0, min(offset, len(self.text)))
        before = self.text[:offset]
        line = before.count('\n')
        return Position(line, offset - (before.rfind('\n') + 1))

    def get_text(self, rng: Range = None) -> str:
        if rng is None:
            return self.text
        return self.text[self.offset_at(rng.start):self.offset_at(rng.end)]

    def full_range(self) -> Range:
        return Range(Position(0, 0), Position(self.line_count, 0))


@dataclass
class TextEdit:
    """單一替換操作（插入為空範圍的替換）"""
    range: Range
    new_text: str
    seq: int = 0


@dataclass
class WorkspaceEdit:
    """跨檔案編輯集合"""
    _documents: Dict[Path, TextDocument] = field(default_factory=dict)
    _edits: Dict[Path, List[TextEdit]] = field(default_factory=dict)
    _seq: int = 0

    def replace(self, document: TextDocument, rng: Range, new_text: str) -> None:
        key = document.path.resolve()
        known = self._documents.setdefault(key, document)
        if known is not document and known.text != document.text:
            raise EditApplyError("Conflicting snapshots of the same file", str(document.path))
        self._edits.setdefault(key, []).append(TextEdit(rng, new_text, self._seq))
        self._seq += 1

    def insert(self, document: TextDocument, position: Position, text: str) -> None:
        self.replace(document, Range(position, position), text)

    def entries(self) -> List[Tuple[TextDocument, List[TextEdit]]]:
        return [(self._documents[key], edits) for key, edits in self._edits.items()]

    def __len__(self) -> int:
        return sum(len(edits) for edits in self._edits.values())


def apply_text_edits(document: TextDocument, edits: List[TextEdit]) -> str:
    """
    在快照文字上套用一組操作

    同一位置的多個插入依加入順序排列。

    Raises:
        EditApplyError: 操作範圍重疊
    """
    spans = sorted(
        ((document.offset_at(e.range.start), document.offset_at(e.range.end), e) for e in edits),
        key=lambda s: (s[0], s[1], s[2].seq),
    )
    for (_, prev_end, _), (start, _, _) in zip(spans, spans[1:]):
        if start < prev_end:
            raise EditApplyError("Overlapping edits", str(document.path))

    text = document.text
    for start, end, edit in sorted(spans, key=lambda s: (s[0], s[2].seq), reverse=True):
        text = text[:start] + edit.new_text + text[end:]
    return text


def _write_temp(path: Path, content: str) -> str:
    fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
        if path.exists():
            shutil.copymode(path, tmp_path)
    except BaseException:
        os.unlink(tmp_path)
        raise
    return tmp_path


def _commit(edit: WorkspaceEdit) -> None:
    """
    Raises:
        EditApplyError: 檔案已在快照後變更，或操作重疊
        OSError: 寫入失敗
    """
    planned = []
    for document, edits in edit.entries():
        try:
            current = read_text(document.path)
        except FileNotFoundError:
            current = None
        if current != document.text:
            raise EditApplyError("File changed on disk since it was read", str(document.path))
        planned.append((document, apply_text_edits(document, edits)))

    temps = []
    try:
        for document, content in planned:
            temps.append(_write_temp(document.path, content))
    except OSError:
        for tmp_path in temps:
            os.unlink(tmp_path)
        raise

    replaced = []
    try:
        for (document, _), tmp_path in zip(planned, temps):
            os.replace(tmp_path, document.path)
            replaced.append(document)
    except OSError:
        for tmp_path in temps[len(replaced):]:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
        for document in replaced:
            with open(document.path, 'w', encoding='utf-8', newline='') as f:
                f.write(document.text)
        logger.warning(f"Rolled back {len(replaced)} file(s) after a failed edit")
        raise


def apply_edit(edit: WorkspaceEdit) -> bool:
    """
    原子性套用編輯

    Returns:
        是否成功（失敗原因記錄在 log）
    """
    if not len(edit):
        return True
    try:
        _commit(edit)
    except (EditApplyError, OSError) as e:
        logger.error(f"Failed to apply edit: {e}")
        return False
    return True
