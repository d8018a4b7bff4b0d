"""
選取範圍替換：原文 → {{ __('path.key') }}
"""

import logging
from dataclasses import dataclass

from .document import Range, TextDocument, WorkspaceEdit, apply_edit
from .duplicate_guard import php_escape
from .errors import EditApplyError

logger = logging.getLogger(__name__)

TEMPLATE = "{{{{ __('{path}.{key}') }}}}"


@dataclass(frozen=True)
class Selection:
    """來源文件中的選取範圍"""
    document: TextDocument
    range: Range

    @property
    def text(self) -> str:
        return self.document.get_text(self.range)


def wrap_key(translation_path: str, key: str) -> str:
    """
    Examples:
        >>> wrap_key('admin/users', 'hello_world')
        "{{ __('admin/users.hello_world') }}"
    """
    return TEMPLATE.format(path=php_escape(translation_path), key=php_escape(key))


def replace_selection(selection: Selection, translation_path: str, key: str) -> str:
    """
    以查詢樣板替換選取範圍

    Returns:
        替換後的文字

    Raises:
        EditApplyError: 來源檔案無法寫入或已被修改
    """
    wrapped = wrap_key(translation_path, key)
    edit = WorkspaceEdit()
    edit.replace(selection.document, selection.range, wrapped)
    if not apply_edit(edit):
        raise EditApplyError(f"Could not replace selection in {selection.document.path}",
                             str(selection.document.path))
    logger.debug(f"Replaced {selection.text!r} with {wrapped!r}")
    return wrapped
