#!/usr/bin/env python3
"""
使用者通知（取代編輯器的 showInformationMessage / showErrorMessage）

所有通知都經由 Rich Console 輸出，並保留歷史紀錄供呼叫端檢查。
"""

from dataclasses import dataclass
from typing import List, Optional

from rich.console import Console
from rich.markup import escape


@dataclass
class Notification:
    """單筆通知"""
    level: str      # info | error
    message: str


class Notifier:
    """通知輸出器"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)
        self.history: List[Notification] = []

    def info(self, message: str) -> None:
        self.history.append(Notification("info", message))
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        self.history.append(Notification("error", message))
        self.console.print(f"[bold red]✗[/bold red] {escape(message)}")

    @property
    def messages(self) -> List[str]:
        return [n.message for n in self.history]

    @property
    def errors(self) -> List[str]:
        return [n.message for n in self.history if n.level == "error"]
