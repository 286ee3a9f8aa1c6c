"""
Worklist task types.

A task is either fetched script text (``ContentTask``) or a file on disk
(``FileTask``).  Both carry an *identity*: the URL or served path references
found inside them are resolved against.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class ContentTask:
    identity: str
    text: str


@dataclass(frozen=True)
class FileTask:
    identity: str
    path: Path

    @property
    def suffix(self) -> str:
        return self.path.suffix.lower()


CrawlTask = Union[ContentTask, FileTask]
