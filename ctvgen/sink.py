"""Output destinations: standard output or a file on disk."""

import sys
from typing import Any, Optional, TextIO


class OutputDestination:
    """A writable text sink.

    Build one with from_str(): '-' selects standard output, anything else
    is a path that is created or truncated.  Standard output is flushed
    but never closed.
    """

    def __init__(self, stream: TextIO, name: str, owned: bool) -> None:
        self._stream = stream
        self.name = name
        self._owned = owned

    @classmethod
    def stdout(cls) -> 'OutputDestination':
        return cls(sys.stdout, '<stdout>', owned=False)

    @classmethod
    def file(cls, path: str) -> 'OutputDestination':
        return cls(open(path, 'w', encoding='utf8'), path, owned=True)

    @classmethod
    def from_str(cls, s: str) -> 'OutputDestination':
        if s == '-':
            return cls.stdout()
        return cls.file(s)

    def is_stdout(self) -> bool:
        return not self._owned

    def write(self, data: str) -> int:
        return self._stream.write(data)

    def flush(self) -> None:
        self._stream.flush()

    def close(self) -> None:
        self.flush()
        if self._owned:
            self._stream.close()

    def __enter__(self) -> 'OutputDestination':
        return self

    def __exit__(self, *exc_info: Any) -> Optional[bool]:
        self.close()
        return None

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.name!r})'
