"""
Module model

A module is one unit of source code handed over by whatever resolved the
entrypoint: a stable specifier plus the source text. The engine only reads it.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlparse
from urllib.request import url2pathname


# scheme:// or file:. Single letters are Windows drive letters, and
# "gen:out.ts" is a relative path.
_URL_RE = re.compile(r"^(?:[A-Za-z][A-Za-z0-9+.-]+://|file:)", re.IGNORECASE)


@dataclass(frozen=True)
class Module:
    """
    Source module consumed by the engine

    Attributes:
        specifier: URL (file:///..., https://...) or plain filesystem path
        source_text: Full module source
    """
    specifier: str
    source_text: str

    @classmethod
    def file_read(cls, path: Union[str, Path], encoding: str = "utf-8") -> "Module":
        """
        Create a Module from a file on disk

        The specifier is the file's absolute file:// URL.
        """
        resolved = Path(path).resolve()
        return cls(specifier=resolved.as_uri(), source_text=resolved.read_text(encoding=encoding))

    @property
    def file_path(self) -> Optional[Path]:
        """
        Local filesystem path of the module

        Returns:
            Path for file: URLs and plain paths, None for other URL schemes
        """
        if not _URL_RE.match(self.specifier):
            return Path(self.specifier)
        parsed = urlparse(self.specifier)
        if parsed.scheme != "file":
            return None
        path = url2pathname(parsed.path)
        if parsed.netloc and parsed.netloc != "localhost":
            path = f"//{parsed.netloc}{path}"
        return Path(path)

    def filterPath_get(self) -> str:
        """String matched by the include/ignore globs"""
        path = self.file_path
        if path is None:
            return self.specifier
        return path.as_posix()
