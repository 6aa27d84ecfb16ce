"""
Run options

One immutable record of everything a pipeline run needs, resolved once from
settings and caller-supplied values and then passed down by reference.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import AppSettings, appsettings


@dataclass(frozen=True)
class RunOptions:
    """
    Resolved configuration for one pipeline run

    Attributes:
        root: Directory relative ``src`` references resolve against
        filename: Base filename of the document
        workdir: Working directory for executed code
        section: Explicit first-section number, or None to use the document's own
        page: Render only this section number, or None for all pages
        timeout: Seconds allowed for the whole pipeline
        parse_only: Stop after parsing, skipping execution
        break_marker: Literal inserted between pages
    """
    root: Path
    filename: str = ""
    workdir: Optional[Path] = None
    section: Optional[int] = None
    page: Optional[int] = None
    timeout: float = 5.0
    parse_only: bool = False
    break_marker: str = "\n<!--BREAK-->\n"

    @classmethod
    def options_resolve(
        cls,
        inputdir: Optional[Path] = None,
        inputFile: str = "",
        section: Optional[int] = None,
        page: Optional[int] = None,
        timeout: Optional[float] = None,
        parse_only: bool = False,
        settings: Optional[AppSettings] = None,
    ) -> "RunOptions":
        """
        Resolve run options from settings and explicit values

        LITDOWN_PATH, when set, supplies root and filename; otherwise they
        come from ``inputdir``/``inputFile``. LITDOWN_ORIGIN overrides the
        working directory, which otherwise equals root. A positive ``section``
        always wins; zero or None leaves numbering to the document. A zero or
        missing ``timeout`` falls back to the configured default.
        """
        settings = settings or appsettings

        root = settings.root_get()
        filename = settings.filename_get()
        if root is None:
            root = Path(inputdir) if inputdir is not None else Path.cwd()
            filename = Path(inputFile).name if inputFile else ""

        workdir = Path(settings.origin) if settings.origin else root

        return cls(
            root=root,
            filename=filename or "",
            workdir=workdir,
            section=section if section and section > 0 else None,
            page=page if page and page > 0 else None,
            timeout=timeout if timeout and timeout > 0 else settings.timeout,
            parse_only=parse_only,
            break_marker=settings.break_marker,
        )
