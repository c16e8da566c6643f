"""
Composition of a generated bundle into one sandbox-ready preview document.
"""

import re
import tempfile
from pathlib import Path
from typing import Optional, Union

from bs4 import BeautifulSoup, Doctype

from website_gen.models import CodeBundle, PreviewDocument, PreviewHandle


STYLE_END_PATTERN = re.compile(r"</(style)", re.IGNORECASE)
SCRIPT_END_PATTERN = re.compile(r"</(script)", re.IGNORECASE)

GUARD_PREFIX = "\ntry {\n"
GUARD_SUFFIX = """
} catch (e) {
  var target = document.body || document.documentElement;
  var report = document.createElement("pre");
  report.style.color = "red";
  report.style.fontFamily = "monospace";
  report.textContent = "Runtime Error: " + (e && e.message ? e.message : e);
  target.innerHTML = "";
  target.appendChild(report);
}
"""


def guard_behavior(js: str) -> str:
    """
    Wrap JavaScript so a runtime error replaces the page with an error report.

    The error message is inserted as text, never parsed as markup.
    """
    return GUARD_PREFIX + SCRIPT_END_PATTERN.sub(r"<\\/\1", js) + GUARD_SUFFIX


class PreviewComposer:
    """Builds a self-contained preview document from a code bundle."""

    def __init__(self, parser: str = "html.parser"):
        """
        Initialize the composer.

        Args:
            parser: BeautifulSoup tree builder.
        """
        self.parser = parser

    @staticmethod
    def _document_start(soup: BeautifulSoup) -> int:
        """Index of the first node after any doctype declaration."""
        start = 0
        for index, node in enumerate(soup.contents):
            if isinstance(node, Doctype):
                start = index + 1
        return start

    def compose(self, bundle: CodeBundle) -> PreviewDocument:
        """
        Combine markup, style and guarded behavior into one document.

        External script references are dropped, a head is created when the
        markup has none, the style goes last in the head, and the behavior
        goes last in the body inside a try/catch guard.

        Args:
            bundle: Validated code bundle.

        Returns:
            PreviewDocument with the composed HTML.
        """
        soup = BeautifulSoup(bundle.markup, self.parser)

        for script in soup.find_all("script", src=True):
            script.decompose()

        root = soup.find("html")
        head = soup.find("head")
        if head is None:
            head = soup.new_tag("head")
            if root is not None:
                root.insert(0, head)
            else:
                soup.insert(self._document_start(soup), head)

        style = soup.new_tag("style")
        style.string = STYLE_END_PATTERN.sub(r"<\\/\1", bundle.style)
        head.append(style)

        script = soup.new_tag("script")
        script.string = guard_behavior(bundle.behavior)
        target = soup.find("body")
        if target is None:
            target = root if root is not None else soup
        target.append(script)

        return PreviewDocument(html=str(soup))


class PreviewSlot:
    """
    Holds the one preview file of a session.

    Each replace() writes a new temporary file and deletes the previous one,
    so repeated generations never pile up files. Usable as a context manager
    that releases the current file on exit.
    """

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        """
        Initialize the slot.

        Args:
            directory: Where preview files go (default: system temp dir).
        """
        self.directory = Path(directory) if directory else None
        self.current: Optional[PreviewHandle] = None

    def replace(self, document: PreviewDocument) -> PreviewHandle:
        """
        Publish a new preview document and release the previous one.

        Returns:
            Handle with the file path and its file:// URI.
        """
        if self.directory:
            self.directory.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            mode="w",
            suffix=".html",
            prefix="preview_",
            dir=self.directory,
            delete=False,
            encoding="utf-8",
        ) as f:
            f.write(document.html)
            path = Path(f.name)

        handle = PreviewHandle(path=path, uri=path.resolve().as_uri())
        previous, self.current = self.current, handle
        if previous is not None:
            self._release(previous)
        return handle

    def release(self):
        """Delete the current preview file, if any."""
        if self.current is not None:
            self._release(self.current)
            self.current = None

    @staticmethod
    def _release(handle: PreviewHandle):
        handle.path.unlink(missing_ok=True)

    def __enter__(self) -> "PreviewSlot":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
