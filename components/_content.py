"""
Static site content: which file lands at which key, with which content type.

Both origins serve the same files. The AWS component declares one S3 object
per entry and the Azure component one blob in ``$web``; the transfer itself
is done by Pulumi. Content types come from a fixed lookup table so the result
does not depend on the host's ``mimetypes`` registry.
"""

from dataclasses import dataclass
from pathlib import Path

DEFAULT_CONTENT_TYPE = "application/octet-stream"

MIME_TYPES: dict[str, str] = {
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".mjs": "application/javascript",
    ".json": "application/json",
    ".map": "application/json",
    ".xml": "application/xml",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".csv": "text/csv",
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".avif": "image/avif",
    ".ico": "image/x-icon",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
    ".pdf": "application/pdf",
    ".wasm": "application/wasm",
    ".webmanifest": "application/manifest+json",
    ".mp4": "video/mp4",
    ".webm": "video/webm",
}


@dataclass(frozen=True)
class SiteFile:
    """
    One static file.

    Attributes:
        key: Object key / blob name, relative to the site root, "/"-separated.
        path: Local file the content is read from.
        content_type: MIME type served with the object.
    """

    key: str
    path: Path
    content_type: str


def content_type_for(
    filename: str,
) -> str:
    """Look up the MIME type by extension (case-insensitive)."""
    return MIME_TYPES.get(Path(filename).suffix.lower(), DEFAULT_CONTENT_TYPE)


def site_files(
    site_dir: str | Path,
) -> list[SiteFile]:
    """
    Map every regular file under ``site_dir`` to a SiteFile, sorted by key.

    Hidden files and directories (leading ".") are skipped.

    Raises:
        FileNotFoundError: site_dir does not exist or is not a directory.
    """
    root = Path(site_dir)
    if not root.is_dir():
        raise FileNotFoundError(f"site directory not found: {root}")
    files = []
    for path in root.rglob("*"):
        relative = path.relative_to(root)
        if not path.is_file() or any(part.startswith(".") for part in relative.parts):
            continue
        key = relative.as_posix()
        files.append(SiteFile(key=key, path=path, content_type=content_type_for(key)))
    return sorted(files, key=lambda f: f.key)


def resource_suffix(
    key: str,
) -> str:
    """
    Turn an object key into a Pulumi resource-name suffix.

    "assets/app.js" -> "assets-app-js".
    """
    return "".join(c if c.isalnum() else "-" for c in key).strip("-")
