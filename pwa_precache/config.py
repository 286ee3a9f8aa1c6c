"""
Configuration constants for the PWA precache builder.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_DATA_DIR = os.environ.get("DATA_DIR", "data")
DEFAULT_LOCAL_BASE_URL = os.environ.get("PWA_LOCAL_BASE_URL", "http://localhost:3000")
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3080

# Identifier of this plugin inside the platform's plugin registry
PLUGIN_ID = "open-bamz-pwa"

# Query parameter the local application server routes requests with
APP_PARAM = "appName"

# ---------------------------------------------------------------------------
# Application files
# ---------------------------------------------------------------------------
PUBLIC_BRANCH = "public"
SW_FILENAME = "sw.js"
SW_TEMPLATE_FILENAME = "sw-template.js"
INDEX_FILENAME = "index.html"
MANIFEST_FILENAME = "manifest.json"
ADMIN_SCRIPT_PATH = "/_openbamz_admin.js"

# Extensions whose content is parsed for further references
ANALYZED_EXTENSIONS = (".html", ".js", ".mjs")

# Globs the directory listing never returns
LISTING_IGNORE = ("*.d.ts",)

# Bundled resources copied into an application by ``prepare``
SCAFFOLD_FILES = (
    SW_TEMPLATE_FILENAME,
    "icons/icon.svg",
)

# ---------------------------------------------------------------------------
# Fetching
# ---------------------------------------------------------------------------
REQUEST_TIMEOUT = 15           # seconds per HTTP request
MAX_RETRIES = 3
RETRY_STATUS_CODES = [500, 502, 503, 504]

# ---------------------------------------------------------------------------
# Injection
# ---------------------------------------------------------------------------
INJECTION_POINT = "self.__WB_MANIFEST"
MAXIMUM_FILE_SIZE = 2 * 1024 * 1024    # same default as workbox-build

# ---------------------------------------------------------------------------
# Default web-app-manifest written by ``prepare``
# ---------------------------------------------------------------------------
DEFAULT_ICONS = [
    {
        "src": "/icons/icon.svg",
        "sizes": "any",
        "type": "image/svg+xml",
        "purpose": "any maskable",
    },
    {
        "src": "/icons/icon-192.png",
        "sizes": "192x192",
        "type": "image/png",
    },
    {
        "src": "/icons/icon-512.png",
        "sizes": "512x512",
        "type": "image/png",
    },
]


def default_manifest(app_name: str) -> dict:
    """Return the web-app-manifest written for a freshly prepared app."""
    return {
        "name": app_name,
        "short_name": app_name,
        "description": app_name,
        "start_url": "/",
        "dir": "auto",
        "lang": "en",
        "display": "standalone",
        "orientation": "any",
        "background_color": "#fff",
        "theme_color": "#fff",
        "icons": [dict(icon) for icon in DEFAULT_ICONS],
    }


@dataclass
class BuildConfig:
    """Settings threaded through a build instead of read from the
    environment deep in the call path."""

    data_dir: Path = field(default_factory=lambda: Path(DEFAULT_DATA_DIR))
    local_base_url: str = DEFAULT_LOCAL_BASE_URL
    request_timeout: float = REQUEST_TIMEOUT
    verify_ssl: bool = True

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir)
        self.local_base_url = self.local_base_url.rstrip("/")

    @classmethod
    def from_env(cls) -> "BuildConfig":
        return cls(
            data_dir=Path(os.environ.get("DATA_DIR", DEFAULT_DATA_DIR)),
            local_base_url=os.environ.get("PWA_LOCAL_BASE_URL", DEFAULT_LOCAL_BASE_URL),
        )

    def public_dir(self, app_name: str) -> Path:
        """Public asset root of *app_name*."""
        return self.data_dir / "apps" / app_name / PUBLIC_BRANCH
