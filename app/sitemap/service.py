"""
XML sitemap generation for the public pages.
"""
import os
from datetime import datetime, timezone
from typing import Dict, List, Optional

from app.core.config import settings
from app.core.templating import TEMPLATES_DIR, templates
from app.core.utils import format_utc_timestamp

# Template backing each public page; its mtime is the page's lastmod
PAGE_TEMPLATES: Dict[str, str] = {
    "/": "financiamento.html",
}


def page_lastmod(path: str) -> str:
    """Modification time of the page's template, or now when there is no backing file."""
    template = PAGE_TEMPLATES.get(path)
    if template:
        file_path = os.path.join(TEMPLATES_DIR, template)
        if os.path.exists(file_path):
            mtime = datetime.fromtimestamp(os.path.getmtime(file_path), tz=timezone.utc)
            return format_utc_timestamp(mtime)
    return format_utc_timestamp()


def build_entries(base_url: str, pages: Optional[List[str]] = None) -> List[Dict[str, str]]:
    base = base_url.rstrip("/")
    return [
        {
            "loc": f"{base}{path}",
            "lastmod": page_lastmod(path),
            "changefreq": "monthly",
            "priority": "0.6",
        }
        for path in (pages if pages is not None else settings.SITEMAP_PAGES)
    ]


def render_sitemap(base_url: str, pages: Optional[List[str]] = None) -> str:
    """Renders the sitemaps.org 0.9 urlset for the given base URL."""
    template = templates.get_template("sitemap.xml")
    return template.render(entries=build_entries(base_url, pages))
