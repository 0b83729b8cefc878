"""
Generate sitemap.xml for the city builder pages.

Usage:
    python -m citycast.sitemap --data product/sections/landing-page/data.json \
        --out dist/sitemap.xml --out public/sitemap.xml
"""

import argparse
from dataclasses import dataclass
from datetime import date
import json
from pathlib import Path
from urllib.parse import quote
from xml.sax.saxutils import escape

import structlog

from citycast.config import configure_structlog, settings

logger = structlog.get_logger(__name__)

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"


@dataclass
class SitemapPage:
    path: str
    changefreq: str = "weekly"
    priority: str = "0.8"


STATIC_PAGES = [SitemapPage(path="/", changefreq="weekly", priority="1.0")]


def city_pages(cities: list[dict]) -> list[SitemapPage]:
    """One builder page per named city."""
    return [
        SitemapPage(path=f"/builder/{quote(city['name'].lower(), safe='')}")
        for city in cities
        if city.get("name")
    ]


def build_sitemap(
    pages: list[SitemapPage], site_url: str, lastmod: date | None = None
) -> str:
    lastmod_text = (lastmod or date.today()).isoformat()
    site_url = site_url.rstrip("/")

    urls = "\n".join(
        f"""  <url>
    <loc>{escape(site_url + page.path)}</loc>
    <lastmod>{lastmod_text}</lastmod>
    <changefreq>{page.changefreq}</changefreq>
    <priority>{page.priority}</priority>
  </url>"""
        for page in pages
    )

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="{SITEMAP_NAMESPACE}">
{urls}
</urlset>
"""


def load_cities(data_path: Path) -> list[dict]:
    data = json.loads(data_path.read_text(encoding="utf-8"))
    return data.get("cities") or []


def write_sitemap(sitemap: str, targets: list[Path]) -> list[Path]:
    """Write to every target whose directory exists; returns the written paths."""
    written = []
    for target in targets:
        try:
            target.write_text(sitemap, encoding="utf-8")
        except OSError as e:
            # dist/ may not exist yet during development
            logger.warning("Sitemap target skipped", target=str(target), error=str(e))
            continue
        logger.info("Sitemap generated", target=str(target))
        written.append(target)
    return written


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate sitemap.xml for city pages")
    parser.add_argument("--data", type=Path, required=True, help="JSON file with a 'cities' list")
    parser.add_argument(
        "--out", type=Path, action="append", required=True, help="Output file (repeatable)"
    )
    parser.add_argument("--site-url", default=settings.site_url)
    args = parser.parse_args(argv)

    configure_structlog()

    cities = load_cities(args.data)
    pages = STATIC_PAGES + city_pages(cities)
    written = write_sitemap(build_sitemap(pages, args.site_url), args.out)

    logger.info(
        "Sitemap complete",
        urls=len(pages),
        static=len(STATIC_PAGES),
        cities=len(pages) - len(STATIC_PAGES),
        targets=len(written),
    )
    return 0 if written else 1


if __name__ == "__main__":
    raise SystemExit(main())
