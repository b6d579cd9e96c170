"""
Writes the XML sitemap for static hosting.

Usage: python scripts/generate_sitemap.py https://example.com [output.xml]
"""
import sys
import os

# Add project root to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.sitemap.service import render_sitemap  # noqa: E402


def main() -> None:
    if len(sys.argv) < 2:
        print(__doc__.strip())
        sys.exit(1)

    xml = render_sitemap(sys.argv[1])

    if len(sys.argv) > 2:
        with open(sys.argv[2], "w", encoding="utf-8") as f:
            f.write(xml)
        print(f"Sitemap written to {sys.argv[2]}")
    else:
        print(xml)


if __name__ == "__main__":
    main()
