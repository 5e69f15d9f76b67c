"""Command line entrypoint: scrape a product URL or run the API server."""

from __future__ import annotations

import argparse
import json
from typing import List, Optional

from smartfit_app.config import AppConfig
from smartfit_app.logging_config import configure_logging
from tools.product_scraper import is_valid_product_url, scrape_product_info


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="SmartFit backend")
    subcommands = parser.add_subparsers(dest="command", required=True)

    scrape = subcommands.add_parser("scrape", help="Scrape a retailer product page and print the draft item.")
    scrape.add_argument("url")
    scrape.add_argument(
        "--any-host",
        action="store_true",
        help="Skip the supported-retailer check and use the generic meta-tag path.",
    )

    serve = subcommands.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8080)

    args = parser.parse_args(argv)
    config = AppConfig.from_env()

    if args.command == "serve":
        import uvicorn

        uvicorn.run("server.api:create_app", factory=True, host=args.host, port=args.port)
        return 0

    configure_logging(config.log_level)
    if not args.any_host and not is_valid_product_url(args.url):
        print(f"Unsupported product URL: {args.url}")
        return 2
    result = scrape_product_info(
        args.url,
        page_timeout=config.page_timeout,
        image_timeout=config.image_timeout,
        user_agent=config.user_agent,
    )
    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.scraped_successfully else 1


if __name__ == "__main__":
    raise SystemExit(main())
