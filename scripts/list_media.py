#!/usr/bin/env python
"""Script to print one page of Cloudinary search results."""
from __future__ import annotations

import argparse
import asyncio

from media_gateway.handlers.media_handler import split_csv
from media_gateway.services.media import build_search_expression, get_media_service


def main() -> None:
    parser = argparse.ArgumentParser(description="List media stored at Cloudinary")
    parser.add_argument("--folders", default="", help="Comma-separated folder names")
    parser.add_argument("--types", default="", help="Comma-separated resource types")
    parser.add_argument("--limit", type=int, default=25)
    parser.add_argument("--cursor", default="")
    args = parser.parse_args()

    folders = split_csv(args.folders)
    types = split_csv(args.types)
    print("Expression:", build_search_expression(folders, types))

    page = asyncio.run(get_media_service().get_all_images(args.limit, folders, types, args.cursor))
    print(page.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
