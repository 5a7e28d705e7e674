#!/usr/bin/env python
"""
Batch PDF Loader Script for the Counsel document index

This script loads all PDFs from a folder into the FAISS vector index, using
the same extraction and word chunking as the upload endpoints.

Usage:
    python scripts/load_pdfs.py [--pdf-folder ./data/pdfs] [--chunk-size 200]

Example:
    python scripts/load_pdfs.py
    python scripts/load_pdfs.py --pdf-folder ~/cases/discovery --chunk-size 300
"""

import asyncio
import sys
import argparse
from pathlib import Path

# Add project to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from counsel.config import settings
from counsel.services.document_service import DocumentService
from counsel.services.search_service import search_service


# Color codes for output
class Colors:
    HEADER = '\033[95m'
    OKCYAN = '\033[96m'
    OKGREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'


def print_header(text: str):
    print(f"\n{Colors.HEADER}{Colors.BOLD}{text}{Colors.ENDC}")


def print_success(text: str):
    print(f"{Colors.OKGREEN}✓ {text}{Colors.ENDC}")


def print_error(text: str):
    print(f"{Colors.FAIL}✗ {text}{Colors.ENDC}")


def print_info(text: str):
    print(f"{Colors.OKCYAN}ℹ {text}{Colors.ENDC}")


def print_warning(text: str):
    print(f"{Colors.WARNING}⚠ {text}{Colors.ENDC}")


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Batch load PDFs into the Counsel vector index",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/load_pdfs.py
  python scripts/load_pdfs.py --pdf-folder ./contracts --chunk-size 300
        """
    )

    parser.add_argument(
        "--pdf-folder",
        type=Path,
        default=Path(__file__).parent.parent / "data" / "pdfs",
        help="Path to folder containing PDFs (default: ./data/pdfs)",
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=settings.CHUNK_SIZE_WORDS,
        help=f"Words per indexed chunk (default: {settings.CHUNK_SIZE_WORDS})",
    )

    args = parser.parse_args()

    print_header("Counsel - Batch PDF Loader")
    print_info(f"PDF Folder: {args.pdf_folder}")
    print_info(f"Chunk Size: {args.chunk_size} words")
    print_info(f"Vector Store: {settings.VECTOR_STORE_PATH}/{settings.VECTOR_INDEX_NAME}")

    if not args.pdf_folder.exists():
        print_error(f"PDF folder not found: {args.pdf_folder}")
        return 1

    service = DocumentService(search=search_service, chunk_size=args.chunk_size)
    stats = await service.load_pdfs_from_folder(str(args.pdf_folder))

    print_header("Load Results")
    print(f"Total PDFs: {stats['total']}")
    print(f"Loaded: {stats['success']}")
    print(f"Skipped (no text): {stats['skipped']}")
    print(f"Failed: {stats['failed']}")
    print(f"Indexed chunks: {search_service.vector_store.count()}")

    if stats["total"] == 0:
        print_warning("No PDFs found")
        return 1
    if stats["failed"] == 0 and stats["skipped"] == 0:
        print_success(f"Successfully loaded all {stats['success']} PDFs")
        return 0
    if stats["success"] > 0:
        print_warning(
            f"Loaded {stats['success']} PDFs with {stats['failed']} failures "
            f"and {stats['skipped']} skipped"
        )
        return 1
    print_error("Failed to load any PDFs")
    return 1


if __name__ == "__main__":
    try:
        exit_code = asyncio.run(main())
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        sys.exit(1)
