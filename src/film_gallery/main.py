"""Main module for the film-gallery CLI."""

import os
import sys
import argparse
from typing import List, Optional

from pydantic import ValidationError

from . import __version__
from .album_upload import run_upload
from .core import (
    AlbumNotFound,
    ConfigurationError,
    GalleryConfig,
    GalleryError,
    get_logger,
    set_debug_logging,
)
from .core.factories import ObjectStoreFactory
from .core.services import AlbumDeletionService, AlbumReader


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser for the ``film-gallery`` command.

    ``--bucket`` defaults to ``$GALLERY_BUCKET`` and ``--endpoint-url`` to
    ``$AWS_ENDPOINT_URL`` so S3-compatible stores need no extra flags.
    """
    parser = argparse.ArgumentParser(
        prog="film-gallery",
        description="Film gallery CLI tool for S3-based photo albums",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Publish (or resume) an album from a directory of JPEGs
  film-gallery upload ~/scans/roll-12 --name "Roll 12" --bucket my-gallery

  # Print an album manifest with presigned URLs
  film-gallery manifest 3f2c9a0b1d4e5f67 --bucket my-gallery --presign

  # Delete an album
  film-gallery delete 3f2c9a0b1d4e5f67 --bucket my-gallery
        """,
    )

    store_args = argparse.ArgumentParser(add_help=False)
    store_args.add_argument(
        "--bucket",
        default=os.environ.get("GALLERY_BUCKET"),
        help="S3 bucket name (default: $GALLERY_BUCKET)",
    )
    store_args.add_argument(
        "--endpoint-url",
        default=os.environ.get("AWS_ENDPOINT_URL"),
        help="S3-compatible endpoint, e.g. MinIO (default: $AWS_ENDPOINT_URL)",
    )
    store_args.add_argument("--region", default=None, help="AWS region name")
    store_args.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    upload_parser = subparsers.add_parser(
        "upload", parents=[store_args], help="Upload images to create or resume an album"
    )
    upload_parser.add_argument("paths", nargs="+", help="Directories or files to upload")
    upload_parser.add_argument("-n", "--name", required=True, help="Album name")
    upload_parser.add_argument(
        "--workers", type=int, default=None, help="Processing threads (default: CPU count)"
    )
    upload_parser.add_argument(
        "--max-uploads", type=int, default=16, help="Maximum images uploading at once"
    )
    upload_parser.add_argument(
        "--preview-size", type=int, default=2048, help="Preview max dimension in pixels"
    )
    upload_parser.add_argument(
        "--thumbnail-size", type=int, default=400, help="Thumbnail max dimension in pixels"
    )
    upload_parser.add_argument(
        "--reencode-originals",
        action="store_true",
        help="Re-encode originals instead of uploading the source bytes",
    )
    upload_parser.add_argument(
        "--cleanup-on-failure",
        action="store_true",
        help="Delete renditions uploaded by a run that fails",
    )

    delete_parser = subparsers.add_parser(
        "delete", parents=[store_args], help="Delete an album"
    )
    delete_parser.add_argument("album_id", help="Album ID to delete")

    manifest_parser = subparsers.add_parser(
        "manifest", parents=[store_args], help="Print an album manifest"
    )
    manifest_parser.add_argument("album_id", help="Album ID")
    manifest_parser.add_argument(
        "--presign", action="store_true", help="Attach time-limited rendition URLs"
    )
    manifest_parser.add_argument(
        "--ttl", type=int, default=3600, help="Presigned URL lifetime in seconds"
    )

    subparsers.add_parser("version", help="Show version information")
    return parser


def build_config(args: argparse.Namespace) -> GalleryConfig:
    """Validate CLI arguments into a `GalleryConfig`."""
    if not args.bucket:
        raise ConfigurationError("No bucket given: pass --bucket or set GALLERY_BUCKET")

    values = {
        "bucket": args.bucket,
        "endpoint_url": args.endpoint_url,
        "region_name": args.region,
        "debug": args.debug,
    }
    if args.command == "upload":
        values.update(
            max_concurrent_uploads=args.max_uploads,
            preview_max_dimension=args.preview_size,
            thumbnail_max_dimension=args.thumbnail_size,
            reencode_originals=args.reencode_originals,
            cleanup_on_failure=args.cleanup_on_failure,
        )
        if args.workers is not None:
            values["max_workers"] = args.workers
    if args.command == "manifest":
        values["presign_ttl"] = args.ttl

    try:
        return GalleryConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def cmd_upload(args: argparse.Namespace, config: GalleryConfig) -> None:
    store = ObjectStoreFactory.create_store(config)
    summary = run_upload(
        args.paths,
        args.name,
        config,
        store,
        lambda: ObjectStoreFactory.create_async_store(config),
    )
    print(f"✓ Album complete: {args.name}")
    print(f"Album ID: {summary.album_id}")
    print(
        f"Total images: {summary.total_images} "
        f"({summary.reused_count} reused, {summary.uploaded_count} uploaded)"
    )


def cmd_delete(args: argparse.Namespace, config: GalleryConfig) -> None:
    store = ObjectStoreFactory.create_store(config)
    deleted = AlbumDeletionService(store).delete_album(args.album_id)
    print(f"✓ Album deleted successfully: {args.album_id} ({deleted} objects)")


def cmd_manifest(args: argparse.Namespace, config: GalleryConfig) -> None:
    store = ObjectStoreFactory.create_store(config)
    reader = AlbumReader(store, presign_ttl=config.presign_ttl)
    manifest = reader.get_manifest(args.album_id, presign=args.presign)
    if manifest is None:
        raise AlbumNotFound(args.album_id)
    print(manifest.to_json(include_urls=args.presign))


COMMANDS = {
    "upload": cmd_upload,
    "delete": cmd_delete,
    "manifest": cmd_manifest,
}


def main(argv: Optional[List[str]] = None) -> None:
    """
    Entry point for the ``film-gallery`` command-line interface.

    Exits with status 0 on success and 1 on any unrecovered error; with no
    command it prints help and exits with 1.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "version":
        print("Film Gallery CLI")
        print(f"Version {__version__}")
        sys.exit(0)

    if args.command not in COMMANDS:
        parser.print_help()
        sys.exit(1)

    logger = get_logger("cli")
    try:
        if args.debug:
            set_debug_logging()
        config = build_config(args)
        COMMANDS[args.command](args, config)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        sys.exit(130)
    except GalleryError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
