# vme/cli.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from vme import __version__
from vme.common.logging import configure_logging, get_logger
from vme.common.settings import Settings, get_settings
from vme.domain.enums.export_format import ExportFormat
from vme.domain.enums.extraction_level import ExtractionLevel
from vme.domain.errors import InvalidInputError, UnsupportedFormatError, VmeError
from vme.services.export.exporter import coerce_format, export_metadata
from vme.services.extract.service import MetadataExtractor
from vme.services.presenter.console import GREEN, display_metadata, paint
from vme.services.storage.s3_client import S3Client, S3Config, load_s3_config, parse_s3_uri, s3_input

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vme",
        description="Extract metadata from an MP4 file (local path or s3://bucket/key).",
    )
    parser.add_argument("input", help="Path to the media file, or an s3://bucket/key URI")

    levels = parser.add_mutually_exclusive_group()
    levels.add_argument("-b", "--basic", dest="level", action="store_const", const=ExtractionLevel.basic,
                        help="Basic metadata (default)")
    levels.add_argument("-e", "--extended", dest="level", action="store_const", const=ExtractionLevel.extended,
                        help="Extended metadata")
    levels.add_argument("-f", "--full", dest="level", action="store_const", const=ExtractionLevel.full,
                        help="Full metadata")

    parser.add_argument("-o", "--output", metavar="FORMAT", default=None,
                        help="Output format (json/xml); omit to print to the console")
    parser.add_argument("--output-dir", type=Path, default=None,
                        help="Directory for the exported file (default: current directory)")

    s3 = parser.add_argument_group("S3")
    s3.add_argument("--s3-upload", action="store_true", help="Upload the exported metadata to S3")
    s3.add_argument("--s3-bucket", default=None, help="S3 bucket name")
    s3.add_argument("--s3-region", default=None, help="S3 region (default: us-east-1)")
    s3.add_argument("--s3-endpoint", default=None,
                    help="S3 endpoint URL (for MinIO or other S3-compatible services)")
    s3.add_argument("--s3-ssl", action=argparse.BooleanOptionalAction, default=None,
                    help="Use SSL for the S3 connection (default: true)")

    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging on stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _output_format(value: Optional[str]) -> Optional[ExportFormat]:
    if not value:
        return None
    try:
        return coerce_format(value)
    except UnsupportedFormatError:
        raise InvalidInputError("Invalid output format. Use 'json' or 'xml'") from None


def _s3_config(args: argparse.Namespace, bucket: Optional[str]) -> S3Config:
    return load_s3_config(
        bucket,
        region=args.s3_region,
        endpoint=args.s3_endpoint,
        use_ssl=args.s3_ssl,
    )


def run(args: argparse.Namespace, cfg: Settings) -> int:
    fmt = _output_format(args.output)
    level = args.level or ExtractionLevel.basic

    # validate everything before touching ffprobe or the network
    upload_cfg: Optional[S3Config] = None
    if args.s3_upload:
        if fmt is None:
            raise InvalidInputError("--s3-upload requires an output format (-o json|xml)")
        if not args.s3_bucket:
            raise InvalidInputError("S3 bucket name must be specified with --s3-bucket when using --s3-upload")
        upload_cfg = _s3_config(args, args.s3_bucket)

    extractor = MetadataExtractor()
    if args.input.startswith("s3://"):
        bucket, _ = parse_s3_uri(args.input)
        with s3_input(args.input, _s3_config(args, bucket)) as local:
            metadata = extractor.extract(local, level)
    else:
        path = Path(args.input)
        if not path.is_file():
            raise InvalidInputError(f"input file not found: {args.input}")
        metadata = extractor.extract(path, level)

    if fmt is None:
        display_metadata(metadata, level, color=cfg.use_color)
        return 0

    written = export_metadata(metadata, fmt, out_dir=args.output_dir)
    print(f"{paint('Successfully', GREEN, cfg.use_color)} exported metadata in {fmt.value.upper()} format")

    if upload_cfg is not None:
        S3Client(upload_cfg).upload(written, written.name)
        print(f"{paint('Successfully', GREEN, cfg.use_color)} uploaded metadata to S3 bucket {upload_cfg.bucket}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg = get_settings()
    configure_logging("DEBUG" if args.verbose else cfg.log_level)

    try:
        return run(args, cfg)
    except VmeError as e:
        logger.debug("%s failed", e.stage, exc_info=True)
        print(f"Error [{e.stage}]: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
