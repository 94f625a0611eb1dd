"""
CLI main entry point.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml

from ..archive import ZipDirectoryInspector
from ..config import Config, ConfigValidationError, create_default_config, load_config
from ..decoding import DecodeError, decode_payload
from ..extractors import StructuredTextExtractor
from ..intake import (
    AttachmentIntake,
    IntakeStatus,
    build_search_query,
    decode_text,
    resolve_processing_window,
)
from ..schemas import build_crm_payload

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="request-intake",
        description="Decode ZIP attachments and extract vehicle assessment requests",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # inspect command
    inspect_parser = subparsers.add_parser("inspect", help="List ZIP entries without unzipping")
    inspect_parser.add_argument("file", type=Path, help="ZIP file")

    # decode command
    decode_parser = subparsers.add_parser("decode", help="Decode a textual payload to bytes")
    decode_parser.add_argument("file", type=Path, help="Payload text file")
    decode_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        required=True,
        help="Where to write the decoded bytes",
    )

    # parse command
    parse_parser = subparsers.add_parser("parse", help="Extract a request record from form text")
    parse_parser.add_argument("file", type=Path, help="Request form text file")
    parse_parser.add_argument(
        "--encoding",
        type=str,
        default=None,
        help="Text encoding (default: configured charset chain)",
    )

    # process command
    process_parser = subparsers.add_parser("process", help="Run the full attachment intake")
    process_parser.add_argument("file", type=Path, help="Payload text file (or ZIP with --raw-zip)")
    process_parser.add_argument(
        "--raw-zip",
        action="store_true",
        help="Input is raw ZIP bytes rather than a textual payload",
    )
    process_parser.add_argument(
        "--crm",
        action="store_true",
        help="Print CRM payloads instead of parsed records",
    )

    # query command
    query_parser = subparsers.add_parser("query", help="Print the mailbox search query")
    query_parser.add_argument(
        "--date",
        type=str,
        default=None,
        help="Day to process, YYYY-MM-DD (default: override setting or today)",
    )

    # init-config command
    subparsers.add_parser("init-config", help="Write a default config file")

    return parser


def _print_json(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def cmd_inspect(path: Path) -> int:
    """List ZIP central directory entries."""
    try:
        data = path.read_bytes()
    except OSError as e:
        print(f"❌ Cannot read {path}: {e}")
        return 1

    directory = ZipDirectoryInspector().inspect_directory(data)
    print(f"📦 {path.name}: {directory.status.value}")
    for entry in directory.entries:
        lock = " 🔒" if entry.encrypted else ""
        print(f"  📄 {entry.name} [{entry.method_name}]{lock}")

    print(f"\n✓ {len(directory.entries)} entry(ies)")
    return 0


def cmd_decode(path: Path, output: Path) -> int:
    """Decode a textual payload file into bytes."""
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"❌ Cannot read {path}: {e}")
        return 1

    try:
        data = decode_payload(raw)
    except DecodeError as e:
        print(f"❌ {e}")
        return 1

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(data)
    print(f"✓ Wrote {len(data)} bytes to {output}")
    return 0


def cmd_parse(config: Config, path: Path, encoding: str | None = None) -> int:
    """Extract one request record from a text file."""
    try:
        data = path.read_bytes()
    except OSError as e:
        print(f"❌ Cannot read {path}: {e}")
        return 1

    charsets = [encoding] if encoding else config.archive.text_charsets
    body = decode_text(data, charsets, path.name)
    if body is None:
        print(f"❌ Could not decode {path} with {', '.join(charsets)}")
        return 1

    extractor = StructuredTextExtractor.from_config(config.extraction)
    _print_json(extractor.extract(body.text).to_dict())
    return 0


def cmd_process(config: Config, path: Path, raw_zip: bool = False, crm: bool = False) -> int:
    """Run the attachment intake on one file."""
    intake = AttachmentIntake(config)

    try:
        if raw_zip:
            outcome = intake.process_bytes(path.read_bytes(), name=path.name)
        else:
            outcome = intake.process(path.read_text(encoding="utf-8"), name=path.name)
    except (OSError, UnicodeDecodeError) as e:
        print(f"❌ Cannot read {path}: {e}")
        return 1

    if outcome.status == IntakeStatus.FAILED:
        print(f"❌ {outcome.name}: {outcome.error_kind.value}: {outcome.reason}")
        return 1
    if outcome.status == IntakeStatus.SKIPPED:
        print(f"⏭️  {outcome.name}: skipped ({outcome.reason})")
        return 0

    if crm:
        results = [build_crm_payload(r.record, config.crm.sobject) for r in outcome.records]
    else:
        results = [{"file": r.name, **r.record.to_dict()} for r in outcome.records]
    _print_json(results)
    return 0


def cmd_query(config: Config, target_date: str | None = None) -> int:
    """Print the mailbox search query for one day."""
    try:
        window = resolve_processing_window(
            target_date,
            config.extraction.timezone,
            override=config.mailbox.date_override,
        )
    except ConfigValidationError as e:
        print(f"❌ {e}")
        return 1

    logger.info(f"Target date: {window.label} (override applied: {window.override_applied})")
    print(build_search_query(config.mailbox.query, config.mailbox.processed_label, window))
    return 0


def cmd_init_config(config_path: Path) -> int:
    """Write a default config file unless one exists."""
    if config_path.exists():
        print(f"❌ {config_path} already exists")
        return 1

    create_default_config(config_path)
    print(f"✓ Wrote default config to {config_path}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    setup_logging(parsed.verbose)

    if not parsed.command:
        parser.print_help()
        return 1

    if parsed.command == "init-config":
        return cmd_init_config(parsed.config)

    # Load config
    try:
        config = load_config(parsed.config)
    except (OSError, yaml.YAMLError, ValueError, TypeError) as e:
        print(f"❌ Failed to load config: {e}")
        return 1

    errors = config.validate()
    if errors:
        for error in errors:
            print(f"❌ {error}")
        return 1

    # Route to command
    if parsed.command == "inspect":
        return cmd_inspect(parsed.file)
    elif parsed.command == "decode":
        return cmd_decode(parsed.file, parsed.output)
    elif parsed.command == "parse":
        return cmd_parse(config, parsed.file, parsed.encoding)
    elif parsed.command == "process":
        return cmd_process(config, parsed.file, parsed.raw_zip, parsed.crm)
    elif parsed.command == "query":
        return cmd_query(config, parsed.date)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
