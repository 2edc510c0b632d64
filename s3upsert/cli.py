"""CLI entry point for s3upsert."""

from __future__ import annotations

import argparse
import sys

from s3upsert.commands.put import run_put
from s3upsert.commands.put_batch import run_put_batch
from s3upsert.commands.setup import run_setup
from s3upsert.formats import VALID_ACLS

_CONFIG_HELP = (
    "Path to YAML config (default: ~/.config/s3upsert/config.yaml "
    "or S3UPSERT_CONFIG)."
)


class CliApp:
    """Command-line interface for s3upsert."""

    def __init__(self) -> None:
        """Initialize parser and command definitions."""
        self._parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="Upload objects to S3, optionally skipping unchanged ones.",
        )
        subparsers = parser.add_subparsers(dest="command", required=True)

        self._add_setup_parser(subparsers)
        self._add_put_parser(subparsers)
        self._add_put_batch_parser(subparsers)

        return parser

    def _add_setup_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``setup`` command parser."""
        parser = subparsers.add_parser(
            "setup",
            help="Interactively write S3 connection settings to the config file.",
        )
        parser.add_argument("--config", default=None, help=_CONFIG_HELP)

    def _add_put_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``put`` command parser."""
        parser = subparsers.add_parser("put", help="Upload a single object.")
        parser.add_argument("--bucket", "-b", default=None, help="Target bucket.")
        parser.add_argument("--key", "-k", default=None, help="Object key.")
        body = parser.add_mutually_exclusive_group()
        body.add_argument("--file", "-f", default=None, help="Local file to upload.")
        body.add_argument("--body", default=None, help="Literal text body.")
        parser.add_argument(
            "--content-type",
            default=None,
            help="Content-Type (guessed from --file when omitted).",
        )
        parser.add_argument(
            "--metadata",
            default=None,
            help='User metadata as a JSON object, e.g. \'{"owner": "ci"}\'.',
        )
        parser.add_argument("--acl", default=None, choices=sorted(VALID_ACLS))
        parser.add_argument("--content-encoding", default=None)
        parser.add_argument(
            "--upsert",
            action="store_true",
            help="Skip the upload when the stored object has the same content.",
        )
        parser.add_argument("--output", "-o", default=None, help="Write JSON result.")
        parser.add_argument("--config", default=None, help=_CONFIG_HELP)

    def _add_put_batch_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``put-batch`` command parser."""
        parser = subparsers.add_parser(
            "put-batch",
            help="Upload objects listed in a JSON array file, in order.",
        )
        parser.add_argument(
            "--objects",
            required=True,
            help=(
                "JSON file with an array of "
                "{bucket, key, body, contentType, metadata?} objects."
            ),
        )
        parser.add_argument(
            "--upsert",
            action="store_true",
            help="Skip objects whose stored content is identical.",
        )
        parser.add_argument(
            "--continue-on-error",
            action="store_true",
            help="Keep uploading after a failed object instead of stopping.",
        )
        parser.add_argument(
            "--no-progress",
            action="store_true",
            help="Hide the progress bar.",
        )
        parser.add_argument("--output", "-o", default=None, help="Write JSON result.")
        parser.add_argument("--config", default=None, help=_CONFIG_HELP)

    def _run_command(self, args: argparse.Namespace) -> None:
        """Dispatch parsed args to the target command implementation."""
        if args.command == "setup":
            run_setup(args)
            return
        if args.command == "put":
            run_put(args)
            return
        if args.command == "put-batch":
            run_put_batch(args)
            return
        sys.exit(f"Неизвестная команда: {args.command}")

    def run(self, argv: list[str] | None = None) -> None:
        """Run the CLI with the given arguments."""
        args = self._parser.parse_args(argv)
        self._run_command(args)


def main(argv: list[str] | None = None) -> None:
    """Compatibility entry point for setuptools/CLI wrappers."""
    CliApp().run(argv)


if __name__ == "__main__":
    main()
