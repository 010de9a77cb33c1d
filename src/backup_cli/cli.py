from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .decrypt import Encryptor, build_decrypt_command, decrypt
from .dependencies import DEPENDENCIES, describe, install
from .errors import CLIError
from .finder import ModelFinder
from .logger import Logger, attach_log_file, configure_logging
from .paths import PathDefaults, PathOptions, resolve_paths
from .runner import run_triggers
from .scaffold import Confirm, ask_overwrite, generate_config, generate_model
from .triggers import expand_triggers

LOG = logging.getLogger(__name__)

PERFORM_DESCRIPTION = (
    "Performs the backup for the specified trigger.\n"
    "You may perform multiple backups by providing multiple triggers, separated by commas.\n\n"
    "Example:\n  $ backup perform --triggers backup1,backup2,backup3,backup4\n\n"
    "This will invoke 4 backups, and they will run in the order specified (not asynchronous)."
)


def _encryptor(value: str) -> Encryptor:
    try:
        return Encryptor(value.lower())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Unknown encryptor: {value}. Use either 'openssl' or 'gpg'") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="backup", description="Backup command line interface.")
    parser.add_argument("-v", action="store_true", dest="show_version", help="Display installed Backup version.")
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Log level (default INFO).",
    )
    subparsers = parser.add_subparsers(dest="command")

    perform = subparsers.add_parser(
        "perform",
        help="Performs the backup for the specified trigger(s).",
        description=PERFORM_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    perform.add_argument("-t", "--trigger", "--triggers", dest="trigger", required=True)
    perform.add_argument("-c", "--config-file", default="")
    perform.add_argument("-r", "--root-path", default="")
    perform.add_argument("-d", "--data-path", default="")
    perform.add_argument("-l", "--log-path", default="")
    perform.add_argument("--cache-path", default="")
    perform.add_argument("--tmp-path", default="")
    perform.add_argument("-q", "--quiet", action="store_true", help="Only log errors to the console.")
    perform.add_argument("--log-level", default=argparse.SUPPRESS, help="Log level (default INFO).")

    gen_model = subparsers.add_parser(
        "generate:model",
        help="Generates a Backup model file.",
        description=(
            "'--config-path' is the directory where 'config.yml' is located. "
            "The model file is created as '<config_path>/models/<trigger>.yml'."
        ),
    )
    gen_model.add_argument("--trigger", required=True)
    gen_model.add_argument("--config-path", help="Path to your Backup configuration directory.")
    gen_model.add_argument("--archives", nargs="+", default=[], help="Paths to package on every run.")
    gen_model.add_argument("--compress", action="store_true", default=None, help="Gzip the package.")
    gen_model.add_argument("--keep", type=int, help="Number of packages to keep.")
    gen_model.add_argument("--force", action="store_true", help="Overwrite existing files without asking.")

    gen_config = subparsers.add_parser(
        "generate:config", help="Generates the main Backup bootstrap/configuration file."
    )
    gen_config.add_argument("--path")
    gen_config.add_argument("--force", action="store_true", help="Overwrite existing files without asking.")

    dec = subparsers.add_parser("decrypt", help="Decrypts encrypted files.")
    dec.add_argument("--encryptor", type=_encryptor, required=True, help="openssl or gpg.")
    dec.add_argument("--in", dest="in_path", required=True)
    dec.add_argument("--out", dest="out_path", required=True)
    dec.add_argument("--base64", action="store_true")
    dec.add_argument("--password-file", default="")
    dec.add_argument("--salt", action="store_true")

    deps = subparsers.add_parser(
        "dependencies", help="Display the list of dependencies for Backup, or install them through Backup."
    )
    deps.add_argument("--install")
    deps.add_argument("--list", action="store_true")

    subparsers.add_parser("version", help="Display installed Backup version.")
    return parser


def report_failure(err: BaseException, logger: Optional[Logger] = None) -> int:
    logger = logger or Logger()
    logger.error(CLIError.wrap(err), exc_info=err)
    return 1


def perform(args: argparse.Namespace) -> int:
    logger = Logger()
    try:
        options = PathOptions(
            root_path=args.root_path,
            config_file=args.config_file,
            data_path=args.data_path,
            log_path=args.log_path,
            cache_path=args.cache_path,
            tmp_path=args.tmp_path,
        )
        config = resolve_paths(options, PathDefaults.from_env())
        attach_log_file(config.log_path)

        finder = ModelFinder(config.config_file)
        triggers = expand_triggers(args.trigger, finder)
        LOG.debug("Running triggers: %s", ", ".join(triggers))
        run_triggers(config, triggers, finder, logger)
    except Exception as exc:  # noqa: BLE001
        return report_failure(exc, logger)
    return 0


def _default_config_dir() -> Path:
    return PathDefaults.from_env().root_path


def _confirm(force: bool) -> Confirm:
    if force:
        return lambda _path: True
    return ask_overwrite


def generate_model_command(args: argparse.Namespace) -> int:
    config_dir = Path(args.config_path).expanduser().resolve() if args.config_path else _default_config_dir()
    written = generate_model(
        args.trigger,
        config_dir,
        archives=args.archives,
        compress=args.compress,
        keep=args.keep,
        confirm=_confirm(args.force),
    )
    if written.model:
        print(f"Generated model file in '{written.model}'.")
    if written.config:
        print(f"Generated configuration file in '{written.config}'.")
    return 0


def generate_config_command(args: argparse.Namespace) -> int:
    config_dir = Path(args.path).expanduser().resolve() if args.path else _default_config_dir()
    config = generate_config(config_dir, confirm=_confirm(args.force))
    if config:
        print(f"Generated configuration file in '{config}'")
    return 0


def decrypt_command(args: argparse.Namespace) -> int:
    cmd = build_decrypt_command(
        args.encryptor,
        args.in_path,
        args.out_path,
        base64=args.base64,
        password_file=args.password_file,
        salt=args.salt,
    )
    try:
        decrypt(cmd)
    except Exception as exc:  # noqa: BLE001
        return report_failure(exc)
    return 0


def dependencies_command(args: argparse.Namespace) -> int:
    if not args.list and not args.install:
        print()
        print("To display a list of available dependencies, run:\n")
        print("  backup dependencies --list")
        print()
        print("To install one of these dependencies (with the correct version), run:\n")
        print("  backup dependencies --install <name>")
        return 0

    if args.list:
        for name, dependency in DEPENDENCIES.items():
            print()
            print(describe(name, dependency))

    if args.install:
        try:
            return install(args.install)
        except Exception as exc:  # noqa: BLE001
            return report_failure(exc)
    return 0


def version_command(_args: Optional[argparse.Namespace] = None) -> int:
    print(f"Backup {__version__}")
    return 0


COMMANDS = {
    "perform": perform,
    "generate:model": generate_model_command,
    "generate:config": generate_config_command,
    "decrypt": decrypt_command,
    "dependencies": dependencies_command,
    "version": version_command,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.show_version:
        return version_command(args)
    if not args.command:
        parser.print_help()
        return 1

    configure_logging(args.log_level, quiet=getattr(args, "quiet", False))
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
