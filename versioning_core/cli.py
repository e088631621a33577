"""
Simple Versioning CLI - Command line interface for the revision store.

Usage:
    simple-versioning create PATH... [--root=DIR] [--base-dir=DIR]
    simple-versioning list [--format=FORMAT] [--base-dir=DIR]
    simple-versioning config show [--section=SECTION]
    simple-versioning config validate
    simple-versioning version
    simple-versioning --help

Commands:
    create              Snapshot the given files and directories as a new revision
    list                List existing revision numbers
    config              Show or validate configuration
    version             Show version information

Options:
    -h --help           Show this help message
    --root=DIR          Directory the stored paths are relative to [default: .]
    --base-dir=DIR      Revision base directory (overrides configuration)
    --format=FORMAT     Output format (text, json) [default: text]
    --section=SECTION   Configuration section
    --config=DIR        Configuration directory
"""

import json
import os
import sys
import traceback
from pathlib import Path
from typing import Dict, List, Optional

import dotenv
import yaml

from versioning_core import __version__
from versioning_core.config import ConfigValidationError, init_config
from versioning_core.monitoring.structured_logger import configure_logging
from versioning_core.versioning.exceptions import RevisionStoreError
from versioning_core.versioning.revision_store import RevisionStore


class VersioningCLI:
    """Simple Versioning command line interface."""

    def __init__(self, config_dir: Optional[str] = None, base_dir: Optional[str] = None):
        self.config_manager = init_config(config_dir)
        if base_dir:
            self.config_manager.set("storage.base_directory", base_dir)
        configure_logging(self.config_manager.config.logging)
        self.store = RevisionStore.from_config(self.config_manager)

    def create_command(self, paths: List[str], root: str = "."):
        """Create a revision from files on disk."""
        try:
            files = collect_files(paths, Path(root))
        except (OSError, ValueError) as e:
            print(f"❌ Could not read input files: {e}")
            sys.exit(1)

        try:
            revision = self.store.create_revision(files)
        except RevisionStoreError as e:
            print(f"❌ Failed to create revision: {e}")
            sys.exit(1)

        print(f"✅ Created revision {revision} with {len(files)} files")
        print(f"   {self.store.revision_path(revision)}")

    def list_command(self, format: str = "text"):
        """List existing revisions."""
        try:
            revisions = self.store.list_revisions()
        except RevisionStoreError as e:
            print(f"❌ Failed to list revisions: {e}")
            sys.exit(1)

        if format == "json":
            print(json.dumps({"revisions": revisions}))
        elif not revisions:
            print(f"No revisions in {self.store.base_directory}")
        else:
            for revision in revisions:
                print(revision)

    def config_command(self, action: str, section: Optional[str] = None):
        """Manage configuration."""
        if action == "show":
            config_dict = self.config_manager.to_dict()
            if section:
                if section not in config_dict:
                    print(f"❌ Unknown configuration section: {section}")
                    sys.exit(1)
                config_dict = {section: config_dict[section]}
            print(yaml.dump(config_dict, default_flow_style=False, indent=2), end="")
        elif action == "validate":
            try:
                self.config_manager.validate()
            except ConfigValidationError as e:
                print(f"❌ {e}")
                sys.exit(1)
            print("✅ Configuration is valid")
        else:
            print(f"❌ Unknown config action: {action}")
            sys.exit(1)

    @staticmethod
    def version_command():
        print(f"simple-versioning {__version__}")


def collect_files(paths: List[str], root: Path) -> Dict[str, bytes]:
    """
    Read the given files, recursing into directories.

    Args:
        paths: Files or directories to include
        root: Directory the resulting keys are relative to

    Returns:
        Mapping of forward-slash relative path to file bytes
    """
    root = root.resolve()
    files = {}
    for raw_path in paths:
        path = Path(raw_path).resolve()
        if path.is_dir():
            candidates = sorted(p for p in path.rglob("*") if p.is_file())
        elif path.is_file():
            candidates = [path]
        else:
            raise FileNotFoundError(f"No such file or directory: {raw_path}")

        for candidate in candidates:
            try:
                relative = candidate.relative_to(root)
            except ValueError:
                raise ValueError(f"{candidate} is not inside {root}") from None
            files[relative.as_posix()] = candidate.read_bytes()
    return files


def parse_args(argv: List[str]):
    """Parse command line arguments manually."""
    if len(argv) < 1:
        print(__doc__)
        sys.exit(1)

    command = argv[0]
    args = {}

    i = 1
    while i < len(argv):
        arg = argv[i]

        if arg.startswith("--"):
            if "=" in arg:
                key, value = arg[2:].split("=", 1)
                args[key] = value
            else:
                key = arg[2:]
                if i + 1 < len(argv) and not argv[i + 1].startswith("--"):
                    args[key] = argv[i + 1]
                    i += 1
                else:
                    args[key] = True
        else:
            args.setdefault("positional", []).append(arg)

        i += 1

    return command, args


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    if argv is None:
        argv = sys.argv[1:]

    dotenv.load_dotenv()

    try:
        command, args = parse_args(argv)

        if command in ["--help", "-h", "help"]:
            print(__doc__)
            return

        if command == "version":
            VersioningCLI.version_command()
            return

        cli = VersioningCLI(config_dir=args.get("config"), base_dir=args.get("base-dir"))
        positional = args.get("positional", [])

        if command == "create":
            if not positional:
                print("❌ Create requires at least one PATH")
                sys.exit(1)
            cli.create_command(positional, root=args.get("root", "."))

        elif command == "list":
            cli.list_command(format=args.get("format", "text"))

        elif command == "config":
            if not positional:
                print("❌ Config command requires action (show, validate)")
                sys.exit(1)
            cli.config_command(positional[0], section=args.get("section"))

        else:
            print(f"❌ Unknown command: {command}")
            print("Run 'simple-versioning --help' for usage information")
            sys.exit(1)

    except KeyboardInterrupt:
        print("\n🛑 Operation cancelled")
        sys.exit(1)
    except ConfigValidationError as e:
        print(f"❌ {e}")
        sys.exit(1)
    except RevisionStoreError as e:
        print(f"❌ {e}")
        if os.getenv("DEBUG"):
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
