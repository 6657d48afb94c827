"""
Command line client for cloud project storage.

Usage:
    codecloud health                     # Check the API
    codecloud list                       # List your cloud projects
    codecloud save NAME FILE             # Save an exported bundle to the cloud
    codecloud push NAME                  # Save a local workspace project to the cloud
    codecloud get ID [--output FILE]     # Download a project bundle
    codecloud update ID [--name N] [--file F]
    codecloud delete ID
    codecloud sync                       # Import cloud projects into the local workspace
    codecloud import FILE [--name N]     # Import an exported bundle locally
    codecloud local                      # List local workspace projects
    codecloud set-user USER_ID           # Remember the user id for later runs
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .app.cloud_application import CloudApplication, decode_project_data
from .auth.identity import StaticIdentityProvider, StoredIdentityProvider
from .config.app_config import AppConfig
from .errors import CloudStoreError, ConfigurationError
from .notifications import ConsoleNotifier
from .sync.local_workspace import LocalWorkspace


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='codecloud', description="Cloud project storage client")
    parser.add_argument('--base-url', help="Project-store API base URL")
    parser.add_argument('--workspace', help="Path to the local workspace database")
    parser.add_argument('--user', help="User id to act as")
    parser.add_argument('-v', '--verbose', action='store_true', help="Enable debug logging")

    commands = parser.add_subparsers(dest='command', required=True)

    commands.add_parser('health', help="Check the API health endpoint")
    commands.add_parser('list', help="List cloud projects")
    commands.add_parser('local', help="List local workspace projects")
    commands.add_parser('sync', help="Import cloud projects into the local workspace")

    get = commands.add_parser('get', help="Download a cloud project")
    get.add_argument('id', type=int)
    get.add_argument('--output', '-o', help="Write the bundle to this file")

    save = commands.add_parser('save', help="Save an exported bundle file to the cloud")
    save.add_argument('name')
    save.add_argument('file')

    push = commands.add_parser('push', help="Save a local workspace project to the cloud")
    push.add_argument('name')

    update = commands.add_parser('update', help="Rename a cloud project or replace its bundle")
    update.add_argument('id', type=int)
    update.add_argument('--name')
    update.add_argument('--file')

    delete = commands.add_parser('delete', help="Delete a cloud project")
    delete.add_argument('id', type=int)

    import_cmd = commands.add_parser('import', help="Import an exported bundle into the local workspace")
    import_cmd.add_argument('file')
    import_cmd.add_argument('--name', help="Project name (defaults to the file name)")

    set_user = commands.add_parser('set-user', help="Remember the user id for later runs")
    set_user.add_argument('user_id')

    return parser


def build_config(args: argparse.Namespace) -> AppConfig:
    config = AppConfig.from_env()
    if args.base_url:
        config.api.base_url = args.base_url
    if args.workspace:
        config.workspace.path = args.workspace
    if args.user:
        config.user_id = args.user
    return config


def run_command(app: CloudApplication, args: argparse.Namespace) -> int:
    """Run one command against the application and print its result."""
    if args.command == 'health':
        health = app.check_health()
        print(f"API status: {health.status} ({health.timestamp})")

    elif args.command == 'list':
        projects = app.list_projects()
        if not projects:
            print("No cloud projects")
        for project in projects:
            print(f"{project.id:>6}  {project.project_name}  (updated {project.updated_at})")

    elif args.command == 'local':
        headers = app.workspace.list_headers()
        if not headers:
            print("No local projects")
        for header in headers:
            print(f"{header.id}  {header.name}  [{header.editor}]")

    elif args.command == 'get':
        record = app.get_project(args.id)
        print(f"{record.id}: {record.project_name} (created {record.created_at}, updated {record.updated_at})")
        if args.output:
            Path(args.output).write_bytes(decode_project_data(record.project_data))
            print(f"Bundle written to {args.output}")

    elif args.command == 'save':
        result = app.save_bundle(args.name, Path(args.file).read_bytes())
        print(f"Saved as project {result.id}")

    elif args.command == 'push':
        result = app.save_local_project(args.name)
        print(f"Saved as project {result.id}")

    elif args.command == 'update':
        if args.name is None and args.file is None:
            print("Nothing to update: pass --name and/or --file", file=sys.stderr)
            return 2
        data = Path(args.file).read_bytes() if args.file else None
        app.update_project(args.id, project_name=args.name, project_data=data)

    elif args.command == 'delete':
        app.delete_project(args.id)

    elif args.command == 'sync':
        report = app.sync_from_cloud()
        print(f"Imported: {report.imported}, Skipped: {report.skipped}, Failed: {report.failed}")

    elif args.command == 'import':
        name = args.name or Path(args.file).stem
        if app.import_bundle(name, Path(args.file).read_bytes()):
            print(f"Imported '{name}'")
        else:
            print(f"'{name}' already exists locally, not imported")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the command line client.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    if args.command == 'set-user':
        StoredIdentityProvider().remember(args.user_id)
        print(f"User id set to {args.user_id}")
        return 0

    try:
        config = build_config(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    identity = StaticIdentityProvider(config.user_id) if config.user_id else StoredIdentityProvider()
    app = CloudApplication(
        config,
        identity=identity,
        notifier=ConsoleNotifier(),
        workspace=LocalWorkspace(config.workspace.path)
    )

    try:
        return run_command(app, args)
    except CloudStoreError as e:
        logging.getLogger(__name__).debug(f"Command {args.command} failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        app.workspace.close()


if __name__ == "__main__":
    sys.exit(main())
