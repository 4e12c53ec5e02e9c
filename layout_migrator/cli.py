"""
Layout Migrator — Command Line Interface

    layout-migrator migrate  --id main-layout --domain acme [--json-only] [--dry-run]
    layout-migrator transfer --id main-layout --from acme --to globex [--dry-run]

Exit codes: 0 success, 1 hard failure, 2 document failed validation.
"""

import argparse
import asyncio
import json
import re
from pathlib import Path
from typing import Optional

from layout_migrator.client import ProlibuApiError, ProlibuConfig, ProlibuParseError, bearer, create_content_template
from layout_migrator.config import generate_error_code, load_account_settings, log, settings
from layout_migrator.models import MigrationResult, MigrationStats, ValidationResult
from layout_migrator.pipeline import MigrationError, migrate

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID = 2

# Failures reported to the user with an error code instead of a traceback
HANDLED_ERRORS = (MigrationError, ProlibuApiError, ProlibuParseError, ValueError, OSError)


class ConfigError(Exception):
    pass


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="layout-migrator",
        description="Migrate Prolibu v1 layouts to Design Studio v2 documents.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    migrate_cmd = commands.add_parser("migrate", help="Migrate a template within one account")
    migrate_cmd.add_argument("--domain", help="Load config from a .<domain>.env file")
    migrate_cmd.add_argument("--api-url", help="Prolibu API base URL (overrides env file)")
    migrate_cmd.add_argument("--token", help="Auth token (overrides env file)")
    migrate_cmd.add_argument(
        "--json-only",
        action="store_true",
        help="Only save JSON locally, do NOT upload to Prolibu",
    )

    transfer_cmd = commands.add_parser("transfer", help="Migrate a template from one account into another")
    transfer_cmd.add_argument("--from", dest="source", required=True, help="Source account (.<domain>.env)")
    transfer_cmd.add_argument("--to", dest="destination", required=True, help="Destination account (.<domain>.env)")

    for cmd in (migrate_cmd, transfer_cmd):
        cmd.add_argument("--id", default="main-layout", help="contentTemplateCode or _id of the template")
        cmd.add_argument("--name", help='Name for the new template (default: original name + " [migrated <date>]")')
        cmd.add_argument("--type", default="layout", help="Template type: layout | content | snippet")
        cmd.add_argument(
            "--save-json",
            nargs="?",
            const=True,
            default=None,
            metavar="PATH",
            help=f"Also save the document JSON (default path: ./{settings.output_dir}/<name>.json)",
        )
        cmd.add_argument("--dry-run", action="store_true", help="Validate only: no upload, no file write")
        cmd.add_argument(
            "--no-sync-fonts",
            dest="sync_fonts",
            action="store_false",
            default=settings.sync_fonts,
            help="Disable automatic font synchronization",
        )
        cmd.add_argument("--verbose", action="store_true", help="Show validation warnings")

    return parser.parse_args(args)


# ──────────────────────────────────────────────────────
# Account resolution
# ──────────────────────────────────────────────────────

def resolve_migrate_config(args: argparse.Namespace) -> ProlibuConfig:
    """Flags > .<domain>.env > process environment."""
    source = load_account_settings(args.domain) if args.domain else settings
    if args.domain:
        print(f"Loaded config from .{args.domain}.env")

    api_url = args.api_url or source.prolibu_api_url
    if not api_url:
        raise ConfigError("API URL required. Use --domain <name>, --api-url <url>, or set PROLIBU_API_URL.")
    token = args.token or source.prolibu_auth_token
    if not token:
        raise ConfigError("Auth token required. Use --token, --domain <name>, or set PROLIBU_AUTH_TOKEN.")

    return ProlibuConfig(
        base_url=api_url,
        auth_token=bearer(token),
        timeout_seconds=source.request_timeout_seconds,
        max_retries=source.max_retries,
    )


def resolve_account_config(domain: str, label: str) -> ProlibuConfig:
    account = load_account_settings(domain)
    if not account.prolibu_auth_token:
        raise ConfigError(f"{label}: No PROLIBU_AUTH_TOKEN found in .{domain}.env")
    print(f"{label}: loaded .{domain}.env")
    return ProlibuConfig(
        base_url=account.prolibu_api_url or f"https://{domain}.prolibu.com/api",
        auth_token=bearer(account.prolibu_auth_token),
        timeout_seconds=account.request_timeout_seconds,
        max_retries=account.max_retries,
    )


# ──────────────────────────────────────────────────────
# Commands
# ──────────────────────────────────────────────────────

async def run_migrate(args: argparse.Namespace) -> int:
    config = resolve_migrate_config(args)
    print(f"Migrating contentTemplateCode: {args.id}")
    print(f"   API: {config.base_url}")

    result = await migrate(args.id, config=config, font_api_config=config if args.sync_fonts else None)
    report(result, args.verbose)
    if args.dry_run:
        print("\nDry run: no upload, no file written")
        return exit_code(result)

    if args.save_json or args.json_only:
        save_json(result, args.save_json)

    if not args.json_only:
        print("\nUploading to Prolibu as new template...")
        created = await create_content_template(result.document, config, args.name, args.type)
        print(f"Created: {created.name or args.name or result.document.name}")
        print(f"   ID: {created.id}")
        print(f"   URL: {editor_url(config, created.id)}")

    return exit_code(result)


async def run_transfer(args: argparse.Namespace) -> int:
    source = resolve_account_config(args.source, "Source")
    destination = resolve_account_config(args.destination, "Destination")
    print(f"Transferring contentTemplateCode: {args.id}")
    print(f"   From: {args.source} ({source.base_url})")
    print(f"   To:   {args.destination} ({destination.base_url})")

    # Fonts go to the destination account
    result = await migrate(args.id, config=source, font_api_config=destination if args.sync_fonts else None)
    report(result, args.verbose)
    if args.dry_run:
        print("\nDry run: no upload, no file written")
        return exit_code(result)

    if args.save_json:
        save_json(result, args.save_json)

    print(f"\nUploading to {args.destination} as new template...")
    created = await create_content_template(result.document, destination, args.name, args.type)
    print(f"Created on {args.destination}: {created.name or args.name or result.document.name}")
    print(f"   ID: {created.id}")
    print(f"   URL: {editor_url(destination, created.id)}")

    return exit_code(result)


COMMANDS = {"migrate": run_migrate, "transfer": run_transfer}


def main(args: list[str] | None = None) -> int:
    parsed = parse_args(args)
    try:
        return asyncio.run(COMMANDS[parsed.command](parsed))
    except ConfigError as e:
        print(f"Error: {e}")
        return EXIT_FAILURE
    except HANDLED_ERRORS as e:
        code = generate_error_code()
        log("ERROR", f"{parsed.command} failed", template_id=parsed.id, error_code=code, error=str(e))
        print(f"\n{parsed.command.capitalize()} failed [{code}]:")
        print(f"   {type(e).__name__}: {e}")
        if isinstance(e, ProlibuApiError) and e.response_body:
            print(f"   Response body: {e.response_body[:500]}")
        return EXIT_FAILURE


# ──────────────────────────────────────────────────────
# Output helpers
# ──────────────────────────────────────────────────────

def exit_code(result: MigrationResult) -> int:
    return EXIT_OK if result.validation.valid else EXIT_INVALID


def sanitize_filename(name: str) -> str:
    cleaned = re.sub(r"[^a-zA-Z0-9_\-\s]", "", name)
    cleaned = re.sub(r"\s+", "-", cleaned).lower()[:100]
    return cleaned or "unnamed-template"


def save_json(result: MigrationResult, target: Optional[str | bool]) -> Path:
    if isinstance(target, str):
        path = Path(target).resolve()
    else:
        path = (Path(settings.output_dir) / f"{sanitize_filename(result.document.name)}.json").resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(result.document.model_dump(by_alias=True, mode="json"), indent=2), encoding="utf-8")
    print(f"\nJSON saved to: {path}")
    return path


def editor_url(config: ProlibuConfig, template_id: str) -> str:
    origin = config.api_root.removesuffix("/api")
    return f"{origin}/ui/spa/suite/contentTemplates/edit/{template_id}"


def report(result: MigrationResult, verbose: bool) -> None:
    print_stats(result.stats)
    print_warnings(result.warnings)
    print_validation(result.validation, verbose)
    if result.font_sync:
        sync = result.font_sync
        print(f"\nFonts: {len(sync.uploaded)} uploaded, {len(sync.skipped)} skipped, {len(sync.failed)} failed")
        for failure in sync.failed:
            print(f"   - {failure.name}: {failure.error}")


def print_stats(stats: MigrationStats) -> None:
    print("\nMigration Stats:")
    print(f"   Pages: {stats.pages}")
    print(f"   Total source nodes: {stats.total_source_nodes}")
    print(f"   Migrated nodes: {stats.migrated_nodes}")
    print(f"   Skipped nodes: {stats.skipped_nodes}")
    print(f"   Text: {stats.text_nodes}")
    print(f"   Components: {stats.component_nodes}")
    print(f"   Images: {stats.image_nodes}")
    print(f"   Rectangles: {stats.rectangle_nodes}")
    print(f"   Lines: {stats.line_nodes}")
    print(f"   Frames: {stats.frame_nodes}")


def print_warnings(warnings: list[str]) -> None:
    if warnings:
        print(f"\nWarnings ({len(warnings)}):")
        for warning in warnings:
            print(f"   - {warning}")


def print_validation(validation: ValidationResult, verbose: bool) -> None:
    if validation.valid:
        print("\nDocument validation: PASSED")
    else:
        print("\nDocument validation: FAILED")
        for issue in validation.errors:
            print(f"   Error: {issue.message} ({issue.path}) [{issue.code}]")

    if verbose and validation.warnings:
        print(f"\n   Validation warnings ({len(validation.warnings)}):")
        for issue in validation.warnings:
            print(f"   - {issue.message} ({issue.path})")


if __name__ == "__main__":
    raise SystemExit(main())
