"""
Record commands for kintone CLI.

Commands:
- fields: Show the field schema of an app
- export: Export records as CSV or JSON
- import: Import records from a CSV file
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click

from . import (
    KintoneContext,
    common_options,
    pass_context,
    print_error,
    print_info,
    print_success,
    print_warning,
    require_config,
)
from ..api import KintoneAPIClient
from ..exceptions import KintoneError
from ..loader import chunk_records, parse_records, print_as_csv
from ..utils import OutputFormat, print_csv, print_json, print_table, setup_logging


def register_record_commands(cli: click.Group) -> None:
    """Register record commands with the CLI."""

    @cli.command('fields')
    @click.argument('app')
    @click.option('--preview', is_flag=True, help='Show pre-live settings')
    @click.option(
        '-f', '--format',
        'output_format',
        type=click.Choice(['table', 'json', 'csv']),
        default='table',
        help='Output format'
    )
    @common_options
    @pass_context
    @require_config
    def list_fields(
        ctx: KintoneContext,
        app: str,
        preview: bool,
        output_format: str,
        verbose: bool,
        quiet: bool
    ):
        """Show the field schema of APP."""
        setup_logging(verbose, quiet)
        fmt = OutputFormat(output_format)

        try:
            with KintoneAPIClient.from_config(ctx.config_manager.get()) as client:
                properties = client.app.get_form_fields(app, preview=preview).get('properties', {})
        except KintoneError as e:
            print_error(str(e))
            sys.exit(1)

        if fmt == OutputFormat.JSON:
            print_json(properties)
            return

        headers = ["Code", "Type", "Label"]
        rows = []
        for field in properties.values():
            rows.append([field.get('code', '-'), field.get('type', '-'), field.get('label', '')])
            for child in field.get('fields', {}).values():
                rows.append([f"  {child.get('code', '-')}", child.get('type', '-'), child.get('label', '')])

        if fmt == OutputFormat.CSV:
            print_csv(headers, rows)
        else:
            click.echo(f"\nFields of app {app} ({len(properties)} total):\n")
            print_table(headers, rows)

    @cli.command('export')
    @click.argument('app')
    @click.option('--query', '-q', 'query', help='kintone query to filter records')
    @click.option(
        '-f', '--format',
        'output_format',
        type=click.Choice(['csv', 'json']),
        default='csv',
        help='Output format'
    )
    @click.option(
        '--output', '-o',
        type=click.Path(path_type=Path),
        help='Output file (default: stdout)'
    )
    @click.option('--encoding', default='utf-8', help='Output file encoding')
    @common_options
    @pass_context
    @require_config
    def export_records(
        ctx: KintoneContext,
        app: str,
        query: Optional[str],
        output_format: str,
        output: Optional[Path],
        encoding: str,
        verbose: bool,
        quiet: bool
    ):
        """
        Export the records of APP.

        \b
        Examples:
          kintone export 12 > records.csv
          kintone export 12 --query 'status in ("Done")' -o done.csv
          kintone export 12 --format json
        """
        setup_logging(verbose, quiet)

        try:
            with KintoneAPIClient.from_config(ctx.config_manager.get()) as client:
                properties = client.app.get_form_fields(app).get('properties', {})
                records = client.record.get_all_records_with_cursor(app, query=query)
        except KintoneError as e:
            print_error(str(e))
            sys.exit(1)

        stream = open(output, 'w', encoding=encoding, newline='') if output else sys.stdout
        try:
            if output_format == 'json':
                stream.write(json.dumps(records, indent=2, ensure_ascii=False) + "\n")
            else:
                print_as_csv(records, properties, stream)
        finally:
            if output:
                stream.close()

        if output and not quiet:
            print_success(f"Exported {len(records)} records to {output}")

    @cli.command('import')
    @click.argument('app')
    @click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
    @click.option('--encoding', default='utf-8', help='Input file encoding')
    @click.option('--dry-run', is_flag=True, help='Show the records without uploading them')
    @common_options
    @pass_context
    @require_config
    def import_records(
        ctx: KintoneContext,
        app: str,
        file: Path,
        encoding: str,
        dry_run: bool,
        verbose: bool,
        quiet: bool
    ):
        """
        Import records into APP from a CSV FILE.

        Rows belonging to one record (subtable rows) must follow the row
        marked with "*" in the first column, as written by 'kintone export'.

        \b
        Examples:
          kintone import 12 records.csv
          kintone import 12 records.csv --dry-run
        """
        setup_logging(verbose, quiet)

        try:
            text = file.read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError) as e:
            print_error(f"Cannot read {file}: {e}")
            sys.exit(1)

        records = []
        added = 0
        try:
            with KintoneAPIClient.from_config(ctx.config_manager.get()) as client:
                properties = client.app.get_form_fields(app).get('properties', {})
                records = parse_records(text, properties)

                if not records:
                    print_warning(f"No records found in {file}")
                    return

                if dry_run:
                    print_json(records)
                    return

                for chunk in chunk_records(records):
                    client.record.add_records(app, chunk)
                    added += len(chunk)
                    if not quiet:
                        print_info(f"Uploaded {added}/{len(records)} records...")
        except KintoneError as e:
            details = None
            if added:
                details = f"{added} of {len(records)} records were already imported; re-running will add them again"
            print_error(str(e), details=details)
            sys.exit(1)

        print_success(f"Imported {len(records)} records into app {app}")
