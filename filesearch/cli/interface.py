# filesearch/cli/interface.py
import sys
from pathlib import Path
from typing import Any, Dict
from dataclasses import fields as dataclass_fields, MISSING

import click
from click_option_group import optgroup
import structlog

from filesearch import __version__ as app_version
from filesearch.config.settings import (
    RunOptions, OutputFormat, DEFAULT_OUTPUT_FORMAT, DEFAULT_CONSOLE_SHOW_SUMMARY,
)
from filesearch.config.loader import load_and_merge_configs, options_from_toml, save_config_to_profile
from filesearch.logging_setup import configure_logging
from filesearch.core.discovery.path_resolution import resolve_root
from filesearch.core.discovery.walker import DirectoryScanner
from filesearch.core.output import format_results, write_to_stdout, write_to_file
from filesearch.cli.console_output import print_cli_summary_output
from filesearch.exceptions import FileSearchError

log = structlog.get_logger(__name__)

# cli parameter name -> (RunOptions attribute, converter)
CLI_PARAM_TO_OPTION_ATTR = {
    "root": ("root", lambda v: v),
    "included_filenames": ("included_filenames", tuple),
    "included_extensions": ("included_extensions", tuple),
    "excluded_dirs": ("excluded_dirs", lambda v: tuple(Path(p) for p in v)),
    "output_format_str": ("output_format", OutputFormat.from_string),
    "output_file": ("output_file", lambda v: v),
    "console_show_summary": ("console_show_summary", bool),
}

def _default_options() -> Dict[str, Any]:
    return {
        f.name: f.default_factory() if f.default_factory is not MISSING else f.default
        for f in dataclass_fields(RunOptions)
    }

def build_effective_options(ctx: click.Context, cli_params: Dict[str, Any]) -> RunOptions:
    # layers dataclass defaults, toml config, the active profile, then explicit cli flags.
    effective_options = _default_options()
    raw_config = load_and_merge_configs()
    effective_options.update(options_from_toml(raw_config, cli_params.get("active_config_profile_name")))

    for param_name, (attr, convert) in CLI_PARAM_TO_OPTION_ATTR.items():
        if ctx.get_parameter_source(param_name) == click.core.ParameterSource.COMMANDLINE:
            effective_options[attr] = convert(cli_params[param_name])

    effective_options["save_profile_name"] = cli_params.get("save_profile_name")
    return RunOptions(**effective_options)

def _run_search_flow(options: RunOptions):
    scan_config = options.to_scan_config()
    scanner = DirectoryScanner(scan_config)
    outcome = scanner.scan()

    output_to_write = format_results(outcome, options.output_format)
    if options.output_file:
        write_to_file(options.output_file, output_to_write)
        click.echo(f"Info: Output written to: {options.output_file}", err=True)
    else:
        log.info("writing_final_output_to_stdout", files=len(outcome.files))
        write_to_stdout(output_to_write)

    if options.console_show_summary:
        print_cli_summary_output(outcome, resolve_root(scan_config))
    return outcome


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("root", required=False, default=None, type=click.Path(path_type=Path))
@optgroup.group("Filtering Options", help="Control which files are reported and which directories are skipped.")
@optgroup.option("-n", "--name", "included_filenames", multiple=True, help="File stem to include (case-insensitive). Repeatable. Default: all.")
@optgroup.option("-x", "--ext", "included_extensions", multiple=True, help="Extension to include, with or without the dot (case-insensitive). Repeatable. Default: all.")
@optgroup.option("-e", "--exclude-dir", "excluded_dirs", multiple=True, type=click.Path(path_type=Path), help="Directory to skip along with everything beneath it. Repeatable.")
@optgroup.group("Output Options", help="Control how results are written.")
@optgroup.option("-F", "--format", "output_format_str", type=click.Choice([f.value for f in OutputFormat]), default=DEFAULT_OUTPUT_FORMAT.value, help=f"Output format. Default: {DEFAULT_OUTPUT_FORMAT.value}.")
@optgroup.option("-o", "--output", "output_file", type=click.Path(dir_okay=False, writable=True, path_type=Path), default=None, help="Path to write the results to instead of stdout.")
@optgroup.option("--summary/--no-summary", "console_show_summary", default=DEFAULT_CONSOLE_SHOW_SUMMARY, help="Show matched/inaccessible/pruned counts on stderr.")
@optgroup.group("Application Behavior", help="Configuration profiles, saving, and logging.")
@optgroup.option("--config-profile", "active_config_profile_name", default=None, help="Load a profile from config file(s).")
@optgroup.option("--save", "save_profile_name", type=str, metavar="PROFILE_NAME", default=None, help="Save options to a profile in the project's .filesearch.toml. Exits after saving.")
@optgroup.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@optgroup.option("--force-json-logs", "force_json_logs_cli", is_flag=True, default=False, help="Force JSON logs.")
@click.version_option(version=app_version, package_name="filesearch", prog_name="filesearch", help="Show version and exit.")
@click.pass_context
def main_cli_group(ctx: click.Context, **cli_params: Any):
    """filesearch: recursively list files under ROOT (default: current
    directory), filtered by name and extension, skipping excluded directories."""

    log_level = "warning"
    if cli_params.get("verbosity_level", 0) == 1: log_level = "info"
    elif cli_params.get("verbosity_level", 0) >= 2: log_level = "debug"
    configure_logging(log_level_str=log_level, force_json_logs=cli_params.get("force_json_logs_cli", False))

    log.debug("cli_command_invoked", params=cli_params)

    try:
        options = build_effective_options(ctx, cli_params)

        if options.save_profile_name:
            if save_config_to_profile(options, options.save_profile_name):
                click.echo(f"Info: Saved profile '{options.save_profile_name}'.", err=True)
            else:
                click.echo(f"Info: Nothing to save for profile '{options.save_profile_name}'.", err=True)
            ctx.exit(0)

        _run_search_flow(options)

    except click.exceptions.Exit as e: raise e
    except FileSearchError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
