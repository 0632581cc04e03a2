# CLI interface for mcpallete
import argparse
import json
import logging
import sys
from pathlib import Path

from mcpallete import __version__
from mcpallete.config import ensure_config, get_config_path, load_config, save_config
from mcpallete.errors import MCPalleteError, PersistenceError
from mcpallete.models import toggle_server
from mcpallete.presets import apply_preset, delete_preset, list_presets, save_preset
from mcpallete.render import render
from mcpallete.sync import environment_status, save_all
from mcpallete.validation import validate_config

# ABOUTME: Exit codes
# 0 = success, 1 = partial success, 2 = config error, 3 = fatal
EXIT_SUCCESS = 0
EXIT_PARTIAL = 1
EXIT_CONFIG_ERROR = 2
EXIT_FATAL = 3


def _config_path(args: argparse.Namespace) -> Path:
    if getattr(args, "config", None):
        return Path(args.config).expanduser()
    return get_config_path()


def cmd_init(args: argparse.Namespace) -> int:
    """Create the source document if it doesn't exist."""
    config_path = _config_path(args)
    existed = config_path.exists()
    ensure_config(config_path)
    if existed:
        print(f"Config already exists at {config_path}")
    else:
        print(f"Created {config_path}")
        print("Add servers under 'mcpServers' and targets under 'environments'.")
    return EXIT_SUCCESS


def cmd_ui(args: argparse.Namespace) -> int:
    """Start the interactive terminal UI."""
    from mcpallete.tui import Session, run

    config_path = _config_path(args)
    ensure_config(config_path)
    return run(Session.open(config_path))


def cmd_list(args: argparse.Namespace) -> int:
    """List servers and environments.

    ABOUTME: Marks each server enabled per environment
    """
    config_path = _config_path(args)
    config = load_config(config_path)

    print(f"MCP Servers in {config_path}:")
    print()
    for server_name, server in config.servers.items():
        print(f"  {server_name}")
        print(f"    command: {server.command}")
        if server.args:
            print(f"    args: {' '.join(server.args)}")
        if server.env:
            env_str = ", ".join(f"{k}={v}" for k, v in server.env.items())
            print(f"    env: {env_str}")
    print()

    print("Environments:")
    print()
    for env_name, environment in config.environments.items():
        print(f"  {env_name} ({environment.mode or 'no mode'}) -> {environment.config_path or '(no configPath)'}")
        for server_name in config.servers:
            mark = "x" if environment.is_enabled(server_name) else " "
            print(f"    [{mark}] {server_name}")
        if environment.presets:
            print(f"    presets: {', '.join(environment.presets)}")
    print()

    print(f"Total: {len(config.servers)} server(s), {len(config.environments)} environment(s)")
    return EXIT_SUCCESS


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate config without writing any file."""
    config_path = _config_path(args)
    print(f"Validating {config_path}...")
    print()

    config = load_config(config_path)
    print("  ✓ JSON syntax valid")
    print(f"  ✓ {len(config.servers)} server(s), {len(config.environments)} environment(s) defined")

    issues = validate_config(config)
    errors = [issue for issue in issues if issue.severity == "error"]
    warnings = [issue for issue in issues if issue.severity == "warning"]

    for issue in issues:
        symbol = "✗" if issue.severity == "error" else "⚠"
        scope = issue.environment or ""
        if issue.server_name:
            scope = f"{scope}/{issue.server_name}" if scope else issue.server_name
        print(f"  {symbol} {scope}: {issue.message}")

    print()
    print(f"Validation complete: {len(errors)} error(s), {len(warnings)} warning(s)")
    return EXIT_CONFIG_ERROR if errors else EXIT_SUCCESS


def cmd_toggle(args: argparse.Namespace) -> int:
    """Toggle a server in an environment and save the source document."""
    config_path = _config_path(args)
    config = load_config(config_path)

    enabled = toggle_server(config, args.environment, args.server)
    save_config(config_path, config)

    state = "enabled" if enabled else "disabled"
    print(f"Server '{args.server}' {state} in '{args.environment}'.")
    print("Run 'mcpallete save' to write environment outputs.")
    return EXIT_SUCCESS


def cmd_preset(args: argparse.Namespace) -> int:
    """Manage presets of an environment.

    ABOUTME: save/apply/delete change the source document only
    """
    config_path = _config_path(args)
    config = load_config(config_path)

    if args.preset_command == "list":
        environment = config.get_environment(args.environment)
        names = list_presets(config, args.environment)
        if not names:
            print(f"No presets in '{args.environment}'.")
        for name in names:
            print(f"  {name}: {', '.join(environment.presets[name]) or '(empty)'}")
        return EXIT_SUCCESS

    if args.preset_command == "save":
        servers = [s.strip() for s in args.servers.split(",") if s.strip()] if args.servers else None
        members = save_preset(config, args.environment, args.name, servers)
        save_config(config_path, config)
        print(f"Saved preset '{args.name.strip()}' with {len(members)} server(s).")
    elif args.preset_command == "apply":
        members = apply_preset(config, args.environment, args.name)
        save_config(config_path, config)
        print(f"Applied preset '{args.name}': {', '.join(members) or '(no servers)'}")
        print("Run 'mcpallete save' to write environment outputs.")
    elif args.preset_command == "delete":
        delete_preset(config, args.environment, args.name)
        save_config(config_path, config)
        print(f"Deleted preset '{args.name}'.")

    return EXIT_SUCCESS


def cmd_render(args: argparse.Namespace) -> int:
    """Print the rendered output of one environment to stdout."""
    config = load_config(_config_path(args))
    result = render(config, args.environment)

    for warning in result.warnings:
        print(f"Warning: {warning.message}", file=sys.stderr)

    print(json.dumps(result.document, indent=2, ensure_ascii=False))
    return EXIT_SUCCESS


def cmd_save(args: argparse.Namespace) -> int:
    """Save the source document and write every environment output.

    ABOUTME: Returns partial-success exit code if the source or any environment failed
    """
    config_path = _config_path(args)
    print(f"mcpallete save v{__version__}")
    print(f"Loading config from {config_path}")
    config = load_config(config_path)

    print()
    print("Writing environments...")
    report = save_all(config, config_path)

    if report.source_error:
        print(f"  ✗ source config - {report.source_error}")
    for result in report.results:
        if result.status == "written":
            print(f"  ✓ {result.environment} - {result.server_count} server(s) -> {result.path}")
            for warning in result.warnings:
                print(f"      ⚠ {warning.message}")
        elif result.status == "skipped":
            print(f"  ⊘ {result.environment} - skipped (no configPath or mode)")
        else:
            print(f"  ✗ {result.environment} - {result.error}")

    print()
    total = len(report.results)
    if not report.ok:
        print(f"Save complete: {len(report.written)}/{total} environments written, {len(report.failed)} failed")
        if report.source_error:
            print(f"Source config was not saved: {report.source_path}")
        return EXIT_PARTIAL

    print(f"Save complete: {len(report.written)}/{total} environments written")
    return EXIT_SUCCESS


def cmd_status(args: argparse.Namespace) -> int:
    """Show whether each environment output matches the current config."""
    config = load_config(_config_path(args))
    failures = 0

    for env_name, environment in config.environments.items():
        if not environment.config_path.strip():
            print(f"  ⊘ {env_name} - no configPath")
            continue
        if environment.mode is None:
            print(f"  ⊘ {env_name} - no mode")
            continue
        try:
            status = environment_status(config, env_name)
        except (MCPalleteError, ValueError, OSError) as e:
            print(f"  ✗ {env_name} - {e}")
            failures += 1
            continue

        if status.in_sync:
            print(f"  ✓ {env_name} - up to date ({status.path})")
            continue

        print(f"  ⚠ {env_name} - out of date ({status.path})")
        for label, names in (("add", status.added), ("remove", status.removed), ("update", status.changed)):
            if names:
                print(f"      {label}: {', '.join(names)}")

    return EXIT_PARTIAL if failures else EXIT_SUCCESS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcpallete",
        description="Manage MCP server sets per environment and write their config files"
    )
    parser.add_argument("--version", "-V", action="version", version=f"mcpallete v{__version__}")
    parser.add_argument("--config", "-c", help="Path to the source config (default: ~/.config/mcpallete/basic_config.json)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init", help="Create an empty source config")
    subparsers.add_parser("ui", help="Interactive terminal UI (default)")
    subparsers.add_parser("list", help="List servers and environments")
    subparsers.add_parser("validate", help="Validate config without writing files")
    subparsers.add_parser("save", aliases=["sync"], help="Write all environment configs")
    subparsers.add_parser("status", help="Compare environment configs on disk with the source config")

    toggle_parser = subparsers.add_parser("toggle", help="Enable/disable a server in an environment")
    toggle_parser.add_argument("environment", help="Environment name")
    toggle_parser.add_argument("server", help="MCP server name")

    render_parser = subparsers.add_parser("render", help="Print the rendered config of an environment")
    render_parser.add_argument("environment", help="Environment name")

    preset_parser = subparsers.add_parser("preset", help="Manage presets")
    preset_sub = preset_parser.add_subparsers(dest="preset_command", required=True)

    preset_list = preset_sub.add_parser("list", help="List presets of an environment")
    preset_list.add_argument("environment", help="Environment name")

    preset_save = preset_sub.add_parser("save", help="Save enabled servers as a preset")
    preset_save.add_argument("environment", help="Environment name")
    preset_save.add_argument("name", help="Preset name")
    preset_save.add_argument("--servers", help="Comma-separated servers (default: currently enabled)")

    for action, text in (("apply", "Replace enabled servers with a preset"), ("delete", "Delete a preset")):
        action_parser = preset_sub.add_parser(action, help=text)
        action_parser.add_argument("environment", help="Environment name")
        action_parser.add_argument("name", help="Preset name")

    return parser


COMMANDS = {
    "init": cmd_init,
    "ui": cmd_ui,
    "list": cmd_list,
    "validate": cmd_validate,
    "save": cmd_save,
    "sync": cmd_save,
    "status": cmd_status,
    "toggle": cmd_toggle,
    "render": cmd_render,
    "preset": cmd_preset,
}


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    ABOUTME: Parses args and dispatches to appropriate command
    ABOUTME: Maps engine errors to exit codes, returns code for sys.exit()
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handler = COMMANDS[args.command or "ui"]
    try:
        return handler(args)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        print()
        print("Run 'mcpallete init' to create a config.")
        return EXIT_CONFIG_ERROR
    except PersistenceError as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL
    except (MCPalleteError, ValueError) as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR
    except Exception as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL


if __name__ == "__main__":
    sys.exit(main())
