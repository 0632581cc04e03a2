# Interactive terminal UI for mcpallete
import re
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from itertools import zip_longest
from pathlib import Path

from mcpallete.config import load_config, save_config
from mcpallete.errors import MCPalleteError
from mcpallete.models import Config, toggle_server
from mcpallete.presets import apply_preset, delete_preset, list_presets, save_preset
from mcpallete.sync import SaveReport, save_all

# ABOUTME: Terminal codes for interactive UI
CLEAR_SCREEN = "\033[2J\033[H"
BOLD = "\033[1m"
RESET = "\033[0m"
CYAN = "\033[96m"

# ABOUTME: Escape sequences stripped when measuring column width
ANSI_PATTERN = re.compile(r"\033\[[0-9;]*[A-Za-z]")

# ABOUTME: Width of one column when drawn side by side
COLUMN_WIDTH = 30

# ABOUTME: Raw terminal input mapped to key names understood by handle_key()
KEY_CODES = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\t": "tab",
    " ": "space",
    "\r": "enter",
    "\n": "enter",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\x03": "ctrl-c",
    "\x04": "ctrl-d",
    "\x12": "ctrl-r",
    "\x13": "ctrl-s",
}

HELP_LINE = (
    "arrows/tab: move  space: toggle/apply  enter: save preset  "
    "^D: delete preset  ^S: save  ^R: reload  ^C/q: quit"
)


class Column(Enum):
    ENVIRONMENTS = "Environments"
    SERVERS = "MCP Servers"
    PRESETS = "Presets"
    PRESET_INPUT = "New Preset"


COLUMN_ORDER = list(Column)


@dataclass
class UiState:
    """Cursor and input state owned by the UI.

    ABOUTME: Never stored in the Config, the engine knows nothing about cursors
    """
    column: Column = Column.ENVIRONMENTS
    env_index: int = 0
    server_index: int = 0
    preset_index: int = 0
    preset_input: str = ""
    message: str = ""
    running: bool = True


@dataclass
class Session:
    """Loaded configuration plus the file it came from."""
    config_path: Path
    config: Config
    backup_dir: Path | None = None
    env: Mapping[str, str] | None = None

    @classmethod
    def open(cls, config_path: Path, backup_dir: Path | None = None) -> "Session":
        return cls(config_path=config_path, config=load_config(config_path), backup_dir=backup_dir)

    def reload(self) -> None:
        """Discard in-memory changes and load the source document again."""
        self.config = load_config(self.config_path)

    def persist_presets(self, env_name: str) -> None:
        """Write one environment's presets into the source document on disk.

        ABOUTME: Only presets change on disk, unsaved toggles stay in memory for ^S or ^R
        """
        stored = load_config(self.config_path)
        presets = self.config.get_environment(env_name).presets
        stored.get_environment(env_name).presets = {name: list(members) for name, members in presets.items()}
        save_config(self.config_path, stored)

    def save(self) -> SaveReport:
        return save_all(self.config, self.config_path, self.env, self.backup_dir)


def environment_names(config: Config) -> list[str]:
    return list(config.environments)


def server_names(config: Config) -> list[str]:
    return list(config.servers)


def selected_environment(session: Session, ui: UiState) -> str | None:
    names = environment_names(session.config)
    if not names:
        return None
    return names[ui.env_index % len(names)]


def preset_names(session: Session, ui: UiState) -> list[str]:
    env_name = selected_environment(session, ui)
    if env_name is None:
        return []
    return list_presets(session.config, env_name)


def _wrap(index: int, delta: int, count: int) -> int:
    if count == 0:
        return 0
    return (index + delta) % count


def clamp_cursors(session: Session, ui: UiState) -> None:
    """Keep every cursor inside its list after the model changed."""
    ui.env_index = min(ui.env_index, max(len(environment_names(session.config)) - 1, 0))
    ui.server_index = min(ui.server_index, max(len(server_names(session.config)) - 1, 0))
    ui.preset_index = min(ui.preset_index, max(len(preset_names(session, ui)) - 1, 0))


def summarize_report(report: SaveReport) -> str:
    """One-line description of a save for the status bar."""
    parts: list[str] = []
    for result in report.results:
        if result.status == "written":
            note = f" ({len(result.warnings)} warning(s))" if result.warnings else ""
            parts.append(f"{result.environment}: {result.server_count} server(s){note}")
        elif result.status == "skipped":
            parts.append(f"{result.environment}: skipped")
        else:
            parts.append(f"{result.environment}: failed - {result.error}")
    if report.source_error:
        parts.insert(0, f"config not saved - {report.source_error}")
    if not parts:
        return "Saved config (no environments)"
    return "Saved. " + "; ".join(parts)


def handle_key(session: Session, ui: UiState, key: str) -> None:
    """Apply one key press to the session and UI state.

    ABOUTME: Engine errors are shown in ui.message, the model stays unchanged
    ABOUTME: Toggle and apply only change memory, ^S writes everything
    ABOUTME: Preset save/delete also write that preset change to disk right away

    Args:
        session: Loaded configuration
        ui: UI state (mutated in place)
        key: Key name from KEY_CODES, or a single printable character
    """
    try:
        _dispatch(session, ui, key)
    except (MCPalleteError, ValueError, OSError) as e:
        ui.message = f"Error: {e}"


def _dispatch(session: Session, ui: UiState, key: str) -> None:
    config = session.config

    if key == "ctrl-c" or (key == "q" and ui.column is not Column.PRESET_INPUT):
        ui.running = False
        return

    if key == "ctrl-s":
        ui.message = summarize_report(session.save())
        return

    if key == "ctrl-r":
        session.reload()
        clamp_cursors(session, ui)
        ui.message = f"Reloaded {session.config_path}"
        return

    position = COLUMN_ORDER.index(ui.column)
    if key == "tab":
        ui.column = COLUMN_ORDER[(position + 1) % len(COLUMN_ORDER)]
        return
    if key == "right":
        ui.column = COLUMN_ORDER[min(position + 1, len(COLUMN_ORDER) - 1)]
        return
    if key == "left":
        ui.column = COLUMN_ORDER[max(position - 1, 0)]
        return

    if key in ("up", "down"):
        delta = -1 if key == "up" else 1
        if ui.column is Column.ENVIRONMENTS:
            ui.env_index = _wrap(ui.env_index, delta, len(environment_names(config)))
            ui.preset_index = 0
        elif ui.column is Column.SERVERS:
            ui.server_index = _wrap(ui.server_index, delta, len(server_names(config)))
        elif ui.column is Column.PRESETS:
            ui.preset_index = _wrap(ui.preset_index, delta, len(preset_names(session, ui)))
        return

    env_name = selected_environment(session, ui)

    if ui.column is Column.PRESET_INPUT:
        if key == "enter":
            if env_name is None:
                return
            members = save_preset(config, env_name, ui.preset_input)
            preset_name = ui.preset_input.strip()
            session.persist_presets(env_name)
            ui.preset_input = ""
            ui.message = f"Saved preset '{preset_name}' ({len(members)} server(s))"
        elif key == "backspace":
            ui.preset_input = ui.preset_input[:-1]
        elif key == "space":
            ui.preset_input += " "
        elif len(key) == 1 and key.isprintable():
            ui.preset_input += key
        return

    if env_name is None:
        return

    if key == "space" and ui.column is Column.SERVERS:
        names = server_names(config)
        if names:
            server_name = names[ui.server_index]
            enabled = toggle_server(config, env_name, server_name)
            ui.message = f"{'Enabled' if enabled else 'Disabled'} {server_name} in {env_name}"
        return

    if ui.column is Column.PRESETS and key in ("space", "ctrl-d"):
        names = preset_names(session, ui)
        if not names:
            return
        preset_name = names[ui.preset_index]
        if key == "space":
            members = apply_preset(config, env_name, preset_name)
            ui.message = f"Applied preset '{preset_name}' ({len(members)} server(s))"
        else:
            delete_preset(config, env_name, preset_name)
            session.persist_presets(env_name)
            clamp_cursors(session, ui)
            ui.message = f"Deleted preset '{preset_name}'"


def draw(session: Session, ui: UiState, color: bool = True) -> str:
    """Render the four columns and status line as text.

    ABOUTME: Pure function of session and UI state, used by run() and tests
    """
    bold, reset, cyan = (BOLD, RESET, CYAN) if color else ("", "", "")
    config = session.config
    env_name = selected_environment(session, ui)
    enabled = set(config.environments[env_name].enable) if env_name else set()

    def cursor(column: Column, active: bool) -> str:
        if active and ui.column is column:
            return f"{cyan}>{reset} " if color else "> "
        return "  "

    columns: dict[Column, list[str]] = {
        Column.ENVIRONMENTS: [
            f"{cursor(Column.ENVIRONMENTS, i == ui.env_index)}{name}"
            for i, name in enumerate(environment_names(config))
        ],
        Column.SERVERS: [
            f"{cursor(Column.SERVERS, i == ui.server_index)}[{'x' if name in enabled else ' '}] {name}"
            for i, name in enumerate(server_names(config))
        ],
        Column.PRESETS: [
            f"{cursor(Column.PRESETS, i == ui.preset_index)}{name}"
            for i, name in enumerate(preset_names(session, ui))
        ],
        Column.PRESET_INPUT: [f"{cursor(Column.PRESET_INPUT, True)}{ui.preset_input}_"],
    }

    lines: list[str] = []
    headers = []
    for column in COLUMN_ORDER:
        title = column.value.ljust(COLUMN_WIDTH)
        headers.append(f"{bold}{title}{reset}" if ui.column is column else title)
    lines.append("".join(headers).rstrip())

    for row in zip_longest(*(columns[column] for column in COLUMN_ORDER), fillvalue=""):
        lines.append("".join(_pad(cell, COLUMN_WIDTH) for cell in row).rstrip())

    lines.append("")
    if ui.message:
        lines.append(ui.message)
    lines.append(HELP_LINE)
    return "\n".join(lines)


def _pad(cell: str, width: int) -> str:
    visible = len(ANSI_PATTERN.sub("", cell))
    return cell + " " * max(width - visible, 1)


def read_key() -> str:
    """Read one key press from a raw terminal.

    ABOUTME: Arrow keys arrive as 3-char escape sequences
    """
    import termios
    import tty

    fd = sys.stdin.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ch = sys.stdin.read(1)
        if ch == "\x1b":
            ch += sys.stdin.read(2)
        return KEY_CODES.get(ch, ch)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def read_key_line() -> str:
    """Fallback for systems without tty/termios (e.g., Windows).

    ABOUTME: One key name per line, e.g. "down", "space", "ctrl-s"
    """
    line = sys.stdin.readline()
    if not line:
        return "ctrl-c"
    return line.strip() or "enter"


def run(session: Session) -> int:
    """Run the interactive loop until the user exits.

    Returns:
        Exit code (0)
    """
    try:
        import termios  # noqa: F401

        reader = read_key
        clear = CLEAR_SCREEN
    except ImportError:
        reader = read_key_line
        clear = ""

    ui = UiState()
    while ui.running:
        print(clear, end="")
        print(draw(session, ui, color=bool(clear)))
        handle_key(session, ui, reader())

    print(clear, end="")
    return 0
