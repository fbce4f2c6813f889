"""macOS Terminal.app adapter."""

from typing import List, Sequence

from worktree_wizard.services.terminal.base import TerminalAdapter
from worktree_wizard.services.terminal.escaping import escape_for_applescript, shell_quote
from worktree_wizard.services.terminal.frames import TerminalFrame

# Seconds to wait for a keystroke-opened tab to exist before scripting it
NEW_TAB_DELAY = 0.5


def _shell_line(frame: TerminalFrame) -> str:
    line = f"cd {shell_quote(frame.directory)}"
    if frame.command:
        line += f" && {frame.command}"
    return line


class TerminalAppAdapter(TerminalAdapter):
    """Terminal.app has no scriptable splits, so each frame gets its own tab.

    All tabs live in one window. The first ``do script`` opens the window;
    later tabs are added with Cmd-T through System Events and targeted with
    ``in selected tab of front window``.
    """

    name = "Terminal.app"
    bundle_id = "com.apple.Terminal"

    def open_window(self, frames: Sequence[TerminalFrame], window_title: str) -> bool:
        if not frames:
            return True

        result = self.run_script(self.build_open_script(frames, window_title))
        if not result.ok:
            self._report_failure(result)
        return result.ok

    @staticmethod
    def build_open_script(frames: Sequence[TerminalFrame], window_title: str) -> str:
        """Build one script that opens a window with a tab per frame."""
        title = escape_for_applescript(window_title)
        first, rest = frames[0], frames[1:]

        lines: List[str] = [
            'tell application "Terminal"',
            "  activate",
            f'  set firstTab to do script "{escape_for_applescript(_shell_line(first))}"',
            f'  set custom title of firstTab to "{title}"',
        ]
        for frame in rest:
            lines.extend([
                '  tell application "System Events" to keystroke "t" using command down',
                f"  delay {NEW_TAB_DELAY}",
                f'  do script "{escape_for_applescript(_shell_line(frame))}" in selected tab of front window',
                f'  set custom title of selected tab of front window to "{title}"',
            ])
        lines.append("end tell")
        return "\n".join(lines)

    def close_by_title(self, title: str) -> bool:
        """Close every window whose title contains title."""
        script = "\n".join([
            'tell application "Terminal"',
            "  set closedAny to false",
            "  repeat with i from (count of windows) to 1 by -1",
            f'    if name of window i contains "{escape_for_applescript(title)}" then',
            "      close window i",
            "      set closedAny to true",
            "    end if",
            "  end repeat",
            "  return closedAny",
            "end tell",
        ])
        result = self.run_script(script)
        return result.ok and result.stdout.strip() == "true"
