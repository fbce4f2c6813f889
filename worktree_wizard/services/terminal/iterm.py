"""iTerm2 terminal adapter (macOS)."""

from typing import List, Sequence

from worktree_wizard.services.terminal.base import TerminalAdapter
from worktree_wizard.services.terminal.escaping import escape_for_applescript, shell_quote
from worktree_wizard.services.terminal.frames import TerminalFrame


def _write_lines(frame: TerminalFrame, indent: str) -> List[str]:
    """AppleScript ``write text`` lines that cd into the frame and run its command."""
    lines = [f'{indent}write text "{escape_for_applescript("cd " + shell_quote(frame.directory))}"']
    if frame.command:
        lines.append(f'{indent}write text "{escape_for_applescript(frame.command)}"')
    return lines


class ITermAdapter(TerminalAdapter):
    """Opens a new iTerm2 tab; two frames become a horizontal split."""

    name = "iTerm2"
    bundle_id = "com.googlecode.iterm2"

    def open_window(self, frames: Sequence[TerminalFrame], window_title: str) -> bool:
        if not frames:
            return True

        result = self.run_script(self.build_open_script(frames, window_title))
        if not result.ok:
            self._report_failure(result)
        return result.ok

    def build_open_script(self, frames: Sequence[TerminalFrame], window_title: str) -> str:
        """Build the script for one tab, splitting it when there is a second frame."""
        lines = [
            'tell application "iTerm"',
            "  activate",
            "  if (count of windows) is 0 then",
            "    create window with default profile",
            "  else",
            "    tell current window to create tab with default profile",
            "  end if",
            "  tell current session of current window",
            f'    set name to "{escape_for_applescript(window_title)}"',
        ]
        lines.extend(_write_lines(frames[0], "    "))
        if len(frames) > 1:
            lines.append("    set secondSession to (split horizontally with default profile)")
            lines.append("    tell secondSession")
            lines.append(f'      set name to "{escape_for_applescript(window_title)}"')
            lines.extend(_write_lines(frames[1], "      "))
            lines.append("    end tell")
        lines.extend(["  end tell", "end tell"])
        return "\n".join(lines)

    def close_by_title(self, title: str) -> bool:
        """Close the first tab with any session whose name contains title."""
        script = "\n".join([
            'tell application "iTerm"',
            "  repeat with w in windows",
            "    repeat with t in tabs of w",
            "      repeat with s in sessions of t",
            "        try",
            f'          if name of s contains "{escape_for_applescript(title)}" then',
            "            close t",
            "            return true",
            "          end if",
            "        end try",
            "      end repeat",
            "    end repeat",
            "  end repeat",
            "  return false",
            "end tell",
        ])
        result = self.run_script(script)
        return result.ok and result.stdout.strip() == "true"
