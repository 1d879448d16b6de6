"""Desktop notifications through notify-send."""

import subprocess
from typing import Set


class Notify:
    """Sends notifications; an instance also remembers which missing
    commands it has already reported, so a polling loop warns only once."""

    def __init__(self, debug: bool = False):
        self._debug = debug
        self._reported: Set[str] = set()

    def command_missing(self, command: str) -> bool:
        """Reports a missing binary the first time it is seen.

        Returns True if a notification was attempted.
        """
        if command in self._reported:
            return False
        self._reported.add(command)
        self.send(
            f"Backdrop: '{command}' not found",
            f"Install {command} and make sure it is on your PATH; "
            "the pop-out window is only partly configured without it.",
            icon="dialog-warning",
            expire_time=10000,
            debug=self._debug,
        )
        return True

    @staticmethod
    def send(
        summary: str,
        description: str = "",
        icon: str = "preferences-desktop-wallpaper",
        expire_time: int = 2000,
        debug: bool = False,
    ) -> bool:
        try:
            subprocess.run(
                [
                    "notify-send",
                    "--icon",
                    icon,
                    "--app-name",
                    "Backdrop",
                    "--expire-time",
                    str(expire_time),
                    summary,
                    description,
                ],
                check=True,
                capture_output=True,
            )
            return True
        except (FileNotFoundError, subprocess.CalledProcessError) as e:
            if debug:
                print(
                    f"Notification failed: {e}\nSummary: {summary}\nDesc: {description}"
                )
            return False
