"""hyprspaces - a workspaces indicator for Hyprland status bars (cli client & daemon)."""

import asyncio
import os
import sys

from .client import run_client
from .constants import CONTROL
from .daemon import run_daemon
from .logging_setup import get_logger, init_logger
from .models import ExitCode, HyprspacesError

__all__ = ["main", "use_param"]


def use_param(txt: str) -> str:
    """Check if parameter `txt` is in sys.argv.

    if found, removes it from sys.argv & returns the argument value
    """
    v = ""
    if txt in sys.argv:
        i = sys.argv.index(txt)
        v = sys.argv[i + 1] if i + 1 < len(sys.argv) else ""
        del sys.argv[i : i + 2]
    return v


def main() -> None:
    """Run the command."""
    debug_flag = use_param("--debug")
    if debug_flag:
        init_logger(filename=debug_flag, force_debug=True)
    else:
        init_logger()
    log = get_logger("startup")

    config_filename = use_param("--config")

    invoke_daemon = len(sys.argv) <= 1
    if invoke_daemon and os.path.exists(CONTROL):
        log.critical(
            """%s exists,
is hyprspaces already running ?
If that's not the case, delete this file and run again.""",
            CONTROL,
        )
        sys.exit(ExitCode.ENV_ERROR)

    try:
        asyncio.run(run_daemon(config_filename) if invoke_daemon else run_client(sys.argv[1:], config_filename))
    except KeyboardInterrupt:
        pass
    except HyprspacesError:
        log.critical("Command failed.")
        sys.exit(ExitCode.COMMAND_ERROR)
    except Exception:  # pylint: disable=W0718
        log.critical("Unhandled exception:", exc_info=True)
        sys.exit(ExitCode.COMMAND_ERROR)
    finally:
        if invoke_daemon and os.path.exists(CONTROL):
            os.unlink(CONTROL)


if __name__ == "__main__":
    main()
