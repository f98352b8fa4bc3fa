import sys
import threading
from typing import Optional, TextIO
from jobs.scheduler import CancellationToken

PROMPT = "> "

def watch_for_stop(
    token: CancellationToken,
    keyword: str = "stop",
    stream: Optional[TextIO] = None,
    out: Optional[TextIO] = None,
) -> bool:
    """Read operator commands until the stop keyword arrives.

    Returns True once the token was cancelled by the keyword, False when the
    input ran out first (monitoring then carries on until killed).
    """
    stream = stream or sys.stdin
    out = out or sys.stdout
    out.write(PROMPT)
    out.flush()
    for line in stream:
        if token.cancelled:
            return False
        if line.rstrip("\r\n") == keyword:
            token.cancel()
            print("⛔ Stopping monitor.", file=out)
            return True
        out.write("Unrecognized command.\n" + PROMPT)
        out.flush()
    return False

def start_stop_listener(token: CancellationToken, keyword: str = "stop") -> threading.Thread:
    # Daemon: a blocked stdin read must not keep the process alive
    listener = threading.Thread(target=watch_for_stop, args=(token, keyword), name="stop-listener", daemon=True)
    listener.start()
    return listener
