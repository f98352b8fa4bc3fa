import os
import sys
import threading
from pathlib import Path
from typing import Iterator, List, Tuple, Union
from models.record import Record
from services import record_codec
from services.errors import LogIOError, MalformedRecord

class AppendLog:
    """Append-only, line-oriented record log on the local filesystem."""

    def __init__(self, path: Union[str, Path], strict_interior: bool = False):
        self.path = Path(path)
        self.strict_interior = strict_interior
        # Serializes writers within this process; each append is also its own open/close
        self._lock = threading.Lock()

    # --- WRITE PATH ---

    def append(self, record: Record) -> None:
        line = (record_codec.encode(record) + "\n").encode("ascii")
        with self._lock:
            try:
                with open(self.path, "ab+") as handle:
                    # Terminate a torn line left by an interrupted write first
                    if handle.seek(0, os.SEEK_END) > 0:
                        handle.seek(-1, os.SEEK_END)
                        if handle.read(1) != b"\n":
                            line = b"\n" + line
                    handle.write(line)
                    handle.flush()
                    os.fsync(handle.fileno())
            except OSError as e:
                raise LogIOError(self.path, e) from e

    def check_writable(self) -> None:
        """Open the log for append once, creating it if needed."""
        try:
            with open(self.path, "a", encoding="ascii"):
                pass
        except OSError as e:
            raise LogIOError(self.path, e) from e

    # --- READ PATH ---

    def _read_lines(self) -> List[str]:
        try:
            with open(self.path, "r", encoding="ascii", errors="replace") as handle:
                return handle.read().splitlines()
        except FileNotFoundError:
            return []
        except OSError as e:
            raise LogIOError(self.path, e) from e

    def iter_records(self) -> Iterator[Tuple[int, Record]]:
        """Yield (line number, record) for every well-formed line in file order.

        Blank lines are ignored. A malformed final line, or any line holding only
        part of a timestamp, is treated as a torn write and skipped. Any other
        malformed interior line is skipped with a warning, or raised as
        MalformedRecord when strict_interior is set.
        """
        lines = self._read_lines()
        last_index = len(lines) - 1
        while last_index >= 0 and not lines[last_index].strip():
            last_index -= 1
        for index, line in enumerate(lines[: last_index + 1]):
            if not line.strip():
                continue
            line_number = index + 1
            try:
                yield line_number, record_codec.decode(line)
            except MalformedRecord as e:
                if index == last_index:
                    return
                if record_codec.is_truncated_timestamp(line):
                    continue
                if self.strict_interior:
                    raise MalformedRecord(str(e), line, line_number) from e
                print(f"⚠️  Skipping malformed line {line_number} in {self.path}: {e}", file=sys.stderr)

    def replay_all(self) -> List[Record]:
        return [record for _, record in self.iter_records()]
