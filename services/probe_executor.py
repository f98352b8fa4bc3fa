import httpx
import sys
import time
from typing import Callable, Optional
from models.record import Record
from services.errors import ConfigurationError

class ProbeExecutor:
    """Performs one HTTP GET against the target and turns the outcome into a Record.

    The executor never writes to the log; persisting the record is up to the caller.
    """

    def __init__(
        self,
        timeout: float = 15,
        transport: Optional[httpx.BaseTransport] = None,
        clock: Callable[[], float] = time.time,
    ):
        if timeout <= 0:
            raise ConfigurationError(f"probe timeout must be positive, got {timeout}")
        self.timeout = timeout  # seconds
        self.transport = transport
        self.clock = clock

    def perform(self, url: str, on_status: Callable[[int], None]) -> None:
        """Issue the request, reporting the status code as soon as headers arrive.

        httpx timeouts apply per connect/read/write, so the body is read in chunks
        against one deadline covering the whole transfer.
        """
        deadline = time.perf_counter() + self.timeout
        with httpx.Client(timeout=self.timeout, transport=self.transport, follow_redirects=False) as client:
            with client.stream("GET", url) as response:
                on_status(response.status_code)
                for _ in response.iter_bytes():
                    if time.perf_counter() >= deadline:
                        raise httpx.ReadTimeout(f"no complete response within {self.timeout}s", request=response.request)

    def probe(self, url: str) -> Record:
        timestamp = int(self.clock())
        status_code: Optional[int] = None

        def _capture(code: int) -> None:
            nonlocal status_code
            status_code = code

        start = time.perf_counter()
        try:
            self.perform(url, _capture)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol, ValueError, TypeError) as e:
            # A bad target must not stop the loop; record the attempt and move on
            print(f"⚠️  Probe of {url!r} could not be issued: {e}", file=sys.stderr)
            status_code = None
        except httpx.TimeoutException:
            pass
        except httpx.HTTPError:
            # Aborted mid-body: keep the status code if headers already arrived
            pass
        elapsed = time.perf_counter() - start

        if status_code is None:
            return Record(timestamp=timestamp)
        return Record(
            timestamp=timestamp,
            status_code=status_code,
            elapsed_us=int(elapsed * 1_000_000),
        )
