"""Forward-only chunked reading over a byte source."""

import inspect
from typing import Any, Optional


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class ChunkReader:
    """Cursor over a forward-only byte source.

    The source only needs a ``read(size)`` method, either a coroutine (aiofiles
    handles) or a plain one (``io.BytesIO``, open binary files). Reads are
    pulled on demand, so at most one chunk is held in memory.
    """

    def __init__(self, source: Any, total_size: Optional[int] = None) -> None:
        """Initialize reader.

        Args:
            source: Object with a ``read(size)`` method returning bytes
            total_size: Declared size of the source, used to bound skips
        """
        self._source = source
        self.total_size = total_size
        self.position = 0
        self.exhausted = False

    async def read(self, size: int) -> bytes:
        """Read exactly ``size`` bytes, or everything left if the source ends first.

        Short reads from the underlying source are retried until the requested
        size is buffered or the source returns no data. Errors propagate.
        """
        if size < 0:
            raise ValueError("size must be non-negative")

        buffer = bytearray()
        while len(buffer) < size and not self.exhausted:
            data = await _maybe_await(self._source.read(size - len(buffer)))
            if not data:
                self.exhausted = True
                break
            buffer.extend(data)

        self.position += len(buffer)
        return bytes(buffer)

    async def skip(self, size: int) -> int:
        """Advance the cursor by up to ``size`` bytes without returning them.

        Seeks when the source supports it and the total size is known,
        otherwise reads and discards.

        Returns:
            Number of bytes skipped
        """
        if size < 0:
            raise ValueError("size must be non-negative")

        seek = getattr(self._source, "seek", None)
        if seek is not None and self.total_size is not None:
            target = min(self.position + size, self.total_size)
            await _maybe_await(seek(target))
            skipped = target - self.position
            self.position = target
            if self.position >= self.total_size:
                self.exhausted = True
            return skipped

        return len(await self.read(size))
