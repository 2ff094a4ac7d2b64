from typing import TYPE_CHECKING, Any, AsyncGenerator, Self

from src.platform.logging.loguru_io_config import GeneratorMethod


if TYPE_CHECKING:
    from src.platform.logging.loguru_io import LoguruIO


class AsyncGeneratorWrapper:
    """Logs each item of a streamed result and the item count once it is exhausted"""

    def __init__(self, gen_obj: AsyncGenerator[Any, Any], loguru_io: 'LoguruIO') -> None:
        self.gen_obj = gen_obj
        self._loguru_io = loguru_io
        self.item_count = 0

    def __aiter__(self) -> Self:
        return self

    async def __anext__(self) -> Any:
        extra = self._loguru_io.enter()
        try:
            item = await self.gen_obj.__anext__()
        except StopAsyncIteration:
            self._loguru_io.log_debug(
                extra, f'yield: {GeneratorMethod.CLOSE} | streamed {self.item_count} items'
            )
            raise
        except Exception as e:
            self._loguru_io.log_exception(extra, e)
            raise
        finally:
            self._loguru_io.exit()

        self.item_count += 1
        self._loguru_io.log_debug(
            extra, f'yield: {GeneratorMethod.NEXT} | {self._loguru_io.render(item)}'
        )
        return item

    async def aclose(self) -> None:
        await self.gen_obj.aclose()
