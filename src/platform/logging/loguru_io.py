from functools import wraps
from inspect import iscoroutinefunction
import types
from typing import TYPE_CHECKING, Any, Callable, ParamSpec, TypeVar, cast, overload


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io_config import (
    ExtraField,
    call_depth_var,
    custom_logger,
)
from src.platform.logging.loguru_io_utils import (
    build_call_target_func_path,
    get_chain_start_time,
    mask_sensitive,
    reset_call_depth,
    should_mask_keyword,
    truncate_content,
)

_F = TypeVar('_F', bound=Callable[..., Any])

# Frames between the decorated call site and the loguru call
_WRAPPER_DEPTH = 2


class LoguruIO:
    """
    Decorator that logs the arguments, return value and failure of a call at DEBUG.

    The log context (call target, start of the call chain) is built per call, so
    concurrent calls of one decorated coroutine never share it.
    """

    def __init__(
        self, custom_logger: 'LoguruLogger', *, reraise: bool = True, truncate_content: bool = False
    ) -> None:
        self._custom_logger = custom_logger
        self.reraise = reraise
        self.truncate_content = truncate_content
        self.call_target = ''

    def _enter(self) -> 'LoguruLogger':
        call_depth_var.set(call_depth_var.get() + 1)
        return self._custom_logger.bind(
            **{
                ExtraField.CALL_TARGET: self.call_target,
                ExtraField.CHAIN_START_TIME: get_chain_start_time(),
            }
        ).opt(depth=_WRAPPER_DEPTH)

    def _log_call(self, bound: 'LoguruLogger', args: tuple, kwargs: dict) -> None:
        # mask_sensitive stringifies everything; skip it unless DEBUG lines are emitted
        if settings.DEBUG:
            bound.debug(f'args: {self.scrub(args)}, kwargs: {self.scrub(kwargs)}')

    def _log_return(self, bound: 'LoguruLogger', return_value: Any) -> None:
        if settings.DEBUG:
            bound.debug(f'return: {self.scrub(return_value)}')

    def _log_failure(self, bound: 'LoguruLogger', e: Exception) -> None:
        # Logged once, at the innermost decorated frame
        if getattr(e, '_has_logged', False):
            return
        e._has_logged = True  # type: ignore[attr-defined]
        if isinstance(e, CustomBaseError):
            bound.error(f'{type(e).__name__}: {e}')
        else:
            bound.exception(f'{type(e).__name__}: {e}')

    def _hide_from_traceback(self, func: Callable[..., Any]) -> Callable[..., Any]:
        func.__code__ = func.__code__.replace(  # type: ignore[attr-defined]
            co_filename=cast(types.FunctionType, self._custom_logger.catch).__code__.co_filename
        )
        return func

    def scrub(self, data: Any) -> Any:
        if isinstance(data, dict):
            scrubbed: Any = {
                key: self.scrub(should_mask_keyword(key, value)) for key, value in data.items()
            }
        elif isinstance(data, list | tuple):
            scrubbed = type(data)(self.scrub(item) for item in data)
        else:
            scrubbed = mask_sensitive(data)
        return truncate_content(scrubbed) if self.truncate_content else scrubbed

    def __call__(self, func: _F) -> _F:
        self.call_target = build_call_target_func_path(func)

        if iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                bound = self._enter()
                try:
                    self._log_call(bound, args, kwargs)
                    return_value = await func(*args, **kwargs)
                    self._log_return(bound, return_value)
                    return return_value
                except Exception as e:
                    self._log_failure(bound, e)
                    if self.reraise:
                        raise
                    return None
                finally:
                    reset_call_depth()

            return cast(_F, self._hide_from_traceback(async_wrapper))

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            bound = self._enter()
            try:
                self._log_call(bound, args, kwargs)
                return_value = func(*args, **kwargs)
                self._log_return(bound, return_value)
                return return_value
            except Exception as e:
                self._log_failure(bound, e)
                if self.reraise:
                    raise
                return None
            finally:
                reset_call_depth()

        return cast(_F, self._hide_from_traceback(sync_wrapper))


_P = ParamSpec('_P')
_T = TypeVar('_T')


class Logger:
    """
    Usage:
        Logger.base.info('🎫 [BIDDER] ...')

        @Logger.io
        async def execute(self, ...): ...
    """

    base = custom_logger

    @overload
    @staticmethod
    def io(func: Callable[_P, _T]) -> Callable[_P, _T]: ...

    @overload
    @staticmethod
    def io(func: None = ..., *, reraise: bool = ..., truncate_content: bool = ...) -> LoguruIO: ...

    @staticmethod
    def io(
        func: Callable[_P, _T] | None = None, *, reraise: bool = True, truncate_content: bool = True
    ) -> Callable[_P, _T] | LoguruIO:
        decorator = LoguruIO(
            custom_logger=custom_logger, reraise=reraise, truncate_content=truncate_content
        )
        if func:
            return decorator(func)
        return decorator
