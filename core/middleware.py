import inspect
from functools import wraps

from dependency_injector.wiring import inject as di_inject


def inject(func):
    """dependency_injector's inject that keeps FastAPI's sync/async dispatch intact."""
    if inspect.iscoroutinefunction(func):
        @di_inject
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            return await func(*args, **kwargs)

        return async_wrapper

    @di_inject
    @wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)

    return wrapper
