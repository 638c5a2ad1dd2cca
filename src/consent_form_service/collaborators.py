"""
Interfaces the engine calls out to.

Implementations live with the host application. Each method may be a plain
function or a coroutine function; `call_collaborator` handles both.
"""

from __future__ import annotations

import functools
import inspect
import logging
from typing import Any, Callable, Dict, Optional, Protocol, Sequence, Union

import anyio

from .errors import CollaboratorError
from .schemas import Artist, ConsentForm, Submission

logger = logging.getLogger("consent_forms.collaborators")


class FormStore(Protocol):
    def load_form(self, form_id: str) -> Union[ConsentForm, Dict[str, Any]]: ...

    def save_form(self, form: ConsentForm) -> str: ...

    def save_submission(self, submission: Submission) -> str: ...


class ArtistDirectory(Protocol):
    def list_artists(self, event_id: Optional[str]) -> Sequence[Union[Artist, Dict[str, Any]]]: ...


class DocumentService(Protocol):
    def render(self, submission: Submission, form: ConsentForm) -> Any: ...

    def deliver(self, document: Any, recipient: str) -> Any: ...


async def call_collaborator(operation: str, fn: Callable[..., Any], *args: Any) -> Any:
    """
    Invoke a collaborator method, awaiting coroutines and running blocking
    callables in a worker thread. Any failure is re-raised as CollaboratorError.
    """
    try:
        if inspect.iscoroutinefunction(fn):
            return await fn(*args)
        result = await anyio.to_thread.run_sync(functools.partial(fn, *args))
        if inspect.isawaitable(result):
            result = await result
        return result
    except CollaboratorError:
        raise
    except Exception as e:
        logger.warning("%s failed: %s: %s", operation, type(e).__name__, e)
        raise CollaboratorError(operation, str(e) or type(e).__name__, cause=e) from e
