"""Typed settings loading with structured error reporting.

``pydantic_settings.BaseSettings`` subclasses are instantiated through
:func:`load_settings`, which converts validation failures into
:class:`~apidoc_common.errors.SettingsError` carrying the field errors as
Problem Details extensions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError
from pydantic_settings import BaseSettings

from apidoc_common.errors import SettingsError

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = ["load_settings"]


def load_settings[SettingsT: BaseSettings](
    settings_factory: Callable[[], SettingsT] | type[SettingsT],
) -> SettingsT:
    """Instantiate settings via ``settings_factory``.

    Parameters
    ----------
    settings_factory : Callable[[], SettingsT] | type[SettingsT]
        Zero-argument callable returning a ``BaseSettings`` instance.

    Returns
    -------
    SettingsT
        Validated settings.

    Raises
    ------
    SettingsError
        If the environment does not satisfy the settings model.
    """
    try:
        return settings_factory()
    except ValidationError as exc:
        name = getattr(settings_factory, "__name__", type(settings_factory).__name__)
        errors = [
            {
                "loc": ".".join(str(part) for part in err["loc"]),
                "msg": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        msg = f"Failed to load {name} from the environment"
        raise SettingsError(
            msg,
            cause=exc,
            context={"settings_class": name, "errors": errors},
        ) from exc
