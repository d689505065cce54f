"""
Query binding: query string -> validated record.

``QueryBinding.bind`` parses the query (unless it is already a mapping),
maps it onto the target with ``map_values`` and, when a validator is
configured, hands the populated record to it. No validator means every
record passes.

    binding = QueryBinding(validator=MyValidator())
    params = SearchParams()
    binding.bind("q=shoes&page=2", params)
"""

from __future__ import annotations

import dataclasses
from typing import Any, Protocol
from urllib.parse import parse_qs

from query_binding.config import BindingConfig, get_binding_config
from query_binding.exceptions import NotARecordError
from query_binding.logging_config import LogContext, get_logger
from query_binding.mapping.walker import SourceCollection, map_values

logger = get_logger("binding")


class StructValidator(Protocol):
    """External validator invoked on a fully populated record."""

    def validate_struct(self, obj: Any) -> None:
        """Raise if ``obj`` is invalid."""
        ...

    def engine(self) -> Any:
        """The underlying validation engine."""
        ...


def parse_query(
    query: str,
    keep_blank_values: bool = True,
    max_num_fields: int | None = None,
) -> dict[str, list[str]]:
    """Parse a URL query component into key -> ordered values."""
    return parse_qs(
        query.removeprefix("?"),
        keep_blank_values=keep_blank_values,
        max_num_fields=max_num_fields,
    )


class QueryBinding:
    """Binds URL query parameters onto dataclass instances."""

    def __init__(
        self,
        validator: StructValidator | None = None,
        config: BindingConfig | None = None,
    ):
        self.validator = validator
        self._config = config

    @property
    def name(self) -> str:
        return "query"

    @property
    def config(self) -> BindingConfig:
        if self._config is None:
            self._config = get_binding_config()
        return self._config

    def bind(self, query: str | SourceCollection, obj: Any) -> None:
        """
        Populate ``obj`` from ``query`` and validate it.

        Raises:
            NotARecordError: ``obj`` is not a dataclass instance.
            BindingError: A field failed to convert.
            Exception: Whatever a custom decoder or the validator raised.
        """
        if isinstance(obj, type) or not dataclasses.is_dataclass(obj):
            raise NotARecordError(type(obj).__name__)

        config = self.config
        if isinstance(query, str):
            values: SourceCollection = parse_query(
                query, config.keep_blank_values, config.max_num_fields
            )
        else:
            values = query

        with LogContext.bind(binding=self.name, target_type=type(obj).__name__):
            map_values(values, obj, config.tag_name)
            if self.validator is not None:
                try:
                    self.validator.validate_struct(obj)
                except Exception as exc:
                    logger.warning(
                        "validation_failed",
                        extra={"error_type": type(exc).__name__},
                    )
                    raise
            logger.debug("bind_completed")


default_binding = QueryBinding()


def bind(query: str | SourceCollection, obj: Any) -> None:
    """Bind with the module-level ``default_binding``."""
    default_binding.bind(query, obj)
