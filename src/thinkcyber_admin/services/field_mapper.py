"""
Field mapper between the backend's snake_case records and the camelCase
domain shape returned to callers.

Both directions go through the entity models in
``thinkcyber_admin.models.entities``: reads validate the backend record and
dump it by alias, writes validate the caller payload in the write context
and dump it by attribute name.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from thinkcyber_admin.exceptions import InvalidPayloadError, ValidationError
from thinkcyber_admin.models.entities import (
    APPLY_DEFAULTS_CONTEXT,
    WRITE_CONTEXT,
    GatewayModel,
)

logger = logging.getLogger(__name__)


def _first_error(exc: PydanticValidationError) -> tuple[str, str]:
    """Return the dotted location and message of the first error."""
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error["loc"])
    return location, error["msg"]


class FieldMapper:
    """
    Stateless converter for backend records.

    Every method is a pure function of its arguments; the class exists to
    group them the way the rest of the services are grouped.
    """

    @staticmethod
    def to_domain(model: type[GatewayModel], raw: Any) -> dict[str, Any]:
        """
        Map a backend record to its camelCase domain dict.

        Parameters
        ----------
        model : type[GatewayModel]
            Model of the entity being mapped.
        raw : Any
            Backend record, normally a dict.

        Returns
        -------
        dict[str, Any]
            New dict containing every declared field that has a value or a
            default. The input is never mutated.

        Raises
        ------
        InvalidPayloadError
            If ``raw`` is ``None``, is not a mapping, or holds a value of the
            wrong type.
        """
        if raw is None:
            raise InvalidPayloadError(entity=model.entity_name)
        if not isinstance(raw, Mapping):
            raise InvalidPayloadError(
                entity=model.entity_name,
                reason=f"expected object, got {type(raw).__name__}",
            )

        try:
            record = model.model_validate(raw)
        except PydanticValidationError as e:
            location, message = _first_error(e)
            raise InvalidPayloadError(
                entity=model.entity_name, reason=f"{location}: {message}"
            ) from e
        return record.model_dump(by_alias=True, exclude_none=True)

    @staticmethod
    def to_domain_list(
        model: type[GatewayModel],
        raw_list: Any,
        container_key: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """
        Map a list of backend records.

        Parameters
        ----------
        model : type[GatewayModel]
            Model of the entity being mapped.
        raw_list : Any
            A list of records, or a dict wrapping the list under the
            container key.
        container_key : Optional[str]
            Wrapper key to look under; defaults to ``model.container_key``.

        Returns
        -------
        list[dict[str, Any]]
            Mapped records. Anything that is not a list, or a list with an
            element that cannot be mapped, degrades to an empty list.
        """
        key = container_key or model.container_key
        if isinstance(raw_list, Mapping) and key:
            raw_list = raw_list.get(key)

        if not isinstance(raw_list, list):
            if raw_list is not None:
                logger.warning(
                    "Expected a list of %s records, got %s",
                    model.entity_name,
                    type(raw_list).__name__,
                )
            return []

        try:
            return [FieldMapper.to_domain(model, item) for item in raw_list]
        except InvalidPayloadError as e:
            logger.error("Discarding %s list: %s", model.entity_name, e.message)
            return []

    @staticmethod
    def to_backend(
        model: type[GatewayModel],
        data: Mapping[str, Any],
        *,
        only: Optional[Iterable[str]] = None,
        apply_write_defaults: bool = True,
    ) -> dict[str, Any]:
        """
        Map a camelCase payload to the backend's snake_case body.

        Parameters
        ----------
        model : type[GatewayModel]
            Model of the entity being written.
        data : Mapping[str, Any]
            Caller payload. Keys may use either spelling.
        only : Optional[Iterable[str]]
            Restrict the output to these fields.
        apply_write_defaults : bool
            Fill in fields that declare a write default when the caller
            omitted them. Partial updates pass ``False``.

        Returns
        -------
        dict[str, Any]
            Backend body. Read-only and absent fields are omitted.

        Raises
        ------
        ValidationError
            If a supplied value has the wrong type for its field.
        """
        context = {WRITE_CONTEXT: True, APPLY_DEFAULTS_CONTEXT: apply_write_defaults}
        try:
            record = model.model_validate(data, context=context)
        except PydanticValidationError as e:
            location, message = _first_error(e)
            raise ValidationError(
                f"Invalid value for {location}: {message}", field=location
            ) from e

        include = None
        if only is not None:
            include = {model.field_name(name) for name in only}
        return record.model_dump(exclude_unset=True, include=include)
