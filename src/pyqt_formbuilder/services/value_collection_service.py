"""
Value collection for forms.

Turns a form's raw name -> value snapshot into the committed value map by
applying each field's transform. Transforms never touch stored state; the
snapshot passed in is not modified.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping

if TYPE_CHECKING:
    from pyqt_formbuilder.forms.field_controller import FormFieldController
    from pyqt_formbuilder.forms.field_types import Transform

logger = logging.getLogger(__name__)


class ValueCollectionService:
    """
    Stateless service for collecting transformed form values.

    Examples:
        service = ValueCollectionService()
        transformers = service.collect_transformers(form.fields.values())
        value = service.collect(form_snapshot, transformers)
    """

    @staticmethod
    def collect_transformers(fields: Iterable['FormFieldController']) -> Dict[str, 'Transform']:
        """Map field name to transform for every field that declares one."""
        return {field.name: field.transform for field in fields if field.transform is not None}

    @staticmethod
    def collect(snapshot: Mapping[str, Any], transformers: Mapping[str, 'Transform']) -> Dict[str, Any]:
        """
        Apply transformers to a snapshot.

        Names without a transformer pass through unchanged. Exceptions raised by
        a transform propagate to the caller.
        """
        result: Dict[str, Any] = {}
        for name, value in snapshot.items():
            transform = transformers.get(name)
            if transform is None:
                result[name] = value
            else:
                result[name] = transform(value)
        logger.debug(f"[ValueCollection] collected {len(result)} value(s), {len(transformers)} transformed")
        return result
