"""Serializer helpers shared by the input serializers."""

from __future__ import annotations

from collections.abc import Mapping

from rest_framework import serializers


class StrictFieldsMixin:
    """Reject payload keys the serializer does not declare.

    DRF silently drops unknown keys; request bodies here are contracts, so
    a typo such as ``quantitty`` must fail instead of being ignored.
    Works for nested (``many=True``) serializers too, since every child
    goes through ``to_internal_value``.
    """

    def to_internal_value(self, data):
        if isinstance(data, Mapping):
            unknown = sorted(set(data) - set(self.fields))
            if unknown:
                raise serializers.ValidationError(
                    {name: ["Unknown field."] for name in unknown}
                )
        return super().to_internal_value(data)
