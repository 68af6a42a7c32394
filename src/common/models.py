import typing as t
import uuid

from django.db import models


class TimeStampedModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True, db_index=True)

    class Meta:
        abstract = True

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Run full_clean before saving.

        Partial saves (``update_fields``) are validated on those fields only and always
        refresh ``updated_at``, so a review status change still bumps the row's timestamp.
        """
        update_fields = kwargs.get("update_fields")
        if update_fields is None:
            self.full_clean()
        else:
            update_fields = set(update_fields) | {"updated_at"}
            kwargs["update_fields"] = update_fields
            concrete = {field.name for field in self._meta.concrete_fields}
            self.full_clean(exclude=concrete - update_fields, validate_unique=False, validate_constraints=False)
        super().save(*args, **kwargs)
