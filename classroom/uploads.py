import os
import uuid

from django.db import models


def unique_upload_name(instance, filename):
    """Store every upload under a generated name, keeping the extension."""
    ext = os.path.splitext(filename)[1].lower()
    return f"{uuid.uuid4().hex}{ext}"


class StoredFile(models.Model):
    """File metadata shared by message, assignment and submission uploads."""
    file = models.FileField(upload_to=unique_upload_name)
    file_name = models.CharField(max_length=255)
    file_size = models.PositiveIntegerField(default=0)

    class Meta:
        abstract = True

    @classmethod
    def from_upload(cls, upload, **kwargs):
        return cls(file=upload, file_name=upload.name, file_size=upload.size, **kwargs)

    @property
    def file_url(self):
        return self.file.url if self.file else ''
