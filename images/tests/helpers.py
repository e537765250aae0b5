"""Helpers for building test images."""

import io
import os
import time

from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image


def image_bytes(width=100, height=80, fmt='PNG', mode='RGB', color=(200, 30, 30)):
    buffer = io.BytesIO()
    if mode == 'RGBA' and len(color) == 3:
        color = color + (128,)
    Image.new(mode, (width, height), color).save(buffer, format=fmt)
    return buffer.getvalue()


def make_upload(name='photo.png', content_type='image/png', **kwargs):
    fmt = kwargs.pop('fmt', {'image/jpeg': 'JPEG', 'image/gif': 'GIF', 'image/webp': 'WEBP'}.get(content_type, 'PNG'))
    return SimpleUploadedFile(name, image_bytes(fmt=fmt, **kwargs), content_type=content_type)


def write_file(directory, name, content=b'x', age_seconds=0):
    """Write ``content`` to ``directory/name`` and backdate its mtime."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_bytes(content)
    if age_seconds:
        stamp = time.time() - age_seconds
        os.utime(path, (stamp, stamp))
    return path
