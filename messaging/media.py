"""
Extension lookup tables for uploaded files.

Kept free of storage and transport code: classify_upload() picks the chat
message category for a file and mime_type_for() the Content-Type it is
served with.
"""
import os

IMAGE_EXTENSIONS = frozenset(['.jpg', '.jpeg', '.png', '.gif', '.webp'])
VIDEO_EXTENSIONS = frozenset(['.mp4', '.avi', '.mov', '.wmv'])
AUDIO_EXTENSIONS = frozenset(['.mp3', '.wav', '.ogg'])

CATEGORY_BY_EXTENSION = {
    **{ext: 'image' for ext in IMAGE_EXTENSIONS},
    **{ext: 'video' for ext in VIDEO_EXTENSIONS},
    **{ext: 'audio' for ext in AUDIO_EXTENSIONS},
}

MIME_TYPES = {
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
    '.gif': 'image/gif',
    '.webp': 'image/webp',
    '.mp4': 'video/mp4',
    '.avi': 'video/x-msvideo',
    '.mov': 'video/quicktime',
    '.wmv': 'video/x-ms-wmv',
    '.mp3': 'audio/mpeg',
    '.wav': 'audio/wav',
    '.ogg': 'audio/ogg',
    '.pdf': 'application/pdf',
    '.doc': 'application/msword',
    '.docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    '.ppt': 'application/vnd.ms-powerpoint',
    '.pptx': 'application/vnd.openxmlformats-officedocument.presentationml.presentation',
    '.xls': 'application/vnd.ms-excel',
    '.xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    '.txt': 'text/plain',
    '.zip': 'application/zip',
}

DEFAULT_MIME_TYPE = 'application/octet-stream'


def extension_of(filename):
    return os.path.splitext(filename or '')[1].lower()


def classify_upload(filename):
    """Return 'image', 'video', 'audio' or 'file' for an uploaded file name."""
    return CATEGORY_BY_EXTENSION.get(extension_of(filename), 'file')


def mime_type_for(filename):
    return MIME_TYPES.get(extension_of(filename), DEFAULT_MIME_TYPE)
