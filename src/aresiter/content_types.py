r"""Common values for the ``Content-Type`` request header."""

from __future__ import annotations

__all__ = [
    "APPLICATION_FORM_URL_ENCODED",
    "APPLICATION_GZIP",
    "APPLICATION_JAVASCRIPT",
    "APPLICATION_JSON",
    "APPLICATION_LZH",
    "APPLICATION_MSGPACK",
    "APPLICATION_OCTET_STREAM",
    "APPLICATION_PDF",
    "APPLICATION_TAR",
    "APPLICATION_XML",
    "APPLICATION_ZIP",
    "AUDIO_MP3",
    "AUDIO_WAV",
    "IMAGE_BMP",
    "IMAGE_GIF",
    "IMAGE_JPEG",
    "IMAGE_PNG",
    "IMAGE_SVG",
    "MULTIPART_FORM_DATA",
    "TEXT_CSS",
    "TEXT_CSV",
    "TEXT_HTML",
    "TEXT_JAVASCRIPT",
    "TEXT_PLAIN",
    "VIDEO_MP4",
    "VIDEO_MPEG",
]

APPLICATION_JSON = "application/json"
APPLICATION_XML = "application/xml"
APPLICATION_FORM_URL_ENCODED = "application/x-www-form-urlencoded"
MULTIPART_FORM_DATA = "multipart/form-data"
TEXT_PLAIN = "text/plain"
TEXT_CSV = "text/csv"
TEXT_HTML = "text/html"
TEXT_CSS = "text/css"
TEXT_JAVASCRIPT = "text/javascript"
APPLICATION_JAVASCRIPT = "application/javascript"
APPLICATION_OCTET_STREAM = "application/octet-stream"
APPLICATION_MSGPACK = "application/x-msgpack"
APPLICATION_PDF = "application/pdf"
APPLICATION_GZIP = "application/gzip"
APPLICATION_ZIP = "application/zip"
APPLICATION_LZH = "application/x-lzh"
APPLICATION_TAR = "application/x-tar"
IMAGE_BMP = "image/bmp"
IMAGE_GIF = "image/gif"
IMAGE_JPEG = "image/jpeg"
IMAGE_PNG = "image/png"
IMAGE_SVG = "image/svg+xml"
AUDIO_WAV = "audio/wav"
AUDIO_MP3 = "audio/mp3"
VIDEO_MPEG = "video/mpeg"
VIDEO_MP4 = "video/mp4"
