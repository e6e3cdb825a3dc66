"""
Payload encoder for action deployment.

Turns an action source into the ``exec`` section of an action document:

- ``str`` / :class:`InlineSource`: inline text, sent as ``code`` with
  ``binary: false``.
- ``bytes`` / :class:`Archive`: a pre-built zip bundle, sent base64-encoded
  with ``binary: true``. The encoder never opens or inspects the bundle.

Archive bundles built by :func:`build_archive` follow one manifest
contract: a ``package.json`` document at the archive root declaring the
entry file under ``main``.
"""

from __future__ import annotations

import base64
import io
import json
import logging
import zipfile
from typing import Any, Dict, Mapping, Optional, Union

from whisk_client.config import DEFAULT_KIND
from whisk_client.errors import InvalidPayload
from whisk_client.models import Archive, Encoding, InlineSource
from whisk_client.utils.validators import validate_action_code, validate_exec_kind

logger = logging.getLogger(__name__)

MANIFEST_NAME = 'package.json'
MANIFEST_ENTRY_KEY = 'main'

Source = Union[str, bytes, bytearray, InlineSource, Archive, None]


def to_encoding(
    source: Source,
    kind: Optional[str] = None,
    main: Optional[str] = None,
) -> Encoding:
    """
    Wrap a raw source into its encoding variant.

    Args:
        source: Source text, archive bytes, or an existing encoding.
        kind: Runtime kind; overrides the kind of an existing encoding.
        main: Entry function name; overrides the main of an existing encoding.

    Returns:
        InlineSource or Archive.

    Raises:
        InvalidPayload: If no source is given or its type is not supported.
    """
    if isinstance(source, InlineSource):
        return InlineSource(source.code, kind or source.kind, main or source.main)
    if isinstance(source, Archive):
        return Archive(source.data, kind or source.kind, main or source.main)
    if isinstance(source, (bytes, bytearray)):
        return Archive(bytes(source), kind, main)
    if isinstance(source, str):
        return InlineSource(source, kind, main)
    if source is None:
        raise InvalidPayload('Action source is required: inline code or archive bytes', field='exec')
    raise InvalidPayload(
        f'Unsupported action source type: {type(source).__name__}',
        field='exec',
    )


def encode(
    source: Source,
    kind: Optional[str] = None,
    main: Optional[str] = None,
    default_kind: str = DEFAULT_KIND,
) -> Dict[str, Any]:
    """
    Build the ``exec`` section for an action document.

    Args:
        source: Source text, archive bytes, or an encoding instance.
        kind: Runtime kind (e.g. 'python:3.12'); ``default_kind`` if omitted.
        main: Entry function name, sent only when given.
        default_kind: Kind used when neither ``kind`` nor the encoding has one.

    Returns:
        ``{"kind", "code", "binary"[, "main"]}`` dictionary.

    Raises:
        InvalidPayload: If the source is absent, empty, too large, or the
            kind is not supported.
    """
    encoding = to_encoding(source, kind, main)
    resolved_kind = encoding.kind or default_kind
    validate_exec_kind(resolved_kind)

    if isinstance(encoding, Archive):
        if not encoding.data:
            raise InvalidPayload('Archive cannot be empty', field='exec.code')
        code = base64.b64encode(encoding.data).decode('ascii')
        binary = True
    else:
        if not encoding.code or not encoding.code.strip():
            raise InvalidPayload('Action code cannot be empty', field='exec.code')
        code = encoding.code
        binary = False

    validate_action_code(code)

    exec_data: Dict[str, Any] = {
        'kind': resolved_kind,
        'code': code,
        'binary': binary,
    }
    if encoding.main:
        exec_data['main'] = encoding.main

    logger.debug(
        f"Encoded {'archive' if binary else 'inline'} source, "
        f"kind={resolved_kind}, size={len(code)}"
    )
    return exec_data


def decode_archive(code: str) -> bytes:
    """Decode a base64 ``exec.code`` value back into archive bytes."""
    try:
        return base64.b64decode(code, validate=True)
    except (ValueError, TypeError) as e:
        raise InvalidPayload(f'Archive code is not valid base64: {e}', field='exec.code') from e


def build_archive(
    files: Mapping[str, Union[str, bytes]],
    entry: str,
    manifest: Optional[Mapping[str, Any]] = None,
) -> bytes:
    """
    Bundle source files and a manifest into a zip archive.

    Args:
        files: Archive member names mapped to their contents.
        entry: Member name of the entry file; recorded in the manifest.
        manifest: Extra manifest fields merged under the entry declaration.

    Returns:
        Zip archive bytes, ready to pass as an action source.

    Raises:
        InvalidPayload: If ``files`` is empty, ``entry`` is not one of the
            files, or ``files`` already contains a manifest.
    """
    if not files:
        raise InvalidPayload('Archive requires at least one source file', field='files')
    if entry not in files:
        raise InvalidPayload(f'Entry file {entry} is not part of the archive', field='entry')
    if MANIFEST_NAME in files:
        raise InvalidPayload(
            f'{MANIFEST_NAME} is generated from the entry declaration; do not pass it in files',
            field='files',
        )

    manifest_doc = dict(manifest or {})
    manifest_doc[MANIFEST_ENTRY_KEY] = entry

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(MANIFEST_NAME, json.dumps(manifest_doc))
        for name, content in files.items():
            zf.writestr(name, content)

    logger.debug(f"Built archive with {len(files)} file(s), entry={entry}")
    return buffer.getvalue()


def read_manifest(archive: bytes) -> Dict[str, Any]:
    """
    Read the manifest of an archive built by :func:`build_archive`.

    Raises:
        InvalidPayload: If the archive is not a zip, has no manifest, or the
            manifest does not declare an entry file.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(archive)) as zf:
            manifest = json.loads(zf.read(MANIFEST_NAME))
    except zipfile.BadZipFile as e:
        raise InvalidPayload(f'Archive is not a valid zip file: {e}', field='exec.code') from e
    except KeyError as e:
        raise InvalidPayload(f'Archive has no {MANIFEST_NAME}', field='exec.code') from e
    except json.JSONDecodeError as e:
        raise InvalidPayload(f'{MANIFEST_NAME} is not valid JSON: {e}', field='exec.code') from e

    if not isinstance(manifest, dict) or not manifest.get(MANIFEST_ENTRY_KEY):
        raise InvalidPayload(
            f'{MANIFEST_NAME} must declare an entry file under "{MANIFEST_ENTRY_KEY}"',
            field='exec.code',
        )
    return manifest
