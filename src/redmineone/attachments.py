#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Attachment API.

Files are attached in two steps: the content is uploaded first, which
returns a token, and the token is then referenced from an issue (see
:meth:`redmineone.issues.IssueApi.attach`) or an attachment custom field.

Example::

    attachments = client.get_api("attachment")

    with open("crash.log", "rb") as fh:
        reply = attachments.upload(fh.read(), {"filename": "crash.log"})
    token = reply["upload"]["token"]

    content = attachments.download(17)
"""
from typing import Any, Mapping, Optional, Union

from redmineone.base import AbstractApi
from redmineone.response import Expect
from redmineone.serializer import build_path
from redmineone.validation import encode_path_component


class AttachmentApi(AbstractApi):
    """Uploading, downloading and deleting attachments."""

    def show(self, id: Union[int, str]) -> Any:
        """Get the metadata of an attachment."""
        return self._get(f"/attachments/{encode_path_component(id)}.json")

    def download(self, id: Union[int, str]) -> Union[bytes, bool]:
        """Get the content of an attachment.

        :param id: Attachment id
        :return: The raw content, ``False`` if the call failed or was empty
        """
        return self._get(
            f"/attachments/download/{encode_path_component(id)}", expect=Expect.RAW
        )

    def upload(
        self,
        attachment: Union[bytes, str],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Upload file content.

        :param attachment: The file content
        :param params: Optional parameters (``filename``)
        :return: The decoded reply, the token under ``upload.token``
        """
        return self._post(build_path("/uploads.json", params), attachment)

    def remove(self, id: Union[int, str]) -> Any:
        """Delete an attachment."""
        return self._delete(f"/attachments/{encode_path_component(id)}.xml")
