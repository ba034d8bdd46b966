#-------------------------------------------------------------------------
# Copyright (c) Microsoft.  All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#--------------------------------------------------------------------------
import ipaddress
from urllib.parse import (
    unquote as url_unquote,
    urlsplit,
)

from ._error import (
    _ERROR_INVALID_URL,
    _validate_not_empty,
)
from ._serialization import _append_query


class StorageClient(object):

    '''
    This is the base class for the clients. A client knows the url of one
    storage resource and, optionally, the shared key credential of its
    account. Clients never send requests themselves, they produce urls and
    shared access signatures for the resource.

    :ivar str url:
        The url of the resource, without its query string.
    :ivar str sas_token:
        The query string of the url the client was created from, normally a
        shared access signature, or None.
    :ivar credential:
        The :class:`~ossblob.auth.StorageSharedKeyCredential` of the account,
        or None for url-only (anonymous or pre-signed) access.
    :ivar str account_name:
        The storage account name, taken from the credential when there is
        one, else from the url.
    :ivar str primary_endpoint:
        The host (and port) requests are sent to.
    :ivar str protocol:
        The url scheme, http or https.
    '''

    def __init__(self, url, credential=None):
        _validate_not_empty('url', url)
        parsed = urlsplit(url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(_ERROR_INVALID_URL.format(url))

        self.url = '{0}://{1}{2}'.format(parsed.scheme, parsed.netloc, parsed.path)
        self.sas_token = parsed.query or None
        self.credential = credential
        self.protocol = parsed.scheme.lower()
        self.primary_endpoint = parsed.netloc

        # emulator and ip based endpoints carry the account as the first path segment
        path = url_unquote(parsed.path)[1:]
        self._path_style = _is_ip_or_localhost(parsed.hostname)
        url_account = None
        if self._path_style:
            url_account, _, path = path.partition('/')
        else:
            url_account = parsed.hostname.split('.')[0]
        self._resource_path = path

        self.account_name = credential.account_name if credential is not None else (url_account or None)

    @property
    def can_generate_sas_uri(self):
        '''True when a shared key is available to sign with.'''
        return self.credential is not None

    def _child_url(self, name):
        '''The url of a child resource, carrying this client's sas token if it has one.'''
        return _append_query(self.url.rstrip('/') + '/' + name, self.sas_token)


def _is_ip_or_localhost(hostname):
    if not hostname:
        return False
    if hostname == 'localhost':
        return True
    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return True
