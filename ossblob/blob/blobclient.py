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
from urllib.parse import quote as url_quote

from .._constants import (
    DEFAULT_PROTOCOL,
    DEV_ACCOUNT_KEY,
    DEV_ACCOUNT_NAME,
    DEV_BLOB_HOST,
    SERVICE_HOST_BASE,
)
from .._error import (
    _ERROR_SCOPE_REQUIRES_VALUE,
    InvalidResourceScope,
    _validate_credential,
    _validate_not_empty,
    _validate_not_none,
)
from .._serialization import (
    _append_query,
    _query_string,
)
from ..auth import StorageSharedKeyCredential
from ..cloudstorageaccount import CloudStorageAccount
from ..models import Services
from ..storageclient import StorageClient
from .models import (
    ResourceScope,
    ResourceType,
)


class _BlobResourceClient(StorageClient):
    '''Shared SAS plumbing of the container and blob clients.'''

    def _resource_scope(self):
        raise NotImplementedError()

    def _sas_url(self):
        return self.url

    def generate_shared_access_signature(self, builder):
        '''
        Signs builder for this client's resource with the client's credential.
        Any resource already set on builder is replaced; builder itself is
        not modified.

        :param BlobSasBuilder builder: The permissions and time window to grant.
        :rtype: ~ossblob.sharedaccesssignature.SasToken
        :raises MissingCredential: if the client has no shared key credential.
        '''
        _validate_not_none('builder', builder)
        _validate_credential(self.credential, self.url)
        return builder.for_resource(self._resource_scope()).build(self.credential)

    def generate_sas_uri(self, builder):
        '''
        Returns the url of this resource with a shared access signature for
        it appended, ready to hand to a client that holds no key.

        :param BlobSasBuilder builder: The permissions and time window to grant.
        :rtype: str
        '''
        token = self.generate_shared_access_signature(builder)
        return token.append_to_uri(self._sas_url())


class BlobServiceClient(StorageClient):

    '''
    Client for the blob service endpoint of a storage account.

    :param str account_url:
        The url of the blob service, e.g. https://myaccount.blob.core.windows.net,
        or http://127.0.0.1:10000/devstoreaccount1 for the emulator.
    :param credential:
        The :class:`~ossblob.auth.StorageSharedKeyCredential` of the account.
    '''

    @classmethod
    def for_account(cls, account_name, account_key=None, credential=None,
                    protocol=DEFAULT_PROTOCOL, endpoint_suffix=SERVICE_HOST_BASE):
        '''
        Creates the client from an account name.

        :param str account_name: The storage account name.
        :param str account_key: The storage account key.
        :param credential: A credential to use instead of account_key.
        :param str protocol: The protocol to use. Defaults to https.
        :param str endpoint_suffix:
            The host base component of the url, minus the account name. Defaults
            to Azure (core.windows.net). Override this to use the China cloud
            (core.chinacloudapi.cn).
        '''
        _validate_not_empty('account_name', account_name)
        if credential is None and account_key:
            credential = StorageSharedKeyCredential(account_name, account_key)
        url = '{}://{}.blob.{}'.format(protocol, account_name, endpoint_suffix)
        return cls(url, credential)

    @classmethod
    def for_development_storage(cls):
        '''Creates a client for the local storage emulator and its well-known account.'''
        credential = StorageSharedKeyCredential(DEV_ACCOUNT_NAME, DEV_ACCOUNT_KEY)
        return cls('http://{}/{}'.format(DEV_BLOB_HOST, DEV_ACCOUNT_NAME), credential)

    def get_container_client(self, container_name):
        '''
        :param str container_name: Name of the container.
        :rtype: BlobContainerClient
        '''
        _validate_not_empty('container_name', container_name)
        return BlobContainerClient(self._child_url(url_quote(container_name)), self.credential)

    def generate_account_shared_access_signature(self, resource_types, permission,
                                                 expiry, start=None, ip=None, protocol=None,
                                                 encryption_scope=None):
        '''
        Generates an account shared access signature restricted to the blob
        service. See
        :func:`~ossblob.cloudstorageaccount.CloudStorageAccount.generate_shared_access_signature`
        for the parameters.

        :rtype: ~ossblob.sharedaccesssignature.SasToken
        '''
        account = CloudStorageAccount(self.account_name, credential=self.credential)
        return account.generate_shared_access_signature(
            Services.BLOB, resource_types, permission, expiry, start=start,
            ip=ip, protocol=protocol, encryption_scope=encryption_scope)


class BlobContainerClient(_BlobResourceClient):

    '''
    Client for one container.

    :param str container_url:
        The url of the container, e.g. https://myaccount.blob.core.windows.net/photos.
    :param credential:
        The :class:`~ossblob.auth.StorageSharedKeyCredential` of the account.
    :ivar str container_name: The container name, decoded from the url.
    '''

    def __init__(self, container_url, credential=None):
        super(BlobContainerClient, self).__init__(container_url, credential)
        container_name = self._resource_path.rstrip('/')
        if not container_name or '/' in container_name:
            raise InvalidResourceScope(
                _ERROR_SCOPE_REQUIRES_VALUE.format(ResourceType.CONTAINER, 'container url'))
        self.url = self.url.rstrip('/')
        self.container_name = container_name

    def get_blob_client(self, blob_name, snapshot=None, version_id=None):
        '''
        :param str blob_name: Name of the blob, '/' separated paths allowed.
        :param str snapshot: The snapshot of the blob to address.
        :param str version_id: The version of the blob to address.
        :rtype: BlobClient
        '''
        _validate_not_empty('blob_name', blob_name)
        return BlobClient(self._child_url(url_quote(blob_name)), self.credential,
                          snapshot=snapshot, version_id=version_id)

    def _resource_scope(self):
        return ResourceScope.container(self.container_name)

    def generate_directory_sas_uri(self, directory_path, builder):
        '''
        Returns the url of a directory of a hierarchical namespace container
        with a directory scoped shared access signature appended. Leading and
        trailing '/' are dropped; an empty segment inside the path raises
        :class:`~ossblob.InvalidResourceScope`.
        '''
        _validate_not_empty('directory_path', directory_path)
        _validate_credential(self.credential, self.url)
        scope = ResourceScope.directory(self.container_name, directory_path.strip('/'))
        token = builder.for_resource(scope).build(self.credential)
        return token.append_to_uri(self._child_url(url_quote(directory_path.strip('/'))))


class BlobClient(_BlobResourceClient):

    '''
    Client for one blob, or one snapshot or version of it.

    :param str blob_url:
        The url of the blob, e.g. https://myaccount.blob.core.windows.net/photos/2024/cat.png.
    :param credential:
        The :class:`~ossblob.auth.StorageSharedKeyCredential` of the account.
    :param str snapshot: The snapshot of the blob to address.
    :param str version_id: The version of the blob to address.
    '''

    def __init__(self, blob_url, credential=None, snapshot=None, version_id=None):
        super(BlobClient, self).__init__(blob_url, credential)
        # the blob name is everything after the container, empty segments and trailing slash included
        container_name, _, blob_name = self._resource_path.partition('/')
        if not container_name or not blob_name:
            raise InvalidResourceScope(
                _ERROR_SCOPE_REQUIRES_VALUE.format(ResourceType.BLOB, 'blob url'))
        self.container_name = container_name
        self.blob_name = blob_name
        self.snapshot = snapshot
        self.version_id = version_id

    def _resource_scope(self):
        if self.version_id:
            return ResourceScope.blob_version(self.container_name, self.blob_name, self.version_id)
        if self.snapshot:
            return ResourceScope.blob_snapshot(self.container_name, self.blob_name, self.snapshot)
        return ResourceScope.blob(self.container_name, self.blob_name)

    def _sas_url(self):
        return _append_query(self.url, _query_string([
            ('snapshot', self.snapshot),
            ('versionid', self.version_id),
        ]))
