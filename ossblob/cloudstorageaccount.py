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

# Note that we import BlobServiceClient on demand because the blob package
# imports this module.

from ._constants import (
    DEFAULT_PROTOCOL,
    SERVICE_HOST_BASE,
)
from ._error import (
    _ERROR_EXPIRY_OR_IDENTIFIER_REQUIRED,
    _ERROR_VALUE_NONE_OR_EMPTY,
    IncompleteConfiguration,
    _validate_credential,
)
from .auth import StorageSharedKeyCredential
from .models import AccessConstraints
from .sharedaccesssignature import SharedAccessSignature


class CloudStorageAccount(object):

    """
    Provides a factory for creating the blob service client with a common
    account name and account key, and generates account shared access
    signatures. Users can either use the factory or can construct the
    client directly.

    :param str account_name: The storage account name.
    :param str account_key:
        The storage account key. Without it (or a credential) the account
        can only create url-only clients.
    :param credential:
        A :class:`~ossblob.auth.StorageSharedKeyCredential` to use instead of
        account_name and account_key.
    """

    def __init__(self, account_name=None, account_key=None, credential=None):
        if credential is None and account_key:
            credential = StorageSharedKeyCredential(account_name, account_key)
        self.account_name = credential.account_name if credential is not None else account_name
        self.credential = credential

    def create_blob_service_client(self, protocol=DEFAULT_PROTOCOL, endpoint_suffix=SERVICE_HOST_BASE):
        from .blob.blobclient import BlobServiceClient
        return BlobServiceClient.for_account(self.account_name, credential=self.credential,
                                             protocol=protocol, endpoint_suffix=endpoint_suffix)

    def generate_shared_access_signature(self, services, resource_types,
                                         permission, expiry, start=None,
                                         ip=None, protocol=None, encryption_scope=None):
        '''
        Generates a shared access signature for the account.
        Use the returned signature with the sas_token parameter of the service
        or to create a new account object.

        :param Services services:
            Specifies the services accessible with the account SAS. You can
            combine values to provide access to more than one service.
        :param ResourceTypes resource_types:
            Specifies the resource types that are accessible with the account
            SAS. You can combine values to provide access to more than one
            resource type.
        :param AccountSasPermissions permission:
            The permissions associated with the shared access signature. The
            user is restricted to operations allowed by the permissions.
            You can combine values to provide more than one permission.
        :param expiry:
            The time at which the shared access signature becomes invalid.
            Azure will always convert values to UTC. If a date is passed in
            without timezone info, it is assumed to be UTC.
        :type expiry: datetime or str
        :param start:
            The time at which the shared access signature becomes valid. If
            omitted, start time for this call is assumed to be the time when the
            storage service receives the request. Azure will always convert values
            to UTC. If a date is passed in without timezone info, it is assumed to
            be UTC.
        :type start: datetime or str
        :param ip:
            Specifies an IP address or a range of IP addresses from which to accept requests.
            If the IP address from which the request originates does not match the IP address
            or address range specified on the SAS token, the request is not authenticated.
            For example, specifying sip=168.1.5.65 or sip=168.1.5.60-168.1.5.70 on the SAS
            restricts the request to those IP addresses.
        :type ip: str or IpRange
        :param str protocol:
            Specifies the protocol permitted for a request made. Possible values are
            both HTTPS and HTTP (https,http) or HTTPS only (https). The default value
            is https,http. Note that HTTP only is not a permitted value.
        :param str encryption_scope:
            The encryption scope requests made with this signature use.
        :rtype: ~ossblob.sharedaccesssignature.SasToken
        '''
        _validate_credential(self.credential, 'account {0}'.format(self.account_name))
        if not expiry:
            raise IncompleteConfiguration(_ERROR_EXPIRY_OR_IDENTIFIER_REQUIRED)
        for name, value in (('services', services), ('resource_types', resource_types),
                            ('permission', permission)):
            if value is None or not str(value):
                raise IncompleteConfiguration(_ERROR_VALUE_NONE_OR_EMPTY.format(name))

        constraints = AccessConstraints(start=start, expiry=expiry, ip_range=ip, protocol=protocol)
        constraints.validate()

        sas = SharedAccessSignature(self.credential)
        return sas.generate_account(services, resource_types, permission, constraints,
                                    encryption_scope=encryption_scope)
