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
import copy

from .._error import (
    _ERROR_ACCOUNT_MISMATCH,
    _ERROR_EXPIRY_OR_IDENTIFIER_REQUIRED,
    _ERROR_INVALID_PERMISSION_TYPE,
    _ERROR_PERMISSION_OR_IDENTIFIER_REQUIRED,
    _ERROR_RESOURCE_NOT_SET,
    IncompleteConfiguration,
    InvalidPermission,
    InvalidResourceScope,
    _validate_credential,
)
from ..models import (
    AccessConstraints,
    IpRange,
)
from ..sharedaccesssignature import SharedAccessSignature
from .models import BlobSasPermissions


class BlobSasBuilder(object):

    '''
    Collects the settings of a blob service shared access signature and
    builds the signed :class:`~ossblob.sharedaccesssignature.SasToken`.

    Setters return the builder so calls can be chained::

        token = BlobSasBuilder.new() \\
            .set_resource(ResourceScope.container('photos')) \\
            .set_permissions('rl') \\
            .set_expires_on(datetime.utcnow() + timedelta(hours=1)) \\
            .build(credential)

    Once :func:`build` has been called the builder is frozen: a setter then
    returns a new, independent builder carrying the change and leaves this
    one (and every token it produced) untouched.
    '''

    def __init__(self):
        self.permissions = None
        self.resource = None
        self.starts_on = None
        self.expires_on = None
        self.ip_range = None
        self.protocol = None
        self.identifier = None
        self.encryption_scope = None
        self.cache_control = None
        self.content_disposition = None
        self.content_encoding = None
        self.content_language = None
        self.content_type = None
        self._built = False

    @classmethod
    def new(cls):
        return cls()

    @property
    def is_built(self):
        return self._built

    def _configure(self, **values):
        target = self
        if self._built:
            target = copy.copy(self)
            target._built = False
        for name, value in values.items():
            setattr(target, name, value)
        return target

    def set_permissions(self, permissions):
        '''
        :param permissions:
            A :class:`BlobSasPermissions`, a permission string such as 'rl',
            or an iterable of :class:`BlobPermission` flags.
        '''
        if permissions is None or isinstance(permissions, BlobSasPermissions):
            pass
        elif isinstance(permissions, str):
            permissions = BlobSasPermissions.from_string(permissions)
        else:
            try:
                permissions = BlobSasPermissions.from_flags(permissions)
            except TypeError:
                raise InvalidPermission(_ERROR_INVALID_PERMISSION_TYPE.format('BlobSasPermissions'))
        return self._configure(permissions=permissions)

    def set_resource(self, resource):
        '''
        :param ResourceScope resource: The resource the signature covers.
        '''
        return self._configure(resource=resource)

    def set_starts_on(self, starts_on):
        '''
        :param starts_on:
            The time at which the shared access signature becomes valid. If
            omitted, the service uses the time it receives the request.
        :type starts_on: datetime or str
        '''
        return self._configure(starts_on=starts_on)

    def set_expires_on(self, expires_on):
        '''
        :param expires_on:
            The time at which the shared access signature becomes invalid.
        :type expires_on: datetime or str
        '''
        return self._configure(expires_on=expires_on)

    def set_time_window(self, starts_on, expires_on):
        return self._configure(starts_on=starts_on, expires_on=expires_on)

    def set_ip_range(self, ip_range):
        '''
        :param ip_range: An :class:`IpRange` or its text form, 'start' or 'start-end'.
        '''
        if isinstance(ip_range, str):
            ip_range = IpRange.from_string(ip_range)
        return self._configure(ip_range=ip_range)

    def set_protocol(self, protocol):
        '''
        :param str protocol: :attr:`SasProtocol.HTTPS` or :attr:`SasProtocol.HTTPS_HTTP`.
        '''
        return self._configure(protocol=protocol)

    def set_identifier(self, identifier):
        '''
        :param str identifier:
            Name of a stored access policy on the container. Fields set on
            the policy must not be set again here.
        '''
        return self._configure(identifier=identifier)

    def set_encryption_scope(self, encryption_scope):
        return self._configure(encryption_scope=encryption_scope)

    def set_cache_control(self, cache_control):
        return self._configure(cache_control=cache_control)

    def set_content_disposition(self, content_disposition):
        return self._configure(content_disposition=content_disposition)

    def set_content_encoding(self, content_encoding):
        return self._configure(content_encoding=content_encoding)

    def set_content_language(self, content_language):
        return self._configure(content_language=content_language)

    def set_content_type(self, content_type):
        return self._configure(content_type=content_type)

    def access_constraints(self):
        return AccessConstraints(
            start=self.starts_on,
            expiry=self.expires_on,
            ip_range=self.ip_range,
            protocol=self.protocol,
        )

    def build(self, credential=None):
        '''
        Validates the configuration and signs it.

        :param credential:
            The :class:`~ossblob.auth.StorageSharedKeyCredential` to sign with.
        :rtype: ~ossblob.sharedaccesssignature.SasToken
        :raises MissingCredential: if credential is None.
        :raises IncompleteConfiguration:
            if the resource is not set, or the token would have neither an
            expiry nor a stored access policy, or neither permissions nor a
            stored access policy.
        :raises InvalidResourceScope: InvalidTimeWindow: InvalidIpRange:
            InvalidProtocol: InvalidPermission:
            when the corresponding setting fails validation.
        '''
        resource = self.resource
        _validate_credential(credential, resource if resource is not None else 'an unset resource')

        if resource is None:
            raise IncompleteConfiguration(_ERROR_RESOURCE_NOT_SET)
        resource.validate()
        if resource.account_name and resource.account_name != credential.account_name:
            raise InvalidResourceScope(
                _ERROR_ACCOUNT_MISMATCH.format(resource.account_name, credential.account_name))

        if not self.expires_on and not self.identifier:
            raise IncompleteConfiguration(_ERROR_EXPIRY_OR_IDENTIFIER_REQUIRED)
        if not self.permissions and not self.identifier:
            raise IncompleteConfiguration(_ERROR_PERMISSION_OR_IDENTIFIER_REQUIRED)

        constraints = self.access_constraints()
        constraints.validate()

        if self.permissions:
            self.permissions.validate_for(resource)

        sas = SharedAccessSignature(credential)
        token = sas.generate_blob(
            self.permissions,
            resource,
            constraints,
            id=self.identifier,
            encryption_scope=self.encryption_scope,
            cache_control=self.cache_control,
            content_disposition=self.content_disposition,
            content_encoding=self.content_encoding,
            content_language=self.content_language,
            content_type=self.content_type,
        )
        self._built = True
        return token

    def for_resource(self, resource):
        '''
        Returns a builder for resource with every other setting copied. This
        builder is left unchanged.
        '''
        target = copy.copy(self)
        target._built = False
        target.resource = resource
        return target
