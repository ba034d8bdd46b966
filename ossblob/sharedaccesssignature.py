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
import logging
from collections.abc import Mapping

from ._constants import X_MS_VERSION
from ._error import _validate_not_none
from ._serialization import (
    _append_query,
    _query_string,
)

logger = logging.getLogger(__name__)


class QueryStringConstants(object):
    SIGNED_SIGNATURE = 'sig'
    SIGNED_PERMISSION = 'sp'
    SIGNED_START = 'st'
    SIGNED_EXPIRY = 'se'
    SIGNED_RESOURCE = 'sr'
    SIGNED_IDENTIFIER = 'si'
    SIGNED_IP = 'sip'
    SIGNED_PROTOCOL = 'spr'
    SIGNED_VERSION = 'sv'
    SIGNED_ENCRYPTION_SCOPE = 'ses'
    SIGNED_DIRECTORY_DEPTH = 'sdd'
    SIGNED_CACHE_CONTROL = 'rscc'
    SIGNED_CONTENT_DISPOSITION = 'rscd'
    SIGNED_CONTENT_ENCODING = 'rsce'
    SIGNED_CONTENT_LANGUAGE = 'rscl'
    SIGNED_CONTENT_TYPE = 'rsct'
    SIGNED_SERVICES = 'ss'
    SIGNED_RESOURCE_TYPES = 'srt'


class SasToken(Mapping):

    '''
    A finished shared access signature: the ordered, read-only set of query
    parameters to append to a resource url. Values are kept unencoded, they
    are percent-encoded when the token is rendered.
    '''

    def __init__(self, params):
        self._params = tuple((name, value) for name, value in params if value is not None)
        self._lookup = dict(self._params)

    def __getitem__(self, name):
        return self._lookup[name]

    def __iter__(self):
        return iter([name for name, _ in self._params])

    def __len__(self):
        return len(self._params)

    @property
    def signature(self):
        return self._lookup.get(QueryStringConstants.SIGNED_SIGNATURE)

    def to_query_string(self):
        return _query_string(self._params)

    def append_to_uri(self, uri):
        '''
        Appends the token to uri as query parameters, keeping any query the
        uri already carries.
        '''
        _validate_not_none('uri', uri)
        return _append_query(uri, self.to_query_string())

    def __eq__(self, other):
        if not isinstance(other, SasToken):
            return NotImplemented
        return self._params == other._params

    def __hash__(self):
        return hash(self._params)

    def __str__(self):
        return self.to_query_string()

    def __repr__(self):
        # the signature is a bearer credential, keep it out of reprs
        return 'SasToken({0})'.format(
            ', '.join(name for name, _ in self._params))


class SharedAccessSignature(object):

    '''
    The main class used to do the signing and generating the signature.

    :ivar credential:
        The :class:`~ossblob.auth.StorageSharedKeyCredential` to sign with.
    :ivar str x_ms_version:
        The service version the signature is generated for.
    '''

    def __init__(self, credential, x_ms_version=X_MS_VERSION):
        _validate_not_none('credential', credential)
        self.credential = credential
        self.x_ms_version = x_ms_version

    def generate_blob(self, permission, scope, constraints, id=None, encryption_scope=None,
                      cache_control=None, content_disposition=None,
                      content_encoding=None, content_language=None,
                      content_type=None):
        '''
        Generates the token for a blob service resource. The inputs are
        expected to be validated already.

        :param BlobSasPermissions permission:
            The permissions associated with the shared access signature.
            None when they come from the stored access policy named by id.
        :param ResourceScope scope:
            The resource the signature is restricted to.
        :param AccessConstraints constraints:
            The time window, ip range and protocol restrictions.
        :param str id:
            A unique value up to 64 characters in length that correlates to a
            stored access policy.
        :param str encryption_scope:
            The encryption scope to use for requests made with this signature.
        :param str cache_control:
            Response header value for Cache-Control when resource is accessed
            using this shared access signature.
        :param str content_disposition:
            Response header value for Content-Disposition.
        :param str content_encoding:
            Response header value for Content-Encoding.
        :param str content_language:
            Response header value for Content-Language.
        :param str content_type:
            Response header value for Content-Type.
        :rtype: SasToken
        '''
        permission = _permission_text(permission)
        string_to_sign = self.build_canonical_string(
            permission, scope, constraints, id=id, encryption_scope=encryption_scope,
            cache_control=cache_control, content_disposition=content_disposition,
            content_encoding=content_encoding, content_language=content_language,
            content_type=content_type)

        directory_depth = scope.directory_depth
        params = [
            (QueryStringConstants.SIGNED_VERSION, self.x_ms_version),
            (QueryStringConstants.SIGNED_RESOURCE, scope.resource_type_code),
            (QueryStringConstants.SIGNED_PERMISSION, permission),
            (QueryStringConstants.SIGNED_START, constraints.formatted_start),
            (QueryStringConstants.SIGNED_EXPIRY, constraints.formatted_expiry),
            (QueryStringConstants.SIGNED_IDENTIFIER, id),
            (QueryStringConstants.SIGNED_IP, constraints.formatted_ip),
            (QueryStringConstants.SIGNED_PROTOCOL, constraints.protocol),
            (QueryStringConstants.SIGNED_ENCRYPTION_SCOPE, encryption_scope),
            (QueryStringConstants.SIGNED_DIRECTORY_DEPTH,
             str(directory_depth) if directory_depth is not None else None),
            (QueryStringConstants.SIGNED_CACHE_CONTROL, cache_control),
            (QueryStringConstants.SIGNED_CONTENT_DISPOSITION, content_disposition),
            (QueryStringConstants.SIGNED_CONTENT_ENCODING, content_encoding),
            (QueryStringConstants.SIGNED_CONTENT_LANGUAGE, content_language),
            (QueryStringConstants.SIGNED_CONTENT_TYPE, content_type),
            (QueryStringConstants.SIGNED_SIGNATURE, self.sign(string_to_sign)),
        ]

        logger.debug('Generated blob SAS for %s (sr=%s, sp=%s).',
                     scope.canonical_path(self.credential.account_name),
                     scope.resource_type_code, permission)
        return SasToken((name, value or None) for name, value in params)

    def generate_account(self, services, resource_types, permission, constraints,
                         encryption_scope=None):
        '''
        Generates the token for an account shared access signature.

        :param Services services:
            Specifies the services accessible with the account SAS.
        :param ResourceTypes resource_types:
            Specifies the resource types that are accessible with the account SAS.
        :param AccountSasPermissions permission:
            The permissions associated with the shared access signature.
        :param AccessConstraints constraints:
            The time window, ip range and protocol restrictions.
        :param str encryption_scope:
            The encryption scope to use for requests made with this signature.
        :rtype: SasToken
        '''
        permission = _permission_text(permission)
        string_to_sign = self.build_account_canonical_string(
            services, resource_types, permission, constraints, encryption_scope)

        params = [
            (QueryStringConstants.SIGNED_VERSION, self.x_ms_version),
            (QueryStringConstants.SIGNED_SERVICES, str(services)),
            (QueryStringConstants.SIGNED_RESOURCE_TYPES, str(resource_types)),
            (QueryStringConstants.SIGNED_PERMISSION, permission),
            (QueryStringConstants.SIGNED_START, constraints.formatted_start),
            (QueryStringConstants.SIGNED_EXPIRY, constraints.formatted_expiry),
            (QueryStringConstants.SIGNED_IP, constraints.formatted_ip),
            (QueryStringConstants.SIGNED_PROTOCOL, constraints.protocol),
            (QueryStringConstants.SIGNED_ENCRYPTION_SCOPE, encryption_scope),
            (QueryStringConstants.SIGNED_SIGNATURE, self.sign(string_to_sign)),
        ]

        logger.debug('Generated account SAS for %s (ss=%s, srt=%s, sp=%s).',
                     self.credential.account_name, services, resource_types, permission)
        return SasToken((name, value or None) for name, value in params)

    def build_canonical_string(self, permission, scope, constraints, id=None,
                               encryption_scope=None, cache_control=None,
                               content_disposition=None, content_encoding=None,
                               content_language=None, content_type=None):
        '''
        Builds the blob service string-to-sign. Every field keeps its line,
        an absent value leaves the line empty.
        '''

        def get_value_to_append(value):
            return_value = value or ''
            return return_value + '\n'

        canonicalized_resource = scope.canonical_path(self.credential.account_name)

        # Form the string to sign from shared_access_policy and canonicalized
        # resource. The order of values is important.
        string_to_sign = \
            (get_value_to_append(_permission_text(permission)) +
             get_value_to_append(constraints.formatted_start) +
             get_value_to_append(constraints.formatted_expiry) +
             get_value_to_append(canonicalized_resource) +
             get_value_to_append(id) +
             get_value_to_append(constraints.formatted_ip) +
             get_value_to_append(constraints.protocol) +
             get_value_to_append(self.x_ms_version) +
             get_value_to_append(scope.resource_type_code) +
             get_value_to_append(scope.snapshot_time) +
             get_value_to_append(encryption_scope) +
             get_value_to_append(cache_control) +
             get_value_to_append(content_disposition) +
             get_value_to_append(content_encoding) +
             get_value_to_append(content_language) +
             get_value_to_append(content_type))

        # strip the trailing newline
        return string_to_sign[:-1]

    def build_account_canonical_string(self, services, resource_types, permission,
                                       constraints, encryption_scope=None):
        '''Builds the account string-to-sign. It ends with a newline.'''

        def get_value_to_append(value):
            return_value = value or ''
            return return_value + '\n'

        return (get_value_to_append(self.credential.account_name) +
                get_value_to_append(_permission_text(permission)) +
                get_value_to_append(str(services)) +
                get_value_to_append(str(resource_types)) +
                get_value_to_append(constraints.formatted_start) +
                get_value_to_append(constraints.formatted_expiry) +
                get_value_to_append(constraints.formatted_ip) +
                get_value_to_append(constraints.protocol) +
                get_value_to_append(self.x_ms_version) +
                get_value_to_append(encryption_scope))

    def sign(self, string_to_sign):
        '''Returns the base64 HMAC-SHA256 of string_to_sign.'''
        return self.credential.sign_string(string_to_sign)


def _permission_text(permission):
    if permission is None:
        return None
    return str(permission) or None
