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
from azure.common import AzureException

_ERROR_VALUE_NONE = '{0} should not be None.'
_ERROR_VALUE_NONE_OR_EMPTY = '{0} should not be None or empty.'
_ERROR_INVALID_ACCOUNT_KEY = 'account_key must be raw bytes or valid base64 text.'
_ERROR_MISSING_CREDENTIAL = \
    'A shared key credential is required to generate a shared access signature for {0}.'
_ERROR_UNKNOWN_PERMISSION = 'Unrecognized permission \'{0}\' in permission string \'{1}\'.'
_ERROR_UNSUPPORTED_PERMISSION = \
    'Permission \'{0}\' is not supported for signed resource type \'{1}\'.'
_ERROR_INVALID_PERMISSION_TYPE = 'permission must be a {0}, a permission string or an iterable of flags.'
_ERROR_RESOURCE_NOT_SET = 'The resource to sign must be set before the shared access signature is built.'
_ERROR_UNKNOWN_RESOURCE_TYPE = 'Unknown signed resource type \'{0}\'.'
_ERROR_SCOPE_REQUIRES_VALUE = 'Signed resource type \'{0}\' requires a non-empty {1}.'
_ERROR_SCOPE_FORBIDS_VALUE = 'Signed resource type \'{0}\' must not include a {1}.'
_ERROR_DIRECTORY_EMPTY_SEGMENT = \
    'Directory path \'{0}\' must not start or end with \'/\' or contain empty segments.'
_ERROR_ACCOUNT_MISMATCH = \
    'Resource belongs to account \'{0}\' but the credential signs for account \'{1}\'.'
_ERROR_EXPIRY_OR_IDENTIFIER_REQUIRED = \
    'Either an expiry time or a stored access policy identifier is required.'
_ERROR_PERMISSION_OR_IDENTIFIER_REQUIRED = \
    'Either permissions or a stored access policy identifier is required.'
_ERROR_START_NOT_BEFORE_EXPIRY = 'start ({0}) must be earlier than expiry ({1}).'
_ERROR_INVALID_DATETIME = 'Cannot interpret {0} value \'{1}\' as an ISO-8601 timestamp.'
_ERROR_INVALID_IP_ADDRESS = 'Invalid IP address \'{0}\' in ip range \'{1}\'.'
_ERROR_INCOMPLETE_IP_RANGE = 'ip range \'{0}\' must be \'start\' or \'start-end\' with both addresses present.'
_ERROR_IP_FAMILY_MISMATCH = 'Both ends of ip range \'{0}\' must belong to the same address family.'
_ERROR_IP_RANGE_REVERSED = 'End of ip range \'{0}\' is lower than its start.'
_ERROR_INVALID_PROTOCOL = 'protocol must be one of {0}, got \'{1}\'.'
_ERROR_INVALID_URL = 'Invalid url \'{0}\': a scheme and a host are required.'


class SasError(AzureException, ValueError):
    '''
    Base class of the errors raised while configuring or building a shared
    access signature. These are local validation failures and are never
    retried.
    '''


class InvalidPermission(SasError):
    '''A permission is unknown or not supported by the signed resource.'''


class InvalidResourceScope(SasError):
    '''The resource path does not match the signed resource type.'''


class InvalidTimeWindow(SasError):
    '''The start time is not earlier than the expiry time.'''


class InvalidIpRange(SasError):
    '''The ip range is malformed or its end is lower than its start.'''


class InvalidProtocol(SasError):
    '''The signed protocol is neither https nor https,http.'''


class MissingCredential(SasError):
    '''No shared key is available to sign with.'''


class IncompleteConfiguration(SasError):
    '''The token would be unusable, e.g. it has neither expiry nor policy.'''


def _validate_not_none(param_name, param):
    if param is None:
        raise ValueError(_ERROR_VALUE_NONE.format(param_name))


def _validate_not_empty(param_name, param):
    if not param:
        raise ValueError(_ERROR_VALUE_NONE_OR_EMPTY.format(param_name))


def _validate_credential(credential, resource_description):
    if credential is None:
        raise MissingCredential(_ERROR_MISSING_CREDENTIAL.format(resource_description))
