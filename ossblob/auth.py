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
from cryptography.hazmat.primitives import hashes, hmac

from ._common_conversion import (
    _decode_base64_to_bytes,
    _encode_base64,
)
from ._error import (
    _ERROR_INVALID_ACCOUNT_KEY,
    _validate_not_empty,
)


class StorageSharedKeyCredential(object):
    '''
    Holds the storage account name and the shared key used to sign requests
    and shared access signatures.

    The credential never changes after construction, so one instance may be
    shared by any number of clients and builders, across threads.

    :param str account_name:
        The storage account name.
    :param account_key:
        The storage account key. Text is treated as the base64 form shown in
        the portal and decoded; bytes are used as the raw key.
    :type account_key: str or bytes
    '''

    def __init__(self, account_name, account_key):
        _validate_not_empty('account_name', account_name)
        _validate_not_empty('account_key', account_key)

        if isinstance(account_key, (bytes, bytearray)):
            key = bytes(account_key)
        else:
            try:
                key = _decode_base64_to_bytes(account_key)
            except (TypeError, ValueError):
                raise ValueError(_ERROR_INVALID_ACCOUNT_KEY)
            _validate_not_empty('account_key', key)

        self._account_name = account_name
        self._key = key

    @property
    def account_name(self):
        return self._account_name

    def sign(self, message):
        '''
        Computes the HMAC-SHA256 of message with the account key.

        :param bytes message: The bytes to sign.
        :return: The raw 32 byte digest.
        :rtype: bytes
        '''
        h = hmac.HMAC(self._key, hashes.SHA256())
        h.update(message)
        return h.finalize()

    def sign_string(self, string_to_sign):
        '''Signs the UTF-8 encoding of string_to_sign and returns it base64 encoded.'''
        return _encode_base64(self.sign(string_to_sign.encode('utf-8')))

    def __eq__(self, other):
        if not isinstance(other, StorageSharedKeyCredential):
            return NotImplemented
        return self._account_name == other._account_name and self._key == other._key

    def __hash__(self):
        return hash((self._account_name, self._key))

    def __repr__(self):
        return '{0}(account_name={1!r})'.format(type(self).__name__, self._account_name)
