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
import unittest
from datetime import datetime

from ossblob import (
    AccessConstraints,
    AccountSasPermissions,
    ResourceTypes,
    SasProtocol,
    SasToken,
    Services,
    SharedAccessSignature,
    StorageSharedKeyCredential,
    X_MS_VERSION,
)
from ossblob.blob import (
    BlobSasPermissions,
    ResourceScope,
)
from tests.testcase import StorageTestCase


#------------------------------------------------------------------------------


class SharedAccessSignatureTest(StorageTestCase):

    def setUp(self):
        super(SharedAccessSignatureTest, self).setUp()
        self.credential = StorageSharedKeyCredential(
            self.settings.STORAGE_ACCOUNT_NAME, self.settings.STORAGE_ACCOUNT_KEY)
        self.sas = SharedAccessSignature(self.credential)
        self.constraints = AccessConstraints(
            start=datetime(2024, 1, 1),
            expiry=datetime(2024, 1, 2),
            ip_range='168.1.5.60-168.1.5.70',
            protocol=SasProtocol.HTTPS,
        )

    #--Test cases --------------------------------------------------------
    def test_service_version(self):
        self.assertEqual(X_MS_VERSION, '2023-11-03')
        self.assertEqual(self.sas.x_ms_version, X_MS_VERSION)

    def test_container_canonical_string(self):
        # Act
        string_to_sign = self.sas.build_canonical_string(
            BlobSasPermissions(_str='rl'), ResourceScope.container('photos'), self.constraints)

        # Assert
        self.assertEqual(
            string_to_sign,
            'rl\n'
            '2024-01-01T00:00:00Z\n'
            '2024-01-02T00:00:00Z\n'
            '/blob/storagename/photos\n'
            '\n'
            '168.1.5.60-168.1.5.70\n'
            'https\n'
            '2023-11-03\n'
            'c\n'
            '\n\n\n\n\n\n')

    def test_blob_canonical_string_keeps_empty_fields(self):
        # Act
        string_to_sign = self.sas.build_canonical_string(
            BlobSasPermissions.READ,
            ResourceScope.blob('photos', '2024/cat picture.png'),
            AccessConstraints(expiry='2024-01-02T00:00:00Z'),
        )

        # Assert
        fields = string_to_sign.split('\n')
        self.assertEqual(len(fields), 16)
        self.assertEqual(fields, [
            'r', '', '2024-01-02T00:00:00Z', '/blob/storagename/photos/2024/cat picture.png',
            '', '', '', '2023-11-03', 'b', '', '', '', '', '', '', ''])

    def test_scope_specific_fields_in_canonical_string(self):
        # Act
        string_to_sign = self.sas.build_canonical_string(
            BlobSasPermissions.READ,
            ResourceScope.blob_snapshot('photos', 'cat.png', '2024-01-01T00:00:00.0000000Z'),
            AccessConstraints(expiry='2024-01-02T00:00:00Z'),
            id='policy1',
            encryption_scope='scope1',
            cache_control='no-cache',
            content_disposition='attachment',
            content_encoding='gzip',
            content_language='en-US',
            content_type='image/png',
        )

        # Assert
        self.assertEqual(string_to_sign.split('\n'), [
            'r', '', '2024-01-02T00:00:00Z', '/blob/storagename/photos/cat.png',
            'policy1', '', '', '2023-11-03', 'bs', '2024-01-01T00:00:00.0000000Z', 'scope1',
            'no-cache', 'attachment', 'gzip', 'en-US', 'image/png'])

    def test_version_id_signed_in_snapshot_field(self):
        string_to_sign = self.sas.build_canonical_string(
            BlobSasPermissions.DELETE_VERSION,
            ResourceScope.blob_version('photos', 'cat.png', '2024-01-01T00:00:00.1234567Z'),
            AccessConstraints(expiry='2024-01-02T00:00:00Z'),
        )

        fields = string_to_sign.split('\n')
        self.assertEqual(fields[8], 'bv')
        self.assertEqual(fields[9], '2024-01-01T00:00:00.1234567Z')

    def test_generate_blob_token(self):
        # Arrange
        scope = ResourceScope.container('photos')
        permission = BlobSasPermissions(_str='rl')

        # Act
        token = self.sas.generate_blob(permission, scope, self.constraints)

        # Assert
        string_to_sign = self.sas.build_canonical_string(permission, scope, self.constraints)
        self.assertSasTokenEqual(token, [
            ('sv', '2023-11-03'),
            ('sr', 'c'),
            ('sp', 'rl'),
            ('st', '2024-01-01T00:00:00Z'),
            ('se', '2024-01-02T00:00:00Z'),
            ('sip', '168.1.5.60-168.1.5.70'),
            ('spr', 'https'),
            ('sig', self.compute_signature(self.settings.STORAGE_ACCOUNT_KEY, string_to_sign)),
        ])

    def test_generate_blob_token_with_identifier_only(self):
        # Act
        token = self.sas.generate_blob(
            None, ResourceScope.container('photos'), AccessConstraints(), id='policy1')

        # Assert
        self.assertEqual(list(token), ['sv', 'sr', 'si', 'sig'])
        self.assertEqual(token['si'], 'policy1')

    def test_generate_directory_token_has_depth(self):
        token = self.sas.generate_blob(
            BlobSasPermissions.READ, ResourceScope.directory('data', 'a/b/c'),
            AccessConstraints(expiry='2024-01-02T00:00:00Z'))

        self.assertEqual(token['sr'], 'd')
        self.assertEqual(token['sdd'], '3')

    def test_account_canonical_string(self):
        # Act
        string_to_sign = self.sas.build_account_canonical_string(
            Services.BLOB, ResourceTypes.OBJECT, AccountSasPermissions.READ,
            AccessConstraints(expiry=datetime(2024, 1, 1)))

        # Assert
        self.assertEqual(
            string_to_sign,
            'storagename\nr\nb\no\n\n2024-01-01T00:00:00Z\n\n\n2023-11-03\n\n')

    def test_generate_account_token(self):
        # Arrange
        constraints = AccessConstraints(expiry=datetime(2024, 1, 1), protocol=SasProtocol.HTTPS_HTTP)

        # Act
        token = self.sas.generate_account(
            Services.BLOB, ResourceTypes.CONTAINER + ResourceTypes.OBJECT,
            AccountSasPermissions.LIST, constraints)

        # Assert
        string_to_sign = 'storagename\nl\nb\nco\n\n2024-01-01T00:00:00Z\n\nhttps,http\n2023-11-03\n\n'
        self.assertSasTokenEqual(token, [
            ('sv', '2023-11-03'),
            ('ss', 'b'),
            ('srt', 'co'),
            ('sp', 'l'),
            ('se', '2024-01-01T00:00:00Z'),
            ('spr', 'https,http'),
            ('sig', self.compute_signature(self.settings.STORAGE_ACCOUNT_KEY, string_to_sign)),
        ])
        self.assertIn('spr=https%2Chttp', str(token))


class SasTokenTest(StorageTestCase):

    def test_token_is_read_only_mapping(self):
        token = SasToken([('sv', '2023-11-03'), ('sr', 'c'), ('sig', 'a+b/c=')])

        self.assertEqual(len(token), 3)
        self.assertEqual(token['sr'], 'c')
        self.assertEqual(token.signature, 'a+b/c=')
        with self.assertRaises(TypeError):
            token['sr'] = 'b'

    def test_absent_values_dropped(self):
        token = SasToken([('sv', '2023-11-03'), ('st', None), ('sig', 'x')])

        self.assertEqual(list(token), ['sv', 'sig'])
        self.assertNotIn('st', token)

    def test_query_string_percent_encodes_values(self):
        token = SasToken([
            ('se', '2024-01-02T00:00:00Z'),
            ('spr', 'https,http'),
            ('sig', 'a+b/c='),
        ])

        self.assertEqual(token.to_query_string(), 'se=2024-01-02T00%3A00%3A00Z&spr=https%2Chttp&sig=a%2Bb/c%3D')
        self.assertEqual(str(token), token.to_query_string())

    def test_append_to_uri(self):
        token = SasToken([('sv', '2023-11-03'), ('sig', 'x')])

        self.assertEqual(
            token.append_to_uri('https://storagename.blob.core.windows.net/photos'),
            'https://storagename.blob.core.windows.net/photos?sv=2023-11-03&sig=x')
        self.assertEqual(
            token.append_to_uri('https://storagename.blob.core.windows.net/photos/cat.png?snapshot=1'),
            'https://storagename.blob.core.windows.net/photos/cat.png?snapshot=1&sv=2023-11-03&sig=x')

    def test_repr_hides_signature(self):
        token = SasToken([('sv', '2023-11-03'), ('sig', 'secretsignature')])

        self.assertNotIn('secretsignature', repr(token))


#------------------------------------------------------------------------------
if __name__ == '__main__':
    unittest.main()
