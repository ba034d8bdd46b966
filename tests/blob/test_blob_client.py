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

from ossblob import (
    AccountSasPermissions,
    InvalidResourceScope,
    MissingCredential,
    ResourceTypes,
    StorageSharedKeyCredential,
)
from ossblob._constants import DEV_ACCOUNT_KEY
from ossblob.blob import (
    BlobClient,
    BlobContainerClient,
    BlobSasBuilder,
    BlobSasPermissions,
    BlobServiceClient,
)
from tests.testcase import StorageTestCase

EXPIRY = '2024-01-02T00:00:00Z'


#------------------------------------------------------------------------------


class BlobClientTest(StorageTestCase):

    def setUp(self):
        super(BlobClientTest, self).setUp()
        self.account_name = self.settings.STORAGE_ACCOUNT_NAME
        self.account_key = self.settings.STORAGE_ACCOUNT_KEY
        self.service = BlobServiceClient.for_account(
            self.account_name, self.account_key, protocol=self.settings.PROTOCOL)
        self.container_name = self.get_resource_name('utcontainer')
        self.builder = BlobSasBuilder.new() \
            .set_permissions(BlobSasPermissions.READ) \
            .set_expires_on(EXPIRY)

    #--Test cases for clients --------------------------------------------------
    def test_service_url(self):
        self.assertEqual(self.service.url, 'https://storagename.blob.core.windows.net')
        self.assertEqual(self.service.account_name, self.account_name)
        self.assertEqual(self.service.primary_endpoint, 'storagename.blob.core.windows.net')
        self.assertTrue(self.service.can_generate_sas_uri)

    def test_clients_share_credential(self):
        container = self.service.get_container_client(self.container_name)
        blob = container.get_blob_client('some/file.txt')

        self.assertIs(container.credential, self.service.credential)
        self.assertIs(blob.credential, self.service.credential)
        self.assertEqual(container.container_name, self.container_name)
        self.assertEqual(blob.container_name, self.container_name)
        self.assertEqual(blob.blob_name, 'some/file.txt')

    def test_development_storage_urls(self):
        service = BlobServiceClient.for_development_storage()
        blob = service.get_container_client('testing').get_blob_client('some/file.txt')

        self.assertEqual(blob.url, 'http://127.0.0.1:10000/devstoreaccount1/testing/some/file.txt')
        self.assertEqual(blob.account_name, 'devstoreaccount1')
        self.assertEqual(blob.container_name, 'testing')
        self.assertEqual(blob.blob_name, 'some/file.txt')
        self.assertEqual(
            blob.credential, StorageSharedKeyCredential('devstoreaccount1', DEV_ACCOUNT_KEY))

    def test_anonymous_client_cannot_sign(self):
        blob = BlobClient('https://storagename.blob.core.windows.net/photos/cat.png')

        self.assertFalse(blob.can_generate_sas_uri)
        self.assertEqual(blob.account_name, 'storagename')
        with self.assertRaises(MissingCredential):
            blob.generate_sas_uri(self.builder)

    def test_url_must_name_the_resource(self):
        with self.assertRaises(InvalidResourceScope):
            BlobContainerClient('https://storagename.blob.core.windows.net')
        with self.assertRaises(InvalidResourceScope):
            BlobContainerClient('https://storagename.blob.core.windows.net/photos/cat.png')
        with self.assertRaises(InvalidResourceScope):
            BlobClient('https://storagename.blob.core.windows.net/photos')
        with self.assertRaises(ValueError):
            BlobClient('storagename/photos/cat.png')

    def test_blob_name_kept_verbatim(self):
        container = self.service.get_container_client(self.container_name)

        for blob_name in ('dir/', 'a//b', '/lead'):
            blob = container.get_blob_client(blob_name)

            self.assertEqual(blob.blob_name, blob_name)
            self.assertEqual(blob.url, container.url + '/' + blob_name)

    def test_blob_sas_signs_verbatim_name(self):
        # Arrange
        blob = self.service.get_container_client(self.container_name).get_blob_client('a//b/')

        # Act
        token = blob.generate_shared_access_signature(self.builder)

        # Assert
        string_to_sign = 'r\n\n{0}\n/blob/storagename/{1}/a//b/\n\n\n\n2023-11-03\nb\n\n\n\n\n\n\n'.format(
            EXPIRY, self.container_name)
        self.assertEqual(token.signature, self.compute_signature(self.account_key, string_to_sign))

    def test_clients_from_sas_uri(self):
        # Arrange
        builder = BlobSasBuilder.new().set_permissions('rl').set_expires_on(EXPIRY)
        container_uri = self.service.get_container_client(self.container_name).generate_sas_uri(builder)

        # Act
        container = BlobContainerClient(container_uri)
        blob = container.get_blob_client('a.txt')

        # Assert
        base, params = self.parse_sas_uri(container_uri)
        self.assertEqual(container.url, base)
        self.assertEqual(container.container_name, self.container_name)
        self.assertEqual(container.sas_token, container_uri.split('?', 1)[1])
        self.assertEqual(container.account_name, self.account_name)
        self.assertFalse(container.can_generate_sas_uri)
        self.assertEqual(blob.url, base + '/a.txt')
        self.assertEqual(blob.blob_name, 'a.txt')
        self.assertEqual(blob.sas_token, container.sas_token)
        self.assertEqual(self.parse_sas_uri(blob.url + '?' + blob.sas_token)[1], params)

    def test_directory_sas_uri_rejects_empty_segments(self):
        container = self.service.get_container_client(self.container_name)

        with self.assertRaises(InvalidResourceScope):
            container.generate_directory_sas_uri('logs//2024', self.builder)

    #--Test cases for sas urls --------------------------------------------------
    def test_container_sas_uri_verifies(self):
        # Arrange
        container = self.service.get_container_client(self.container_name)
        builder = BlobSasBuilder.new() \
            .set_permissions(BlobSasPermissions.LIST) \
            .set_expires_on(EXPIRY)

        # Act
        uri = container.generate_sas_uri(builder)

        # Assert
        base, params = self.parse_sas_uri(uri)
        self.assertEqual(base, container.url)
        self.assertEqual(params['sr'], 'c')
        self.assertEqual(params['sp'], 'l')
        self.assertEqual(params['se'], EXPIRY)
        string_to_sign = 'l\n\n{0}\n/blob/storagename/{1}\n\n\n\n2023-11-03\nc\n\n\n\n\n\n\n'.format(
            EXPIRY, self.container_name)
        self.assertEqual(params['sig'], self.compute_signature(self.account_key, string_to_sign))
        self.assertIsNone(builder.resource)

    def test_blob_sas_uri_uses_decoded_name(self):
        # Arrange
        blob = self.service.get_container_client(self.container_name).get_blob_client('my dir/ä.txt')

        # Act
        uri = blob.generate_sas_uri(self.builder)

        # Assert
        base, params = self.parse_sas_uri(uri)
        self.assertEqual(base, blob.url)
        self.assertIn('/my%20dir/%C3%A4.txt?', uri)
        string_to_sign = 'r\n\n{0}\n/blob/storagename/{1}/my dir/ä.txt\n\n\n\n2023-11-03\nb\n\n\n\n\n\n\n'.format(
            EXPIRY, self.container_name)
        self.assertEqual(params['sig'], self.compute_signature(self.account_key, string_to_sign))

    def test_snapshot_sas_uri(self):
        snapshot = '2024-01-01T00:00:00.0000000Z'
        blob = self.service.get_container_client(self.container_name) \
            .get_blob_client('cat.png', snapshot=snapshot)

        uri = blob.generate_sas_uri(self.builder)

        _, params = self.parse_sas_uri(uri)
        self.assertLess(uri.index('snapshot='), uri.index('sv='))
        self.assertEqual(params['snapshot'], snapshot)
        self.assertEqual(params['sr'], 'bs')

    def test_version_sas_uri(self):
        version_id = '2024-01-01T00:00:00.1234567Z'
        blob = self.service.get_container_client(self.container_name) \
            .get_blob_client('cat.png', version_id=version_id)

        token = blob.generate_shared_access_signature(self.builder)
        uri = blob.generate_sas_uri(self.builder)

        _, params = self.parse_sas_uri(uri)
        self.assertEqual(token['sr'], 'bv')
        self.assertEqual(params['versionid'], version_id)
        self.assertEqual(params['sig'], token.signature)

    def test_directory_sas_uri(self):
        container = self.service.get_container_client(self.container_name)
        builder = BlobSasBuilder.new().set_permissions('rl').set_expires_on(EXPIRY)

        uri = container.generate_directory_sas_uri('/logs/2024/', builder)

        base, params = self.parse_sas_uri(uri)
        self.assertEqual(base, container.url + '/logs/2024')
        self.assertEqual(params['sr'], 'd')
        self.assertEqual(params['sdd'], '2')

    def test_builder_resource_is_replaced(self):
        container = self.service.get_container_client(self.container_name)
        other = self.service.get_container_client('other')

        first = container.generate_shared_access_signature(self.builder)
        second = other.generate_shared_access_signature(self.builder)

        self.assertNotEqual(first.signature, second.signature)
        self.assertFalse(self.builder.is_built)

    def test_account_sas_for_blob_service(self):
        token = self.service.generate_account_shared_access_signature(
            ResourceTypes.CONTAINER, AccountSasPermissions.LIST, EXPIRY)

        self.assertEqual(token['ss'], 'b')
        self.assertEqual(token['srt'], 'c')
        self.assertEqual(token['sp'], 'l')


#------------------------------------------------------------------------------
if __name__ == '__main__':
    unittest.main()
