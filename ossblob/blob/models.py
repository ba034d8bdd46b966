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
from .._constants import _BLOB_SERVICE
from .._error import (
    _ERROR_DIRECTORY_EMPTY_SEGMENT,
    _ERROR_SCOPE_FORBIDS_VALUE,
    _ERROR_SCOPE_REQUIRES_VALUE,
    _ERROR_UNKNOWN_PERMISSION,
    _ERROR_UNKNOWN_RESOURCE_TYPE,
    _ERROR_UNSUPPORTED_PERMISSION,
    _ERROR_VALUE_NONE_OR_EMPTY,
    InvalidPermission,
    InvalidResourceScope,
)


class BlobPermission(object):
    '''
    The single-character flags a blob service shared access signature can
    grant. Use them with :func:`BlobSasPermissions.from_flags`.
    '''
    READ = 'r'
    ADD = 'a'
    CREATE = 'c'
    WRITE = 'w'
    DELETE = 'd'
    DELETE_VERSION = 'x'
    PERMANENT_DELETE = 'y'
    LIST = 'l'
    TAG = 't'
    FILTER = 'f'
    MOVE = 'm'
    EXECUTE = 'e'
    OWNERSHIP = 'o'
    PERMISSIONS = 'p'
    SET_IMMUTABILITY_POLICY = 'i'


# (flag, attribute) in the order the service expects them in sp
_PERMISSION_ATTRIBUTES = (
    (BlobPermission.READ, 'read'),
    (BlobPermission.ADD, 'add'),
    (BlobPermission.CREATE, 'create'),
    (BlobPermission.WRITE, 'write'),
    (BlobPermission.DELETE, 'delete'),
    (BlobPermission.DELETE_VERSION, 'delete_version'),
    (BlobPermission.PERMANENT_DELETE, 'permanent_delete'),
    (BlobPermission.LIST, 'list'),
    (BlobPermission.TAG, 'tag'),
    (BlobPermission.FILTER, 'filter'),
    (BlobPermission.MOVE, 'move'),
    (BlobPermission.EXECUTE, 'execute'),
    (BlobPermission.OWNERSHIP, 'ownership'),
    (BlobPermission.PERMISSIONS, 'permissions'),
    (BlobPermission.SET_IMMUTABILITY_POLICY, 'set_immutability_policy'),
)
_PERMISSION_ORDER = ''.join(flag for flag, _ in _PERMISSION_ATTRIBUTES)


class ResourceType(object):
    '''The signed resource (sr) codes of a blob service shared access signature.'''
    BLOB = 'b'
    BLOB_VERSION = 'bv'
    BLOB_SNAPSHOT = 'bs'
    CONTAINER = 'c'
    DIRECTORY = 'd'


# permissions each signed resource type cannot carry
_UNSUPPORTED_PERMISSIONS = {
    ResourceType.BLOB: frozenset([BlobPermission.LIST, BlobPermission.FILTER]),
    ResourceType.BLOB_VERSION: frozenset([BlobPermission.LIST, BlobPermission.FILTER]),
    ResourceType.BLOB_SNAPSHOT: frozenset([BlobPermission.LIST, BlobPermission.FILTER]),
    ResourceType.CONTAINER: frozenset(),
    ResourceType.DIRECTORY: frozenset([BlobPermission.FILTER]),
}


class BlobSasPermissions(object):

    '''
    BlobSasPermissions class to be used with
    :class:`~ossblob.blob.sharedaccesssignature.BlobSasBuilder`.

    Whatever the order permissions are granted in, they serialize in the one
    order the service expects: racwdxyltfmeopi.

    :param bool read:
        Read the content, properties, metadata and block list. Use the blob
        or container as the source of a copy operation.
    :param bool add:
        Add a block to an append blob.
    :param bool create:
        Write a new blob, snapshot a blob, or copy a blob to a new blob.
    :param bool write:
        Create or write content, properties, metadata, or block list.
    :param bool delete:
        Delete the blob.
    :param bool delete_version:
        Delete a blob version.
    :param bool permanent_delete:
        Permanently delete a blob snapshot or version.
    :param bool list:
        List blobs. Container scope only.
    :param bool tag:
        Read or write the tags on a blob.
    :param bool filter:
        Find blobs by their index tags. Container scope only.
    :param bool move:
        Move a blob or a directory and its contents to a new location.
    :param bool execute:
        Get the system properties and, on hierarchical namespace accounts,
        the access control list of a resource.
    :param bool ownership:
        Set the owner or owning group of a resource.
    :param bool permissions:
        Set the permissions of a resource.
    :param bool set_immutability_policy:
        Set or delete the immutability policy or legal hold on a blob.
    :param str _str:
        A string representing the permissions.
    '''

    def __init__(self, read=False, add=False, create=False, write=False, delete=False,
                 delete_version=False, permanent_delete=False, list=False, tag=False,
                 filter=False, move=False, execute=False, ownership=False, permissions=False,
                 set_immutability_policy=False, _str=None):
        if not _str:
            _str = ''
        for flag in _str:
            if flag not in _PERMISSION_ORDER:
                raise InvalidPermission(_ERROR_UNKNOWN_PERMISSION.format(flag, _str))

        self.read = read or ('r' in _str)
        self.add = add or ('a' in _str)
        self.create = create or ('c' in _str)
        self.write = write or ('w' in _str)
        self.delete = delete or ('d' in _str)
        self.delete_version = delete_version or ('x' in _str)
        self.permanent_delete = permanent_delete or ('y' in _str)
        self.list = list or ('l' in _str)
        self.tag = tag or ('t' in _str)
        self.filter = filter or ('f' in _str)
        self.move = move or ('m' in _str)
        self.execute = execute or ('e' in _str)
        self.ownership = ownership or ('o' in _str)
        self.permissions = permissions or ('p' in _str)
        self.set_immutability_policy = set_immutability_policy or ('i' in _str)

    @classmethod
    def from_string(cls, permission):
        '''
        Parses a compact permission string such as 'rwl'. Characters may come
        in any order and repeat.

        :raises InvalidPermission: on an unrecognized character.
        '''
        if permission is None:
            raise InvalidPermission(_ERROR_VALUE_NONE_OR_EMPTY.format('permission'))
        return cls(_str=permission)

    @classmethod
    def from_flags(cls, flags, scope=None):
        '''
        Creates the permission set from an iterable of :class:`BlobPermission`
        flags.

        :param flags: The flags to grant.
        :param scope:
            If given, a :class:`ResourceScope` or signed resource code the
            permissions must be valid for.
        :raises InvalidPermission:
            on an unknown flag, or a flag the scope does not support.
        '''
        flags = list(flags)
        for flag in flags:
            if not isinstance(flag, str) or len(flag) != 1 or flag not in _PERMISSION_ORDER:
                raise InvalidPermission(_ERROR_UNKNOWN_PERMISSION.format(flag, ''.join(map(str, flags))))

        permissions = cls(_str=''.join(flags))
        if scope is not None:
            permissions.validate_for(scope)
        return permissions

    @property
    def flags(self):
        return frozenset(flag for flag, attribute in _PERMISSION_ATTRIBUTES if getattr(self, attribute))

    def validate_for(self, scope):
        '''
        Checks every granted permission is supported by scope.

        :param scope: A :class:`ResourceScope` or a :class:`ResourceType` code.
        '''
        resource_type = getattr(scope, 'resource_type_code', scope)
        try:
            unsupported = _UNSUPPORTED_PERMISSIONS[resource_type]
        except KeyError:
            raise InvalidResourceScope(_ERROR_UNKNOWN_RESOURCE_TYPE.format(resource_type))

        for flag in self.to_string():
            if flag in unsupported:
                raise InvalidPermission(_ERROR_UNSUPPORTED_PERMISSION.format(flag, resource_type))

    def to_string(self):
        return ''.join(flag for flag, attribute in _PERMISSION_ATTRIBUTES if getattr(self, attribute))

    def __or__(self, other):
        return BlobSasPermissions(_str=str(self) + str(other))

    def __add__(self, other):
        return BlobSasPermissions(_str=str(self) + str(other))

    def __eq__(self, other):
        if not isinstance(other, BlobSasPermissions):
            return NotImplemented
        return self.to_string() == other.to_string()

    def __hash__(self):
        return hash(self.to_string())

    def __bool__(self):
        return bool(self.to_string())

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        return 'BlobSasPermissions(_str={0!r})'.format(self.to_string())


BlobSasPermissions.READ = BlobSasPermissions(read=True)
BlobSasPermissions.ADD = BlobSasPermissions(add=True)
BlobSasPermissions.CREATE = BlobSasPermissions(create=True)
BlobSasPermissions.WRITE = BlobSasPermissions(write=True)
BlobSasPermissions.DELETE = BlobSasPermissions(delete=True)
BlobSasPermissions.DELETE_VERSION = BlobSasPermissions(delete_version=True)
BlobSasPermissions.PERMANENT_DELETE = BlobSasPermissions(permanent_delete=True)
BlobSasPermissions.LIST = BlobSasPermissions(list=True)
BlobSasPermissions.TAG = BlobSasPermissions(tag=True)
BlobSasPermissions.FILTER = BlobSasPermissions(filter=True)
BlobSasPermissions.MOVE = BlobSasPermissions(move=True)
BlobSasPermissions.EXECUTE = BlobSasPermissions(execute=True)
BlobSasPermissions.OWNERSHIP = BlobSasPermissions(ownership=True)
BlobSasPermissions.PERMISSIONS = BlobSasPermissions(permissions=True)
BlobSasPermissions.SET_IMMUTABILITY_POLICY = BlobSasPermissions(set_immutability_policy=True)


class ResourceScope(object):

    '''
    The resource a blob service shared access signature is restricted to.
    Build one with the factory matching the signed resource type:
    :func:`blob`, :func:`blob_version`, :func:`blob_snapshot`,
    :func:`container` or :func:`directory`.

    :ivar str resource_type_code: The signed resource (sr) code.
    :ivar str container_name: Name of the container.
    :ivar str blob_name:
        Blob or directory path, verbatim. None for a container.
    :ivar str snapshot: Snapshot timestamp of a blob snapshot.
    :ivar str version_id: Version id of a blob version.
    :ivar str account_name:
        Storage account owning the resource. When None, the signing
        credential's account is used.
    '''

    def __init__(self, resource_type_code, container_name, blob_name=None,
                 snapshot=None, version_id=None, account_name=None):
        self.resource_type_code = resource_type_code
        self.container_name = container_name
        self.blob_name = blob_name
        self.snapshot = snapshot
        self.version_id = version_id
        self.account_name = account_name

    @classmethod
    def blob(cls, container_name, blob_name, account_name=None):
        return cls(ResourceType.BLOB, container_name, blob_name, account_name=account_name)

    @classmethod
    def blob_version(cls, container_name, blob_name, version_id, account_name=None):
        return cls(ResourceType.BLOB_VERSION, container_name, blob_name,
                   version_id=version_id, account_name=account_name)

    @classmethod
    def blob_snapshot(cls, container_name, blob_name, snapshot, account_name=None):
        return cls(ResourceType.BLOB_SNAPSHOT, container_name, blob_name,
                   snapshot=snapshot, account_name=account_name)

    @classmethod
    def container(cls, container_name, account_name=None):
        return cls(ResourceType.CONTAINER, container_name, account_name=account_name)

    @classmethod
    def directory(cls, container_name, directory_path, account_name=None):
        return cls(ResourceType.DIRECTORY, container_name, directory_path, account_name=account_name)

    @property
    def snapshot_time(self):
        '''The value signed in the signed snapshot time field.'''
        if self.resource_type_code == ResourceType.BLOB_VERSION:
            return self.version_id
        if self.resource_type_code == ResourceType.BLOB_SNAPSHOT:
            return self.snapshot
        return None

    @property
    def directory_depth(self):
        '''Number of path segments of a directory, sent as sdd.'''
        if self.resource_type_code != ResourceType.DIRECTORY or not self.blob_name:
            return None
        return len([segment for segment in self.blob_name.split('/') if segment])

    def validate(self):
        code = self.resource_type_code
        if code not in _UNSUPPORTED_PERMISSIONS:
            raise InvalidResourceScope(_ERROR_UNKNOWN_RESOURCE_TYPE.format(code))
        if not self.container_name:
            raise InvalidResourceScope(_ERROR_SCOPE_REQUIRES_VALUE.format(code, 'container name'))

        if code == ResourceType.CONTAINER:
            if self.blob_name:
                raise InvalidResourceScope(_ERROR_SCOPE_FORBIDS_VALUE.format(code, 'blob name'))
        elif code == ResourceType.DIRECTORY:
            if not self.directory_depth:
                raise InvalidResourceScope(_ERROR_SCOPE_REQUIRES_VALUE.format(code, 'directory path'))
            if '' in self.blob_name.split('/'):
                raise InvalidResourceScope(_ERROR_DIRECTORY_EMPTY_SEGMENT.format(self.blob_name))
        elif not self.blob_name:
            raise InvalidResourceScope(_ERROR_SCOPE_REQUIRES_VALUE.format(code, 'blob name'))

        if code == ResourceType.BLOB_VERSION:
            if not self.version_id:
                raise InvalidResourceScope(_ERROR_SCOPE_REQUIRES_VALUE.format(code, 'version id'))
        elif self.version_id:
            raise InvalidResourceScope(_ERROR_SCOPE_FORBIDS_VALUE.format(code, 'version id'))

        if code == ResourceType.BLOB_SNAPSHOT:
            if not self.snapshot:
                raise InvalidResourceScope(_ERROR_SCOPE_REQUIRES_VALUE.format(code, 'snapshot'))
        elif self.snapshot:
            raise InvalidResourceScope(_ERROR_SCOPE_FORBIDS_VALUE.format(code, 'snapshot'))

    def canonical_path(self, account_name=None):
        '''
        Returns the canonicalized resource, /blob/<account>/<container>[/<blob>].
        Names are used verbatim: percent-encoding only happens once the token
        is appended to a url.
        '''
        account_name = self.account_name or account_name
        if not account_name:
            raise InvalidResourceScope(_ERROR_SCOPE_REQUIRES_VALUE.format(self.resource_type_code, 'account name'))

        path = '/' + _BLOB_SERVICE + '/' + account_name + '/' + self.container_name
        if self.blob_name and self.resource_type_code != ResourceType.CONTAINER:
            path += '/' + self.blob_name
        return path

    def __eq__(self, other):
        if not isinstance(other, ResourceScope):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return 'ResourceScope(sr={0!r}, container={1!r}, blob={2!r})'.format(
            self.resource_type_code, self.container_name, self.blob_name)

    def _key(self):
        return (self.resource_type_code, self.container_name, self.blob_name,
                self.snapshot, self.version_id, self.account_name)
