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

from ._error import (
    _ERROR_INVALID_DATETIME,
    _ERROR_INCOMPLETE_IP_RANGE,
    _ERROR_INVALID_IP_ADDRESS,
    _ERROR_INVALID_PROTOCOL,
    _ERROR_IP_FAMILY_MISMATCH,
    _ERROR_IP_RANGE_REVERSED,
    _ERROR_START_NOT_BEFORE_EXPIRY,
    _ERROR_UNKNOWN_PERMISSION,
    InvalidIpRange,
    InvalidPermission,
    InvalidProtocol,
    InvalidTimeWindow,
)
from ._serialization import (
    _format_sas_time,
    _parse_sas_time,
)


class SasProtocol(object):
    '''
    Specifies the protocol permitted for a request made with a shared access
    signature. Note that HTTP only is not a permitted value.
    '''

    HTTPS = 'https'
    ''' Only requests made over HTTPS are accepted. '''

    HTTPS_HTTP = 'https,http'
    ''' Requests made over HTTPS or HTTP are accepted. '''

    _ALL = (HTTPS, HTTPS_HTTP)


class IpRange(object):
    '''
    An IP address or an inclusive range of IP addresses from which to accept
    requests. The text form is either 'start' or 'start-end', e.g.
    168.1.5.65 or 168.1.5.60-168.1.5.70. That same text is both signed and
    sent as the sip parameter.

    :param str start: The first (or only) address of the range.
    :param str end: The last address of the range, if any.
    '''

    def __init__(self, start, end=None):
        self.start = start
        self.end = end

    @classmethod
    def from_string(cls, text):
        '''
        Splits 'start' or 'start-end'. Nothing is checked until :func:`validate`,
        so a dangling '-' or an empty text still fails with
        :class:`~ossblob.InvalidIpRange` when the token is built.
        '''
        start, dash, end = text.partition('-')
        return cls(start.strip(), end.strip() if dash else None)

    def validate(self):
        if not self.start or (self.end is not None and not self.end):
            raise InvalidIpRange(_ERROR_INCOMPLETE_IP_RANGE.format(self))

        first = self._parse(self.start)
        if self.end is None:
            return

        last = self._parse(self.end)
        if first.version != last.version:
            raise InvalidIpRange(_ERROR_IP_FAMILY_MISMATCH.format(self))
        if last < first:
            raise InvalidIpRange(_ERROR_IP_RANGE_REVERSED.format(self))

    def _parse(self, address):
        try:
            return ipaddress.ip_address(address)
        except ValueError:
            raise InvalidIpRange(_ERROR_INVALID_IP_ADDRESS.format(address, self))

    def __str__(self):
        start = self.start or ''
        if self.end is None:
            return start
        return start + '-' + self.end

    def __repr__(self):
        return 'IpRange({0!r}, {1!r})'.format(self.start, self.end)

    def __eq__(self, other):
        if not isinstance(other, IpRange):
            return NotImplemented
        return (self.start, self.end) == (other.start, other.end)

    def __hash__(self):
        return hash((self.start, self.end))


class AccessConstraints(object):
    '''
    The time window and network restrictions of a shared access signature.

    :param start:
        The time at which the shared access signature becomes valid. If
        omitted, start time for this call is assumed to be the time when the
        storage service receives the request. Azure will always convert values
        to UTC. If a date is passed in without timezone info, it is assumed to
        be UTC.
    :type start: datetime or str
    :param expiry:
        The time at which the shared access signature becomes invalid.
        Required unless an id is given referencing a stored access policy
        which contains this field. If a date is passed in without timezone
        info, it is assumed to be UTC.
    :type expiry: datetime or str
    :param ip_range:
        Specifies an IP address or a range of IP addresses from which to accept requests.
    :type ip_range: :class:`~ossblob.models.IpRange` or str
    :param str protocol:
        One of the :class:`~ossblob.models.SasProtocol` values.
    '''

    def __init__(self, start=None, expiry=None, ip_range=None, protocol=None):
        if isinstance(ip_range, str):
            ip_range = IpRange.from_string(ip_range)

        self.start = start
        self.expiry = expiry
        self.ip_range = ip_range
        self.protocol = protocol

    @property
    def formatted_start(self):
        return _format_sas_time(self.start)

    @property
    def formatted_expiry(self):
        return _format_sas_time(self.expiry)

    @property
    def formatted_ip(self):
        return str(self.ip_range) if self.ip_range is not None else None

    def validate(self):
        start = self._comparable('start', self.formatted_start)
        expiry = self._comparable('expiry', self.formatted_expiry)
        if start is not None and expiry is not None and start >= expiry:
            raise InvalidTimeWindow(
                _ERROR_START_NOT_BEFORE_EXPIRY.format(self.formatted_start, self.formatted_expiry))

        if self.ip_range is not None:
            self.ip_range.validate()

        if self.protocol is not None and self.protocol not in SasProtocol._ALL:
            raise InvalidProtocol(_ERROR_INVALID_PROTOCOL.format(SasProtocol._ALL, self.protocol))

    @staticmethod
    def _comparable(name, text):
        # compare the formatted text, since that is what gets signed
        if text is None:
            return None
        try:
            return _parse_sas_time(text)
        except (TypeError, ValueError, OverflowError):
            raise InvalidTimeWindow(_ERROR_INVALID_DATETIME.format(name, text))


class ResourceTypes(object):

    '''
    Specifies the resource types that are accessible with the account SAS.

    :param bool service:
        Access to service-level APIs (e.g., Get/Set Service Properties,
        Get Service Stats, List Containers)
    :param bool container:
        Access to container-level APIs (e.g., Create/Delete Container,
        List Blobs)
    :param bool object:
        Access to object-level APIs for blobs (e.g. Put Blob, Get Blob)
    :param str _str:
        A string representing the resource types.
    '''
    def __init__(self, service=False, container=False, object=False, _str=None):
        if not _str:
            _str = ''
        self.service = service or ('s' in _str)
        self.container = container or ('c' in _str)
        self.object = object or ('o' in _str)

    def __or__(self, other):
        return ResourceTypes(_str=str(self) + str(other))

    def __add__(self, other):
        return ResourceTypes(_str=str(self) + str(other))

    def __eq__(self, other):
        return isinstance(other, ResourceTypes) and str(self) == str(other)

    def __hash__(self):
        return hash(str(self))

    def __str__(self):
        return (('s' if self.service else '') +
                ('c' if self.container else '') +
                ('o' if self.object else ''))

ResourceTypes.SERVICE = ResourceTypes(service=True)
ResourceTypes.CONTAINER = ResourceTypes(container=True)
ResourceTypes.OBJECT = ResourceTypes(object=True)


class Services(object):

    '''
    Specifies the services accessible with the account SAS.

    :param bool blob: Access to the blob service.
    :param bool queue: Access to the queue service.
    :param bool table: Access to the table service.
    :param bool file: Access to the file service.
    :param str _str:
        A string representing the services.
    '''
    def __init__(self, blob=False, queue=False, table=False, file=False, _str=None):
        if not _str:
            _str = ''
        self.blob = blob or ('b' in _str)
        self.queue = queue or ('q' in _str)
        self.table = table or ('t' in _str)
        self.file = file or ('f' in _str)

    def __or__(self, other):
        return Services(_str=str(self) + str(other))

    def __add__(self, other):
        return Services(_str=str(self) + str(other))

    def __eq__(self, other):
        return isinstance(other, Services) and str(self) == str(other)

    def __hash__(self):
        return hash(str(self))

    def __str__(self):
        return (('b' if self.blob else '') +
                ('q' if self.queue else '') +
                ('t' if self.table else '') +
                ('f' if self.file else ''))

Services.BLOB = Services(blob=True)
Services.QUEUE = Services(queue=True)
Services.TABLE = Services(table=True)
Services.FILE = Services(file=True)


class AccountSasPermissions(object):

    '''
    Permissions of an account shared access signature, used with
    :func:`~ossblob.cloudstorageaccount.CloudStorageAccount.generate_shared_access_signature`.

    :param bool read:
        Valid for all signed resources types (Service, Container, and Object).
    :param bool write:
        Valid for all signed resources types (Service, Container, and Object).
    :param bool delete:
        Valid for Container and Object resource types, except for queue messages.
    :param bool delete_previous_version:
        Delete a previous blob version.
    :param bool permanent_delete:
        Permanently delete a soft-deleted blob or version.
    :param bool list:
        Valid for Service and Container resource types only.
    :param bool add:
        Valid for queue messages, table entities and append blobs.
    :param bool create:
        Valid for blobs and files. Users can create new blobs or files, but
        may not overwrite existing blobs or files.
    :param bool update:
        Valid for queue messages and table entities.
    :param bool process:
        Valid for queue messages.
    :param bool tag:
        Read or write blob index tags.
    :param bool filter_by_tags:
        Find blobs by their index tags.
    :param bool set_immutability_policy:
        Set or delete an immutability policy or legal hold on a blob.
    :param str _str:
        A string representing the permissions.
    '''
    _ORDER = 'rwdxylacuptfi'

    def __init__(self, read=False, write=False, delete=False, delete_previous_version=False,
                 permanent_delete=False, list=False, add=False, create=False, update=False,
                 process=False, tag=False, filter_by_tags=False, set_immutability_policy=False,
                 _str=None):
        if not _str:
            _str = ''
        unknown = [c for c in _str if c not in self._ORDER]
        if unknown:
            raise InvalidPermission(_ERROR_UNKNOWN_PERMISSION.format(unknown[0], _str))

        self.read = read or ('r' in _str)
        self.write = write or ('w' in _str)
        self.delete = delete or ('d' in _str)
        self.delete_previous_version = delete_previous_version or ('x' in _str)
        self.permanent_delete = permanent_delete or ('y' in _str)
        self.list = list or ('l' in _str)
        self.add = add or ('a' in _str)
        self.create = create or ('c' in _str)
        self.update = update or ('u' in _str)
        self.process = process or ('p' in _str)
        self.tag = tag or ('t' in _str)
        self.filter_by_tags = filter_by_tags or ('f' in _str)
        self.set_immutability_policy = set_immutability_policy or ('i' in _str)

    def __or__(self, other):
        return AccountSasPermissions(_str=str(self) + str(other))

    def __add__(self, other):
        return AccountSasPermissions(_str=str(self) + str(other))

    def __eq__(self, other):
        return isinstance(other, AccountSasPermissions) and str(self) == str(other)

    def __hash__(self):
        return hash(str(self))

    def __str__(self):
        return (('r' if self.read else '') +
                ('w' if self.write else '') +
                ('d' if self.delete else '') +
                ('x' if self.delete_previous_version else '') +
                ('y' if self.permanent_delete else '') +
                ('l' if self.list else '') +
                ('a' if self.add else '') +
                ('c' if self.create else '') +
                ('u' if self.update else '') +
                ('p' if self.process else '') +
                ('t' if self.tag else '') +
                ('f' if self.filter_by_tags else '') +
                ('i' if self.set_immutability_policy else ''))

AccountSasPermissions.READ = AccountSasPermissions(read=True)
AccountSasPermissions.WRITE = AccountSasPermissions(write=True)
AccountSasPermissions.DELETE = AccountSasPermissions(delete=True)
AccountSasPermissions.LIST = AccountSasPermissions(list=True)
AccountSasPermissions.ADD = AccountSasPermissions(add=True)
AccountSasPermissions.CREATE = AccountSasPermissions(create=True)
AccountSasPermissions.UPDATE = AccountSasPermissions(update=True)
AccountSasPermissions.PROCESS = AccountSasPermissions(process=True)
AccountSasPermissions.TAG = AccountSasPermissions(tag=True)
AccountSasPermissions.FILTER_BY_TAGS = AccountSasPermissions(filter_by_tags=True)
AccountSasPermissions.DELETE_PREVIOUS_VERSION = AccountSasPermissions(delete_previous_version=True)
AccountSasPermissions.PERMANENT_DELETE = AccountSasPermissions(permanent_delete=True)
AccountSasPermissions.SET_IMMUTABILITY_POLICY = AccountSasPermissions(set_immutability_policy=True)
