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
from datetime import date, datetime
from urllib.parse import quote as url_quote

from dateutil.parser import isoparse
from dateutil.tz import tzutc

from ._constants import _SAS_DATETIME_FORMAT


def _to_utc_datetime(value):
    # Azure expects the date value passed in to be UTC.
    # If a date is passed in without timezone info, it is assumed to be UTC.
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo:
        value = value.astimezone(tzutc())
    return value.strftime(_SAS_DATETIME_FORMAT)


def _format_sas_time(value):
    '''
    Returns the text that is both signed and sent for a st/se value. Strings
    are taken to be preformatted and are passed through untouched.
    '''
    if value is None:
        return None
    if isinstance(value, date):
        return _to_utc_datetime(value)
    return value


def _parse_sas_time(value):
    '''Converts a st/se value to an aware UTC datetime for comparisons.'''
    if isinstance(value, date):
        if not isinstance(value, datetime):
            value = datetime(value.year, value.month, value.day)
    else:
        value = isoparse(value)

    if value.tzinfo:
        return value.astimezone(tzutc())
    return value.replace(tzinfo=tzutc())


def _query_string(params):
    # values are percent-encoded here and nowhere else
    return '&'.join(['{0}={1}'.format(n, url_quote(v)) for n, v in params if v is not None])


def _append_query(url, query):
    if not query:
        return url
    if '?' in url:
        separator = '' if url.endswith(('?', '&')) else '&'
    else:
        separator = '?'
    return url + separator + query
