"""HamnetDB REST / JSON upstream accessor.

``requests`` is re-exported so tests can patch
``hamnetdb.json_api.requests.get``.
"""

import requests as requests  # noqa: F401  # re-export for mock patching

from hamnetdb.json_api._records import parse_decimal  # noqa: F401
from hamnetdb.json_api.accessor import JsonHamnetDbAccessor  # noqa: F401
