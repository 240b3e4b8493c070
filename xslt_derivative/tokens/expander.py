"""
Path Token Expander
===================

Renders destination path templates such as

    [date:custom:Y]-[date:custom:m]/[node:nid]_transformed.html

against a TransformContext. Tokens have the form ``[namespace:property]``;
tokens that cannot be resolved are replaced with an empty string.

Expansion is pure: the only clock it reads is the context's timestamp.
"""

import logging
import re
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from xslt_derivative.host.base import TokenService
from xslt_derivative.models import TransformContext

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r'\[([^\s\[\]:]+):([^\[\]]+)\]')

# Token property -> record attribute, per namespace
ENTITY_PROPERTIES: Dict[str, Dict[str, str]] = {
    'node': {'nid': 'nid', 'title': 'title', 'uuid': 'uuid', 'type': 'type'},
    'media': {'mid': 'mid', 'name': 'name', 'bundle': 'bundle'},
    'term': {'tid': 'tid', 'name': 'name', 'uri': 'uri', 'vid': 'vid'},
}

MONTHS = ['January', 'February', 'March', 'April', 'May', 'June', 'July',
          'August', 'September', 'October', 'November', 'December']
DAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']

# Single-character date format codes (Y-m-d style)
DATE_FORMAT_CHARS: Dict[str, Callable[[datetime], str]] = {
    'Y': lambda d: f"{d.year:04d}",
    'y': lambda d: f"{d.year % 100:02d}",
    'm': lambda d: f"{d.month:02d}",
    'n': lambda d: str(d.month),
    'd': lambda d: f"{d.day:02d}",
    'j': lambda d: str(d.day),
    'H': lambda d: f"{d.hour:02d}",
    'G': lambda d: str(d.hour),
    'i': lambda d: f"{d.minute:02d}",
    's': lambda d: f"{d.second:02d}",
    'M': lambda d: MONTHS[d.month - 1][:3],
    'F': lambda d: MONTHS[d.month - 1],
    'D': lambda d: DAYS[d.weekday()][:3],
    'l': lambda d: DAYS[d.weekday()],
    'U': lambda d: str(int(d.timestamp())),
}

DATE_PRESETS = {
    'short': 'm/d/Y - H:i',
    'medium': 'D, m/d/Y - H:i',
    'long': 'l, F j, Y - H:i',
    'timestamp': 'U',
}


def format_date(value: datetime, fmt: str) -> str:
    """
    Format a datetime with single-character format codes.

    A backslash makes the next character literal; characters without a
    meaning are copied through.

    Example:
        >>> format_date(datetime(2024, 3, 7), "Y-m")
        '2024-03'
    """
    out = []
    escaped = False
    for ch in fmt:
        if escaped:
            out.append(ch)
            escaped = False
        elif ch == '\\':
            escaped = True
        elif ch in DATE_FORMAT_CHARS:
            out.append(DATE_FORMAT_CHARS[ch](value))
        else:
            out.append(ch)
    return ''.join(out)


def find_tokens(template: str) -> List[Tuple[str, str]]:
    """Return (namespace, property) pairs in order of appearance."""
    return TOKEN_PATTERN.findall(template)


class PathTokenExpander(TokenService):
    """
    Token replacement for destination paths.

    Example:
        expander = PathTokenExpander()
        context = TransformContext(node=ContentItem(nid=42))
        expander.expand("[node:nid]_out.html", context)   # "42_out.html"
    """

    def expand(self, template: str, context: TransformContext) -> str:
        """Render ``template`` against a TransformContext."""
        return self.replace(template, context.as_token_data())

    def replace(self, template: str, data: Dict[str, Any]) -> str:
        def substitute(match: 're.Match') -> str:
            namespace, prop = match.group(1), match.group(2)
            value = self._resolve(namespace, prop, data)
            if value is None:
                logger.debug(f"Unresolved token {match.group(0)} replaced with empty string")
                return ''
            return value

        return TOKEN_PATTERN.sub(substitute, template)

    def _resolve(self, namespace: str, prop: str, data: Dict[str, Any]) -> Optional[str]:
        if namespace == 'date':
            return self._resolve_date(prop, data.get('date'))

        properties = ENTITY_PROPERTIES.get(namespace)
        record = data.get(namespace)
        if properties is None or record is None or prop not in properties:
            return None

        value = getattr(record, properties[prop], None)
        if value is None or value == '':
            return None
        return str(value)

    def _resolve_date(self, prop: str, value: Optional[datetime]) -> Optional[str]:
        if value is None:
            return None
        if prop.startswith('custom:'):
            return format_date(value, prop[len('custom:'):])
        preset = DATE_PRESETS.get(prop)
        if preset is None:
            return None
        return format_date(value, preset)
