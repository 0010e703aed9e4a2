"""Escaping primitives used to sanitize request parameters.

An escaper is any object exposing ``escape_url`` and ``escape_html``.
JavaScript escaping is optional; a sanitizer configured for the
``javascript`` mode checks for ``escape_javascript`` when it is built.
"""

import html
import re
from urllib.parse import quote_plus


class HTMLEscaper:
    """Built-in fallback escaper: URL and HTML only."""

    def escape_url(self, value):
        """Encode a string as a form component (spaces become ``+``)."""
        return quote_plus(value, safe='*')

    def escape_html(self, value):
        """Escape HTML entities, including both quote characters.

        Converts < > & " ' to their HTML entity equivalents so that
        user-supplied strings cannot inject markup or script tags.
        """
        return html.escape(value, quote=True)


class JavaScriptEscaper(HTMLEscaper):
    """Escaper that can also make strings safe inside JS string literals."""

    JS_ESCAPE_MAP = {
        '\\': '\\\\',
        '</': '<\\/',
        '\r\n': '\\n',
        '\n': '\\n',
        '\r': '\\n',
        '"': '\\"',
        "'": "\\'",
        '`': '\\`',
        '$': '\\$',
        '\u2028': '&#x2028;',
        '\u2029': '&#x2029;',
    }

    _JS_ESCAPE_RE = re.compile(r'(\\|</|\r\n|\u2028|\u2029|[\n\r"\'`$])')

    def escape_javascript(self, value):
        """Escape carriage returns, quotes and backslashes for JS strings."""
        return self._JS_ESCAPE_RE.sub(lambda m: self.JS_ESCAPE_MAP[m.group(0)], value)


# Names accepted by the ESCAPED_PARAMS_ESCAPER config key
ESCAPERS = {
    'html': HTMLEscaper,
    'javascript': JavaScriptEscaper,
}
