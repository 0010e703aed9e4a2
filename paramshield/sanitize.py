"""Request parameter sanitization to prevent XSS.

Escapes every string found in a request's query and body parameters so they
can be embedded in HTML, JavaScript or URLs without further treatment. The
escaped copies are only visible while the wrapped handler runs; the original
parameters are put back on the request afterwards.
"""

import enum
import io
import logging
import tempfile
from collections.abc import Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, FrozenSet, Optional

from markupsafe import Markup
from werkzeug.datastructures import CombinedMultiDict, FileStorage, ImmutableMultiDict, MultiDict

from paramshield.escapers import HTMLEscaper
from paramshield.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class EscapeMode(enum.Enum):
    URL = 'url'
    HTML = 'html'
    JAVASCRIPT = 'javascript'


# url-encoding first, then HTML entities, then JS string escaping
ESCAPE_ORDER = (EscapeMode.URL, EscapeMode.HTML, EscapeMode.JAVASCRIPT)

_ESCAPE_METHODS = {
    EscapeMode.URL: 'escape_url',
    EscapeMode.HTML: 'escape_html',
    EscapeMode.JAVASCRIPT: 'escape_javascript',
}


class ParamKind(enum.Enum):
    MAPPING = 'mapping'
    SEQUENCE = 'sequence'
    TEXT = 'text'
    BINARY = 'binary'
    ABSENT = 'absent'
    UNHANDLED = 'unhandled'


# NamedTemporaryFile returns a wrapper that is not an io.IOBase
_BINARY_TYPES = (
    FileStorage,
    io.IOBase,
    tempfile.SpooledTemporaryFile,
    tempfile._TemporaryFileWrapper,
)


def classify(value) -> ParamKind:
    """Return which kind of parameter node ``value`` is."""
    if value is None:
        return ParamKind.ABSENT
    if isinstance(value, str):
        return ParamKind.TEXT
    if isinstance(value, _BINARY_TYPES):
        return ParamKind.BINARY
    if isinstance(value, Mapping):
        return ParamKind.MAPPING
    if isinstance(value, (list, tuple)):
        return ParamKind.SEQUENCE
    return ParamKind.UNHANDLED


def normalize_modes(escape) -> FrozenSet[EscapeMode]:
    """Turn a single mode, a mode name, or an iterable of either into a set.

    A string may list several comma-separated names. Names are matched
    case-insensitively and unknown names enable nothing.
    """
    if escape is None:
        return frozenset()
    if isinstance(escape, EscapeMode):
        escape = [escape]
    elif isinstance(escape, str):
        escape = escape.split(",")

    modes = set()
    for mode in escape:
        if isinstance(mode, EscapeMode):
            modes.add(mode)
            continue
        try:
            modes.add(EscapeMode(str(mode).strip().lower()))
        except ValueError:
            logger.debug("Ignoring unknown escape mode %r", mode)
    return frozenset(modes)


@dataclass(frozen=True)
class SanitizerConfig:
    modes: FrozenSet[EscapeMode]
    escaper: Any
    mark_safe: bool = True
    logging: bool = True
    logger: Any = logger


def resolve_config(escape=EscapeMode.HTML, escaper=None, mark_safe=True,
                   logging=True, logger=logger) -> SanitizerConfig:
    """Validate sanitizer options and freeze them into a SanitizerConfig.

    Raises:
        ConfigurationError: JavaScript escaping was requested but the
            escaper has no ``escape_javascript``.
    """
    modes = normalize_modes(escape)
    if escaper is None:
        escaper = HTMLEscaper()

    if EscapeMode.JAVASCRIPT in modes and not callable(getattr(escaper, 'escape_javascript', None)):
        raise ConfigurationError(
            "%s cannot escape JavaScript; use an escaper that defines "
            "escape_javascript (e.g. paramshield.escapers.JavaScriptEscaper)"
            % type(escaper).__name__
        )

    return SanitizerConfig(
        modes=modes,
        escaper=escaper,
        mark_safe=mark_safe,
        logging=logging,
        logger=logger,
    )


class ParamSanitizer:
    """Escapes request parameters and swaps them onto the request.

    Options:
        escape: What escaping modes to use, an EscapeMode, a mode name or an
            iterable of those. Available: html (default), javascript, url.
        escaper: Object providing the escape functions. Defaults to the
            built-in HTMLEscaper, which cannot escape JavaScript.
        mark_safe: Wrap escaped strings in ``Markup`` so templates do not
            escape them twice.
        logging: Emit a warning for every value that had to be dropped.
        logger: Where those warnings go.
    """

    def __init__(self, **options):
        self.config = resolve_config(**options)
        self._steps = [
            getattr(self.config.escaper, _ESCAPE_METHODS[mode])
            for mode in ESCAPE_ORDER
            if mode in self.config.modes
        ]

    @property
    def modes(self):
        return self.config.modes

    def escape(self, node, context=None):
        """Return an escaped deep copy of a parameter structure.

        ``context`` is the request being handled; it is only used to label
        diagnostics.
        """
        kind = classify(node)
        if kind is ParamKind.MAPPING:
            return self._escape_mapping(node, context)
        if kind is ParamKind.SEQUENCE:
            escaped = [self.escape(item, context) for item in node]
            return tuple(escaped) if isinstance(node, tuple) else escaped
        if kind is ParamKind.TEXT:
            return self.escape_string(node)
        if kind is ParamKind.BINARY or kind is ParamKind.ABSENT:
            return node

        self.warn(context, "Unable to escape unhandled %r - dropping from params", node)
        return None

    def _escape_mapping(self, mapping, context):
        if isinstance(mapping, MultiDict):
            pairs = [
                (key, self.escape(value, context))
                for key, value in mapping.items(multi=True)
            ]
            # CombinedMultiDict is built from dicts, not pairs
            if isinstance(mapping, CombinedMultiDict):
                return ImmutableMultiDict(pairs)
            return mapping.__class__(pairs)
        return {key: self.escape(value, context) for key, value in mapping.items()}

    def escape_string(self, value):
        if not self._steps:
            return value
        # Markup overrides replace() and friends, so escape a plain copy
        value = str(value)
        for step in self._steps:
            value = step(value)
        if self.config.mark_safe:
            return Markup(value)
        return value

    def warn(self, context, message, *args):
        """Report a non-fatal problem with a request's parameters."""
        if not self.config.logging:
            return
        environ = getattr(context, 'environ', None) or {}
        self.config.logger.warning(
            message,
            *args,
            extra={
                'request_id': environ.get('request_id'),
                'event_type': 'escaped_params_drop',
            },
        )

    def capture_body(self, request) -> Optional[Mapping]:
        """Read the body parameters, or return None if they are unavailable.

        Reading the body can fail for many reasons (too large, malformed,
        client disconnected, stream already consumed). All of them mean the
        body is skipped for this request.
        """
        try:
            return request.form
        except Exception as e:
            logger.debug("Body parameters unavailable, skipping: %s", e)
            return None

    @contextmanager
    def substituted(self, request):
        """Install escaped parameters on ``request`` for the ``with`` body.

        The original query and body containers are reinstalled on exit,
        whether the body returns normally or raises.
        """
        query = request.args
        body = self.capture_body(request)
        try:
            _install(request, 'args', self.escape(query, request))
            if body is not None:
                _install(request, 'form', self.escape(body, request))
            yield request
        finally:
            _install(request, 'args', query)
            if body is not None:
                _install(request, 'form', body)

    def wrap(self, request, inner_call: Callable):
        """Call ``inner_call(request)`` with escaped parameters installed."""
        with self.substituted(request):
            return inner_call(request)


def _install(request, name, container):
    setattr(request, name, container)
    # request.values caches a combined view of args and form
    state = getattr(request, '__dict__', None)
    if state is not None:
        state.pop('values', None)
